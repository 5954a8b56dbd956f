"""
Event bus for the subscription store.
Lets collaborators observe store state changes without reaching into the store.
"""

import asyncio
import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union
from uuid import uuid4

from substore.shared.utils.logging import get_logger

logger = get_logger(__name__)

# Subscribing to this type receives every event
ALL_EVENTS = "*"


class EventPriority(Enum):
    """Event priority levels."""
    LOW = 1
    NORMAL = 2
    HIGH = 3
    CRITICAL = 4


@dataclass
class DomainEvent:
    """
    Base class for all domain events.
    Events represent something that happened in the domain.
    """
    event_type: str
    aggregate_id: str
    payload: Dict[str, Any] = field(default_factory=dict)
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    priority: EventPriority = EventPriority.NORMAL
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "payload": self.payload,
            "timestamp": self.timestamp.isoformat(),
            "priority": self.priority.value,
            "metadata": self.metadata,
        }

    def get_correlation_id(self) -> Optional[str]:
        """Get correlation ID for event tracing."""
        return self.metadata.get('correlation_id')

    def set_correlation_id(self, correlation_id: str):
        """Set correlation ID for event tracing."""
        self.metadata['correlation_id'] = correlation_id


class EventHandler(ABC):
    """
    Abstract base class for event handlers.
    Each handler processes specific types of domain events.
    """

    @property
    @abstractmethod
    def event_type(self) -> str:
        """Event type this handler processes."""
        pass

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """
        Handle the domain event.

        Args:
            event: Domain event to handle
        """
        pass

    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can process the event."""
        return self.event_type in (ALL_EVENTS, event.event_type)

    async def on_error(self, event: DomainEvent, error: Exception):
        """Handle errors during event processing."""
        logger.error(f"Error handling event {event.event_id}: {error}", exc_info=True)


EventCallback = Callable[[DomainEvent], Union[None, Awaitable[None]]]


class CallbackHandler(EventHandler):
    """Adapts a plain function or coroutine function to the handler interface."""

    def __init__(self, callback: EventCallback, event_type: str = ALL_EVENTS):
        self._callback = callback
        self._event_type = event_type

    @property
    def event_type(self) -> str:
        return self._event_type

    async def handle(self, event: DomainEvent) -> None:
        result = self._callback(event)
        if inspect.isawaitable(result):
            await result

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CallbackHandler):
            return self._callback == other._callback and self._event_type == other._event_type
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._callback, self._event_type))


@dataclass
class EventSubscription:
    """Event subscription configuration."""
    handler: EventHandler
    event_type: str
    priority: int = 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert subscription to dictionary."""
        return {
            "handler_name": self.handler.__class__.__name__,
            "event_type": self.event_type,
            "priority": self.priority,
        }


class EventBus:
    """
    Observer registry for domain events.

    ``publish`` runs every matching handler, highest priority first, before it
    returns. A failing handler is reported through its ``on_error`` hook and
    never interrupts the publisher or the remaining handlers.
    """

    def __init__(self):
        self.subscriptions: Dict[str, List[EventSubscription]] = {}
        self._lock = asyncio.Lock()
        self._stats = {
            "published": 0,
            "processed": 0,
            "failed": 0,
        }

    def subscribe(
        self,
        handler: Union[EventHandler, EventCallback],
        event_type: Optional[str] = None,
        priority: int = 1,
    ) -> EventHandler:
        """
        Subscribe handler to event type.

        Args:
            handler: Event handler instance, or a plain (async) callable
            event_type: Event type to subscribe to (uses handler.event_type if None)
            priority: Handler priority (higher = executed first)

        Returns:
            EventHandler: The registered handler, needed to unsubscribe a callable
        """
        if not isinstance(handler, EventHandler):
            handler = CallbackHandler(handler, event_type or ALL_EVENTS)

        if event_type is None:
            event_type = handler.event_type

        subscription = EventSubscription(
            handler=handler,
            event_type=event_type,
            priority=priority,
        )

        self.subscriptions.setdefault(event_type, []).append(subscription)
        self.subscriptions[event_type].sort(key=lambda s: s.priority, reverse=True)

        logger.debug(f"Handler {handler.__class__.__name__} subscribed to {event_type}")
        return handler

    def unsubscribe(self, handler: EventHandler, event_type: Optional[str] = None):
        """
        Unsubscribe handler from event type.

        Args:
            handler: Event handler instance returned by ``subscribe``
            event_type: Event type to unsubscribe from
        """
        if event_type is None:
            event_type = handler.event_type

        if event_type in self.subscriptions:
            self.subscriptions[event_type] = [
                s for s in self.subscriptions[event_type]
                if s.handler != handler
            ]

            if not self.subscriptions[event_type]:
                del self.subscriptions[event_type]

        logger.debug(f"Handler {handler.__class__.__name__} unsubscribed from {event_type}")

    def _matching_subscriptions(self, event: DomainEvent) -> List[EventSubscription]:
        matching = list(self.subscriptions.get(event.event_type, []))
        if event.event_type != ALL_EVENTS:
            matching.extend(self.subscriptions.get(ALL_EVENTS, []))
        matching.sort(key=lambda s: s.priority, reverse=True)
        return matching

    async def publish(self, event: DomainEvent, correlation_id: Optional[str] = None):
        """
        Publish event to every subscribed handler.

        Args:
            event: Domain event to publish
            correlation_id: Optional correlation ID for tracing
        """
        if correlation_id:
            event.set_correlation_id(correlation_id)

        async with self._lock:
            self._stats["published"] += 1
            subscriptions = self._matching_subscriptions(event)

        for subscription in subscriptions:
            handler = subscription.handler
            try:
                await handler.handle(event)
                self._stats["processed"] += 1
            except Exception as e:
                self._stats["failed"] += 1
                try:
                    await handler.on_error(event, e)
                except Exception as hook_error:
                    logger.error(
                        f"Error hook of {handler.__class__.__name__} failed for event {event.event_id}: {hook_error}",
                        exc_info=True,
                    )

    def get_stats(self) -> Dict[str, Any]:
        """Get event bus statistics."""
        return {
            **self._stats,
            "subscriptions": {
                event_type: [s.to_dict() for s in subs]
                for event_type, subs in self.subscriptions.items()
            },
        }
