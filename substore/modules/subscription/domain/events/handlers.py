# 📄 File: substore/modules/subscription/domain/events/handlers.py
# 🧭 Purpose (Layman Explanation):
# Writes a log line whenever the subscription loads, changes or fails to save, so operators can
# follow what happened.
# 🧪 Purpose (Technical Summary):
# EventHandler implementations subscribed by the application at startup. The audit handler
# records every subscription event in the structured log.
# 🔗 Dependencies:
# substore.shared.core.event_bus, substore.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# substore.main (registered on the store's event bus during startup)

from substore.shared.core.event_bus import ALL_EVENTS, DomainEvent, EventHandler
from substore.shared.utils.logging import get_logger

from .subscription_events import (
    SUBSCRIPTION_CHANGED,
    SUBSCRIPTION_DEGRADED,
    SUBSCRIPTION_EVENT_TYPES,
    SUBSCRIPTION_STORAGE_ERROR,
)

logger = get_logger(__name__)


class SubscriptionAuditHandler(EventHandler):
    """
    Logs subscription events.

    Degraded loads and failed saves are logged as warnings, everything else at info.
    """

    @property
    def event_type(self) -> str:
        return ALL_EVENTS

    def can_handle(self, event: DomainEvent) -> bool:
        return event.event_type in SUBSCRIPTION_EVENT_TYPES

    async def handle(self, event: DomainEvent) -> None:
        if not self.can_handle(event):
            return

        fields = {
            "event_type": event.event_type,
            "event_id": event.event_id,
            "aggregate_id": event.aggregate_id,
        }

        if event.event_type in (SUBSCRIPTION_DEGRADED, SUBSCRIPTION_STORAGE_ERROR):
            error = event.payload.get("error") or {}
            logger.warning(
                f"Subscription event {event.event_type}: {error.get('message')}",
                operation=error.get("operation"),
                retry_count=error.get("retry_count"),
                **fields,
            )
        elif event.event_type == SUBSCRIPTION_CHANGED:
            logger.info(
                f"Subscription changed by {event.payload.get('operation')}",
                operation=event.payload.get("operation"),
                **fields,
            )
        else:
            logger.info(f"Subscription event {event.event_type}", **fields)
