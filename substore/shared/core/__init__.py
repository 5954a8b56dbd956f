"""
Core utilities package for the subscription store.
Provides the exception hierarchy, the retry engine and the event bus.
"""

from .exceptions import (
    SubstoreException,
    StorageError,
    StorageIOError,
    CorruptStateError,
    MigrationError,
    MissingMigrationError,
    StateValidationError,
    SubscriptionPersistenceError,
    NotFoundError,
    PlanNotFoundError,
    PaymentMethodNotFoundError,
    is_retryable,
    exception_to_dict,
)

from .retry import (
    RetryPolicy,
    run_with_backoff,
)

from .event_bus import (
    ALL_EVENTS,
    CallbackHandler,
    DomainEvent,
    EventBus,
    EventHandler,
    EventPriority,
)

__all__ = [
    # Exceptions
    "SubstoreException",
    "StorageError",
    "StorageIOError",
    "CorruptStateError",
    "MigrationError",
    "MissingMigrationError",
    "StateValidationError",
    "SubscriptionPersistenceError",
    "NotFoundError",
    "PlanNotFoundError",
    "PaymentMethodNotFoundError",
    "is_retryable",
    "exception_to_dict",

    # Retry
    "RetryPolicy",
    "run_with_backoff",

    # Event Bus
    "ALL_EVENTS",
    "CallbackHandler",
    "DomainEvent",
    "EventBus",
    "EventHandler",
    "EventPriority",
]
