# 📄 File: substore/modules/subscription/domain/events/subscription_events.py
# 🧭 Purpose (Layman Explanation):
# Names the things that can happen to the saved subscription - it finished loading, it fell back
# to defaults, it changed, or saving it failed - so screens and services can react.
# 🧪 Purpose (Technical Summary):
# Event type constants and factory functions building DomainEvent instances published by the
# subscription store on its EventBus.
# 🔗 Dependencies:
# substore.shared.core.event_bus
# 🔄 Connected Modules / Calls From:
# services/subscription_store.py (publisher), events/handlers.py, external observers

from typing import Any, Dict, Optional

from substore.shared.core.event_bus import DomainEvent, EventPriority

SUBSCRIPTION_LOADED = "subscription.loaded"
SUBSCRIPTION_DEGRADED = "subscription.degraded"
SUBSCRIPTION_CHANGED = "subscription.changed"
SUBSCRIPTION_STORAGE_ERROR = "subscription.storage_error"

SUBSCRIPTION_EVENT_TYPES = (
    SUBSCRIPTION_LOADED,
    SUBSCRIPTION_DEGRADED,
    SUBSCRIPTION_CHANGED,
    SUBSCRIPTION_STORAGE_ERROR,
)


def subscription_loaded(aggregate_id: str, subscription: Dict[str, Any], migrated_from: Optional[int] = None) -> DomainEvent:
    """
    Fired when load() finishes with a valid record in memory.

    Args:
        aggregate_id: Store identifier
        subscription: Loaded record in wire form
        migrated_from: Stored version the record was migrated from, if any
    """
    return DomainEvent(
        event_type=SUBSCRIPTION_LOADED,
        aggregate_id=aggregate_id,
        payload={"subscription": subscription, "migrated_from": migrated_from},
    )


def subscription_degraded(aggregate_id: str, error: Dict[str, Any]) -> DomainEvent:
    """Fired when load() gave up and the default record is in use."""
    return DomainEvent(
        event_type=SUBSCRIPTION_DEGRADED,
        aggregate_id=aggregate_id,
        payload={"error": error},
        priority=EventPriority.HIGH,
    )


def subscription_changed(aggregate_id: str, operation: str, subscription: Dict[str, Any]) -> DomainEvent:
    """
    Fired after a mutation was persisted.

    Args:
        aggregate_id: Store identifier
        operation: Mutation name, e.g. "subscribe_to_plan"
        subscription: New record in wire form
    """
    return DomainEvent(
        event_type=SUBSCRIPTION_CHANGED,
        aggregate_id=aggregate_id,
        payload={"operation": operation, "subscription": subscription},
    )


def subscription_storage_error(aggregate_id: str, error: Dict[str, Any]) -> DomainEvent:
    """Fired when a save exhausted its retries."""
    return DomainEvent(
        event_type=SUBSCRIPTION_STORAGE_ERROR,
        aggregate_id=aggregate_id,
        payload={"error": error},
        priority=EventPriority.CRITICAL,
    )
