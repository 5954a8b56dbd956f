# 📄 File: substore/modules/subscription/domain/services/subscription_store.py
# 🧭 Purpose (Layman Explanation):
# Keeps track of the user's subscription: loads it when the app starts (upgrading old saved
# formats), saves every change, tries again when storage hiccups, and tells listeners when
# something changed.
# 🧪 Purpose (Technical Summary):
# Domain service owning the in-memory SubscriptionRecord. Implements the Idle -> Loading ->
# Ready | Degraded load cycle with schema migration and legacy-key cleanup, validated saves with
# bounded linear-backoff retries, the subscription mutations, and change notification over the
# EventBus. Storage, clock, sleep and id generation are injected.
# 🔗 Dependencies:
# - substore.shared.core (exceptions, retry, event_bus)
# - domain models, validation, migrations, events, state repository
# - infrastructure.persistence (keyspace and key/value state repository)
# 🔄 Connected Modules / Calls From:
# - substore.main (created at startup)
# - presentation/api/v1/subscription.py (mutations and snapshot)

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

from substore.modules.subscription.domain.events.subscription_events import (
    subscription_changed,
    subscription_degraded,
    subscription_loaded,
    subscription_storage_error,
)
from substore.modules.subscription.domain.migrations import (
    CURRENT_VERSION,
    MIGRATIONS,
    Migration,
    migrate_state,
    read_envelope,
)
from substore.modules.subscription.domain.models.subscription import (
    BillingCycle,
    PaymentMethod,
    PaymentMethodType,
    Plan,
    SubscriptionRecord,
    SubscriptionStatus,
    Transaction,
    TransactionStatus,
)
from substore.modules.subscription.domain.repositories.subscription_state_repository import (
    SubscriptionStateRepository,
)
from substore.modules.subscription.domain.validation import validate_subscription_record
from substore.modules.subscription.infrastructure.persistence.keyspace import (
    DEFAULT_KEY_PREFIX,
    StorageKeyspace,
)
from substore.modules.subscription.infrastructure.persistence.state_repository import (
    KeyValueStateRepository,
)
from substore.shared.config.settings import Settings, get_settings
from substore.shared.core.event_bus import EventBus, EventHandler
from substore.shared.core.exceptions import (
    PaymentMethodNotFoundError,
    StateValidationError,
    StorageIOError,
    SubscriptionPersistenceError,
    SubstoreException,
)
from substore.shared.core.retry import RetryPolicy, SleepFunc, run_with_backoff
from substore.shared.infrastructure.storage.key_value import KeyValueStore
from substore.shared.utils.formatters import format_iso_timestamp
from substore.shared.utils.helpers import generate_id, utc_now
from substore.shared.utils.logging import get_logger

logger = get_logger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


class LoadState(str, Enum):
    """Load phase of the store"""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class StorageFailure:
    """Most recent failed storage attempt."""
    message: str
    operation: str
    retry_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "operation": self.operation,
            "retry_count": self.retry_count,
        }


def _error_message(error: BaseException) -> str:
    if isinstance(error, SubstoreException):
        return error.message
    return str(error) or error.__class__.__name__


class SubscriptionStore:
    """
    Persisted, versioned subscription record with retrying I/O.

    Build with ``await SubscriptionStore.create(storage)`` to get a loaded store,
    or construct directly and call ``load()``. Mutations validate and persist
    the new record before updating memory; a save that exhausts its retries
    raises SubscriptionPersistenceError and leaves memory unchanged.

    Args:
        storage: Key/value byte store holding the envelopes
        keyspace: Versioned key naming; defaults to the standard prefix at CURRENT_VERSION
        migrations: Migration registry; defaults to MIGRATIONS
        retry_policy: Retry budget and backoff unit
        clock: Returns the current aware UTC datetime
        sleep: Awaitable delay used between retries
        event_bus: Bus receiving subscription events
        id_factory: Produces ids for payment methods and transactions
        aggregate_id: Identifier attached to published events
        repository: Envelope repository; built from storage and keyspace when omitted
    """

    def __init__(
        self,
        storage: Optional[KeyValueStore] = None,
        *,
        keyspace: Optional[StorageKeyspace] = None,
        migrations: Optional[Mapping[int, Migration]] = None,
        retry_policy: Optional[RetryPolicy] = None,
        clock: Clock = utc_now,
        sleep: SleepFunc = asyncio.sleep,
        event_bus: Optional[EventBus] = None,
        id_factory: IdFactory = generate_id,
        aggregate_id: str = "subscription",
        repository: Optional[SubscriptionStateRepository] = None,
    ):
        if repository is None:
            if storage is None:
                raise ValueError("Either storage or repository is required")
            keyspace = keyspace or StorageKeyspace(DEFAULT_KEY_PREFIX, CURRENT_VERSION)
            repository = KeyValueStateRepository(storage, keyspace)

        self._repository = repository
        self._migrations = MIGRATIONS if migrations is None else migrations
        self.retry_policy = retry_policy or RetryPolicy()
        self._clock = clock
        self._sleep = sleep
        self.events = event_bus or EventBus()
        self._id_factory = id_factory
        self.aggregate_id = aggregate_id

        self._subscription = SubscriptionRecord.default()
        self._state = LoadState.IDLE
        self._last_error: Optional[StorageFailure] = None

    @classmethod
    def from_settings(
        cls,
        storage: KeyValueStore,
        settings: Optional[Settings] = None,
        **kwargs: Any,
    ) -> "SubscriptionStore":
        """
        Build an unloaded store using the key prefix and retry settings.

        Args:
            storage: Key/value byte store
            settings: Settings to read, defaults to the cached application settings
            **kwargs: Extra constructor arguments (clock, sleep, event_bus, ...)
        """
        settings = settings or get_settings()
        kwargs.setdefault("keyspace", StorageKeyspace(settings.STORAGE_KEY_PREFIX, CURRENT_VERSION))
        kwargs.setdefault(
            "retry_policy",
            RetryPolicy(
                max_retries=settings.SUBSCRIPTION_MAX_RETRIES,
                base_delay=settings.SUBSCRIPTION_RETRY_DELAY,
            ),
        )
        return cls(storage, **kwargs)

    @classmethod
    async def create(cls, storage: Optional[KeyValueStore] = None, **kwargs: Any) -> "SubscriptionStore":
        """Construct a store and run ``load()`` once."""
        store = cls(storage, **kwargs)
        await store.load()
        return store

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    @property
    def subscription(self) -> SubscriptionRecord:
        """Copy of the current in-memory record"""
        return self._subscription.model_copy(deep=True)

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state in (LoadState.IDLE, LoadState.LOADING)

    @property
    def error(self) -> Optional[str]:
        return self._last_error.message if self._last_error else None

    @property
    def last_error(self) -> Optional[StorageFailure]:
        return self._last_error

    @property
    def current_version(self) -> int:
        return self._repository.current_version

    def subscribe(self, handler: Union[EventHandler, Callable], event_type: Optional[str] = None) -> EventHandler:
        """Register an observer for store events; see EventBus.subscribe"""
        return self.events.subscribe(handler, event_type)

    # =========================================================================
    # LOAD
    # =========================================================================

    async def load(self) -> SubscriptionRecord:
        """
        Read, migrate and validate the stored record.

        Retryable storage failures are retried with linear backoff. When every
        attempt fails, or a permanent failure occurs, the store falls back to
        the default record and enters the degraded state; the error stays
        readable through ``error`` and ``last_error``.

        Returns:
            SubscriptionRecord: The record now in memory
        """
        self._state = LoadState.LOADING

        try:
            record, migrated_from = await run_with_backoff(
                self._load_attempt,
                self.retry_policy,
                self._sleep,
                operation="load",
                on_failure=self._on_load_failure,
            )
        except Exception as e:
            if not isinstance(e, SubstoreException):
                logger.error(f"Unexpected error loading subscription state: {e}", exc_info=True)

            logger.warning(
                "Loading subscription state failed, using default state",
                error=_error_message(e),
                error_type=e.__class__.__name__,
            )
            self._subscription = SubscriptionRecord.default()
            self._state = LoadState.DEGRADED
            failure = self._last_error or StorageFailure(_error_message(e), "load", 0)
            await self.events.publish(subscription_degraded(self.aggregate_id, failure.to_dict()))
            return self.subscription

        self._subscription = record
        self._last_error = None
        self._state = LoadState.READY
        logger.info(
            "Subscription state loaded",
            status=record.status,
            migrated_from=migrated_from,
        )
        await self.events.publish(
            subscription_loaded(self.aggregate_id, record.to_storage_dict(), migrated_from)
        )
        return self.subscription

    async def _load_attempt(self, retry_count: int) -> Tuple[SubscriptionRecord, Optional[int]]:
        stored = await self._storage_call("get", self._repository.read_latest)
        if stored is None:
            return SubscriptionRecord.default(), None

        version, data = read_envelope(stored.raw)
        target = self.current_version

        if version == target and stored.key_version == target:
            return validate_subscription_record(data), None

        migrated = migrate_state(stored.raw, target, self._migrations)
        record = validate_subscription_record(migrated)

        await self._storage_call("set", self._repository.write_current, self._envelope(record))
        await self._storage_call("delete", self._repository.delete_legacy)
        logger.info(
            f"Migrated subscription state from version {version} to {target}",
            from_version=version,
            to_version=target,
            key=stored.key,
        )
        return record, version

    def _on_load_failure(self, error: BaseException, retry_count: int) -> None:
        self._last_error = StorageFailure(_error_message(error), "load", retry_count)
        logger.warning(
            f"Failed to load subscription state (attempt {retry_count + 1}): {_error_message(error)}",
            operation="load",
            retry_count=retry_count,
            error_type=error.__class__.__name__,
        )

    # =========================================================================
    # SAVE
    # =========================================================================

    async def save(self, record: Union[SubscriptionRecord, Dict[str, Any]]) -> SubscriptionRecord:
        """
        Validate and persist a record at the current version.

        Args:
            record: New record, as a model or a camelCase dict

        Returns:
            SubscriptionRecord: The persisted record, now also in memory

        Raises:
            StateValidationError: If the record is invalid; nothing is written
            SubscriptionPersistenceError: If every write attempt failed
        """
        validated = validate_subscription_record(record)
        envelope = self._envelope(validated)

        async def _attempt(retry_count: int) -> None:
            await self._storage_call("set", self._repository.write_current, envelope)
            await self._storage_call("delete", self._repository.delete_legacy)

        try:
            await run_with_backoff(
                _attempt,
                self.retry_policy,
                self._sleep,
                operation="save",
                on_failure=self._on_save_failure,
            )
        except SubstoreException as e:
            failure = self._last_error
            attempts = failure.retry_count + 1 if failure else 1
            logger.error(
                "Failed to save subscription state after max retries",
                attempts=attempts,
                error=e.message,
            )
            await self.events.publish(
                subscription_storage_error(
                    self.aggregate_id,
                    failure.to_dict() if failure else StorageFailure(e.message, "save", 0).to_dict(),
                )
            )
            raise SubscriptionPersistenceError(attempts=attempts, last_error=e.message) from e

        self._subscription = validated
        self._last_error = None
        self._state = LoadState.READY
        return self.subscription

    def _on_save_failure(self, error: BaseException, retry_count: int) -> None:
        self._last_error = StorageFailure(_error_message(error), "save", retry_count)
        logger.warning(
            f"Failed to save subscription state (attempt {retry_count + 1}): {_error_message(error)}",
            operation="save",
            retry_count=retry_count,
            error_type=error.__class__.__name__,
        )

    def _envelope(self, record: SubscriptionRecord) -> Dict[str, Any]:
        return {"version": self.current_version, "data": record.to_storage_dict()}

    async def _storage_call(self, operation: str, fn: Callable[..., Awaitable[Any]], *args: Any) -> Any:
        # Backend errors outside the domain hierarchy count as transient I/O failures
        try:
            return await fn(*args)
        except SubstoreException:
            raise
        except Exception as e:
            raise StorageIOError(f"Storage {operation} failed: {e}", operation=operation) from e

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    async def subscribe_to_plan(
        self,
        plan: Union[Plan, Dict[str, Any]],
        billing_cycle: Union[BillingCycle, str] = BillingCycle.MONTHLY,
    ) -> SubscriptionRecord:
        """
        Activate a plan on the given billing cycle.

        Args:
            plan: Plan to activate
            billing_cycle: "monthly" (next bill in 30 days) or "annual" (365 days)

        Returns:
            SubscriptionRecord: Persisted record
        """
        cycle = self._coerce_cycle(billing_cycle)
        updated = self._subscription.model_copy(update={
            "current_plan": self._coerce_plan(plan),
            "status": SubscriptionStatus.ACTIVE.value,
            "billing_cycle": cycle.value,
            "next_billing": self._next_billing(cycle),
        })
        return await self._commit("subscribe_to_plan", updated)

    async def cancel_subscription(self) -> SubscriptionRecord:
        """Mark the subscription cancelled; plan and next billing date are kept."""
        updated = self._subscription.model_copy(update={
            "status": SubscriptionStatus.CANCELLED.value,
        })
        return await self._commit("cancel_subscription", updated)

    async def change_plan(self, new_plan: Union[Plan, Dict[str, Any]]) -> SubscriptionRecord:
        """
        Switch plans, restarting the billing period on the current cycle.

        Args:
            new_plan: Plan to switch to

        Returns:
            SubscriptionRecord: Persisted record
        """
        cycle = self._coerce_cycle(self._subscription.billing_cycle)
        updated = self._subscription.model_copy(update={
            "current_plan": self._coerce_plan(new_plan),
            "next_billing": self._next_billing(cycle),
        })
        return await self._commit("change_plan", updated)

    async def add_payment_method(
        self,
        method_type: Union[PaymentMethodType, str],
        details: str,
    ) -> PaymentMethod:
        """
        Add a payment method; the first one added becomes the default.

        Args:
            method_type: "card" or "paypal"
            details: Display details, e.g. "Visa ending in 4242"

        Returns:
            PaymentMethod: The stored method with its new id
        """
        try:
            kind = PaymentMethodType(method_type)
        except ValueError as e:
            raise StateValidationError(
                errors=[{"field": "type", "message": f"Unknown payment method type {method_type!r}"}]
            ) from e

        existing = self._subscription.payment_methods
        method = PaymentMethod(
            id=self._id_factory(),
            type=kind.value,
            details=details,
            is_default=len(existing) == 0,
        )
        updated = self._subscription.model_copy(update={
            "payment_methods": [m.model_copy() for m in existing] + [method],
        })
        await self._commit("add_payment_method", updated)
        return method.model_copy()

    async def remove_payment_method(self, method_id: str) -> SubscriptionRecord:
        """
        Remove a payment method by id; unknown ids leave the list unchanged.

        Removing the default does not promote another method.
        """
        updated = self._subscription.model_copy(update={
            "payment_methods": [m.model_copy() for m in self._subscription.payment_methods if m.id != method_id],
        })
        return await self._commit("remove_payment_method", updated)

    async def set_default_payment_method(self, method_id: str) -> SubscriptionRecord:
        """
        Make one payment method the only default.

        Raises:
            PaymentMethodNotFoundError: If no method has this id
        """
        if self._subscription.find_payment_method(method_id) is None:
            raise PaymentMethodNotFoundError(method_id)

        updated = self._subscription.model_copy(update={
            "payment_methods": [
                m.model_copy(update={"is_default": m.id == method_id})
                for m in self._subscription.payment_methods
            ],
        })
        return await self._commit("set_default_payment_method", updated)

    async def record_transaction(
        self,
        amount: float,
        description: str,
        payment_method: Optional[str] = None,
        status: Union[TransactionStatus, str] = TransactionStatus.SUCCESS,
    ) -> Transaction:
        """
        Append a billing transaction dated now.

        Args:
            amount: Amount charged
            description: Human readable description
            payment_method: Payment method label; defaults to the default method's details
            status: "success", "pending" or "failed"

        Returns:
            Transaction: The stored transaction
        """
        if payment_method is None:
            default_method = self._subscription.default_payment_method
            payment_method = (default_method.details or "") if default_method else ""

        try:
            status_value = TransactionStatus(status).value
            transaction = Transaction(
                id=self._id_factory(),
                date=format_iso_timestamp(self._clock()),
                amount=amount,
                status=status_value,
                payment_method=payment_method,
                description=description,
            )
        except ValueError as e:
            raise StateValidationError(errors=[{"field": "transaction", "message": str(e)}]) from e

        updated = self._subscription.model_copy(update={
            "transactions": [t.model_copy() for t in self._subscription.transactions] + [transaction],
        })
        await self._commit("record_transaction", updated)
        return transaction.model_copy()

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def get_transaction_history(self) -> List[Transaction]:
        """Billing history, oldest first."""
        return [t.model_copy() for t in self._subscription.transactions]

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _commit(self, operation: str, updated: SubscriptionRecord) -> SubscriptionRecord:
        try:
            saved = await self.save(updated)
        except SubstoreException:
            logger.error(f"Failed to {operation.replace('_', ' ')}", operation=operation)
            raise

        await self.events.publish(
            subscription_changed(self.aggregate_id, operation, saved.to_storage_dict())
        )
        return saved

    def _next_billing(self, cycle: BillingCycle) -> str:
        return format_iso_timestamp(self._clock() + timedelta(days=cycle.period_days))

    @staticmethod
    def _coerce_cycle(value: Union[BillingCycle, str]) -> BillingCycle:
        try:
            return BillingCycle(value)
        except ValueError as e:
            raise StateValidationError(
                errors=[{"field": "billingCycle", "message": f"Unknown billing cycle {value!r}"}]
            ) from e

    @staticmethod
    def _coerce_plan(plan: Union[Plan, Dict[str, Any]]) -> Plan:
        if isinstance(plan, Plan):
            return plan.model_copy(deep=True)
        try:
            return Plan.model_validate(plan)
        except ValueError as e:
            raise StateValidationError(errors=[{"field": "currentPlan", "message": str(e)}]) from e
