"""
Schema migrations for stored subscription records.

``MIGRATIONS[v]`` turns a record of schema version ``v`` into version ``v + 1``.
Each migration is a pure function over plain dicts: defaults for the new
version first, the stored fields on top, so fields the migration does not
know about are carried forward untouched.

Envelopes written by this package look like ``{"version": 1, "data": {...}}``.
Records saved before versioning existed have no ``version`` key and are
treated as version 0, the whole object being the record.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from substore.shared.core.exceptions import MigrationError, MissingMigrationError
from substore.shared.utils.logging import get_logger

logger = get_logger(__name__)

CURRENT_VERSION = 1

Migration = Callable[[Dict[str, Any]], Dict[str, Any]]

V1_DEFAULTS: Dict[str, Any] = {
    "currentPlan": None,
    "status": "expired",
    "nextBilling": None,
    "billingCycle": "monthly",
    "transactions": [],
    "paymentMethods": [],
}


def _migrate_v0_to_v1(state: Dict[str, Any]) -> Dict[str, Any]:
    # v0 predates billing cycles, transaction history and payment methods
    defaults = {key: (list(value) if isinstance(value, list) else value) for key, value in V1_DEFAULTS.items()}
    return {**defaults, **state}


MIGRATIONS: Dict[int, Migration] = {
    0: _migrate_v0_to_v1,
}


def read_envelope(raw: Any) -> Tuple[int, Any]:
    """
    Split a decoded stored value into ``(version, record)``.

    Args:
        raw: Decoded JSON value read from storage

    Returns:
        Tuple of schema version and the record payload (not yet checked)

    Raises:
        MigrationError: If the value is not an object or its version is not an integer
    """
    if not isinstance(raw, dict):
        raise MigrationError(f"Stored subscription state must be an object, got {type(raw).__name__}")

    if "version" not in raw:
        return 0, raw

    version = raw["version"]
    if isinstance(version, bool) or not isinstance(version, int):
        raise MigrationError(f"Stored subscription version must be an integer, got {version!r}")

    return version, raw.get("data")


def migrate_state(
    raw: Any,
    target_version: int = CURRENT_VERSION,
    migrations: Optional[Mapping[int, Migration]] = None,
) -> Dict[str, Any]:
    """
    Bring a stored value up to ``target_version``.

    Args:
        raw: Envelope ``{"version", "data"}`` or an unversioned legacy record
        target_version: Schema version to reach
        migrations: Registry to use instead of MIGRATIONS

    Returns:
        Dict: Record at ``target_version``; identity when already there

    Raises:
        MissingMigrationError: If any version on the path has no migration,
            including a stored version newer than ``target_version``
        MigrationError: If the payload is not an object or a migration fails
    """
    registry = MIGRATIONS if migrations is None else migrations
    version, state = read_envelope(raw)

    if version > target_version:
        # No downgrade path exists
        raise MissingMigrationError(version, target_version)

    if not isinstance(state, dict):
        raise MigrationError(
            f"Cannot migrate subscription state of type {type(state).__name__}",
            from_version=version,
            to_version=target_version,
        )

    while version < target_version:
        migration = registry.get(version)
        if migration is None:
            raise MissingMigrationError(version, target_version)

        logger.info(
            f"Migrating subscription state from version {version} to {version + 1}",
            from_version=version,
            to_version=version + 1,
        )

        try:
            state = migration(state)
        except MigrationError:
            raise
        except Exception as e:
            logger.error(f"Migration failed at version {version}: {e}", from_version=version)
            raise MigrationError(
                f"Migration failed at version {version}: {e}",
                from_version=version,
                to_version=version + 1,
            ) from e

        if not isinstance(state, dict):
            raise MigrationError(
                f"Migration from version {version} returned {type(state).__name__}",
                from_version=version,
                to_version=version + 1,
            )
        version += 1

    return state
