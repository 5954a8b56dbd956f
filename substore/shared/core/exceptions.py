# 📄 File: substore/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines all the special error types the subscription store uses to say
# what went wrong, like "the storage is unreachable" or "the saved data is damaged".
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy providing specific error types with HTTP status codes,
# error details, a retryable/permanent classification for the backoff engine,
# and serialization for API responses.
# 🔗 Dependencies:
# FastAPI HTTPException, typing, HTTP status constants
# 🔄 Connected Modules / Calls From:
# Subscription store, storage backends, migration engine, API error handlers

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class SubstoreException(Exception):
    """
    Base exception class for the subscription store application.
    All custom exceptions should inherit from this class.

    ``retryable`` tells the backoff engine whether repeating the failed
    operation can possibly succeed.
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
                "status_code": self.status_code
            }
        }

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=self.status_code,
            detail=self.to_dict()["error"]
        )


# =============================================================================
# STORAGE EXCEPTIONS
# =============================================================================

class StorageError(SubstoreException):
    """
    Exception raised when the key/value store cannot serve a request.
    """

    def __init__(
        self,
        message: str = "Storage error",
        operation: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "STORAGE_ERROR"
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if key:
            details["key"] = key

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            error_code=error_code
        )


class StorageIOError(StorageError):
    """
    Transient read/write/delete failure of the backing store.
    Retried by the subscription store's backoff engine.
    """

    retryable = True

    def __init__(
        self,
        message: str = "Storage I/O failed",
        operation: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            operation=operation,
            key=key,
            details=details,
            error_code="STORAGE_IO_ERROR"
        )


class CorruptStateError(StorageError):
    """
    Stored bytes could not be decoded into an envelope.
    Permanent: re-reading the same bytes yields the same failure.
    """

    def __init__(
        self,
        message: str = "Stored subscription state is corrupt",
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            operation="decode",
            key=key,
            details=details,
            error_code="CORRUPT_STATE"
        )


# =============================================================================
# SCHEMA & VALIDATION EXCEPTIONS
# =============================================================================

class MigrationError(SubstoreException):
    """
    Exception raised when a stored record cannot be brought to the current schema.
    """

    def __init__(
        self,
        message: str = "Migration failed",
        from_version: Optional[int] = None,
        to_version: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "MIGRATION_ERROR"
    ):
        if not details:
            details = {}

        if from_version is not None:
            details["from_version"] = from_version
        if to_version is not None:
            details["to_version"] = to_version

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code=error_code
        )


class MissingMigrationError(MigrationError):
    """
    No migration is registered for a version on the path to the target.
    Skipping the gap would yield a record of unknown shape.
    """

    def __init__(self, version: int, target_version: Optional[int] = None):
        self.version = version
        super().__init__(
            message=f"Missing migration for version {version}",
            from_version=version,
            to_version=target_version,
            error_code="MISSING_MIGRATION"
        )


class StateValidationError(SubstoreException):
    """
    Exception raised when a subscription record fails structural validation.
    """

    def __init__(
        self,
        message: str = "Invalid subscription state structure",
        errors: Optional[list] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if errors:
            details["errors"] = errors

        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            error_code="STATE_VALIDATION_ERROR"
        )


# =============================================================================
# BUSINESS LOGIC EXCEPTIONS
# =============================================================================

class SubscriptionPersistenceError(SubstoreException):
    """
    A mutation could not be made durable after every retry was spent.
    The requested change is not applied in memory either.
    """

    def __init__(
        self,
        message: str = "Failed to save subscription state. Please try again later.",
        attempts: Optional[int] = None,
        last_error: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if attempts is not None:
            details["attempts"] = attempts
        if last_error:
            details["last_error"] = last_error

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            error_code="SUBSCRIPTION_PERSISTENCE_ERROR"
        )


class NotFoundError(SubstoreException):
    """
    Exception raised when requested resource is not found.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code="NOT_FOUND"
        )


class PlanNotFoundError(NotFoundError):
    """Requested plan id is not in the catalog."""

    def __init__(self, plan_id: str):
        super().__init__(
            message=f"Plan '{plan_id}' not found",
            resource_type="plan",
            resource_id=plan_id
        )


class PaymentMethodNotFoundError(NotFoundError):
    """Requested payment method id is not on the subscription."""

    def __init__(self, method_id: str):
        super().__init__(
            message=f"Payment method '{method_id}' not found",
            resource_type="payment_method",
            resource_id=method_id
        )


# =============================================================================
# EXCEPTION UTILITIES
# =============================================================================

def is_retryable(exception: BaseException) -> bool:
    """
    Check whether a failed store operation may succeed if repeated.

    Args:
        exception: Exception raised by the failed attempt

    Returns:
        bool: True for transient failures, False for permanent ones
    """
    if isinstance(exception, SubstoreException):
        return exception.retryable
    return False


def exception_to_dict(exception: Exception) -> Dict[str, Any]:
    """
    Convert any exception to dictionary format.

    Args:
        exception: Exception to convert

    Returns:
        Dict: Exception data as dictionary
    """
    if isinstance(exception, SubstoreException):
        return exception.to_dict()

    return {
        "error": {
            "code": exception.__class__.__name__.upper(),
            "message": str(exception),
            "details": {},
            "status_code": 500
        }
    }
