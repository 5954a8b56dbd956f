import json
import logging
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from substore.shared.config.settings import Settings
from substore.shared.core.exceptions import (
    CorruptStateError,
    StorageIOError,
    SubscriptionPersistenceError,
    exception_to_dict,
    is_retryable,
)
from substore.shared.utils.formatters import (
    FormattingError,
    format_iso_timestamp,
    parse_iso_timestamp,
)
from substore.shared.utils.helpers import ID_ALPHABET, generate_id
from substore.shared.utils.logging import JSONFormatter, get_logger, log_context


def test_iso_timestamps_use_millisecond_utc():
    assert format_iso_timestamp(datetime(2024, 1, 1, tzinfo=timezone.utc)) == "2024-01-01T00:00:00.000Z"
    assert format_iso_timestamp(datetime(2024, 1, 1, 12, 30)) == "2024-01-01T12:30:00.000Z"

    shifted = datetime(2024, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_iso_timestamp(shifted) == "2024-01-01T00:00:00.000Z"


def test_parse_iso_timestamp():
    parsed = parse_iso_timestamp("2024-01-31T00:00:00.000Z")

    assert parsed == datetime(2024, 1, 31, tzinfo=timezone.utc)
    with pytest.raises(FormattingError):
        parse_iso_timestamp("next tuesday")


def test_generated_ids():
    ids = {generate_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(len(i) == 9 and set(i) <= set(ID_ALPHABET) for i in ids)
    assert generate_id("txn").startswith("txn_")


def test_settings_normalise_and_validate():
    settings = Settings(ENVIRONMENT="TEST", STORAGE_BACKEND="Redis", LOG_LEVEL="debug")

    assert settings.is_testing
    assert settings.STORAGE_BACKEND == "redis"
    assert settings.LOG_LEVEL == "DEBUG"

    with pytest.raises(ValidationError):
        Settings(STORAGE_BACKEND="sqlite")


def test_redis_url_includes_password():
    settings = Settings(ENVIRONMENT="test", REDIS_HOST="cache", REDIS_PORT=6380, REDIS_DB=2, REDIS_PASSWORD="s3cret")

    assert settings.redis_url == "redis://:s3cret@cache:6380/2"


def test_error_classification():
    assert is_retryable(StorageIOError())
    assert not is_retryable(CorruptStateError())
    assert not is_retryable(ValueError("x"))

    body = exception_to_dict(SubscriptionPersistenceError(attempts=4, last_error="down"))
    assert body["error"]["code"] == "SUBSCRIPTION_PERSISTENCE_ERROR"
    assert body["error"]["details"] == {"attempts": 4, "last_error": "down"}


def test_json_formatter_nests_extra_fields():
    formatter = JSONFormatter("%(message)s")
    record = logging.LogRecord("substore.test", logging.INFO, __file__, 1, "Loaded", None, None)
    record.extra_fields = {"operation": "load", "retry_count": 0}

    with log_context(request_id="req-42"):
        payload = json.loads(formatter.format(record))

    assert payload["message"] == "Loaded"
    assert payload["level"] == "INFO"
    assert payload["request_id"] == "req-42"
    assert payload["extra"] == {"operation": "load", "retry_count": 0}


def test_structured_logger_passes_keyword_fields(caplog):
    logger = get_logger("substore.tests")

    with caplog.at_level(logging.INFO, logger="substore.tests"):
        logger.info("Retrying load", operation="load", retry_count=1)

    record = caplog.records[-1]
    assert record.getMessage() == "Retrying load"
    assert record.extra_fields == {"operation": "load", "retry_count": 1}
