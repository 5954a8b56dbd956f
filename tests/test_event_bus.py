import pytest

from substore.shared.core.event_bus import (
    ALL_EVENTS,
    DomainEvent,
    EventBus,
    EventHandler,
)


class RecordingHandler(EventHandler):
    def __init__(self, event_type, log, name):
        self._event_type = event_type
        self.log = log
        self.name = name

    @property
    def event_type(self):
        return self._event_type

    async def handle(self, event):
        self.log.append((self.name, event.event_type))


class ExplodingHandler(EventHandler):
    def __init__(self):
        self.errors = []

    @property
    def event_type(self):
        return ALL_EVENTS

    async def handle(self, event):
        raise RuntimeError("listener broke")

    async def on_error(self, event, error):
        self.errors.append(str(error))


@pytest.mark.asyncio
async def test_publish_reaches_matching_handlers_only():
    bus = EventBus()
    log = []
    bus.subscribe(RecordingHandler("subscription.changed", log, "changed"))
    bus.subscribe(RecordingHandler("subscription.loaded", log, "loaded"))

    await bus.publish(DomainEvent(event_type="subscription.changed", aggregate_id="subscription"))

    assert log == [("changed", "subscription.changed")]


@pytest.mark.asyncio
async def test_wildcard_and_priority_order():
    bus = EventBus()
    log = []
    bus.subscribe(RecordingHandler(ALL_EVENTS, log, "audit"), priority=1)
    bus.subscribe(RecordingHandler("subscription.loaded", log, "ui"), priority=5)

    await bus.publish(DomainEvent(event_type="subscription.loaded", aggregate_id="subscription"))

    assert [name for name, _ in log] == ["ui", "audit"]


@pytest.mark.asyncio
async def test_plain_and_async_callables():
    bus = EventBus()
    seen = []

    async def async_listener(event):
        seen.append(("async", event.event_type))

    bus.subscribe(lambda event: seen.append(("sync", event.event_type)))
    bus.subscribe(async_listener, "subscription.changed")

    await bus.publish(DomainEvent(event_type="subscription.changed", aggregate_id="subscription"))

    assert sorted(seen) == [("async", "subscription.changed"), ("sync", "subscription.changed")]


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_others():
    bus = EventBus()
    exploding = ExplodingHandler()
    log = []
    bus.subscribe(exploding, priority=10)
    bus.subscribe(RecordingHandler(ALL_EVENTS, log, "after"))

    await bus.publish(DomainEvent(event_type="subscription.degraded", aggregate_id="subscription"))

    assert exploding.errors == ["listener broke"]
    assert log == [("after", "subscription.degraded")]
    stats = bus.get_stats()
    assert stats["published"] == 1
    assert stats["failed"] == 1
    assert stats["processed"] == 1


@pytest.mark.asyncio
async def test_unsubscribe_callable():
    bus = EventBus()
    seen = []

    handler = bus.subscribe(lambda event: seen.append(event.event_id))
    bus.unsubscribe(handler)

    await bus.publish(DomainEvent(event_type="subscription.changed", aggregate_id="subscription"))

    assert seen == []
    assert bus.get_stats()["subscriptions"] == {}


def test_correlation_id_round_trip():
    event = DomainEvent(event_type="subscription.changed", aggregate_id="subscription")
    event.set_correlation_id("req-1")

    assert event.get_correlation_id() == "req-1"
    assert event.to_dict()["metadata"] == {"correlation_id": "req-1"}


class BrokenHookHandler(ExplodingHandler):
    async def on_error(self, event, error):
        raise RuntimeError("error hook broke too")


@pytest.mark.asyncio
async def test_failing_error_hook_does_not_reach_publisher():
    bus = EventBus()
    log = []
    bus.subscribe(BrokenHookHandler(), priority=10)
    bus.subscribe(RecordingHandler(ALL_EVENTS, log, "after"))

    await bus.publish(DomainEvent(event_type="subscription.storage_error", aggregate_id="subscription"))

    assert log == [("after", "subscription.storage_error")]
    assert bus.get_stats()["failed"] == 1
