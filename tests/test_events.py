# tests for the in-process event bus

from mindcare.services.events import EventBus
from tests.conftest import RecordingSubscriber


class TestEventBus:

    def test_delivers_payload(self):
        bus = EventBus()
        rec = RecordingSubscriber()
        bus.subscribe("data-updated", rec)
        bus.publish("data-updated", {"x": 1})
        assert rec.events == [("data-updated", {"x": 1})]

    def test_no_payload_is_empty_dict(self):
        bus = EventBus()
        rec = RecordingSubscriber()
        bus.subscribe("data-updated", rec)
        bus.publish("data-updated")
        assert rec.events == [("data-updated", {})]

    def test_only_matching_event(self):
        bus = EventBus()
        rec = RecordingSubscriber()
        bus.subscribe("therapy-progress-updated", rec)
        bus.publish("data-updated")
        assert rec.events == []

    def test_subscription_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe("e", lambda *_: calls.append("first"))
        bus.subscribe("e", lambda *_: calls.append("second"))
        bus.publish("e")
        assert calls == ["first", "second"]

    def test_unsubscribe_handle(self):
        bus = EventBus()
        rec = RecordingSubscriber()
        unsubscribe = bus.subscribe("e", rec)
        unsubscribe()
        bus.publish("e")
        assert rec.events == []

    def test_unsubscribe_unknown_is_noop(self):
        EventBus().unsubscribe("e", lambda *_: None)

    def test_failing_subscriber_does_not_block_others(self, caplog):
        bus = EventBus()
        rec = RecordingSubscriber()

        def boom(event, payload):
            raise RuntimeError("listener crashed")

        bus.subscribe("e", boom)
        bus.subscribe("e", rec)
        bus.publish("e", {"n": 1})
        assert rec.events == [("e", {"n": 1})]
        assert "listener crashed" in caplog.text

    def test_subscriber_can_unsubscribe_during_publish(self):
        bus = EventBus()
        rec = RecordingSubscriber()
        holder = {}

        def once(event, payload):
            holder["unsub"]()

        holder["unsub"] = bus.subscribe("e", once)
        bus.subscribe("e", rec)
        bus.publish("e")
        bus.publish("e")
        assert len(rec.events) == 2
