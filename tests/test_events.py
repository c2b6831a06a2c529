"""
Tests for the in-process event bus.
"""
from telesales.services.events import EventBus, EventType


def test_publish_without_subscribers():
    assert EventBus().publish(EventType.LOGIN_CREDITED, {"agent_id": 1}) == 0


def test_subscriber_receives_payload():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.MILESTONE_EARNED, lambda kind, payload: received.append((kind, payload)))
    assert bus.publish(EventType.MILESTONE_EARNED, {"milestone_id": "weekly_2"}) == 1
    assert received == [(EventType.MILESTONE_EARNED, {"milestone_id": "weekly_2"})]


def test_only_matching_event_type_delivered():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.LOGIN_CREDITED, lambda kind, payload: received.append(kind))
    bus.publish(EventType.MILESTONE_EARNED, {})
    assert received == []


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    received = []
    sub = bus.subscribe(EventType.LOGIN_CREDITED, lambda kind, payload: received.append(payload))
    sub.unsubscribe()
    sub.unsubscribe()
    assert bus.publish(EventType.LOGIN_CREDITED, {"agent_id": 1}) == 0
    assert received == []
    assert sub.active is False


def test_failing_subscriber_does_not_block_others():
    bus = EventBus()
    received = []

    def broken(kind, payload):
        raise RuntimeError("socket closed")

    bus.subscribe(EventType.LOGIN_CREDITED, broken)
    bus.subscribe(EventType.LOGIN_CREDITED, lambda kind, payload: received.append(payload))
    assert bus.publish(EventType.LOGIN_CREDITED, {"agent_id": 7}) == 1
    assert received == [{"agent_id": 7}]
