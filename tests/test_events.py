from nauta.events import (
    NET_WORTH_CHANGED,
    SCORE_COMPUTED,
    EventBus,
    register_default_handlers,
)


def test_publish_without_subscribers():
    assert EventBus().publish("NOPE", {}) == []


def test_subscribe_and_unsubscribe():
    bus = EventBus()

    def handler(event, payload):
        return {"name": event.name, "x": payload["x"]}

    bus.subscribe("PING", handler)
    assert bus.publish("PING", {"x": 1}) == [{"name": "PING", "x": 1}]
    bus.unsubscribe("PING", handler)
    assert bus.publish("PING", {"x": 1}) == []


def test_net_worth_snapshot_requested_for_new_day():
    bus = register_default_handlers(EventBus())
    results = bus.publish(NET_WORTH_CHANGED, {
        "date": "2025-10-02",
        "history": {"2025-10-01": {"value": 1}},
        "net_worth": 1500,
        "currency": "EUR",
    })
    assert results == [{"snapshot": {"date": "2025-10-02", "value": 1500, "currency": "EUR"}}]


def test_net_worth_snapshot_skipped_for_known_day():
    bus = register_default_handlers(EventBus())
    results = bus.publish(NET_WORTH_CHANGED, {
        "date": "2025-10-01",
        "history": {"2025-10-01": {"value": 1}},
        "net_worth": 1500,
    })
    assert results == [{}]


def test_score_alert_and_floored_components():
    bus = register_default_handlers(EventBus())
    alert, floored = bus.publish(SCORE_COMPUTED, {
        "score": 30.0,
        "threshold": 40,
        "breakdown": {
            "emergency_fund": {"score": 0.0},
            "savings_rate": {"score": 12.5},
            "insurance": {"score": 0},
        },
    })
    assert alert["alert"] == "Nauta index 30.0 is below 40"
    assert floored == {"floored": ["emergency_fund", "insurance"]}


def test_score_above_threshold_has_no_alert():
    bus = register_default_handlers(EventBus())
    results = bus.publish(SCORE_COMPUTED, {"score": 85.0, "threshold": 40, "breakdown": {}})
    assert results == [{}, {}]
