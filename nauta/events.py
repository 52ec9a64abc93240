import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = [
    'NET_WORTH_CHANGED', 'SCORE_COMPUTED',
    'Event', 'EventBus', 'register_default_handlers',
]

logger = logging.getLogger(__name__)


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name, [])
        if not handlers:
            return []
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        logger.debug("Publishing %s to %d handler(s)", name, len(handlers))
        return [handler(event, payload) for handler in handlers]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


NET_WORTH_CHANGED = "NET_WORTH_CHANGED"
SCORE_COMPUTED = "SCORE_COMPUTED"


def net_worth_snapshot_handler(event: Event, payload: dict) -> dict:
    """Ask for a snapshot when today's date is missing from the history."""
    day = payload.get("date", "")
    history = payload.get("history") or {}
    if day and day not in history:
        return {
            "snapshot": {
                "date": day,
                "value": payload.get("net_worth", 0),
                "currency": payload.get("currency", ""),
            }
        }
    return {}


def score_alert_handler(event: Event, payload: dict) -> dict:
    score = payload.get("score", 0)
    threshold = payload.get("threshold", 40)
    if score < threshold:
        return {
            "alert": f"Nauta index {score:.1f} is below {threshold:.0f}",
            "score": score,
            "threshold": threshold,
        }
    return {}


def weakest_component_handler(event: Event, payload: dict) -> dict:
    breakdown = payload.get("breakdown") or {}
    floored = [name for name, part in breakdown.items() if part.get("score", 0) <= 0]
    if floored:
        return {"floored": floored}
    return {}


def register_default_handlers(bus: EventBus) -> EventBus:
    bus.subscribe(NET_WORTH_CHANGED, net_worth_snapshot_handler)
    bus.subscribe(SCORE_COMPUTED, score_alert_handler)
    bus.subscribe(SCORE_COMPUTED, weakest_component_handler)
    return bus
