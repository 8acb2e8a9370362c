from datetime import datetime
from typing import Any, Callable, Dict, List, NamedTuple

__all__ = [
    'Event', 'EventBus',
    'RECORDS_FETCHED', 'RECORD_ADDED', 'RECORD_UPDATED', 'RECORD_DELETED',
    'REQUEST_STATUS_CHANGED',
]

RECORDS_FETCHED = "RECORDS_FETCHED"
RECORD_ADDED = "RECORD_ADDED"
RECORD_UPDATED = "RECORD_UPDATED"
RECORD_DELETED = "RECORD_DELETED"
REQUEST_STATUS_CHANGED = "REQUEST_STATUS_CHANGED"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], Any]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[Any]:
        handlers = self._subscribers.get(name)
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in list(handlers)]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)
