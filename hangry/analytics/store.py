from __future__ import annotations

import time
from typing import Any


class EventStore:
    """Append-only usage log, one per application instance."""

    def __init__(self) -> None:
        self._events: list[dict[str, Any]] = []

    def record(self, event_type: str, data: dict[str, Any]) -> None:
        self._events.append({
            "type": event_type,
            "timestamp": time.time(),
            **data,
        })

    def events(self) -> list[dict[str, Any]]:
        return self._events

    def clear(self) -> None:
        self._events.clear()
