from __future__ import annotations

import hashlib
import json
import time
from typing import Any

_DEFAULT_TTL = 300  # 5 minutes


def make_key(request_dict: dict) -> str:
    normalized = json.dumps(request_dict, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


class ResponseCache:
    """TTL cache for upstream lookups, owned by the service that uses it."""

    def __init__(self, ttl: float = _DEFAULT_TTL) -> None:
        self.ttl = ttl
        self._entries: dict[str, dict[str, Any]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, request_dict: dict) -> Any | None:
        key = make_key(request_dict)
        entry = self._entries.get(key)
        if entry and time.time() - entry["created_at"] < self.ttl:
            self._hits += 1
            return entry["value"]
        if entry:
            del self._entries[key]
        self._misses += 1
        return None

    def set(self, request_dict: dict, value: Any) -> None:
        key = make_key(request_dict)
        self._entries[key] = {"value": value, "created_at": time.time()}

    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0
