from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "search"]
    decisions = [e for e in events if e["type"] == "decision"]
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Top locations
    loc_counter: Counter[str] = Counter()
    for s in searches:
        loc_counter[s.get("location") or "unknown"] += 1
    top_locations = [{"name": n, "count": c} for n, c in loc_counter.most_common(10)]

    fixture_searches = sum(1 for s in searches if s.get("source") == "fixture")
    located_searches = sum(1 for s in searches if s.get("used_coordinates"))

    # Swipes
    status_counter: Counter[str] = Counter(d["status"] for d in decisions)
    liked_counter: Counter[str] = Counter()
    for d in decisions:
        if d["status"] == "approve":
            for c in d.get("categories", []) or []:
                liked_counter[c.lower()] += 1
    top_liked = [{"name": n, "count": c} for n, c in liked_counter.most_common(10)]

    # Duels
    started = sum(1 for e in events if e["type"] == "duel_started")
    finished = [e for e in events if e["type"] == "duel_finished"]

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "top_locations": top_locations,
        "fixture_fallback_rate": round(fixture_searches / total * 100, 1) if total else 0.0,
        "located_search_rate": round(located_searches / total * 100, 1) if total else 0.0,
        "decisions": {
            "total": len(decisions),
            "approve": status_counter.get("approve", 0),
            "reject": status_counter.get("reject", 0),
            "undecided": status_counter.get("undecided", 0),
        },
        "top_liked_categories": top_liked,
        "duels": {
            "started": started,
            "finished": len(finished),
            "completion_rate": round(len(finished) / started * 100, 1) if started else 0.0,
        },
    }
