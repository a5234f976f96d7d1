from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from groq import Groq

from ..recommendations.geo import format_distance
from ..recommendations.models import AffinityProfile, RankedCandidate
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a friendly restaurant guide. A user swiped through nearby "
    "restaurants; you get the categories they liked and disliked and the "
    "restaurants we picked for them, best first. Write one short sentence "
    "per restaurant saying why it suits them.\n\n"
    "Reply with JSON only, shaped like:\n"
    '{"explanations": [{"id": "<restaurant_id>", "reason": "<one sentence>"}]}\n'
    "Use only ids from the table. Do not reorder or drop any."
)


def _profile_lines(profile: AffinityProfile) -> list[str]:
    if not profile.has_signal:
        return ["- No swipes yet"]
    lines = []
    if profile.liked_categories:
        lines.append("- Liked: " + ", ".join(sorted(profile.liked_categories)))
    if profile.disliked_categories:
        lines.append("- Disliked: " + ", ".join(sorted(profile.disliked_categories)))
    return lines


def _table_row(item: RankedCandidate) -> str:
    c = item.candidate
    cells = [
        c.id,
        c.name,
        c.price or "?",
        "N/A" if c.rating is None else str(c.rating),
        ", ".join(c.categories),
        "N/A" if c.distance is None else format_distance(c.distance),
    ]
    return "| " + " | ".join(cells) + " |"


def _build_user_message(profile: AffinityProfile, ranked: Sequence[RankedCandidate]) -> str:
    lines = ["## Taste Profile", *_profile_lines(profile), "", "## Picks"]
    lines.append("| ID | Name | Price | Rating | Categories | Distance |")
    lines.append("|---|---|---|---|---|---|")
    lines.extend(_table_row(item) for item in ranked)
    return "\n".join(lines)


def _parse_explanations(content: str, known_ids: set[str]) -> dict[str, str]:
    payload: dict[str, Any] = json.loads(content)
    reasons: dict[str, str] = {}
    for entry in payload.get("explanations", []):
        rid = str(entry.get("id", ""))
        reason = (entry.get("reason") or "").strip()
        if rid in known_ids and reason:
            reasons[rid] = reason
    return reasons


def explain_recommendations(
    profile: AffinityProfile,
    ranked: Sequence[RankedCandidate],
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> dict[str, str]:
    """
    Ask Groq for a one-line reason per recommended restaurant.

    Only the first ``config.max_explained`` entries are sent. Returns
    restaurant id -> reason, or an empty dict when explanations are off
    or anything goes wrong (timeout, bad JSON, API error). Order and
    scores are not touched.
    """
    head = list(ranked)[: config.max_explained]
    if not (config.enabled and config.api_key and head):
        return {}

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": _build_user_message(profile, head)},
            ],
            max_tokens=config.max_tokens,
            temperature=0.3,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content or ""
        return _parse_explanations(content, {item.candidate.id for item in head})
    except Exception:
        logger.warning("Could not explain %d recommendations, sending them without reasons", len(head), exc_info=True)
        return {}
