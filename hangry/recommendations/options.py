from __future__ import annotations

from typing import Sequence

from .models import Candidate, Decision
from .preferences import approved_candidates


def _category_overlaps(candidate: Candidate, wanted: Sequence[str]) -> bool:
    for category in candidate.categories:
        have = category.lower()
        for want in wanted:
            if want in have or have in want:
                return True
    return False


def similar_by_category(pool: Sequence[Candidate], categories: Sequence[str]) -> list[Candidate]:
    """Pool candidates sharing a category, substring match in either direction."""
    wanted = [c.lower() for c in categories if c]
    if not wanted:
        return []
    return [c for c in pool if _category_overlaps(c, wanted)]


def build_options(pool: Sequence[Candidate], decisions: list[Decision]) -> list[Candidate]:
    """Approved picks first, then similar pool candidates not already listed."""
    approved = approved_candidates(decisions)
    if not approved:
        return []

    categories: list[str] = []
    for candidate in approved:
        for category in candidate.categories:
            if category not in categories:
                categories.append(category)

    listed = {c.id for c in approved}
    options = list(approved)
    for candidate in similar_by_category(pool, categories):
        if candidate.id not in listed:
            listed.add(candidate.id)
            options.append(candidate)
    return options
