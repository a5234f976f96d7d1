from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from ..cache import ResponseCache
from ..errors import UpstreamError
from ..recommendations.models import Candidate
from .config import DEFAULT_RECIPE_CONFIG, RecipeConfig
from .fixtures import SAMPLE_RECIPES
from .models import Ingredient, Recipe, RecipeResponse

logger = logging.getLogger(__name__)


def result_to_recipe(raw: dict[str, Any]) -> Recipe:
    return Recipe(
        id=str(raw["id"]),
        title=raw.get("title", ""),
        image=raw.get("image") or "",
        ready_in_minutes=raw.get("readyInMinutes") or 30,
        servings=raw.get("servings") or 4,
        source_url=raw.get("sourceUrl") or "",
        summary=raw.get("summary") or "",
        ingredients=[
            Ingredient(name=i.get("name", ""), amount=i.get("amount"), unit=i.get("unit") or "")
            for i in raw.get("extendedIngredients") or []
        ],
    )


def fixture_recipes(query: str, count: int) -> list[Recipe]:
    """Sample recipes matching *query* in title or summary, or all of them."""
    needle = query.strip().lower()
    matches = [
        r for r in SAMPLE_RECIPES
        if needle in r.title.lower() or needle in r.summary.lower()
    ] if needle else []
    return (matches or list(SAMPLE_RECIPES))[:count]


def recipe_query_for(candidate: Candidate) -> str:
    return candidate.categories[0] if candidate.categories else candidate.name


class RecipeService:
    def __init__(
        self,
        config: RecipeConfig = DEFAULT_RECIPE_CONFIG,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport
        self.cache = ResponseCache(ttl=config.cache_ttl)

    async def _fetch(self, query: str, count: int) -> list[dict[str, Any]]:
        try:
            async with httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    "/recipes/complexSearch",
                    params={
                        "apiKey": self.config.api_key,
                        "query": query,
                        "number": count,
                        "addRecipeInformation": "true",
                        "fillIngredients": "true",
                    },
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamError(f"Recipe request failed: {exc}") from exc

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            raise UpstreamError("Recipe response has no results list")
        return results

    async def search(self, query: str, count: int = 10) -> RecipeResponse:
        if not self.config.enabled or not self.config.api_key:
            return RecipeResponse(recipes=fixture_recipes(query, count), source="fixture")

        cache_key = {"query": query, "count": count}
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            results = await self._fetch(query, count)
            recipes = [result_to_recipe(r) for r in results]
        except (UpstreamError, KeyError, TypeError, ValidationError):
            logger.warning("Recipe lookup for %r failed, serving sample recipes", query, exc_info=True)
            return RecipeResponse(recipes=fixture_recipes(query, count), source="fixture")

        response = RecipeResponse(recipes=recipes, source="recipes")
        self.cache.set(cache_key, response)
        return response

    async def suggest_for(
        self,
        candidates: Sequence[Candidate],
        per_candidate: int = 3,
        max_candidates: int = 5,
    ) -> RecipeResponse:
        """Recipes inspired by the first few candidates, de-duplicated by id."""
        picked = list(candidates)[:max_candidates]
        if not picked:
            return RecipeResponse(recipes=[], source="recipes")

        responses = await asyncio.gather(
            *(self.search(recipe_query_for(c), per_candidate) for c in picked)
        )

        seen: set[str] = set()
        recipes: list[Recipe] = []
        for response in responses:
            for recipe in response.recipes:
                if recipe.id not in seen:
                    seen.add(recipe.id)
                    recipes.append(recipe)

        source = "fixture" if any(r.source == "fixture" for r in responses) else "recipes"
        return RecipeResponse(recipes=recipes, source=source)
