from __future__ import annotations

from pydantic import BaseModel, Field


class Ingredient(BaseModel):
    name: str
    amount: float | None = None
    unit: str = ""


class Recipe(BaseModel):
    id: str
    title: str
    image: str = ""
    ready_in_minutes: int = 30
    servings: int = 4
    source_url: str = ""
    summary: str = ""
    ingredients: list[Ingredient] = Field(default_factory=list)


class RecipeResponse(BaseModel):
    recipes: list[Recipe]
    source: str
