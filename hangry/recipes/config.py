from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class RecipeConfig:
    api_key: str = os.getenv("SPOONACULAR_API_KEY", "")
    base_url: str = "https://api.spoonacular.com"
    timeout: float = 10.0
    cache_ttl: float = 600.0
    enabled: bool = True


DEFAULT_RECIPE_CONFIG = RecipeConfig()
