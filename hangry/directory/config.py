from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class DirectoryConfig:
    api_key: str = os.getenv("YELP_API_KEY", "")
    base_url: str = "https://api.yelp.com/v3"
    default_location: str = "San Francisco"
    timeout: float = 10.0
    limit: int = 20
    max_radius: int = 40_000  # meters, upstream hard limit
    max_offset: int = 40
    cache_ttl: float = 300.0
    enabled: bool = True


DEFAULT_DIRECTORY_CONFIG = DirectoryConfig()
