from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class LLMConfig:
    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = "llama-3.1-8b-instant"
    timeout: float = 8.0
    max_tokens: int = 768
    # Only the head of the ranking gets a written reason
    max_explained: int = 10
    enabled: bool = True


DEFAULT_LLM_CONFIG = LLMConfig()
