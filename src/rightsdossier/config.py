"""Environment-based configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from rightsdossier.constants import DEFAULT_DEBOUNCE_MS

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # LLM Provider
    gemini_api_key: str = ""
    openai_api_key: str = ""

    # Model chains (first = primary, rest = fallbacks tried in order).
    # Grounded models must support the provider's web-search tool.
    grounded_model_chain: Annotated[list[str], NoDecode] = [
        "gemini/gemini-2.5-flash-lite",
    ]
    extraction_model_chain: Annotated[list[str], NoDecode] = [
        "gemini/gemini-2.5-flash-lite",
    ]
    llm_timeout_seconds: int = 60

    # Semantic search
    semantic_debounce_ms: int = DEFAULT_DEBOUNCE_MS

    # Directories
    log_dir: Path = Path("logs")

    # Logging
    log_level: str = "INFO"

    # API
    cors_origins: str = "http://localhost:5173"

    @field_validator(
        "grounded_model_chain", "extraction_model_chain", mode="before"
    )
    @classmethod
    def _parse_chain(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("grounded_model_chain", "extraction_model_chain")
    @classmethod
    def _validate_chain(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("model chain must contain at least one model")
        seen: set[str] = set()
        dupes: list[str] = []
        for m in v:
            if m in seen:
                dupes.append(m)
            seen.add(m)
        if dupes:
            logger.warning(
                "Duplicate models in model chain: %s",
                ", ".join(dupes),
            )
        return v

    @property
    def debounce_seconds(self) -> float:
        return max(self.semantic_debounce_ms, 0) / 1000

    def api_key_for(self, model: str) -> str | None:
        """Explicit provider key for a litellm model id, if configured.

        None lets litellm fall back to its own environment lookup.
        """
        provider = model.split("/", 1)[0]
        key = {
            "gemini": self.gemini_api_key,
            "openai": self.openai_api_key,
        }.get(provider, "")
        return key or None

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }
