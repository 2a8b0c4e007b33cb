"""Environment-backed configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from mapping_explainer.exceptions import ConfigurationError

load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str]
    db_sslmode: Optional[str] = None
    llm_model: str = "gpt-4.1-mini"
    llm_temperature: float = 0.2
    llm_max_tokens: int = 800
    llm_api_key: Optional[str] = None
    function_explainer_enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 3000
    log_format: str = "json"
    log_level: str = "INFO"

    def require_database_url(self) -> str:
        if not self.database_url:
            raise ConfigurationError("MAPPING_DB_URL (or DATABASE_URL) is required")
        return self.database_url


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def get_settings() -> Settings:
    """Read settings from the environment (and a .env file, if present)."""
    try:
        return Settings(
            database_url=os.getenv("MAPPING_DB_URL") or os.getenv("DATABASE_URL"),
            db_sslmode=os.getenv("MAPPING_DB_SSLMODE") or None,
            llm_model=os.getenv("LLM_MODEL", "gpt-4.1-mini"),
            llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.2")),
            llm_max_tokens=int(os.getenv("LLM_MAX_TOKENS", "800")),
            llm_api_key=os.getenv("LLM_API_KEY") or None,
            function_explainer_enabled=_env_bool("FUNCTION_EXPLAINER_ENABLED", True),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_format=os.getenv("LOG_FORMAT", "json").lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid numeric setting: {e}") from e
