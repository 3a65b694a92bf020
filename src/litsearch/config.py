"""Environment variable configuration.

Settings are loaded in priority order:
  1. Shell environment variables (highest priority)
  2. .env file in current directory
  3. ~/.litsearch/.env (persistent config, set via `litsearch env set`)

Run `litsearch env` to see which keys are configured.
Run `litsearch env set KEY value` to save a key persistently.

Keys per feature:
    suggestions and summaries  ->  OPEN_ROUTER_API
    Semantic Scholar search    ->  S2_API_KEY (optional, higher rate limits)
    Crossref enrichment        ->  CROSSREF_MAILTO (optional, polite pool)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv, set_key

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".litsearch"
PERSISTENT_ENV = CONFIG_DIR / ".env"

# Load in reverse priority order (dotenv never overwrites what is already set)
if PERSISTENT_ENV.exists():
    load_dotenv(PERSISTENT_ENV)

load_dotenv()


DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_SUGGEST_MODEL = "mistralai/mistral-7b-instruct"
DEFAULT_SUMMARY_MODEL = "qwen-vl-plus"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for clients, aggregator and server."""

    host: str = "0.0.0.0"
    port: int = 3000
    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = DEFAULT_OPENROUTER_BASE_URL
    suggest_model: str = DEFAULT_SUGGEST_MODEL
    summary_model: str = DEFAULT_SUMMARY_MODEL
    app_env: str = "production"
    api_timeout: float = 15.0
    branch_timeout: float = 30.0
    max_results: int = 5
    s2_api_key: Optional[str] = None
    crossref_mailto: Optional[str] = None

    @property
    def development(self) -> bool:
        return self.app_env.lower() == "development"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def load_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings(
        host=os.getenv("HOST") or "0.0.0.0",
        port=_env_int("PORT", 3000),
        openrouter_api_key=os.getenv("OPEN_ROUTER_API") or None,
        openrouter_base_url=os.getenv("OPENROUTER_BASE_URL") or DEFAULT_OPENROUTER_BASE_URL,
        suggest_model=os.getenv("SUGGEST_MODEL") or DEFAULT_SUGGEST_MODEL,
        summary_model=os.getenv("SUMMARY_MODEL") or DEFAULT_SUMMARY_MODEL,
        app_env=os.getenv("APP_ENV") or "production",
        api_timeout=_env_float("API_TIMEOUT", 15.0),
        branch_timeout=_env_float("BRANCH_TIMEOUT", 30.0),
        max_results=_env_int("MAX_RESULTS", 5),
        s2_api_key=os.getenv("S2_API_KEY") or None,
        crossref_mailto=os.getenv("CROSSREF_MAILTO") or None,
    )


# --- Persistent config ---

def save_key(name: str, value: str) -> Path:
    """Write ``name=value`` to ~/.litsearch/.env and export it to this process."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    PERSISTENT_ENV.touch(exist_ok=True)
    set_key(PERSISTENT_ENV, name, value, quote_mode="never")
    os.environ[name] = value
    logger.debug("Saved %s to %s", name, PERSISTENT_ENV)
    return PERSISTENT_ENV


# --- Status check ---

ENV_VARS = {
    "OPEN_ROUTER_API": {
        "required_by": ["query suggestions", "result summaries"],
        "description": "OpenRouter chat completions",
    },
    "S2_API_KEY": {
        "required_by": ["Semantic Scholar search (optional, increases rate limits)"],
        "description": "Semantic Scholar academic paper API",
    },
    "CROSSREF_MAILTO": {
        "required_by": ["Crossref enrichment (optional, polite pool)"],
        "description": "Contact email sent to the Crossref API",
    },
}

VALID_KEYS = set(ENV_VARS)


def check_env() -> list[tuple[str, bool, dict]]:
    """(name, is_set, info) for every key `litsearch env` knows about."""
    return [(var, bool(os.getenv(var)), info) for var, info in ENV_VARS.items()]
