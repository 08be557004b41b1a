"""YAML config loader: reads toolhub.yml into ServerConfig."""

import logging
import os
from pathlib import Path

import yaml

from toolhub.schemas.config import ServerConfig

logger = logging.getLogger(__name__)

# Environment variables that fill keys the config file leaves empty.
_ENV_KEYS = {
    "openai_api_key": "OPENAI_API_KEY",
    "firecrawl_api_key": "FIRECRAWL_API_KEY",
}


def load_config(path: str | Path | None = None) -> ServerConfig:
    """Load and validate the server config.

    With no path, defaults plus environment variables are used. Raises
    ``FileNotFoundError`` if a given path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    """
    raw: dict = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        loaded = yaml.safe_load(path.read_text())
        # An empty file loads as None.
        if loaded is not None and not isinstance(loaded, dict):
            raise ValueError(f"Config file must be a YAML mapping, got {type(loaded).__name__}")
        raw = {k: v for k, v in (loaded or {}).items() if v is not None}

    for field, env_var in _ENV_KEYS.items():
        if not raw.get(field) and os.environ.get(env_var):
            raw[field] = os.environ[env_var]

    return ServerConfig(**raw)


def warn_missing_keys(config: ServerConfig) -> None:
    """Log a startup warning for every external service without a key."""
    if not config.openai_api_key:
        logger.error(
            "OPENAI_API_KEY is not set; the agent tool and /api/agent will not work. "
            "Add it to your environment or .env file."
        )
    if not config.firecrawl_api_key:
        logger.warning(
            "FIRECRAWL_API_KEY is not set; web scraping tools will return errors. "
            "Add it to your environment or .env file."
        )
