"""Configuration schema: validates the optional toolhub.yml file."""

import sys

from pydantic import BaseModel, Field, field_validator


class ServerConfig(BaseModel):
    """Runtime settings shared by the MCP server, the web app and the CLI.

    API keys may be left empty in the file; ``load_config`` fills them from
    ``OPENAI_API_KEY`` / ``FIRECRAWL_API_KEY``.
    """

    # External services
    openai_api_key: str = ""
    firecrawl_api_key: str = ""
    firecrawl_api_url: str = "https://api.firecrawl.dev"

    # Chat completion defaults
    default_model: str = "gpt-4o-mini"
    agent_max_tokens: int = 1500
    chat_max_tokens: int = 500
    temperature: float = 0.7

    # Python execution
    python_executable: str = sys.executable
    python_timeout: float = Field(default=30.0, gt=0)
    temp_dir: str = "temp"

    # Scraping
    scrape_wait_ms: int = 2000

    # Web front-end
    host: str = "127.0.0.1"
    port: int = 8000

    @field_validator("firecrawl_api_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("temperature")
    @classmethod
    def check_temperature(cls, value: float) -> float:
        if not 0.0 <= value <= 2.0:
            raise ValueError(f"temperature must be between 0 and 2, got {value}")
        return value
