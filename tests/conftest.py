"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable
from unittest.mock import AsyncMock

import httpx
import pytest

from toolhub.schemas.config import ServerConfig
from toolhub.shared.chat_client import ChatClient
from toolhub.shared.firecrawl import FirecrawlClient


def make_text_response(text: str | None):
    """Create a mock OpenAI chat completion with a single text choice."""
    message = SimpleNamespace(content=text, tool_calls=None)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=None)


def scrape_payload(markdown: str, **metadata: Any) -> dict[str, Any]:
    """Body of a successful Firecrawl ``/v1/scrape`` response."""
    return {"success": True, "data": {"markdown": markdown, "metadata": metadata}}


@pytest.fixture
def config(tmp_path: Path) -> ServerConfig:
    return ServerConfig(
        openai_api_key="sk-test",
        firecrawl_api_key="fc-test",
        temp_dir=str(tmp_path / "scripts"),
    )


@pytest.fixture
def mock_chat_client() -> ChatClient:
    """Return a ChatClient with a mocked OpenAI SDK underneath, answering "Hello!"."""
    client = ChatClient.__new__(ChatClient)
    client._client = AsyncMock()
    client._client.chat.completions.create = AsyncMock(return_value=make_text_response("Hello!"))
    return client


@pytest.fixture
def make_firecrawl() -> Callable[[Callable[[httpx.Request], httpx.Response]], FirecrawlClient]:
    """Build a FirecrawlClient whose HTTP traffic goes to ``handler``."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> FirecrawlClient:
        return FirecrawlClient("fc-test", transport=httpx.MockTransport(handler))

    return factory
