"""Async Firecrawl API client used by the web-scraping tools."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class ConfigurationError(RuntimeError):
    """A required API key or setting is missing."""


class ScrapeResult(BaseModel):
    """Reshaped ``/v1/scrape`` response."""

    success: bool
    markdown: str = ""
    metadata: dict[str, Any] = {}
    error: str | None = None

    @property
    def title(self) -> str:
        return self.metadata.get("title") or "No title"


class FirecrawlClient:
    """Thin async wrapper around the Firecrawl REST API.

    Usage::

        async with FirecrawlClient(api_key) as fc:
            result = await fc.scrape("https://example.com")

    API-level failures (``success: false`` or an HTTP error status) come
    back as a ``ScrapeResult`` with ``error`` set; transport errors raise
    ``httpx.HTTPError``.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.firecrawl.dev",
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("FIRECRAWL_API_KEY environment variable is not set")
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "FirecrawlClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def scrape(
        self,
        url: str,
        *,
        only_main_content: bool = True,
        wait_for: int = 2000,
        formats: list[str] | None = None,
    ) -> ScrapeResult:
        """Scrape one URL to markdown."""
        payload = {
            "url": url,
            "formats": formats or ["markdown"],
            "onlyMainContent": only_main_content,
            "waitFor": wait_for,
        }
        logger.info("Scraping %s (onlyMainContent=%s)", url, only_main_content)
        resp = await self._client.post("/v1/scrape", json=payload)

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if resp.status_code >= 400 or not body.get("success"):
            error = body.get("error") or f"HTTP {resp.status_code}"
            logger.warning("Scrape of %s failed: %s", url, error)
            return ScrapeResult(success=False, error=str(error))

        data = body.get("data") or {}
        return ScrapeResult(
            success=True,
            markdown=data.get("markdown") or "",
            metadata=data.get("metadata") or {},
        )
