"""Tool registry: builds every tool handler and invokes tools by name."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from toolhub.schemas.config import ServerConfig
from toolhub.schemas.tools import ToolResponse
from toolhub.shared.chat_client import ChatClient, DryRunClient
from toolhub.shared.firecrawl import FirecrawlClient
from toolhub.tools import python_exec, server_info, web_scraping
from toolhub.tools.agent import tool as agent_tool
from toolhub.tools.base import TextFunction, ToolConfig, ToolHandler
from toolhub.tools.code_review import kotlin, swift

logger = logging.getLogger(__name__)


class RegisteredTool(BaseModel):
    config: ToolConfig
    handler: ToolHandler


class ToolRegistry:
    """Holds the external clients and the handler for every tool.

    Clients are created lazily from the configured API keys; tests and the
    ``--dry-run`` mode inject their own.
    """

    def __init__(
        self,
        config: ServerConfig,
        *,
        chat_client: ChatClient | DryRunClient | None = None,
        scraper: FirecrawlClient | None = None,
    ) -> None:
        self.config = config
        self._chat = chat_client
        self._scraper = scraper
        self._tools: dict[str, RegisteredTool] = {}
        self._build()

    # ------------------------------------------------------------------
    # Client providers
    # ------------------------------------------------------------------

    def get_chat(self) -> ChatClient | DryRunClient | None:
        if self._chat is None and self.config.openai_api_key:
            self._chat = ChatClient(api_key=self.config.openai_api_key)
        return self._chat

    def get_scraper(self) -> FirecrawlClient:
        """Shared Firecrawl client; raises ``ConfigurationError`` without an API key."""
        if self._scraper is None:
            self._scraper = FirecrawlClient(
                self.config.firecrawl_api_key, base_url=self.config.firecrawl_api_url,
            )
        return self._scraper

    async def aclose(self) -> None:
        if self._scraper is not None:
            await self._scraper.aclose()
            self._scraper = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def _register(self, config: ToolConfig, handler: ToolHandler) -> None:
        self._tools[config.name] = RegisteredTool(config=config, handler=handler)

    def _build(self) -> None:
        wait_for = self.config.scrape_wait_ms
        self._register(agent_tool.CONFIG, agent_tool.make_agent_handler(
            self.config, self.get_chat, self.text_functions(),
        ))
        self._register(python_exec.CONFIG, python_exec.make_python_handler(self.config))
        self._register(web_scraping.WEB_SCRAPER, web_scraping.make_web_scraper_handler(
            self.get_scraper, wait_for=wait_for,
        ))
        self._register(web_scraping.URL_ANALYZER, web_scraping.make_url_analyzer_handler(
            self.get_scraper, wait_for=wait_for,
        ))
        self._register(web_scraping.BATCH_SCRAPER, web_scraping.make_batch_scraper_handler(
            self.get_scraper, wait_for=wait_for,
        ))
        self._register(web_scraping.RESEARCH_ASSISTANT, web_scraping.make_research_handler(
            self.get_scraper, wait_for=wait_for,
        ))
        self._register(swift.CONFIG, swift.swift_code_review_handler)
        self._register(kotlin.CONFIG, kotlin.kotlin_code_review_handler)
        self._register(server_info.CONFIG, server_info.server_info_handler)

    # ------------------------------------------------------------------
    # Lookup and invocation
    # ------------------------------------------------------------------

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def configs(self) -> list[ToolConfig]:
        return [t.config for t in self._tools.values()]

    def get(self, name: str) -> RegisteredTool:
        try:
            return self._tools[name]
        except KeyError:
            raise KeyError(f"Unknown tool: {name}") from None

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResponse:
        """Validate ``arguments`` against the tool's input model and run it.

        Raises ``KeyError`` for an unknown tool and ``pydantic.ValidationError``
        for invalid input.
        """
        tool = self.get(name)
        params = tool.config.input_model.model_validate(arguments or {})
        logger.info("Invoking tool %s", name)
        return await tool.handler(params)

    def text_functions(self) -> dict[str, TextFunction]:
        """Name → async function returning the tool's response text (used by the agent)."""

        def bind(name: str) -> TextFunction:
            async def call(**arguments: Any) -> str:
                response = await self.invoke(name, arguments)
                return response.text
            return call

        tool_names = [
            "swift_code_review", "kotlin_code_review", "python_exec", "web_scraper",
            "url_analyzer", "batch_scraper", "research_assistant",
        ]
        return {name: bind(name) for name in tool_names}
