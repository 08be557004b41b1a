"""MCP surface: exposes every registered tool through FastMCP."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from toolhub.schemas.tools import ResearchLanguage, ReviewFocus
from toolhub.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

Transport = Literal["stdio", "sse", "streamable-http"]

INSTRUCTIONS = (
    "Development tool server. Use `agent` for general questions; it detects Swift/Kotlin "
    "code, Python code and URLs in the prompt and runs the matching tool. The other tools "
    "can also be called directly. Call `server_info` for an overview."
)


def registry_lifespan(registry: ToolRegistry):
    """FastMCP lifespan that closes the registry's shared clients on shutdown.

    The sse and streamable-http transports enter it once per session; the
    registry rebuilds its clients lazily on the next call.
    """

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[ToolRegistry]:
        try:
            yield registry
        finally:
            await registry.aclose()
            logger.debug("Closed tool registry clients")

    return lifespan


def build_mcp_server(registry: ToolRegistry) -> FastMCP:
    """Create a FastMCP server whose tools delegate to ``registry``."""
    mcp = FastMCP("toolhub", instructions=INSTRUCTIONS, lifespan=registry_lifespan(registry))

    def describe(name: str) -> str:
        return registry.get(name).config.description

    async def call(name: str, **arguments) -> str:
        response = await registry.invoke(name, arguments)
        return response.text

    @mcp.tool(name="agent", description=describe("agent"))
    async def agent(
        prompt: Annotated[str, Field(description="The question or task for the AI agent")],
        system_prompt: Annotated[
            str | None, Field(description="Optional system prompt to set the agent's behavior"),
        ] = None,
        model: Annotated[
            str | None, Field(description="OpenAI model to use (default: gpt-4o-mini)"),
        ] = None,
        use_tools: Annotated[
            bool, Field(description="Whether the agent can use integrated tools (default: true)"),
        ] = True,
    ) -> str:
        return await call(
            "agent", prompt=prompt, system_prompt=system_prompt, model=model, use_tools=use_tools,
        )

    @mcp.tool(name="python_exec", description=describe("python_exec"))
    async def python_exec(
        code: Annotated[str, Field(description="Python code to execute")],
        packages: Annotated[
            list[str] | None, Field(description="Additional packages to install (optional)"),
        ] = None,
    ) -> str:
        return await call("python_exec", code=code, packages=packages or [])

    @mcp.tool(name="web_scraper", description=describe("web_scraper"))
    async def web_scraper(
        url: Annotated[str, Field(description="URL to scrape")],
        only_main_content: Annotated[
            bool, Field(description="Extract only main content (default: true)"),
        ] = True,
    ) -> str:
        return await call("web_scraper", url=url, only_main_content=only_main_content)

    @mcp.tool(name="url_analyzer", description=describe("url_analyzer"))
    async def url_analyzer(
        url: Annotated[str, Field(description="URL to analyze")],
    ) -> str:
        return await call("url_analyzer", url=url)

    @mcp.tool(name="batch_scraper", description=describe("batch_scraper"))
    async def batch_scraper(
        urls: Annotated[list[str], Field(description="Array of URLs to scrape (maximum 5)")],
        only_main_content: Annotated[
            bool, Field(description="Extract only main content (default: true)"),
        ] = True,
    ) -> str:
        return await call("batch_scraper", urls=urls, only_main_content=only_main_content)

    @mcp.tool(name="research_assistant", description=describe("research_assistant"))
    async def research_assistant(
        query: Annotated[str, Field(description="What you want to research")],
        language: Annotated[
            ResearchLanguage, Field(description="Programming language to focus on (default: both)"),
        ] = "both",
    ) -> str:
        return await call("research_assistant", query=query, language=language)

    @mcp.tool(name="swift_code_review", description=describe("swift_code_review"))
    async def swift_code_review(
        code: Annotated[str, Field(description="Swift code to review")],
        focus: Annotated[
            ReviewFocus | None, Field(description="Specific area to focus the review on"),
        ] = None,
    ) -> str:
        return await call("swift_code_review", code=code, focus=focus)

    @mcp.tool(name="kotlin_code_review", description=describe("kotlin_code_review"))
    async def kotlin_code_review(
        code: Annotated[str, Field(description="Kotlin code to review")],
        focus: Annotated[
            ReviewFocus | None, Field(description="Specific area to focus the review on"),
        ] = None,
    ) -> str:
        return await call("kotlin_code_review", code=code, focus=focus)

    @mcp.tool(name="server_info", description=describe("server_info"))
    async def server_info() -> str:
        return await call("server_info")

    logger.debug("MCP server built with tools: %s", ", ".join(registry.names))
    return mcp


def run_mcp_server(registry: ToolRegistry, transport: Transport = "stdio") -> None:
    """Build the server and block serving on ``transport``."""
    mcp = build_mcp_server(registry)
    logger.info("MCP server running on %s", transport)
    mcp.run(transport=transport)
