"""Pydantic models for tool inputs and the MCP-shaped tool response."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

ReviewFocus = Literal[
    "performance", "memory", "security", "architecture", "clean_code", "solid_principles",
]
ResearchLanguage = Literal["swift", "kotlin", "both"]

MAX_BATCH_URLS = 5

WebUrl = Annotated[str, Field(pattern=r"^https?://")]


class TextContent(BaseModel):
    """One text part of a tool response."""

    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """Result of a tool call, shaped like an MCP ``CallToolResult``."""

    content: list[TextContent]

    @property
    def text(self) -> str:
        return "\n".join(part.text for part in self.content)


def text_response(text: str) -> ToolResponse:
    return ToolResponse(content=[TextContent(text=text)])


# ----------------------------------------------------------------------
# Tool inputs
# ----------------------------------------------------------------------


class AgentInput(BaseModel):
    prompt: str = Field(description="The question or task for the AI agent")
    system_prompt: str | None = Field(
        default=None, description="Optional system prompt to set the agent's behavior",
    )
    model: str | None = Field(
        default=None, description="OpenAI model to use (default: gpt-4o-mini)",
    )
    use_tools: bool = Field(
        default=True, description="Whether the agent can use integrated tools (default: true)",
    )


class PythonExecInput(BaseModel):
    code: str = Field(description="Python code to execute")
    packages: list[str] = Field(
        default_factory=list, description="Additional packages to install (optional)",
    )


class WebScraperInput(BaseModel):
    url: str = Field(description="URL to scrape", pattern=r"^https?://")
    only_main_content: bool = Field(
        default=True,
        description="Extract only main content, filtering out navigation and ads (default: true)",
    )


class UrlAnalyzerInput(BaseModel):
    url: str = Field(description="URL to analyze", pattern=r"^https?://")


class BatchScraperInput(BaseModel):
    """Input for ``batch_scraper``.

    Each URL must be http(s). The 1..5 bound is checked by the handler so
    callers get a readable error instead of a validation failure.
    """

    urls: list[WebUrl] = Field(description=f"Array of URLs to scrape (maximum {MAX_BATCH_URLS})")
    only_main_content: bool = Field(
        default=True,
        description="Extract only main content, filtering out navigation and ads (default: true)",
    )


class ResearchInput(BaseModel):
    query: str = Field(
        description=(
            "What you want to research (e.g., 'async/await in Swift', "
            "'coroutines in Kotlin', 'getting started guide')"
        ),
    )
    language: ResearchLanguage = Field(
        default="both", description="Programming language to focus on (default: both)",
    )


class CodeReviewInput(BaseModel):
    code: str = Field(description="Source code to review")
    focus: ReviewFocus | None = Field(
        default=None, description="Specific area to focus the review on",
    )


class ServerInfoInput(BaseModel):
    pass
