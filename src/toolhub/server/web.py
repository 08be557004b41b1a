"""FastAPI web front-end: chat page, plain chat endpoint and tool invocation."""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse
from jinja2 import Environment, FileSystemLoader
from pydantic import BaseModel, ValidationError

from toolhub.schemas.config import ServerConfig
from toolhub.shared.chat_client import build_messages
from toolhub.tools.agent.prompts import CHAT_SYSTEM_PROMPT
from toolhub.tools.base import error_message
from toolhub.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

MISSING_KEY_ERROR = (
    "OpenAI API key is not configured. Please add OPENAI_API_KEY to your environment or .env file."
)


class ChatRequest(BaseModel):
    # Optional here so a missing prompt gets the 400 below instead of a 422.
    prompt: str | None = None
    system_prompt: str | None = None
    model: str | None = None


def render_chat_page(registry: ToolRegistry) -> str:
    env = Environment(loader=FileSystemLoader(str(_TEMPLATE_DIR)), autoescape=True)
    template = env.get_template("chat.html")
    return template.render(
        tools=registry.configs(),
        default_model=registry.config.default_model,
    )


def create_app(config: ServerConfig | None = None, registry: ToolRegistry | None = None) -> FastAPI:
    """Build the FastAPI app. Pass ``registry`` to inject mocked clients."""
    if registry is None:
        registry = ToolRegistry(config or ServerConfig())
    config = registry.config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await registry.aclose()

    app = FastAPI(
        title="toolhub",
        description="Development tools (code review, Python execution, web scraping, AI agent)",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.registry = registry

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return render_chat_page(registry)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "tools": len(registry.names),
            "openai_configured": registry.get_chat() is not None,
            "firecrawl_configured": bool(config.firecrawl_api_key),
        }

    @app.post("/api/agent")
    async def chat(request: ChatRequest) -> JSONResponse:
        if not request.prompt:
            return JSONResponse(status_code=400, content={"error": "Prompt is required"})

        client = registry.get_chat()
        if client is None:
            return JSONResponse(status_code=500, content={"error": MISSING_KEY_ERROR})

        model = request.model or config.default_model
        try:
            content = await client.complete(
                build_messages(request.system_prompt or CHAT_SYSTEM_PROMPT, request.prompt),
                model=model,
                max_tokens=config.chat_max_tokens,
                temperature=config.temperature,
            )
        except Exception as exc:
            logger.exception("Agent API error")
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Failed to get response from AI agent",
                    "details": error_message(exc),
                },
            )

        return JSONResponse(content={
            "success": True,
            "response": content or "No response generated",
            "model": model,
        })

    @app.get("/api/tools")
    async def list_tools() -> list[dict[str, Any]]:
        return [
            {"name": c.name, "description": c.description, "input_schema": c.input_schema()}
            for c in registry.configs()
        ]

    @app.post("/api/tools/{name}")
    async def invoke_tool(name: str, arguments: dict[str, Any] | None = Body(default=None)) -> dict[str, Any]:
        try:
            response = await registry.invoke(name, arguments)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=json.loads(exc.json(include_url=False)))
        return response.model_dump()

    return app
