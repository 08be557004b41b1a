"""Agent tool: one OpenAI chat completion plus keyword-triggered tool results."""

from __future__ import annotations

import logging
from typing import Callable, Mapping

from toolhub.schemas.config import ServerConfig
from toolhub.schemas.tools import AgentInput, ToolResponse, text_response
from toolhub.shared.chat_client import ChatClient, build_messages
from toolhub.tools.agent.dispatch import PlannedAction, plan_actions
from toolhub.tools.agent.prompts import agent_system_prompt
from toolhub.tools.base import TextFunction, ToolConfig, ToolHandler, error_message

logger = logging.getLogger(__name__)

CONFIG = ToolConfig(
    name="agent",
    description=(
        "AI assistant that can help with various tasks using OpenAI's GPT model and integrated "
        "tools (swift_code_review, kotlin_code_review, python_exec, web_scraper, url_analyzer, "
        "batch_scraper, research_assistant)"
    ),
    input_model=AgentInput,
)

MISSING_KEY_MESSAGE = (
    "❌ OpenAI API key not configured. Please add OPENAI_API_KEY to your environment or .env file."
)

ChatProvider = Callable[[], "ChatClient | None"]
"""Returns the chat client, or None when no OpenAI key is configured."""


async def run_actions(actions: list[PlannedAction], tools: Mapping[str, TextFunction]) -> list[str]:
    """Execute planned actions in order and return their rendered sections."""
    sections: list[str] = []
    for action in actions:
        if action.tool is None:
            body = action.hint or ""
        else:
            logger.info("Agent dispatching to %s", action.tool)
            body = await tools[action.tool](**action.arguments)
        sections.append(f"{action.heading}\n{body}" if action.heading else body)
    return sections


def make_agent_handler(
    config: ServerConfig,
    get_chat: ChatProvider,
    tools: Mapping[str, TextFunction],
) -> ToolHandler:
    """Create the agent handler.

    ``tools`` maps tool names to async text functions; the agent calls the
    other tools through it as plain library functions.
    """

    async def handle(params: AgentInput) -> ToolResponse:
        try:
            chat = get_chat()
            if chat is None:
                return text_response(MISSING_KEY_MESSAGE)

            system = params.system_prompt or agent_system_prompt(params.use_tools)
            content = await chat.complete(
                build_messages(system, params.prompt),
                model=params.model or config.default_model,
                max_tokens=config.agent_max_tokens,
                temperature=config.temperature,
            ) or "No response generated"

            if params.use_tools:
                sections = await run_actions(plan_actions(params.prompt), tools)
                if sections:
                    content += "\n\n---\n\n" + "\n\n".join(sections)
        except Exception as exc:
            logger.exception("Agent request failed")
            return text_response(f"❌ Error: {error_message(exc)}")

        return text_response(f"🤖 **AI Agent Response:**\n\n{content}")

    return handle
