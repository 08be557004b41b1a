"""Keyword dispatch: decide which integrated tools a prompt should trigger.

Each check is independent and runs in a fixed order; every check that
fires contributes one action. ``plan_actions`` is pure so it can be tested
without any external service.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel

from toolhub.schemas.tools import MAX_BATCH_URLS
from toolhub.tools.agent.prompts import HELP_TEXT

SWIFT_KEYWORDS = ("swift", "ios", "xcode", "swiftui", "uikit", "objective-c")
KOTLIN_KEYWORDS = ("kotlin", "android", "viewmodel", "coroutines", "hilt", "room")
REVIEW_KEYWORDS = ("review", "analyze", "check", "audit", "inspect", "examine", "validate")
PYTHON_KEYWORDS = ("python", "pandas", "numpy", "matplotlib", "data analysis", "script")
EXECUTE_KEYWORDS = ("run", "execute", "compute", "calculate", "process", "analyze")
RESEARCH_KEYWORDS = (
    "research", "documentation", "docs", "find info", "learn about",
    "documentation for", "how to", "tutorial", "guide",
)
RESEARCH_LANGUAGE_KEYWORDS = ("swift", "kotlin", "swiftui", "uikit", "coroutines", "async/await")
BATCH_KEYWORDS = ("batch", "multiple", "all", "several", "many")
ANALYZE_KEYWORDS = ("analyze", "analysis", "seo", "metadata", "check", "inspect", "audit")
HELP_KEYWORDS = ("help", "what can you do", "capabilities", "tools", "how to")
FOCUS_KEYWORDS = ("performance", "memory", "security", "architecture")

_URL = re.compile(r"https?://\S+")
_GENERIC_BLOCK = re.compile(r"```\n(.*?)\n```", re.DOTALL)

_SWIFT_HINT = (
    "I can help review Swift/iOS code! Please provide your Swift code in a code block like:\n"
    "```swift\n// Your Swift code here\n```"
)
_KOTLIN_HINT = (
    "I can help review Kotlin/Android code! Please provide your Kotlin code in a code block like:\n"
    "```kotlin\n// Your Kotlin code here\n```"
)
_PYTHON_HINT = (
    "I can run Python code with pandas, numpy, matplotlib! Please provide your Python code "
    "in a code block like:\n```python\n# Your Python code here\n```"
)


class PlannedAction(BaseModel):
    """One dispatch decision: a tool call, or a canned hint when code is missing."""

    heading: str
    tool: str | None = None
    arguments: dict[str, Any] = {}
    hint: str | None = None


def _has_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(k in text for k in keywords)


def _code_block(prompt: str, language: str, has_context: bool) -> str | None:
    """Body of a ```<language> block, or of a bare ``` block when the language context is present."""
    m = re.search(rf"```{language}\n(.*?)\n```", prompt, re.DOTALL)
    if m is None and has_context:
        m = _GENERIC_BLOCK.search(prompt)
    return m.group(1) if m else None


def detect_focus(lowered: str) -> str | None:
    return next((f for f in FOCUS_KEYWORDS if f in lowered), None)


def extract_urls(prompt: str) -> list[str]:
    return _URL.findall(prompt)


def plan_actions(prompt: str) -> list[PlannedAction]:
    """Return the tool actions triggered by ``prompt``, in dispatch order."""
    lowered = prompt.lower()
    actions: list[PlannedAction] = []

    urls = extract_urls(prompt)
    has_review = _has_any(lowered, REVIEW_KEYWORDS)

    # Swift review
    has_swift = _has_any(lowered, SWIFT_KEYWORDS)
    swift_code = _code_block(prompt, "swift", has_swift)
    if swift_code is not None:
        actions.append(PlannedAction(
            heading="📱 **Swift Code Review Result:**",
            tool="swift_code_review",
            arguments={"code": swift_code, "focus": detect_focus(lowered)},
        ))
    elif has_swift and has_review:
        actions.append(PlannedAction(heading="📱 **Swift Code Review:**", hint=_SWIFT_HINT))

    # Kotlin review
    has_kotlin = _has_any(lowered, KOTLIN_KEYWORDS)
    kotlin_code = _code_block(prompt, "kotlin", has_kotlin)
    if kotlin_code is not None:
        actions.append(PlannedAction(
            heading="🤖 **Kotlin Code Review Result:**",
            tool="kotlin_code_review",
            arguments={"code": kotlin_code, "focus": detect_focus(lowered)},
        ))
    elif has_kotlin and has_review:
        actions.append(PlannedAction(heading="🤖 **Kotlin Code Review:**", hint=_KOTLIN_HINT))

    # Python execution
    has_python = _has_any(lowered, PYTHON_KEYWORDS)
    python_code = _code_block(prompt, "python", has_python)
    if python_code is not None:
        actions.append(PlannedAction(
            heading="🐍 **Python Execution Result:**",
            tool="python_exec",
            arguments={"code": python_code},
        ))
    elif has_python and _has_any(lowered, EXECUTE_KEYWORDS):
        actions.append(PlannedAction(heading="🐍 **Python Execution:**", hint=_PYTHON_HINT))

    has_code = any(c is not None for c in (swift_code, kotlin_code, python_code))

    # Research assistant, only when no code was found to review or run
    if (
        not has_code
        and _has_any(lowered, RESEARCH_KEYWORDS)
        and _has_any(lowered, RESEARCH_LANGUAGE_KEYWORDS)
    ):
        if "swift" in lowered:
            language = "swift"
        elif "kotlin" in lowered:
            language = "kotlin"
        else:
            language = "both"
        actions.append(PlannedAction(
            heading="🔍 **Research Assistant Result:**",
            tool="research_assistant",
            arguments={"query": prompt, "language": language},
        ))

    # URLs: batch first, then a single-URL analysis or scrape
    if len(urls) > 1 or (urls and _has_any(lowered, BATCH_KEYWORDS)):
        actions.append(PlannedAction(
            heading="📊 **Batch Scraping Result:**",
            tool="batch_scraper",
            arguments={"urls": urls[:MAX_BATCH_URLS]},
        ))
    elif urls:
        if _has_any(lowered, ANALYZE_KEYWORDS):
            actions.append(PlannedAction(
                heading="🔍 **URL Analysis Result:**",
                tool="url_analyzer",
                arguments={"url": urls[0]},
            ))
        else:
            actions.append(PlannedAction(
                heading="🌐 **Web Scraping Result:**",
                tool="web_scraper",
                arguments={"url": urls[0]},
            ))

    if not actions and not urls and not has_code and _has_any(lowered, HELP_KEYWORDS):
        actions.append(PlannedAction(heading="", hint=HELP_TEXT))

    return actions
