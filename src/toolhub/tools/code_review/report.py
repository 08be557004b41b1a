"""Findings container, shared clean-code checks and report rendering for the code reviewers."""

from __future__ import annotations

import re

from pydantic import BaseModel

# Which focus values enable each check group. ``None`` means "no focus": run everything.
ARCHITECTURE_FOCUS = {"architecture", "clean_code", None}
SOLID_FOCUS = {"solid_principles", "clean_code", None}
CLEAN_CODE_FOCUS = {"clean_code", None}
PERFORMANCE_FOCUS = {"performance", "memory", None}
SECURITY_FOCUS = {"security", None}

MAX_FUNCTION_LINES = 20
MAX_COMMENT_RATIO = 0.3
MAX_PROTOCOL_METHODS = 5
MAX_RESPONSIBILITIES = 2

_MAGIC_NUMBER = re.compile(r"\b(?<![\w.])[0-9]{2,}\b(?![\w.])")
_LINE_COMMENT = re.compile(r"//.*$", re.MULTILINE)
_GENERIC_NAME = re.compile(r"^[a-z]+(1|2|3|Data|Info|Obj)$")


class ReviewFindings(BaseModel):
    """Findings collected by one review, bucketed by report section."""

    solid_violations: list[str] = []
    architecture_issues: list[str] = []
    clean_code_issues: list[str] = []
    issues: list[str] = []
    suggestions: list[str] = []
    positives: list[str] = []

    @property
    def total_issues(self) -> int:
        return (
            len(self.solid_violations)
            + len(self.architecture_issues)
            + len(self.clean_code_issues)
            + len(self.issues)
        )


def contains_any(code: str, *needles: str) -> bool:
    return any(n in code for n in needles)


def non_blank_lines(text: str) -> int:
    return sum(1 for line in text.split("\n") if line.strip())


def count_responsibilities(block: str, markers: dict[str, tuple[str, ...]]) -> list[str]:
    """Return the responsibility labels whose markers appear in ``block``."""
    return [label for label, needles in markers.items() if contains_any(block, *needles)]


def check_clean_code(
    code: str,
    findings: ReviewFindings,
    *,
    function_keyword: str,
    binding_keywords: tuple[str, str],
    short_name_allowlist: set[str],
) -> None:
    """Language-neutral clean-code checks: function length, naming, comments, magic numbers."""
    functions = re.findall(
        rf"{function_keyword}\s+\w+[^{{]*\{{(?:.*?)(?=\n\s*{function_keyword}|\n\s*\}}|\Z)",
        code,
        re.DOTALL,
    )
    for index, func in enumerate(functions, 1):
        lines = non_blank_lines(func)
        if lines > MAX_FUNCTION_LINES:
            findings.clean_code_issues.append(
                f"📏 **Function Too Long**: Function #{index} has {lines} lines - consider breaking down"
            )

    first, second = binding_keywords
    for name in re.findall(rf"(?:{first}|{second})\s+([a-zA-Z_][a-zA-Z0-9_]*)", code):
        if len(name) < 3 and name.lower() not in short_name_allowlist:
            findings.clean_code_issues.append(
                f"🏷️ **Poor Naming**: Variable '{name}' is too short - use descriptive names"
            )
        if _GENERIC_NAME.match(name):
            findings.clean_code_issues.append(
                f"🏷️ **Poor Naming**: Variable '{name}' uses generic suffix - be more specific"
            )

    code_lines = non_blank_lines(code)
    comment_lines = len(_LINE_COMMENT.findall(code))
    if code_lines and comment_lines / code_lines > MAX_COMMENT_RATIO:
        findings.clean_code_issues.append(
            "💬 **Too Many Comments**: High comment ratio suggests code isn't self-documenting"
        )

    magic_numbers = _MAGIC_NUMBER.findall(code)
    if magic_numbers:
        findings.clean_code_issues.append(
            f"🔢 **Magic Numbers**: Found {len(magic_numbers)} magic numbers - use named constants"
        )


def check_immutability(code: str, findings: ReviewFindings, *, immutable: str, mutable: str = "var") -> None:
    immutable_count = len(re.findall(rf"\b{immutable}\s+", code))
    mutable_count = len(re.findall(rf"\b{mutable}\s+", code))
    if immutable_count > mutable_count:
        findings.positives.append(
            f"🔒 **Immutability**: Favoring '{immutable}' over '{mutable}' for immutable data"
        )
    elif mutable_count > immutable_count * 2:
        findings.suggestions.append(
            f"Consider using '{immutable}' instead of '{mutable}' where values don't change"
        )


def _focus_label(focus: str) -> str:
    label = focus.replace("_", " ")
    return label[:1].upper() + label[1:]


def _overall_assessment(total: int, language: str) -> str:
    if total == 0:
        return (
            f"🎉 **Excellent Clean Code!** Your {language} code follows clean "
            "architecture and SOLID principles!"
        )
    if total <= 3:
        return "👍 **Good Code Quality** with minor improvements needed."
    if total <= 6:
        return "⚠️ **Moderate Issues** - consider refactoring for better clean code practices."
    return (
        "🔄 **Major Refactoring Recommended** - significant clean code and "
        "architecture improvements needed."
    )


def render_report(
    findings: ReviewFindings,
    *,
    language: str,
    focus: str | None,
    recommendations: list[str],
) -> str:
    """Render findings into the Markdown review report."""
    sections: list[str] = []

    if focus:
        sections.append(f"**🎯 Focus Area: {_focus_label(focus)}**\n\n")

    buckets = [
        ("🔴 **SOLID Principle Violations:**", findings.solid_violations),
        ("🏗️ **Architecture Issues:**", findings.architecture_issues),
        ("🧹 **Clean Code Issues:**", findings.clean_code_issues),
        ("🚨 **Critical Issues:**", findings.issues),
        ("💡 **Improvement Suggestions:**", findings.suggestions),
        ("✅ **Clean Code Practices Found:**", findings.positives),
    ]
    for heading, items in buckets:
        if items:
            bullets = "".join(f"• {item}\n" for item in items)
            sections.append(f"{heading}\n{bullets}\n")

    sections.append(_overall_assessment(findings.total_issues, language) + "\n\n")

    sections.append("🏗️ **Clean Architecture Recommendations:**\n")
    sections.append("".join(f"• {rec}\n" for rec in recommendations))
    return "".join(sections)
