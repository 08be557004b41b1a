"""Kotlin/Android code review: a checklist of regex and substring heuristics."""

from __future__ import annotations

import logging
import re

from toolhub.schemas.tools import CodeReviewInput, ToolResponse, text_response
from toolhub.tools.base import ToolConfig, error_message
from toolhub.tools.code_review.report import (
    ARCHITECTURE_FOCUS,
    CLEAN_CODE_FOCUS,
    MAX_PROTOCOL_METHODS,
    MAX_RESPONSIBILITIES,
    PERFORMANCE_FOCUS,
    SECURITY_FOCUS,
    SOLID_FOCUS,
    ReviewFindings,
    check_clean_code,
    check_immutability,
    contains_any,
    count_responsibilities,
    render_report,
)

logger = logging.getLogger(__name__)

CONFIG = ToolConfig(
    name="kotlin_code_review",
    description=(
        "Comprehensive code review for Kotlin/Android applications with clean architecture, "
        "SOLID principles, and best practices analysis"
    ),
    input_model=CodeReviewInput,
)

RECOMMENDATIONS = [
    "**MVVM + Clean Architecture**: Use ViewModels with Use Cases/Interactors",
    "**Repository Pattern**: Abstract data sources behind repositories",
    "**Dependency Injection**: Use Hilt/Dagger for constructor injection",
    "**SOLID Principles**: Follow Single Responsibility, Open/Closed, etc.",
    "**Sealed Classes**: Use sealed classes for type-safe state management",
    "**Data Classes**: Prefer data classes for immutable models",
    "**Coroutines**: Use structured concurrency with proper dispatchers",
    "**Testing**: Write unit tests for business logic and use cases",
]

_RESPONSIBILITY_MARKERS = {
    "networking": ("retrofit", "http"),
    "data persistence": ("Room", "SQLite"),
    "UI handling": ("findViewById", "binding"),
    "storage": ("SharedPreferences", "DataStore"),
    "validation": ("validation", "validate"),
}

_CLASS_BLOCK = re.compile(r"class\s+\w+[^{]*\{.*?(?=class|\Z)", re.DOTALL)
_INTERFACE_BLOCK = re.compile(r"interface\s+\w+[^{]*\{[^}]*\}")


def _check_architecture(code: str, f: ReviewFindings) -> None:
    if contains_any(code, "ViewModel", "StateFlow", "LiveData"):
        f.positives.append("🏗️ **MVVM Pattern**: Using Model-View-ViewModel architecture")
        if "View" in code and "StateFlow" in code and "Repository" in code:
            f.positives.append(
                "🎯 **Clean Separation**: Good MVVM layer separation with Repository pattern"
            )
        if "class" in code and "ViewModel" in code and contains_any(
            code, "Retrofit", "Room", "SharedPreferences"
        ):
            f.architecture_issues.append(
                "🏗️ **Architecture Violation**: ViewModel contains data access logic - consider Repository pattern"
            )

    if contains_any(code, "Repository", "DataSource"):
        f.positives.append("🗄️ **Repository Pattern**: Using repository for data abstraction")

    if contains_any(code, "@Inject", "@HiltAndroidApp", "@Module"):
        f.positives.append("💉 **Dependency Injection**: Using Hilt/Dagger for DI")
    elif "class" in code and "=" in code and "()" in code:
        f.architecture_issues.append(
            "💉 **DI Missing**: Consider dependency injection instead of direct instantiation"
        )

    if contains_any(code, "sealed class", "sealed interface"):
        f.positives.append("🔒 **Sealed Types**: Using sealed classes/interfaces for type safety")

    if contains_any(code, "UseCase", "Interactor"):
        f.positives.append("⚙️ **Use Case Pattern**: Implementing business logic separation")

    if contains_any(code, "domain", "data", "presentation"):
        f.positives.append("🏛️ **Layered Architecture**: Following Clean Architecture layer structure")


def _check_solid(code: str, f: ReviewFindings) -> None:
    for block in _CLASS_BLOCK.findall(code):
        responsibilities = count_responsibilities(block, _RESPONSIBILITY_MARKERS)
        if len(responsibilities) > MAX_RESPONSIBILITIES:
            f.solid_violations.append(
                "🔴 **SRP Violation**: Class handles multiple responsibilities: "
                + ", ".join(responsibilities)
            )

    if "when" in code and "->" in code and "sealed" not in code:
        f.solid_violations.append(
            "🔴 **OCP Violation**: When expressions without sealed classes - not open for extension"
        )
        f.suggestions.append("Consider using sealed classes with when expressions for extensibility")

    if "override" in code and "TODO()" in code:
        f.solid_violations.append("🔴 **LSP Violation**: Override with TODO() breaks substitutability")

    for block in _INTERFACE_BLOCK.findall(code):
        method_count = len(re.findall(r"fun\s+", block))
        if method_count > MAX_PROTOCOL_METHODS:
            f.solid_violations.append(
                f"🔴 **ISP Violation**: Interface with {method_count} methods - "
                "consider breaking into smaller interfaces"
            )

    if "import android" in code and "interface" not in code and "@Inject" not in code:
        f.suggestions.append(
            "Consider using interfaces and dependency injection to depend on abstractions"
        )


def _check_null_handling(code: str, f: ReviewFindings) -> None:
    if "!!" in code:
        f.clean_code_issues.append(
            "⚠️ **Not-null Assertion**: Using '!!' can cause crashes - use safe calls or proper null handling"
        )
    if "?." in code and "let" in code:
        f.positives.append("✅ **Safe Calls**: Using safe call operator and let for null safety")
    if "try {" in code and "catch" in code:
        f.positives.append("✅ **Error Handling**: Using proper try-catch error handling")


def _check_kotlin_practices(code: str, f: ReviewFindings) -> None:
    if "data class" in code:
        f.positives.append("📦 **Data Classes**: Using data classes for immutable data structures")

    if "?" in code and "?." in code:
        f.positives.append("🛡️ **Null Safety**: Using Kotlin's null safety features")

    check_immutability(code, f, immutable="val")

    if "fun " in code and "." in code and "()" in code:
        f.positives.append("🔧 **Extension Functions**: Using extension functions for clean code")

    if "suspend" in code and "coroutine" in code:
        f.positives.append("⚡ **Coroutines**: Using Kotlin coroutines for asynchronous operations")
        if "Dispatchers.Main" in code and "withContext" in code:
            f.positives.append("🎯 **Dispatcher Usage**: Proper coroutine dispatcher usage")

    # Android
    if contains_any(code, "ViewBinding", "DataBinding"):
        f.positives.append("📱 **Modern UI**: Using ViewBinding/DataBinding instead of findViewById")
    if contains_any(code, "LifecycleOwner", "observe"):
        f.positives.append("🔄 **Lifecycle Aware**: Using lifecycle-aware components")


def _check_performance(code: str, f: ReviewFindings) -> None:
    if "lazy" in code:
        f.positives.append("⚡ **Lazy Initialization**: Using lazy properties for performance optimization")
    if contains_any(code, "WeakReference", "lifecycle"):
        f.positives.append("💾 **Memory Management**: Using weak references or lifecycle awareness")
    if "mutableListOf" in code and "add" in code and "for" in code:
        f.suggestions.append(
            "🚀 **Performance**: Consider using ArrayList with initial capacity for bulk operations"
        )


def _check_security(code: str, f: ReviewFindings) -> None:
    if "SharedPreferences" in code and contains_any(code, "password", "token", "key"):
        f.issues.append(
            "🔐 **Security Risk**: Sensitive data in SharedPreferences - "
            "use EncryptedSharedPreferences or Keystore"
        )
    if contains_any(code, "EncryptedSharedPreferences", "Keystore"):
        f.positives.append("🔐 **Secure Storage**: Using encrypted storage for sensitive data")
    if "http://" in code and "localhost" not in code:
        f.issues.append("🔒 **Security**: Using HTTP instead of HTTPS for network requests")
    if "EditText" in code and "validate" not in code:
        f.suggestions.append("🛡️ **Input Validation**: Consider validating user input before processing")


def analyze_kotlin_code(code: str, focus: str | None = None) -> str:
    """Run the Kotlin checklist and return the rendered report."""
    f = ReviewFindings()

    if focus in ARCHITECTURE_FOCUS:
        _check_architecture(code, f)
    if focus in SOLID_FOCUS:
        _check_solid(code, f)
    if focus in CLEAN_CODE_FOCUS:
        check_clean_code(
            code, f,
            function_keyword="fun",
            binding_keywords=("val", "var"),
            short_name_allowlist={"id", "ui", "db"},
        )
        _check_null_handling(code, f)
    _check_kotlin_practices(code, f)
    if focus in PERFORMANCE_FOCUS:
        _check_performance(code, f)
    if focus in SECURITY_FOCUS:
        _check_security(code, f)

    return render_report(f, language="Kotlin", focus=focus, recommendations=RECOMMENDATIONS)


async def kotlin_code_review_handler(params: CodeReviewInput) -> ToolResponse:
    try:
        analysis = analyze_kotlin_code(params.code, params.focus)
    except Exception as exc:
        logger.warning("Kotlin code review failed: %s", exc)
        return text_response(f"❌ **Error during Kotlin code review:** {error_message(exc)}")
    return text_response(f"🤖 **Kotlin Clean Code & Architecture Review**\n\n{analysis}")
