"""Swift/iOS code review: a checklist of regex and substring heuristics."""

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
    name="swift_code_review",
    description=(
        "Comprehensive code review for Swift/iOS applications with clean architecture, "
        "SOLID principles, and best practices analysis"
    ),
    input_model=CodeReviewInput,
)

RECOMMENDATIONS = [
    "**MVVM + Clean Architecture**: Use ViewModels with Use Cases/Interactors",
    "**Repository Pattern**: Abstract data sources behind repositories",
    "**Dependency Injection**: Use protocols and constructor injection",
    "**SOLID Principles**: Follow Single Responsibility, Open/Closed, etc.",
    "**Protocol-Oriented**: Prefer protocols over inheritance",
    "**Value Types**: Use structs for immutable data models",
    "**Error Handling**: Implement proper Result types and error propagation",
    "**Testing**: Write unit tests for business logic and use cases",
]

_RESPONSIBILITY_MARKERS = {
    "networking": ("network", "URLSession"),
    "data persistence": ("CoreData", "SQLite"),
    "UI handling": ("@IBAction", "UIButton"),
    "storage": ("UserDefaults", "Keychain"),
    "validation": ("validation", "validate"),
}

_CLASS_BLOCK = re.compile(r"class\s+\w+[^{]*\{.*?(?=class|\Z)", re.DOTALL)
_PROTOCOL_BLOCK = re.compile(r"protocol\s+\w+[^{]*\{[^}]*\}")
_FORCE_UNWRAP = re.compile(r"!\s*(?![=!])")


def _check_architecture(code: str, f: ReviewFindings) -> None:
    if contains_any(code, "ViewModel", "ObservableObject"):
        f.positives.append("🏗️ **MVVM Pattern**: Using Model-View-ViewModel architecture")
        if "UIKit" in code and "@Published" in code:
            f.suggestions.append(
                "Consider using SwiftUI's native state management instead of mixing UIKit with Combine"
            )
        if "class" in code and "ViewModel" in code and contains_any(
            code, "URLSession", "CoreData", "UserDefaults"
        ):
            f.architecture_issues.append(
                "🏗️ **Architecture Violation**: ViewModel contains data access logic - consider Repository pattern"
            )

    if contains_any(code, "Repository", "DataSource"):
        f.positives.append("🗄️ **Repository Pattern**: Using repository for data abstraction")

    if "init(" in code and "protocol" in code:
        f.positives.append("💉 **Dependency Injection**: Using constructor injection")
    elif "class" in code and "=" in code and "()" in code:
        f.architecture_issues.append(
            "💉 **DI Missing**: Consider dependency injection instead of direct instantiation"
        )

    protocol_count = len(re.findall(r"protocol\s+\w+", code))
    if protocol_count:
        f.positives.append(
            f"🔌 **Protocol-Oriented**: Using {protocol_count} protocol(s) for abstraction"
        )

    if contains_any(code, "UseCase", "Interactor"):
        f.positives.append("⚙️ **Use Case Pattern**: Implementing business logic separation")


def _check_solid(code: str, f: ReviewFindings) -> None:
    for block in _CLASS_BLOCK.findall(code):
        responsibilities = count_responsibilities(block, _RESPONSIBILITY_MARKERS)
        if len(responsibilities) > MAX_RESPONSIBILITIES:
            f.solid_violations.append(
                "🔴 **SRP Violation**: Class handles multiple responsibilities: "
                + ", ".join(responsibilities)
            )

    if "switch" in code and "case" in code and "protocol" not in code:
        f.solid_violations.append(
            "🔴 **OCP Violation**: Switch statements without protocols - not open for extension"
        )
        f.suggestions.append(
            "Consider using protocol + extensions instead of switch statements for extensibility"
        )

    if "override" in code and "fatalError" in code:
        f.solid_violations.append("🔴 **LSP Violation**: Override with fatalError breaks substitutability")

    for block in _PROTOCOL_BLOCK.findall(code):
        method_count = len(re.findall(r"func\s+", block))
        if method_count > MAX_PROTOCOL_METHODS:
            f.solid_violations.append(
                f"🔴 **ISP Violation**: Protocol with {method_count} methods - "
                "consider breaking into smaller protocols"
            )

    if "import" in code and "UIKit" in code and "protocol" not in code:
        f.suggestions.append(
            "Consider using protocols to depend on abstractions rather than concrete UIKit classes"
        )


def _check_error_handling(code: str, f: ReviewFindings) -> None:
    if "try!" in code:
        f.clean_code_issues.append(
            "⚠️ **Forced Try**: Using 'try!' can cause crashes - use proper error handling"
        )
    if "try?" in code and "guard" not in code:
        f.suggestions.append("Consider using 'guard let' with 'try?' for better error handling flow")
    if "do {" in code and "try" in code and "catch" in code:
        f.positives.append("✅ **Error Handling**: Using proper do-catch error handling")


def _check_swift_practices(code: str, f: ReviewFindings) -> None:
    if "struct" in code and "mutating" in code:
        f.positives.append("🔧 **Value Types**: Using structs with mutating methods appropriately")

    check_immutability(code, f, immutable="let")

    if contains_any(code, "guard let", "if let"):
        f.positives.append("✅ **Safe Unwrapping**: Using safe optional unwrapping patterns")

    if "async" in code and "await" in code:
        f.positives.append("⚡ **Modern Concurrency**: Using async/await for asynchronous operations")
        if "Task {" in code and "@MainActor" not in code:
            f.suggestions.append("Consider using @MainActor for UI updates in async contexts")


def _check_performance(code: str, f: ReviewFindings) -> None:
    if "lazy var" in code:
        f.positives.append("⚡ **Lazy Loading**: Using lazy properties for performance optimization")
    if contains_any(code, "[weak self]", "[unowned self]"):
        f.positives.append("💾 **Memory Management**: Using weak/unowned references to prevent cycles")
    if "Array" in code and "append" in code and "for" in code:
        f.suggestions.append(
            "🚀 **Performance**: Consider using 'reserveCapacity()' before bulk array operations"
        )
    if "Dictionary" in code and "updateValue" in code:
        f.positives.append("📊 **Efficient Updates**: Using updateValue for dictionary modifications")


def _check_security(code: str, f: ReviewFindings) -> None:
    if "UserDefaults" in code and contains_any(code, "password", "token", "key"):
        f.issues.append("🔐 **Security Risk**: Sensitive data in UserDefaults - use Keychain Services")
    if contains_any(code, "Keychain", "SecItemAdd"):
        f.positives.append("🔐 **Secure Storage**: Using Keychain for sensitive data")
    if "http://" in code and "localhost" not in code:
        f.issues.append("🔒 **Security**: Using HTTP instead of HTTPS for network requests")
    if "URLSessionConfiguration" in code and "tlsMinimumSupportedProtocolVersion" in code:
        f.positives.append("🔒 **Network Security**: Configuring TLS protocol versions")
    if "String(" in code and "user" in code and "validate" not in code:
        f.suggestions.append("🛡️ **Input Validation**: Consider validating user input before processing")


def _check_unwrapping_and_swiftui(code: str, f: ReviewFindings) -> None:
    force_unwraps = _FORCE_UNWRAP.findall(code)
    if force_unwraps:
        f.issues.append(
            f"🚨 **Force Unwrapping** ({len(force_unwraps)} instances): "
            "Found `!` operators that could cause crashes"
        )
        f.suggestions.append(
            "Replace force unwraps with safe unwrapping: `guard let`, `if let`, or nil coalescing `??`"
        )

    if contains_any(code, "@State", "@Binding", "SwiftUI"):
        if "@State" in code and "private" not in code:
            f.issues.append("🏗️ **SwiftUI State**: `@State` properties should be private")
        if "@StateObject" in code and "@ObservedObject" in code:
            f.positives.append(
                "✅ **SwiftUI Data Flow**: Using both @StateObject and @ObservedObject appropriately"
            )
        if contains_any(code, "@Environment", "@EnvironmentObject"):
            f.positives.append("🌍 **Environment Usage**: Using SwiftUI environment for data injection")


def analyze_swift_code(code: str, focus: str | None = None) -> str:
    """Run the Swift checklist and return the rendered report."""
    f = ReviewFindings()

    if focus in ARCHITECTURE_FOCUS:
        _check_architecture(code, f)
    if focus in SOLID_FOCUS:
        _check_solid(code, f)
    if focus in CLEAN_CODE_FOCUS:
        check_clean_code(
            code, f,
            function_keyword="func",
            binding_keywords=("var", "let"),
            short_name_allowlist={"id", "ui", "os"},
        )
        _check_error_handling(code, f)
    _check_swift_practices(code, f)
    if focus in PERFORMANCE_FOCUS:
        _check_performance(code, f)
    if focus in SECURITY_FOCUS:
        _check_security(code, f)
    _check_unwrapping_and_swiftui(code, f)

    return render_report(f, language="Swift", focus=focus, recommendations=RECOMMENDATIONS)


async def swift_code_review_handler(params: CodeReviewInput) -> ToolResponse:
    try:
        analysis = analyze_swift_code(params.code, params.focus)
    except Exception as exc:
        logger.warning("Swift code review failed: %s", exc)
        return text_response(f"❌ **Error during Swift code review:** {error_message(exc)}")
    return text_response(f"📱 **Swift Clean Code & Architecture Review**\n\n{analysis}")
