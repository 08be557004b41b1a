"""Tests for the Kotlin code reviewer."""

from __future__ import annotations

import pytest

from toolhub.schemas.tools import CodeReviewInput
from toolhub.tools.code_review.kotlin import analyze_kotlin_code, kotlin_code_review_handler

CLEAN_KOTLIN = "data class User(val name: String)\n"


class TestAnalyzeKotlinCode:
    def test_clean_code_gets_excellent_rating(self) -> None:
        report = analyze_kotlin_code(CLEAN_KOTLIN)
        assert "🎉 **Excellent Clean Code!** Your Kotlin code" in report
        assert "📦 **Data Classes**" in report
        assert "🔒 **Immutability**: Favoring 'val' over 'var'" in report

    def test_not_null_assertion(self) -> None:
        report = analyze_kotlin_code("val user = repository.user!!")
        assert "⚠️ **Not-null Assertion**" in report

    def test_mostly_var_suggests_val(self) -> None:
        report = analyze_kotlin_code("var count = load()\nvar total = sum()\nvar label = text()")
        assert "Consider using 'val' instead of 'var'" in report

    def test_allowlisted_short_name(self) -> None:
        report = analyze_kotlin_code("val db = openDatabase()")
        assert "Variable 'db'" not in report

    def test_generic_name_suffix(self) -> None:
        report = analyze_kotlin_code("val userData = fetch()")
        assert "Variable 'userData' uses generic suffix" in report

    def test_when_without_sealed_is_ocp_violation(self) -> None:
        report = analyze_kotlin_code("fun label(x: Int) = when (x) { 1 -> \"one\" else -> \"many\" }")
        assert "🔴 **OCP Violation**: When expressions without sealed classes" in report

    def test_srp_violation(self) -> None:
        code = (
            "class UserManager(private val retrofit: Retrofit, private val database: RoomDatabase, "
            "private val prefs: SharedPreferences) {\n"
            "    fun load() = retrofit\n"
            "}\n"
        )
        report = analyze_kotlin_code(code)
        assert (
            "🔴 **SRP Violation**: Class handles multiple responsibilities: "
            "networking, data persistence, storage"
        ) in report

    def test_shared_preferences_secret_with_security_focus(self) -> None:
        code = 'prefs.edit().putString("token", token).apply() // SharedPreferences'
        report = analyze_kotlin_code(code, focus="security")
        assert report.startswith("**🎯 Focus Area: Security**")
        assert "🔐 **Security Risk**: Sensitive data in SharedPreferences" in report

    def test_hilt_injection_is_positive(self) -> None:
        report = analyze_kotlin_code(
            "class Repo @Inject constructor(private val api: Api)", focus="architecture",
        )
        assert "💉 **Dependency Injection**: Using Hilt/Dagger for DI" in report

    def test_empty_code(self) -> None:
        report = analyze_kotlin_code("")
        assert "🎉 **Excellent Clean Code!**" in report
        assert "Too Many Comments" not in report


class TestKotlinHandler:
    @pytest.mark.asyncio
    async def test_wraps_report(self) -> None:
        response = await kotlin_code_review_handler(CodeReviewInput(code=CLEAN_KOTLIN, focus="memory"))
        assert response.text.startswith("🤖 **Kotlin Clean Code & Architecture Review**\n\n")
        assert "**🎯 Focus Area: Memory**" in response.text
