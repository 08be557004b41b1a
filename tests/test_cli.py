"""Tests for the typer CLI commands that don't start a server."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from toolhub.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _clear_key_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("FIRECRAWL_API_KEY", raising=False)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "toolhub.yml"
    path.write_text(f"temp_dir: {tmp_path / 'scripts'}\npython_timeout: 60\n")
    return path


class TestInfo:
    def test_lists_tools(self) -> None:
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        for name in ("agent", "python_exec", "swift_code_review", "server_info"):
            assert name in result.output


class TestReview:
    def test_swift_file(self, tmp_path: Path) -> None:
        source = tmp_path / "View.swift"
        source.write_text("let name = user!.name\n")
        result = runner.invoke(app, ["review", str(source)])
        assert result.exit_code == 0
        assert "Swift Clean Code & Architecture Review" in result.output
        assert "Unwrapping" in result.output

    def test_language_override(self, tmp_path: Path) -> None:
        source = tmp_path / "snippet.txt"
        source.write_text("val user = repo.user!!\n")
        result = runner.invoke(app, ["review", str(source), "--language", "kotlin"])
        assert result.exit_code == 0
        assert "Kotlin Clean Code & Architecture Review" in result.output

    def test_unknown_language(self, tmp_path: Path) -> None:
        source = tmp_path / "snippet.txt"
        source.write_text("x")
        assert runner.invoke(app, ["review", str(source)]).exit_code == 1

    def test_invalid_focus(self, tmp_path: Path) -> None:
        source = tmp_path / "View.swift"
        source.write_text("let a = 1")
        assert runner.invoke(app, ["review", str(source), "--focus", "style"]).exit_code == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        assert runner.invoke(app, ["review", str(tmp_path / "nope.swift")]).exit_code == 1


class TestRun:
    def test_runs_script(self, tmp_path: Path, config_file: Path) -> None:
        script = tmp_path / "hello.py"
        script.write_text("print('hello from cli')\n")
        result = runner.invoke(app, ["run", str(script), "--config", str(config_file)])
        assert result.exit_code == 0
        assert "hello from cli" in result.output
        assert "Execution completed successfully" in result.output


class TestScrape:
    def test_without_key_reports_error(self) -> None:
        result = runner.invoke(app, ["scrape", "https://example.com"])
        assert result.exit_code == 0
        assert "Error scraping website" in result.output

    def test_invalid_url(self) -> None:
        assert runner.invoke(app, ["scrape", "example.com"]).exit_code == 1


class TestAsk:
    def test_dry_run(self) -> None:
        result = runner.invoke(app, ["ask", "hello", "--dry-run", "--no-tools"])
        assert result.exit_code == 0
        assert "gpt-4o-mini received: hello" in result.output

    def test_without_key(self) -> None:
        result = runner.invoke(app, ["ask", "hello"])
        assert result.exit_code == 0
        assert "OpenAI API key not configured" in result.output


class TestValidate:
    def test_valid(self, config_file: Path) -> None:
        result = runner.invoke(app, ["validate", "--config", str(config_file)])
        assert result.exit_code == 0
        assert "Config is valid!" in result.output

    def test_invalid(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yml"
        path.write_text("temperature: 9\n")
        assert runner.invoke(app, ["validate", "--config", str(path)]).exit_code == 1

    def test_missing(self, tmp_path: Path) -> None:
        assert runner.invoke(app, ["validate", "--config", str(tmp_path / "nope.yml")]).exit_code == 1


class TestMcp:
    def test_unknown_transport(self) -> None:
        assert runner.invoke(app, ["mcp", "--transport", "carrier-pigeon"]).exit_code == 1
