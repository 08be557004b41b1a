"""Typer CLI: run the MCP server or the web app, or call single tools locally."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from toolhub.config import load_config, warn_missing_keys
from toolhub.schemas.config import ServerConfig

# Load .env file from the working directory (if it exists)
load_dotenv()

app = typer.Typer(
    name="toolhub",
    help="toolhub: MCP server with code review, Python execution, web scraping and an AI agent.",
    no_args_is_help=True,
)
console = Console()
# stdout carries the protocol for the stdio transport
err_console = Console(stderr=True)

_TRANSPORTS = ("stdio", "sse", "streamable-http")
_LANGUAGES = {".swift": "swift", ".kt": "kotlin", ".kts": "kotlin"}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load(config: Path | None) -> ServerConfig:
    try:
        return load_config(config)
    except Exception as exc:
        err_console.print(f"[red]Config validation failed:[/] {escape(str(exc))}")
        raise typer.Exit(code=1)


def _registry(cfg: ServerConfig, *, dry_run: bool = False):
    from toolhub.tools.registry import ToolRegistry

    if dry_run:
        from toolhub.shared.chat_client import DryRunClient
        return ToolRegistry(cfg, chat_client=DryRunClient())
    return ToolRegistry(cfg)


def _invoke(cfg: ServerConfig, name: str, arguments: dict[str, Any], *, dry_run: bool = False) -> str:
    """Run one tool to completion and return its text."""

    async def run() -> str:
        registry = _registry(cfg, dry_run=dry_run)
        try:
            response = await registry.invoke(name, arguments)
        finally:
            await registry.aclose()
        return response.text

    try:
        return asyncio.run(run())
    except ValidationError as exc:
        console.print(f"[red]Invalid arguments for {name}:[/] {escape(str(exc))}")
        raise typer.Exit(code=1)


@app.command()
def mcp(
    transport: str = typer.Option("stdio", "--transport", "-t", help="stdio, sse or streamable-http"),
    config: Path = typer.Option(None, "--config", "-c", help="Path to toolhub.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Serve every tool over the Model Context Protocol."""
    _setup_logging(verbose)
    if transport not in _TRANSPORTS:
        err_console.print(f"[red]Unknown transport:[/] {transport} (choose from {', '.join(_TRANSPORTS)})")
        raise typer.Exit(code=1)

    cfg = _load(config)
    warn_missing_keys(cfg)

    from toolhub.server.mcp import run_mcp_server

    err_console.print(f"[bold]Starting MCP server[/] on {transport}")
    run_mcp_server(_registry(cfg), transport=transport)


@app.command()
def web(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default from config)"),
    config: Path = typer.Option(None, "--config", "-c", help="Path to toolhub.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Answer chat requests offline (no OpenAI calls)."),
) -> None:
    """Serve the chat page and HTTP tool API."""
    _setup_logging(verbose)
    cfg = _load(config)
    warn_missing_keys(cfg)

    import uvicorn

    from toolhub.server.web import create_app

    if dry_run:
        console.print("[yellow]DRY-RUN mode: chat answers are echoed, no OpenAI calls.[/]")

    bind_host = host or cfg.host
    bind_port = port or cfg.port
    console.print(f"[bold]Web front-end:[/] http://{bind_host}:{bind_port}")
    uvicorn.run(create_app(registry=_registry(cfg, dry_run=dry_run)), host=bind_host, port=bind_port)


@app.command()
def info() -> None:
    """List the available tools."""
    from toolhub.tools.registry import ToolRegistry

    table = Table(title="toolhub tools")
    table.add_column("Tool", style="bold cyan", no_wrap=True)
    table.add_column("Description")
    for tool in ToolRegistry(ServerConfig()).configs():
        table.add_row(tool.name, tool.description)
    console.print(table)


@app.command()
def review(
    file: Path = typer.Argument(..., help="Swift (.swift) or Kotlin (.kt, .kts) source file"),
    language: str = typer.Option(None, "--language", "-l", help="swift or kotlin (default: from extension)"),
    focus: str = typer.Option(None, "--focus", "-f", help="performance, memory, security, architecture, clean_code, solid_principles"),
) -> None:
    """Review a Swift or Kotlin file with the static reviewers."""
    if not file.exists():
        console.print(f"[red]File not found:[/] {file}")
        raise typer.Exit(code=1)

    language = language or _LANGUAGES.get(file.suffix.lower())
    if language not in ("swift", "kotlin"):
        console.print("[red]Cannot tell the language.[/] Pass --language swift or --language kotlin.")
        raise typer.Exit(code=1)

    text = _invoke(ServerConfig(), f"{language}_code_review", {"code": file.read_text(), "focus": focus})
    console.print(Markdown(text))


@app.command()
def run(
    file: Path = typer.Argument(..., help="Python script to execute"),
    package: list[str] = typer.Option([], "--package", "-p", help="Extra package to pip install (repeatable)."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to toolhub.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Execute a Python script the way the python_exec tool does."""
    _setup_logging(verbose)
    if not file.exists():
        console.print(f"[red]File not found:[/] {file}")
        raise typer.Exit(code=1)

    cfg = _load(config)
    text = _invoke(cfg, "python_exec", {"code": file.read_text(), "packages": list(package)})
    console.print(text, markup=False, highlight=False)


@app.command()
def scrape(
    url: str = typer.Argument(..., help="URL to scrape"),
    analyze: bool = typer.Option(False, "--analyze", "-a", help="Run the SEO/metadata analysis instead."),
    full_page: bool = typer.Option(False, "--full-page", help="Keep navigation and other non-main content."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to toolhub.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Scrape or analyze one URL through Firecrawl."""
    _setup_logging(verbose)
    cfg = _load(config)
    if analyze:
        text = _invoke(cfg, "url_analyzer", {"url": url})
    else:
        text = _invoke(cfg, "web_scraper", {"url": url, "only_main_content": not full_page})
    console.print(Markdown(text))


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Question or task for the agent"),
    model: str = typer.Option(None, "--model", "-m", help="OpenAI model (default from config)"),
    no_tools: bool = typer.Option(False, "--no-tools", help="Disable keyword tool dispatch."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to toolhub.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Skip the OpenAI call; still runs dispatched tools."),
) -> None:
    """Send one prompt to the agent tool."""
    _setup_logging(verbose)
    cfg = _load(config)
    if dry_run:
        console.print("[yellow]DRY-RUN mode: no OpenAI calls will be made.[/]\n")

    text = _invoke(
        cfg, "agent", {"prompt": prompt, "model": model, "use_tools": not no_tools}, dry_run=dry_run,
    )
    console.print(Markdown(text))


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", help="Path to toolhub.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file."""
    _setup_logging(verbose)
    cfg = _load(config)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  OpenAI key:     {'set' if cfg.openai_api_key else '(missing)'}")
    console.print(f"  Firecrawl key:  {'set' if cfg.firecrawl_api_key else '(missing)'}")
    console.print(f"  Firecrawl URL:  {cfg.firecrawl_api_url}")
    console.print(f"  Default model:  {cfg.default_model}")
    console.print(f"  Python:         {cfg.python_executable} (timeout {cfg.python_timeout:g}s)")
    console.print(f"  Web:            {cfg.host}:{cfg.port}")
