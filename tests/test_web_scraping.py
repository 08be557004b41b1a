"""Tests for the Firecrawl-backed scraping tools."""

from __future__ import annotations

import json

import httpx
import pytest

from conftest import scrape_payload
from toolhub.schemas.tools import BatchScraperInput, ResearchInput, UrlAnalyzerInput, WebScraperInput
from toolhub.shared.firecrawl import ConfigurationError, FirecrawlClient
from toolhub.tools.web_scraping import (
    build_analysis_report,
    make_batch_scraper_handler,
    make_research_handler,
    make_url_analyzer_handler,
    make_web_scraper_handler,
    most_relevant_line,
    query_keywords,
    related_links,
    score_content,
)


def _missing_key() -> FirecrawlClient:
    raise ConfigurationError("FIRECRAWL_API_KEY environment variable is not set")


def _routes(pages: dict[str, httpx.Response]):
    """Transport handler answering by the ``url`` in the scrape request body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return pages[json.loads(request.content)["url"]]

    return handler


class TestWebScraper:
    @pytest.mark.asyncio
    async def test_success(self, make_firecrawl) -> None:
        fc = make_firecrawl(lambda r: httpx.Response(200, json=scrape_payload("Body text", title="Example")))
        handler = make_web_scraper_handler(lambda: fc)
        response = await handler(WebScraperInput(url="https://example.com"))
        assert response.text == (
            "🌐 **Website Content Extracted**\n\n**URL:** https://example.com\n**Title:** Example\n\n"
            "**Content:**\nBody text"
        )

    @pytest.mark.asyncio
    async def test_truncates_long_content(self, make_firecrawl) -> None:
        fc = make_firecrawl(lambda r: httpx.Response(200, json=scrape_payload("q" * 9000)))
        response = await make_web_scraper_handler(lambda: fc)(WebScraperInput(url="https://example.com"))
        assert "**Title:** No title" in response.text
        assert response.text.endswith("q" * 10 + "\n\n...(content truncated)")
        assert response.text.count("q") == 8000

    @pytest.mark.asyncio
    async def test_api_failure(self, make_firecrawl) -> None:
        fc = make_firecrawl(lambda r: httpx.Response(200, json={"success": False, "error": "Blocked"}))
        response = await make_web_scraper_handler(lambda: fc)(WebScraperInput(url="https://example.com"))
        assert response.text == "❌ **Failed to scrape:** https://example.com\nError: Blocked"

    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        response = await make_web_scraper_handler(_missing_key)(WebScraperInput(url="https://example.com"))
        assert response.text.startswith("❌ **Error scraping website:** FIRECRAWL_API_KEY")

    @pytest.mark.asyncio
    async def test_transport_error(self, make_firecrawl) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        fc = make_firecrawl(handler)
        response = await make_web_scraper_handler(lambda: fc)(WebScraperInput(url="https://example.com"))
        assert response.text == "❌ **Error scraping website:** connection refused"


class TestUrlAnalyzer:
    def test_report_sections(self) -> None:
        metadata = {
            "title": "Example",
            "description": "An example page",
            "statusCode": 200,
            "ogTitle": "Example OG",
            "keywords": "swift, kotlin",
        }
        report = build_analysis_report("https://example.com", metadata, "# Title\n\nSome words here")
        assert report.startswith("🔍 **Website Analysis Report**")
        assert "• Title: ✅ Present" in report
        assert "• Meta Description: ✅ Present" in report
        assert "• H1 Heading: ✅ Found" in report
        assert "• H2 Headings: ❌ Not found" in report
        assert "• Internal Links: ❌ None found" in report
        assert "• Word Count: 5" in report
        assert "• Estimated Reading Time: 1 minute(s)" in report
        assert "• Status Code: 200" in report
        assert "• Source URL: https://example.com" in report
        assert "• OG Title: Example OG" in report
        assert "• OG Image: ❌ Missing" in report
        assert report.endswith("**Additional Metadata:**\n• keywords: swift, kotlin")

    def test_report_without_metadata(self) -> None:
        report = build_analysis_report("https://example.com", {}, "")
        assert "**Title:** No title found" in report
        assert "• Word Count: 0" in report
        assert "• Estimated Reading Time: 0 minute(s)" in report
        assert report.endswith("**Additional Metadata:**\nNone")

    @pytest.mark.asyncio
    async def test_scrapes_full_page(self, make_firecrawl) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=scrape_payload("## Section", title="Example"))

        fc = make_firecrawl(handler)
        response = await make_url_analyzer_handler(lambda: fc)(UrlAnalyzerInput(url="https://example.com"))
        assert bodies[0]["onlyMainContent"] is False
        assert "• H2 Headings: ✅ Found" in response.text

    @pytest.mark.asyncio
    async def test_failure(self, make_firecrawl) -> None:
        fc = make_firecrawl(lambda r: httpx.Response(500, json={"success": False}))
        response = await make_url_analyzer_handler(lambda: fc)(UrlAnalyzerInput(url="https://example.com"))
        assert response.text == "❌ **Failed to analyze:** https://example.com\nError: HTTP 500"


class TestBatchScraper:
    @pytest.mark.asyncio
    async def test_no_urls(self) -> None:
        response = await make_batch_scraper_handler(_missing_key)(BatchScraperInput(urls=[]))
        assert response.text == "❌ **Error:** No URLs provided"

    @pytest.mark.asyncio
    async def test_too_many_urls(self) -> None:
        urls = [f"https://example.com/{i}" for i in range(6)]
        response = await make_batch_scraper_handler(_missing_key)(BatchScraperInput(urls=urls))
        assert response.text == "❌ **Error:** Maximum 5 URLs allowed for batch scraping"

    @pytest.mark.asyncio
    async def test_mixed_results_keep_input_order(self, make_firecrawl) -> None:
        fc = make_firecrawl(_routes({
            "https://a.example": httpx.Response(200, json=scrape_payload("A" * 1200, title="Site A")),
            "https://b.example": httpx.Response(200, json={"success": False, "error": "boom"}),
        }))
        handler = make_batch_scraper_handler(lambda: fc)
        response = await handler(BatchScraperInput(urls=["https://a.example", "https://b.example"]))
        text = response.text

        assert text.startswith("📊 **Batch Scraping Results**\n\n**URLs Processed:** 2\n\n")
        assert "**1. Site A**\n**URL:** https://a.example" in text
        assert "A" * 1000 + "...(truncated)" in text
        assert "**2. Failed**\n**URL:** https://b.example\n**Error:** boom" in text
        assert text.index("**1.") < text.index("**2.")

    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        response = await make_batch_scraper_handler(_missing_key)(
            BatchScraperInput(urls=["https://example.com"])
        )
        assert response.text.startswith("❌ **Error in batch scraping:**")


SWIFT_PAGE = (
    "Swift concurrency with async and await\n"
    "[Concurrency](https://swift.org/concurrency)\n"
    "[Download](https://swift.org/download)"
)
KOTLIN_PAGE = "Kotlin coroutines for Android and server"


class TestResearchHelpers:
    def test_query_keywords_drop_short_words(self) -> None:
        assert query_keywords("How to use async in Swift") == ["how", "use", "async", "swift"]

    def test_score_counts_occurrences(self) -> None:
        assert score_content(SWIFT_PAGE, ["async", "await", "concurrency"]) == 5

    def test_most_relevant_line_prefers_multiple_hits(self) -> None:
        content = "Intro about async\nUsing async and await together\nMore await"
        assert most_relevant_line(content, ["async", "await"]) == "Using async and await together"

    def test_most_relevant_line_falls_back_to_first_hit(self) -> None:
        content = "Nothing here\nOnly async here\nAnd await here"
        assert most_relevant_line(content, ["async", "await"]) == "Only async here"

    def test_most_relevant_line_truncates(self) -> None:
        line = "async " * 100
        assert most_relevant_line(line, ["async"]) == line[:300] + "..."

    def test_related_links(self) -> None:
        assert related_links(SWIFT_PAGE, ["concurrency"]) == [
            "[Concurrency](https://swift.org/concurrency)"
        ]


class TestResearchAssistant:
    @pytest.mark.asyncio
    async def test_best_match(self, make_firecrawl) -> None:
        fc = make_firecrawl(_routes({
            "https://www.swift.org/": httpx.Response(200, json=scrape_payload(SWIFT_PAGE)),
            "https://kotlinlang.org/": httpx.Response(200, json=scrape_payload(KOTLIN_PAGE)),
        }))
        handler = make_research_handler(lambda: fc)
        response = await handler(ResearchInput(query="async await concurrency"))
        text = response.text

        assert text.startswith("🔍 **Starting Research Process**\n**Query:** async await concurrency")
        assert "✅ **Successfully scraped Swift.org**" in text
        assert "✅ **Successfully scraped KotlinLang.org**" in text
        assert "📊 **KotlinLang.org**: 0 keyword matches found" in text
        assert "**Best Match Found:** Swift.org (SWIFT)" in text
        assert "**Relevance Score:** 5 keyword matches" in text
        assert "Swift concurrency with async and await" in text
        assert "• [Concurrency](https://swift.org/concurrency)" in text
        assert text.endswith("• **Next Steps:** Visit https://www.swift.org/ for complete documentation")

    @pytest.mark.asyncio
    async def test_language_filter(self, make_firecrawl) -> None:
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(json.loads(request.content)["url"])
            return httpx.Response(200, json=scrape_payload(KOTLIN_PAGE))

        fc = make_firecrawl(handler)
        await make_research_handler(lambda: fc)(ResearchInput(query="coroutines", language="kotlin"))
        assert requested == ["https://kotlinlang.org/"]

    @pytest.mark.asyncio
    async def test_no_matches_lists_available_content(self, make_firecrawl) -> None:
        fc = make_firecrawl(lambda r: httpx.Response(200, json=scrape_payload(KOTLIN_PAGE)))
        response = await make_research_handler(lambda: fc)(
            ResearchInput(query="zebra", language="kotlin")
        )
        assert "❌ **No specific matches found**" in response.text
        assert f"• **KotlinLang.org** (KOTLIN): {KOTLIN_PAGE}..." in response.text

    @pytest.mark.asyncio
    async def test_all_sites_fail(self, make_firecrawl) -> None:
        fc = make_firecrawl(lambda r: httpx.Response(503, text="down"))
        response = await make_research_handler(lambda: fc)(ResearchInput(query="async"))
        assert response.text == (
            "❌ **Research Failed:** Could not scrape any documentation sites. Please try again later."
        )

    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        response = await make_research_handler(_missing_key)(ResearchInput(query="async"))
        assert response.text == (
            "❌ **Research Assistant Error:** FIRECRAWL_API_KEY environment variable is not set"
        )
