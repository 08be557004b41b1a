"""Web-scraping tools backed by the Firecrawl API.

``web_scraper``, ``url_analyzer`` and ``batch_scraper`` reshape a single
scrape (or a handful of concurrent ones) into a readable report.
``research_assistant`` scrapes the official Swift and Kotlin sites and
ranks them against a query with plain keyword counting.
"""

from __future__ import annotations

import asyncio
import logging
import math
import re
from typing import Any, Callable

from toolhub.schemas.tools import (
    MAX_BATCH_URLS,
    BatchScraperInput,
    ResearchInput,
    ToolResponse,
    UrlAnalyzerInput,
    WebScraperInput,
    text_response,
)
from toolhub.shared.firecrawl import FirecrawlClient
from toolhub.tools.base import ToolConfig, ToolHandler, error_message

logger = logging.getLogger(__name__)

ScraperProvider = Callable[[], FirecrawlClient]
"""Returns the shared client; raises ``ConfigurationError`` without an API key."""

WEB_SCRAPER = ToolConfig(
    name="web_scraper",
    description="Extract clean, readable content from websites using advanced web scraping",
    input_model=WebScraperInput,
)
URL_ANALYZER = ToolConfig(
    name="url_analyzer",
    description="Analyze websites for SEO, metadata, and technical insights",
    input_model=UrlAnalyzerInput,
)
BATCH_SCRAPER = ToolConfig(
    name="batch_scraper",
    description=f"Scrape multiple URLs simultaneously (up to {MAX_BATCH_URLS} URLs)",
    input_model=BatchScraperInput,
)
RESEARCH_ASSISTANT = ToolConfig(
    name="research_assistant",
    description=(
        "Intelligent Swift/Kotlin research assistant that scrapes official documentation "
        "and finds the most relevant content based on user queries"
    ),
    input_model=ResearchInput,
)

MAX_CONTENT_CHARS = 8000
BATCH_PREVIEW_CHARS = 1000
WORDS_PER_MINUTE = 200

# Metadata keys shown in dedicated sections of the URL analysis report.
_REPORTED_METADATA = {
    "title", "description", "language", "statusCode", "sourceURL", "favicon",
    "ogTitle", "ogDescription", "ogImage", "ogUrl",
}

DOC_SITES = [
    {"name": "Swift.org", "url": "https://www.swift.org/", "language": "swift"},
    {"name": "KotlinLang.org", "url": "https://kotlinlang.org/", "language": "kotlin"},
]

_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def _present(value: Any, yes: str = "✅ Present", no: str = "❌ Missing") -> str:
    return yes if value else no


# ----------------------------------------------------------------------
# web_scraper
# ----------------------------------------------------------------------


def make_web_scraper_handler(get_scraper: ScraperProvider, *, wait_for: int = 2000) -> ToolHandler:
    async def handle(params: WebScraperInput) -> ToolResponse:
        url = params.url
        try:
            result = await get_scraper().scrape(
                url, only_main_content=params.only_main_content, wait_for=wait_for,
            )
        except Exception as exc:
            logger.warning("web_scraper failed for %s: %s", url, exc)
            return text_response(f"❌ **Error scraping website:** {error_message(exc)}")

        if not (result.success and result.markdown):
            return text_response(
                f"❌ **Failed to scrape:** {url}\nError: {result.error or 'Unknown error'}"
            )

        content = result.markdown
        truncated = "\n\n...(content truncated)" if len(content) > MAX_CONTENT_CHARS else ""
        return text_response(
            f"🌐 **Website Content Extracted**\n\n**URL:** {url}\n**Title:** {result.title}\n\n"
            f"**Content:**\n{content[:MAX_CONTENT_CHARS]}{truncated}"
        )

    return handle


# ----------------------------------------------------------------------
# url_analyzer
# ----------------------------------------------------------------------


def build_analysis_report(url: str, metadata: dict[str, Any], content: str) -> str:
    """Render the SEO / metadata report for one scraped page."""
    word_count = len(content.split())
    reading_time = math.ceil(word_count / WORDS_PER_MINUTE)

    extra = "\n".join(
        f"• {key}: {value}" for key, value in metadata.items() if key not in _REPORTED_METADATA
    ) or "None"

    return f"""🔍 **Website Analysis Report**

**URL:** {url}
**Title:** {metadata.get('title') or 'No title found'}
**Description:** {metadata.get('description') or 'No meta description'}

**SEO Analysis:**
• Title: {_present(metadata.get('title'))}
• Meta Description: {_present(metadata.get('description'))}
• H1 Heading: {_present('# ' in content, '✅ Found', '❌ Not found')}
• H2 Headings: {_present('## ' in content, '✅ Found', '❌ Not found')}
• Internal Links: {_present('[' in content, '✅ Found', '❌ None found')}

**Content Metrics:**
• Word Count: {word_count}
• Estimated Reading Time: {reading_time} minute(s)
• Language: {metadata.get('language') or 'Not specified'}

**Technical Details:**
• Status Code: {metadata.get('statusCode') or 'Unknown'}
• Source URL: {metadata.get('sourceURL') or url}
• Favicon: {_present(metadata.get('favicon'))}

**Open Graph:**
• OG Title: {metadata.get('ogTitle') or 'Not set'}
• OG Description: {metadata.get('ogDescription') or 'Not set'}
• OG Image: {_present(metadata.get('ogImage'))}
• OG URL: {metadata.get('ogUrl') or 'Not set'}

**Additional Metadata:**
{extra}"""


def make_url_analyzer_handler(get_scraper: ScraperProvider, *, wait_for: int = 2000) -> ToolHandler:
    async def handle(params: UrlAnalyzerInput) -> ToolResponse:
        url = params.url
        try:
            result = await get_scraper().scrape(url, only_main_content=False, wait_for=wait_for)
        except Exception as exc:
            logger.warning("url_analyzer failed for %s: %s", url, exc)
            return text_response(f"❌ **Error analyzing website:** {error_message(exc)}")

        if not result.success:
            return text_response(
                f"❌ **Failed to analyze:** {url}\nError: {result.error or 'Unknown error'}"
            )
        return text_response(build_analysis_report(url, result.metadata, result.markdown))

    return handle


# ----------------------------------------------------------------------
# batch_scraper
# ----------------------------------------------------------------------


async def _scrape_entry(
    scraper: FirecrawlClient, index: int, url: str, *, only_main_content: bool, wait_for: int,
) -> str:
    try:
        result = await scraper.scrape(url, only_main_content=only_main_content, wait_for=wait_for)
    except Exception as exc:
        logger.warning("batch_scraper entry %d (%s) failed: %s", index, url, exc)
        return f"**{index}. Error**\n**URL:** {url}\n**Error:** {error_message(exc)}\n"

    if result.success and result.markdown:
        content = result.markdown
        more = "...(truncated)" if len(content) > BATCH_PREVIEW_CHARS else ""
        return (
            f"**{index}. {result.title}**\n**URL:** {url}\n"
            f"**Content Preview:**\n{content[:BATCH_PREVIEW_CHARS]}{more}\n"
        )
    return f"**{index}. Failed**\n**URL:** {url}\n**Error:** {result.error or 'Unknown error'}\n"


def make_batch_scraper_handler(get_scraper: ScraperProvider, *, wait_for: int = 2000) -> ToolHandler:
    async def handle(params: BatchScraperInput) -> ToolResponse:
        urls = params.urls
        if not urls:
            return text_response("❌ **Error:** No URLs provided")
        if len(urls) > MAX_BATCH_URLS:
            return text_response(
                f"❌ **Error:** Maximum {MAX_BATCH_URLS} URLs allowed for batch scraping"
            )

        try:
            scraper = get_scraper()
            entries = await asyncio.gather(*(
                _scrape_entry(
                    scraper, i, url,
                    only_main_content=params.only_main_content, wait_for=wait_for,
                )
                for i, url in enumerate(urls, 1)
            ))
        except Exception as exc:
            logger.warning("batch_scraper failed: %s", exc)
            return text_response(f"❌ **Error in batch scraping:** {error_message(exc)}")

        return text_response(
            f"📊 **Batch Scraping Results**\n\n**URLs Processed:** {len(urls)}\n\n"
            + "\n---\n\n".join(entries)
        )

    return handle


# ----------------------------------------------------------------------
# research_assistant
# ----------------------------------------------------------------------


def query_keywords(query: str) -> list[str]:
    return [word for word in query.lower().split(" ") if len(word) > 2]


def score_content(content: str, keywords: list[str]) -> int:
    lowered = content.lower()
    return sum(lowered.count(keyword) for keyword in keywords)


def most_relevant_line(content: str, keywords: list[str]) -> str:
    """First line hitting two or more keywords, else the first hitting one (300-char preview)."""
    section = ""
    for line in content.split("\n"):
        if not line.strip():
            continue
        lowered = line.lower()
        hits = sum(1 for keyword in keywords if keyword in lowered)
        if hits > 0 and (not section or hits > 1):
            section = line[:300] + ("..." if len(line) > 300 else "")
            if hits > 1:
                break
    return section


def related_links(content: str, keywords: list[str], *, limit: int = 5) -> list[str]:
    """Keyword-bearing markdown links among the first ``limit`` links on the page."""
    links = [m.group(0) for m in _MARKDOWN_LINK.finditer(content)][:limit]
    return [link for link in links if any(k in link.lower() for k in keywords)]


def make_research_handler(get_scraper: ScraperProvider, *, wait_for: int = 2000) -> ToolHandler:
    async def handle(params: ResearchInput) -> ToolResponse:
        query, language = params.query, params.language
        try:
            scraper = get_scraper()
        except Exception as exc:
            return text_response(f"❌ **Research Assistant Error:** {error_message(exc)}")

        log: list[str] = [
            "🔍 **Starting Research Process**",
            f"**Query:** {query}",
            f"**Language Focus:** {language}",
            "\n---\n",
            "📡 **Scraping Official Documentation Sites**",
        ]

        sites = [s for s in DOC_SITES if language in (s["language"], "both")]
        scraped: list[dict[str, str]] = []
        for site in sites:
            log.append(
                f"\n🌐 **Scraping {site['name']}** - Looking for documentation and relevant sections..."
            )
            try:
                result = await scraper.scrape(site["url"], only_main_content=True, wait_for=wait_for)
            except Exception as exc:
                logger.warning("research_assistant could not scrape %s: %s", site["url"], exc)
                log.append(f"❌ **Error scraping {site['name']}** - {error_message(exc)}")
                continue
            if result.success and result.markdown:
                scraped.append({**site, "content": result.markdown})
                log.append(
                    f"✅ **Successfully scraped {site['name']}** - "
                    f"Found {len(result.markdown)} characters of content"
                )
            else:
                log.append(
                    f"❌ **Failed to scrape {site['name']}** - {result.error or 'Unknown error'}"
                )

        if not scraped:
            return text_response(
                "❌ **Research Failed:** Could not scrape any documentation sites. "
                "Please try again later."
            )

        log.append("\n🧠 **Analyzing Content for Relevance**")
        log.append(f'Looking for content related to: "{query}"')

        keywords = query_keywords(query)
        best: dict[str, Any] | None = None
        for site in scraped:
            score = score_content(site["content"], keywords)
            if score > 0 and (best is None or score > best["score"]):
                best = {
                    "site": site,
                    "score": score,
                    "section": most_relevant_line(site["content"], keywords),
                }
            log.append(f"📊 **{site['name']}**: {score} keyword matches found")

        log.append("\n🎯 **Research Results**")
        if best is None:
            log.append("❌ **No specific matches found** for your query in the scraped content.")
            log.append("\n**Available Content:**")
            for site in scraped:
                log.append(
                    f"• **{site['name']}** ({site['language'].upper()}): {site['content'][:200]}..."
                )
            return text_response("\n".join(log))

        site, section = best["site"], best["section"]
        lang = site["language"].upper()
        log.append(f"\n**Best Match Found:** {site['name']} ({lang})")
        log.append(f"**Relevance Score:** {best['score']} keyword matches")
        log.append(f"**URL:** {site['url']}")

        log.append("\n📋 **Key Information Found:**")
        if section:
            log.append("\n**Relevant Content Preview:**")
            log.append(section)

        links = related_links(site["content"], keywords)
        if links:
            log.append("\n**Related Documentation Links:**")
            log.extend(f"• {link}" for link in links)

        log.append("\n**Summary:**")
        log.append(f"• **Language:** {lang}")
        log.append(f"• **Source:** {site['name']}")
        log.append(f'• **Topic Relevance:** {best["score"]} matches for "{query}"')
        status = "Found relevant content" if section else "General information available"
        log.append(f"• **Documentation Status:** {status}")
        log.append(f"• **Next Steps:** Visit {site['url']} for complete documentation")

        return text_response("\n".join(log))

    return handle
