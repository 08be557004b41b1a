"""Static server information / help tool."""

from toolhub.schemas.tools import ServerInfoInput, ToolResponse, text_response
from toolhub.tools.base import ToolConfig

CONFIG = ToolConfig(
    name="server_info",
    description="Get information about available MCP tools and server capabilities",
    input_model=ServerInfoInput,
)

SERVER_INFO = """\
🤖 **MCP Server Information**

**Available Tools:**

🤖 **agent** - AI assistant with auto-tool detection
  • Comprehensive AI assistant using OpenAI's GPT models
  • Automatically detects and uses appropriate tools based on user input
  • Supports Swift/Kotlin code review, Python execution, research and web scraping
  • Keywords: general AI assistance, any question or task

📱 **swift_code_review** - Swift/iOS code analysis
  • Comprehensive review of Swift and iOS code
  • Detects force unwrapping, retain cycles, SwiftUI best practices
  • Focus areas: performance, memory, security, architecture, clean_code, solid_principles
  • Keywords: "swift", "ios", "review", "analyze"

🤖 **kotlin_code_review** - Kotlin/Android code analysis
  • Comprehensive review of Kotlin and Android code
  • Detects not-null assertions, SOLID violations, insecure storage
  • Focus areas: performance, memory, security, architecture, clean_code, solid_principles
  • Keywords: "kotlin", "android", "review", "analyze"

🐍 **python_exec** - Python code execution
  • Execute Python code with data science libraries
  • Pre-loaded when available: pandas, numpy, matplotlib, seaborn
  • Dynamic package installation support
  • Keywords: "python", "run", "execute", "data analysis"

🔍 **research_assistant** - Swift/Kotlin documentation research
  • Scrapes swift.org and kotlinlang.org and ranks them against your query
  • Highlights the most relevant content and documentation links
  • Keywords: "research", "documentation", "learn about"

🌐 **web_scraper** - Website content extraction
  • Clean, readable content extraction from websites
  • Powered by Firecrawl for reliable scraping
  • Handles JavaScript-rendered content
  • Keywords: "scrape", "extract", "website content"

🔍 **url_analyzer** - Website SEO and metadata analysis
  • Comprehensive website analysis for SEO insights
  • Metadata extraction, content metrics, technical details
  • Open Graph and social media optimization checks
  • Keywords: "analyze", "seo", "metadata", "website analysis"

📊 **batch_scraper** - Multiple URL processing
  • Process up to 5 URLs simultaneously
  • Parallel processing for efficiency
  • Ideal for comparing multiple websites
  • Keywords: "batch", "multiple urls", "scrape all"

**Environment Requirements:**
• OPENAI_API_KEY - Required for AI agent functionality
• FIRECRAWL_API_KEY - Required for web scraping features

**Usage Tips:**
• The AI agent can automatically select and use appropriate tools
• Provide code in markdown blocks for better tool detection
• Use specific keywords to trigger targeted tool usage
• The agent provides helpful suggestions and follow-up recommendations

**Server Status:** ✅ Operational
**Total Tools:** 9 (including this server_info tool)"""


async def server_info_handler(params: ServerInfoInput | None = None) -> ToolResponse:
    return text_response(SERVER_INFO)
