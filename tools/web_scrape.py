"""
Web scrape tool: fetch a URL and return the page's visible text (no truncation).
Non-2xx pages are reported as UpstreamError unless lenient parsing is enabled.
"""
import logging
from typing import Optional

from pydantic import BaseModel, Field

from app.config import Settings
from tools.base import ErrorKind, ToolError, ToolResult, ToolSpec
from tools.html_extract import extract_text
from tools.http_client import DEFAULT_TIMEOUT, default_headers, fetch

logger = logging.getLogger(__name__)

TOOL_NAME = "scrape_webpage"


class ScrapeWebpageInput(BaseModel):
    """Input for page scraping: absolute http(s) URL."""
    weburl: str = Field(description="Absolute http(s) URL of the page to read")


def scrape_webpage_impl(
    weburl: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    headers: Optional[dict[str, str]] = None,
    allow_error_status: bool = False,
) -> ToolResult:
    """Fetch and strip a page to plain text. Used by the tool and tests."""
    try:
        response = fetch(weburl, headers=headers, timeout=timeout)
        if not response.is_success and not allow_error_status:
            return ToolResult.error(
                ErrorKind.UPSTREAM_ERROR, f"Page returned status code: {response.status}"
            )
        return ToolResult.ok(extract_text(response.body))
    except ToolError as e:
        return ToolResult.from_exception(e)
    except Exception as e:
        logger.warning("scrape_error: %s", str(e)[:200])
        return ToolResult.error(ErrorKind.UNKNOWN, f"Failed to scrape page: {e}")


def get_scrape_webpage_spec(settings: Settings) -> ToolSpec:
    def handler(weburl: str) -> ToolResult:
        return scrape_webpage_impl(
            weburl,
            timeout=settings.http_timeout,
            headers=default_headers(settings.user_agent),
            allow_error_status=settings.scrape_allow_error_status,
        )

    return ToolSpec(
        name=TOOL_NAME,
        description=(
            "Read a web page. Use when you have a specific URL and need its content. "
            "Returns the page's visible text."
        ),
        args_schema=ScrapeWebpageInput,
        handler=handler,
    )
