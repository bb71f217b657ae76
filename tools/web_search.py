"""
Web search tool: scrape an HTML search results page and return the top organic hits.
Ads are skipped; at most 3 results in upstream order.
Empty result sets return {"status": "No search results found."} rather than an error.
"""
import logging
from typing import Optional

from pydantic import BaseModel, Field

from app.config import Settings
from tools.base import ErrorKind, ToolError, ToolResult, ToolSpec
from tools.html_extract import MAX_SEARCH_RESULTS, extract_search_results
from tools.http_client import DEFAULT_TIMEOUT, default_headers, fetch

logger = logging.getLogger(__name__)

TOOL_NAME = "search_web"
DEFAULT_SEARCH_URL = "https://html.duckduckgo.com/html/"
NO_RESULTS = {"status": "No search results found."}


class WebSearchInput(BaseModel):
    """Input for web search. Query is the user's search question."""
    query: str = Field(min_length=1, description="Search query or question to look up on the web")


def _run_web_search(
    query: str,
    *,
    search_url: str = DEFAULT_SEARCH_URL,
    timeout: float = DEFAULT_TIMEOUT,
    headers: Optional[dict[str, str]] = None,
) -> ToolResult:
    """Search via the HTML endpoint and parse result blocks."""
    query = (query or "").strip()
    if not query:
        return ToolResult.error(ErrorKind.INVALID_INPUT, "Search query must not be empty.")
    try:
        response = fetch(
            search_url,
            headers=headers if headers is not None else default_headers(),
            timeout=timeout,
            params={"q": query},
        )
        if not response.is_success:
            return ToolResult.error(
                ErrorKind.UPSTREAM_ERROR, f"Search returned status code: {response.status}"
            )
        results = extract_search_results(response.body, limit=MAX_SEARCH_RESULTS)
    except ToolError as e:
        return ToolResult.from_exception(e)
    except Exception as e:
        logger.error("web_search_error: %s", str(e)[:200])
        return ToolResult.error(ErrorKind.UNKNOWN, f"Search failed: {e}")

    if not results:
        return ToolResult.ok(dict(NO_RESULTS))
    return ToolResult.ok([r.to_dict() for r in results])


def get_web_search_spec(settings: Settings) -> ToolSpec:
    def handler(query: str) -> ToolResult:
        return _run_web_search(
            query,
            search_url=settings.search_url,
            timeout=settings.http_timeout,
            headers=default_headers(settings.user_agent),
        )

    return ToolSpec(
        name=TOOL_NAME,
        description=(
            "Search the web for current information. Returns up to 3 results as JSON "
            "objects with title, link and snippet."
        ),
        args_schema=WebSearchInput,
        handler=handler,
    )
