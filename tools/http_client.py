"""
HTTP client adapter: one GET per call with timeout and default headers.
Non-2xx responses are returned to the caller; timeouts and connection failures raise NetworkError.
No retry, no caching, a fresh client per call.
"""
import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from app.config import DEFAULT_USER_AGENT
from tools.base import ErrorKind, FetchResponse, NetworkError, ToolError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def default_headers(user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


def _validate_url(url: Optional[str]) -> str:
    """Require an absolute http(s) URL. Reachability is not checked."""
    if not url or not isinstance(url, str):
        raise ToolError(ErrorKind.INVALID_INPUT, "URL is required.")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ToolError(ErrorKind.INVALID_INPUT, f"Not an absolute http(s) URL: {url}")
    return url


def fetch(
    url: str,
    headers: Optional[dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    params: Optional[dict[str, str]] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> FetchResponse:
    """Single GET. Returns status and body for any HTTP status; raises NetworkError otherwise."""
    url = _validate_url(url)
    try:
        with httpx.Client(
            timeout=timeout,
            headers=headers if headers is not None else default_headers(),
            follow_redirects=True,
            transport=transport,
        ) as client:
            r = client.get(url, params=params)
    except httpx.TimeoutException as e:
        logger.warning("HTTP timeout for %s: %s", url, e)
        raise NetworkError("timeout", str(e)) from e
    except httpx.RequestError as e:
        logger.warning("HTTP request error for %s: %s", url, e)
        raise NetworkError("connection", str(e)) from e
    if not r.is_success:
        logger.info("HTTP %s returned status %s", url, r.status_code)
    return FetchResponse(status=r.status_code, body=r.text, url=str(r.url))
