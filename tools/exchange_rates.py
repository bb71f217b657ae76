"""
Exchange rate tool: latest rates for a base currency from an ExchangeRate-API style endpoint.
Input is validated (exactly 3 letters after trimming) before any network call and uppercased.
Upstream JSON is passed through untouched on success.
Timeouts, DNS and connection failures are reported with kind NetworkError; other faults
(malformed JSON, missing API key) are Unknown. Both render as {"error": "Failed to fetch exchange rates: ..."}.
"""
import json
import logging
from typing import Callable, Optional

from pydantic import BaseModel, Field

from app.config import Settings
from tools.base import CurrencyCode, ErrorKind, NetworkError, ToolError, ToolResult, ToolSpec
from tools.http_client import fetch

logger = logging.getLogger(__name__)

TOOL_NAME = "get_exchange_rates"
RATES_TIMEOUT = 10.0
DEFAULT_RATES_URL = "https://open.er-api.com/v6/latest/{code}"


class ExchangeRateInput(BaseModel):
    """Input for rate lookup: base currency code such as USD or EUR."""
    base_currency: str = Field(description="3-letter ISO currency code, e.g. USD")


def _default_endpoint(code: str) -> str:
    return DEFAULT_RATES_URL.format(code=code)


def _in_band_error(payload: object, code: CurrencyCode) -> Optional[ToolResult]:
    """v6 APIs report some failures as 200 with result=error."""
    if not isinstance(payload, dict) or payload.get("result") != "error":
        return None
    error_type = payload.get("error-type", "unknown")
    if error_type == "unsupported-code":
        return ToolResult.error(ErrorKind.NOT_FOUND, f"Currency code '{code}' not supported by the API")
    return ToolResult.error(ErrorKind.UPSTREAM_ERROR, f"API returned error: {error_type}")


def get_rates_impl(
    base_currency: str,
    endpoint: Callable[[str], str] = _default_endpoint,
) -> ToolResult:
    """Validate, query upstream, and map the status code onto a result."""
    try:
        code = CurrencyCode.parse(base_currency)
    except ToolError as e:
        return ToolResult.from_exception(e)

    try:
        response = fetch(endpoint(code.value), headers={"Accept": "application/json"}, timeout=RATES_TIMEOUT)
        if response.status == 404:
            return ToolResult.error(ErrorKind.NOT_FOUND, f"Currency code '{code}' not supported by the API")
        if response.status != 200:
            return ToolResult.error(ErrorKind.UPSTREAM_ERROR, f"API returned status code: {response.status}")
        payload = json.loads(response.body)
    except NetworkError as e:
        return ToolResult.error(ErrorKind.NETWORK_ERROR, f"Failed to fetch exchange rates: {e.message}")
    except Exception as e:
        logger.warning("exchange_rate_error: %s", str(e)[:200])
        return ToolResult.error(ErrorKind.UNKNOWN, f"Failed to fetch exchange rates: {e}")

    return _in_band_error(payload, code) or ToolResult.ok(payload)


def get_exchange_rates_spec(settings: Settings) -> ToolSpec:
    def handler(base_currency: str) -> ToolResult:
        return get_rates_impl(base_currency, endpoint=settings.exchange_rate_endpoint)

    return ToolSpec(
        name=TOOL_NAME,
        description=(
            "Get the latest exchange rates for a base currency. Input: 3-letter code "
            "(e.g. USD). Returns JSON with base_code and rates."
        ),
        args_schema=ExchangeRateInput,
        handler=handler,
    )
