"""Unit tests for get_exchange_rates: validation, normalization, status mapping, faults."""
import json
from unittest.mock import patch

import pytest

from tools.base import CurrencyCode, ErrorKind, FetchResponse, NetworkError, ToolError
from tools.exchange_rates import RATES_TIMEOUT, get_rates_impl

RATES = {"result": "success", "base_code": "USD", "rates": {"USD": 1, "EUR": 0.92, "BRL": 5.01}}


def test_currency_code_normalizes():
    assert CurrencyCode.parse(" usd ").value == "USD"
    assert str(CurrencyCode.parse("eUr")) == "EUR"


@pytest.mark.parametrize("raw", ["", "   ", None, "US", "USDX", " EURO "])
def test_currency_code_rejects_bad_length(raw):
    with pytest.raises(ToolError) as exc:
        CurrencyCode.parse(raw)
    assert exc.value.kind == ErrorKind.INVALID_INPUT


@pytest.mark.parametrize("raw", ["", "EU", "EURO", "    "])
@patch("tools.exchange_rates.fetch")
def test_invalid_code_makes_no_network_call(mock_fetch, raw):
    result = get_rates_impl(raw)
    assert result.error_kind == ErrorKind.INVALID_INPUT
    assert result.message.startswith("Currency code must be exactly 3 characters")
    mock_fetch.assert_not_called()


@patch("tools.exchange_rates.fetch")
def test_success_passes_upstream_json_through(mock_fetch):
    mock_fetch.return_value = FetchResponse(status=200, body=json.dumps(RATES))
    result = get_rates_impl("USD")
    assert result.is_ok
    assert result.payload == RATES
    assert json.loads(result.render())["rates"]["EUR"] == 0.92


@patch("tools.exchange_rates.fetch")
def test_lowercase_code_is_uppercased_in_url(mock_fetch):
    mock_fetch.return_value = FetchResponse(status=200, body=json.dumps(RATES))
    get_rates_impl("usd", endpoint=lambda code: f"https://rates.test/latest/{code}")
    args, kwargs = mock_fetch.call_args
    assert args[0] == "https://rates.test/latest/USD"
    assert kwargs["timeout"] == RATES_TIMEOUT == 10.0


@patch("tools.exchange_rates.fetch")
def test_404_is_not_found(mock_fetch):
    mock_fetch.return_value = FetchResponse(status=404, body="")
    result = get_rates_impl("xyz")
    assert result.error_kind == ErrorKind.NOT_FOUND
    assert result.message == "Currency code 'XYZ' not supported by the API"


@patch("tools.exchange_rates.fetch")
def test_other_status_is_upstream_error(mock_fetch):
    mock_fetch.return_value = FetchResponse(status=500, body="oops")
    result = get_rates_impl("USD")
    assert result.error_kind == ErrorKind.UPSTREAM_ERROR
    assert result.message == "API returned status code: 500"


@patch("tools.exchange_rates.fetch")
def test_in_band_unsupported_code(mock_fetch):
    mock_fetch.return_value = FetchResponse(
        status=200, body=json.dumps({"result": "error", "error-type": "unsupported-code"})
    )
    result = get_rates_impl("QQQ")
    assert result.error_kind == ErrorKind.NOT_FOUND
    assert "'QQQ'" in result.message


@patch("tools.exchange_rates.fetch")
def test_malformed_json_is_unknown(mock_fetch):
    mock_fetch.return_value = FetchResponse(status=200, body="<html>not json</html>")
    result = get_rates_impl("USD")
    assert result.error_kind == ErrorKind.UNKNOWN
    assert result.message.startswith("Failed to fetch exchange rates:")
    assert json.loads(result.render())["error"].startswith("Failed to fetch exchange rates:")


@patch("tools.exchange_rates.fetch")
def test_timeout_is_structured_error(mock_fetch):
    mock_fetch.side_effect = NetworkError("timeout", "read timed out")
    result = get_rates_impl("USD")
    assert result.error_kind == ErrorKind.NETWORK_ERROR
    assert result.message.startswith("Failed to fetch exchange rates:")


@patch("tools.exchange_rates.fetch")
def test_in_band_other_error_is_upstream_error(mock_fetch):
    mock_fetch.return_value = FetchResponse(
        status=200, body=json.dumps({"result": "error", "error-type": "quota-reached"})
    )
    result = get_rates_impl("USD")
    assert result.error_kind == ErrorKind.UPSTREAM_ERROR
    assert result.message == "API returned error: quota-reached"


@patch("tools.exchange_rates.fetch")
def test_connection_failure_is_structured_error(mock_fetch):
    mock_fetch.side_effect = NetworkError("connection", "name resolution failed")
    result = get_rates_impl("USD")
    assert result.error_kind == ErrorKind.NETWORK_ERROR
    assert json.loads(result.render())["error"].startswith("Failed to fetch exchange rates:")
