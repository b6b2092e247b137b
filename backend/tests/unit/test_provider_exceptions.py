"""Unit tests for the provider exception hierarchy."""

from unittest.mock import MagicMock

import pytest

from integrations.exceptions import (
    ProviderAPIError,
    ProviderAuthError,
    ProviderConnectionError,
    ProviderDataError,
    ProviderError,
    raise_for_status,
)


class TestExceptionHierarchy:
    """All provider exceptions are caught by except ProviderError."""

    def test_catch_all_provider_errors(self):
        exceptions = [
            ProviderAuthError("auth", provider_name="finnhub"),
            ProviderConnectionError("conn", provider_name="finnhub"),
            ProviderAPIError("api", provider_name="alphavantage", status_code=400),
            ProviderDataError("data", provider_name="alphavantage"),
        ]
        for exc in exceptions:
            with pytest.raises(ProviderError):
                raise exc

    def test_str_is_message(self):
        assert str(ProviderDataError("c=0", provider_name="finnhub")) == "c=0"

    def test_provider_name_stored(self):
        assert ProviderError("msg", provider_name="finnhub").provider_name == "finnhub"


class TestStatusCode:
    def test_api_error_carries_status(self):
        assert ProviderAPIError("x", status_code=503).status_code == 503

    def test_status_defaults_to_none(self):
        assert ProviderAPIError("unknown").status_code is None


def _response(status_code):
    response = MagicMock()
    response.status_code = status_code
    return response


class TestRaiseForStatus:
    def test_success_passes(self):
        raise_for_status(_response(200), "finnhub")

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth(self, status):
        with pytest.raises(ProviderAuthError):
            raise_for_status(_response(status), "finnhub")

    def test_other_errors_carry_status(self):
        with pytest.raises(ProviderAPIError) as exc_info:
            raise_for_status(_response(429), "alphavantage")
        assert exc_info.value.status_code == 429
        assert exc_info.value.provider_name == "alphavantage"
