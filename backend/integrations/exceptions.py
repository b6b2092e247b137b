"""Typed exception hierarchy for quote provider errors.

Provides structured exceptions for differentiated error handling
(auth errors vs transient network errors vs bad quote payloads).
"""


class ProviderError(Exception):
    """Base exception for all provider-related errors.

    Carries the provider name so callers can identify which provider failed.
    """

    def __init__(self, message: str, provider_name: str = ""):
        self.provider_name = provider_name
        super().__init__(message)


class ProviderAuthError(ProviderError):
    """API key missing or rejected (HTTP 401/403)."""

    pass


class ProviderConnectionError(ProviderError):
    """Network failures: timeouts, DNS resolution, connection refused."""

    pass


class ProviderAPIError(ProviderError):
    """HTTP 4xx/5xx responses from the provider API."""

    def __init__(
        self,
        message: str,
        provider_name: str = "",
        status_code: int | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, provider_name)


class ProviderDataError(ProviderError):
    """Malformed, unparseable or non-positive quote from the provider."""

    pass


def raise_for_status(response, provider_name: str) -> None:
    """Translate a non-2xx quote response into a typed provider error."""
    status = response.status_code
    if status in (401, 403):
        raise ProviderAuthError(
            f"{provider_name} rejected the API key (HTTP {status})",
            provider_name=provider_name,
        )
    if status >= 400:
        raise ProviderAPIError(
            f"{provider_name} returned HTTP {status}",
            provider_name=provider_name,
            status_code=status,
        )
