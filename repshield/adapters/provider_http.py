"""Shared httpx helpers mapping provider HTTP failures onto typed errors."""

from __future__ import annotations

import httpx

from repshield.domain.errors import (
    ProviderAuthError,
    ProviderError,
    ProviderNetworkError,
    ProviderRateLimitError,
)

DEFAULT_TIMEOUT = 15.0


def check_response(response: httpx.Response, provider: str, error_cls: type[ProviderError] = ProviderError) -> None:
    if response.is_success:
        return
    status = response.status_code
    if status in (401, 403):
        raise ProviderAuthError(f"{provider} unauthorized ({status})")
    if status == 429:
        raise ProviderRateLimitError(f"{provider} rate limit exceeded (429)")
    raise error_cls(f"{provider} request failed: {status} {response.reason_phrase}")


def network_error(provider: str, exc: httpx.TransportError) -> ProviderNetworkError:
    return ProviderNetworkError(f"{provider} network error: {type(exc).__name__}: {exc}")
