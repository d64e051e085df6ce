"""ErrorRecovery: normalize scan-provider failures into a uniform outcome.

Every failure is classified, gets at most one automatic fix for its category
and always yields a fallback payload the UI can render.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, TypeVar

import httpx

from repshield.domain.errors import (
    ProviderAuthError,
    ProviderNetworkError,
    ProviderRateLimitError,
    ScrapingServiceError,
)
from repshield.domain.value_objects.enums import ErrorCategory

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNAVAILABLE_MESSAGE = "Live scanning is temporarily unavailable. Please try again in a few minutes."

# Categories whose auto-fix, when it works, earns one retry of the operation
RETRYABLE = frozenset({ErrorCategory.AUTH_FAILURE, ErrorCategory.RATE_LIMIT})

_MESSAGE_MARKERS: list[tuple[ErrorCategory, tuple[str, ...]]] = [
    (ErrorCategory.AUTH_FAILURE, ("401", "unauthorized")),
    (ErrorCategory.RATE_LIMIT, ("429", "rate limit")),
    (ErrorCategory.NETWORK, ("econnrefused", "network", "timeout", "timed out")),
    (ErrorCategory.SCRAPING_SERVICE, ("scrapingbee", "scraping")),
]

_DESCRIPTIONS: dict[ErrorCategory, tuple[str, str, str]] = {
    ErrorCategory.AUTH_FAILURE: (
        "Provider Authentication Failed",
        "Invalid or expired provider credentials",
        "Credentials need to be refreshed or verified",
    ),
    ErrorCategory.RATE_LIMIT: (
        "API Rate Limit Exceeded",
        "Too many requests to the provider",
        "Backing off before the next attempt",
    ),
    ErrorCategory.NETWORK: (
        "Network Connectivity Error",
        "Unable to reach the provider servers",
        "Retry later; no automatic fix available",
    ),
    ErrorCategory.SCRAPING_SERVICE: (
        "Web Scraping Service Error",
        "External scraping service unavailable or rate limited",
        "Falling back to the remaining providers",
    ),
    ErrorCategory.UNKNOWN: (
        "Unknown Error",
        "Unspecified error occurred",
        "Using fallback data",
    ),
}


def fallback_payload(message: str = UNAVAILABLE_MESSAGE) -> dict[str, Any]:
    return {
        "totalMentions": 0,
        "riskLevel": "unknown",
        "unavailable": True,
        "message": message,
    }


@dataclass
class ErrorDiagnosis:
    category: ErrorCategory
    issue: str
    cause: str
    solution: str
    auto_fix_attempted: bool
    auto_fix_succeeded: bool
    fallback_data: dict = field(default_factory=fallback_payload)

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "issue": self.issue,
            "cause": self.cause,
            "solution": self.solution,
            "autoFixAttempted": self.auto_fix_attempted,
            "autoFixSucceeded": self.auto_fix_succeeded,
        }


@dataclass
class RecoveryOutcome(Generic[T]):
    success: bool
    data: T | dict | None = None
    diagnosis: ErrorDiagnosis | None = None
    recovered: bool = False


def classify_error(error: BaseException) -> ErrorCategory:
    """Typed provider errors first, then message content."""
    if isinstance(error, ProviderAuthError):
        return ErrorCategory.AUTH_FAILURE
    if isinstance(error, ProviderRateLimitError):
        return ErrorCategory.RATE_LIMIT
    if isinstance(error, (ProviderNetworkError, httpx.TransportError, ConnectionError)):
        return ErrorCategory.NETWORK
    if isinstance(error, ScrapingServiceError):
        return ErrorCategory.SCRAPING_SERVICE

    message = str(error).lower()
    for category, markers in _MESSAGE_MARKERS:
        if any(m in message for m in markers):
            return category
    return ErrorCategory.UNKNOWN


class ErrorRecovery:
    def __init__(
        self,
        rate_limit_backoff_seconds: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._backoff = rate_limit_backoff_seconds
        self._sleep = sleep

    async def execute_with_recovery(
        self,
        operation: Callable[[], Awaitable[T]],
        context: str,
        reauthenticate: Callable[[], Awaitable[None]] | None = None,
    ) -> RecoveryOutcome[T]:
        try:
            return RecoveryOutcome(success=True, data=await operation())
        except Exception as e:
            diagnosis = await self.diagnose_and_recover(e, context, reauthenticate)

        if diagnosis.auto_fix_succeeded and diagnosis.category in RETRYABLE:
            try:
                data = await operation()
                logger.info("Recovered %s after %s", context, diagnosis.category.value)
                return RecoveryOutcome(success=True, data=data, diagnosis=diagnosis, recovered=True)
            except Exception as retry_error:
                logger.warning("Retry of %s failed: %s", context, retry_error)

        logger.warning(
            "Auto-recovery for %s: %s (fix attempted=%s)",
            context, diagnosis.issue, diagnosis.auto_fix_attempted,
        )
        return RecoveryOutcome(success=False, data=diagnosis.fallback_data, diagnosis=diagnosis)

    async def diagnose_and_recover(
        self,
        error: BaseException,
        context: str,
        reauthenticate: Callable[[], Awaitable[None]] | None = None,
    ) -> ErrorDiagnosis:
        category = classify_error(error)
        logger.info("Diagnosing error in %s (%s): %s", context, category.value, error)

        attempted, succeeded = await self._attempt_fix(category, reauthenticate)
        issue, cause, solution = _DESCRIPTIONS[category]
        if category == ErrorCategory.UNKNOWN and str(error):
            cause = str(error)

        return ErrorDiagnosis(
            category=category,
            issue=issue,
            cause=cause,
            solution=solution,
            auto_fix_attempted=attempted,
            auto_fix_succeeded=succeeded,
        )

    async def _attempt_fix(
        self,
        category: ErrorCategory,
        reauthenticate: Callable[[], Awaitable[None]] | None,
    ) -> tuple[bool, bool]:
        """Return (attempted, succeeded) for the single fix allowed per category."""
        if category == ErrorCategory.AUTH_FAILURE:
            if reauthenticate is None:
                return False, False
            try:
                await reauthenticate()
                return True, True
            except Exception as e:
                logger.warning("Re-authentication attempt failed: %s", e)
                return True, False

        if category == ErrorCategory.RATE_LIMIT:
            await self._sleep(self._backoff)
            return True, True

        if category == ErrorCategory.SCRAPING_SERVICE:
            # nothing to fix locally; the other providers carry the scan
            return True, False

        return False, False
