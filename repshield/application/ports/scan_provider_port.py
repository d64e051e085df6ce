"""Port interfaces for external mention-search providers."""

from abc import ABC, abstractmethod

from repshield.domain.entities.scan import ProviderSearchResult, WebScanResult


class ScanProviderPort(ABC):
    @abstractmethod
    async def search_brand(self, brand_name: str) -> ProviderSearchResult:
        """Search posts and comments mentioning *brand_name*.

        The caller validates *brand_name*. Network, auth and rate-limit
        failures raise ProviderError subclasses; there is no internal retry.
        """
        ...

    async def reauthenticate(self) -> None:
        """Drop any cached credentials and authenticate again.

        Providers without credentials have nothing to refresh.
        """
        return None


class WebScanProviderPort(ABC):
    @abstractmethod
    async def scan(self, brand_name: str, platforms: list[str]) -> WebScanResult:
        ...
