"""Base provider class: per-site link translation, parsing and fingerprinting."""

from abc import ABC, abstractmethod
from typing import Any

from ..services.fetcher import Fetcher


class BaseProvider(ABC):
    """Abstract base class for provider strategies.

    A provider knows how to turn a subscriber link into an API URI, how to
    read the API response and how to fingerprint the result. It holds no
    state of its own.
    """

    name: str = ""
    hosts: frozenset[str] = frozenset()

    def handles(self, host: str | None) -> bool:
        return host is not None and host in self.hosts

    @abstractmethod
    def translate(self, link: str) -> str:
        """
        Translate a subscriber link into the provider API URI.

        Raises:
            InvalidLinkFormat: If the link does not match this provider's shape
        """

    @abstractmethod
    def parse(self, payload: Any) -> Any:
        """
        Build a snapshot from a decoded API response.

        Raises:
            DecodeError: If the payload does not have the expected shape
        """

    @abstractmethod
    def fingerprint_of(self, snapshot: Any) -> str:
        """Fingerprint identifying the snapshot's newest item."""

    def headers(self) -> dict[str, str]:
        """Extra request headers, e.g. authentication."""
        return {}

    async def fetch(self, uri: str, fetcher: Fetcher) -> Any:
        """Fetch the API URI and parse the response into a snapshot."""
        payload = await fetcher.fetch_json(uri, headers=self.headers())
        return self.parse(payload)
