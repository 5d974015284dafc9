"""HTTP fetcher for provider APIs with concurrency control."""

import asyncio
import json
import logging
from typing import Any

import aiohttp

from ..errors import DecodeError, NetworkError, ProviderError

logger = logging.getLogger(__name__)

# Default user agent; GitHub rejects requests without one
USER_AGENT = "Link-Tracker/1.0 (https://github.com/link-tracker; contact@example.com)"


class Fetcher:
    """Async HTTP fetcher that caps concurrent outbound requests."""

    def __init__(self, concurrency: int = 10, timeout: float = 20):
        """
        Initialize fetcher.

        Args:
            concurrency: Maximum concurrent outbound requests
            timeout: Request timeout in seconds
        """
        self.concurrency = concurrency
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None
        self._semaphore = asyncio.Semaphore(concurrency)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            )
        return self._session

    async def fetch_json(self, url: str, headers: dict[str, str] | None = None) -> Any:
        """
        Perform a single GET and decode the JSON body.

        Args:
            url: URL to fetch
            headers: Additional headers to send

        Returns:
            Decoded JSON document

        Raises:
            NetworkError: On timeout or any transport failure
            ProviderError: If the status code is not 2xx
            DecodeError: If the body is not valid JSON
        """
        async with self._semaphore:
            session = await self._get_session()
            try:
                async with session.get(url, headers=headers, allow_redirects=True) as response:
                    logger.debug(f"GET {url} -> {response.status}")
                    if not 200 <= response.status < 300:
                        raise ProviderError(
                            f"HTTP {response.status}: {response.reason} for {url}",
                            status=response.status,
                            reason=response.reason,
                        )

                    raw = await response.read()
                    charset = response.charset or "utf-8"
            except asyncio.TimeoutError as e:
                raise NetworkError(f"Request to {url} timed out") from e
            except aiohttp.ClientError as e:
                raise NetworkError(f"Client error for {url}: {e}") from e

        try:
            body = raw.decode(charset)
        except (UnicodeDecodeError, LookupError) as e:
            raise DecodeError(f"Undecodable body from {url}: {e}") from e

        if not body.strip():
            raise DecodeError(f"Empty body from {url}")

        try:
            return json.loads(body)
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {url}: {e}") from e

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "Fetcher":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
