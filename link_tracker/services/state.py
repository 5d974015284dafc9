"""State stores holding the last observed fingerprint per tracked link."""

import asyncio
import os
import logging
import threading
from datetime import datetime, timezone
from typing import Iterable, Protocol

import boto3
from botocore.exceptions import ClientError

from ..errors import StateStoreError

logger = logging.getLogger(__name__)

# Rounds of re-requesting UnprocessedKeys before giving up
MAX_BATCH_ATTEMPTS = 8


class StateStore(Protocol):
    """Keyed store of link -> fingerprint.

    Writes to one link are linearizable; the last committed save wins.
    Links are independent of each other.
    """

    async def get(self, link: str) -> str | None: ...

    async def save(self, link: str, fingerprint: str) -> None: ...

    async def delete(self, link: str) -> None: ...

    async def get_many(self, links: Iterable[str]) -> dict[str, str]: ...


class InMemoryStateStore:
    """Process-local store, safe for asyncio tasks and worker threads."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._records: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    async def get(self, link: str) -> str | None:
        with self._lock:
            return self._records.get(link)

    async def save(self, link: str, fingerprint: str) -> None:
        with self._lock:
            self._records[link] = fingerprint

    async def delete(self, link: str) -> None:
        with self._lock:
            self._records.pop(link, None)

    async def get_many(self, links: Iterable[str]) -> dict[str, str]:
        with self._lock:
            return {link: self._records[link] for link in links if link in self._records}

    def __len__(self) -> int:
        return len(self._records)


class DynamoDbStateStore:
    """Stores link fingerprints in DynamoDB, one item per link."""

    def __init__(self, table_name: str | None = None):
        """
        Initialize state store.

        Args:
            table_name: DynamoDB table name (defaults to STATE_TABLE_NAME env var)
        """
        self.table_name = table_name or os.environ.get("STATE_TABLE_NAME", "link_tracker_state")
        self._dynamodb = boto3.resource("dynamodb")
        self._table = self._dynamodb.Table(self.table_name)

    async def get(self, link: str) -> str | None:
        """
        Get the last recorded fingerprint for a link.

        Returns:
            Fingerprint, or None if the link has never been observed

        Raises:
            StateStoreError: If DynamoDB rejects the read
        """
        try:
            response = await asyncio.to_thread(
                self._table.get_item, Key={"link": link}, ConsistentRead=True
            )
        except ClientError as e:
            logger.error(f"Error getting state for {link}: {e}")
            raise StateStoreError(f"Could not read state: {e}", link=link) from e

        item = response.get("Item")
        return item.get("fingerprint") if item else None

    async def save(self, link: str, fingerprint: str) -> None:
        """
        Create or overwrite the record for a link.

        A single unconditional put_item, so concurrent saves resolve to the
        last write DynamoDB commits.
        """
        item = {
            "link": link,
            "fingerprint": fingerprint,
            "updated_utc": datetime.now(timezone.utc).isoformat(),
        }
        try:
            await asyncio.to_thread(self._table.put_item, Item=item)
        except ClientError as e:
            logger.error(f"Error updating state for {link}: {e}")
            raise StateStoreError(f"Could not save state: {e}", link=link) from e

    async def delete(self, link: str) -> None:
        try:
            await asyncio.to_thread(self._table.delete_item, Key={"link": link})
        except ClientError as e:
            logger.error(f"Error deleting state for {link}: {e}")
            raise StateStoreError(f"Could not delete state: {e}", link=link) from e

    async def get_many(self, links: Iterable[str]) -> dict[str, str]:
        """
        Get fingerprints for multiple links in batch.

        Keys DynamoDB leaves unprocessed (throttling, response size) are
        requested again until every key has been answered.

        Args:
            links: Tracked links

        Returns:
            Dict mapping link to fingerprint; unseen links are omitted

        Raises:
            StateStoreError: If DynamoDB rejects the read or keeps keys
                unprocessed after MAX_BATCH_ATTEMPTS rounds
        """
        links = list(dict.fromkeys(links))
        if not links:
            return {}

        results = {}
        # DynamoDB batch_get_item has a limit of 100 items
        for i in range(0, len(links), 100):
            request = {
                self.table_name: {
                    "Keys": [{"link": link} for link in links[i:i + 100]]
                }
            }
            for attempt in range(MAX_BATCH_ATTEMPTS):
                try:
                    response = await asyncio.to_thread(
                        self._dynamodb.batch_get_item, RequestItems=request
                    )
                except ClientError as e:
                    logger.error(f"Error batch getting states: {e}")
                    raise StateStoreError(f"Could not read states: {e}") from e

                for item in response.get("Responses", {}).get(self.table_name, []):
                    results[item["link"]] = item.get("fingerprint")

                request = response.get("UnprocessedKeys") or {}
                if not request:
                    break
                pending = sum(len(keys.get("Keys", [])) for keys in request.values())
                logger.debug(f"Retrying {pending} unprocessed keys")
                await asyncio.sleep(0.05 * 2 ** attempt)
            else:
                raise StateStoreError(
                    f"Keys still unprocessed after {MAX_BATCH_ATTEMPTS} attempts"
                )

        return results
