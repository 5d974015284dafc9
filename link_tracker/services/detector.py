"""Change detector: one poll cycle for one link."""

import logging
from typing import TYPE_CHECKING

from ..errors import LinkTrackerError
from ..links import normalize_link
from ..models import ChangeEvent
from .fetcher import Fetcher
from .state import StateStore

if TYPE_CHECKING:
    from ..providers.base import BaseProvider

logger = logging.getLogger(__name__)


class ChangeDetector:
    """Ties a provider strategy to the shared fetcher and state store."""

    def __init__(self, provider: "BaseProvider", fetcher: Fetcher, store: StateStore):
        self.provider = provider
        self.fetcher = fetcher
        self.store = store

    @property
    def name(self) -> str:
        return self.provider.name

    async def poll(self, link: str) -> ChangeEvent:
        """
        Run one poll cycle: translate, fetch, fingerprint, compare, save.

        The store is written only after the snapshot has been fetched and
        fingerprinted, so any failure or cancellation before that point
        leaves the previous fingerprint in place for the next cycle.

        Args:
            link: Tracked link

        Returns:
            ChangeEvent with ``changed`` set when the fingerprint differs from
            the stored one or the link was never observed

        Raises:
            InvalidLinkFormat: If the provider cannot translate the link
            FetchError: If retrieving or decoding the resource failed
            StateStoreError: If the store could not be read or written
        """
        link = normalize_link(link)

        try:
            uri = self.provider.translate(link)
            snapshot = await self.provider.fetch(uri, self.fetcher)
            fingerprint = self.provider.fingerprint_of(snapshot)

            previous = await self.store.get(link)
            if previous is not None and previous == fingerprint:
                logger.debug(f"[{self.name}] No updates for {link}")
                return ChangeEvent(link, previous, fingerprint, snapshot, changed=False)

            await self.store.save(link, fingerprint)
        except LinkTrackerError as e:
            if e.link is None:
                e.link = link
            logger.warning(f"[{self.name}] {e.category} failure for {link}: {e}")
            raise

        logger.info(
            f"[{self.name}] Updates for {link}: "
            f"Old={previous[:8] if previous else 'None'}... New={fingerprint[:8]}..."
        )
        return ChangeEvent(link, previous, fingerprint, snapshot, changed=True)
