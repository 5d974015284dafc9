"""Registry dispatching links to the change detector of their provider."""

import logging

from ..errors import UnsupportedProvider
from ..links import link_host, normalize_link
from ..models import ChangeEvent
from ..services.detector import ChangeDetector

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Fixed, ordered list of change detectors selected by link host."""

    def __init__(self, detectors: list[ChangeDetector]):
        """
        Initialize registry.

        Args:
            detectors: One detector per provider; earlier entries win

        Raises:
            ValueError: If two providers claim the same host
        """
        claimed: dict[str, str] = {}
        for detector in detectors:
            for host in detector.provider.hosts:
                if host in claimed:
                    raise ValueError(
                        f"Host {host} claimed by both {claimed[host]} and {detector.name}"
                    )
                claimed[host] = detector.name
        self._detectors = list(detectors)

    @property
    def providers(self) -> list[str]:
        return [detector.name for detector in self._detectors]

    def resolve(self, link: str) -> ChangeDetector:
        """
        Get the change detector for a link.

        Raises:
            UnsupportedProvider: If no registered provider handles the link's host
        """
        host = link_host(link)
        for detector in self._detectors:
            if detector.provider.handles(host):
                return detector
        raise UnsupportedProvider(
            f"No provider for {link!r}. Available: {self.providers}",
            link=link,
        )

    async def poll_link(self, link: str) -> ChangeEvent:
        """Resolve the link's provider and run one poll cycle."""
        link = normalize_link(link)
        try:
            detector = self.resolve(link)
        except UnsupportedProvider as e:
            logger.warning(f"{e.category} failure for {link}: {e}")
            raise
        return await detector.poll(link)
