"""Providers package: per-site strategies and the registry that selects them."""

from ..services.detector import ChangeDetector
from ..services.fetcher import Fetcher
from ..services.state import StateStore
from .base import BaseProvider
from .github import GitHubProvider
from .registry import ProviderRegistry
from .stackoverflow import StackOverflowProvider


def build_registry(
    fetcher: Fetcher,
    store: StateStore,
    providers: list[BaseProvider] | None = None,
) -> ProviderRegistry:
    """
    Build the registry of supported providers.

    Args:
        fetcher: Shared HTTP fetcher
        store: Shared state store
        providers: Provider strategies (defaults to GitHub and Stack Overflow,
            configured from the environment)

    Returns:
        Registry with one change detector per provider
    """
    if providers is None:
        providers = [GitHubProvider(), StackOverflowProvider()]
    return ProviderRegistry([ChangeDetector(p, fetcher, store) for p in providers])


__all__ = [
    "BaseProvider",
    "GitHubProvider",
    "StackOverflowProvider",
    "ProviderRegistry",
    "build_registry",
]
