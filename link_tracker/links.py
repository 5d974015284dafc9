"""Helpers for subscriber-supplied links."""

from urllib.parse import urlsplit


def normalize_link(link: str) -> str:
    """Canonical form of a tracked link, used as the state key."""
    return link.strip().lower().rstrip("/")


def link_host(link: str) -> str | None:
    """Lowercased host of a link, or None if it has none."""
    try:
        return urlsplit(link.strip()).hostname
    except ValueError:
        return None
