"""GitHub provider tracking a repository's public event stream."""

import logging
import os
import re
from dataclasses import dataclass
from typing import Any

from ..errors import DecodeError, InvalidLinkFormat
from ..services.fingerprint import compute_fingerprint
from .base import BaseProvider

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com/"

# https://github.com/<owner>/<repo>[.git][/anything]
LINK_PATTERN = re.compile(
    r"^https?://(?:www\.)?github\.com/"
    r"([a-z0-9](?:[a-z0-9-]*[a-z0-9])?)/"
    r"([a-z0-9._-]+?)(?:\.git)?"
    r"(?:[/?#].*)?$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class RepositoryEvent:
    id: str
    type: str
    created_at: str
    actor: str = ""

    @property
    def sort_key(self) -> tuple[str, int]:
        return (self.created_at, int(self.id) if self.id.isdigit() else -1)


@dataclass(frozen=True)
class GitHubSnapshot:
    """Recent events of one repository."""

    events: tuple[RepositoryEvent, ...]

    def newest(self) -> RepositoryEvent | None:
        if not self.events:
            return None
        return max(self.events, key=lambda e: e.sort_key)

    def describe(self) -> list[str]:
        newest = self.newest()
        if newest is None:
            return ["No recent events"]
        actor = f" by {newest.actor}" if newest.actor else ""
        return [f"{newest.type}{actor} at {newest.created_at}"]


class GitHubProvider(BaseProvider):
    """Provider for GitHub repositories."""

    name = "github"
    hosts = frozenset({"github.com", "www.github.com"})

    def __init__(self, api_url: str | None = None, token: str | None = None):
        """
        Initialize provider.

        Args:
            api_url: GitHub REST API base (defaults to GITHUB_API_URL env var)
            token: Access token for higher rate limits (defaults to GITHUB_TOKEN env var)
        """
        api_url = api_url or os.environ.get("GITHUB_API_URL", API_URL)
        self.api_url = api_url if api_url.endswith("/") else api_url + "/"
        self.token = token or os.environ.get("GITHUB_TOKEN")

    def translate(self, link: str) -> str:
        match = LINK_PATTERN.match(link.strip())
        if not match:
            raise InvalidLinkFormat(f"Not a GitHub repository link: {link}", link=link)

        owner, repo = match.group(1), match.group(2)
        return f"{self.api_url}repos/{owner}/{repo}/events"

    def headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def parse(self, payload: Any) -> GitHubSnapshot:
        if not isinstance(payload, list):
            raise DecodeError("GitHub events response is not a list")

        events = []
        for entry in payload:
            try:
                events.append(RepositoryEvent(
                    id=str(entry["id"]),
                    type=entry["type"],
                    created_at=entry["created_at"],
                    actor=(entry.get("actor") or {}).get("login", ""),
                ))
            except (KeyError, TypeError, AttributeError) as e:
                raise DecodeError(f"Malformed event in GitHub response: {e}") from e
            if not isinstance(events[-1].created_at, str):
                raise DecodeError(f"Event {events[-1].id} has no created_at timestamp")

        logger.debug(f"Parsed {len(events)} GitHub events")
        return GitHubSnapshot(events=tuple(events))

    def fingerprint_of(self, snapshot: GitHubSnapshot) -> str:
        newest = snapshot.newest()
        if newest is None:
            return compute_fingerprint(None)
        return compute_fingerprint({"id": newest.id})
