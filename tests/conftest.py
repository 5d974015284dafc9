"""Pytest fixtures for Link Tracker tests."""

from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from link_tracker.services.state import InMemoryStateStore


class FakeFetcher:
    """Stands in for Fetcher, answering by URL substring.

    Each route holds a queue of responses; the last one repeats. An
    exception instance in the queue is raised instead of returned.
    """

    def __init__(self, routes: dict[str, list[Any]] | None = None):
        self.routes = {key: list(queue) for key, queue in (routes or {}).items()}
        self.calls: list[tuple[str, dict[str, str] | None]] = []

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]

    async def fetch_json(self, url: str, headers: dict[str, str] | None = None) -> Any:
        self.calls.append((url, headers))
        for key, queue in self.routes.items():
            if key in url:
                result = queue.pop(0) if len(queue) > 1 else queue[0]
                if isinstance(result, BaseException):
                    raise result
                return result
        raise AssertionError(f"Unexpected fetch of {url}")


class RecordingStore(InMemoryStateStore):
    """In-memory store that records every save."""

    def __init__(self, initial: dict[str, str] | None = None):
        super().__init__(initial)
        self.saves: list[tuple[str, str]] = []

    async def save(self, link: str, fingerprint: str) -> None:
        self.saves.append((link, fingerprint))
        await super().save(link, fingerprint)


def make_answer(answer_id: int, last_activity_date: int, **extra) -> dict[str, Any]:
    answer = {
        "answer_id": answer_id,
        "question_id": 111,
        "last_activity_date": last_activity_date,
        "creation_date": last_activity_date - 100,
        "score": 0,
        "is_accepted": False,
        "owner": {"display_name": "alice"},
    }
    answer.update(extra)
    return answer


def make_event(event_id: str, created_at: str, **extra) -> dict[str, Any]:
    event = {
        "id": event_id,
        "type": "PushEvent",
        "actor": {"login": "octocat"},
        "repo": {"name": "octocat/hello-world"},
        "created_at": created_at,
        "payload": {},
    }
    event.update(extra)
    return event


@pytest.fixture
def answer():
    """Builder for Stack Exchange answer items."""
    return make_answer


@pytest.fixture
def so_payload():
    """Builder for Stack Exchange answers responses."""
    def build(*answers: dict[str, Any], quota_remaining: int = 299) -> dict[str, Any]:
        return {"items": list(answers), "has_more": False, "quota_remaining": quota_remaining}
    return build


@pytest.fixture
def gh_event():
    """Builder for GitHub event objects."""
    return make_event


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def fake_fetcher():
    """Factory for FakeFetcher instances."""
    return FakeFetcher


@pytest_asyncio.fixture
async def http_server():
    """Start local aiohttp servers from {path: handler} routes."""
    servers = []

    async def start(routes: dict[str, Any]) -> TestServer:
        app = web.Application()
        for path, handler in routes.items():
            app.router.add_get(path, handler)
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return server

    yield start

    for server in servers:
        await server.close()
