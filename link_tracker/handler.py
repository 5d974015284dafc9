"""Lambda handler for Link Tracker."""

import asyncio
import json
import logging
import os
from collections import Counter
from datetime import datetime, timezone
from typing import Any

import yaml

from .errors import LinkTrackerError
from .links import normalize_link
from .models import ChangeEvent
from .providers import ProviderRegistry, build_registry
from .services.fetcher import Fetcher
from .services.notifier import Notifier
from .services.state import DynamoDbStateStore, InMemoryStateStore, StateStore

# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO")
logging.basicConfig(level=log_level)
logger = logging.getLogger(__name__)


def load_links(config_path: str | None = None) -> list[str]:
    """Load tracked links from a YAML file (defaults to LINKS_CONFIG or the bundled file)."""
    config_path = config_path or os.environ.get(
        "LINKS_CONFIG",
        os.path.join(os.path.dirname(__file__), "config", "links.yaml"),
    )
    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}
    return [str(link) for link in config.get("links") or []]


def create_store(backend: str | None = None) -> StateStore:
    """Create the state store named by STATE_BACKEND (dynamodb or memory)."""
    backend = (backend or os.environ.get("STATE_BACKEND", "dynamodb")).lower()
    if backend == "memory":
        return InMemoryStateStore()
    if backend == "dynamodb":
        return DynamoDbStateStore()
    raise ValueError(f"Unknown state backend: {backend}. Available: ['dynamodb', 'memory']")


async def poll_links(
    links: list[str],
    registry: ProviderRegistry,
    concurrency: int = 10,
    timeout: float = 30,
) -> dict[str, Any]:
    """
    Poll every link once, isolating failures per link.

    Args:
        links: Tracked links; duplicates after normalization are polled once
        registry: Provider registry
        concurrency: Maximum links polled at the same time
        timeout: Seconds allowed for one link's poll cycle

    Returns:
        Dict with keys:
            - changes: ChangeEvents with changed=True
            - unchanged: Number of links without changes
            - errors: Failure count per error category
    """
    links = list(dict.fromkeys(normalize_link(link) for link in links))
    semaphore = asyncio.Semaphore(concurrency)

    async def poll_with_semaphore(link: str) -> ChangeEvent:
        async with semaphore:
            return await asyncio.wait_for(registry.poll_link(link), timeout)

    results = await asyncio.gather(
        *(poll_with_semaphore(link) for link in links),
        return_exceptions=True,
    )

    changes = []
    unchanged = 0
    errors: Counter[str] = Counter()
    for link, result in zip(links, results):
        if isinstance(result, LinkTrackerError):
            errors[result.category] += 1
        elif isinstance(result, asyncio.TimeoutError):
            errors["timeout"] += 1
            logger.warning(f"Poll of {link} timed out after {timeout}s")
        elif isinstance(result, BaseException):
            errors["unexpected"] += 1
            logger.error(f"Error polling {link}: {result!r}", exc_info=result)
        elif result.changed:
            changes.append(result)
        else:
            unchanged += 1

    return {"changes": changes, "unchanged": unchanged, "errors": dict(errors)}


async def run_poller() -> dict[str, Any]:
    """Poll all configured links and publish the changes."""
    start_time = datetime.now(timezone.utc)
    logger.info(f"Starting Link Tracker at {start_time.isoformat()}")

    links = load_links()
    logger.info(f"Loaded {len(links)} links")

    concurrency = int(os.environ.get("FETCH_CONCURRENCY", "10"))
    fetcher = Fetcher(
        concurrency=concurrency,
        timeout=float(os.environ.get("FETCH_TIMEOUT", "20")),
    )
    store = create_store()
    notifier = Notifier()

    try:
        registry = build_registry(fetcher, store)
        result = await poll_links(
            links,
            registry,
            concurrency=concurrency,
            timeout=float(os.environ.get("POLL_TIMEOUT", "30")),
        )

        changes = result["changes"]
        published = True
        if changes:
            published = await notifier.publish(changes)
            if not published:
                logger.error(f"Digest for {len(changes)} changed links was not published")
        else:
            logger.info("No changes detected")

        end_time = datetime.now(timezone.utc)
        summary = {
            "status": "success" if published else "publish_failed",
            "published": published,
            "links_checked": len(links),
            "changes_detected": len(changes),
            "unchanged": result["unchanged"],
            "errors": result["errors"],
            "changed_links": [event.link for event in changes],
            "duration_seconds": (end_time - start_time).total_seconds(),
            "timestamp": end_time.isoformat(),
        }

        logger.info(f"Completed: {json.dumps(summary)}")
        return summary

    finally:
        await fetcher.close()


def lambda_handler(event: dict, context: Any) -> dict:
    """AWS Lambda entry point."""
    try:
        result = asyncio.run(run_poller())
        return {
            "statusCode": 200,
            "body": json.dumps(result),
        }
    except Exception as e:
        logger.error(f"Lambda handler error: {e}", exc_info=True)
        return {
            "statusCode": 500,
            "body": json.dumps({"error": str(e)}),
        }


# For local testing
if __name__ == "__main__":
    asyncio.run(run_poller())
