"""Fingerprint computation for change detection."""

import hashlib
import json
from typing import Any, Mapping

# Fingerprint of a snapshot with no items; distinct from "never observed"
EMPTY_FINGERPRINT = hashlib.sha256(b"empty").hexdigest()


def compute_fingerprint(item: Mapping[str, Any] | None) -> str:
    """
    Compute a fingerprint from the identity fields of a snapshot's newest item.

    The same fields always produce the same hash regardless of key order, so
    two independent fetches of an unchanged resource compare equal.

    Args:
        item: Identity fields of the newest item, or None when the snapshot
            holds no items

    Returns:
        SHA256 hex digest
    """
    if not item:
        return EMPTY_FINGERPRINT

    content = json.dumps(dict(item), sort_keys=True, ensure_ascii=True, default=str)

    return hashlib.sha256(content.encode("utf-8")).hexdigest()
