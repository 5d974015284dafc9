"""Services package for Link Tracker."""

from .fetcher import Fetcher
from .state import StateStore, InMemoryStateStore, DynamoDbStateStore
from .notifier import Notifier
from .fingerprint import compute_fingerprint, EMPTY_FINGERPRINT
from .detector import ChangeDetector

__all__ = [
    "Fetcher",
    "StateStore",
    "InMemoryStateStore",
    "DynamoDbStateStore",
    "Notifier",
    "compute_fingerprint",
    "EMPTY_FINGERPRINT",
    "ChangeDetector",
]
