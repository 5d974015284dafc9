"""Link Tracker: polls tracked links and reports when they change."""

from .errors import (
    DecodeError,
    FetchError,
    InvalidLinkFormat,
    LinkTrackerError,
    NetworkError,
    ProviderError,
    StateStoreError,
    UnsupportedProvider,
)
from .links import normalize_link
from .models import ChangeEvent

__version__ = "1.0.0"

__all__ = [
    "ChangeEvent",
    "DecodeError",
    "FetchError",
    "InvalidLinkFormat",
    "LinkTrackerError",
    "NetworkError",
    "ProviderError",
    "StateStoreError",
    "UnsupportedProvider",
    "normalize_link",
]
