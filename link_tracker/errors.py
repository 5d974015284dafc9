"""Error taxonomy for link polling.

Every error here is scoped to a single link and a single poll cycle. None of
them is fatal to the process.
"""


class LinkTrackerError(Exception):
    """Base class for per-link poll failures."""

    category = "error"

    def __init__(self, message: str, link: str | None = None):
        super().__init__(message)
        self.link = link


class InvalidLinkFormat(LinkTrackerError):
    """Link does not match the shape a provider expects."""

    category = "invalid_link"


class UnsupportedProvider(LinkTrackerError):
    """No registered provider handles the link's host."""

    category = "unsupported_provider"


class FetchError(LinkTrackerError):
    """Base class for failures while retrieving a resource."""

    category = "fetch"


class NetworkError(FetchError):
    """Transport failure: timeout, refused connection, DNS."""

    category = "network"


class ProviderError(FetchError):
    """Provider answered with a non-success status code."""

    category = "provider"

    def __init__(
        self,
        message: str,
        status: int,
        reason: str | None = None,
        link: str | None = None,
    ):
        super().__init__(message, link=link)
        self.status = status
        self.reason = reason


class DecodeError(FetchError):
    """Response body could not be parsed into the expected shape."""

    category = "decode"


class StateStoreError(LinkTrackerError):
    """State backend failed to read or write a record."""

    category = "state_store"
