"""Values passed between the change detector and its collaborators."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ChangeEvent:
    """Outcome of one poll cycle for one link.

    ``changed`` is False for the observability-only "unchanged" outcome; such
    events are never handed to the notification dispatcher.
    """

    link: str
    previous: str | None
    fingerprint: str
    snapshot: Any
    changed: bool

    @property
    def is_new(self) -> bool:
        """True when the link had never been observed before this cycle."""
        return self.previous is None

    def to_dict(self) -> dict[str, Any]:
        """Serializable view of the event, without the raw snapshot."""
        describe = getattr(self.snapshot, "describe", None)
        return {
            "link": self.link,
            "previous": self.previous,
            "fingerprint": self.fingerprint,
            "changed": self.changed,
            "is_new": self.is_new,
            "summary": describe() if callable(describe) else [],
        }
