"""Stack Overflow provider tracking the answers of a question."""

import logging
import os
import re
from dataclasses import dataclass
from typing import Any

from ..errors import DecodeError, InvalidLinkFormat
from ..services.fingerprint import compute_fingerprint
from .base import BaseProvider

logger = logging.getLogger(__name__)

API_URL = "https://api.stackexchange.com/2.3/"

# https://stackoverflow.com/questions/111/slug or https://stackoverflow.com/q/111
LINK_PATTERN = re.compile(
    r"^https?://(?:www\.)?stackoverflow\.com/(?:questions|q)/(\d+)(?:[/?#].*)?$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Answer:
    answer_id: int
    last_activity_date: int
    creation_date: int | None = None
    score: int = 0
    is_accepted: bool = False
    owner: str = ""


@dataclass(frozen=True)
class StackOverflowSnapshot:
    """Answers of one question as returned by the Stack Exchange API."""

    question_id: int | None
    answers: tuple[Answer, ...]

    def newest(self) -> Answer | None:
        """Answer with the most recent activity."""
        if not self.answers:
            return None
        return max(self.answers, key=lambda a: (a.last_activity_date, a.answer_id))

    def describe(self) -> list[str]:
        newest = self.newest()
        if newest is None:
            return ["No answers yet"]
        author = f" by {newest.owner}" if newest.owner else ""
        return [
            f"{len(self.answers)} answer(s)",
            f"Latest activity on answer {newest.answer_id}{author}",
        ]


class StackOverflowProvider(BaseProvider):
    """Provider for Stack Overflow questions."""

    name = "stackoverflow"
    hosts = frozenset({"stackoverflow.com", "www.stackoverflow.com"})

    def __init__(self, api_url: str | None = None, api_key: str | None = None):
        """
        Initialize provider.

        Args:
            api_url: Stack Exchange API base (defaults to STACKEXCHANGE_API_URL env var)
            api_key: Stack Exchange app key (defaults to STACKEXCHANGE_KEY env var)
        """
        api_url = api_url or os.environ.get("STACKEXCHANGE_API_URL", API_URL)
        self.api_url = api_url if api_url.endswith("/") else api_url + "/"
        self.api_key = api_key or os.environ.get("STACKEXCHANGE_KEY")

    def translate(self, link: str) -> str:
        match = LINK_PATTERN.match(link.strip())
        if not match:
            raise InvalidLinkFormat(f"Not a Stack Overflow question link: {link}", link=link)

        question_id = match.group(1)
        uri = f"{self.api_url}questions/{question_id}/answers?order=desc&sort=activity&site=stackoverflow"
        if self.api_key:
            uri += f"&key={self.api_key}"
        return uri

    def parse(self, payload: Any) -> StackOverflowSnapshot:
        if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
            raise DecodeError("Stack Exchange response has no 'items' list")

        answers = []
        question_id = None
        for item in payload["items"]:
            try:
                answers.append(Answer(
                    answer_id=int(item["answer_id"]),
                    last_activity_date=int(item["last_activity_date"]),
                    creation_date=item.get("creation_date"),
                    score=item.get("score", 0),
                    is_accepted=bool(item.get("is_accepted", False)),
                    owner=(item.get("owner") or {}).get("display_name", ""),
                ))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise DecodeError(f"Malformed answer in Stack Exchange response: {e}") from e
            question_id = question_id or item.get("question_id")

        quota_remaining = payload.get("quota_remaining")
        if isinstance(quota_remaining, int) and quota_remaining < 10:
            logger.warning(f"Stack Exchange quota almost exhausted: {quota_remaining} left")

        return StackOverflowSnapshot(question_id=question_id, answers=tuple(answers))

    def fingerprint_of(self, snapshot: StackOverflowSnapshot) -> str:
        newest = snapshot.newest()
        if newest is None:
            return compute_fingerprint(None)
        return compute_fingerprint({
            "answer_id": newest.answer_id,
            "last_activity_date": newest.last_activity_date,
        })
