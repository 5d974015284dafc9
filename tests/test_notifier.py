"""Tests for the SNS notifier."""

import json
import threading
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from link_tracker.models import ChangeEvent
from link_tracker.providers.stackoverflow import Answer, StackOverflowSnapshot
from link_tracker.services.notifier import Notifier


@pytest.fixture
def sns():
    with patch("link_tracker.services.notifier.boto3") as boto3_mock:
        client = MagicMock()
        boto3_mock.client.return_value = client
        yield client


def make_event(link: str, changed: bool = True, previous: str | None = None) -> ChangeEvent:
    snapshot = StackOverflowSnapshot(
        question_id=1,
        answers=(Answer(answer_id=7, last_activity_date=100, owner="bob"),),
    )
    return ChangeEvent(link, previous, "f" * 64, snapshot, changed=changed)


class TestNotifier:
    """Tests for Notifier.publish."""

    @pytest.mark.asyncio
    async def test_nothing_to_publish(self, sns):
        """Unchanged events alone should not publish anything."""
        notifier = Notifier(topic_arn="arn:aws:sns:us-east-1:123:links")

        assert await notifier.publish([make_event("https://github.com/a/b", changed=False)]) is True
        sns.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_topic(self, sns, monkeypatch):
        monkeypatch.delenv("SNS_TOPIC_ARN", raising=False)
        notifier = Notifier()

        assert await notifier.publish([make_event("https://github.com/a/b")]) is False
        sns.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_publish_digest(self, sns, monkeypatch):
        """Only changed events go out, in one message."""
        monkeypatch.setenv("SNS_TOPIC_ARN", "arn:aws:sns:us-east-1:123:links")
        notifier = Notifier()

        ok = await notifier.publish([
            make_event("https://stackoverflow.com/questions/1"),
            make_event("https://stackoverflow.com/questions/2", previous="e" * 64),
            make_event("https://stackoverflow.com/questions/3", changed=False),
        ])

        assert ok is True
        kwargs = sns.publish.call_args.kwargs
        assert kwargs["TopicArn"] == "arn:aws:sns:us-east-1:123:links"
        assert kwargs["Subject"] == "Link Tracker: 2 links have updates"
        assert "[NEW LINK] https://stackoverflow.com/questions/1" in kwargs["Message"]
        assert "[UPDATED] https://stackoverflow.com/questions/2" in kwargs["Message"]
        assert "questions/3" not in kwargs["Message"]
        assert "Latest activity on answer 7 by bob" in kwargs["Message"]

        changes = json.loads(kwargs["MessageAttributes"]["changes"]["StringValue"])
        assert [c["link"] for c in changes] == [
            "https://stackoverflow.com/questions/1",
            "https://stackoverflow.com/questions/2",
        ]
        assert changes[0]["is_new"] is True
        assert changes[1]["previous"] == "e" * 64

    @pytest.mark.asyncio
    async def test_single_change_subject(self, sns):
        notifier = Notifier(topic_arn="arn")

        await notifier.publish([make_event("https://github.com/a/b")])

        assert sns.publish.call_args.kwargs["Subject"] == "Link Tracker: 1 link has updates"

    @pytest.mark.asyncio
    async def test_publish_failure(self, sns):
        sns.publish.side_effect = ClientError(
            {"Error": {"Code": "AuthorizationError", "Message": "denied"}},
            "Publish",
        )
        notifier = Notifier(topic_arn="arn")

        assert await notifier.publish([make_event("https://github.com/a/b")]) is False

    @pytest.mark.asyncio
    async def test_publish_runs_off_event_loop(self, sns):
        """The SNS call should not block the event loop thread."""
        threads = []
        sns.publish.side_effect = lambda **kwargs: threads.append(threading.get_ident())
        notifier = Notifier(topic_arn="arn")

        assert await notifier.publish([make_event("https://github.com/a/b")]) is True
        assert threads and threads[0] != threading.get_ident()
