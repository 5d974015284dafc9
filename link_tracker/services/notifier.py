"""SNS publisher handing change events to the notification dispatcher."""

import asyncio
import os
import json
import logging
from datetime import datetime, timezone

import boto3
from botocore.exceptions import ClientError

from ..models import ChangeEvent

logger = logging.getLogger(__name__)


class Notifier:
    """Publishes a digest of changed links to an SNS topic."""

    def __init__(self, topic_arn: str | None = None):
        """
        Initialize notifier.

        Args:
            topic_arn: SNS topic ARN (defaults to SNS_TOPIC_ARN env var)
        """
        self.topic_arn = topic_arn or os.environ.get("SNS_TOPIC_ARN")
        self._sns = boto3.client("sns")

    async def publish(self, events: list[ChangeEvent]) -> bool:
        """
        Publish one digest message for all changed links.

        Unchanged events are dropped; the dispatcher only ever sees actual
        state transitions.

        Args:
            events: Events from one polling run

        Returns:
            True if there was nothing to send or the message was accepted,
            False otherwise
        """
        changes = [event for event in events if event.changed]
        if not changes:
            logger.info("No changes to publish")
            return True

        if not self.topic_arn:
            logger.error("SNS_TOPIC_ARN not configured")
            return False

        try:
            await asyncio.to_thread(
                self._sns.publish,
                TopicArn=self.topic_arn,
                Subject=self._build_subject(changes),
                Message=self._build_message(changes),
                MessageAttributes={
                    "changes": {
                        "DataType": "String",
                        "StringValue": json.dumps([event.to_dict() for event in changes]),
                    },
                },
            )
            logger.info(f"Published digest with {len(changes)} changes")
            return True

        except ClientError as e:
            logger.error(f"Failed to publish changes: {e}")
            return False

    def _build_subject(self, changes: list[ChangeEvent]) -> str:
        count = len(changes)
        if count == 1:
            return "Link Tracker: 1 link has updates"
        return f"Link Tracker: {count} links have updates"

    def _build_message(self, changes: list[ChangeEvent]) -> str:
        """Build message body with one section per changed link."""
        lines = [
            "=" * 60,
            "LINK UPDATES",
            "=" * 60,
            "",
            f"Time: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')}",
            f"Links with changes: {len(changes)}",
            "",
        ]

        for event in sorted(changes, key=lambda e: e.link):
            status = "[NEW LINK]" if event.is_new else "[UPDATED]"
            lines.append(f"{status} {event.link}")
            for line in event.to_dict()["summary"]:
                lines.append(f"  {line}")
            lines.append("")

        lines.append("=" * 60)
        return "\n".join(lines)
