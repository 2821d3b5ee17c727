"""Slack incoming-webhook message models."""

import json

from pydantic import BaseModel


class NotificationMessage(BaseModel):
    """Slack incoming-webhook message body.

    Attributes:
        text: Message text in Slack mrkdwn.
    """

    text: str

    def to_json(self) -> str:
        """Serialize as compact, ASCII-only JSON.

        Non-ASCII characters, including lone surrogates that arrive through
        JSON escapes in the GitHub payload, are written as \\uXXXX escapes.
        """
        return json.dumps({"text": self.text}, separators=(",", ":"))
