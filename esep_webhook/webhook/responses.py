"""Handler responses and the outcome taxonomy.

Every path through the webhook handler ends in exactly one HandlerResponse.
The Outcome tag records which branch of the error taxonomy produced it:

- ALIVE: GET health check (200)
- IGNORED: wrong event type or no issue URL (200, ignored=true)
- CLIENT_ERROR: empty body or invalid JSON (400)
- CONFIG_ERROR: Slack destination not configured (500)
- UPSTREAM_ERROR: Slack rejected the message or could not be reached (500)
- INTERNAL_ERROR: the hosting adapter failed before the handler ran (500)
- POSTED: notification delivered (200)
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from .models import IssueNotice

JSON_CONTENT_TYPE = "application/json"
ALIVE_MESSAGE = "EsepWebhook alive"


class Outcome(str, Enum):
    """Classification of a handled request."""

    ALIVE = "alive"
    IGNORED = "ignored"
    CLIENT_ERROR = "client_error"
    CONFIG_ERROR = "config_error"
    UPSTREAM_ERROR = "upstream_error"
    INTERNAL_ERROR = "internal_error"
    POSTED = "posted"


def _json_headers() -> Dict[str, str]:
    return {"Content-Type": JSON_CONTENT_TYPE}


@dataclass(frozen=True)
class HandlerResponse:
    """Structured result of handling one inbound event.

    Attributes:
        status_code: HTTP status code (200, 400 or 500).
        body: JSON-serializable response body.
        outcome: Taxonomy tag; not part of the wire body.
        headers: Response headers, always JSON content type.
    """

    status_code: int
    body: Dict[str, Any]
    outcome: Outcome
    headers: Dict[str, str] = field(default_factory=_json_headers)

    @classmethod
    def alive(cls) -> "HandlerResponse":
        return cls(200, {"ok": True, "message": ALIVE_MESSAGE}, Outcome.ALIVE)

    @classmethod
    def ignored(cls, reason: str) -> "HandlerResponse":
        return cls(200, {"ignored": True, "reason": reason}, Outcome.IGNORED)

    @classmethod
    def client_error(cls, message: str) -> "HandlerResponse":
        return cls(400, {"error": message}, Outcome.CLIENT_ERROR)

    @classmethod
    def config_error(cls, message: str) -> "HandlerResponse":
        return cls(500, {"error": message}, Outcome.CONFIG_ERROR)

    @classmethod
    def upstream_error(cls, message: str) -> "HandlerResponse":
        return cls(500, {"error": message}, Outcome.UPSTREAM_ERROR)

    @classmethod
    def internal_error(cls, message: str) -> "HandlerResponse":
        return cls(500, {"error": message}, Outcome.INTERNAL_ERROR)

    @classmethod
    def posted(cls, notice: IssueNotice) -> "HandlerResponse":
        return cls(
            200,
            {
                "posted": True,
                "issue": notice.issue_url,
                "action": notice.action,
                "repo": notice.repository,
            },
            Outcome.POSTED,
        )

    def body_json(self) -> str:
        return json.dumps(self.body)

    def to_api_gateway(self) -> Dict[str, Any]:
        """Render as an API Gateway Lambda proxy integration response."""
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": self.body_json(),
        }
