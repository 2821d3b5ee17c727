"""GitHub issues webhook handling for the Slack bridge.

This module receives GitHub "issues" webhook events, extracts a summary of
the issue and forwards it to a Slack incoming webhook.
"""

from .models import InboundEvent, IssueNotice, IssuePayload
from .responses import HandlerResponse, Outcome
from .handler import WebhookHandler, create_webhook_handler

__all__ = [
    "HandlerResponse",
    "InboundEvent",
    "IssueNotice",
    "IssuePayload",
    "Outcome",
    "WebhookHandler",
    "create_webhook_handler",
]
