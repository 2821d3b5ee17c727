"""GitHub issues webhook handler for the Slack bridge.

This module provides the WebhookHandler class, which turns one inbound
HTTP request into one HandlerResponse. Signature verification, retries
and deduplication are out of scope; GitHub redelivers on its own if a
call fails.

Handling order:
1. GET requests are answered as a health check.
2. Requests whose X-GitHub-Event header is not "issues" are ignored.
3. Empty bodies and invalid JSON are rejected with 400.
4. Fields are extracted with defaults; events without an issue URL
   are ignored.
5. The Slack destination must be configured, otherwise 500.
6. The formatted summary is posted to Slack; any non-2xx answer or
   transport failure yields 500.

The handler never raises: every path returns a HandlerResponse.
"""

import json

import structlog

from esep_webhook.config import BridgeSettings
from esep_webhook.slack import (
    NotificationMessage,
    SlackDeliveryError,
    SlackWebhookClient,
)

from .models import InboundEvent, IssuePayload
from .responses import HandlerResponse

logger = structlog.get_logger(__name__)

GITHUB_EVENT_HEADER = "X-GitHub-Event"
ISSUES_EVENT = "issues"

NOT_ISSUES_EVENT = "Not an 'issues' event"
NO_ISSUE_URL = "No issue.html_url present"
EMPTY_BODY = "Empty body"
INVALID_JSON = "Invalid JSON"
SLACK_NOT_CONFIGURED = "Slack not configured"
SLACK_POST_FAILED = "Failed to post to Slack"
SLACK_CALL_FAILED = "Slack call failed"
INTERNAL_ERROR = "Internal error"


class WebhookHandler:
    """Handler that forwards GitHub issues events to Slack.

    The handler holds no per-request state. The only shared object is the
    Slack client, whose pooled connections may be reused by concurrent
    invocations.

    Attributes:
        slack_client: Client used to post the notification.
    """

    def __init__(self, slack_client: SlackWebhookClient) -> None:
        self.slack_client = slack_client

    async def handle(
        self, event: InboundEvent, settings: BridgeSettings
    ) -> HandlerResponse:
        """Handle one inbound webhook request.

        Args:
            event: The inbound request.
            settings: Configuration resolved for this invocation.

        Returns:
            HandlerResponse describing the outcome.
        """
        if event.is_get:
            return HandlerResponse.alive()

        event_type = event.header(GITHUB_EVENT_HEADER)
        if event_type is None or event_type.lower() != ISSUES_EVENT:
            logger.debug("Ignoring non-issues event", event_type=event_type)
            return HandlerResponse.ignored(NOT_ISSUES_EVENT)

        if not event.has_body:
            return HandlerResponse.client_error(EMPTY_BODY)

        if event.body_undecodable:
            logger.error("Failed to decode request body")
            return HandlerResponse.client_error(INVALID_JSON)

        try:
            data = json.loads(event.body)
        except (ValueError, RecursionError) as e:
            logger.error("Failed to parse JSON", error=str(e))
            return HandlerResponse.client_error(INVALID_JSON)

        notice = IssuePayload.from_json_value(data).to_notice()

        if not notice.has_issue_url:
            logger.debug("Ignoring issues event without URL", action=notice.action)
            return HandlerResponse.ignored(NO_ISSUE_URL)

        if not settings.slack_configured:
            logger.error("SLACK_URL environment variable is not set")
            return HandlerResponse.config_error(SLACK_NOT_CONFIGURED)

        message = NotificationMessage(text=notice.render_text())

        try:
            await self.slack_client.post_message(settings.slack_url, message)
        except SlackDeliveryError as e:
            logger.error(
                "Slack rejected message",
                status_code=e.status_code,
                response_body=e.response_body,
            )
            return HandlerResponse.upstream_error(SLACK_POST_FAILED)
        except Exception as e:
            logger.exception("Error calling Slack", error=str(e))
            return HandlerResponse.upstream_error(SLACK_CALL_FAILED)

        logger.info(
            "Posted issue notification",
            issue=notice.issue_url,
            action=notice.action,
            repo=notice.repository,
        )
        return HandlerResponse.posted(notice)


def create_webhook_handler(slack_client: SlackWebhookClient) -> WebhookHandler:
    """Factory function to create a WebhookHandler instance.

    Args:
        slack_client: The Slack client to post through.

    Returns:
        A configured WebhookHandler instance.
    """
    return WebhookHandler(slack_client=slack_client)
