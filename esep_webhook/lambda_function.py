"""Lambda handler for the GitHub issues to Slack bridge.

Accepts API Gateway proxy events (REST API payload format 1.0, with the
HTTP API 2.0 method location as a fallback) and returns proxy integration
responses.

The Slack client and the event loop that drives it live at module level so
warm invocations reuse pooled connections. Configuration is resolved from
the environment at the start of every invocation.
"""

import asyncio
import base64
import binascii
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import structlog

from esep_webhook.config import get_settings
from esep_webhook.logging_config import configure_logging
from esep_webhook.slack import SlackWebhookClient
from esep_webhook.webhook import (
    HandlerResponse,
    InboundEvent,
    WebhookHandler,
    create_webhook_handler,
)
from esep_webhook.webhook.handler import INTERNAL_ERROR
from esep_webhook.webhook.models import headers_from_mapping

logger = structlog.get_logger(__name__)

_loop: Optional[asyncio.AbstractEventLoop] = None
_logging_configured = False
_webhook_handler: WebhookHandler = create_webhook_handler(SlackWebhookClient())


def _event_loop() -> asyncio.AbstractEventLoop:
    global _loop
    if _loop is None or _loop.is_closed():
        _loop = asyncio.new_event_loop()
    return _loop


def _request_method(event: Mapping[str, Any]) -> str:
    method = event.get("httpMethod")
    if not method:
        http_context = (event.get("requestContext") or {}).get("http") or {}
        method = http_context.get("method")
    return method or ""


def _request_headers(event: Mapping[str, Any]) -> Dict[str, str]:
    """Merge single-value headers with any only present as multi-value."""
    headers = headers_from_mapping(event.get("headers"))
    present = {name.lower() for name in headers}

    for name, values in (event.get("multiValueHeaders") or {}).items():
        if name.lower() in present or not values:
            continue
        headers[name] = str(values[-1])

    return headers


def _request_body(
    event: Mapping[str, Any],
) -> Tuple[Optional[Union[str, bytes]], bool]:
    """Return the request body, base64-decoding it when flagged.

    Returns:
        Tuple of the body and whether decoding failed. An undecodable body
        is returned as the raw text so the handler can still apply its
        health check and event filter before rejecting it.
    """
    body = event.get("body")
    if body is None or not event.get("isBase64Encoded"):
        return body, False
    try:
        return base64.b64decode(body, validate=True), False
    except (binascii.Error, ValueError) as e:
        logger.warning("Body flagged as base64 is not decodable", error=str(e))
        return body, True


def to_inbound_event(event: Mapping[str, Any]) -> InboundEvent:
    """Translate an API Gateway proxy event into an InboundEvent.

    Args:
        event: API Gateway proxy event.

    Returns:
        InboundEvent for the webhook handler.
    """
    body, undecodable = _request_body(event)
    return InboundEvent(
        method=_request_method(event),
        headers=_request_headers(event),
        body=body,
        body_undecodable=undecodable,
    )


def lambda_handler(event, context):
    """
    AWS Lambda handler for GitHub issues webhooks.

    Args:
        event: API Gateway proxy event
        context: Lambda context object

    Returns:
        dict: API Gateway proxy response with JSON body
    """
    global _logging_configured

    try:
        settings = get_settings()
        if not _logging_configured:
            configure_logging(settings.log_level, settings.log_json)
            _logging_configured = True

        result = _event_loop().run_until_complete(
            _webhook_handler.handle(to_inbound_event(event or {}), settings)
        )

        logger.debug(
            "Webhook handled",
            status_code=result.status_code,
            outcome=result.outcome.value,
        )
        return result.to_api_gateway()

    except Exception as e:
        logger.error("Lambda handler error", error=str(e), exc_info=True)
        return HandlerResponse.internal_error(INTERNAL_ERROR).to_api_gateway()
