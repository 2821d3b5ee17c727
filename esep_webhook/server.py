"""FastAPI application entry point for the webhook bridge.

Serves the same handler as the Lambda entry point for local development and
container deployments. A single catch-all route accepts any path, so the
health check and the GitHub webhook can be pointed at whatever URL the
deployment uses.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import Response
from pydantic import ValidationError

from esep_webhook.config import BridgeSettings, get_settings, redact_secret
from esep_webhook.logging_config import configure_logging
from esep_webhook.slack import SlackWebhookClient
from esep_webhook.webhook import (
    HandlerResponse,
    InboundEvent,
    create_webhook_handler,
)
from esep_webhook.webhook.handler import INTERNAL_ERROR

logger = structlog.get_logger(__name__)

ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def _log_configuration(settings: BridgeSettings) -> None:
    """Log configuration values with the Slack URL redacted.

    Args:
        settings: The bridge settings to log.
    """
    logger.info(
        "Bridge configuration",
        slack_url=redact_secret(settings.slack_url, visible_chars=24),
        log_level=settings.log_level,
        host=settings.host,
        port=settings.port,
    )


def create_app(slack_client: Optional[SlackWebhookClient] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        slack_client: Client to post through. A new pooled client is created
                      when omitted.

    Returns:
        FastAPI: The configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Wire the handler at startup and close the Slack client at shutdown."""
        settings = get_settings()
        configure_logging(settings.log_level, settings.log_json)
        _log_configuration(settings)

        client = slack_client or SlackWebhookClient()
        app.state.slack_client = client
        app.state.webhook_handler = create_webhook_handler(client)

        logger.info("EsepWebhook started")

        yield

        await client.close()
        logger.info("EsepWebhook shutdown complete")

    app = FastAPI(
        title="EsepWebhook",
        description="Forwards GitHub issues events to a Slack incoming webhook",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.api_route("/{path:path}", methods=ROUTED_METHODS)
    async def receive(request: Request) -> Response:
        """Hand any request to the webhook handler.

        Settings are resolved per request, matching the Lambda entry point.
        Invalid settings produce the same JSON 500 the Lambda returns.

        Returns:
            Response: The handler's status code and JSON body.
        """
        try:
            settings = get_settings()
        except ValidationError as e:
            logger.error("Invalid configuration", error=str(e))
            result = HandlerResponse.internal_error(INTERNAL_ERROR)
        else:
            inbound = InboundEvent(
                method=request.method,
                headers=dict(request.headers),
                body=await request.body(),
            )
            result = await request.app.state.webhook_handler.handle(
                inbound, settings
            )

        return Response(
            content=result.body_json(),
            status_code=result.status_code,
            headers=result.headers,
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    dev_settings = get_settings()
    uvicorn.run(
        "esep_webhook.server:app",
        host=dev_settings.host,
        port=dev_settings.port,
    )
