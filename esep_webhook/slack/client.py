"""Slack incoming-webhook client.

This module provides an async wrapper around a pooled httpx client for
posting notification messages to a Slack incoming webhook. There is no
retry logic: a message is either accepted with a 2xx status or the call
fails.

The underlying httpx.AsyncClient is created lazily and reused across
invocations. It is safe for concurrent use and holds no per-request state.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from .models import NotificationMessage

logger = structlog.get_logger(__name__)


class SlackDeliveryError(Exception):
    """Raised when Slack answers a webhook post with a non-2xx status.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code from the response.
        response_body: Response body from Slack.
        request_url: The URL that was requested.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        request_url: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        self.request_url = request_url
        super().__init__(message)


class SlackWebhookClient:
    """Async Slack incoming-webhook client.

    The destination URL is passed per call rather than fixed at
    construction, since it is resolved from configuration for every
    invocation.

    Attributes:
        transport: Optional httpx transport, used to substitute a mock
                   transport in tests.

    Example:
        >>> client = SlackWebhookClient()
        >>> async with client:
        ...     await client.post_message(url, NotificationMessage(text="hi"))
    """

    USER_AGENT = "EsepWebhook/1.0"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating it if necessary.

        Returns:
            The httpx AsyncClient instance.
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=self._default_headers(),
                transport=self.transport,
            )
        return self._client

    def _default_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.USER_AGENT,
        }

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "SlackWebhookClient":
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: Any,
        exc_val: Any,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit - close the client."""
        await self.close()

    async def post_message(
        self, url: str, message: NotificationMessage
    ) -> httpx.Response:
        """Post a message to a Slack incoming webhook.

        Args:
            url: The incoming-webhook URL.
            message: The message to send.

        Returns:
            The successful (2xx) httpx response.

        Raises:
            SlackDeliveryError: If Slack answers with a non-2xx status.
            httpx.HTTPError: If the request could not be completed.
        """
        response = await self.client.post(
            url,
            content=message.to_json(),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

        if not response.is_success:
            raise SlackDeliveryError(
                f"Slack returned {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
                request_url=url,
            )

        logger.debug("Slack accepted message", status_code=response.status_code)
        return response
