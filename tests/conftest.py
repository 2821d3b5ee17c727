"""Pytest configuration and shared fixtures for all tests."""

import asyncio
from typing import List, Optional

import httpx
import pytest

from esep_webhook.config import BridgeSettings
from esep_webhook.slack import SlackWebhookClient

SLACK_URL = "https://hooks.slack.test/services/T000/B000/XXXX"


def run_async(coro):
    return asyncio.run(coro)


class SlackRecorder:
    """httpx mock transport handler that records every Slack request."""

    def __init__(
        self,
        status_code: int = 200,
        text: str = "ok",
        error: Optional[Exception] = None,
    ):
        self.status_code = status_code
        self.text = text
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.text)

    def client(self) -> SlackWebhookClient:
        return SlackWebhookClient(transport=httpx.MockTransport(self))


@pytest.fixture
def slack_recorder() -> SlackRecorder:
    return SlackRecorder()


@pytest.fixture
def settings() -> BridgeSettings:
    return BridgeSettings(slack_url=SLACK_URL)


@pytest.fixture
def unconfigured_settings() -> BridgeSettings:
    return BridgeSettings(slack_url=None)


@pytest.fixture
def issue_payload() -> dict:
    """Issues event payload with every field the bridge reads."""
    return {
        "action": "opened",
        "issue": {
            "html_url": "https://x/1",
            "title": "Bug",
            "number": 1,
            "body": "Something broke",
        },
        "repository": {"full_name": "o/r", "name": "r"},
        "sender": {"login": "alice"},
    }


@pytest.fixture
def clean_env(monkeypatch):
    """Remove bridge environment variables so defaults apply."""
    for name in ("SLACK_URL", "LOG_LEVEL", "LOG_JSON", "HOST", "PORT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
