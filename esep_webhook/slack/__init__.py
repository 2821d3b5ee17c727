"""Slack incoming-webhook delivery."""

from .client import SlackDeliveryError, SlackWebhookClient
from .models import NotificationMessage

__all__ = [
    "NotificationMessage",
    "SlackDeliveryError",
    "SlackWebhookClient",
]
