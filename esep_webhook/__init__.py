"""EsepWebhook: forwards GitHub issues webhook events to Slack."""

__version__ = "1.0.0"
