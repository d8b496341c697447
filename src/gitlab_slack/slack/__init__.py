"""Slack message model and delivery."""

from .markdown import convert_markdown_to_slack
from .public_api import (
    UNRECOGNIZED_KIND,
    # Models
    Attachment,
    HandlerKind,
    Notification,
    # ABC interface
    Notifier,
    SlackWebhookError,
)
from .webhook_client import SlackWebhookClient

__all__ = [
    # Public API - Models
    "Attachment",
    "HandlerKind",
    "Notification",
    "UNRECOGNIZED_KIND",
    # Public API - Interface and errors
    "Notifier",
    "SlackWebhookError",
    # Implementation
    "SlackWebhookClient",
    # Formatting
    "convert_markdown_to_slack",
]
