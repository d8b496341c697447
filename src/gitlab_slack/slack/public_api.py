"""Public API for the Slack module.

Defines the notification model produced by the handlers and the notifier
interface that delivers it.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# Errors
# =============================================================================

class SlackWebhookError(Exception):
    """Delivering a notification to the Slack webhook failed."""

    def __init__(self, kind: str, message: str, status_code: int | None = None):
        super().__init__(f"Slack Webhook for {kind} - {message}")
        self.kind = kind
        self.status_code = status_code


# =============================================================================
# Models
# =============================================================================

class HandlerKind(BaseModel):
    """Identifies which handler produced a notification."""

    name: str  # the GitLab object_kind
    title: str  # display title for logging

    model_config = {"frozen": True}


UNRECOGNIZED_KIND = HandlerKind(name="unrecognized", title="Unrecognized")


class Attachment(BaseModel):
    """A Slack message attachment."""

    fallback: str
    text: str | None = None
    title: str | None = None
    title_link: str | None = None
    color: str | None = None
    mrkdwn_in: list[str] | None = None


class Notification(BaseModel):
    """A Slack incoming-webhook message."""

    text: str | None = None
    channel: str | None = None
    parse: str | None = None
    attachments: list[Attachment] | None = None

    # Not part of the Slack payload; used for logging.
    kind: HandlerKind = Field(default=UNRECOGNIZED_KIND, exclude=True)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON body Slack expects."""
        return self.model_dump(exclude_none=True)


# =============================================================================
# Service Interface (ABC)
# =============================================================================

class Notifier(ABC):
    """Delivers notifications. The transport is the implementation's concern."""

    @abstractmethod
    async def send(self, notification: Notification) -> None:
        """
        Deliver a notification.

        Raises:
            SlackWebhookError: If delivery fails.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass
