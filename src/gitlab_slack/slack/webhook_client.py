"""Slack incoming-webhook client."""

import json
import logging

import httpx

from ..config import settings
from .public_api import Notification, Notifier, SlackWebhookError

logger = logging.getLogger("gitlab_slack.slack")


class SlackWebhookClient(Notifier):
    """Posts notifications to a Slack incoming webhook."""

    def __init__(
        self,
        webhook_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._webhook_url = webhook_url or settings.slack_webhook_url
        self._client = httpx.AsyncClient(
            timeout=timeout or settings.request_timeout_seconds,
            transport=transport,
        )

    async def send(self, notification: Notification) -> None:
        """Send a notification to the webhook."""
        kind = notification.kind.title
        body = notification.to_payload()

        logger.debug(f"SEND -> {kind} to webhook")

        try:
            response = await self._client.post(self._webhook_url, json=body)
        except httpx.HTTPError as e:
            logger.error(f"FAIL <- {kind} to webhook -> {type(e).__name__} ! {e}")
            raise SlackWebhookError(kind, str(e) or type(e).__name__) from e

        if response.is_error:
            message = response.text or response.reason_phrase
            logger.error(f"FAIL <- {kind} to webhook -> {response.status_code} ! {message}")
            logger.error(f"FAIL request body:\n{json.dumps(body, indent=2)}")
            raise SlackWebhookError(kind, message, status_code=response.status_code)

        logger.debug(f"RECV <- {kind} to webhook -> {response.status_code}")

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
