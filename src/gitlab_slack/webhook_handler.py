"""GitLab webhook endpoint."""

import hmac
import json
import logging
from typing import Any

from fastapi import APIRouter, Header, HTTPException, Request

from .config import settings
from .handlers import InvalidPayloadError

logger = logging.getLogger("gitlab_slack.webhook")

webhook_router = APIRouter(tags=["webhooks"])


def verify_token(token: str | None, secret: str) -> bool:
    """Verify the X-Gitlab-Token header against the configured secret."""
    if not token or not secret:
        return False
    return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))


@webhook_router.post("/")
@webhook_router.post("/webhooks/gitlab")
async def handle_gitlab_webhook(
    request: Request,
    x_gitlab_token: str | None = Header(None, alias="X-Gitlab-Token"),
    x_gitlab_event: str | None = Header(None, alias="X-Gitlab-Event"),
) -> dict[str, Any]:
    """
    Handle incoming GitLab webhooks.

    Every failure is answered here; nothing escapes to affect other requests.
    """
    client = request.client.host if request.client else "unknown"
    logger.debug(f"RECV -> {request.headers.get('x-forwarded-for', client)} - POST {request.url.path} ({x_gitlab_event})")

    if settings.gitlab_webhook_token and not verify_token(x_gitlab_token, settings.gitlab_webhook_token):
        raise HTTPException(status_code=401, detail="Invalid token")

    payload = await request.body()

    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"FAIL Could not JSON parse body. ! {e}")
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    if not isinstance(data, dict):
        logger.error(f"FAIL Webhook body is a {type(data).__name__}, not an object")
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    service = request.app.state.service

    try:
        await service.handle_message(data)
    except InvalidPayloadError as e:
        logger.error(f"FAIL {e}")
        raise HTTPException(status_code=400, detail="Invalid webhook payload")
    except Exception:
        logger.exception(f"FAIL Failed handling {data.get('object_kind')} message")
        raise HTTPException(status_code=500, detail="Webhook processing failed")

    return {"status": "ok"}
