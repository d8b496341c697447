"""Branch creation and deletion."""

import logging

from ..slack import HandlerKind, Notification
from .helpers import user_link
from .payloads import PushEvent

logger = logging.getLogger("gitlab_slack.handler.branch")

KIND = HandlerKind(name="push", title="Branch")


def format_branch(event: PushEvent, base_url: str, before_zero: bool, after_zero: bool) -> Notification:
    """Format a push that created or deleted a branch."""
    action = "[unknown]"
    if before_zero:
        action = "pushed new branch"
    elif after_zero:
        action = "deleted branch"

    branch = event.branch
    text = (
        f"[{event.project.path_with_namespace}] {user_link(base_url, event.user_username)} "
        f"{action} <{event.project.web_url}/tree/{branch}|{branch}>"
    )

    logger.debug(f"Formatted branch message for {branch}")
    return Notification(parse="none", text=text, kind=KIND)
