"""Merge request events."""

import logging

from ..slack import Attachment, HandlerKind, Notification, convert_markdown_to_slack
from .helpers import NONE_PLACEHOLDER, action_to_verb, first_line, user_link
from .payloads import MergeRequestEvent

logger = logging.getLogger("gitlab_slack.handler.merge_request")

KIND = HandlerKind(name="merge_request", title="Merge Request")
COLOR = "#31B93D"


def format_merge_request(event: MergeRequestEvent, base_url: str) -> Notification | None:
    """Format a merge request event. Updates are too noisy and are dropped."""
    mr = event.object_attributes

    if mr.action == "update":
        logger.debug("Ignored. (update)")
        return None

    assignee = event.first_assignee
    assignee_name = user_link(base_url, assignee.username) if assignee else NONE_PLACEHOLDER

    attachment = Attachment(
        fallback=mr.title,
        title=mr.title,
        title_link=mr.url,
        color=COLOR,
        mrkdwn_in=["text"],
    )
    if mr.action in ("open", "reopen"):
        attachment.fallback += f"\n{mr.description or ''}"
        attachment.text = convert_markdown_to_slack(first_line(mr.description), mr.source.web_url)

    text = (
        f"[{event.project.path_with_namespace}] {user_link(base_url, event.user.username)} "
        f"{action_to_verb(mr.action)} merge request *!{mr.iid}* "
        f"— *source:* <{mr.source.web_url}/tree/{mr.source_branch}|{mr.source_branch}> "
        f"— *target:* <{mr.target.web_url}/tree/{mr.target_branch}|{mr.target_branch}> "
        f"— *assignee:* {assignee_name}"
    )

    return Notification(parse="none", text=text, attachments=[attachment], kind=KIND)
