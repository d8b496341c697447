"""Tag creation and deletion."""

from ..slack import Attachment, HandlerKind, Notification
from .helpers import user_link
from .payloads import TagPushEvent

KIND = HandlerKind(name="tag_push", title="Tag")
COLOR = "#5DB5FD"


def format_tag(event: TagPushEvent, base_url: str, before_zero: bool, after_zero: bool) -> Notification:
    """Format a tag push; an annotated tag's message goes in an attachment."""
    action = "[unknown]"
    if before_zero:
        action = "pushed new tag"
    elif after_zero:
        action = "deleted tag"

    tag = event.tag
    notification = Notification(
        text=(
            f"[{event.repository.name}] {user_link(base_url, event.user_username)} "
            f"{action} <{event.project.web_url}/commits/{tag}|{tag}>"
        ),
        kind=KIND,
    )

    if event.message:
        notification.attachments = [Attachment(fallback=event.message, text=event.message, color=COLOR)]

    return notification
