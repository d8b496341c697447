"""Pipeline status changes."""

from ..slack import Attachment, HandlerKind, Notification
from .helpers import user_link
from .payloads import PipelineEvent

KIND = HandlerKind(name="pipeline", title="Pipeline")
COLOR = "#31B93D"


def format_pipeline(event: PipelineEvent, base_url: str) -> Notification:
    """Format a pipeline status change, with the triggering commit attached."""
    pipeline = event.object_attributes
    web_url = event.project.web_url

    notification = Notification(
        parse="none",
        text=(
            f"[{event.project.name}] <{web_url}/pipelines/{pipeline.id}|pipeline {pipeline.id}> "
            f"by {user_link(base_url, event.user.username)} {pipeline.status}"
        ),
        kind=KIND,
    )

    if event.commit:
        notification.attachments = [
            Attachment(
                fallback=event.commit.message,
                title=event.commit.message,
                title_link=event.commit.url,
                color=COLOR,
                mrkdwn_in=["text"],
            )
        ]

    return notification
