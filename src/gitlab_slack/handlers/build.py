"""Build (job) status changes."""

from ..slack import HandlerKind, Notification
from .helpers import user_link
from .payloads import BuildEvent

KIND = HandlerKind(name="build", title="Build")


def format_build(event: BuildEvent, base_url: str) -> Notification:
    """Format a build (job) status change."""
    project_name = event.project.name or event.project_name
    return Notification(
        parse="none",
        text=(
            f"[{project_name}] <{event.project.web_url}/-/jobs/{event.build_id}|{event.build_name} {event.build_id}> "
            f"by {user_link(base_url, event.user.username)} {event.build_status}"
        ),
        kind=KIND,
    )
