"""Wiki page changes."""

from ..slack import HandlerKind, Notification
from .helpers import action_to_verb, user_link
from .payloads import WikiPageEvent

KIND = HandlerKind(name="wiki_page", title="Wiki Page")


def format_wiki_page(event: WikiPageEvent, base_url: str) -> Notification:
    """Format a wiki page change."""
    page = event.object_attributes
    return Notification(
        parse="none",
        text=(
            f"[{event.project.path_with_namespace}] {user_link(base_url, event.user.username)} "
            f"{action_to_verb(page.action)} wiki page <{page.url}|{page.slug}>"
        ),
        kind=KIND,
    )
