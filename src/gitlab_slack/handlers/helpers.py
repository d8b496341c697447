"""Small formatting helpers shared by the handlers."""

import re

ALL_ZEROES_PATTERN = re.compile(r"^0+$")
LINE_SPLIT_PATTERN = re.compile(r"\r\n|[\r\n]")

NONE_PLACEHOLDER = "_none_"

ACTION_VERBS = {
    "open": "created",
    "create": "created",
    "reopen": "re-opened",
    "update": "modified",
    "close": "closed",
    "merge": "merged",
    "delete": "deleted",
}


def action_to_verb(action: str | None) -> str:
    """Convert a GitLab object action to a friendly verb."""
    return ACTION_VERBS.get(action or "", f"({action})")


def is_all_zeroes(value: str | None) -> bool:
    """True for GitLab's "ref did not exist" commit hash."""
    return bool(value) and ALL_ZEROES_PATTERN.match(value) is not None


def first_line(text: str | None) -> str:
    """The first line of `text`, supporting every line ending style."""
    if not text:
        return ""
    return LINE_SPLIT_PATTERN.split(text, maxsplit=1)[0]


def user_link(base_url: str, username: str) -> str:
    """Slack link to a GitLab user's profile."""
    return f"<{base_url}/u/{username}|{username}>"


def escape_angle_brackets(text: str) -> str:
    """Keep `<` and `>` in titles from being read as Slack link markup."""
    return text.replace("<", "&lt;").replace(">", "&gt;")
