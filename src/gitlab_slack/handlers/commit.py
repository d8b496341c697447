"""Commit batches pushed to a branch."""

import asyncio
import logging
import re

from ..gitlab import GitLabApi
from ..slack import Attachment, HandlerKind, Notification
from .helpers import first_line, user_link
from .payloads import Commit, PushEvent

logger = logging.getLogger("gitlab_slack.handler.commit")

KIND = HandlerKind(name="push", title="Commit")
COLOR = "#1B6EB1"

MENTION_PATHS = {
    "#": "/issues/",
    "!": "/merge_requests/",
}
ISSUE_MENTION_PATTERN = re.compile(r"#\d+")
MERGE_REQUEST_MENTION_PATTERN = re.compile(r"!\d+")
FIRST_LINE_ISSUE_PATTERN = re.compile(r"\s*\(?(?:#\d+(?:,\s*)?)+\)?")
FIRST_LINE_MERGE_REQUEST_PATTERN = re.compile(r"\s*\(?(?:!\d+(?:,\s*)?)+\)?")


def filter_pusher_commits(commits: list[Commit], user_email: str | None) -> list[Commit]:
    """
    Keep the leading run of commits authored by the pusher.

    `commits` must already be newest first; the scan stops at the first
    commit by someone else.
    """
    filtered = []
    for commit in commits:
        if commit.author.email != user_email:
            break
        filtered.append(commit)
    return filtered


async def format_commits(
    event: PushEvent,
    gitlab: GitLabApi,
    base_url: str,
    filter_commits: bool = False,
) -> Notification | None:
    """
    Format the commits of a push.

    With `filter_commits`, only the pusher's own most recent commits are
    listed; this is used for new branches, whose push carries history that
    is not new.
    """
    if not event.commits:
        logger.debug("Ignored. (no commits)")
        return None

    # Newest first for display; not strictly reverse chronological.
    commits = list(reversed(event.commits))
    commit_count = event.total_commits_count

    if filter_commits:
        commits = filter_pusher_commits(commits, event.user_email)
        if not commits:
            logger.debug("Ignored. (no commits by pusher)")
            return None
        commit_count = len(commits)

    usernames = await asyncio.gather(*[_resolve_username(gitlab, commit.author.email) for commit in commits])

    fallbacks = []
    texts = []
    for commit, username in zip(commits, usernames):
        commit_id = commit.id[:8]
        message, mentions = _extract_mentions(commit.message)
        name = username or commit.author.email

        suffix = f" ({', '.join(mentions)})" if mentions else ""
        fallbacks.append(f"[{name}] {commit_id}: {message}{suffix}")

        links = [
            f"<{event.project.web_url}{MENTION_PATHS[mention[0]]}{mention[1:]}|{mention}>"
            for mention in mentions
        ]
        link_suffix = f" ({', '.join(links)})" if links else ""
        texts.append(f"[{name}] <{commit.url}|{commit_id}>: {message}{link_suffix}")

    return Notification(
        parse="none",
        text=(
            f"[{event.project.path_with_namespace}:{event.branch}] "
            f"{user_link(base_url, event.user_username)} pushed {commit_count} commits:"
        ),
        attachments=[
            Attachment(
                fallback="\n".join(fallbacks),
                text="\n".join(texts),
                color=COLOR,
                mrkdwn_in=["text"],
            )
        ],
        kind=KIND,
    )


def _extract_mentions(message: str) -> tuple[str, list[str]]:
    """Split a commit message into its first line and its unique mentions.

    Mentions are collected from the whole message and stripped from the
    first line so they are not shown twice.
    """
    line = first_line(message)
    mentions: list[str] = []

    issue_mentions = ISSUE_MENTION_PATTERN.findall(message)
    if issue_mentions:
        mentions.extend(dict.fromkeys(issue_mentions))
        line = FIRST_LINE_ISSUE_PATTERN.sub("", line)

    merge_request_mentions = MERGE_REQUEST_MENTION_PATTERN.findall(message)
    if merge_request_mentions:
        mentions.extend(dict.fromkeys(merge_request_mentions))
        line = FIRST_LINE_MERGE_REQUEST_PATTERN.sub("", line)

    return line, mentions


async def _resolve_username(gitlab: GitLabApi, email: str) -> str | None:
    """Find the GitLab username for a commit author's email, if any."""
    if not email:
        return None

    email = email.lower()
    users = await gitlab.search_users(email)
    for user in users:
        if user.email and user.email.lower() == email:
            return user.username
    return None
