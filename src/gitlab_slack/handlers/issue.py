"""Issue events: label change tracking and notification formatting."""

import asyncio
import logging
from typing import NamedTuple

from ..config import ProjectConfig
from ..gitlab import GitLabApi, GitLabMilestone, GitLabUser
from ..labels import LabelCache, PatternMatcher
from ..slack import Attachment, HandlerKind, Notification, convert_markdown_to_slack
from .helpers import NONE_PLACEHOLDER, action_to_verb, escape_angle_brackets, user_link
from .payloads import IssueEvent

logger = logging.getLogger("gitlab_slack.handler.issue")

KIND = HandlerKind(name="issue", title="Issue")
COLOR = "#F28A2B"

LABEL_TRACKING_ACTIONS = ("open", "reopen", "update")
FULL_DESCRIPTION_ACTIONS = ("open", "reopen")


class LabelDelta(NamedTuple):
    """Tracked labels gained and lost since an issue was last seen."""

    added: list[str]
    removed: list[str]

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed


def compute_label_delta(
    previous: list[str] | None,
    current: list[str],
    tracked: set[str] | dict[str, str],
) -> LabelDelta:
    """
    Compare an issue's cached labels with its current ones.

    Both sides are restricted to `tracked`; order follows the source list.
    """
    previous = previous or []
    added = [label for label in current if label not in previous and label in tracked]
    removed = [label for label in previous if label not in current and label in tracked]
    return LabelDelta(added=added, removed=removed)


class IssueEventProcessor:
    """
    Turns issue webhooks into notifications.

    For projects with label patterns, updates are only reported when a
    tracked label was added or removed, and the label cache is kept in step
    with every reported event. For other projects, updates are never
    reported.
    """

    def __init__(
        self,
        project_configs: dict[int, ProjectConfig],
        label_cache: LabelCache,
        gitlab: GitLabApi,
        gitlab_base_url: str,
    ):
        self._project_configs = project_configs
        self._label_cache = label_cache
        self._gitlab = gitlab
        self._base_url = gitlab_base_url.rstrip("/")

    async def process(self, event: IssueEvent) -> Notification | None:
        """Handle an issue event; None means the event is suppressed."""
        logger.debug("Handling message...")

        issue = event.object_attributes
        action = issue.action
        project_config = self._project_configs.get(issue.project_id)
        labels_tracked = project_config is not None and bool(project_config.labels)

        colors: dict[str, str] = {}
        matching_labels: list[str] = []
        delta = LabelDelta(added=[], removed=[])

        if labels_tracked:
            colors = self._label_cache.get_colors(issue.project_id) or {}

            if action in LABEL_TRACKING_ACTIONS:
                if action == "update" and issue.state == "closed":
                    # GitLab sometimes sends an update right after closing an issue.
                    logger.debug("Ignored. (extraneous update)")
                    return None

                matcher = PatternMatcher(project_config.labels)
                matching_labels = [label.title for label in matcher.select(event.labels, key=lambda label: label.title)]
                delta = compute_label_delta(
                    self._label_cache.get_tracked_labels(issue.project_id, issue.id),
                    matching_labels,
                    colors,
                )

                if action == "update" and delta.is_empty:
                    logger.debug("Ignored. (no-changes update)")
                    return None
        elif action == "update":
            logger.debug("Ignored. (no-track update)")
            return None

        author, milestone = await self._fetch_details(event)
        notification = self._format(event, author, milestone, delta, colors)

        if labels_tracked:
            if action in LABEL_TRACKING_ACTIONS:
                # Only labels with a cached color are tracked.
                tracked_labels = [label for label in matching_labels if label in colors]
                self._label_cache.set_tracked_labels(issue.project_id, issue.id, tracked_labels)
            elif action == "close":
                self._label_cache.clear_tracked_labels(issue.project_id, issue.id)

        logger.debug("Message handled.")
        return notification

    async def _fetch_details(self, event: IssueEvent) -> tuple[GitLabUser, GitLabMilestone | None]:
        """Fetch the issue author and, if set, its milestone."""
        issue = event.object_attributes
        if issue.milestone_id is None:
            return await self._gitlab.get_user(issue.author_id), None

        author, milestone = await asyncio.gather(
            self._gitlab.get_user(issue.author_id),
            self._gitlab.get_milestone(issue.project_id, issue.milestone_id),
        )
        return author, milestone

    def _format(
        self,
        event: IssueEvent,
        author: GitLabUser,
        milestone: GitLabMilestone | None,
        delta: LabelDelta,
        colors: dict[str, str],
    ) -> Notification:
        issue = event.object_attributes

        assignee = event.first_assignee
        assignee_name = user_link(self._base_url, assignee.username) if assignee else NONE_PLACEHOLDER
        milestone_name = NONE_PLACEHOLDER
        if milestone:
            milestone_name = f"<{event.project.web_url}/milestones/{milestone.iid}|{milestone.title}>"

        text = (
            f"[{event.repository.name}] {user_link(self._base_url, event.user.username)} "
            f"{action_to_verb(issue.action)} issue *#{issue.iid}* "
            f"— *assignee:* {assignee_name} "
            f"— *milestone:* {milestone_name} "
            f"— *creator:* {user_link(self._base_url, author.username)}"
        )

        main_attachment = Attachment(
            fallback=f"#{issue.iid} {issue.title}",
            title=escape_angle_brackets(issue.title),
            title_link=issue.url,
            color=COLOR,
            mrkdwn_in=["title", "text"],
        )
        if issue.action in FULL_DESCRIPTION_ACTIONS:
            main_attachment.fallback += f"\n{issue.description or ''}"
            main_attachment.text = convert_markdown_to_slack(issue.description, event.project.web_url)

        attachments = [main_attachment]
        attachments.extend(_label_change_attachments("Added", delta.added, colors))
        attachments.extend(_label_change_attachments("Removed", delta.removed, colors))

        return Notification(text=text, attachments=attachments, kind=KIND)


def _label_change_attachments(action: str, labels: list[str], colors: dict[str, str]) -> list[Attachment]:
    return [
        Attachment(
            fallback=f"{action} label {label}",
            text=f"_{action}_ label *{label}*",
            color=colors.get(label),
            mrkdwn_in=["text"],
        )
        for label in labels
    ]
