"""Classify webhook payloads and hand them to the matching formatter."""

import json
import logging
from typing import Any

from pydantic import ValidationError

from ..gitlab import GitLabApi
from ..slack import UNRECOGNIZED_KIND, Attachment, Notification
from .branch import format_branch
from .build import format_build
from .commit import format_commits
from .helpers import is_all_zeroes
from .issue import IssueEventProcessor
from .merge_request import format_merge_request
from .payloads import (
    KNOWN_KINDS,
    BuildEvent,
    IssueEvent,
    MergeRequestEvent,
    PipelineEvent,
    PushEvent,
    TagPushEvent,
    WikiPageEvent,
    webhook_event_adapter,
)
from .pipeline import format_pipeline
from .tag import format_tag
from .wiki_page import format_wiki_page

logger = logging.getLogger("gitlab_slack.router")

HandlerOutput = Notification | list[Notification | None] | None


class InvalidPayloadError(Exception):
    """A payload of a known kind is missing fields its handler needs."""


class EventRouter:
    """
    Routes a webhook payload to the formatter for its `object_kind`.

    Output is always a list of zero or more notifications.
    """

    def __init__(self, issue_processor: IssueEventProcessor, gitlab: GitLabApi, gitlab_base_url: str):
        self._issue_processor = issue_processor
        self._gitlab = gitlab
        self._base_url = gitlab_base_url.rstrip("/")

    async def route(self, data: dict[str, Any]) -> list[Notification]:
        """Produce the notifications for a webhook payload."""
        kind = data.get("object_kind")

        if kind is None:
            logger.debug("Payload has no object_kind")
            return []

        if not isinstance(kind, str) or kind not in KNOWN_KINDS:
            logger.info(f"Unrecognized object_kind {kind!r}")
            return [unrecognized_notification(data)]

        try:
            event = webhook_event_adapter.validate_python(data)
        except ValidationError as e:
            raise InvalidPayloadError(f"Invalid {kind} payload: {e}") from e

        return _normalize(await self._dispatch(event))

    async def _dispatch(self, event: Any) -> HandlerOutput:
        if isinstance(event, IssueEvent):
            return await self._issue_processor.process(event)

        if isinstance(event, PushEvent):
            return await self._route_push(event)

        if isinstance(event, TagPushEvent):
            return format_tag(event, self._base_url, is_all_zeroes(event.before), is_all_zeroes(event.after))

        if isinstance(event, MergeRequestEvent):
            return format_merge_request(event, self._base_url)

        if isinstance(event, WikiPageEvent):
            return format_wiki_page(event, self._base_url)

        if isinstance(event, PipelineEvent):
            return format_pipeline(event, self._base_url)

        if isinstance(event, BuildEvent):
            return format_build(event, self._base_url)

        raise TypeError(f"No handler for {type(event).__name__}")

    async def _route_push(self, event: PushEvent) -> HandlerOutput:
        """A push is a branch event when either side of it is the all-zero hash."""
        before_zero = is_all_zeroes(event.before)
        after_zero = is_all_zeroes(event.after)

        if not before_zero and not after_zero:
            return await format_commits(event, self._gitlab, self._base_url)

        outputs: list[Notification | None] = [format_branch(event, self._base_url, before_zero, after_zero)]
        if before_zero:
            # A new branch may also bring the pusher's new commits with it.
            outputs.append(await format_commits(event, self._gitlab, self._base_url, filter_commits=True))
        return outputs


def unrecognized_notification(data: dict[str, Any]) -> Notification:
    """Surface an unexpected payload as-is so someone notices it."""
    return Notification(
        parse="none",
        attachments=[
            Attachment(
                title="GitLab Webhook - Unrecognized Data",
                fallback="(cannot display JSON unformatted)",
                text="```" + json.dumps(data, indent=4, default=str) + "```",
                color="danger",
                mrkdwn_in=["text"],
            )
        ],
        kind=UNRECOGNIZED_KIND,
    )


def _normalize(output: HandlerOutput) -> list[Notification]:
    if output is None:
        return []
    if isinstance(output, Notification):
        return [output]
    return [notification for notification in output if notification is not None]
