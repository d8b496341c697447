"""Deliver routed notifications, honoring per-project channel overrides."""

import asyncio
import logging
from typing import Any
from urllib.parse import quote

from ..config import ProjectConfig
from ..gitlab import GitLabApi
from ..slack import Notification, Notifier

logger = logging.getLogger("gitlab_slack.dispatcher")


class NotificationDispatcher:
    """Sends notifications to the channel configured for their project."""

    def __init__(
        self,
        project_configs: dict[int, ProjectConfig],
        gitlab: GitLabApi,
        notifier: Notifier,
    ):
        self._project_configs = project_configs
        self._gitlab = gitlab
        self._notifier = notifier

    async def dispatch(self, data: dict[str, Any], notifications: list[Notification]) -> None:
        """Apply the project's channel, then deliver all notifications concurrently."""
        if not notifications:
            return

        project_id = await self.resolve_project_id(data)
        project_config = self._project_configs.get(project_id) if project_id is not None else None

        if project_config and project_config.channel:
            for notification in notifications:
                notification.channel = project_config.channel

        await asyncio.gather(*[self._notifier.send(notification) for notification in notifications])
        logger.info(
            f"Sent {len(notifications)} notification(s) for {data.get('object_kind')} "
            f"(project={project_id}, channel={notifications[0].channel or 'default'})"
        )

    async def resolve_project_id(self, data: dict[str, Any]) -> int | None:
        """
        Find the numeric project ID of a payload.

        Falls back to looking the project up by its namespaced path, which
        needs a GitLab call.
        """
        project_id = data.get("project_id")
        if project_id is not None:
            return project_id

        project = data.get("project") or {}
        if project.get("id") is not None:
            return project["id"]

        path = project.get("path_with_namespace")
        if path:
            return (await self._gitlab.get_project(quote(path, safe=""))).id

        logger.debug(f"Could not find project ID in a {data.get('object_kind')} message.")
        return None
