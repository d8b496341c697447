"""The gitlab-slack service: owns the collaborators and the label cache."""

import logging
import pprint
from typing import Any

from .config import ConfigurationError, ProjectConfig, Settings, load_project_configs
from .gitlab import GitLabApi, GitLabClient
from .handlers import EventRouter, IssueEventProcessor, NotificationDispatcher
from .labels import LabelCache
from .slack import Notifier, SlackWebhookClient

logger = logging.getLogger("gitlab_slack.service")


class GitLabSlackService:
    """
    Wires the label cache, router and dispatcher together.

    Call `start()` once before handling messages; it builds the label cache
    from GitLab and fails if any tracked project cannot be cached.
    """

    def __init__(
        self,
        project_configs: list[ProjectConfig],
        gitlab: GitLabApi,
        notifier: Notifier,
        gitlab_base_url: str,
    ):
        if not project_configs:
            raise ConfigurationError("No projects defined in configuration.")

        self._project_configs = {project.id: project for project in project_configs}
        self._gitlab = gitlab
        self._notifier = notifier
        self._base_url = gitlab_base_url
        self._label_cache: LabelCache | None = None
        self._router: EventRouter | None = None
        self._dispatcher = NotificationDispatcher(self._project_configs, gitlab, notifier)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitLabSlackService":
        """Create the service and its HTTP clients from application settings."""
        settings.validate_required()
        project_configs = load_project_configs(settings.projects_file)
        return cls(
            project_configs=project_configs,
            gitlab=GitLabClient(
                base_url=settings.gitlab_base_url,
                token=settings.gitlab_api_token,
                verify=settings.gitlab_verify_ssl,
                timeout=settings.request_timeout_seconds,
            ),
            notifier=SlackWebhookClient(
                webhook_url=settings.slack_webhook_url,
                timeout=settings.request_timeout_seconds,
            ),
            gitlab_base_url=settings.gitlab_base_url,
        )

    @property
    def label_cache(self) -> LabelCache | None:
        return self._label_cache

    async def start(self) -> None:
        """Build the label cache and the router that depends on it."""
        self._label_cache = await LabelCache.build(list(self._project_configs.values()), self._gitlab)
        issue_processor = IssueEventProcessor(
            self._project_configs,
            self._label_cache,
            self._gitlab,
            self._base_url,
        )
        self._router = EventRouter(issue_processor, self._gitlab, self._base_url)
        logger.info(f"Service started ({len(self._project_configs)} projects configured)")

    async def handle_message(self, data: dict[str, Any]) -> None:
        """Route a webhook payload and deliver whatever it produces."""
        if self._router is None:
            raise RuntimeError("Service has not been started")

        notifications = await self._router.route(data)

        if not notifications:
            logger.info(f"IGNORED No handler processed the {data.get('object_kind')} message.")
            logger.debug(f"IGNORED message body:\n{pprint.pformat(data, depth=5)}")
            return

        await self._dispatcher.dispatch(data, notifications)

    async def close(self) -> None:
        """Close the HTTP clients."""
        await self._gitlab.close()
        await self._notifier.close()
