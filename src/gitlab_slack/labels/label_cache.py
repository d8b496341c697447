"""In-memory caches of tracked issue labels.

For every project with label patterns the cache holds:
- the colors of the project's tracked labels, fetched once at startup
- the tracked labels each open issue carried the last time it was seen

Colors are never refreshed after startup, and concurrent events for the same
issue race on its entry (last write wins).
"""

import asyncio
import logging

from ..config import ProjectConfig
from ..gitlab import GitLabApi
from .patterns import PatternMatcher

logger = logging.getLogger("gitlab_slack.cache")


class LabelCache:
    """Per-project label colors and per-issue tracked labels."""

    def __init__(self):
        self._label_colors: dict[int, dict[str, str]] = {}
        self._issue_labels: dict[int, dict[int, list[str]]] = {}

    @classmethod
    async def build(cls, project_configs: list[ProjectConfig], gitlab: GitLabApi) -> "LabelCache":
        """
        Build the caches for every project that has label patterns.

        Projects are cached concurrently; the first failure propagates.
        """
        cache = cls()
        await asyncio.gather(
            *[cache._cache_project(project, gitlab) for project in project_configs if project.labels]
        )
        return cache

    async def _cache_project(self, project: ProjectConfig, gitlab: GitLabApi) -> None:
        """Cache label colors and open issue labels for one project."""
        matcher = PatternMatcher(project.labels)
        logger.info(f"[{project.id}] Caching information for {project.id} / {project.display_name}...")

        labels = await gitlab.get_labels(project.id)
        colors = {label.name: label.color for label in matcher.select(labels, key=lambda label: label.name)}
        logger.info(f"[{project.id}] Cached {len(colors)} project label colors.")

        issue_labels: dict[int, list[str]] = {}
        page = 1
        # Pages are fetched one at a time to keep the load on GitLab bounded.
        while True:
            result = await gitlab.get_open_issues(project.id, page)
            if not result.items:
                break

            for issue in result.items:
                matching = [label for label in matcher.select(issue.labels) if label in colors]
                if matching:
                    issue_labels[issue.id] = matching

            if result.total_pages is not None and page >= result.total_pages:
                break
            page += 1

        logger.info(f"[{project.id}] Cached labels of {len(issue_labels)} issues.")

        self._label_colors[project.id] = colors
        self._issue_labels[project.id] = issue_labels

    def is_tracked(self, project_id: int) -> bool:
        """True if the project was cached at startup."""
        return project_id in self._label_colors

    def get_colors(self, project_id: int) -> dict[str, str] | None:
        """Tracked label name to color for a project."""
        return self._label_colors.get(project_id)

    def get_tracked_labels(self, project_id: int, issue_id: int) -> list[str] | None:
        """Last known tracked labels of an issue; None means none are known."""
        return self._issue_labels.get(project_id, {}).get(issue_id)

    def set_tracked_labels(self, project_id: int, issue_id: int, labels: list[str]) -> None:
        """Overwrite the tracked labels of an issue."""
        self._issue_labels.setdefault(project_id, {})[issue_id] = list(labels)

    def clear_tracked_labels(self, project_id: int, issue_id: int) -> None:
        """Forget an issue, e.g. when it is closed."""
        self._issue_labels.get(project_id, {}).pop(issue_id, None)
