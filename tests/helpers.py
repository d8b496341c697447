"""Fakes and payload builders shared by the tests."""

from typing import Any

from gitlab_slack.gitlab import (
    GitLabApi,
    GitLabApiError,
    GitLabIssue,
    GitLabLabel,
    GitLabMilestone,
    GitLabProject,
    GitLabUser,
    IssuePage,
)
from gitlab_slack.slack import Notification, Notifier, SlackWebhookError

BASE_URL = "https://gitlab.example.com"
ZERO_SHA = "0000000000000000000000000000000000000000"


class FakeGitLab(GitLabApi):
    """In-memory GitLab API for testing."""

    def __init__(self):
        self.users: dict[int, GitLabUser] = {}
        self.search_results: dict[str, list[GitLabUser]] = {}
        self.projects: dict[int | str, GitLabProject] = {}
        self.milestones: dict[tuple[int, int], GitLabMilestone] = {}
        self.labels: dict[int, list[GitLabLabel]] = {}
        self.issue_pages: dict[int, list[list[GitLabIssue]]] = {}
        self.declare_total_pages = True
        self.failing_projects: set[int] = set()
        self.requested_pages: list[tuple[int, int]] = []
        self.calls: list[str] = []
        self.closed = False

    async def get_user(self, user_id):
        self.calls.append(f"get_user:{user_id}")
        if user_id not in self.users:
            raise GitLabApiError(f"/users/{user_id}", "404 User Not Found", status_code=404)
        return self.users[user_id]

    async def search_users(self, search):
        self.calls.append(f"search_users:{search}")
        return self.search_results.get(search, [])

    async def get_project(self, project_id):
        self.calls.append(f"get_project:{project_id}")
        return self.projects[project_id]

    async def get_milestone(self, project_id, milestone_id):
        self.calls.append(f"get_milestone:{project_id}:{milestone_id}")
        return self.milestones[(project_id, milestone_id)]

    async def get_open_issues(self, project_id, page=1):
        self.requested_pages.append((project_id, page))
        pages = self.issue_pages.get(project_id, [])
        items = pages[page - 1] if page <= len(pages) else []
        return IssuePage(
            items=items,
            page=page,
            total_pages=len(pages) if self.declare_total_pages else None,
        )

    async def get_labels(self, project_id):
        if project_id in self.failing_projects:
            raise GitLabApiError(f"/projects/{project_id}/labels", "500 Internal Server Error", status_code=500)
        return self.labels.get(project_id, [])

    async def close(self):
        self.closed = True


class RecordingNotifier(Notifier):
    """Notifier that records what it was asked to send."""

    def __init__(self, fail: bool = False):
        self.sent: list[Notification] = []
        self.fail = fail
        self.closed = False

    async def send(self, notification):
        if self.fail:
            raise SlackWebhookError(notification.kind.title, "invalid_payload", status_code=400)
        self.sent.append(notification)

    async def close(self):
        self.closed = True


def make_issue_payload(
    action: str = "update",
    labels: list[str] | None = None,
    state: str = "opened",
    issue_id: int = 7,
    project_id: int = 42,
    milestone_id: int | None = None,
    assignees: list[str] | None = None,
    description: str = "Steps to **reproduce**",
) -> dict[str, Any]:
    """Build an issue webhook payload."""
    return {
        "object_kind": "issue",
        "user": {"name": "Alice", "username": "alice"},
        "project": {
            "id": project_id,
            "name": "app",
            "path_with_namespace": "group/app",
            "web_url": f"{BASE_URL}/group/app",
        },
        "repository": {"name": "app"},
        "object_attributes": {
            "id": issue_id,
            "iid": 3,
            "project_id": project_id,
            "author_id": 1,
            "title": "Crash on <save>",
            "description": description,
            "url": f"{BASE_URL}/group/app/issues/3",
            "state": state,
            "action": action,
            "milestone_id": milestone_id,
        },
        "labels": [{"title": label} for label in (labels or [])],
        "assignees": [{"name": name, "username": name} for name in (assignees or [])],
    }


def make_commit(sha: str, email: str, message: str = "Fix things") -> dict[str, Any]:
    return {
        "id": sha,
        "message": message,
        "url": f"{BASE_URL}/group/app/commit/{sha}",
        "author": {"name": email.split("@")[0], "email": email},
    }


def make_push_payload(
    before: str = "a" * 40,
    after: str = "b" * 40,
    commits: list[dict[str, Any]] | None = None,
    user_email: str = "alice@example.com",
    total_commits_count: int | None = None,
) -> dict[str, Any]:
    """Build a push webhook payload. Commits are given oldest first, as GitLab sends them."""
    commits = commits or []
    return {
        "object_kind": "push",
        "before": before,
        "after": after,
        "ref": "refs/heads/feature/login",
        "user_username": "alice",
        "user_email": user_email,
        "project_id": 42,
        "project": {
            "id": 42,
            "name": "app",
            "path_with_namespace": "group/app",
            "web_url": f"{BASE_URL}/group/app",
        },
        "commits": commits,
        "total_commits_count": len(commits) if total_commits_count is None else total_commits_count,
    }


