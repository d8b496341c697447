"""Public API for the GitLab module.

This module defines the models and the client interface the rest of the
service depends on. Implementation modules import from here, not the other
way around.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field


# =============================================================================
# Errors
# =============================================================================

class GitLabApiError(Exception):
    """A GitLab API request failed (non-2xx response or transport error)."""

    def __init__(self, route: str, message: str, status_code: int | None = None):
        super().__init__(f"GitLabApi {route} - {message}")
        self.route = route
        self.status_code = status_code


# =============================================================================
# Models
# =============================================================================

class GitLabUser(BaseModel):
    """A GitLab user. `email` is only visible to administrators."""

    id: int
    username: str
    name: str = ""
    email: str | None = None


class GitLabProject(BaseModel):
    """A GitLab project."""

    id: int
    name: str = ""
    path_with_namespace: str = ""
    web_url: str = ""


class GitLabLabel(BaseModel):
    """A project label."""

    name: str
    color: str


class GitLabMilestone(BaseModel):
    """A project milestone."""

    id: int
    iid: int
    title: str


class GitLabIssue(BaseModel):
    """An issue as returned by the issues API. Labels are plain names."""

    id: int
    iid: int
    labels: list[str] = Field(default_factory=list)


class IssuePage(BaseModel):
    """One page of a paginated issue listing."""

    items: list[GitLabIssue] = Field(default_factory=list)
    page: int = 1
    total_pages: int | None = None


# =============================================================================
# Service Interface (ABC)
# =============================================================================

class GitLabApi(ABC):
    """Read-only interface to the GitLab REST API."""

    @abstractmethod
    async def get_user(self, user_id: int) -> GitLabUser:
        """Get a user by ID."""
        pass

    @abstractmethod
    async def search_users(self, search: str) -> list[GitLabUser]:
        """Search users by username or email address."""
        pass

    @abstractmethod
    async def get_project(self, project_id: int | str) -> GitLabProject:
        """
        Get a project.

        Args:
            project_id: Numeric ID or URL-encoded namespaced path.
        """
        pass

    @abstractmethod
    async def get_milestone(self, project_id: int, milestone_id: int) -> GitLabMilestone:
        """Get a project milestone by its global ID."""
        pass

    @abstractmethod
    async def get_open_issues(self, project_id: int, page: int = 1) -> IssuePage:
        """
        Get one page of a project's open issues.

        Args:
            project_id: The project ID.
            page: The 1-based page number.

        Returns:
            The page's issues and the total page count declared by the API.
        """
        pass

    @abstractmethod
    async def get_labels(self, project_id: int) -> list[GitLabLabel]:
        """Get a project's labels (first 100)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass
