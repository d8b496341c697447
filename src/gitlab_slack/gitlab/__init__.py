"""GitLab REST API access."""

from .client import GitLabClient
from .public_api import (
    # Errors
    GitLabApiError,
    # Models
    GitLabIssue,
    GitLabLabel,
    GitLabMilestone,
    GitLabProject,
    GitLabUser,
    IssuePage,
    # ABC interface
    GitLabApi,
)

__all__ = [
    # Public API - Models
    "GitLabIssue",
    "GitLabLabel",
    "GitLabMilestone",
    "GitLabProject",
    "GitLabUser",
    "IssuePage",
    # Public API - Interface and errors
    "GitLabApi",
    "GitLabApiError",
    # Implementation
    "GitLabClient",
]
