"""Shared fixtures for gitlab-slack tests."""

import pytest

from gitlab_slack.config import ProjectConfig
from gitlab_slack.gitlab import GitLabLabel, GitLabUser

from helpers import FakeGitLab


@pytest.fixture
def gitlab():
    """A fake GitLab with project 42 tracking the `bug` label."""
    fake = FakeGitLab()
    fake.users[1] = GitLabUser(id=1, username="bob", name="Bob")
    fake.labels[42] = [
        GitLabLabel(name="bug", color="#ff0000"),
        GitLabLabel(name="urgent", color="#00ff00"),
    ]
    return fake


@pytest.fixture
def tracked_project():
    return ProjectConfig(id=42, name="group/app", labels=["^bug$"])


@pytest.fixture
def untracked_project():
    return ProjectConfig(id=43, name="group/other")
