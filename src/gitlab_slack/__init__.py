"""gitlab-slack: GitLab webhook notifications for Slack."""

__version__ = "0.1.0"
