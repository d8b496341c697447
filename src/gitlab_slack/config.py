"""Configuration management for gitlab-slack."""

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings


class ConfigurationError(Exception):
    """Raised when the service cannot start because its configuration is unusable."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # GitLab
    gitlab_base_url: str = ""  # protocol/host/port of the GitLab installation
    gitlab_api_token: str = ""
    gitlab_verify_ssl: bool = True
    gitlab_webhook_token: str = ""  # X-Gitlab-Token shared secret; empty disables the check

    # Slack
    slack_webhook_url: str = ""

    # Project list (YAML)
    projects_file: str = "./projects.yaml"

    # Outbound HTTP
    request_timeout_seconds: float = 30.0

    # Server
    host: str = "0.0.0.0"
    port: int = 4646

    # Logging
    log_level: str = "INFO"

    model_config = {"env_prefix": "GITLAB_SLACK_"}

    def validate_required(self) -> None:
        """Fail fast when a setting the service cannot run without is missing."""
        missing = [
            name
            for name in ("gitlab_base_url", "gitlab_api_token", "slack_webhook_url")
            if not getattr(self, name)
        ]
        if missing:
            env_names = ", ".join(f"GITLAB_SLACK_{name.upper()}" for name in missing)
            raise ConfigurationError(f"Missing required settings: {env_names}")


class ProjectConfig(BaseModel):
    """A tracked GitLab project.

    String label patterns are compiled once, case-insensitively, when the
    model is validated. Patterns that are already compiled are kept as is.
    """

    id: int
    name: str | None = None  # only used for logging
    channel: str | None = None
    labels: list[re.Pattern] = Field(default_factory=list)

    model_config = {"frozen": True}

    @field_validator("channel")
    @classmethod
    def _normalize_channel(cls, value: str | None) -> str | None:
        if value and not value.startswith("#"):
            return f"#{value}"
        return value or None

    @field_validator("labels", mode="before")
    @classmethod
    def _compile_labels(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, re.Pattern)):
            value = [value]
        compiled = []
        for pattern in value:
            if isinstance(pattern, re.Pattern):
                compiled.append(pattern)
                continue
            if not isinstance(pattern, str):
                # e.g. an unquoted `- ^priority::` is loaded by YAML as a mapping
                raise ValueError(f"label pattern must be a string; quote it in YAML: {pattern!r}")
            try:
                compiled.append(re.compile(pattern, re.IGNORECASE))
            except re.error as e:
                raise ValueError(f"invalid label pattern {pattern!r}: {e}") from e
        return compiled

    @property
    def display_name(self) -> str:
        return self.name or "<no-name>"


def parse_project_configs(data: Any) -> list[ProjectConfig]:
    """Validate a loaded projects document into project configurations."""
    if isinstance(data, dict):
        data = data.get("projects")

    if not data:
        raise ConfigurationError("No projects defined in configuration.")
    if not isinstance(data, list):
        raise ConfigurationError("The projects configuration must be a list.")

    try:
        projects = [ProjectConfig.model_validate(item) for item in data]
    except ValidationError as e:
        raise ConfigurationError(f"Invalid project configuration: {e}") from e

    seen: set[int] = set()
    for project in projects:
        if project.id in seen:
            raise ConfigurationError(f"Project {project.id} is configured more than once.")
        seen.add(project.id)

    return projects


def load_project_configs(path: str | Path) -> list[ProjectConfig]:
    """Load project configurations from a YAML file."""
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read projects file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse projects file {path}: {e}") from e

    return parse_project_configs(data)


settings = Settings()
