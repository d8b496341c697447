"""GitLab REST API v4 client."""

import logging
from typing import Any

import httpx

from ..config import settings
from .public_api import (
    GitLabApi,
    GitLabApiError,
    GitLabIssue,
    GitLabLabel,
    GitLabMilestone,
    GitLabProject,
    GitLabUser,
    IssuePage,
)

logger = logging.getLogger("gitlab_slack.gitlab")


class GitLabClient(GitLabApi):
    """
    httpx implementation of the GitLab API interface.

    All calls are GETs. Any non-2xx response or transport failure is logged
    and raised as GitLabApiError; nothing is retried.
    """

    API_BASE_ROUTE = "/api/v4"
    PER_PAGE = 100

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        verify: bool | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or settings.gitlab_base_url).rstrip("/")
        self._token = token or settings.gitlab_api_token
        self._client = httpx.AsyncClient(
            base_url=self._base_url + self.API_BASE_ROUTE,
            headers={
                "Accept": "application/json",
                "Private-Token": self._token,
            },
            verify=settings.gitlab_verify_ssl if verify is None else verify,
            timeout=timeout or settings.request_timeout_seconds,
            transport=transport,
        )

    async def get_user(self, user_id: int) -> GitLabUser:
        """Get user information by ID."""
        response = await self._get(f"/users/{user_id}")
        return GitLabUser.model_validate(response.json())

    async def search_users(self, search: str) -> list[GitLabUser]:
        """Search for users by username or email address."""
        # A search term should never match more than a page of users.
        response = await self._get("/users", params={"per_page": self.PER_PAGE, "search": search})
        return [GitLabUser.model_validate(item) for item in response.json()]

    async def get_project(self, project_id: int | str) -> GitLabProject:
        """Get a project by ID or URL-encoded path."""
        response = await self._get(f"/projects/{project_id}")
        return GitLabProject.model_validate(response.json())

    async def get_milestone(self, project_id: int, milestone_id: int) -> GitLabMilestone:
        """Get a milestone."""
        response = await self._get(f"/projects/{project_id}/milestones/{milestone_id}")
        return GitLabMilestone.model_validate(response.json())

    async def get_open_issues(self, project_id: int, page: int = 1) -> IssuePage:
        """Get a page of open issues for a project."""
        response = await self._get(
            f"/projects/{project_id}/issues",
            params={"state": "opened", "per_page": self.PER_PAGE, "page": page},
        )
        return IssuePage(
            items=[GitLabIssue.model_validate(item) for item in response.json()],
            page=_int_header(response, "x-page") or page,
            total_pages=_int_header(response, "x-total-pages"),
        )

    async def get_labels(self, project_id: int) -> list[GitLabLabel]:
        """Get the labels for a project."""
        # Technically paginated, but a single page of 100 covers real projects.
        response = await self._get(f"/projects/{project_id}/labels", params={"per_page": self.PER_PAGE})
        return [GitLabLabel.model_validate(item) for item in response.json()]

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _get(self, route: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """Send a GET request, raising GitLabApiError on failure."""
        logger.debug(f"SEND -> GET {route} {params or ''}")

        try:
            response = await self._client.get(route, params=params)
        except httpx.HTTPError as e:
            logger.error(f"FAIL <- GET {route} -> {type(e).__name__} ! {e}")
            raise GitLabApiError(route, str(e) or type(e).__name__) from e

        if response.is_error:
            message = _error_message(response)
            logger.error(f"FAIL <- GET {route} -> {response.status_code} ! {message}")
            logger.debug(f"FAIL response body: {response.text}")
            raise GitLabApiError(route, message, status_code=response.status_code)

        logger.debug(f"RECV <- GET {route} -> {response.status_code}")
        return response


def _int_header(response: httpx.Response, name: str) -> int | None:
    value = response.headers.get(name)
    try:
        return int(value) if value else None
    except ValueError:
        return None


def _error_message(response: httpx.Response) -> str:
    """Pull the most useful error description out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(body, dict):
        message = body.get("error") or body.get("message")
        if message:
            return str(message)
    return str(body)
