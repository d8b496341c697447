"""Tests for the GitLab and Slack HTTP clients."""

import json

import httpx
import pytest

from gitlab_slack.gitlab import GitLabApiError, GitLabClient
from gitlab_slack.slack import Attachment, HandlerKind, Notification, SlackWebhookClient, SlackWebhookError

BASE_URL = "https://gitlab.example.com"
WEBHOOK_URL = "https://hooks.slack.com/services/T000/B000/XXX"


def gitlab_client(handler) -> GitLabClient:
    return GitLabClient(
        base_url=BASE_URL + "/",
        token="secret-token",
        verify=True,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


class TestGitLabClient:
    """Tests for GitLabClient against a mocked transport."""

    @pytest.mark.asyncio
    async def test_get_user_sends_token(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": 1, "username": "bob", "name": "Bob"})

        client = gitlab_client(handler)
        user = await client.get_user(1)
        await client.close()

        assert user.username == "bob"
        assert str(seen[0].url) == f"{BASE_URL}/api/v4/users/1"
        assert seen[0].headers["Private-Token"] == "secret-token"

    @pytest.mark.asyncio
    async def test_get_open_issues_reads_pagination_headers(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v4/projects/42/issues"
            assert request.url.params["state"] == "opened"
            assert request.url.params["page"] == "2"
            return httpx.Response(
                200,
                json=[{"id": 7, "iid": 1, "labels": ["bug"]}],
                headers={"x-page": "2", "x-total-pages": "3"},
            )

        client = gitlab_client(handler)
        page = await client.get_open_issues(42, page=2)
        await client.close()

        assert page.page == 2
        assert page.total_pages == 3
        assert page.items[0].labels == ["bug"]

    @pytest.mark.asyncio
    async def test_missing_pagination_headers(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[])

        client = gitlab_client(handler)
        page = await client.get_open_issues(42)
        await client.close()

        assert page.page == 1
        assert page.total_pages is None

    @pytest.mark.asyncio
    async def test_project_path_lookup(self):
        """Test an encoded path is sent as a single path segment."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"id": 42, "name": "app", "path_with_namespace": "group/app", "web_url": f"{BASE_URL}/group/app"},
            )

        client = gitlab_client(handler)
        project = await client.get_project("group%2Fapp")
        await client.close()

        assert project.id == 42
        assert seen[0].url.raw_path == b"/api/v4/projects/group%2Fapp"

    @pytest.mark.asyncio
    async def test_error_response_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "404 User Not Found"})

        client = gitlab_client(handler)
        with pytest.raises(GitLabApiError) as exc_info:
            await client.get_user(99)
        await client.close()

        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "GitLabApi /users/99 - 404 User Not Found"

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = gitlab_client(handler)
        with pytest.raises(GitLabApiError) as exc_info:
            await client.get_labels(42)
        await client.close()

        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)


class TestSlackWebhookClient:
    """Tests for SlackWebhookClient against a mocked transport."""

    @pytest.fixture
    def notification(self):
        return Notification(
            text="hello",
            channel="#dev",
            attachments=[Attachment(fallback="fb", text="body")],
            kind=HandlerKind(name="issue", title="Issue"),
        )

    @pytest.mark.asyncio
    async def test_send_posts_payload(self, notification):
        """Test the body omits unset fields and the handler kind."""
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == WEBHOOK_URL
            bodies.append(json.loads(request.content))
            return httpx.Response(200, text="ok")

        client = SlackWebhookClient(webhook_url=WEBHOOK_URL, timeout=5, transport=httpx.MockTransport(handler))
        await client.send(notification)
        await client.close()

        assert bodies == [
            {
                "text": "hello",
                "channel": "#dev",
                "attachments": [{"fallback": "fb", "text": "body"}],
            }
        ]

    @pytest.mark.asyncio
    async def test_error_response_raises(self, notification):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, text="invalid_payload")

        client = SlackWebhookClient(webhook_url=WEBHOOK_URL, timeout=5, transport=httpx.MockTransport(handler))
        with pytest.raises(SlackWebhookError) as exc_info:
            await client.send(notification)
        await client.close()

        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == "Slack Webhook for Issue - invalid_payload"
