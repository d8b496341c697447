"""Tests for the GitLab webhook endpoint."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from gitlab_slack.config import settings
from gitlab_slack.gitlab import GitLabApiError
from gitlab_slack.handlers import InvalidPayloadError
from gitlab_slack.webhook_handler import verify_token, webhook_router


@pytest.fixture
def service():
    fake = AsyncMock()
    fake.handle_message = AsyncMock(return_value=None)
    return fake


@pytest.fixture
def client(service):
    app = FastAPI()
    app.include_router(webhook_router)
    app.state.service = service
    return TestClient(app)


class TestVerifyToken:
    """Tests for X-Gitlab-Token verification."""

    def test_matching_token(self):
        assert verify_token("secret", "secret")

    def test_wrong_token(self):
        assert not verify_token("nope", "secret")

    def test_missing_token(self):
        assert not verify_token(None, "secret")


class TestWebhookEndpoint:
    """Tests for the POST endpoints."""

    @pytest.mark.parametrize("path", ["/", "/webhooks/gitlab"])
    def test_valid_payload(self, client, service, path):
        response = client.post(path, json={"object_kind": "issue"})

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        service.handle_message.assert_awaited_once_with({"object_kind": "issue"})

    def test_malformed_json(self, client, service):
        response = client.post("/", content=b"{not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        service.handle_message.assert_not_awaited()

    def test_non_object_body(self, client, service):
        response = client.post("/", json=[1, 2, 3])

        assert response.status_code == 400
        service.handle_message.assert_not_awaited()

    def test_invalid_payload(self, client, service):
        service.handle_message.side_effect = InvalidPayloadError("Invalid issue payload")

        response = client.post("/", json={"object_kind": "issue"})

        assert response.status_code == 400

    def test_processing_failure(self, client, service):
        """Test a failure while handling is answered with a 500."""
        service.handle_message.side_effect = GitLabApiError("/users/1", "boom", status_code=502)

        response = client.post("/", json={"object_kind": "issue"})

        assert response.status_code == 500

    def test_failure_does_not_affect_next_request(self, client, service):
        service.handle_message.side_effect = [RuntimeError("boom"), None]

        assert client.post("/", json={"object_kind": "push"}).status_code == 500
        assert client.post("/", json={"object_kind": "push"}).status_code == 200

    def test_token_required_when_configured(self, client, service):
        with patch.object(settings, "gitlab_webhook_token", "secret"):
            rejected = client.post("/", json={"object_kind": "issue"}, headers={"X-Gitlab-Token": "wrong"})
            accepted = client.post("/", json={"object_kind": "issue"}, headers={"X-Gitlab-Token": "secret"})

        assert rejected.status_code == 401
        assert accepted.status_code == 200
        service.handle_message.assert_awaited_once()
