import json

import pytest
import responses

from ezkeel.infisical import AdminClient, InfisicalError, Project, login_universal_auth

BASE_URL = "https://infisical.example.com"


def test_create_project():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.POST,
            BASE_URL + "/api/v2/workspace",
            json={"project": {"id": "ws-123", "name": "my-project", "slug": "my-project"}},
            status=200,
        )
        client = AdminClient(BASE_URL, "token")
        project = client.create_project("my-project", "org-123")

        request = rsps.calls[0].request
        assert request.method == "POST"
        assert request.headers["Authorization"] == "Bearer token"
        body = json.loads(request.body)
        assert body["projectName"] == "my-project"
        assert body["organizationId"] == "org-123"

    assert project.slug == "my-project"
    assert project == Project(id="ws-123", name="my-project", slug="my-project")


def test_create_project_legacy_workspace_key():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.POST,
            BASE_URL + "/api/v2/workspace",
            json={"workspace": {"id": "ws-9", "name": "legacy", "slug": "legacy"}},
        )
        project = AdminClient(BASE_URL, "token").create_project("legacy", "org-1")
    assert project.id == "ws-9"
    assert project.slug == "legacy"


def test_create_project_without_project_in_response():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, BASE_URL + "/api/v2/workspace", json={})
        with pytest.raises(InfisicalError, match="no project or workspace"):
            AdminClient(BASE_URL, "token").create_project("x", "org")


def test_create_project_error_status():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.POST,
            BASE_URL + "/api/v2/workspace",
            json={"message": "forbidden"},
            status=403,
        )
        with pytest.raises(InfisicalError, match="403"):
            AdminClient(BASE_URL, "token").create_project("x", "org")


def test_login_universal_auth():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.POST,
            BASE_URL + "/api/v1/auth/universal-auth/login",
            json={"accessToken": "placeholder"},
            status=200,
        )
        client = login_universal_auth(BASE_URL, "cid-123", "secret")
        body = json.loads(rsps.calls[0].request.body)
        assert rsps.calls[0].request.method == "POST"
        assert body["clientId"] == "cid-123"
        assert body["clientSecret"] == "secret"

    assert client.token == "placeholder"
    assert client.base_url == BASE_URL


def test_login_universal_auth_error():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.POST,
            BASE_URL + "/api/v1/auth/universal-auth/login",
            body='{"message":"Invalid credentials"}',
            status=401,
        )
        with pytest.raises(InfisicalError, match="401"):
            login_universal_auth(BASE_URL, "bad-id", "secret")


def test_login_universal_auth_empty_token():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.POST,
            BASE_URL + "/api/v1/auth/universal-auth/login",
            json={"accessToken": ""},
        )
        with pytest.raises(InfisicalError, match="empty access token"):
            login_universal_auth(BASE_URL, "cid-123", "secret")


def test_create_environment():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.POST,
            BASE_URL + "/api/v1/workspace/ws-123/environments",
            json={},
            status=200,
        )
        result = AdminClient(BASE_URL, "token").create_environment("ws-123", "staging", "staging")
        assert len(rsps.calls) == 1
        body = json.loads(rsps.calls[0].request.body)
        assert body == {"name": "staging", "slug": "staging"}
    assert result is None


def test_create_environment_error():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.POST,
            BASE_URL + "/api/v1/workspace/ws-123/environments",
            json={"message": "conflict"},
            status=409,
        )
        with pytest.raises(InfisicalError, match="staging"):
            AdminClient(BASE_URL, "token").create_environment("ws-123", "staging", "staging")