"""Admin operations against the Infisical REST API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

DEFAULT_TIMEOUT = 30.0


class InfisicalError(Exception):
    """Raised when the Infisical API cannot be reached or reports an error."""


@dataclass
class Project:
    """An Infisical project (workspace)."""

    id: str = ""
    name: str = ""
    slug: str = ""

    @classmethod
    def from_json(cls, data: Any) -> Project:
        if not isinstance(data, dict):
            return cls()
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            slug=str(data.get("slug") or ""),
        )


def _json(response: requests.Response, what: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise InfisicalError(f"parsing {what}: {exc}") from exc


class AdminClient:
    """Calls the Infisical admin API with a bearer token."""

    def __init__(self, base_url: str, token: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url
        self.token = token
        self.timeout = timeout
        self._session = requests.Session()

    def _request(self, method: str, path: str, body: Any = None) -> requests.Response:
        headers = {"Authorization": f"Bearer {self.token}"}
        if body is not None:
            headers["Content-Type"] = "application/json"
        try:
            response = self._session.request(
                method,
                self.base_url + path,
                headers=headers,
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise InfisicalError(f"executing request: {exc}") from exc
        if response.status_code >= 400:
            raise InfisicalError(
                f"API {method} {path} returned status {response.status_code}: {response.text}"
            )
        return response

    def create_project(self, name: str, org_id: str) -> Project:
        """Create a project named ``name`` in the organisation ``org_id``."""
        payload = {"projectName": name, "organizationId": org_id}
        try:
            response = self._request("POST", "/api/v2/workspace", payload)
        except InfisicalError as exc:
            raise InfisicalError(f"creating project: {exc}") from exc

        data = _json(response, "response")
        if not isinstance(data, dict):
            data = {}
        # Newer servers answer under "project", older ones under "workspace".
        for key in ("project", "workspace"):
            project = Project.from_json(data.get(key))
            if project.id:
                return project
        raise InfisicalError("unexpected API response: no project or workspace returned")

    def create_environment(self, project_id: str, name: str, slug: str) -> None:
        """Add a custom environment to the project ``project_id``."""
        path = f"/api/v1/workspace/{project_id}/environments"
        try:
            self._request("POST", path, {"name": name, "slug": slug})
        except InfisicalError as exc:
            raise InfisicalError(f"creating environment {name!r}: {exc}") from exc


def login_universal_auth(base_url: str, client_id: str, client_secret: str) -> AdminClient:
    """Log in a machine identity with client credentials.

    Returns an AdminClient holding the access token issued.
    """
    payload = {"clientId": client_id, "clientSecret": client_secret}
    try:
        response = requests.post(
            base_url + "/api/v1/auth/universal-auth/login",
            json=payload,
            timeout=DEFAULT_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise InfisicalError(f"universal auth request: {exc}") from exc

    if response.status_code >= 400:
        raise InfisicalError(
            f"universal auth login failed (status {response.status_code}): {response.text}"
        )

    data = _json(response, "login response")
    access_token = str(data.get("accessToken") or "") if isinstance(data, dict) else ""
    if not access_token:
        raise InfisicalError("universal auth login returned empty access token")
    return AdminClient(base_url, access_token)