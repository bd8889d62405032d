"""A small client for the GitHub REST API."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Any

import requests

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0


class GitHubError(Exception):
    """Raised when the GitHub API cannot be reached or reports an error."""


class AuthMethod(Enum):
    """How the GitHub token was found."""

    GH_CLI = 0
    FLAG_TOKEN = 1
    ENV_TOKEN = 2

    def __str__(self) -> str:
        return {
            AuthMethod.GH_CLI: "gh CLI",
            AuthMethod.FLAG_TOKEN: "flag",
            AuthMethod.ENV_TOKEN: "GITHUB_TOKEN env",
        }[self]


@dataclass
class Repo:
    """A GitHub repository."""

    name: str = ""
    clone_url: str = ""
    html_url: str = ""
    private: bool = False

    @classmethod
    def from_json(cls, data: Any) -> Repo:
        if not isinstance(data, dict):
            raise GitHubError("decode response: expected a JSON object")
        return cls(
            name=str(data.get("name") or ""),
            clone_url=str(data.get("clone_url") or ""),
            html_url=str(data.get("html_url") or ""),
            private=bool(data.get("private", False)),
        )


def resolve_auth(flag_token: str = "", gh_path: str = "") -> tuple[str, AuthMethod]:
    """Find a GitHub token.

    Tries the explicit flag, then the GITHUB_TOKEN environment variable,
    then ``gh auth token``.
    """
    if flag_token:
        return flag_token, AuthMethod.FLAG_TOKEN

    env_token = os.environ.get("GITHUB_TOKEN", "")
    if env_token:
        return env_token, AuthMethod.ENV_TOKEN

    try:
        completed = subprocess.run(
            [gh_path or "gh", "auth", "token"],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.SubprocessError):
        pass
    else:
        cli_token = completed.stdout.strip()
        if cli_token:
            return cli_token, AuthMethod.GH_CLI

    raise GitHubError(
        "no GitHub token found; provide one via:\n"
        "  --github-token flag\n"
        "  GITHUB_TOKEN environment variable\n"
        "  gh CLI (gh auth login)"
    )


class GitHubClient:
    """Calls the GitHub REST API with a bearer token."""

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.token = token
        self.base_url = base_url or DEFAULT_BASE_URL
        self.timeout = timeout
        self._session = requests.Session()

    def _request(self, method: str, path: str, body: Any = None) -> requests.Response:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
        }
        if body is not None:
            headers["Content-Type"] = "application/json"
        try:
            return self._session.request(
                method,
                self.base_url + path,
                headers=headers,
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise GitHubError(f"http request: {exc}") from exc

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubError(f"decode response: {exc}") from exc

    def authenticated_user(self) -> str:
        """Return the login of the authenticated user."""
        response = self._request("GET", "/user")
        if response.status_code != 200:
            raise GitHubError(
                f"github API error (HTTP {response.status_code}): {response.text}"
            )
        data = self._json(response)
        if not isinstance(data, dict):
            raise GitHubError("decode response: expected a JSON object")
        return str(data.get("login") or "")

    def repo_exists(self, owner: str, name: str) -> bool:
        """Return whether ``owner/name`` exists."""
        response = self._request("GET", f"/repos/{owner}/{name}")
        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        raise GitHubError(
            f"unexpected status {response.status_code} checking repo {owner}/{name}"
        )

    def create_repo(self, name: str, description: str) -> Repo:
        """Create a public repository for the authenticated user."""
        return self._create_repo("/user/repos", name, description)

    def create_org_repo(self, org: str, name: str, description: str) -> Repo:
        """Create a public repository under the organisation ``org``."""
        return self._create_repo(f"/orgs/{org}/repos", name, description)

    def _create_repo(self, path: str, name: str, description: str) -> Repo:
        payload = {"name": name, "description": description, "private": False}
        response = self._request("POST", path, payload)
        if response.status_code != 201:
            raise GitHubError(
                f"github API error (HTTP {response.status_code}): {response.text}"
            )
        return Repo.from_json(self._json(response))