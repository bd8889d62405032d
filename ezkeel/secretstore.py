"""Access to project secrets through the Infisical CLI."""

from __future__ import annotations

import os
import subprocess

INFISICAL_COMMAND = "infisical"


class SecretsError(Exception):
    """Raised when the Infisical CLI fails or secrets cannot be applied."""


def parse_dotenv(text: str) -> dict[str, str]:
    """Parse dotenv text into a mapping.

    Blank lines, comments and lines without ``=`` are skipped. Lines split on
    the first ``=``, and matching single or double quotes around a value are
    removed.
    """
    result: dict[str, str] = {}
    for line in text.split("\n"):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        key, sep, value = trimmed.partition("=")
        if not sep:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        result[key] = value
    return result


class SecretsClient:
    """Runs the Infisical CLI for one project."""

    def __init__(self, project_id: str, domain: str = "") -> None:
        self.project_id = project_id
        self.domain = domain

    def _domain_args(self) -> list[str]:
        return ["--domain", self.domain] if self.domain else []

    def build_export_args(self, env: str) -> list[str]:
        """Return the CLI arguments for ``infisical export``."""
        return [
            "export",
            "--projectId", self.project_id,
            "--env", env,
            "--format", "dotenv",
            *self._domain_args(),
        ]

    def build_run_args(self, env: str, *args: str) -> list[str]:
        """Return the CLI arguments for ``infisical run``; ``args`` are joined by spaces."""
        return [
            "run",
            "--projectId", self.project_id,
            "--env", env,
            "--command", " ".join(args),
            *self._domain_args(),
        ]

    def export(self, env: str) -> dict[str, str]:
        """Export the secrets of ``env`` and return them as a mapping."""
        try:
            completed = subprocess.run(
                [INFISICAL_COMMAND, *self.build_export_args(env)],
                capture_output=True,
                text=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            raise SecretsError(f"infisical export failed: {exc}") from exc
        return parse_dotenv(completed.stdout)

    def inject_into_shell(self, env: str) -> dict[str, str]:
        """Export the secrets of ``env`` into this process's environment.

        Returns the secrets that were set.
        """
        secrets = self.export(env)
        for key, value in secrets.items():
            try:
                os.environ[key] = value
            except (ValueError, OSError) as exc:
                raise SecretsError(f"setting environment variable {key!r}: {exc}") from exc
        return secrets

    def run(self, env: str, *args: str) -> subprocess.CompletedProcess:
        """Run a command under ``infisical run`` with the terminal passed through."""
        try:
            return subprocess.run(
                [INFISICAL_COMMAND, *self.build_run_args(env, *args)],
                check=True,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            raise SecretsError(f"infisical run failed: {exc}") from exc