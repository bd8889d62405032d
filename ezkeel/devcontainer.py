"""Driving the devcontainer CLI for a project."""

from __future__ import annotations

import subprocess

from ezkeel.preflight import check_command

DEVCONTAINER_COMMAND = "devcontainer"


def build_args(action: str, project_dir: str) -> list[str]:
    """Return devcontainer CLI arguments for ``build`` or ``up``."""
    return [action, "--workspace-folder", str(project_dir)]


def exec_args(project_dir: str, *args: str) -> list[str]:
    """Return devcontainer CLI arguments that run ``args`` in the container."""
    return ["exec", "--workspace-folder", str(project_dir), *args]


def check_devcontainer_cli() -> str:
    """Ensure the devcontainer CLI is installed and return its path."""
    return check_command(DEVCONTAINER_COMMAND, "Install: npm install -g @devcontainers/cli")


def _run(args: list[str]) -> subprocess.CompletedProcess:
    check_devcontainer_cli()
    return subprocess.run([DEVCONTAINER_COMMAND, *args], check=True)


def build_dev_container(project_dir: str) -> subprocess.CompletedProcess:
    """Run ``devcontainer build`` for ``project_dir``."""
    return _run(build_args("build", project_dir))


def start_dev_container(project_dir: str) -> subprocess.CompletedProcess:
    """Run ``devcontainer up`` for ``project_dir``."""
    return _run(build_args("up", project_dir))


def exec_in_dev_container(project_dir: str, *args: str) -> subprocess.CompletedProcess:
    """Run a command inside the dev container of ``project_dir``."""
    return _run(exec_args(project_dir, *args))