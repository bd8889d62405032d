"""Checks that required command-line tools are installed."""

from __future__ import annotations

import shutil


class MissingToolError(Exception):
    """Raised when a required command is not on PATH."""

    def __init__(self, name: str, install_hint: str) -> None:
        super().__init__(f'"{name}" not found on PATH. {install_hint}')
        self.name = name
        self.install_hint = install_hint


def check_command(name: str, install_hint: str) -> str:
    """Return the full path of ``name`` on PATH, or raise MissingToolError."""
    path = shutil.which(name)
    if path is None:
        raise MissingToolError(name, install_hint)
    return path


def require_infisical() -> str:
    """Ensure the Infisical CLI is installed and return its path."""
    return check_command(
        "infisical", "Install the Infisical CLI: https://infisical.com/docs/cli/overview"
    )


def require_ai_tool(tool: str) -> str | None:
    """Ensure the CLI for ``tool`` is installed.

    Returns the CLI path, or None for tools that need no CLI check.
    """
    if tool == "claude":
        return check_command(
            "claude", "Install Claude Code: npm install -g @anthropic-ai/claude-code"
        )
    if tool == "codex":
        return check_command("codex", "Install Codex: npm install -g @openai/codex")
    return None