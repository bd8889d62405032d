"""AI tool configuration and launch commands."""

from __future__ import annotations

import json
import os
from pathlib import Path

OLLAMA_PREFIX = "ollama/"

_CLAUDE_ALLOWED_TOOLS = (
    "Bash",
    "Edit",
    "Read",
    "Write",
    "Glob",
    "Grep",
    "WebFetch",
    "WebSearch",
)

_CLAUDE_SUBDIRS = ("skills", "hooks", "commands")


def claude_settings_json() -> str:
    """Return the default Claude settings document as indented JSON."""
    return json.dumps({"allowedTools": list(_CLAUDE_ALLOWED_TOOLS)}, indent=2)


def scaffold_claude_config(project_dir: str | os.PathLike, project_name: str) -> Path:
    """Create ``.claude/`` with its subdirectories and settings.json.

    Returns the path of the settings file written.
    """
    claude_dir = Path(project_dir) / ".claude"
    for directory in (claude_dir, *(claude_dir / name for name in _CLAUDE_SUBDIRS)):
        try:
            directory.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise OSError(f"creating directory {str(directory)!r}: {exc}") from exc

    settings_path = claude_dir / "settings.json"
    try:
        settings_path.write_text(claude_settings_json(), encoding="utf-8")
    except OSError as exc:
        raise OSError(
            f"writing settings.json for project {project_name!r}: {exc}"
        ) from exc
    return settings_path


def codex_required_env() -> list[str]:
    """Return the environment variables Codex needs."""
    return ["OPENAI_API_KEY"]


def build_launch_command(tool: str, prompt: str) -> tuple[str, list[str]]:
    """Return the executable and arguments that launch ``tool`` with ``prompt``.

    ``ollama/MODEL`` runs the model through ollama, ``codex`` runs Codex, and
    anything else runs Claude.
    """
    if tool.startswith(OLLAMA_PREFIX):
        return "ollama", ["run", tool[len(OLLAMA_PREFIX):], prompt]
    if tool == "codex":
        return "codex", [prompt]
    return "claude", [prompt]