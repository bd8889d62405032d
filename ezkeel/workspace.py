"""The workspace.yaml project configuration."""

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, get_args, get_origin

import yaml

WORKSPACE_FILE_NAME = "workspace.yaml"


class WorkspaceError(Exception):
    """Raised when a workspace file cannot be found, read or parsed."""


@dataclass
class VisibilityConfig:
    default: str = ""
    public_paths: list[str] = field(default_factory=list)
    private_paths: list[str] = field(default_factory=list)


@dataclass
class SecretsConfig:
    required: list[str] = field(default_factory=list)
    infisical_project: str = ""
    infisical_url: str = ""
    environments: list[str] = field(default_factory=list)


@dataclass
class ModelsConfig:
    primary: str = ""
    fast: str = ""
    local: str = ""


@dataclass
class MCPServer:
    name: str = ""
    command: str = ""
    args: list[str] = field(default_factory=list)
    secrets: list[str] = field(default_factory=list)


@dataclass
class PersonaConfig:
    skills_dir: str = ""
    hooks_dir: str = ""
    commands_dir: str = ""
    settings: str = ""


@dataclass
class AIConfig:
    models: ModelsConfig = field(default_factory=ModelsConfig)
    instructions: str = ""
    agents: str = ""
    mcp_servers: list[MCPServer] = field(default_factory=list)
    persona: PersonaConfig = field(default_factory=PersonaConfig)


@dataclass
class EnvironmentConfig:
    type: str = ""
    file: str = ""
    post_create: list[str] = field(default_factory=list)


@dataclass
class CIConfig:
    provider: str = ""
    workflows_dir: str = ""
    on_plan_change: list[str] = field(default_factory=list)
    on_push: list[str] = field(default_factory=list)


@dataclass
class DeployConfig:
    provider: str = ""
    environments: dict[str, str] = field(default_factory=dict)


@dataclass
class PagesConfig:
    domain: str = ""
    build_dir: str = ""
    build_cmd: str = ""


@dataclass
class Workspace:
    """Top-level configuration loaded from workspace.yaml."""

    name: str = ""
    version: str = ""
    visibility: VisibilityConfig = field(default_factory=VisibilityConfig)
    secrets: SecretsConfig = field(default_factory=SecretsConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    ci: CIConfig = field(default_factory=CIConfig)
    deploy: DeployConfig = field(default_factory=DeployConfig)
    pages: PagesConfig = field(default_factory=PagesConfig)


def _decode(target: Any, value: Any, where: str) -> Any:
    if dataclasses.is_dataclass(target):
        if value is None:
            return target()
        if not isinstance(value, dict):
            raise ValueError(f"{where}: expected a mapping")
        return _build(target, value, where)

    origin = get_origin(target)
    if origin is list:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError(f"{where}: expected a list")
        (item_type,) = get_args(target)
        return [_decode(item_type, item, f"{where}[{i}]") for i, item in enumerate(value)]
    if origin is dict:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError(f"{where}: expected a mapping")
        _, value_type = get_args(target)
        return {str(k): _decode(value_type, v, f"{where}.{k}") for k, v in value.items()}
    if target is str:
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            raise ValueError(f"{where}: expected a scalar")
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)
    raise ValueError(f"{where}: unsupported field type {target!r}")


def _build(cls: type, mapping: dict, where: str) -> Any:
    values = {
        f.name: _decode(f.type, mapping[f.name], f"{where}.{f.name}" if where else f.name)
        for f in dataclasses.fields(cls)
        if f.name in mapping
    }
    return cls(**values)


def load_workspace(path: "str | os.PathLike") -> Workspace:
    """Read and parse the workspace file at ``path``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise WorkspaceError(f"reading workspace file {str(path)!r}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceError(f"parsing workspace file {str(path)!r}: {exc}") from exc
    if data is None:
        return Workspace()
    if not isinstance(data, dict):
        raise WorkspaceError(f"parsing workspace file {str(path)!r}: expected a mapping")
    try:
        return _build(Workspace, data, "")
    except ValueError as exc:
        raise WorkspaceError(f"parsing workspace file {str(path)!r}: {exc}") from exc


def find_workspace(start_dir: "str | os.PathLike") -> Path:
    """Walk up from ``start_dir`` and return the first workspace.yaml found."""
    directory = Path(os.path.abspath(start_dir))
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / WORKSPACE_FILE_NAME
        if candidate.exists():
            return candidate
    raise WorkspaceError(
        f"workspace.yaml not found in {str(start_dir)!r} or any parent directory"
    )