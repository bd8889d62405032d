"""Deployment server definitions stored under the ezkeel home directory."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from ezkeel.globalconfig import ezkeel_home

_OPTIONAL_KEYS = ("user", "ssh_key", "ssh_alias")


class ServerConfigError(Exception):
    """Raised when server configuration cannot be read or written."""


class ServerNotFoundError(ServerConfigError, LookupError):
    """Raised when a named server has no configuration file."""


@dataclass
class Server:
    """Connection details for a remote deployment target."""

    name: str = ""
    host: str = ""
    user: str = ""
    ssh_key: str = ""
    ssh_alias: str = ""
    domain: str = ""

    def to_mapping(self) -> dict[str, str]:
        data = asdict(self)
        return {
            key: value
            for key, value in data.items()
            if key not in _OPTIONAL_KEYS or value
        }

    @classmethod
    def from_mapping(cls, data: dict) -> Server:
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            if isinstance(value, (dict, list)):
                raise ServerConfigError(f"field {key!r} must be a scalar")
            values[key] = str(value).lower() if isinstance(value, bool) else str(value)
        return cls(**values)


def servers_dir() -> Path | None:
    """Return the directory holding server configs, or None if unknown."""
    root = ezkeel_home()
    if root is None:
        return None
    return root / "servers"


def _require_dir() -> Path:
    directory = servers_dir()
    if directory is None:
        raise ServerConfigError("could not determine servers directory")
    return directory


def save_server(server: Server) -> Path:
    """Write ``server`` to ``<servers_dir>/<name>.yaml`` readable by the owner only.

    The user defaults to ``root`` and is set on ``server`` when empty.
    """
    if not server.name:
        raise ServerConfigError("server name is required")
    if not server.user:
        server.user = "root"

    directory = _require_dir()
    directory.mkdir(parents=True, exist_ok=True)

    path = directory / f"{server.name}.yaml"
    text = yaml.safe_dump(server.to_mapping(), sort_keys=False, allow_unicode=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(text)
    return path


def load_server(name: str) -> Server:
    """Read the server named ``name``."""
    path = _require_dir() / f"{name}.yaml"
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ServerNotFoundError(f'server "{name}" not found') from None
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ServerConfigError(f"parsing {path}: {exc}") from exc
    if data is None:
        return Server()
    if not isinstance(data, dict):
        raise ServerConfigError(f"parsing {path}: expected a mapping")
    return Server.from_mapping(data)


def list_servers() -> list[Server]:
    """Return every configured server, ordered by file name."""
    directory = _require_dir()
    try:
        entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
    except FileNotFoundError:
        return []
    return [
        load_server(entry.name[: -len(".yaml")])
        for entry in entries
        if not entry.is_dir() and entry.name.endswith(".yaml")
    ]


def default_server() -> Server:
    """Return the first configured server."""
    servers = list_servers()
    if not servers:
        raise ServerConfigError(
            "no servers configured; run 'ezkeel config set' to add one"
        )
    return servers[0]