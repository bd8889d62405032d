"""Persisted configuration of deployed applications."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ezkeel.globalconfig import ezkeel_home


def _text(value: Any, where: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ValueError(f"{where}: expected a scalar")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _mapping(value: Any, where: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{where}: expected a mapping")
    return value


def _port(value: Any, where: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{where}: expected an integer")
    return value


@dataclass
class Resources:
    """Container resource limits."""

    memory: str = ""
    cpus: str = ""

    def to_mapping(self) -> dict[str, str]:
        return {key: value for key, value in (("memory", self.memory), ("cpus", self.cpus)) if value}

    @classmethod
    def from_mapping(cls, data: Any) -> Resources:
        data = _mapping(data, "resources")
        return cls(
            memory=_text(data.get("memory"), "resources.memory"),
            cpus=_text(data.get("cpus"), "resources.cpus"),
        )


@dataclass
class AppConfig:
    """The application's framework and runtime settings."""

    framework: str = ""
    build: str = ""
    start: str = ""
    port: int = 0
    dockerfile: str = ""

    def to_mapping(self) -> dict[str, Any]:
        data: dict[str, Any] = {"framework": self.framework}
        if self.build:
            data["build"] = self.build
        if self.start:
            data["start"] = self.start
        if self.port:
            data["port"] = self.port
        data["dockerfile"] = self.dockerfile
        return data

    @classmethod
    def from_mapping(cls, data: Any) -> AppConfig:
        data = _mapping(data, "app")
        return cls(
            framework=_text(data.get("framework"), "app.framework"),
            build=_text(data.get("build"), "app.build"),
            start=_text(data.get("start"), "app.start"),
            port=_port(data.get("port"), "app.port"),
            dockerfile=_text(data.get("dockerfile"), "app.dockerfile"),
        )


@dataclass
class ServiceConfig:
    """A backing service, such as a database, used by the app."""

    version: str = ""
    database: str = ""

    def to_mapping(self) -> dict[str, str]:
        return {"version": self.version, "database": self.database}

    @classmethod
    def from_mapping(cls, data: Any, where: str) -> ServiceConfig:
        data = _mapping(data, where)
        return cls(
            version=_text(data.get("version"), f"{where}.version"),
            database=_text(data.get("database"), f"{where}.database"),
        )


@dataclass
class AppManifest:
    """The saved configuration of one deployed application."""

    name: str = ""
    repo: str = ""
    server: str = ""
    app: AppConfig = field(default_factory=AppConfig)
    services: dict[str, ServiceConfig] = field(default_factory=dict)
    env: dict[str, str] = field(default_factory=dict)
    domain: str = ""
    domains: list[str] = field(default_factory=list)
    resources: Resources = field(default_factory=Resources)

    def to_mapping(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "repo": self.repo,
            "server": self.server,
            "app": self.app.to_mapping(),
        }
        if self.services:
            data["services"] = {key: svc.to_mapping() for key, svc in self.services.items()}
        if self.env:
            data["env"] = dict(self.env)
        data["domain"] = self.domain
        if self.domains:
            data["domains"] = list(self.domains)
        resources = self.resources.to_mapping()
        if resources:
            data["resources"] = resources
        return data

    @classmethod
    def from_mapping(cls, data: dict) -> AppManifest:
        services = {
            str(key): ServiceConfig.from_mapping(value, f"services.{key}")
            for key, value in _mapping(data.get("services"), "services").items()
        }
        env = {
            str(key): _text(value, f"env.{key}")
            for key, value in _mapping(data.get("env"), "env").items()
        }
        domains_raw = data.get("domains")
        if domains_raw is None:
            domains_raw = []
        if not isinstance(domains_raw, list):
            raise ValueError("domains: expected a list")
        return cls(
            name=_text(data.get("name"), "name"),
            repo=_text(data.get("repo"), "repo"),
            server=_text(data.get("server"), "server"),
            app=AppConfig.from_mapping(data.get("app")),
            services=services,
            env=env,
            domain=_text(data.get("domain"), "domain"),
            domains=[_text(item, "domains") for item in domains_raw],
            resources=Resources.from_mapping(data.get("resources")),
        )

    def save(self, path: str | os.PathLike) -> Path:
        """Write the manifest as YAML to ``path``, readable by the owner only."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        text = yaml.safe_dump(self.to_mapping(), sort_keys=False, allow_unicode=True)
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        return target


def manifest_path(app_name: str) -> Path:
    """Return the manifest path for ``app_name``: ``<home>/apps/<name>.yaml``."""
    root = ezkeel_home()
    base = root if root is not None else Path()
    return base / "apps" / f"{app_name}.yaml"


def load_manifest(path: str | os.PathLike) -> AppManifest:
    """Read the manifest at ``path``.

    Raises OSError if the file cannot be read and ValueError if it cannot
    be parsed.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"parsing manifest {str(path)!r}: {exc}") from exc
    if data is None:
        return AppManifest()
    if not isinstance(data, dict):
        raise ValueError(f"parsing manifest {str(path)!r}: expected a mapping")
    return AppManifest.from_mapping(data)