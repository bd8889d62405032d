"""Platform-wide defaults stored in the ezkeel home directory."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILE_NAME = "config.yaml"


def ezkeel_home() -> Path | None:
    """Return the ezkeel root directory.

    ``EZKEEL_HOME`` wins when set; otherwise ``~/.ezkeel``. Returns None when
    no home directory can be determined.
    """
    override = os.environ.get("EZKEEL_HOME", "")
    if override:
        return Path(override)
    try:
        home = Path.home()
    except (RuntimeError, KeyError):
        return None
    return home / ".ezkeel"


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class PlatformConfig:
    """Connection details for the platform services."""

    forgejo_url: str = ""
    forgejo_token: str = ""
    infisical_url: str = ""
    infisical_client_id: str = ""
    infisical_client_secret: str = ""
    infisical_org: str = ""
    ssh_host: str = ""
    platform_dir: str = ""
    owner: str = ""

    @classmethod
    def from_mapping(cls, data: dict) -> PlatformConfig:
        known = {f.name for f in fields(cls)}
        return cls(
            **{
                key: _scalar_text(value)
                for key, value in data.items()
                if key in known and value is not None and not isinstance(value, (dict, list))
            }
        )


@dataclass
class GlobalConfig:
    """Defaults used by commands when flags are not given."""

    platform: PlatformConfig = field(default_factory=PlatformConfig)

    def save(self) -> Path:
        """Write the config to the global config path and return that path."""
        path = global_config_path()
        if path is None:
            raise FileNotFoundError("could not determine the global config path")
        path.parent.mkdir(parents=True, exist_ok=True)
        text = yaml.safe_dump(asdict(self), sort_keys=False, allow_unicode=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        return path


def global_config_path() -> Path | None:
    """Return the path of the global config file, or None if unknown."""
    root = ezkeel_home()
    if root is None:
        return None
    return root / CONFIG_FILE_NAME


def load_global_config() -> GlobalConfig:
    """Load the global config; a missing or unreadable file gives defaults."""
    config = GlobalConfig()
    path = global_config_path()
    if path is None:
        return config
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError, UnicodeDecodeError):
        return config
    if isinstance(data, dict):
        platform = data.get("platform")
        if isinstance(platform, dict):
            config.platform = PlatformConfig.from_mapping(platform)
    return config


def flag_or_default(flag: str, config_default: str) -> str:
    """Return ``flag`` when non-empty, otherwise the configured default."""
    return flag if flag else config_default