from pathlib import Path

import pytest

from ezkeel.globalconfig import (
    GlobalConfig,
    PlatformConfig,
    ezkeel_home,
    flag_or_default,
    global_config_path,
    load_global_config,
)


@pytest.mark.parametrize(
    "flag, default, want",
    [
        ("explicit", "default", "explicit"),
        ("", "default", "default"),
        ("", "", ""),
        ("val", "", "val"),
    ],
)
def test_flag_or_default(flag, default, want):
    assert flag_or_default(flag, default) == want


def test_ezkeel_home_honours_env(tmp_path, monkeypatch):
    monkeypatch.setenv("EZKEEL_HOME", str(tmp_path))
    assert ezkeel_home() == tmp_path


def test_ezkeel_home_falls_back_to_user_home(tmp_path, monkeypatch):
    monkeypatch.delenv("EZKEEL_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert ezkeel_home() == tmp_path / ".ezkeel"


def test_global_config_path(tmp_path, monkeypatch):
    monkeypatch.setenv("EZKEEL_HOME", str(tmp_path))
    assert global_config_path() == tmp_path / "config.yaml"


def test_load_missing_file_returns_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("EZKEEL_HOME", str(tmp_path))
    assert load_global_config() == GlobalConfig()


def test_round_trip(tmp_path, monkeypatch):
    monkeypatch.setenv("EZKEEL_HOME", str(tmp_path / "home"))
    config = GlobalConfig(
        platform=PlatformConfig(
            forgejo_url="https://git.example.com",
            forgejo_token="token",
            ssh_host="myhost",
            owner="admin",
        )
    )
    written = config.save()
    assert written == tmp_path / "home" / "config.yaml"
    assert "forgejo_url: https://git.example.com" in written.read_text(encoding="utf-8")

    loaded = load_global_config()
    assert loaded == config
    assert loaded.platform.owner == "admin"
    assert loaded.platform.infisical_url == ""


def test_invalid_yaml_returns_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("EZKEEL_HOME", str(tmp_path))
    (tmp_path / "config.yaml").write_text("{{not yaml", encoding="utf-8")
    assert load_global_config() == GlobalConfig()


def test_load_ignores_unknown_keys(tmp_path, monkeypatch):
    monkeypatch.setenv("EZKEEL_HOME", str(tmp_path))
    Path(tmp_path, "config.yaml").write_text(
        "platform:\n  owner: ops\n  unknown_key: x\nother: 1\n", encoding="utf-8"
    )
    assert load_global_config().platform == PlatformConfig(owner="ops")