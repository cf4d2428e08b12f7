"""Unit tests for API settings resolution."""

from __future__ import annotations

import stat
import typing as typ
from textwrap import dedent

import pytest
import tomlkit

from proposal_builder.settings import (
    ClientSettings,
    default_config_path,
    resolve_settings,
    save_settings,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PROPOSAL_API_BASE", "PROPOSAL_API_TOKEN", "PROPOSAL_CONFIG_FILE"):
        monkeypatch.delenv(name, raising=False)


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(
        dedent(
            """
            # personal settings
            [api]
            base = "https://file.example/api"
            token = "file-token"
            timeout = 3

            [other]
            keep = true
            """
        ).lstrip(),
        encoding="utf-8",
    )
    return path


def test_defaults_without_any_source(tmp_path: Path) -> None:
    settings = resolve_settings(config_path=tmp_path / "missing.toml")
    assert settings == ClientSettings("http://localhost:5000/api", None, 10.0)


def test_file_values_apply(tmp_path: Path) -> None:
    settings = resolve_settings(config_path=_write_config(tmp_path))
    assert settings.api_base == "https://file.example/api"
    assert settings.token == "file-token"
    assert settings.timeout == 3.0


def test_environment_beats_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("PROPOSAL_API_BASE", "https://env.example/api")
    monkeypatch.setenv("PROPOSAL_API_TOKEN", "env-token")
    settings = resolve_settings(config_path=_write_config(tmp_path))
    assert settings.api_base == "https://env.example/api"
    assert settings.token == "env-token"


def test_explicit_arguments_beat_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("PROPOSAL_API_BASE", "https://env.example/api")
    settings = resolve_settings(
        api_base="https://cli.example/api",
        timeout=1.5,
        config_path=_write_config(tmp_path),
    )
    assert settings.api_base == "https://cli.example/api"
    assert settings.timeout == 1.5
    assert settings.token == "file-token"


def test_config_file_env_override(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = _write_config(tmp_path)
    monkeypatch.setenv("PROPOSAL_CONFIG_FILE", str(path))
    assert default_config_path() == path
    assert resolve_settings().token == "file-token"


def test_save_preserves_other_tables_and_restricts_permissions(
    tmp_path: Path,
) -> None:
    path = _write_config(tmp_path)
    resolve_settings(token="new-token", config_path=path, save=True)
    text = path.read_text(encoding="utf-8")
    assert "# personal settings" in text
    doc = tomlkit.parse(text)
    assert doc["api"]["token"] == "new-token"
    assert doc.unwrap()["other"]["keep"] is True
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_save_settings_creates_file(tmp_path: Path) -> None:
    path = save_settings(ClientSettings(), path=tmp_path / "nested" / "config.toml")
    doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    assert doc["api"]["base"] == "http://localhost:5000/api"
    assert "token" not in doc["api"]


def test_invalid_timeout_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('[api]\ntimeout = "soon"\n', encoding="utf-8")
    with pytest.raises(ValueError, match="timeout"):
        resolve_settings(config_path=path)
