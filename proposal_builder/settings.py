"""Connection settings for the proposal templates API.

Settings are resolved per field from, in order of precedence:

* explicit arguments (CLI options);
* the ``PROPOSAL_API_BASE`` and ``PROPOSAL_API_TOKEN`` environment variables;
* the ``[api]`` table of ``~/.config/proposal-builder/config.toml`` (override
  the location with ``PROPOSAL_CONFIG_FILE``);
* built-in defaults.

The TOML file is read and written with tomlkit so hand-written comments and
other tables survive a save.
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ
from pathlib import Path

import tomlkit

from .client import DEFAULT_API_BASE

CONFIG_FILE_ENV = "PROPOSAL_CONFIG_FILE"
API_BASE_ENV = "PROPOSAL_API_BASE"
API_TOKEN_ENV = "PROPOSAL_API_TOKEN"
DEFAULT_TIMEOUT = 10.0

# The file may hold an API token.
_CONFIG_FILE_MODE = 0o600


@dc.dataclass(slots=True)
class ClientSettings:
    """Resolved connection settings for :class:`ProposalTemplateClient`."""

    api_base: str = DEFAULT_API_BASE
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT


def default_config_path() -> Path:
    """Return the settings file path, honouring ``PROPOSAL_CONFIG_FILE``."""
    override = os.getenv(CONFIG_FILE_ENV)
    if override:
        return Path(override)
    return Path.home() / ".config" / "proposal-builder" / "config.toml"


def _load_api_table(path: Path) -> dict[str, typ.Any]:
    try:
        data = tomlkit.parse(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except tomlkit.exceptions.ParseError as exc:
        msg = f"Unable to parse config TOML at {path}"
        raise ValueError(msg) from exc
    table = data.get("api")
    return {k: v for k, v in table.items()} if table else {}


def save_settings(settings: ClientSettings, *, path: Path | None = None) -> Path:
    """Persist ``settings`` into the ``[api]`` table, preserving formatting."""
    target = path or default_config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        doc = tomlkit.parse(target.read_text(encoding="utf-8"))
    except FileNotFoundError:
        doc = tomlkit.document()
    except tomlkit.exceptions.ParseError as exc:
        msg = f"Unable to parse config TOML at {target}"
        raise ValueError(msg) from exc

    api_table = doc.get("api")
    if not isinstance(api_table, tomlkit.items.Table):
        api_table = tomlkit.table()
    api_table["base"] = settings.api_base
    api_table["timeout"] = settings.timeout
    if settings.token is None:
        api_table.pop("token", None)
    else:
        api_table["token"] = settings.token
    doc["api"] = api_table

    target.write_text(tomlkit.dumps(doc), encoding="utf-8")
    os.chmod(target, _CONFIG_FILE_MODE)
    return target


def resolve_settings(
    *,
    api_base: str | None = None,
    token: str | None = None,
    timeout: float | None = None,
    config_path: Path | None = None,
    save: bool = False,
) -> ClientSettings:
    """Merge explicit values, environment variables, and the settings file.

    Parameters
    ----------
    api_base, token, timeout : optional
        Explicit values; these win over every other source.
    config_path : Path, optional
        Settings file to read (and write when ``save`` is true). Defaults to
        :func:`default_config_path`.
    save : bool, optional
        Persist the resolved settings back to the file.

    Raises
    ------
    ValueError
        If the settings file is not valid TOML or holds a non-numeric timeout.
    """
    path = config_path or default_config_path()
    stored = _load_api_table(path)
    stored_timeout = stored.get("timeout")
    try:
        file_timeout = float(stored_timeout) if stored_timeout is not None else None
    except (TypeError, ValueError) as exc:
        msg = f"Invalid api.timeout in {path}: {stored_timeout!r}"
        raise ValueError(msg) from exc

    resolved = ClientSettings(
        api_base=api_base
        or os.getenv(API_BASE_ENV)
        or stored.get("base")
        or DEFAULT_API_BASE,
        token=token or os.getenv(API_TOKEN_ENV) or stored.get("token") or None,
        timeout=timeout if timeout is not None else file_timeout or DEFAULT_TIMEOUT,
    )
    resolved.api_base = str(resolved.api_base)
    if resolved.token is not None:
        resolved.token = str(resolved.token)
    if save:
        save_settings(resolved, path=path)
    return resolved


__all__ = [
    "API_BASE_ENV",
    "API_TOKEN_ENV",
    "CONFIG_FILE_ENV",
    "ClientSettings",
    "default_config_path",
    "resolve_settings",
    "save_settings",
]
