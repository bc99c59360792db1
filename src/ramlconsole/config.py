"""Persistent console settings and credential sources.

Settings live in one JSON file, ``config.json``, under
``$XDG_CONFIG_HOME/ramlconsole`` on Linux and the BSDs and under
``~/.ramlconsole`` elsewhere. :func:`load_settings` layers ``RAMLCONSOLE_*``
environment variables on top of that file, and the file on top of the
:class:`~ramlconsole.models.ConsoleSettings` defaults.

Secrets given on the command line may name where to read them from instead
of holding the value; see :func:`resolve_credential`.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from ramlconsole.exceptions import ConfigError
from ramlconsole.models import ConsoleSettings

_APP_NAME = "ramlconsole"
_SETTINGS_FILE = "config.json"

ENV_PROXY = "RAMLCONSOLE_PROXY"
ENV_REDIRECT_URI = "RAMLCONSOLE_OAUTH2_REDIRECT_URI"
ENV_AUTHORIZATION_TIMEOUT = "RAMLCONSOLE_AUTHORIZATION_TIMEOUT"

# environment variable -> ConsoleSettings field it overrides
_ENV_FIELDS = (
    (ENV_PROXY, "proxy"),
    (ENV_REDIRECT_URI, "oauth2_redirect_uri"),
    (ENV_AUTHORIZATION_TIMEOUT, "authorization_timeout"),
)


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def get_config_dir() -> Path:
    """Return the settings directory, creating it on first use."""
    if _is_xdg_platform():
        root = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
        directory = Path(root) / _APP_NAME
    else:
        directory = Path.home() / f".{_APP_NAME}"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def settings_path() -> Path:
    return get_config_dir() / _SETTINGS_FILE


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never see a half-written file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    handle, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(handle, "w", encoding="utf-8") as stream:
            stream.write(data)
            stream.flush()
            os.fsync(stream.fileno())
        os.replace(temp_name, path)
    except BaseException:
        if os.path.exists(temp_name):
            os.unlink(temp_name)
        raise


def read_settings_file() -> ConsoleSettings:
    """Return the stored settings, ignoring the environment.

    A missing file yields the defaults.

    Raises:
        ConfigError: If the file is not valid JSON or holds invalid values.
    """
    path = settings_path()
    if not path.is_file():
        return ConsoleSettings()
    try:
        return ConsoleSettings.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def load_settings() -> ConsoleSettings:
    """Return the effective settings: environment, then file, then defaults.

    Raises:
        ConfigError: If the file or an environment value is invalid.
    """
    stored = read_settings_file()
    overrides = {
        field: os.environ[variable]
        for variable, field in _ENV_FIELDS
        if os.environ.get(variable)
    }
    if not overrides:
        return stored
    try:
        return ConsoleSettings.model_validate({**stored.model_dump(), **overrides})
    except ValidationError as exc:
        raise ConfigError(f"Invalid environment override: {exc}") from exc


def save_settings(settings: ConsoleSettings) -> None:
    """Write *settings* to the settings file."""
    payload = json.dumps(settings.model_dump(mode="json"), indent=2)
    _atomic_write(settings_path(), payload + "\n")


_settings: Optional[ConsoleSettings] = None


def get_settings() -> ConsoleSettings:
    """Return the settings for this process, loading them on first call."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def set_settings(settings: Optional[ConsoleSettings]) -> None:
    """Replace the settings for this process; ``None`` forces a reload."""
    global _settings
    _settings = settings


def _from_env(name: str, label: str) -> str:
    value = os.environ.get(name)
    if value is None:
        raise ConfigError(f"Cannot read {label}: environment variable '{name}' is not set")
    return value


def _from_file(name: str, label: str) -> str:
    path = Path(name).expanduser()
    if not path.is_file():
        raise ConfigError(f"Cannot read {label}: file not found: {path}")
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ConfigError(f"Cannot read {label} from {path}: {exc}") from exc


_SOURCES: dict[str, Callable[[str, str], str]] = {
    "env:": _from_env,
    "file:": _from_file,
}


def resolve_credential(source: str, label: str = "credential") -> str:
    """Return the secret described by *source*.

    ``env:NAME`` reads an environment variable, ``file:PATH`` reads a file
    (surrounding whitespace removed) and ``prompt`` asks on the terminal.
    Anything else is the secret itself.

    Raises:
        ConfigError: If the variable or file is missing, or ``prompt`` is
            used without a terminal on stdin.
    """
    for prefix, reader in _SOURCES.items():
        if source.startswith(prefix):
            return reader(source[len(prefix):], label)

    if source != "prompt":
        return source
    if not sys.stdin.isatty():
        raise ConfigError(f"Cannot prompt for {label}: stdin is not a TTY")
    return getpass.getpass(f"{label.capitalize()}: ")
