"""The ``ramlconsole config`` group: show, set and reset console settings."""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from ramlconsole.commands.common import reported_errors
from ramlconsole.exceptions import InvalidUsageError
from ramlconsole.output import format_response, info, success

config_app = typer.Typer(no_args_is_help=True)

_TRUE_WORDS = frozenset({"true", "1", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "off"})


def _leaf(data: dict[str, Any], key: str) -> tuple[dict[str, Any], str]:
    """Walk a dotted *key* through nested settings and return (parent, name).

    Raises:
        InvalidUsageError: If a segment is missing or the key names a section.
    """
    *sections, name = key.split(".")
    parent = data
    for section in sections:
        child = parent.get(section)
        if not isinstance(child, dict):
            raise InvalidUsageError(f"Invalid config key: {key}")
        parent = child
    if name not in parent or isinstance(parent[name], dict):
        raise InvalidUsageError(f"Unknown config key: {key}")
    return parent, name


def _coerce(key: str, current: Any, raw: str) -> Any:
    """Convert *raw* to the type of the value it replaces."""
    if raw.lower() == "null":
        return None
    if isinstance(current, bool):
        word = raw.lower()
        if word not in _TRUE_WORDS | _FALSE_WORDS:
            raise InvalidUsageError(f"Expected true or false for {key}, got: {raw}")
        return word in _TRUE_WORDS
    if isinstance(current, (int, float)):
        kind = type(current)
        try:
            return kind(raw)
        except ValueError:
            raise InvalidUsageError(f"Expected {kind.__name__} for {key}, got: {raw}") from None
    return raw


@config_app.command("show")
def config_show() -> None:
    """Print the effective settings, environment overrides applied.

    Example::

        ramlconsole --json config show
    """
    from ramlconsole.config import get_config_dir, load_settings

    with reported_errors():
        settings = load_settings()
    info(f"Settings directory: {get_config_dir()}")
    format_response(settings.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted setting key, e.g. 'request.timeout'."),
    value: str = typer.Argument(help="New value; 'null' clears an optional setting."),
) -> None:
    """Store one setting in the settings file.

    Example::

        ramlconsole config set proxy https://proxy.example.com/
        ramlconsole config set authorization_timeout 120
        ramlconsole config set request.verify_ssl false
    """
    from ramlconsole.config import read_settings_file, save_settings
    from ramlconsole.models import ConsoleSettings

    with reported_errors():
        data = read_settings_file().model_dump(mode="json")
        parent, name = _leaf(data, key)
        parent[name] = _coerce(key, parent[name], value)
        try:
            updated = ConsoleSettings.model_validate(data)
        except ValidationError as exc:
            raise InvalidUsageError(f"Rejected value for {key}: {exc}") from None
        save_settings(updated)

    success(f"{key} = {parent[name]}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask for confirmation."),
) -> None:
    """Overwrite the settings file with the defaults."""
    from ramlconsole.config import save_settings
    from ramlconsole.models import ConsoleSettings

    if not force and not typer.confirm("Restore the default settings?"):
        info("Nothing changed.")
        raise typer.Exit()

    with reported_errors():
        save_settings(ConsoleSettings())
    success("Settings restored to defaults.")
