"""Fixtures shared by the ramlconsole test modules."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from ramlconsole.models import Api
from ramlconsole.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Process-wide state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _fresh_process_state() -> None:
    """Forget process-wide output and settings once a test finishes.

    An OutputManager keeps the streams it was built with, and CliRunner
    closes its captured streams when an invocation returns.
    """
    from ramlconsole.config import set_settings

    yield
    reset_output()
    set_settings(None)


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def api_path() -> Path:
    return FIXTURES_DIR / "api.json"


@pytest.fixture
def api_document(api_path: Path) -> dict[str, Any]:
    """Load the raw parser output of the example API."""
    with open(api_path) as f:
        return json.load(f)


@pytest.fixture
def api(api_document: dict[str, Any]) -> Api:
    """The inspected example API."""
    from ramlconsole.inspector import create

    return create(api_document)


# ---------------------------------------------------------------------------
# Settings isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep settings inside *tmp_path* and clear RAMLCONSOLE_* variables."""
    from ramlconsole.config import (
        ENV_AUTHORIZATION_TIMEOUT,
        ENV_PROXY,
        ENV_REDIRECT_URI,
        set_settings,
    )

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr("ramlconsole.config._is_xdg_platform", lambda: True)

    for variable in (ENV_PROXY, ENV_REDIRECT_URI, ENV_AUTHORIZATION_TIMEOUT):
        monkeypatch.delenv(variable, raising=False)

    set_settings(None)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN output manager for tests that ignore output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless PLAIN output manager so warnings are plain text."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
