"""The ``ramlconsole`` command line.

:data:`app` is the root Typer application. :func:`register_commands` hangs
the ``inspect``, ``try``, ``validate`` and ``config`` commands off it, and
:func:`main` is the console-script entry point: it turns Ctrl-C into exit
status 130, a :class:`~ramlconsole.exceptions.RamlConsoleError` into its
own exit code, and anything else into a crash report under the settings
directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any

import typer

from ramlconsole import __version__
from ramlconsole.exit_codes import EXIT_GENERIC_FAILURE

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="ramlconsole",
    help="Explore and call APIs described by parsed RAML documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_registered = False


def _show_version(requested: bool) -> None:
    if not requested:
        return
    typer.echo(f"ramlconsole {__version__}")
    raise typer.Exit()


@app.callback()
def configure_output(
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Print the version."
    ),
    json_output: bool = typer.Option(False, "--json", help="Write data as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Write data as plain text."),
    no_color: bool = typer.Option(False, "--no-color", help="Never use colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print data, warnings and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace loading and authentication."),
) -> None:
    """Set up output for the sub-command about to run."""
    from ramlconsole.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))


def register_commands() -> typer.Typer:
    """Add the sub-commands to :data:`app` and return it; repeat calls are no-ops."""
    global _registered
    if not _registered:
        from ramlconsole.commands.config import config_app
        from ramlconsole.commands.inspect import inspect_app
        from ramlconsole.commands.tryit import try_command
        from ramlconsole.commands.validate import validate_command

        app.add_typer(inspect_app, name="inspect", help="Browse resources, methods and parameters.")
        app.command("try")(try_command)
        app.command("validate")(validate_command)
        app.add_typer(config_app, name="config", help="Show or change settings.")
        _registered = True
    return app


def _interrupted(signum: int, frame: Any) -> None:
    sys.stderr.write("\nInterrupted.\n")
    sys.exit(EXIT_INTERRUPTED)


def _save_crash_report() -> Path:
    from ramlconsole.config import get_config_dir

    directory = get_config_dir() / "logs"
    directory.mkdir(parents=True, exist_ok=True)
    report = directory / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    report.write_text(traceback.format_exc(), encoding="utf-8")
    return report


def main() -> None:
    """Run the CLI and exit with its status."""
    signal.signal(signal.SIGINT, _interrupted)
    try:
        register_commands()()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        _interrupted(signal.SIGINT, None)
    except Exception as exc:
        from ramlconsole.exceptions import RamlConsoleError
        from ramlconsole.output import error

        if isinstance(exc, RamlConsoleError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error; traceback saved to {_save_crash_report()}")
        sys.exit(EXIT_GENERIC_FAILURE)
