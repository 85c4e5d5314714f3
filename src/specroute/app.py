"""The ``specroute`` command line.

``routes``, ``match`` and ``resolve`` read a document, compile it with the
same code the middleware runs, and print the outcome.  The CLI is tooling
around the router; nothing in :mod:`specroute.middleware` depends on it.

:func:`main` is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import logging
import sys

import typer

from specroute import __version__
from specroute.commands.routes import match_command, resolve_command, routes_command
from specroute.exceptions import SettingsError, SpecrouteError
from specroute.output import OutputFormat, Reporter, get_reporter, use_reporter

app = typer.Typer(
    name="specroute",
    help="Compile Swagger specs into route tables and match requests against them.",
    no_args_is_help=True,
    add_completion=False,
)

app.command("routes")(routes_command)
app.command("match")(match_command)
app.command("resolve")(resolve_command)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"specroute {__version__}")
        raise typer.Exit()


def _default_format() -> OutputFormat:
    from specroute.config import load_settings

    try:
        return OutputFormat(load_settings().format)
    except SettingsError:
        # The command reports it when it loads its own settings.
        return OutputFormat.AUTO


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show version and exit."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress status messages."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Install the reporter for this invocation.

    ``--verbose`` also sends the library's debug log records to stderr.
    """
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _default_format()

    use_reporter(Reporter(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )


def main() -> None:
    """Run the CLI.

    A :class:`~specroute.exceptions.SpecrouteError` that escapes a command
    is printed and becomes the process exit status.
    """
    try:
        app()
    except SpecrouteError as exc:
        get_reporter().error(str(exc))
        sys.exit(exc.exit_code)
