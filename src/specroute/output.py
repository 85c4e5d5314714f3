"""Terminal output for the ``specroute`` command.

Command results go to stdout and diagnostics to stderr, so a piped command
never mixes the two.  Results render as JSON, as tab-separated plain text,
or through Rich; ``auto`` picks Rich for an interactive terminal with colour
allowed and plain text otherwise.  ``NO_COLOR``, ``TERM=dumb`` and
``--no-color`` turn colour off.

:func:`~specroute.app.main_callback` installs one :class:`Reporter` per
invocation with :func:`use_reporter`; commands fetch it with
:func:`get_reporter`.
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Sequence
from enum import Enum
from typing import Any, Iterator, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """How results are rendered.  ``AUTO`` is resolved by :class:`Reporter`."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def colour_disabled() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM`` is ``dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


def _stdout_is_terminal() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


class Reporter:
    """Writes command results to stdout and diagnostics to stderr.

    Args:
        format: Rendering for results.  ``AUTO`` is resolved here, once.
        no_color: Force colour off.
        quiet: Drop status messages; errors are always shown.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self.no_color = no_color or colour_disabled()
        self.quiet = quiet
        self.verbose = verbose
        if format == OutputFormat.AUTO:
            rich_ok = _stdout_is_terminal() and not self.no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self.format = format

        self._out = Console(
            file=sys.stdout,
            no_color=self.no_color,
            force_terminal=format == OutputFormat.RICH,
            soft_wrap=True,
        )
        self._err = Console(file=sys.stderr, no_color=self.no_color, highlight=False, soft_wrap=True)

    # --- results (stdout) ---

    def result(self, data: Any) -> None:
        """Write *data* in the active format.

        JSON and Rich show nested values as JSON; plain text writes one
        ``key<TAB>value`` line per mapping entry, or one line per list item.
        """
        if self.format == OutputFormat.JSON:
            _emit(_to_json(data, indent=2))
        elif self.format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                _emit(line)
        elif isinstance(data, (dict, list)):
            self._out.print(Syntax(_to_json(data, indent=2), "json", word_wrap=True))
        else:
            self._out.print(Text(str(data)))

    def table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows under *headers*.

        JSON gets a list of objects keyed by header and plain text gets
        tab-separated lines.  *title* is only shown by Rich.
        """
        if self.format == OutputFormat.JSON:
            _emit(_to_json([dict(zip(headers, row)) for row in rows], indent=2))
        elif self.format == OutputFormat.PLAIN:
            for row in (headers, *rows):
                _emit("\t".join(row))
        else:
            table = Table(*headers, title=title, header_style="bold cyan")
            for row in rows:
                table.add_row(*row)
            self._out.print(table)

    # --- diagnostics (stderr) ---

    def status(self, message: str) -> None:
        """Report progress.  Hidden by ``--quiet``."""
        if not self.quiet:
            self._err.print(Text(message))

    def error(self, message: str) -> None:
        self._err.print(Text.assemble(("Error: ", "bold red"), message))

    def debug(self, message: str) -> None:
        """Report detail.  Shown only with ``--verbose``."""
        if self.verbose:
            self._err.print(Text(f"[debug] {message}", style="dim"))


def _emit(line: str) -> None:
    print(line, file=sys.stdout, flush=True)


def _to_json(data: Any, indent: Optional[int] = None) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


def _plain_lines(data: Any) -> Iterator[str]:
    if isinstance(data, dict):
        for key, value in data.items():
            if isinstance(value, (dict, list)):
                value = _to_json(value)
            yield f"{key}\t{value}"
    elif isinstance(data, list):
        for item in data:
            yield _to_json(item) if isinstance(item, (dict, list)) else str(item)
    else:
        yield str(data)


# The reporter cached here holds the streams that were current when it was
# built; tests reset it after every CliRunner invocation.
_reporter: Optional[Reporter] = None


def get_reporter() -> Reporter:
    """Return the installed :class:`Reporter`, building a default one if needed."""
    global _reporter
    if _reporter is None:
        _reporter = Reporter()
    return _reporter


def use_reporter(reporter: Reporter) -> None:
    global _reporter
    _reporter = reporter


def reset_reporter() -> None:
    global _reporter
    _reporter = None
