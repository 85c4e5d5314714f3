"""Errors raised by the tooling around the router.

Compiling a document and matching a request never raise: a malformed
document yields a smaller route table and an unmatched request yields
``None`` or a 404 response.  The classes below belong to the command line,
its settings and document reading.  Each one knows the exit status the
command ends with when it escapes.
"""

from specroute import exit_codes


class SpecrouteError(Exception):
    """Base class for errors reported by the ``specroute`` command."""

    exit_code: int = exit_codes.EXIT_FAILURE


class UsageError(SpecrouteError):
    """The command line leaves nothing to work on."""

    exit_code = exit_codes.EXIT_USAGE


class NoRouteError(SpecrouteError):
    """``match`` found no operation for the request."""

    exit_code = exit_codes.EXIT_NO_ROUTE


class DocumentError(SpecrouteError):
    """A document could not be read, or did not parse into a mapping."""

    exit_code = exit_codes.EXIT_BAD_DOCUMENT


class SettingsError(SpecrouteError):
    """``specroute.json`` or a ``SPECROUTE_*`` variable holds a bad value."""
