"""Tests for the output formatting system.

Covers:
- AUTO format resolution (rich/plain based on TTY)
- NO_COLOR / TERM=dumb colour disabling
- stdout vs stderr discipline, quiet and verbose modes
- result and table rendering in every format
- the installed reporter
"""

from __future__ import annotations

import json

import pytest

from specroute.output import (
    OutputFormat,
    Reporter,
    colour_disabled,
    get_reporter,
    reset_reporter,
    use_reporter,
)

ROUTE_HEADERS = ["Method", "Path", "Operation", "Parameters"]
ROUTE_ROWS = [
    ["GET", "/v1/pets", "listPets", "1"],
    ["GET", "/v1/pets/{petId}", "showPetById", "1"],
]


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch the stdout terminal check to return False."""
    monkeypatch.setattr("specroute.output._stdout_is_terminal", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch the stdout terminal check to return True."""
    monkeypatch.setattr("specroute.output._stdout_is_terminal", lambda: True)


# ------------------------------------------------------------------ #
# Format resolution and colour
# ------------------------------------------------------------------ #


class TestFormatResolution:
    """Test AUTO format resolution."""

    def test_auto_is_plain_when_piped(self, non_tty):
        assert Reporter().format == OutputFormat.PLAIN

    def test_auto_is_rich_on_terminal(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert Reporter().format == OutputFormat.RICH

    def test_auto_is_plain_on_terminal_without_colour(self, tty):
        assert Reporter(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_format_kept(self, tty):
        assert Reporter(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColourDisabled:
    """Test NO_COLOR and TERM=dumb handling."""

    def test_no_color_with_empty_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert colour_disabled() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert colour_disabled() is True

    def test_normal_term(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm")
        assert colour_disabled() is False


# ------------------------------------------------------------------ #
# Stream discipline
# ------------------------------------------------------------------ #


class TestStreams:
    """Results go to stdout, diagnostics to stderr."""

    def test_diagnostics_go_to_stderr(self, capfd, non_tty):
        reporter = Reporter(format=OutputFormat.JSON, no_color=True)
        reporter.status("reading petstore.json")
        reporter.error("no spec given")
        reporter.result({"route": "GET /v1/pets"})

        captured = capfd.readouterr()
        assert json.loads(captured.out) == {"route": "GET /v1/pets"}
        assert "reading petstore.json" in captured.err
        assert "Error: no spec given" in captured.err

    def test_quiet_hides_status_only(self, capfd, non_tty):
        reporter = Reporter(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        reporter.status("hidden")
        reporter.error("shown")

        captured = capfd.readouterr()
        assert "hidden" not in captured.err
        assert "Error: shown" in captured.err

    def test_debug_needs_verbose(self, capfd, non_tty):
        Reporter(no_color=True).debug("quiet detail")
        Reporter(no_color=True, verbose=True).debug("loud detail")

        captured = capfd.readouterr()
        assert "quiet detail" not in captured.err
        assert "[debug] loud detail" in captured.err

    def test_brackets_in_messages_printed_verbatim(self, capfd, non_tty):
        Reporter(no_color=True).error("GET /v1/[draft]/pets not found.")

        assert "Error: GET /v1/[draft]/pets not found." in capfd.readouterr().err


# ------------------------------------------------------------------ #
# Formats
# ------------------------------------------------------------------ #


class TestResult:
    """Test result() in each format."""

    def test_json_non_serializable_uses_str(self, capfd, non_tty):
        from specroute.compiler.routes import create_route_key

        key = create_route_key("get", "/v1/pets")
        Reporter(format=OutputFormat.JSON, no_color=True).result({"key": key})

        assert json.loads(capfd.readouterr().out) == {"key": "GET /v1/pets"}

    def test_plain_dict_nested_values_as_json(self, capfd, non_tty):
        reporter = Reporter(format=OutputFormat.PLAIN, no_color=True)
        reporter.result({"route": "GET /v1/pets", "path_params": {"petId": "7"}})

        lines = capfd.readouterr().out.strip().split("\n")
        assert lines == ["route\tGET /v1/pets", 'path_params\t{"petId": "7"}']

    def test_plain_list(self, capfd, non_tty):
        Reporter(format=OutputFormat.PLAIN, no_color=True).result(["a", {"b": 1}])

        assert capfd.readouterr().out.split("\n")[:2] == ["a", '{"b": 1}']

    def test_rich_dict(self, capfd, non_tty):
        Reporter(format=OutputFormat.RICH, no_color=True).result({"key": "value"})

        out = capfd.readouterr().out
        assert "key" in out
        assert "value" in out


class TestTable:
    """Test table() in all three output modes."""

    def test_json_mode(self, capfd, non_tty):
        Reporter(format=OutputFormat.JSON, no_color=True).table(ROUTE_HEADERS, ROUTE_ROWS)

        parsed = json.loads(capfd.readouterr().out)
        assert parsed[1] == {
            "Method": "GET",
            "Path": "/v1/pets/{petId}",
            "Operation": "showPetById",
            "Parameters": "1",
        }

    def test_plain_mode(self, capfd, non_tty):
        Reporter(format=OutputFormat.PLAIN, no_color=True).table(
            ROUTE_HEADERS, ROUTE_ROWS, title="ignored"
        )

        lines = capfd.readouterr().out.strip().split("\n")
        assert lines[0] == "Method\tPath\tOperation\tParameters"
        assert lines[1] == "GET\t/v1/pets\tlistPets\t1"
        assert len(lines) == 3

    def test_rich_mode(self, capfd, non_tty):
        Reporter(format=OutputFormat.RICH, no_color=True).table(
            ROUTE_HEADERS, ROUTE_ROWS, title="Routes (2)"
        )

        out = capfd.readouterr().out
        assert "Routes (2)" in out
        assert "showPetById" in out


# ------------------------------------------------------------------ #
# Installed reporter
# ------------------------------------------------------------------ #


class TestInstalledReporter:
    """Test the module-level Reporter."""

    def test_get_reporter_builds_default_once(self, non_tty):
        reset_reporter()
        assert isinstance(get_reporter(), Reporter)
        assert get_reporter() is get_reporter()

    def test_use_reporter(self, non_tty):
        reporter = Reporter(format=OutputFormat.JSON, no_color=True)

        use_reporter(reporter)

        assert get_reporter() is reporter
