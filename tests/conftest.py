"""Shared test fixtures for specroute.

Provides reusable fixtures for loading spec fixtures, compiling them,
isolating CLI settings, managing reporter state, and running CLI
commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from specroute.middleware import RoutingContext, setup
from specroute.output import reset_reporter


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset the installed reporter between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_reporter_between_tests() -> None:
    """Drop the installed Reporter after every test.

    A Reporter binds sys.stdout and sys.stderr when it is built, and
    CliRunner swaps those streams only for the duration of an invoke.
    """
    yield
    reset_reporter()


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw Swagger 2.0 petstore dict."""
    with open(FIXTURES_DIR / "petstore_swagger.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_context(petstore_raw: dict[str, Any]) -> RoutingContext:
    """The petstore compiled by :func:`specroute.middleware.setup`."""
    return setup(petstore_raw)


@pytest.fixture
def petstore_file(tmp_path: Path) -> Path:
    """A copy of the petstore JSON fixture inside tmp_path."""
    spec_path = tmp_path / "petstore.json"
    spec_path.write_text((FIXTURES_DIR / "petstore_swagger.json").read_text())
    return spec_path


# ---------------------------------------------------------------------------
# Settings isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty tmp_path with no SPECROUTE_* variables or NO_COLOR.

    Returns:
        The tmp_path root, which is also the working directory.
    """
    for var in ["SPECROUTE_SPEC", "SPECROUTE_BASE_PATH", "SPECROUTE_FORMAT", "NO_COLOR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
