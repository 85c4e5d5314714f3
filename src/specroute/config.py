"""Settings for the ``specroute`` command line.

Nothing here writes to disk.  Every invocation builds its
:class:`~specroute.models.Settings` afresh, later sources overriding
earlier ones:

1. the defaults declared on the model,
2. ``specroute.json`` in the working directory,
3. the ``SPECROUTE_*`` environment variables in :data:`ENV_VARS`,
4. command-line arguments.

The router itself takes no settings; :func:`~specroute.middleware.setup`
receives the document and an optional base path from its caller.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specroute.exceptions import SettingsError
from specroute.models import Settings

PROJECT_FILE = "specroute.json"

ENV_VARS = {
    "spec": "SPECROUTE_SPEC",
    "base_path": "SPECROUTE_BASE_PATH",
    "format": "SPECROUTE_FORMAT",
}


def read_project_file(directory: Optional[Path] = None) -> dict[str, Any]:
    """Return the object stored in ``specroute.json``.

    Args:
        directory: Where to look; the working directory by default.

    Returns:
        The parsed object, or ``{}`` when the file does not exist.

    Raises:
        SettingsError: If the file is not JSON or not a JSON object.
    """
    path = (directory or Path.cwd()) / PROJECT_FILE
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise SettingsError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SettingsError(f"{path} must hold a JSON object")
    return data


def _from_environment() -> dict[str, str]:
    return {field: os.environ[var] for field, var in ENV_VARS.items() if os.environ.get(var)}


def load_settings(**overrides: Optional[str]) -> Settings:
    """Resolve the settings for this invocation.

    Args:
        **overrides: Values from the command line, keyed by field name.
            ``None`` means the argument was not given.

    Raises:
        SettingsError: If a source is unreadable or a value fails validation.

    Example::

        settings = load_settings(spec=spec_argument, base_path=None)
        if settings.spec is None:
            ...
    """
    merged: dict[str, Any] = read_project_file()
    merged.update(_from_environment())
    merged.update({field: value for field, value in overrides.items() if value is not None})
    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise SettingsError(f"Invalid settings: {exc}") from exc
