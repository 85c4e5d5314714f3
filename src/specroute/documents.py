"""Reading Swagger documents for the command line.

The router works on an already parsed mapping and never touches files or
the network itself.  This module is how the ``specroute`` command gets one,
from a file path, an ``http(s)`` URL, or ``-`` for standard input.  Both
JSON and YAML are accepted.

Example::

    definition = read_document("petstore.yaml")
    context = setup(definition)
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from specroute.exceptions import DocumentError

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30.0

_SYNTAX_BY_SUFFIX = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def read_document(source: str) -> dict[str, Any]:
    """Read and parse the document named by *source*.

    Args:
        source: A file path, an ``http://`` or ``https://`` URL, or ``-``.

    Raises:
        DocumentError: If nothing can be read from *source*, or what is read
            is not a JSON or YAML object.
    """
    text, syntax = _read_source(source)
    if not text.strip():
        raise DocumentError(f"Nothing to parse in {_describe(source)}")
    logger.debug("Read %d characters from %s", len(text), _describe(source))
    return parse_document(text, syntax)


def _describe(source: str) -> str:
    return "standard input" if source == "-" else source


def _read_source(source: str) -> tuple[str, Optional[str]]:
    """Return the text behind *source* and its syntax, when that is known."""
    if source == "-":
        return sys.stdin.read(), None
    if source.startswith(("http://", "https://")):
        return _fetch(source)

    path = Path(source)
    if not path.is_file():
        raise DocumentError(f"No such file: {source}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(f"Cannot read {source}: {exc}") from exc
    return text, _SYNTAX_BY_SUFFIX.get(path.suffix.lower())


def _fetch(url: str) -> tuple[str, Optional[str]]:
    try:
        response = httpx.get(url, timeout=FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentError(f"{url} answered HTTP {exc.response.status_code}") from exc
    except httpx.RequestError as exc:
        raise DocumentError(f"Cannot fetch {url}: {exc}") from exc

    media_type = response.headers.get("content-type", "")
    if "json" in media_type:
        return response.text, "json"
    if "yaml" in media_type:
        return response.text, "yaml"
    return response.text, None


def parse_document(text: str, syntax: Optional[str] = None) -> dict[str, Any]:
    """Parse *text* into a mapping.

    ``syntax="json"`` insists on JSON.  Anything else goes through the YAML
    parser, which also accepts JSON.

    Raises:
        DocumentError: If *text* does not parse, or its top level is not a
            mapping.
    """
    if syntax == "json":
        try:
            document = json.loads(text)
        except ValueError as exc:
            raise DocumentError(f"Invalid JSON: {exc}") from exc
    else:
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise DocumentError(f"Invalid YAML: {exc}") from exc

    if not isinstance(document, dict):
        raise DocumentError(
            f"Expected a mapping at the top level, got {type(document).__name__}"
        )
    return document


def declared_version(document: dict[str, Any]) -> Optional[str]:
    """Return the ``swagger`` (or ``openapi``) version *document* declares.

    Documents are never rejected on this basis; it is reported for
    information only.
    """
    for key in ("swagger", "openapi"):
        if key in document:
            return str(document[key])
    return None
