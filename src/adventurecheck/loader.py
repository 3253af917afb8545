"""Adventure document loading from JSON files."""

from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

from adventurecheck.config import ValidatorConfig
from adventurecheck.errors import (
    AdventureNotFoundError,
    AdventureParseError,
    InvalidAdventureError,
)
from adventurecheck.models import Adventure
from adventurecheck.observability.logging import get_logger
from adventurecheck.validator import validate

log = get_logger(__name__)


def load_document(path: Path) -> Any:
    """Read a JSON file without interpreting its contents.

    Args:
        path: File to read.

    Returns:
        The decoded JSON value, whatever its shape.

    Raises:
        AdventureNotFoundError: If the file doesn't exist.
        AdventureParseError: If the file can't be read or decoded.
    """
    if not path.is_file():
        raise AdventureNotFoundError(path)

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise AdventureParseError(path, str(e)) from e

    log.debug("document_loaded", path=str(path))
    return data


def parse_adventure(
    document: Any,
    config: ValidatorConfig | None = None,
    *,
    source: str = "",
) -> Adventure:
    """Validate a raw document and return its typed view.

    Args:
        document: Raw adventure, as decoded from JSON.
        config: Validation tunables.
        source: Where the document came from, used in error messages.

    Returns:
        The Adventure model.

    Raises:
        InvalidAdventureError: If validation reports any errors.
    """
    result = validate(document, config)
    if result.errors:
        log.info("adventure_invalid", source=source, errors=len(result.errors))
        raise InvalidAdventureError(result.errors, source)
    return Adventure.model_validate(document)


def load_adventure(path: Path, config: ValidatorConfig | None = None) -> Adventure:
    """Load, validate and parse an adventure file.

    Raises:
        AdventureNotFoundError: If the file doesn't exist.
        AdventureParseError: If the file isn't valid JSON.
        InvalidAdventureError: If the adventure fails validation.
    """
    return parse_adventure(load_document(path), config, source=str(path))
