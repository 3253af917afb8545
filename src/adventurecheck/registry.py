"""Registry of the adventures published from one data directory.

The registry is an ordinary object owned by whoever builds it: the CLI, an
authoring tool, a test. Nothing here is module-level state, so the editor,
the publishing checks and any runtime consumer each hold their own view of
the index.

Index format (``adventure-index.json``)::

    [
      {"id": "cave", "title": "The Cave", "file": "adventures/cave.json",
       "description": "A short walk in the dark."},
      ...
    ]

``file`` is relative to the data directory. ``description`` is optional and
may be a string or a list of strings.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from adventurecheck.config import DEFAULT_INDEX_NAME, ValidatorConfig
from adventurecheck.errors import (
    AdventureCheckError,
    AdventureIndexError,
    AdventureParseError,
    UnknownAdventureError,
)
from adventurecheck.loader import load_document, parse_adventure
from adventurecheck.models import Adventure, AdventureIndexEntry
from adventurecheck.observability.logging import get_logger
from adventurecheck.validator import ValidationResult, validate

log = get_logger(__name__)


def _format_loc(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or "entry"


def _parse_index(raw: Any, data_dir: Path) -> tuple[list[AdventureIndexEntry], list[str]]:
    if not isinstance(raw, list) or not raw:
        return [], ["Index must be a non-empty array."]

    entries: list[AdventureIndexEntry] = []
    problems: list[str] = []
    for position, item in enumerate(raw):
        try:
            entries.append(AdventureIndexEntry.model_validate(item))
        except ValidationError as e:
            for error in e.errors():
                problems.append(f"Entry {position}: {_format_loc(error['loc'])}: {error['msg']}")

    seen: set[str] = set()
    for entry in entries:
        if entry.id in seen:
            problems.append(f"Duplicate adventure ID: {entry.id}")
        seen.add(entry.id)
        if not (data_dir / entry.file).is_file():
            problems.append(f"Adventure '{entry.id}' file does not exist: {entry.file}")
    return entries, problems


def validate_index(raw: Any, data_dir: Path) -> list[str]:
    """Check a decoded adventure index.

    Args:
        raw: The decoded index document.
        data_dir: Directory the entries' ``file`` paths are relative to.

    Returns:
        Every problem found; empty if the index is usable.
    """
    _, problems = _parse_index(raw, data_dir)
    return problems


class AdventureRegistry:
    """Lookup of indexed adventures rooted at one data directory."""

    def __init__(self, data_dir: Path, entries: list[AdventureIndexEntry]) -> None:
        """Initialize registry.

        Args:
            data_dir: Directory the entries' files are relative to.
            entries: Index entries, in index order. Ids must be unique.
        """
        self.data_dir = data_dir
        self._entries: dict[str, AdventureIndexEntry] = {entry.id: entry for entry in entries}

    @classmethod
    def from_index(
        cls, data_dir: Path, index_name: str = DEFAULT_INDEX_NAME
    ) -> AdventureRegistry:
        """Build a registry from the index file in ``data_dir``.

        Raises:
            AdventureNotFoundError: If the index file doesn't exist.
            AdventureParseError: If the index isn't valid JSON.
            AdventureIndexError: If the index content is malformed.
        """
        index_path = data_dir / index_name
        raw = load_document(index_path)
        entries, problems = _parse_index(raw, data_dir)
        if problems:
            raise AdventureIndexError(index_path, problems)
        log.info("index_loaded", path=str(index_path), adventures=len(entries))
        return cls(data_dir, entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, adventure_id: object) -> bool:
        return adventure_id in self._entries

    def __iter__(self) -> Iterator[AdventureIndexEntry]:
        return iter(self._entries.values())

    def ids(self) -> list[str]:
        return list(self._entries)

    def get(self, adventure_id: str) -> AdventureIndexEntry:
        """Return the index entry for an id.

        Raises:
            UnknownAdventureError: If the id isn't indexed.
        """
        try:
            return self._entries[adventure_id]
        except KeyError:
            raise UnknownAdventureError(adventure_id, self.ids()) from None

    def path_for(self, adventure_id: str) -> Path:
        return self.data_dir / self.get(adventure_id).file

    def load(self, adventure_id: str) -> dict[str, Any]:
        """Load the raw document of an indexed adventure.

        The returned dict is new and carries the entry's ``id``; the file's
        own top-level keys are otherwise untouched.

        Raises:
            UnknownAdventureError: If the id isn't indexed.
            AdventureNotFoundError: If the file is missing.
            AdventureParseError: If the file isn't valid JSON or its top
                level isn't an object.
        """
        path = self.path_for(adventure_id)
        document = load_document(path)
        if not isinstance(document, dict):
            raise AdventureParseError(path, "top level must be an object")
        return {**document, "id": adventure_id}

    def parse(self, adventure_id: str, config: ValidatorConfig | None = None) -> Adventure:
        """Load an indexed adventure and return its typed view.

        Raises:
            InvalidAdventureError: If the adventure fails validation.
        """
        document = load_document(self.path_for(adventure_id))
        return parse_adventure(document, config, source=adventure_id)

    def validate_all(self, config: ValidatorConfig | None = None) -> dict[str, ValidationResult]:
        """Validate every indexed adventure.

        A file that can't be loaded yields a result holding a single error
        that describes the load failure.

        Returns:
            Results keyed by adventure id, in index order.
        """
        results: dict[str, ValidationResult] = {}
        for adventure_id in self._entries:
            try:
                document = load_document(self.path_for(adventure_id))
            except AdventureCheckError as e:
                log.warning("adventure_load_failed", adventure=adventure_id, error=str(e))
                failed = ValidationResult()
                failed.add_error(str(e))
                results[adventure_id] = failed
                continue
            results[adventure_id] = validate(document, config)
        return results
