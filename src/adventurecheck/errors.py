"""Exception types for loading, indexing and configuring adventures.

The validator itself never raises: it reports every defect as a string.
These errors belong to the layers around it that touch the filesystem or
turn raw documents into typed models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from difflib import get_close_matches
from pathlib import Path  # noqa: TC003 - used at runtime in dataclass fields


class AdventureCheckError(Exception):
    """Base class for all adventurecheck errors."""


@dataclass
class AdventureNotFoundError(AdventureCheckError):
    """Raised when an adventure or index file doesn't exist.

    Attributes:
        path: The path that was looked up.
    """

    path: Path

    def __post_init__(self) -> None:
        super().__init__(f"File not found: {self.path}")


@dataclass
class AdventureParseError(AdventureCheckError):
    """Raised when a file exists but cannot be decoded as JSON.

    Attributes:
        path: The file that failed to parse.
        reason: Decoder message.
    """

    path: Path
    reason: str

    def __post_init__(self) -> None:
        super().__init__(f"Failed to parse {self.path}: {self.reason}")


@dataclass
class InvalidAdventureError(AdventureCheckError):
    """Raised when a document fails validation but a typed view was requested.

    Attributes:
        errors: Validation errors, in the order the validator reported them.
        source: Where the document came from (file path or adventure id).
    """

    errors: list[str]
    source: str = ""

    def __post_init__(self) -> None:
        where = f" ({self.source})" if self.source else ""
        super().__init__(f"Adventure is invalid{where}: {len(self.errors)} error(s)")

    def __str__(self) -> str:
        lines = [self.args[0] + ":"]
        for error in self.errors[:10]:
            lines.append(f"  - {error}")
        if len(self.errors) > 10:
            lines.append(f"  - ... and {len(self.errors) - 10} more")
        return "\n".join(lines)


@dataclass
class AdventureIndexError(AdventureCheckError):
    """Raised when the adventure index is malformed.

    Attributes:
        path: The index file.
        problems: Every defect found in the index.
    """

    path: Path
    problems: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__init__(f"Invalid adventure index {self.path}: {'; '.join(self.problems)}")


@dataclass
class UnknownAdventureError(AdventureCheckError):
    """Raised when looking up an adventure id that is not indexed.

    Attributes:
        adventure_id: The id that was requested.
        available: Ids present in the registry.
    """

    adventure_id: str
    available: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        msg = f"Unknown adventure '{self.adventure_id}'"
        suggestions = self.suggestions()
        if suggestions:
            msg += f" (did you mean: {', '.join(suggestions)}?)"
        super().__init__(msg)

    def suggestions(self) -> list[str]:
        """Find indexed ids that look like typos of the requested one."""
        return get_close_matches(self.adventure_id, self.available, n=3, cutoff=0.6)


@dataclass
class ConfigError(AdventureCheckError):
    """Raised when the configuration file cannot be loaded.

    Attributes:
        path: The configuration file.
        reason: What went wrong.
    """

    path: Path
    reason: str

    def __post_init__(self) -> None:
        super().__init__(f"Failed to load config at {self.path}: {self.reason}")
