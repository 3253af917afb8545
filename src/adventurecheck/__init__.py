"""adventurecheck: structural validation for branching narrative adventures."""

from adventurecheck.config import ValidatorConfig, load_config
from adventurecheck.loader import load_adventure, load_document, parse_adventure
from adventurecheck.models import Adventure, AdventureIndexEntry, Node, Option
from adventurecheck.registry import AdventureRegistry, validate_index
from adventurecheck.validator import AdventureStats, ValidationResult, validate

__version__ = "0.1.0"

__all__ = [
    "Adventure",
    "AdventureIndexEntry",
    "AdventureRegistry",
    "AdventureStats",
    "Node",
    "Option",
    "ValidationResult",
    "ValidatorConfig",
    "__version__",
    "load_adventure",
    "load_config",
    "load_document",
    "parse_adventure",
    "validate",
    "validate_index",
]
