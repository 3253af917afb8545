"""Validator configuration loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

from adventurecheck.errors import ConfigError

# Default configuration values
DEFAULT_LONG_TEXT_THRESHOLD = 300
DEFAULT_INDEX_NAME = "adventure-index.json"
DEFAULT_CONFIG_NAME = "adventurecheck.yaml"


@dataclass(frozen=True)
class ValidatorConfig:
    """Tunables for validation and the default data location.

    Attributes:
        long_text_threshold: Node text longer than this many characters
            gets a warning. The threshold itself is allowed.
        data_dir: Directory holding the adventure index, used by the CLI
            when no directory is given on the command line.
        index_name: File name of the adventure index inside ``data_dir``.
    """

    long_text_threshold: int = DEFAULT_LONG_TEXT_THRESHOLD
    data_dir: Path | None = None
    index_name: str = DEFAULT_INDEX_NAME

    @classmethod
    def from_dict(cls, data: dict[str, Any], base_dir: Path | None = None) -> ValidatorConfig:
        """Create config from dictionary.

        Args:
            data: Dictionary with optional ``long_text_threshold``,
                ``data_dir`` and ``index_name`` keys.
            base_dir: Directory relative ``data_dir`` values resolve against.

        Returns:
            ValidatorConfig instance.

        Raises:
            ValueError: If a value has the wrong type or is out of range.
        """
        threshold = data.get("long_text_threshold", DEFAULT_LONG_TEXT_THRESHOLD)
        if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 1:
            msg = f"long_text_threshold must be a positive integer, got {threshold!r}"
            raise ValueError(msg)

        index_name = data.get("index_name", DEFAULT_INDEX_NAME)
        if not isinstance(index_name, str) or not index_name:
            msg = f"index_name must be a non-empty string, got {index_name!r}"
            raise ValueError(msg)

        data_dir: Path | None = None
        raw_dir = data.get("data_dir")
        if raw_dir is not None:
            if not isinstance(raw_dir, str) or not raw_dir:
                msg = f"data_dir must be a non-empty string, got {raw_dir!r}"
                raise ValueError(msg)
            data_dir = Path(raw_dir)
            if base_dir is not None and not data_dir.is_absolute():
                data_dir = base_dir / data_dir

        return cls(long_text_threshold=threshold, data_dir=data_dir, index_name=index_name)


def load_config(config_path: Path) -> ValidatorConfig:
    """Load validator configuration from a YAML file.

    Relative ``data_dir`` entries are resolved against the file's directory.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        ValidatorConfig instance.

    Raises:
        ConfigError: If config cannot be loaded.
    """
    if not config_path.exists():
        raise ConfigError(config_path, "File not found")

    yaml = YAML(typ="safe")
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)

        if data is None:
            raise ConfigError(config_path, "Empty file")
        if not isinstance(data, dict):
            raise ConfigError(config_path, "Top level must be a mapping")

        return ValidatorConfig.from_dict(dict(data), base_dir=config_path.parent)
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(config_path, str(e)) from e
