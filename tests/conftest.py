"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from tests.fixtures.adventures import write_json


@pytest.fixture
def valid_adventure() -> dict[str, Any]:
    """A small adventure that passes every check."""
    return {
        "title": "The Cave",
        "nodes": [
            {
                "id": 1,
                "text": "You stand at the mouth of a cave.",
                "options": [
                    {"text": "Go inside", "target": 2},
                    {"text": "Walk away", "target": 3},
                ],
            },
            {
                "id": 2,
                "text": "It is dark. Something glitters.",
                "options": [
                    {"text": "Take it", "target": 4},
                    {"text": "Leave it", "target": 3},
                ],
            },
            {"id": 3, "text": "You go home.", "options": []},
            {"id": 4, "text": "You found treasure!", "options": []},
        ],
    }


@pytest.fixture
def broken_adventure() -> dict[str, Any]:
    """An adventure with a dead-end loop and an orphan node."""
    return {
        "title": "The Maze",
        "nodes": [
            {
                "id": 1,
                "text": "A fork in the maze.",
                "options": [
                    {"text": "Left", "target": 2},
                    {"text": "Right", "target": 4},
                ],
            },
            {"id": 2, "text": "A corridor.", "options": [{"text": "On", "target": 3}]},
            {"id": 3, "text": "Another corridor.", "options": [{"text": "On", "target": 2}]},
            {"id": 4, "text": "The exit.", "options": []},
            {"id": 5, "text": "A forgotten room.", "options": []},
        ],
    }


@pytest.fixture
def data_dir(
    tmp_path: Path, valid_adventure: dict[str, Any], broken_adventure: dict[str, Any]
) -> Path:
    """A data directory with an index listing one valid and one broken adventure."""
    root = tmp_path / "data"
    write_json(root / "adventures" / "cave.json", valid_adventure)
    write_json(root / "adventures" / "maze.json", broken_adventure)
    write_json(
        root / "adventure-index.json",
        [
            {
                "id": "cave",
                "title": "The Cave",
                "file": "adventures/cave.json",
                "description": "A short walk in the dark.",
            },
            {
                "id": "maze",
                "title": "The Maze",
                "file": "adventures/maze.json",
                "description": ["Twisty passages", "All alike"],
            },
        ],
    )
    return root


@pytest.fixture
def valid_data_dir(tmp_path: Path, valid_adventure: dict[str, Any]) -> Path:
    """A data directory whose only adventure is valid."""
    root = tmp_path / "valid_data"
    write_json(root / "adventures" / "cave.json", valid_adventure)
    write_json(
        root / "adventure-index.json",
        [{"id": "cave", "title": "The Cave", "file": "adventures/cave.json"}],
    )
    return root
