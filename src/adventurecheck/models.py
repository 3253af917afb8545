"""Typed, read-only views of adventures and index entries.

Raw documents go through ``adventurecheck.validator.validate`` first; only a
document with zero errors should be turned into an ``Adventure`` (see
``adventurecheck.loader.parse_adventure``). Consumers that walk the story at
play time can then index the start node and look up targets without
re-checking anything.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

# Non-empty string type for narrative fields
NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


class Option(BaseModel):
    """A player choice leading to another node."""

    model_config = ConfigDict(frozen=True)

    text: NonEmptyStr
    target: int | float


class Node(BaseModel):
    """A story beat: narrative text plus the choices offered after it."""

    model_config = ConfigDict(frozen=True)

    id: int | float
    text: NonEmptyStr
    options: list[Option] = Field(default_factory=list)

    @property
    def is_ending(self) -> bool:
        """True if the story stops here."""
        return not self.options

    def get_option(self, target: int | float) -> Option | None:
        """Return the first option leading to ``target``, if any."""
        return next((option for option in self.options if option.target == target), None)


class Adventure(BaseModel):
    """A titled branching story; ``nodes[0]`` is where play begins."""

    model_config = ConfigDict(frozen=True)

    title: NonEmptyStr
    nodes: list[Node] = Field(min_length=1)

    @property
    def start_node(self) -> Node:
        return self.nodes[0]

    @property
    def endings(self) -> list[Node]:
        return [node for node in self.nodes if node.is_ending]

    def get_node(self, node_id: int | float) -> Node | None:
        """Look up a node by id, or None if no node has it."""
        return next((node for node in self.nodes if node.id == node_id), None)


# ---------------------------------------------------------------------------
# Index entries
# ---------------------------------------------------------------------------


class Paragraph(BaseModel):
    """A description written as one block of text."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["paragraph"] = "paragraph"
    text: NonEmptyStr


class BulletList(BaseModel):
    """A description written as a list of short items."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bullets"] = "bullets"
    items: list[NonEmptyStr] = Field(min_length=1)


Description = Annotated[Paragraph | BulletList, Field(discriminator="kind")]


def render_description(description: Paragraph | BulletList) -> str:
    """Render a description as plain text; bullets become ``- item`` lines."""
    match description:
        case Paragraph(text=text):
            return text
        case BulletList(items=items):
            return "\n".join(f"- {item}" for item in items)


class AdventureIndexEntry(BaseModel):
    """One row of ``adventure-index.json``."""

    model_config = ConfigDict(frozen=True)

    id: NonEmptyStr
    title: NonEmptyStr
    file: NonEmptyStr
    description: Description | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _tag_description(cls, value: Any) -> Any:
        """Accept the bare string or list form used in hand-written indexes."""
        if isinstance(value, str):
            return {"kind": "paragraph", "text": value}
        if isinstance(value, list):
            return {"kind": "bullets", "items": value}
        return value
