"""Structural validation for branching adventure graphs.

An adventure is a titled list of nodes; each node carries narrative text and
a list of options, and each option points at another node by id. The first
node is where every playthrough starts. Nodes without options are endings.

``validate`` runs four passes over a raw, possibly malformed document:

1. Shape: field presence and primitive types.
2. References: duplicate ids and options pointing at missing nodes.
3. Topology: ending presence, reachability from the first node, and
   dead-end loops (cycles made only of single-option nodes).
4. Heuristics and stats: advisory warnings and aggregate counts.

Pure and deterministic: the input is never mutated, nothing is raised, and
every defect found is returned in one ``ValidationResult``.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from adventurecheck.config import ValidatorConfig
from adventurecheck.observability.logging import get_logger

log = get_logger(__name__)

__all__ = [
    "LOOP_SEPARATOR",
    "AdventureStats",
    "ValidationResult",
    "format_node_id",
    "is_number",
    "text_length",
    "validate",
]

LOOP_SEPARATOR = " → "

NOT_AN_OBJECT = "Adventure is not a valid object."
INVALID_TITLE = "Adventure title must be a non-empty string."
NO_NODES = "Adventure is empty: it has no nodes."
NO_ENDINGS = "No ending nodes found: every node has at least one option."

_DEFAULT_CONFIG = ValidatorConfig()


@dataclass
class AdventureStats:
    """Aggregate counts over an adventure, computed even when it is invalid.

    Attributes:
        total_nodes: Number of entries in ``nodes``.
        total_endings: Nodes whose options list is empty.
        total_connections: Options summed over all nodes.
    """

    total_nodes: int = 0
    total_endings: int = 0
    total_connections: int = 0

    def to_dict(self) -> dict[str, int]:
        """Return the stats with the camelCase keys authoring tools expect."""
        return {
            "totalNodes": self.total_nodes,
            "totalEndings": self.total_endings,
            "totalConnections": self.total_connections,
        }


@dataclass
class ValidationResult:
    """Everything ``validate`` found in one document.

    Attributes:
        errors: Defects that block publishing, in pass order, no repeats.
        warnings: Advisory findings that never block publishing.
        stats: Aggregate counts.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: AdventureStats = field(default_factory=AdventureStats)
    _seen_errors: set[str] = field(default_factory=set, init=False, repr=False, compare=False)
    _seen_warnings: set[str] = field(default_factory=set, init=False, repr=False, compare=False)

    def add_error(self, message: str) -> None:
        if message not in self._seen_errors:
            self._seen_errors.add(message)
            self.errors.append(message)

    def add_warning(self, message: str) -> None:
        if message not in self._seen_warnings:
            self._seen_warnings.add(message)
            self.warnings.append(message)

    @property
    def is_valid(self) -> bool:
        """True if the adventure can be published."""
        return not self.errors

    @property
    def summary(self) -> str:
        """Human-readable summary of the findings."""
        parts: list[str] = []
        if self.errors:
            parts.append(f"{len(self.errors)} errors")
        if self.warnings:
            parts.append(f"{len(self.warnings)} warnings")
        if not parts:
            parts.append("valid")
        return ", ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``{errors, warnings, stats}`` wire contract."""
        return {
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "stats": self.stats.to_dict(),
        }


@dataclass
class _NodeView:
    """The well-formed parts of one node, as seen by the shape pass."""

    index: int
    node_id: int | float | None
    text: str | None = None
    options: list[Any] | None = None
    # (option index, numeric target) for every option with a numeric target
    targets: list[tuple[int, int | float]] = field(default_factory=list)

    @property
    def ref(self) -> str:
        if self.node_id is None:
            return f"at index {self.index}"
        return format_node_id(self.node_id)


def is_number(value: object) -> bool:
    """True for JSON numbers; booleans are excluded."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_text(value: object) -> bool:
    return isinstance(value, str) and value != ""


def text_length(text: str) -> int:
    """Length in UTF-16 code units, as browsers count it (an emoji is 2)."""
    return len(text.encode("utf-16-le", errors="surrogatepass")) // 2


def format_node_id(node_id: int | float) -> str:
    """Render an id the way JSON writes it (``1.0`` becomes ``1``)."""
    if isinstance(node_id, float) and node_id.is_integer():
        return str(int(node_id))
    return str(node_id)


def validate(document: Any, config: ValidatorConfig | None = None) -> ValidationResult:
    """Check an adventure document and report every defect found.

    Args:
        document: Candidate adventure, typically decoded JSON. Any value is
            accepted, including None and non-mappings.
        config: Validation tunables. Defaults to ``ValidatorConfig()``.

    Returns:
        A new ValidationResult. ``errors`` is empty only when the adventure
        satisfies every structural invariant.
    """
    config = config or _DEFAULT_CONFIG
    result = ValidationResult()

    if not isinstance(document, Mapping):
        result.add_error(NOT_AN_OBJECT)
        log.debug("adventure_rejected", reason="not_a_mapping", kind=type(document).__name__)
        return result

    views = _check_shape(document, result)
    nodes_by_id = _check_references(views, result)
    _check_topology(views, nodes_by_id, result)
    _check_heuristics(views, result, config)
    result.stats = _compute_stats(document.get("nodes"))

    log.debug(
        "adventure_validated",
        nodes=result.stats.total_nodes,
        errors=len(result.errors),
        warnings=len(result.warnings),
    )
    return result


# ---------------------------------------------------------------------------
# Pass 1: shape
# ---------------------------------------------------------------------------


def _check_shape(document: Mapping[str, Any], result: ValidationResult) -> list[_NodeView]:
    if not _is_text(document.get("title")):
        result.add_error(INVALID_TITLE)

    nodes = document.get("nodes")
    if not isinstance(nodes, list) or not nodes:
        result.add_error(NO_NODES)
        return []

    views: list[_NodeView] = []
    for index, node in enumerate(nodes):
        if not isinstance(node, Mapping):
            result.add_error(f"Node must be an object (node at index {index}).")
            continue

        node_id = node.get("id")
        if not is_number(node_id):
            result.add_error(f"Node id must be a number (node at index {index}).")
            node_id = None
        view = _NodeView(index=index, node_id=node_id)

        text = node.get("text")
        if _is_text(text):
            view.text = text
        else:
            result.add_error(f"Node text must be a non-empty string (node {view.ref}).")

        options = node.get("options")
        if isinstance(options, list):
            view.options = options
            _check_options(view, options, result)
        else:
            result.add_error(f"Node options must be an array (node {view.ref}).")

        views.append(view)
    return views


def _check_options(view: _NodeView, options: list[Any], result: ValidationResult) -> None:
    for position, option in enumerate(options):
        if not isinstance(option, Mapping):
            result.add_error(f"Node {view.ref} option must be an object (option {position}).")
            continue
        if not _is_text(option.get("text")):
            result.add_error(
                f"Node {view.ref} option text must be a non-empty string (option {position})."
            )
        target = option.get("target")
        if is_number(target):
            view.targets.append((position, target))
        else:
            result.add_error(
                f"Node {view.ref} option target must be a number (option {position})."
            )


# ---------------------------------------------------------------------------
# Pass 2: references
# ---------------------------------------------------------------------------


def _check_references(
    views: list[_NodeView], result: ValidationResult
) -> dict[int | float, _NodeView]:
    """Report duplicate ids and dangling targets.

    Returns:
        The first node declared for each id, in declaration order.
    """
    nodes_by_id: dict[int | float, _NodeView] = {}
    for view in views:
        if view.node_id is None:
            continue
        if view.node_id in nodes_by_id:
            result.add_error(f"Duplicate node ID: {format_node_id(view.node_id)}")
        else:
            nodes_by_id[view.node_id] = view

    for view in views:
        for position, target in view.targets:
            if target not in nodes_by_id:
                result.add_error(
                    f"Node {view.ref} option target {format_node_id(target)} "
                    f"does not exist (option {position})."
                )
    return nodes_by_id


# ---------------------------------------------------------------------------
# Pass 3: topology
# ---------------------------------------------------------------------------


def _check_topology(
    views: list[_NodeView],
    nodes_by_id: dict[int | float, _NodeView],
    result: ValidationResult,
) -> None:
    if views and not any(view.options == [] for view in views):
        result.add_error(NO_ENDINGS)

    _check_reachability(views, nodes_by_id, result)
    _check_dead_end_loops(nodes_by_id, result)


def _check_reachability(
    views: list[_NodeView],
    nodes_by_id: dict[int | float, _NodeView],
    result: ValidationResult,
) -> None:
    if not views or views[0].index != 0 or views[0].node_id is None:
        return

    start_id = views[0].node_id
    visited = {start_id}
    queue = deque([start_id])
    while queue:
        current = queue.popleft()
        for _, target in nodes_by_id[current].targets:
            if target in nodes_by_id and target not in visited:
                visited.add(target)
                queue.append(target)

    for node_id in nodes_by_id:
        if node_id not in visited:
            result.add_error(f"Node {format_node_id(node_id)} is unreachable.")


def _check_dead_end_loops(
    nodes_by_id: dict[int | float, _NodeView], result: ValidationResult
) -> None:
    """Report every cycle made only of single-option nodes, once each.

    Nodes with zero or several options end a chain: a player reaching one
    either finishes or gets a real choice.
    """
    single_targets: dict[int | float, int | float] = {}
    for node_id, view in nodes_by_id.items():
        if view.options is not None and len(view.options) == 1 and view.targets:
            single_targets[node_id] = view.targets[0][1]

    checked: set[int | float] = set()
    for start_id in single_targets:
        if start_id in checked:
            continue
        chain: list[int | float] = []
        positions: dict[int | float, int] = {}
        current = start_id
        # Chains already checked have had their loop (if any) reported.
        while current in single_targets and current not in checked:
            if current in positions:
                cycle = [*chain[positions[current] :], current]
                rendered = LOOP_SEPARATOR.join(format_node_id(node_id) for node_id in cycle)
                result.add_error(f"Dead-end loop: {rendered}")
                break
            positions[current] = len(chain)
            chain.append(current)
            current = single_targets[current]
        checked.update(chain)


# ---------------------------------------------------------------------------
# Pass 4: heuristics and stats
# ---------------------------------------------------------------------------


def _check_heuristics(
    views: list[_NodeView], result: ValidationResult, config: ValidatorConfig
) -> None:
    for view in views:
        if view.options is not None and len(view.options) == 1:
            result.add_warning(f"Node {view.ref} has only one option.")
        if view.text is None:
            continue
        length = text_length(view.text)
        if length > config.long_text_threshold:
            result.add_warning(f"Node {view.ref} has very long text ({length} characters).")


def _compute_stats(nodes: object) -> AdventureStats:
    stats = AdventureStats()
    if not isinstance(nodes, list):
        return stats
    stats.total_nodes = len(nodes)
    for node in nodes:
        options = node.get("options") if isinstance(node, Mapping) else None
        if isinstance(options, list):
            stats.total_connections += len(options)
            if not options:
                stats.total_endings += 1
    return stats
