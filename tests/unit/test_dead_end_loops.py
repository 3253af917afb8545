"""Tests for dead-end loop detection.

A dead-end loop is a cycle made only of single-option nodes: once a player
enters it there is no choice left that leads anywhere else.
"""

from __future__ import annotations

from adventurecheck.validator import ValidationResult, validate
from tests.fixtures.adventures import make_adventure, node, opt


def _loop_errors(result: ValidationResult) -> list[str]:
    return [e for e in result.errors if "Dead-end loop" in e]


def test_two_node_loop_reported() -> None:
    adv = make_adventure(
        [
            node(1, "Node A", [opt("Go to B", 2)]),
            node(2, "Node B", [opt("Go to A", 1)]),
        ]
    )

    loops = _loop_errors(validate(adv))

    assert loops == ["Dead-end loop: 1 → 2 → 1"]


def test_three_node_loop_reported() -> None:
    adv = make_adventure(
        [
            node(1, "Node A", [opt("Go", 2)]),
            node(2, "Node B", [opt("Go", 3)]),
            node(3, "Node C", [opt("Go", 1)]),
        ]
    )

    loops = _loop_errors(validate(adv))

    assert loops == ["Dead-end loop: 1 → 2 → 3 → 1"]


def test_self_loop_reported() -> None:
    adv = make_adventure([node(1, "Stuck", [opt("Again", 1)])])

    loops = _loop_errors(validate(adv))

    assert len(loops) == 1
    assert "1 → 1" in loops[0]


def test_chain_ending_at_ending_is_not_a_loop() -> None:
    adv = make_adventure(
        [
            node(1, "Start", [opt("Go", 2)]),
            node(2, "Middle", [opt("Go", 3)]),
            node(3, "End", []),
        ]
    )

    assert _loop_errors(validate(adv)) == []


def test_cycle_with_multi_option_escape_is_not_a_loop() -> None:
    """Node 2 offers a way out, so the 1 → 2 → 1 cycle is not a trap."""
    adv = make_adventure(
        [
            node(1, "Start", [opt("Go", 2)]),
            node(2, "Choice", [opt("Back", 1), opt("Forward", 3)]),
            node(3, "End", []),
        ]
    )

    assert _loop_errors(validate(adv)) == []


def test_loop_among_valid_nodes() -> None:
    adv = make_adventure(
        [
            node(1, "Start", [opt("Good path", 2), opt("Bad path", 3)]),
            node(2, "End", []),
            node(3, "Trap A", [opt("Go", 4)]),
            node(4, "Trap B", [opt("Go", 3)]),
        ]
    )

    result = validate(adv)

    assert _loop_errors(result) == ["Dead-end loop: 3 → 4 → 3"]
    assert result.errors == ["Dead-end loop: 3 → 4 → 3"]


def test_two_independent_loops_both_reported() -> None:
    adv = make_adventure(
        [
            node(1, "Start", [opt("Path A", 2), opt("Path B", 4)]),
            node(2, "Loop1A", [opt("Go", 3)]),
            node(3, "Loop1B", [opt("Go", 2)]),
            node(4, "Loop2A", [opt("Go", 5)]),
            node(5, "Loop2B", [opt("Go", 4)]),
        ]
    )

    loops = _loop_errors(validate(adv))

    assert loops == ["Dead-end loop: 2 → 3 → 2", "Dead-end loop: 4 → 5 → 4"]


def test_chain_ending_at_branch_node_is_not_a_loop() -> None:
    adv = make_adventure(
        [
            node(1, "Linear A", [opt("Go", 2)]),
            node(2, "Linear B", [opt("Go", 3)]),
            node(3, "Branch", [opt("Left", 4), opt("Right", 5)]),
            node(4, "End A", []),
            node(5, "End B", []),
        ]
    )

    assert _loop_errors(validate(adv)) == []


def test_loop_entered_from_a_lead_in_chain_reports_cycle_only() -> None:
    """A single-option approach into a loop is not part of the reported cycle."""
    adv = make_adventure(
        [
            node(1, "Start", [opt("Enter", 2), opt("Leave", 5)]),
            node(2, "Approach", [opt("On", 3)]),
            node(3, "Loop A", [opt("On", 4)]),
            node(4, "Loop B", [opt("On", 3)]),
            node(5, "End", []),
        ]
    )

    loops = _loop_errors(validate(adv))

    assert loops == ["Dead-end loop: 3 → 4 → 3"]


def test_loop_with_several_entries_reported_once() -> None:
    adv = make_adventure(
        [
            node(1, "Start", [opt("A", 2), opt("B", 3), opt("C", 6)]),
            node(2, "Lead A", [opt("On", 4)]),
            node(3, "Lead B", [opt("On", 5)]),
            node(4, "Loop A", [opt("On", 5)]),
            node(5, "Loop B", [opt("On", 4)]),
            node(6, "End", []),
        ]
    )

    loops = _loop_errors(validate(adv))

    assert loops == ["Dead-end loop: 4 → 5 → 4"]


def test_dangling_target_ends_chain() -> None:
    adv = make_adventure([node(1, "Start", [opt("Go", 2)]), node(2, "Into void", [opt("Fall", 9)])])

    result = validate(adv)

    assert _loop_errors(result) == []
    assert any("target 9 does not exist" in e for e in result.errors)


def test_long_chain_is_walked_iteratively() -> None:
    """A ring far deeper than the recursion limit is still detected."""
    size = 5000
    nodes = [node(i, f"Step {i}", [opt("On", (i + 1) % size)]) for i in range(size)]

    loops = _loop_errors(validate(make_adventure(nodes)))

    assert len(loops) == 1
    assert loops[0].startswith("Dead-end loop: 0 → 1 → 2")
    assert loops[0].endswith(f"{size - 1} → 0")
