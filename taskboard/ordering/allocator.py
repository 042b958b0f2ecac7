"""
Position allocator.

Given the positions of the entities that should sort immediately before and
after a new slot, compute a key for the slot. This module never touches the
store; resolving neighbor ids to positions is the caller's job.

    allocate(None, None)      -> GAP               (empty scope)
    allocate(None, 1000.0)    -> 500.0             (head)
    allocate(1000.0, None)    -> 1500.0            (tail)
    allocate(1000.0, 2000.0)  -> 1500.0            (midpoint)
    allocate(1000.0, 1000.5)  -> needs rebalance   (gap below MIN_GAP)

Midpoint insertion halves the gap each time, so roughly log2(GAP / MIN_GAP)
(about 10) consecutive inserts into the same slot fit before a rebalance.
"""

from dataclasses import dataclass
from typing import Optional

from . import GAP, MIN_GAP


@dataclass(frozen=True)
class Allocation:
    """Outcome of an allocation: a position, or a request to rebalance."""

    position: Optional[float] = None
    needs_rebalance: bool = False

    @classmethod
    def at(cls, position: float) -> "Allocation":
        return cls(position=position)

    @classmethod
    def rebalance(cls) -> "Allocation":
        return cls(needs_rebalance=True)


def allocate(before: Optional[float] = None, after: Optional[float] = None) -> Allocation:
    """
    Compute a position that sorts after ``before`` and ahead of ``after``.

    Args:
        before: Position of the entity immediately ahead of the slot (None at the head)
        after: Position of the entity immediately behind the slot (None at the tail)

    Returns:
        Allocation with the new position, or with needs_rebalance set when the
        two neighbors are too close to split
    """
    if before is None and after is None:
        return Allocation.at(GAP)

    if before is None:
        return Allocation.at(after - GAP / 2)

    if after is None:
        return Allocation.at(before + GAP / 2)

    if abs(after - before) < MIN_GAP:
        return Allocation.rebalance()

    return Allocation.at((before + after) / 2)


def next_position(last: Optional[float]) -> float:
    """Position for a freshly created entity appended to its scope."""
    if last is None:
        return GAP
    return last + GAP


__all__ = ["Allocation", "allocate", "next_position"]
