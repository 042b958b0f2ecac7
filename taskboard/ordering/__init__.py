"""Ordering Engine - fractional positions for drag-and-drop boards

Every task and category carries a floating-point ``position``. Ascending
position is display order, and all positions in one scope are distinct.
Scopes are per user: all of a user's tasks form ONE scope (category columns
are filtered views over it), and all of a user's categories form another.

Components:
    allocator.py: Pure computation of a key between two neighbors
    rebalancer.py: Even re-spacing of a whole scope when keys get too close
    reorder.py: The atomic move operation for tasks and categories

Policy:
    - Fresh entities and rebalanced scopes are spaced GAP apart.
    - Head/tail inserts step GAP/2 past the end neighbor.
    - A midpoint is refused when its neighbors are closer than MIN_GAP;
      the scope is then rebalanced once and the allocation retried.
"""

# Base spacing between neighbors; deployment-wide, not user-configurable
GAP = 1000.0

# Neighbors closer than this trigger a rebalance instead of a midpoint
MIN_GAP = 1.0

__all__ = ["GAP", "MIN_GAP"]
