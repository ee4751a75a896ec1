from __future__ import annotations

from typing import Sequence, Tuple

from .board import Coord

# (player position, sorted non-player circles, sorted crosses)
SearchKey = Tuple[Coord, Tuple[Coord, ...], Tuple[Coord, ...]]


def state_key(circles: Sequence[Coord], crosses: Sequence[Coord], player_index: int) -> SearchKey:
    """Canonical, hashable key for visited-state tracking.

    Non-player circles are interchangeable and crosses are unordered, so both
    are sorted; only the player's own position keeps its identity.
    """
    others = tuple(sorted(c for i, c in enumerate(circles) if i != player_index))
    return (circles[player_index], others, tuple(sorted(crosses)))
