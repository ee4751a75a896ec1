from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Set

from .board import Board, Coord, Direction


def _has_run_of_three(values: List[int]) -> bool:
    if len(values) < 3:
        return False
    values.sort()
    for i in range(len(values) - 2):
        if values[i + 1] == values[i] + 1 and values[i + 2] == values[i] + 2:
            return True
    return False


def has_aligned_triple(positions: Iterable[Coord]) -> bool:
    """True when three of the positions are consecutive along a row or a column."""
    by_row: Dict[int, List[int]] = defaultdict(list)
    by_col: Dict[int, List[int]] = defaultdict(list)
    for r, c in positions:
        by_row[r].append(c)
        by_col[c].append(r)
    return (
        any(_has_run_of_three(cols) for cols in by_row.values())
        or any(_has_run_of_three(rows) for rows in by_col.values())
    )


def is_win(circles: Iterable[Coord]) -> bool:
    """The circles form a triple."""
    return has_aligned_triple(circles)


def is_loss(crosses: Iterable[Coord]) -> bool:
    """Three crosses have been pushed into line."""
    return has_aligned_triple(crosses)


def has_deadlock(crosses: Iterable[Coord], board: Board) -> bool:
    """
    Conservative unsolvability check for a cross configuration.

    Flags a 2x2 block of crosses, a cross sitting in a corner of the playable
    area (a missing cell, whether off the board or a hole, on two orthogonal
    sides), and a cross pinned on two orthogonal sides where either side may
    be a missing cell or another cross. Over-rejects on purpose: some flagged
    positions could be rescued by moving the blocking cross first.
    """
    cross_set: Set[Coord] = set(crosses)
    if not cross_set:
        return False

    for r, c in cross_set:
        if (r, c + 1) in cross_set and (r + 1, c) in cross_set and (r + 1, c + 1) in cross_set:
            return True

    for coord in cross_set:
        up = board.step(coord, Direction.UP)
        down = board.step(coord, Direction.DOWN)
        left = board.step(coord, Direction.LEFT)
        right = board.step(coord, Direction.RIGHT)

        vertical_missing = (up is None, down is None)
        horizontal_missing = (left is None, right is None)
        if any(vertical_missing) and any(horizontal_missing):
            return True

        vertical_blocked = (up is None or up in cross_set, down is None or down in cross_set)
        horizontal_blocked = (left is None or left in cross_set, right is None or right in cross_set)
        if any(vertical_blocked) and any(horizontal_blocked):
            return True

    return False


def outcome(circles: Iterable[Coord], crosses: Iterable[Coord]) -> str:
    """'won', 'lost' or 'playing'. A win takes precedence when both hold."""
    if is_win(circles):
        return 'won'
    if is_loss(crosses):
        return 'lost'
    return 'playing'
