from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Sequence, Set, Tuple

from .board import Board, Coord, Direction
from .hashkey import SearchKey, state_key
from .moves import apply_forward
from .rules import is_loss, is_win

DEFAULT_NODE_BUDGET = 20_000
DEFAULT_DEPTH_BUDGET = 60


@dataclass
class SolveResult:
    """Outcome of a bounded forward search."""
    solved: bool
    moves: Optional[int]  # BFS depth of the first win dequeued
    nodes: int  # states dequeued
    exhausted: bool  # node or depth budget cut the search short


def solve(
    circles: Sequence[Coord],
    crosses: Sequence[Coord],
    player_index: int,
    board: Board,
    node_budget: int = DEFAULT_NODE_BUDGET,
    depth_budget: int = DEFAULT_DEPTH_BUDGET,
) -> SolveResult:
    """
    Breadth-first search over forward moves until a win is dequeued.

    Lost positions are terminal and never expanded. The budgets are checked once
    per dequeued node; running out is reported through `exhausted`, not raised.
    """
    start: Tuple[Tuple[Coord, ...], Tuple[Coord, ...], int] = (tuple(circles), tuple(crosses), 0)
    visited: Set[SearchKey] = {state_key(circles, crosses, player_index)}
    queue: Deque[Tuple[Tuple[Coord, ...], Tuple[Coord, ...], int]] = deque([start])
    nodes = 0
    depth_capped = False

    while queue:
        cir, crs, depth = queue.popleft()
        if nodes >= node_budget:
            return SolveResult(solved=False, moves=None, nodes=nodes, exhausted=True)
        nodes += 1
        if is_win(cir):
            return SolveResult(solved=True, moves=depth, nodes=nodes, exhausted=False)
        if is_loss(crs):
            continue
        if depth >= depth_budget:
            depth_capped = True
            continue
        for d in Direction:
            next_cir = list(cir)
            next_crs = list(crs)
            if not apply_forward(next_cir, next_crs, player_index, d, board):
                continue
            key = state_key(next_cir, next_crs, player_index)
            if key in visited:
                continue
            visited.add(key)
            queue.append((tuple(next_cir), tuple(next_crs), depth + 1))

    return SolveResult(solved=False, moves=None, nodes=nodes, exhausted=depth_capped)


def min_moves_to_win(
    circles: Sequence[Coord],
    crosses: Sequence[Coord],
    player_index: int,
    board: Board,
    node_budget: int = DEFAULT_NODE_BUDGET,
    depth_budget: int = DEFAULT_DEPTH_BUDGET,
) -> Optional[int]:
    """Minimum number of forward moves to a win, or None when not found within budget."""
    return solve(circles, crosses, player_index, board, node_budget, depth_budget).moves
