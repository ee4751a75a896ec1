from __future__ import annotations

import random
from collections import deque
from typing import List, Optional, Sequence, Set

from .board import Board, Coord
from .logging_config import get_logger

LOGGER = get_logger(__name__)

MIN_ROWS, MAX_ROWS = 3, 8
MIN_CELLS = 20
EXTRA_COLS = 8
HOLE_FRACTION = (0.06, 0.16)
MIN_PLAYABLE = 6
RELOCATE_CHANCE = 0.18
ATTEMPTS_PER_HOLE = 20

_STEPS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def _present_neighbors(mask: List[List[bool]], coord: Coord) -> List[Coord]:
    r, c = coord
    out: List[Coord] = []
    for dr, dc in _STEPS:
        nr, nc = r + dr, c + dc
        if 0 <= nr < len(mask) and 0 <= nc < len(mask[nr]) and mask[nr][nc]:
            out.append((nr, nc))
    return out


def components(mask: Sequence[Sequence[bool]]) -> List[List[Coord]]:
    """Splits the present cells of a nested mask into 4-connected components, largest first."""
    grid = [list(row) for row in mask]
    seen: Set[Coord] = set()
    found: List[List[Coord]] = []
    for r, row in enumerate(grid):
        for c, present in enumerate(row):
            if not present or (r, c) in seen:
                continue
            seen.add((r, c))
            comp: List[Coord] = []
            queue = deque([(r, c)])
            while queue:
                cur = queue.popleft()
                comp.append(cur)
                for nxt in _present_neighbors(grid, cur):
                    if nxt not in seen:
                        seen.add(nxt)
                        queue.append(nxt)
            found.append(comp)
    found.sort(key=len, reverse=True)
    return found


def board_components(board: Board) -> List[List[Coord]]:
    """Connected components of a board's present cells."""
    mask = [[board.is_cell_present(r, c) for c in range(w)] for r, w in enumerate(board.row_widths)]
    return components(mask)


def _carve_corridor(mask: List[List[bool]], start: Coord, end: Coord) -> None:
    """Marks a row-then-column Manhattan path from start to end as present."""
    r, c = start
    er, ec = end
    mask[r][c] = True
    while r != er:
        r += 1 if er > r else -1
        mask[r][c] = True
    while c != ec:
        c += 1 if ec > c else -1
        mask[r][c] = True


def connect_components(mask: List[List[bool]]) -> int:
    """Joins every smaller component to the largest one; returns how many corridors were carved."""
    comps = components(mask)
    if len(comps) <= 1:
        return 0
    largest = comps[0]
    for comp in comps[1:]:
        rep = min(comp)
        nearest = min(largest, key=lambda rc: (abs(rc[0] - rep[0]) + abs(rc[1] - rep[1]), rc))
        _carve_corridor(mask, rep, nearest)
    return len(comps) - 1


def carve_holes(mask: List[List[bool]], target: int, rng: random.Random) -> int:
    """
    Removes up to `target` cells with 1-3 random-walk blobs.
    Each activation walks 1-4 steps, removing the cell it stands on and then
    moving to a random present neighbour. Returns the number of holes carved.
    """
    if target <= 0:
        return 0
    present = [(r, c) for r, row in enumerate(mask) for c, v in enumerate(row) if v]
    seeds: List[Coord] = [rng.choice(present) for _ in range(rng.randint(1, 3))]
    carved = 0
    attempts = 0
    budget = ATTEMPTS_PER_HOLE * target
    while carved < target and attempts < budget:
        attempts += 1
        i = rng.randrange(len(seeds))
        if rng.random() < RELOCATE_CHANCE:
            remaining = [(r, c) for r, row in enumerate(mask) for c, v in enumerate(row) if v]
            if remaining:
                seeds[i] = rng.choice(remaining)
        cur = seeds[i]
        for _ in range(rng.randint(1, 4)):
            r, c = cur
            if mask[r][c]:
                mask[r][c] = False
                carved += 1
                if carved >= target:
                    break
            options = _present_neighbors(mask, cur)
            if not options:
                break
            cur = rng.choice(options)
        seeds[i] = cur
    return carved


def generate_random(seed: Optional[int] = None, rng: Optional[random.Random] = None) -> Board:
    """Builds an irregular board: a random rectangle with carved holes, repaired to stay connected."""
    rng = rng or random.Random(seed)
    rows = rng.randint(MIN_ROWS, MAX_ROWS)
    min_cols = (MIN_CELLS + rows - 1) // rows
    cols = rng.randint(min_cols, min_cols + EXTRA_COLS)
    total = rows * cols

    mask = [[True] * cols for _ in range(rows)]
    target = int(total * rng.uniform(*HOLE_FRACTION))
    target = max(0, min(target, total - MIN_PLAYABLE))
    carved = carve_holes(mask, target, rng)
    corridors = connect_components(mask)

    board = Board.from_mask(mask)
    LOGGER.debug(
        "Built %dx%d board: %d holes targeted, %d carved, %d corridors, %d playable cells",
        rows, cols, target, carved, corridors, len(board.present_coords()),
    )
    return board

