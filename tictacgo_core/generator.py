from __future__ import annotations

import random
from collections import Counter, deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, List, Optional, Sequence, Set, Tuple, Union

from .board import Board, Coord, Direction
from .errors import GenerationExhausted
from .hashkey import SearchKey, state_key
from .logging_config import get_logger
from .moves import apply_forward, apply_reverse
from .rules import has_deadlock, is_loss, is_win
from .solver import solve

LOGGER = get_logger(__name__)

Triple = Tuple[Coord, Coord, Coord]

# Deepest-tier candidates kept by the reverse search for random selection.
MAX_TIER = 50
FALLBACK_CROSSES = 5


class Difficulty(Enum):
    EASY = 'easy'
    MEDIUM = 'medium'
    HARD = 'hard'

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Union[str, 'Difficulty']) -> 'Difficulty':
        """Accepts a Difficulty, a name ('Hard') or its initial ('h')."""
        if isinstance(value, cls):
            return value
        key = str(value or '').strip().lower()
        for d in cls:
            if key in (d.value, d.value[0]):
                return d
        raise ValueError(f"unknown difficulty: {value!r} (expected easy, medium or hard)")


@dataclass(frozen=True)
class DifficultyProfile:
    """Tuning knobs for one difficulty tier."""
    cross_range: Tuple[int, int]
    min_depth: int  # shallowest reverse-search depth accepted
    max_depth: int  # depths beyond this rank equal; reaching it ends the search early
    node_budget: int  # reverse-search states explored per attempt
    iterations: int
    min_moves: int  # solver gate: fewest forward moves to a win
    solver_nodes: int
    solver_depth: int
    accept_unsolved: bool  # treat "not solved within budget" as hard enough
    candidates: int = 1  # accepted puzzles after which the search stops


PROFILES: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(
        cross_range=(3, 5), min_depth=3, max_depth=10, node_budget=5_000, iterations=30,
        min_moves=3, solver_nodes=60_000, solver_depth=40, accept_unsolved=False, candidates=2,
    ),
    Difficulty.MEDIUM: DifficultyProfile(
        cross_range=(4, 8), min_depth=6, max_depth=25, node_budget=20_000, iterations=25,
        min_moves=5, solver_nodes=30_000, solver_depth=60, accept_unsolved=True, candidates=2,
    ),
    Difficulty.HARD: DifficultyProfile(
        cross_range=(5, 10), min_depth=10, max_depth=80, node_budget=50_000, iterations=20,
        min_moves=8, solver_nodes=40_000, solver_depth=100, accept_unsolved=True, candidates=1,
    ),
}


@dataclass(frozen=True)
class Puzzle:
    """Generator output in flat indices. An empty circle tuple signals failure."""
    circles: Tuple[int, ...] = ()
    crosses: Tuple[int, ...] = ()  # sorted
    player_index: int = 0
    depth: int = 0  # reverse-search depth the position was taken from
    moves: Optional[int] = None  # solver estimate; None when beyond its budget

    def is_empty(self) -> bool:
        return not self.circles

    def markers(self, board: Board) -> Tuple[List[Coord], List[Coord]]:
        """(circles, crosses) as coordinates."""
        return board.unflatten(self.circles), board.unflatten(self.crosses)


@dataclass
class Candidate:
    circles: List[Coord]
    crosses: List[Coord]
    depth: int
    nodes: int


def enumerate_triples(board: Board) -> List[Triple]:
    """All horizontal and vertical runs of three consecutive present cells."""
    triples: List[Triple] = []
    for r, w in enumerate(board.row_widths):
        for c in range(w - 2):
            if board.is_cell_present(r, c) and board.is_cell_present(r, c + 1) and board.is_cell_present(r, c + 2):
                triples.append(((r, c), (r, c + 1), (r, c + 2)))
    for r in range(board.rows - 2):
        for c in range(board.row_widths[r]):
            if board.is_cell_present(r, c) and board.is_cell_present(r + 1, c) and board.is_cell_present(r + 2, c):
                triples.append(((r, c), (r + 1, c), (r + 2, c)))
    return triples


# Rank offset for cells orthogonally next to a circle.
BESIDE_CIRCLE_PENALTY = 20


def _placement_rank(coord: Coord, centroid: Tuple[float, float], beside_circle: bool = False) -> int:
    """Lower is better: distances 2-6 from the circle centroid first, then far cells, then near ones."""
    dist = int(abs(coord[0] - centroid[0]) + abs(coord[1] - centroid[1]))
    if beside_circle:
        return BESIDE_CIRCLE_PENALTY + dist
    if dist < 2:
        return 10 + dist
    if dist <= 6:
        return dist
    return 5 + dist


def place_crosses(
    board: Board,
    circles: Sequence[Coord],
    count: int,
    rng: random.Random,
) -> Optional[List[Coord]]:
    """
    Places `count` crosses on free present cells near (but not on top of) the circles.
    Cells orthogonally next to a circle are ranked last so the circles keep room to move.
    A cross that would complete a cross triple or trip the deadlock check is taken
    back and the next candidate cell tried. Returns None when too few cells work.
    """
    taken = set(circles)
    available = [rc for rc in board.present_coords() if rc not in taken]
    if len(available) < count:
        return None
    rng.shuffle(available)
    centroid = (
        sum(r for r, _ in circles) / len(circles),
        sum(c for _, c in circles) / len(circles),
    )
    beside = {
        nxt for rc in circles for d in Direction
        for nxt in (board.step(rc, d),) if nxt is not None
    }
    # stable sort keeps the shuffle as tie-breaker
    available.sort(key=lambda rc: _placement_rank(rc, centroid, rc in beside))

    crosses: List[Coord] = []
    for rc in available:
        if len(crosses) >= count:
            break
        crosses.append(rc)
        if is_loss(crosses) or has_deadlock(crosses, board):
            crosses.pop()
    return crosses if len(crosses) >= count else None


def reverse_search(
    board: Board,
    circles: Sequence[Coord],
    crosses: Sequence[Coord],
    player_index: int,
    node_budget: int,
    rng: random.Random,
) -> Candidate:
    """
    Breadth-first search over reverse moves from a solved position.

    Every state reached this way can be pushed back to the solved position, so
    all candidates are solvable. States that are lost, deadlocked or already won
    are not entered. Returns a random state from the deepest tier reached.
    """
    start = (tuple(circles), tuple(crosses))
    visited: Set[SearchKey] = {state_key(start[0], start[1], player_index)}
    queue: Deque[Tuple[Tuple[Coord, ...], Tuple[Coord, ...], int]] = deque([(start[0], start[1], 0)])
    tier: List[Tuple[Tuple[Coord, ...], Tuple[Coord, ...]]] = []
    best_depth = 0
    nodes = 0

    while queue and nodes < node_budget:
        cir, crs, depth = queue.popleft()
        nodes += 1
        if depth > best_depth:
            best_depth = depth
            tier = []
        if depth == best_depth:
            tier.append((cir, crs))
            if len(tier) > MAX_TIER:
                tier.pop(rng.randrange(len(tier) - 1))

        for d in Direction:
            next_cir = list(cir)
            next_crs = list(crs)
            if not apply_reverse(next_cir, next_crs, player_index, d, board):
                continue
            moved_crs = tuple(next_crs)
            # cross rules only need rechecking when a cross was pulled
            if moved_crs != crs and (is_loss(moved_crs) or has_deadlock(moved_crs, board)):
                continue
            if is_win(next_cir):
                continue
            key = state_key(next_cir, moved_crs, player_index)
            if key in visited:
                continue
            visited.add(key)
            queue.append((tuple(next_cir), moved_crs, depth + 1))

    chosen = rng.choice(tier) if tier else start
    return Candidate(circles=list(chosen[0]), crosses=list(chosen[1]), depth=best_depth, nodes=nodes)


def has_safe_move(board: Board, circles: Sequence[Coord], crosses: Sequence[Coord], player_index: int) -> bool:
    """The player has a forward move that changes the position without losing or deadlocking."""
    for d in Direction:
        next_cir = list(circles)
        next_crs = list(crosses)
        if not apply_forward(next_cir, next_crs, player_index, d, board):
            continue
        if is_loss(next_crs) or has_deadlock(next_crs, board):
            continue
        return True
    return False


def _rejection(board: Board, cand: Candidate, player_index: int, profile: DifficultyProfile) -> Optional[str]:
    if cand.depth < profile.min_depth:
        return 'too shallow'
    if is_win(cand.circles):
        return 'already won'
    if is_loss(cand.crosses):
        return 'already lost'
    if has_deadlock(cand.crosses, board):
        return 'deadlocked'
    if not has_safe_move(board, cand.circles, cand.crosses, player_index):
        return 'no safe move'
    return None


def _search(board: Board, profile: DifficultyProfile, rng: random.Random) -> Puzzle:
    triples = enumerate_triples(board)
    if not triples:
        raise GenerationExhausted('board has no run of three present cells')
    free_cells = len(board.present_coords()) - 3

    best: Optional[Puzzle] = None
    best_rank = -1
    accepted = 0
    rejected: Counter = Counter()
    for attempt in range(1, profile.iterations + 1):
        circles = list(rng.choice(triples))
        player_index = rng.randrange(3)
        count = min(rng.randint(*profile.cross_range), free_cells)
        crosses = place_crosses(board, circles, count, rng)
        if crosses is None:
            rejected['no placement'] += 1
            continue

        cand = reverse_search(board, circles, crosses, player_index, profile.node_budget, rng)
        reason = _rejection(board, cand, player_index, profile)
        rank = min(cand.depth, profile.max_depth)
        if reason is None and rank <= best_rank:
            reason = 'not deeper than best'
        if reason is None:
            # undoing the pulls in order wins within cand.depth moves
            depth_cap = min(profile.solver_depth, cand.depth)
            result = solve(cand.circles, cand.crosses, player_index, board, profile.solver_nodes, depth_cap)
            if result.solved and result.moves is not None and result.moves < profile.min_moves:
                reason = 'too easy'
            elif not result.solved and not profile.accept_unsolved:
                reason = 'not solved within budget'
        LOGGER.debug(
            "Attempt %d/%d: %d crosses, depth %d after %d nodes -> %s",
            attempt, profile.iterations, len(crosses), cand.depth, cand.nodes, reason or 'accepted',
        )
        if reason is not None:
            rejected[reason] += 1
            continue

        best = Puzzle(
            circles=tuple(board.flatten(cand.circles)),
            crosses=tuple(sorted(board.flatten(cand.crosses))),
            player_index=player_index,
            depth=cand.depth,
            moves=result.moves,
        )
        best_rank = rank
        accepted += 1
        if rank >= profile.max_depth or accepted >= profile.candidates:
            break

    if best is None:
        summary = ', '.join(f"{k}: {v}" for k, v in sorted(rejected.items()))
        raise GenerationExhausted(f"{profile.iterations} attempts rejected ({summary})")
    return best


def generate_puzzle(
    board: Board,
    difficulty: Union[str, Difficulty] = Difficulty.MEDIUM,
    rng: Optional[random.Random] = None,
    profile: Optional[DifficultyProfile] = None,
) -> Puzzle:
    """
    Builds a solvable puzzle on `board` by scrambling a solved position backwards.

    Returns an empty Puzzle when the board offers no triple or no attempt passes
    the depth, safety and solver gates; the caller then retries with a new board
    or uses fallback_layout.
    """
    difficulty = Difficulty.parse(difficulty)
    rng = rng or random.Random()
    profile = profile or PROFILES[difficulty]
    try:
        puzzle = _search(board, profile, rng)
    except GenerationExhausted as exc:
        LOGGER.info("No %s puzzle for this board: %s", difficulty.value, exc)
        return Puzzle()
    LOGGER.info(
        "Generated %s puzzle: %d crosses, reverse depth %d, forward moves %s",
        difficulty.value, len(puzzle.crosses), puzzle.depth,
        puzzle.moves if puzzle.moves is not None else 'beyond solver budget',
    )
    return puzzle


def _fallback_triples(board: Board) -> List[Triple]:
    """Triples in fallback preference: centre row columns 2-4, then nearest the centre row."""
    center = board.rows // 2
    # horizontal runs first, then closest to the centre row
    ordered = sorted(enumerate_triples(board), key=lambda t: (t[0][0] != t[1][0], abs(t[0][0] - center), t))
    w = board.row_widths[center]
    cols = sorted({min(2, w - 1), min(3, w - 1), min(4, w - 1)})
    if len(cols) == 3 and all(board.is_cell_present(center, c) for c in cols):
        preferred = ((center, cols[0]), (center, cols[1]), (center, cols[2]))
        ordered.remove(preferred)
        ordered.insert(0, preferred)
    return ordered


def _lift_middle(board: Board, triple: Triple) -> Optional[Coord]:
    """A present cell beside the triple's middle, perpendicular to the run."""
    horizontal = triple[0][0] == triple[1][0]
    sides = (Direction.UP, Direction.DOWN) if horizontal else (Direction.LEFT, Direction.RIGHT)
    for d in sides:
        cell = board.step(triple[1], d)
        if cell is not None:
            return cell
    return None


def fallback_layout(board: Board) -> Puzzle:
    """
    Fixed layout used when generation fails: a centre-row triple (columns 2-4
    when present) whose middle circle, the player, is lifted one cell off the
    run so a single push back completes it. Up to five crosses are spread
    through the remaining cells in row-major order.
    """
    triples = _fallback_triples(board)
    present = board.present_coords()
    reserved: List[Coord] = list(triples[0]) if triples else present[:3]
    circles = list(reserved)
    for triple in triples:
        lifted = _lift_middle(board, triple)
        if lifted is not None:
            reserved = list(triple) + [lifted]
            circles = [triple[0], lifted, triple[2]]
            break
    free = [rc for rc in present if rc not in reserved]
    stride = max(1, len(free) // FALLBACK_CROSSES)

    crosses: List[Coord] = []
    for rc in free[::stride]:
        if len(crosses) >= FALLBACK_CROSSES:
            break
        crosses.append(rc)
        if is_loss(crosses):
            crosses.pop()
    return Puzzle(
        circles=tuple(board.flatten(circles)),
        crosses=tuple(sorted(board.flatten(crosses))),
        player_index=1,
    )
