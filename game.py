from __future__ import annotations

# Facade module that re-exports the tic-tac-go core.
# The Flask app and the tests import from here; single-responsibility modules
# live under tictacgo_core/*.

from tictacgo_core.board import Board, Coord, Direction
from tictacgo_core.errors import GenerationExhausted, InvalidIndex
from tictacgo_core.shape import (
    board_components,
    carve_holes,
    components,
    connect_components,
    generate_random,
)
from tictacgo_core.moves import (
    apply_forward,
    apply_reverse,
    legal_directions,
    occupied,
)
from tictacgo_core.rules import (
    has_aligned_triple,
    has_deadlock,
    is_loss,
    is_win,
    outcome,
)
from tictacgo_core.hashkey import SearchKey, state_key
from tictacgo_core.solver import SolveResult, min_moves_to_win, solve
from tictacgo_core.generator import (
    PROFILES,
    Candidate,
    Difficulty,
    DifficultyProfile,
    Puzzle,
    enumerate_triples,
    fallback_layout,
    generate_puzzle,
    has_safe_move,
    place_crosses,
    reverse_search,
)
from tictacgo_core.state import GameState
from tictacgo_core.deal import Game, new_game


def main() -> None:
    # CLI driver delegated to tictacgo_core.cli
    from tictacgo_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
