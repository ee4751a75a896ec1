from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Union

from . import config
from .board import Board
from .generator import Difficulty, DifficultyProfile, Puzzle, fallback_layout, generate_puzzle
from .logging_config import get_logger
from .shape import generate_random
from .state import GameState

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class Game:
    """A freshly dealt game: the board, the starting position and how it was obtained."""
    board: Board
    state: GameState
    puzzle: Puzzle
    difficulty: Difficulty
    fallback: bool


def new_game(
    difficulty: Union[str, Difficulty] = Difficulty.MEDIUM,
    seed: Optional[int] = None,
    board_attempts: Optional[int] = None,
    profile: Optional[DifficultyProfile] = None,
) -> Game:
    """
    Deals a random board and a generated puzzle on it.
    A board the generator cannot use is replaced by a fresh one; after
    `board_attempts` failures the last board gets the fixed fallback layout.
    """
    difficulty = Difficulty.parse(difficulty)
    attempts = max(1, board_attempts if board_attempts is not None else config.BOARD_ATTEMPTS)
    rng = random.Random(seed)
    board = generate_random(rng=rng)
    for attempt in range(1, attempts + 1):
        if attempt > 1:
            board = generate_random(rng=rng)
        puzzle = generate_puzzle(board, difficulty, rng=rng, profile=profile)
        if not puzzle.is_empty():
            return Game(board, GameState.from_puzzle(board, puzzle), puzzle, difficulty, fallback=False)
        LOGGER.debug("Board %d/%d produced no %s puzzle", attempt, attempts, difficulty.value)

    LOGGER.warning("Puzzle generation failed on %d boards; using the fallback layout", attempts)
    puzzle = fallback_layout(board)
    return Game(board, GameState.from_puzzle(board, puzzle), puzzle, difficulty, fallback=True)
