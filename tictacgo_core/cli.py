from __future__ import annotations

import argparse
from typing import Callable, List, Optional, Tuple

from . import config
from .board import Direction
from .deal import Game, new_game
from .generator import Difficulty
from .logging_config import configure_logging
from .state import GameState

QUIT_WORDS = ('q', 'quit', 'exit')
HELP = 'Move with w/a/s/d (several per line) or up/down/left/right; q quits.'


def parse_commands(text: str) -> Tuple[List[Direction], bool]:
    """Splits an input line into moves. Returns (directions, quit_requested)."""
    directions: List[Direction] = []
    for token in text.strip().lower().split():
        if token in QUIT_WORDS:
            return directions, True
        if token in ('up', 'down', 'left', 'right'):
            directions.append(Direction.parse(token))
            continue
        for ch in token:
            if ch == 'q':
                return directions, True
            directions.append(Direction.parse(ch))
    return directions, False


def render(state: GameState, difficulty: Difficulty) -> str:
    lines = [state.pretty(), '', f"Difficulty: {difficulty.label}"]
    if state.won:
        lines.append('YOU WON!')
    elif state.lost:
        lines.append('YOU LOST! three crosses aligned')
    return "\n".join(lines)


def select_difficulty(
    input_fn: Callable[[str], str] = input,
    default: Optional[str] = None,
) -> Optional[Difficulty]:
    """Asks for a difficulty until a valid one is given; None when the player quits.

    An empty answer picks `default` (TICTACGO_DIFFICULTY unless given).
    """
    preset = Difficulty.parse(default or config.DEFAULT_DIFFICULTY)
    prompt = f"Choose difficulty [e]asy, [m]edium, [h]ard (Enter for {preset.value}, q to quit): "
    while True:
        try:
            text = input_fn(prompt)
        except EOFError:
            return None
        if text.strip().lower() in QUIT_WORDS:
            return None
        if not text.strip():
            return preset
        try:
            return Difficulty.parse(text)
        except ValueError as e:
            print(e)


def play(
    game: Game,
    input_fn: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> str:
    """Runs the line-based game loop. Returns 'won', 'lost' or 'quit'."""
    state = game.state
    output(render(state, game.difficulty))
    output(HELP)
    while not state.finished:
        try:
            text = input_fn('> ')
        except EOFError:
            return 'quit'
        try:
            directions, quit_requested = parse_commands(text)
        except ValueError as e:
            output(f"{e}. {HELP}")
            continue
        for d in directions:
            state = state.move(d)
            if state.finished:
                break
        if quit_requested and not state.finished:
            return 'quit'
        output(render(state, game.difficulty))
    return 'won' if state.won else 'lost'


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Tic-tac-go: push three circles into line without lining up the crosses')
    parser.add_argument('-d', '--difficulty', choices=[d.value for d in Difficulty], default=None,
                        help='Puzzle difficulty (prompted when omitted; Enter picks TICTACGO_DIFFICULTY)')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the board and puzzle')
    parser.add_argument('--show', action='store_true', help='Print the generated puzzle and exit')
    parser.add_argument('--verbose', action='store_true', help='Log generation details')
    args = parser.parse_args(argv)

    configure_logging('DEBUG' if args.verbose else None)

    if args.difficulty is not None:
        difficulty: Optional[Difficulty] = Difficulty.parse(args.difficulty)
    else:
        difficulty = select_difficulty()
    if difficulty is None:
        return

    game = new_game(difficulty, seed=args.seed)
    if game.fallback:
        print('Could not generate a puzzle for this board; using a fixed layout.')
    if args.show:
        print(render(game.state, difficulty))
        return

    result = play(game)
    if result == 'quit':
        print('Bye.')
