import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

from game import Board, Difficulty, Direction, Game, GameState, Puzzle
from tictacgo_core import cli


def _scripted(lines):
    it = iter(lines)

    def _input(prompt=''):
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    return _input


def _game(board, circles, crosses, player_index, difficulty=Difficulty.EASY):
    state = GameState(board, tuple(circles), tuple(crosses), player_index)
    puzzle = Puzzle(
        circles=tuple(board.flatten(circles)),
        crosses=tuple(sorted(board.flatten(crosses))),
        player_index=player_index,
    )
    return Game(board, state, puzzle, difficulty, fallback=False)


class TestCommandParsing(unittest.TestCase):
    def test_given_wasd_keys_when_parsing_then_directions_in_order(self):
        self.assertEqual(
            cli.parse_commands('wasd'),
            ([Direction.UP, Direction.LEFT, Direction.DOWN, Direction.RIGHT], False),
        )

    def test_given_words_and_quit_when_parsing_then_moves_before_quit_kept(self):
        self.assertEqual(cli.parse_commands('up LEFT q'), ([Direction.UP, Direction.LEFT], True))
        self.assertEqual(cli.parse_commands('dq'), ([Direction.RIGHT], True))
        self.assertEqual(cli.parse_commands('   '), ([], False))

    def test_given_unknown_key_when_parsing_then_value_error(self):
        with self.assertRaises(ValueError):
            cli.parse_commands('wxd')


class TestPlayLoop(unittest.TestCase):
    def setUp(self):
        self.game = _game(Board.full(3, 5), [(1, 0), (1, 1), (0, 2)], [], 2)

    def test_given_winning_key_when_playing_then_won(self):
        out = []
        self.assertEqual(cli.play(self.game, _scripted(['s']), out.append), 'won')
        self.assertIn('YOU WON!', out[-1])
        self.assertIn('Difficulty: Easy', out[0])

    def test_given_quit_or_eof_when_playing_then_quit(self):
        self.assertEqual(cli.play(self.game, _scripted(['q']), lambda s: None), 'quit')
        self.assertEqual(cli.play(self.game, _scripted([]), lambda s: None), 'quit')

    def test_given_invalid_line_when_playing_then_help_shown_and_loop_continues(self):
        out = []
        self.assertEqual(cli.play(self.game, _scripted(['x', 's']), out.append), 'won')
        self.assertTrue(any(line.startswith('unknown direction') and cli.HELP in line for line in out))

    def test_given_move_then_quit_on_one_line_when_playing_then_move_applied_first(self):
        # 's' wins before the quit is read
        self.assertEqual(cli.play(self.game, _scripted(['sq']), lambda s: None), 'won')

    def test_given_cross_pushed_into_line_when_playing_then_lost(self):
        game = _game(Board.full(4, 5), [(0, 0), (0, 4), (1, 2)], [(2, 2), (3, 0), (3, 1)], 2)
        out = []
        self.assertEqual(cli.play(game, _scripted(['s']), out.append), 'lost')
        self.assertIn('YOU LOST!', out[-1])

    def test_given_state_when_rendering_then_board_and_difficulty(self):
        text = cli.render(self.game.state, Difficulty.HARD)
        lines = text.splitlines()
        self.assertEqual(lines[0], '. . @ . .')
        self.assertEqual(lines[1], 'o o . . .')
        self.assertEqual(lines[-1], 'Difficulty: Hard')


class TestDifficultyPrompt(unittest.TestCase):
    def test_given_bad_then_good_answer_when_prompting_then_tier_returned(self):
        with redirect_stdout(io.StringIO()) as buf:
            self.assertIs(cli.select_difficulty(_scripted(['impossible', 'h'])), Difficulty.HARD)
        self.assertIn('unknown difficulty', buf.getvalue())

    def test_given_quit_or_eof_when_prompting_then_none(self):
        self.assertIsNone(cli.select_difficulty(_scripted(['q'])))
        self.assertIsNone(cli.select_difficulty(_scripted([])))

    def test_given_empty_answer_when_default_given_then_default_tier(self):
        self.assertIs(cli.select_difficulty(_scripted(['']), default='hard'), Difficulty.HARD)

    def test_given_empty_answer_without_default_when_prompting_then_configured_tier(self):
        with mock.patch('tictacgo_core.config.DEFAULT_DIFFICULTY', 'easy'):
            self.assertIs(cli.select_difficulty(_scripted(['  '])), Difficulty.EASY)


class TestMain(unittest.TestCase):
    def test_given_show_flag_when_running_then_puzzle_printed_without_prompt(self):
        game = _game(Board.full(3, 5), [(1, 0), (1, 1), (0, 2)], [(2, 4)], 2)
        with mock.patch('tictacgo_core.cli.new_game', return_value=game) as dealt:
            with redirect_stdout(io.StringIO()) as buf:
                cli.main(['-d', 'easy', '--seed', '3', '--show'])
        dealt.assert_called_once_with(Difficulty.EASY, seed=3)
        out = buf.getvalue()
        self.assertIn('. . @ . .', out)
        self.assertIn('Difficulty: Easy', out)

    def test_given_fallback_game_when_running_then_notice_printed(self):
        game = _game(Board.full(3, 5), [(1, 0), (1, 1), (0, 2)], [], 2)
        game = Game(game.board, game.state, game.puzzle, Difficulty.MEDIUM, fallback=True)
        with mock.patch('tictacgo_core.cli.new_game', return_value=game):
            with redirect_stdout(io.StringIO()) as buf:
                cli.main(['-d', 'medium', '--show'])
        self.assertIn('fixed layout', buf.getvalue())

    def test_given_unknown_difficulty_flag_when_running_then_argparse_exits(self):
        with mock.patch('sys.stderr', new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                cli.main(['-d', 'brutal'])


if __name__ == '__main__':
    unittest.main(verbosity=2)
