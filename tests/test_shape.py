import random
import unittest

from game import (
    Board,
    board_components,
    carve_holes,
    components,
    connect_components,
    generate_random,
)


class TestRandomBoards(unittest.TestCase):
    def test_given_many_seeds_when_generating_then_board_is_single_connected_region(self):
        for seed in range(40):
            board = generate_random(seed=seed)
            comps = board_components(board)
            self.assertEqual(len(comps), 1, f"seed {seed} fragmented")
            self.assertGreaterEqual(len(comps[0]), 6)
            self.assertEqual(len(comps[0]), len(board.present_coords()))

    def test_given_many_seeds_when_generating_then_dimensions_within_ranges(self):
        for seed in range(40):
            board = generate_random(seed=seed)
            self.assertGreaterEqual(board.rows, 3)
            self.assertLessEqual(board.rows, 8)
            min_cols = (20 + board.rows - 1) // board.rows
            self.assertGreaterEqual(board.cols, min_cols)
            self.assertLessEqual(board.cols, min_cols + 8)
            self.assertEqual(set(board.row_widths), {board.cols})
            self.assertGreaterEqual(board.total_cells, 20)

    def test_given_same_seed_when_generating_twice_then_identical_boards(self):
        self.assertEqual(generate_random(seed=11), generate_random(seed=11))
        self.assertEqual(Board.random(seed=11), generate_random(seed=11))


class TestCarving(unittest.TestCase):
    def test_given_islands_when_connecting_then_corridors_join_them_to_largest(self):
        mask = [
            [True, False, False, True],
            [False, False, False, False],
            [True, True, False, False],
        ]
        self.assertEqual(len(components(mask)), 3)
        carved = connect_components(mask)
        self.assertEqual(carved, 2)
        self.assertEqual(len(components(mask)), 1)
        # (0,0) joins (2,0) straight down; (0,3) goes down then left to (2,1)
        self.assertTrue(mask[1][0])
        self.assertTrue(mask[1][3])
        self.assertTrue(mask[2][2])

    def test_given_connected_mask_when_connecting_then_nothing_carved(self):
        mask = [[True, True], [True, False]]
        self.assertEqual(connect_components(mask), 0)
        self.assertEqual(mask, [[True, True], [True, False]])

    def test_given_target_when_carving_then_never_more_holes_than_target(self):
        rng = random.Random(3)
        mask = [[True] * 5 for _ in range(5)]
        carved = carve_holes(mask, 5, rng)
        remaining = sum(v for row in mask for v in row)
        self.assertLessEqual(carved, 5)
        self.assertEqual(remaining, 25 - carved)
        self.assertEqual(carve_holes(mask, 0, rng), 0)


if __name__ == '__main__':
    unittest.main(verbosity=2)
