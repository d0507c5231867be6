import unittest

import numpy as np

from block_stack_3d.game import BlockStackGame, FallTimer, GameConfig, Piece, TetrominoType, fall_interval_ms


def playing_game():
    game = BlockStackGame(GameConfig(random_seed=1))
    game.next_piece = Piece(TetrominoType.O, (4, 17, 4))
    game.start_game()
    return game


class TestFallInterval(unittest.TestCase):
    def test_given_levels_when_computing_interval_then_geometric_with_floor(self):
        self.assertAlmostEqual(fall_interval_ms(1), 3000.0)
        self.assertAlmostEqual(fall_interval_ms(2), 2550.0)
        self.assertAlmostEqual(fall_interval_ms(3), 2167.5)
        self.assertEqual(fall_interval_ms(100), 100.0)


class TestFallTimer(unittest.TestCase):
    def test_given_playing_when_interval_elapses_then_piece_drops_once(self):
        game = playing_game()
        timer = FallTimer(game)
        self.assertFalse(timer.update(0))
        self.assertTrue(timer.running)
        self.assertFalse(timer.update(2999))
        self.assertTrue(timer.update(3000))
        np.testing.assert_array_equal(game.current_piece.position, [4, 16, 4])
        self.assertFalse(timer.update(3001))
        self.assertTrue(timer.update(6000))
        np.testing.assert_array_equal(game.current_piece.position, [4, 15, 4])

    def test_given_start_screen_when_updating_then_timer_idle(self):
        game = BlockStackGame(GameConfig(random_seed=1))
        timer = FallTimer(game)
        self.assertFalse(timer.update(0))
        self.assertFalse(timer.running)
        self.assertFalse(timer.update(10_000))

    def test_given_pause_when_updating_then_stopped_and_rearmed_on_resume(self):
        game = playing_game()
        timer = FallTimer(game)
        timer.update(0)
        game.pause_game()
        self.assertFalse(timer.update(5000))
        self.assertFalse(timer.running)
        game.resume_game()
        self.assertFalse(timer.update(6000))
        self.assertFalse(timer.update(8999))
        self.assertTrue(timer.update(9000))

    def test_given_level_change_when_updating_then_restarted_with_new_interval(self):
        game = playing_game()
        timer = FallTimer(game)
        timer.update(0)
        game.set_level(2)
        self.assertFalse(timer.update(1000))
        self.assertFalse(timer.update(3549))
        self.assertTrue(timer.update(3550))

    def test_given_state_changed_without_update_when_deadline_passes_then_no_drop(self):
        game = playing_game()
        timer = FallTimer(game)
        timer.update(0)
        game.end_game()
        self.assertFalse(timer.update(3000))
        self.assertEqual(game.grid.count_filled(), 0)


if __name__ == "__main__":
    unittest.main()
