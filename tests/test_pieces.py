import unittest

import numpy as np

from block_stack_3d.game import Axis, InvalidPieceType, Piece, TetrominoType
from block_stack_3d.game.pieces import BASE_SHAPES, COLORS, axis_rotation, color_to_rgb


def block_set(blocks):
    return {tuple(int(v) for v in b) for b in blocks}


class TestCatalog(unittest.TestCase):
    def test_given_catalog_when_listing_types_then_seven_shapes_of_four_blocks(self):
        self.assertEqual(len(TetrominoType), 7)
        for kind in TetrominoType:
            shape = BASE_SHAPES[kind]
            self.assertEqual(shape.shape, (4, 3))
            self.assertEqual(len(block_set(shape)), 4)
            self.assertIn(kind, COLORS)

    def test_given_packed_color_when_unpacking_then_rgb_components(self):
        self.assertEqual(color_to_rgb(COLORS[TetrominoType.L]), (255, 165, 0))


class TestPieceConstruction(unittest.TestCase):
    def test_given_unknown_type_when_constructing_then_invalid_piece_type(self):
        with self.assertRaises(InvalidPieceType):
            Piece("Q")
        with self.assertRaises(InvalidPieceType):
            Piece(42)
        with self.assertRaises(ValueError):
            Piece(None)

    def test_given_name_or_value_when_constructing_then_same_kind(self):
        self.assertEqual(Piece("t").kind, TetrominoType.T)
        self.assertEqual(Piece(int(TetrominoType.J)).kind, TetrominoType.J)

    def test_given_new_piece_when_inspecting_then_identity_orientation_and_catalog_color(self):
        piece = Piece(TetrominoType.S, (4, 17, 4))
        np.testing.assert_array_equal(piece.orientation, np.eye(3))
        np.testing.assert_array_equal(piece.blocks, BASE_SHAPES[TetrominoType.S])
        self.assertEqual(piece.color, COLORS[TetrominoType.S])

    def test_given_piece_when_mutating_blocks_then_catalog_untouched(self):
        piece = Piece(TetrominoType.O)
        piece.blocks[0, 0] = 99
        self.assertEqual(BASE_SHAPES[TetrominoType.O][0, 0], 0)


class TestPieceRotation(unittest.TestCase):
    def test_given_t_piece_when_rotating_about_z_then_top_block_points_left(self):
        piece = Piece(TetrominoType.T)
        piece.rotate(Axis.Z)
        self.assertEqual(block_set(piece.blocks), {(0, 0, 0), (0, -1, 0), (0, 1, 0), (-1, 0, 0)})

    def test_given_blocks_when_rotated_then_integers_without_drift(self):
        piece = Piece(TetrominoType.L)
        for axis in (Axis.X, Axis.Y, Axis.Z, Axis.Y, Axis.X):
            piece.rotate(axis)
            self.assertEqual(piece.blocks.dtype.kind, "i")
            expected = np.rint(BASE_SHAPES[TetrominoType.L] @ piece.orientation.T)
            np.testing.assert_array_equal(piece.blocks, expected)

    def test_given_any_axis_when_rotating_four_times_then_original_blocks_and_identity(self):
        for kind in TetrominoType:
            for axis in Axis:
                piece = Piece(kind)
                for _ in range(4):
                    piece.rotate(axis)
                self.assertEqual(block_set(piece.blocks), block_set(BASE_SHAPES[kind]))
                np.testing.assert_array_equal(piece.blocks, BASE_SHAPES[kind])
                self.assertTrue(np.allclose(piece.orientation, np.eye(3)))

    def test_given_rotation_when_reversed_then_blocks_restored(self):
        piece = Piece(TetrominoType.J)
        piece.rotate(Axis.X, 1)
        self.assertNotEqual(block_set(piece.blocks), block_set(BASE_SHAPES[TetrominoType.J]))
        piece.rotate(Axis.X, -1)
        np.testing.assert_array_equal(piece.blocks, BASE_SHAPES[TetrominoType.J])

    def test_given_rotations_about_different_axes_when_order_swapped_then_results_differ(self):
        a = Piece(TetrominoType.L)
        a.rotate(Axis.X)
        a.rotate(Axis.Y)
        b = Piece(TetrominoType.L)
        b.rotate(Axis.Y)
        b.rotate(Axis.X)
        self.assertNotEqual(block_set(a.blocks), block_set(b.blocks))

    def test_given_world_space_rotation_when_composed_then_premultiplied(self):
        piece = Piece(TetrominoType.T)
        piece.rotate(Axis.X)
        piece.rotate(Axis.Y)
        expected = axis_rotation(Axis.Y) @ axis_rotation(Axis.X)
        self.assertTrue(np.allclose(piece.orientation, expected))

    def test_given_bad_direction_when_rotating_then_value_error(self):
        with self.assertRaises(ValueError):
            Piece(TetrominoType.T).rotate(Axis.Y, 2)


class TestPieceMoveAndClone(unittest.TestCase):
    def test_given_offset_when_moving_then_world_blocks_translate(self):
        piece = Piece(TetrominoType.O, (4, 17, 4))
        piece.move((0, -1, 2))
        self.assertEqual(block_set(piece.world_blocks()), {(4, 16, 6), (5, 16, 6), (4, 17, 6), (5, 17, 6)})

    def test_given_fractional_pivot_when_reading_world_blocks_then_rounded(self):
        piece = Piece(TetrominoType.O, (4.0000001, 16.9999999, 4))
        self.assertEqual(block_set(piece.world_blocks()), {(4, 17, 4), (5, 17, 4), (4, 18, 4), (5, 18, 4)})

    def test_given_half_integer_pivot_when_reading_world_blocks_then_piece_stays_rigid(self):
        piece = Piece(TetrominoType.O, (2.5, 0, 0))
        blocks = piece.world_blocks()
        self.assertEqual(len(block_set(blocks)), 4)
        self.assertEqual(sorted(set(blocks[:, 0].tolist())), [3, 4])
        np.testing.assert_array_equal(blocks - blocks[0], piece.blocks - piece.blocks[0])
        piece.move((1, 0, 0))
        moved = piece.world_blocks()
        self.assertEqual(sorted(set(moved[:, 0].tolist())), [4, 5])
        np.testing.assert_array_equal(moved - blocks, np.tile([1, 0, 0], (4, 1)))

    def test_given_negative_half_pivot_when_reading_world_blocks_then_rounded_half_up(self):
        piece = Piece(TetrominoType.I, (-0.5, 1.5, 0))
        self.assertEqual(block_set(piece.world_blocks()), {(0, 4, 0), (0, 3, 0), (0, 2, 0), (0, 1, 0)})

    def test_given_clone_when_mutated_then_source_unchanged(self):
        piece = Piece(TetrominoType.Z, (3, 10, 3))
        piece.rotate(Axis.Y)
        twin = piece.clone()
        twin.move((1, 0, 0))
        twin.rotate(Axis.X)
        np.testing.assert_array_equal(piece.position, [3, 10, 3])
        self.assertTrue(np.allclose(piece.orientation, axis_rotation(Axis.Y)))
        self.assertIsNot(twin.blocks, piece.blocks)

    def test_given_clone_when_blocks_diverge_from_base_then_blocks_copied_verbatim(self):
        piece = Piece(TetrominoType.I)
        piece.blocks = piece.blocks + np.array([0, 0, 1])
        twin = piece.clone()
        np.testing.assert_array_equal(twin.blocks, piece.blocks)
        np.testing.assert_array_equal(twin.orientation, piece.orientation)
        self.assertEqual(twin.kind, piece.kind)


if __name__ == "__main__":
    unittest.main()
