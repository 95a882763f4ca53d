"""Tests for MoveGenerator — default movement patterns."""

from riftchess.core.board import Board
from riftchess.core.enums import Color, FieldEffect, PieceType
from riftchess.core.move_generator import MoveGenerator
from riftchess.core.types import parse_square


def _squares(*names: str) -> set[tuple[int, int]]:
    return {parse_square(n) for n in names}


class TestPawn:
    def test_initial_double_push(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert gen.destinations(parse_square("e2")) == _squares("e3", "e4")

    def test_black_pawn_moves_down(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert gen.destinations(parse_square("d7")) == _squares("d6", "d5")

    def test_single_step_after_start_row(self) -> None:
        board = Board()
        board.spawn(parse_square("e3"), Color.WHITE, PieceType.PAWN)
        assert MoveGenerator(board).destinations(parse_square("e3")) == _squares("e4")

    def test_blocked(self) -> None:
        board = Board()
        board.spawn(parse_square("e2"), Color.WHITE, PieceType.PAWN)
        board.spawn(parse_square("e3"), Color.BLACK, PieceType.KNIGHT)
        assert MoveGenerator(board).destinations(parse_square("e2")) == set()

    def test_double_push_needs_both_squares(self) -> None:
        board = Board()
        board.spawn(parse_square("e2"), Color.WHITE, PieceType.PAWN)
        board.spawn(parse_square("e4"), Color.BLACK, PieceType.KNIGHT)
        assert MoveGenerator(board).destinations(parse_square("e2")) == _squares("e3")

    def test_diagonal_captures(self) -> None:
        board = Board()
        board.spawn(parse_square("e4"), Color.WHITE, PieceType.PAWN)
        board.spawn(parse_square("d5"), Color.BLACK, PieceType.PAWN)
        board.spawn(parse_square("f5"), Color.WHITE, PieceType.PAWN)
        assert MoveGenerator(board).destinations(parse_square("e4")) == _squares("e5", "d5")

    def test_fairy_fountain_leaps(self) -> None:
        board = Board()
        pawn = board.spawn(parse_square("e4"), Color.WHITE, PieceType.PAWN)
        pawn.fairy_fountain = True
        board.spawn(parse_square("e5"), Color.BLACK, PieceType.ROOK)
        board.spawn(parse_square("d6"), Color.WHITE, PieceType.ROOK)
        assert MoveGenerator(board).destinations(parse_square("e4")) == _squares("e6", "f6")

    def test_blank_side_captures(self) -> None:
        board = Board()
        board.spawn(parse_square("e4"), Color.WHITE, PieceType.PAWN)
        board.spawn(parse_square("d4"), Color.BLACK, PieceType.PAWN)
        board.spawn(parse_square("f4"), Color.WHITE, PieceType.PAWN)
        gen = MoveGenerator(board, FieldEffect.BLANK)
        assert gen.destinations(parse_square("e4")) == _squares("e5", "d4")

    def test_no_side_captures_without_blank(self) -> None:
        board = Board()
        board.spawn(parse_square("e4"), Color.WHITE, PieceType.PAWN)
        board.spawn(parse_square("d4"), Color.BLACK, PieceType.PAWN)
        gen = MoveGenerator(board, FieldEffect.JACK_FROST_MISCHIEF)
        assert gen.destinations(parse_square("e4")) == _squares("e5")


class TestPieces:
    def test_knight_from_start(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert gen.destinations(parse_square("b1")) == _squares("a3", "c3")

    def test_rook_open_board(self) -> None:
        board = Board()
        board.spawn(parse_square("d4"), Color.WHITE, PieceType.ROOK)
        assert len(MoveGenerator(board).destinations(parse_square("d4"))) == 14

    def test_rook_blocked_by_own_and_enemy(self) -> None:
        board = Board()
        board.spawn(parse_square("a1"), Color.WHITE, PieceType.ROOK)
        board.spawn(parse_square("a3"), Color.WHITE, PieceType.PAWN)
        board.spawn(parse_square("c1"), Color.BLACK, PieceType.PAWN)
        moves = MoveGenerator(board).destinations(parse_square("a1"))
        assert moves == _squares("a2", "b1", "c1")

    def test_bishop_diagonals(self) -> None:
        board = Board()
        board.spawn(parse_square("a1"), Color.WHITE, PieceType.BISHOP)
        moves = MoveGenerator(board).destinations(parse_square("a1"))
        assert moves == _squares("b2", "c3", "d4", "e5", "f6", "g7", "h8")

    def test_queen_combines(self) -> None:
        board = Board()
        board.spawn(parse_square("d4"), Color.WHITE, PieceType.QUEEN)
        assert len(MoveGenerator(board).destinations(parse_square("d4"))) == 27

    def test_king_adjacent(self) -> None:
        board = Board()
        board.spawn(parse_square("a1"), Color.WHITE, PieceType.KING)
        assert MoveGenerator(board).destinations(parse_square("a1")) == _squares(
            "a2", "b1", "b2"
        )

    def test_king_may_walk_into_attack(self) -> None:
        board = Board()
        board.spawn(parse_square("e1"), Color.WHITE, PieceType.KING)
        board.spawn(parse_square("d8"), Color.BLACK, PieceType.ROOK)
        assert parse_square("d1") in MoveGenerator(board).destinations(parse_square("e1"))

    def test_empty_square(self) -> None:
        assert MoveGenerator(Board()).destinations((4, 4)) == set()


class TestAllDestinations:
    def test_opening_mobility(self) -> None:
        moves = MoveGenerator(Board.initial()).all_destinations(Color.WHITE)
        assert sum(len(v) for v in moves.values()) == 20
        assert parse_square("a1") not in moves
