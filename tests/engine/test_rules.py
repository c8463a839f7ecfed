"""Unit tests for /src/engine/rules.py"""

from typing import Callable

import pytest

from src.core.shared_types import PieceKind, Team
from src.engine.board import Board
from src.engine.coordinate import Coordinate
from src.engine.pieces import Piece
from src.engine.rules import (
    DIAGONALS,
    STRAIGHTS,
    is_legal_move,
    is_square_attacked,
    occupancy,
    possible_bishop_moves,
    possible_king_moves,
    possible_knight_moves,
    possible_moves,
    possible_pawn_moves,
    possible_queen_moves,
    possible_rook_moves,
    raycasting_move,
    single_step_move,
)

BoardFn = Callable[..., Board]


def squares(*names: str) -> set[Coordinate]:
    return {Coordinate.from_algebraic(name) for name in names}


def piece_on(board: Board, name: str) -> Piece:
    piece = board.piece_at(Coordinate.from_algebraic(name))
    assert piece is not None
    return piece


# --- SLIDING PIECES ---
def test_raycasting_move_empty_board(board_with_pieces: BoardFn) -> None:
    """On an empty board, movements should only be restricted by board dimensions"""
    board = board_with_pieces({"a5": "R"})
    rook = piece_on(board, "a5")
    moves = raycasting_move(rook, occupancy(board.pieces), STRAIGHTS)
    assert len(moves) == 14
    assert all(move.x == 0 or move.y == 4 for move in moves)


def test_raycasting_move_w_enemy_blocker(board_with_pieces: BoardFn) -> None:
    """When running into an enemy piece, still include that square (capture), but stop there"""
    board = board_with_pieces({"d2": "R", "d5": "p"})
    rook = piece_on(board, "d2")
    moves = raycasting_move(rook, occupancy(board.pieces), [(0, 1), (0, -1)])
    assert set(moves) == squares("d1", "d3", "d4", "d5")


def test_raycasting_move_w_friendly_blocker(board_with_pieces: BoardFn) -> None:
    """When your own piece is blocking, do not include that square"""
    board = board_with_pieces({"d2": "b", "f4": "p"})
    bishop = piece_on(board, "d2")
    moves = raycasting_move(bishop, occupancy(board.pieces), DIAGONALS)
    assert set(moves) == squares("c1", "e1", "e3", "c3", "b4", "a5")


def test_raycasting_move_w_mixed_blockers(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"a1": "p", "a5": "P", "a7": "P"})
    pawn_as_slider = piece_on(board, "a5")
    moves = raycasting_move(pawn_as_slider, occupancy(board.pieces), [(0, 1), (0, -1)])
    assert set(moves) == squares("a6", "a4", "a3", "a2", "a1")


def test_single_step_move_filters_bounds_and_own_pieces(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"a1": "N", "b3": "P", "c2": "p"})
    knight = piece_on(board, "a1")
    moves = single_step_move(knight, occupancy(board.pieces), [(1, 2), (2, 1), (-1, 2), (42, 23)])
    assert set(moves) == squares("c2")


def test_bishop_moves(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"c1": "B", "d2": "P", "a3": "p"})
    bishop = piece_on(board, "c1")
    assert set(possible_bishop_moves(bishop, board.pieces)) == squares("b2", "a3")


def test_rook_moves_in_corner(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"a1": "R", "a2": "P", "d1": "n"})
    rook = piece_on(board, "a1")
    assert set(possible_rook_moves(rook, board.pieces)) == squares("b1", "c1", "d1")


def test_queen_combines_rook_and_bishop(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"d4": "Q"})
    queen = piece_on(board, "d4")
    moves = possible_queen_moves(queen, board.pieces)
    assert len(moves) == 27
    assert len(set(moves)) == 27


# --- KNIGHT AND KING ---
def test_knight_moves_in_starting_position() -> None:
    board = Board.initial()
    knight = piece_on(board, "b1")
    assert set(possible_knight_moves(knight, board.pieces)) == squares("a3", "c3")


def test_knight_in_center_has_eight_moves(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"d4": "n"})
    assert len(possible_knight_moves(piece_on(board, "d4"), board.pieces)) == 8


def test_king_moves(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"e1": "K", "e2": "P", "d2": "p"})
    king = piece_on(board, "e1")
    assert set(possible_king_moves(king, board.pieces)) == squares("d1", "f1", "d2", "f2")


# --- PAWN ---
def test_pawn_on_start_rank_can_advance_one_or_two() -> None:
    board = Board.initial()
    assert set(possible_pawn_moves(piece_on(board, "e2"), board.pieces)) == squares("e3", "e4")
    assert set(possible_pawn_moves(piece_on(board, "d7"), board.pieces)) == squares("d6", "d5")


def test_pawn_cannot_advance_onto_occupied_square(board_with_pieces: BoardFn) -> None:
    """Pawns do not capture forward: a piece right in front blocks both advances"""
    board = board_with_pieces({"e2": "P", "e3": "p"})
    assert possible_pawn_moves(piece_on(board, "e2"), board.pieces) == []


def test_pawn_two_step_needs_both_squares_empty(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"e2": "P", "e4": "n"})
    assert set(possible_pawn_moves(piece_on(board, "e2"), board.pieces)) == squares("e3")


def test_pawn_that_has_moved_cannot_advance_two(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"e2": "P"})
    pawn = piece_on(board, "e2")
    pawn.has_moved = True
    assert set(possible_pawn_moves(pawn, board.pieces)) == squares("e3")


def test_pawn_off_start_rank_advances_one(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"e3": "P"})
    assert set(possible_pawn_moves(piece_on(board, "e3"), board.pieces)) == squares("e4")


def test_pawn_captures_diagonally_only_opposing_pieces(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"d4": "P", "c5": "p", "e5": "N", "d5": "p"})
    assert set(possible_pawn_moves(piece_on(board, "d4"), board.pieces)) == squares("c5")


def test_opponent_pawn_moves_down_the_board(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"d5": "p", "c4": "P"})
    assert set(possible_pawn_moves(piece_on(board, "d5"), board.pieces)) == squares("d4", "c4")


@pytest.mark.parametrize("eligible, expected", [(True, {"e6", "d6"}), (False, {"e6"})])
def test_pawn_en_passant(board_with_pieces: BoardFn, eligible: bool, expected: set[str]) -> None:
    """An OUR pawn on e5 can take the OPPONENT pawn on d5 by moving to d6, only right after that pawn advanced two squares"""
    board = board_with_pieces({"e5": "P", "d5": "p"})
    piece_on(board, "d5").en_passant_eligible = eligible
    assert set(possible_pawn_moves(piece_on(board, "e5"), board.pieces)) == squares(*expected)


def test_no_en_passant_on_own_pawn(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"e5": "P", "d5": "P"})
    piece_on(board, "d5").en_passant_eligible = True
    assert set(possible_pawn_moves(piece_on(board, "e5"), board.pieces)) == squares("e6")


# --- SINGLE MOVE FAST PATH ---
MIDDLE_GAME = {
    "e1": "K",
    "d1": "Q",
    "a1": "R",
    "c4": "B",
    "f3": "N",
    "e4": "P",
    "d5": "P",
    "g2": "P",
    "e8": "k",
    "d8": "q",
    "h8": "r",
    "b4": "b",
    "c6": "n",
    "e5": "p",
    "c7": "p",
    "g7": "p",
}


def test_single_move_agrees_with_possible_moves_starting_position() -> None:
    board = Board.initial()
    for piece in board.pieces:
        candidates = set(possible_moves(piece, board.pieces))
        for x in range(8):
            for y in range(8):
                destination = Coordinate(x, y)
                assert is_legal_move(piece, destination, board.pieces) == (destination in candidates)


def test_single_move_agrees_with_possible_moves_middle_game(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces(MIDDLE_GAME)
    piece_on(board, "e5").en_passant_eligible = True
    for piece in board.pieces:
        candidates = set(possible_moves(piece, board.pieces))
        for x in range(-1, 9):
            for y in range(-1, 9):
                destination = Coordinate(x, y)
                assert is_legal_move(piece, destination, board.pieces) == (
                    destination in candidates
                ), f"{piece.kind} {piece.position.to_algebraic()} -> ({x}, {y})"


def test_moving_onto_itself_is_not_a_move(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"d4": "Q"})
    queen = piece_on(board, "d4")
    assert not is_legal_move(queen, queen.position, board.pieces)


# --- ATTACKS ---
def test_pawn_attacks_diagonally_not_forward(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"e4": "P"})
    assert is_square_attacked(Coordinate.from_algebraic("d5"), Team.OUR, board.pieces)
    assert is_square_attacked(Coordinate.from_algebraic("f5"), Team.OUR, board.pieces)
    assert not is_square_attacked(Coordinate.from_algebraic("e5"), Team.OUR, board.pieces)
    assert not is_square_attacked(Coordinate.from_algebraic("d3"), Team.OUR, board.pieces)


def test_opponent_pawn_attacks_down_the_board(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"e5": "p"})
    assert is_square_attacked(Coordinate.from_algebraic("d4"), Team.OPPONENT, board.pieces)
    assert not is_square_attacked(Coordinate.from_algebraic("d6"), Team.OPPONENT, board.pieces)


def test_sliding_attack_is_blocked(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"a1": "r", "a4": "P"})
    assert is_square_attacked(Coordinate.from_algebraic("a3"), Team.OPPONENT, board.pieces)
    assert is_square_attacked(Coordinate.from_algebraic("a4"), Team.OPPONENT, board.pieces)
    assert not is_square_attacked(Coordinate.from_algebraic("a5"), Team.OPPONENT, board.pieces)


@pytest.mark.parametrize(
    "attacker, square, attacked",
    [
        ("q", "h8", True),  # diagonal
        ("q", "d8", True),  # straight
        ("q", "e6", False),
        ("b", "h8", True),
        ("b", "d8", False),
        ("r", "d8", True),
        ("r", "h8", False),
        ("n", "e6", True),
        ("n", "d6", False),
        ("k", "e5", True),
        ("k", "f6", False),
    ],
)
def test_attack_per_piece_kind(
    board_with_pieces: BoardFn, attacker: str, square: str, attacked: bool
) -> None:
    board = board_with_pieces({"d4": attacker})
    assert (
        is_square_attacked(Coordinate.from_algebraic(square), Team.OPPONENT, board.pieces)
        == attacked
    )


def test_attack_ignores_other_team(board_with_pieces: BoardFn) -> None:
    board = board_with_pieces({"d4": "Q"})
    assert not is_square_attacked(Coordinate.from_algebraic("d8"), Team.OPPONENT, board.pieces)
    assert is_square_attacked(Coordinate.from_algebraic("d8"), Team.OUR, board.pieces)


def test_rules_do_not_know_whose_turn_it_is() -> None:
    """Both teams get candidate moves, regardless of the turn counter"""
    board = Board.initial()
    knight = Piece(Coordinate.from_algebraic("g8"), PieceKind.KNIGHT, Team.OPPONENT)
    assert set(possible_moves(knight, board.pieces)) == squares("f6", "h6")
