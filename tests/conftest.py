"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/helpers required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.engine.board import Board
from src.engine.coordinate import BOARD_DIMENSIONS, Coordinate

PlacementFn = Callable[[dict[str, str]], str]
BoardFn = Callable[..., Board]


def placement_from_squares(pieces: dict[str, str]) -> str:
    """
    Build the FEN piece placement for a board with only the given pieces.

    ex) {"e1": "K", "e8": "k", "a7": "P"}: upper case for OUR pieces, lower case for OPPONENT pieces
    """
    rows: list[str] = []
    for y in range(BOARD_DIMENSIONS[1] - 1, -1, -1):
        row = ""
        empty_count = 0
        for x in range(BOARD_DIMENSIONS[0]):
            square = Coordinate(x, y).to_algebraic()
            if square in pieces:
                if empty_count:
                    row += str(empty_count)
                    empty_count = 0
                row += pieces[square]
            else:
                empty_count += 1
        if empty_count:
            row += str(empty_count)
        rows.append(row)
    return "/".join(rows)


@pytest.fixture
def board_with_pieces() -> BoardFn:
    """Call the inner function with the pieces to place (and optionally the number of turns already played)"""

    def _create_board(
        pieces: dict[str, str], total_turns: int = 0, king_safety: bool = True
    ) -> Board:
        return Board.from_fen(
            placement_from_squares(pieces),
            total_turns=total_turns,
            king_safety=king_safety,
        )

    return _create_board
