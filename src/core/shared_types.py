"""
Type definitions used across layers
"""

from enum import StrEnum
from typing import Self


class Team(StrEnum):
    """OUR plays the white pieces and moves first, OPPONENT plays black."""

    OUR = "our"
    OPPONENT = "opponent"

    def opposite(self) -> Self:
        return Team.OPPONENT if self == Team.OUR else Team.OUR

    @property
    def pawn_direction(self) -> int:
        # OUR pawns walk up the board (increasing y), OPPONENT pawns walk down
        return 1 if self == Team.OUR else -1

    @property
    def pawn_start_rank(self) -> int:
        return 1 if self == Team.OUR else 6

    @property
    def promotion_rank(self) -> int:
        return 7 if self == Team.OUR else 0


class PieceKind(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class GamePhase(StrEnum):
    AWAITING_MOVE = "awaiting move"
    AWAITING_PROMOTION_CHOICE = "awaiting promotion choice"
    GAME_OVER = "game over"
