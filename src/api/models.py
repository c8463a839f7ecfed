"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import GamePhase, PieceKind, Team
from src.engine.fen import is_valid_square

SquareName = str


# --- REQUEST MODELS ---
class MoveRequest(BaseModel):
    from_square: SquareName
    to_square: SquareName

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_valid_square(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


class LegalMovesRequest(BaseModel):
    team: Team


class PromotionRequest(BaseModel):
    piece: PieceKind


class TimeoutRequest(BaseModel):
    team: Team


# --- RESPONSE MODELS ---
class PieceView(BaseModel):
    square: SquareName
    kind: PieceKind
    team: Team
    has_moved: bool
    legal_moves: list[SquareName]


class MoveRecordView(BaseModel):
    piece: PieceKind
    team: Team
    from_square: SquareName
    to_square: SquareName
    captured: Optional[PieceKind] = None
    notation: str


class ClockView(BaseModel):
    our_remaining: float
    opponent_remaining: float


class GameStateResponse(BaseModel):
    pieces: list[PieceView]
    position: str  # piece placement, FEN style
    total_turns: int
    team_to_move: Team
    phase: GamePhase
    winning_team: Optional[Team] = None
    is_checkmate: bool = False
    move_history: list[MoveRecordView]
    captured: dict[Team, list[PieceKind]]
    clock: ClockView


class LegalMovesResponse(BaseModel):
    team: Team
    legal_moves: list[str]  # ex) "e2e4"


class MoveResponse(BaseModel):
    accepted: bool
    state: GameStateResponse
