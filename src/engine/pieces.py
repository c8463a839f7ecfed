"""Defines the chess pieces and the cached set of squares each of them may move to"""

from dataclasses import dataclass, field, replace
from typing import Self

from src.core.shared_types import PieceKind, Team
from src.engine.coordinate import Coordinate

FEN_TO_PIECE: dict[str, PieceKind] = {
    "p": PieceKind.PAWN,
    "n": PieceKind.KNIGHT,
    "b": PieceKind.BISHOP,
    "r": PieceKind.ROOK,
    "q": PieceKind.QUEEN,
    "k": PieceKind.KING,
}

PIECE_TO_FEN: dict[PieceKind, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Used by the move list. Pawn moves are written without a letter.
PIECE_SYMBOLS: dict[PieceKind, str] = {
    PieceKind.PAWN: "",
    PieceKind.KNIGHT: "N",
    PieceKind.BISHOP: "B",
    PieceKind.ROOK: "R",
    PieceKind.QUEEN: "Q",
    PieceKind.KING: "K",
}

PROMOTION_OPTIONS: tuple[PieceKind, ...] = (
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.ROOK,
    PieceKind.QUEEN,
)


# --- LEGAL MOVES: EITHER NOT YET COMPUTED, OR COMPUTED BY THE BOARD ---
@dataclass(frozen=True)
class NotComputed:
    """A piece that was just created (or copied out of a board) does not know where it can go."""


@dataclass(frozen=True)
class Computed:
    moves: tuple[Coordinate, ...]

    def __contains__(self, destination: object) -> bool:
        return destination in self.moves

    def __len__(self) -> int:
        return len(self.moves)


LegalMoves = NotComputed | Computed


@dataclass
class Piece:
    position: Coordinate
    kind: PieceKind
    team: Team
    has_moved: bool = False
    # Only ever True for a pawn that just advanced two squares
    en_passant_eligible: bool = False
    legal_moves: LegalMoves = field(default_factory=NotComputed)

    @classmethod
    def from_fen(cls, character: str, position: Coordinate) -> Self:
        # upper case: OUR (white) pieces, lower case: OPPONENT (black) pieces
        team = Team.OUR if character.isupper() else Team.OPPONENT
        kind = FEN_TO_PIECE[character.lower()]
        return cls(position, kind, team)

    def to_fen(self) -> str:
        character = PIECE_TO_FEN[self.kind]
        return character.upper() if self.team == Team.OUR else character

    @property
    def is_pawn(self) -> bool:
        return self.kind == PieceKind.PAWN

    @property
    def is_king(self) -> bool:
        return self.kind == PieceKind.KING

    @property
    def has_computed_moves(self) -> bool:
        return isinstance(self.legal_moves, Computed)

    def moves(self) -> tuple[Coordinate, ...]:
        """The computed legal moves. Asking before the Board computed them is a programming error."""
        assert isinstance(self.legal_moves, Computed), (
            f"Legal moves of {self.kind} on {self.position.to_algebraic()} were not computed"
        )
        return self.legal_moves.moves

    @property
    def awaits_promotion(self) -> bool:
        """A pawn standing on the far rank still has to be replaced by the piece its player chooses"""
        return self.is_pawn and self.position.y == self.team.promotion_rank

    def can_move_to(self, destination: Coordinate) -> bool:
        return destination in self.moves()

    def same_position(self, other: "Piece") -> bool:
        return self.position == other.position

    def clone(self) -> Self:
        """Coordinates are frozen and the legal move tuple is immutable, so a shallow replace is a full copy"""
        return replace(self, position=self.position.clone())
