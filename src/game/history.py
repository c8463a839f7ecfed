"""
Records kept next to the board: the list of moves played and the pieces each team lost.

Both are append-only during a game and only emptied on restart.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from src.core.shared_types import PieceKind, Team
from src.engine.coordinate import Coordinate
from src.engine.pieces import PIECE_SYMBOLS


@dataclass(frozen=True)
class MoveRecord:
    """A move that was accepted. Squares are stored in algebraic notation ('e2')."""

    piece: PieceKind
    team: Team
    from_square: str
    to_square: str
    captured: Optional[PieceKind] = None

    @classmethod
    def create(
        cls,
        piece: PieceKind,
        team: Team,
        from_square: Coordinate,
        to_square: Coordinate,
        captured: Optional[PieceKind] = None,
    ) -> "MoveRecord":
        return cls(piece, team, from_square.to_algebraic(), to_square.to_algebraic(), captured)

    def to_notation(self) -> str:
        """ex) 'e2-e4' for a pawn push, 'Nf3-e5x' for a knight taking on e5"""
        capture_mark = "x" if self.captured else ""
        return f"{PIECE_SYMBOLS[self.piece]}{self.from_square}-{self.to_square}{capture_mark}"


@dataclass
class MoveHistory:
    _records: list[MoveRecord] = field(default_factory=list)

    def append(self, record: MoveRecord) -> None:
        self._records.append(record)

    def clear(self) -> None:
        self._records.clear()

    def __iter__(self) -> Iterator[MoveRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> MoveRecord:
        return self._records[index]

    @property
    def last(self) -> Optional[MoveRecord]:
        return self._records[-1] if self._records else None

    def numbered(self) -> list[tuple[int, MoveRecord, Optional[MoveRecord]]]:
        """Group into full moves as a move list shows them: (1, OUR move, OPPONENT reply), (2, ...)"""
        return [
            (
                index // 2 + 1,
                self._records[index],
                self._records[index + 1] if index + 1 < len(self._records) else None,
            )
            for index in range(0, len(self._records), 2)
        ]


@dataclass
class CapturedPieces:
    """Captured pieces, listed under the team that owned them"""

    lost: dict[Team, list[PieceKind]] = field(
        default_factory=lambda: {team: [] for team in Team}
    )

    def record(self, owner: Team, kind: PieceKind) -> None:
        self.lost[owner].append(kind)

    def of(self, owner: Team) -> list[PieceKind]:
        return list(self.lost[owner])

    def clear(self) -> None:
        for kinds in self.lost.values():
            kinds.clear()
