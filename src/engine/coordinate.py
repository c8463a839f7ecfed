"""
A coordinate on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Chess board is always 8x8. Coordinates are zero-based: (0, 0) is a1, (7, 7) is h8
BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = "abcdefgh"


@dataclass(frozen=True)
class Coordinate:
    x: int
    y: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Coordinate:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        x = FILE_NAMES.index(sq[0])
        y = int(sq[1]) - 1
        return cls(x, y)

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.x]}{self.y + 1}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.x < BOARD_DIMENSIONS[0]) and (0 <= self.y < BOARD_DIMENSIONS[1])

    def offset(self, dx: int, dy: int) -> Coordinate:
        return Coordinate(self.x + dx, self.y + dy)

    def clone(self) -> Coordinate:
        return Coordinate(self.x, self.y)
