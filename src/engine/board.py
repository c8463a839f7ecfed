"""The Board implements all rules that affect the `position` (in chess: the configuration of pieces on the board)"""

import logging
from copy import deepcopy
from dataclasses import dataclass, replace
from typing import Optional, Self

from src.core.exceptions import InvalidPositionError
from src.core.shared_types import PieceKind, Team
from src.engine.coordinate import BOARD_DIMENSIONS, Coordinate
from src.engine.fen import STARTING_POSITION, is_valid_position
from src.engine.pieces import Computed, Piece
from src.engine.rules import is_square_attacked, possible_moves

logger = logging.getLogger(__name__)


@dataclass
class Board:
    pieces: list[Piece]
    total_turns: int = 0
    winning_team: Optional[Team] = None
    # When False, legal moves are geometry/occupancy only and may leave your own king attacked
    king_safety: bool = True

    @classmethod
    def initial(cls, king_safety: bool = True) -> Self:
        """The standard starting arrangement, nobody moved yet."""
        return cls.from_fen(STARTING_POSITION, king_safety=king_safety)

    @classmethod
    def from_fen(
        cls, fen_str: str, total_turns: int = 0, king_safety: bool = True
    ) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * OPPONENT pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are OUR pawns (capital letters)
        * 1st rank are OUR pieces.

        Legal moves of all pieces are computed straight away.
        """
        if not is_valid_position(fen_str):
            raise InvalidPositionError(f"Cannot interpret {fen_str!r} as a piece placement")

        pieces: list[Piece] = []
        for rank_idx, fen_one_rank in enumerate(fen_str.split("/")):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            y = BOARD_DIMENSIONS[1] - 1 - rank_idx
            x = 0
            for character in fen_one_rank:
                if character.isalpha():
                    pieces.append(Piece.from_fen(character, Coordinate(x, y)))
                    x += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    x += int(character)

        board = cls(pieces, total_turns=total_turns, king_safety=king_safety)
        board.calculate_all_moves()
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(y) for y in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_fen(self, y: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for x in range(BOARD_DIMENSIONS[0]):
            piece = self.piece_at(Coordinate(x, y))
            if piece is None:
                empty_count += 1
                continue

            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- LOOKUPS ---
    def piece_at(self, square: Coordinate) -> Optional[Piece]:
        return next((piece for piece in self.pieces if piece.position == square), None)

    def pieces_of(self, team: Team) -> list[Piece]:
        return [piece for piece in self.pieces if piece.team == team]

    def king_of(self, team: Team) -> Optional[Piece]:
        return next(
            (piece for piece in self.pieces if piece.is_king and piece.team == team),
            None,
        )

    @property
    def team_to_move(self) -> Team:
        """
        `total_turns` counts the moves already played. OUR team plays the odd turns (1, 3, ...),
        so it is OUR move whenever an even number of moves has been played.
        """
        return Team.OUR if self.total_turns % 2 == 0 else Team.OPPONENT

    def en_passant_victim(self, piece: Piece, destination: Coordinate) -> Optional[Piece]:
        """
        The pawn captured if `piece` moves to `destination` by taking en passant.
        ---

        The pawn moves diagonally onto an empty square. The pawn it takes stands right behind that square
        (same file as the destination, same rank as where the moving pawn started).
        """
        if not piece.is_pawn:
            return None
        direction = piece.team.pawn_direction
        is_diagonal_step = (
            abs(destination.x - piece.position.x) == 1
            and destination.y - piece.position.y == direction
        )
        if not is_diagonal_step or self.piece_at(destination) is not None:
            return None

        victim = self.piece_at(Coordinate(destination.x, destination.y - direction))
        if (
            victim is not None
            and victim.is_pawn
            and victim.team != piece.team
            and victim.en_passant_eligible
        ):
            return victim
        return None

    def captured_by(self, piece: Piece, destination: Coordinate) -> Optional[Piece]:
        """The opposing piece that would leave the board if `piece` moved to `destination`"""
        occupant = self.piece_at(destination)
        if occupant is not None and occupant.team != piece.team:
            return occupant
        return self.en_passant_victim(piece, destination)

    # --- LEGALITY ---
    def calculate_all_moves(self) -> None:
        """
        Recompute the legal moves of every piece on this board.
        ---

        1. candidate moves from the movement rules (geometry + occupancy)
        2. with king safety: drop those moves that would put (or leave) your own king under attack

        Legality is never patched incrementally. Call after every change to the pieces.
        """
        for piece in self.pieces:
            candidates = possible_moves(piece, self.pieces)
            if self.king_safety:
                candidates = [
                    destination
                    for destination in candidates
                    if not self._is_putting_yourself_in_check(piece, destination)
                ]
            piece.legal_moves = Computed(tuple(candidates))
        logger.debug(
            "Recomputed legal moves of %d pieces (king safety %s)",
            len(self.pieces),
            "on" if self.king_safety else "off",
        )

    def _is_putting_yourself_in_check(self, piece: Piece, destination: Coordinate) -> bool:
        """Return True if after the move the king of the moving team is under attack

        plan:
        1. Copy the piece list without the piece that gets captured
        2. make the candidate move on the copied mover
        3. determine if king is attacked in the new list of pieces
        """
        captured = self.captured_by(piece, destination)
        moved = replace(piece, position=destination)
        pieces_after = [
            moved if other is piece else other
            for other in self.pieces
            if other is not captured
        ]
        king = next(
            (p for p in pieces_after if p.is_king and p.team == piece.team), None
        )
        if king is None:
            return False
        return is_square_attacked(king.position, piece.team.opposite(), pieces_after)

    def is_in_check(self, team: Team) -> bool:
        king = self.king_of(team)
        if king is None:
            return False
        return is_square_attacked(king.position, team.opposite(), self.pieces)

    def has_legal_moves(self, team: Team) -> bool:
        return any(len(piece.moves()) > 0 for piece in self.pieces_of(team))

    def is_checkmate(self, team: Team) -> bool:
        return self.is_in_check(team) and not self.has_legal_moves(team)

    # --- STATE CHANGES (only ever on a freshly cloned board) ---
    def play_move(
        self,
        is_en_passant: bool,
        is_validated: bool,
        piece: Piece,
        destination: Coordinate,
    ) -> bool:
        """
        Apply a move the GameController already validated.
        ---

        `piece` may belong to the snapshot this board was cloned from. It is looked up on this board by its position.

        1. remove the captured piece (for en passant it stands behind the destination square)
        2. move the piece and mark it as moved
        3. a pawn advancing two ranks becomes eligible to be taken en passant, every other pawn loses that eligibility
        4. recompute legal moves
        5. checkmate? the team that just moved wins (unless a pawn reached the far rank and awaits promotion)
        """
        if not is_validated:
            return False

        mover = self.piece_at(piece.position)
        assert mover is not None and mover.kind == piece.kind and mover.team == piece.team, (
            f"No {piece.team} {piece.kind} on {piece.position.to_algebraic()}"
        )

        captured_square = (
            Coordinate(destination.x, destination.y - mover.team.pawn_direction)
            if is_en_passant
            else destination
        )
        self.pieces = [p for p in self.pieces if p.position != captured_square]

        is_double_step = mover.is_pawn and abs(destination.y - mover.position.y) == 2
        for other in self.pieces:
            other.en_passant_eligible = False
        mover.en_passant_eligible = is_double_step

        mover.position = destination.clone()
        mover.has_moved = True
        self._assert_unique_positions()

        self.calculate_all_moves()
        # a pawn on the far rank is not final yet: checkmate is judged once it is promoted
        if not mover.awaits_promotion:
            self.update_winner(last_mover=mover.team)
        return True

    def promote(self, position: Coordinate, kind: PieceKind) -> Piece:
        """Replace the pawn standing on `position` by a new piece of the given kind (and same team)."""
        pawn = self.piece_at(position)
        assert pawn is not None and pawn.is_pawn, f"No pawn to promote on {position.to_algebraic()}"

        promoted = Piece(position.clone(), kind, pawn.team, has_moved=True)
        self.pieces = [
            promoted if piece.same_position(promoted) else piece for piece in self.pieces
        ]
        self._assert_unique_positions()
        self.calculate_all_moves()
        return promoted

    def update_winner(self, last_mover: Team) -> None:
        """The side to move is checkmated: `last_mover` wins. A winner is only ever declared once."""
        if self.winning_team is None and self.is_checkmate(last_mover.opposite()):
            logger.info("Checkmate: %s wins after turn %d", last_mover, self.total_turns)
            self.winning_team = last_mover

    def declare_winner(self, team: Team) -> None:
        if self.winning_team is None:
            self.winning_team = team

    def clone(self) -> Self:
        """Deep copy: fresh pieces, no state shared with this board."""
        return deepcopy(self)

    def _assert_unique_positions(self) -> None:
        positions = [piece.position for piece in self.pieces]
        assert len(positions) == len(set(positions)), "Two pieces share a square"
