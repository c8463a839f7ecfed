"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the move sets for each piece kind.
Every kind gets a pair of rules:

* `possible_<kind>_moves(piece, pieces)`: every square the piece could go to
* `<kind>_move(piece, destination, pieces)`: can the piece go to this one square? (computed directly, without enumerating)

None of these know whose turn it is, nor if a move exposes your own king. That is decided later by the Board / GameController.
"""

from typing import Callable, Optional, Sequence

from src.core.shared_types import PieceKind, Team
from src.engine.coordinate import Coordinate
from src.engine.pieces import Piece

Vector = tuple[int, int]
Occupancy = dict[Coordinate, Piece]

KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = [
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]


def occupancy(pieces: Sequence[Piece]) -> Occupancy:
    """Look up pieces by the coordinate they stand on"""
    return {piece.position: piece for piece in pieces}


def _is_available(square: Coordinate, team: Team, board: Occupancy) -> bool:
    """Empty, or taken by the other team (so it can be captured)"""
    occupant = board.get(square)
    return occupant is None or occupant.team != team


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


# --- MOVEMENT RULES ---
def raycasting_move(
    piece: Piece, board: Occupancy, directions: list[Vector]
) -> list[Coordinate]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    moves: list[Coordinate] = []
    for dx, dy in directions:
        target = piece.position.offset(dx, dy)
        while target.is_within_bounds():
            occupant = board.get(target)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.team != piece.team:
                    moves.append(target)
                break

            moves.append(target)
            target = target.offset(dx, dy)
    return moves


def single_step_move(
    piece: Piece, board: Occupancy, deltas: list[Vector]
) -> list[Coordinate]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step along a direction"""
    moves: list[Coordinate] = []
    for dx, dy in deltas:
        target = piece.position.offset(dx, dy)
        if target.is_within_bounds() and _is_available(target, piece.team, board):
            moves.append(target)
    return moves


def _en_passant_victim(
    piece: Piece, destination: Coordinate, board: Occupancy
) -> Optional[Piece]:
    """The opposing pawn that would be taken by moving diagonally onto the (empty) square behind it"""
    victim = board.get(Coordinate(destination.x, piece.position.y))
    if (
        victim is not None
        and victim.is_pawn
        and victim.team != piece.team
        and victim.en_passant_eligible
    ):
        return victim
    return None


def possible_pawn_moves(piece: Piece, pieces: Sequence[Piece]) -> list[Coordinate]:
    """
    A pawn:
    - moves by a single square forward, never onto an occupied square.
    - It can move by two in their first move (from their starting rank, both squares empty)
    - takes diagonally
    - takes en passant: moves diagonally behind an opposing pawn that just advanced two squares
    """
    board = occupancy(pieces)
    direction = piece.team.pawn_direction
    moves: list[Coordinate] = []

    one_step = piece.position.offset(0, direction)
    if one_step.is_within_bounds() and one_step not in board:
        moves.append(one_step)
        two_steps = piece.position.offset(0, 2 * direction)
        on_start_rank = piece.position.y == piece.team.pawn_start_rank
        if on_start_rank and not piece.has_moved and two_steps not in board:
            moves.append(two_steps)

    for dx in (-1, 1):
        target = piece.position.offset(dx, direction)
        if not target.is_within_bounds():
            continue
        occupant = board.get(target)
        if occupant is not None:
            if occupant.team != piece.team:
                moves.append(target)
        elif _en_passant_victim(piece, target, board) is not None:
            moves.append(target)
    return moves


def pawn_move(piece: Piece, destination: Coordinate, pieces: Sequence[Piece]) -> bool:
    if not destination.is_within_bounds():
        return False
    board = occupancy(pieces)
    direction = piece.team.pawn_direction
    dx = destination.x - piece.position.x
    dy = destination.y - piece.position.y

    if dx == 0 and dy == direction:
        return destination not in board

    if dx == 0 and dy == 2 * direction:
        intermediate = piece.position.offset(0, direction)
        return (
            piece.position.y == piece.team.pawn_start_rank
            and not piece.has_moved
            and intermediate not in board
            and destination not in board
        )

    if abs(dx) == 1 and dy == direction:
        occupant = board.get(destination)
        if occupant is not None:
            return occupant.team != piece.team
        return _en_passant_victim(piece, destination, board) is not None

    return False


def possible_knight_moves(piece: Piece, pieces: Sequence[Piece]) -> list[Coordinate]:
    """Knights always move such that |delta_x| + |delta_y| = 3"""
    return single_step_move(piece, occupancy(pieces), KNIGHT_DELTAS)


def knight_move(piece: Piece, destination: Coordinate, pieces: Sequence[Piece]) -> bool:
    dx = abs(destination.x - piece.position.x)
    dy = abs(destination.y - piece.position.y)
    return (
        destination.is_within_bounds()
        and {dx, dy} == {1, 2}
        and _is_available(destination, piece.team, occupancy(pieces))
    )


def _sliding_move(
    piece: Piece,
    destination: Coordinate,
    pieces: Sequence[Piece],
    directions: list[Vector],
) -> bool:
    """Walk from the piece towards the destination: every square in between must be empty"""
    if not destination.is_within_bounds() or destination == piece.position:
        return False
    dx = destination.x - piece.position.x
    dy = destination.y - piece.position.y
    step = (_sign(dx), _sign(dy))
    is_straight_line = dx == 0 or dy == 0 or abs(dx) == abs(dy)
    if not is_straight_line or step not in directions:
        return False

    board = occupancy(pieces)
    square = piece.position.offset(*step)
    while square != destination:
        if square in board:
            return False
        square = square.offset(*step)
    return _is_available(destination, piece.team, board)


def possible_bishop_moves(piece: Piece, pieces: Sequence[Piece]) -> list[Coordinate]:
    """Bishops move diagonally: |delta_y| = |delta_x|"""
    return raycasting_move(piece, occupancy(pieces), DIAGONALS)


def bishop_move(piece: Piece, destination: Coordinate, pieces: Sequence[Piece]) -> bool:
    return _sliding_move(piece, destination, pieces, DIAGONALS)


def possible_rook_moves(piece: Piece, pieces: Sequence[Piece]) -> list[Coordinate]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(piece, occupancy(pieces), STRAIGHTS)


def rook_move(piece: Piece, destination: Coordinate, pieces: Sequence[Piece]) -> bool:
    return _sliding_move(piece, destination, pieces, STRAIGHTS)


def possible_queen_moves(piece: Piece, pieces: Sequence[Piece]) -> list[Coordinate]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return possible_bishop_moves(piece, pieces) + possible_rook_moves(piece, pieces)


def queen_move(piece: Piece, destination: Coordinate, pieces: Sequence[Piece]) -> bool:
    return _sliding_move(piece, destination, pieces, DIAGONALS + STRAIGHTS)


def possible_king_moves(piece: Piece, pieces: Sequence[Piece]) -> list[Coordinate]:
    """The king can move by a single square at the time."""
    return single_step_move(piece, occupancy(pieces), KING_DELTAS)


def king_move(piece: Piece, destination: Coordinate, pieces: Sequence[Piece]) -> bool:
    dx = abs(destination.x - piece.position.x)
    dy = abs(destination.y - piece.position.y)
    return (
        destination.is_within_bounds()
        and max(dx, dy) == 1
        and _is_available(destination, piece.team, occupancy(pieces))
    )


# -- STRATEGY PATTERN: MOVEMENT RULES ---
PossibleMovesFn = Callable[[Piece, Sequence[Piece]], list[Coordinate]]
MoveFn = Callable[[Piece, Coordinate, Sequence[Piece]], bool]

POSSIBLE_MOVES_RULES: dict[PieceKind, PossibleMovesFn] = {
    PieceKind.PAWN: possible_pawn_moves,
    PieceKind.KNIGHT: possible_knight_moves,
    PieceKind.BISHOP: possible_bishop_moves,
    PieceKind.ROOK: possible_rook_moves,
    PieceKind.QUEEN: possible_queen_moves,
    PieceKind.KING: possible_king_moves,
}

MOVE_RULES: dict[PieceKind, MoveFn] = {
    PieceKind.PAWN: pawn_move,
    PieceKind.KNIGHT: knight_move,
    PieceKind.BISHOP: bishop_move,
    PieceKind.ROOK: rook_move,
    PieceKind.QUEEN: queen_move,
    PieceKind.KING: king_move,
}


def possible_moves(piece: Piece, pieces: Sequence[Piece]) -> list[Coordinate]:
    return POSSIBLE_MOVES_RULES[piece.kind](piece, pieces)


def is_legal_move(piece: Piece, destination: Coordinate, pieces: Sequence[Piece]) -> bool:
    return MOVE_RULES[piece.kind](piece, destination, pieces)


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Coordinate,
    by_team: Team,
    by_kinds: tuple[PieceKind, ...],
    board: Occupancy,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the given team
    that is allowed to move along the given directions?"_
    """
    for dx, dy in directions:
        target = square.offset(dx, dy)
        while target.is_within_bounds():
            occupant = board.get(target)
            if occupant is not None:
                # only the first piece in sight can attack along this line
                if occupant.team == by_team and occupant.kind in by_kinds:
                    return True
                break
            target = target.offset(dx, dy)
    return False


def single_step_attack(
    square: Coordinate,
    by_team: Team,
    by_kind: PieceKind,
    board: Occupancy,
    deltas: list[Vector],
) -> bool:
    """Equivalent of `raycasting_attack()` for pieces that jump a single step"""
    for dx, dy in deltas:
        occupant = board.get(square.offset(dx, dy))
        if occupant is not None and occupant.team == by_team and occupant.kind == by_kind:
            return True
    return False


def is_attacked_by_pawn(square: Coordinate, by_team: Team, board: Occupancy) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric. An OUR pawn moves UP the board, so to check if it can take on the specified square
    we must look one rank DOWN. The deltas are exactly the opposite of the pawn's capture deltas.
    """
    back = -by_team.pawn_direction
    return single_step_attack(square, by_team, PieceKind.PAWN, board, [(1, back), (-1, back)])


def is_attacked_by_knight(square: Coordinate, by_team: Team, board: Occupancy) -> bool:
    return single_step_attack(square, by_team, PieceKind.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_king(square: Coordinate, by_team: Team, board: Occupancy) -> bool:
    return single_step_attack(square, by_team, PieceKind.KING, board, KING_DELTAS)


def is_attacked_on_diagonal(square: Coordinate, by_team: Team, board: Occupancy) -> bool:
    """Bishops and queens"""
    return raycasting_attack(
        square, by_team, (PieceKind.BISHOP, PieceKind.QUEEN), board, DIAGONALS
    )


def is_attacked_on_straight(square: Coordinate, by_team: Team, board: Occupancy) -> bool:
    """Rooks and queens"""
    return raycasting_attack(
        square, by_team, (PieceKind.ROOK, PieceKind.QUEEN), board, STRAIGHTS
    )


IsAttackedFn = Callable[[Coordinate, Team, Occupancy], bool]
ATTACK_RULES: list[IsAttackedFn] = [
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_by_king,
    is_attacked_on_diagonal,
    is_attacked_on_straight,
]


def is_square_attacked(square: Coordinate, by_team: Team, pieces: Sequence[Piece]) -> bool:
    board = occupancy(pieces)
    return any(rule(square, by_team, board) for rule in ATTACK_RULES)
