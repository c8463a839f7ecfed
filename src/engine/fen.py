"""
Piece placement in FEN (Forsyth-Edwards Notation).

Only the first field of a FEN string is used: the placement of the pieces.
Turn counting, en passant eligibility, etc. live on the Board / Pieces themselves.

ex) standard starting position:
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
* ranks are separated by a '/', read from the 8th rank (top, OPPONENT's back rank) down to the 1st
* within a rank, files are read from a to h
* a letter is a piece (upper case: OUR pieces, lower case: OPPONENT pieces), a digit counts empty squares
"""

from string import ascii_lowercase

from src.engine.coordinate import BOARD_DIMENSIONS
from src.engine.pieces import FEN_TO_PIECE

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_POSITION = "/".join(["8"] * BOARD_DIMENSIONS[1])


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            if character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            return False
    return True


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    num_files, num_ranks = BOARD_DIMENSIONS
    if len(square) != 2:
        return False

    file_char, rank_char = square[0], square[1]
    if file_char not in ascii_lowercase[:num_files]:
        return False

    if not rank_char.isdigit():
        return False

    return 1 <= int(rank_char) <= num_ranks
