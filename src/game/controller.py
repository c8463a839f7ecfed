"""
The GameController is the entrypoint into the domain layer for the service layer.

It is the only part of the domain that knows whose turn it is and that a promotion choice can be pending.
Every accepted intent produces a new Board snapshot: the live board is cloned, the clone is changed, and the clone
replaces the live board. Snapshots handed out earlier are never touched again.

Rule violations are reported by returning False (nothing changes), never by raising.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from src.core.config import GameConfig
from src.core.shared_types import GamePhase, PieceKind, Team
from src.engine.board import Board
from src.engine.coordinate import Coordinate
from src.engine.pieces import PROMOTION_OPTIONS, Piece
from src.game.clock import ChessClock
from src.game.history import CapturedPieces, MoveHistory, MoveRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameOverSignal:
    winning_team: Team
    is_checkmate: bool


# -- Event definitions --
MoveCallback = Callable[[MoveRecord, Board], None]
PromotionCallback = Callable[[Piece], None]
GameOverCallback = Callable[[GameOverSignal], None]
PhaseCallback = Callable[[GamePhase], None]


@dataclass
class GameEvents:
    """Observable callbacks. The rendering layer subscribes here instead of holding its own copy of the game."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_promotion_requested: list[PromotionCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


class GameController:
    """
    State machine of a single game
    ---

    AWAITING_MOVE --(legal move)--> AWAITING_MOVE
    AWAITING_MOVE --(pawn reaches the far rank)--> AWAITING_PROMOTION_CHOICE --(choice)--> AWAITING_MOVE
    any state --(checkmate / clock runs out)--> GAME_OVER --(restart)--> AWAITING_MOVE
    """

    def __init__(
        self, config: Optional[GameConfig] = None, board: Optional[Board] = None
    ) -> None:
        """
        `board` starts the game from a custom position instead of the standard arrangement.
        The config decides on king safety, also for a custom board (its own flag is overridden).
        """
        self.config = config or GameConfig()
        self.events = GameEvents()
        self.history = MoveHistory()
        self.captured = CapturedPieces()
        self.clock = ChessClock(self.config.clock_seconds)
        self._board = self._with_king_safety(board) if board else Board.initial(
            king_safety=self.config.king_safety
        )
        self._phase = GamePhase.AWAITING_MOVE
        self._pending_promotion: Optional[Piece] = None
        self._ended_by_checkmate = False

    # -- Properties --
    @property
    def board(self) -> Board:
        return self._board

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def pending_promotion(self) -> Optional[Piece]:
        return self._pending_promotion

    @property
    def game_over_signal(self) -> Optional[GameOverSignal]:
        if self._board.winning_team is None:
            return None
        return GameOverSignal(self._board.winning_team, self._ended_by_checkmate)

    # -- Intents --
    def attempt_move(self, piece: Piece, destination: Coordinate) -> bool:
        """
        Attempt to make a move
        -----

        1. make sure the game accepts moves (not over, no promotion pending)
        2. make sure the piece is on the live board, has its legal moves computed and it is its team's turn
        3. make sure the destination is one of its legal moves
        4. detect en passant and find out which piece gets captured (before the board changes)
        5. clone the board, count the turn, play the move on the clone
        6. update the move history and the captured pieces
        7. pawn on the far rank? wait for the promotion choice (checkmate is judged after it). Checkmate? game over.
        """
        if self._phase == GamePhase.GAME_OVER:
            return self._reject("game is over", piece, destination)
        if (
            self._phase == GamePhase.AWAITING_PROMOTION_CHOICE
            and self.config.lock_during_promotion
        ):
            return self._reject("promotion choice pending", piece, destination)

        if not piece.has_computed_moves:
            return self._reject("legal moves not computed", piece, destination)
        live_piece = self._board.piece_at(piece.position)
        if live_piece is None or (live_piece.kind, live_piece.team) != (piece.kind, piece.team):
            return self._reject("piece is not on the board", piece, destination)
        if live_piece.team != self._board.team_to_move:
            return self._reject("not this team's turn", piece, destination)
        if not live_piece.can_move_to(destination):
            return self._reject("destination not allowed", piece, destination)
        if self._pending_promotion is not None and self._is_promotion(live_piece, destination):
            # only reachable with lock_during_promotion off: one promotion choice at a time
            return self._reject("another promotion is pending", piece, destination)

        is_en_passant = self._is_en_passant_move(live_piece, destination)
        captured = self._board.captured_by(live_piece, destination)

        new_board = self._board.clone()
        new_board.total_turns += 1
        if not new_board.play_move(is_en_passant, True, live_piece, destination):
            return False

        record = MoveRecord.create(
            piece=live_piece.kind,
            team=live_piece.team,
            from_square=live_piece.position,
            to_square=destination,
            captured=captured.kind if captured else None,
        )
        self._board = new_board
        self.history.append(record)
        if captured is not None:
            self.captured.record(captured.team, captured.kind)
        logger.info("Turn %d: %s %s", new_board.total_turns, live_piece.team, record.to_notation())
        self._emit_move(record)

        # the board leaves checkmate open while a pawn awaits promotion: resolve_promotion decides it
        if self._is_promotion(live_piece, destination):
            moved_pawn = new_board.piece_at(destination)
            assert moved_pawn is not None
            self._pending_promotion = moved_pawn.clone()
            self._set_phase(GamePhase.AWAITING_PROMOTION_CHOICE)
            self._emit_promotion_requested(self._pending_promotion)
        elif new_board.winning_team is not None:
            self._end_game(is_checkmate=True)
        return True

    def resolve_promotion(self, kind: PieceKind) -> bool:
        """Replace the pending pawn by the chosen piece. Ignored (False) when no promotion is pending or the choice is not allowed."""
        pending = self._pending_promotion
        if self._phase != GamePhase.AWAITING_PROMOTION_CHOICE or pending is None:
            logger.debug("Ignoring promotion to %s: no promotion pending", kind)
            return False
        if kind not in PROMOTION_OPTIONS:
            logger.debug("Ignoring promotion to %s: not a promotion option", kind)
            return False

        new_board = self._board.clone()
        pawn = new_board.piece_at(pending.position)
        if pawn is None or not pawn.is_pawn or pawn.team != pending.team:
            # only possible when moves were allowed while the choice was pending and the pawn got captured
            logger.debug("Pending pawn left %s, dropping promotion", pending.position.to_algebraic())
            self._pending_promotion = None
            self._set_phase(GamePhase.AWAITING_MOVE)
            return False

        promoted = new_board.promote(pending.position, kind)
        new_board.update_winner(last_mover=promoted.team)
        self._board = new_board
        self._pending_promotion = None
        logger.info("%s pawn on %s promoted to %s", promoted.team, promoted.position.to_algebraic(), kind)

        if new_board.winning_team is not None:
            self._end_game(is_checkmate=True)
        else:
            self._set_phase(GamePhase.AWAITING_MOVE)
        return True

    def timeout(self, team: Team) -> None:
        """The clock of `team` ran out: the other team wins, whatever is happening on the board."""
        if self._board.winning_team is not None:
            logger.debug("Ignoring timeout of %s: game already decided", team)
            return

        new_board = self._board.clone()
        new_board.declare_winner(team.opposite())
        self._board = new_board
        self._pending_promotion = None
        logger.info("%s ran out of time, %s wins", team, team.opposite())
        self._end_game(is_checkmate=False)

    def tick(self, seconds: float = 1.0) -> None:
        """Run the clock of the team to move. Delivers the timeout when it runs out."""
        if self._phase == GamePhase.GAME_OVER:
            return
        team = self._board.team_to_move
        if self.clock.tick(team, seconds):
            self.timeout(team)

    def restart(self) -> None:
        self._board = Board.initial(king_safety=self.config.king_safety)
        self.history.clear()
        self.captured.clear()
        self.clock.reset()
        self._pending_promotion = None
        self._ended_by_checkmate = False
        logger.info("Game restarted")
        self._set_phase(GamePhase.AWAITING_MOVE)

    # -- PRIVATE HELPERS --
    def _with_king_safety(self, board: Board) -> Board:
        """Snapshot of `board` following the configured king safety. The caller's board is left alone."""
        if board.king_safety == self.config.king_safety:
            return board
        adjusted = board.clone()
        adjusted.king_safety = self.config.king_safety
        adjusted.calculate_all_moves()
        return adjusted

    def _is_en_passant_move(self, piece: Piece, destination: Coordinate) -> bool:
        """A pawn moving diagonally onto an empty square, behind an opposing pawn that just advanced two squares"""
        return self._board.en_passant_victim(piece, destination) is not None

    def _is_promotion(self, piece: Piece, destination: Coordinate) -> bool:
        return replace(piece, position=destination).awaits_promotion

    def _reject(self, reason: str, piece: Piece, destination: Coordinate) -> bool:
        logger.debug(
            "Rejected %s %s %s-%s: %s",
            piece.team,
            piece.kind,
            piece.position.to_algebraic(),
            destination.to_algebraic(),
            reason,
        )
        return False

    def _end_game(self, is_checkmate: bool) -> None:
        self._ended_by_checkmate = is_checkmate
        self._pending_promotion = None
        self._set_phase(GamePhase.GAME_OVER)
        signal = self.game_over_signal
        assert signal is not None
        for callback in self.events.on_game_over:
            callback(signal)

    def _set_phase(self, phase: GamePhase) -> None:
        if phase == self._phase:
            return
        self._phase = phase
        for callback in self.events.on_phase_changed:
            callback(phase)

    def _emit_move(self, record: MoveRecord) -> None:
        for callback in self.events.on_move:
            callback(record, self._board)

    def _emit_promotion_requested(self, pawn: Piece) -> None:
        for callback in self.events.on_promotion_requested:
            callback(pawn)
