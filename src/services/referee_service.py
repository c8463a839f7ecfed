"""Orchestration of communication from the boundary (UI / API) to the game logic (and the reverse direction)."""

import logging
from typing import Optional

from src.api.models import (
    ClockView,
    GameStateResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRecordView,
    MoveRequest,
    MoveResponse,
    PieceView,
    PromotionRequest,
    TimeoutRequest,
)
from src.core.config import GameConfig
from src.core.logging_config import configure_logging
from src.core.shared_types import GamePhase, Team
from src.engine.coordinate import Coordinate
from src.engine.pieces import Computed, Piece
from src.game.controller import GameController

logger = logging.getLogger(__name__)


class RefereeService:
    """Owns the session of one game. The UI sends intents here and renders whatever state comes back."""

    def __init__(
        self,
        controller: Optional[GameController] = None,
        config: Optional[GameConfig] = None,
    ) -> None:
        self.controller = controller or GameController(config)

    @classmethod
    def from_env(cls) -> "RefereeService":
        """Entry point for applications: settings from CHESS_REFEREE_* variables, logging set up accordingly."""
        config = GameConfig.from_env()
        configure_logging(config.log_level)
        logger.info("Starting referee with %s", config)
        return cls(config=config)

    # -- Boundary logic ---
    def get_state(self) -> GameStateResponse:
        """Current snapshot of the game, everything a rendering layer needs."""
        controller = self.controller
        board = controller.board
        signal = controller.game_over_signal
        clock = controller.clock.snapshot()
        return GameStateResponse(
            pieces=[self._piece_view(piece) for piece in board.pieces],
            position=board.to_fen(),
            total_turns=board.total_turns,
            team_to_move=board.team_to_move,
            phase=controller.phase,
            winning_team=board.winning_team,
            is_checkmate=signal.is_checkmate if signal else False,
            move_history=[
                MoveRecordView(
                    piece=record.piece,
                    team=record.team,
                    from_square=record.from_square,
                    to_square=record.to_square,
                    captured=record.captured,
                    notation=record.to_notation(),
                )
                for record in controller.history
            ],
            captured={team: controller.captured.of(team) for team in Team},
            clock=ClockView(
                our_remaining=clock.our_remaining,
                opponent_remaining=clock.opponent_remaining,
            ),
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Attempt a move. An empty origin square is simply a rejected attempt."""
        origin = Coordinate.from_algebraic(request.from_square)
        destination = Coordinate.from_algebraic(request.to_square)

        piece = self.controller.board.piece_at(origin)
        if piece is None:
            logger.debug("No piece on %s", request.from_square)
            accepted = False
        else:
            accepted = self.controller.attempt_move(piece, destination)
        return MoveResponse(accepted=accepted, state=self.get_state())

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """All moves `request.team` may play right now. Empty when it is not that team's turn."""
        controller = self.controller
        moves: list[str] = []
        if (
            controller.phase == GamePhase.AWAITING_MOVE
            and controller.board.team_to_move == request.team
        ):
            for piece in controller.board.pieces_of(request.team):
                moves.extend(
                    f"{piece.position.to_algebraic()}{square}"
                    for square in self._piece_view(piece).legal_moves
                )
        return LegalMovesResponse(team=request.team, legal_moves=moves)

    def promote(self, request: PromotionRequest) -> GameStateResponse:
        self.controller.resolve_promotion(request.piece)
        return self.get_state()

    def timeout(self, request: TimeoutRequest) -> GameStateResponse:
        self.controller.timeout(request.team)
        return self.get_state()

    def restart(self) -> GameStateResponse:
        self.controller.restart()
        return self.get_state()

    # -- Internal helpers --
    def _piece_view(self, piece: Piece) -> PieceView:
        legal_moves = (
            [square.to_algebraic() for square in piece.legal_moves.moves]
            if isinstance(piece.legal_moves, Computed)
            else []
        )
        return PieceView(
            square=piece.position.to_algebraic(),
            kind=piece.kind,
            team=piece.team,
            has_moved=piece.has_moved,
            legal_moves=legal_moves,
        )
