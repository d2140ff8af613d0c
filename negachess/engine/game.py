from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .board import Board, Piece, WHITE, BLACK
from .move import Move
from ..eval import PERSPECTIVE_MOVER
from ..search.service import SearchResult, SearchService


class NoMoveAvailable(ValueError):
    """Raised when the automated player has nothing to play."""


@dataclass
class Game:
    """Game wrapper around a board with helper operations.

    Responsibility: own the board, answer move queries, apply moves for
    either player. The board is the only position state; anything rendered
    from it is refreshed after each applied or undone move.
    """

    board: Board
    # (move, captured) pairs so moves can be taken back
    move_stack: List[Tuple[Move, Optional[Piece]]] = field(default_factory=list)

    @classmethod
    def new(cls) -> "Game":
        return cls(board=Board.startpos())

    @classmethod
    def from_fen(cls, fen: str) -> "Game":
        """Load a position; the active-colour field is honoured when present."""
        if not fen or not fen.strip():
            raise ValueError("FEN must be a non-empty string")
        parts = fen.strip().split()
        stm = WHITE
        if len(parts) > 1:
            if parts[1] not in (WHITE, BLACK):
                raise ValueError("side to move must be 'w' or 'b'")
            stm = parts[1]
        return cls(board=Board.from_fen(parts[0], side_to_move=stm))

    @classmethod
    def from_state_string(cls, state: str, side_to_move: str = WHITE) -> "Game":
        return cls(board=Board.from_state_string(state, side_to_move=side_to_move))

    def to_fen(self) -> str:
        return f"{self.board.to_fen()} {self.board.side_to_move}"

    def state_string(self) -> str:
        return self.board.to_state_string()

    def set_state_string(self, state: str) -> None:
        self.board = Board.from_state_string(state, side_to_move=self.board.side_to_move)
        self.move_stack.clear()

    @property
    def side_to_move(self) -> str:
        return self.board.side_to_move

    def legal_moves(self) -> List[Move]:
        return self.board.generate_moves()

    def can_pick(self, sq: int) -> bool:
        """True if the piece on ``sq`` belongs to the side to move."""
        piece = self.board.piece_at(sq)
        return piece is not None and piece.color == self.board.side_to_move

    def can_move(self, from_sq: int, to_sq: int) -> bool:
        return self.board.is_pseudo_legal(Move(from_sq, to_sq))

    def apply_move(self, move: Move) -> Optional[Piece]:
        if move.is_null():
            raise ValueError("cannot apply the null move")
        if not self.board.is_pseudo_legal(move):
            raise ValueError("illegal move")
        captured = self.board.make_move(move)
        self.move_stack.append((move, captured))
        return captured

    def undo_move(self) -> None:
        if not self.move_stack:
            raise ValueError("no moves to undo")
        move, captured = self.move_stack.pop()
        self.board.unmake_move(move, captured)

    def ai_move(
        self,
        depth: int = 3,
        movetime_ms: Optional[int] = None,
        perspective: str = PERSPECTIVE_MOVER,
    ) -> Tuple[Move, SearchResult]:
        """Search for the side to move and play the chosen move.

        Raises:
            NoMoveAvailable: If the side to move has no moves.
        """
        result = SearchService(perspective).find_best_move(self.board, depth, movetime_ms)
        if not result.has_move:
            raise NoMoveAvailable(f"no move available for side {self.board.side_to_move!r}")
        self.apply_move(result.best_move)
        return result.best_move, result

    # --- State flags for protocol ---
    def winner(self) -> Optional[str]:
        # Mate is not detected
        return None

    def is_draw(self) -> bool:
        return False

    def move_history_uci(self) -> List[str]:
        return [m.to_uci() for m, _ in self.move_stack]
