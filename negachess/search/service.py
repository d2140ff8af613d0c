from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import logging
import time

from negachess.engine.board import Board
from negachess.engine.move import Move, NO_MOVE
from negachess.eval import PERSPECTIVE_MOVER, PERSPECTIVES, evaluate


logger = logging.getLogger(__name__)

# Search window bound; well above any reachable evaluation
INF = 10_000_000


@dataclass
class SearchResult:
    best_move: Move
    score: Optional[int]
    nodes: int
    depth: int
    time_ms: int
    # False when a movetime deadline cut the root loop short
    completed: bool = True

    @property
    def has_move(self) -> bool:
        return not self.best_move.is_null()


class SearchService:
    """Fixed-depth negamax with alpha-beta over a single shared board.

    Every candidate is tried with ``make_move``/``recurse``/``unmake_move`` on
    the board passed in, which is therefore owned exclusively by the search
    for the duration of a call and handed back unchanged.
    """

    def __init__(self, perspective: str = PERSPECTIVE_MOVER) -> None:
        if perspective not in PERSPECTIVES:
            raise ValueError(f"unknown evaluation perspective: {perspective!r}")
        self.perspective = perspective
        self.nodes = 0
        self._deadline: Optional[float] = None
        self._time_up = False

    def evaluate(self, board: Board) -> int:
        return evaluate(board, self.perspective)

    def find_best_move(
        self, board: Board, depth: int, movetime_ms: Optional[int] = None
    ) -> SearchResult:
        """Pick the root move with the best negated child score.

        Args:
            board (Board): Position to search; mutated during the call and
                restored before returning.
            depth (int): Plies to search. ``depth <= 0`` scores the root with
                a single evaluator call and returns the first generated move.
            movetime_ms (Optional[int]): Optional deadline. When exceeded, the
                root move being searched is discarded and the best fully
                searched root move is returned with ``completed=False``.

        Returns:
            SearchResult: ``best_move`` is ``NO_MOVE`` and ``score`` is ``None``
                when the side to move has no moves.
        """
        start = time.perf_counter()
        self.nodes = 0
        self._time_up = False
        self._deadline = start + movetime_ms / 1000.0 if movetime_ms is not None else None

        moves = board.generate_moves()
        if not moves:
            logger.debug("no moves at root for side %s", board.side_to_move)
            return SearchResult(
                best_move=NO_MOVE, score=None, nodes=0, depth=depth, time_ms=_elapsed_ms(start)
            )

        if depth <= 0:
            self.nodes = 1
            return SearchResult(
                best_move=moves[0],
                score=self.evaluate(board),
                nodes=1,
                depth=depth,
                time_ms=_elapsed_ms(start),
            )

        best_score = -INF - 1
        best = moves[0]
        searched = 0
        for m in moves:
            captured = board.make_move(m)
            # Each root child is searched with the full window
            score = -self.negamax(board, depth - 1, -INF, INF, False)
            board.unmake_move(m, captured)
            if self._time_up:
                break
            searched += 1
            # Strictly greater: the earliest generated move keeps ties
            if score > best_score:
                best_score = score
                best = m

        completed = not self._time_up
        result = SearchResult(
            best_move=best,
            score=best_score if searched else None,
            nodes=self.nodes,
            depth=depth,
            time_ms=_elapsed_ms(start),
            completed=completed,
        )
        if not completed:
            logger.info(
                "search deadline hit after %d/%d root moves (depth %d, %d ms)",
                searched,
                len(moves),
                depth,
                result.time_ms,
            )
        logger.debug(
            "search depth=%d best=%s score=%s nodes=%d time_ms=%d",
            depth,
            best.to_uci(),
            result.score,
            result.nodes,
            result.time_ms,
        )
        return result

    def negamax(self, board: Board, depth: int, alpha: int, beta: int, maximizing: bool) -> int:
        """Score ``board`` for its side to move with fail-soft alpha-beta.

        ``maximizing`` alternates each ply and only labels trace output; the
        score is always from the side to move and the caller negates it.
        A side with no moves scores 0.
        """
        self.nodes += 1
        if self._deadline is not None and not self._time_up:
            if time.perf_counter() >= self._deadline:
                self._time_up = True
        if self._time_up:
            return 0

        if depth <= 0:
            return self.evaluate(board)

        moves = board.generate_moves()
        if not moves:
            return 0

        best = -INF - 1
        for m in moves:
            captured = board.make_move(m)
            val = -self.negamax(board, depth - 1, -beta, -alpha, not maximizing)
            board.unmake_move(m, captured)
            if self._time_up:
                break

            if val > best:
                best = val
            if val > alpha:
                alpha = val
            if alpha >= beta:
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(
                        "cutoff depth=%d side=%s maximizing=%s move=%s",
                        depth,
                        board.side_to_move,
                        maximizing,
                        m.to_uci(),
                    )
                break
        return best


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
