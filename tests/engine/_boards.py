from __future__ import annotations

import random

from negachess.engine.board import Board, Piece, PIECES, KING, KINDS, WHITE, BLACK

NON_KING_KINDS = tuple(k for k in KINDS if k != KING)


def random_board(rng: random.Random, max_extra: int = 20) -> Board:
    """Kings plus a random scatter of other pieces, random side to move."""
    squares = rng.sample(range(64), 2 + rng.randint(0, max_extra))
    cells: list[Piece | None] = [None] * 64
    cells[squares[0]] = PIECES[(WHITE, KING)]
    cells[squares[1]] = PIECES[(BLACK, KING)]
    for sq in squares[2:]:
        cells[sq] = PIECES[(rng.choice((WHITE, BLACK)), rng.choice(NON_KING_KINDS))]
    return Board(cells=cells, side_to_move=rng.choice((WHITE, BLACK)))
