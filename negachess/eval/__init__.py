"""Evaluation heuristics: material plus mobility.

Pure, deterministic, and side-effect free.
"""

from __future__ import annotations

from typing import Final

from negachess.engine.board import (
    Board,
    PAWN,
    KNIGHT,
    BISHOP,
    ROOK,
    QUEEN,
    KING,
    WHITE,
)


# Material values in centipawns
P_VAL: Final = 100
N_VAL: Final = 320
B_VAL: Final = 330
R_VAL: Final = 500
Q_VAL: Final = 900
K_VAL: Final = 20000

PIECE_VALUES: Final = {
    PAWN: P_VAL,
    KNIGHT: N_VAL,
    BISHOP: B_VAL,
    ROOK: R_VAL,
    QUEEN: Q_VAL,
    KING: K_VAL,
}

# Centipawns per pseudo-legal move of the side to move
MOBILITY_WEIGHT: Final = 2

# Score perspectives:
# - "mover": material is flipped to the side to move, so the whole score is
#   relative and negamax negation is consistent.
# - "absolute": material stays White-minus-Black while mobility is relative.
PERSPECTIVE_MOVER: Final = "mover"
PERSPECTIVE_ABSOLUTE: Final = "absolute"
PERSPECTIVES: Final = (PERSPECTIVE_MOVER, PERSPECTIVE_ABSOLUTE)


def evaluate_material(board: Board) -> int:
    """Return White material minus Black material (independent of side to move)."""
    score = 0
    for piece in board.cells:
        if piece is None:
            continue
        value = PIECE_VALUES[piece.kind]
        score += value if piece.color == WHITE else -value
    return score


def evaluate_mobility(board: Board) -> int:
    """Return ``MOBILITY_WEIGHT`` times the move count of the side to move."""
    return MOBILITY_WEIGHT * len(board.generate_moves())


def evaluate(board: Board, perspective: str = PERSPECTIVE_MOVER) -> int:
    """Material plus mobility.

    Args:
        board (Board): Position to score.
        perspective (str): ``"mover"`` scores material from the side to move,
            ``"absolute"`` keeps it White-relative as older builds did.

    Returns:
        int: Score in centipawns.

    Raises:
        ValueError: If ``perspective`` is unknown.
    """
    material = evaluate_material(board)
    if perspective == PERSPECTIVE_MOVER:
        if board.side_to_move != WHITE:
            material = -material
    elif perspective != PERSPECTIVE_ABSOLUTE:
        raise ValueError(f"unknown evaluation perspective: {perspective!r}")
    return material + evaluate_mobility(board)
