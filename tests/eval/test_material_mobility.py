from __future__ import annotations

import pytest

from negachess.engine.board import Board
from negachess.eval import (
    PIECE_VALUES,
    evaluate,
    evaluate_material,
    evaluate_mobility,
)


def test_piece_values() -> None:
    assert sorted(PIECE_VALUES.values()) == [100, 320, 330, 500, 900, 20000]


def test_startpos_is_balanced() -> None:
    b = Board.startpos()
    assert evaluate_material(b) == 0
    assert evaluate_mobility(b) == 40
    assert evaluate(b) == 40
    assert evaluate(b, "absolute") == 40


def test_kings_only_material_is_zero() -> None:
    b = Board.from_fen("4k3/8/8/8/8/8/8/4K3")
    assert evaluate_material(b) == 0
    assert b.generate_moves()


def test_material_is_absolute() -> None:
    fen = "4k3/8/8/8/8/8/8/3QK3"
    assert evaluate_material(Board.from_fen(fen, side_to_move="w")) == 900
    assert evaluate_material(Board.from_fen(fen, side_to_move="b")) == 900
    assert evaluate_material(Board.from_fen("rn2k3/8/8/8/8/8/8/4K1B1")) == 330 - 500 - 320


def test_mobility_is_relative_to_side_to_move() -> None:
    fen = "4k3/8/8/8/8/8/8/3QK3"
    # Black king e8 has five moves
    assert evaluate_mobility(Board.from_fen(fen, side_to_move="b")) == 10
    assert evaluate_mobility(Board.from_fen(fen, side_to_move="w")) > 10


def test_perspectives_differ_only_when_black_moves() -> None:
    fen = "4k3/8/8/8/8/8/8/3QK3"
    black = Board.from_fen(fen, side_to_move="b")
    assert evaluate(black, "absolute") == 910
    assert evaluate(black, "mover") == -890

    white = Board.from_fen(fen, side_to_move="w")
    assert evaluate(white, "absolute") == evaluate(white, "mover")


def test_unknown_perspective_raises() -> None:
    with pytest.raises(ValueError):
        evaluate(Board.startpos(), "white")
