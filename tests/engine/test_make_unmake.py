from __future__ import annotations

import random

import pytest

from negachess.engine.board import Board, Piece, KNIGHT, PAWN, WHITE, BLACK
from negachess.engine.move import Move, NO_MOVE, str_to_square

from _boards import random_board


def test_make_unmake_restores_startpos() -> None:
    b = Board.startpos()
    before = b.copy()
    mv = Move(str_to_square("e2"), str_to_square("e4"))
    assert mv in b.generate_moves()

    captured = b.make_move(mv)
    assert captured is None
    assert b.piece_at(str_to_square("e4")) == Piece(WHITE, PAWN)
    assert b.piece_at(str_to_square("e2")) is None
    assert b.side_to_move == BLACK

    b.unmake_move(mv, captured)
    assert b == before


def test_capture_returns_and_restores_victim() -> None:
    b = Board.from_fen("4k3/8/8/3n4/4P3/8/8/4K3")
    before = b.copy()
    mv = Move(str_to_square("e4"), str_to_square("d5"))
    captured = b.make_move(mv)
    assert captured == Piece(BLACK, KNIGHT)
    assert b.piece_at(str_to_square("d5")) == Piece(WHITE, PAWN)
    b.unmake_move(mv, captured)
    assert b == before


def test_make_move_does_not_check_provenance() -> None:
    # Any in-range indices are applied as given
    b = Board.startpos()
    mv = Move(str_to_square("e7"), str_to_square("e5"))
    b.make_move(mv)
    assert b.piece_at(str_to_square("e5")) == Piece(BLACK, PAWN)
    assert b.side_to_move == BLACK


@pytest.mark.parametrize("mv", [NO_MOVE, Move(0, 64), Move(-1, 8)])
def test_out_of_range_move_raises_and_leaves_board(mv: Move) -> None:
    b = Board.startpos()
    before = b.copy()
    with pytest.raises(ValueError):
        b.make_move(mv)
    assert b == before


@pytest.mark.parametrize("seed", range(40))
def test_round_trip_every_move_on_random_boards(seed: int) -> None:
    b = random_board(random.Random(seed))
    before = b.copy()
    for m in b.generate_moves():
        target = b.piece_at(m.to_sq)
        captured = b.make_move(m)
        assert captured == target
        assert b.side_to_move != before.side_to_move
        b.unmake_move(m, captured)
        assert b == before


def test_nested_make_unmake_two_plies() -> None:
    b = Board.startpos()
    before = b.copy()
    for m1 in b.generate_moves():
        c1 = b.make_move(m1)
        mid = b.copy()
        for m2 in b.generate_moves():
            c2 = b.make_move(m2)
            b.unmake_move(m2, c2)
            assert b == mid
        b.unmake_move(m1, c1)
    assert b == before
