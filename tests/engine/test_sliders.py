from __future__ import annotations

from negachess.engine.board import Board
from negachess.engine.move import str_to_square


def from_square(b: Board, sq: str) -> list[str]:
    idx = str_to_square(sq)
    return [m.to_uci() for m in b.generate_moves() if m.from_sq == idx]


def test_rook_rays_stop_on_friendly_and_after_enemy() -> None:
    # White rook d4, own pawn d6, black pawn g4
    b = Board.from_fen("7k/8/3P4/8/3R2p1/8/8/K7")
    assert from_square(b, "d4") == [
        "d4d5",
        "d4d3",
        "d4d2",
        "d4d1",
        "d4e4",
        "d4f4",
        "d4g4",
        "d4c4",
        "d4b4",
        "d4a4",
    ]


def test_rook_does_not_slide_past_capture() -> None:
    b = Board.from_fen("7k/8/8/8/3R2p1/8/8/K7")
    ms = from_square(b, "d4")
    assert "d4g4" in ms
    assert "d4h4" not in ms


def test_bishop_on_edge_does_not_wrap() -> None:
    b = Board.from_fen("k7/8/8/8/8/7B/8/K7")
    # Raw +9 from h3 would land on a5, +7 never leaves the diagonal
    assert from_square(b, "h3") == ["h3g4", "h3f5", "h3e6", "h3d7", "h3c8", "h3g2", "h3f1"]


def test_bishop_blocked_immediately_by_friendly() -> None:
    b = Board.startpos()
    assert from_square(b, "c1") == []
    assert from_square(b, "f1") == []


def test_queen_on_open_board() -> None:
    b = Board.from_fen("k7/8/8/8/3Q4/8/8/7K")
    assert len(from_square(b, "d4")) == 27


def test_queen_captures_first_enemy_on_each_ray() -> None:
    b = Board.from_fen("k2r4/8/5n2/8/1p1Q4/8/8/7K")
    ms = from_square(b, "d4")
    assert {"d4d8", "d4f6", "d4b4"}.issubset(ms)
    assert "d4a4" not in ms
    assert "d4g7" not in ms
    # Ray order: orthogonals before diagonals
    assert ms.index("d4d8") < ms.index("d4f6")
