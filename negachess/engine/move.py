from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Move:
    """Engine-internal move representation.

    Attributes:
        from_sq (int): Origin square index (0-based).
        to_sq (int): Destination square index (0-based).

    The piece a move captures is not stored here: ``Board.make_move`` returns
    it and ``Board.unmake_move`` takes it back.
    """

    from_sq: int
    to_sq: int

    def is_null(self) -> bool:
        return self.from_sq < 0 or self.to_sq < 0

    def to_uci(self) -> str:
        """Serialize the move into long algebraic UCI form.

        Returns:
            str: Move encoded like ``"e2e4"``, or ``"0000"`` for ``NO_MOVE``.
        """
        if self.is_null():
            return "0000"
        return square_to_str(self.from_sq) + square_to_str(self.to_sq)


# Returned by search when the side to move has nothing to play
NO_MOVE = Move(-1, -1)


def parse_uci(uci: str) -> Move:
    """Parse a UCI move string.

    Args:
        uci (str): Move encoded in long algebraic notation (e.g. ``"e2e4"``).

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the string is not four characters of two valid squares.
            Promotion suffixes are rejected since pawns never promote.
    """
    if len(uci) != 4:
        raise ValueError(f"invalid UCI move length: {uci!r}")
    return Move(str_to_square(uci[0:2]), str_to_square(uci[2:4]))


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = int(s[1]) - 1
    return rank * 8 + file


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    file = idx % 8
    rank = idx // 8
    return chr(ord("a") + file) + str(rank + 1)
