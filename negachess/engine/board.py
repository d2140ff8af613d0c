from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .move import Move, str_to_square


STARTPOS_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

# Piece kinds; values double as the low bits of the legacy numeric tag
PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING = range(1, 7)
KINDS = (PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING)
WHITE, BLACK = "w", "b"

BLACK_TAG_OFFSET = 128

KIND_TO_CHAR = {PAWN: "p", KNIGHT: "n", BISHOP: "b", ROOK: "r", QUEEN: "q", KING: "k"}
CHAR_TO_KIND = {v: k for k, v in KIND_TO_CHAR.items()}

# Offsets scanned in this exact order; it decides search tie-breaks
KNIGHT_OFFSETS = (17, 15, 10, 6, -6, -10, -15, -17)
KING_OFFSETS = (1, -1, 8, -8, 9, 7, -9, -7)

# Ray directions as (file delta, rank delta)
BISHOP_DIRS = ((1, 1), (-1, 1), (1, -1), (-1, -1))
ROOK_DIRS = ((0, 1), (0, -1), (1, 0), (-1, 0))
QUEEN_DIRS = ROOK_DIRS + BISHOP_DIRS
SLIDER_DIRS = {BISHOP: BISHOP_DIRS, ROOK: ROOK_DIRS, QUEEN: QUEEN_DIRS}


@dataclass(frozen=True)
class Piece:
    """Piece descriptor: colour (``"w"``/``"b"``) and kind (``PAWN``..``KING``)."""

    color: str
    kind: int

    @property
    def is_white(self) -> bool:
        return self.color == WHITE

    @property
    def tag(self) -> int:
        """Legacy numeric encoding: white 1..6, black 129..134."""
        return self.kind + (0 if self.is_white else BLACK_TAG_OFFSET)

    @classmethod
    def from_tag(cls, tag: int) -> "Piece":
        kind = tag % BLACK_TAG_OFFSET
        if kind not in KINDS:
            raise ValueError(f"invalid piece tag: {tag}")
        return PIECES[(BLACK if tag >= BLACK_TAG_OFFSET else WHITE, kind)]

    @classmethod
    def from_char(cls, ch: str) -> "Piece":
        """Decode a piece letter; uppercase is White, lowercase is Black.

        Raises:
            ValueError: If ``ch`` is not one of ``pnbrqk`` in either case.
        """
        kind = CHAR_TO_KIND.get(ch.lower()) if len(ch) == 1 else None
        if kind is None:
            raise ValueError(f"invalid piece letter: {ch!r}")
        return PIECES[(WHITE if ch.isupper() else BLACK, kind)]

    def to_char(self) -> str:
        ch = KIND_TO_CHAR[self.kind]
        return ch.upper() if self.is_white else ch


# Shared instances; cells hold these rather than fresh objects
PIECES: Dict[Tuple[str, int], Piece] = {
    (color, kind): Piece(color, kind) for color in (WHITE, BLACK) for kind in KINDS
}


def _opponent(color: str) -> str:
    return BLACK if color == WHITE else WHITE


@dataclass
class Board:
    """Array board: 64 cells plus side to move.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), ``index = rank * 8 + file`` with
      rank 0 being White's first rank.
    - Each cell is ``None`` or a :class:`Piece`.
    - The same instance is mutated in place by ``make_move``/``unmake_move``
      throughout a search; no history is kept here.
    """

    cells: List[Optional[Piece]] = field(default_factory=lambda: [None] * 64)
    side_to_move: str = WHITE

    def __post_init__(self) -> None:
        if len(self.cells) != 64:
            raise ValueError("board must have 64 cells")
        if self.side_to_move not in (WHITE, BLACK):
            raise ValueError("side to move must be 'w' or 'b'")

    @classmethod
    def empty(cls, side_to_move: str = WHITE) -> "Board":
        return cls(side_to_move=side_to_move)

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board initialized to the standard chess starting position."""
        return cls.from_fen(STARTPOS_PLACEMENT)

    @classmethod
    def from_fen(cls, fen: str, side_to_move: str = WHITE) -> "Board":
        """Create a board from the piece-placement field of a FEN string.

        Args:
            fen (str): FEN string or bare placement field. Only the first
                whitespace-separated field is read; active colour, castling,
                en passant and move counters are ignored.
            side_to_move (str): ``"w"`` or ``"b"``.

        Returns:
            Board: Board holding the described placement.

        Raises:
            ValueError: If ``fen`` is empty, does not have 8 ranks, contains an
                unknown piece letter, a rank that does not sum to 8 squares,
                or more than one king per colour.
        """
        if not fen or not isinstance(fen, str) or not fen.strip():
            raise ValueError("FEN must be a non-empty string")
        placement = fen.strip().split()[0]

        ranks = placement.split("/")
        if len(ranks) != 8:
            raise ValueError("FEN board must have 8 ranks")
        cells: List[Optional[Piece]] = [None] * 64
        for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
            file_idx = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in FEN rank")
                    file_idx += n
                else:
                    piece = Piece.from_char(ch)
                    if file_idx >= 8:
                        raise ValueError("too many squares in FEN rank")
                    cells[rank_idx * 8 + file_idx] = piece
                    file_idx += 1
            if file_idx != 8:
                raise ValueError("rank does not sum to 8 squares in FEN")

        board = cls(cells=cells, side_to_move=side_to_move)
        board._check_kings()
        return board

    @classmethod
    def from_pieces(
        cls,
        pieces: Mapping[Union[int, str], Union[Piece, str]],
        side_to_move: str = WHITE,
    ) -> "Board":
        """Materialize a board from a square -> piece mapping.

        Keys are square indices or algebraic names (``"e1"``); values are
        :class:`Piece` instances or piece letters (``"K"``, ``"p"``).
        """
        cells: List[Optional[Piece]] = [None] * 64
        for key, value in pieces.items():
            sq = str_to_square(key) if isinstance(key, str) else key
            if sq < 0 or sq > 63:
                raise ValueError(f"invalid square index: {sq}")
            cells[sq] = Piece.from_char(value) if isinstance(value, str) else value
        board = cls(cells=cells, side_to_move=side_to_move)
        board._check_kings()
        return board

    @classmethod
    def from_state_string(cls, state: str, side_to_move: str = WHITE) -> "Board":
        """Restore a board from the 64-character debug snapshot.

        Cells are read rank 8 first down to rank 1, files a..h within a rank.
        ``'0'`` is empty; any other digit ``d`` places a pawn for player
        ``d - 1`` (0 = White, 1 = Black). Piece letters as written by
        :meth:`to_state_string` are accepted as well.

        Raises:
            ValueError: If the string is not 64 characters long or holds a
                player digit other than 1 or 2, or an unknown letter.
        """
        if len(state) != 64:
            raise ValueError("state string must have 64 characters")
        cells: List[Optional[Piece]] = [None] * 64
        for i, ch in enumerate(state):
            row, file_idx = divmod(i, 8)
            sq = (7 - row) * 8 + file_idx
            if ch.isdigit():
                player = int(ch)
                if player == 0:
                    continue
                if player > 2:
                    raise ValueError(f"invalid player number in state string: {ch!r}")
                cells[sq] = PIECES[(WHITE if player == 1 else BLACK, PAWN)]
            else:
                cells[sq] = Piece.from_char(ch)
        return cls(cells=cells, side_to_move=side_to_move)

    def _check_kings(self) -> None:
        for color in (WHITE, BLACK):
            kings = sum(1 for p in self.cells if p is not None and p.color == color and p.kind == KING)
            if kings > 1:
                raise ValueError(f"more than one king for side {color!r}")

    def to_fen(self) -> str:
        """Serialize the piece placement field (rank 8 first).

        Returns:
            str: Placement such as ``"rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"``.
        """
        ranks_str: List[str] = []
        for rank_idx in range(7, -1, -1):  # 7..0 maps to ranks 8..1
            run = 0
            row = []
            for file_idx in range(8):
                piece = self.cells[rank_idx * 8 + file_idx]
                if piece is None:
                    run += 1
                else:
                    if run > 0:
                        row.append(str(run))
                        run = 0
                    row.append(piece.to_char())
            if run > 0:
                row.append(str(run))
            ranks_str.append("".join(row))
        return "/".join(ranks_str)

    def to_state_string(self) -> str:
        """Serialize the 64-character snapshot (``'0'`` empty, else piece letter)."""
        out = []
        for rank_idx in range(7, -1, -1):
            for file_idx in range(8):
                piece = self.cells[rank_idx * 8 + file_idx]
                out.append("0" if piece is None else piece.to_char())
        return "".join(out)

    def piece_at(self, sq: int) -> Optional[Piece]:
        return self.cells[sq]

    def pieces(self) -> Iterator[Tuple[int, Piece]]:
        for sq, piece in enumerate(self.cells):
            if piece is not None:
                yield sq, piece

    def copy(self) -> "Board":
        return Board(cells=list(self.cells), side_to_move=self.side_to_move)

    def generate_moves(self) -> List[Move]:
        """Return pseudo-legal moves for the side to move.

        Returns:
            List[Move]: Moves in board-scan order (ascending source square),
                then in each piece's fixed offset/direction order.

        Notes:
            King safety is not checked; castling, en passant and promotion
            are not generated. A pawn on its last rank simply has no pushes.
        """
        moves: List[Move] = []
        cells = self.cells
        stm = self.side_to_move
        is_white = stm == WHITE

        for from_sq, piece in enumerate(cells):
            if piece is None or piece.color != stm:
                continue
            kind = piece.kind
            f = from_sq % 8
            r = from_sq // 8

            if kind == PAWN:
                step, start_rank = (8, 1) if is_white else (-8, 6)
                to_sq = from_sq + step
                if 0 <= to_sq <= 63 and cells[to_sq] is None:
                    moves.append(Move(from_sq, to_sq))
                    if r == start_rank:
                        to2 = from_sq + 2 * step
                        if cells[to2] is None:
                            moves.append(Move(from_sq, to2))
                # Left capture first, then right
                left, right = (7, 9) if is_white else (-9, -7)
                if f > 0:
                    self._add_pawn_capture(moves, from_sq, from_sq + left, stm)
                if f < 7:
                    self._add_pawn_capture(moves, from_sq, from_sq + right, stm)

            elif kind == KNIGHT or kind == KING:
                offsets, max_df = (KNIGHT_OFFSETS, 2) if kind == KNIGHT else (KING_OFFSETS, 1)
                for off in offsets:
                    to_sq = from_sq + off
                    if to_sq < 0 or to_sq > 63:
                        continue
                    # Index arithmetic wrapped across a rank edge
                    if abs(f - to_sq % 8) > max_df:
                        continue
                    target = cells[to_sq]
                    if target is not None and target.color == stm:
                        continue
                    moves.append(Move(from_sq, to_sq))

            else:
                for df, dr in SLIDER_DIRS[kind]:
                    tf, tr = f, r
                    while True:
                        tf += df
                        tr += dr
                        if not (0 <= tf < 8 and 0 <= tr < 8):
                            break
                        to_sq = tr * 8 + tf
                        target = cells[to_sq]
                        if target is None:
                            moves.append(Move(from_sq, to_sq))
                            continue
                        if target.color != stm:
                            moves.append(Move(from_sq, to_sq))
                        break
        return moves

    def _add_pawn_capture(self, moves: List[Move], from_sq: int, to_sq: int, stm: str) -> None:
        if 0 <= to_sq <= 63:
            target = self.cells[to_sq]
            if target is not None and target.color != stm:
                moves.append(Move(from_sq, to_sq))

    def is_pseudo_legal(self, move: Move) -> bool:
        """Return True if ``(from_sq, to_sq)`` is among the generated moves."""
        return any(m.from_sq == move.from_sq and m.to_sq == move.to_sq for m in self.generate_moves())

    def make_move(self, move: Move) -> Optional[Piece]:
        """Apply ``move`` in place and return the piece it displaced.

        The move is not checked against the generator; only its indices are
        bounds-checked.

        Returns:
            Optional[Piece]: Piece that occupied ``move.to_sq`` (``None`` if
                the destination was empty). Pass it back to ``unmake_move``.

        Raises:
            ValueError: If either square is outside 0..63 (e.g. ``NO_MOVE``).
        """
        from_sq, to_sq = move.from_sq, move.to_sq
        if not (0 <= from_sq <= 63 and 0 <= to_sq <= 63):
            raise ValueError(f"move squares out of range: {from_sq}->{to_sq}")
        cells = self.cells
        captured = cells[to_sq]
        cells[to_sq] = cells[from_sq]
        cells[from_sq] = None
        self.side_to_move = _opponent(self.side_to_move)
        return captured

    def unmake_move(self, move: Move, captured: Optional[Piece]) -> None:
        """Revert ``make_move(move)``, restoring ``captured`` on the destination."""
        from_sq, to_sq = move.from_sq, move.to_sq
        if not (0 <= from_sq <= 63 and 0 <= to_sq <= 63):
            raise ValueError(f"move squares out of range: {from_sq}->{to_sq}")
        cells = self.cells
        cells[from_sq] = cells[to_sq]
        cells[to_sq] = captured
        self.side_to_move = _opponent(self.side_to_move)
