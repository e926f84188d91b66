from __future__ import annotations

from .types import Color, sq
from .pieces import make_piece

BACK_RANK = "rnbqkbnr"

def setup_standard(game) -> None:
    for color in (Color.WHITE, Color.BLACK):
        for f, kind in enumerate(BACK_RANK):
            game.board.add_piece(make_piece(kind, color, sq(f, color.back_rank)))
        for f in range(8):
            game.board.add_piece(make_piece("p", color, sq(f, color.pawn_rank)))

def ascii_board(game) -> str:
    rows = []
    for r in range(7, -1, -1):
        row = []
        for f in range(8):
            p = game.board.piece_at(sq(f, r))
            row.append(p.symbol if p else ".")
        rows.append(f"{r + 1} " + " ".join(row))
    rows.append("  a b c d e f g h")
    return "\n".join(rows)
