from __future__ import annotations

from typing import Iterator, List, Optional

from ..core.types import file_of, rank_of, in_bounds, sq, sq_name, parse_square

def adjacent_squares(square: str) -> List[str]:
    """8-neighbourhood in scan order: file delta -1..1, then rank delta -1..1."""
    s = parse_square(square)
    f0, r0 = file_of(s), rank_of(s)
    out = []
    for df in (-1, 0, 1):
        for dr in (-1, 0, 1):
            if df == 0 and dr == 0:
                continue
            f, r = f0 + df, r0 + dr
            if in_bounds(f, r):
                out.append(sq_name(sq(f, r)))
    return out

def chebyshev(a: str, b: str) -> int:
    sa, sb = parse_square(a), parse_square(b)
    return max(abs(file_of(sa) - file_of(sb)), abs(rank_of(sa) - rank_of(sb)))

def is_promotion_rank(square: str) -> bool:
    return rank_of(parse_square(square)) in (0, 7)

def _toward(value: int, low: int, high: int) -> int:
    if value < low:
        return value + 1
    if value > high:
        return value - 1
    return value

def push_destination(game, square: str) -> Optional[str]:
    """Where Soft Push would move the piece on `square`, ignoring occupancy.

    None when the square is empty, the piece is already centred, or a pawn
    would reach its last rank.
    """
    piece = game.get(square)
    if piece is None:
        return None
    s = parse_square(square)
    f0, r0 = file_of(s), rank_of(s)
    if piece.kind == "p":
        f, r = f0, r0 + piece.color.forward
        if not in_bounds(f, r) or r in (0, 7):
            return None
    else:
        # centre files d/e and centre ranks 4/5, one step per axis
        f, r = _toward(f0, 3, 4), _toward(r0, 3, 4)
        if (f, r) == (f0, r0):
            return None
    return sq_name(sq(f, r))

def free_push_destination(game, square: str) -> Optional[str]:
    dest = push_destination(game, square)
    if dest is None or game.get(dest) is not None:
        return None
    return dest

def scan_rank(rank: int) -> Iterator[str]:
    for f in range(8):
        yield sq_name(sq(f, rank))

def first_free_on_rank(game, rank: int) -> Optional[str]:
    return next((s for s in scan_rank(rank) if game.get(s) is None), None)
