from __future__ import annotations

from enum import Enum

class Color(str, Enum):
    WHITE = "w"
    BLACK = "b"

    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        return 1 if self is Color.WHITE else -1

    @property
    def back_rank(self) -> int:
        return 0 if self is Color.WHITE else 7

    @property
    def pawn_rank(self) -> int:
        return 1 if self is Color.WHITE else 6

FILES = "abcdefgh"

def sq(file: int, rank: int) -> int:
    return rank * 8 + file

def file_of(s: int) -> int:
    return s % 8

def rank_of(s: int) -> int:
    return s // 8

def in_bounds(file: int, rank: int) -> bool:
    return 0 <= file < 8 and 0 <= rank < 8

def sq_name(s: int) -> str:
    return f"{FILES[file_of(s)]}{rank_of(s) + 1}"

def parse_square(name: str) -> int:
    """Algebraic square name -> 0..63. Raises ValueError on anything else."""
    if not isinstance(name, str):
        raise ValueError(f"Bad square: {name!r}")
    a = name.strip().lower()
    if len(a) != 2 or a[0] not in FILES or a[1] not in "12345678":
        raise ValueError(f"Bad square: {name!r}")
    return sq(FILES.index(a[0]), int(a[1]) - 1)

def is_square_name(name: object) -> bool:
    try:
        parse_square(name)  # type: ignore[arg-type]
    except ValueError:
        return False
    return True

ALL_SQUARES = tuple(sq_name(s) for s in range(64))
