from __future__ import annotations

from typing import Dict, Type

from .piece import Piece
from .types import Color
from .abilities import StepAbility, SlideAbility, PawnAbility, CastleAbility, KING8, ORTH, DIAG, KNIGHT_DELTAS

class King(Piece):
    def __init__(self, color: Color, pos: int) -> None:
        super().__init__(color, pos, "k", (StepAbility(KING8), CastleAbility()))

class Queen(Piece):
    def __init__(self, color: Color, pos: int) -> None:
        super().__init__(color, pos, "q", (SlideAbility(KING8),))

class Rook(Piece):
    def __init__(self, color: Color, pos: int) -> None:
        super().__init__(color, pos, "r", (SlideAbility(ORTH),))

class Bishop(Piece):
    def __init__(self, color: Color, pos: int) -> None:
        super().__init__(color, pos, "b", (SlideAbility(DIAG),))

class Knight(Piece):
    def __init__(self, color: Color, pos: int) -> None:
        super().__init__(color, pos, "n", (StepAbility(KNIGHT_DELTAS),))

class Pawn(Piece):
    def __init__(self, color: Color, pos: int) -> None:
        super().__init__(color, pos, "p", (PawnAbility(),))

PIECE_CLASSES: Dict[str, Type[Piece]] = {
    "p": Pawn,
    "n": Knight,
    "b": Bishop,
    "r": Rook,
    "q": Queen,
    "k": King,
}

def make_piece(kind: str, color: Color, pos: int = 0) -> Piece:
    cls = PIECE_CLASSES.get(kind.lower()) if isinstance(kind, str) else None
    if cls is None:
        raise ValueError(f"Unknown piece kind: {kind!r}")
    return cls(color, pos)
