from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Tuple, TYPE_CHECKING

from .types import Color, sq_name

if TYPE_CHECKING:
    from .abilities import Ability
    from .game import Game
    from .moves import Move

_UID = 1

def _next_uid() -> int:
    global _UID
    uid = _UID
    _UID += 1
    return uid

@dataclass(eq=False)
class Piece:
    color: Color
    pos: int
    kind: str
    abilities: Tuple["Ability", ...]
    has_moved: bool = False
    uid: int = field(default_factory=_next_uid)

    @property
    def symbol(self) -> str:
        return self.kind.upper() if self.color is Color.WHITE else self.kind

    @property
    def square(self) -> str:
        return sq_name(self.pos)

    def pseudo_legal_moves(self, game: "Game") -> Iterable["Move"]:
        for ab in self.abilities:
            yield from ab.generate_moves(self, game)

    def attacks(self, game: "Game") -> Iterable[int]:
        for ab in self.abilities:
            yield from ab.generate_attacks(self, game)
