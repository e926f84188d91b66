from __future__ import annotations

from typing import Iterable, Protocol, TYPE_CHECKING

from .types import Color

if TYPE_CHECKING:
    from .moves import Move
    from .game import Game

class Rule(Protocol):
    """One stage of the legal-move pipeline.

    `Game.apply_rules` chains the stages in order, each consuming the moves the
    previous one yielded. A stage may add moves (granted by arcana) or drop them.
    """
    def apply(self, game: "Game", color: Color, moves: Iterable["Move"]) -> Iterable["Move"]:
        ...

class FilterRule:
    """A stage that only drops moves; subclasses decide per move."""
    def keep(self, game: "Game", color: Color, move: "Move") -> bool:
        raise NotImplementedError

    def apply(self, game: "Game", color: Color, moves: Iterable["Move"]) -> Iterable["Move"]:
        for m in moves:
            if self.keep(game, color, m):
                yield m

class KingSafetyRule(FilterRule):
    """Reject any move that leaves your own king in check. Uses quiet simulation."""
    def keep(self, game: "Game", color: Color, move: "Move") -> bool:
        game.push_quiet(move)
        illegal = game.in_check(color)
        game.pop_quiet()
        return not illegal
