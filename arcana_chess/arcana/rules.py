from __future__ import annotations

from typing import Iterable, Optional, Set, Dict, TYPE_CHECKING

from ..core.moves import CastleMove, EnPassantMove, Move
from ..core.rules import FilterRule, Rule
from ..core.types import Color, sq_name
from .geometry import adjacent_squares, chebyshev
from .moves import ArcanaMove, arcana_moves
from .state import EffectState

if TYPE_CHECKING:
    from ..core.game import Game


def captured_square(move: Move) -> int:
    if isinstance(move, EnPassantMove):
        return move.captured_sq
    if isinstance(move, ArcanaMove):
        return move.capture_square()
    return move.to_sq


def capture_blocked(game: "Game", state: EffectState, square: str) -> Optional[str]:
    """Name of the effect that stops the piece on `square` being captured, if any."""
    piece = game.get(square)
    if piece is None:
        return None
    if piece.kind == "k":
        return "king"
    if state.is_sanctuary(square):
        return "sanctuary"
    shield = state.pawn_shield[piece.color]
    if shield is not None and shield.square == square:
        return "pawn_shield"
    if state.has_squire_support(square, piece.color):
        return "squire_support"
    if state.iron_fortress[piece.color] and piece.kind == "p":
        return "iron_fortress"
    blessing = state.bishops_blessing[piece.color]
    if blessing is not None and (square == blessing.square or square in adjacent_squares(blessing.square)):
        return "bishops_blessing"
    return None


class ArcanaMovesRule(Rule):
    """Adds the moves granted by active effects to the standard ones."""

    def apply(self, game, color: Color, moves: Iterable[Move]) -> Iterable[Move]:
        base = list(moves)
        yield from base

        reached: Dict[int, Set[int]] = {}
        for m in base:
            reached.setdefault(m.from_sq, set()).add(m.to_sq)
        for p in game.board.pieces_of(color):
            yield from arcana_moves(game, p.square, color, game.effects, exclude=reached.get(p.pos))


class CastleBreakerRule(FilterRule):
    def keep(self, game, color: Color, move: Move) -> bool:
        return not (isinstance(move, CastleMove) and game.effects.castle_broken[color] > 0)


class CaptureProtectionRule(FilterRule):
    """Drops captures of protected pieces (shields, sanctuaries, blessings...)."""

    def keep(self, game, color: Color, move: Move) -> bool:
        if not move.is_capture(game):
            return True
        return capture_blocked(game, game.effects, sq_name(captured_square(move))) is None


class StrikeFollowupRule(FilterRule):
    """While a strike follow-up is pending, only non-adjacent captures are legal."""

    def keep(self, game, color: Color, move: Move) -> bool:
        strike = game.effects.strike_for(color)
        first = strike.first_kill_square if strike is not None else None
        if first is None:
            return True
        return move.is_capture(game) and chebyshev(sq_name(captured_square(move)), first) > 1
