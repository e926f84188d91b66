from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Set, TYPE_CHECKING

from ..core.types import ALL_SQUARES, Color, is_square_name
from .catalog import CARD_DEFS, CardId, TargetKind
from .errors import require_exhaustive
from .geometry import free_push_destination
from .state import EffectState

if TYPE_CHECKING:
    from ..core.piece import Piece
    from .adapter import ChessRules

LOGGER = logging.getLogger("arcana.targeting")

Predicate = Callable[["ChessRules", str, Optional["Piece"], Color, EffectState], bool]


def _own(piece, color) -> bool:
    return piece is not None and piece.color is color

def _enemy(piece, color) -> bool:
    return piece is not None and piece.color is not color


PREDICATES: Dict[TargetKind, Predicate] = {
    TargetKind.OWN_PAWN: lambda g, s, p, c, st: _own(p, c) and p.kind == "p",
    TargetKind.OWN_PIECE: lambda g, s, p, c, st: _own(p, c),
    TargetKind.OWN_PIECE_EXCEPT_KING: lambda g, s, p, c, st: _own(p, c) and p.kind != "k",
    TargetKind.OWN_PIECE_EXCEPT_QUEEN_OR_KING: lambda g, s, p, c, st: _own(p, c) and p.kind not in ("q", "k"),
    TargetKind.OWN_PIECE_WITH_LEGAL_MOVES: lambda g, s, p, c, st: _own(p, c) and bool(g.moves_for(s)),
    TargetKind.OWN_PIECE_WITH_PUSH_DESTINATION: lambda g, s, p, c, st: _own(p, c) and free_push_destination(g, s) is not None,
    TargetKind.OWN_KNIGHT: lambda g, s, p, c, st: _own(p, c) and p.kind == "n",
    TargetKind.OWN_BISHOP: lambda g, s, p, c, st: _own(p, c) and p.kind == "b",
    TargetKind.ENEMY_PIECE_EXCEPT_KING: lambda g, s, p, c, st: _enemy(p, c) and p.kind != "k",
    TargetKind.ENEMY_ROOK: lambda g, s, p, c, st: _enemy(p, c) and p.kind == "r",
    TargetKind.POISONED_PIECE: lambda g, s, p, c, st: p is not None and st.poison_at(s) is not None,
    TargetKind.ANY_SQUARE: lambda g, s, p, c, st: True,
}

require_exhaustive(PREDICATES, TargetKind, "target predicate")


def target_kind_of(card_id) -> Optional[TargetKind]:
    """TargetKind a card needs, or None for untargeted (and unknown) cards."""
    try:
        cid = CardId(card_id)
    except ValueError:
        LOGGER.warning("unknown_card_target_lookup", extra={"card_id": str(card_id)})
        return None
    return CARD_DEFS[cid].target_kind


def _matches(game: "ChessRules", kind: TargetKind, square: str, color: Color, state: EffectState) -> bool:
    return PREDICATES[kind](game, square, game.get(square), color, state)


def valid_targets(game: "ChessRules", card_id, acting_color: Color, state: EffectState) -> Set[str]:
    kind = target_kind_of(card_id)
    if kind is None:
        return set()
    return {s for s in ALL_SQUARES if _matches(game, kind, s, acting_color, state)}


def is_valid_target(game: "ChessRules", card_id, square, acting_color: Color, state: EffectState) -> bool:
    kind = target_kind_of(card_id)
    if kind is None or not is_square_name(square):
        return False
    return _matches(game, kind, square.strip().lower(), acting_color, state)
