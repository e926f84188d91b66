from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Tuple, Type

from ..core import pieces as core_pieces
from ..core.moves import CastleMove, EnPassantMove, Move, NormalMove, PromotionMove
from ..core.types import Color, parse_square, sq_name
from ..fen import game_to_fen
from ..arcana.catalog import CardId, parse_card_id
from ..arcana.effects import ArcanaParams, EffectOutcome
from ..arcana.moves import ArcanaMove


LOGGER = logging.getLogger("arcana.api.serde")

ACTION_USE_ARCANA = "useArcana"

_PIECE_NAME_TO_CLASS: Dict[str, Type] = {
    "Queen": core_pieces.Queen,
    "Rook": core_pieces.Rook,
    "Bishop": core_pieces.Bishop,
    "Knight": core_pieces.Knight,
}


def _color_to_str(c: Color) -> str:
    return "WHITE" if c is Color.WHITE else "BLACK"


def parse_color(value: Any) -> Color:
    """Accepts "w"/"b", "white"/"black" in any case."""
    s = str(value).strip().lower()
    if s in ("w", "white"):
        return Color.WHITE
    if s in ("b", "black"):
        return Color.BLACK
    raise ValueError(f"Bad color: {value!r}")


def move_to_dict(m: Move) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "from": sq_name(m.from_sq),
        "to": sq_name(m.to_sq),
        "flags": list(m.flags),
    }

    if isinstance(m, ArcanaMove):
        d["kind"] = "arcana"
        d["captured"] = sq_name(m.capture_square())
    elif isinstance(m, NormalMove):
        d["kind"] = "normal"
    elif isinstance(m, EnPassantMove):
        d["kind"] = "en_passant"
        d["captured"] = sq_name(m.captured_sq)
    elif isinstance(m, CastleMove):
        d["kind"] = "castle"
        d["rook_from"] = sq_name(m.rook_from)
        d["rook_to"] = sq_name(m.rook_to)
    elif isinstance(m, PromotionMove):
        d["kind"] = "promotion"
        d["promote_to"] = getattr(m.promote_to, "__name__", "Queen")
    else:
        d["kind"] = m.__class__.__name__
    return d


def dict_to_move(d: Mapping[str, Any]) -> Move:
    try:
        kind = str(d.get("kind", "normal"))
        fr = parse_square(d["from"])
        to = parse_square(d["to"])
    except KeyError as exc:
        raise ValueError(f"Move is missing {exc.args[0]!r}") from None
    flags = tuple(d.get("flags", []) or [])

    if kind == "normal":
        return NormalMove(fr, to, flags=flags)
    if kind == "en_passant":
        return EnPassantMove(fr, to, flags=flags, captured_sq=parse_square(d["captured"]))
    if kind == "castle":
        return CastleMove(fr, to, flags=flags, rook_from=parse_square(d["rook_from"]), rook_to=parse_square(d["rook_to"]))
    if kind == "promotion":
        cls = _PIECE_NAME_TO_CLASS.get(str(d.get("promote_to", "Queen")), core_pieces.Queen)
        return PromotionMove(fr, to, flags=flags, promote_to=cls)
    if kind == "arcana":
        captured = d.get("captured")
        csq = parse_square(captured) if captured is not None else -1
        return ArcanaMove(fr, to, flags=flags, captured_sq=-1 if csq == to else csq)

    LOGGER.warning("unknown_move_kind", extra={"kind": kind})
    raise ValueError(f"Unknown move kind: {kind!r}")


def outcome_to_dict(outcome: EffectOutcome) -> Dict[str, Any]:
    return outcome.to_dict()


def parse_action(request: Mapping[str, Any]) -> List[Tuple[CardId, ArcanaParams]]:
    """Validate a `useArcana` request and return its (card, params) pairs in order.

    Raises ValueError (UnknownCardError for bad ids) on anything malformed.
    """
    if not isinstance(request, Mapping):
        raise ValueError("Action request must be an object")
    if request.get("actionType") != ACTION_USE_ARCANA:
        raise ValueError(f"Unsupported actionType: {request.get('actionType')!r}")

    used = request.get("arcanaUsed")
    if not isinstance(used, list) or not used:
        raise ValueError("arcanaUsed must be a non-empty list")

    out: List[Tuple[CardId, ArcanaParams]] = []
    for i, entry in enumerate(used):
        if not isinstance(entry, Mapping) or "arcanaId" not in entry:
            raise ValueError(f"arcanaUsed[{i}] must be an object with an arcanaId")
        params = entry.get("params")
        if params is not None and not isinstance(params, Mapping):
            raise ValueError(f"arcanaUsed[{i}].params must be an object")
        out.append((parse_card_id(entry["arcanaId"]), ArcanaParams.from_dict(params)))
    return out


def snapshot(game) -> Dict[str, Any]:
    """JSON-friendly snapshot of the current match state."""

    pieces: List[Dict[str, Any]] = []
    for p in game.board.all_pieces():
        pieces.append(
            {
                "uid": p.uid,
                "color": _color_to_str(p.color),
                "kind": p.kind,
                "square": p.square,
                "has_moved": bool(p.has_moved),
                "symbol": p.symbol,
            }
        )

    out: Dict[str, Any] = {
        "side_to_move": _color_to_str(game.side_to_move),
        "last_move": move_to_dict(game.last_move) if game.last_move is not None else None,
        "pieces": sorted(pieces, key=lambda x: (x["color"], x["kind"], x["square"])),
        "ply": len(game._stack),
        "halfmove_clock": int(game.halfmove_clock),
        "fullmove_number": int(game.fullmove_number),
    }

    stm = game.side_to_move
    in_check = bool(game.in_check(stm))
    out["check"] = in_check
    out["checkmate"] = bool(in_check and not game.legal_moves(stm))

    out["fen"] = game_to_fen(game)

    if hasattr(game, "effects"):
        out["effects"] = game.effects.to_dict()
    if hasattr(game, "history"):
        out["history"] = game.history.to_dict()
    if getattr(game, "transient_effects", None):
        out["transient_effects"] = [dict(e) for e in game.transient_effects]
    return out
