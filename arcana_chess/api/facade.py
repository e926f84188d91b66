from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..config import ArcanaConfig
from ..fen import parse_fen
from ..arcana.catalog import parse_card_id
from ..arcana.game import ArcanaGame
from ..arcana.targeting import valid_targets

from .serde import dict_to_move, move_to_dict, outcome_to_dict, parse_action, parse_color, snapshot

LOGGER = logging.getLogger("arcana.api.facade")


def _index_by_uid(snap: Dict[str, Any]) -> Dict[int, Dict[str, Any]]:
    return {int(p["uid"]): p for p in snap.get("pieces", [])}


def diff(before: Dict[str, Any], after: Dict[str, Any]) -> Dict[str, Any]:
    """Compute an animation-friendly diff between two snapshots."""
    b = _index_by_uid(before)
    a = _index_by_uid(after)

    moved: List[Dict[str, Any]] = []
    kind_changed: List[Dict[str, Any]] = []

    for uid in sorted(a.keys() & b.keys()):
        bp = b[uid]
        ap = a[uid]
        if bp["square"] != ap["square"]:
            moved.append({"uid": uid, "from": bp["square"], "to": ap["square"], "kind": ap["kind"], "color": ap["color"]})
        if bp["kind"] != ap["kind"] or bp["color"] != ap["color"]:
            kind_changed.append({
                "uid": uid,
                "square": ap["square"],
                "before": {"kind": bp["kind"], "color": bp["color"]},
                "after": {"kind": ap["kind"], "color": ap["color"]},
            })

    return {
        "added": [a[uid] for uid in sorted(a.keys() - b.keys())],
        "removed": [b[uid] for uid in sorted(b.keys() - a.keys())],
        "moved": moved,
        "kind_changed": kind_changed,
        "side_to_move": after.get("side_to_move"),
    }


class ArcanaEngine:
    """A small, stable facade for UI/server integration.

    - every call returns JSON-friendly dicts
    - mutating calls return before/after snapshots plus a diff for animation
    """

    def __init__(self, config: Optional[ArcanaConfig] = None, rng_seed: Optional[int] = None) -> None:
        self.config = config if config is not None else ArcanaConfig()
        self.game = ArcanaGame(config=self.config, rng_seed=rng_seed)

    @classmethod
    def standard_game(cls, config: Optional[ArcanaConfig] = None, rng_seed: Optional[int] = None) -> "ArcanaEngine":
        eng = cls(config, rng_seed)
        eng.game.setup_standard()
        return eng

    @classmethod
    def from_fen(cls, fen: str, config: Optional[ArcanaConfig] = None, rng_seed: Optional[int] = None) -> "ArcanaEngine":
        eng = cls(config, rng_seed)
        parse_fen(fen, eng.game)
        return eng

    def state(self) -> Dict[str, Any]:
        return snapshot(self.game)

    def targets(self, card_id: Any, color: Optional[str] = None) -> List[str]:
        c = self.game.side_to_move if color is None else parse_color(color)
        return sorted(valid_targets(self.game, parse_card_id(card_id), c, self.game.effects))

    def destinations(self, square: str) -> List[str]:
        return sorted(self.game.legal_destinations(square))

    def legal_moves(self) -> List[Dict[str, Any]]:
        return [move_to_dict(m) for m in self.game.legal_moves(self.game.side_to_move)]

    def use_arcana(self, request: Mapping[str, Any]) -> Dict[str, Any]:
        """Apply every card of a `useArcana` request in order.

        Cards after the first failed one are not attempted.
        """
        actions = parse_action(request)
        color = parse_color(request["color"]) if request.get("color") is not None else self.game.side_to_move

        before = snapshot(self.game)
        outcomes: List[Dict[str, Any]] = []
        effects: List[Dict[str, Any]] = []
        for card_id, params in actions:
            outcome = self.game.use_arcana(card_id, params, color)
            outcomes.append(outcome_to_dict(outcome))
            effects.extend(dict(e) for e in self.game.transient_effects)
            if not outcome.success:
                LOGGER.info("use_arcana_stopped", extra={"card_id": card_id.value, "reason": outcome.message})
                break

        after = snapshot(self.game)
        return {"before": before, "after": after, "diff": diff(before, after), "outcomes": outcomes, "effects": effects}

    def apply(self, move: Mapping[str, Any]) -> Dict[str, Any]:
        before = snapshot(self.game)
        m = dict_to_move(move)
        self.game.push_checked(m)
        after = snapshot(self.game)
        return {
            "before": before,
            "after": after,
            "diff": diff(before, after),
            "meta": {
                "applied": move_to_dict(m),
                "effects": [dict(e) for e in self.game.transient_effects],
                "check": after["check"],
                "checkmate": after["checkmate"],
            },
        }

    def undo(self) -> Dict[str, Any]:
        if not self.game._stack:
            raise ValueError("Nothing to undo")
        before = snapshot(self.game)
        undone = self.game.last_move
        self.game.pop()
        after = snapshot(self.game)
        return {
            "before": before,
            "after": after,
            "diff": diff(before, after),
            "meta": {"undone": move_to_dict(undone) if undone is not None else None},
        }
