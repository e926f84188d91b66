from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..core.types import Color
from .state import EffectState, MirrorImage, Poison

LOGGER = logging.getLogger("arcana.lifecycle")

# granted for the holder's own next action; gone once that turn completes
OWN_TURN_FLAGS = (
    "pawn_rush", "spectral_march", "phantom_step", "sharpshooter", "poison_touch",
    "focus_fire", "chain_lightning", "en_passant_master", "vision",
)
OWN_TURN_RECORDS = ("knight_of_storms", "temporal_echo", "double_strike", "berserker_rage")

# held by the caster, expiring after the enemy's next turn
ENEMY_TURN_FLAGS = ("iron_fortress", "fog_of_war")
ENEMY_TURN_RECORDS = ("pawn_shield", "bishops_blessing")


@dataclass
class TurnReport:
    expired: List[Any] = field(default_factory=list)
    poison_expired: List[Poison] = field(default_factory=list)
    mirror_expired: List[MirrorImage] = field(default_factory=list)
    skipped_color: Optional[Color] = None


def _tick(records: list, owned, report: TurnReport) -> list:
    kept = []
    for rec in records:
        if owned(rec):
            rec.turns_left -= 1
            if rec.turns_left <= 0:
                report.expired.append(rec)
                continue
        kept.append(rec)
    return kept


def advance_turn(state: EffectState, color_who_just_moved: Color) -> TurnReport:
    """Run the turn-boundary bookkeeping once `color_who_just_moved` has finished.

    Records cast by the other colour count down (their protection or hazard
    has now lasted through one of this colour's turns), this colour's
    own-turn grants are cleared, and a pending freeze on the other colour is
    consumed. The board is never touched; callers act on the report.
    """
    mover = color_who_just_moved
    caster = mover.opponent()
    report = TurnReport()

    for attr in ENEMY_TURN_RECORDS:
        rec = getattr(state, attr)[caster]
        if rec is not None:
            rec.turns_left -= 1
            if rec.turns_left <= 0:
                getattr(state, attr)[caster] = None
                report.expired.append(rec)
    for attr in ENEMY_TURN_FLAGS:
        getattr(state, attr)[caster] = False

    state.squire_support = _tick(state.squire_support, lambda s: s.color is caster, report)
    state.sanctuaries = _tick(state.sanctuaries, lambda s: s.color is caster, report)
    state.cursed_squares = _tick(state.cursed_squares, lambda c: c.setter_color is caster, report)

    before = len(report.expired)
    state.poisoned_pieces = _tick(state.poisoned_pieces, lambda p: p.poisoned_by is caster, report)
    report.poison_expired = report.expired[before:]

    before = len(report.expired)
    state.mirror_images = _tick(state.mirror_images, lambda m: m.color is caster, report)
    report.mirror_expired = report.expired[before:]

    if state.castle_broken[mover] > 0:
        state.castle_broken[mover] -= 1

    for attr in OWN_TURN_FLAGS:
        getattr(state, attr)[mover] = False
    for attr in OWN_TURN_RECORDS:
        rec = getattr(state, attr)[mover]
        if rec is not None:
            rec.turns_left -= 1
            if rec.turns_left <= 0:
                getattr(state, attr)[mover] = None
                report.expired.append(rec)

    if state.time_frozen[caster]:
        state.time_frozen[caster] = False
        report.skipped_color = caster

    if report.expired or report.skipped_color is not None:
        LOGGER.debug(
            "arcana_turn_advanced",
            extra={"mover": mover.value, "expired": len(report.expired), "skipped": report.skipped_color},
        )
    return report
