from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.types import Color


def _per_color(value: Any):
    return lambda: {Color.WHITE: value, Color.BLACK: value}


class ShieldType(str, Enum):
    PAWN = "pawn"
    BEHIND = "behind"


@dataclass
class SquareTimer:
    square: str
    turns_left: int
    color: Color


@dataclass
class PawnShield:
    square: str
    turns_left: int
    shield_type: ShieldType = ShieldType.PAWN
    pawn_square: Optional[str] = None


@dataclass
class CursedSquare:
    square: str
    turns_left: int
    setter_color: Color


@dataclass
class Poison:
    square: str
    turns_left: int
    poisoned_by: Color


@dataclass
class MirrorImage:
    square: str
    kind: str
    color: Color
    turns_left: int


@dataclass
class MindControl:
    square: str
    original_color: Color
    controlling_color: Color
    kind: str


@dataclass
class EchoPattern:
    file_delta: int
    rank_delta: int
    turns_left: int = 1


@dataclass
class StrikeRecord:
    turns_left: int = 1
    first_kill_square: Optional[str] = None


@dataclass
class LastMove:
    from_square: Optional[str]
    to_square: str
    kind: str
    color: Color
    captured_kind: Optional[str] = None


@dataclass
class EffectState:
    """Every persistent arcana effect for both colours.

    Counted records carry `turns_left`; only advance_turn decrements them, and
    an entry that reaches zero is dropped in the same pass. divine_intervention
    and mind_controlled last until consumed or reverted.
    """

    # own-turn grants
    pawn_rush: Dict[Color, bool] = field(default_factory=_per_color(False))
    spectral_march: Dict[Color, bool] = field(default_factory=_per_color(False))
    phantom_step: Dict[Color, bool] = field(default_factory=_per_color(False))
    sharpshooter: Dict[Color, bool] = field(default_factory=_per_color(False))
    poison_touch: Dict[Color, bool] = field(default_factory=_per_color(False))
    focus_fire: Dict[Color, bool] = field(default_factory=_per_color(False))
    chain_lightning: Dict[Color, bool] = field(default_factory=_per_color(False))
    en_passant_master: Dict[Color, bool] = field(default_factory=_per_color(False))
    vision: Dict[Color, bool] = field(default_factory=_per_color(False))
    knight_of_storms: Dict[Color, Optional[SquareTimer]] = field(default_factory=_per_color(None))
    temporal_echo: Dict[Color, Optional[EchoPattern]] = field(default_factory=_per_color(None))
    double_strike: Dict[Color, Optional[StrikeRecord]] = field(default_factory=_per_color(None))
    berserker_rage: Dict[Color, Optional[StrikeRecord]] = field(default_factory=_per_color(None))

    # protections that last through the enemy's next turn
    time_frozen: Dict[Color, bool] = field(default_factory=_per_color(False))
    fog_of_war: Dict[Color, bool] = field(default_factory=_per_color(False))
    iron_fortress: Dict[Color, bool] = field(default_factory=_per_color(False))
    pawn_shield: Dict[Color, Optional[PawnShield]] = field(default_factory=_per_color(None))
    bishops_blessing: Dict[Color, Optional[SquareTimer]] = field(default_factory=_per_color(None))

    # counters
    queens_gambit: Dict[Color, int] = field(default_factory=_per_color(0))
    castle_broken: Dict[Color, int] = field(default_factory=_per_color(0))

    # until consumed
    divine_intervention: Dict[Color, bool] = field(default_factory=_per_color(False))

    # collections
    squire_support: List[SquareTimer] = field(default_factory=list)
    sanctuaries: List[SquareTimer] = field(default_factory=list)
    cursed_squares: List[CursedSquare] = field(default_factory=list)
    poisoned_pieces: List[Poison] = field(default_factory=list)
    mirror_images: List[MirrorImage] = field(default_factory=list)
    mind_controlled: List[MindControl] = field(default_factory=list)

    last_move: Optional[LastMove] = None

    # --- snapshots (all-or-nothing and undo) ---
    def snapshot(self) -> "EffectState":
        return copy.deepcopy(self)

    def restore(self, snap: "EffectState") -> None:
        fresh = copy.deepcopy(snap)
        for f in fields(self):
            setattr(self, f.name, getattr(fresh, f.name))

    # --- queries ---
    def poison_at(self, square: str) -> Optional[Poison]:
        return next((p for p in self.poisoned_pieces if p.square == square), None)

    def curse_at(self, square: str) -> Optional[CursedSquare]:
        return next((c for c in self.cursed_squares if c.square == square), None)

    def is_sanctuary(self, square: str) -> bool:
        return any(s.square == square for s in self.sanctuaries)

    def has_squire_support(self, square: str, color: Color) -> bool:
        return any(s.square == square and s.color is color for s in self.squire_support)

    def strike_for(self, color: Color) -> Optional[StrikeRecord]:
        return self.double_strike[color] or self.berserker_rage[color]

    def relocate(self, moves: Dict[str, str]) -> None:
        """Square-keyed records follow their pieces; `moves` maps old -> new square."""
        for coll in (self.poisoned_pieces, self.mirror_images, self.mind_controlled):
            for rec in coll:
                if rec.square in moves:
                    rec.square = moves[rec.square]

    def retype(self, square: str, kind: str) -> None:
        for coll in (self.mirror_images, self.mind_controlled):
            for rec in coll:
                if rec.square == square:
                    rec.kind = kind

    def forget_square(self, square: str) -> None:
        """Drop piece-bound records of a piece that left the board."""
        self.poisoned_pieces = [p for p in self.poisoned_pieces if p.square != square]
        self.mirror_images = [m for m in self.mirror_images if m.square != square]
        self.mind_controlled = [m for m in self.mind_controlled if m.square != square]
        self.squire_support = [s for s in self.squire_support if s.square != square]

    def to_dict(self) -> Dict[str, Any]:
        def plain(v: Any) -> Any:
            if isinstance(v, Enum):
                return v.value
            if isinstance(v, dict):
                return {plain(k): plain(x) for k, x in v.items()}
            if isinstance(v, list):
                return [plain(x) for x in v]
            return v
        return {k: plain(v) for k, v in asdict(self).items()}


@dataclass
class CapturedPiece:
    kind: str
    color: Color
    square: str
    by_color: Optional[Color] = None


# square -> (kind, color) for every occupied square
Placement = Dict[str, Tuple[str, Color]]


@dataclass
class ArcanaHistory:
    """Game history the resurrection and rewind cards read.

    `captured` is keyed by the colour that lost the piece; `positions` holds the
    placement before each ply, oldest first.
    """

    captured: Dict[Color, List[CapturedPiece]] = field(default_factory=lambda: {Color.WHITE: [], Color.BLACK: []})
    positions: List[Placement] = field(default_factory=list)

    def record_capture(self, piece: CapturedPiece) -> None:
        self.captured[piece.color].append(piece)

    def snapshot(self) -> "ArcanaHistory":
        return copy.deepcopy(self)

    def restore(self, snap: "ArcanaHistory") -> None:
        fresh = copy.deepcopy(snap)
        self.captured = fresh.captured
        self.positions = fresh.positions

    def to_dict(self) -> Dict[str, Any]:
        return {
            "captured": {
                c.value: [{"kind": p.kind, "square": p.square, "by": p.by_color.value if p.by_color else None} for p in pieces]
                for c, pieces in self.captured.items()
            },
            "plies": len(self.positions),
        }
