from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, TYPE_CHECKING

from ..core.pieces import make_piece
from ..core.types import ALL_SQUARES, Color, sq_name, file_of, rank_of, parse_square
from .catalog import CARD_DEFS, CardDef, CardId
from .errors import UnhandledCardError, require_exhaustive
from .geometry import adjacent_squares, first_free_on_rank, is_promotion_rank, push_destination, scan_rank
from .state import (
    ArcanaHistory, CursedSquare, EchoPattern, EffectState, MindControl, MirrorImage,
    PawnShield, ShieldType, SquareTimer, StrikeRecord,
)
from .targeting import is_valid_target

if TYPE_CHECKING:
    from ..core.piece import Piece
    from .adapter import ChessRules

LOGGER = logging.getLogger("arcana.effects")

PIECE_NAMES = {"p": "pawn", "n": "knight", "b": "bishop", "r": "rook", "q": "queen", "k": "king"}

HIGHLIGHT_FRIENDLY = "#4cd964"
HIGHLIGHT_INFO = "#88c0d0"
HIGHLIGHT_HOSTILE = "#bf616a"
HIGHLIGHT_WARNING = "#f2b6a0"

SHIELD_TURNS = 1
SQUIRE_TURNS = 1
BLESSING_TURNS = 1
SANCTUARY_TURNS = 2
CURSE_TURNS = 2
MIRROR_TURNS = 3
CASTLE_BREAK_TURNS = 3
CHAOS_PIECES_PER_SIDE = 3
NECROMANCY_MAX = 2
TIME_TRAVEL_PLIES = 2
MAP_FRAGMENT_COUNT = 3


@dataclass(frozen=True)
class EffectOutcome:
    success: bool
    message: str
    visual_effect: Optional[str] = None
    sound_effect: Optional[str] = None
    highlight_squares: Tuple[str, ...] = ()
    highlight_color: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "visualEffect": self.visual_effect,
            "soundEffect": self.sound_effect,
            "highlightSquares": list(self.highlight_squares),
            "highlightColor": self.highlight_color,
        }


@dataclass(frozen=True)
class ArcanaParams:
    target_square: Optional[str] = None
    new_type: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> "ArcanaParams":
        if d is None:
            return cls()
        if not isinstance(d, Mapping):
            raise ValueError("params must be an object")
        target = d.get("targetSquare", d.get("target_square"))
        new_type = d.get("newType", d.get("new_type"))
        if target is not None and not isinstance(target, str):
            raise ValueError("targetSquare must be a string")
        if new_type is not None and not isinstance(new_type, str):
            raise ValueError("newType must be a string")
        return cls(
            target_square=target.strip().lower() if target else None,
            new_type=new_type.strip().lower() if new_type else None,
        )


@dataclass
class EffectContext:
    game: "ChessRules"
    card: CardDef
    params: ArcanaParams
    color: Color
    state: EffectState
    history: ArcanaHistory
    rng: random.Random

    @property
    def opponent(self) -> Color:
        return self.color.opponent()

    @property
    def target(self) -> str:
        return self.params.target_square or ""

    @property
    def piece(self) -> Optional["Piece"]:
        return self.game.get(self.target) if self.params.target_square else None

    def ok(self, message: str, squares: Iterable[str] = (), color: Optional[str] = HIGHLIGHT_FRIENDLY) -> EffectOutcome:
        return EffectOutcome(
            success=True,
            message=message,
            visual_effect=self.card.card_id.value,
            sound_effect=f"arcana:{self.card.card_id.value}",
            highlight_squares=tuple(squares),
            highlight_color=color,
        )

    def fail(self, message: str) -> EffectOutcome:
        return EffectOutcome(success=False, message=message)


Handler = Callable[[EffectContext], EffectOutcome]


def _name(piece: "Piece") -> str:
    return PIECE_NAMES[piece.kind]


def _replace(ctx: EffectContext, square: str, kind: str, color: Color) -> "Piece":
    ctx.game.remove(square)
    fresh = make_piece(kind, color)
    fresh.has_moved = True
    ctx.game.put(fresh, square)
    return fresh


def _destinations(moves) -> List[str]:
    return sorted({sq_name(m.to_sq) for m in moves})


def _set_flag(attr: str, message: str) -> Handler:
    def handler(ctx: EffectContext) -> EffectOutcome:
        getattr(ctx.state, attr)[ctx.color] = True
        return ctx.ok(message)
    handler.__name__ = f"grant_{attr}"
    return handler


# --- defense ---

def shield_pawn(ctx: EffectContext) -> EffectOutcome:
    ctx.state.pawn_shield[ctx.color] = PawnShield(ctx.target, SHIELD_TURNS, ShieldType.PAWN)
    return ctx.ok(f"Pawn on {ctx.target} is shielded", [ctx.target])


def pawn_guard(ctx: EffectContext) -> EffectOutcome:
    s = parse_square(ctx.target)
    f, step = file_of(s), -ctx.color.forward
    r = rank_of(s) + step
    guarded = None
    while 0 <= r < 8:
        guarded = ctx.game.get(sq_name(r * 8 + f))
        if guarded is not None:
            break
        r += step
    if guarded is None or guarded.color is not ctx.color:
        return ctx.fail("No friendly piece stands behind that pawn")
    ctx.state.pawn_shield[ctx.color] = PawnShield(guarded.square, SHIELD_TURNS, ShieldType.BEHIND, pawn_square=ctx.target)
    return ctx.ok(f"Pawn on {ctx.target} guards the {_name(guarded)} on {guarded.square}", [guarded.square, ctx.target])


def squire_support(ctx: EffectContext) -> EffectOutcome:
    ctx.state.squire_support = [s for s in ctx.state.squire_support if s.square != ctx.target]
    ctx.state.squire_support.append(SquareTimer(ctx.target, SQUIRE_TURNS, ctx.color))
    return ctx.ok(f"Squire protects {ctx.target}", [ctx.target])


def bishops_blessing(ctx: EffectContext) -> EffectOutcome:
    ctx.state.bishops_blessing[ctx.color] = SquareTimer(ctx.target, BLESSING_TURNS, ctx.color)
    blessed = [ctx.target] + [s for s in adjacent_squares(ctx.target) if _is_own(ctx, s)]
    return ctx.ok(f"Bishop on {ctx.target} blesses {len(blessed) - 1} neighbours", blessed)


def time_freeze(ctx: EffectContext) -> EffectOutcome:
    if ctx.state.time_frozen[ctx.opponent]:
        return ctx.fail("Opponent is already frozen")
    ctx.state.time_frozen[ctx.opponent] = True
    return ctx.ok("Opponent's next turn is frozen", color=HIGHLIGHT_INFO)


def divine_intervention(ctx: EffectContext) -> EffectOutcome:
    if ctx.state.divine_intervention[ctx.color]:
        return ctx.fail("Divine Intervention is already watching over your king")
    ctx.state.divine_intervention[ctx.color] = True
    king = ctx.game.board.king_of(ctx.color)
    return ctx.ok("Your king is under divine protection", [king.square] if king else [])


def iron_fortress(ctx: EffectContext) -> EffectOutcome:
    ctx.state.iron_fortress[ctx.color] = True
    pawns = [p.square for p in ctx.game.board.pieces_of(ctx.color) if p.kind == "p"]
    return ctx.ok("Your pawns are fortified", sorted(pawns))


def sanctuary(ctx: EffectContext) -> EffectOutcome:
    if ctx.state.is_sanctuary(ctx.target):
        return ctx.fail(f"{ctx.target} is already a sanctuary")
    ctx.state.sanctuaries.append(SquareTimer(ctx.target, SANCTUARY_TURNS, ctx.color))
    return ctx.ok(f"{ctx.target} is a sanctuary", [ctx.target])


# --- movement ---

def soft_push(ctx: EffectContext) -> EffectOutcome:
    dest = push_destination(ctx.game, ctx.target)
    if dest is None:
        return ctx.fail("That piece cannot be pushed any closer to the centre")
    if ctx.game.get(dest) is not None:
        return ctx.fail(f"Push blocked: {dest} is occupied")
    piece = ctx.game.remove(ctx.target)
    piece.has_moved = True
    ctx.game.put(piece, dest)
    ctx.state.relocate({ctx.target: dest})
    return ctx.ok(f"Pushed {_name(piece)} from {ctx.target} to {dest}", [ctx.target, dest])


def knight_of_storms(ctx: EffectContext) -> EffectOutcome:
    ctx.state.knight_of_storms[ctx.color] = SquareTimer(ctx.target, 1, ctx.color)
    return ctx.ok(f"Knight on {ctx.target} rides the storm", [ctx.target])


def queens_gambit(ctx: EffectContext) -> EffectOutcome:
    ctx.state.queens_gambit[ctx.color] = 1
    return ctx.ok("You may move twice")


def royal_swap(ctx: EffectContext) -> EffectOutcome:
    king = ctx.game.board.king_of(ctx.color)
    if king is None:
        return ctx.fail("You have no king to swap")
    king_sq, other_sq = king.square, ctx.target
    other = ctx.game.remove(other_sq)
    ctx.game.remove(king_sq)
    ctx.game.put(king, other_sq)
    ctx.game.put(other, king_sq)
    king.has_moved = True
    other.has_moved = True
    ctx.state.relocate({king_sq: other_sq, other_sq: king_sq})
    return ctx.ok(f"King swapped places with the {_name(other)}", [king_sq, other_sq])


def temporal_echo(ctx: EffectContext) -> EffectOutcome:
    last = ctx.state.last_move
    if last is None or last.from_square is None:
        return ctx.fail("There is no move to echo")
    a, b = parse_square(last.from_square), parse_square(last.to_square)
    pattern = EchoPattern(file_of(b) - file_of(a), rank_of(b) - rank_of(a))
    ctx.state.temporal_echo[ctx.color] = pattern
    return ctx.ok(f"Echoing the move {last.from_square}-{last.to_square}", [last.from_square, last.to_square], HIGHLIGHT_INFO)


# --- offense ---

def _arm_strike(attr: str, message: str) -> Handler:
    def handler(ctx: EffectContext) -> EffectOutcome:
        getattr(ctx.state, attr)[ctx.color] = StrikeRecord()
        return ctx.ok(message, color=HIGHLIGHT_HOSTILE)
    handler.__name__ = f"arm_{attr}"
    return handler


def execution(ctx: EffectContext) -> EffectOutcome:
    victim = ctx.game.remove(ctx.target)
    ctx.state.forget_square(ctx.target)
    return ctx.ok(f"Executed the {_name(victim)} on {ctx.target}", [ctx.target], HIGHLIGHT_HOSTILE)


def castle_breaker(ctx: EffectContext) -> EffectOutcome:
    ctx.state.castle_broken[ctx.opponent] = CASTLE_BREAK_TURNS
    return ctx.ok(f"Opponent cannot castle for {CASTLE_BREAK_TURNS} turns", [ctx.target], HIGHLIGHT_HOSTILE)


def mind_control(ctx: EffectContext) -> EffectOutcome:
    victim = ctx.piece
    _replace(ctx, ctx.target, victim.kind, ctx.color)
    ctx.state.mind_controlled.append(MindControl(ctx.target, victim.color, ctx.color, victim.kind))
    return ctx.ok(f"Took control of the {_name(victim)} on {ctx.target}", [ctx.target], HIGHLIGHT_HOSTILE)


# --- resurrection / transformation ---

def astral_rebirth(ctx: EffectContext) -> EffectOutcome:
    pool = [cp for cp in ctx.history.captured[ctx.color] if cp.kind != "k"]
    if not pool:
        return ctx.fail("No captured piece to revive")
    dest = first_free_on_rank(ctx.game, ctx.color.back_rank)
    if dest is None:
        return ctx.fail("No free square on your back rank")
    revived = pool[-1]
    ctx.history.captured[ctx.color].remove(revived)
    _replace(ctx, dest, revived.kind, ctx.color)
    return ctx.ok(f"The {PIECE_NAMES[revived.kind]} returns on {dest}", [dest])


def necromancy(ctx: EffectContext) -> EffectOutcome:
    captured = ctx.history.captured[ctx.color]
    pawns = [cp for cp in captured if cp.kind == "p"]
    if not pawns:
        return ctx.fail("No captured pawns to raise")
    free = [s for s in scan_rank(ctx.color.pawn_rank) if ctx.game.get(s) is None]
    if not free:
        return ctx.fail("No free square on your pawn rank")
    raised = []
    for cp, dest in zip(reversed(pawns[-NECROMANCY_MAX:]), free):
        captured.remove(cp)
        pawn = make_piece("p", ctx.color)
        ctx.game.put(pawn, dest)
        raised.append(dest)
    return ctx.ok(f"Raised {len(raised)} pawn(s)", raised)


def promotion_ritual(ctx: EffectContext) -> EffectOutcome:
    _replace(ctx, ctx.target, "q", ctx.color)
    ctx.state.retype(ctx.target, "q")
    return ctx.ok(f"Pawn on {ctx.target} ascends to a queen", [ctx.target])


def metamorphosis(ctx: EffectContext) -> EffectOutcome:
    new_type = ctx.params.new_type
    if new_type in ("k", "q"):
        return ctx.fail("Metamorphosis cannot create a king or queen")
    if new_type not in ("p", "n", "b", "r"):
        return ctx.fail("Choose a pawn, knight, bishop or rook")
    piece = ctx.piece
    if piece.kind == new_type:
        return ctx.fail(f"That piece is already a {PIECE_NAMES[new_type]}")
    if new_type == "p" and is_promotion_rank(ctx.target):
        return ctx.fail("A pawn cannot stand on the first or last rank")
    _replace(ctx, ctx.target, new_type, ctx.color)
    ctx.state.retype(ctx.target, new_type)
    return ctx.ok(f"The {_name(piece)} on {ctx.target} becomes a {PIECE_NAMES[new_type]}", [ctx.target])


def mirror_image(ctx: EffectContext) -> EffectOutcome:
    piece = ctx.piece
    for dest in adjacent_squares(ctx.target):
        if ctx.game.get(dest) is not None:
            continue
        if piece.kind == "p" and is_promotion_rank(dest):
            continue
        duplicate = make_piece(piece.kind, ctx.color)
        duplicate.has_moved = True
        ctx.game.put(duplicate, dest)
        ctx.state.mirror_images.append(MirrorImage(dest, piece.kind, ctx.color, MIRROR_TURNS))
        return ctx.ok(f"A mirror image of the {_name(piece)} appears on {dest}", [ctx.target, dest])
    return ctx.fail("No free square next to that piece")


def sacrifice(ctx: EffectContext) -> EffectOutcome:
    victim = ctx.game.remove(ctx.target)
    ctx.state.forget_square(ctx.target)
    return ctx.ok(f"Sacrificed the {_name(victim)} on {ctx.target}", [ctx.target], HIGHLIGHT_WARNING)


# --- utility ---

def vision(ctx: EffectContext) -> EffectOutcome:
    squares = _destinations(ctx.game.legal_moves(ctx.opponent))
    ctx.state.vision[ctx.color] = True
    return ctx.ok(f"Opponent has {len(squares)} reachable squares", squares, HIGHLIGHT_INFO)


def line_of_sight(ctx: EffectContext) -> EffectOutcome:
    squares = _destinations(ctx.game.moves_for(ctx.target))
    return ctx.ok(f"{len(squares)} squares in sight", squares, HIGHLIGHT_INFO)


def quiet_thought(ctx: EffectContext) -> EffectOutcome:
    king = ctx.game.board.king_of(ctx.color)
    if king is None:
        return ctx.fail("You have no king to protect")
    threats = sorted(
        p.square for p in ctx.game.board.pieces_of(ctx.opponent)
        if king.pos in set(p.attacks(ctx.game))
    )
    if not threats:
        return ctx.ok("Your king is safe", [king.square], HIGHLIGHT_INFO)
    return ctx.ok(f"{len(threats)} piece(s) threaten your king", threats, HIGHLIGHT_HOSTILE)


def _centre_distance(square: str) -> float:
    s = parse_square(square)
    return abs(file_of(s) - 3.5) + abs(rank_of(s) - 3.5)


def map_fragments(ctx: EffectContext) -> EffectOutcome:
    squares = _destinations(ctx.game.legal_moves(ctx.opponent))
    # captures first, then the squares nearest the centre
    squares.sort(key=lambda s: (not _is_own(ctx, s), _centre_distance(s), s))
    picked = squares[:MAP_FRAGMENT_COUNT]
    return ctx.ok(f"Revealed {len(picked)} likely enemy destinations", picked, HIGHLIGHT_INFO)


def antidote(ctx: EffectContext) -> EffectOutcome:
    ctx.state.poisoned_pieces = [p for p in ctx.state.poisoned_pieces if p.square != ctx.target]
    return ctx.ok(f"Cured the piece on {ctx.target}", [ctx.target])


def cursed_square(ctx: EffectContext) -> EffectOutcome:
    if ctx.state.curse_at(ctx.target) is not None:
        return ctx.fail(f"{ctx.target} is already cursed")
    ctx.state.cursed_squares.append(CursedSquare(ctx.target, CURSE_TURNS, ctx.color))
    return ctx.ok(f"{ctx.target} is cursed", [ctx.target], HIGHLIGHT_HOSTILE)


def time_travel(ctx: EffectContext) -> EffectOutcome:
    positions = ctx.history.positions
    if not positions:
        return ctx.fail("There is no earlier position to return to")
    plies = min(TIME_TRAVEL_PLIES, len(positions))
    target = positions[-plies]
    changed = []
    for square in ALL_SQUARES:
        want = target.get(square)
        have = ctx.game.get(square)
        if want is None:
            if have is not None:
                ctx.game.remove(square)
                changed.append(square)
        elif have is None or (have.kind, have.color) != want:
            _replace(ctx, square, want[0], want[1])
            changed.append(square)
    del positions[-plies:]
    for coll in ("poisoned_pieces", "mirror_images", "mind_controlled", "squire_support"):
        setattr(ctx.state, coll, [r for r in getattr(ctx.state, coll) if ctx.game.get(r.square) is not None])
    return ctx.ok(f"Rewound {plies} move(s)", changed, HIGHLIGHT_INFO)


def chaos_theory(ctx: EffectContext) -> EffectOutcome:
    mapping: Dict[str, str] = {}
    moved: List[Tuple["Piece", str]] = []
    for color in (Color.WHITE, Color.BLACK):
        candidates = [p for p in ctx.game.board.pieces_of(color) if p.kind != "k"]
        chosen = ctx.rng.sample(candidates, min(CHAOS_PIECES_PER_SIDE, len(candidates)))
        squares = [p.square for p in chosen]
        shuffled = list(squares)
        ctx.rng.shuffle(shuffled)
        for piece, dest in zip(chosen, shuffled):
            mapping[piece.square] = dest
            moved.append((piece, dest))
    if not moved:
        return ctx.fail("There are no pieces to shuffle")
    for piece, _ in moved:
        ctx.game.remove(piece.square)
    for piece, dest in moved:
        ctx.game.put(piece, dest)
    ctx.state.relocate(mapping)
    return ctx.ok(f"Chaos shuffled {len(moved)} pieces", sorted(mapping), HIGHLIGHT_WARNING)


def _is_own(ctx: EffectContext, square: str) -> bool:
    p = ctx.game.get(square)
    return p is not None and p.color is ctx.color


def _acknowledge(message: str) -> Handler:
    def handler(ctx: EffectContext) -> EffectOutcome:
        return ctx.ok(message, color=None)
    return handler


HANDLERS: Dict[CardId, Handler] = {
    CardId.SHIELD_PAWN: shield_pawn,
    CardId.PAWN_GUARD: pawn_guard,
    CardId.SQUIRE_SUPPORT: squire_support,
    CardId.BISHOPS_BLESSING: bishops_blessing,
    CardId.TIME_FREEZE: time_freeze,
    CardId.DIVINE_INTERVENTION: divine_intervention,
    CardId.IRON_FORTRESS: iron_fortress,
    CardId.SANCTUARY: sanctuary,
    CardId.SOFT_PUSH: soft_push,
    CardId.SPECTRAL_MARCH: _set_flag("spectral_march", "Rooks may pass through an ally"),
    CardId.KNIGHT_OF_STORMS: knight_of_storms,
    CardId.QUEENS_GAMBIT: queens_gambit,
    CardId.PHANTOM_STEP: _set_flag("phantom_step", "Your pieces may move like knights"),
    CardId.ROYAL_SWAP: royal_swap,
    CardId.PAWN_RUSH: _set_flag("pawn_rush", "Your pawns may rush two squares"),
    CardId.TEMPORAL_ECHO: temporal_echo,
    CardId.FOCUS_FIRE: _set_flag("focus_fire", "Your next capture draws an extra card"),
    CardId.DOUBLE_STRIKE: _arm_strike("double_strike", "Your next capture may strike twice"),
    CardId.POISON_TOUCH: _set_flag("poison_touch", "Your next capture spreads poison"),
    CardId.SHARPSHOOTER: _set_flag("sharpshooter", "Your bishops shoot through enemies"),
    CardId.BERSERKER_RAGE: _arm_strike("berserker_rage", "Your next capture sends a piece berserk"),
    CardId.EXECUTION: execution,
    CardId.CHAIN_LIGHTNING: _set_flag("chain_lightning", "Your next capture arcs to adjacent enemies"),
    CardId.CASTLE_BREAKER: castle_breaker,
    CardId.ASTRAL_REBIRTH: astral_rebirth,
    CardId.NECROMANCY: necromancy,
    CardId.PROMOTION_RITUAL: promotion_ritual,
    CardId.METAMORPHOSIS: metamorphosis,
    CardId.MIRROR_IMAGE: mirror_image,
    CardId.SACRIFICE: sacrifice,
    CardId.VISION: vision,
    CardId.LINE_OF_SIGHT: line_of_sight,
    CardId.ARCANE_CYCLE: _acknowledge("Discard a card and draw a new one"),
    CardId.QUIET_THOUGHT: quiet_thought,
    CardId.MAP_FRAGMENTS: map_fragments,
    CardId.PEEK_CARD: _acknowledge("You glimpse a card in the opponent's hand"),
    CardId.ANTIDOTE: antidote,
    CardId.FOG_OF_WAR: _set_flag("fog_of_war", "Fog hides your army"),
    CardId.CURSED_SQUARE: cursed_square,
    CardId.TIME_TRAVEL: time_travel,
    CardId.CHAOS_THEORY: chaos_theory,
    CardId.MIND_CONTROL: mind_control,
    CardId.EN_PASSANT_MASTER: _set_flag("en_passant_master", "Your pawns capture en passant at will"),
}

require_exhaustive(HANDLERS, CardId, "effect handler")


class EffectExecutor:
    """Applies cards to a board + effect state, all or nothing.

    Targets are validated with the same predicates the resolver uses. If a
    handler reports failure, the board, effect state and history are restored
    from snapshots taken before it ran.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def apply(
        self,
        game: "ChessRules",
        card_id,
        params,
        acting_color: Color,
        state: EffectState,
        history: Optional[ArcanaHistory] = None,
    ) -> EffectOutcome:
        try:
            cid = CardId(card_id)
        except ValueError:
            raise UnhandledCardError(f"No effect handler for {card_id!r}") from None
        handler = HANDLERS[cid]
        card = CARD_DEFS[cid]

        if not isinstance(params, ArcanaParams):
            try:
                params = ArcanaParams.from_dict(params)
            except ValueError as exc:
                LOGGER.debug("arcana_bad_params", extra={"card_id": cid.value, "reason": str(exc)})
                return EffectOutcome(False, f"{card.name}: {exc}")
        if history is None:
            history = ArcanaHistory()

        if card.target_kind is not None:
            if params.target_square is None:
                return EffectOutcome(False, f"{card.name} needs a target")
            if not is_valid_target(game, cid, params.target_square, acting_color, state):
                return EffectOutcome(False, f"{params.target_square} is not a valid target for {card.name}")

        board_snap = game.board.snapshot()
        state_snap = state.snapshot()
        history_snap = history.snapshot()

        ctx = EffectContext(game, card, params, acting_color, state, history, self.rng)
        outcome = handler(ctx)

        if not outcome.success:
            game.board.restore(board_snap)
            state.restore(state_snap)
            history.restore(history_snap)
            LOGGER.debug("arcana_rejected", extra={"card_id": cid.value, "reason": outcome.message})
        else:
            LOGGER.debug("arcana_applied", extra={"card_id": cid.value, "color": acting_color.value})
        return outcome


def apply_arcana(
    game: "ChessRules",
    card_id,
    params,
    acting_color: Color,
    state: EffectState,
    history: Optional[ArcanaHistory] = None,
    rng: Optional[random.Random] = None,
) -> EffectOutcome:
    return EffectExecutor(rng).apply(game, card_id, params, acting_color, state, history)
