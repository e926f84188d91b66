from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .errors import require_exhaustive, UnknownCardError

class CardId(str, Enum):
    # defense
    SHIELD_PAWN = "shield_pawn"
    PAWN_GUARD = "pawn_guard"
    SQUIRE_SUPPORT = "squire_support"
    BISHOPS_BLESSING = "bishops_blessing"
    TIME_FREEZE = "time_freeze"
    DIVINE_INTERVENTION = "divine_intervention"
    IRON_FORTRESS = "iron_fortress"
    SANCTUARY = "sanctuary"
    # movement
    SOFT_PUSH = "soft_push"
    SPECTRAL_MARCH = "spectral_march"
    KNIGHT_OF_STORMS = "knight_of_storms"
    QUEENS_GAMBIT = "queens_gambit"
    PHANTOM_STEP = "phantom_step"
    ROYAL_SWAP = "royal_swap"
    PAWN_RUSH = "pawn_rush"
    TEMPORAL_ECHO = "temporal_echo"
    # offense
    FOCUS_FIRE = "focus_fire"
    DOUBLE_STRIKE = "double_strike"
    POISON_TOUCH = "poison_touch"
    SHARPSHOOTER = "sharpshooter"
    BERSERKER_RAGE = "berserker_rage"
    EXECUTION = "execution"
    CHAIN_LIGHTNING = "chain_lightning"
    CASTLE_BREAKER = "castle_breaker"
    # resurrection / transformation
    ASTRAL_REBIRTH = "astral_rebirth"
    NECROMANCY = "necromancy"
    PROMOTION_RITUAL = "promotion_ritual"
    METAMORPHOSIS = "metamorphosis"
    MIRROR_IMAGE = "mirror_image"
    SACRIFICE = "sacrifice"
    # utility
    VISION = "vision"
    LINE_OF_SIGHT = "line_of_sight"
    ARCANE_CYCLE = "arcane_cycle"
    QUIET_THOUGHT = "quiet_thought"
    MAP_FRAGMENTS = "map_fragments"
    PEEK_CARD = "peek_card"
    ANTIDOTE = "antidote"
    FOG_OF_WAR = "fog_of_war"
    CURSED_SQUARE = "cursed_square"
    TIME_TRAVEL = "time_travel"
    CHAOS_THEORY = "chaos_theory"
    MIND_CONTROL = "mind_control"
    EN_PASSANT_MASTER = "en_passant_master"

class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"

class TargetKind(str, Enum):
    OWN_PAWN = "OwnPawn"
    OWN_PIECE = "OwnPiece"
    OWN_PIECE_EXCEPT_KING = "OwnPieceExceptKing"
    OWN_PIECE_EXCEPT_QUEEN_OR_KING = "OwnPieceExceptQueenOrKing"
    OWN_PIECE_WITH_LEGAL_MOVES = "OwnPieceWithLegalMoves"
    OWN_PIECE_WITH_PUSH_DESTINATION = "OwnPieceWithPushDestination"
    OWN_KNIGHT = "OwnKnight"
    OWN_BISHOP = "OwnBishop"
    ENEMY_PIECE_EXCEPT_KING = "EnemyPieceExceptKing"
    ENEMY_ROOK = "EnemyRook"
    POISONED_PIECE = "PoisonedPiece"
    ANY_SQUARE = "AnySquare"

@dataclass(frozen=True)
class CardDef:
    card_id: CardId
    name: str
    rarity: Rarity
    target_kind: Optional[TargetKind]
    ends_turn: bool
    description: str

    @property
    def needs_new_type(self) -> bool:
        return self.card_id is CardId.METAMORPHOSIS

C, U, R, E, L = Rarity.COMMON, Rarity.UNCOMMON, Rarity.RARE, Rarity.EPIC, Rarity.LEGENDARY
T = TargetKind

CARD_DEFS: Dict[CardId, CardDef] = {
    CardId.SHIELD_PAWN: CardDef(CardId.SHIELD_PAWN, "Shield Pawn", C, T.OWN_PAWN, False, "A pawn cannot be captured during the next enemy turn."),
    CardId.PAWN_GUARD: CardDef(CardId.PAWN_GUARD, "Pawn Guard", C, T.OWN_PAWN, False, "Shields the friendly piece standing behind a pawn for one enemy turn."),
    CardId.SQUIRE_SUPPORT: CardDef(CardId.SQUIRE_SUPPORT, "Squire Support", C, T.OWN_PIECE_EXCEPT_KING, False, "A piece cannot be captured during the next enemy turn."),
    CardId.BISHOPS_BLESSING: CardDef(CardId.BISHOPS_BLESSING, "Bishop's Blessing", U, T.OWN_BISHOP, False, "A bishop and the friendly pieces around it cannot be captured next turn."),
    CardId.TIME_FREEZE: CardDef(CardId.TIME_FREEZE, "Time Freeze", L, None, False, "The opponent skips their next turn."),
    CardId.DIVINE_INTERVENTION: CardDef(CardId.DIVINE_INTERVENTION, "Divine Intervention", E, None, False, "The next piece to check your king is struck down."),
    CardId.IRON_FORTRESS: CardDef(CardId.IRON_FORTRESS, "Iron Fortress", R, None, False, "Your pawns cannot be captured during the next enemy turn."),
    CardId.SANCTUARY: CardDef(CardId.SANCTUARY, "Sanctuary", U, T.ANY_SQUARE, False, "No piece can be captured on a square for two turns."),
    CardId.SOFT_PUSH: CardDef(CardId.SOFT_PUSH, "Soft Push", C, T.OWN_PIECE_WITH_PUSH_DESTINATION, True, "Nudges a piece one square toward the centre."),
    CardId.SPECTRAL_MARCH: CardDef(CardId.SPECTRAL_MARCH, "Spectral March", U, None, False, "Rooks may pass through one friendly piece this turn."),
    CardId.KNIGHT_OF_STORMS: CardDef(CardId.KNIGHT_OF_STORMS, "Knight of Storms", R, T.OWN_KNIGHT, False, "A knight may move to any square within two steps this turn."),
    CardId.QUEENS_GAMBIT: CardDef(CardId.QUEENS_GAMBIT, "Queen's Gambit", E, None, False, "Take an extra move after your next move."),
    CardId.PHANTOM_STEP: CardDef(CardId.PHANTOM_STEP, "Phantom Step", U, None, False, "Any piece may move like a knight this turn."),
    CardId.ROYAL_SWAP: CardDef(CardId.ROYAL_SWAP, "Royal Swap", R, T.OWN_PIECE_EXCEPT_KING, True, "Your king trades places with one of your pieces."),
    CardId.PAWN_RUSH: CardDef(CardId.PAWN_RUSH, "Pawn Rush", C, None, False, "Pawns may advance two squares this turn."),
    CardId.TEMPORAL_ECHO: CardDef(CardId.TEMPORAL_ECHO, "Temporal Echo", R, None, False, "Any piece may repeat the shape of the last move this turn."),
    CardId.FOCUS_FIRE: CardDef(CardId.FOCUS_FIRE, "Focus Fire", C, None, False, "Your next capture draws an extra card."),
    CardId.DOUBLE_STRIKE: CardDef(CardId.DOUBLE_STRIKE, "Double Strike", R, None, False, "After a minor piece captures, capture again with a non-adjacent strike."),
    CardId.POISON_TOUCH: CardDef(CardId.POISON_TOUCH, "Poison Touch", U, None, False, "Your next capture poisons an adjacent enemy, which dies in three turns."),
    CardId.SHARPSHOOTER: CardDef(CardId.SHARPSHOOTER, "Sharpshooter", U, None, False, "Bishops shoot through enemy pieces this turn."),
    CardId.BERSERKER_RAGE: CardDef(CardId.BERSERKER_RAGE, "Berserker Rage", E, None, False, "After any capture, capture again with a non-adjacent strike."),
    CardId.EXECUTION: CardDef(CardId.EXECUTION, "Execution", L, T.ENEMY_PIECE_EXCEPT_KING, True, "Remove an enemy piece from the board."),
    CardId.CHAIN_LIGHTNING: CardDef(CardId.CHAIN_LIGHTNING, "Chain Lightning", E, None, False, "Your next capture also destroys adjacent enemies."),
    CardId.CASTLE_BREAKER: CardDef(CardId.CASTLE_BREAKER, "Castle Breaker", U, T.ENEMY_ROOK, False, "The opponent cannot castle for three turns."),
    CardId.ASTRAL_REBIRTH: CardDef(CardId.ASTRAL_REBIRTH, "Astral Rebirth", E, None, True, "Return your last captured piece to your back rank."),
    CardId.NECROMANCY: CardDef(CardId.NECROMANCY, "Necromancy", R, None, True, "Raise up to two captured pawns onto your pawn rank."),
    CardId.PROMOTION_RITUAL: CardDef(CardId.PROMOTION_RITUAL, "Promotion Ritual", E, T.OWN_PAWN, True, "A pawn becomes a queen where it stands."),
    CardId.METAMORPHOSIS: CardDef(CardId.METAMORPHOSIS, "Metamorphosis", R, T.OWN_PIECE_EXCEPT_QUEEN_OR_KING, True, "Transform a piece into a pawn, knight, bishop or rook."),
    CardId.MIRROR_IMAGE: CardDef(CardId.MIRROR_IMAGE, "Mirror Image", R, T.OWN_PIECE_EXCEPT_KING, False, "Create a duplicate beside a piece for three turns."),
    CardId.SACRIFICE: CardDef(CardId.SACRIFICE, "Sacrifice", U, T.OWN_PIECE_EXCEPT_KING, False, "Destroy one of your pieces to draw stronger cards."),
    CardId.VISION: CardDef(CardId.VISION, "Vision", C, None, False, "See every move the opponent can make."),
    CardId.LINE_OF_SIGHT: CardDef(CardId.LINE_OF_SIGHT, "Line of Sight", C, T.OWN_PIECE_WITH_LEGAL_MOVES, False, "Highlight every move of one piece."),
    CardId.ARCANE_CYCLE: CardDef(CardId.ARCANE_CYCLE, "Arcane Cycle", C, None, False, "Discard a card and draw another."),
    CardId.QUIET_THOUGHT: CardDef(CardId.QUIET_THOUGHT, "Quiet Thought", C, None, False, "Reveal the enemy pieces threatening your king."),
    CardId.MAP_FRAGMENTS: CardDef(CardId.MAP_FRAGMENTS, "Map Fragments", U, None, False, "Predict the squares the opponent is likely to move to."),
    CardId.PEEK_CARD: CardDef(CardId.PEEK_CARD, "Peek Card", C, None, False, "Look at one card in the opponent's hand."),
    CardId.ANTIDOTE: CardDef(CardId.ANTIDOTE, "Antidote", U, T.POISONED_PIECE, False, "Cure a poisoned piece."),
    CardId.FOG_OF_WAR: CardDef(CardId.FOG_OF_WAR, "Fog of War", U, None, False, "Hide your pieces from the opponent for a turn."),
    CardId.CURSED_SQUARE: CardDef(CardId.CURSED_SQUARE, "Cursed Square", R, T.ANY_SQUARE, False, "Any piece but a king that lands on the square is destroyed."),
    CardId.TIME_TRAVEL: CardDef(CardId.TIME_TRAVEL, "Time Travel", L, None, True, "Rewind the board by up to two moves."),
    CardId.CHAOS_THEORY: CardDef(CardId.CHAOS_THEORY, "Chaos Theory", L, None, True, "Shuffle up to three pieces of each side among their squares."),
    CardId.MIND_CONTROL: CardDef(CardId.MIND_CONTROL, "Mind Control", L, T.ENEMY_PIECE_EXCEPT_KING, True, "Take control of an enemy piece."),
    CardId.EN_PASSANT_MASTER: CardDef(CardId.EN_PASSANT_MASTER, "En Passant Master", U, None, False, "Pawns may capture en passant against any adjacent pawn."),
}

require_exhaustive(CARD_DEFS, CardId, "card definition")

def card_def(card_id: CardId) -> CardDef:
    return CARD_DEFS[card_id]

def parse_card_id(value: object) -> CardId:
    """Wire string -> CardId. Unknown strings raise UnknownCardError."""
    if isinstance(value, CardId):
        return value
    try:
        return CardId(str(value).strip().lower())
    except ValueError:
        raise UnknownCardError(f"Unknown arcana id: {value!r}") from None

def cards_by_rarity(rarity: Rarity) -> List[CardId]:
    return [cid for cid, d in CARD_DEFS.items() if d.rarity is rarity]

# --- weighted draws ---

RARITY_WEIGHTS: Dict[Rarity, int] = {C: 50, U: 30, R: 15, E: 4, L: 1}

# stronger sacrifices push weight toward the rarer end
SACRIFICE_MULTIPLIERS: Dict[str, float] = {"p": 0.6, "n": 1.0, "b": 1.0, "r": 1.5, "q": 2.0}

def draw_weights(sacrificed_kind: Optional[str] = None) -> Dict[Rarity, int]:
    if sacrificed_kind is None:
        return dict(RARITY_WEIGHTS)
    mult = SACRIFICE_MULTIPLIERS.get(sacrificed_kind, 1.0)
    root = math.sqrt(mult)
    scaled = {
        C: RARITY_WEIGHTS[C] / mult,
        U: RARITY_WEIGHTS[U] / root,
        R: RARITY_WEIGHTS[R] * root,
        E: RARITY_WEIGHTS[E] * mult,
        L: RARITY_WEIGHTS[L] * mult,
    }
    return {r: max(1, int(math.floor(w + 0.5))) for r, w in scaled.items()}

def draw_table(sacrificed_kind: Optional[str] = None) -> List[Tuple[CardId, int]]:
    weights = draw_weights(sacrificed_kind)
    return [(cid, weights[d.rarity]) for cid, d in CARD_DEFS.items()]

def draw_card(rng: random.Random, sacrificed_kind: Optional[str] = None) -> CardId:
    table = draw_table(sacrificed_kind)
    ids = [cid for cid, _ in table]
    return rng.choices(ids, weights=[w for _, w in table], k=1)[0]
