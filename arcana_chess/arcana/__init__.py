from .catalog import CardId, Rarity, TargetKind, CardDef, CARD_DEFS, card_def, parse_card_id, draw_card, draw_weights
from .errors import MissingHandlerError, UnhandledCardError, UnknownCardError
from .state import EffectState, ArcanaHistory
from .targeting import valid_targets, is_valid_target, target_kind_of
from .effects import ArcanaParams, EffectOutcome, EffectExecutor, apply_arcana
from .moves import ArcanaMove, arcana_moves, legal_destinations
from .lifecycle import TurnReport, advance_turn
from .game import ArcanaGame

__all__ = [
    "CardId","Rarity","TargetKind","CardDef","CARD_DEFS","card_def","parse_card_id","draw_card","draw_weights",
    "MissingHandlerError","UnhandledCardError","UnknownCardError",
    "EffectState","ArcanaHistory",
    "valid_targets","is_valid_target","target_kind_of",
    "ArcanaParams","EffectOutcome","EffectExecutor","apply_arcana",
    "ArcanaMove","arcana_moves","legal_destinations",
    "TurnReport","advance_turn",
    "ArcanaGame",
]
