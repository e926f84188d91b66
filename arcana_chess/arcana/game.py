from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Set

from ..config import ArcanaConfig
from ..core.game import Game
from ..core.moves import Move, Undo
from ..core.piece import Piece
from ..core.rules import KingSafetyRule
from ..core.setup import setup_standard
from ..core.types import Color, parse_square, sq_name
from .catalog import CARD_DEFS, parse_card_id
from .effects import EffectExecutor, EffectOutcome
from .geometry import adjacent_squares
from .lifecycle import TurnReport, advance_turn
from .rules import ArcanaMovesRule, CaptureProtectionRule, CastleBreakerRule, StrikeFollowupRule, capture_blocked, captured_square
from .state import ArcanaHistory, CapturedPiece, EffectState, LastMove, Placement, Poison

LOGGER = logging.getLogger("arcana.game")

# double strike only arms on a capture by one of these
STRIKE_KINDS = ("p", "n", "b", "r")


class ArcanaGame(Game):
    """Chess with arcana: the rules engine plus capture-time enforcement.

    Owns the effect state and history, applies cards through the executor, and
    runs the lifecycle exactly once whenever a colour's turn completes.
    """

    def __init__(self, config: Optional[ArcanaConfig] = None, rng_seed: Optional[int] = None) -> None:
        super().__init__()
        self.config = config if config is not None else ArcanaConfig()
        self.rng = random.Random(self.config.rng_seed if rng_seed is None else rng_seed)
        self.effects = EffectState()
        self.history = ArcanaHistory()
        self.executor = EffectExecutor(self.rng)

        # per-action log of arcana side effects, consumed by the API facade
        self.transient_effects: List[Dict[str, Any]] = []
        self._placement_before: Optional[Placement] = None

        self.rules = [
            ArcanaMovesRule(),
            CastleBreakerRule(),
            CaptureProtectionRule(),
            StrikeFollowupRule(),
            KingSafetyRule(),
        ]

    def setup_standard(self) -> None:
        setup_standard(self)

    def placement(self) -> Placement:
        return {p.square: (p.kind, p.color) for p in self.board.all_pieces()}

    # --- cards ---
    def use_arcana(self, card_id, params=None, color: Optional[Color] = None) -> EffectOutcome:
        cid = parse_card_id(card_id)
        color = self.side_to_move if color is None else color

        self.transient_effects.clear()
        outcome = self.executor.apply(self, cid, params, color, self.effects, self.history)
        if not outcome.success:
            return outcome

        # card effects are not part of the move stack; they commit the position
        self._stack.clear()
        if CARD_DEFS[cid].ends_turn and color is self.side_to_move:
            self.side_to_move = color.opponent()
            if color is Color.BLACK:
                self.fullmove_number += 1
            self._complete_turn(color, None)
        return outcome

    # --- moves ---
    def play(self, from_square: str, to_square: str) -> Undo:
        f, t = parse_square(from_square), parse_square(to_square)
        for m in self.legal_moves(self.side_to_move):
            if m.from_sq == f and m.to_sq == t:
                return self.push(m)
        raise ValueError(f"Illegal move: {from_square}{to_square}")

    def legal_destinations(self, square: str) -> Set[str]:
        piece = self.get(square)
        if piece is None:
            return set()
        return {sq_name(m.to_sq) for m in self.legal_moves(piece.color) if m.from_sq == piece.pos}

    def push(self, move: Move) -> Undo:
        self.transient_effects.clear()
        self._placement_before = self.placement()
        return super().push(move)

    def _after_apply(self, undo: Undo) -> None:
        undo.extras["arcana_state"] = self.effects.snapshot()
        undo.extras["arcana_history"] = self.history.snapshot()

        mover_color = undo.prev_side
        move = undo.move
        mover = undo.mover
        if self._placement_before is not None:
            self.history.positions.append(self._placement_before)
            self._placement_before = None

        captured = undo.captured_piece
        capture_sq = sq_name(captured_square(move)) if captured is not None else None
        if captured is not None:
            self.effects.forget_square(capture_sq)
            self.history.record_capture(CapturedPiece(captured.kind, captured.color, capture_sq, mover_color))

        relocations = {sq_name(old): p.square for p, old, _ in undo.changed if sq_name(old) != p.square}
        for p, old, _ in undo.removed:
            relocations[sq_name(old)] = sq_name(move.to_sq)
        self.effects.relocate(relocations)
        for p in undo.added:
            self.effects.retype(p.square, p.kind)

        self.effects.last_move = LastMove(
            sq_name(move.from_sq), sq_name(move.to_sq), mover.kind, mover_color,
            captured.kind if captured is not None else None,
        )

        arrived = self.board.piece_at(move.to_sq)
        curse = self.effects.curse_at(sq_name(move.to_sq))
        if arrived is not None and curse is not None and arrived.kind != "k":
            self._destroy(arrived, "cursed_square", curse.setter_color, undo)

        if captured is not None:
            self._on_capture(capture_sq, mover_color, undo)

        self._divine_intervention(mover_color.opponent(), undo)
        self._resolve_turn(undo, mover_color, mover, capture_sq)

    def _after_unapply(self, undo: Undo) -> None:
        state = undo.extras.get("arcana_state")
        if state is not None:
            self.effects.restore(state)
        history = undo.extras.get("arcana_history")
        if history is not None:
            self.history.restore(history)

    # --- capture-time enforcement ---
    def _destroy(self, piece: Piece, reason: str, by_color: Optional[Color], undo: Optional[Undo]) -> None:
        square = piece.square
        if undo is not None:
            if any(a is piece for a in undo.added):
                undo.added.remove(piece)
            else:
                undo.removed.append((piece, piece.pos, piece.has_moved))
        self.board.remove_piece(piece.pos)
        self.effects.forget_square(square)
        self.history.record_capture(CapturedPiece(piece.kind, piece.color, square, by_color))
        self.transient_effects.append({"type": reason, "square": square, "kind": piece.kind, "color": piece.color.value})
        LOGGER.debug("arcana_piece_destroyed", extra={"reason": reason, "square": square})

    def _adjacent_enemies(self, square: str, color: Color) -> List[Piece]:
        out = []
        for s in adjacent_squares(square):
            p = self.get(s)
            if p is not None and p.color is not color and p.kind != "k":
                out.append(p)
        return out

    def _on_capture(self, capture_sq: str, color: Color, undo: Undo) -> None:
        if self.effects.focus_fire[color]:
            self.effects.focus_fire[color] = False
            self.transient_effects.append({"type": "focus_fire", "square": capture_sq, "extra_draws": 1})

        if self.effects.poison_touch[color]:
            self.effects.poison_touch[color] = False
            candidates = [p for p in self._adjacent_enemies(capture_sq, color) if self.effects.poison_at(p.square) is None]
            if candidates:
                victim = self.rng.choice(candidates)
                self.effects.poisoned_pieces.append(Poison(victim.square, self.config.poison_turns, color))
                self.transient_effects.append({"type": "poison_touch", "square": victim.square})

        if self.effects.chain_lightning[color]:
            self.effects.chain_lightning[color] = False
            struck = [
                p for p in self._adjacent_enemies(capture_sq, color)
                if capture_blocked(self, self.effects, p.square) is None
            ][: self.config.chain_lightning_max]
            for p in struck:
                self._destroy(p, "chain_lightning", color, undo)

    def _divine_intervention(self, protected: Color, undo: Undo) -> None:
        if not self.effects.divine_intervention[protected] or not self.in_check(protected):
            return
        king = self.board.king_of(protected)
        checkers = [p for p in self.board.pieces_of(protected.opponent()) if king.pos in set(p.attacks(self))]
        for p in checkers:
            if p.kind != "k":
                self._destroy(p, "divine_intervention", protected, undo)
        self.effects.divine_intervention[protected] = False

    # --- turn flow ---
    def _resolve_turn(self, undo: Undo, color: Color, mover: Piece, capture_sq: Optional[str]) -> None:
        strike = self.effects.strike_for(color)
        if strike is not None and strike.first_kill_square is not None:
            # this was the follow-up strike
            self._clear_strike(color)
        elif strike is not None and capture_sq is not None and self._strike_arms(color, mover):
            strike.first_kill_square = capture_sq
            if self.legal_moves(color):
                self.side_to_move = color
                self.transient_effects.append({"type": "strike_followup", "first_kill": capture_sq})
                return
            self._clear_strike(color)

        if self.effects.queens_gambit[color] > 0:
            self.effects.queens_gambit[color] -= 1
            self.side_to_move = color
            self.transient_effects.append({"type": "queens_gambit"})
            return

        self._complete_turn(color, undo)

    def _strike_arms(self, color: Color, mover: Piece) -> bool:
        if self.effects.berserker_rage[color] is not None:
            return True
        return mover.kind in STRIKE_KINDS

    def _clear_strike(self, color: Color) -> None:
        self.effects.double_strike[color] = None
        self.effects.berserker_rage[color] = None

    def _complete_turn(self, color: Color, undo: Optional[Undo]) -> TurnReport:
        report = advance_turn(self.effects, color)
        for poison in report.poison_expired:
            piece = self.get(poison.square)
            if piece is not None and piece.kind != "k":
                self._destroy(piece, "poison", poison.poisoned_by, undo)
        for image in report.mirror_expired:
            piece = self.get(image.square)
            if piece is not None and piece.kind == image.kind and piece.color is image.color:
                self._destroy(piece, "mirror_image_fades", None, undo)
        if report.skipped_color is not None:
            self.side_to_move = color
            self.transient_effects.append({"type": "turn_skipped", "color": report.skipped_color.value})
        return report
