import random
import unittest

from arcana_chess.arcana import ArcanaGame
from arcana_chess.arcana.catalog import CardId
from arcana_chess.arcana.effects import ArcanaParams, EffectExecutor, apply_arcana
from arcana_chess.arcana.errors import UnhandledCardError
from arcana_chess.arcana.state import ArcanaHistory, CapturedPiece, EffectState, ShieldType
from arcana_chess.core import Color
from arcana_chess.fen import STARTPOS_FEN, parse_fen, placement_to_fen

START_PLACEMENT = STARTPOS_FEN.split()[0]


def _game(fen=None):
    g = ArcanaGame()
    if fen is None:
        g.setup_standard()
    else:
        parse_fen(fen, g)
    return g


class EffectTestCase(unittest.TestCase):
    fen = None

    def setUp(self):
        self.g = _game(self.fen)
        self.st = EffectState()
        self.hist = ArcanaHistory()
        self.ex = EffectExecutor(random.Random(1337))

    def use(self, card, target=None, new_type=None, color=Color.WHITE):
        return self.ex.apply(self.g, card, ArcanaParams(target, new_type), color, self.st, self.hist)


class TestAllOrNothing(EffectTestCase):
    def test_failed_card_leaves_everything_untouched(self):
        before_state = self.st.to_dict()
        out = self.use(CardId.MIRROR_IMAGE, "a1")  # boxed in by its own pieces
        self.assertFalse(out.success)
        self.assertIn("No free square", out.message)
        self.assertEqual(placement_to_fen(self.g), START_PLACEMENT)
        self.assertEqual(self.st.to_dict(), before_state)

    def test_invalid_target_is_rejected_before_running(self):
        out = self.use(CardId.EXECUTION, "e8")
        self.assertFalse(out.success)
        self.assertIsNotNone(self.g.get("e8"))

    def test_missing_target(self):
        out = self.use(CardId.SHIELD_PAWN)
        self.assertFalse(out.success)
        self.assertIn("needs a target", out.message)

    def test_unknown_card_is_a_defect(self):
        with self.assertRaises(UnhandledCardError):
            self.use("fireball", "e2")

    def test_malformed_params_fail_without_raising(self):
        for params in ({"targetSquare": 5}, {"newType": ["r"]}, ["e2"]):
            with self.subTest(params=params):
                out = self.ex.apply(self.g, CardId.SHIELD_PAWN, params, Color.WHITE, self.st, self.hist)
                self.assertFalse(out.success)
                self.assertIsNone(self.st.pawn_shield[Color.WHITE])

    def test_game_reports_malformed_params_as_failure(self):
        out = self.g.use_arcana(CardId.SHIELD_PAWN, {"targetSquare": 5}, Color.WHITE)
        self.assertFalse(out.success)
        self.assertIn("targetSquare", out.message)
        self.assertIs(self.g.side_to_move, Color.WHITE)


def _capture(kind, square="h4"):
    def prep(case):
        case.hist.record_capture(CapturedPiece(kind, Color.WHITE, square, Color.BLACK))
    return prep


def _use_first(card, target=None):
    def prep(case):
        case.assertTrue(case.use(card, target).success)
    return prep


# (fen or None for the start position, setup, card, target, new type)
FAILING_CASES = {
    "pawn_guard_nothing_behind": ("4k3/8/8/8/8/8/3P4/4K3 w - - 0 1", None, CardId.PAWN_GUARD, "d2", None),
    "soft_push_destination_occupied": ("4k3/8/8/8/8/8/1P6/N3K3 w - - 0 1", None, CardId.SOFT_PUSH, "a1", None),
    "soft_push_already_centred": ("4k3/8/8/8/3N4/8/8/4K3 w - - 0 1", None, CardId.SOFT_PUSH, "d4", None),
    "necromancy_pawn_rank_full": (None, _capture("p", "e4"), CardId.NECROMANCY, None, None),
    "astral_rebirth_back_rank_full": (None, _capture("r"), CardId.ASTRAL_REBIRTH, None, None),
    "time_travel_without_history": (None, None, CardId.TIME_TRAVEL, None, None),
    "temporal_echo_without_last_move": (None, None, CardId.TEMPORAL_ECHO, None, None),
    "divine_intervention_twice": (None, _use_first(CardId.DIVINE_INTERVENTION), CardId.DIVINE_INTERVENTION, None, None),
    "time_freeze_twice": (None, _use_first(CardId.TIME_FREEZE), CardId.TIME_FREEZE, None, None),
    "sanctuary_twice": (None, _use_first(CardId.SANCTUARY, "d4"), CardId.SANCTUARY, "d4", None),
    "cursed_square_twice": (None, _use_first(CardId.CURSED_SQUARE, "e4"), CardId.CURSED_SQUARE, "e4", None),
    "metamorphosis_into_queen": (None, None, CardId.METAMORPHOSIS, "b1", "q"),
    "mirror_image_boxed_in": (None, None, CardId.MIRROR_IMAGE, "a1", None),
    "execution_on_king": (None, None, CardId.EXECUTION, "e8", None),
}


class TestFailedCardsLeaveNoTrace(EffectTestCase):
    def _fresh(self, fen):
        self.fen = fen
        self.setUp()

    def _trace(self):
        return placement_to_fen(self.g), self.st.to_dict(), self.hist.to_dict()

    def test_board_state_and_history_unchanged(self):
        for name, (fen, prep, card, target, new_type) in FAILING_CASES.items():
            with self.subTest(case=name):
                self._fresh(fen)
                if prep is not None:
                    prep(self)
                before = self._trace()
                out = self.use(card, target, new_type)
                self.assertFalse(out.success, out.message)
                self.assertEqual(self._trace(), before)

    def test_full_back_rank_keeps_the_captured_pool(self):
        _capture("r")(self)
        out = self.use(CardId.ASTRAL_REBIRTH)
        self.assertFalse(out.success)
        self.assertIn("back rank", out.message)
        self.assertEqual([cp.kind for cp in self.hist.captured[Color.WHITE]], ["r"])
        self.assertEqual(placement_to_fen(self.g), START_PLACEMENT)

    def test_full_pawn_rank_keeps_the_captured_pawns(self):
        _capture("p", "e4")(self)
        self.assertFalse(self.use(CardId.NECROMANCY).success)
        self.assertEqual(len(self.hist.captured[Color.WHITE]), 1)


class TestOutcomePayload(EffectTestCase):
    def test_success_payload(self):
        out = self.use(CardId.EXECUTION, "b8")
        d = out.to_dict()
        self.assertTrue(d["success"])
        self.assertEqual(d["soundEffect"], "arcana:execution")
        self.assertEqual(d["visualEffect"], "execution")
        self.assertEqual(d["highlightSquares"], ["b8"])
        self.assertEqual(set(d), {"success", "message", "visualEffect", "soundEffect", "highlightSquares", "highlightColor"})

    def test_params_from_wire(self):
        p = ArcanaParams.from_dict({"targetSquare": "E2", "newType": "R"})
        self.assertEqual((p.target_square, p.new_type), ("e2", "r"))
        self.assertEqual(ArcanaParams.from_dict({"target_square": "a1"}).target_square, "a1")
        self.assertEqual(ArcanaParams.from_dict(None), ArcanaParams())
        with self.assertRaises(ValueError):
            ArcanaParams.from_dict({"targetSquare": 5})
        with self.assertRaises(ValueError):
            ArcanaParams.from_dict(["e2"])


class TestDefenseCards(EffectTestCase):
    def test_shield_pawn(self):
        self.assertTrue(self.use(CardId.SHIELD_PAWN, "e2").success)
        shield = self.st.pawn_shield[Color.WHITE]
        self.assertEqual((shield.square, shield.turns_left, shield.shield_type), ("e2", 1, ShieldType.PAWN))

    def test_pawn_guard_protects_piece_behind(self):
        self.assertTrue(self.use(CardId.PAWN_GUARD, "d2").success)
        shield = self.st.pawn_shield[Color.WHITE]
        self.assertEqual((shield.square, shield.pawn_square, shield.shield_type), ("d1", "d2", ShieldType.BEHIND))

    def test_sanctuary_twice_fails(self):
        self.assertTrue(self.use(CardId.SANCTUARY, "d4").success)
        self.assertFalse(self.use(CardId.SANCTUARY, "d4").success)
        self.assertEqual(len(self.st.sanctuaries), 1)

    def test_time_freeze_marks_opponent(self):
        self.assertTrue(self.use(CardId.TIME_FREEZE).success)
        self.assertTrue(self.st.time_frozen[Color.BLACK])
        self.assertFalse(self.use(CardId.TIME_FREEZE).success)


class TestPawnGuardWithoutCover(EffectTestCase):
    fen = "4k3/8/8/8/8/8/3P4/4K3 w - - 0 1"

    def test_nothing_behind(self):
        out = self.use(CardId.PAWN_GUARD, "d2")
        self.assertFalse(out.success)
        self.assertIsNone(self.st.pawn_shield[Color.WHITE])


class TestMovementCards(EffectTestCase):
    fen = "4k3/8/8/8/3N4/8/4P3/N3K3 w - - 0 1"

    def test_soft_push_moves_toward_centre(self):
        out = self.use(CardId.SOFT_PUSH, "a1")
        self.assertTrue(out.success)
        self.assertIsNone(self.g.get("a1"))
        self.assertEqual(self.g.get("b2").kind, "n")
        self.assertEqual(out.highlight_squares, ("a1", "b2"))

    def test_soft_push_pawn_steps_forward(self):
        self.assertTrue(self.use(CardId.SOFT_PUSH, "e2").success)
        self.assertEqual(self.g.get("e3").kind, "p")

    def test_centred_piece_cannot_be_pushed(self):
        self.assertFalse(self.use(CardId.SOFT_PUSH, "d4").success)
        self.assertEqual(self.g.get("d4").kind, "n")

    def test_temporal_echo_needs_a_previous_move(self):
        self.assertFalse(self.use(CardId.TEMPORAL_ECHO).success)


class TestRoyalSwapAndExecution(EffectTestCase):
    def test_royal_swap_is_atomic(self):
        self.assertTrue(self.use(CardId.ROYAL_SWAP, "a1").success)
        self.assertEqual(self.g.get("a1").kind, "k")
        self.assertEqual(self.g.get("e1").kind, "r")
        self.assertTrue(self.g.get("a1").has_moved)
        self.assertEqual(len(self.g.board.all_pieces()), 32)

    def test_execution_on_b8(self):
        self.assertTrue(self.use(CardId.EXECUTION, "b8").success)
        self.assertIsNone(self.g.get("b8"))
        self.assertEqual(len(self.g.board.all_pieces()), 31)

    def test_mind_control(self):
        self.assertTrue(self.use(CardId.MIND_CONTROL, "d8").success)
        queen = self.g.get("d8")
        self.assertEqual((queen.kind, queen.color), ("q", Color.WHITE))
        self.assertEqual(self.st.mind_controlled[0].original_color, Color.BLACK)


class TestTransformations(EffectTestCase):
    def test_metamorphosis_guard(self):
        for bad in ("k", "q", "n", "x", None):
            with self.subTest(new_type=bad):
                self.assertFalse(self.use(CardId.METAMORPHOSIS, "b1", bad).success)
                self.assertEqual(self.g.get("b1").kind, "n")

    def test_metamorphosis_pawn_not_on_back_rank(self):
        self.assertFalse(self.use(CardId.METAMORPHOSIS, "a1", "p").success)

    def test_metamorphosis(self):
        self.assertTrue(self.use(CardId.METAMORPHOSIS, "b1", "r").success)
        piece = self.g.get("b1")
        self.assertEqual((piece.kind, piece.color), ("r", Color.WHITE))

    def test_sacrifice_removes_own_piece(self):
        self.assertTrue(self.use(CardId.SACRIFICE, "g1").success)
        self.assertIsNone(self.g.get("g1"))
        self.assertFalse(self.use(CardId.SACRIFICE, "e1").success)
        self.assertEqual(self.g.get("e1").kind, "k")

    def test_promotion_ritual(self):
        self.assertTrue(self.use(CardId.PROMOTION_RITUAL, "e2").success)
        self.assertEqual(self.g.get("e2").kind, "q")

    def test_mirror_image(self):
        self.g.play("e2", "e4")
        out = self.use(CardId.MIRROR_IMAGE, "e4")
        self.assertTrue(out.success)
        # first empty neighbour in scan order
        self.assertEqual(self.g.get("d3").kind, "p")
        self.assertEqual(self.st.mirror_images[0].square, "d3")
        self.assertEqual(self.st.mirror_images[0].turns_left, 3)


class TestResurrection(EffectTestCase):
    fen = "4k3/8/8/8/8/8/8/4K3 w - - 0 1"

    def test_necromancy_raises_at_most_two(self):
        for sq in ("c4", "d4", "e4"):
            self.hist.record_capture(CapturedPiece("p", Color.WHITE, sq, Color.BLACK))
        out = self.use(CardId.NECROMANCY)
        self.assertTrue(out.success)
        self.assertEqual(out.highlight_squares, ("a2", "b2"))
        self.assertEqual(len(self.hist.captured[Color.WHITE]), 1)

    def test_necromancy_without_pawns(self):
        self.assertFalse(self.use(CardId.NECROMANCY).success)

    def test_astral_rebirth(self):
        self.hist.record_capture(CapturedPiece("r", Color.WHITE, "h4", Color.BLACK))
        self.assertTrue(self.use(CardId.ASTRAL_REBIRTH).success)
        self.assertEqual(self.g.get("a1").kind, "r")
        self.assertEqual(self.hist.captured[Color.WHITE], [])


class TestChaosTheory(unittest.TestCase):
    def _run(self, seed):
        g = _game()
        st = EffectState()
        out = apply_arcana(g, CardId.CHAOS_THEORY, None, Color.WHITE, st, rng=random.Random(seed))
        return g, out

    def test_conserves_pieces(self):
        g, out = self._run(7)
        self.assertTrue(out.success)
        kinds = sorted((p.kind, p.color.value) for p in g.board.all_pieces())
        start = sorted((p.kind, p.color.value) for p in _game().board.all_pieces())
        self.assertEqual(kinds, start)
        self.assertEqual(g.get("e1").kind, "k")
        self.assertEqual(g.get("e8").kind, "k")

    def test_shuffles_stay_on_occupied_squares_per_colour(self):
        start = _game()
        for seed in range(20):
            with self.subTest(seed=seed):
                g, out = self._run(seed)
                self.assertTrue(out.success)
                for color in (Color.WHITE, Color.BLACK):
                    before = sorted((p.square, p.kind) for p in start.board.pieces_of(color))
                    after = sorted((p.square, p.kind) for p in g.board.pieces_of(color))
                    self.assertEqual({s for s, _ in after}, {s for s, _ in before})
                    self.assertEqual(sorted(k for _, k in after), sorted(k for _, k in before))
                self.assertEqual(set(g.placement()), set(start.placement()))

    def test_same_seed_same_result(self):
        a, _ = self._run(42)
        b, _ = self._run(42)
        self.assertEqual(placement_to_fen(a), placement_to_fen(b))


class TestInformationCards(EffectTestCase):
    def test_vision_lists_enemy_destinations(self):
        out = self.use(CardId.VISION)
        self.assertEqual(len(out.highlight_squares), 16)
        self.assertTrue(self.st.vision[Color.WHITE])

    def test_quiet_thought_safe_king(self):
        out = self.use(CardId.QUIET_THOUGHT)
        self.assertEqual(out.highlight_squares, ("e1",))

    def test_map_fragments(self):
        out = self.use(CardId.MAP_FRAGMENTS)
        self.assertEqual(len(out.highlight_squares), 3)


class TestTimeTravel(unittest.TestCase):
    def test_rewinds_two_plies(self):
        g = _game()
        g.play("e2", "e4")
        g.play("e7", "e5")
        out = g.use_arcana(CardId.TIME_TRAVEL, None, Color.WHITE)
        self.assertTrue(out.success)
        self.assertEqual(placement_to_fen(g), START_PLACEMENT)
        self.assertEqual(g.history.positions, [])

    def test_nothing_to_rewind(self):
        g = _game()
        self.assertFalse(g.use_arcana(CardId.TIME_TRAVEL).success)


if __name__ == "__main__":
    unittest.main()
