import unittest

from arcana_chess.arcana.lifecycle import OWN_TURN_FLAGS, advance_turn
from arcana_chess.arcana.state import (
    CursedSquare, EffectState, MirrorImage, PawnShield, Poison, ShieldType, SquareTimer, StrikeRecord,
)
from arcana_chess.core import Color

W, B = Color.WHITE, Color.BLACK


class TestAdvanceTurn(unittest.TestCase):
    def setUp(self):
        self.st = EffectState()

    def test_shield_lasts_through_one_enemy_turn(self):
        self.st.pawn_shield[W] = PawnShield("e4", 1, ShieldType.PAWN)
        advance_turn(self.st, W)
        self.assertIsNotNone(self.st.pawn_shield[W])
        report = advance_turn(self.st, B)
        self.assertIsNone(self.st.pawn_shield[W])
        self.assertEqual(len(report.expired), 1)

    def test_counted_records_never_linger_at_zero(self):
        self.st.sanctuaries.append(SquareTimer("d4", 2, W))
        self.st.cursed_squares.append(CursedSquare("d5", 2, W))
        self.st.squire_support.append(SquareTimer("c3", 1, W))
        for mover in (B, W, B):
            advance_turn(self.st, mover)
            for rec in self.st.sanctuaries + self.st.cursed_squares + self.st.squire_support:
                self.assertGreater(rec.turns_left, 0)
        self.assertEqual(self.st.sanctuaries, [])
        self.assertEqual(self.st.cursed_squares, [])

    def test_records_only_tick_on_the_other_colours_turn(self):
        self.st.sanctuaries.append(SquareTimer("d4", 2, W))
        advance_turn(self.st, W)
        advance_turn(self.st, W)
        self.assertEqual(self.st.sanctuaries[0].turns_left, 2)

    def test_own_turn_grants_clear_after_own_turn(self):
        for attr in OWN_TURN_FLAGS:
            getattr(self.st, attr)[W] = True
        self.st.knight_of_storms[W] = SquareTimer("b1", 1, W)
        self.st.double_strike[W] = StrikeRecord()

        advance_turn(self.st, B)
        self.assertTrue(self.st.pawn_rush[W])

        advance_turn(self.st, W)
        for attr in OWN_TURN_FLAGS:
            self.assertFalse(getattr(self.st, attr)[W], attr)
        self.assertIsNone(self.st.knight_of_storms[W])
        self.assertIsNone(self.st.double_strike[W])

    def test_enemy_turn_flags(self):
        self.st.iron_fortress[W] = True
        self.st.fog_of_war[W] = True
        advance_turn(self.st, W)
        self.assertTrue(self.st.iron_fortress[W])
        advance_turn(self.st, B)
        self.assertFalse(self.st.iron_fortress[W])
        self.assertFalse(self.st.fog_of_war[W])

    def test_poison_and_mirror_expiry_reported(self):
        self.st.poisoned_pieces.append(Poison("d7", 1, W))
        self.st.mirror_images.append(MirrorImage("d3", "p", W, 1))
        report = advance_turn(self.st, B)
        self.assertEqual([p.square for p in report.poison_expired], ["d7"])
        self.assertEqual([m.square for m in report.mirror_expired], ["d3"])
        self.assertEqual(self.st.poisoned_pieces, [])
        self.assertEqual(self.st.mirror_images, [])

    def test_time_freeze_consumed_and_reported(self):
        self.st.time_frozen[B] = True
        report = advance_turn(self.st, W)
        self.assertIs(report.skipped_color, B)
        self.assertFalse(self.st.time_frozen[B])
        self.assertIsNone(advance_turn(self.st, W).skipped_color)

    def test_castle_break_counts_down_on_victims_turns(self):
        self.st.castle_broken[B] = 3
        advance_turn(self.st, W)
        self.assertEqual(self.st.castle_broken[B], 3)
        advance_turn(self.st, B)
        self.assertEqual(self.st.castle_broken[B], 2)

    def test_divine_intervention_persists(self):
        self.st.divine_intervention[W] = True
        for mover in (W, B, W, B):
            advance_turn(self.st, mover)
        self.assertTrue(self.st.divine_intervention[W])


if __name__ == "__main__":
    unittest.main()
