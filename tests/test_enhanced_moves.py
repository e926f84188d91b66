import unittest

from arcana_chess.arcana import ArcanaGame
from arcana_chess.arcana.moves import ArcanaMove, arcana_moves, legal_destinations
from arcana_chess.arcana.state import EchoPattern, EffectState, SquareTimer
from arcana_chess.core import Color, parse_square, sq_name
from arcana_chess.fen import parse_fen


def _dests(moves):
    return {sq_name(m.to_sq) for m in moves}


class TestGrants(unittest.TestCase):
    def setUp(self):
        self.st = EffectState()

    def test_no_grants_no_moves(self):
        g = parse_fen("4k3/8/8/8/8/8/P7/R3K3 w - - 0 1")
        self.assertEqual(arcana_moves(g, "a1", Color.WHITE, self.st), [])

    def test_spectral_march_passes_one_ally(self):
        g = parse_fen("r3k3/8/8/8/8/8/P7/R3K3 w - - 0 1")
        self.st.spectral_march[Color.WHITE] = True
        got = _dests(arcana_moves(g, "a1", Color.WHITE, self.st))
        self.assertEqual(got, {"b1", "c1", "d1", "f1", "g1", "h1", "a3", "a4", "a5", "a6", "a7", "a8"})

    def test_phantom_step_any_piece(self):
        g = parse_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        self.st.phantom_step[Color.WHITE] = True
        self.assertEqual(_dests(arcana_moves(g, "e1", Color.WHITE, self.st)), {"c2", "d3", "f3", "g2"})

    def test_pawn_rush_from_any_rank(self):
        g = parse_fen("4k3/8/8/8/8/4P3/8/4K3 w - - 0 1")
        self.st.pawn_rush[Color.WHITE] = True
        self.assertEqual(_dests(arcana_moves(g, "e3", Color.WHITE, self.st)), {"e5"})

    def test_pawn_rush_blocked(self):
        g = parse_fen("4k3/8/8/8/4n3/4P3/8/4K3 w - - 0 1")
        self.st.pawn_rush[Color.WHITE] = True
        self.assertEqual(arcana_moves(g, "e3", Color.WHITE, self.st), [])

    def test_sharpshooter_shoots_through_enemies(self):
        g = parse_fen("4k3/8/8/8/8/8/3p4/2B1K3 w - - 0 1")
        self.st.sharpshooter[Color.WHITE] = True
        self.assertEqual(
            _dests(arcana_moves(g, "c1", Color.WHITE, self.st)),
            {"d2", "e3", "f4", "g5", "h6", "b2", "a3"},
        )

    def test_knight_of_storms_only_for_the_chosen_knight(self):
        g = parse_fen("4k3/8/8/8/3N4/8/8/N3K3 w - - 0 1")
        self.st.knight_of_storms[Color.WHITE] = SquareTimer("d4", 1, Color.WHITE)
        self.assertEqual(len(arcana_moves(g, "d4", Color.WHITE, self.st)), 24)
        self.assertEqual(arcana_moves(g, "a1", Color.WHITE, self.st), [])

    def test_temporal_echo_lines_need_a_clear_path(self):
        g = parse_fen("4k3/8/8/8/8/8/P7/R3K3 w - - 0 1")
        self.st.temporal_echo[Color.WHITE] = EchoPattern(0, 2)
        self.assertEqual(arcana_moves(g, "a1", Color.WHITE, self.st), [])
        self.assertEqual(_dests(arcana_moves(g, "a2", Color.WHITE, self.st)), {"a4"})
        self.assertEqual(_dests(arcana_moves(g, "e1", Color.WHITE, self.st)), {"e3"})

    def test_temporal_echo_knight_shape_jumps(self):
        g = parse_fen("4k3/8/8/8/8/8/P7/R3K3 w - - 0 1")
        self.st.temporal_echo[Color.WHITE] = EchoPattern(1, 2)
        self.assertEqual(_dests(arcana_moves(g, "a1", Color.WHITE, self.st)), {"b3"})

    def test_en_passant_master(self):
        g = parse_fen("4k3/8/8/3pP3/8/8/8/4K3 w - - 0 1")
        self.st.en_passant_master[Color.WHITE] = True
        moves = arcana_moves(g, "e5", Color.WHITE, self.st)
        self.assertEqual(len(moves), 1)
        self.assertEqual(sq_name(moves[0].to_sq), "d6")
        self.assertEqual(sq_name(moves[0].capture_square()), "d5")
        self.assertTrue(moves[0].is_capture(g))

    def test_other_colour_gets_nothing(self):
        g = parse_fen("4k3/8/8/8/8/8/P7/R3K3 w - - 0 1")
        self.st.phantom_step[Color.WHITE] = True
        self.assertEqual(arcana_moves(g, "e8", Color.WHITE, self.st), [])
        self.assertEqual(arcana_moves(g, "e4", Color.WHITE, self.st), [])

    def test_exclude_and_determinism(self):
        g = parse_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        self.st.phantom_step[Color.WHITE] = True
        first = arcana_moves(g, "e1", Color.WHITE, self.st)
        self.assertEqual(first, arcana_moves(g, "e1", Color.WHITE, self.st))
        trimmed = arcana_moves(g, "e1", Color.WHITE, self.st, exclude={parse_square("f3")})
        self.assertEqual(_dests(trimmed), {"c2", "d3", "g2"})
        self.assertTrue(all(isinstance(m, ArcanaMove) and m.flags == ("phantom_step",) for m in first))

    def test_legal_destinations_merges_standard_moves(self):
        g = parse_fen("4k3/8/8/8/8/4P3/8/4K3 w - - 0 1")
        self.st.pawn_rush[Color.WHITE] = True
        self.assertEqual(legal_destinations(g, "e3", Color.WHITE, self.st), {"e4", "e5"})
        self.assertEqual(legal_destinations(g, "e3", Color.BLACK, self.st), {"e4"})


class TestGrantedMovesInPlay(unittest.TestCase):
    def _game(self, fen):
        g = ArcanaGame()
        parse_fen(fen, g)
        return g

    def test_rush_is_playable_and_then_spent(self):
        g = self._game("4k3/8/8/8/8/4P3/8/4K3 w - - 0 1")
        g.effects.pawn_rush[Color.WHITE] = True
        self.assertEqual(g.legal_destinations("e3"), {"e4", "e5"})
        g.play("e3", "e5")
        self.assertEqual(g.get("e5").kind, "p")
        self.assertFalse(g.effects.pawn_rush[Color.WHITE])

    def test_rush_to_last_rank_promotes(self):
        g = self._game("4k3/8/P7/8/8/8/8/4K3 w - - 0 1")
        g.effects.pawn_rush[Color.WHITE] = True
        g.play("a6", "a8")
        self.assertEqual(g.get("a8").kind, "q")
        self.assertTrue(g.in_check(Color.BLACK))
        g.pop()
        self.assertEqual(g.get("a6").kind, "p")
        self.assertIsNone(g.get("a8"))

    def test_en_passant_master_removes_the_passed_pawn(self):
        g = self._game("4k3/8/8/3pP3/8/8/8/4K3 w - - 0 1")
        g.effects.en_passant_master[Color.WHITE] = True
        g.play("e5", "d6")
        self.assertIsNone(g.get("d5"))
        self.assertEqual(g.history.captured[Color.BLACK][0].square, "d5")

    def test_king_square_only_filtered_in_play(self):
        fen = "4k3/8/3R4/8/8/8/8/K7 w - - 0 1"
        st = EffectState()
        st.phantom_step[Color.WHITE] = True
        self.assertIn("e8", legal_destinations(parse_fen(fen), "d6", Color.WHITE, st))

        g = self._game(fen)
        g.effects.phantom_step[Color.WHITE] = True
        dests = g.legal_destinations("d6")
        self.assertIn("c8", dests)
        self.assertNotIn("e8", dests)

    def test_sharpshooter_ray_continues_past_the_enemy_king(self):
        fen = "8/8/8/8/3k4/8/1B6/K7 b - - 0 1"
        st = EffectState()
        st.sharpshooter[Color.WHITE] = True
        got = legal_destinations(parse_fen(fen), "b2", Color.WHITE, st)
        self.assertTrue({"c3", "d4", "e5", "f6", "g7", "h8"} <= got)

    def test_granted_move_cannot_expose_the_king(self):
        g = self._game("4r1k1/8/8/8/8/8/4R3/4K3 w - - 0 1")
        g.effects.phantom_step[Color.WHITE] = True
        # the rook is pinned on the e-file
        self.assertEqual(g.legal_destinations("e2"), {"e3", "e4", "e5", "e6", "e7", "e8"})


if __name__ == "__main__":
    unittest.main()
