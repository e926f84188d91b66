import unittest

from arcana_chess.arcana import ArcanaGame
from arcana_chess.fen import parse_fen, game_to_fen, STARTPOS_FEN


class TestFEN(unittest.TestCase):
    def test_roundtrip_startpos(self):
        self.assertEqual(game_to_fen(parse_fen(STARTPOS_FEN)), STARTPOS_FEN)

    def test_roundtrip_kiwipete(self):
        fen = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
        self.assertEqual(game_to_fen(parse_fen(fen)), fen)

    def test_en_passant_square_survives_roundtrip(self):
        fen = "4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 2"
        self.assertEqual(game_to_fen(parse_fen(fen)), fen)

    def test_parse_into_arcana_game(self):
        g = ArcanaGame()
        parse_fen("4k3/8/8/8/8/8/4P3/4K3 b - - 3 12", g)
        self.assertEqual(g.get("e2").kind, "p")
        self.assertEqual(g.turn().value, "b")
        self.assertEqual((g.halfmove_clock, g.fullmove_number), (3, 12))

    def test_parse_into_non_empty_game_rejected(self):
        g = ArcanaGame()
        g.setup_standard()
        with self.assertRaises(ValueError):
            parse_fen(STARTPOS_FEN, g)

    def test_fen_invalid_cases(self):
        fen_invalid_cases = (
            "4k3/8/8/8/8/8/8/8 w - - 0 1",  # missing white king
            "4k3/8/8/8/8/8/8/4K2K w - - 0 1",  # two white kings
            "4k3/8/8/8/8/8/8/4K3 w K - 0 1",  # K without rook h1
            "4k3/8/8/8/8/8/8/4K3 w KK - 0 1",  # duplicate castling flag
            "4k3/8/8/8/8/8/8/4K3 w A - 0 1",  # invalid castling flag
            "4k3/8/8/8/8/8/8/4K3 x - - 0 1",  # bad side to move
            "4k3/8/8/8/8/8/8/4K3 w - - zero 1",  # bad clock
            "4k3/8/8/8/8/8/8/4K3 w - e3 0 1",  # white to move must use rank 6 EP square
            "4k3/8/8/8/8/8/8/4K3 w - e6 0 1",  # no pawn on expected destination square
            "4k3/8/8/8/8/8/4K3 w - - 0 1",  # seven ranks
            "4k3/9/8/8/8/8/8/4K3 w - - 0 1",  # bad empty run
            "4k3/8/8/8/8/8/8/4K3 w - -",  # missing clocks
            "4k3/8/8/8/8/8/8/4X3 w - - 0 1",  # unknown piece
        )

        for fen in fen_invalid_cases:
            with self.subTest(fen=fen):
                with self.assertRaises(ValueError):
                    parse_fen(fen)


if __name__ == "__main__":
    unittest.main()
