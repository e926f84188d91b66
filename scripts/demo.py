from __future__ import annotations

from pathlib import Path
import sys

# Ensure the repo root is on sys.path so `import arcana_chess` works.
ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

from arcana_chess.core import ascii_board
from arcana_chess.fen import parse_fen
from arcana_chess.arcana import ArcanaGame, CardId


def show(title: str, game: ArcanaGame) -> None:
    print("\n" + "=" * 72)
    print(title)
    print(ascii_board(game))
    print("Side to move:", game.side_to_move.value)


def load(fen: str) -> ArcanaGame:
    g = ArcanaGame()
    parse_fen(fen, g)
    return g


def demo_chain_lightning() -> None:
    g = load("4k3/8/2n1n3/3pb3/8/8/8/3RK3 w - - 0 1")
    show("Demo 1: Chain Lightning on the rook's next capture", g)

    print(g.use_arcana(CardId.CHAIN_LIGHTNING).message)
    g.play("d1", "d5")
    show("After Rd1xd5", g)
    print("Side effects:", g.transient_effects)


def demo_shield_and_sanctuary() -> None:
    g = load("4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1")
    show("Demo 2: a shielded pawn survives the enemy turn", g)

    print(g.use_arcana(CardId.SHIELD_PAWN, {"targetSquare": "e4"}).message)
    g.play("e1", "f1")
    print("Black pawn d5 may go to:", sorted(g.legal_destinations("d5")))


def demo_time_freeze() -> None:
    g = ArcanaGame()
    g.setup_standard()
    show("Demo 3: Time Freeze gives White two moves in a row", g)

    print(g.use_arcana(CardId.TIME_FREEZE).message)
    g.play("e2", "e4")
    g.play("d2", "d4")
    show("After e4 and d4", g)


if __name__ == "__main__":
    demo_chain_lightning()
    demo_shield_and_sanctuary()
    demo_time_freeze()
