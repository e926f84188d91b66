from __future__ import annotations

import argparse
import json
import random
from typing import Optional

from .config import ArcanaConfig
from .core import ascii_board
from .fen import STARTPOS_FEN, game_to_fen, parse_fen
from .arcana.catalog import CARD_DEFS, Rarity, draw_card, draw_weights, parse_card_id
from .arcana.game import ArcanaGame
from .arcana.targeting import valid_targets
from .api.serde import parse_color


def _game(config: ArcanaConfig, fen: Optional[str], seed: Optional[int] = None) -> ArcanaGame:
    g = ArcanaGame(config=config, rng_seed=seed)
    parse_fen(fen or STARTPOS_FEN, g)
    return g


def cmd_cards(args: argparse.Namespace) -> int:
    for d in CARD_DEFS.values():
        target = d.target_kind.value if d.target_kind is not None else "-"
        ends = "ends turn" if d.ends_turn else ""
        print(f"{d.card_id.value:<22} {d.rarity.value:<10} {target:<26} {ends}")
    return 0


def cmd_targets(args: argparse.Namespace) -> int:
    g = _game(args.config, args.fen)
    color = parse_color(args.color) if args.color else g.side_to_move
    squares = sorted(valid_targets(g, parse_card_id(args.card), color, g.effects))
    print(" ".join(squares) if squares else "(no valid targets)")
    return 0


def cmd_apply(args: argparse.Namespace) -> int:
    g = _game(args.config, args.fen, args.seed)
    color = parse_color(args.color) if args.color else g.side_to_move
    params = {"targetSquare": args.target, "newType": args.new_type}
    outcome = g.use_arcana(parse_card_id(args.card), params, color)
    print(json.dumps(outcome.to_dict(), indent=2))
    print()
    print(ascii_board(g))
    print()
    print(game_to_fen(g))
    return 0 if outcome.success else 1


def cmd_moves(args: argparse.Namespace) -> int:
    g = _game(args.config, args.fen)
    piece = g.get(args.square)
    if piece is None:
        print(f"No piece on {args.square}")
        return 1
    for grant in args.grant or []:
        card = CARD_DEFS[parse_card_id(grant)]
        params = {"targetSquare": args.square} if card.target_kind is not None else None
        outcome = g.use_arcana(card.card_id, params, piece.color)
        if not outcome.success:
            print(f"{card.card_id.value}: {outcome.message}")
            return 1
    squares = sorted(g.legal_destinations(args.square))
    print(" ".join(squares) if squares else "(no moves)")
    return 0


def cmd_odds(args: argparse.Namespace) -> int:
    weights = draw_weights(args.sacrificed)
    counts = {r: sum(1 for d in CARD_DEFS.values() if d.rarity is r) for r in Rarity}
    total = sum(weights[r] * counts[r] for r in Rarity)
    for r in Rarity:
        share = weights[r] * counts[r] / total
        print(f"{r.value:<10} weight={weights[r]:<4} cards={counts[r]:<3} chance={share:.1%}")
    return 0


def cmd_draw(args: argparse.Namespace) -> int:
    seed = args.config.rng_seed if args.seed is None else args.seed
    rng = random.Random(seed)
    for _ in range(args.count):
        card = CARD_DEFS[draw_card(rng, args.sacrificed)]
        print(f"{card.card_id.value:<22} {card.rarity.value}")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    g = _game(args.config, args.fen)
    print(ascii_board(g))
    print()
    print(game_to_fen(g))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    config = ArcanaConfig.from_env()
    config.configure_logging()

    ap = argparse.ArgumentParser(prog="arcana-chess")
    sub = ap.add_subparsers(dest="cmd", required=True)

    sc = sub.add_parser("cards", help="List every arcana card")
    sc.set_defaults(fn=cmd_cards)

    st = sub.add_parser("targets", help="List the valid target squares of a card")
    st.add_argument("--card", type=str, required=True)
    st.add_argument("--fen", type=str, default=None)
    st.add_argument("--color", type=str, default=None, choices=["w", "b", "white", "black"])
    st.set_defaults(fn=cmd_targets)

    sa = sub.add_parser("apply", help="Apply one card and show the result")
    sa.add_argument("--card", type=str, required=True)
    sa.add_argument("--target", type=str, default=None)
    sa.add_argument("--new-type", type=str, default=None)
    sa.add_argument("--fen", type=str, default=None)
    sa.add_argument("--color", type=str, default=None, choices=["w", "b", "white", "black"])
    sa.add_argument("--seed", type=int, default=None)
    sa.set_defaults(fn=cmd_apply)

    sm = sub.add_parser("moves", help="Legal destinations of a piece, optionally under granted cards")
    sm.add_argument("--square", type=str, required=True)
    sm.add_argument("--fen", type=str, default=None)
    sm.add_argument("--grant", type=str, action="append", help="card id; repeatable")
    sm.set_defaults(fn=cmd_moves)

    so = sub.add_parser("odds", help="Card draw odds by rarity")
    so.add_argument("--sacrificed", type=str, default=None, choices=["p", "n", "b", "r", "q"])
    so.set_defaults(fn=cmd_odds)

    sd = sub.add_parser("draw", help="Draw random cards with the rarity weights")
    sd.add_argument("--count", type=int, default=1)
    sd.add_argument("--sacrificed", type=str, default=None, choices=["p", "n", "b", "r", "q"])
    sd.add_argument("--seed", type=int, default=None)
    sd.set_defaults(fn=cmd_draw)

    ss = sub.add_parser("show", help="Show ASCII board and FEN")
    ss.add_argument("--fen", type=str, default=None)
    ss.set_defaults(fn=cmd_show)

    args = ap.parse_args(argv)
    args.config = config
    return int(args.fn(args))


if __name__ == "__main__":
    raise SystemExit(main())
