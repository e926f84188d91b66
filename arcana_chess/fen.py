from __future__ import annotations

from typing import Optional

from .core import (
    Game, Color, sq, sq_name, rank_of, parse_square,
    NormalMove, PIECE_CLASSES, make_piece,
)

STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_HOMES = {
    "K": ("e1", "h1", Color.WHITE),
    "Q": ("e1", "a1", Color.WHITE),
    "k": ("e8", "h8", Color.BLACK),
    "q": ("e8", "a8", Color.BLACK),
}


def parse_fen(fen: str, game: Optional[Game] = None) -> Game:
    """Parse standard FEN into a fresh Game (or into the empty `game` passed in).

    Arcana effects are not represented in FEN; this builds the chess position only.
    """
    parts = fen.strip().split()
    if len(parts) != 6:
        raise ValueError("FEN must have 6 fields")

    placement, stm, castling, ep, halfmove, fullmove = parts

    g = game if game is not None else Game()
    if g.board.all_pieces():
        raise ValueError("parse_fen needs an empty game")

    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError("FEN placement must have 8 ranks")

    kings = {Color.WHITE: 0, Color.BLACK: 0}

    for rank_idx, row in enumerate(ranks):
        r = 7 - rank_idx
        f = 0
        for ch in row:
            if ch.isdigit():
                gap = int(ch)
                if gap < 1 or gap > 8:
                    raise ValueError("Bad empty-square run in FEN")
                f += gap
                if f > 8:
                    raise ValueError("Bad rank width in FEN")
                continue
            if f >= 8:
                raise ValueError("Bad rank width in FEN")
            if ch.lower() not in PIECE_CLASSES:
                raise ValueError(f"Unknown piece char: {ch}")
            color = Color.WHITE if ch.isupper() else Color.BLACK
            g.board.add_piece(make_piece(ch, color, sq(f, r)))
            if ch.lower() == "k":
                kings[color] += 1
            f += 1
        if f != 8:
            raise ValueError("Bad rank width in FEN")

    if kings[Color.WHITE] != 1 or kings[Color.BLACK] != 1:
        raise ValueError("FEN must contain exactly one king per side")

    if stm not in ("w", "b"):
        raise ValueError("Bad side-to-move in FEN")
    g.side_to_move = Color(stm)

    try:
        g.halfmove_clock = int(halfmove)
        g.fullmove_number = int(fullmove)
    except ValueError:
        raise ValueError("Bad move clocks in FEN") from None

    if castling == "-":
        castling = ""
    elif len(set(castling)) != len(castling) or any(flag not in _HOMES for flag in castling):
        raise ValueError("Bad castling rights in FEN")

    def _is(square: str, kind: str, color: Color) -> bool:
        p = g.get(square)
        return p is not None and p.kind == kind and p.color is color

    for flag in castling:
        king_sq, rook_sq, color = _HOMES[flag]
        if not (_is(king_sq, "k", color) and _is(rook_sq, "r", color)):
            raise ValueError("Bad castling rights in FEN")

    # castling rights -> has_moved flags; anything off its home square has moved
    for p in g.board.all_pieces():
        p.has_moved = p.kind in ("k", "r")
    for flag in castling:
        king_sq, rook_sq, _ = _HOMES[flag]
        g.get(king_sq).has_moved = False
        g.get(rook_sq).has_moved = False

    # en passant: synthesize the double push as the last move
    if ep != "-":
        ep_sq = parse_square(ep)
        if g.side_to_move is Color.WHITE:
            if rank_of(ep_sq) != 5:
                raise ValueError("Bad en-passant square in FEN")
            to_sq, from_sq, expected = ep_sq - 8, ep_sq + 8, Color.BLACK
        else:
            if rank_of(ep_sq) != 2:
                raise ValueError("Bad en-passant square in FEN")
            to_sq, from_sq, expected = ep_sq + 8, ep_sq - 8, Color.WHITE

        if g.board.piece_at(ep_sq) is not None or g.board.piece_at(from_sq) is not None:
            raise ValueError("Bad en-passant square in FEN")
        pawn = g.board.piece_at(to_sq)
        if pawn is None or pawn.kind != "p" or pawn.color is not expected:
            raise ValueError("Bad en-passant square in FEN")

        g.last_move = NormalMove(from_sq=from_sq, to_sq=to_sq, flags=("double_pawn_push",))

    return g


def placement_to_fen(g: Game) -> str:
    rows = []
    for row in g.board_snapshot():
        empty = 0
        out = []
        for p in row:
            if p is None:
                empty += 1
                continue
            if empty:
                out.append(str(empty))
                empty = 0
            out.append(p.symbol)
        if empty:
            out.append(str(empty))
        rows.append("".join(out))
    return "/".join(rows)


def game_to_fen(g: Game) -> str:
    rights = []
    for flag in "KQkq":
        king_sq, rook_sq, color = _HOMES[flag]
        king, rook = g.get(king_sq), g.get(rook_sq)
        if (
            king is not None and king.kind == "k" and king.color is color and not king.has_moved
            and rook is not None and rook.kind == "r" and rook.color is color and not rook.has_moved
        ):
            rights.append(flag)
    castling = "".join(rights) or "-"

    ep = "-"
    lm = g.last_move
    if isinstance(lm, NormalMove) and "double_pawn_push" in lm.flags:
        moved = g.board.piece_at(lm.to_sq)
        if moved is not None and moved.kind == "p":
            ep = sq_name(lm.to_sq - 8 * moved.color.forward)

    return f"{placement_to_fen(g)} {g.side_to_move.value} {castling} {ep} {g.halfmove_clock} {g.fullmove_number}"
