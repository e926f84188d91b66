from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Tuple, TYPE_CHECKING

from ..core.abilities import DIAG, KNIGHT_DELTAS, ORTH
from ..core.moves import Move, Undo
from ..core.pieces import Queen
from ..core.types import Color, file_of, rank_of, in_bounds, sq, sq_name
from .state import EffectState

if TYPE_CHECKING:
    from ..core.game import Game
    from ..core.piece import Piece
    from .adapter import ChessRules


@dataclass(frozen=True)
class ArcanaMove(Move):
    """A move granted by an active effect. `captured_sq` is -1 when the capture
    (if any) happens on the destination square."""

    captured_sq: int = -1

    def capture_square(self) -> int:
        return self.to_sq if self.captured_sq < 0 else self.captured_sq

    def is_capture(self, game: "Game") -> bool:
        mover = game.board.piece_at(self.from_sq)
        target = game.board.piece_at(self.capture_square())
        return mover is not None and target is not None and target.color is not mover.color

    def apply(self, game: "Game") -> Undo:
        board = game.board
        mover = board.piece_at(self.from_sq)
        if mover is None:
            raise ValueError("No piece to move")

        captured = board.piece_at(self.capture_square())
        if captured is not None and captured.color is mover.color:
            raise ValueError("Cannot capture a friendly piece")

        undo = Undo(prev_last_move=game.last_move, prev_side=game.side_to_move)
        undo.move = self
        undo.mover = mover
        undo.captured_piece = captured

        if captured is not None:
            undo.captured.append((captured, captured.pos, captured.has_moved))
            board.remove_piece(captured.pos)

        last_rank = mover.color.opponent().back_rank
        if mover.kind == "p" and rank_of(self.to_sq) == last_rank:
            undo.removed.append((mover, mover.pos, mover.has_moved))
            board.remove_piece(self.from_sq)
            promoted = Queen(mover.color, self.to_sq)
            promoted.has_moved = True
            board.add_piece(promoted)
            undo.added.append(promoted)
        else:
            undo.changed.append((mover, mover.pos, mover.has_moved))
            board.move_piece(self.from_sq, self.to_sq)
            mover.has_moved = True

        game.last_move = self
        game.side_to_move = game.side_to_move.opponent()
        return undo


Landing = Tuple[int, int, str]  # (to_sq, captured_sq, grant)


def _can_land(game: "ChessRules", piece: "Piece", s: int) -> bool:
    target = game.board.piece_at(s)
    return target is None or target.color is not piece.color


def _spectral_march(game, piece: "Piece") -> Iterator[Landing]:
    f0, r0 = file_of(piece.pos), rank_of(piece.pos)
    for df, dr in ORTH:
        passed = False
        f, r = f0 + df, r0 + dr
        while in_bounds(f, r):
            s = sq(f, r)
            target = game.board.piece_at(s)
            if target is None:
                yield s, -1, "spectral_march"
            elif target.color is piece.color:
                if passed:
                    break
                passed = True
            else:
                yield s, -1, "spectral_march"
                break
            f += df
            r += dr


def _phantom_step(game, piece: "Piece") -> Iterator[Landing]:
    f0, r0 = file_of(piece.pos), rank_of(piece.pos)
    for df, dr in KNIGHT_DELTAS:
        f, r = f0 + df, r0 + dr
        if in_bounds(f, r) and _can_land(game, piece, sq(f, r)):
            yield sq(f, r), -1, "phantom_step"


def _pawn_rush(game, piece: "Piece") -> Iterator[Landing]:
    f0, r0 = file_of(piece.pos), rank_of(piece.pos)
    step = piece.color.forward
    if not in_bounds(f0, r0 + 2 * step):
        return
    one, two = sq(f0, r0 + step), sq(f0, r0 + 2 * step)
    if game.board.piece_at(one) is None and game.board.piece_at(two) is None:
        yield two, -1, "pawn_rush"


def _sharpshooter(game, piece: "Piece") -> Iterator[Landing]:
    f0, r0 = file_of(piece.pos), rank_of(piece.pos)
    for df, dr in DIAG:
        f, r = f0 + df, r0 + dr
        while in_bounds(f, r):
            s = sq(f, r)
            target = game.board.piece_at(s)
            if target is not None and target.color is piece.color:
                break
            yield s, -1, "sharpshooter"
            f += df
            r += dr


def _knight_of_storms(game, piece: "Piece") -> Iterator[Landing]:
    f0, r0 = file_of(piece.pos), rank_of(piece.pos)
    for df in range(-2, 3):
        for dr in range(-2, 3):
            if df == 0 and dr == 0:
                continue
            f, r = f0 + df, r0 + dr
            if in_bounds(f, r) and _can_land(game, piece, sq(f, r)):
                yield sq(f, r), -1, "knight_of_storms"


def _temporal_echo(game, piece: "Piece", df: int, dr: int) -> Iterator[Landing]:
    f0, r0 = file_of(piece.pos), rank_of(piece.pos)
    f, r = f0 + df, r0 + dr
    if not in_bounds(f, r) or not _can_land(game, piece, sq(f, r)):
        return
    if df == 0 or dr == 0 or abs(df) == abs(dr):
        # line-shaped echoes slide; every square before the landing must be empty
        n = max(abs(df), abs(dr))
        sf, sr = (df > 0) - (df < 0), (dr > 0) - (dr < 0)
        for i in range(1, n):
            if game.board.piece_at(sq(f0 + sf * i, r0 + sr * i)) is not None:
                return
    yield sq(f, r), -1, "temporal_echo"


def _en_passant_master(game, piece: "Piece") -> Iterator[Landing]:
    f0, r0 = file_of(piece.pos), rank_of(piece.pos)
    r1 = r0 + piece.color.forward
    for df in (-1, 1):
        f = f0 + df
        if not in_bounds(f, r1):
            continue
        beside = game.board.piece_at(sq(f, r0))
        if beside is None or beside.kind != "p" or beside.color is piece.color:
            continue
        if game.board.piece_at(sq(f, r1)) is None:
            yield sq(f, r1), sq(f, r0), "en_passant_master"


def _landings(game: "ChessRules", piece: "Piece", color: Color, state: EffectState) -> Iterator[Landing]:
    if state.spectral_march[color] and piece.kind == "r":
        yield from _spectral_march(game, piece)
    if state.phantom_step[color]:
        yield from _phantom_step(game, piece)
    if state.pawn_rush[color] and piece.kind == "p":
        yield from _pawn_rush(game, piece)
    if state.sharpshooter[color] and piece.kind == "b":
        yield from _sharpshooter(game, piece)
    storm = state.knight_of_storms[color]
    if storm is not None and piece.kind == "n" and storm.square == piece.square:
        yield from _knight_of_storms(game, piece)
    echo = state.temporal_echo[color]
    if echo is not None:
        yield from _temporal_echo(game, piece, echo.file_delta, echo.rank_delta)
    if state.en_passant_master[color] and piece.kind == "p":
        yield from _en_passant_master(game, piece)


def arcana_moves(
    game: "ChessRules",
    square: str,
    acting_color: Color,
    state: EffectState,
    exclude: Optional[Set[int]] = None,
) -> List[ArcanaMove]:
    """Extra moves the active grants give the acting colour's piece on `square`.

    Destinations in `exclude` (typically those the standard rules already
    allow) are skipped; the first grant to reach a destination wins.
    """
    piece = game.get(square)
    if piece is None or piece.color is not acting_color:
        return []
    seen: Set[int] = set(exclude or ())
    out: List[ArcanaMove] = []
    for to_sq, captured_sq, grant in _landings(game, piece, acting_color, state):
        if to_sq in seen:
            continue
        seen.add(to_sq)
        out.append(ArcanaMove(piece.pos, to_sq, flags=(grant,), captured_sq=captured_sq))
    return out


def legal_destinations(game: "ChessRules", square: str, acting_color: Color, state: EffectState) -> Set[str]:
    """Standard plus granted destinations, before king safety and capture protection.

    Granted patterns may reach the enemy king's square here; `ArcanaGame`
    drops those through its capture protection rule.
    """
    piece = game.get(square)
    if piece is None:
        return set()
    base = {sq_name(m.to_sq) for m in game.moves_for(square)}
    if piece.color is not acting_color:
        return base
    return base | {sq_name(m.to_sq) for m in arcana_moves(game, square, acting_color, state)}
