from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type, TYPE_CHECKING

from .types import Color

if TYPE_CHECKING:
    from .game import Game
    from .piece import Piece


ChangedPieceState = Tuple["Piece", int, bool]

@dataclass(frozen=True)
class Move:
    from_sq: int
    to_sq: int
    flags: Tuple[str, ...] = ()

    def apply(self, game: "Game") -> "Undo":
        raise NotImplementedError

    def is_capture(self, game: "Game") -> bool:
        target = game.board.piece_at(self.to_sq)
        mover = game.board.piece_at(self.from_sq)
        return target is not None and mover is not None and target.color is not mover.color

def _begin(game: "Game", move: Move, mover: "Piece", captured: Optional["Piece"]) -> "Undo":
    undo = Undo(prev_last_move=game.last_move, prev_side=game.side_to_move)
    undo.move = move
    undo.mover = mover
    undo.captured_piece = captured
    return undo

def _finish(game: "Game", move: Move) -> None:
    game.last_move = move
    game.side_to_move = game.side_to_move.opponent()

@dataclass(frozen=True)
class NormalMove(Move):
    def apply(self, game: "Game") -> "Undo":
        board = game.board
        moved = board.piece_at(self.from_sq)
        if moved is None:
            raise ValueError("No piece to move")

        captured = board.piece_at(self.to_sq)
        undo = _begin(game, self, moved, captured)

        undo.changed.append((moved, moved.pos, moved.has_moved))
        if captured is not None:
            undo.captured.append((captured, captured.pos, captured.has_moved))
            board.remove_piece(captured.pos)

        board.move_piece(self.from_sq, self.to_sq)
        moved.has_moved = True

        _finish(game, self)
        return undo

@dataclass(frozen=True)
class EnPassantMove(Move):
    captured_sq: int = -1

    def apply(self, game: "Game") -> "Undo":
        board = game.board
        moved = board.piece_at(self.from_sq)
        captured = board.piece_at(self.captured_sq)
        if moved is None or captured is None:
            raise ValueError("Invalid en passant state")

        undo = _begin(game, self, moved, captured)
        undo.changed.append((moved, moved.pos, moved.has_moved))
        undo.captured.append((captured, captured.pos, captured.has_moved))

        board.remove_piece(self.captured_sq)
        board.move_piece(self.from_sq, self.to_sq)
        moved.has_moved = True

        _finish(game, self)
        return undo

    def is_capture(self, game: "Game") -> bool:
        return True

@dataclass(frozen=True)
class CastleMove(Move):
    rook_from: int = -1
    rook_to: int = -1

    def apply(self, game: "Game") -> "Undo":
        board = game.board
        king = board.piece_at(self.from_sq)
        rook = board.piece_at(self.rook_from)
        if king is None or rook is None:
            raise ValueError("Invalid castling state")

        undo = _begin(game, self, king, None)
        undo.changed.append((king, king.pos, king.has_moved))
        undo.changed.append((rook, rook.pos, rook.has_moved))

        board.move_piece(self.from_sq, self.to_sq)
        board.move_piece(self.rook_from, self.rook_to)
        king.has_moved = True
        rook.has_moved = True

        _finish(game, self)
        return undo

@dataclass(frozen=True)
class PromotionMove(Move):
    promote_to: Type["Piece"] = None  # type: ignore[assignment]

    def apply(self, game: "Game") -> "Undo":
        board = game.board
        pawn = board.piece_at(self.from_sq)
        if pawn is None:
            raise ValueError("No pawn to promote")

        captured = board.piece_at(self.to_sq)
        # the mover stays the pawn; the promoted piece is in undo.added
        undo = _begin(game, self, pawn, captured)

        undo.removed.append((pawn, pawn.pos, pawn.has_moved))
        board.remove_piece(self.from_sq)

        if captured is not None:
            undo.captured.append((captured, captured.pos, captured.has_moved))
            board.remove_piece(captured.pos)

        promoted = self.promote_to(pawn.color, self.to_sq)  # type: ignore[misc]
        promoted.has_moved = True
        board.add_piece(promoted)
        undo.added.append(promoted)

        _finish(game, self)
        return undo

@dataclass
class Undo:
    prev_last_move: Optional[Move]
    prev_side: Color

    move: Optional[Move] = None
    mover: Optional["Piece"] = None
    captured_piece: Optional["Piece"] = None

    changed: List[ChangedPieceState] = field(default_factory=list)
    captured: List[ChangedPieceState] = field(default_factory=list)
    removed: List[ChangedPieceState] = field(default_factory=list)
    added: List["Piece"] = field(default_factory=list)

    # extension bucket (the arcana layer stores effect snapshots here)
    extras: Dict[str, Any] = field(default_factory=dict)
