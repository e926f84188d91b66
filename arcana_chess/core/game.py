from __future__ import annotations

from typing import Iterable, List, Optional, TYPE_CHECKING

from .types import Color, parse_square, sq
from .board import Board
from .moves import Move, Undo
from .rules import Rule, KingSafetyRule

if TYPE_CHECKING:
    from .piece import Piece

class Game:
    """Standard chess on a piece-driven board.

    Besides the move stack it exposes the square-name adapter used by the
    arcana layer: get/put/remove/moves_for/turn/board_snapshot.
    """

    def __init__(self) -> None:
        self.board = Board()
        self.side_to_move: Color = Color.WHITE
        self.last_move: Optional[Move] = None
        self._stack: List[Undo] = []

        # clocks (for FEN friendliness)
        self.halfmove_clock: int = 0
        self.fullmove_number: int = 1

        self.rules: List[Rule] = [KingSafetyRule()]

    # --- extension hooks (override in subclasses) ---
    def _after_apply(self, undo: Undo) -> None:
        return

    def _after_unapply(self, undo: Undo) -> None:
        return

    # --- clocks ---
    def _update_clocks_after_apply(self, undo: Undo) -> None:
        undo.extras.setdefault("prev_halfmove_clock", self.halfmove_clock)
        undo.extras.setdefault("prev_fullmove_number", self.fullmove_number)

        is_capture = undo.captured_piece is not None
        is_pawn = undo.mover is not None and undo.mover.kind == "p"
        if is_capture or is_pawn:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        # fullmove increments after Black has played
        if undo.prev_side is Color.BLACK:
            self.fullmove_number += 1

    def _restore_clocks(self, undo: Undo) -> None:
        self.halfmove_clock = int(undo.extras.get("prev_halfmove_clock", 0))
        self.fullmove_number = int(undo.extras.get("prev_fullmove_number", 1))

    def push(self, move: Move) -> Undo:
        if self.board.piece_at(move.from_sq) is None:
            raise ValueError("No piece on from-square")

        undo = move.apply(self)
        self._stack.append(undo)
        self._update_clocks_after_apply(undo)
        self._after_apply(undo)
        return undo

    def push_checked(self, move: Move) -> Undo:
        if move not in self.legal_moves(self.side_to_move):
            raise ValueError("Illegal move")
        return self.push(move)

    def pop(self) -> None:
        undo = self._stack.pop()
        self._unapply(undo)
        self._after_unapply(undo)

    # quiet versions: no hooks, used for legality checks
    def push_quiet(self, move: Move) -> None:
        undo = move.apply(self)
        self._stack.append(undo)
        self._update_clocks_after_apply(undo)

    def pop_quiet(self) -> None:
        self._unapply(self._stack.pop())

    def _unapply(self, undo: Undo) -> None:
        self.side_to_move = undo.prev_side
        self.last_move = undo.prev_last_move
        self._restore_clocks(undo)

        pieces = self.board._pieces
        for p in reversed(undo.added):
            if pieces.get(p.pos) is p:
                pieces.pop(p.pos)
        for p, pos, hm in undo.removed + undo.captured + undo.changed:
            for k, v in list(pieces.items()):
                if v is p and k != pos:
                    pieces.pop(k)
                    break
            p.pos = pos
            p.has_moved = hm
            pieces[pos] = p

    def apply_rules(self, color: Color, moves: Iterable[Move]) -> Iterable[Move]:
        out: Iterable[Move] = moves
        for rule in self.rules:
            out = rule.apply(self, color, out)
        return out

    def pseudo_legal_moves(self, color: Color) -> Iterable[Move]:
        for p in self.board.pieces_of(color):
            yield from p.pseudo_legal_moves(self)

    def legal_moves(self, color: Color) -> List[Move]:
        return list(self.apply_rules(color, self.pseudo_legal_moves(color)))

    def is_square_attacked(self, target: int, by_color: Color) -> bool:
        for p in self.board.pieces_of(by_color):
            for a in p.attacks(self):
                if a == target:
                    return True
        return False

    def in_check(self, color: Color) -> bool:
        king = self.board.king_of(color)
        if king is None:
            return False
        return self.is_square_attacked(king.pos, color.opponent())

    def is_checkmate(self, color: Color) -> bool:
        return self.in_check(color) and not self.legal_moves(color)

    # --- square-name adapter ---
    def get(self, square: str) -> Optional["Piece"]:
        return self.board.piece_at(parse_square(square))

    def put(self, piece: "Piece", square: str) -> None:
        """Place a piece, replacing whatever stood on the square."""
        s = parse_square(square)
        self.board.remove_piece(s)
        piece.pos = s
        self.board.add_piece(piece)

    def remove(self, square: str) -> Optional["Piece"]:
        return self.board.remove_piece(parse_square(square))

    def moves_for(self, square: str) -> List[Move]:
        piece = self.get(square)
        if piece is None:
            return []
        return [m for m in self.legal_moves(piece.color) if m.from_sq == piece.pos]

    def turn(self) -> Color:
        return self.side_to_move

    def board_snapshot(self) -> List[List[Optional["Piece"]]]:
        """8x8 rows, rank 8 first, files a..h."""
        return [[self.board.piece_at(sq(f, r)) for f in range(8)] for r in range(7, -1, -1)]
