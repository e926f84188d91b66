from __future__ import annotations

from typing import List, Optional, Protocol, TYPE_CHECKING

from ..core.types import Color

if TYPE_CHECKING:
    from ..core.board import Board
    from ..core.moves import Move
    from ..core.piece import Piece


class ChessRules(Protocol):
    """What the arcana engine needs from a chess rules implementation.

    `core.Game` satisfies it. `board` is used for snapshots and raw attack
    queries; everything else goes through square names.
    """

    board: "Board"

    def get(self, square: str) -> Optional["Piece"]: ...

    def put(self, piece: "Piece", square: str) -> None: ...

    def remove(self, square: str) -> Optional["Piece"]: ...

    def moves_for(self, square: str) -> List["Move"]: ...

    def legal_moves(self, color: Color) -> List["Move"]: ...

    def turn(self) -> Color: ...

    def board_snapshot(self) -> List[List[Optional["Piece"]]]: ...
