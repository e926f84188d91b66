from .types import Color, FILES, ALL_SQUARES, sq, file_of, rank_of, in_bounds, sq_name, parse_square, is_square_name
from .piece import Piece
from .board import Board
from .moves import Move, NormalMove, EnPassantMove, CastleMove, PromotionMove, Undo
from .game import Game
from .rules import Rule, KingSafetyRule
from .pieces import King, Queen, Rook, Bishop, Knight, Pawn, PIECE_CLASSES, make_piece
from .setup import setup_standard, ascii_board

__all__ = [
    "Color","FILES","ALL_SQUARES","sq","file_of","rank_of","in_bounds","sq_name","parse_square","is_square_name",
    "Piece","Board",
    "Move","NormalMove","EnPassantMove","CastleMove","PromotionMove","Undo",
    "Game","Rule","KingSafetyRule",
    "King","Queen","Rook","Bishop","Knight","Pawn","PIECE_CLASSES","make_piece",
    "setup_standard","ascii_board",
]
