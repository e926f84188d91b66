"""Arcana chess rule engine.

- core: piece-driven chess rules and the square-name adapter
- arcana: card catalog, targeting, effects, enhanced moves and lifecycle
- api: stable JSON-oriented facade for UIs
- fen/config/cli: formats, environment config and the command line
"""

from . import core, arcana, api
from .config import ArcanaConfig
from .fen import parse_fen, game_to_fen, STARTPOS_FEN

__all__ = [
    "core","arcana","api",
    "ArcanaConfig",
    "parse_fen","game_to_fen","STARTPOS_FEN",
]
