"""Stable JSON boundary for a frontend or server.

Only speaks JSON-friendly structures:
- state snapshots
- move encode/decode and `useArcana` action parsing
- card use, apply and undo producing diffs suitable for animation
"""

from .facade import ArcanaEngine, diff
from .serde import dict_to_move, move_to_dict, outcome_to_dict, parse_action, snapshot

__all__ = ["ArcanaEngine", "diff", "dict_to_move", "move_to_dict", "outcome_to_dict", "parse_action", "snapshot"]
