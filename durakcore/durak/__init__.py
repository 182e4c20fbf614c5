"""
Durak card game module.

This module provides the rules engine for Durak: state models, move
validation, state transitions and per-player views.
"""

from durakcore.durak.state import (
    GameState as GameState,
    PlayerState as PlayerState,
    TableState as TableState,
    GameStatus as GameStatus,
)
from durakcore.durak.turns import TurnOrder as TurnOrder
from durakcore.durak.transitions import StateTransitionEngine as StateTransitionEngine
from durakcore.durak.view import get_player_view as get_player_view

__all__ = [
    "GameState",
    "PlayerState",
    "TableState",
    "GameStatus",
    "TurnOrder",
    "StateTransitionEngine",
    "get_player_view",
]
