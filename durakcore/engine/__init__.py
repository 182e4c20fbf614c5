"""
Game engine for the durakcore package.

This package wraps the Durak rules in an async engine that serializes
player intents, plus a store that tracks running games by lobby.
"""

from durakcore.engine.base import GameEngine
from durakcore.engine.durak import DurakEngine
from durakcore.engine.intents import (
    AttackIntent,
    DefendIntent,
    DisconnectIntent,
    EndTurnIntent,
    Intent,
    InvalidIntentError,
    PassIntent,
    TakeCardsIntent,
    intent_to_dict,
    parse_intent,
)
from durakcore.engine.store import GameStore

__all__ = [
    "GameEngine",
    "DurakEngine",
    "GameStore",
    "AttackIntent",
    "DefendIntent",
    "DisconnectIntent",
    "EndTurnIntent",
    "Intent",
    "InvalidIntentError",
    "PassIntent",
    "TakeCardsIntent",
    "intent_to_dict",
    "parse_intent",
]
