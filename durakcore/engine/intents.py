"""
Player intents accepted by the Durak engine.

Transports turn incoming messages into one of the intent classes below with
`parse_intent`, which rejects anything outside the schema before it can
reach the rules engine.

Message schema (version 1):

    {"v": 1, "type": "attack",     "player_id": "...", "card": {"suit": "spades", "rank": "6"}}
    {"v": 1, "type": "defend",     "player_id": "...", "card": {...}}
    {"v": 1, "type": "take_cards", "player_id": "..."}
    {"v": 1, "type": "pass",       "player_id": "..."}
    {"v": 1, "type": "end_turn",   "player_id": "..."}
    {"v": 1, "type": "disconnect", "player_id": "..."}
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from durakcore.common.card import Card

SCHEMA_VERSION = 1


class InvalidIntentError(ValueError):
    """Raised when a message does not match the intent schema."""


@dataclass(frozen=True)
class AttackIntent:
    player_id: str
    card: Card


@dataclass(frozen=True)
class DefendIntent:
    player_id: str
    card: Card


@dataclass(frozen=True)
class TakeCardsIntent:
    player_id: str


@dataclass(frozen=True)
class PassIntent:
    player_id: str


@dataclass(frozen=True)
class EndTurnIntent:
    player_id: str


@dataclass(frozen=True)
class DisconnectIntent:
    player_id: str


Intent = Union[
    AttackIntent,
    DefendIntent,
    TakeCardsIntent,
    PassIntent,
    EndTurnIntent,
    DisconnectIntent,
]

_CARD_INTENTS = {"attack": AttackIntent, "defend": DefendIntent}
_PLAIN_INTENTS = {
    "take_cards": TakeCardsIntent,
    "pass": PassIntent,
    "end_turn": EndTurnIntent,
    "disconnect": DisconnectIntent,
}


def parse_intent(message: Mapping[str, Any]) -> Intent:
    """
    Validate a client message and build the matching intent.

    Args:
        message: Decoded message body

    Returns:
        The intent described by the message

    Raises:
        InvalidIntentError: If the version, type, player id or card is
            missing or malformed
    """
    if not isinstance(message, Mapping):
        raise InvalidIntentError("Message must be an object")

    version = message.get("v", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise InvalidIntentError(f"Unsupported schema version: {version!r}")

    player_id = message.get("player_id")
    if not isinstance(player_id, str) or not player_id:
        raise InvalidIntentError("Missing player_id")

    intent_type = message.get("type")
    if intent_type in _CARD_INTENTS:
        card_data = message.get("card")
        if not isinstance(card_data, Mapping):
            raise InvalidIntentError(f"'{intent_type}' requires a card")
        try:
            card = Card.from_dict(card_data)
        except ValueError as e:
            raise InvalidIntentError(str(e)) from e
        return _CARD_INTENTS[intent_type](player_id=player_id, card=card)

    if intent_type in _PLAIN_INTENTS:
        return _PLAIN_INTENTS[intent_type](player_id=player_id)

    raise InvalidIntentError(f"Unknown intent type: {intent_type!r}")


def intent_to_dict(intent: Intent) -> Dict[str, Any]:
    """Serialize an intent back into a version 1 message."""
    for name, cls in {**_CARD_INTENTS, **_PLAIN_INTENTS}.items():
        if isinstance(intent, cls):
            message = {"v": SCHEMA_VERSION, "type": name, "player_id": intent.player_id}
            if name in _CARD_INTENTS:
                card = intent.card.to_dict()
                message["card"] = {"suit": card["suit"], "rank": card["rank"]}
            return message
    raise TypeError(f"Not an intent: {intent!r}")
