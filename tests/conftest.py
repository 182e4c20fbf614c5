"""
Pytest configuration for tests at the root level.

This module contains pytest fixtures shared by the whole suite: a fresh
event bus for every test and helpers for building fixed Durak tables.
"""

import pytest

from durakcore.common.card import Card, Rank, Suit
from durakcore.durak.state import GameState, GameStatus, PlayerState, TableState
from durakcore.durak.turns import TurnOrder
from durakcore.events import EventBus


# Reset event bus before each test
@pytest.fixture(scope="function", autouse=True)
def reset_event_bus():
    """Reset the event bus singleton before each test."""
    EventBus._instance = None
    yield
    EventBus._instance = None


@pytest.fixture
def recorded_events():
    """Collect every event published on the bus as (type, data) tuples."""
    events = []
    EventBus.get_instance().on_any(events.append)
    return events


def c(text: str) -> Card:
    """
    Build a card from shorthand such as "6H", "10S" or "AD".

    The last character is the suit initial (H, D, C, S).
    """
    suits = {"H": Suit.HEARTS, "D": Suit.DIAMONDS, "C": Suit.CLUBS, "S": Suit.SPADES}
    return Card(suits[text[-1]], Rank.from_wire(text[:-1]))


def make_state(
    hands,
    trump="6D",
    deck=(),
    current_turn=None,
    next_defender=None,
    attacking=(),
    defending=(),
):
    """
    Build a PLAYING game with fixed hands.

    `hands` maps player ids to card shorthand lists, in seating order.
    The trump card is not placed in the deck unless `deck` lists it.
    """
    ids = list(hands)
    current_turn = current_turn or ids[0]
    order = TurnOrder(ids)
    if next_defender is None:
        next_defender = order.next_after(current_turn)

    players = {
        pid: PlayerState(id=pid, name=pid, hand=[c(card) for card in cards])
        for pid, cards in hands.items()
    }
    players[current_turn].is_attacker = True

    return GameState(
        lobby_id="lobby",
        deck=[c(card) for card in deck],
        trump=c(trump),
        players=players,
        table=TableState(
            attacking=[c(card) for card in attacking],
            defending=[c(card) for card in defending],
        ),
        current_turn=current_turn,
        next_defender=next_defender,
        status=GameStatus.PLAYING,
        turn_order=order,
        can_take_cards=len(attacking) > len(defending),
    )
