"""
This module builds and shuffles the 36-card Durak deck.

A game keeps its deck as a plain list of cards. The top of the deck is the
front of the list and the bottom card, the last element, is turned up as trump.

>>> deck = create_deck()
>>> len(deck), len(set(deck))
(36, 36)
"""

import random
from typing import List, Optional

from durakcore.common.card import Card, Rank, Suit


def create_deck() -> List[Card]:
    """
    Build the 36 cards in suit-major order, every (suit, rank) combination once.

    >>> len(create_deck())
    36
    """
    return [Card(suit, rank) for suit in Suit for rank in Rank]


def shuffle(cards: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Shuffle a list of cards in place with a uniform Fisher-Yates permutation.

    :param cards: The cards to shuffle.
    :param rng: Optional random source, for reproducible games.
    :return: The same list, shuffled.

    >>> cards = create_deck()
    >>> shuffle(cards, random.Random(0)) is cards
    True
    """
    (rng or random).shuffle(cards)
    return cards
