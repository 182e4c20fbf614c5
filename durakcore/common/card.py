"""
This module defines the `Suit`, `Rank`, and `Card` classes, which are used to represent playing cards.

- `Suit`: An enum representing the four suits of the deck: Hearts, Diamonds,
Clubs, and Spades.

- `Rank`: An enum representing the nine ranks of the 36-card deck: Six through
Ten, Jack, Queen, King, and Ace. Each rank carries its game value, from 6 for
the Six up to 14 for the Ace.

- `Card`: A class representing a playing card. A card has a suit and a
rank. The `Card` class also provides methods for comparing cards, for
converting cards to strings for display, and for converting them to and from
the dictionaries exchanged with clients.

This module is part of the `durakcore` package, the rules engine for Durak.
"""

from enum import Enum, unique
from typing import Any, Dict


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"
    SPADES = "♠"

    @property
    def wire_name(self) -> str:
        """The lowercase name used in client messages."""
        return self.name.lower()

    @classmethod
    def from_wire(cls, name: str) -> "Suit":
        """
        Look up a suit by its wire name.

        :param name: One of "hearts", "diamonds", "clubs", "spades".
        :raises ValueError: If the name is not a known suit.
        """
        for suit in cls:
            if suit.wire_name == name:
                return suit
        raise ValueError(f"Unknown suit: {name!r}")

    def __str__(self) -> str:
        return self.value


@unique
class Rank(Enum):
    """
    Enum for ranks in a 36-card deck.

    The enum value is the rank's game value; Six is the lowest and Ace
    is the highest.
    """

    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def rank_value(self) -> int:
        """The value of the rank, used for beating cards."""
        return self.value

    @property
    def rank_str(self) -> str:
        """A string representation of the rank."""
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE):
            return self.name[0]
        return str(self.value)

    @classmethod
    def from_wire(cls, name: str) -> "Rank":
        """
        Look up a rank by its wire name ("6" through "10", "J", "Q", "K", "A").

        :raises ValueError: If the name is not a known rank.
        """
        for rank in cls:
            if rank.rank_str == str(name):
                return rank
        raise ValueError(f"Unknown rank: {name!r}")

    def __str__(self) -> str:
        return self.rank_str


class Card:
    """
    Class representing a playing card. This class is a member of a card deck.

    Cards are immutable value objects; two cards are equal when they share
    suit and rank.

    >>> card = Card(Suit.HEARTS, Rank.SIX)
    >>> print(card)
    6 of ♥
    >>> card.value
    6
    """

    __slots__ = ("_suit", "_rank")

    def __init__(self, suit: Suit, rank: Rank):
        """
        Initialize a Card instance.

        :param suit: Suit of the card (one of the Suit enums)
        :param rank: Rank of the card (one of the Rank enums)
        """
        if not isinstance(suit, Suit):
            raise TypeError(f"Invalid suit: {suit}")
        if not isinstance(rank, Rank):
            raise TypeError(f"Invalid rank: {rank}")
        object.__setattr__(self, "_suit", suit)
        object.__setattr__(self, "_rank", rank)

    @property
    def suit(self) -> Suit:
        return self._suit

    @property
    def rank(self) -> Rank:
        return self._rank

    @property
    def value(self) -> int:
        """The card's value, 6 through 14."""
        return self._rank.rank_value

    def __setattr__(self, name, value):
        raise AttributeError("Card is immutable")

    def __reduce__(self):
        return (Card, (self._suit, self._rank))

    def __copy__(self) -> "Card":
        return self

    def __deepcopy__(self, memo) -> "Card":
        return self

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the card to its wire dictionary.

        >>> Card(Suit.SPADES, Rank.TEN).to_dict()
        {'suit': 'spades', 'rank': '10', 'value': 10}
        """
        return {
            "suit": self.suit.wire_name,
            "rank": self.rank.rank_str,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        """
        Build a card from a wire dictionary. The "value" key is ignored since it
        is derived from the rank.

        :raises ValueError: If the suit or rank is missing or unknown.
        """
        try:
            suit_name = data["suit"]
            rank_name = data["rank"]
        except (KeyError, TypeError):
            raise ValueError(f"Malformed card: {data!r}")
        return cls(Suit.from_wire(suit_name), Rank.from_wire(rank_name))

    def __eq__(self, other):
        """
        Checks if this card is equal to another card.

        :param other: The other card to compare to.
        :return: True if the cards have the same rank and suit, False otherwise.
        """
        if isinstance(other, Card):
            return self.rank == other.rank and self.suit == other.suit
        return NotImplemented

    def __hash__(self):
        return hash((self.suit, self.rank))

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"Card(Suit.{self.suit.name}, Rank.{self.rank.name})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"{self.rank.rank_str} of {self.suit}"
