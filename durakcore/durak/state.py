"""
State models for the Durak card game.

This module provides dataclasses for representing the state of a Durak game.
A `GameState` is the aggregate root: it is owned by the caller and mutated in
place by the transition functions in `durakcore.durak.transitions`, which
validate every action before touching it.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Set, Tuple
from enum import Enum
import uuid

from durakcore.common.card import Card
from durakcore.durak.turns import TurnOrder


class GameStatus(Enum):
    """Possible statuses of a Durak game."""

    WAITING = "waiting"
    PLAYING = "playing"
    # A take resolves atomically, so this ruleset never enters TAKING_CARDS;
    # it is kept so views share one status vocabulary.
    TAKING_CARDS = "taking_cards"
    FINISHED = "finished"


@dataclass
class TableState:
    """
    The cards on the table in the current round.

    `defending[i]` is the card that beat `attacking[i]`; attack positions
    past the end of `defending` are still unanswered.

    Attributes:
        attacking: Cards played by attackers, in play order
        defending: Cards played by the defender, aligned with attacking
    """

    attacking: List[Card] = field(default_factory=list)
    defending: List[Card] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.attacking

    @property
    def is_fully_defended(self) -> bool:
        """True when every attack position has a matching defence card."""
        return len(self.defending) == len(self.attacking)

    @property
    def undefended_card(self) -> Optional[Card]:
        """Get the first unanswered attack card, if any."""
        if len(self.attacking) > len(self.defending):
            return self.attacking[len(self.defending)]
        return None

    @property
    def ranks_in_play(self) -> Set:
        """Ranks of every card on the table."""
        return {card.rank for card in self.attacking + self.defending}

    @property
    def cards(self) -> List[Card]:
        return self.attacking + self.defending

    @property
    def pairs(self) -> List[Tuple[Card, Optional[Card]]]:
        """Return a list of attack and defense card pairs."""
        pairs = []
        for i, attack in enumerate(self.attacking):
            defense = self.defending[i] if i < len(self.defending) else None
            pairs.append((attack, defense))
        return pairs

    def clear(self) -> List[Card]:
        """Empty the table and return the cards that were on it."""
        cards = self.cards
        self.attacking = []
        self.defending = []
        return cards

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attacking": [card.to_dict() for card in self.attacking],
            "defending": [card.to_dict() for card in self.defending],
        }


@dataclass
class PlayerState:
    """
    A player's state in a Durak game.

    Attributes:
        id: Unique identifier for this player
        name: Display name of the player
        hand: Cards in the player's hand (order is irrelevant)
        is_attacker: Whether this player may currently add attack cards
        has_picked_up_cards: Whether this player took the table this round
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "Player"
    hand: List[Card] = field(default_factory=list)
    is_attacker: bool = False
    has_picked_up_cards: bool = False

    @property
    def card_count(self) -> int:
        """Get the number of cards in the player's hand."""
        return len(self.hand)

    def has_card(self, card: Card) -> bool:
        """Check if the player holds a card with the same suit and rank."""
        return card in self.hand

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "hand": [card.to_dict() for card in self.hand],
            "card_count": self.card_count,
            "is_attacker": self.is_attacker,
            "has_picked_up_cards": self.has_picked_up_cards,
        }


@dataclass
class GameState:
    """
    The Durak game state.

    Attributes:
        lobby_id: Identifier of the lobby this game was started from
        deck: Cards remaining in the deck, top first
        trump: The trump card; its suit is trump for the whole game
        players: Active players by id, in seating order
        table: Current state of the cards on the table
        current_turn: Id of the player whose turn it is to attack or pass
        next_defender: Id of the player defending this round
        status: Current status of the game
        winner: Id of the winner once the game is finished
        turn_order: Rotation ring of active player ids
        passed_players: Ids that declined to add more attacks this round
        can_take_cards: Whether the defender may take the table now
        round_ended: Whether the last round was resolved by a take
        first_move: True until the first round has been resolved
        id: Unique identifier for this game
        discard_pile: Cards beaten off after successful defences
        loser: Id of the player left holding cards
        finished_players: Ids that emptied their hand, in order of exit
        departed_players: Last known state of players who left the game
        current_round: Number of resolved rounds
    """

    lobby_id: str = ""
    deck: List[Card] = field(default_factory=list)
    trump: Optional[Card] = None
    players: Dict[str, PlayerState] = field(default_factory=dict)
    table: TableState = field(default_factory=TableState)
    current_turn: Optional[str] = None
    next_defender: Optional[str] = None
    status: GameStatus = GameStatus.WAITING
    winner: Optional[str] = None
    turn_order: TurnOrder = field(default_factory=TurnOrder)
    passed_players: Set[str] = field(default_factory=set)
    can_take_cards: bool = False
    round_ended: bool = False
    first_move: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    discard_pile: List[Card] = field(default_factory=list)
    loser: Optional[str] = None
    finished_players: List[str] = field(default_factory=list)
    departed_players: Dict[str, PlayerState] = field(default_factory=dict)
    current_round: int = 0

    @property
    def trump_suit(self):
        return self.trump.suit if self.trump else None

    @property
    def deck_size(self) -> int:
        """Get the number of cards left in the deck."""
        return len(self.deck)

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def is_finished(self) -> bool:
        return self.status == GameStatus.FINISHED

    @property
    def attacker(self) -> Optional[PlayerState]:
        """Get the player holding the current turn, if any."""
        return self.players.get(self.current_turn) if self.current_turn else None

    @property
    def defender(self) -> Optional[PlayerState]:
        """Get the current defender, if any."""
        return self.players.get(self.next_defender) if self.next_defender else None

    def all_cards(self) -> List[Card]:
        """Every card still in play: hands, deck, table and discard pile."""
        cards = list(self.deck) + self.table.cards + list(self.discard_pile)
        for player in self.players.values():
            cards.extend(player.hand)
        return cards
