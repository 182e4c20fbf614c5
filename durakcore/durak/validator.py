"""
Move validation for the Durak card game.

Pure predicates deciding whether a proposed attack or defence card is legal
for a given table. None of these functions mutate state; rejected moves are
reported as False rather than raised.
"""

from typing import Iterable, List, Optional

from durakcore.common.card import Card
from durakcore.durak.constants import MAX_ATTACK_CARDS
from durakcore.durak.state import GameState, GameStatus


def has_card(hand: Iterable[Card], card: Card) -> bool:
    """Membership test by suit and rank."""
    return any(held.suit == card.suit and held.rank == card.rank for held in hand)


def can_add_card(state: GameState) -> bool:
    """
    Check whether the table has room for another attack card.

    The attack pile is capped at six cards, and the defender must hold more
    cards than there are attack cards on the table.
    """
    attack_count = len(state.table.attacking)
    if attack_count >= MAX_ATTACK_CARDS:
        return False
    defender = state.defender
    if defender is None:
        return False
    return defender.card_count > attack_count


def is_valid_card_to_add(state: GameState, card: Card, player_id: str) -> bool:
    """
    Check whether `card` may be added to the attack pile by `player_id`.

    An opening attack may be any card, except that a trump may only open
    when the attacker holds nothing but trumps. Every later card must share
    a rank with a card already on the table.
    """
    if state.table.is_empty:
        player = state.players.get(player_id)
        if player is None:
            return False
        trump_suit = state.trump_suit
        holds_non_trump = any(held.suit != trump_suit for held in player.hand)
        return not (holds_non_trump and card.suit == trump_suit)

    return card.rank in state.table.ranks_in_play


def can_defend(attacking: Card, defending: Card, trump: Card) -> bool:
    """
    Check whether `defending` beats `attacking` with `trump` as the trump card.

    >>> from durakcore.common.card import Suit, Rank
    >>> trump = Card(Suit.DIAMONDS, Rank.TEN)
    >>> can_defend(Card(Suit.SPADES, Rank.SIX), Card(Suit.SPADES, Rank.SEVEN), trump)
    True
    >>> can_defend(Card(Suit.SPADES, Rank.SIX), Card(Suit.CLUBS, Rank.NINE), trump)
    False
    """
    trump_suit = trump.suit
    if defending.suit == trump_suit and attacking.suit != trump_suit:
        return True
    if attacking.suit == trump_suit:
        return defending.suit == trump_suit and defending.value > attacking.value
    return defending.suit == attacking.suit and defending.value > attacking.value


def is_eligible_attacker(state: GameState, player_id: str) -> bool:
    """Check whether `player_id` may put attack cards on the table right now."""
    player = state.players.get(player_id)
    if player is None or player_id == state.next_defender:
        return False
    if player.has_picked_up_cards:
        return False
    return player_id == state.current_turn or player.is_attacker


def rejection_reason(
    state: GameState, player_id: str, card: Card, is_defending: bool
) -> Optional[str]:
    """
    Explain why a move would be rejected.

    Returns:
        A short reason, or None if the move is legal
    """
    if state.status != GameStatus.PLAYING:
        return "game is not in play"
    player = state.players.get(player_id)
    if player is None:
        return "unknown player"
    if not has_card(player.hand, card):
        return "card not in hand"

    if is_defending:
        if player_id != state.next_defender:
            return "not the defender"
        attacking = state.table.undefended_card
        if attacking is None:
            return "no attack to answer"
        if not can_defend(attacking, card, state.trump):
            return "card does not beat the attack"
        return None

    if not is_eligible_attacker(state, player_id):
        return "not an eligible attacker"
    if not can_add_card(state):
        return "table is full"
    if not is_valid_card_to_add(state, card, player_id):
        return "card rank is not in play" if state.table.attacking else "cannot open with trump"
    return None


def valid_attack_cards(state: GameState, player_id: str) -> List[Card]:
    """Cards from the player's hand that would be accepted as attacks."""
    player = state.players.get(player_id)
    if player is None:
        return []
    return [
        card
        for card in player.hand
        if rejection_reason(state, player_id, card, is_defending=False) is None
    ]


def valid_defense_cards(state: GameState, player_id: str) -> List[Card]:
    """Cards from the player's hand that would beat the next unanswered attack."""
    player = state.players.get(player_id)
    if player is None:
        return []
    return [
        card
        for card in player.hand
        if rejection_reason(state, player_id, card, is_defending=True) is None
    ]
