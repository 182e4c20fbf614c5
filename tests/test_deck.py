import random
from collections import Counter

from durakcore.common.card import Rank, Suit
from durakcore.common.deck import create_deck, shuffle


def test_create_deck_has_36_distinct_cards():
    cards = create_deck()
    assert len(cards) == 36
    assert len(set(cards)) == 36


def test_create_deck_covers_every_suit_and_rank():
    cards = create_deck()
    assert Counter(card.suit for card in cards) == {suit: 9 for suit in Suit}
    assert Counter(card.rank for card in cards) == {rank: 4 for rank in Rank}


def test_create_deck_returns_a_fresh_list():
    first = create_deck()
    first.pop()
    assert len(create_deck()) == 36


def test_shuffle_is_a_permutation():
    cards = create_deck()
    shuffled = shuffle(create_deck(), random.Random(7))
    assert sorted(shuffled, key=repr) == sorted(cards, key=repr)


def test_shuffle_works_in_place():
    cards = create_deck()
    assert shuffle(cards, random.Random(7)) is cards


def test_shuffle_is_reproducible_with_seeded_rng():
    first = shuffle(create_deck(), random.Random(42))
    second = shuffle(create_deck(), random.Random(42))
    assert first == second


def test_shuffle_without_rng_uses_module_random():
    random.seed(5)
    first = shuffle(create_deck())
    random.seed(5)
    second = shuffle(create_deck())
    assert first == second
