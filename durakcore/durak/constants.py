"""Durak-specific constants."""

# Cards each hand is dealt and refilled to
HAND_SIZE = 6

# Most attack cards that can be on the table in a single round
MAX_ATTACK_CARDS = 6

MIN_PLAYERS = 2
# 36 cards dealt six at a time
MAX_PLAYERS = 6
