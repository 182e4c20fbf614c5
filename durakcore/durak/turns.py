"""
Turn order for the Durak card game.

`TurnOrder` is the rotation ring of player ids around the table. It keeps
no duplicates and is always a permutation of the active player ids.
Lookups of "the player after X" wrap around the ring and are guarded
against an empty ring.
"""

from typing import Iterable, Iterator, List, Optional, Set


class TurnOrder:
    """
    Rotation ring of player ids.

    >>> order = TurnOrder(["a", "b", "c"])
    >>> order.next_after("c")
    'a'
    >>> order.rotated_to("b").ids
    ['b', 'c', 'a']
    """

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: List[str] = []
        for player_id in ids:
            if player_id in self._ids:
                raise ValueError(f"Duplicate player id in turn order: {player_id}")
            self._ids.append(player_id)

    @property
    def ids(self) -> List[str]:
        """A copy of the ids in rotation order."""
        return list(self._ids)

    def index(self, player_id: str) -> int:
        return self._ids.index(player_id)

    def next_after(
        self, player_id: str, skip: Optional[Set[str]] = None
    ) -> Optional[str]:
        """
        Get the first player after `player_id` that is not in `skip`.

        Args:
            player_id: Reference player; must be in the ring
            skip: Ids to step over

        Returns:
            The next eligible id, or None if the ring is empty or every
            other player is skipped
        """
        if not self._ids or player_id not in self._ids:
            return None
        skip = skip or set()
        count = len(self._ids)
        start = self._ids.index(player_id)
        for step in range(1, count + 1):
            candidate = self._ids[(start + step) % count]
            if candidate != player_id and candidate not in skip:
                return candidate
        return None

    def first_active_after(self, player_id: str, active: Set[str]) -> Optional[str]:
        """
        Walk the ring from `player_id` and return the first id in `active`.

        Unlike next_after(), the reference player itself is checked last,
        which makes this usable on a snapshot of a ring that players have
        since left.
        """
        if not self._ids or player_id not in self._ids:
            return None
        count = len(self._ids)
        start = self._ids.index(player_id)
        for step in range(1, count + 1):
            candidate = self._ids[(start + step) % count]
            if candidate in active:
                return candidate
        return None

    def rotated_to(self, player_id: str) -> "TurnOrder":
        """Return a new ring with the same cyclic order that starts at `player_id`."""
        start = self._ids.index(player_id)
        return TurnOrder(self._ids[start:] + self._ids[:start])

    def copy(self) -> "TurnOrder":
        return TurnOrder(self._ids)

    def remove(self, player_id: str) -> None:
        self._ids.remove(player_id)

    def __contains__(self, player_id) -> bool:
        return player_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __getitem__(self, index: int) -> str:
        return self._ids[index]

    def __eq__(self, other):
        if isinstance(other, TurnOrder):
            return self._ids == other._ids
        if isinstance(other, list):
            return self._ids == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"TurnOrder({self._ids!r})"
