"""
Registry of running Durak games.

The store maps lobby ids to their engines. It is created and owned by the
hosting application and passed to whatever needs it; there is no module
level registry.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from durakcore.adapters import DummyAdapter, PlatformAdapter
from durakcore.engine.durak import DurakEngine

logger = logging.getLogger(__name__)


class GameStore:
    """
    Manages all active games.

    Provides game creation keyed by lobby id, lookup, and cleanup of
    games that are over.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self.games: Dict[str, DurakEngine] = {}

    async def create(
        self,
        lobby_id: str,
        player_ids: List[str],
        player_infos: Optional[Mapping[str, Any]] = None,
        adapter: Optional[PlatformAdapter] = None,
        config: Optional[Dict[str, Any]] = None,
    ) -> DurakEngine:
        """
        Create, initialize and start a game for a lobby.

        Args:
            lobby_id: The lobby starting the game
            player_ids: Ordered player ids
            player_infos: Display names by player id
            adapter: Adapter that receives views; a DummyAdapter if omitted
            config: Engine configuration

        Returns:
            The started engine

        Raises:
            ValueError: If the lobby already has a game or the player
                count is invalid
        """
        if lobby_id in self.games:
            raise ValueError(f"Lobby {lobby_id} already has a game")

        engine = DurakEngine(adapter or DummyAdapter(), config)
        await engine.initialize()
        try:
            await engine.start_game(player_ids, player_infos, lobby_id=lobby_id)
        except ValueError:
            await engine.shutdown()
            raise

        self.games[lobby_id] = engine
        logger.info("Created game %s for lobby %s", engine.state.id, lobby_id)
        return engine

    def get(self, lobby_id: str) -> Optional[DurakEngine]:
        """
        Get the engine running a lobby's game.

        Args:
            lobby_id: The lobby id

        Returns:
            The engine if found, None otherwise
        """
        return self.games.get(lobby_id)

    def remove(self, lobby_id: str) -> Optional[DurakEngine]:
        """
        Forget a lobby's game.

        Args:
            lobby_id: The lobby id

        Returns:
            The removed engine, or None if there was none
        """
        engine = self.games.pop(lobby_id, None)
        if engine is not None:
            logger.info("Removed game for lobby %s", lobby_id)
        return engine

    def prune_finished(self) -> List[str]:
        """
        Drop games that are over or have no players left.

        Returns:
            The lobby ids that were removed
        """
        stale = [
            lobby_id
            for lobby_id, engine in self.games.items()
            if engine.is_game_over() or engine.state is None or not engine.state.players
        ]
        for lobby_id in stale:
            self.remove(lobby_id)
        return stale

    def __len__(self) -> int:
        return len(self.games)

    def __contains__(self, lobby_id) -> bool:
        return lobby_id in self.games
