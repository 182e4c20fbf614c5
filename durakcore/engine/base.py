"""
Base engine class for the durakcore package.

This module provides the abstract base class for game engines. An engine owns
one game, serializes the intents applied to it, and pushes the results out
through a platform adapter.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any

from durakcore.adapters import PlatformAdapter
from durakcore.events import EventBus


class GameEngine(ABC):
    """
    Abstract base class for game engines.

    This class defines the common interface that game engines implement,
    providing methods for starting games, handling player actions, and
    rendering the game state.
    """

    def __init__(self, adapter: PlatformAdapter, config: Dict[str, Any] = None):
        """
        Initialize the engine.

        Args:
            adapter: Platform adapter to use for rendering
            config: Configuration options for the game
        """
        self.adapter = adapter
        self.config = config or {}
        self.event_bus = EventBus.get_instance()
        self.state = None

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the engine and prepare for a game.
        """
        await self.adapter.initialize()

    @abstractmethod
    async def shutdown(self) -> None:
        """
        Shut down the engine and clean up resources.
        """
        await self.adapter.shutdown()

    @abstractmethod
    async def start_game(self, *args, **kwargs) -> None:
        """
        Start a new game.
        """
        pass

    @abstractmethod
    async def execute_player_action(self, player_id: str, action: str, **kwargs) -> bool:
        """
        Execute a player action.

        Args:
            player_id: ID of the player
            action: Action to perform

        Returns:
            True if the action was applied
        """
        pass

    @abstractmethod
    async def render_state(self) -> None:
        """
        Render the current game state.
        """
        pass
