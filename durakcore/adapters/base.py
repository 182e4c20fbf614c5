"""
Base adapter interface for the durakcore engine.

This module defines the interface that platform-specific adapters must implement
to receive game output from the engine.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Union
from enum import Enum


class PlatformAdapter(ABC):
    """
    Base interface for platform-specific adapters.

    An adapter is the engine's only route to the outside world. After every
    applied action the engine hands it one redacted view per player, and it
    forwards engine events that the platform may want to surface.

    Implementations of this interface bridge the gap between the platform-agnostic
    game engine and specific transports like websockets, chat bots or a console.
    """

    @abstractmethod
    async def render_player_view(self, player_id: str, view: Dict[str, Any]) -> None:
        """
        Deliver a player's view of the game.

        Args:
            player_id: The player the view belongs to
            view: The redacted view produced by get_player_view()
        """
        pass

    @abstractmethod
    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Notify the platform of a game event.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        pass

    # The following methods have default implementations but can be overridden

    async def initialize(self) -> None:
        """
        Initialize the adapter.

        This method is called when the adapter is first connected to the engine.
        It can be used to set up resources, connections, etc.
        """
        pass

    async def shutdown(self) -> None:
        """
        Shutdown the adapter.

        This method is called when the engine is shutting down. It can be used
        to clean up resources, close connections, etc.
        """
        pass
