"""
Dummy adapter for the durakcore engine, used for testing and simulation.

This module provides a non-interactive adapter that can be used for automated
testing, simulations, and benchmarks where no real transport is needed.
"""

from typing import List, Dict, Any, Optional, Tuple, Union
from enum import Enum

from durakcore.adapters.base import PlatformAdapter


class DummyAdapter(PlatformAdapter):
    """
    Dummy adapter for testing and simulation.

    This adapter doesn't talk to any real platform. It keeps every view and
    event it is given so tests can inspect exactly what each player was shown.
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the dummy adapter.

        Args:
            verbose: Whether to print views to stdout (useful for debugging)
        """
        self.verbose = verbose

        # Track events for later inspection
        self.events: List[Tuple[str, Dict[str, Any]]] = []

        # Track rendered views for testing, in delivery order
        self.rendered_views: List[Tuple[str, Dict[str, Any]]] = []

        self.initialized = False
        self.shut_down = False

    async def render_player_view(self, player_id: str, view: Dict[str, Any]) -> None:
        """
        Store the view for later inspection.

        Args:
            player_id: The player the view belongs to
            view: The redacted view
        """
        self.rendered_views.append((player_id, view))

        if self.verbose:
            own = view["players"]["self"] or {}
            hand = ", ".join(f"{c['rank']}{c['suit'][0]}" for c in own.get("hand", []))
            print(f"[{player_id}] status={view['status']} hand=[{hand}]")

    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Record an event.

        Args:
            event_type: The type of event
            data: Event data
        """
        if isinstance(event_type, Enum):
            event_type = event_type.name
        self.events.append((event_type, data))

        if self.verbose:
            print(f"Event: {event_type} - {data}")

    async def initialize(self) -> None:
        self.initialized = True

    async def shutdown(self) -> None:
        self.shut_down = True

    def last_view(self, player_id: str) -> Optional[Dict[str, Any]]:
        """Get the most recent view delivered to `player_id`."""
        for recipient, view in reversed(self.rendered_views):
            if recipient == player_id:
                return view
        return None

    def clear(self) -> None:
        self.events.clear()
        self.rendered_views.clear()
