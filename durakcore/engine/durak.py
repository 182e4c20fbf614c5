"""
Durak card game engine implementation.

This module provides the DurakEngine class, which implements the GameEngine
interface for the game of Durak. The engine owns one GameState, applies
intents to it one at a time, and after every applied intent pushes each
player's redacted view through the platform adapter.
"""

from typing import Any, Dict, List, Optional, Tuple, Union
import asyncio
import logging
import random
import time

from durakcore.adapters import PlatformAdapter
from durakcore.common.card import Card
from durakcore.engine.base import GameEngine
from durakcore.engine.intents import (
    AttackIntent,
    DefendIntent,
    DisconnectIntent,
    EndTurnIntent,
    Intent,
    PassIntent,
    TakeCardsIntent,
)
from durakcore.events import EngineEventType, EventPriority
from durakcore.durak.constants import MAX_PLAYERS, MIN_PLAYERS
from durakcore.durak.state import GameState, GameStatus
from durakcore.durak.transitions import StateTransitionEngine
from durakcore.durak.validator import valid_attack_cards, valid_defense_cards
from durakcore.durak.view import get_player_view

logger = logging.getLogger(__name__)


class DurakEngine(GameEngine):
    """
    Engine implementation for the Durak card game.

    Intents for one game are serialized with an asyncio lock, so every
    read-modify-write of the state completes before the next begins.
    Separate engines share nothing and can run side by side.
    """

    def __init__(self, adapter: PlatformAdapter, config: Dict[str, Any] = None):
        """
        Initialize the Durak engine.

        Args:
            adapter: Platform adapter that receives views and events
            config: Configuration options for the game
        """
        super().__init__(adapter, config)

        # Apply default configuration
        default_config = {
            "seed": None,  # Seed for a reproducible shuffle
            "min_players": MIN_PLAYERS,
            "max_players": MAX_PLAYERS,
        }

        # Merge with provided config
        if config:
            default_config.update(config)

        self.config = default_config

        seed = self.config.get("seed")
        self.rng = random.Random(seed) if seed is not None else None

        self.state: Optional[GameState] = None
        self._lock = asyncio.Lock()
        self._capturing = False
        self._pending_events: List[Tuple[str, Dict[str, Any]]] = []
        self._unsubscribe = None

    async def initialize(self) -> None:
        """
        Initialize the engine and prepare for a game.
        """
        await super().initialize()

        if self._unsubscribe is None:
            self._unsubscribe = self.event_bus.on_any(
                self._capture_event, EventPriority.LOW
            )

        self.event_bus.emit(
            EngineEventType.ENGINE_INIT,
            {
                "engine_type": "durak",
                "config": dict(self.config),
                "timestamp": time.time(),
            },
        )

    async def shutdown(self) -> None:
        """
        Shut down the engine and clean up resources.
        """
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        self.event_bus.emit(EngineEventType.ENGINE_SHUTDOWN, {"timestamp": time.time()})

        await super().shutdown()

    def _capture_event(self, event: Tuple[str, Dict[str, Any]]) -> None:
        # Transitions are synchronous, so everything emitted while we apply
        # one belongs to this game.
        if self._capturing:
            self._pending_events.append(event)

    async def start_game(
        self,
        player_ids: List[str],
        player_infos: Optional[Dict[str, Any]] = None,
        lobby_id: Optional[str] = None,
    ) -> GameState:
        """
        Deal a new game of Durak.

        Args:
            player_ids: Ordered player ids
            player_infos: Display names by player id
            lobby_id: Lobby the game belongs to

        Returns:
            The new game state

        Raises:
            ValueError: If the player count is outside the configured range
        """
        min_players = self.config.get("min_players", MIN_PLAYERS)
        max_players = self.config.get("max_players", MAX_PLAYERS)
        if not min_players <= len(player_ids) <= max_players:
            raise ValueError(
                f"This table seats {min_players} to {max_players} players, "
                f"got {len(player_ids)}"
            )

        async with self._lock:
            self._capturing = True
            try:
                self.state = StateTransitionEngine.initialize_game(
                    player_ids,
                    lobby_id=lobby_id or "",
                    player_infos=player_infos,
                    rng=self.rng,
                )
                self.event_bus.emit(
                    EngineEventType.GAME_STARTED,
                    {"game_id": self.state.id, "timestamp": time.time()},
                )
            finally:
                self._capturing = False
            await self.render_state()

        return self.state

    async def execute_player_action(
        self, player_id: str, action: str, **kwargs
    ) -> bool:
        """
        Execute a player action in Durak.

        Args:
            player_id: ID of the player
            action: One of ATTACK, DEFEND, PLAY_CARD, TAKE_CARDS, PASS,
                END_TURN or DISCONNECT
            **kwargs: `card` for card actions, `is_defending` for PLAY_CARD

        Returns:
            True if the action was applied, False if the rules rejected it

        Raises:
            ValueError: If no game is running, the action is unknown, or a
                card action has no card
        """
        if self.state is None:
            raise ValueError("No game in progress")

        action = action.upper()
        card = kwargs.get("card")
        if action in ("ATTACK", "DEFEND", "PLAY_CARD"):
            if isinstance(card, dict):
                card = Card.from_dict(card)
            if not isinstance(card, Card):
                raise ValueError(f"{action} requires a card")

        async with self._lock:
            self._capturing = True
            try:
                applied = self._apply(player_id, action, card, kwargs)
            finally:
                self._capturing = False

            if applied:
                await self.render_state()
            else:
                self._pending_events.clear()
            return applied

    def _apply(
        self, player_id: str, action: str, card: Optional[Card], kwargs: Dict[str, Any]
    ) -> bool:
        state = self.state
        if action == "ATTACK":
            return StateTransitionEngine.attack_card(state, player_id, card)
        elif action == "DEFEND":
            return StateTransitionEngine.defend_card(state, player_id, card)
        elif action == "PLAY_CARD":
            return StateTransitionEngine.make_move(
                state, player_id, card, bool(kwargs.get("is_defending", False))
            )
        elif action == "TAKE_CARDS":
            return StateTransitionEngine.handle_take_cards(state, player_id)
        elif action == "PASS":
            return StateTransitionEngine.handle_pass_turn(state, player_id)
        elif action == "END_TURN":
            if player_id != state.current_turn:
                logger.debug("Rejected end_turn by %s: not their turn", player_id)
                return False
            return StateTransitionEngine.end_turn(state)
        elif action == "DISCONNECT":
            return StateTransitionEngine.handle_player_disconnect(state, player_id)

        raise ValueError(f"Unknown action: {action}")

    async def dispatch(self, intent: Intent) -> bool:
        """
        Apply a parsed intent.

        Args:
            intent: An intent built by parse_intent()

        Returns:
            True if the intent was applied
        """
        if isinstance(intent, AttackIntent):
            return await self.execute_player_action(
                intent.player_id, "ATTACK", card=intent.card
            )
        if isinstance(intent, DefendIntent):
            return await self.execute_player_action(
                intent.player_id, "DEFEND", card=intent.card
            )
        if isinstance(intent, TakeCardsIntent):
            return await self.execute_player_action(intent.player_id, "TAKE_CARDS")
        if isinstance(intent, PassIntent):
            return await self.execute_player_action(intent.player_id, "PASS")
        if isinstance(intent, EndTurnIntent):
            return await self.execute_player_action(intent.player_id, "END_TURN")
        if isinstance(intent, DisconnectIntent):
            return await self.execute_player_action(intent.player_id, "DISCONNECT")
        raise ValueError(f"Unknown intent: {intent!r}")

    async def render_state(self) -> None:
        """
        Forward pending events, then push each player's view to the adapter.

        Players who left the game are no longer sent anything; players who
        went out by emptying their hand keep receiving views.
        """
        events, self._pending_events = self._pending_events, []
        for event_type, data in events:
            await self.adapter.notify_game_event(event_type, data)

        if self.state is None:
            return
        for player_id in self._recipients():
            await self.adapter.render_player_view(
                player_id, get_player_view(self.state, player_id)
            )

    def _recipients(self) -> List[str]:
        return self.state.turn_order.ids + list(self.state.finished_players)

    def get_player_view(self, player_id: str) -> Dict[str, Any]:
        """Get the redacted view of the game for a player."""
        if self.state is None:
            raise ValueError("No game in progress")
        return get_player_view(self.state, player_id)

    def get_valid_actions(self, player_id: str) -> Dict[str, List[Union[Dict[str, Any], str]]]:
        """
        Get valid actions for a player.

        Args:
            player_id: ID of the player

        Returns:
            Dictionary mapping action names to their valid cards (empty list
            for actions that take no card)
        """
        state = self.state
        if state is None or state.status != GameStatus.PLAYING:
            return {}
        if player_id not in state.players:
            return {}

        valid_actions: Dict[str, List[Union[Dict[str, Any], str]]] = {}

        attack_cards = valid_attack_cards(state, player_id)
        if attack_cards:
            valid_actions["ATTACK"] = [card.to_dict() for card in attack_cards]

        defense_cards = valid_defense_cards(state, player_id)
        if defense_cards:
            valid_actions["DEFEND"] = [card.to_dict() for card in defense_cards]

        if state.can_take_cards and player_id == state.next_defender:
            valid_actions["TAKE_CARDS"] = []

        if StateTransitionEngine.can_pass(state, player_id):
            valid_actions["PASS"] = []

        if player_id == state.current_turn and not state.table.is_empty:
            valid_actions["END_TURN"] = []

        return valid_actions

    def is_game_over(self) -> bool:
        """
        Check if the game is over.

        Returns:
            True if the game is over, False otherwise
        """
        return self.state is not None and self.state.status == GameStatus.FINISHED

    def get_winner(self) -> Optional[str]:
        """
        Get the ID of the player recorded as winner.

        Returns:
            ID of the winner, or None if the game is not over or had no winner
        """
        if not self.is_game_over():
            return None
        return self.state.winner

    def get_loser(self) -> Optional[str]:
        """
        Get the ID of the player who lost the game.

        Returns:
            ID of the losing player, or None if the game is not over
        """
        if not self.is_game_over():
            return None
        return self.state.loser
