"""
Example demonstrating the Durak engine.

This script plays a complete game of Durak between simple bots. The game is
created through a GameStore, every move goes through DurakEngine, and the
DummyAdapter collects what each player would have been shown.

Usage:
    python examples/durak_demo.py [--players N] [--seed S] [--verbose]
"""

import asyncio
import logging
import sys
from typing import Any, Callable, Dict, List, Optional, Tuple

from durakcore.adapters import DummyAdapter
from durakcore.common.card import Card
from durakcore.engine import DurakEngine, GameStore
from durakcore.events import EngineEventType, EventBus

logger = logging.getLogger("durak_demo")

PLAYER_NAMES = ["Anya", "Boris", "Dasha", "Igor", "Lena", "Misha"]


def _card_key(card: Dict[str, Any], trump_suit: str) -> Tuple[bool, int]:
    # Spend plain cards before trumps, low before high
    return (card["suit"] == trump_suit, card["value"])


class DurakDemo:
    """
    Demo class for the Durak engine.

    Every bot plays its lowest legal card, keeps its trumps for last, takes
    the table when it cannot beat an attack and passes when it has nothing
    to add.
    """

    def __init__(self, player_count: int = 3, config: Dict[str, Any] = None):
        """
        Initialize the demo.

        Args:
            player_count: Number of bots at the table (2-6)
            config: Configuration options for the engine
        """
        self.player_ids = [name.lower() for name in PLAYER_NAMES[:player_count]]
        self.player_infos = {pid: name for pid, name in zip(self.player_ids, PLAYER_NAMES)}
        self.config = config or {}
        self.adapter = DummyAdapter(verbose=self.config.pop("verbose", False))
        self.store = GameStore()
        self.engine: Optional[DurakEngine] = None
        self.event_handlers: List[Callable[[], None]] = []

    async def setup_game(self) -> None:
        """
        Create the game and deal the cards.
        """
        # Follow players going out as the rules engine reports them
        bus = EventBus.get_instance()
        self.event_handlers.append(
            bus.on(EngineEventType.PLAYER_FINISHED, self._on_player_finished)
        )
        self.event_handlers.append(bus.on(EngineEventType.GAME_ENDED, self._on_game_ended))

        self.engine = await self.store.create(
            "demo-lobby",
            self.player_ids,
            self.player_infos,
            adapter=self.adapter,
            config=self.config,
        )
        state = self.engine.state
        logger.info(
            "Trump is %s; %s attacks %s first",
            state.trump,
            self.player_infos[state.current_turn],
            self.player_infos[state.next_defender],
        )

    def _on_player_finished(self, data: Dict[str, Any]) -> None:
        name = self.player_infos[data["player_id"]]
        logger.info("%s is out, place %d", name, data["place"])

    def _on_game_ended(self, data: Dict[str, Any]) -> None:
        logger.info("Game ended after %d rounds", data["round_count"])

    def _choose_action(self) -> Tuple[str, str, Optional[Dict[str, Any]]]:
        """
        Pick the next move, as (player_id, action, card).
        """
        state = self.engine.state
        trump_suit = state.trump.suit.wire_name

        if state.table.undefended_card is not None:
            defender = state.next_defender
            options = self.engine.get_valid_actions(defender)
            if "DEFEND" in options:
                card = min(options["DEFEND"], key=lambda c: _card_key(c, trump_suit))
                return defender, "DEFEND", card
            return defender, "TAKE_CARDS", None

        attacker = state.current_turn
        options = self.engine.get_valid_actions(attacker)
        if "ATTACK" in options:
            card = min(options["ATTACK"], key=lambda c: _card_key(c, trump_suit))
            return attacker, "ATTACK", card
        return attacker, "PASS", None

    async def play_game(self, max_moves: int = 2000) -> None:
        """
        Play the game until it's over.

        Args:
            max_moves: Safety limit on the number of moves
        """
        for _ in range(max_moves):
            if self.engine.is_game_over():
                break

            player_id, action, card = self._choose_action()
            name = self.player_infos[player_id]
            if card is not None:
                logger.info("%s: %s %s", name, action.lower(), Card.from_dict(card))
                applied = await self.engine.execute_player_action(player_id, action, card=card)
            else:
                logger.info("%s: %s", name, action.lower().replace("_", " "))
                applied = await self.engine.execute_player_action(player_id, action)

            if not applied:
                logger.error("Engine rejected %s by %s, stopping", action, name)
                break
        else:
            logger.warning("Stopped after %d moves without a result", max_moves)

        self._report()

    def _report(self) -> None:
        state = self.engine.state
        print("\nGame over!" if self.engine.is_game_over() else "\nGame stopped.")
        print(f"Rounds played: {state.current_round}")
        if state.finished_players:
            order = ", ".join(self.player_infos[pid] for pid in state.finished_players)
            print(f"Went out, in order: {order}")
        loser = self.engine.get_loser()
        if loser:
            print(f"The loser (durak) is: {self.player_infos[loser]}")
        else:
            print("The game ended in a draw.")
        print(f"Views delivered: {len(self.adapter.rendered_views)}")

    async def shutdown(self) -> None:
        """
        Shut down the game.
        """
        for unsubscribe in self.event_handlers:
            unsubscribe()
        self.event_handlers.clear()

        if self.engine is not None:
            await self.engine.shutdown()
        self.store.prune_finished()


def _int_arg(argv: List[str], flag: str, default: Optional[int]) -> Optional[int]:
    if flag in argv:
        idx = argv.index(flag)
        if idx + 1 < len(argv):
            try:
                return int(argv[idx + 1])
            except ValueError:
                pass
    return default


async def main():
    """
    Main function to run the demo.
    """
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    player_count = max(2, min(_int_arg(sys.argv, "--players", 3), 6))
    config = {"seed": _int_arg(sys.argv, "--seed", None)}
    if "--verbose" in sys.argv:
        config["verbose"] = True

    demo = DurakDemo(player_count, config)

    try:
        await demo.setup_game()
        await demo.play_game()
    finally:
        await demo.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
