"""
State transition functions for the Durak card game.

Each entry point takes the shared `GameState` and applies one player intent
to it in place. Every precondition is checked before the first mutation, so
a rejected call returns False and leaves the state exactly as it was.
Applied transitions are announced on the event bus.
"""

import logging
import random
from typing import Any, Dict, Iterable, Mapping, Optional

from durakcore.common.card import Card
from durakcore.common.deck import create_deck, shuffle
from durakcore.events import EventBus, EngineEventType
from durakcore.durak.constants import HAND_SIZE, MAX_PLAYERS, MIN_PLAYERS
from durakcore.durak.state import GameState, GameStatus, PlayerState, TableState
from durakcore.durak.turns import TurnOrder
from durakcore.durak.validator import rejection_reason

logger = logging.getLogger(__name__)


def _emit(event_type: EngineEventType, data: Dict[str, Any]) -> None:
    EventBus.get_instance().emit(event_type, data)


def _reject(state: GameState, player_id: Optional[str], action: str, reason: str) -> bool:
    logger.debug(
        "Rejected %s by %s in game %s: %s", action, player_id, state.id, reason
    )
    _emit(
        EngineEventType.ACTION_REJECTED,
        {
            "game_id": state.id,
            "player_id": player_id,
            "action": action,
            "reason": reason,
        },
    )
    return False


def _display_name(player_infos: Optional[Mapping[str, Any]], player_id: str) -> str:
    info = (player_infos or {}).get(player_id)
    if isinstance(info, str) and info:
        return info
    if isinstance(info, Mapping) and info.get("name"):
        return str(info["name"])
    return player_id


def _assign_attacker(state: GameState) -> None:
    """Only the player holding the current turn may attack."""
    for player_id, player in state.players.items():
        player.is_attacker = player_id == state.current_turn


def _repair_pointers(state: GameState, snapshot: TurnOrder) -> None:
    """Re-derive turn pointers after players left the ring."""
    active = set(state.turn_order)
    if state.current_turn not in active:
        state.current_turn = snapshot.first_active_after(state.current_turn, active)
        if state.current_turn is not None:
            state.players[state.current_turn].has_picked_up_cards = False
    if state.next_defender not in active or state.next_defender == state.current_turn:
        state.next_defender = state.turn_order.next_after(state.current_turn)


def _finish(state: GameState, winner: Optional[str], loser: Optional[str]) -> None:
    state.status = GameStatus.FINISHED
    state.winner = winner
    state.loser = loser
    state.can_take_cards = False
    for player in state.players.values():
        player.is_attacker = False

    logger.info(
        "Game %s finished: winner=%s loser=%s after %d rounds",
        state.id,
        winner,
        loser,
        state.current_round,
    )
    _emit(
        EngineEventType.GAME_ENDED,
        {
            "game_id": state.id,
            "lobby_id": state.lobby_id,
            "winner": winner,
            "loser": loser,
            "finished_players": list(state.finished_players),
            "round_count": state.current_round,
        },
    )


class StateTransitionEngine:
    """
    Transitions for the Durak state machine.

    This class groups the static methods that create a game, apply player
    intents to it, and resolve rounds. All of them are synchronous and
    return whether the intent was applied.
    """

    @staticmethod
    def initialize_game(
        player_ids: Iterable[str],
        lobby_id: str = "",
        player_infos: Optional[Mapping[str, Any]] = None,
        rng: Optional[random.Random] = None,
    ) -> GameState:
        """
        Create a new game: shuffle, turn up trump, deal and pick the first attacker.

        The trump card is the bottom card of the shuffled deck and stays
        there to be drawn last. The first attacker is the player holding the
        lowest trump; ties go to the earlier id in `player_ids`, and if
        nobody holds a trump the first id attacks.

        Args:
            player_ids: Ordered, distinct player ids (2 to 6)
            lobby_id: Identifier of the lobby starting the game
            player_infos: Display names, either id -> name or id -> {"name": ...}
            rng: Optional random source for a reproducible shuffle

        Returns:
            The new game state

        Raises:
            ValueError: If the player count is out of range or ids repeat
        """
        ids = list(player_ids)
        if not MIN_PLAYERS <= len(ids) <= MAX_PLAYERS:
            raise ValueError(
                f"Durak needs {MIN_PLAYERS} to {MAX_PLAYERS} players, got {len(ids)}"
            )
        if len(set(ids)) != len(ids):
            raise ValueError("Player ids must be distinct")

        deck = shuffle(create_deck(), rng)
        trump = deck[-1]

        players: Dict[str, PlayerState] = {}
        for player_id in ids:
            hand = deck[:HAND_SIZE]
            del deck[:HAND_SIZE]
            players[player_id] = PlayerState(
                id=player_id, name=_display_name(player_infos, player_id), hand=hand
            )

        first_attacker = ids[0]
        lowest_trump = None
        for player_id in ids:
            for card in players[player_id].hand:
                if card.suit == trump.suit and (
                    lowest_trump is None or card.value < lowest_trump
                ):
                    lowest_trump = card.value
                    first_attacker = player_id

        turn_order = TurnOrder(ids).rotated_to(first_attacker)
        players[first_attacker].is_attacker = True

        state = GameState(
            lobby_id=lobby_id,
            deck=deck,
            trump=trump,
            players=players,
            table=TableState(),
            current_turn=first_attacker,
            next_defender=turn_order[1],
            status=GameStatus.PLAYING,
            turn_order=turn_order,
            can_take_cards=False,
            round_ended=False,
            first_move=True,
        )

        logger.info(
            "Game %s started for lobby %s with %d players, trump %s",
            state.id,
            lobby_id,
            len(ids),
            trump,
        )
        _emit(
            EngineEventType.GAME_CREATED,
            {
                "game_id": state.id,
                "lobby_id": lobby_id,
                "player_ids": turn_order.ids,
                "trump": trump.to_dict(),
            },
        )
        _emit(
            EngineEventType.ROUND_STARTED,
            {
                "game_id": state.id,
                "round_number": state.current_round + 1,
                "attacker": state.current_turn,
                "defender": state.next_defender,
            },
        )
        return state

    @staticmethod
    def deal_cards(state: GameState) -> None:
        """
        Refill hands up to six cards from the top of the deck.

        Players draw starting with the current attacker and going around the
        turn order; the defender always draws last.
        """
        ids = state.turn_order.ids
        if not ids:
            return
        start = ids.index(state.current_turn) if state.current_turn in ids else 0
        rotated = ids[start:] + ids[:start]
        draw_order = [pid for pid in rotated if pid != state.next_defender]
        if state.next_defender in ids:
            draw_order.append(state.next_defender)

        for player_id in draw_order:
            player = state.players[player_id]
            while len(player.hand) < HAND_SIZE and state.deck:
                player.hand.append(state.deck.pop(0))

    @staticmethod
    def attack_card(state: GameState, player_id: str, card: Card) -> bool:
        """
        Put an attack card on the table.

        Args:
            state: Current game state
            player_id: ID of the attacking player
            card: Card from the player's hand

        Returns:
            True if the card was played
        """
        reason = rejection_reason(state, player_id, card, is_defending=False)
        if reason:
            return _reject(state, player_id, "attack", reason)

        player = state.players[player_id]
        opening = state.table.is_empty

        player.hand.remove(card)
        state.table.attacking.append(card)
        state.can_take_cards = True

        if opening:
            # Once the round is open anyone but the defender may pile on
            state.round_ended = False
            for other_id, other in state.players.items():
                other.is_attacker = other_id != state.next_defender

        _emit(
            EngineEventType.CARD_ATTACKED,
            {
                "game_id": state.id,
                "player_id": player_id,
                "card": card.to_dict(),
                "position": len(state.table.attacking) - 1,
                "remaining_hand_size": player.card_count,
            },
        )
        return True

    @staticmethod
    def defend_card(state: GameState, player_id: str, card: Card) -> bool:
        """
        Beat the first unanswered attack card.

        Args:
            state: Current game state
            player_id: ID of the defender
            card: Card from the defender's hand

        Returns:
            True if the card was played
        """
        reason = rejection_reason(state, player_id, card, is_defending=True)
        if reason:
            return _reject(state, player_id, "defend", reason)

        player = state.players[player_id]
        attacking = state.table.undefended_card

        player.hand.remove(card)
        state.table.defending.append(card)
        if state.table.is_fully_defended:
            state.can_take_cards = False

        _emit(
            EngineEventType.CARD_DEFENDED,
            {
                "game_id": state.id,
                "player_id": player_id,
                "card": card.to_dict(),
                "against_card": attacking.to_dict(),
                "remaining_hand_size": player.card_count,
            },
        )
        return True

    @staticmethod
    def make_move(
        state: GameState, player_id: str, card: Card, is_defending: bool
    ) -> bool:
        """Play `card` as a defence or as an attack."""
        if is_defending:
            return StateTransitionEngine.defend_card(state, player_id, card)
        return StateTransitionEngine.attack_card(state, player_id, card)

    @staticmethod
    def handle_take_cards(state: GameState, player_id: str) -> bool:
        """
        The defender gives up the round and takes every card on the table.

        Hands are refilled and the turn passes to the player after the
        defender, who thereby loses their own turn to attack.

        Args:
            state: Current game state
            player_id: ID of the defender

        Returns:
            True if the cards were taken
        """
        if state.status != GameStatus.PLAYING:
            return _reject(state, player_id, "take_cards", "game is not in play")
        if not state.can_take_cards:
            return _reject(state, player_id, "take_cards", "nothing to take")
        if player_id != state.next_defender or player_id not in state.players:
            return _reject(state, player_id, "take_cards", "not the defender")

        defender = state.players[player_id]
        taken = state.table.clear()
        defender.hand.extend(taken)

        for player in state.players.values():
            player.has_picked_up_cards = False
        defender.has_picked_up_cards = True
        state.can_take_cards = False

        StateTransitionEngine.deal_cards(state)

        new_attacker = state.turn_order.next_after(player_id)
        state.current_turn = new_attacker
        state.next_defender = state.turn_order.next_after(new_attacker)
        state.passed_players.clear()
        state.round_ended = True
        state.first_move = False
        state.current_round += 1
        _assign_attacker(state)

        logger.info(
            "Round %d of game %s: %s took %d cards",
            state.current_round,
            state.id,
            player_id,
            len(taken),
        )
        _emit(
            EngineEventType.CARDS_TAKEN,
            {
                "game_id": state.id,
                "player_id": player_id,
                "card_count": len(taken),
                "new_hand_size": defender.card_count,
            },
        )
        _emit(
            EngineEventType.ROUND_ENDED,
            {
                "game_id": state.id,
                "round_number": state.current_round,
                "defender_won": False,
                "next_attacker": state.current_turn,
                "next_defender": state.next_defender,
            },
        )

        if not StateTransitionEngine.check_game_end(state):
            _emit(
                EngineEventType.ROUND_STARTED,
                {
                    "game_id": state.id,
                    "round_number": state.current_round + 1,
                    "attacker": state.current_turn,
                    "defender": state.next_defender,
                },
            )
        return True

    @staticmethod
    def can_pass(state: GameState, player_id: str) -> bool:
        """Check whether `player_id` may decline to add more attack cards."""
        return (
            state.status == GameStatus.PLAYING
            and player_id == state.current_turn
            and not state.table.is_empty
            and player_id not in state.passed_players
        )

    @staticmethod
    def handle_pass_turn(state: GameState, player_id: str) -> bool:
        """
        Record that the current attacker adds nothing more this round.

        When every player except the defender has passed the round ends;
        otherwise the turn moves to the next attacker who has not passed.

        Returns:
            True if the pass was recorded
        """
        if not StateTransitionEngine.can_pass(state, player_id):
            return _reject(state, player_id, "pass", "cannot pass now")

        state.passed_players.add(player_id)
        _emit(
            EngineEventType.ATTACK_PASSED,
            {
                "game_id": state.id,
                "player_id": player_id,
                "passed_players": sorted(state.passed_players),
            },
        )

        attackers = [pid for pid in state.turn_order if pid != state.next_defender]
        if all(pid in state.passed_players for pid in attackers):
            StateTransitionEngine.end_turn(state)
            return True

        state.current_turn = state.turn_order.next_after(
            player_id, skip={state.next_defender} | state.passed_players
        )
        return True

    @staticmethod
    def end_turn(state: GameState) -> bool:
        """
        Resolve the round on the table.

        If every attack was beaten the cards are discarded and the defender
        attacks next. Otherwise the defender collects the table and the turn
        skips them. A take clears the table itself, so it never ends here.

        Returns:
            True if a round was resolved
        """
        if state.status != GameStatus.PLAYING:
            return _reject(state, None, "end_turn", "game is not in play")
        if state.table.is_empty:
            return _reject(state, None, "end_turn", "no round in progress")

        snapshot = state.turn_order.copy()
        defender_id = state.next_defender
        defended = state.table.is_fully_defended

        if StateTransitionEngine.check_game_end(state):
            return True

        table_cards = state.table.clear()
        if defended:
            state.discard_pile.extend(table_cards)
        else:
            state.players[defender_id].hand.extend(table_cards)

        for player in state.players.values():
            player.has_picked_up_cards = False
        StateTransitionEngine.deal_cards(state)
        state.passed_players.clear()

        active = set(state.turn_order)
        if defended and defender_id in active:
            new_attacker = defender_id
        else:
            new_attacker = snapshot.first_active_after(defender_id, active)
        state.current_turn = new_attacker
        state.next_defender = state.turn_order.next_after(new_attacker)
        _assign_attacker(state)

        state.can_take_cards = False
        state.round_ended = False
        state.first_move = False
        state.current_round += 1

        logger.info(
            "Round %d of game %s ended, defender %s %s",
            state.current_round,
            state.id,
            defender_id,
            "held" if defended else "collected the table",
        )
        _emit(
            EngineEventType.ROUND_ENDED,
            {
                "game_id": state.id,
                "round_number": state.current_round,
                "defender_won": defended,
                "next_attacker": state.current_turn,
                "next_defender": state.next_defender,
            },
        )

        if not StateTransitionEngine.check_game_end(state):
            _emit(
                EngineEventType.ROUND_STARTED,
                {
                    "game_id": state.id,
                    "round_number": state.current_round + 1,
                    "attacker": state.current_turn,
                    "defender": state.next_defender,
                },
            )
        return True

    @staticmethod
    def check_game_end(state: GameState) -> bool:
        """
        Retire players who ran out of cards once the deck is empty.

        If a single player is left holding cards they lose, and the player
        after them in the rotation is recorded as the winner. If nobody is
        left the game ends without a winner.

        Returns:
            True if the game is finished
        """
        if state.status == GameStatus.FINISHED:
            return True
        if state.deck:
            return False

        snapshot = state.turn_order.copy()
        exited = [pid for pid in snapshot if not state.players[pid].hand]
        for player_id in exited:
            state.turn_order.remove(player_id)
            state.departed_players[player_id] = state.players.pop(player_id)
            state.finished_players.append(player_id)
            state.passed_players.discard(player_id)
            logger.info("Player %s is out of game %s", player_id, state.id)
            _emit(
                EngineEventType.PLAYER_FINISHED,
                {
                    "game_id": state.id,
                    "player_id": player_id,
                    "place": len(state.finished_players),
                },
            )

        remaining = state.turn_order.ids
        if len(remaining) == 1:
            loser = remaining[0]
            _finish(state, winner=snapshot.next_after(loser), loser=loser)
            return True
        if not remaining:
            _finish(state, winner=None, loser=None)
            return True

        if exited:
            _repair_pointers(state, snapshot)
            if state.table.is_empty:
                _assign_attacker(state)
        return False

    @staticmethod
    def handle_player_disconnect(state: GameState, player_id: str) -> bool:
        """
        Remove a departed player and keep the game playable.

        The player's hand leaves the game with them. Turn pointers that
        referenced them move on, and if they were defending, the round on
        the table is abandoned to the discard pile.

        Returns:
            True if the player was removed
        """
        if state.status == GameStatus.FINISHED:
            return _reject(state, player_id, "disconnect", "game is finished")
        if player_id not in state.players:
            return _reject(state, player_id, "disconnect", "unknown player")

        was_defender = player_id == state.next_defender
        previous_turn = state.current_turn
        if player_id == state.current_turn:
            state.current_turn = state.turn_order.next_after(
                player_id, skip={state.next_defender}
            )
        if was_defender:
            state.next_defender = state.turn_order.next_after(
                player_id, skip={state.current_turn}
            )

        state.turn_order.remove(player_id)
        departed = state.players.pop(player_id)
        state.departed_players[player_id] = departed
        state.passed_players.discard(player_id)

        logger.info(
            "Player %s left game %s with %d cards",
            player_id,
            state.id,
            departed.card_count,
        )
        _emit(
            EngineEventType.PLAYER_LEFT,
            {
                "game_id": state.id,
                "player_id": player_id,
                "player_name": departed.name,
                "remaining_players": state.turn_order.ids,
            },
        )

        if len(state.players) < MIN_PLAYERS:
            _finish(state, winner=next(iter(state.players), None), loser=None)
            return True

        if state.current_turn is None or state.current_turn not in state.players:
            state.current_turn = state.turn_order[0]
        if state.next_defender is None or state.next_defender == state.current_turn:
            state.next_defender = state.turn_order.next_after(state.current_turn)

        if was_defender and not state.table.is_empty:
            state.discard_pile.extend(state.table.clear())
            state.can_take_cards = False
            state.passed_players.clear()
        if state.table.is_empty:
            _assign_attacker(state)
        if state.current_turn != previous_turn:
            state.players[state.current_turn].has_picked_up_cards = False

        if not state.table.is_empty:
            attackers = [pid for pid in state.turn_order if pid != state.next_defender]
            if all(pid in state.passed_players for pid in attackers):
                StateTransitionEngine.end_turn(state)
            elif state.current_turn in state.passed_players:
                state.current_turn = state.turn_order.next_after(
                    state.current_turn,
                    skip={state.next_defender} | state.passed_players,
                )
        return True


initialize_game = StateTransitionEngine.initialize_game
deal_cards = StateTransitionEngine.deal_cards
attack_card = StateTransitionEngine.attack_card
defend_card = StateTransitionEngine.defend_card
make_move = StateTransitionEngine.make_move
handle_take_cards = StateTransitionEngine.handle_take_cards
can_pass = StateTransitionEngine.can_pass
handle_pass_turn = StateTransitionEngine.handle_pass_turn
end_turn = StateTransitionEngine.end_turn
check_game_end = StateTransitionEngine.check_game_end
handle_player_disconnect = StateTransitionEngine.handle_player_disconnect
