"""
Tests for the Durak engine.

This module drives DurakEngine through a DummyAdapter and checks what each
player is shown after every action.
"""

import asyncio

import pytest
import pytest_asyncio

from durakcore.adapters import DummyAdapter
from durakcore.common.card import Card
from durakcore.durak.state import GameStatus
from durakcore.engine import DurakEngine, parse_intent


@pytest.fixture
def adapter():
    return DummyAdapter()


@pytest_asyncio.fixture
async def engine(adapter):
    """A started two-player game with a fixed shuffle."""
    engine = DurakEngine(adapter, {"seed": 7})
    await engine.initialize()
    await engine.start_game(["alice", "bob"], {"alice": "Alice", "bob": "Bob"}, lobby_id="L1")
    adapter.clear()
    yield engine
    await engine.shutdown()


def first_attack(engine):
    """The first card the current attacker may play, as a Card."""
    attacker = engine.state.current_turn
    return attacker, Card.from_dict(engine.get_valid_actions(attacker)["ATTACK"][0])


class TestDurakEngineSetup:
    """Tests for engine construction and game start."""

    def test_default_config(self, adapter):
        engine = DurakEngine(adapter)
        assert engine.config == {"seed": None, "min_players": 2, "max_players": 6}
        assert engine.state is None
        assert not engine.is_game_over()
        assert engine.get_winner() is None

    def test_config_merges_over_defaults(self, adapter):
        engine = DurakEngine(adapter, {"seed": 3, "max_players": 4})
        assert engine.config == {"seed": 3, "min_players": 2, "max_players": 4}

    @pytest.mark.asyncio
    async def test_start_game_pushes_a_view_per_player(self, adapter):
        engine = DurakEngine(adapter, {"seed": 1})
        await engine.initialize()
        state = await engine.start_game(["a", "b", "c"], lobby_id="lobby")

        assert adapter.initialized
        assert state.status == GameStatus.PLAYING
        assert state.lobby_id == "lobby"
        assert sorted(player_id for player_id, _ in adapter.rendered_views) == ["a", "b", "c"]
        view = adapter.last_view("a")
        assert view["players"]["self"]["card_count"] == 6
        assert view["deck_count"] == 18

        event_types = [event_type for event_type, _ in adapter.events]
        assert event_types == ["GAME_CREATED", "ROUND_STARTED", "GAME_STARTED"]

    @pytest.mark.asyncio
    async def test_seed_makes_deal_reproducible(self):
        first = DurakEngine(DummyAdapter(), {"seed": 42})
        second = DurakEngine(DummyAdapter(), {"seed": 42})
        await first.start_game(["a", "b"])
        await second.start_game(["a", "b"])

        assert first.state.deck == second.state.deck
        assert first.state.trump == second.state.trump

    @pytest.mark.asyncio
    async def test_player_count_follows_config(self, adapter):
        engine = DurakEngine(adapter, {"min_players": 3})
        with pytest.raises(ValueError):
            await engine.start_game(["a", "b"])
        assert engine.state is None

    @pytest.mark.asyncio
    async def test_actions_need_a_game(self, adapter):
        engine = DurakEngine(adapter)
        with pytest.raises(ValueError):
            await engine.execute_player_action("a", "PASS")

    @pytest.mark.asyncio
    async def test_shutdown_reaches_adapter(self, adapter):
        engine = DurakEngine(adapter)
        await engine.initialize()
        await engine.shutdown()
        assert adapter.shut_down


class TestDurakEngineActions:
    """Tests for applying player actions."""

    @pytest.mark.asyncio
    async def test_attack_is_applied_and_broadcast(self, engine, adapter):
        attacker, card = first_attack(engine)

        assert await engine.execute_player_action(attacker, "ATTACK", card=card)

        assert engine.state.table.attacking == [card]
        assert {player_id for player_id, _ in adapter.rendered_views} == {"alice", "bob"}
        assert [event_type for event_type, _ in adapter.events] == ["CARD_ATTACKED"]
        defender_view = adapter.last_view(engine.state.next_defender)
        assert defender_view["table"]["attacking"] == [card.to_dict()]

    @pytest.mark.asyncio
    async def test_card_may_be_given_as_dict(self, engine):
        attacker, card = first_attack(engine)
        assert await engine.execute_player_action(attacker, "attack", card=card.to_dict())

    @pytest.mark.asyncio
    async def test_rejected_action_pushes_nothing(self, engine, adapter):
        defender = engine.state.next_defender
        assert not await engine.execute_player_action(defender, "TAKE_CARDS")
        assert adapter.rendered_views == []
        assert adapter.events == []

    @pytest.mark.asyncio
    async def test_unknown_action_raises(self, engine):
        with pytest.raises(ValueError):
            await engine.execute_player_action("alice", "SHUFFLE")

    @pytest.mark.asyncio
    async def test_card_action_without_card_raises(self, engine):
        with pytest.raises(ValueError):
            await engine.execute_player_action("alice", "ATTACK")

    @pytest.mark.asyncio
    async def test_take_cards(self, engine):
        attacker, card = first_attack(engine)
        defender = engine.state.next_defender
        await engine.execute_player_action(attacker, "PLAY_CARD", card=card, is_defending=False)

        assert await engine.execute_player_action(defender, "TAKE_CARDS")

        assert card in engine.state.players[defender].hand
        assert engine.state.table.is_empty
        assert engine.state.current_turn == attacker

    @pytest.mark.asyncio
    async def test_end_turn_only_by_current_attacker(self, engine):
        attacker, card = first_attack(engine)
        defender = engine.state.next_defender
        await engine.execute_player_action(attacker, "ATTACK", card=card)

        assert not await engine.execute_player_action(defender, "END_TURN")
        assert await engine.execute_player_action(attacker, "END_TURN")
        # the open attack went to the defender
        assert card in engine.state.players[defender].hand

    @pytest.mark.asyncio
    async def test_disconnect_ends_two_player_game(self, engine, adapter):
        assert await engine.execute_player_action("bob", "DISCONNECT")

        assert engine.is_game_over()
        assert engine.get_winner() == "alice"
        assert engine.get_loser() is None
        assert engine.get_valid_actions("alice") == {}
        # bob left, so only alice is still sent views
        assert {player_id for player_id, _ in adapter.rendered_views} == {"alice"}
        assert "GAME_ENDED" in [event_type for event_type, _ in adapter.events]

    @pytest.mark.asyncio
    async def test_dispatch_intent(self, engine):
        attacker, card = first_attack(engine)
        card_data = card.to_dict()
        intent = parse_intent(
            {
                "v": 1,
                "type": "attack",
                "player_id": attacker,
                "card": {"suit": card_data["suit"], "rank": card_data["rank"]},
            }
        )
        assert await engine.dispatch(intent)
        assert engine.state.table.attacking == [card]

    @pytest.mark.asyncio
    async def test_dispatch_rejects_non_intents(self, engine):
        with pytest.raises(ValueError):
            await engine.dispatch({"type": "attack"})


class TestDurakEngineQueries:
    """Tests for the read-only helpers."""

    @pytest.mark.asyncio
    async def test_valid_actions_for_attacker_and_defender(self, engine):
        attacker = engine.state.current_turn
        defender = engine.state.next_defender

        attacker_actions = engine.get_valid_actions(attacker)
        assert "ATTACK" in attacker_actions
        assert "PASS" not in attacker_actions
        assert engine.get_valid_actions(defender) == {}

        _, card = first_attack(engine)
        await engine.execute_player_action(attacker, "ATTACK", card=card)

        assert "TAKE_CARDS" in engine.get_valid_actions(defender)
        assert "PASS" in engine.get_valid_actions(attacker)
        assert "END_TURN" in engine.get_valid_actions(attacker)

    @pytest.mark.asyncio
    async def test_player_view_hides_opponent_hand(self, engine):
        view = engine.get_player_view("alice")
        assert view["players"]["self"]["name"] == "Alice"
        assert view["players"]["others"][0]["name"] == "Bob"
        assert "hand" not in view["players"]["others"][0]

    def test_unknown_player_has_no_actions(self, adapter):
        engine = DurakEngine(adapter)
        assert engine.get_valid_actions("nobody") == {}


class TestDurakEngineConcurrency:
    """Tests for intents arriving at the same time."""

    @pytest.mark.asyncio
    async def test_concurrent_intents_are_serialized(self, engine):
        attacker = engine.state.current_turn
        defender = engine.state.next_defender
        _, card = first_attack(engine)

        results = await asyncio.gather(
            engine.execute_player_action(attacker, "ATTACK", card=card),
            engine.execute_player_action(attacker, "ATTACK", card=card),
            engine.execute_player_action(defender, "TAKE_CARDS"),
        )

        # the same card cannot be played twice
        assert results[:2].count(True) == 1
        cards = engine.state.all_cards()
        assert len(cards) == 36
        assert len(set(cards)) == 36
