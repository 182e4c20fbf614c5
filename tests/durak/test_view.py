"""
Tests for per-player views of a Durak game.
"""

import random

from conftest import c, make_state
from durakcore.durak.transitions import StateTransitionEngine
from durakcore.durak.view import get_player_view


class TestPlayerView:
    """Tests for get_player_view redaction."""

    def test_own_hand_is_visible(self):
        state = make_state({"a": ["6S", "7H"], "b": ["8S"]}, deck=["AH", "KH"])
        view = get_player_view(state, "a")

        own = view["players"]["self"]
        assert own["id"] == "a"
        assert own["hand"] == [c("6S").to_dict(), c("7H").to_dict()]
        assert own["card_count"] == 2

    def test_opponents_show_counts_only(self):
        state = make_state({"a": ["6S", "7H"], "b": ["8S"], "c": ["9S", "10S"]})
        view = get_player_view(state, "a")

        others = view["players"]["others"]
        assert [other["id"] for other in others] == ["b", "c"]
        assert others[0] == {"id": "b", "name": "b", "card_count": 1, "is_attacker": False}
        assert all("hand" not in other for other in others)

    def test_deck_reported_by_size(self):
        state = make_state({"a": ["6S"], "b": ["8S"]}, deck=["AH", "KH", "QH"])
        view = get_player_view(state, "b")

        assert view["deck_count"] == 3
        assert "deck" not in view
        assert view["trump"] == c("6D").to_dict()

    def test_no_other_hand_leaks_anywhere(self):
        state = StateTransitionEngine.initialize_game(
            ["a", "b", "c"], rng=random.Random(11)
        )
        view = get_player_view(state, "a")
        text = repr(view)

        for player_id in ("b", "c"):
            for card in state.players[player_id].hand:
                if card != state.trump:
                    assert repr(card.to_dict()) not in text

    def test_table_and_turn_fields(self):
        state = make_state({"a": ["6S", "7H"], "b": ["8S", "9S"]})
        StateTransitionEngine.attack_card(state, "a", c("6S"))
        view = get_player_view(state, "b")

        assert view["table"] == {"attacking": [c("6S").to_dict()], "defending": []}
        assert view["current_turn"] == "a"
        assert view["next_defender"] == "b"
        assert view["status"] == "playing"
        assert view["can_take_cards"] is True
        assert view["turn_order"] == ["a", "b"]

    def test_departed_player_still_sees_their_state(self):
        state = make_state({"a": ["6S"], "b": ["7S"], "c": ["8S"]})
        StateTransitionEngine.handle_player_disconnect(state, "c")

        view = get_player_view(state, "c")
        assert view["players"]["self"]["hand"] == [c("8S").to_dict()]
        assert [other["id"] for other in view["players"]["others"]] == ["a", "b"]

    def test_unknown_viewer_gets_no_self(self):
        state = make_state({"a": ["6S"], "b": ["7S"]})
        view = get_player_view(state, "z")
        assert view["players"]["self"] is None
        assert len(view["players"]["others"]) == 2
