"""
Per-player views of a Durak game.

`get_player_view` is the only way game state should leave the engine: it
shows a player their own hand and nothing but card counts for everyone
else. The deck is reported by size only.
"""

from typing import Any, Dict, List, Optional

from durakcore.durak.state import GameState, PlayerState


def _public_player(player: PlayerState) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "card_count": player.card_count,
        "is_attacker": player.is_attacker,
    }


def _own_player(state: GameState, player_id: str) -> Optional[Dict[str, Any]]:
    player = state.players.get(player_id) or state.departed_players.get(player_id)
    return player.to_dict() if player else None


def get_player_view(state: GameState, player_id: str) -> Dict[str, Any]:
    """
    Build the redacted view of `state` for `player_id`.

    Args:
        state: Current game state
        player_id: The player the view is for

    Returns:
        Dictionary with the shared game fields and a "players" entry of the
        form {"self": <own state with hand>, "others": [{id, name,
        card_count, is_attacker}, ...]}, others listed in turn order
    """
    others: List[Dict[str, Any]] = [
        _public_player(state.players[other_id])
        for other_id in state.turn_order
        if other_id != player_id
    ]

    return {
        "id": state.id,
        "lobby_id": state.lobby_id,
        "status": state.status.value,
        "trump": state.trump.to_dict() if state.trump else None,
        "deck_count": len(state.deck),
        "discard_count": len(state.discard_pile),
        "table": state.table.to_dict(),
        "current_turn": state.current_turn,
        "next_defender": state.next_defender,
        "winner": state.winner,
        "loser": state.loser,
        "turn_order": state.turn_order.ids,
        "passed_players": sorted(state.passed_players),
        "finished_players": list(state.finished_players),
        "can_take_cards": state.can_take_cards,
        "round_ended": state.round_ended,
        "first_move": state.first_move,
        "current_round": state.current_round,
        "players": {
            "self": _own_player(state, player_id),
            "others": others,
        },
    }
