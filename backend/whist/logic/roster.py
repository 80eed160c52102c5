"""Player roster transitions: add, rename, delete."""

from __future__ import annotations

from uuid import uuid4

import structlog

from whist.logic.exceptions import InvalidPlayerError, PlayerInUseError
from whist.logic.ledger import get_player
from whist.logic.state import AppState, Player, utc_now

logger = structlog.get_logger()


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise InvalidPlayerError("player name must not be blank")
    return cleaned


def add_player(state: AppState, name: str, *, player_id: str | None = None) -> AppState:
    player = Player(id=player_id or str(uuid4()), name=_clean_name(name), created_at=utc_now())
    logger.info("player added", player_id=player.id)
    return state.model_copy(update={"players": (*state.players, player)})


def rename_player(state: AppState, player_id: str, name: str) -> AppState:
    new_name = _clean_name(name)
    if get_player(state, player_id) is None:
        logger.debug("rename ignored, unknown player", player_id=player_id)
        return state
    players = tuple(p.model_copy(update={"name": new_name}) if p.id == player_id else p for p in state.players)
    return state.model_copy(update={"players": players})


def is_in_active_game(state: AppState, player_id: str) -> bool:
    return any(g.is_active and player_id in g.players for g in state.game_nights)


def delete_player(state: AppState, player_id: str) -> AppState:
    """
    Remove a player from the roster.

    Players seated in an active game night cannot be deleted. Ended game
    nights keep their rounds and scores for the deleted id.
    """
    if get_player(state, player_id) is None:
        logger.debug("delete ignored, unknown player", player_id=player_id)
        return state
    if is_in_active_game(state, player_id):
        raise PlayerInUseError(player_id)

    logger.info("player deleted", player_id=player_id)
    return state.model_copy(update={"players": tuple(p for p in state.players if p.id != player_id)})
