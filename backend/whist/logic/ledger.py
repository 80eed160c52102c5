"""
Game night ledger: state transitions over AppState.

Every transition is a function (state, args) -> state that never mutates its
input. Transitions on an unknown game or round id return the state unchanged.
Round scoring moves points from the defending side to the declaring side
(or back, for a failed bid), so each game night's scores always sum to zero.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from whist.logic.enums import SpecialBid, TrumpType
from whist.logic.exceptions import GameNotActiveError, InvalidGameNightError, InvalidRoundError
from whist.logic.scoring import (
    MAX_BID_LEVEL,
    MAX_VIP_COUNT,
    MIN_BID_LEVEL,
    MIN_VIP_COUNT,
    compute_round_outcome,
)
from whist.logic.state import NUM_PLAYERS, AppState, GameNight, Player, Round, utc_now

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from datetime import datetime

logger = structlog.get_logger()

MAX_TRICKS = 13
UNKNOWN_PLAYER_NAME = "Unknown"


def get_game_night(state: AppState, game_id: str) -> GameNight | None:
    return next((g for g in state.game_nights if g.id == game_id), None)


def get_active_game(state: AppState) -> GameNight | None:
    """Return the game night under the active-game cursor, if it still exists."""
    if state.active_game_id is None:
        return None
    return get_game_night(state, state.active_game_id)


def get_player(state: AppState, player_id: str) -> Player | None:
    return next((p for p in state.players if p.id == player_id), None)


def player_name(state: AppState, player_id: str) -> str:
    player = get_player(state, player_id)
    return player.name if player is not None else UNKNOWN_PLAYER_NAME


def _update_game(state: AppState, game_id: str, update: Callable[[GameNight], GameNight]) -> AppState:
    game_nights = tuple(update(g) if g.id == game_id else g for g in state.game_nights)
    return state.model_copy(update={"game_nights": game_nights})


def _shift_scores(
    scores: Mapping[str, int],
    players: Iterable[str],
    declaring_side: tuple[str, ...],
    points: int,
) -> dict[str, int]:
    """
    Move points from every defender to the declaring side.

    Each defender pays points and the declaring side shares what they pay,
    so a partnered declarer gets points and a solo declarer gets three times
    points. The total over all players is unchanged.
    """
    defenders = [p for p in players if p not in declaring_side]
    share = points * len(defenders) // len(declaring_side)
    new_scores = dict(scores)
    for player_id in declaring_side:
        new_scores[player_id] = new_scores.get(player_id, 0) + share
    for player_id in defenders:
        new_scores[player_id] = new_scores.get(player_id, 0) - points
    return new_scores


def _validate_round(
    game: GameNight,
    bidder: str,
    partner: str | None,
    bid_level: int,
    vip_count: int | None,
    tricks_won: int,
    *,
    is_vip: bool,
) -> None:
    if bidder not in game.players:
        raise InvalidRoundError(f"bidder {bidder} is not playing in game night {game.id}")
    if partner is not None:
        if partner == bidder:
            raise InvalidRoundError("partner must differ from bidder")
        if partner not in game.players:
            raise InvalidRoundError(f"partner {partner} is not playing in game night {game.id}")
    if not MIN_BID_LEVEL <= bid_level <= MAX_BID_LEVEL:
        raise InvalidRoundError(f"bid level must be between {MIN_BID_LEVEL} and {MAX_BID_LEVEL}, got {bid_level}")
    if not 0 <= tricks_won <= MAX_TRICKS:
        raise InvalidRoundError(f"tricks won must be between 0 and {MAX_TRICKS}, got {tricks_won}")
    if is_vip and vip_count is not None and (
        type(vip_count) is not int or not MIN_VIP_COUNT <= vip_count <= MAX_VIP_COUNT
    ):
        raise InvalidRoundError(f"vip count must be between {MIN_VIP_COUNT} and {MAX_VIP_COUNT}, got {vip_count}")


def add_round(  # noqa: PLR0913
    state: AppState,
    game_id: str,
    bidder: str,
    partner: str | None,
    bid_level: int,
    trump_type: TrumpType,
    vip_count: int | None,
    special_bid: SpecialBid | None,
    tricks_won: int,
    *,
    round_id: str | None = None,
) -> AppState:
    """
    Score a declaration and append it to an active game night.

    Raises GameNotActiveError when the game night has ended and
    InvalidRoundError for malformed input. A vip_count given with a non-vip
    trump is dropped. The new round is the last entry of the game's rounds.
    """
    game = get_game_night(state, game_id)
    if game is None:
        logger.debug("add round ignored, unknown game night", game_id=game_id)
        return state
    if not game.is_active:
        raise GameNotActiveError(game_id)

    try:
        trump_type = TrumpType(trump_type)
        special_bid = SpecialBid(special_bid) if special_bid else None
    except ValueError as e:
        raise InvalidRoundError(str(e)) from e
    is_vip = trump_type is TrumpType.VIP
    _validate_round(game, bidder, partner, bid_level, vip_count, tricks_won, is_vip=is_vip)
    if not is_vip:
        vip_count = None

    outcome = compute_round_outcome(bid_level, trump_type, tricks_won, partner, special_bid, vip_count)
    new_round = Round(
        id=round_id or str(uuid4()),
        bidder=bidder,
        partner=partner,
        bid_level=bid_level,
        trump_type=trump_type,
        vip_count=vip_count,
        special_bid=special_bid,
        tricks_won=tricks_won,
        success=outcome.success,
        points=outcome.points,
    )

    def _append(g: GameNight) -> GameNight:
        return g.model_copy(
            update={
                "rounds": (*g.rounds, new_round),
                "scores": _shift_scores(g.scores, g.players, new_round.declaring_side(), new_round.points),
            },
        )

    logger.info(
        "round added",
        game_id=game_id,
        round_id=new_round.id,
        bid_level=bid_level,
        trump_type=trump_type,
        success=outcome.success,
        points=outcome.points,
    )
    return _update_game(state, game_id, _append)


def delete_round(state: AppState, game_id: str, round_id: str) -> AppState:
    """
    Remove a round and reverse its score update.

    Uses the points stored on the round, not a recomputation, so this is the
    exact inverse of the add_round that created it. Works on ended game
    nights too.
    """
    game = get_game_night(state, game_id)
    target = game.find_round(round_id) if game is not None else None
    if target is None:
        logger.debug("delete round ignored, unknown round", game_id=game_id, round_id=round_id)
        return state

    def _remove(g: GameNight) -> GameNight:
        return g.model_copy(
            update={
                "rounds": tuple(r for r in g.rounds if r is not target),
                "scores": _shift_scores(g.scores, g.players, target.declaring_side(), -target.points),
            },
        )

    logger.info("round deleted", game_id=game_id, round_id=round_id, points=target.points)
    return _update_game(state, game_id, _remove)


def create_game_night(
    state: AppState,
    player_ids: Iterable[str],
    *,
    game_id: str | None = None,
    started_at: datetime | None = None,
) -> AppState:
    """
    Start a game night for exactly four distinct, known players.

    The new game night becomes the active-game cursor.
    """
    players = tuple(player_ids)
    if len(players) != NUM_PLAYERS:
        raise InvalidGameNightError(f"a game night needs exactly {NUM_PLAYERS} players, got {len(players)}")
    if len(set(players)) != NUM_PLAYERS:
        raise InvalidGameNightError("players in a game night must be distinct")
    known = {p.id for p in state.players}
    missing = [p for p in players if p not in known]
    if missing:
        raise InvalidGameNightError(f"unknown players: {', '.join(missing)}")

    game = GameNight(
        id=game_id or str(uuid4()),
        date=started_at or utc_now(),
        players=players,
        scores=dict.fromkeys(players, 0),
        is_active=True,
    )
    logger.info("game night created", game_id=game.id, players=list(players))
    return state.model_copy(update={"game_nights": (*state.game_nights, game), "active_game_id": game.id})


def _cursor_without(state: AppState, game_id: str) -> str | None:
    return None if state.active_game_id == game_id else state.active_game_id


def end_game_night(state: AppState, game_id: str) -> AppState:
    """Mark a game night as ended. Idempotent."""
    if get_game_night(state, game_id) is None:
        logger.debug("end game night ignored, unknown game night", game_id=game_id)
        return state

    new_state = _update_game(state, game_id, lambda g: g.model_copy(update={"is_active": False}))
    logger.info("game night ended", game_id=game_id)
    return new_state.model_copy(update={"active_game_id": _cursor_without(state, game_id)})


def delete_game_night(state: AppState, game_id: str) -> AppState:
    """Remove a game night and its rounds. Active game nights may be deleted too."""
    if get_game_night(state, game_id) is None:
        logger.debug("delete game night ignored, unknown game night", game_id=game_id)
        return state

    logger.info("game night deleted", game_id=game_id)
    return state.model_copy(
        update={
            "game_nights": tuple(g for g in state.game_nights if g.id != game_id),
            "active_game_id": _cursor_without(state, game_id),
        },
    )


def set_active_game(state: AppState, game_id: str | None) -> AppState:
    """Point the active-game cursor at an existing game night, or clear it."""
    if game_id is not None and get_game_night(state, game_id) is None:
        logger.debug("set active game ignored, unknown game night", game_id=game_id)
        return state
    return state.model_copy(update={"active_game_id": game_id})
