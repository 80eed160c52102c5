from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from whist.logic.ledger import add_round, create_game_night, get_game_night
from whist.logic.state import AppState, Player

if TYPE_CHECKING:
    from collections.abc import Sequence

    from whist.logic.enums import SpecialBid, TrumpType

# ============================================================================
# Test State Builder Helpers
# ============================================================================

PLAYER_IDS = ("p1", "p2", "p3", "p4")
PLAYER_NAMES = ("Anna", "Bo", "Carl", "Dorte")
GAME_ID = "g1"


def create_player(player_id: str = "p1", name: str | None = None) -> Player:
    return Player(
        id=player_id,
        name=name if name is not None else f"Player {player_id}",
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


def create_state(*, extra_players: Sequence[str] = ()) -> AppState:
    """State with the four standard players (plus any extra ids) and no game nights."""
    players = tuple(create_player(pid, name) for pid, name in zip(PLAYER_IDS, PLAYER_NAMES, strict=True))
    players += tuple(create_player(pid) for pid in extra_players)
    return AppState(players=players)


def create_game_state(
    *,
    game_id: str = GAME_ID,
    started_at: datetime | None = None,
    extra_players: Sequence[str] = (),
) -> AppState:
    """State with the standard players seated in one active game night."""
    return create_game_night(
        create_state(extra_players=extra_players),
        PLAYER_IDS,
        game_id=game_id,
        started_at=started_at or datetime(2025, 3, 1, 19, 0, tzinfo=UTC),
    )


def play_round(  # noqa: PLR0913
    state: AppState,
    *,
    game_id: str = GAME_ID,
    bidder: str = "p1",
    partner: str | None = "p2",
    bid_level: int = 7,
    trump_type: TrumpType | str = "alm",
    vip_count: int | None = None,
    special_bid: SpecialBid | str | None = None,
    tricks_won: int = 7,
    round_id: str | None = None,
) -> AppState:
    return add_round(
        state,
        game_id,
        bidder,
        partner,
        bid_level,
        trump_type,  # type: ignore[arg-type]
        vip_count,
        special_bid,  # type: ignore[arg-type]
        tricks_won,
        round_id=round_id,
    )


def game_scores(state: AppState, game_id: str = GAME_ID) -> dict[str, int]:
    game = get_game_night(state, game_id)
    assert game is not None
    return dict(game.scores)


@pytest.fixture
def game_state() -> AppState:
    return create_game_state()
