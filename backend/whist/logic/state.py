"""
Immutable application state for the score tracker.

All models are frozen: transitions build new objects with model_copy and
never mutate a snapshot. JSON uses camelCase aliases (bidLevel, gameNights,
activeGameId, ...) while Python code uses the field names; both are
accepted on input.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from whist.logic.enums import SpecialBid, TrumpType

NUM_PLAYERS = 4


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _as_utc(value: datetime) -> datetime:
    """Read naive timestamps as UTC so all stored dates compare with each other."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class _StateModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Player(_StateModel):
    id: str
    name: str
    created_at: UtcDatetime = Field(default_factory=utc_now)


class Round(_StateModel):
    """
    One scored declaration within a game night.

    success and points are filled in by the ledger from the scoring engine
    and stored with the round, so deleting a round reverses exactly what was
    applied even if the scoring table changes later.
    """

    id: str
    bidder: str
    partner: str | None = None  # None for a solo declaration
    bid_level: int
    trump_type: TrumpType
    vip_count: int | None = None  # cards seen in the kitty, vip only
    special_bid: SpecialBid | None = None
    tricks_won: int
    success: bool
    points: int

    @property
    def is_solo(self) -> bool:
        return self.partner is None

    def declaring_side(self) -> tuple[str, ...]:
        if self.partner is None:
            return (self.bidder,)
        return (self.bidder, self.partner)


class GameNight(_StateModel):
    id: str
    date: UtcDatetime = Field(default_factory=utc_now)
    players: tuple[str, ...]
    rounds: tuple[Round, ...] = ()
    scores: dict[str, int] = Field(default_factory=dict)
    is_active: bool = True

    def find_round(self, round_id: str) -> Round | None:
        return next((r for r in self.rounds if r.id == round_id), None)


class AppState(_StateModel):
    players: tuple[Player, ...] = ()
    game_nights: tuple[GameNight, ...] = ()
    active_game_id: str | None = None  # convenience cursor, cleared on end/delete
