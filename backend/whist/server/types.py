from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from whist.logic.enums import SpecialBid, TrumpType
from whist.logic.scoring import MAX_BID_LEVEL, MAX_VIP_COUNT, MIN_BID_LEVEL, MIN_VIP_COUNT


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class PlayerNameRequest(_Request):
    name: str = Field(min_length=1, max_length=100)


class CreateGameNightRequest(_Request):
    player_ids: list[str]


class SetActiveGameRequest(_Request):
    game_id: str | None = None


class AddRoundRequest(_Request):
    bidder: str
    partner: str | None = None
    bid_level: int = Field(ge=MIN_BID_LEVEL, le=MAX_BID_LEVEL)
    trump_type: TrumpType
    vip_count: int | None = Field(default=None, ge=MIN_VIP_COUNT, le=MAX_VIP_COUNT)
    special_bid: SpecialBid | None = None
    tricks_won: int = Field(ge=0, le=13)
