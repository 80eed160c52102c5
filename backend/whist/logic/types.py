"""
Pydantic models for values that cross component boundaries.

Contains scoring results and the statistics views built from completed
game nights.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from whist.logic.enums import TrumpType


class _ViewModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class RoundOutcome(_ViewModel):
    success: bool
    points: int


class PointsPreview(_ViewModel):
    """Points a declaration would score if made and if failed."""

    if_made: int
    if_failed: int


class PlayerStats(_ViewModel):
    player_id: str
    name: str
    games_played: int = 0
    rounds_played: int = 0  # as bidder or partner
    rounds_as_bidder: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: int = 0  # whole percent
    total_points: int = 0


class PartnershipStats(_ViewModel):
    # player ids in sorted order, so each pair has one entry
    player1: str
    player2: str
    games_played: int = 0
    rounds_together: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: int = 0
    total_points: int = 0


class TrumpUsage(_ViewModel):
    trump_type: TrumpType
    count: int
    percentage: int


class BidLevelStats(_ViewModel):
    bid_level: int
    total: int
    wins: int
    win_rate: int


class ScoreTrendPoint(_ViewModel):
    """Cumulative score per player after one completed game night."""

    game_id: str
    date: str
    scores: dict[str, int]


class StatsSummary(_ViewModel):
    completed_games: int
    total_rounds: int
    players: list[PlayerStats]
    partnerships: list[PartnershipStats]
    trumps: list[TrumpUsage]
    bid_levels: list[BidLevelStats]
    trend: list[ScoreTrendPoint]
