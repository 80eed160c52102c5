"""
Historical statistics over completed game nights.

Only game nights that have ended count; a game night in progress does not
change any figure until it is ended. Percentages are whole numbers rounded
half up.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whist.logic.enums import TrumpType
from whist.logic.scoring import MAX_BID_LEVEL, MIN_BID_LEVEL
from whist.logic.types import (
    BidLevelStats,
    PartnershipStats,
    PlayerStats,
    ScoreTrendPoint,
    StatsSummary,
    TrumpUsage,
)

if TYPE_CHECKING:
    from whist.logic.state import AppState, GameNight, Round


def _percent(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def completed_games(state: AppState) -> list[GameNight]:
    return [g for g in state.game_nights if not g.is_active]


def _completed_rounds(state: AppState) -> list[Round]:
    return [r for g in completed_games(state) for r in g.rounds]


def player_stats(state: AppState) -> list[PlayerStats]:
    """Per-player totals, best total points first."""
    games = completed_games(state)
    rounds = [r for g in games for r in g.rounds]

    result = []
    for player in state.players:
        played = [r for r in rounds if player.id in r.declaring_side()]
        wins = sum(1 for r in played if r.success)
        result.append(
            PlayerStats(
                player_id=player.id,
                name=player.name,
                games_played=sum(1 for g in games if player.id in g.players),
                rounds_played=len(played),
                rounds_as_bidder=sum(1 for r in rounds if r.bidder == player.id),
                wins=wins,
                losses=len(played) - wins,
                win_rate=_percent(wins, len(played)),
                total_points=sum(g.scores.get(player.id, 0) for g in games),
            ),
        )
    result.sort(key=lambda s: s.total_points, reverse=True)
    return result


def partnership_stats(state: AppState) -> list[PartnershipStats]:
    """Bidder/partner pairs over non-solo rounds, most rounds together first."""
    tallies: dict[tuple[str, str], dict[str, int]] = {}
    pair_games: dict[tuple[str, str], set[str]] = {}

    for game in completed_games(state):
        for r in game.rounds:
            if r.partner is None:
                continue
            p1, p2 = sorted((r.bidder, r.partner))
            tally = tallies.setdefault((p1, p2), {"rounds": 0, "wins": 0, "points": 0})
            tally["rounds"] += 1
            tally["wins"] += int(r.success)
            tally["points"] += r.points
            pair_games.setdefault((p1, p2), set()).add(game.id)

    result = [
        PartnershipStats(
            player1=p1,
            player2=p2,
            games_played=len(pair_games[(p1, p2)]),
            rounds_together=t["rounds"],
            wins=t["wins"],
            losses=t["rounds"] - t["wins"],
            win_rate=_percent(t["wins"], t["rounds"]),
            total_points=t["points"],
        )
        for (p1, p2), t in tallies.items()
    ]
    result.sort(key=lambda s: s.rounds_together, reverse=True)
    return result


def trump_popularity(state: AppState) -> list[TrumpUsage]:
    rounds = _completed_rounds(state)
    counts = dict.fromkeys(TrumpType, 0)
    for r in rounds:
        counts[r.trump_type] += 1
    usage = [TrumpUsage(trump_type=t, count=c, percentage=_percent(c, len(rounds))) for t, c in counts.items()]
    usage.sort(key=lambda u: u.count, reverse=True)
    return usage


def bid_level_distribution(state: AppState) -> list[BidLevelStats]:
    rounds = _completed_rounds(state)
    result = []
    for level in range(MIN_BID_LEVEL, MAX_BID_LEVEL + 1):
        at_level = [r for r in rounds if r.bid_level == level]
        wins = sum(1 for r in at_level if r.success)
        result.append(BidLevelStats(bid_level=level, total=len(at_level), wins=wins, win_rate=_percent(wins, len(at_level))))
    return result


def score_trend(state: AppState) -> list[ScoreTrendPoint]:
    """Running total per player after each completed game night, oldest first."""
    games = sorted(completed_games(state), key=lambda g: g.date)
    cumulative: dict[str, int] = {}
    for game in games:
        for player_id in game.players:
            cumulative.setdefault(player_id, 0)

    trend = []
    for game in games:
        for player_id in game.players:
            cumulative[player_id] += game.scores.get(player_id, 0)
        trend.append(ScoreTrendPoint(game_id=game.id, date=game.date.isoformat(), scores=dict(cumulative)))
    return trend


def summarize(state: AppState) -> StatsSummary:
    return StatsSummary(
        completed_games=len(completed_games(state)),
        total_rounds=len(_completed_rounds(state)),
        players=player_stats(state),
        partnerships=partnership_stats(state),
        trumps=trump_popularity(state),
        bid_levels=bid_level_distribution(state),
        trend=score_trend(state),
    )
