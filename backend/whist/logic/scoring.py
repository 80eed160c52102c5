"""
Scoring calculation for whist declarations.

Turns a declared bid and its outcome into a signed point value. Every
function here is pure and total: values outside the scoring table score 0
instead of raising, since the live points preview calls in on every edit of
a half-filled round form.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from whist.logic.enums import SpecialBid, TrumpType
from whist.logic.types import PointsPreview, RoundOutcome

logger = structlog.get_logger()

MIN_BID_LEVEL = 7
MAX_BID_LEVEL = 13
MIN_VIP_COUNT = 1
MAX_VIP_COUNT = 3
SOLO_MULTIPLIER = 2

# base points at bid level 7; each further level doubles them
_LEVEL_7_POINTS: dict[TrumpType, int] = {
    TrumpType.ALM: 1,
    TrumpType.VIP: 2,
    TrumpType.GODE: 2,
    TrumpType.HALVE: 2,
    TrumpType.SANS: 3,
}


@dataclass(frozen=True)
class BasePoints:
    made: int
    failed: int


BASE_POINTS: dict[tuple[int, TrumpType], BasePoints] = {
    (level, trump): BasePoints(made=base << (level - MIN_BID_LEVEL), failed=-(base << (level - MIN_BID_LEVEL)))
    for level in range(MIN_BID_LEVEL, MAX_BID_LEVEL + 1)
    for trump, base in _LEVEL_7_POINTS.items()
}

# flat bonus, added after multipliers and only when the bid is made
SPECIAL_BID_BONUS: dict[SpecialBid, int] = {
    SpecialBid.SOLO_NOLO: 6,
    SpecialBid.PURE_NOLO: 12,
    SpecialBid.OPEN_NOLO: 24,
    SpecialBid.SOL: 3,
    SpecialBid.REN_SOL: 6,
    SpecialBid.BORDLAEGGER: 12,
    SpecialBid.SUPER_BORDLAEGGER: 24,
}


def _as_trump(value: TrumpType | str) -> TrumpType | None:
    try:
        return TrumpType(value)
    except ValueError:
        return None


def _as_special_bid(value: SpecialBid | str | None) -> SpecialBid | None:
    if not value:
        return None
    try:
        return SpecialBid(value)
    except ValueError:
        return None


def compute_points(
    bid_level: int,
    trump_type: TrumpType | str,
    success: bool,  # noqa: FBT001
    special_bid: SpecialBid | str | None = None,
    is_solo: bool = False,  # noqa: FBT001, FBT002
    vip_count: int | None = None,
) -> int:
    """
    Calculate the signed points for a declaration.

    Multipliers compose before the special bid bonus is added:
    base (made or failed) x vip_count (vip only, 1-3) x solo multiplier,
    then + bonus when the bid was made. Returns 0 when (bid_level, trump_type)
    has no entry in the table. Unknown special bids add no bonus.
    """
    trump = _as_trump(trump_type)
    cell = BASE_POINTS.get((bid_level, trump)) if trump is not None and type(bid_level) is int else None
    if cell is None:
        logger.warning("no points defined for declaration", bid_level=bid_level, trump_type=trump_type)
        return 0

    points = cell.made if success else cell.failed

    if (
        trump is TrumpType.VIP
        and type(vip_count) is int
        and MIN_VIP_COUNT <= vip_count <= MAX_VIP_COUNT
    ):
        points *= vip_count

    if is_solo:
        points *= SOLO_MULTIPLIER

    bonus_bid = _as_special_bid(special_bid)
    if bonus_bid is not None and success:
        points += SPECIAL_BID_BONUS[bonus_bid]

    return points


def compute_round_outcome(
    bid_level: int,
    trump_type: TrumpType | str,
    tricks_won: int,
    partner: str | None,
    special_bid: SpecialBid | str | None = None,
    vip_count: int | None = None,
) -> RoundOutcome:
    """Derive success from tricks won and score the round; no partner means solo."""
    success = tricks_won >= bid_level
    points = compute_points(
        bid_level,
        trump_type,
        success,
        special_bid,
        is_solo=partner is None,
        vip_count=vip_count,
    )
    return RoundOutcome(success=success, points=points)


def preview_points(
    bid_level: int,
    trump_type: TrumpType | str,
    special_bid: SpecialBid | str | None = None,
    is_solo: bool = False,  # noqa: FBT001, FBT002
    vip_count: int | None = None,
) -> PointsPreview:
    return PointsPreview(
        if_made=compute_points(bid_level, trump_type, True, special_bid, is_solo, vip_count),  # noqa: FBT003
        if_failed=compute_points(bid_level, trump_type, False, special_bid, is_solo, vip_count),  # noqa: FBT003
    )
