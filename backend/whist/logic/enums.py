"""
String enum definitions for whist bidding concepts.
"""

from enum import Enum


class TrumpType(str, Enum):
    """Trump regime declared for a round."""

    ALM = "alm"  # ordinary trump suit
    VIP = "vip"  # buyer's choice, scored per card seen in the kitty
    GODE = "gode"
    HALVE = "halve"
    SANS = "sans"  # no trump


class SpecialBid(str, Enum):
    """Named high-stakes bid variants carrying a flat bonus on success."""

    SOLO_NOLO = "solo-nolo"
    PURE_NOLO = "pure-nolo"
    OPEN_NOLO = "open-nolo"
    SOL = "sol"
    REN_SOL = "ren-sol"
    BORDLAEGGER = "bordlaegger"
    SUPER_BORDLAEGGER = "super-bordlaegger"


TRUMP_LABELS: dict[TrumpType, str] = {
    TrumpType.ALM: "Alm.",
    TrumpType.VIP: "Vip",
    TrumpType.GODE: "Gode",
    TrumpType.HALVE: "Halve",
    TrumpType.SANS: "Sans",
}

SPECIAL_BID_LABELS: dict[SpecialBid, str] = {
    SpecialBid.SOLO_NOLO: "Solo-nolo",
    SpecialBid.PURE_NOLO: "Ren nolo",
    SpecialBid.OPEN_NOLO: "Åben nolo",
    SpecialBid.SOL: "Sol",
    SpecialBid.REN_SOL: "Ren sol",
    SpecialBid.BORDLAEGGER: "Bordlægger",
    SpecialBid.SUPER_BORDLAEGGER: "Super bordlægger",
}
