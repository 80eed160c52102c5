"""Typed domain exceptions for ledger and roster rule violations.

Transitions raise subclasses of LedgerError instead of raw ValueError so the
server can map every rule violation to a client error in one place. Unknown
ids are not errors: transitions treat them as no-ops.
"""


class LedgerError(Exception):
    """Base exception for rejected state transitions."""


class InvalidRoundError(LedgerError):
    """Round input is malformed (bid level, tricks, bidder or partner)."""


class GameNotActiveError(LedgerError):
    """The game night has ended and no longer accepts new rounds."""

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"game night {game_id} has ended")


class InvalidGameNightError(LedgerError):
    """Player selection for a new game night is invalid."""


class InvalidPlayerError(LedgerError):
    """Player data is invalid (e.g. blank name)."""


class PlayerInUseError(LedgerError):
    """Player cannot be deleted while seated in an active game night."""

    def __init__(self, player_id: str) -> None:
        self.player_id = player_id
        super().__init__(f"player {player_id} is in an active game night")
