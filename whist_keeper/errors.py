# whist_keeper/errors.py
from __future__ import annotations

from typing import Optional


class WhistError(Exception):
    """Base class for errors raised by the score keeper."""


class InvalidSetupError(WhistError, ValueError):
    """Players or game mode rejected when starting a game."""


class InvalidActionError(WhistError, RuntimeError):
    """An action was issued in a phase that does not accept it."""


class InvalidBidError(WhistError, ValueError):
    """
    A bid the table may not accept.

    `forbidden` is set when the bid was rejected because the last bidder would
    make the total equal the cards dealt.
    """

    def __init__(
        self,
        message: str,
        *,
        bid: int,
        cards_dealt: int,
        forbidden: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.bid = bid
        self.cards_dealt = cards_dealt
        self.forbidden = forbidden


class InvalidTrickError(WhistError, ValueError):
    """A trick count or player index that cannot be recorded."""
