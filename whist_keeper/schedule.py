# whist_keeper/schedule.py
from __future__ import annotations

from typing import List, Optional

from .state import GameMode

MIN_PLAYERS = 4
MAX_PLAYERS = 6

# Cards dealt on the plateau rounds and the length of each ramp.
FULL_HAND = 8
RAMP_LENGTH = 6


def _check_players(num_players: int) -> None:
    if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
        raise ValueError(
            f"Whist supports {MIN_PLAYERS} to {MAX_PLAYERS} players; "
            f"got {num_players}"
        )


def total_rounds(num_players: int, mode: Optional[GameMode] = None) -> int:
    """
    Number of rounds in a game.

    Both modes play the same schedule; `mode` only changes whether 1-card
    rounds count towards streaks.
    """
    _check_players(num_players)
    return 12 + 3 * num_players


def cards_for_round(
    round_index: int,
    num_players: int,
    mode: Optional[GameMode] = None,
) -> int:
    """
    Cards dealt to each player in `round_index` (0-based).

    The schedule is five contiguous bands:
    - `num_players` rounds of 1 card
    - a ramp 2, 3, 4, 5, 6, 7
    - `num_players` rounds of 8 cards
    - a ramp 7, 6, 5, 4, 3, 2
    - `num_players` rounds of 1 card
    """
    rounds = total_rounds(num_players, mode)
    if not 0 <= round_index < rounds:
        raise ValueError(
            f"round_index {round_index} outside 0..{rounds - 1}"
        )

    ramp_up_start = num_players
    plateau_start = ramp_up_start + RAMP_LENGTH
    ramp_down_start = plateau_start + num_players
    tail_start = ramp_down_start + RAMP_LENGTH

    if round_index < ramp_up_start:
        return 1
    if round_index < plateau_start:
        return round_index - num_players + 2
    if round_index < ramp_down_start:
        return FULL_HAND
    if round_index < tail_start:
        return FULL_HAND - 1 - (round_index - ramp_down_start)
    return 1


def dealer_for_round(round_index: int, num_players: int) -> int:
    return round_index % num_players


def first_bidder_for_round(round_index: int, num_players: int) -> int:
    """Seat to the dealer's right; bids first and leads the first trick."""
    return (dealer_for_round(round_index, num_players) + 1) % num_players


def bidding_order(round_index: int, num_players: int) -> List[int]:
    """Player indices in bid order, which is also the trick-entry order."""
    first = first_bidder_for_round(round_index, num_players)
    return [(first + offset) % num_players for offset in range(num_players)]


def seat_for_bid_slot(slot: int, first_bidder: int, num_players: int) -> int:
    """Player index of the bid at position `slot` in bid order."""
    return (first_bidder + slot) % num_players


def bid_slot_for_player(
    bids: List[int],
    player_index: int,
    first_bidder: int,
    num_players: int,
) -> Optional[int]:
    """
    Position in `bids` holding `player_index`'s bid, or None when the bid list
    has no slot for that player (short list or index outside the table).
    """
    for slot in range(len(bids)):
        if seat_for_bid_slot(slot, first_bidder, num_players) == player_index:
            return slot
    return None
