# whist_keeper/rules.py
from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Tuple, Union

from .state import ConsecutiveState, GameMode

# Calls in a row needed before the next one triggers the bonus/penalty.
STREAK_THRESHOLD = 4
STREAK_BONUS = 5
CORRECT_CALL_POINTS = 5

TrickCounts = Union[Sequence[int], Mapping[int, int]]


def score(
    bid: int,
    tricks: int,
    prior: ConsecutiveState,
) -> Tuple[int, bool]:
    """
    Score one player's round.

    - Correct call: 5 + tricks.
    - Wrong call: -abs(bid - tricks).
    - 5th correct call in a row: +5 more. 5th wrong call in a row: -5 more.

    Returns (points, bonus_applied).
    """
    diff = abs(bid - tricks)
    if diff == 0:
        points = CORRECT_CALL_POINTS + tricks
    else:
        points = -diff

    if prior.correct >= STREAK_THRESHOLD and diff == 0:
        return points + STREAK_BONUS, True
    if prior.wrong >= STREAK_THRESHOLD and diff != 0:
        return points - STREAK_BONUS, True
    return points, False


def update_consecutive(
    bid: int,
    tricks: int,
    prior: ConsecutiveState,
    bonus_applied: bool = False,
) -> ConsecutiveState:
    """
    Streak after a round, given the streak before it.

    A round whose bonus/penalty fired starts the next round from zero.
    """
    if bonus_applied:
        return ConsecutiveState()
    if bid == tricks:
        return ConsecutiveState(correct=prior.correct + 1, wrong=0)
    return ConsecutiveState(correct=0, wrong=prior.wrong + 1)


def bonus_eligible(cards_dealt: int, mode: GameMode) -> bool:
    """Classic games leave 1-card rounds out of streak accounting."""
    return not (cards_dealt == 1 and mode == GameMode.CLASSIC)


def is_valid_last_bid(total_bids: int, bid: int, cards_dealt: int) -> bool:
    """The last bidder may not make the bids add up to the cards dealt."""
    return total_bids + bid != cards_dealt


def forbidden_last_bid(total_bids: int, cards_dealt: int) -> Optional[int]:
    """The one value the last bidder may not call, if any."""
    forbidden = cards_dealt - total_bids
    return forbidden if forbidden >= 0 else None


def legal_bids(
    bids_so_far: Sequence[int],
    cards_dealt: int,
    num_players: int,
) -> List[int]:
    """Values the next bidder may call."""
    candidates = list(range(cards_dealt + 1))
    if len(bids_so_far) != num_players - 1:
        return candidates
    total = sum(bids_so_far)
    return [b for b in candidates if is_valid_last_bid(total, b, cards_dealt)]


def score_round(
    bids: Sequence[int],
    tricks: TrickCounts,
    first_bidder: int,
    cards_dealt: int,
    mode: GameMode,
    states: Sequence[ConsecutiveState],
) -> Tuple[List[int], List[bool]]:
    """
    Score every player of a round.

    `bids` is in bid order starting at `first_bidder`; `tricks` and `states`
    are indexed by player. Returns (scores, bonus_applied), both indexed by
    player.
    """
    num_players = len(states)
    eligible = bonus_eligible(cards_dealt, mode)

    scores: List[int] = [0] * num_players
    bonus_applied: List[bool] = [False] * num_players
    for slot, bid in enumerate(bids):
        pid = (first_bidder + slot) % num_players
        prior = states[pid] if eligible else ConsecutiveState()
        points, bonus = score(bid, tricks[pid], prior)
        scores[pid] = points
        bonus_applied[pid] = bonus and eligible

    return scores, bonus_applied
