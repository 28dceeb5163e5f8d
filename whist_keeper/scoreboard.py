# whist_keeper/scoreboard.py
from __future__ import annotations

from typing import List, Tuple

from .schedule import cards_for_round
from .state import GameState, RoundState


def cumulative_scores(state: GameState) -> List[List[int]]:
    """
    Running totals after each round, indexed [round][player].

    Rounds without scores contribute nothing, so an unplayed round repeats
    the previous totals.
    """
    running = [0] * state.num_players
    table: List[List[int]] = []
    for round_state in state.rounds:
        for pid, points in enumerate(round_state.scores):
            running[pid] += points
        table.append(list(running))
    return table


def total_scores(state: GameState) -> List[int]:
    table = cumulative_scores(state)
    return table[-1] if table else [0] * state.num_players


def standings(state: GameState) -> List[Tuple[str, int]]:
    """(name, total) pairs, best first; ties keep seating order."""
    totals = total_scores(state)
    ranked = sorted(range(state.num_players), key=lambda pid: -totals[pid])
    return [(state.players[pid], totals[pid]) for pid in ranked]


def bid_balance(round_state: RoundState, cards_dealt: int) -> int:
    """Positive when the table overbid, negative when it underbid."""
    return sum(round_state.bids) - cards_dealt


def round_has_warning(state: GameState, round_index: int) -> bool:
    """
    Scoreboard highlight for a round.

    Flags a round whose bids add up to the cards dealt or whose tricks do
    not. Rounds that are not completed are never flagged.
    """
    round_state = state.rounds[round_index]
    if not round_state.completed:
        return False
    cards = cards_for_round(round_index, state.num_players, state.game_mode)
    total_bids = sum(round_state.bids)
    total_tricks = sum(round_state.tricks)
    return total_bids == cards or total_tricks != cards
