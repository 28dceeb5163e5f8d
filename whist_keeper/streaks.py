# whist_keeper/streaks.py
from __future__ import annotations

from typing import List, Sequence

from .rules import bonus_eligible, update_consecutive
from .schedule import bid_slot_for_player, cards_for_round, first_bidder_for_round
from .state import ConsecutiveState, GameMode, RoundState


def consecutive_state_before(
    rounds: Sequence[RoundState],
    round_index: int,
    player_index: int,
    num_players: int,
    mode: GameMode,
) -> ConsecutiveState:
    """
    Replay completed rounds `[0, round_index)` to get the streak a player
    carries into `round_index`.

    - Incomplete rounds are skipped.
    - A round without a bid slot for the player is skipped.
    - A round that cannot award the bonus (1 card, classic mode) resets the
      streak whatever the outcome.
    - A round whose own bonus/penalty fired resets the streak.

    Always recomputed from the round history; nothing is cached.
    """
    state = ConsecutiveState()
    for i in range(min(round_index, len(rounds))):
        prior = rounds[i]
        if not prior.completed:
            continue

        first_bidder = first_bidder_for_round(i, num_players)
        slot = bid_slot_for_player(
            prior.bids, player_index, first_bidder, num_players
        )
        if slot is None:
            continue

        if not bonus_eligible(cards_for_round(i, num_players, mode), mode):
            state = ConsecutiveState()
            continue

        bonus = (
            prior.bonus_applied[player_index]
            if player_index < len(prior.bonus_applied)
            else False
        )
        state = update_consecutive(
            prior.bids[slot],
            prior.tricks[player_index],
            state,
            bonus,
        )
    return state


def consecutive_states_before(
    rounds: Sequence[RoundState],
    round_index: int,
    num_players: int,
    mode: GameMode,
) -> List[ConsecutiveState]:
    """Streak entering `round_index` for every player, indexed by player."""
    return [
        consecutive_state_before(rounds, round_index, pid, num_players, mode)
        for pid in range(num_players)
    ]
