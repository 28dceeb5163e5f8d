# whist_keeper/editor.py
from __future__ import annotations

import copy
import logging

from .rules import score_round
from .schedule import bid_slot_for_player, cards_for_round, first_bidder_for_round
from .state import GameState
from .streaks import consecutive_states_before

logger = logging.getLogger(__name__)


def _rescore(state: GameState, round_index: int) -> None:
    """Recompute scores and bonus flags of one completed round in place."""
    n = state.num_players
    round_state = state.rounds[round_index]
    states = consecutive_states_before(
        state.rounds, round_index, n, state.game_mode
    )
    scores, bonus_applied = score_round(
        round_state.bids,
        round_state.tricks,
        first_bidder_for_round(round_index, n),
        cards_for_round(round_index, n, state.game_mode),
        state.game_mode,
        states,
    )
    round_state.scores = scores
    round_state.bonus_applied = bonus_applied


def recompute_from(state: GameState, round_index: int) -> GameState:
    """
    Rescore `round_index` and every completed round after it.

    Bids and tricks are left alone; only scores and bonus flags change. Rounds
    are processed in order so each one sees the already-updated history.
    """
    new_state = copy.deepcopy(state)
    for i in range(round_index, new_state.total_rounds):
        if new_state.rounds[i].completed:
            _rescore(new_state, i)
    return new_state


def edit_round(
    state: GameState,
    round_index: int,
    player_index: int,
    bid: int,
    tricks: int,
) -> GameState:
    """
    Correct one player's bid and tricks in a completed round.

    Returns `state` itself when the round is not completed or the player has
    no bid slot in it. Otherwise returns a new state with that round and all
    later completed rounds rescored.
    """
    if not 0 <= round_index < state.total_rounds:
        logger.debug("Ignoring edit of unknown round %d", round_index)
        return state
    target = state.rounds[round_index]
    if not target.completed:
        logger.debug("Ignoring edit of incomplete round %d", round_index)
        return state

    n = state.num_players
    slot = bid_slot_for_player(
        target.bids, player_index, first_bidder_for_round(round_index, n), n
    )
    if slot is None or not 0 <= player_index < len(target.tricks):
        logger.debug(
            "Ignoring edit of round %d: no bid slot for player %d",
            round_index,
            player_index,
        )
        return state

    edited = copy.deepcopy(state)
    edited_round = edited.rounds[round_index]
    edited_round.bids[slot] = bid
    edited_round.tricks[player_index] = tricks

    logger.info(
        "Edited round %d for %s: bid %d, tricks %d",
        round_index + 1,
        state.players[player_index],
        bid,
        tricks,
    )
    return recompute_from(edited, round_index)
