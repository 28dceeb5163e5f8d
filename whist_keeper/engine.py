# whist_keeper/engine.py
from __future__ import annotations

import copy
import logging
from typing import List, Optional, Sequence, Union

from .errors import (
    InvalidActionError,
    InvalidBidError,
    InvalidSetupError,
    InvalidTrickError,
)
from .rules import forbidden_last_bid, is_valid_last_bid, score_round
from .schedule import (
    MAX_PLAYERS,
    MIN_PLAYERS,
    bidding_order,
    cards_for_round,
    first_bidder_for_round,
    total_rounds,
)
from .state import GameMode, GameState, Phase, RoundState
from .streaks import consecutive_states_before

logger = logging.getLogger(__name__)

# Phase changes a caller may request directly; the rest happen as a side
# effect of bids and tricks.
_MANUAL_TRANSITIONS = {
    (Phase.DEALER, Phase.BIDDING),
    (Phase.PLAYING, Phase.TRICKS),
}


def _clone(state: GameState) -> GameState:
    return copy.deepcopy(state)


def _require_phase(state: GameState, *phases: Phase) -> None:
    if state.phase not in phases:
        expected = ", ".join(p.value for p in phases)
        raise InvalidActionError(
            f"Action not allowed in phase '{state.phase.value}' "
            f"(expected {expected})"
        )


# -------------------------------------------------------------------------
# Queries
# -------------------------------------------------------------------------


def cards_dealt(state: GameState) -> int:
    return cards_for_round(state.current_round, state.num_players, state.game_mode)


def current_bidder(state: GameState) -> Optional[int]:
    """Player index expected to bid next, or None outside bidding."""
    if state.phase != Phase.BIDDING:
        return None
    first = first_bidder_for_round(state.current_round, state.num_players)
    return (first + len(state.bids)) % state.num_players


def _trick_order(state: GameState) -> List[int]:
    order = state.current_round_state.trick_order
    if order is None:
        return bidding_order(state.current_round, state.num_players)
    return order


def _missing_players(state: GameState) -> List[int]:
    return [pid for pid in _trick_order(state) if pid not in state.tricks]


def next_trick_player(state: GameState) -> Optional[int]:
    """First player in trick order without an entry, or None when all are in."""
    missing = _missing_players(state)
    return missing[0] if missing else None


# -------------------------------------------------------------------------
# Transitions
# -------------------------------------------------------------------------


def start_game(
    player_names: Sequence[str],
    mode: Union[GameMode, str] = GameMode.CLASSIC,
) -> GameState:
    """Create a fresh game at round 0 in the dealer phase."""
    names = [name.strip() for name in player_names]
    if not MIN_PLAYERS <= len(names) <= MAX_PLAYERS:
        raise InvalidSetupError(
            f"Whist supports {MIN_PLAYERS} to {MAX_PLAYERS} players; "
            f"got {len(names)}"
        )
    if any(not name for name in names):
        raise InvalidSetupError("Player names must not be blank")
    if len(set(names)) != len(names):
        raise InvalidSetupError("Player names must be distinct")
    try:
        game_mode = GameMode(mode)
    except ValueError as exc:
        raise InvalidSetupError(f"Unknown game mode {mode!r}") from exc

    rounds = total_rounds(len(names), game_mode)
    logger.info(
        "Starting %s game for %s (%d rounds)",
        game_mode.value,
        ", ".join(names),
        rounds,
    )
    return GameState(
        players=names,
        game_mode=game_mode,
        rounds=[RoundState() for _ in range(rounds)],
    )


def set_phase(state: GameState, phase: Union[Phase, str]) -> GameState:
    """Apply a user-driven phase change (begin bidding, begin trick entry)."""
    target = Phase(phase)
    if target == state.phase:
        return _clone(state)
    if (state.phase, target) not in _MANUAL_TRANSITIONS:
        raise InvalidActionError(
            f"Cannot move from '{state.phase.value}' to '{target.value}'"
        )
    new_state = _clone(state)
    new_state.phase = target
    logger.debug(
        "Round %d: phase %s -> %s",
        state.current_round,
        state.phase.value,
        target.value,
    )
    return new_state


def begin_bidding(state: GameState) -> GameState:
    return set_phase(state, Phase.BIDDING)


def begin_trick_collection(state: GameState) -> GameState:
    return set_phase(state, Phase.TRICKS)


def submit_bid(state: GameState, bid: int) -> GameState:
    """
    Record the next bid in bid order.

    The last bidder may not bring the total to the number of cards dealt.
    Once everyone has bid the play order is frozen on the round and the game
    moves to the playing phase.
    """
    _require_phase(state, Phase.BIDDING)
    cards = cards_dealt(state)
    n = state.num_players

    if not 0 <= bid <= cards:
        raise InvalidBidError(
            f"Bid must be between 0 and {cards}; got {bid}",
            bid=bid,
            cards_dealt=cards,
        )

    is_last_bidder = len(state.bids) == n - 1
    total = sum(state.bids)
    if is_last_bidder and not is_valid_last_bid(total, bid, cards):
        raise InvalidBidError(
            f"Invalid bid! Your bid ({bid}) + total bids ({total}) "
            f"cannot equal {cards}",
            bid=bid,
            cards_dealt=cards,
            forbidden=forbidden_last_bid(total, cards),
        )

    new_state = _clone(state)
    bidder = current_bidder(state)
    new_state.bids.append(bid)
    logger.debug(
        "Round %d: %s bids %d",
        state.current_round,
        state.players[bidder],
        bid,
    )

    if len(new_state.bids) == n:
        round_state = new_state.current_round_state
        round_state.bids = list(new_state.bids)
        round_state.trick_order = bidding_order(state.current_round, n)
        new_state.bids = []
        new_state.tricks = {}
        new_state.current_trick_player_index = 0
        new_state.phase = Phase.PLAYING
        logger.info(
            "Round %d: bidding complete (%d bid on %d cards)",
            state.current_round,
            sum(round_state.bids),
            cards,
        )

    return new_state


def select_player(state: GameState, player_index: int) -> GameState:
    """Move the trick-entry cursor to a specific player."""
    _require_phase(state, Phase.TRICKS)
    if not 0 <= player_index < state.num_players:
        raise InvalidTrickError(f"Unknown player index {player_index}")
    new_state = _clone(state)
    new_state.selected_player_index = player_index
    return new_state


def _auto_fill(tricks: dict, missing: List[int], cards: int) -> None:
    entered = sum(tricks.values())
    if len(missing) == 1:
        tricks[missing[0]] = max(0, cards - entered)
    elif missing and entered == cards:
        for pid in missing:
            tricks[pid] = 0


def submit_trick(
    state: GameState,
    tricks: int,
    player_index: Optional[int] = None,
) -> GameState:
    """
    Record how many tricks a player took.

    Without `player_index` the entry goes to the next player in trick order
    that has none. After each entry the remaining players are filled in when
    they are determined: the last one gets what is left, and once the cards
    are used up everyone else gets 0. When all players have a count the
    round is scored and the game advances.
    """
    _require_phase(state, Phase.TRICKS)
    cards = cards_dealt(state)

    target = player_index if player_index is not None else next_trick_player(state)
    if target is None or not 0 <= target < state.num_players:
        raise InvalidTrickError(f"Unknown player index {target}")
    if not 0 <= tricks <= cards:
        raise InvalidTrickError(
            f"Tricks must be between 0 and {cards}; got {tricks}"
        )

    new_state = _clone(state)
    new_state.tricks[target] = tricks
    logger.debug(
        "Round %d: %s took %d",
        state.current_round,
        state.players[target],
        tricks,
    )

    missing = _missing_players(new_state)
    _auto_fill(new_state.tricks, missing, cards)
    if missing and len(_missing_players(new_state)) < len(missing):
        logger.debug(
            "Round %d: auto-filled %s",
            state.current_round,
            ", ".join(state.players[pid] for pid in missing),
        )

    if len(new_state.tricks) < new_state.num_players:
        order = _trick_order(new_state)
        nxt = next_trick_player(new_state)
        new_state.selected_player_index = nxt
        new_state.current_trick_player_index = (
            order.index(nxt) if nxt is not None else 0
        )
        return new_state

    return _complete_round(new_state)


def _complete_round(state: GameState) -> GameState:
    """Score the current round from the in-progress tricks and advance."""
    round_index = state.current_round
    n = state.num_players
    cards = cards_dealt(state)
    round_state = state.current_round_state

    states = consecutive_states_before(
        state.rounds, round_index, n, state.game_mode
    )
    tricks = [state.tricks[pid] for pid in range(n)]
    scores, bonus_applied = score_round(
        round_state.bids,
        tricks,
        first_bidder_for_round(round_index, n),
        cards,
        state.game_mode,
        states,
    )

    round_state.tricks = tricks
    round_state.scores = scores
    round_state.bonus_applied = bonus_applied
    round_state.completed = True

    state.bids = []
    state.tricks = {}
    state.current_trick_player_index = 0
    state.selected_player_index = None

    logger.info(
        "Finished round %d/%d (%d cards): %s",
        round_index + 1,
        state.total_rounds,
        cards,
        ", ".join(
            f"{name} {points:+d}" for name, points in zip(state.players, scores)
        ),
    )

    if round_index + 1 >= state.total_rounds:
        state.phase = Phase.COMPLETE
        logger.info("Game complete after %d rounds", state.total_rounds)
    else:
        state.current_round = round_index + 1
        state.phase = Phase.DEALER
    return state


def replay_round(state: GameState) -> GameState:
    """Discard everything recorded for the current round and redeal it."""
    _require_phase(
        state, Phase.DEALER, Phase.BIDDING, Phase.PLAYING, Phase.TRICKS
    )
    new_state = _clone(state)
    new_state.rounds[state.current_round] = RoundState()
    new_state.bids = []
    new_state.tricks = {}
    new_state.current_trick_player_index = 0
    new_state.selected_player_index = None
    new_state.phase = Phase.DEALER
    logger.info("Replaying round %d", state.current_round + 1)
    return new_state
