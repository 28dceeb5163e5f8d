from typing import Dict

from whist_keeper import engine
from whist_keeper.schedule import bidding_order
from whist_keeper.state import GameState, Phase, RoundState


def play_round(
    state: GameState,
    bids: Dict[int, int],
    tricks: Dict[int, int],
) -> GameState:
    """Drive one round through the engine; `bids`/`tricks` keyed by player."""
    state = engine.begin_bidding(state)
    for pid in bidding_order(state.current_round, state.num_players):
        state = engine.submit_bid(state, bids[pid])
    state = engine.begin_trick_collection(state)
    for pid in bidding_order(state.current_round, state.num_players):
        if state.phase != Phase.TRICKS:
            break
        if pid in state.tricks:
            continue
        state = engine.submit_trick(state, tricks[pid], pid)
    return state


def completed_round(
    round_index: int,
    num_players: int,
    bids: Dict[int, int],
    tricks: Dict[int, int],
) -> RoundState:
    """A completed RoundState with placeholder scores, for reconstructor tests."""
    order = bidding_order(round_index, num_players)
    return RoundState(
        completed=True,
        bids=[bids[pid] for pid in order],
        tricks=[tricks[pid] for pid in range(num_players)],
        scores=[0] * num_players,
        bonus_applied=[False] * num_players,
        trick_order=order,
    )


def everyone(num_players: int, value: int) -> Dict[int, int]:
    return {pid: value for pid in range(num_players)}


def winner_takes_all(num_players: int, winner: int, cards: int) -> Dict[int, int]:
    result = everyone(num_players, 0)
    result[winner] = cards
    return result

