import pytest

from helpers import everyone, play_round, winner_takes_all

from whist_keeper import engine
from whist_keeper.errors import (
    InvalidActionError,
    InvalidBidError,
    InvalidSetupError,
    InvalidTrickError,
)
from whist_keeper.schedule import bidding_order, cards_for_round
from whist_keeper.state import ConsecutiveState, GameMode, Phase
from whist_keeper.streaks import consecutive_state_before

PLAYERS = ["Ana", "Bogdan", "Cristi", "Dana"]


def _new_game(mode=GameMode.CLASSIC):
    return engine.start_game(PLAYERS, mode)


def _advance_to(state, round_index):
    """Play rounds where everyone calls 0 and player 0 takes all tricks."""
    while state.phase != Phase.COMPLETE and state.current_round < round_index:
        cards = engine.cards_dealt(state)
        state = play_round(
            state,
            bids=everyone(4, 0),
            tricks=winner_takes_all(4, 0, cards),
        )
    return state


def _bidding_state(round_index=0):
    state = _advance_to(_new_game(), round_index)
    return engine.begin_bidding(state)


def _tricks_state(round_index, bids):
    state = _bidding_state(round_index)
    for pid in bidding_order(round_index, 4):
        state = engine.submit_bid(state, bids[pid])
    return engine.begin_trick_collection(state)


def test_start_game_initial_state():
    state = _new_game()
    assert state.players == PLAYERS
    assert state.phase == Phase.DEALER
    assert state.current_round == 0
    assert state.total_rounds == 24
    assert all(not r.completed for r in state.rounds)
    assert state.game_mode == GameMode.CLASSIC


def test_start_game_accepts_mode_string_and_trims_names():
    state = engine.start_game([" A", "B ", "C", "D", "E"], "alternative")
    assert state.players == ["A", "B", "C", "D", "E"]
    assert state.game_mode == GameMode.ALTERNATIVE
    assert state.total_rounds == 27


@pytest.mark.parametrize(
    "names",
    [
        ["A", "B", "C"],
        ["A", "B", "C", "D", "E", "F", "G"],
        ["A", "B", "", "D"],
        ["A", "B", "A", "D"],
    ],
)
def test_start_game_rejects_bad_players(names):
    with pytest.raises(InvalidSetupError):
        engine.start_game(names)


def test_start_game_rejects_unknown_mode():
    with pytest.raises(InvalidSetupError):
        engine.start_game(PLAYERS, "bridge")


def test_phase_changes_are_limited():
    state = _new_game()
    with pytest.raises(InvalidActionError):
        engine.set_phase(state, Phase.TRICKS)
    with pytest.raises(InvalidActionError):
        engine.set_phase(state, "complete")

    bidding = engine.set_phase(state, "bidding")
    assert bidding.phase == Phase.BIDDING
    # Input state is untouched.
    assert state.phase == Phase.DEALER


def test_bid_outside_phase_rejected():
    with pytest.raises(InvalidActionError):
        engine.submit_bid(_new_game(), 0)


def test_bids_follow_first_bidder():
    state = _bidding_state(0)
    assert engine.current_bidder(state) == 1
    state = engine.submit_bid(state, 0)
    assert engine.current_bidder(state) == 2
    assert state.bids == [0]


def test_last_bidder_cannot_match_cards_dealt():
    state = _bidding_state(0)
    for _ in range(3):
        state = engine.submit_bid(state, 0)

    with pytest.raises(InvalidBidError) as excinfo:
        engine.submit_bid(state, 1)
    assert excinfo.value.forbidden == 1
    assert excinfo.value.cards_dealt == 1
    assert state.bids == [0, 0, 0]

    state = engine.submit_bid(state, 0)
    assert state.phase == Phase.PLAYING


@pytest.mark.parametrize("last_bid", range(0, 6))
def test_last_bid_legality_on_five_cards(last_bid):
    state = _bidding_state(7)
    assert engine.cards_dealt(state) == 5
    for bid in (1, 2, 0):
        state = engine.submit_bid(state, bid)

    if 3 + last_bid == 5:
        with pytest.raises(InvalidBidError):
            engine.submit_bid(state, last_bid)
    else:
        assert engine.submit_bid(state, last_bid).phase == Phase.PLAYING


def test_bid_out_of_range_rejected():
    state = _bidding_state(0)
    with pytest.raises(InvalidBidError):
        engine.submit_bid(state, 2)
    with pytest.raises(InvalidBidError):
        engine.submit_bid(state, -1)


def test_bidding_complete_freezes_trick_order():
    state = _bidding_state(2)
    for bid in (0, 1, 0, 1):
        state = engine.submit_bid(state, bid)

    round_state = state.rounds[2]
    assert state.phase == Phase.PLAYING
    assert state.bids == []
    assert round_state.bids == [0, 1, 0, 1]
    assert round_state.trick_order == [3, 0, 1, 2]
    assert not round_state.completed


def test_tricks_default_to_trick_order():
    state = _tricks_state(4, {0: 1, 1: 0, 2: 0, 3: 0})
    assert engine.next_trick_player(state) == 1
    state = engine.submit_trick(state, 0)
    assert state.tricks == {1: 0}
    assert state.selected_player_index == 2
    assert state.current_trick_player_index == 1


def test_tricks_out_of_order_entry():
    state = _tricks_state(7, {0: 1, 1: 1, 2: 1, 3: 1})
    state = engine.select_player(state, 3)
    assert state.selected_player_index == 3
    state = engine.submit_trick(state, 2, 3)
    assert state.tricks == {3: 2}
    # Cursor returns to the first player in order without an entry.
    assert state.selected_player_index == 0


def test_auto_fill_zero_when_cards_used_up():
    # Round 7 deals 5 cards; first bidder is player 0.
    state = _tricks_state(7, {0: 1, 1: 1, 2: 1, 3: 1})
    state = engine.submit_trick(state, 5, 0)
    assert state.phase == Phase.DEALER
    assert state.rounds[7].tricks == [5, 0, 0, 0]


def test_auto_fill_last_player_gets_remainder():
    state = _tricks_state(7, {0: 1, 1: 1, 2: 1, 3: 1})
    state = engine.submit_trick(state, 1, 0)
    state = engine.submit_trick(state, 1, 1)
    assert state.phase == Phase.TRICKS
    state = engine.submit_trick(state, 1, 2)
    assert state.rounds[7].completed
    assert state.rounds[7].tricks == [1, 1, 1, 2]


def test_auto_fill_last_player_zero_when_three_took_all():
    state = _tricks_state(7, {0: 1, 1: 1, 2: 1, 3: 1})
    state = engine.submit_trick(state, 2, 0)
    state = engine.submit_trick(state, 2, 1)
    state = engine.submit_trick(state, 1, 2)
    assert state.rounds[7].tricks == [2, 2, 1, 0]


def test_explicit_entry_can_overwrite():
    state = _tricks_state(7, {0: 1, 1: 1, 2: 1, 3: 1})
    state = engine.submit_trick(state, 1, 0)
    state = engine.submit_trick(state, 2, 0)
    assert state.tricks == {0: 2}


def test_trick_validation():
    state = _tricks_state(4, {0: 1, 1: 0, 2: 0, 3: 0})
    with pytest.raises(InvalidTrickError):
        engine.submit_trick(state, 3, 0)
    with pytest.raises(InvalidTrickError):
        engine.submit_trick(state, 1, 4)
    with pytest.raises(InvalidTrickError):
        engine.select_player(state, -1)


def test_first_round_end_to_end():
    state = _bidding_state(0)
    assert engine.cards_dealt(state) == 1
    for _ in range(3):
        state = engine.submit_bid(state, 0)
    with pytest.raises(InvalidBidError):
        engine.submit_bid(state, 1)
    state = engine.submit_bid(state, 0)

    state = engine.begin_trick_collection(state)
    # Player 2 takes the only trick; everyone else is filled in with 0.
    state = engine.submit_trick(state, 1, 2)

    round_state = state.rounds[0]
    assert round_state.completed
    assert round_state.tricks == [0, 0, 1, 0]
    assert round_state.scores == [5, 5, -1, 5]
    assert round_state.bonus_applied == [False] * 4
    assert state.current_round == 1
    assert state.phase == Phase.DEALER
    assert state.tricks == {}
    assert state.selected_player_index is None


def test_bonus_on_fifth_correct_call():
    state = _advance_to(_new_game(), 8)
    assert cards_for_round(8, 4) == 6
    # Player 1 has called 4 multi-card rounds correctly in a row.
    assert consecutive_state_before(
        state.rounds, 8, 1, 4, GameMode.CLASSIC
    ) == ConsecutiveState(correct=4)

    state = play_round(
        state,
        bids={0: 3, 1: 3, 2: 1, 3: 0},
        tricks={0: 2, 1: 3, 2: 1, 3: 0},
    )
    round_state = state.rounds[8]
    assert round_state.scores[1] == 13
    assert round_state.bonus_applied[1]
    # Player 0 had four wrong calls in a row: penalty on the fifth.
    assert round_state.scores[0] == -6
    assert round_state.bonus_applied[0]

    assert consecutive_state_before(
        state.rounds, 9, 1, 4, GameMode.CLASSIC
    ) == ConsecutiveState()


def test_no_bonus_on_one_card_rounds_in_classic():
    state = _advance_to(_new_game(), 20)
    state = _advance_to(state, 24)
    assert state.phase == Phase.COMPLETE
    last = state.rounds[23]
    assert cards_for_round(23, 4) == 1
    assert last.bonus_applied == [False] * 4


def test_alternative_mode_counts_one_card_rounds():
    state = _advance_to(_new_game(GameMode.ALTERNATIVE), 5)
    round_4 = state.rounds[4]
    # Fifth round in a row: player 0 wrong again, the others right again.
    assert round_4.bonus_applied == [True] * 4
    assert round_4.scores == [-7, 10, 10, 10]


def test_game_completes_after_last_round():
    state = _advance_to(_new_game(), 24)
    assert state.phase == Phase.COMPLETE
    assert state.current_round == 23
    assert all(r.completed for r in state.rounds)
    with pytest.raises(InvalidActionError):
        engine.begin_bidding(state)


def test_replay_round_resets_current_round():
    state = _tricks_state(4, {0: 1, 1: 0, 2: 0, 3: 0})
    state = engine.submit_trick(state, 1, 1)
    replayed = engine.replay_round(state)

    assert replayed.phase == Phase.DEALER
    assert replayed.current_round == 4
    assert replayed.tricks == {}
    assert replayed.bids == []
    assert replayed.rounds[4].bids == []
    assert replayed.rounds[4].trick_order is None
    assert not replayed.rounds[4].completed
    # Earlier rounds are kept.
    assert replayed.rounds[3].completed


def test_replay_round_not_allowed_after_game_end():
    state = _advance_to(_new_game(), 24)
    with pytest.raises(InvalidActionError):
        engine.replay_round(state)


def test_transitions_do_not_mutate_input():
    state = _bidding_state(0)
    before = engine.submit_bid(state, 0)
    after = engine.submit_bid(before, 0)
    assert before.bids == [0]
    assert after.bids == [0, 0]
