# whist_keeper/game_log.py
from __future__ import annotations

import csv
from typing import Any, Dict, List, Optional

from .schedule import (
    bid_slot_for_player,
    cards_for_round,
    dealer_for_round,
    first_bidder_for_round,
)
from .state import GameState

FIELDNAMES = [
    "game_id",
    "round_index",
    "cards_dealt",
    "dealer_index",
    "first_bidder_index",
    "player_index",
    "player_name",
    "bid",
    "tricks_won",
    "round_score",
    "bonus_applied",
    "total_score",
    "game_mode",
]


def build_round_score_rows(
    game_state: GameState,
    game_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Build a list of rows summarizing per-round scores for CSV export.

    Each row corresponds to (round, player) and has keys in FIELDNAMES. Rounds
    that are not completed are skipped so games in progress can still be
    exported.
    """
    num_players = game_state.num_players
    running_scores = [0] * num_players
    rows: List[Dict[str, Any]] = []

    for round_index, round_state in enumerate(game_state.rounds):
        if not round_state.completed:
            continue
        first_bidder = first_bidder_for_round(round_index, num_players)
        cards = cards_for_round(round_index, num_players, game_state.game_mode)

        for pid, name in enumerate(game_state.players):
            slot = bid_slot_for_player(
                round_state.bids, pid, first_bidder, num_players
            )
            running_scores[pid] += round_state.scores[pid]
            rows.append(
                {
                    "game_id": game_id,
                    "round_index": round_index,
                    "cards_dealt": cards,
                    "dealer_index": dealer_for_round(round_index, num_players),
                    "first_bidder_index": first_bidder,
                    "player_index": pid,
                    "player_name": name,
                    "bid": round_state.bids[slot] if slot is not None else None,
                    "tricks_won": round_state.tricks[pid],
                    "round_score": round_state.scores[pid],
                    "bonus_applied": round_state.bonus_applied[pid],
                    "total_score": running_scores[pid],
                    "game_mode": game_state.game_mode.value,
                }
            )

    return rows


def write_round_scores_csv(
    game_state: GameState,
    path,
    game_id: Optional[str] = None,
) -> int:
    """
    Write per-round scores to a CSV file and return the number of rows.

    `path` can be a string or any path-like object accepted by `open`.
    """
    rows = build_round_score_rows(game_state, game_id=game_id)

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in rows:
            writer.writerow({field: row.get(field) for field in FIELDNAMES})
    return len(rows)
