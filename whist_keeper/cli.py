# whist_keeper/cli.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from dataclasses import replace
from typing import List

from .config import load_settings
from .engine import cards_dealt
from .game_log import build_round_score_rows, write_round_scores_csv
from .scoreboard import standings
from .schedule import dealer_for_round
from .state import GameState, Phase
from .storage import JsonFileStore


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    settings = load_settings()
    parser = argparse.ArgumentParser(
        description=(
            "Show the standings of the saved Whist game and export its "
            "per-round scores."
        )
    )

    parser.add_argument(
        "--state",
        type=str,
        default=str(settings.state_path),
        help="Path to the saved game file (default: %(default)s).",
    )
    parser.add_argument(
        "--key",
        type=str,
        default=settings.storage_key,
        help="Storage key of the game inside the file (default: %(default)s).",
    )
    parser.add_argument(
        "--csv",
        type=str,
        default=None,
        help="Write per-round scores to this CSV file.",
    )
    parser.add_argument(
        "--chart",
        type=str,
        default=None,
        help="Write a running-score chart (PNG) to this path.",
    )
    parser.add_argument(
        "--misses-chart",
        type=str,
        default=None,
        help="Write a per-player bid-miss histogram (PNG) to this path.",
    )
    parser.add_argument(
        "--export-dir",
        type=str,
        default=str(settings.export_dir),
        help="Folder for relative --csv and chart paths (default: %(default)s).",
    )
    parser.add_argument(
        "--game-id",
        type=str,
        default=None,
        help="Label stored in the game_id column of exported rows.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level,
        help="Logging level (DEBUG, INFO, WARNING, ...). Default: %(default)s.",
    )

    return parser.parse_args(argv)


def format_status(state: GameState) -> str:
    lines = []
    if state.phase == Phase.COMPLETE:
        lines.append(f"Game complete after {state.total_rounds} rounds")
    else:
        dealer = state.players[dealer_for_round(state.current_round, state.num_players)]
        lines.append(
            f"Round {state.current_round + 1}/{state.total_rounds} "
            f"({state.phase.value}): {dealer} deals {cards_dealt(state)}"
        )
    lines.append(f"Mode: {state.game_mode.value}")
    for position, (name, total) in enumerate(standings(state), start=1):
        lines.append(f"{position}. {name}: {total}")
    return "\n".join(lines)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    settings = replace(load_settings(), export_dir=Path(args.export_dir))
    store = JsonFileStore(Path(args.state), key=args.key)
    state = store.load()
    if state is None:
        logging.error("No saved game found in %s", args.state)
        return 1

    print(format_status(state))

    if args.csv:
        csv_path = settings.export_path(args.csv)
        count = write_round_scores_csv(state, csv_path, game_id=args.game_id)
        logging.info("Wrote %d rows to %s", count, csv_path)

    if args.chart or args.misses_chart:
        # Plotting stack is only needed for charts.
        from .results.score_chart import (
            load_rows_frame,
            plot_bid_miss_histogram,
            plot_cumulative_scores,
        )

        df = load_rows_frame(build_round_score_rows(state, game_id=args.game_id))
        if df.empty:
            logging.warning("No completed rounds yet; skipping charts")
        else:
            if args.chart:
                chart_path = plot_cumulative_scores(
                    df, settings.export_path(args.chart)
                )
                logging.info("Wrote chart to %s", chart_path)
            if args.misses_chart:
                misses_path = plot_bid_miss_histogram(
                    df, settings.export_path(args.misses_chart)
                )
                logging.info("Wrote bid-miss chart to %s", misses_path)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
