# whist_keeper/results/score_chart.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from ..game_log import FIELDNAMES  # noqa: E402


def load_rows_frame(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    """DataFrame of exported score rows, ordered by round then seat."""
    df = pd.DataFrame(rows, columns=FIELDNAMES)
    if df.empty:
        return df
    # negative -> took fewer tricks than called; positive -> took more
    df["miss"] = df["tricks_won"] - df["bid"]
    return df.sort_values(["round_index", "player_index"]).reset_index(drop=True)


def plot_cumulative_scores(df: pd.DataFrame, path: str | Path) -> Path:
    """Line chart of each player's running total by round."""
    if df.empty:
        raise ValueError("No completed rounds to plot")
    path = Path(path)

    fig, ax = plt.subplots(figsize=(10, 6))
    for name in df["player_name"].unique():
        sub = df[df["player_name"] == name].sort_values("round_index")
        ax.plot(sub["round_index"] + 1, sub["total_score"], marker="o", label=name)

        bonus_rows = sub[sub["bonus_applied"]]
        if not bonus_rows.empty:
            ax.scatter(
                bonus_rows["round_index"] + 1,
                bonus_rows["total_score"],
                marker="*",
                s=140,
                zorder=3,
            )

    ax.axhline(0, linestyle="--", linewidth=0.8)
    ax.set_xlabel("Round")
    ax.set_ylabel("Total score")
    ax.set_title("Running score by round (stars mark 5-in-a-row bonus/penalty)")
    ax.grid(True)
    ax.legend()
    fig.tight_layout()

    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def plot_bid_miss_histogram(df: pd.DataFrame, path: str | Path) -> Path:
    """Per-player histograms of tricks_won - bid."""
    if df.empty:
        raise ValueError("No completed rounds to plot")
    path = Path(path)

    players = list(df["player_name"].unique())

    # common bin edges across players so histos are comparable
    miss_min = df["miss"].min()
    miss_max = df["miss"].max()
    bins = np.arange(np.floor(miss_min) - 0.5, np.ceil(miss_max) + 1.5, 1.0)

    fig, axes = plt.subplots(
        1, len(players), figsize=(4 * len(players), 4), sharey=True
    )
    axes = np.atleast_1d(axes)

    for ax, name in zip(axes, players):
        subset = df[df["player_name"] == name]["miss"]
        ax.hist(subset, bins=bins, rwidth=0.8)
        ax.axvline(0, linestyle="--")  # exact-bid line
        ax.set_title(name)
        ax.set_xlabel("miss (tricks_won - bid)")
        ax.grid(True, axis="y", linestyle=":", alpha=0.5)

    axes[0].set_ylabel("Rounds")
    fig.suptitle("Bid miss by player (negative = under, positive = over)")
    fig.tight_layout()

    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path
