"""Entry point that generates a synthetic T2D cohort and logs a summary."""

from __future__ import annotations

import logging
from typing import Optional

import pandas as pd

from config import COHORT_CONFIG, CohortConfig
from simulation_engine import generate_T2D_data

logger = logging.getLogger(__name__)


def summarize_cohort(glucose: pd.DataFrame, events: pd.DataFrame) -> pd.DataFrame:
    """Per-subject sample count, mean glucose and event counts by type."""

    per_subject = glucose.groupby("subject")["glucose_mg_dL"].agg(
        samples="size", mean_glucose="mean"
    )
    event_counts = (
        events.groupby(["subject", "type"]).size().unstack(fill_value=0)
    )
    return per_subject.join(event_counts, how="left").fillna(0)


def run_cohort(
    config: Optional[CohortConfig] = None,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Generate the cohort described by ``config`` (environment by default)."""

    config = config or COHORT_CONFIG
    logger.info(
        "Generating %d subjects x %d days (baseline %.1f mg/dL, seed %s)",
        config.population_size,
        config.days,
        config.baseline_mgdl,
        config.random_seed,
    )
    glucose, events = generate_T2D_data(
        N=config.population_size,
        days=config.days,
        baseline=config.baseline_mgdl,
        noise_std=config.noise_std,
        rng=config.random_seed,
        n_jobs=config.n_jobs,
    )

    summary = summarize_cohort(glucose, events)
    for subject, row in summary.iterrows():
        logger.info(
            "Subject %d: %d samples, mean %.1f mg/dL, %d meals",
            subject,
            row["samples"],
            row["mean_glucose"],
            row.get("meal", 0),
        )
    return glucose, events


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    run_cohort()


if __name__ == "__main__":
    main()
