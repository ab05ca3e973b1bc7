"""Single-subject CGM simulation and the multi-subject cohort wrapper."""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from data_models import (
    MINUTES_PER_DAY,
    SIMULATION_EPOCH,
    EventRecord,
    InvalidArgument,
    KernelShape,
    events_to_records,
)
from simulation.humanization.daily_variability import draw_daily_context
from simulation.humanization.scheduler import (
    DEFAULT_SCHEDULER_CONFIG,
    SchedulerConfig,
    schedule_day,
)
from simulation.post_processing import post_process
from simulation.response_kernel import DEFAULT_KERNEL_SHAPE
from simulation.signal_model import downsample

logger = logging.getLogger(__name__)

GLUCOSE_COLUMNS = ["time_min", "glucose_mg_dL", "timestamp"]
EVENT_COLUMNS = ["time_min", "type", "value", "timestamp"]

RandomSource = Union[np.random.Generator, int, None]


def _require_positive_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidArgument(f"{name} must be positive, got {value}")
    return int(value)


def run_subject(
    days: int,
    baseline: float,
    rng: np.random.Generator,
    config: SchedulerConfig = DEFAULT_SCHEDULER_CONFIG,
    shape: KernelShape = DEFAULT_KERNEL_SHAPE,
) -> Tuple[np.ndarray, List[EventRecord]]:
    """
    Simulate one subject at minute resolution.

    1. Allocate the buffer at ``baseline`` (``days * 1440`` minutes).
    2. For each day, draw the day's context and render its events.
    3. Post-process the whole buffer once.

    Returns the full-resolution buffer and the event log in generation order.
    """

    days = _require_positive_int("days", days)
    glucose = np.full(days * MINUTES_PER_DAY, float(baseline), dtype=float)
    event_log: List[EventRecord] = []

    for day in range(days):
        context = draw_daily_context(
            day, rng, exercise_probability=config.exercise_probability
        )
        schedule_day(glucose, context, rng, event_log, config=config, shape=shape)

    post_process(glucose, baseline, rng)
    return glucose, event_log


def _glucose_table(glucose: np.ndarray) -> pd.DataFrame:
    time_min, values = downsample(glucose)
    df = pd.DataFrame({"time_min": time_min, "glucose_mg_dL": values})
    df["timestamp"] = pd.Timestamp(SIMULATION_EPOCH) + pd.to_timedelta(
        df["time_min"], unit="min"
    )
    return df[GLUCOSE_COLUMNS]


def _event_table(event_log: List[EventRecord]) -> pd.DataFrame:
    df = pd.DataFrame(events_to_records(event_log), columns=EVENT_COLUMNS)
    return df.astype(
        {
            "time_min": "int64",
            "type": "object",
            "value": "float64",
            "timestamp": "datetime64[ns]",
        }
    )


def simulate_cgm_t2d(
    days: int = 90,
    baseline: float = 135.0,
    noise_std: float = 10.0,
    rng: RandomSource = None,
    *,
    config: Optional[SchedulerConfig] = None,
    shape: Optional[KernelShape] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Simulate CGM data for one synthetic T2D subject.

    Args:
        days: Number of days to simulate.
        baseline: Baseline glucose in mg/dL.
        noise_std: Accepted for interface compatibility; the sensor noise
            model draws its own per-run sigma and does not read this value.
        rng: A ``numpy.random.Generator`` (used as-is), an integer seed, or
            None for a fresh OS-seeded generator.
        config: Event probabilities and counts; defaults to the standard
            schedule.
        shape: Response kernel shape; defaults to gamma=2.0, alpha=0.72.

    Returns:
        ``(glucose_table, event_log)``: 5-minute glucose samples with
        timestamps, and one row per generated event in generation order.
    """

    rng = np.random.default_rng(rng)
    logger.debug(
        "noise_std=%.2f is not consumed by the sensor noise model", noise_std
    )
    glucose, event_log = run_subject(
        days,
        baseline,
        rng,
        config=config or DEFAULT_SCHEDULER_CONFIG,
        shape=shape or DEFAULT_KERNEL_SHAPE,
    )
    return _glucose_table(glucose), _event_table(event_log)


def _simulate_subject_wrapper(
    args: tuple,
) -> Tuple[int, pd.DataFrame, pd.DataFrame]:
    """Module-level worker so subjects can be pickled into a process pool."""
    subject, seed, days, baseline, noise_std, config = args
    glucose_df, events_df = simulate_cgm_t2d(
        days=days,
        baseline=baseline,
        noise_std=noise_std,
        rng=np.random.default_rng(seed),
        config=config,
    )
    return subject, glucose_df, events_df


def generate_T2D_data(
    N: int = 30,
    days: int = 90,
    baseline: float = 135.0,
    noise_std: float = 10.0,
    rng: RandomSource = None,
    n_jobs: int = 1,
    config: Optional[SchedulerConfig] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Simulate ``N`` subjects and concatenate their tables.

    Each subject gets its own generator seeded from the parent stream before
    any simulation starts, so the output is the same whether subjects run
    sequentially or across ``n_jobs`` worker processes. Both tables gain a
    1-based ``subject`` column.
    """

    N = _require_positive_int("N", N)
    days = _require_positive_int("days", days)
    n_jobs = _require_positive_int("n_jobs", n_jobs)
    rng = np.random.default_rng(rng)

    seeds = [int(rng.integers(0, 2**32 - 1)) for _ in range(N)]
    args_list = [
        (subject, seed, days, baseline, noise_std, config)
        for subject, seed in enumerate(seeds, start=1)
    ]

    logger.info(f"Simulating {N} subjects for {days} days each (n_jobs={n_jobs})")
    if n_jobs > 1 and N > 1:
        with ProcessPoolExecutor(max_workers=min(n_jobs, N)) as executor:
            results = list(executor.map(_simulate_subject_wrapper, args_list))
    else:
        results = [_simulate_subject_wrapper(args) for args in args_list]

    glucose_frames = []
    event_frames = []
    for subject, glucose_df, events_df in results:
        glucose_df["subject"] = subject
        events_df["subject"] = subject
        glucose_frames.append(glucose_df)
        event_frames.append(events_df)
        logger.debug(
            "Subject %d: %d samples, %d events",
            subject,
            len(glucose_df),
            len(events_df),
        )

    all_data = pd.concat(glucose_frames, ignore_index=True)
    all_events = pd.concat(event_frames, ignore_index=True)
    logger.info(
        f"Cohort complete: {len(all_data):,} glucose rows, {len(all_events):,} events"
    )
    return all_data, all_events
