"""Smoothing and resampling of the minute-resolution glucose trace."""

from __future__ import annotations

import numpy as np

SAMPLE_INTERVAL_MINUTES = 5


def smooth_in_place(glucose: np.ndarray, passes: int = 2) -> np.ndarray:
    """Weighted 3-point moving average (0.25, 0.5, 0.25) over interior points.

    Runs in place: each point sees its already-smoothed predecessor and its
    not-yet-smoothed successor. End points are left untouched.
    """
    values = glucose.tolist()
    for _ in range(passes):
        for t in range(1, len(values) - 1):
            values[t] = 0.25 * values[t - 1] + 0.5 * values[t] + 0.25 * values[t + 1]
    glucose[:] = values
    return glucose


def downsample(
    glucose: np.ndarray,
    interval: int = SAMPLE_INTERVAL_MINUTES,
):
    """Keep every ``interval``-th minute starting at minute 0.

    Returns ``(time_min, values)`` arrays with ``ceil(len / interval)`` rows.
    """
    time_min = np.arange(0, len(glucose), interval, dtype=np.int64)
    return time_min, glucose[::interval].copy()
