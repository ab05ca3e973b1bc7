"""Slow autoregulatory wandering of glucose around the subject baseline."""

from __future__ import annotations

import numpy as np


# Fraction of the previous minute's deviation from baseline pulled back each minute
GLUCOSE_EFFECTIVENESS = 0.002

DRIFT_RETENTION = 0.997
DRIFT_STEP_STD = 0.6
DRIFT_LIMIT = 18.0  # mg/dL


def bounded_drift(
    n_steps: int,
    rng: np.random.Generator,
    retention: float = DRIFT_RETENTION,
    step_std: float = DRIFT_STEP_STD,
    limit: float = DRIFT_LIMIT,
) -> np.ndarray:
    """
    Mean-reverting random walk clamped to [-limit, limit].

    ``drift = clip(drift * retention + N(0, step_std), -limit, limit)``
    starting from zero; returns the drift after each of ``n_steps`` steps.
    """
    steps = rng.normal(0.0, step_std, size=n_steps)
    drift = np.empty(n_steps, dtype=float)
    current = 0.0
    for i, step in enumerate(steps.tolist()):
        current = min(max(current * retention + step, -limit), limit)
        drift[i] = current
    return drift


def apply_drift_and_feedback(
    glucose: np.ndarray,
    baseline: float,
    rng: np.random.Generator,
    effectiveness: float = GLUCOSE_EFFECTIVENESS,
) -> np.ndarray:
    """
    Add drift and first-order stabilizing feedback in place.

    For every minute after the first, the drift value is added and the
    minute is nudged toward ``baseline`` by ``effectiveness`` times the
    previous (already updated) minute's deviation.
    """
    n = len(glucose)
    if n < 2:
        return glucose
    drift = bounded_drift(n - 1, rng).tolist()
    values = glucose.tolist()
    for t in range(1, n):
        values[t] += drift[t - 1]
        values[t] -= effectiveness * (values[t - 1] - baseline)
    glucose[:] = values
    return glucose
