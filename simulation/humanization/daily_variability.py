"""Day-to-day variability in behavior and insulin sensitivity."""

from __future__ import annotations

import numpy as np

from data_models import DailyContext

EXERCISE_PROBABILITY = 0.4
SENSITIVITY_BOUNDS = (0.5, 1.7)
DAY_OFFSET_STD = 14.0  # mg/dL


def draw_daily_context(
    day_index: int,
    rng: np.random.Generator,
    exercise_probability: float = EXERCISE_PROBABILITY,
) -> DailyContext:
    """
    Draw the ephemeral state for one simulated day.

    Insulin sensitivity follows a weekly sinusoid (+/-0.25) with Gaussian
    day-level noise, clamped to physiological bounds. The day offset shifts
    the whole day's baseline.
    """

    exercised_today = bool(rng.random() < exercise_probability)
    weekly = 0.25 * np.sin(2.0 * np.pi * day_index / 7.0)
    sensitivity = float(
        np.clip(1.0 + weekly + rng.normal(0.0, 0.15), *SENSITIVITY_BOUNDS)
    )
    day_offset = float(rng.normal(0.0, DAY_OFFSET_STD))
    return DailyContext(
        day_index=day_index,
        exercised_today=exercised_today,
        insulin_sensitivity=sensitivity,
        day_offset=day_offset,
    )
