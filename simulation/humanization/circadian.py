"""Circadian rhythm helpers that gate how fast events reach the sensor."""

from __future__ import annotations

import numpy as np

from data_models import MINUTES_PER_DAY


def circadian_delay(
    minute_of_day: int,
    rng: np.random.Generator,
    base: float = 18.0,
    amplitude: float = 4.0,
    peak_minute: int = 180,
    noise_std: float = 2.0,
    min_delay: int = 8,
    max_delay: int = 30,
) -> int:
    """
    Draw the onset delay (minutes) for an event starting at ``minute_of_day``.

    A 24 hour cosine around ``base`` peaks near 03:00 and bottoms out near
    15:00. Gaussian noise is added, the result rounded to the nearest minute
    and clamped to [min_delay, max_delay].

    Args:
        minute_of_day: Minutes since midnight, expected in [0, 1440).
        rng: Random stream; exactly one normal draw is consumed.
    """

    angle = 2.0 * np.pi * (minute_of_day - peak_minute) / MINUTES_PER_DAY
    circadian = base + amplitude * np.cos(angle)
    delay = rng.normal(circadian, noise_std)
    return int(np.clip(int(round(delay)), min_delay, max_delay))
