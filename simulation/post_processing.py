"""Whole-trace post-processing applied once after all days are rendered."""

from __future__ import annotations

import logging

import numpy as np

from simulation.humanization.sensor_variability import apply_sensor_noise
from simulation.metabolic_model import apply_drift_and_feedback
from simulation.signal_model import smooth_in_place

logger = logging.getLogger(__name__)


def post_process(
    glucose: np.ndarray,
    baseline: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """
    Turn the event-rendered buffer into a sensor-like trace, in place.

    1. Bounded drift with stabilizing feedback toward ``baseline``.
    2. Per-minute sensor noise and calibration bias.
    3. Two smoothing passes.
    """

    apply_drift_and_feedback(glucose, baseline, rng)
    apply_sensor_noise(glucose, rng)
    smooth_in_place(glucose, passes=2)
    logger.debug(
        "Post-processed %d minutes: mean %.1f mg/dL, range [%.1f, %.1f]",
        len(glucose),
        float(glucose.mean()),
        float(glucose.min()),
        float(glucose.max()),
    )
    return glucose
