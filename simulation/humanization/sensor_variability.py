"""Sensor-level noise and calibration bias for a single CGM wear."""

from __future__ import annotations

import numpy as np

NOISE_SIGMA_RANGE = (0.6, 1.2)
NOISE_SCALE = 0.7
CALIBRATION_BIAS_RANGE = (1.0, 3.0)  # mg/dL, subtracted


def apply_sensor_noise(
    glucose: np.ndarray,
    rng: np.random.Generator,
) -> np.ndarray:
    """
    Add per-minute Gaussian noise and subtract a constant calibration bias.

    The noise sigma is drawn once per subject run, so sensor quality varies
    between subjects but not within one trace.
    """

    sigma = rng.uniform(*NOISE_SIGMA_RANGE)
    glucose += NOISE_SCALE * rng.normal(0.0, sigma, size=len(glucose))
    glucose -= rng.uniform(*CALIBRATION_BIAS_RANGE)
    return glucose
