"""Delayed gamma-like response kernel used to render events into glucose.

Each event contributes

    gain * peak * ((t - delay) / tau) ** gamma * exp(-alpha * (t - delay) / tau)

for ``t >= delay`` and nothing before the onset delay. With the default
shape (gamma=2, alpha=0.72) the contribution peaks at
``t = delay + gamma * tau / alpha``.
"""

from __future__ import annotations

import math

import numpy as np

from data_models import InvalidArgument, KernelParameters, KernelShape

DEFAULT_KERNEL_SHAPE = KernelShape()


def _check_tau(tau: float) -> None:
    if not tau > 0:
        raise InvalidArgument(f"tau must be positive, got {tau}")


def cgm_delay_kernel(
    t: int,
    delay: float,
    tau: float,
    peak: float,
    gain: float = 1.0,
    shape: KernelShape = DEFAULT_KERNEL_SHAPE,
) -> float:
    """Glucose impact ``t`` minutes after an event was triggered.

    Args:
        t: Minutes since the event trigger.
        delay: Onset delay before the response begins.
        tau: Time constant governing the width of the response.
        peak: Effect size; scales total magnitude.
        gain: Additional scaling factor.
        shape: Rise exponent and decay coefficient.

    Returns:
        The contribution in mg/dL, exactly 0.0 when ``t < delay``.
    """
    _check_tau(tau)
    if t < delay:
        return 0.0
    shifted = max(t - delay, 0.0)
    rise = (shifted / tau) ** shape.gamma
    decay = math.exp(-shape.alpha * shifted / tau)
    return gain * peak * rise * decay


def kernel_curve(
    window: int,
    params: KernelParameters,
    shape: KernelShape = DEFAULT_KERNEL_SHAPE,
) -> np.ndarray:
    """Vectorized kernel over ``t = 0..window`` inclusive."""
    _check_tau(params.tau)
    t = np.arange(window + 1, dtype=float)
    shifted = np.maximum(t - params.delay, 0.0)
    values = (
        params.gain
        * params.peak
        * (shifted / params.tau) ** shape.gamma
        * np.exp(-shape.alpha * shifted / params.tau)
    )
    values[t < params.delay] = 0.0
    return values


def render_event(
    buffer: np.ndarray,
    start_index: int,
    window: int,
    params: KernelParameters,
    sign: float = 1.0,
    shape: KernelShape = DEFAULT_KERNEL_SHAPE,
) -> int:
    """
    Accumulate one event's kernel into ``buffer`` starting at ``start_index``.

    Samples whose absolute index falls outside the buffer are dropped, so an
    event near the end of the simulation is only partially rendered.
    Returns the number of samples written.
    """
    curve = kernel_curve(window, params, shape)
    indices = start_index + np.arange(window + 1)
    in_range = (indices >= 0) & (indices < len(buffer))
    buffer[indices[in_range]] += sign * curve[in_range]
    return int(in_range.sum())
