"""Stochastic per-day scheduler for meals, activity and glucose anomalies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from data_models import (
    MINUTES_PER_DAY,
    DailyContext,
    EventRecord,
    EventType,
    KernelParameters,
    KernelShape,
    sample_truncated_normal,
)
from simulation.humanization.circadian import circadian_delay
from simulation.response_kernel import DEFAULT_KERNEL_SHAPE, render_event

logger = logging.getLogger(__name__)

# (nominal minute of day, base carbohydrates in grams)
BASE_MEALS: Tuple[Tuple[int, float], ...] = (
    (8 * 60, 60.0),  # breakfast
    (13 * 60, 70.0),  # lunch
    (19 * 60, 80.0),  # dinner
)

# Rendering windows in minutes, inclusive of t=0.
MEAL_WINDOW = 180
SNACK_WINDOW = 100
EXERCISE_WINDOW = 80
MILD_HYPO_WINDOW = 80
SEVERE_HYPO_WINDOW = 100
ANOMALY_WINDOW = 50


@dataclass(frozen=True)
class SchedulerConfig:
    """Probabilities and counts driving the daily event draw."""

    meals: Tuple[Tuple[int, float], ...] = BASE_MEALS
    meal_skip_probability: float = 0.07
    meal_jitter_minutes: int = 30
    meal_boost_probability: float = 0.4
    exercise_probability: float = 0.4
    mild_hypo_probability: float = 0.6
    severe_hypo_probability: float = 0.07
    snack_count_range: Tuple[int, int] = (2, 8)
    spike_count_range: Tuple[int, int] = (8, 12)
    dip_count_range: Tuple[int, int] = (8, 12)


DEFAULT_SCHEDULER_CONFIG = SchedulerConfig()


def _randint(rng: np.random.Generator, low: int, high: int) -> int:
    """Uniform integer in [low, high], both ends inclusive."""
    return int(rng.integers(low, high, endpoint=True))


def _emit(
    buffer: np.ndarray,
    event_log: List[EventRecord],
    event_type: EventType,
    start_index: int,
    value: float,
    window: int,
    params: KernelParameters,
    sign: float,
    shape: KernelShape,
) -> None:
    event_log.append(EventRecord(time_min=start_index, type=event_type, value=float(value)))
    render_event(buffer, start_index, window, params, sign=sign, shape=shape)


def _schedule_meals(buffer, context, rng, event_log, config, shape) -> None:
    for meal_minute, base_carbs in config.meals:
        if rng.random() < config.meal_skip_probability:
            continue
        jitter = _randint(rng, -config.meal_jitter_minutes, config.meal_jitter_minutes)
        if rng.random() < config.meal_boost_probability:
            base_carbs += rng.uniform(25.0, 50.0)

        carbs = base_carbs + rng.normal(0.0, 25.0)
        multiplier = sample_truncated_normal(rng, 1.1, 0.3, 0.6, 1.6)
        peak = context.insulin_sensitivity * multiplier * carbs
        start_index = context.day_start + meal_minute + jitter
        # Delay is gated on the nominal meal time, not the jittered one.
        delay = circadian_delay(meal_minute, rng)
        tau = rng.uniform(15.0, 30.0)
        gain = rng.uniform(0.9, 1.1)

        _emit(
            buffer, event_log, EventType.MEAL, start_index, carbs, MEAL_WINDOW,
            KernelParameters(delay=delay, tau=tau, peak=peak, gain=gain),
            sign=1.0, shape=shape,
        )


def _schedule_snacks(buffer, context, rng, event_log, config, shape) -> None:
    for _ in range(_randint(rng, *config.snack_count_range)):
        snack_minute = _randint(rng, 480, 1320)
        delay = circadian_delay(snack_minute, rng)
        carbs = sample_truncated_normal(rng, 25.0, 10.0, 10.0, 35.0)
        multiplier = sample_truncated_normal(rng, 0.45, 0.08, 0.3, 0.7)
        peak = context.insulin_sensitivity * multiplier * carbs
        tau = rng.uniform(8.0, 20.0)

        _emit(
            buffer, event_log, EventType.SNACK, context.day_start + snack_minute,
            carbs, SNACK_WINDOW,
            KernelParameters(delay=delay, tau=tau, peak=peak),
            sign=1.0, shape=shape,
        )


def _schedule_exercise(buffer, context, rng, event_log, shape) -> None:
    if not context.exercised_today:
        return
    exercise_minute = _randint(rng, 600, 1080)
    reduction = rng.uniform(12.0, 26.0)
    delay = circadian_delay(exercise_minute, rng)
    tau = rng.uniform(22.0, 40.0)

    _emit(
        buffer, event_log, EventType.EXERCISE, context.day_start + exercise_minute,
        reduction, EXERCISE_WINDOW,
        KernelParameters(delay=delay, tau=tau, peak=reduction),
        sign=-1.0, shape=shape,
    )


def _schedule_nocturnal_hypos(buffer, context, rng, event_log, config, shape) -> None:
    # Mild and severe episodes are drawn independently; both may fire.
    if rng.random() < config.mild_hypo_probability:
        hypo_minute = _randint(rng, 120, 300)
        dip = rng.uniform(6.0, 24.0)
        delay = circadian_delay(hypo_minute, rng)
        tau = rng.uniform(28.0, 40.0)
        _emit(
            buffer, event_log, EventType.NIGHT_HYPO_MILD,
            context.day_start + hypo_minute, dip, MILD_HYPO_WINDOW,
            KernelParameters(delay=delay, tau=tau, peak=dip),
            sign=-1.0, shape=shape,
        )

    if rng.random() < config.severe_hypo_probability:
        hypo_minute = _randint(rng, 120, 300)
        dip = rng.uniform(30.0, 50.0)
        delay = circadian_delay(hypo_minute, rng)
        tau = rng.uniform(30.0, 50.0)
        gain = rng.uniform(1.0, 1.3)
        _emit(
            buffer, event_log, EventType.NIGHT_HYPO_SEVERE,
            context.day_start + hypo_minute, dip, SEVERE_HYPO_WINDOW,
            KernelParameters(delay=delay, tau=tau, peak=dip, gain=gain),
            sign=-1.0, shape=shape,
        )


def _schedule_anomalies(
    buffer,
    context,
    rng,
    event_log,
    count_range: Tuple[int, int],
    magnitude_range: Tuple[float, float],
    event_type: EventType,
    sign: float,
    shape: KernelShape,
) -> None:
    """Unexplained spikes or dips; these are not circadian gated."""
    for _ in range(_randint(rng, *count_range)):
        anomaly_minute = _randint(rng, 300, 1320)
        magnitude = rng.uniform(*magnitude_range)
        tau = rng.uniform(26.0, 38.0)
        delay = rng.uniform(1.0, 5.0)
        _emit(
            buffer, event_log, event_type, context.day_start + anomaly_minute,
            magnitude, ANOMALY_WINDOW,
            KernelParameters(delay=delay, tau=tau, peak=magnitude),
            sign=sign, shape=shape,
        )


def schedule_day(
    buffer: np.ndarray,
    context: DailyContext,
    rng: np.random.Generator,
    event_log: List[EventRecord],
    config: SchedulerConfig = DEFAULT_SCHEDULER_CONFIG,
    shape: KernelShape = DEFAULT_KERNEL_SHAPE,
) -> int:
    """
    Draw and render every event for one simulated day.

    1. Shift the whole day by ``context.day_offset``.
    2. Meals, snacks, exercise, mild then severe nocturnal hypoglycemia,
       random spikes, random dips, in that order.

    The event log is appended in generation order, so records are grouped by
    event type within a day rather than sorted by time. Returns the number
    of events appended.
    """

    day_start = context.day_start
    buffer[day_start:day_start + MINUTES_PER_DAY] += context.day_offset
    logged_before = len(event_log)

    _schedule_meals(buffer, context, rng, event_log, config, shape)
    _schedule_snacks(buffer, context, rng, event_log, config, shape)
    _schedule_exercise(buffer, context, rng, event_log, shape)
    _schedule_nocturnal_hypos(buffer, context, rng, event_log, config, shape)
    _schedule_anomalies(
        buffer, context, rng, event_log, config.spike_count_range,
        (20.0, 40.0), EventType.RANDOM_SPIKE, 1.0, shape,
    )
    _schedule_anomalies(
        buffer, context, rng, event_log, config.dip_count_range,
        (35.0, 55.0), EventType.RANDOM_DIP, -1.0, shape,
    )

    emitted = len(event_log) - logged_before
    logger.debug(
        "Day %d: %d events (sensitivity %.2f, offset %.1f mg/dL)",
        context.day_index,
        emitted,
        context.insulin_sensitivity,
        context.day_offset,
    )
    return emitted
