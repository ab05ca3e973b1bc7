"""Data layer definitions for the synthetic T2D CGM generator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List

import numpy as np


__all__ = [
    "DailyContext",
    "EventRecord",
    "EventType",
    "InvalidArgument",
    "KernelParameters",
    "KernelShape",
    "MINUTES_PER_DAY",
    "events_to_records",
    "SIMULATION_EPOCH",
    "sample_truncated_normal",
]


MINUTES_PER_DAY = 1440

# Minute zero of every simulated subject.
SIMULATION_EPOCH = datetime(2025, 1, 1, 0, 0, 0)


class InvalidArgument(ValueError):
    """Raised when a simulator or kernel entry point receives an unusable value."""


class EventType(str, Enum):
    """Physiological/behavioral events that perturb the glucose trace."""

    MEAL = "meal"
    SNACK = "snack"
    EXERCISE = "exercise"
    NIGHT_HYPO_MILD = "night_hypo_mild"
    NIGHT_HYPO_SEVERE = "night_hypo_severe"
    RANDOM_SPIKE = "random_spike"
    RANDOM_DIP = "random_dip"


@dataclass(frozen=True)
class EventRecord:
    """One row of the event log.

    ``value`` holds the event's primary magnitude: grams of carbohydrate for
    meals and snacks, mg/dL for everything else.
    """

    time_min: int
    type: EventType
    value: float

    @property
    def timestamp(self) -> datetime:
        return SIMULATION_EPOCH + timedelta(minutes=self.time_min)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to an event-table row."""
        return {
            "time_min": int(self.time_min),
            "type": self.type.value,
            "value": float(self.value),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class DailyContext:
    """Per-day state drawn fresh each simulated day and discarded afterwards."""

    day_index: int
    exercised_today: bool
    insulin_sensitivity: float  # Clamped to [0.5, 1.7]
    day_offset: float  # Baseline shift in mg/dL applied to the whole day

    @property
    def day_start(self) -> int:
        return self.day_index * MINUTES_PER_DAY


@dataclass(frozen=True)
class KernelShape:
    """Shape constants of the delayed gamma-like response kernel.

    gamma controls how sharply the response rises after the onset delay,
    alpha how quickly it decays relative to tau.
    """

    gamma: float = 2.0
    alpha: float = 0.72


@dataclass(frozen=True)
class KernelParameters:
    """Everything needed to render one event into the glucose buffer."""

    delay: float
    tau: float
    peak: float
    gain: float = 1.0


def sample_truncated_normal(
    rng: np.random.Generator,
    mean: float,
    std: float,
    min_val: float,
    max_val: float,
) -> float:
    """Sample from a truncated normal distribution via rejection sampling.

    Resamples until a value inside [min_val, max_val] is obtained. All bounds
    used by the scheduler sit within about two standard deviations of the
    mean, so this converges in a handful of draws.
    """
    while True:
        sample = rng.normal(mean, std)
        if min_val <= sample <= max_val:
            return float(sample)


def events_to_records(events: List[EventRecord]) -> List[Dict[str, Any]]:
    return [event.to_dict() for event in events]
