import numpy as np
import pytest

from simulation.humanization.scheduler import SchedulerConfig


@pytest.fixture
def rng():
    """Seeded generator so every test sees the same stream."""
    return np.random.default_rng(20250101)


@pytest.fixture
def quiet_schedule():
    """Schedule with all optional branches pinned off: no skipped meals,
    no exercise, no severe nocturnal hypoglycemia."""
    return SchedulerConfig(
        meal_skip_probability=0.0,
        exercise_probability=0.0,
        severe_hypo_probability=0.0,
    )
