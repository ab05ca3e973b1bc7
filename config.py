"""Centralized configuration for the synthetic T2D cohort generator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


# Load environment variables from a local .env file when present.
load_dotenv()


def _optional_int_from_env(var_name: str) -> Optional[int]:
    """Return an integer from the environment, or None when unset/blank."""

    raw_value = os.getenv(var_name)
    if raw_value is None or not raw_value.strip():
        return None
    return int(raw_value)


@dataclass(frozen=True)
class CohortConfig:
    """Configuration values controlling a multi-subject generation run."""

    population_size: int = int(os.getenv("SIM_POPULATION_SIZE", "30"))
    days: int = int(os.getenv("SIM_DAYS", "90"))
    baseline_mgdl: float = float(os.getenv("SIM_BASELINE_MGDL", "135.0"))
    noise_std: float = float(os.getenv("SIM_NOISE_STD", "10.0"))
    random_seed: Optional[int] = _optional_int_from_env("SIM_RANDOM_SEED")
    n_jobs: int = int(os.getenv("SIM_N_JOBS", "1"))


COHORT_CONFIG = CohortConfig()
