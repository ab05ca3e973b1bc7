import math

import numpy as np
import pandas as pd
import pytest

from data_models import SIMULATION_EPOCH, EventType, InvalidArgument
from simulation_engine import generate_T2D_data, run_subject, simulate_cgm_t2d


@pytest.mark.parametrize("days", [1, 2, 3])
def test_buffer_and_table_lengths(days):
    glucose, _ = run_subject(days, 135.0, np.random.default_rng(days))
    assert len(glucose) == days * 1440

    glucose_df, _ = simulate_cgm_t2d(days=days, rng=np.random.default_rng(days))
    assert len(glucose_df) == math.ceil(days * 1440 / 5)
    assert list(glucose_df.columns) == ["time_min", "glucose_mg_dL", "timestamp"]


def test_glucose_table_matches_every_fifth_minute():
    glucose, _ = run_subject(1, 135.0, np.random.default_rng(11))
    glucose_df, _ = simulate_cgm_t2d(days=1, rng=np.random.default_rng(11))
    np.testing.assert_array_equal(glucose_df["glucose_mg_dL"].to_numpy(), glucose[::5])
    np.testing.assert_array_equal(glucose_df["time_min"].to_numpy(), np.arange(0, 1440, 5))


def test_timestamps_step_by_five_minutes():
    glucose_df, _ = simulate_cgm_t2d(days=2, rng=np.random.default_rng(5))
    assert glucose_df["timestamp"].iloc[0] == pd.Timestamp(SIMULATION_EPOCH)
    steps = glucose_df["timestamp"].diff().dropna()
    assert (steps == pd.Timedelta(minutes=5)).all()


def test_same_seed_is_bit_identical():
    first = simulate_cgm_t2d(days=2, baseline=140.0, rng=np.random.default_rng(123))
    second = simulate_cgm_t2d(days=2, baseline=140.0, rng=np.random.default_rng(123))
    pd.testing.assert_frame_equal(first[0], second[0])
    pd.testing.assert_frame_equal(first[1], second[1])


def test_integer_seed_equals_generator_with_same_seed():
    from_seed = simulate_cgm_t2d(days=1, rng=99)
    from_generator = simulate_cgm_t2d(days=1, rng=np.random.default_rng(99))
    pd.testing.assert_frame_equal(from_seed[0], from_generator[0])
    pd.testing.assert_frame_equal(from_seed[1], from_generator[1])


def test_different_seeds_differ():
    a, _ = simulate_cgm_t2d(days=1, rng=np.random.default_rng(1))
    b, _ = simulate_cgm_t2d(days=1, rng=np.random.default_rng(2))
    assert not np.array_equal(a["glucose_mg_dL"].to_numpy(), b["glucose_mg_dL"].to_numpy())


def test_noise_std_does_not_change_output():
    low = simulate_cgm_t2d(days=1, noise_std=1.0, rng=np.random.default_rng(8))
    high = simulate_cgm_t2d(days=1, noise_std=50.0, rng=np.random.default_rng(8))
    pd.testing.assert_frame_equal(low[0], high[0])


def test_event_log_contract():
    days = 3
    _, events = simulate_cgm_t2d(days=days, rng=np.random.default_rng(42))
    assert list(events.columns) == ["time_min", "type", "value", "timestamp"]
    assert events["time_min"].between(0, days * 1440 - 1).all()
    assert set(events["type"]) <= {t.value for t in EventType}
    expected = pd.Timestamp(SIMULATION_EPOCH) + pd.to_timedelta(events["time_min"], unit="min")
    assert (events["timestamp"] == expected).all()


def test_single_quiet_day_has_meals_and_snacks(quiet_schedule):
    _, events = simulate_cgm_t2d(
        days=1, baseline=135.0, rng=np.random.default_rng(0), config=quiet_schedule
    )
    counts = events["type"].value_counts()
    assert counts.get("meal", 0) >= 3
    assert counts.get("snack", 0) >= 2
    assert counts.get("exercise", 0) == 0
    assert counts.get("night_hypo_severe", 0) == 0


def test_glucose_stays_physiologically_plausible():
    glucose_df, _ = simulate_cgm_t2d(days=7, rng=np.random.default_rng(2024))
    values = glucose_df["glucose_mg_dL"]
    assert values.notna().all()
    assert 60.0 < values.mean() < 250.0


@pytest.mark.parametrize("days", [0, -1, 1.5, True])
def test_invalid_days_rejected(days):
    with pytest.raises(InvalidArgument):
        simulate_cgm_t2d(days=days, rng=np.random.default_rng(0))


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        run_subject(0, 135.0, np.random.default_rng(0))


def test_generate_cohort_tags_subjects():
    glucose, events = generate_T2D_data(N=3, days=1, rng=np.random.default_rng(17))
    assert sorted(glucose["subject"].unique()) == [1, 2, 3]
    assert sorted(events["subject"].unique()) == [1, 2, 3]
    assert len(glucose) == 3 * 288
    assert glucose.index.is_unique and events.index.is_unique


def test_generate_cohort_subjects_are_independent_streams():
    glucose, _ = generate_T2D_data(N=2, days=1, rng=np.random.default_rng(17))
    first = glucose.loc[glucose["subject"] == 1, "glucose_mg_dL"].to_numpy()
    second = glucose.loc[glucose["subject"] == 2, "glucose_mg_dL"].to_numpy()
    assert not np.array_equal(first, second)


def test_generate_cohort_parallel_matches_sequential():
    sequential = generate_T2D_data(N=2, days=1, rng=np.random.default_rng(31))
    parallel = generate_T2D_data(N=2, days=1, rng=np.random.default_rng(31), n_jobs=2)
    pd.testing.assert_frame_equal(sequential[0], parallel[0])
    pd.testing.assert_frame_equal(sequential[1], parallel[1])


@pytest.mark.parametrize("kwargs", [{"N": 0}, {"N": -3}, {"N": 2, "n_jobs": 0}])
def test_generate_cohort_rejects_bad_counts(kwargs):
    with pytest.raises(InvalidArgument):
        generate_T2D_data(days=1, rng=0, **kwargs)
