from datetime import datetime

import numpy as np
import pytest

from data_models import (
    DailyContext,
    EventRecord,
    EventType,
    KernelShape,
    events_to_records,
    sample_truncated_normal,
)


def test_event_record_timestamp_and_row():
    record = EventRecord(time_min=1445, type=EventType.SNACK, value=22.5)
    assert record.timestamp == datetime(2025, 1, 2, 0, 5)
    assert record.to_dict() == {
        "time_min": 1445,
        "type": "snack",
        "value": 22.5,
        "timestamp": datetime(2025, 1, 2, 0, 5),
    }


def test_events_to_records_preserves_order():
    events = [
        EventRecord(time_min=900, type=EventType.MEAL, value=60.0),
        EventRecord(time_min=500, type=EventType.SNACK, value=20.0),
    ]
    rows = events_to_records(events)
    assert [row["time_min"] for row in rows] == [900, 500]


def test_event_type_values():
    assert {t.value for t in EventType} == {
        "meal",
        "snack",
        "exercise",
        "night_hypo_mild",
        "night_hypo_severe",
        "random_spike",
        "random_dip",
    }


def test_daily_context_day_start():
    context = DailyContext(day_index=3, exercised_today=False, insulin_sensitivity=1.0, day_offset=0.0)
    assert context.day_start == 3 * 1440


def test_kernel_shape_defaults():
    shape = KernelShape()
    assert shape.gamma == 2.0
    assert shape.alpha == 0.72


def test_truncated_normal_respects_bounds(rng):
    samples = [sample_truncated_normal(rng, 1.1, 0.3, 0.6, 1.6) for _ in range(2000)]
    assert min(samples) >= 0.6
    assert max(samples) <= 1.6
    assert np.mean(samples) == pytest.approx(1.1, abs=0.05)
