from datetime import datetime

import pytest

from src.fieldplan.config import OptimizerConfig
from src.fieldplan.models.domain import Job, ResourceKind, TimeRange
from src.fieldplan.services.availability.models import ResourceAvailability
from src.fieldplan.services.scheduling.optimizer import ScheduleOptimizer


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 5, 6, hour, minute)


def _job(job_id: str, priority: str, duration: int | None = None, user: str | None = None) -> Job:
    return Job(
        job_id=job_id,
        title=f"Job {job_id}",
        priority=priority,
        estimated_duration=duration,
        assigned_user_id=user,
    )


def test_priority_order_with_buffer_and_window_utilization():
    optimizer = ScheduleOptimizer()
    jobs = [_job("B", "low", 30), _job("A", "urgent", 60)]

    result = optimizer.optimize(jobs, TimeRange(_at(9), _at(12)))

    assert [(slot.job_id, slot.start_time, slot.end_time) for slot in result.slots] == [
        ("A", _at(9), _at(10)),
        ("B", _at(10, 15), _at(10, 45)),
    ]
    assert result.metrics.utilization == pytest.approx(0.5)
    assert result.metrics.travel_time_minutes == 30
    assert result.metrics.overtime_hours == 0
    assert result.metrics.customer_satisfaction == pytest.approx(0.85)
    assert result.improvements == ["Schedule appears well-optimized"]
    assert result.unscheduled_job_ids == []


def test_sort_breaks_ties_by_duration_then_input_order():
    optimizer = ScheduleOptimizer()
    jobs = [
        _job("mystery", "someday", 10),
        _job("long", "high", 90),
        _job("default", "high"),
        _job("short", "high", 30),
        _job("short-too", "high", 30),
        _job("low", "low", 15),
    ]

    ordered = optimizer.sort_jobs(jobs)

    assert [job.job_id for job in ordered] == ["short", "short-too", "long", "default", "low", "mystery"]


def test_job_that_does_not_fit_is_skipped_and_flagged():
    optimizer = ScheduleOptimizer()
    jobs = [_job("u", "urgent", 90), _job("h", "high", 60), _job("l", "low", 15)]

    result = optimizer.optimize(jobs, TimeRange(_at(9), _at(11)))

    assert [slot.job_id for slot in result.slots] == ["u", "l"]
    assert result.unscheduled_job_ids == ["h"]
    assert result.improvements == ["High-priority jobs remain unscheduled - consider extending time window"]


def test_each_resource_keeps_its_own_timeline():
    optimizer = ScheduleOptimizer()
    jobs = [
        _job("u1-a", "high", 60, user="U1"),
        _job("u2-a", "high", 60, user="U2"),
        _job("u1-b", "medium", 60, user="U1"),
    ]

    result = optimizer.optimize(jobs, TimeRange(_at(9), _at(12)))

    by_job = {slot.job_id: slot for slot in result.slots}
    assert by_job["u1-a"].start_time == _at(9)
    assert by_job["u2-a"].start_time == _at(9)
    assert by_job["u1-b"].start_time == _at(10, 15)
    assert by_job["u1-b"].user_id == "U1"
    # 180 scheduled minutes over two 180-minute timelines
    assert result.metrics.utilization == pytest.approx(180 / 360)

    starts = [slot.start_time for slot in result.slots]
    assert starts == sorted(starts)


def test_busy_intervals_push_job_and_report_large_gap():
    optimizer = ScheduleOptimizer()
    busy = ResourceAvailability("U1", ResourceKind.USER, busy=(TimeRange(_at(10), _at(13)),))
    jobs = [_job("first", "urgent", 60, user="U1"), _job("second", "high", 60, user="U1")]

    result = optimizer.optimize(jobs, TimeRange(_at(9), _at(17)), [busy])

    assert [(slot.start_time, slot.end_time) for slot in result.slots] == [
        (_at(9), _at(10)),
        (_at(13), _at(14)),
    ]
    assert result.improvements == ["Large gap detected between jobs (3h0m) - consider rescheduling"]


def test_busy_interval_of_other_resource_is_ignored():
    optimizer = ScheduleOptimizer()
    busy = ResourceAvailability("U2", ResourceKind.USER, busy=(TimeRange(_at(9), _at(12)),))

    result = optimizer.optimize([_job("a", "medium", 60, user="U1")], TimeRange(_at(9), _at(12)), [busy])

    assert result.slots[0].start_time == _at(9)


def test_overtime_hours_and_business_hours_advice():
    optimizer = ScheduleOptimizer()

    result = optimizer.optimize([_job("late", "urgent", 180)], TimeRange(_at(16), _at(20)))

    assert result.metrics.overtime_hours == 3
    assert result.improvements == [
        "Some jobs scheduled outside business hours - consider extending work day or rescheduling"
    ]


def test_no_slots_gives_zero_metrics():
    optimizer = ScheduleOptimizer()

    result = optimizer.optimize([_job("big", "low", 600)], TimeRange(_at(9), _at(10)))

    assert result.slots == []
    assert result.metrics.utilization == 0.0
    assert result.metrics.travel_time_minutes == 0
    assert result.improvements == ["Schedule appears well-optimized"]


def test_config_controls_defaults_and_buffer():
    optimizer = ScheduleOptimizer(OptimizerConfig(default_job_duration_minutes=30, inter_job_buffer_minutes=0))

    result = optimizer.optimize([_job("a", "high"), _job("b", "high")], TimeRange(_at(9), _at(10)))

    assert [(slot.start_time, slot.end_time) for slot in result.slots] == [
        (_at(9), _at(9, 30)),
        (_at(9, 30), _at(10)),
    ]
    assert result.metrics.utilization == pytest.approx(1.0)


def test_optimize_is_deterministic():
    optimizer = ScheduleOptimizer()
    jobs = [_job(str(index), ["low", "high", "medium"][index % 3], 30 + index) for index in range(8)]
    window = TimeRange(_at(8), _at(17))

    assert optimizer.optimize(jobs, window) == optimizer.optimize(jobs, window)


def test_find_next_available_slot_skips_consecutive_busy_blocks():
    busy = [TimeRange(_at(9), _at(10)), TimeRange(_at(10), _at(11, 30))]

    start = ScheduleOptimizer.find_next_available_slot(_at(9), _at(1) - _at(0), _at(17), busy)

    assert start == _at(11, 30)
    assert ScheduleOptimizer.find_next_available_slot(_at(9), _at(1) - _at(0), _at(12), busy) is None
