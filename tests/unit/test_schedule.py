"""Tests for schedule planning and installation.

InMemoryScheduler stands in for APScheduler so jobs can be fired by hand;
ApschedulerBackend is checked against a scheduler that is never started.
"""

import pytest
from datetime import date, datetime
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler

from paysheet.sdk.periods import PayPeriod, periods_for_year
from paysheet.sdk.schedule import (
    REMINDER,
    REPLAN,
    SUBMISSION,
    ApschedulerBackend,
    InMemoryScheduler,
    ScheduledJob,
    install_schedule,
    plan_jobs,
)


TZ_NAME = "America/Vancouver"
TZ = ZoneInfo(TZ_NAME)


class Recorder:
    """Handler that records the dates it was called with."""

    def __init__(self):
        self.calls = []

    def __call__(self, run_date):
        self.calls.append(run_date)


@pytest.fixture
def handlers():
    return {REMINDER: Recorder(), SUBMISSION: Recorder()}


class TestPlanJobs:
    def test_thanksgiving_period(self):
        jobs = plan_jobs(PayPeriod(2024, 10, 1, 15), timezone=TZ_NAME)
        assert [j.kind for j in jobs] == [REMINDER, SUBMISSION, REPLAN]
        assert jobs[0].run_at == datetime(2024, 10, 9, 10, tzinfo=TZ)
        assert jobs[1].run_at == datetime(2024, 10, 10, 10, tzinfo=TZ)
        assert jobs[2].run_at == datetime(2024, 10, 16, 0, 5, tzinfo=TZ)

    def test_labels(self):
        jobs = plan_jobs(PayPeriod(2024, 12, 16, 31), timezone=TZ_NAME)
        assert jobs[0].period_label == "12/16/2024 - 12/31/2024"
        assert jobs[1].period_label == "12/16/2024 - 12/31/2024"
        assert jobs[2].period_label == "01/01/2025 - 01/15/2025"
        assert jobs[2].run_at.date() == date(2025, 1, 1)

    def test_job_id_and_dict(self):
        job = ScheduledJob(kind=REMINDER, run_at=datetime(2024, 10, 9, 10, tzinfo=TZ),
                           period_label="10/01/2024 - 10/15/2024")
        assert job.job_id == "reminder:2024-10-09"
        assert job.to_dict() == {
            "id": "reminder:2024-10-09",
            "kind": "reminder",
            "run_at": "2024-10-09T10:00:00-07:00",
            "period": "10/01/2024 - 10/15/2024",
        }

    def test_run_order(self):
        for period in periods_for_year(2025):
            jobs = plan_jobs(period, timezone=TZ_NAME)
            assert jobs[0].run_at < jobs[1].run_at < jobs[2].run_at


class TestInstallSchedule:
    def test_registers_all_three(self, handlers):
        backend = InMemoryScheduler()
        now = datetime(2024, 10, 1, 8, tzinfo=TZ)
        registered = install_schedule(backend, date(2024, 10, 3), handlers, timezone=TZ_NAME, now=now)

        assert [j.kind for j in registered] == [REMINDER, SUBMISSION, REPLAN]
        assert [j.job_id for j in backend.jobs()] == [
            "reminder:2024-10-09",
            "submission:2024-10-10",
            "replan:2024-10-16",
        ]

    def test_handlers_receive_run_date(self, handlers):
        backend = InMemoryScheduler()
        install_schedule(backend, date(2024, 10, 3), handlers, timezone=TZ_NAME,
                         now=datetime(2024, 10, 1, tzinfo=TZ))

        backend.run("reminder:2024-10-09")
        backend.run("submission:2024-10-10")

        assert handlers[REMINDER].calls == [date(2024, 10, 9)]
        assert handlers[SUBMISSION].calls == [date(2024, 10, 10)]

    def test_skips_past_jobs(self, handlers):
        backend = InMemoryScheduler()
        now = datetime(2024, 10, 9, 12, tzinfo=TZ)
        registered = install_schedule(backend, now.date(), handlers, timezone=TZ_NAME, now=now)

        assert [j.kind for j in registered] == [SUBMISSION, REPLAN]

    def test_replan_always_registered(self, handlers):
        backend = InMemoryScheduler()
        now = datetime(2024, 10, 15, 23, tzinfo=TZ)
        registered = install_schedule(backend, now.date(), handlers, timezone=TZ_NAME, now=now)

        assert [j.kind for j in registered] == [REPLAN]

    def test_replaces_previous_jobs(self, handlers):
        backend = InMemoryScheduler()
        now = datetime(2024, 9, 1, tzinfo=TZ)
        install_schedule(backend, date(2024, 9, 3), handlers, timezone=TZ_NAME, now=now)
        install_schedule(backend, date(2024, 10, 3), handlers, timezone=TZ_NAME, now=now)

        assert all("10/01/2024" in j.period_label or j.kind == REPLAN for j in backend.jobs())
        assert len(backend.jobs()) == 3

    def test_replan_rolls_into_next_period(self, handlers):
        # Far enough ahead that nothing is in the past when replan runs
        backend = InMemoryScheduler()
        install_schedule(backend, date(2099, 10, 3), handlers, timezone=TZ_NAME,
                         now=datetime(2099, 10, 1, tzinfo=TZ))

        backend.run("replan:2099-10-16")

        jobs = backend.jobs()
        assert [j.kind for j in jobs] == [REMINDER, SUBMISSION, REPLAN]
        assert jobs[0].period_label == "10/16/2099 - 10/31/2099"
        assert jobs[2].run_at.date() == date(2099, 11, 1)


class TestApschedulerBackend:
    def test_add_job_registers_date_trigger(self):
        scheduler = BackgroundScheduler(timezone=TZ)
        backend = ApschedulerBackend(timezone=TZ_NAME, scheduler=scheduler)
        job = ScheduledJob(kind=SUBMISSION, run_at=datetime(2099, 10, 9, 10, tzinfo=TZ),
                           period_label="10/01/2099 - 10/15/2099")

        backend.add_job(job, lambda: None)

        aps_jobs = scheduler.get_jobs()
        assert [j.id for j in aps_jobs] == ["submission:2099-10-09"]
        assert aps_jobs[0].max_instances == 1
        assert aps_jobs[0].coalesce is True
        assert backend.jobs() == [job]

    def test_clear(self):
        scheduler = BackgroundScheduler(timezone=TZ)
        backend = ApschedulerBackend(timezone=TZ_NAME, scheduler=scheduler)
        install_schedule(backend, date(2099, 10, 3), {REMINDER: print, SUBMISSION: print},
                         timezone=TZ_NAME, now=datetime(2099, 10, 1, tzinfo=TZ))
        assert len(scheduler.get_jobs()) == 3

        backend.clear()

        assert scheduler.get_jobs() == []
        assert backend.jobs() == []

    def test_shutdown_when_not_running(self):
        backend = ApschedulerBackend(timezone=TZ_NAME)
        backend.shutdown()
        assert not backend.scheduler.running
