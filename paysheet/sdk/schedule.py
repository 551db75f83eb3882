"""Schedule orchestration for the timesheet workflow.

For the current pay period three one-shot jobs are planned:

- reminder: reminder_date at 10:00, nudges the employee
- submission: email_date (10:00), renders, exports and sends the timesheet
- replan: 00:05 on the first day of the next period, plans that period

Jobs are handed to a SchedulerBackend. ApschedulerBackend runs them in a
background APScheduler; InMemoryScheduler only records them and fires
them on request. All trigger state lives in the backend.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from functools import partial
from typing import Callable, Dict, List, Optional, Protocol
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger

from .periods import PayPeriod, next_period, select_period
from .resolver import DEFAULT_TIMEZONE, EMAIL_HOUR, resolve_period


logger = logging.getLogger(__name__)

REMINDER = "reminder"
SUBMISSION = "submission"
REPLAN = "replan"

REPLAN_TIME = time(hour=0, minute=5)

# A job that fires late (machine asleep) still runs within this window
MISFIRE_GRACE_SECONDS = 6 * 60 * 60


@dataclass(frozen=True)
class ScheduledJob:
    """A one-shot job planned for a pay period."""

    kind: str
    run_at: datetime
    period_label: str

    @property
    def job_id(self) -> str:
        return f"{self.kind}:{self.run_at.date().isoformat()}"

    def to_dict(self) -> dict:
        return {
            "id": self.job_id,
            "kind": self.kind,
            "run_at": self.run_at.isoformat(),
            "period": self.period_label,
        }


class SchedulerBackend(Protocol):
    """Where planned jobs are registered."""

    def add_job(self, job: ScheduledJob, func: Callable[[], None]) -> None:
        ...

    def clear(self) -> None:
        ...

    def jobs(self) -> List[ScheduledJob]:
        ...


def plan_jobs(period: PayPeriod, timezone: Optional[str] = None) -> List[ScheduledJob]:
    """Jobs for one pay period, in run order."""
    tz = ZoneInfo(timezone or DEFAULT_TIMEZONE)
    dates = resolve_period(period, timezone=timezone)
    following = next_period(period)

    return [
        ScheduledJob(
            kind=REMINDER,
            run_at=datetime.combine(dates.reminder_date, time(hour=EMAIL_HOUR), tzinfo=tz),
            period_label=dates.pay_period_label,
        ),
        ScheduledJob(
            kind=SUBMISSION,
            run_at=dates.email_date,
            period_label=dates.pay_period_label,
        ),
        ScheduledJob(
            kind=REPLAN,
            run_at=datetime.combine(following.start_date, REPLAN_TIME, tzinfo=tz),
            period_label=following.label,
        ),
    ]


class InMemoryScheduler:
    """Records jobs and lets the caller fire them by hand."""

    def __init__(self):
        self._jobs: Dict[str, ScheduledJob] = {}
        self._funcs: Dict[str, Callable[[], None]] = {}

    def add_job(self, job: ScheduledJob, func: Callable[[], None]) -> None:
        self._jobs[job.job_id] = job
        self._funcs[job.job_id] = func

    def clear(self) -> None:
        self._jobs.clear()
        self._funcs.clear()

    def jobs(self) -> List[ScheduledJob]:
        return sorted(self._jobs.values(), key=lambda j: j.run_at)

    def run(self, job_id: str) -> None:
        """Fire a registered job now."""
        self._funcs[job_id]()


class ApschedulerBackend:
    """Registers jobs with an APScheduler BackgroundScheduler."""

    def __init__(self, timezone: Optional[str] = None, scheduler: Optional[BackgroundScheduler] = None):
        self.timezone = timezone or DEFAULT_TIMEZONE
        self.scheduler = scheduler or BackgroundScheduler(timezone=ZoneInfo(self.timezone))
        self._planned: Dict[str, ScheduledJob] = {}

    def add_job(self, job: ScheduledJob, func: Callable[[], None]) -> None:
        self.scheduler.add_job(
            func,
            trigger=DateTrigger(run_date=job.run_at),
            id=job.job_id,
            name=f"{job.kind} {job.period_label}",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=MISFIRE_GRACE_SECONDS,
        )
        self._planned[job.job_id] = job

    def clear(self) -> None:
        self.scheduler.remove_all_jobs()
        self._planned.clear()

    def jobs(self) -> List[ScheduledJob]:
        return sorted(self._planned.values(), key=lambda j: j.run_at)

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info(f"Scheduler started ({self.timezone})")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)


def install_schedule(
    backend: SchedulerBackend,
    today: date,
    handlers: Dict[str, Callable[[date], None]],
    timezone: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[ScheduledJob]:
    """Plan the period containing `today` and register its jobs.

    Replaces whatever the backend held. Jobs already in the past relative
    to `now` are skipped; the replan job is always registered so the
    schedule rolls forward into the next period.

    Args:
        backend: Where to register jobs.
        today: Any date in the period to plan.
        handlers: Callables for REMINDER and SUBMISSION, each taking the
                  run date.
        timezone: Schedule timezone.
        now: Current time (defaults to datetime.now in the timezone).

    Returns:
        The registered jobs.
    """
    tz = ZoneInfo(timezone or DEFAULT_TIMEZONE)
    if now is None:
        now = datetime.now(tz)

    period = select_period(today)
    backend.clear()

    registered = []
    for job in plan_jobs(period, timezone=timezone):
        if job.kind == REPLAN:
            func = partial(install_schedule, backend, job.run_at.date(), handlers, timezone)
        else:
            if job.run_at < now:
                logger.info(f"Skipping {job.job_id}: already past ({job.run_at.isoformat()})")
                continue
            func = partial(handlers[job.kind], job.run_at.date())
        backend.add_job(job, func)
        registered.append(job)
        logger.debug(f"Registered {job.job_id} at {job.run_at.isoformat()}")

    return registered
