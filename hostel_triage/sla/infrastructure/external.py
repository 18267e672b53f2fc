"""
SLA Background Scheduling
==========================

In-process trigger for the escalation sweep, on APScheduler's
AsyncIOScheduler. The POST /sla/sweep cron endpoint does the same work
for deployments with an external scheduler.
"""

from datetime import datetime
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from hostel_triage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

SWEEP_JOB_ID = "sla_sweep"

SweepJob = Callable[[], Awaitable[None]]


class SLAScheduler:
    """
    Runs one sweep job every `interval_seconds`.

    Runs never overlap (max_instances=1) and missed runs collapse into
    one (coalesce). A failing run is logged; the next run still fires.
    """

    def __init__(self, interval_seconds: int = 300):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.interval_seconds = interval_seconds
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def next_run_time(self) -> Optional[datetime]:
        if not self.is_running:
            return None
        job = self._scheduler.get_job(SWEEP_JOB_ID)
        return job.next_run_time if job else None

    async def start(self, job_func: SweepJob) -> None:
        """Schedule job_func; must be called from a running event loop."""
        if self.is_running:
            logger.warning("SLA scheduler already running")
            return

        async def run_sweep() -> None:
            try:
                await job_func()
            except Exception as e:
                logger.error("Scheduled SLA sweep failed", extra={"error": str(e)}, exc_info=True)

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            run_sweep,
            "interval",
            seconds=self.interval_seconds,
            id=SWEEP_JOB_ID,
            name="SLA Escalation Sweep",
            max_instances=1,
            coalesce=True,
            misfire_grace_time=self.interval_seconds,
            replace_existing=True,
        )
        self._scheduler.start()

        logger.info("SLA scheduler started", extra={"interval_seconds": self.interval_seconds})

    async def stop(self) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("SLA scheduler stopped")
