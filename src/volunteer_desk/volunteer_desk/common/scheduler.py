from __future__ import annotations

import logging
from typing import Callable

from apscheduler.job import Job
from apscheduler.schedulers.background import BackgroundScheduler

from .datetime_utils import now_local

logger = logging.getLogger(__name__)

AUTO_CHECKOUT_JOB_ID = "auto-checkout"
STAFFING_MONITOR_JOB_ID = "staffing-monitor"


def schedule_interval(
    scheduler: BackgroundScheduler,
    task: Callable[[], object],
    *,
    job_id: str,
    seconds: float,
) -> Job:
    """Run ``task`` right away, then every ``seconds``; one run at a time per job."""
    if seconds <= 0:
        raise ValueError("interval seconds must be positive")
    job = scheduler.add_job(
        task,
        "interval",
        seconds=seconds,
        id=job_id,
        name=job_id,
        next_run_time=now_local(),
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    logger.info("Scheduled %s every %ss", job_id, seconds)
    return job
