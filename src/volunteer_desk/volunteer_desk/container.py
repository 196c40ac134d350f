from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from apscheduler.schedulers.background import BackgroundScheduler

from .attendance.auto_checkout import AutoCheckoutSweep, scoped_volunteer_loader
from .attendance.service import AttendanceService
from .common.scheduler import AUTO_CHECKOUT_JOB_ID, STAFFING_MONITOR_JOB_ID, schedule_interval
from .core.constants import (
    DEFAULT_CHECKOUT_BUFFER_MINUTES,
    DEFAULT_MAX_LATE_CHECKOUT_MINUTES,
    DEFAULT_STAFFING_CHECK_SECONDS,
    DEFAULT_SWEEP_INTERVAL_SECONDS,
    GEOFENCE_RADIUS_METERS,
)
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .events.service import EventService
from .messages.mysql_message_repository import MySQLMessageRepository
from .messages.repository import MessageRepository
from .messages.service import MessageService
from .positions.mysql_position_repository import MySQLPositionRepository
from .positions.repository import PositionRepository
from .positions.service import PositionService
from .realtime.notifier import Notifier
from .realtime.staffing import IssueFeed, StaffingMonitor
from .signups.mysql_signup_repository import MySQLSignupRepository
from .signups.model import Signup
from .signups.repository import SignupRepository


@dataclass(frozen=True)
class ContainerOptions:
    checkout_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS
    checkout_buffer_minutes: int = DEFAULT_CHECKOUT_BUFFER_MINUTES
    checkout_max_late_minutes: int = DEFAULT_MAX_LATE_CHECKOUT_MINUTES
    checkout_event_id: Optional[str] = None
    staffing_check_seconds: float = DEFAULT_STAFFING_CHECK_SECONDS
    geofence_radius_m: float = GEOFENCE_RADIUS_METERS
    public_base_url: str = "http://localhost:5000"


@dataclass(frozen=True)
class Container:
    events_repo: EventRepository
    positions_repo: PositionRepository
    signups_repo: SignupRepository
    messages_repo: MessageRepository

    notifier: Notifier
    event_service: EventService
    position_service: PositionService
    attendance_service: AttendanceService
    message_service: MessageService

    auto_checkout: AutoCheckoutSweep
    staffing_monitor: StaffingMonitor
    issue_feed: IssueFeed
    load_volunteers: Callable[[], Sequence[Signup]]
    scheduler: BackgroundScheduler

    options: ContainerOptions

    def start_background(self, *, auto_checkout: bool = True, staffing: bool = True) -> None:
        """Register the enabled periodic jobs and start the scheduler."""
        if auto_checkout:
            schedule_interval(
                self.scheduler,
                lambda: self.auto_checkout.run(self.load_volunteers()),
                job_id=AUTO_CHECKOUT_JOB_ID,
                seconds=self.options.checkout_interval_seconds,
            )
        if staffing:
            schedule_interval(
                self.scheduler,
                self.staffing_monitor.check,
                job_id=STAFFING_MONITOR_JOB_ID,
                seconds=self.options.staffing_check_seconds,
            )
        if not self.scheduler.running:
            self.scheduler.start()

    def stop_background(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    def background_status(self) -> dict:
        return {
            "running": self.scheduler.running,
            "jobs": sorted(job.id for job in self.scheduler.get_jobs()),
        }


def assemble_container(
    *,
    events_repo: EventRepository,
    positions_repo: PositionRepository,
    signups_repo: SignupRepository,
    messages_repo: MessageRepository,
    options: Optional[ContainerOptions] = None,
) -> Container:
    options = options or ContainerOptions()
    notifier = Notifier()

    attendance_service = AttendanceService(
        signups_repo,
        positions_repo,
        notifier,
        geofence_radius_m=options.geofence_radius_m,
    )
    auto_checkout = AutoCheckoutSweep(
        attendance_service,
        notifier,
        buffer_minutes=options.checkout_buffer_minutes,
        max_late_window_minutes=options.checkout_max_late_minutes,
    )
    load_volunteers = scoped_volunteer_loader(signups_repo, event_id=options.checkout_event_id)
    staffing_monitor = StaffingMonitor(notifier, lambda: positions_repo.list_for_event(options.checkout_event_id))

    return Container(
        events_repo=events_repo,
        positions_repo=positions_repo,
        signups_repo=signups_repo,
        messages_repo=messages_repo,
        notifier=notifier,
        event_service=EventService(events_repo),
        position_service=PositionService(positions_repo, events_repo, signups_repo),
        attendance_service=attendance_service,
        message_service=MessageService(messages_repo),
        auto_checkout=auto_checkout,
        staffing_monitor=staffing_monitor,
        issue_feed=IssueFeed(notifier, event_id=options.checkout_event_id),
        load_volunteers=load_volunteers,
        scheduler=BackgroundScheduler(daemon=True),
        options=options,
    )


def build_container(*, db_config: dict, options: Optional[ContainerOptions] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    return assemble_container(
        events_repo=MySQLEventRepository(conn),
        positions_repo=MySQLPositionRepository(conn),
        signups_repo=MySQLSignupRepository(conn),
        messages_repo=MySQLMessageRepository(conn),
        options=options,
    )
