from __future__ import annotations

import threading
from datetime import datetime, time, timedelta

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from src.volunteer_desk.volunteer_desk.common.datetime_utils import minutes_of_day, parse_time_of_day
from src.volunteer_desk.volunteer_desk.common.geo import GeoPoint, distance_meters, is_near_position
from src.volunteer_desk.volunteer_desk.common.scheduler import schedule_interval
from src.volunteer_desk.volunteer_desk.database import bootstrap
from src.volunteer_desk.volunteer_desk.database.bootstrap import (
    SCHEMA_PATH,
    _strip_create_db_and_use,
    count_rows,
    describe_database,
    iter_sql_statements,
)


def test_parse_time_of_day_accepts_store_and_form_formats():
    assert parse_time_of_day("08:30") == time(8, 30)
    assert parse_time_of_day("17:05:09") == time(17, 5, 9)
    with pytest.raises(ValueError):
        parse_time_of_day("noon")


def test_minutes_of_day_ignores_seconds_and_date():
    assert minutes_of_day(datetime(2026, 3, 14, 12, 1, 59)) == 721
    assert minutes_of_day("00:00:30") == 0


def test_distance_one_degree_latitude():
    d = distance_meters(GeoPoint(0.0, 10.0), GeoPoint(1.0, 10.0))
    assert 111_000 < d < 111_400


def test_geofence_passes_when_location_unknown():
    position = GeoPoint(40.0, -75.0)

    assert is_near_position(None, position) is True
    assert is_near_position(GeoPoint(41.0, -75.0), None) is True
    assert is_near_position(GeoPoint(40.001, -75.0), position) is True
    assert is_near_position(GeoPoint(40.01, -75.0), position) is False


def test_schedule_interval_registers_single_instance_job():
    scheduler = BackgroundScheduler()

    schedule_interval(scheduler, lambda: None, job_id="sweep", seconds=60)

    job = scheduler.get_job("sweep")
    assert job is not None
    assert job.max_instances == 1
    assert job.coalesce is True
    assert job.trigger.interval == timedelta(seconds=60)


def test_schedule_interval_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        schedule_interval(BackgroundScheduler(), lambda: None, job_id="sweep", seconds=0)


def test_started_scheduler_runs_job_right_away():
    ran = threading.Event()
    scheduler = BackgroundScheduler(daemon=True)
    schedule_interval(scheduler, ran.set, job_id="sweep", seconds=3600)

    scheduler.start()
    try:
        assert ran.wait(5)
    finally:
        scheduler.shutdown(wait=False)


def test_schema_splits_into_create_table_statements():
    sql = _strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))

    statements = list(iter_sql_statements(sql))

    assert len(statements) == 4
    assert all(s.startswith("CREATE TABLE IF NOT EXISTS") for s in statements)


def test_sql_splitter_keeps_semicolons_inside_quotes():
    statements = list(iter_sql_statements("-- note; here\nINSERT INTO t VALUES('a;b');\nSELECT 1"))
    assert statements == ["INSERT INTO t VALUES('a;b')", "SELECT 1"]


class _CountingCursor:
    def __init__(self, counts):
        self._counts = counts
        self.executed = []
        self._row = None

    def execute(self, sql):
        self.executed.append(sql)
        table = sql.rsplit("`", 2)[1]
        self._row = (self._counts[table],)

    def fetchone(self):
        return self._row


class _FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.closed = False

    def cursor(self):
        return self._cursor

    def close(self):
        self.closed = True


def test_count_rows_reports_each_volunteer_table(monkeypatch):
    cursor = _CountingCursor({"events": 1, "volunteer_positions": 4, "volunteer_signups": 9, "messages": 0})
    conn = _FakeConnection(cursor)

    class _Factory:
        def __init__(self, config):
            self.config = config

        def connect(self, with_database=True):
            return conn

    monkeypatch.setattr(bootstrap, "DatabaseConnection", _Factory)

    counts = count_rows({"host": "localhost", "user": "root", "password": "", "database": "volunteer_desk_test"})

    assert counts == {"events": 1, "volunteer_positions": 4, "volunteer_signups": 9, "messages": 0}
    assert cursor.executed[0] == "SELECT COUNT(*) FROM `events`"
    assert conn.closed is True


def test_describe_database_lists_counts_and_open_slots():
    lines = describe_database({"volunteer_positions": 4, "volunteer_signups": 9}, filled=7, needed=10)

    assert lines[0].split() == ["volunteer_positions", "4", "rows"]
    assert lines[1].split() == ["volunteer_signups", "9", "rows"]
    assert lines[-1].strip() == "staffing             7/10 slots filled (3 open)"
    assert describe_database({}, 0, 0) == ["  staffing             no positions yet"]
