"""Set every position's filled count back to 0.

Repair tool for counters that drifted from the signup rows. Run it between
events; it does not look at who is currently checked in.
"""
from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.volunteer_desk.volunteer_desk.database.connection import DBConfig, DatabaseConnection
from src.volunteer_desk.volunteer_desk.positions.mysql_position_repository import MySQLPositionRepository


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_settings(dict(settings.DB_CONFIG)))
    count = MySQLPositionRepository(conn).reset_filled_counts()
    print(f"OK: Reset filled count to 0 for {count} position(s)")


if __name__ == "__main__":
    main()
