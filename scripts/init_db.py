from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.volunteer_desk.volunteer_desk.database.bootstrap import (
    SCHEMA_PATH,
    apply_schema,
    count_rows,
    describe_database,
    staffing_totals,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the volunteer desk tables and report what they hold")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only report row counts; do not apply schema.sql",
    )
    parser.add_argument("--schema", default=str(SCHEMA_PATH), help="Path to the schema file")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    if not args.check:
        apply_schema(db_config, schema_path=args.schema)
        print(f"Applied {Path(args.schema).name} -> {target}")
    else:
        print(f"Volunteer desk database {target}")

    filled, needed = staffing_totals(db_config)
    for line in describe_database(count_rows(db_config), filled, needed):
        print(line)


if __name__ == "__main__":
    main()
