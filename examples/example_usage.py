"""Example: use the service layer without Flask.

Prints the staffing overview and runs one auto check-out sweep.
"""

import importlib

from config import get_settings_module

from src.volunteer_desk.volunteer_desk.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    for row in container.position_service.staffing_overview():
        p = row.position
        print(f"{p.name}: filled {p.filled}/{p.needed}, arrived {row.arrived}, status {row.status.value}")

    report = container.auto_checkout.run(container.signups_repo.list_all())
    print(report.summary())


if __name__ == "__main__":
    main()
