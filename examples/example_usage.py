"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.syncink.syncink.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    container.attendance_service.run_auto_absent_sweep()
    for stats in container.stats_service.compute_user_stats():
        print(f"{stats.name}: {stats.present_days} present, weekly avg {stats.weekly_average}s")


if __name__ == "__main__":
    main()
