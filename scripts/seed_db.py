from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.syncink.syncink.container import build_container
from src.syncink.syncink.core.constants import DEFAULT_TIME_ZONE


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    container = build_container(
        db_config=db_config,
        default_time_zone=getattr(settings, "DEFAULT_TIME_ZONE", DEFAULT_TIME_ZONE),
    )
    current = container.settings_service.get_settings()
    created = container.user_service.ensure_default_users()

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(deadline={current.daily_deadline:%H:%M} tz={current.time_zone}, new users={len(created)})"
    )


if __name__ == "__main__":
    main()
