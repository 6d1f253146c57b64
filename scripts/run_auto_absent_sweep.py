"""Run the auto-absent sweep once.

Meant for cron (e.g. every 15 minutes); the sweep is idempotent, so extra runs
only fill gaps left since the previous one.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.syncink.syncink.container import build_container
from src.syncink.syncink.core.constants import DEFAULT_TIME_ZONE
from src.syncink.syncink.core.logging import setup_logging

logger = logging.getLogger("syncink.sweep")


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        default_time_zone=getattr(settings, "DEFAULT_TIME_ZONE", DEFAULT_TIME_ZONE),
    )
    created = container.attendance_service.run_auto_absent_sweep()
    logger.info("Sweep finished: %s auto-absent entries created", len(created))
    return 0


if __name__ == "__main__":
    sys.exit(main())
