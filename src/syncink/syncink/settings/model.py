from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.constants import (
    DEFAULT_ALLOW_RETROACTIVE,
    DEFAULT_AUTO_ABSENT_AFTER_DEADLINE,
    DEFAULT_DAILY_DEADLINE,
    DEFAULT_RETROACTIVE_REQUIRES_APPROVAL,
    DEFAULT_TIME_ZONE,
)


@dataclass(frozen=True)
class AttendanceSettings:
    """Global attendance policy (singleton record).

    ``daily_deadline`` is a wall-clock time interpreted in ``time_zone``.
    """

    daily_deadline: time = DEFAULT_DAILY_DEADLINE
    time_zone: str = DEFAULT_TIME_ZONE
    allow_retroactive: bool = DEFAULT_ALLOW_RETROACTIVE
    retroactive_requires_approval: bool = DEFAULT_RETROACTIVE_REQUIRES_APPROVAL
    auto_absent_after_deadline: bool = DEFAULT_AUTO_ABSENT_AFTER_DEADLINE
