from __future__ import annotations

import logging
from dataclasses import replace
from datetime import time
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..common.validators import require_bool
from ..core.constants import DEFAULT_TIME_ZONE
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..core.permissions import CAN_MANAGE_SETTINGS, require
from .model import AttendanceSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


def validate_time_zone(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Time zone is required")
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown time zone: {name}")
    return name


def coerce_deadline(value: Union[str, time]) -> time:
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    try:
        return parse_hhmm(str(value))
    except ValueError:
        raise ValidationError("Deadline must use the HH:MM format")


class SettingsService:
    """Use case: read and change the global attendance settings."""

    def __init__(self, settings: SettingsRepository, *, default_time_zone: str = DEFAULT_TIME_ZONE):
        self._settings = settings
        self._default_time_zone = default_time_zone

    def get_settings(self) -> AttendanceSettings:
        current = self._settings.get()
        if current is None:
            current = AttendanceSettings(time_zone=validate_time_zone(self._default_time_zone))
            self._settings.save(current)
            logger.info(
                "Initialized attendance settings: deadline=%s tz=%s",
                format_hhmm(current.daily_deadline),
                current.time_zone,
            )
        return current

    def update_settings(
        self,
        *,
        current_role: Role,
        daily_deadline: Union[str, time, None] = None,
        time_zone: Optional[str] = None,
        allow_retroactive: Optional[bool] = None,
        retroactive_requires_approval: Optional[bool] = None,
        auto_absent_after_deadline: Optional[bool] = None,
    ) -> AttendanceSettings:
        require(CAN_MANAGE_SETTINGS, current_role, "Only administrators can change settings")

        current = self.get_settings()
        changes: dict = {}
        if daily_deadline is not None:
            changes["daily_deadline"] = coerce_deadline(daily_deadline)
        if time_zone is not None:
            changes["time_zone"] = validate_time_zone(time_zone)
        if allow_retroactive is not None:
            changes["allow_retroactive"] = require_bool(allow_retroactive, "Allow retroactive")
        if retroactive_requires_approval is not None:
            changes["retroactive_requires_approval"] = require_bool(
                retroactive_requires_approval, "Retroactive requires approval"
            )
        if auto_absent_after_deadline is not None:
            changes["auto_absent_after_deadline"] = require_bool(
                auto_absent_after_deadline, "Auto absent after deadline"
            )

        updated = replace(current, **changes)
        self._settings.save(updated)
        logger.info("Attendance settings updated: %s", sorted(changes))
        return updated
