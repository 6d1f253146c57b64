from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AttendanceSettings
from .repository import SettingsRepository

SETTINGS_ROW_ID = 1


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[AttendanceSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT daily_deadline, time_zone, allow_retroactive,
                       retroactive_requires_approval, auto_absent_after_deadline
                FROM attendance_settings
                WHERE settings_id=%s
                """,
                (SETTINGS_ROW_ID,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return AttendanceSettings(
                daily_deadline=parse_hhmm(str(row["daily_deadline"])),
                time_zone=row["time_zone"],
                allow_retroactive=bool(row["allow_retroactive"]),
                retroactive_requires_approval=bool(row["retroactive_requires_approval"]),
                auto_absent_after_deadline=bool(row["auto_absent_after_deadline"]),
            )

    def save(self, settings: AttendanceSettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_settings(
                    settings_id, daily_deadline, time_zone, allow_retroactive,
                    retroactive_requires_approval, auto_absent_after_deadline
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    daily_deadline=VALUES(daily_deadline),
                    time_zone=VALUES(time_zone),
                    allow_retroactive=VALUES(allow_retroactive),
                    retroactive_requires_approval=VALUES(retroactive_requires_approval),
                    auto_absent_after_deadline=VALUES(auto_absent_after_deadline)
                """,
                (
                    SETTINGS_ROW_ID,
                    format_hhmm(settings.daily_deadline),
                    settings.time_zone,
                    int(settings.allow_retroactive),
                    int(settings.retroactive_requires_approval),
                    int(settings.auto_absent_after_deadline),
                ),
            )
