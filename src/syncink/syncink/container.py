from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.stats import StatsService
from .core.constants import DEFAULT_TIME_ZONE
from .database.connection import DatabaseConnection, DBConfig
from .retroactive.mysql_retroactive_repository import MySQLRetroactiveRequestRepository
from .retroactive.repository import RetroactiveRequestRepository
from .retroactive.service import RetroactiveRequestService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    requests_repo: RetroactiveRequestRepository
    settings_repo: SettingsRepository

    settings_service: SettingsService
    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    stats_service: StatsService
    retroactive_service: RetroactiveRequestService

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    requests_repo: RetroactiveRequestRepository,
    settings_repo: SettingsRepository,
    default_time_zone: str = DEFAULT_TIME_ZONE,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories."""
    settings_service = SettingsService(settings_repo, default_time_zone=default_time_zone)

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        requests_repo=requests_repo,
        settings_repo=settings_repo,
        settings_service=settings_service,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, attendance_repo, requests_repo),
        attendance_service=AttendanceService(attendance_repo, users_repo, settings_service),
        stats_service=StatsService(attendance_repo, users_repo, settings_service),
        retroactive_service=RetroactiveRequestService(requests_repo, attendance_repo, settings_service),
        conn=conn,
    )


def build_container(*, db_config: dict, default_time_zone: str = DEFAULT_TIME_ZONE) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        requests_repo=MySQLRetroactiveRequestRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        default_time_zone=default_time_zone,
        conn=conn,
    )
