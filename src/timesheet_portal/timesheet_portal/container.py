from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth.gate import AuthorizationGate
from .auth.model import AuthConfig
from .auth.tokens import TokenService
from .database.connection import DBConfig, DatabaseConnection
from .external.service import ExternalIntegrationService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .timesheets.mysql_time_entry_repository import MySQLTimeEntryRepository
from .timesheets.repository import TimeEntryRepository
from .timesheets.service import TimesheetService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    auth_config: AuthConfig

    users_repo: UserRepository
    schedules_repo: ScheduleRepository
    entries_repo: TimeEntryRepository

    tokens: TokenService
    gate: AuthorizationGate
    auth_service: AuthService
    user_service: UserService
    schedule_service: ScheduleService
    timesheet_service: TimesheetService
    external_service: ExternalIntegrationService


def assemble(
    *,
    auth_config: AuthConfig,
    users_repo: UserRepository,
    schedules_repo: ScheduleRepository,
    entries_repo: TimeEntryRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of the given repositories."""
    tokens = TokenService(auth_config)
    gate = AuthorizationGate(auth_config, tokens)

    timesheet_service = TimesheetService(entries_repo, schedules_repo, gate)

    return Container(
        conn=conn,
        auth_config=auth_config,
        users_repo=users_repo,
        schedules_repo=schedules_repo,
        entries_repo=entries_repo,
        tokens=tokens,
        gate=gate,
        auth_service=AuthService(users_repo, tokens),
        user_service=UserService(users_repo, gate),
        schedule_service=ScheduleService(schedules_repo, users_repo, gate),
        timesheet_service=timesheet_service,
        external_service=ExternalIntegrationService(timesheet_service, users_repo, schedules_repo),
    )


def build_container(*, db_config: dict, auth_config: AuthConfig) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    return assemble(
        auth_config=auth_config,
        users_repo=MySQLUserRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        entries_repo=MySQLTimeEntryRepository(conn),
        conn=conn,
    )
