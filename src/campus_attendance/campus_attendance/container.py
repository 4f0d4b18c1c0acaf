from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .academics.mysql_academic_repository import MySQLAssignmentRepository, MySQLStructureRepository
from .academics.repository import AssignmentRepository, StructureRepository
from .academics.service import AcademicService
from .attendance.debounce import ScanGate
from .attendance.factory import ScanStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService, AttendanceStatusService
from .attendance.sms import LoggingSmsSender, SmsSender
from .core.constants import DEFAULT_IMPORT_CHUNK_SIZE, DEFAULT_SCAN_DEBOUNCE_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .people.identity import IdentityResolver
from .people.importer import ImportService
from .people.mysql_person_repository import MySQLPersonRepository
from .people.repository import PersonRepository
from .people.service import ActivationService, ProfileService
from .rules.mysql_rules_repository import MySQLRulesRepository
from .rules.repository import RulesRepository
from .rules.service import RulesService
from .timetables.mysql_timetable_repository import MySQLTimetableRepository
from .timetables.repository import TimetableRepository
from .timetables.service import TimetableService
from .users.mysql_account_repository import MySQLAccountRepository
from .users.repository import AccountRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    accounts_repo: AccountRepository
    people_repo: PersonRepository
    attendance_repo: AttendanceRepository
    structure_repo: StructureRepository
    assignments_repo: AssignmentRepository
    timetables_repo: TimetableRepository
    notifications_repo: NotificationRepository
    rules_repo: RulesRepository

    auth_service: AuthService
    activation_service: ActivationService
    profile_service: ProfileService
    identity_resolver: IdentityResolver
    import_service: ImportService
    attendance_service: AttendanceService
    attendance_status_service: AttendanceStatusService
    academic_service: AcademicService
    timetable_service: TimetableService
    notification_service: NotificationService
    rules_service: RulesService


def build_services(
    *,
    accounts: AccountRepository,
    people: PersonRepository,
    attendance: AttendanceRepository,
    structure: StructureRepository,
    assignments: AssignmentRepository,
    timetables: TimetableRepository,
    notifications: NotificationRepository,
    rules: RulesRepository,
    conn: Optional[DatabaseConnection] = None,
    scan_debounce_seconds: float = DEFAULT_SCAN_DEBOUNCE_SECONDS,
    import_chunk_size: int = DEFAULT_IMPORT_CHUNK_SIZE,
    sms: Optional[SmsSender] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, in-memory in tests)."""

    resolver = IdentityResolver(accounts, people)
    academic_service = AcademicService(structure, assignments, accounts)

    return Container(
        conn=conn,
        accounts_repo=accounts,
        people_repo=people,
        attendance_repo=attendance,
        structure_repo=structure,
        assignments_repo=assignments,
        timetables_repo=timetables,
        notifications_repo=notifications,
        rules_repo=rules,
        auth_service=AuthService(accounts),
        activation_service=ActivationService(people, accounts),
        profile_service=ProfileService(people),
        identity_resolver=resolver,
        import_service=ImportService(people, chunk_size=import_chunk_size),
        attendance_service=AttendanceService(
            attendance,
            resolver,
            gate=ScanGate(scan_debounce_seconds),
            sms=sms,
            strategy_factory=ScanStrategyFactory(),
        ),
        attendance_status_service=AttendanceStatusService(people, attendance),
        academic_service=academic_service,
        timetable_service=TimetableService(timetables, academic_service),
        notification_service=NotificationService(notifications),
        rules_service=RulesService(rules),
    )


def build_container(
    *,
    db_config: dict,
    scan_debounce_seconds: float = DEFAULT_SCAN_DEBOUNCE_SECONDS,
    import_chunk_size: int = DEFAULT_IMPORT_CHUNK_SIZE,
    sms_enabled: bool = True,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    return build_services(
        conn=conn,
        accounts=MySQLAccountRepository(conn),
        people=MySQLPersonRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        structure=MySQLStructureRepository(conn),
        assignments=MySQLAssignmentRepository(conn),
        timetables=MySQLTimetableRepository(conn),
        notifications=MySQLNotificationRepository(conn),
        rules=MySQLRulesRepository(conn),
        scan_debounce_seconds=scan_debounce_seconds,
        import_chunk_size=import_chunk_size,
        sms=LoggingSmsSender() if sms_enabled else None,
    )
