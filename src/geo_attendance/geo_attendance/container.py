from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .approvals.mysql_review_repository import MySQLReviewQueueRepository
from .approvals.repository import ReviewQueueRepository
from .approvals.service import ApprovalQueueService
from .attendance.factory import AdmissionStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.enums import GeofenceMode
from .database.connection import DBConfig, DatabaseConnection
from .devices.mysql_device_repository import MySQLDeviceRepository
from .devices.repository import DeviceRepository
from .devices.service import DeviceService
from .payroll.bonus_service import BonusService
from .payroll.mysql_payroll_repository import MySQLBonusRepository, MySQLSalarySlipRepository
from .payroll.repository import BonusRepository, SalarySlipRepository
from .payroll.service import SalarySlipService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .storage.photo_store import LocalPhotoStore, PhotoStore
from .users.mysql_employee_repository import MySQLEmployeeRepository
from .users.repository import EmployeeRepository
from .users.service import EmployeeService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    reviews_repo: ReviewQueueRepository
    devices_repo: DeviceRepository
    settings_repo: SettingsRepository
    bonuses_repo: BonusRepository
    slips_repo: SalarySlipRepository

    employee_service: EmployeeService
    settings_service: SettingsService
    device_service: DeviceService
    approval_service: ApprovalQueueService
    attendance_service: AttendanceService
    bonus_service: BonusService
    salary_slip_service: SalarySlipService

    photos: Optional[PhotoStore] = None
    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    reviews_repo: ReviewQueueRepository,
    devices_repo: DeviceRepository,
    settings_repo: SettingsRepository,
    bonuses_repo: BonusRepository,
    slips_repo: SalarySlipRepository,
    photos: Optional[PhotoStore] = None,
    default_mode: GeofenceMode = GeofenceMode.REVIEW,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""
    employee_service = EmployeeService(employees_repo)
    settings_service = SettingsService(settings_repo, default_mode=default_mode)
    device_service = DeviceService(devices_repo)
    approval_service = ApprovalQueueService(reviews_repo, attendance_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        settings_service,
        device_service,
        approval_service,
        photos=photos,
        strategy_factory=AdmissionStrategyFactory(),
    )
    bonus_service = BonusService(bonuses_repo, employees_repo)
    salary_slip_service = SalarySlipService(slips_repo, attendance_repo, bonuses_repo, employees_repo)

    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        reviews_repo=reviews_repo,
        devices_repo=devices_repo,
        settings_repo=settings_repo,
        bonuses_repo=bonuses_repo,
        slips_repo=slips_repo,
        employee_service=employee_service,
        settings_service=settings_service,
        device_service=device_service,
        approval_service=approval_service,
        attendance_service=attendance_service,
        bonus_service=bonus_service,
        salary_slip_service=salary_slip_service,
        photos=photos,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    photo_dir: str = "uploads/photos",
    default_mode: GeofenceMode = GeofenceMode.REVIEW,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return build_services(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        reviews_repo=MySQLReviewQueueRepository(conn),
        devices_repo=MySQLDeviceRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        bonuses_repo=MySQLBonusRepository(conn),
        slips_repo=MySQLSalarySlipRepository(conn),
        photos=LocalPhotoStore(photo_dir),
        default_mode=default_mode,
        conn=conn,
    )
