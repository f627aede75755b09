from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .bank_details.memory_bank_details_repository import InMemoryBankDetailsRepository
from .bank_details.mysql_bank_details_repository import MySQLBankDetailsRepository
from .bank_details.repository import BankDetailsRepository
from .bank_details.service import BankDetailsService
from .core.enums import Role
from .database.connection import DBConfig, DatabaseConnection
from .employees.memory_employee_repository import InMemoryEmployeeRepository
from .employees.model import Employee
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .hierarchy.assignment import AssignmentManager
from .hierarchy.visibility import VisibilityResolver
from .products.memory_product_repository import InMemoryProductRepository
from .products.mysql_product_repository import MySQLProductRepository
from .products.repository import ProductRepository
from .products.service import ProductService
from .sales.memory_sales_repository import InMemorySalesReportRepository
from .sales.mysql_sales_repository import MySQLSalesReportRepository
from .sales.repository import SalesReportRepository
from .sales.service import SalesReportService
from .verification.memory_verification_repository import InMemoryVerificationReportRepository
from .verification.mysql_verification_repository import MySQLVerificationReportRepository
from .verification.repository import VerificationReportRepository
from .verification.service import VerificationReportService
from .visits.memory_visit_repository import InMemoryVisitReportRepository
from .visits.mysql_visit_repository import MySQLVisitReportRepository
from .visits.repository import VisitReportRepository
from .visits.service import VisitReportService

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = {"mysql", "memory"}

DEMO_PRODUCTS = (("Soundbox", 6), ("Android Swipe Machine", 10), ("mATM", 4))


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    products_repo: ProductRepository
    sales_repo: SalesReportRepository
    verification_repo: VerificationReportRepository
    visits_repo: VisitReportRepository
    attendance_repo: AttendanceRepository
    bank_details_repo: BankDetailsRepository

    visibility: VisibilityResolver
    assignments: AssignmentManager
    employee_service: EmployeeService
    product_service: ProductService
    sales_service: SalesReportService
    verification_service: VerificationReportService
    visit_service: VisitReportService
    attendance_service: AttendanceService
    bank_details_service: BankDetailsService


def _wire(
    *,
    employees_repo: EmployeeRepository,
    products_repo: ProductRepository,
    sales_repo: SalesReportRepository,
    verification_repo: VerificationReportRepository,
    visits_repo: VisitReportRepository,
    attendance_repo: AttendanceRepository,
    bank_details_repo: BankDetailsRepository,
) -> Container:
    visibility = VisibilityResolver(employees_repo)
    assignments = AssignmentManager(employees_repo)

    return Container(
        employees_repo=employees_repo,
        products_repo=products_repo,
        sales_repo=sales_repo,
        verification_repo=verification_repo,
        visits_repo=visits_repo,
        attendance_repo=attendance_repo,
        bank_details_repo=bank_details_repo,
        visibility=visibility,
        assignments=assignments,
        employee_service=EmployeeService(
            employees_repo,
            visibility,
            assignments,
            sales=sales_repo,
            verification=verification_repo,
            visits=visits_repo,
            attendance=attendance_repo,
            bank_details=bank_details_repo,
        ),
        product_service=ProductService(products_repo),
        sales_service=SalesReportService(sales_repo, products_repo, visibility),
        verification_service=VerificationReportService(verification_repo, visibility),
        visit_service=VisitReportService(visits_repo, visibility),
        attendance_service=AttendanceService(attendance_repo, employees_repo, visibility),
        bank_details_service=BankDetailsService(bank_details_repo, employees_repo),
    )


def build_mysql_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return _wire(
        employees_repo=MySQLEmployeeRepository(conn),
        products_repo=MySQLProductRepository(conn),
        sales_repo=MySQLSalesReportRepository(conn),
        verification_repo=MySQLVerificationReportRepository(conn),
        visits_repo=MySQLVisitReportRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        bank_details_repo=MySQLBankDetailsRepository(conn),
    )


def build_memory_container(*, seed_demo: bool = False) -> Container:
    employees_repo = InMemoryEmployeeRepository()
    products_repo = InMemoryProductRepository()
    if seed_demo:
        _seed_memory_demo(employees_repo, products_repo)
    return _wire(
        employees_repo=employees_repo,
        products_repo=products_repo,
        sales_repo=InMemorySalesReportRepository(),
        verification_repo=InMemoryVerificationReportRepository(),
        visits_repo=InMemoryVisitReportRepository(),
        attendance_repo=InMemoryAttendanceRepository(),
        bank_details_repo=InMemoryBankDetailsRepository(),
    )


def _seed_memory_demo(employees: InMemoryEmployeeRepository, products: InMemoryProductRepository) -> None:
    """Same demo branch and catalog as ``database/seed.sql`` + ``ensure_demo_hierarchy``."""
    now = datetime.now()
    for employee in (
        Employee(1, "AD00001", "Admin Demo", "9000000000", Role.ADMIN, "Head Office", created_at=now),
        Employee(2, "M00001", "Manager Demo", "9000000000", Role.MANAGER, "Head Office", created_at=now),
        Employee(3, "BDM00001", "BDM Demo", "9000000000", Role.BDM, "Head Office", manager_id=2, created_at=now),
        Employee(4, "BDE00001", "BDE Demo", "9000000000", Role.BDE, "Head Office", manager_id=2, bdm_id=3, created_at=now),
    ):
        employees.add(employee)
    for name, points in DEMO_PRODUCTS:
        products.create_product(name=name, points=points)
    logger.info("Seeded in-memory demo hierarchy and %s products", len(DEMO_PRODUCTS))


def build_container(*, db_config: dict, storage_backend: str = "mysql", seed_demo: bool = False) -> Container:
    backend = (storage_backend or "mysql").lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown STORAGE_BACKEND {storage_backend!r}; expected one of {sorted(STORAGE_BACKENDS)}")
    if backend == "memory":
        return build_memory_container(seed_demo=seed_demo)
    return build_mysql_container(db_config=db_config)
