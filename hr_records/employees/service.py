"""Employee service layer — async CRUD.

Uses:
  - ``apply_search / apply_sorting`` from hr_records.common.filters
  - ``JobHistoryService.current_entries`` for the joined current assignment
  - ``NotFoundException`` from hr_records.common.exceptions
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_records.common.constants import DeleteCascadePolicy
from hr_records.common.exceptions import NotFoundException
from hr_records.common.filters import apply_search, apply_sorting
from hr_records.common.forms import generate_code
from hr_records.common.schemas import OptionItem
from hr_records.employees.models import Employee
from hr_records.employees.schemas import EmployeeForm, EmployeeRow, EmployeeUpdateForm
from hr_records.job_history.models import JobHistory
from hr_records.job_history.service import JobHistoryService

SEARCH_COLUMNS = ("empno", "firstname", "lastname", "email")


# ═════════════════════════════════════════════════════════════════════
# EmployeeService
# ═════════════════════════════════════════════════════════════════════


class EmployeeService:
    """Async CRUD operations for employees."""

    # ── List (searchable, unpaginated) ──────────────────────────────

    @staticmethod
    async def list_employees(
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> list[EmployeeRow]:
        """Employee table rows, each with its current assignment."""

        query = apply_search(select(Employee), Employee, search, SEARCH_COLUMNS)
        query = apply_sorting(query, Employee, sort, default=("lastname", "firstname", "empno"))
        employees = (await db.execute(query)).scalars().all()

        current = await JobHistoryService.current_entries(db, [e.empno for e in employees])
        rows = []
        for employee in employees:
            row = EmployeeRow.model_validate(employee)
            if employee.empno in current:
                row.current = JobHistoryService.summarize(current[employee.empno])
            rows.append(row)
        return rows

    @staticmethod
    async def get_employee(db: AsyncSession, empno: str) -> Employee:
        employee = await db.get(Employee, empno)
        if employee is None:
            raise NotFoundException("Employee", empno)
        return employee

    @staticmethod
    async def get_employee_row(db: AsyncSession, empno: str) -> EmployeeRow:
        employee = await EmployeeService.get_employee(db, empno)
        row = EmployeeRow.model_validate(employee)
        current = await JobHistoryService.current_entries(db, [empno])
        if empno in current:
            row.current = JobHistoryService.summarize(current[empno])
        return row

    @staticmethod
    async def employee_options(db: AsyncSession) -> list[OptionItem]:
        """Picker entries labelled "Last, First"."""
        result = await db.execute(
            select(Employee).order_by(Employee.lastname, Employee.firstname, Employee.empno)
        )
        return [
            OptionItem(value=e.empno, label=e.sort_name or e.empno)
            for e in result.scalars().all()
        ]

    @staticmethod
    async def count_employees(db: AsyncSession) -> int:
        return (await db.execute(select(func.count()).select_from(Employee))).scalar_one()

    # ── Create ──────────────────────────────────────────────────────

    @staticmethod
    async def create_employee(db: AsyncSession, data: EmployeeForm) -> Employee:
        """Insert the employee row only; the first assignment is a separate write."""

        employee = Employee(
            empno=data.empno or generate_code("E"),
            firstname=data.firstname,
            lastname=data.lastname,
            gender=data.gender.value if data.gender else None,
            birthdate=data.birthdate,
            email=data.email,
            hiredate=data.hiredate,
            sepdate=data.sepdate,
        )
        db.add(employee)
        await db.flush()
        return employee

    # ── Update ──────────────────────────────────────────────────────

    @staticmethod
    async def update_employee(
        db: AsyncSession,
        empno: str,
        data: EmployeeUpdateForm,
    ) -> Employee:
        employee = await EmployeeService.get_employee(db, empno)
        for field, value in data.employee_changes().items():
            setattr(employee, field, value)
        await db.flush()
        return employee

    # ── Delete ──────────────────────────────────────────────────────

    @staticmethod
    async def count_dependents(db: AsyncSession, empno: str) -> int:
        """Job-history rows that reference the employee."""
        return await JobHistoryService.count_for(db, empno=empno)

    @staticmethod
    async def delete_employee(
        db: AsyncSession,
        empno: str,
        *,
        cascade: DeleteCascadePolicy = DeleteCascadePolicy.job_history,
    ) -> None:
        if cascade is DeleteCascadePolicy.job_history:
            await db.execute(delete(JobHistory).where(JobHistory.empno == empno))
        result = await db.execute(delete(Employee).where(Employee.empno == empno))
        if result.rowcount == 0:
            raise NotFoundException("Employee", empno)
