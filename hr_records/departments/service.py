"""Department service layer — async CRUD plus the employee-count projection."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hr_records.common.constants import DeleteCascadePolicy
from hr_records.common.exceptions import NotFoundException
from hr_records.common.filters import apply_search
from hr_records.common.forms import generate_code
from hr_records.common.schemas import OptionItem
from hr_records.departments.models import Department
from hr_records.departments.schemas import DepartmentForm, DepartmentRow, DepartmentUpdateForm
from hr_records.job_history.models import JobHistory

_SORTABLE = {
    "deptcode": Department.deptcode,
    "deptname": Department.deptname,
}


def _with_employee_count():
    """Department + count of referencing job-history rows (one outer join)."""
    employee_count = func.count(JobHistory.empno).label("employee_count")
    return (
        select(Department.deptcode, Department.deptname, employee_count)
        .outerjoin(JobHistory, JobHistory.deptcode == Department.deptcode)
        .group_by(Department.deptcode, Department.deptname)
    ), employee_count


class DepartmentService:
    """Async CRUD operations for departments."""

    # ── List with employee counts ───────────────────────────────────

    @staticmethod
    async def list_departments(
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> list[DepartmentRow]:
        query, employee_count = _with_employee_count()
        query = apply_search(query, Department, search, ("deptcode", "deptname"))

        # The projection is not a mapped entity, so sorting is resolved here.
        key = (sort or "").lstrip("-")
        if key == "employee_count":
            column = employee_count
        else:
            column = _SORTABLE.get(key)
        if column is None:
            query = query.order_by(Department.deptname.asc(), Department.deptcode.asc())
        else:
            query = query.order_by(column.desc() if sort.startswith("-") else column.asc())

        result = await db.execute(query)
        return [DepartmentRow.model_validate(dict(row._mapping)) for row in result.all()]

    @staticmethod
    async def get_department_with_count(db: AsyncSession, deptcode: str) -> DepartmentRow:
        query, _ = _with_employee_count()
        row = (await db.execute(query.where(Department.deptcode == deptcode))).first()
        if row is None:
            raise NotFoundException("Department", deptcode)
        return DepartmentRow.model_validate(dict(row._mapping))

    @staticmethod
    async def department_options(db: AsyncSession) -> list[OptionItem]:
        result = await db.execute(
            select(Department).order_by(Department.deptname, Department.deptcode)
        )
        return [
            OptionItem(value=d.deptcode, label=d.deptname or d.deptcode)
            for d in result.scalars().all()
        ]

    @staticmethod
    async def count_departments(db: AsyncSession) -> int:
        return (await db.execute(select(func.count()).select_from(Department))).scalar_one()

    # ── Create / update ─────────────────────────────────────────────

    @staticmethod
    async def create_department(db: AsyncSession, data: DepartmentForm) -> Department:
        department = Department(
            deptcode=data.deptcode or generate_code("D"),
            deptname=data.deptname,
        )
        db.add(department)
        await db.flush()
        return department

    @staticmethod
    async def update_department(
        db: AsyncSession,
        deptcode: str,
        data: DepartmentUpdateForm,
    ) -> Department:
        department = await db.get(Department, deptcode)
        if department is None:
            raise NotFoundException("Department", deptcode)
        department.deptname = data.deptname
        await db.flush()
        return department

    # ── Delete ──────────────────────────────────────────────────────

    @staticmethod
    async def delete_department(
        db: AsyncSession,
        deptcode: str,
        *,
        cascade: DeleteCascadePolicy = DeleteCascadePolicy.job_history,
    ) -> None:
        """Unconditional delete; with the job-history policy, rows are detached first."""
        if cascade is DeleteCascadePolicy.job_history:
            await db.execute(
                update(JobHistory)
                .where(JobHistory.deptcode == deptcode)
                .values(deptcode=None)
            )
        result = await db.execute(delete(Department).where(Department.deptcode == deptcode))
        if result.rowcount == 0:
            raise NotFoundException("Department", deptcode)
