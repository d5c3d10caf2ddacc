"""Dashboard service — read-only aggregate queries.

All methods are static async, following the project convention.
Counts are computed with COUNT at DB level; the client-side average
reads one current salary per employee.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hr_records.common.constants import RECENT_JOB_HISTORY_LIMIT
from hr_records.departments.service import DepartmentService
from hr_records.employees.service import EmployeeService
from hr_records.job_history.schemas import JobHistoryRow
from hr_records.job_history.service import JobHistoryService

CENTS = Decimal("0.01")
AVERAGE_SALARY_FUNCTION = "get_average_salary"


def round_money(value: Any) -> Decimal:
    """Round to two decimal places, half up; ``None`` → 0.00."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def average(values: Iterable[Optional[Decimal]]) -> Decimal:
    """``sum / count`` over every row, a missing salary counting as 0."""
    amounts = [Decimal(str(v)) if v is not None else Decimal(0) for v in values]
    if not amounts:
        return Decimal("0.00")
    return round_money(sum(amounts) / len(amounts))


class DashboardService:
    """Async dashboard aggregation queries."""

    @staticmethod
    async def employee_count(db: AsyncSession) -> int:
        return await EmployeeService.count_employees(db)

    @staticmethod
    async def department_count(db: AsyncSession) -> int:
        return await DepartmentService.count_departments(db)

    @staticmethod
    async def recent_job_history(
        db: AsyncSession,
        limit: int = RECENT_JOB_HISTORY_LIMIT,
    ) -> list[JobHistoryRow]:
        """Most recent job-history rows with employee and department names."""
        return await JobHistoryService.list_job_history(db, limit=limit)

    @staticmethod
    async def client_average_salary(db: AsyncSession) -> Decimal:
        """Fallback for when the server-side aggregate is unavailable."""
        current = await JobHistoryService.current_entries(db)
        return average(entry.salary for entry in current.values())
