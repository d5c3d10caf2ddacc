"""Dashboard figures — each its own cached query, loaded independently."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from hr_records.common.constants import (
    AVERAGE_SALARY,
    DEPARTMENT_COUNT,
    EMPLOYEE_COUNT,
    RECENT_JOB_HISTORY,
    RECENT_JOB_HISTORY_LIMIT,
)
from hr_records.common.exceptions import AppException
from hr_records.common.hooks import RecordHooks
from hr_records.dashboard.schemas import AverageSalaryFigure, DashboardView, FigureResult
from hr_records.dashboard.service import AVERAGE_SALARY_FUNCTION, DashboardService, round_money
from hr_records.job_history.schemas import JobHistoryRow

logger = logging.getLogger(__name__)


class DashboardHooks(RecordHooks):
    entity = "Dashboard"
    plural = "dashboard figures"

    async def employee_count(self) -> int:
        return await self._query(
            (EMPLOYEE_COUNT,), DashboardService.employee_count, label="employee count",
        )

    async def department_count(self) -> int:
        return await self._query(
            (DEPARTMENT_COUNT,), DashboardService.department_count, label="department count",
        )

    async def recent_job_history(self) -> list[JobHistoryRow]:
        return await self._query(
            (RECENT_JOB_HISTORY, RECENT_JOB_HISTORY_LIMIT),
            DashboardService.recent_job_history,
            label="recent job history",
        )

    async def average_salary(self) -> AverageSalaryFigure:
        return await self._cached(
            (AVERAGE_SALARY,), self._load_average_salary, label="average salary",
        )

    async def _load_average_salary(self) -> AverageSalaryFigure:
        try:
            value = await self.store.call(AVERAGE_SALARY_FUNCTION)
        except SQLAlchemyError as exc:
            logger.info(
                "%s() unavailable, averaging client-side: %s",
                AVERAGE_SALARY_FUNCTION, getattr(exc, "orig", exc),
            )
            value = await self._read(DashboardService.client_average_salary)
            return AverageSalaryFigure(value=value, source="client")
        return AverageSalaryFigure(value=round_money(value), source="server")

    # ── Combined view ───────────────────────────────────────────────

    async def summary(self) -> DashboardView:
        """All four figures; one failing figure does not hide the others."""
        names = ("employee_count", "department_count", "recent_job_history", "average_salary")
        results = await asyncio.gather(
            *(getattr(self, name)() for name in names),
            return_exceptions=True,
        )
        return DashboardView(**{
            name: _figure(result) for name, result in zip(names, results)
        })


def _figure(result: Any) -> FigureResult:
    if isinstance(result, AppException):
        return FigureResult(status="error", error=result.detail)
    if isinstance(result, BaseException):
        raise result
    return FigureResult(status="ok", value=result)
