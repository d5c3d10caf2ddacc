"""Job-history service layer — async queries and writes.

All methods are static async and take the unit-of-work session, following
the project convention.  Error translation, caching and notifications are
the hooks' job (``hr_records.job_history.hooks``).
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hr_records.common.constants import JobHistoryEditPolicy
from hr_records.common.exceptions import NotFoundException
from hr_records.common.filters import apply_filters, apply_sorting
from hr_records.employees.models import Employee
from hr_records.employees.schemas import AssignmentSummary
from hr_records.job_history.models import Job, JobHistory
from hr_records.job_history.schemas import AssignmentForm, JobHistoryRow, JobOption


def _today() -> date:
    return date.today()


def to_row(entry: JobHistory) -> JobHistoryRow:
    """Flatten a loaded entry and its joined display fields."""
    return JobHistoryRow(
        empno=entry.empno,
        effdate=entry.effdate,
        jobcode=entry.jobcode,
        deptcode=entry.deptcode,
        salary=entry.salary,
        employee_name=entry.employee.full_name if entry.employee else None,
        deptname=entry.department.deptname if entry.department else None,
        jobdesc=entry.job.jobdesc if entry.job else None,
    )


class JobHistoryService:
    """Async operations for jobs and job-history rows."""

    # ── Jobs ────────────────────────────────────────────────────────

    @staticmethod
    async def list_jobs(db: AsyncSession) -> list[JobOption]:
        result = await db.execute(select(Job).order_by(Job.jobdesc, Job.jobcode))
        return [JobOption.model_validate(job) for job in result.scalars().all()]

    # ── List (filterable, unpaginated) ──────────────────────────────

    @staticmethod
    async def list_job_history(
        db: AsyncSession,
        *,
        employee: Optional[str] = None,
        department: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[JobHistoryRow]:
        """Job-history rows matching every given filter, newest first."""

        query = select(JobHistory).options(
            selectinload(JobHistory.employee),
            selectinload(JobHistory.department),
            selectinload(JobHistory.job),
        )
        query = apply_filters(
            query, JobHistory, {"empno": employee, "deptcode": department},
        )
        query = apply_sorting(query, JobHistory, sort, default=("-effdate", "empno"))
        if limit is not None:
            query = query.limit(limit)

        result = await db.execute(query)
        return [to_row(entry) for entry in result.scalars().all()]

    # ── Current assignment per employee ─────────────────────────────

    @staticmethod
    async def current_entries(
        db: AsyncSession,
        empnos: Optional[Iterable[str]] = None,
    ) -> dict[str, JobHistory]:
        """Latest job-history row per employee (optionally restricted)."""

        latest = select(
            JobHistory.empno,
            func.max(JobHistory.effdate).label("effdate"),
        ).group_by(JobHistory.empno)
        if empnos is not None:
            empnos = list(empnos)
            if not empnos:
                return {}
            latest = latest.where(JobHistory.empno.in_(empnos))
        latest = latest.subquery()

        result = await db.execute(
            select(JobHistory)
            .join(
                latest,
                and_(
                    JobHistory.empno == latest.c.empno,
                    JobHistory.effdate == latest.c.effdate,
                ),
            )
            .options(
                selectinload(JobHistory.department),
                selectinload(JobHistory.job),
            )
        )
        return {entry.empno: entry for entry in result.scalars().all()}

    @staticmethod
    def summarize(entry: JobHistory) -> AssignmentSummary:
        return AssignmentSummary(
            effdate=entry.effdate,
            jobcode=entry.jobcode,
            jobdesc=entry.job.jobdesc if entry.job else None,
            deptcode=entry.deptcode,
            deptname=entry.department.deptname if entry.department else None,
            salary=entry.salary,
        )

    # ── Writes ──────────────────────────────────────────────────────

    @staticmethod
    async def add_entry(
        db: AsyncSession,
        empno: str,
        effdate: date,
        form: AssignmentForm,
    ) -> JobHistory:
        entry = JobHistory(
            empno=empno,
            effdate=effdate,
            jobcode=form.jobcode,
            deptcode=form.deptcode,
            salary=form.salary,
        )
        db.add(entry)
        await db.flush()
        return entry

    @staticmethod
    async def record_assignment(
        db: AsyncSession,
        empno: str,
        form: AssignmentForm,
        *,
        policy: JobHistoryEditPolicy = JobHistoryEditPolicy.overwrite,
    ) -> JobHistory:
        """Upsert an assignment on its effective-date key.

        ``overwrite`` edits the current row in place unless an explicit
        ``effdate`` is given; ``append`` dates a new row today unless an
        explicit ``effdate`` is given.  An existing row on the chosen key
        is overwritten either way.
        """
        if await db.get(Employee, empno) is None:
            raise NotFoundException("Employee", empno)

        effdate = form.effdate
        if effdate is None:
            current = (await JobHistoryService.current_entries(db, [empno])).get(empno)
            if policy is JobHistoryEditPolicy.overwrite and current is not None:
                effdate = current.effdate
            else:
                effdate = _today()

        entry = await db.get(JobHistory, (empno, effdate))
        if entry is None:
            return await JobHistoryService.add_entry(db, empno, effdate, form)

        entry.jobcode = form.jobcode
        if "deptcode" in form.model_fields_set:
            entry.deptcode = form.deptcode
        if "salary" in form.model_fields_set:
            entry.salary = form.salary
        await db.flush()
        return entry

    @staticmethod
    async def delete_entry(db: AsyncSession, empno: str, effdate: date) -> None:
        result = await db.execute(
            delete(JobHistory).where(
                JobHistory.empno == empno,
                JobHistory.effdate == effdate,
            )
        )
        if result.rowcount == 0:
            raise NotFoundException("Job history entry", f"{empno}@{effdate.isoformat()}")

    @staticmethod
    async def count_for(
        db: AsyncSession,
        *,
        empno: Optional[str] = None,
        deptcode: Optional[str] = None,
    ) -> int:
        query = apply_filters(
            select(func.count()).select_from(JobHistory),
            JobHistory,
            {"empno": empno, "deptcode": deptcode},
        )
        return (await db.execute(query)).scalar_one()
