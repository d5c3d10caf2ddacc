"""Job-history and job data-access hooks."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Union

from hr_records.common.constants import (
    AVERAGE_SALARY,
    DEPARTMENTS_WITH_COUNT,
    EMPLOYEES,
    JOB_HISTORY,
    JOBS,
    RECENT_JOB_HISTORY,
    RECENT_JOB_HISTORY_LIMIT,
    JobHistoryEditPolicy,
)
from hr_records.common.forms import validate_form
from hr_records.common.hooks import RecordHooks
from hr_records.job_history.schemas import AssignmentForm, JobHistoryRow, JobOption
from hr_records.job_history.service import JobHistoryService, to_row

JOB_HISTORY_INVALIDATES = (
    JOB_HISTORY,
    RECENT_JOB_HISTORY,
    AVERAGE_SALARY,
    DEPARTMENTS_WITH_COUNT,
    EMPLOYEES,
)


class JobHistoryHooks(RecordHooks):
    entity = "Job history entry"
    plural = "job history"
    invalidates = JOB_HISTORY_INVALIDATES

    # ── Queries ─────────────────────────────────────────────────────

    async def rows(
        self,
        *,
        employee: Optional[str] = None,
        department: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> list[JobHistoryRow]:
        return await self._query(
            (JOB_HISTORY, employee, department, sort),
            lambda db: JobHistoryService.list_job_history(
                db, employee=employee, department=department, sort=sort,
            ),
        )

    async def recent(self, limit: int = RECENT_JOB_HISTORY_LIMIT) -> list[JobHistoryRow]:
        return await self._query(
            (RECENT_JOB_HISTORY, limit),
            lambda db: JobHistoryService.list_job_history(db, limit=limit),
            label="recent job history",
        )

    async def jobs(self) -> list[JobOption]:
        return await self._query((JOBS,), JobHistoryService.list_jobs, label="jobs")

    # ── Mutations ───────────────────────────────────────────────────

    async def record_assignment(
        self,
        empno: str,
        values: Union[AssignmentForm, Mapping[str, Any]],
    ) -> JobHistoryRow:
        form = validate_form(AssignmentForm, values)
        policy = JobHistoryEditPolicy(self.settings.JOB_HISTORY_EDIT_POLICY)

        async def _record(db):
            entry = await JobHistoryService.record_assignment(db, empno, form, policy=policy)
            await db.refresh(entry, ["employee", "department", "job"])
            return to_row(entry)

        return await self._mutate("record", _record, entity_id=empno)

    async def delete_entry(self, empno: str, effdate: date) -> None:
        await self._mutate(
            "delete",
            lambda db: JobHistoryService.delete_entry(db, empno, effdate),
            entity_id=f"{empno}@{effdate.isoformat()}",
        )
