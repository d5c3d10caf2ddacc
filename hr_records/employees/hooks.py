"""Employee data-access hooks.

Adding an employee with a first assignment is two independent writes:
the employee row is kept even when the job-history insert fails, and the
caller is told about the missing assignment.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from sqlalchemy.exc import SQLAlchemyError

from hr_records.common.constants import (
    AVERAGE_SALARY,
    DEPARTMENTS_WITH_COUNT,
    EMPLOYEE_COUNT,
    EMPLOYEE_OPTIONS,
    EMPLOYEES,
    JOB_HISTORY,
    RECENT_JOB_HISTORY,
    DeleteCascadePolicy,
    JobHistoryEditPolicy,
)
from hr_records.common.exceptions import translate_db_error
from hr_records.common.forms import generate_code, validate_form
from hr_records.common.hooks import RecordHooks
from hr_records.common.schemas import DeletePreview, OptionItem
from hr_records.employees.schemas import (
    EmployeeCreated,
    EmployeeForm,
    EmployeeRow,
    EmployeeUpdateForm,
)
from hr_records.employees.service import EmployeeService
from hr_records.job_history.models import JobHistory
from hr_records.job_history.schemas import AssignmentForm
from hr_records.job_history.service import JobHistoryService

logger = logging.getLogger(__name__)

EMPLOYEE_INVALIDATES = (
    EMPLOYEES,
    EMPLOYEE_OPTIONS,
    EMPLOYEE_COUNT,
    JOB_HISTORY,
    RECENT_JOB_HISTORY,
    AVERAGE_SALARY,
    DEPARTMENTS_WITH_COUNT,
)


def _assignment_from(form: Union[EmployeeForm, EmployeeUpdateForm], **extra: Any) -> AssignmentForm:
    """Carry only the submitted assignment fields over to an ``AssignmentForm``."""
    values = {
        name: getattr(form, name)
        for name in ("jobcode", "deptcode", "salary", "effdate")
        if name in form.model_fields_set
    }
    values.update(extra)
    return AssignmentForm.model_validate(values)


def _assignment_changed(form: EmployeeUpdateForm, current: Optional[JobHistory]) -> bool:
    """Whether the submitted assignment differs from the current entry.

    The edit dialog pre-fills the current assignment, so an unchanged
    assignment must not be recorded again.
    """
    if current is None or form.effdate is not None:
        return True
    return any(
        getattr(form, name) != getattr(current, name)
        for name in ("jobcode", "deptcode", "salary")
        if name in form.model_fields_set
    )


class EmployeeHooks(RecordHooks):
    entity = "Employee"
    plural = "employees"
    invalidates = EMPLOYEE_INVALIDATES

    # ── Queries ─────────────────────────────────────────────────────

    async def rows(
        self,
        *,
        search: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> list[EmployeeRow]:
        search = search.strip() if search else None
        return await self._query(
            (EMPLOYEES, search or None, sort),
            lambda db: EmployeeService.list_employees(db, search=search, sort=sort),
        )

    async def options(self) -> list[OptionItem]:
        return await self._query(
            (EMPLOYEE_OPTIONS,), EmployeeService.employee_options, label="employee options",
        )

    async def count(self) -> int:
        return await self._query(
            (EMPLOYEE_COUNT,), EmployeeService.count_employees, label="employee count",
        )

    # ── Mutations ───────────────────────────────────────────────────

    async def create(self, values: Union[EmployeeForm, Mapping[str, Any]]) -> EmployeeCreated:
        form = validate_form(EmployeeForm, values)
        if not form.empno:
            form = form.model_copy(update={"empno": generate_code("E")})
        empno = form.empno

        await self._mutate(
            "add",
            lambda db: EmployeeService.create_employee(db, form),
            entity_id=empno,
        )

        assignment_error = None
        if form.has_assignment:
            assignment_error = await self._add_first_assignment(form)

        row = await self._read(lambda db: EmployeeService.get_employee_row(db, empno))
        return EmployeeCreated(employee=row, assignment_error=assignment_error)

    async def _add_first_assignment(self, form: EmployeeForm) -> Optional[str]:
        """Second, independent write; returns the failure message if any."""
        assignment = _assignment_from(form, effdate=form.hiredate)
        try:
            async with self.store.session() as db:
                await JobHistoryService.add_entry(db, form.empno, form.hiredate, assignment)
        except SQLAlchemyError as exc:
            error = translate_db_error(exc, entity_type="Job history entry", entity_id=form.empno)
            self.notifier.error(
                f"Employee {form.empno} was added without a job assignment: {error.detail}",
            )
            logger.warning("First assignment for %s failed: %s", form.empno, error.detail)
            return error.detail

        self.cache.invalidate(*self.invalidates)
        return None

    async def update(
        self,
        empno: str,
        values: Union[EmployeeUpdateForm, Mapping[str, Any]],
    ) -> EmployeeRow:
        form = validate_form(EmployeeUpdateForm, values)
        policy = JobHistoryEditPolicy(self.settings.JOB_HISTORY_EDIT_POLICY)

        async def _update(db):
            await EmployeeService.update_employee(db, empno, form)
            if form.has_assignment:
                current = (await JobHistoryService.current_entries(db, [empno])).get(empno)
                if _assignment_changed(form, current):
                    await JobHistoryService.record_assignment(
                        db, empno, _assignment_from(form), policy=policy,
                    )

        await self._mutate("update", _update, entity_id=empno)
        return await self._read(lambda db: EmployeeService.get_employee_row(db, empno))

    async def delete(self, empno: str) -> None:
        cascade = DeleteCascadePolicy(self.settings.DELETE_CASCADE_POLICY)
        await self._mutate(
            "delete",
            lambda db: EmployeeService.delete_employee(db, empno, cascade=cascade),
            entity_id=empno,
        )

    async def delete_preview(self, empno: str) -> DeletePreview:
        async def _preview(db):
            employee = await EmployeeService.get_employee(db, empno)
            dependents = await EmployeeService.count_dependents(db, empno)
            return DeletePreview(
                record_id=empno,
                label=employee.full_name or empno,
                dependents=dependents,
                warning=(
                    f"Warning: This employee has {dependents} job history record(s)."
                    if dependents else None
                ),
            )

        return await self._read(_preview)
