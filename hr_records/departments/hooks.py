"""Department data-access hooks."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from hr_records.common.constants import (
    DEPARTMENT_COUNT,
    DEPARTMENT_OPTIONS,
    DEPARTMENTS_WITH_COUNT,
    EMPLOYEES,
    JOB_HISTORY,
    RECENT_JOB_HISTORY,
    DeleteCascadePolicy,
)
from hr_records.common.forms import generate_code, validate_form
from hr_records.common.hooks import RecordHooks
from hr_records.common.schemas import DeletePreview, OptionItem
from hr_records.departments.schemas import DepartmentForm, DepartmentRow, DepartmentUpdateForm
from hr_records.departments.service import DepartmentService

DEPARTMENT_INVALIDATES = (
    DEPARTMENTS_WITH_COUNT,
    DEPARTMENT_OPTIONS,
    DEPARTMENT_COUNT,
    JOB_HISTORY,
    RECENT_JOB_HISTORY,
    EMPLOYEES,
)


def delete_warning(employee_count: int) -> Optional[str]:
    if not employee_count:
        return None
    return f"Warning: This department has {employee_count} employee(s) assigned to it."


class DepartmentHooks(RecordHooks):
    entity = "Department"
    plural = "departments"
    invalidates = DEPARTMENT_INVALIDATES

    # ── Queries ─────────────────────────────────────────────────────

    async def rows(
        self,
        *,
        search: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> list[DepartmentRow]:
        search = search.strip() if search else None
        return await self._query(
            (DEPARTMENTS_WITH_COUNT, search or None, sort),
            lambda db: DepartmentService.list_departments(db, search=search, sort=sort),
        )

    async def options(self) -> list[OptionItem]:
        return await self._query(
            (DEPARTMENT_OPTIONS,), DepartmentService.department_options,
            label="department options",
        )

    async def count(self) -> int:
        return await self._query(
            (DEPARTMENT_COUNT,), DepartmentService.count_departments,
            label="department count",
        )

    # ── Mutations ───────────────────────────────────────────────────

    async def create(self, values: Union[DepartmentForm, Mapping[str, Any]]) -> DepartmentRow:
        form = validate_form(DepartmentForm, values)
        if not form.deptcode:
            form = form.model_copy(update={"deptcode": generate_code("D")})

        department = await self._mutate(
            "add",
            lambda db: DepartmentService.create_department(db, form),
            entity_id=form.deptcode,
        )
        return DepartmentRow(deptcode=department.deptcode, deptname=department.deptname)

    async def update(
        self,
        deptcode: str,
        values: Union[DepartmentUpdateForm, Mapping[str, Any]],
    ) -> DepartmentRow:
        form = validate_form(DepartmentUpdateForm, values)
        await self._mutate(
            "update",
            lambda db: DepartmentService.update_department(db, deptcode, form),
            entity_id=deptcode,
        )
        return await self._read(
            lambda db: DepartmentService.get_department_with_count(db, deptcode),
        )

    async def delete(self, deptcode: str) -> None:
        """Delete unconditionally; dependents only ever produce a warning."""
        cascade = DeleteCascadePolicy(self.settings.DELETE_CASCADE_POLICY)
        await self._mutate(
            "delete",
            lambda db: DepartmentService.delete_department(db, deptcode, cascade=cascade),
            entity_id=deptcode,
        )

    async def delete_preview(self, deptcode: str) -> DeletePreview:
        department = await self._read(
            lambda db: DepartmentService.get_department_with_count(db, deptcode),
        )
        return DeletePreview(
            record_id=deptcode,
            label=department.deptname or deptcode,
            dependents=department.employee_count,
            warning=delete_warning(department.employee_count),
        )
