"""Departments page: table with employee counts plus its dialogs."""

from __future__ import annotations

from typing import Any, Optional

from hr_records.common.pages import RecordPage
from hr_records.departments.hooks import delete_warning
from hr_records.departments.schemas import DepartmentForm, DepartmentRow, DepartmentUpdateForm


class DepartmentsPage(RecordPage[DepartmentRow]):
    create_form = DepartmentForm
    update_form = DepartmentUpdateForm

    def record_id(self, record: DepartmentRow) -> str:
        return record.deptcode

    def values_for(self, record: DepartmentRow) -> dict[str, Any]:
        return {"deptname": record.deptname or ""}

    def default_values(self) -> dict[str, Any]:
        return {"deptname": ""}

    async def delete_warning(self, record: DepartmentRow) -> Optional[str]:
        # The row already carries the count from the last list query.
        return delete_warning(record.employee_count)

    async def _fetch_rows(self) -> list[DepartmentRow]:
        return await self.hooks.rows()
