"""Employees page: searchable table plus add / edit / delete dialog."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from hr_records.common.pages import RecordPage
from hr_records.employees.hooks import EmployeeHooks
from hr_records.employees.schemas import EmployeeForm, EmployeeRow, EmployeeUpdateForm


class EmployeesPage(RecordPage[EmployeeRow]):
    create_form = EmployeeForm
    update_form = EmployeeUpdateForm

    def __init__(self, hooks: EmployeeHooks) -> None:
        super().__init__(hooks)
        self.search: Optional[str] = None

    def record_id(self, record: EmployeeRow) -> str:
        return record.empno

    def values_for(self, record: EmployeeRow) -> dict[str, Any]:
        values = record.model_dump(
            mode="json",
            include={"firstname", "lastname", "gender", "birthdate", "email", "hiredate", "sepdate"},
        )
        if record.current is not None:
            values.update(
                jobcode=record.current.jobcode,
                deptcode=record.current.deptcode,
                salary=record.current.salary,
            )
        return values

    def default_values(self) -> dict[str, Any]:
        return {"hiredate": date.today().isoformat()}

    async def delete_warning(self, record: EmployeeRow) -> Optional[str]:
        preview = await self.hooks.delete_preview(record.empno)
        return preview.warning

    async def set_search(self, search: Optional[str]) -> list[EmployeeRow]:
        self.search = search or None
        return await self.load()

    async def _fetch_rows(self) -> list[EmployeeRow]:
        return await self.hooks.rows(search=self.search)
