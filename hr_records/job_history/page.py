"""Job-history page: timeline table narrowed by two optional filters.

The employee and department filters combine with AND.  Changing either
immediately re-runs the list query; clearing both returns the full set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from hr_records.common.exceptions import AppException
from hr_records.common.schemas import OptionItem
from hr_records.job_history.hooks import JobHistoryHooks
from hr_records.job_history.schemas import FilterLabel, JobHistoryRow, JobHistoryView


@dataclass
class JobHistoryFilters:
    employee: Optional[str] = None
    department: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.employee is not None or self.department is not None

    def labels(
        self,
        employees: list[OptionItem] = (),
        departments: list[OptionItem] = (),
    ) -> list[FilterLabel]:
        """Removable labels for the active filters, e.g. ``Employee: Ang, Maria``."""
        names = {
            "employee": {o.value: o.label for o in employees},
            "department": {o.value: o.label for o in departments},
        }
        labels = []
        for key, value in (("employee", self.employee), ("department", self.department)):
            if value is not None:
                shown = names[key].get(value, value)
                labels.append(FilterLabel(key=key, value=value, label=f"{key.title()}: {shown}"))
        return labels


class JobHistoryPage:
    def __init__(
        self,
        hooks: JobHistoryHooks,
        *,
        employees: list[OptionItem] = (),
        departments: list[OptionItem] = (),
    ) -> None:
        self.hooks = hooks
        self.filters = JobHistoryFilters()
        self.employees = list(employees)
        self.departments = list(departments)
        self.rows: list[JobHistoryRow] = []
        self.load_error: Optional[str] = None

    async def load(self) -> list[JobHistoryRow]:
        try:
            self.rows = await self.hooks.rows(
                employee=self.filters.employee,
                department=self.filters.department,
            )
            self.load_error = None
        except AppException as exc:
            self.rows = []
            self.load_error = exc.detail
        return self.rows

    # ── Filter events ───────────────────────────────────────────────

    async def set_employee(self, empno: Optional[str]) -> list[JobHistoryRow]:
        self.filters.employee = empno or None
        return await self.load()

    async def set_department(self, deptcode: Optional[str]) -> list[JobHistoryRow]:
        self.filters.department = deptcode or None
        return await self.load()

    async def remove_filter(self, key: str) -> list[JobHistoryRow]:
        if key == "employee":
            return await self.set_employee(None)
        if key == "department":
            return await self.set_department(None)
        raise ValueError(f"Unknown filter {key!r}")

    async def clear(self) -> list[JobHistoryRow]:
        self.filters = JobHistoryFilters()
        return await self.load()

    def view(self) -> JobHistoryView:
        return JobHistoryView(
            rows=self.rows,
            filters=self.filters.labels(self.employees, self.departments),
        )
