"""Employee module test suite — list ordering and search, the two-write
create flow, assignment edit policies, delete cascade, page dialog flow,
display adapter and HTTP routes.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from hr_records.adapters import employee_from_display
from hr_records.common.constants import Severity
from hr_records.common.dialogs import DialogState
from hr_records.common.exceptions import BackendError, NotFoundException, ValidationException
from hr_records.config import settings
from hr_records.employees.hooks import EmployeeHooks
from hr_records.employees.models import Employee
from hr_records.employees.page import EmployeesPage
from hr_records.job_history.models import JobHistory
from hr_records.job_history.service import JobHistoryService
from tests.conftest import _make_employee, _seed

NEW_EMPLOYEE = {
    "empno": "E100",
    "firstname": "Ana",
    "lastname": "Reyes",
    "gender": "F",
    "email": "ana.reyes@example.com",
    "hiredate": "2024-02-01",
    "deptcode": "D02",
    "jobcode": "J02",
    "salary": "4200.00",
}


async def _history_count(store, empno: str) -> int:
    async with store.session() as db:
        return (await db.execute(
            select(func.count()).select_from(JobHistory).where(JobHistory.empno == empno)
        )).scalar_one()


# ═════════════════════════════════════════════════════════════════════
# 1. LIST
# ═════════════════════════════════════════════════════════════════════


class TestEmployeeList:

    async def test_rows_are_ordered_by_lastname(self, store, employee_hooks):
        await _seed(
            store,
            Employee(**_make_employee(empno="1", firstname="Jose", lastname="Lopez")),
            Employee(**_make_employee(empno="2", firstname="Maria", lastname="Ang")),
        )
        rows = await employee_hooks.rows()
        assert [r.lastname for r in rows] == ["Ang", "Lopez"]

    async def test_rows_carry_current_assignment(self, employee_hooks, org):
        rows = await employee_hooks.rows()
        ang = next(r for r in rows if r.empno == "E001")
        assert ang.current.deptname == "Engineering"
        assert ang.current.jobdesc == "Software Engineer"
        assert ang.current.salary == Decimal("5000.00")

    async def test_current_assignment_is_latest_effdate(self, store, employee_hooks, org):
        await _seed(store, JobHistory(
            empno="E001", effdate=date(2023, 7, 1), jobcode="J02", deptcode="D02",
            salary=Decimal("6100.00"),
        ))
        rows = await employee_hooks.rows()
        ang = next(r for r in rows if r.empno == "E001")
        assert ang.current.effdate == date(2023, 7, 1)
        assert ang.current.deptcode == "D02"

    async def test_search_filters_rows(self, employee_hooks, org):
        rows = await employee_hooks.rows(search="lop")
        assert [r.empno for r in rows] == ["E002"]

    async def test_sort_override(self, employee_hooks, org):
        rows = await employee_hooks.rows(sort="-lastname")
        assert [r.lastname for r in rows] == ["Lopez", "Chen", "Ang"]

    async def test_options_are_labelled_last_first(self, employee_hooks, org):
        options = await employee_hooks.options()
        assert options[0].label == "Ang, Maria"
        assert await employee_hooks.count() == 3

    async def test_list_failure_notifies(self, employee_hooks, notifier):
        with patch(
            "hr_records.employees.service.EmployeeService.list_employees",
            AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("timeout"))),
        ):
            with pytest.raises(BackendError):
                await employee_hooks.rows()
        assert notifier.recent()[0].description == "Failed to load employees: timeout"


# ═════════════════════════════════════════════════════════════════════
# 2. CREATE
# ═════════════════════════════════════════════════════════════════════


class TestEmployeeCreate:

    async def test_create_with_assignment(self, store, employee_hooks, notifier, org):
        created = await employee_hooks.create(NEW_EMPLOYEE)

        assert created.assignment_error is None
        employee = created.employee
        assert (employee.empno, employee.firstname, employee.lastname) == ("E100", "Ana", "Reyes")
        assert employee.hiredate == date(2024, 2, 1)
        assert employee.current.effdate == date(2024, 2, 1)
        assert employee.current.salary == Decimal("4200.00")
        assert notifier.recent()[0].description == "Employee has been added"

    async def test_created_fields_match_after_refetch(self, employee_hooks, org):
        await employee_hooks.rows()
        await employee_hooks.create(NEW_EMPLOYEE)

        row = next(r for r in await employee_hooks.rows() if r.empno == "E100")
        assert row.email == "ana.reyes@example.com"
        assert row.gender == "F"
        assert row.current.deptcode == "D02"
        assert row.current.jobcode == "J02"

    async def test_create_without_assignment_generates_empno(self, store, employee_hooks):
        created = await employee_hooks.create(
            {"firstname": "Lee", "lastname": "Park", "hiredate": "2024-03-04"},
        )
        assert created.employee.empno.startswith("E")
        assert created.employee.current is None
        assert await _history_count(store, created.employee.empno) == 0

    async def test_failed_assignment_keeps_employee(self, store, employee_hooks, notifier, org):
        with patch.object(
            JobHistoryService,
            "add_entry",
            AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("network down"))),
        ):
            created = await employee_hooks.create(NEW_EMPLOYEE)

        assert created.assignment_error == "network down"
        assert created.employee.current is None
        async with store.session() as db:
            assert await db.get(Employee, "E100") is not None

        descriptions = [n.description for n in notifier.recent()]
        assert descriptions[0] == "Employee E100 was added without a job assignment: network down"
        assert descriptions[1] == "Employee has been added"
        assert notifier.recent()[0].severity is Severity.destructive

    async def test_invalid_form_is_rejected_before_backend(self, store, employee_hooks):
        with patch.object(store, "session", wraps=store.session) as session_spy:
            with pytest.raises(ValidationException) as exc_info:
                await employee_hooks.create({"firstname": "", "lastname": "Reyes", "hiredate": "2024-01-01"})
        assert exc_info.value.errors == {"firstname": ["First name is required"]}
        session_spy.assert_not_called()


# ═════════════════════════════════════════════════════════════════════
# 3. UPDATE — job-history edit policy
# ═════════════════════════════════════════════════════════════════════


class TestEmployeeUpdate:

    async def test_update_columns(self, employee_hooks, notifier, org):
        row = await employee_hooks.update("E002", {"lastname": "Lopez-Diaz", "sepdate": "2025-06-30"})
        assert row.lastname == "Lopez-Diaz"
        assert row.firstname == "Jose"
        assert row.sepdate == date(2025, 6, 30)
        assert notifier.recent()[0].description == "Employee has been updated"

    async def test_overwrite_policy_edits_current_row(self, store, employee_hooks, org):
        row = await employee_hooks.update(
            "E001", {"jobcode": "J02", "deptcode": "D02", "salary": "5500.00"},
        )
        assert row.current.effdate == date(2020, 1, 6)
        assert row.current.deptcode == "D02"
        assert row.current.salary == Decimal("5500.00")
        assert await _history_count(store, "E001") == 1

    async def test_append_policy_adds_dated_row(self, store, cache, notifier, org):
        hooks = EmployeeHooks(
            store, cache, notifier,
            settings=settings.model_copy(update={"JOB_HISTORY_EDIT_POLICY": "append"}),
        )
        row = await hooks.update(
            "E001",
            {"jobcode": "J02", "deptcode": "D02", "salary": "5500.00", "effdate": "2024-04-01"},
        )
        assert row.current.effdate == date(2024, 4, 1)
        assert await _history_count(store, "E001") == 2

    async def test_append_policy_skips_unchanged_assignment(self, store, cache, notifier, org):
        hooks = EmployeeHooks(
            store, cache, notifier,
            settings=settings.model_copy(update={"JOB_HISTORY_EDIT_POLICY": "append"}),
        )
        page = EmployeesPage(hooks)
        await page.load()
        ang = next(r for r in page.rows if r.empno == "E001")
        values = page.open_edit(ang).values

        snap = await page.submit({**values, "firstname": "Mariana"})

        assert snap.state is DialogState.idle
        assert next(r for r in page.rows if r.empno == "E001").firstname == "Mariana"
        assert await _history_count(store, "E001") == 1

    async def test_append_policy_records_changed_salary(self, store, cache, notifier, org):
        hooks = EmployeeHooks(
            store, cache, notifier,
            settings=settings.model_copy(update={"JOB_HISTORY_EDIT_POLICY": "append"}),
        )
        page = EmployeesPage(hooks)
        await page.load()
        ang = next(r for r in page.rows if r.empno == "E001")
        values = page.open_edit(ang).values

        with patch("hr_records.job_history.service._today", return_value=date(2024, 9, 2)):
            await page.submit({**values, "salary": "5250.00"})

        assert await _history_count(store, "E001") == 2
        current = next(r for r in page.rows if r.empno == "E001").current
        assert (current.effdate, current.salary) == (date(2024, 9, 2), Decimal("5250.00"))

    async def test_update_missing_employee(self, employee_hooks, notifier):
        with pytest.raises(NotFoundException):
            await employee_hooks.update("NOPE", {"lastname": "Ghost"})
        assert notifier.recent()[0].description == (
            "Failed to update employee: Employee with id 'NOPE' does not exist."
        )


# ═════════════════════════════════════════════════════════════════════
# 4. DELETE
# ═════════════════════════════════════════════════════════════════════


class TestEmployeeDelete:

    async def test_delete_preview_counts_history(self, employee_hooks, org):
        preview = await employee_hooks.delete_preview("E001")
        assert preview.label == "Maria Ang"
        assert preview.dependents == 1
        assert preview.warning == "Warning: This employee has 1 job history record(s)."

    async def test_delete_cascades_job_history(self, store, employee_hooks, notifier, org):
        await employee_hooks.delete("E001")

        assert [r.empno for r in await employee_hooks.rows()] == ["E003", "E002"]
        assert await _history_count(store, "E001") == 0
        assert notifier.recent()[0].description == "Employee has been deleted"

    async def test_delete_missing_employee(self, employee_hooks, notifier):
        with pytest.raises(NotFoundException):
            await employee_hooks.delete("NOPE")
        assert notifier.recent()[0].severity is Severity.destructive


# ═════════════════════════════════════════════════════════════════════
# 5. PAGE + ADAPTER
# ═════════════════════════════════════════════════════════════════════


class TestEmployeesPage:

    async def test_edit_dialog_prefills_assignment(self, employee_hooks, org):
        page = EmployeesPage(employee_hooks)
        await page.load()
        snap = page.open_edit(page.rows[0])

        assert snap.values["lastname"] == "Ang"
        assert snap.values["jobcode"] == "J01"
        assert snap.values["deptcode"] == "D01"

    async def test_search_reloads(self, employee_hooks, org):
        page = EmployeesPage(employee_hooks)
        rows = await page.set_search("chen")
        assert [r.empno for r in rows] == ["E003"]

    async def test_invalid_email_keeps_dialog_open(self, employee_hooks, org):
        page = EmployeesPage(employee_hooks)
        page.open_create()
        snap = await page.submit(
            {"firstname": "Ana", "lastname": "Reyes", "hiredate": "2024-02-01", "email": "nope"},
        )
        assert snap.state is DialogState.editing
        assert "email" in snap.errors

    def test_display_payload_maps_to_form_fields(self):
        assert employee_from_display(
            {"id": "E7", "first_name": "Ana", "last_name": "Reyes", "hire_date": "2024-02-01"},
        ) == {"empno": "E7", "firstname": "Ana", "lastname": "Reyes", "hiredate": "2024-02-01"}


# ═════════════════════════════════════════════════════════════════════
# 6. HTTP ROUTES
# ═════════════════════════════════════════════════════════════════════


class TestEmployeeRoutes:

    async def test_list_employees(self, client, auth_headers, org):
        resp = await client.get("/api/v1/employees", headers=auth_headers)
        assert resp.status_code == 200
        assert [e["lastname"] for e in resp.json()["data"]] == ["Ang", "Chen", "Lopez"]

    async def test_sort_by_relationship_uses_default_order(self, client, auth_headers, org):
        resp = await client.get(
            "/api/v1/employees", params={"sort": "job_history"}, headers=auth_headers,
        )
        assert resp.status_code == 200
        assert [e["lastname"] for e in resp.json()["data"]] == ["Ang", "Chen", "Lopez"]

    async def test_list_display_shape(self, client, auth_headers, org):
        resp = await client.get(
            "/api/v1/employees", params={"shape": "display"}, headers=auth_headers,
        )
        first = resp.json()["data"][0]
        assert first["id"] == "E001"
        assert first["first_name"] == "Maria"
        assert first["hire_date"] == "2020-01-06"
        assert first["job_title"] == "Software Engineer"

    async def test_create_employee(self, client, auth_headers, org):
        resp = await client.post("/api/v1/employees", json=NEW_EMPLOYEE, headers=auth_headers)
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "Employee has been added"
        assert body["data"]["employee"]["current"]["salary"] == "4200.00"

    async def test_create_from_display_payload(self, client, auth_headers):
        resp = await client.post(
            "/api/v1/employees",
            params={"shape": "display"},
            json={"id": "E200", "first_name": "Kim", "last_name": "Soo", "hire_date": "2024-05-01"},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        assert resp.json()["data"]["employee"]["firstname"] == "Kim"

    async def test_create_invalid_is_422(self, client, auth_headers):
        resp = await client.post(
            "/api/v1/employees",
            json={"firstname": "Ana", "lastname": "", "hiredate": "2024-02-01"},
            headers=auth_headers,
        )
        assert resp.status_code == 422
        assert resp.json()["errors"] == {"lastname": ["Last name is required"]}

    async def test_update_and_delete(self, client, auth_headers, org):
        resp = await client.put(
            "/api/v1/employees/E003", json={"firstname": "Wen"}, headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["firstname"] == "Wen"

        resp = await client.delete("/api/v1/employees/E003", headers=auth_headers)
        assert resp.status_code == 200
        listed = await client.get("/api/v1/employees", headers=auth_headers)
        assert "E003" not in [e["empno"] for e in listed.json()["data"]]

    async def test_delete_preview(self, client, auth_headers, org):
        resp = await client.get("/api/v1/employees/E002/delete-preview", headers=auth_headers)
        assert resp.json()["data"]["dependents"] == 1

    async def test_options(self, client, auth_headers, org):
        resp = await client.get("/api/v1/employees/options", headers=auth_headers)
        assert resp.json()["data"][0] == {"value": "E001", "label": "Ang, Maria"}
