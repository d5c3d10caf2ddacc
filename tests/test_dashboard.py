"""Dashboard test suite — independent figures, the average-salary fallback,
per-figure failure isolation, caching and HTTP endpoints.

The combined view is exercised with warm caches so the figures do not
share the single in-memory SQLite connection concurrently.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest

from hr_records.common.exceptions import BackendError
from hr_records.dashboard.service import DashboardService, average, round_money
from hr_records.employees.models import Employee
from hr_records.job_history.models import JobHistory
from tests.conftest import _make_employee, _make_job_history, _seed


@pytest.fixture
async def busy_history(store, org) -> None:
    """Seven job-history rows in total, on distinct dates."""
    await _seed(
        store,
        *(
            JobHistory(**_make_job_history(
                empno="E001", effdate=date(2021, month, 1), salary=f"{5000 + month * 100}.00",
            ))
            for month in (2, 4, 6, 8)
        ),
    )


# ═════════════════════════════════════════════════════════════════════
# 1. ROUNDING
# ═════════════════════════════════════════════════════════════════════


class TestRounding:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, Decimal("0.00")),
            (Decimal("4000.245"), Decimal("4000.25")),
            (Decimal("4000.244"), Decimal("4000.24")),
            (3500, Decimal("3500.00")),
            (1234.5, Decimal("1234.50")),
        ],
    )
    def test_round_money(self, value, expected):
        assert round_money(value) == expected

    def test_average_counts_missing_salary_as_zero(self):
        assert average([Decimal("10.00"), None, Decimal("20.01")]) == Decimal("10.00")
        assert average([Decimal("10.00"), Decimal("20.01")]) == Decimal("15.01")

    def test_average_of_nothing_is_zero(self):
        assert average([]) == Decimal("0.00")
        assert average([None]) == Decimal("0.00")


# ═════════════════════════════════════════════════════════════════════
# 2. FIGURES
# ═════════════════════════════════════════════════════════════════════


class TestDashboardFigures:

    async def test_counts(self, dashboard_hooks, org):
        assert await dashboard_hooks.employee_count() == 3
        assert await dashboard_hooks.department_count() == 2

    async def test_empty_store(self, dashboard_hooks):
        assert await dashboard_hooks.employee_count() == 0
        assert await dashboard_hooks.recent_job_history() == []
        figure = await dashboard_hooks.average_salary()
        assert figure.value == Decimal("0.00")

    async def test_recent_job_history_limited_to_five(self, dashboard_hooks, busy_history):
        rows = await dashboard_hooks.recent_job_history()
        assert len(rows) == 5
        assert [r.effdate for r in rows] == [
            date(2021, 8, 1),
            date(2021, 6, 1),
            date(2021, 4, 1),
            date(2021, 2, 1),
            date(2020, 1, 6),
        ]
        assert rows[0].employee_name == "Maria Ang"
        assert rows[0].deptname == "Engineering"

    async def test_average_falls_back_to_client(self, dashboard_hooks, org):
        # SQLite has no get_average_salary(); the call fails and the
        # figure is computed from each employee's current salary.
        figure = await dashboard_hooks.average_salary()
        assert figure.source == "client"
        assert figure.value == Decimal("4000.25")

    async def test_average_uses_current_salary_only(self, dashboard_hooks, busy_history):
        figure = await dashboard_hooks.average_salary()
        # E001's latest row is 5800.00
        assert figure.value == round_money((Decimal("5800.00") + Decimal("4000.50") + Decimal("3000.25")) / 3)

    async def test_client_average_divides_by_all_current_rows(self, store, dashboard_hooks, org):
        await _seed(store, Employee(**_make_employee(empno="E004", firstname="Ravi", lastname="Das")))
        await _seed(store, JobHistory(**_make_job_history(empno="E004", salary=None)))

        figure = await dashboard_hooks.average_salary()
        # (5000.00 + 4000.50 + 3000.25 + 0) / 4
        assert figure.source == "client"
        assert figure.value == Decimal("3000.19")

    async def test_average_from_server_function(self, store, dashboard_hooks, org):
        with patch.object(store, "call", AsyncMock(return_value=Decimal("4000.2500"))) as call:
            figure = await dashboard_hooks.average_salary()

        call.assert_awaited_once_with("get_average_salary")
        assert figure.source == "server"
        assert figure.value == Decimal("4000.25")

    async def test_server_and_client_agree(self, store, cache, dashboard_hooks, org):
        client_figure = await dashboard_hooks.average_salary()
        cache.clear()
        with patch.object(store, "call", AsyncMock(return_value=Decimal("4000.25"))):
            server_figure = await dashboard_hooks.average_salary()
        assert client_figure.value == server_figure.value

    async def test_figures_are_cached(self, store, dashboard_hooks, org):
        await dashboard_hooks.employee_count()
        with patch.object(store, "session", wraps=store.session) as session_spy:
            assert await dashboard_hooks.employee_count() == 3
        session_spy.assert_not_called()

    async def test_mutation_refreshes_average(self, dashboard_hooks, job_history_hooks, org):
        before = await dashboard_hooks.average_salary()
        await job_history_hooks.record_assignment("E003", {"jobcode": "J02", "salary": "6000.25"})
        after = await dashboard_hooks.average_salary()

        assert before.value == Decimal("4000.25")
        assert after.value == Decimal("5000.25")

    async def test_employee_mutation_refreshes_count(self, dashboard_hooks, employee_hooks, org):
        assert await dashboard_hooks.employee_count() == 3
        await employee_hooks.delete("E003")
        assert await dashboard_hooks.employee_count() == 2


# ═════════════════════════════════════════════════════════════════════
# 3. COMBINED VIEW
# ═════════════════════════════════════════════════════════════════════


class TestDashboardSummary:

    async def test_all_figures_ok(self, dashboard_hooks, org):
        await dashboard_hooks.employee_count()
        await dashboard_hooks.department_count()
        await dashboard_hooks.recent_job_history()
        await dashboard_hooks.average_salary()

        view = await dashboard_hooks.summary()
        assert view.employee_count.status == "ok"
        assert view.employee_count.value == 3
        assert view.average_salary.value.value == Decimal("4000.25")
        assert len(view.recent_job_history.value) == 3

    async def test_one_failing_figure_does_not_hide_others(self, dashboard_hooks, notifier, org):
        await dashboard_hooks.employee_count()
        await dashboard_hooks.recent_job_history()
        await dashboard_hooks.average_salary()

        with patch.object(
            DashboardService,
            "department_count",
            AsyncMock(side_effect=BackendError("connection refused")),
        ):
            view = await dashboard_hooks.summary()

        assert view.department_count.status == "error"
        assert view.department_count.error == "connection refused"
        assert view.employee_count.status == "ok"
        assert view.average_salary.status == "ok"
        assert notifier.recent()[0].description == "Failed to load department count: connection refused"


# ═════════════════════════════════════════════════════════════════════
# 4. HTTP ROUTES
# ═════════════════════════════════════════════════════════════════════


class TestDashboardRoutes:

    async def test_figure_endpoints(self, client, auth_headers, org):
        resp = await client.get("/api/v1/dashboard/employee-count", headers=auth_headers)
        assert resp.json()["data"] == {"count": 3}

        resp = await client.get("/api/v1/dashboard/department-count", headers=auth_headers)
        assert resp.json()["data"] == {"count": 2}

        resp = await client.get("/api/v1/dashboard/average-salary", headers=auth_headers)
        assert resp.json()["data"] == {"value": "4000.25", "source": "client"}

        resp = await client.get("/api/v1/dashboard/recent-job-history", headers=auth_headers)
        assert len(resp.json()["data"]) == 3

    async def test_combined_view(self, client, auth_headers, org):
        for path in ("employee-count", "department-count", "recent-job-history", "average-salary"):
            await client.get(f"/api/v1/dashboard/{path}", headers=auth_headers)

        resp = await client.get("/api/v1/dashboard", headers=auth_headers)
        data = resp.json()["data"]
        assert {name: figure["status"] for name, figure in data.items()} == {
            "employee_count": "ok",
            "department_count": "ok",
            "recent_job_history": "ok",
            "average_salary": "ok",
        }
        assert data["average_salary"]["value"]["value"] == "4000.25"

    async def test_requires_session(self, client):
        resp = await client.get("/api/v1/dashboard/employee-count")
        assert resp.status_code == 307
