"""Job-history and jobs router.

Routes:
    /jobs                            — Job picker entries
    /job-history                     — Timeline filtered by employee / department
    /job-history/{empno}             — Record an assignment
    /job-history/{empno}/{effdate}   — Delete one entry
"""


from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from hr_records.auth.dependencies import require_session
from hr_records.dependencies import (
    get_department_hooks,
    get_employee_hooks,
    get_job_history_hooks,
)
from hr_records.departments.hooks import DepartmentHooks
from hr_records.employees.hooks import EmployeeHooks
from hr_records.job_history.hooks import JobHistoryHooks
from hr_records.job_history.page import JobHistoryPage
from hr_records.job_history.schemas import AssignmentForm

jobs_router = APIRouter(
    prefix="",
    tags=["jobs"],
    dependencies=[Depends(require_session)],
)
router = APIRouter(
    prefix="",
    tags=["job-history"],
    dependencies=[Depends(require_session)],
)


@jobs_router.get("")
async def list_jobs(hooks: JobHistoryHooks = Depends(get_job_history_hooks)):
    jobs = await hooks.jobs()
    return {"data": [job.model_dump() for job in jobs]}


# ── GET /job-history — Filtered timeline ────────────────────────────

@router.get("")
async def list_job_history(
    hooks: JobHistoryHooks = Depends(get_job_history_hooks),
    employee_hooks: EmployeeHooks = Depends(get_employee_hooks),
    department_hooks: DepartmentHooks = Depends(get_department_hooks),
    employee: Optional[str] = Query(None, description="Only rows for this empno"),
    department: Optional[str] = Query(None, description="Only rows for this deptcode"),
):
    """Rows matching every given filter, plus the active-filter labels."""
    page = JobHistoryPage(
        hooks,
        employees=await employee_hooks.options() if employee else (),
        departments=await department_hooks.options() if department else (),
    )
    page.filters.employee = employee or None
    page.filters.department = department or None
    rows = await hooks.rows(employee=page.filters.employee, department=page.filters.department)
    page.rows = rows
    return {"data": page.view().model_dump(mode="json")}


# ── POST /job-history/{empno} — Record assignment ───────────────────

@router.post("/{empno}", status_code=201)
async def record_assignment(
    empno: str,
    body: AssignmentForm,
    hooks: JobHistoryHooks = Depends(get_job_history_hooks),
):
    row = await hooks.record_assignment(empno, body)
    return {"data": row.model_dump(mode="json"), "message": "Job history entry has been recorded"}


# ── DELETE /job-history/{empno}/{effdate} ───────────────────────────

@router.delete("/{empno}/{effdate}")
async def delete_job_history_entry(
    empno: str,
    effdate: date,
    hooks: JobHistoryHooks = Depends(get_job_history_hooks),
):
    await hooks.delete_entry(empno, effdate)
    return {"data": None, "message": "Job history entry has been deleted"}
