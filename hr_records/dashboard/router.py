"""Dashboard router — each figure has its own endpoint so cards load independently.

Routes:
    /dashboard                       — All figures, status reported per figure
    /dashboard/employee-count
    /dashboard/department-count
    /dashboard/recent-job-history
    /dashboard/average-salary
"""


from fastapi import APIRouter, Depends

from hr_records.auth.dependencies import require_session
from hr_records.dashboard.hooks import DashboardHooks
from hr_records.dashboard.schemas import CountFigure
from hr_records.dependencies import get_dashboard_hooks

router = APIRouter(
    prefix="",
    tags=["dashboard"],
    dependencies=[Depends(require_session)],
)


@router.get("")
async def dashboard(hooks: DashboardHooks = Depends(get_dashboard_hooks)):
    view = await hooks.summary()
    return {"data": view.model_dump(mode="json")}


@router.get("/employee-count")
async def employee_count(hooks: DashboardHooks = Depends(get_dashboard_hooks)):
    figure = CountFigure(count=await hooks.employee_count())
    return {"data": figure.model_dump()}


@router.get("/department-count")
async def department_count(hooks: DashboardHooks = Depends(get_dashboard_hooks)):
    figure = CountFigure(count=await hooks.department_count())
    return {"data": figure.model_dump()}


@router.get("/recent-job-history")
async def recent_job_history(hooks: DashboardHooks = Depends(get_dashboard_hooks)):
    rows = await hooks.recent_job_history()
    return {"data": [row.model_dump(mode="json") for row in rows]}


@router.get("/average-salary")
async def average_salary(hooks: DashboardHooks = Depends(get_dashboard_hooks)):
    figure = await hooks.average_salary()
    return {"data": figure.model_dump(mode="json")}
