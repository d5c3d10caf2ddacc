"""Departments router.

Routes:
    /departments                           — List with employee counts, create
    /departments/options                   — Filter-picker entries
    /departments/{deptcode}                — Update, delete
    /departments/{deptcode}/delete-preview — Advisory delete warning
"""


from typing import Optional

from fastapi import APIRouter, Depends, Query

from hr_records.adapters import Shape, department_to_display
from hr_records.auth.dependencies import require_session
from hr_records.departments.hooks import DepartmentHooks
from hr_records.departments.schemas import DepartmentForm, DepartmentUpdateForm
from hr_records.dependencies import get_department_hooks

router = APIRouter(
    prefix="",
    tags=["departments"],
    dependencies=[Depends(require_session)],
)


@router.get("")
async def list_departments(
    hooks: DepartmentHooks = Depends(get_department_hooks),
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None, description="deptcode, deptname or employee_count"),
    shape: Shape = Query("record"),
):
    rows = await hooks.rows(search=search, sort=sort)
    if shape == "display":
        data = [department_to_display(row).model_dump() for row in rows]
    else:
        data = [row.model_dump() for row in rows]
    return {"data": data, "message": "Departments retrieved successfully."}


@router.get("/options")
async def department_options(hooks: DepartmentHooks = Depends(get_department_hooks)):
    options = await hooks.options()
    return {"data": [o.model_dump() for o in options]}


@router.post("", status_code=201)
async def create_department(
    body: DepartmentForm,
    hooks: DepartmentHooks = Depends(get_department_hooks),
):
    row = await hooks.create(body)
    return {"data": row.model_dump(), "message": "Department has been added"}


@router.put("/{deptcode}")
async def update_department(
    deptcode: str,
    body: DepartmentUpdateForm,
    hooks: DepartmentHooks = Depends(get_department_hooks),
):
    row = await hooks.update(deptcode, body)
    return {"data": row.model_dump(), "message": "Department has been updated"}


@router.get("/{deptcode}/delete-preview")
async def department_delete_preview(
    deptcode: str,
    hooks: DepartmentHooks = Depends(get_department_hooks),
):
    preview = await hooks.delete_preview(deptcode)
    return {"data": preview.model_dump()}


@router.delete("/{deptcode}")
async def delete_department(
    deptcode: str,
    hooks: DepartmentHooks = Depends(get_department_hooks),
):
    """Delete unconditionally; a non-zero employee count is only a warning."""
    await hooks.delete(deptcode)
    return {"data": None, "message": "Department has been deleted"}
