"""Employees router.

Routes:
    /employees                        — List (searchable), create
    /employees/options                — Filter-picker entries
    /employees/{empno}                — Update, delete
    /employees/{empno}/delete-preview — Advisory delete warning
"""


from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from hr_records.adapters import Shape, employee_from_display, employee_to_display
from hr_records.auth.dependencies import require_session
from hr_records.dependencies import get_employee_hooks
from hr_records.employees.hooks import EmployeeHooks

router = APIRouter(
    prefix="",
    tags=["employees"],
    dependencies=[Depends(require_session)],
)


def _form_values(payload: dict[str, Any], shape: Shape) -> dict[str, Any]:
    return employee_from_display(payload) if shape == "display" else payload


# ── GET /employees — Employee table ─────────────────────────────────

@router.get("")
async def list_employees(
    hooks: EmployeeHooks = Depends(get_employee_hooks),
    search: Optional[str] = Query(None, description="Match id, name or email"),
    sort: Optional[str] = Query(None, description="Column to sort by, '-' prefix for descending"),
    shape: Shape = Query("record"),
):
    rows = await hooks.rows(search=search, sort=sort)
    if shape == "display":
        data = [employee_to_display(row).model_dump(mode="json") for row in rows]
    else:
        data = [row.model_dump(mode="json") for row in rows]
    return {"data": data, "message": "Employees retrieved successfully."}


# ── GET /employees/options — Picker entries ─────────────────────────
# NOTE: defined before /{empno} routes.

@router.get("/options")
async def employee_options(hooks: EmployeeHooks = Depends(get_employee_hooks)):
    options = await hooks.options()
    return {"data": [o.model_dump() for o in options]}


# ── POST /employees — Add employee ──────────────────────────────────

@router.post("", status_code=201)
async def create_employee(
    payload: dict[str, Any] = Body(...),
    shape: Shape = Query("record"),
    hooks: EmployeeHooks = Depends(get_employee_hooks),
):
    """Add an employee, optionally with a first job assignment.

    The assignment is written separately; when it fails the employee is
    still created and ``assignment_error`` carries the reason.
    """
    created = await hooks.create(_form_values(payload, shape))
    return {
        "data": created.model_dump(mode="json"),
        "message": "Employee has been added",
    }


# ── PUT /employees/{empno} — Edit employee ──────────────────────────

@router.put("/{empno}")
async def update_employee(
    empno: str,
    payload: dict[str, Any] = Body(...),
    shape: Shape = Query("record"),
    hooks: EmployeeHooks = Depends(get_employee_hooks),
):
    row = await hooks.update(empno, _form_values(payload, shape))
    return {"data": row.model_dump(mode="json"), "message": "Employee has been updated"}


# ── GET /employees/{empno}/delete-preview ───────────────────────────

@router.get("/{empno}/delete-preview")
async def employee_delete_preview(
    empno: str,
    hooks: EmployeeHooks = Depends(get_employee_hooks),
):
    preview = await hooks.delete_preview(empno)
    return {"data": preview.model_dump()}


# ── DELETE /employees/{empno} ───────────────────────────────────────

@router.delete("/{empno}")
async def delete_employee(
    empno: str,
    hooks: EmployeeHooks = Depends(get_employee_hooks),
):
    await hooks.delete(empno)
    return {"data": None, "message": "Employee has been deleted"}
