"""Layout shell — navigation entries and the signed-in user."""


from fastapi import APIRouter, Depends

from hr_records.auth.dependencies import require_session
from hr_records.auth.schemas import AuthSession

router = APIRouter(prefix="", tags=["layout"])

NAV_ITEMS = (
    {"name": "Dashboard", "path": "/dashboard", "icon": "home"},
    {"name": "Employees", "path": "/employees", "icon": "users"},
    {"name": "Departments", "path": "/departments", "icon": "building"},
    {"name": "Job History", "path": "/job-history", "icon": "history"},
)


@router.get("")
async def navigation(session: AuthSession = Depends(require_session)):
    return {
        "data": {
            "items": list(NAV_ITEMS),
            "user": session.model_dump(mode="json"),
        },
    }
