"""Notification endpoints — recent toasts from the process-wide sink."""


from fastapi import APIRouter, Depends, Query

from hr_records.auth.dependencies import require_session
from hr_records.notifications.schemas import NotificationResponse
from hr_records.notifications.service import Notifier, get_notifier

router = APIRouter(prefix="", tags=["notifications"], dependencies=[Depends(require_session)])


# ── GET / — most recent toasts, newest first ────────────────────────

@router.get("")
async def list_notifications(
    limit: int = Query(10, ge=1, le=100),
    notifier: Notifier = Depends(get_notifier),
):
    return {
        "data": [
            NotificationResponse.model_validate(n).model_dump(mode="json")
            for n in notifier.recent(limit)
        ],
    }
