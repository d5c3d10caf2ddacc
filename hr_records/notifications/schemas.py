"""Notification Pydantic v2 schemas."""


from datetime import datetime

from pydantic import BaseModel, ConfigDict

from hr_records.common.constants import Severity


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    description: str
    severity: Severity
    created_at: datetime
