"""Process-wide notification (toast) sink.

Callers fire a title, description and severity and never look at a
return value.  The sink logs every toast and keeps the most recent ones
so the UI can poll ``GET /api/v1/notifications``.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque

from fastapi import Request

from hr_records.common.constants import Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    severity: Severity = Severity.default
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Notifier:
    """Fire-and-forget toast sink with a bounded history."""

    def __init__(self, buffer_size: int = 50) -> None:
        self._recent: Deque[Notification] = deque(maxlen=buffer_size)

    def notify(
        self,
        title: str,
        description: str,
        severity: Severity = Severity.default,
    ) -> None:
        self._recent.append(Notification(title, description, severity))
        level = logging.WARNING if severity is Severity.destructive else logging.INFO
        logger.log(level, "%s: %s", title, description)

    def success(self, description: str) -> None:
        self.notify("Success", description)

    def error(self, description: str) -> None:
        self.notify("Error", description, Severity.destructive)

    def recent(self, limit: int = 10) -> list[Notification]:
        """Most recent toasts, newest first."""
        return list(reversed(self._recent))[:limit]

    def clear(self) -> None:
        self._recent.clear()


def get_notifier(request: Request) -> Notifier:
    """FastAPI dependency: the app's notification sink."""
    return request.app.state.notifier
