"""
Notification schemas (read-only).
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from stackit.kernel.store.records import NotificationRecord


class NotificationResponse(BaseModel):
    """Notification response."""

    id: uuid.UUID
    recipient_id: uuid.UUID
    sender_id: uuid.UUID
    kind: str
    message: str
    related_question_id: Optional[uuid.UUID] = None
    related_answer_id: Optional[uuid.UUID] = None
    is_read: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: NotificationRecord) -> "NotificationResponse":
        return cls(
            id=record.id,
            recipient_id=record.recipient_id,
            sender_id=record.sender_id,
            kind=record.notification_kind.value,
            message=record.message,
            related_question_id=record.related_question_id,
            related_answer_id=record.related_answer_id,
            is_read=record.is_read,
            created_at=record.created_at,
        )


class UnreadCountResponse(BaseModel):
    unread: int
