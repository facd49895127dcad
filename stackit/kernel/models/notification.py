"""
Notification model - append-only fan-out records.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, func, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from stackit.kernel.models.base import Base, generate_uuid


class NotificationKind(str, Enum):
    """What happened to trigger the notification."""
    ANSWER_POSTED = "answer-posted"
    ANSWER_ACCEPTED = "answer-accepted"


class Notification(Base):
    """
    A notification for one recipient.

    Rows are only ever inserted by the NotificationDispatcher; flipping
    ``is_read`` belongs to the request layer.
    """

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    recipient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id"),
        nullable=False,
    )
    sender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id"),
        nullable=False,
    )
    kind: Mapped[NotificationKind] = mapped_column(
        String(50),
        nullable=False,
    )
    message: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    related_question_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        nullable=True,
    )
    related_answer_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        nullable=True,
    )
    is_read: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_notifications_recipient_time", "recipient_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Notification {self.kind} to={self.recipient_id}>"
