"""
Answer model.
"""

import uuid

from sqlalchemy import Boolean, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from stackit.kernel.models.base import Base, TimestampMixin, VotableMixin, generate_uuid


class Answer(Base, TimestampMixin, VotableMixin):
    """An answer to a question. ``is_accepted`` is written only by acceptance."""

    __tablename__ = "answers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    is_accepted: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Answer {self.id} question={self.question_id} accepted={self.is_accepted}>"
