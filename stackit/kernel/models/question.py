"""
Question model.
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from stackit.kernel.models.base import Base, TimestampMixin, VotableMixin, generate_uuid


class Question(Base, TimestampMixin, VotableMixin):
    """A question. Owns the pointer to its accepted answer."""

    __tablename__ = "questions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(
        String(300),
        nullable=False,
    )
    body: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    # No FK: answers.question_id already references questions
    accepted_answer_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Question {self.id} v{self.version}>"
