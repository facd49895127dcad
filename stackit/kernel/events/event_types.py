"""
Domain event definitions using Pydantic for validation.

Events are transient: the facade emits each one exactly once, right after
the commit that caused it, and the NotificationDispatcher consumes it.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field

from stackit.kernel.store.records import AnswerRecord, QuestionRecord


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseEvent(BaseModel):
    """Base event payload structure."""

    event_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    timestamp: datetime = Field(default_factory=_utcnow)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class AnswerEvent(BaseEvent):
    """Something happened to an answer of a question."""

    question: QuestionRecord
    answer: AnswerRecord
    actor_id: uuid.UUID
    actor_name: Optional[str] = None  # display name for notification text


class AnswerCreated(AnswerEvent):
    """An answer was posted."""

    event_type: Literal["answer.created"] = "answer.created"


class AnswerAccepted(AnswerEvent):
    """The question author accepted an answer."""

    event_type: Literal["answer.accepted"] = "answer.accepted"
    previous_answer_id: Optional[uuid.UUID] = None


DomainEvent = Union[AnswerCreated, AnswerAccepted]
