"""
Snapshot records exchanged with the EntityStore.

Records are frozen; the ledger and the coordinator derive new snapshots with
``model_copy(update=...)`` and hand them back to the store to commit.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import ClassVar, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, computed_field, model_validator

from stackit.kernel.models.notification import NotificationKind


class EntityKind(str, Enum):
    """Record families held by the store."""
    QUESTION = "question"
    ANSWER = "answer"
    NOTIFICATION = "notification"


class VoteDirection(str, Enum):
    """Requested vote direction."""
    UP = "up"
    DOWN = "down"


class Record(BaseModel):
    """Common base for stored snapshots."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[EntityKind]

    id: uuid.UUID
    created_at: Optional[datetime] = None


class VotableRecord(Record):
    """A question or answer with its vote sets and version counter."""

    author_id: uuid.UUID
    upvoters: FrozenSet[uuid.UUID] = frozenset()
    downvoters: FrozenSet[uuid.UUID] = frozenset()
    version: int = 1

    @model_validator(mode="after")
    def _voters_are_exclusive(self) -> "VotableRecord":
        both = self.upvoters & self.downvoters
        if both:
            raise ValueError(f"voters in both up and down sets: {sorted(map(str, both))}")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def score(self) -> int:
        return len(self.upvoters) - len(self.downvoters)

    def vote_of(self, voter_id: uuid.UUID) -> Optional[VoteDirection]:
        """The voter's current vote, or None."""
        if voter_id in self.upvoters:
            return VoteDirection.UP
        if voter_id in self.downvoters:
            return VoteDirection.DOWN
        return None


class QuestionRecord(VotableRecord):
    kind: ClassVar[EntityKind] = EntityKind.QUESTION

    title: str
    body: str = ""
    accepted_answer_id: Optional[uuid.UUID] = None


class AnswerRecord(VotableRecord):
    kind: ClassVar[EntityKind] = EntityKind.ANSWER

    question_id: uuid.UUID
    content: str
    is_accepted: bool = False


class NotificationRecord(Record):
    kind: ClassVar[EntityKind] = EntityKind.NOTIFICATION

    recipient_id: uuid.UUID
    sender_id: uuid.UUID
    notification_kind: NotificationKind
    message: str
    related_question_id: Optional[uuid.UUID] = None
    related_answer_id: Optional[uuid.UUID] = None
    is_read: bool = False

