"""
EntityStore port.

Key-addressed persistence for questions, answers and notifications with
optimistic-versioned writes. Only questions and answers are versioned;
notifications are append-only.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence

from stackit.kernel.store.records import (
    AnswerRecord,
    EntityKind,
    NotificationRecord,
    Record,
    VotableRecord,
)


@dataclass(frozen=True)
class PendingWrite:
    """One record of a multi-record commit unit."""

    kind: EntityKind
    entity_id: uuid.UUID
    expected_version: int
    record: VotableRecord


class EntityStore(ABC):
    """
    Abstract store used by the engine.

    Implementations must guarantee that a commit succeeds only when the
    stored version equals ``expected_version`` and that each successful
    commit bumps the version by exactly one.
    """

    # Whether commit_all() is all-or-nothing. Stores without it force the
    # AcceptanceCoordinator onto its ordered two-step protocol.
    supports_atomic_commit: bool = True

    @abstractmethod
    async def get(self, kind: EntityKind, entity_id: uuid.UUID) -> Record:
        """
        Load a record; versioned records carry the version they were read at.

        Raises:
            NotFoundError: If no such record exists
        """

    @abstractmethod
    async def commit(
        self,
        kind: EntityKind,
        entity_id: uuid.UUID,
        expected_version: int,
        record: VotableRecord,
    ) -> int:
        """
        Compare-and-swap a versioned record.

        Returns:
            The new version

        Raises:
            VersionConflictError: If the stored version is not expected_version
            NotFoundError: If the record vanished
        """

    async def commit_all(self, writes: Sequence[PendingWrite]) -> List[int]:
        """
        Commit several versioned records as one unit.

        Either every write lands or none does; a conflict on any one raises
        VersionConflictError and leaves all records untouched.
        """
        raise NotImplementedError(f"{type(self).__name__} has no atomic multi-record commit")

    @abstractmethod
    async def create(self, record: Record) -> Record:
        """Insert a new record (version 1 for votable records) and return it as stored."""

    @abstractmethod
    async def list_answers(self, question_id: uuid.UUID) -> List[AnswerRecord]:
        """All answers of a question, oldest first."""

    @abstractmethod
    async def list_notifications(
        self,
        recipient_id: uuid.UUID,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> List[NotificationRecord]:
        """A recipient's notifications, newest first."""

    @abstractmethod
    async def count_notifications(
        self,
        recipient_id: uuid.UUID,
        unread_only: bool = False,
    ) -> int:
        """Count a recipient's notifications."""


def check_write(kind: EntityKind, entity_id: uuid.UUID, record: Record) -> None:
    """Reject writes whose record does not match the addressed key."""
    if record.kind is not kind:
        raise ValueError(f"record of kind {record.kind.value} addressed as {kind.value}")
    if record.id != entity_id:
        raise ValueError(f"record {record.id} addressed as {entity_id}")
    if kind is EntityKind.NOTIFICATION:
        raise ValueError("notifications are append-only")
