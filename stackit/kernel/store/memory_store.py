"""
In-process EntityStore.

Backs the unit tests and local tooling. A single asyncio.Lock guards every
compare-and-swap; reads yield to the event loop first so concurrent commands
interleave the way they would against a real database.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Sequence, Tuple

from stackit.kernel.errors import NotFoundError, VersionConflictError
from stackit.kernel.store.base import EntityStore, PendingWrite, check_write
from stackit.kernel.store.records import (
    AnswerRecord,
    EntityKind,
    NotificationRecord,
    Record,
    VotableRecord,
)


class InMemoryEntityStore(EntityStore):
    """
    Dict-backed store.

    Args:
        atomic: When False, commit_all() is unavailable and acceptance falls
            back to ordered single-record commits.
    """

    def __init__(self, atomic: bool = True):
        self.supports_atomic_commit = atomic
        self._records: Dict[Tuple[EntityKind, uuid.UUID], Record] = {}
        self._lock = asyncio.Lock()

    async def get(self, kind: EntityKind, entity_id: uuid.UUID) -> Record:
        await asyncio.sleep(0)
        try:
            return self._records[(kind, entity_id)]
        except KeyError:
            raise NotFoundError(f"{kind.value.capitalize()} not found") from None

    async def commit(
        self,
        kind: EntityKind,
        entity_id: uuid.UUID,
        expected_version: int,
        record: VotableRecord,
    ) -> int:
        check_write(kind, entity_id, record)
        async with self._lock:
            self._check_version(kind, entity_id, expected_version)
            return self._swap(kind, entity_id, expected_version, record)

    async def commit_all(self, writes: Sequence[PendingWrite]) -> List[int]:
        if not self.supports_atomic_commit:
            return await super().commit_all(writes)
        for w in writes:
            check_write(w.kind, w.entity_id, w.record)
        async with self._lock:
            # Validate everything before touching anything
            for w in writes:
                self._check_version(w.kind, w.entity_id, w.expected_version)
            return [
                self._swap(w.kind, w.entity_id, w.expected_version, w.record)
                for w in writes
            ]

    async def create(self, record: Record) -> Record:
        update = {"created_at": record.created_at or datetime.now(timezone.utc)}
        if isinstance(record, VotableRecord):
            update["version"] = 1
        stored = record.model_copy(update=update)
        async with self._lock:
            key = (record.kind, record.id)
            if key in self._records:
                raise ValueError(f"{record.kind.value} {record.id} already exists")
            self._records[key] = stored
        return stored

    async def list_answers(self, question_id: uuid.UUID) -> List[AnswerRecord]:
        answers = [
            r for (kind, _), r in self._records.items()
            if kind is EntityKind.ANSWER and r.question_id == question_id
        ]
        return sorted(answers, key=lambda a: a.created_at)

    async def list_notifications(
        self,
        recipient_id: uuid.UUID,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> List[NotificationRecord]:
        matches = self._notifications_for(recipient_id, unread_only)
        matches.sort(key=lambda n: n.created_at, reverse=True)
        return matches[offset:offset + limit]

    async def count_notifications(
        self,
        recipient_id: uuid.UUID,
        unread_only: bool = False,
    ) -> int:
        return len(self._notifications_for(recipient_id, unread_only))

    def _notifications_for(
        self,
        recipient_id: uuid.UUID,
        unread_only: bool,
    ) -> List[NotificationRecord]:
        return [
            r for (kind, _), r in self._records.items()
            if kind is EntityKind.NOTIFICATION
            and r.recipient_id == recipient_id
            and not (unread_only and r.is_read)
        ]

    def _check_version(self, kind: EntityKind, entity_id: uuid.UUID, expected_version: int) -> None:
        current = self._records.get((kind, entity_id))
        if current is None:
            raise NotFoundError(f"{kind.value.capitalize()} not found")
        if current.version != expected_version:
            raise VersionConflictError(kind.value, entity_id, expected_version)

    def _swap(
        self,
        kind: EntityKind,
        entity_id: uuid.UUID,
        expected_version: int,
        record: VotableRecord,
    ) -> int:
        new_version = expected_version + 1
        created_at = self._records[(kind, entity_id)].created_at
        self._records[(kind, entity_id)] = record.model_copy(
            update={"version": new_version, "created_at": created_at}
        )
        return new_version
