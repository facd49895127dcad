"""
SQLAlchemy-backed EntityStore.

Each call opens its own session from the injected factory, so a retry always
re-reads committed state. Versioned writes are compare-and-swap UPDATEs:

    UPDATE answers SET ..., version = :expected + 1
    WHERE id = :id AND version = :expected

A rowcount of zero means someone else committed first.
"""

import uuid
from typing import Any, Dict, List, Sequence

from sqlalchemy import and_, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stackit.kernel.errors import NotFoundError, VersionConflictError
from stackit.kernel.models import Answer, Notification, Question
from stackit.kernel.store.base import EntityStore, PendingWrite, check_write
from stackit.kernel.store.records import (
    AnswerRecord,
    EntityKind,
    NotificationRecord,
    QuestionRecord,
    Record,
    VotableRecord,
)

_MODELS = {
    EntityKind.QUESTION: Question,
    EntityKind.ANSWER: Answer,
    EntityKind.NOTIFICATION: Notification,
}


def _voters_to_column(voters) -> list:
    return sorted(str(v) for v in voters)


def _voters_from_column(values) -> frozenset:
    return frozenset(uuid.UUID(v) for v in values or ())


def to_record(kind: EntityKind, row: Any) -> Record:
    """Convert an ORM row to its snapshot record."""
    if kind is EntityKind.QUESTION:
        return QuestionRecord(
            id=row.id,
            author_id=row.author_id,
            title=row.title,
            body=row.body,
            accepted_answer_id=row.accepted_answer_id,
            upvoters=_voters_from_column(row.upvoters),
            downvoters=_voters_from_column(row.downvoters),
            version=row.version,
            created_at=row.created_at,
        )
    if kind is EntityKind.ANSWER:
        return AnswerRecord(
            id=row.id,
            question_id=row.question_id,
            author_id=row.author_id,
            content=row.content,
            is_accepted=row.is_accepted,
            upvoters=_voters_from_column(row.upvoters),
            downvoters=_voters_from_column(row.downvoters),
            version=row.version,
            created_at=row.created_at,
        )
    return NotificationRecord(
        id=row.id,
        recipient_id=row.recipient_id,
        sender_id=row.sender_id,
        notification_kind=row.kind,
        message=row.message,
        related_question_id=row.related_question_id,
        related_answer_id=row.related_answer_id,
        is_read=row.is_read,
        created_at=row.created_at,
    )


def _engine_columns(record: VotableRecord) -> Dict[str, Any]:
    """Columns a versioned commit may change. Text content is not engine state."""
    values: Dict[str, Any] = {
        "upvoters": _voters_to_column(record.upvoters),
        "downvoters": _voters_to_column(record.downvoters),
    }
    if isinstance(record, QuestionRecord):
        values["accepted_answer_id"] = record.accepted_answer_id
    elif isinstance(record, AnswerRecord):
        values["is_accepted"] = record.is_accepted
    return values


def _to_row(record: Record) -> Any:
    if isinstance(record, QuestionRecord):
        return Question(
            id=record.id,
            author_id=record.author_id,
            title=record.title,
            body=record.body,
            accepted_answer_id=record.accepted_answer_id,
            upvoters=_voters_to_column(record.upvoters),
            downvoters=_voters_to_column(record.downvoters),
            version=1,
        )
    if isinstance(record, AnswerRecord):
        return Answer(
            id=record.id,
            question_id=record.question_id,
            author_id=record.author_id,
            content=record.content,
            is_accepted=record.is_accepted,
            upvoters=_voters_to_column(record.upvoters),
            downvoters=_voters_to_column(record.downvoters),
            version=1,
        )
    return Notification(
        id=record.id,
        recipient_id=record.recipient_id,
        sender_id=record.sender_id,
        kind=record.notification_kind.value,
        message=record.message,
        related_question_id=record.related_question_id,
        related_answer_id=record.related_answer_id,
        is_read=record.is_read,
    )


class SqlEntityStore(EntityStore):
    """
    EntityStore over an async SQLAlchemy session factory.

    Usage:
        store = SqlEntityStore(create_session_maker(engine))
        answer = await store.get(EntityKind.ANSWER, answer_id)
    """

    supports_atomic_commit = True

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def get(self, kind: EntityKind, entity_id: uuid.UUID) -> Record:
        async with self._session_maker() as session:
            row = await session.get(_MODELS[kind], entity_id)
            if row is None:
                raise NotFoundError(f"{kind.value.capitalize()} not found")
            return to_record(kind, row)

    async def commit(
        self,
        kind: EntityKind,
        entity_id: uuid.UUID,
        expected_version: int,
        record: VotableRecord,
    ) -> int:
        check_write(kind, entity_id, record)
        async with self._session_maker() as session:
            async with session.begin():
                return await self._swap(session, kind, entity_id, expected_version, record)

    async def commit_all(self, writes: Sequence[PendingWrite]) -> List[int]:
        for w in writes:
            check_write(w.kind, w.entity_id, w.record)
        async with self._session_maker() as session:
            # Any exception inside begin() rolls the whole unit back
            async with session.begin():
                return [
                    await self._swap(session, w.kind, w.entity_id, w.expected_version, w.record)
                    for w in writes
                ]

    async def create(self, record: Record) -> Record:
        async with self._session_maker() as session:
            async with session.begin():
                row = _to_row(record)
                session.add(row)
                await session.flush()
                await session.refresh(row)
                return to_record(record.kind, row)

    async def list_answers(self, question_id: uuid.UUID) -> List[AnswerRecord]:
        query = (
            select(Answer)
            .where(Answer.question_id == question_id)
            .order_by(Answer.created_at, Answer.id)
        )
        async with self._session_maker() as session:
            result = await session.execute(query)
            return [to_record(EntityKind.ANSWER, row) for row in result.scalars().all()]

    async def list_notifications(
        self,
        recipient_id: uuid.UUID,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> List[NotificationRecord]:
        query = select(Notification).where(self._notification_filter(recipient_id, unread_only))
        query = query.order_by(desc(Notification.created_at)).offset(offset).limit(limit)
        async with self._session_maker() as session:
            result = await session.execute(query)
            return [to_record(EntityKind.NOTIFICATION, row) for row in result.scalars().all()]

    async def count_notifications(
        self,
        recipient_id: uuid.UUID,
        unread_only: bool = False,
    ) -> int:
        query = select(func.count(Notification.id)).where(
            self._notification_filter(recipient_id, unread_only)
        )
        async with self._session_maker() as session:
            result = await session.execute(query)
            return result.scalar() or 0

    @staticmethod
    def _notification_filter(recipient_id: uuid.UUID, unread_only: bool):
        conditions = [Notification.recipient_id == recipient_id]
        if unread_only:
            conditions.append(Notification.is_read.is_(False))
        return and_(*conditions)

    async def _swap(
        self,
        session: AsyncSession,
        kind: EntityKind,
        entity_id: uuid.UUID,
        expected_version: int,
        record: VotableRecord,
    ) -> int:
        model = _MODELS[kind]
        stmt = (
            update(model)
            .where(and_(model.id == entity_id, model.version == expected_version))
            .values(**_engine_columns(record), version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        if result.rowcount == 1:
            return expected_version + 1

        exists = await session.scalar(select(model.id).where(model.id == entity_id))
        if exists is None:
            raise NotFoundError(f"{kind.value.capitalize()} not found")
        raise VersionConflictError(kind.value, entity_id, expected_version)
