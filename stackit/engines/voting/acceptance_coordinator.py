"""
Acceptance Coordinator - at most one accepted answer per question.

The accepted state lives in two places: ``question.accepted_answer_id`` and
each answer's ``is_accepted`` flag. Every transition rewrites both sides in
one commit unit so no reader ever sees two accepted answers, or a pointer to
an answer whose flag is false.

Stores without atomic multi-record commit get an ordered protocol instead:

1. set the new answer's flag
2. move the question pointer
3. clear the old answer's flag

A crash between steps leaves the question over-accepted; ``reconcile()``
repairs it by trusting the question pointer as ground truth. On such stores
a re-accept of the current answer also runs ``reconcile()``, so a retried
command converges even when step 3 lost a race.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel

from stackit.kernel.errors import (
    InvalidReferenceError,
    NotFoundError,
    UnauthorizedError,
    VersionConflictError,
)
from stackit.kernel.store.base import EntityStore, PendingWrite
from stackit.kernel.store.records import AnswerRecord, EntityKind, QuestionRecord
from stackit.logging_config import get_logger

logger = get_logger(__name__)

STALE_FLAG_ATTEMPTS = 3


class AcceptanceResult(BaseModel):
    """Committed (or unchanged) acceptance state of a question."""

    question: QuestionRecord
    answer: AnswerRecord
    previous_answer_id: Optional[uuid.UUID] = None
    changed: bool

    @property
    def accepted_answer_id(self) -> uuid.UUID:
        return self.answer.id


class AcceptanceCoordinator:
    """
    Owns the single-accepted-answer invariant.

    One call is one read-decide-commit attempt. A concurrent writer surfaces
    as VersionConflictError; the caller re-runs the whole attempt against
    fresh state.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    async def accept_answer(
        self,
        question_id: uuid.UUID,
        answer_id: uuid.UUID,
        requester_id: uuid.UUID,
    ) -> AcceptanceResult:
        """
        Make ``answer_id`` the accepted answer of ``question_id``.

        Args:
            question_id: The question being acted on
            answer_id: The answer to accept
            requester_id: Verified identity of the caller

        Returns:
            AcceptanceResult; ``changed`` is False for a re-accept of the
            current answer

        Raises:
            NotFoundError: If the question or answer does not exist
            UnauthorizedError: If the requester is not the question author
            InvalidReferenceError: If the answer belongs to another question
            VersionConflictError: If any involved record changed since read
        """
        question = await self.store.get(EntityKind.QUESTION, question_id)
        answer = await self.store.get(EntityKind.ANSWER, answer_id)

        if requester_id != question.author_id:
            raise UnauthorizedError("Only the question author can accept answers")
        if answer.question_id != question_id:
            raise InvalidReferenceError("Answer does not belong to this question")

        previous_id = question.accepted_answer_id
        if previous_id == answer_id:
            if not self.store.supports_atomic_commit:
                # Finish an earlier attempt that moved the pointer but died
                # before clearing the old flag.
                if answer.id in await self.reconcile(question_id):
                    answer = await self.store.get(EntityKind.ANSWER, answer_id)
            return AcceptanceResult(
                question=question,
                answer=answer,
                previous_answer_id=previous_id,
                changed=False,
            )

        previous = await self._load_previous(previous_id)
        new_answer = answer.model_copy(update={"is_accepted": True})
        new_question = question.model_copy(update={"accepted_answer_id": answer_id})

        if self.store.supports_atomic_commit:
            versions = await self._commit_atomic(
                question, new_question, answer, new_answer, previous
            )
        else:
            versions = await self._commit_ordered(
                question, new_question, answer, new_answer, previous
            )

        logger.info(
            "Answer accepted",
            extra={
                "question_id": str(question_id),
                "answer_id": str(answer_id),
                "previous_answer_id": str(previous_id) if previous_id else None,
            },
        )
        return AcceptanceResult(
            question=new_question.model_copy(update={"version": versions["question"]}),
            answer=new_answer.model_copy(update={"version": versions["answer"]}),
            previous_answer_id=previous_id,
            changed=True,
        )

    async def reconcile(self, question_id: uuid.UUID) -> List[uuid.UUID]:
        """
        Repair answer flags after a torn ordered-protocol write.

        The question pointer is ground truth: the pointed-to answer gets
        ``is_accepted = True`` and every other answer of the question gets
        False.

        Returns:
            Ids of the answers whose flag was rewritten
        """
        question = await self.store.get(EntityKind.QUESTION, question_id)
        repaired: List[uuid.UUID] = []

        for answer in await self.store.list_answers(question_id):
            should_be_accepted = answer.id == question.accepted_answer_id
            if answer.is_accepted == should_be_accepted:
                continue
            await self.store.commit(
                EntityKind.ANSWER,
                answer.id,
                answer.version,
                answer.model_copy(update={"is_accepted": should_be_accepted}),
            )
            repaired.append(answer.id)

        if repaired:
            logger.warning(
                "Repaired acceptance flags",
                extra={
                    "question_id": str(question_id),
                    "answer_ids": repaired,
                },
            )
        return repaired

    async def _load_previous(self, previous_id: Optional[uuid.UUID]) -> Optional[AnswerRecord]:
        if previous_id is None:
            return None
        try:
            return await self.store.get(EntityKind.ANSWER, previous_id)
        except NotFoundError:
            # Dangling pointer: nothing left to un-accept
            logger.warning(
                "Accepted answer pointer is dangling",
                extra={"answer_id": str(previous_id)},
            )
            return None

    async def _commit_atomic(
        self,
        question: QuestionRecord,
        new_question: QuestionRecord,
        answer: AnswerRecord,
        new_answer: AnswerRecord,
        previous: Optional[AnswerRecord],
    ) -> dict:
        writes = [
            PendingWrite(EntityKind.ANSWER, answer.id, answer.version, new_answer),
            PendingWrite(EntityKind.QUESTION, question.id, question.version, new_question),
        ]
        if previous is not None and previous.is_accepted:
            writes.append(
                PendingWrite(
                    EntityKind.ANSWER,
                    previous.id,
                    previous.version,
                    previous.model_copy(update={"is_accepted": False}),
                )
            )
        answer_version, question_version, *_ = await self.store.commit_all(writes)
        return {"answer": answer_version, "question": question_version}

    async def _commit_ordered(
        self,
        question: QuestionRecord,
        new_question: QuestionRecord,
        answer: AnswerRecord,
        new_answer: AnswerRecord,
        previous: Optional[AnswerRecord],
    ) -> dict:
        answer_version = answer.version
        if not answer.is_accepted:
            answer_version = await self.store.commit(
                EntityKind.ANSWER, answer.id, answer.version, new_answer
            )
        question_version = await self.store.commit(
            EntityKind.QUESTION, question.id, question.version, new_question
        )
        # The pointer has moved: the transition is committed from here on and
        # must not be retried, or the caller would see a no-op re-accept.
        if previous is not None and previous.is_accepted:
            try:
                await self.store.commit(
                    EntityKind.ANSWER,
                    previous.id,
                    previous.version,
                    previous.model_copy(update={"is_accepted": False}),
                )
            except VersionConflictError:
                await self._clear_stale_flags(question.id)
        return {"answer": answer_version, "question": question_version}

    async def _clear_stale_flags(self, question_id: uuid.UUID) -> None:
        """Step 3 lost a race with another writer; redo it from fresh state."""
        for _ in range(STALE_FLAG_ATTEMPTS):
            try:
                await self.reconcile(question_id)
                return
            except VersionConflictError:
                continue
        logger.warning(
            "Stale acceptance flag left for the next reconcile",
            extra={"question_id": question_id, "attempts": STALE_FLAG_ATTEMPTS},
        )
