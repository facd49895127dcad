"""
Vote & Accept Facade - public entry point of the engine.

Every command runs mutate -> commit -> dispatch:

- the mutate/commit part is retried on VersionConflictError with a bounded
  budget (exhaustion surfaces as ConflictError)
- the domain event is built once, after the retry loop has produced a
  successful commit, so each commit emits exactly one event
- dispatch failures come back as warnings on a successful result
"""

import logging
import uuid
from typing import Awaitable, Callable, List, Optional, TypeVar, Union

from pydantic import BaseModel, Field
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
    wait_random,
)

from stackit.config import Settings
from stackit.engines.voting.acceptance_coordinator import AcceptanceCoordinator
from stackit.engines.voting.notification_dispatcher import NotificationDispatcher
from stackit.engines.voting.vote_ledger import VoteLedger
from stackit.kernel.errors import ConflictError, InvalidArgumentError, VersionConflictError
from stackit.kernel.events.event_types import AnswerAccepted, AnswerCreated, DomainEvent
from stackit.kernel.store.base import EntityStore
from stackit.kernel.store.records import (
    AnswerRecord,
    EntityKind,
    QuestionRecord,
    VotableRecord,
    VoteDirection,
)
from stackit.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

VOTABLE_KINDS = (EntityKind.QUESTION, EntityKind.ANSWER)


class VoteResult(BaseModel):
    """Committed vote state."""

    score: int
    entity: VotableRecord
    current_vote: Optional[VoteDirection] = None


class AcceptResult(BaseModel):
    """Committed acceptance state."""

    accepted_answer_id: uuid.UUID
    changed: bool
    warnings: List[str] = Field(default_factory=list)


class PostAnswerResult(BaseModel):
    answer: AnswerRecord
    warnings: List[str] = Field(default_factory=list)


class VoteAcceptFacade:
    """
    Orchestrates VoteLedger, AcceptanceCoordinator and NotificationDispatcher
    over an explicit EntityStore handle.

    Usage:
        facade = VoteAcceptFacade(store, max_vote_attempts=5)
        result = await facade.vote("answer", answer_id, user.id, "up")
    """

    def __init__(
        self,
        store: EntityStore,
        dispatcher: Optional[NotificationDispatcher] = None,
        *,
        max_vote_attempts: int = 5,
        max_accept_attempts: int = 5,
        retry_backoff_ms: int = 0,
    ):
        if max_vote_attempts < 1 or max_accept_attempts < 1:
            raise ValueError("retry budgets must allow at least one attempt")
        self.store = store
        self.dispatcher = dispatcher or NotificationDispatcher(store)
        self.coordinator = AcceptanceCoordinator(store)
        self.max_vote_attempts = max_vote_attempts
        self.max_accept_attempts = max_accept_attempts
        self.retry_backoff_ms = retry_backoff_ms

    @classmethod
    def from_settings(cls, store: EntityStore, settings: Settings) -> "VoteAcceptFacade":
        return cls(
            store,
            max_vote_attempts=settings.vote_max_attempts,
            max_accept_attempts=settings.accept_max_attempts,
            retry_backoff_ms=settings.retry_backoff_ms,
        )

    async def vote(
        self,
        entity_kind: Union[EntityKind, str],
        entity_id: uuid.UUID,
        voter_id: uuid.UUID,
        direction: Union[VoteDirection, str],
    ) -> VoteResult:
        """
        Cast, switch or retract a vote.

        Returns:
            VoteResult with the committed score

        Raises:
            InvalidArgumentError: Bad entity kind or direction (no retry)
            NotFoundError: Entity does not exist (no retry)
            ConflictError: Retry budget exhausted
        """
        kind = self._parse_votable_kind(entity_kind)
        wanted = VoteLedger.parse_direction(direction)

        async def attempt() -> VoteResult:
            entity = await self.store.get(kind, entity_id)
            outcome = VoteLedger.apply_vote(entity, voter_id, wanted)
            new_version = await self.store.commit(kind, entity_id, entity.version, outcome.entity)
            committed = outcome.entity.model_copy(update={"version": new_version})
            return VoteResult(
                score=committed.score,
                entity=committed,
                current_vote=outcome.current_vote,
            )

        result = await self._with_retries("vote", self.max_vote_attempts, attempt)
        logger.info(
            "Vote committed",
            extra={
                "entity_kind": kind.value,
                "entity_id": str(entity_id),
                "voter_id": str(voter_id),
                "direction": wanted.value,
                "score": result.score,
            },
        )
        return result

    async def accept_answer(
        self,
        question_id: uuid.UUID,
        answer_id: uuid.UUID,
        requester_id: uuid.UUID,
        actor_name: Optional[str] = None,
    ) -> AcceptResult:
        """
        Accept an answer on behalf of the question author.

        Raises:
            NotFoundError, UnauthorizedError, InvalidReferenceError: No retry
            ConflictError: Retry budget exhausted
        """
        acceptance = await self._with_retries(
            "accept_answer",
            self.max_accept_attempts,
            lambda: self.coordinator.accept_answer(question_id, answer_id, requester_id),
        )

        warnings: List[str] = []
        if acceptance.changed:
            event = AnswerAccepted(
                question=acceptance.question,
                answer=acceptance.answer,
                actor_id=requester_id,
                actor_name=actor_name,
                previous_answer_id=acceptance.previous_answer_id,
            )
            warnings = await self._dispatch(event)

        return AcceptResult(
            accepted_answer_id=acceptance.accepted_answer_id,
            changed=acceptance.changed,
            warnings=warnings,
        )

    async def post_answer(
        self,
        question_id: uuid.UUID,
        author_id: uuid.UUID,
        content: str,
        actor_name: Optional[str] = None,
    ) -> PostAnswerResult:
        """
        Create an answer and notify the question author.

        Raises:
            NotFoundError: Question does not exist
        """
        question = await self.store.get(EntityKind.QUESTION, question_id)
        answer = await self.store.create(
            AnswerRecord(
                id=uuid.uuid4(),
                question_id=question_id,
                author_id=author_id,
                content=content,
            )
        )
        logger.info(
            "Answer posted",
            extra={"question_id": str(question_id), "answer_id": str(answer.id)},
        )

        event = AnswerCreated(
            question=question,
            answer=answer,
            actor_id=author_id,
            actor_name=actor_name,
        )
        return PostAnswerResult(answer=answer, warnings=await self._dispatch(event))

    async def create_question(
        self,
        author_id: uuid.UUID,
        title: str,
        body: str = "",
    ) -> QuestionRecord:
        return await self.store.create(
            QuestionRecord(id=uuid.uuid4(), author_id=author_id, title=title, body=body)
        )

    async def _dispatch(self, event: DomainEvent) -> List[str]:
        outcome = await self.dispatcher.dispatch(event)
        return [outcome.warning] if outcome.warning else []

    async def _with_retries(
        self,
        operation: str,
        max_attempts: int,
        attempt: Callable[[], Awaitable[T]],
    ) -> T:
        """Run one read-compute-write attempt until it commits or the budget runs out."""
        wait = (
            wait_random(0, self.retry_backoff_ms / 1000)
            if self.retry_backoff_ms > 0
            else wait_none()
        )
        try:
            async for retry_state in AsyncRetrying(
                stop=stop_after_attempt(max_attempts),
                wait=wait,
                retry=retry_if_exception_type(VersionConflictError),
                before_sleep=before_sleep_log(logger, logging.DEBUG),
                reraise=True,
            ):
                with retry_state:
                    result = await attempt()
        except VersionConflictError as exc:
            logger.warning(
                "Retry budget exhausted",
                extra={"operation": operation, "attempts": max_attempts},
            )
            raise ConflictError(
                f"{operation} kept conflicting with concurrent updates; try again"
            ) from exc
        return result

    @staticmethod
    def _parse_votable_kind(entity_kind: Union[EntityKind, str]) -> EntityKind:
        try:
            kind = EntityKind(entity_kind)
        except ValueError:
            kind = None
        if kind not in VOTABLE_KINDS:
            raise InvalidArgumentError(
                f"Invalid vote target {entity_kind!r}; expected 'question' or 'answer'"
            )
        return kind
