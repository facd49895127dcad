"""
Notification Dispatcher - best-effort fan-out of committed domain events.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from stackit.kernel.errors import NotificationDeliveryFailure
from stackit.kernel.events.event_types import AnswerAccepted, AnswerCreated, DomainEvent
from stackit.kernel.models.notification import NotificationKind
from stackit.kernel.store.base import EntityStore
from stackit.kernel.store.records import NotificationRecord
from stackit.logging_config import get_logger

logger = get_logger(__name__)

UNKNOWN_ACTOR = "Someone"


@dataclass
class DispatchOutcome:
    """What happened to one event. At most one of the two fields is set."""

    notification: Optional[NotificationRecord] = None
    failure: Optional[NotificationDeliveryFailure] = None

    @property
    def warning(self) -> Optional[str]:
        return self.failure.message if self.failure else None


class NotificationDispatcher:
    """
    Turns one committed event into zero or one Notification.

    Rules:
    - AnswerCreated notifies the question author, unless they posted it
    - AnswerAccepted notifies the answer author, unless they accepted it

    Runs strictly after the primary commit. A failed write is logged and
    reported back as a DispatchOutcome.failure; it never raises.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    @staticmethod
    def build_notification(event: DomainEvent) -> Optional[NotificationRecord]:
        """The notification an event calls for, or None for self-triggered events."""
        actor_name = event.actor_name or UNKNOWN_ACTOR
        title = event.question.title

        if isinstance(event, AnswerCreated):
            recipient_id = event.question.author_id
            kind = NotificationKind.ANSWER_POSTED
            message = f"{actor_name} answered your question: {title}"
        elif isinstance(event, AnswerAccepted):
            recipient_id = event.answer.author_id
            kind = NotificationKind.ANSWER_ACCEPTED
            message = f"Your answer was accepted for: {title}"
        else:
            raise TypeError(f"Unsupported event: {type(event).__name__}")

        if recipient_id == event.actor_id:
            return None

        return NotificationRecord(
            id=uuid.uuid4(),
            recipient_id=recipient_id,
            sender_id=event.actor_id,
            notification_kind=kind,
            message=message,
            related_question_id=event.question.id,
            related_answer_id=event.answer.id,
        )

    async def dispatch(self, event: DomainEvent) -> DispatchOutcome:
        notification = self.build_notification(event)
        if notification is None:
            return DispatchOutcome()

        try:
            stored = await self.store.create(notification)
        except Exception as exc:
            logger.warning(
                "Notification delivery failed",
                exc_info=True,
                extra={
                    "event_id": str(event.event_id),
                    "event_type": event.event_type,
                    "recipient_id": str(notification.recipient_id),
                },
            )
            failure = NotificationDeliveryFailure(
                f"Could not notify user {notification.recipient_id} "
                f"({notification.notification_kind.value}): {exc}"
            )
            return DispatchOutcome(failure=failure)

        logger.debug(
            "Notification created",
            extra={
                "notification_id": str(stored.id),
                "recipient_id": str(stored.recipient_id),
                "kind": stored.notification_kind.value,
            },
        )
        return DispatchOutcome(notification=stored)
