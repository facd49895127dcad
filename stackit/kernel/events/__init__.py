"""
Domain events emitted after committed state changes.
"""

from stackit.kernel.events.event_types import (
    AnswerAccepted,
    AnswerCreated,
    AnswerEvent,
    BaseEvent,
    DomainEvent,
)

__all__ = [
    "BaseEvent",
    "AnswerEvent",
    "AnswerCreated",
    "AnswerAccepted",
    "DomainEvent",
]
