"""
Entity persistence behind the vote & acceptance engine.
"""

from stackit.kernel.store.base import EntityStore, PendingWrite
from stackit.kernel.store.memory_store import InMemoryEntityStore
from stackit.kernel.store.records import (
    AnswerRecord,
    EntityKind,
    NotificationRecord,
    QuestionRecord,
    Record,
    VotableRecord,
    VoteDirection,
)
from stackit.kernel.store.sql_store import SqlEntityStore

__all__ = [
    "EntityStore",
    "PendingWrite",
    "InMemoryEntityStore",
    "SqlEntityStore",
    "EntityKind",
    "VoteDirection",
    "Record",
    "VotableRecord",
    "QuestionRecord",
    "AnswerRecord",
    "NotificationRecord",
]
