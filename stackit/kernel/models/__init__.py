"""
Kernel Data Models

SQLAlchemy tables behind the EntityStore.
"""

from stackit.kernel.models.base import Base, TimestampMixin, VotableMixin, generate_uuid
from stackit.kernel.models.user import User
from stackit.kernel.models.question import Question
from stackit.kernel.models.answer import Answer
from stackit.kernel.models.notification import Notification, NotificationKind

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "VotableMixin",
    "generate_uuid",
    # Identity
    "User",
    # Q&A
    "Question",
    "Answer",
    # Notifications
    "Notification",
    "NotificationKind",
]
