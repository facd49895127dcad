"""
Pydantic schemas for API request/response validation.
"""

from stackit.schemas.auth import (
    UserCreate,
    UserLogin,
    UserResponse,
    TokenResponse,
)
from stackit.schemas.question import (
    QuestionCreate,
    QuestionResponse,
    QuestionDetailResponse,
    AnswerCreate,
    AnswerResponse,
    PostAnswerResponse,
)
from stackit.schemas.vote import (
    VoteRequest,
    VoteResponse,
    AcceptRequest,
    AcceptResponse,
)
from stackit.schemas.notification import (
    NotificationResponse,
    UnreadCountResponse,
)
from stackit.schemas.common import (
    PaginatedResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    # Auth
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "TokenResponse",
    # Questions & answers
    "QuestionCreate",
    "QuestionResponse",
    "QuestionDetailResponse",
    "AnswerCreate",
    "AnswerResponse",
    "PostAnswerResponse",
    # Commands
    "VoteRequest",
    "VoteResponse",
    "AcceptRequest",
    "AcceptResponse",
    # Notifications
    "NotificationResponse",
    "UnreadCountResponse",
    # Common
    "PaginatedResponse",
    "ErrorResponse",
    "HealthResponse",
]
