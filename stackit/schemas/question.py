"""
Question and answer schemas.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from stackit.kernel.store.records import AnswerRecord, QuestionRecord


class QuestionCreate(BaseModel):
    """Question creation request."""

    title: str = Field(..., min_length=1, max_length=300)
    body: str = Field("", max_length=20000)


class AnswerCreate(BaseModel):
    """Answer creation request."""

    content: str = Field(..., min_length=1, max_length=20000)


class AnswerResponse(BaseModel):
    """Answer with its derived score."""

    id: uuid.UUID
    question_id: uuid.UUID
    author_id: uuid.UUID
    content: str
    is_accepted: bool
    score: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: AnswerRecord) -> "AnswerResponse":
        return cls(
            id=record.id,
            question_id=record.question_id,
            author_id=record.author_id,
            content=record.content,
            is_accepted=record.is_accepted,
            score=record.score,
            created_at=record.created_at,
        )


class QuestionResponse(BaseModel):
    """Question with its derived score."""

    id: uuid.UUID
    author_id: uuid.UUID
    title: str
    body: str
    accepted_answer_id: Optional[uuid.UUID]
    score: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: QuestionRecord) -> "QuestionResponse":
        return cls(
            id=record.id,
            author_id=record.author_id,
            title=record.title,
            body=record.body,
            accepted_answer_id=record.accepted_answer_id,
            score=record.score,
            created_at=record.created_at,
        )


class QuestionDetailResponse(QuestionResponse):
    """Question plus all of its answers."""

    answers: List[AnswerResponse] = []


class PostAnswerResponse(BaseModel):
    answer: AnswerResponse
    warnings: List[str] = []
