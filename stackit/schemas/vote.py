"""
Vote and accept command schemas.

Direction and target kind stay plain strings here so that malformed values
reach the engine and come back as ``invalid_argument``.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field


class VoteRequest(BaseModel):
    """``POST /vote`` body."""

    target_kind: str = Field(..., description="question | answer")
    target_id: uuid.UUID
    direction: str = Field(..., description="up | down")


class VoteResponse(BaseModel):
    score: int
    current_vote: Optional[str] = None


class AcceptRequest(BaseModel):
    """``POST /accept`` body."""

    question_id: uuid.UUID
    answer_id: uuid.UUID


class AcceptResponse(BaseModel):
    accepted_answer_id: uuid.UUID
    changed: bool
    warnings: List[str] = []
