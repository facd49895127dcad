"""
Question and answer endpoints.
"""

import uuid

from fastapi import APIRouter, status

from stackit.api.deps import CurrentUser, Facade, Store
from stackit.kernel.store.records import EntityKind
from stackit.schemas.question import (
    AnswerCreate,
    AnswerResponse,
    PostAnswerResponse,
    QuestionCreate,
    QuestionDetailResponse,
    QuestionResponse,
)

router = APIRouter()


@router.post("", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_question(data: QuestionCreate, user: CurrentUser, facade: Facade):
    """Ask a question."""
    question = await facade.create_question(user.id, data.title, data.body)
    return QuestionResponse.from_record(question)


@router.get("/{question_id}", response_model=QuestionDetailResponse)
async def get_question(question_id: uuid.UUID, store: Store):
    """Get a question with its answers, scores and acceptance state."""
    question = await store.get(EntityKind.QUESTION, question_id)
    answers = await store.list_answers(question_id)
    return QuestionDetailResponse(
        **QuestionResponse.from_record(question).model_dump(),
        answers=[AnswerResponse.from_record(a) for a in answers],
    )


@router.post(
    "/{question_id}/answers",
    response_model=PostAnswerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_answer(
    question_id: uuid.UUID,
    data: AnswerCreate,
    user: CurrentUser,
    facade: Facade,
):
    """
    Answer a question.

    The question author is notified; a failed notification comes back in
    ``warnings`` and does not fail the request.
    """
    result = await facade.post_answer(
        question_id,
        user.id,
        data.content,
        actor_name=user.username,
    )
    return PostAnswerResponse(
        answer=AnswerResponse.from_record(result.answer),
        warnings=result.warnings,
    )
