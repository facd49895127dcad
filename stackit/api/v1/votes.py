"""
Vote and accept commands.

Engine errors propagate to the application's EngineError handler, which
maps their codes to HTTP statuses.
"""

from fastapi import APIRouter

from stackit.api.deps import CurrentUser, Facade
from stackit.schemas.vote import AcceptRequest, AcceptResponse, VoteRequest, VoteResponse

router = APIRouter()


@router.post("/vote", response_model=VoteResponse)
async def vote(data: VoteRequest, user: CurrentUser, facade: Facade):
    """
    Cast, switch or retract a vote.

    Repeating the current direction retracts it.
    """
    result = await facade.vote(data.target_kind, data.target_id, user.id, data.direction)
    return VoteResponse(
        score=result.score,
        current_vote=result.current_vote.value if result.current_vote else None,
    )


@router.post("/accept", response_model=AcceptResponse)
async def accept(data: AcceptRequest, user: CurrentUser, facade: Facade):
    """Accept an answer. Only the question author may do this."""
    result = await facade.accept_answer(
        data.question_id,
        data.answer_id,
        user.id,
        actor_name=user.username,
    )
    return AcceptResponse(
        accepted_answer_id=result.accepted_answer_id,
        changed=result.changed,
        warnings=result.warnings,
    )
