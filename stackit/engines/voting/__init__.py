"""
Vote & Acceptance Consistency Engine.

- VoteLedger: mutually exclusive up/down vote sets, score = |up| - |down|
- AcceptanceCoordinator: at most one accepted answer per question
- NotificationDispatcher: best-effort fan-out after commit
- VoteAcceptFacade: mutate -> commit (bounded optimistic retry) -> dispatch
"""

from stackit.engines.voting.vote_ledger import VoteLedger, VoteOutcome
from stackit.engines.voting.acceptance_coordinator import (
    AcceptanceCoordinator,
    AcceptanceResult,
)
from stackit.engines.voting.notification_dispatcher import (
    DispatchOutcome,
    NotificationDispatcher,
)
from stackit.engines.voting.facade import (
    AcceptResult,
    PostAnswerResult,
    VoteAcceptFacade,
    VoteResult,
)

__all__ = [
    "VoteLedger",
    "VoteOutcome",
    "AcceptanceCoordinator",
    "AcceptanceResult",
    "NotificationDispatcher",
    "DispatchOutcome",
    "VoteAcceptFacade",
    "VoteResult",
    "AcceptResult",
    "PostAnswerResult",
]
