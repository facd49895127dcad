"""
Vote Ledger - per-user vote state on a question or answer.
"""

import uuid
from typing import Optional, Union

from pydantic import BaseModel

from stackit.kernel.errors import InvalidArgumentError
from stackit.kernel.store.records import VotableRecord, VoteDirection


class VoteOutcome(BaseModel):
    """Next snapshot of a votable entity after one vote command."""

    entity: VotableRecord
    previous_vote: Optional[VoteDirection]
    current_vote: Optional[VoteDirection]

    @property
    def score(self) -> int:
        return self.entity.score

    @property
    def retracted(self) -> bool:
        return self.previous_vote is not None and self.current_vote is None


class VoteLedger:
    """
    Computes vote-set transitions. Pure: persistence belongs to the caller.

    For a requested direction D:
    - voter already in D's set: retract (no vote afterwards)
    - voter in the opposite set: switch to D
    - otherwise: cast D

    A voter is never in both sets, and the score is always recomputed from
    the sets rather than stored.
    """

    @staticmethod
    def parse_direction(direction: Union[VoteDirection, str]) -> VoteDirection:
        """
        Validate a direction.

        Raises:
            InvalidArgumentError: If direction is not "up" or "down"
        """
        if isinstance(direction, VoteDirection):
            return direction
        try:
            return VoteDirection(direction)
        except ValueError:
            raise InvalidArgumentError(
                f"Invalid vote direction {direction!r}; expected 'up' or 'down'"
            ) from None

    @classmethod
    def apply_vote(
        cls,
        entity: VotableRecord,
        voter_id: uuid.UUID,
        direction: Union[VoteDirection, str],
    ) -> VoteOutcome:
        """
        Apply one vote command to a snapshot.

        Args:
            entity: Question or answer snapshot as read from the store
            voter_id: The voting user
            direction: "up" or "down"

        Returns:
            VoteOutcome with the new snapshot (same version as the input;
            the store bumps it on commit)
        """
        wanted = cls.parse_direction(direction)
        previous = entity.vote_of(voter_id)

        upvoters = set(entity.upvoters)
        downvoters = set(entity.downvoters)
        upvoters.discard(voter_id)
        downvoters.discard(voter_id)

        if previous is wanted:
            current = None
        else:
            (upvoters if wanted is VoteDirection.UP else downvoters).add(voter_id)
            current = wanted

        updated = entity.model_copy(
            update={
                "upvoters": frozenset(upvoters),
                "downvoters": frozenset(downvoters),
            }
        )
        return VoteOutcome(entity=updated, previous_vote=previous, current_vote=current)
