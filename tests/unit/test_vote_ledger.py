"""Unit tests for the VoteLedger."""

import uuid

import pytest

from stackit.engines.voting import VoteLedger
from stackit.kernel.errors import InvalidArgumentError
from stackit.kernel.store import AnswerRecord, VoteDirection


def make_answer(**kwargs) -> AnswerRecord:
    defaults = dict(
        id=uuid.uuid4(),
        question_id=uuid.uuid4(),
        author_id=uuid.uuid4(),
        content="answer",
    )
    defaults.update(kwargs)
    return AnswerRecord(**defaults)


class TestApplyVote:
    """Tests for cast / switch / retract transitions."""

    def test_cast_upvote(self):
        voter = uuid.uuid4()
        outcome = VoteLedger.apply_vote(make_answer(), voter, "up")

        assert outcome.entity.upvoters == {voter}
        assert outcome.score == 1
        assert outcome.previous_vote is None
        assert outcome.current_vote is VoteDirection.UP

    def test_same_direction_retracts(self):
        """Voting the same way twice removes the vote."""
        voter = uuid.uuid4()
        answer = make_answer(upvoters=frozenset({voter}))

        outcome = VoteLedger.apply_vote(answer, voter, VoteDirection.UP)

        assert outcome.entity.upvoters == frozenset()
        assert outcome.score == 0
        assert outcome.retracted is True
        assert outcome.current_vote is None

    def test_opposite_direction_switches(self):
        voter = uuid.uuid4()
        answer = make_answer(upvoters=frozenset({voter}))

        outcome = VoteLedger.apply_vote(answer, voter, "down")

        assert voter not in outcome.entity.upvoters
        assert outcome.entity.downvoters == {voter}
        assert outcome.score == -1
        assert outcome.previous_vote is VoteDirection.UP

    def test_other_voters_untouched(self):
        voter, other_up, other_down = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
        answer = make_answer(
            upvoters=frozenset({other_up}),
            downvoters=frozenset({other_down}),
        )

        outcome = VoteLedger.apply_vote(answer, voter, "up")

        assert outcome.entity.upvoters == {other_up, voter}
        assert outcome.entity.downvoters == {other_down}
        assert outcome.score == 1

    def test_input_snapshot_is_not_mutated(self):
        answer = make_answer()
        VoteLedger.apply_vote(answer, uuid.uuid4(), "up")

        assert answer.upvoters == frozenset()
        assert answer.version == 1

    def test_voter_never_in_both_sets(self):
        voter = uuid.uuid4()
        entity = make_answer()
        for direction in ["up", "down", "down", "up", "up", "down"]:
            entity = VoteLedger.apply_vote(entity, voter, direction).entity
            assert not (entity.upvoters & entity.downvoters)
            assert entity.score == len(entity.upvoters) - len(entity.downvoters)


class TestParseDirection:
    """Tests for direction validation."""

    @pytest.mark.parametrize("value", ["sideways", "", "UP", None])
    def test_invalid_direction_rejected(self, value):
        with pytest.raises(InvalidArgumentError) as exc_info:
            VoteLedger.parse_direction(value)
        assert exc_info.value.code == "invalid_argument"

    def test_enum_passes_through(self):
        assert VoteLedger.parse_direction(VoteDirection.DOWN) is VoteDirection.DOWN


class TestRecords:
    """Invariants enforced by the snapshot records."""

    def test_overlapping_vote_sets_rejected(self):
        voter = uuid.uuid4()
        with pytest.raises(ValueError):
            make_answer(upvoters=frozenset({voter}), downvoters=frozenset({voter}))

    def test_vote_of(self):
        up, down = uuid.uuid4(), uuid.uuid4()
        answer = make_answer(upvoters=frozenset({up}), downvoters=frozenset({down}))

        assert answer.vote_of(up) is VoteDirection.UP
        assert answer.vote_of(down) is VoteDirection.DOWN
        assert answer.vote_of(uuid.uuid4()) is None
