from typing import Iterable, Set

from quizroom.errors import RoundClosed
from quizroom.models import Participant


class AnswerBarrier:
    """Single-shot gate for one question index of one room.

    The round closes once every active participant has submitted, or on an
    explicit timeout. Once closed it never reopens.
    """

    def __init__(self, question_index: int):
        self.question_index = question_index
        self.closed = False
        self._submitted: Set[str] = set()

    def submit(self, participant: Participant, value) -> None:
        if self.closed:
            raise RoundClosed()
        # Last write wins; a resubmission is not counted twice
        participant.pending_answer = (self.question_index, value)
        self._submitted.add(participant.identity)

    def withdraw(self, participant: Participant) -> None:
        self._submitted.discard(participant.identity)
        if participant.has_answered(self.question_index):
            participant.clear_answer()

    def has_submitted(self, identity: str) -> bool:
        return identity in self._submitted

    def is_satisfied(self, active_identities: Iterable[str]) -> bool:
        active = set(active_identities)
        return bool(active) and active <= self._submitted

    def close(self) -> None:
        if self.closed:
            raise RoundClosed()
        self.closed = True

    @property
    def submitted_count(self) -> int:
        return len(self._submitted)
