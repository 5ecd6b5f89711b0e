import logging
import threading
from typing import Any, Dict, List, Optional

from quizroom.errors import InvalidState, NotHost, RoomNotFound
from quizroom.models import Participant, Question, RoomState, scoreboard
from .barrier import AnswerBarrier
from .scoring import award

logger = logging.getLogger(__name__)


class Room:
    """Per-room state machine: lobby -> in_progress -> finished.

    All mutation happens under ``self.lock`` and every broadcast a
    transition produces is emitted before the lock is released, so
    subscribers see events in the order the room applied them.
    """

    def __init__(self, name: str, broadcaster, host: Optional[str] = None):
        self.name = name
        self.broadcaster = broadcaster
        self.lock = threading.RLock()
        self.state = RoomState.LOBBY
        self.host: Optional[str] = None
        self.participants: List[Participant] = []
        self.questions: List[Question] = []
        self.current_question_index = 0
        self.points_to_win = 0
        self.time_per_question = 0
        self._barriers: Dict[int, AnswerBarrier] = {}
        # Set once the registry no longer maps the name to this room
        self.retired = False
        if host is not None:
            self.add_participant(host)

    # ---- roster ----

    def __len__(self):
        return len(self.participants)

    @property
    def is_empty(self) -> bool:
        return not self.participants

    def roster(self) -> List[str]:
        return [p.identity for p in self.participants]

    def get_participant(self, identity: str) -> Optional[Participant]:
        for participant in self.participants:
            if participant.identity == identity:
                return participant
        return None

    def is_host(self, identity: str) -> bool:
        return self.host is not None and self.host == identity

    def add_participant(self, identity: str, announce: bool = True) -> bool:
        """Add ``identity`` if absent and, with ``announce``, broadcast the roster.

        Returns whether a participant was created. The first participant of
        a hostless room becomes host.
        """
        with self.lock:
            added = self.get_participant(identity) is None
            if added:
                self.participants.append(Participant(identity))
                if self.host is None:
                    self.host = identity
            if announce:
                self._broadcast('updatePlayers', self.roster())
            return added

    def announce_roster(self) -> None:
        with self.lock:
            self._broadcast('updatePlayers', self.roster())

    def remove_participant(self, identity: str) -> Optional[Participant]:
        """Remove ``identity``; reassign host and settle an open round.

        Returns the removed participant, or ``None`` if it was not present.
        Nothing is broadcast when the room becomes empty.
        """
        with self.lock:
            participant = self.get_participant(identity)
            if participant is None:
                return None
            self.participants.remove(participant)
            barrier = self._barriers.get(self.current_question_index)
            if barrier is not None:
                barrier.withdraw(participant)
            if self.is_empty:
                self.host = None
                return participant

            self._broadcast('updatePlayers', self.roster())
            if self.host == identity:
                # Earliest-joined remaining participant
                self.host = self.participants[0].identity
                logger.info(f"[host-change] room={self.name} host={self.host}")
                self._broadcast('hostChanged', {'host': self.host})

            if (self.state == RoomState.IN_PROGRESS and barrier is not None
                    and not barrier.closed and barrier.is_satisfied(self.roster())):
                self._close_round(barrier, closed_by=None)
            return participant

    # ---- game lifecycle ----

    def retire(self) -> None:
        with self.lock:
            self.retired = True

    def check_can_start(self, requester: str) -> None:
        with self.lock:
            if self.retired:
                raise RoomNotFound()
            if not self.is_host(requester):
                raise NotHost()
            if self.state != RoomState.LOBBY:
                raise InvalidState()

    def launch(self, requester: str, questions: List[Question], points_to_win: int,
               time_per_question: int) -> None:
        """Apply the lobby -> in_progress transition with loaded questions.

        Host, state and registration are checked again here because the
        questions were loaded outside the lock.
        """
        with self.lock:
            self.check_can_start(requester)
            self.questions = list(questions)
            self.current_question_index = 0
            self.points_to_win = points_to_win
            self.time_per_question = time_per_question
            self._barriers.clear()
            for participant in self.participants:
                participant.clear_answer()
            self.state = RoomState.IN_PROGRESS
            logger.info(
                f"[game-launch] room={self.name} questions={len(self.questions)} "
                f"points_to_win={points_to_win} time_per_question={time_per_question}"
            )
            self._broadcast('launchGame', {
                'room': self.name,
                'pointsToWin': points_to_win,
                'timePerQuestion': time_per_question,
                'totalQuestions': len(self.questions),
            })
            self._broadcast('startQuestions', {'questions': [q.to_dict() for q in self.questions]})

    def submit_answer(self, identity: str, question_index: int, value: Any) -> bool:
        """Record an answer for the current round.

        Returns whether the answer was recorded. Stale indices, unknown
        participants and finished games are ignored.
        """
        with self.lock:
            if not self._accepts(question_index):
                logger.debug(f"[answer-ignored] room={self.name} user={identity} index={question_index}")
                return False
            participant = self.get_participant(identity)
            if participant is None:
                logger.debug(f"[answer-ignored] room={self.name} unknown user={identity}")
                return False
            barrier = self._barrier_for(question_index)
            barrier.submit(participant, value)
            if barrier.is_satisfied(self.roster()):
                self._close_round(barrier, closed_by=identity)
            return True

    def timeout(self, question_index: int) -> bool:
        """Close the round for ``question_index``. Returns whether it closed."""
        with self.lock:
            if not self._accepts(question_index):
                logger.debug(f"[timeout-ignored] room={self.name} index={question_index}")
                return False
            barrier = self._barrier_for(question_index)
            if barrier.closed:
                return False
            self._close_round(barrier, closed_by=None)
            return True

    # ---- internals ----

    def _accepts(self, question_index: int) -> bool:
        return (not self.retired and self.state == RoomState.IN_PROGRESS
                and question_index == self.current_question_index)

    def _barrier_for(self, question_index: int) -> AnswerBarrier:
        barrier = self._barriers.get(question_index)
        if barrier is None:
            barrier = AnswerBarrier(question_index)
            self._barriers[question_index] = barrier
        return barrier

    def _close_round(self, barrier: AnswerBarrier, closed_by: Optional[str]) -> None:
        barrier.close()
        index = barrier.question_index
        question = self.questions[index]
        self._broadcast('showAnswer', {
            'questionIndex': index,
            'correctAnswer': question.accepted_answer.to_payload(),
            'by': closed_by,
        })
        correct = []
        for participant in self.participants:
            if participant.has_answered(index):
                if award(participant, question, participant.answer_for(index)):
                    correct.append(participant.identity)
            participant.clear_answer()
        self._broadcast('scoreUpdate', scoreboard(self.participants))
        logger.info(
            f"[round-close] room={self.name} index={index} by={closed_by} "
            f"answers={barrier.submitted_count} correct={correct}"
        )
        self.current_question_index += 1
        if self._is_over():
            self._finish()

    def _is_over(self) -> bool:
        if self.current_question_index >= len(self.questions):
            return True
        if self.points_to_win:
            return any(p.score >= self.points_to_win for p in self.participants)
        return False

    def _finish(self) -> None:
        self.state = RoomState.FINISHED
        scores = scoreboard(self.participants)
        top = max((p.score for p in self.participants), default=0)
        winners = [p.identity for p in self.participants if p.score == top]
        logger.info(f"[game-over] room={self.name} winners={winners}")
        self._broadcast('gameOver', {'room': self.name, 'scores': scores, 'winners': winners})

    def _broadcast(self, event: str, payload: Any) -> None:
        self.broadcaster.emit(self.name, event, payload)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'room': self.name,
            'host': self.host,
            'state': self.state,
            'players': scoreboard(self.participants),
            'currentQuestionIndex': self.current_question_index,
            'totalQuestions': len(self.questions),
            'pointsToWin': self.points_to_win,
            'timePerQuestion': self.time_per_question,
        }
