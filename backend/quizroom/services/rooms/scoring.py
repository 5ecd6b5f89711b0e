from typing import Any

from quizroom.models import Participant, Question


def is_correct(question: Question, submitted: Any) -> bool:
    """Compare a submission against the question's accepted answer.

    Both sides are trimmed and lowercased; ``OneOf`` matches any candidate.
    """
    return question.accepted_answer.matches(submitted)


def award(participant: Participant, question: Question, submitted: Any) -> bool:
    """Add the question's points to the participant on a correct answer.

    Returns whether points were awarded. Wrong answers cost nothing.
    """
    if not is_correct(question, submitted):
        return False
    participant.score += question.point_value
    return True
