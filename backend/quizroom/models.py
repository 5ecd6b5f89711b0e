from typing import Any, Dict, Iterable, List, Optional, Tuple

DEFAULT_POINT_VALUE = 10


class RoomState:
    LOBBY = 'lobby'
    IN_PROGRESS = 'in_progress'
    FINISHED = 'finished'


def normalize_answer(value: Any) -> str:
    """Trim surrounding whitespace and lowercase. ``None`` normalizes to ''."""
    if value is None:
        return ''
    return str(value).strip().lower()


class AnswerSpec:
    """Accepted answer of a question: either ``Exact`` or ``OneOf``."""

    def matches(self, submitted: Any) -> bool:
        raise NotImplementedError

    def to_payload(self):
        """Value shown to clients in ``showAnswer.correctAnswer``."""
        raise NotImplementedError

    @staticmethod
    def from_raw(raw) -> 'AnswerSpec':
        if isinstance(raw, str):
            return Exact(raw)
        if isinstance(raw, (list, tuple)) and raw and all(isinstance(v, str) for v in raw):
            return OneOf(raw)
        raise ValueError(f'answer must be a string or a non-empty list of strings, got {raw!r}')


class Exact(AnswerSpec):
    def __init__(self, text: str):
        self.text = text
        self._normalized = normalize_answer(text)

    def matches(self, submitted: Any) -> bool:
        return submitted is not None and normalize_answer(submitted) == self._normalized

    def to_payload(self):
        return self.text

    def __repr__(self):
        return f'Exact({self.text!r})'


class OneOf(AnswerSpec):
    def __init__(self, candidates: Iterable[str]):
        # Keep the authored order for display; match against the normalized set
        self.candidates: Tuple[str, ...] = tuple(candidates)
        self._normalized = frozenset(normalize_answer(c) for c in self.candidates)

    def matches(self, submitted: Any) -> bool:
        return submitted is not None and normalize_answer(submitted) in self._normalized

    def to_payload(self):
        return list(self.candidates)

    def __repr__(self):
        return f'OneOf({list(self.candidates)!r})'


class Question:
    """One loaded question. Immutable after construction.

    ``payload`` is the authored object (text, options, ...) sent to clients
    as-is in ``startQuestions``.
    """

    __slots__ = ('accepted_answer', 'point_value', 'payload')

    def __init__(self, accepted_answer: AnswerSpec, point_value: int = DEFAULT_POINT_VALUE,
                 payload: Optional[Dict[str, Any]] = None):
        if isinstance(point_value, bool) or not isinstance(point_value, int) or point_value <= 0:
            raise ValueError(f'point value must be a positive integer, got {point_value!r}')
        object.__setattr__(self, 'accepted_answer', accepted_answer)
        object.__setattr__(self, 'point_value', point_value)
        object.__setattr__(self, 'payload', dict(payload or {}))

    def __setattr__(self, name, value):
        raise AttributeError('Question is immutable')

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_points: int = DEFAULT_POINT_VALUE) -> 'Question':
        if not isinstance(data, dict):
            raise ValueError(f'question must be an object, got {type(data).__name__}')
        if 'answer' not in data:
            raise ValueError('question has no answer')
        points = data.get('points')
        return cls(
            AnswerSpec.from_raw(data['answer']),
            default_points if points is None else points,
            payload=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.payload)


class Participant:
    """An identity inside a room. ``pending_answer`` is ``(question_index, value)``."""

    def __init__(self, identity: str, score: int = 0):
        self.identity = identity
        self.score = score
        self.pending_answer: Optional[Tuple[int, Any]] = None

    def has_answered(self, question_index: int) -> bool:
        return self.pending_answer is not None and self.pending_answer[0] == question_index

    def answer_for(self, question_index: int):
        if self.has_answered(question_index):
            return self.pending_answer[1]
        return None

    def clear_answer(self) -> None:
        self.pending_answer = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'username': self.identity,
            'score': self.score,
        }


def scoreboard(participants: List[Participant]) -> List[Dict[str, Any]]:
    return [p.to_dict() for p in participants]
