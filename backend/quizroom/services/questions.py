"""Question themes loaded from ``<QUESTIONS_DIR>/<theme>.json``."""
import json
import logging
import os
from typing import List

from werkzeug.security import safe_join

from quizroom.errors import ThemeNotFound
from quizroom.models import DEFAULT_POINT_VALUE, Question

logger = logging.getLogger(__name__)


def parse_questions(raw, default_points: int = DEFAULT_POINT_VALUE) -> List[Question]:
    """Turn a decoded theme file into questions; raises ``ValueError``."""
    if not isinstance(raw, list):
        raise ValueError('theme file must contain a JSON array')
    return [Question.from_dict(item, default_points=default_points) for item in raw]


class JsonQuestionSource:
    def __init__(self, directory: str, default_points: int = DEFAULT_POINT_VALUE):
        self.directory = directory
        self.default_points = default_points

    def path_for(self, theme: str):
        if not isinstance(theme, str) or not theme.strip():
            return None
        return safe_join(self.directory, f"{theme.strip().lower()}.json")

    def load(self, theme: str) -> List[Question]:
        """Return the ordered questions of ``theme`` or raise ``ThemeNotFound``.

        Missing, unreadable, malformed and empty themes are all not found.
        """
        path = self.path_for(theme)
        if path is None:
            raise ThemeNotFound(f'Theme not found: {theme}')
        try:
            with open(path, encoding='utf-8') as fh:
                raw = json.load(fh)
            questions = parse_questions(raw, self.default_points)
        except FileNotFoundError as exc:
            raise ThemeNotFound(f'Theme not found: {theme}') from exc
        except (OSError, ValueError) as exc:
            logger.warning(f"[theme-load] theme={theme} path={path} error={exc}")
            raise ThemeNotFound('Could not load questions') from exc
        if not questions:
            raise ThemeNotFound(f'Theme has no questions: {theme}')
        return questions

    def load_raw(self, theme: str) -> list:
        """Authored question objects of ``theme``, validated but untouched."""
        return [q.to_dict() for q in self.load(theme)]

    def themes(self) -> List[str]:
        try:
            entries = os.listdir(self.directory)
        except FileNotFoundError:
            return []
        return sorted(name[:-len('.json')] for name in entries if name.endswith('.json'))
