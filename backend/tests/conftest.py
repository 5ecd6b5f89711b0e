import json
import os
import sys

import pytest

# Ensure the backend root (containing the `quizroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from quizroom import create_app, socketio
from quizroom.models import Question


QUIZ_QUESTIONS = [
    {'question': 'What is the capital of France?', 'answer': 'Paris'},
    {'question': 'Name a primary colour', 'answer': ['Red', 'Blue', 'Yellow']},
    {'question': 'Which mob explodes?', 'answer': 'Creeper', 'points': 20},
    {'question': '2 + 2?', 'answer': '4'},
    {'question': 'Largest planet?', 'answer': 'Jupiter'},
]


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    JWT_SECRET = 'test-jwt-secret'
    JWT_ALGORITHM = 'HS256'
    TOKEN_TTL_DAYS = 1
    ALLOW_GUESTS = False
    ALLOWED_ORIGINS = ['http://localhost:5173']
    QUESTIONS_DIR = None
    DEFAULT_THEME = 'minecraft'
    DEFAULT_POINTS_TO_WIN = 100
    DEFAULT_TIME_PER_QUESTION = 30
    DEFAULT_POINT_VALUE = 10
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'


class RecordingBroadcaster:
    """Collects (room, event, payload) triples instead of emitting."""

    def __init__(self):
        self.events = []

    def channel(self, room_name):
        return f"room:{room_name}"

    def emit(self, room_name, event, payload):
        self.events.append((room_name, event, payload))

    def of(self, event, room_name=None):
        return [
            payload for (room, name, payload) in self.events
            if name == event and (room_name is None or room == room_name)
        ]

    def names(self):
        return [name for (_, name, _) in self.events]

    def clear(self):
        self.events.clear()


def make_questions(raw=None):
    return [Question.from_dict(item) for item in (raw or QUIZ_QUESTIONS)]


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def questions_dir(tmp_path):
    directory = tmp_path / 'questions'
    directory.mkdir()
    (directory / 'minecraft.json').write_text(json.dumps(QUIZ_QUESTIONS), encoding='utf-8')
    (directory / 'short.json').write_text(json.dumps(QUIZ_QUESTIONS[:2]), encoding='utf-8')
    (directory / 'empty.json').write_text('[]', encoding='utf-8')
    (directory / 'broken.json').write_text('{not json', encoding='utf-8')
    return directory


@pytest.fixture()
def flask_app(questions_dir):
    class _Config(TestConfig):
        QUESTIONS_DIR = str(questions_dir)

    application = create_app(_Config)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['room_registry']


@pytest.fixture()
def token_for(flask_app):
    def _token_for(username):
        return flask_app.extensions['identity_verifier'].issue(username)
    return _token_for


@pytest.fixture()
def connect(flask_app, token_for):
    """Factory for Socket.IO test clients authenticated as ``username``."""
    clients = []

    def _connect(username=None, token=None):
        if token is None and username is not None:
            token = token_for(username)
        auth = {'token': token} if token else None
        test_client = socketio.test_client(flask_app, auth=auth)
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


def drain(test_client):
    """(event, payload) pairs the client got since the last call."""
    return [
        (pkt['name'], pkt['args'][0] if pkt['args'] else None)
        for pkt in test_client.get_received()
    ]


def payloads(events, name):
    return [payload for (event, payload) in events if event == name]
