from functools import wraps

from flask import current_app, request
from flask_socketio import ConnectionRefusedError, emit, join_room, leave_room

from quizroom import socketio
from quizroom.errors import AuthError, InvalidPayload, QuizError, RoomNotFound, RoundClosed
from quizroom.sessions import Session


# ---- app-bound collaborators ----

def _registry():
    return current_app.extensions['room_registry']


def _sessions():
    return current_app.extensions['session_store']


def _verifier():
    return current_app.extensions['identity_verifier']


def _questions():
    return current_app.extensions['question_source']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _channel(room_name: str) -> str:
    return _registry().broadcaster.channel(room_name)


def _require_session() -> Session:
    session = _sessions().get(_get_sid())
    if session is None:
        raise AuthError('Not authenticated')
    return session


# ---- payload helpers ----

def _payload(data) -> dict:
    return data if isinstance(data, dict) else {}


def _room_name(data) -> str:
    room = _payload(data).get('room')
    if not isinstance(room, str) or not room.strip():
        raise InvalidPayload('Invalid room')
    return room


def _question_index(data) -> int:
    index = _payload(data).get('questionIndex')
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise InvalidPayload('Invalid question index')
    return index


def _int_option(data, key: str, default: int, minimum: int) -> int:
    value = _payload(data).get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidPayload(f'Invalid {key}')
    return value


def reports_errors(handler):
    """Reply ``errorMsg`` to the sender for any ``QuizError`` the handler raises."""
    @wraps(handler)
    def wrapper(*args, **kwargs):
        try:
            return handler(*args, **kwargs)
        except QuizError as exc:
            current_app.logger.info(f"[error] sid={_get_sid()} event={handler.__name__} message={exc.message}")
            emit('errorMsg', exc.message)
    return wrapper


# ---- room membership helpers ----

def _leave_current(session: Session) -> None:
    if not session.room:
        return
    name = session.room
    _registry().leave(name, session.identity)
    leave_room(_channel(name))
    session.room = None


def _enter(session: Session, name: str) -> None:
    # A connection takes part in one room at a time
    if session.room and session.room != name:
        _leave_current(session)
    join_room(_channel(name))
    session.room = name


# ---- handlers ----

def handle_connect(auth=None):
    sid = _get_sid()
    token = auth.get('token') if isinstance(auth, dict) else None
    if not token and current_app.config.get('ALLOW_GUESTS'):
        identity = f"guest_{sid[:5]}"
    else:
        try:
            identity = _verifier().verify(token)
        except AuthError as exc:
            current_app.logger.warning(f"[connect-refused] sid={sid} reason={exc.message}")
            raise ConnectionRefusedError(exc.message) from exc
    _sessions().open(sid, identity)
    current_app.logger.info(f"[connect] sid={sid} user={identity}")
    emit('connected', {'username': identity})


def handle_disconnect(reason=None):
    session = _sessions().close(_get_sid())
    if not session:
        return
    current_app.logger.info(f"[disconnect] sid={session.sid} user={session.identity} room={session.room}")
    if session.room:
        _registry().leave(session.room, session.identity)


@reports_errors
def handle_create_room(data):
    session = _require_session()
    name = _room_name(data)
    _enter(session, name)
    _registry().create_or_reset(name, session.identity)
    emit('created', {'room': name})


@reports_errors
def handle_join_room(data):
    session = _require_session()
    name = _room_name(data)
    _enter(session, name)
    _registry().join(name, session.identity)


@reports_errors
def handle_join_game(data):
    """Join an existing room only; never creates one."""
    session = _require_session()
    name = _room_name(data)
    if name not in _registry():
        raise RoomNotFound()
    _enter(session, name)
    try:
        _registry().join(name, session.identity, create_missing=False)
    except RoomNotFound:
        leave_room(_channel(name))
        session.room = None
        raise


@reports_errors
def handle_leave_room(data):
    session = _require_session()
    name = _room_name(data)
    # Only the room this connection takes part in
    if session.room == name:
        _leave_current(session)
    else:
        leave_room(_channel(name))
    emit('left', {'room': name})


@reports_errors
def handle_start_game(data):
    session = _require_session()
    name = _room_name(data)
    room = _registry().lookup(name)
    cfg = current_app.config
    theme = _payload(data).get('theme') or cfg.get('DEFAULT_THEME', 'minecraft')
    points_to_win = _int_option(data, 'pointsToWin', int(cfg.get('DEFAULT_POINTS_TO_WIN', 100)), 0)
    time_per_question = _int_option(data, 'timePerQuestion', int(cfg.get('DEFAULT_TIME_PER_QUESTION', 30)), 1)

    room.check_can_start(session.identity)
    # Loaded without holding the room lock; launch() re-validates
    try:
        questions = _questions().load(theme)
    except QuizError:
        current_app.logger.warning(f"[game-launch-failed] room={name} theme={theme}")
        raise
    room.launch(session.identity, questions, points_to_win, time_per_question)
    current_app.logger.info(f"[game-launch] room={name} theme={theme} by={session.identity}")


@reports_errors
def handle_submit_answer(data):
    session = _require_session()
    name = _room_name(data)
    index = _question_index(data)
    room = _registry().get(name)
    if room is None:
        current_app.logger.debug(f"[answer-ignored] unknown room={name}")
        return
    try:
        room.submit_answer(session.identity, index, _payload(data).get('answer'))
    except RoundClosed:
        current_app.logger.debug(f"[answer-ignored] room={name} index={index} round closed")


@reports_errors
def handle_timeout(data):
    _require_session()
    name = _room_name(data)
    index = _question_index(data)
    room = _registry().get(name)
    if room is None:
        current_app.logger.debug(f"[timeout-ignored] unknown room={name}")
        return
    room.timeout(index)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('joinGame', handle_join_game, namespace=namespace)
    socketio.on_event('leaveRoom', handle_leave_room, namespace=namespace)
    socketio.on_event('startGame', handle_start_game, namespace=namespace)
    socketio.on_event('submitAnswer', handle_submit_answer, namespace=namespace)
    socketio.on_event('timeout', handle_timeout, namespace=namespace)
