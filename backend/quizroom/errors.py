"""Error taxonomy for room coordination.

Every error carries a ``message`` meant for the originating connection.
Socket handlers turn these into ``errorMsg`` replies, except the ones that
are dropped silently (see ``socketio_events``).
"""


class QuizError(Exception):
    default_message = 'Request failed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class RoomNotFound(QuizError):
    default_message = 'Room not found'


class NotHost(QuizError):
    default_message = 'Only the host can start the game'


class ThemeNotFound(QuizError):
    default_message = 'Could not load questions'


class AuthError(QuizError):
    default_message = 'Invalid token'


class RoundClosed(QuizError):
    default_message = 'Round already closed'


class InvalidState(QuizError):
    default_message = 'Game has already started or is finished'


class InvalidPayload(QuizError):
    default_message = 'Invalid request'
