"""Room coordination services: registry, room state machine, answer
barrier, scoring and broadcast fan-out.

This package holds the room logic shared by the socket handlers, keeping
transport concerns separated from the game mechanics.
"""

from .barrier import AnswerBarrier
from .broadcaster import SocketIOBroadcaster
from .registry import RoomRegistry
from .room import Room
from .scoring import award, is_correct

__all__ = [
    'AnswerBarrier',
    'Room',
    'RoomRegistry',
    'SocketIOBroadcaster',
    'award',
    'is_correct',
]
