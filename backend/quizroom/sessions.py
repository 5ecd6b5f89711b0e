import threading
from typing import Dict, Optional


class Session:
    """Per-connection record created when a socket is accepted.

    ``identity`` never changes for the life of the connection; ``room`` is
    the room the connection currently takes part in, if any.
    """

    __slots__ = ('sid', 'identity', 'room')

    def __init__(self, sid: str, identity: str, room: Optional[str] = None):
        self.sid = sid
        self.identity = identity
        self.room = room

    def __repr__(self):
        return f'<Session {self.sid} identity={self.identity!r} room={self.room!r}>'


class SessionStore:
    def __init__(self):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def open(self, sid: str, identity: str) -> Session:
        session = Session(sid, identity)
        with self._lock:
            self._sessions[sid] = session
        return session

    def get(self, sid: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(sid)

    def close(self, sid: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.pop(sid, None)

    def __len__(self):
        with self._lock:
            return len(self._sessions)
