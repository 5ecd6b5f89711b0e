import logging
import threading
from typing import Dict, List, Optional

from quizroom.errors import RoomNotFound
from .room import Room

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Owns the room-name -> Room table.

    A room is present exactly while it has at least one participant. The
    registry lock only guards the table: it is always taken before a room's
    lock and never held while a room broadcasts. Rooms that leave the table
    are retired.
    """

    def __init__(self, broadcaster):
        self.broadcaster = broadcaster
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.RLock()

    def __contains__(self, name):
        with self._lock:
            return name in self._rooms

    def __len__(self):
        with self._lock:
            return len(self._rooms)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._rooms)

    def get(self, name: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(name)

    def lookup(self, name: str) -> Room:
        room = self.get(name)
        if room is None:
            raise RoomNotFound()
        return room

    def create_or_reset(self, name: str, creator: str) -> Room:
        """Create ``name`` in lobby with ``creator`` as sole participant and host.

        An existing room of the same name is replaced and retired, so a
        start already in flight on it cannot take effect.
        """
        room = Room(name, self.broadcaster)
        room.add_participant(creator, announce=False)
        with self._lock:
            previous = self._rooms.get(name)
            self._rooms[name] = room
            if previous is not None:
                previous.retire()
        logger.info(f"[room-create] room={name} host={creator} replaced={previous is not None}")
        room.announce_roster()
        return room

    def join(self, name: str, identity: str, create_missing: bool = True) -> Room:
        """Add ``identity`` to ``name``; idempotent for repeated joins.

        With ``create_missing`` a missing room is created in lobby and the
        joiner becomes its host; otherwise ``RoomNotFound`` is raised.
        """
        while True:
            created = False
            with self._lock:
                room = self._rooms.get(name)
                if room is None:
                    if not create_missing:
                        raise RoomNotFound()
                    room = Room(name, self.broadcaster)
                    room.add_participant(identity, announce=False)
                    self._rooms[name] = room
                    created = True
            if created:
                logger.info(f"[room-create] room={name} via join by={identity}")
                room.announce_roster()
                return room
            with room.lock:
                # Deleted or replaced since the lookup: look it up again
                if room.retired:
                    continue
                added = room.add_participant(identity)
            if added:
                logger.info(f"[room-join] room={name} user={identity}")
            return room

    def leave(self, name: str, identity: str) -> bool:
        """Remove ``identity`` from ``name``; deletes the room once empty.

        Returns whether a participant was removed.
        """
        room = self.get(name)
        if room is None:
            return False
        with room.lock:
            if room.retired:
                return False
            removed = room.remove_participant(identity)
        if removed is None:
            return False
        logger.info(f"[room-leave] room={name} user={identity}")
        with self._lock:
            if self._rooms.get(name) is room:
                with room.lock:
                    if room.is_empty:
                        room.retire()
                        del self._rooms[name]
                        logger.info(f"[room-delete] room={name} (empty)")
        return True
