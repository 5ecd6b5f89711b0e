from typing import Any


class SocketIOBroadcaster:
    """Fan-out of room events over Socket.IO rooms.

    Subscription is owned by the transport (``join_room``/``leave_room`` in
    the socket handlers); this object only maps a room name to its channel
    and emits to it.
    """

    channel_prefix = 'room:'

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def channel(self, room_name: str) -> str:
        return f"{self.channel_prefix}{room_name}"

    def emit(self, room_name: str, event: str, payload: Any) -> None:
        self.socketio.emit(event, payload, to=self.channel(room_name), namespace=self.namespace)
