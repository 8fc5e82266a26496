"""Real-time chat relay scoped to two-person rooms."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

from flask_socketio import SocketIO

from campus_match.errors import InvalidRoom, MatchError
from campus_match.services import message_service
from campus_match.utils.identity import room_members

_LOGGER = logging.getLogger(__name__)

# Rooms share a fixed pool of locks; two rooms on one stripe just serialize.
ROOM_LOCK_STRIPES = 64


class ChatRelay:
    """Tracks which room each connection is in and fans events out to rooms.

    A connection is in at most one room. Sends are persisted before they are
    broadcast, one room at a time, so every member sees messages in the order
    they were stored.
    """

    def __init__(self, socketio: SocketIO, namespace: str = "/") -> None:
        self.socketio = socketio
        self.namespace = namespace
        self._rooms_by_sid: Dict[str, Optional[str]] = {}
        self._room_locks: List[threading.Lock] = [threading.Lock() for _ in range(ROOM_LOCK_STRIPES)]
        self._lock = threading.Lock()

    def _room_lock(self, room: str) -> threading.Lock:
        return self._room_locks[hash(room) % ROOM_LOCK_STRIPES]

    def _check_member(self, room: Any, user: Any) -> str:
        members = room_members(room)
        if user not in members:
            raise InvalidRoom()
        return room

    def is_connected(self, sid: str) -> bool:
        with self._lock:
            return sid in self._rooms_by_sid

    def connect(self, sid: str) -> None:
        with self._lock:
            self._rooms_by_sid[sid] = None
        _LOGGER.info("A user connected to chat (%s)", sid)

    def disconnect(self, sid: str) -> None:
        with self._lock:
            room = self._rooms_by_sid.pop(sid, None)
        if room is not None:
            self.socketio.server.leave_room(sid, room, namespace=self.namespace)
        _LOGGER.info("User disconnected from chat (%s)", sid)

    def join(self, sid: str, room: Any, user: Any) -> List[Dict[str, Any]]:
        """Subscribe ``sid`` to ``room`` and deliver the room history to it alone."""
        room = self._check_member(room, user)

        with self._lock:
            connected = sid in self._rooms_by_sid
            previous = self._rooms_by_sid.get(sid)
            if connected:
                self._rooms_by_sid[sid] = room
        if not connected:
            _LOGGER.info("Connection %s is gone, not joining %s", sid, room)
            return []
        if previous is not None and previous != room:
            self.socketio.server.leave_room(sid, previous, namespace=self.namespace)
        self.socketio.server.enter_room(sid, room, namespace=self.namespace)
        _LOGGER.info("User %s joined room: %s", user, room)

        history = message_service.get_room_history(room)
        if not self.is_connected(sid):
            _LOGGER.info("Connection %s left before history for %s was delivered", sid, room)
            return history

        self.socketio.emit("chatHistory", history, to=sid, namespace=self.namespace)
        return history

    def send(self, sid: str, room: Any, sender: Any, text: Any) -> Dict[str, Any]:
        """Persist a message and then broadcast it to everyone in the room."""
        room = self._check_member(room, sender)
        if not isinstance(text, str) or not text.strip():
            raise MatchError("Message cannot be empty.")

        with self._room_lock(room):
            stored = message_service.save_message(room, sender, text)
            self.socketio.emit(
                "chatMessage",
                {"sender": stored["sender"], "text": stored["text"], "timestamp": stored["timestamp"]},
                to=room,
                namespace=self.namespace,
            )
        return stored

    def typing(self, sid: str, event: str, room: Any, user: Any) -> None:
        """Relay a typing indicator to the rest of the room; nothing is stored."""
        room = self._check_member(room, user)
        self.socketio.emit(
            event,
            {"room": room, "user": user},
            to=room,
            skip_sid=sid,
            namespace=self.namespace,
        )

    def mark_as_read(self, sid: str, room: Any, user: Any) -> int:
        """Record read receipts for ``user`` and tell the rest of the room."""
        room = self._check_member(room, user)
        updated = message_service.mark_room_as_read(room, user)
        if not updated:
            return 0
        self.socketio.emit(
            "messagesRead",
            {"user": user},
            to=room,
            skip_sid=sid,
            namespace=self.namespace,
        )
        return updated
