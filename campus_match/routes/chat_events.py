"""Socket.IO event handlers for the chat page."""

from __future__ import annotations

from typing import Any, Dict

from flask import current_app, request
from flask_socketio import SocketIO, emit

from campus_match.errors import MatchError
from campus_match.relay import ChatRelay


def _payload(data: Any) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _report(event: str, exc: MatchError) -> Dict[str, Any]:
    """Log a failed event and tell only the originating connection about it."""
    log = current_app.logger.error if exc.status_code >= 500 else current_app.logger.warning
    log(f"{event} failed for {request.sid}: {exc.message}")
    emit("chatError", {"event": event, "error": exc.message})
    return {"ok": False, "error": exc.message}


def register_chat_events(socketio: SocketIO, relay: ChatRelay) -> None:
    """Wire the relay to the named events sent by ``chat.html``."""

    @socketio.on("connect")
    def handle_connect(auth=None):
        relay.connect(request.sid)

    @socketio.on("disconnect")
    def handle_disconnect(reason=None):
        relay.disconnect(request.sid)

    @socketio.on("joinRoom")
    def handle_join_room(data):
        data = _payload(data)
        try:
            history = relay.join(request.sid, data.get("room"), data.get("user"))
        except MatchError as exc:
            return _report("joinRoom", exc)
        return {"ok": True, "count": len(history)}

    @socketio.on("chatMessage")
    def handle_chat_message(data):
        data = _payload(data)
        try:
            stored = relay.send(request.sid, data.get("room"), data.get("sender"), data.get("message"))
        except MatchError as exc:
            return _report("chatMessage", exc)
        return {"ok": True, "timestamp": stored["timestamp"]}

    @socketio.on("typing")
    def handle_typing(data):
        data = _payload(data)
        try:
            relay.typing(request.sid, "typing", data.get("room"), data.get("user"))
        except MatchError as exc:
            return _report("typing", exc)

    @socketio.on("stopTyping")
    def handle_stop_typing(data):
        data = _payload(data)
        try:
            relay.typing(request.sid, "stopTyping", data.get("room"), data.get("user"))
        except MatchError as exc:
            return _report("stopTyping", exc)

    @socketio.on("markAsRead")
    def handle_mark_as_read(data):
        data = _payload(data)
        try:
            updated = relay.mark_as_read(request.sid, data.get("room"), data.get("user"))
        except MatchError as exc:
            return _report("markAsRead", exc)
        return {"ok": True, "updated": updated}

    @socketio.on_error_default
    def handle_unexpected_error(exc):  # pragma: no cover - last resort logging
        current_app.logger.exception(f"Unhandled chat event error: {exc}")
        emit("chatError", {"error": "Something went wrong. Please try again."})
