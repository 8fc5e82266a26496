"""Chat page and match lookups used by it."""

from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint, current_app, jsonify

from campus_match.services import match_service, message_service
from campus_match.storage import get_state
from campus_match.utils.identity import room_for

bp = Blueprint("chat", __name__)


@bp.get("/chat")
def chat_page():
    """Serve the chat interface; room and user come from the query string client-side."""
    return current_app.send_static_file("chat.html")


@bp.get("/api/matches/<reg>")
def list_matches(reg: str):
    """Return the student's mutual matches with their chat room and unread count."""
    student = get_state().roster.get(reg)

    results: List[Dict[str, Any]] = []
    for match in match_service.mutual_matches(get_state().roster, student.reg_id):
        room = room_for(student.reg_id, match.reg_id)
        entry = match.to_dict()
        entry["room"] = room
        entry["unread"] = message_service.count_unread(room, student.reg_id)
        results.append(entry)

    return jsonify(reg=student.reg_id, matches=results), 200
