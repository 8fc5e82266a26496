"""Admin utilities for operators."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from pymongo.errors import PyMongoError

from campus_match.services import message_service
from campus_match.storage import get_state

bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@bp.get("/stats")
def get_stats():
    """Get overall system statistics."""
    state = get_state()
    stats = {
        "total_students": state.roster.count(),
        "pending_codes": state.pending_codes.count(),
    }

    try:
        stats["total_messages"] = message_service.count_messages()
    except PyMongoError as e:
        current_app.logger.error(f"Failed to count messages: {e}")
        return jsonify(error=str(e), **stats), 503

    return jsonify(stats), 200
