"""Flask application setup, Socket.IO relay and blueprint wiring."""

from __future__ import annotations

import os
import secrets
from typing import Any, Dict, Optional

from flask import Flask
from flask_socketio import SocketIO

from campus_match.relay import ChatRelay
from campus_match.routes import register_routes
from campus_match.routes.chat_events import register_chat_events
from campus_match.services import message_service
from campus_match.services.mail_service import build_mailer
from campus_match.services.otp_service import OtpVerifier, generate_otp
from campus_match.storage import AppState

DEFAULT_PORT = 3000


def load_config() -> Dict[str, Any]:
    """Read the recognised environment variables."""
    return {
        "SECRET_KEY": os.getenv("SECRET_KEY") or secrets.token_hex(16),
        "EMAIL_USER": os.getenv("EMAIL_USER"),
        "EMAIL_PASS": os.getenv("EMAIL_PASS"),
        "SMTP_HOST": os.getenv("SMTP_HOST", "smtp.gmail.com"),
        "SMTP_PORT": int(os.getenv("SMTP_PORT", "587")),
        "MAIL_BACKEND": os.getenv("MAIL_BACKEND", "smtp"),
        "PORT": int(os.getenv("PORT", str(DEFAULT_PORT))),
        "CREATE_INDEXES": os.getenv("CREATE_INDEXES", "true").lower() == "true",
    }


def create_app(
    config: Optional[Dict[str, Any]] = None,
    *,
    mailer=None,
    code_factory=None,
) -> Flask:
    """Configure and return the Flask application instance.

    The Socket.IO server is available as ``app.extensions["socketio"]``.
    """
    app = Flask(__name__)
    app.config.update(load_config())
    if config:
        app.config.update(config)

    socketio = SocketIO(app, async_mode=app.config.get("SOCKETIO_ASYNC_MODE", "threading"))

    state = AppState()
    state.verifier = OtpVerifier(
        state.pending_codes,
        mailer or build_mailer(app.config),
        code_factory=code_factory or generate_otp,
    )
    state.relay = ChatRelay(socketio)
    app.extensions["campus_match"] = state

    register_routes(app)
    register_chat_events(socketio, state.relay)

    if app.config["CREATE_INDEXES"]:
        try:
            message_service.create_indexes()
            app.logger.info("MongoDB indexes created successfully")
        except Exception as e:
            app.logger.warning(f"Failed to create MongoDB indexes: {e}")

    return app
