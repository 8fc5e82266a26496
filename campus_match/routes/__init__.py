"""Blueprint registration helper."""

from __future__ import annotations

from flask import Flask, current_app, redirect, url_for

from campus_match.errors import MatchError, UnknownUser

from .admin import bp as admin_bp
from .auth import bp as auth_bp
from .chat import bp as chat_bp
from .choices import bp as choices_bp


def register_routes(app: Flask) -> None:
    """Register all application blueprints on the provided Flask app."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(choices_bp)
    app.register_blueprint(chat_bp)
    app.register_blueprint(admin_bp)

    @app.errorhandler(UnknownUser)
    def handle_unknown_user(error: UnknownUser):
        current_app.logger.warning(f"Unknown student: {error.message}")
        return redirect(url_for("auth.index"))

    @app.errorhandler(MatchError)
    def handle_match_error(error: MatchError):
        log = current_app.logger.error if error.status_code >= 500 else current_app.logger.warning
        log(f"{type(error).__name__}: {error.message}")
        return error.message, error.status_code, {"Content-Type": "text/plain; charset=utf-8"}
