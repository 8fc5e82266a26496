"""Service layer modules for the campus matchmaking app."""

from . import mail_service, match_service, message_service, otp_service

__all__ = [
    "mail_service",
    "match_service",
    "message_service",
    "otp_service",
]
