"""Error types surfaced to users of the login, match and chat flows."""

from __future__ import annotations

from typing import Optional


class MatchError(Exception):
    """Base class for failures that are reported back to the user."""

    status_code = 400
    message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidFormat(MatchError):
    status_code = 400
    message = "Invalid email format. Please use your college email (e.g., john.20123456@mnnit.ac.in)."


class DeliveryFailed(MatchError):
    status_code = 502
    message = "Error sending OTP. Please try again."


class CodeMismatch(MatchError):
    status_code = 401
    message = "Invalid OTP. Please try again."


class NoPendingCode(MatchError):
    status_code = 401
    message = "No OTP is pending for this email. Please log in again."


class UnknownUser(MatchError):
    status_code = 404
    message = "Unknown registration number."


class TooManyCandidates(MatchError):
    status_code = 400
    message = "You can list at most 5 registration numbers."


class InvalidRoom(MatchError):
    status_code = 400
    message = "You are not a member of this chat room."


class PersistenceFailure(MatchError):
    status_code = 503
    message = "Could not save your message. Please try again."
