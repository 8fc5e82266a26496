"""Issuing and redeeming one-time login codes."""

from __future__ import annotations

import logging
import secrets
import time
from typing import Callable

from campus_match.errors import CodeMismatch, DeliveryFailed, NoPendingCode
from campus_match.storage import PendingCode, PendingCodeStore
from campus_match.utils.identity import Identity

_LOGGER = logging.getLogger(__name__)

CODE_DIGITS = 6


def now_seconds() -> int:
    """Return the current UNIX timestamp in seconds."""
    return int(time.time())


def generate_otp() -> str:
    """Return a random six digit numeric code, zero padded."""
    return f"{secrets.randbelow(10 ** CODE_DIGITS):0{CODE_DIGITS}d}"


class OtpVerifier:
    """Issues codes per email and checks them exactly once.

    Codes do not expire; a new login for the same email replaces the old code.
    """

    def __init__(
        self,
        pending: PendingCodeStore,
        mailer,
        code_factory: Callable[[], str] = generate_otp,
    ) -> None:
        self.pending = pending
        self.mailer = mailer
        self.code_factory = code_factory

    def issue(self, email: str, identity: Identity, branch: str = "", gender: str = "") -> str:
        code = self.code_factory()
        self.pending.put(
            PendingCode(
                email=email,
                code=code,
                issued_at=now_seconds(),
                name=identity.name,
                reg_id=identity.reg_id,
                branch=branch,
                gender=gender,
            )
        )

        try:
            self.mailer.send_code(email, identity.name, code)
        except DeliveryFailed:
            self.pending.discard(email, code)
            raise
        except Exception as exc:
            self.pending.discard(email, code)
            _LOGGER.error("Mailer failed for %s: %s", email, exc)
            raise DeliveryFailed() from exc

        return code

    def verify(self, email: str, submitted: str) -> PendingCode:
        """Redeem ``submitted`` for ``email`` and return the consumed entry."""
        record = self.pending.get(email)
        if record is None:
            raise NoPendingCode()
        if record.code != submitted:
            raise CodeMismatch()

        consumed = self.pending.pop_if(email, submitted)
        if consumed is None:
            # Redeemed or replaced by another request in the meantime.
            raise NoPendingCode()
        return consumed
