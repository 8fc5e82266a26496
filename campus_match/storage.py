"""In-memory data stores backing the roster and pending login codes."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from flask import current_app

from campus_match.errors import TooManyCandidates, UnknownUser

MAX_CRUSHES = 5


@dataclass
class User:
    reg_id: str
    name: str
    branch: str
    gender: str
    email: str
    crushes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "reg": self.reg_id,
            "name": self.name,
            "branch": self.branch,
            "gender": self.gender,
        }


@dataclass
class PendingCode:
    """A login code waiting to be redeemed, plus the login form details."""

    email: str
    code: str
    issued_at: int
    name: str
    reg_id: str
    branch: str = ""
    gender: str = ""


class RosterStore:
    """Registry of known students and their crush lists, keyed by registration id."""

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()

    def upsert(self, reg_id: str, name: str, branch: str, gender: str, email: str) -> User:
        """Create the user or refresh their details.

        The first-seen name and the crush list survive later logins; branch,
        gender and email are last-write-wins.
        """
        with self._lock:
            user = self._users.get(reg_id)
            if user is None:
                user = User(reg_id=reg_id, name=name, branch=branch, gender=gender, email=email)
                self._users[reg_id] = user
            else:
                user.branch = branch
                user.gender = gender
                user.email = email
            return user

    def set_crushes(self, reg_id: str, crushes: Iterable[str]) -> User:
        """Replace the user's crush list wholesale."""
        cleaned = [value.strip() for value in crushes if value and value.strip()]
        if len(cleaned) > MAX_CRUSHES:
            raise TooManyCandidates()

        with self._lock:
            user = self._users.get(reg_id)
            if user is None:
                raise UnknownUser()
            user.crushes = cleaned
            return user

    def find(self, reg_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(reg_id)

    def get(self, reg_id: str) -> User:
        user = self.find(reg_id)
        if user is None:
            raise UnknownUser()
        return user

    def count(self) -> int:
        with self._lock:
            return len(self._users)


class PendingCodeStore:
    """Login codes waiting to be redeemed, keyed by email."""

    def __init__(self) -> None:
        self._codes: Dict[str, PendingCode] = {}
        self._lock = threading.Lock()

    def put(self, record: PendingCode) -> None:
        with self._lock:
            self._codes[record.email] = record

    def get(self, email: str) -> Optional[PendingCode]:
        with self._lock:
            return self._codes.get(email)

    def pop_if(self, email: str, code: str) -> Optional[PendingCode]:
        """Remove and return the entry for ``email`` only if it still holds ``code``."""
        with self._lock:
            record = self._codes.get(email)
            if record is None or record.code != code:
                return None
            return self._codes.pop(email)

    def discard(self, email: str, code: str) -> None:
        self.pop_if(email, code)

    def count(self) -> int:
        with self._lock:
            return len(self._codes)


@dataclass
class AppState:
    """Process-wide state created once per application instance."""

    roster: RosterStore = field(default_factory=RosterStore)
    pending_codes: PendingCodeStore = field(default_factory=PendingCodeStore)
    verifier: Any = None
    relay: Any = None


def get_state() -> AppState:
    """Return the state of the application handling the current request."""
    return current_app.extensions["campus_match"]
