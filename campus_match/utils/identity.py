"""College email parsing and chat room keys."""

from __future__ import annotations

import re
from typing import NamedTuple, Tuple

from campus_match.errors import InvalidFormat, InvalidRoom

COLLEGE_DOMAIN = "mnnit.ac.in"

# firstName.20XXXXXX@mnnit.ac.in
_COLLEGE_EMAIL_RE = re.compile(r"^([a-zA-Z]+)\.(20[0-9]{6})@" + re.escape(COLLEGE_DOMAIN) + r"$")


class Identity(NamedTuple):
    name: str
    reg_id: str


def parse_college_email(email: object) -> Identity:
    """Extract the display name and registration id from a college email.

    Matching is exact: no trimming, no case folding of the domain.
    """
    if not isinstance(email, str):
        raise InvalidFormat()
    match = _COLLEGE_EMAIL_RE.fullmatch(email)
    if not match:
        raise InvalidFormat()
    return Identity(name=match.group(1), reg_id=match.group(2))


def room_for(reg_a: str, reg_b: str) -> str:
    """Return the order-independent room key for two participants."""
    first, second = sorted((reg_a, reg_b))
    return f"{first}-{second}"


def room_members(room: object) -> Tuple[str, str]:
    """Split a room key back into its two registration ids."""
    if not isinstance(room, str):
        raise InvalidRoom("Invalid chat room.")
    parts = room.split("-")
    if len(parts) != 2 or not all(parts) or room_for(*parts) != room:
        raise InvalidRoom("Invalid chat room.")
    return parts[0], parts[1]
