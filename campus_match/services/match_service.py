"""Mutual match computation over the roster."""

from __future__ import annotations

from typing import List, Set

from campus_match.storage import RosterStore, User


def is_mutual(subject: User, other: User) -> bool:
    return other.reg_id in subject.crushes and subject.reg_id in other.crushes


def mutual_matches(roster: RosterStore, reg_id: str) -> List[User]:
    """Return users who list ``reg_id`` and are listed by it, in the subject's order.

    Unknown ids, one-sided crushes and the subject's own id are skipped.
    """
    subject = roster.get(reg_id)
    matches: List[User] = []
    seen: Set[str] = set()

    for crush_reg in subject.crushes:
        if crush_reg == subject.reg_id or crush_reg in seen:
            continue
        other = roster.find(crush_reg)
        if other is not None and is_mutual(subject, other):
            matches.append(other)
            seen.add(crush_reg)

    return matches
