"""Crush selection and mutual match results."""

from __future__ import annotations

from typing import List

from flask import Blueprint, current_app, render_template, request

from campus_match.services import match_service
from campus_match.storage import get_state

bp = Blueprint("choices", __name__)


def parse_crushes(raw: str) -> List[str]:
    """Split the comma separated form field, trimming and dropping blanks."""
    return [value.strip() for value in (raw or "").split(",") if value.strip()]


@bp.get("/choices")
def choices():
    """Crush selection page for a verified student."""
    student = get_state().roster.get(request.args.get("reg", ""))
    return render_template("choices.html", student=student)


@bp.post("/submit-choices")
def submit_choices():
    """Store the student's crushes and show who listed them back."""
    reg = request.form.get("reg", "")
    roster = get_state().roster

    student = roster.set_crushes(reg, parse_crushes(request.form.get("crushes", "")))
    matches = match_service.mutual_matches(roster, student.reg_id)
    current_app.logger.info(f"Student {student.reg_id} has {len(matches)} mutual match(es)")

    return render_template("matches.html", student=student, matches=matches)
