"""Login routes: college email check, OTP issuance and verification."""

from __future__ import annotations

from flask import Blueprint, current_app, redirect, render_template, request, url_for

from campus_match.storage import get_state
from campus_match.utils.identity import parse_college_email

bp = Blueprint("auth", __name__)


@bp.get("/")
def index():
    """Serve the login/registration page."""
    return render_template("index.html")


@bp.post("/login")
def login():
    """Validate the college email, then mail a one-time code to it."""
    email = request.form.get("email", "")
    gender = request.form.get("gender", "")
    branch = request.form.get("branch", "")

    identity = parse_college_email(email)
    state = get_state()
    state.verifier.issue(email, identity, branch=branch, gender=gender)
    current_app.logger.info(f"OTP issued for {identity.reg_id}")

    return render_template("otp.html", email=email, reg=identity.reg_id)


@bp.post("/verify-otp")
def verify_otp():
    """Redeem the code and register the student on success."""
    email = request.form.get("email", "")
    otp = request.form.get("otp", "")

    state = get_state()
    record = state.verifier.verify(email, otp)
    user = state.roster.upsert(
        reg_id=record.reg_id,
        name=record.name,
        branch=record.branch,
        gender=record.gender,
        email=record.email,
    )
    current_app.logger.info(f"Student {user.reg_id} verified")

    return redirect(url_for("choices.choices", reg=user.reg_id))
