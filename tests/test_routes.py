"""Tests for the login, choices and match HTTP flows."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from campus_match.services import message_service  # noqa: E402

RAHUL = "rahul.20123456@mnnit.ac.in"
PRIYA = "priya.20123457@mnnit.ac.in"


def _login_and_verify(client, codes, email, code, gender="male", branch="CSE"):
    codes.codes.append(code)
    response = client.post("/login", data={"email": email, "gender": gender, "branch": branch})
    assert response.status_code == 200
    return client.post("/verify-otp", data={"email": email, "otp": code, "reg": email.split(".")[1][:8]})


def test_index_serves_login_form(client):
    response = client.get("/")

    assert response.status_code == 200
    assert b'action="/login"' in response.data


def test_login_rejects_non_college_email(client, mailer):
    response = client.post("/login", data={"email": "rahul@gmail.com", "gender": "male", "branch": "CSE"})

    assert response.status_code == 400
    assert b"Invalid email format" in response.data
    assert mailer.sent == []


def test_login_renders_otp_page_and_sends_code(client, mailer, codes):
    codes.codes.append("482913")

    response = client.post("/login", data={"email": RAHUL, "gender": "male", "branch": "CSE"})

    assert response.status_code == 200
    assert b"OTP Verification" in response.data
    assert b'name="reg" value="20123456"' in response.data
    assert mailer.sent == [(RAHUL, "rahul", "482913")]


def test_login_reports_delivery_failure(client, mailer, state):
    mailer.fail = True

    response = client.post("/login", data={"email": RAHUL, "gender": "male", "branch": "CSE"})

    assert response.status_code == 502
    assert b"Error sending OTP" in response.data
    assert state.pending_codes.count() == 0


def test_verify_otp_wrong_code_then_right_code(client, codes, state):
    codes.codes.append("482913")
    client.post("/login", data={"email": RAHUL, "gender": "male", "branch": "CSE"})

    wrong = client.post("/verify-otp", data={"email": RAHUL, "otp": "000001", "reg": "20123456"})
    assert wrong.status_code == 401
    assert b"Invalid OTP" in wrong.data
    assert state.roster.find("20123456") is None

    right = client.post("/verify-otp", data={"email": RAHUL, "otp": "482913", "reg": "20123456"})
    assert right.status_code == 302
    assert right.headers["Location"].endswith("/choices?reg=20123456")

    again = client.post("/verify-otp", data={"email": RAHUL, "otp": "482913", "reg": "20123456"})
    assert again.status_code == 401


def test_verified_student_is_registered(client, codes, state):
    _login_and_verify(client, codes, RAHUL, "482913", gender="male", branch="ECE")

    user = state.roster.get("20123456")
    assert user.name == "rahul"
    assert user.branch == "ECE"
    assert user.email == RAHUL


def test_choices_page_for_known_and_unknown_students(client, codes):
    assert client.get("/choices?reg=20123456").status_code == 302

    _login_and_verify(client, codes, RAHUL, "482913")
    response = client.get("/choices?reg=20123456")

    assert response.status_code == 200
    assert b"Hello, rahul!" in response.data


def test_submit_choices_unknown_student_redirects_home(client):
    response = client.post("/submit-choices", data={"reg": "20999999", "crushes": "20123456"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/")


def test_submit_choices_rejects_more_than_five(client, codes):
    _login_and_verify(client, codes, RAHUL, "482913")

    response = client.post(
        "/submit-choices",
        data={"reg": "20123456", "crushes": "20000001,20000002,20000003,20000004,20000005,20000006"},
    )

    assert response.status_code == 400


def test_end_to_end_mutual_match(client, codes, state):
    _login_and_verify(client, codes, PRIYA, "111111", gender="female")
    client.post("/submit-choices", data={"reg": "20123457", "crushes": "20123456"})

    verified = _login_and_verify(client, codes, RAHUL, "482913")
    assert verified.headers["Location"].endswith("/choices?reg=20123456")

    response = client.post("/submit-choices", data={"reg": "20123456", "crushes": "20123457"})

    assert response.status_code == 200
    assert b"Mutual Matches Found!" in response.data
    assert response.data.count(b"<li data-reg=") == 1
    assert b'data-reg="20123457"' in response.data
    assert b"/chat?user1=20123456&amp;user2=20123457" in response.data


def test_no_match_when_one_sided(client, codes):
    _login_and_verify(client, codes, PRIYA, "111111")
    _login_and_verify(client, codes, RAHUL, "482913")

    response = client.post("/submit-choices", data={"reg": "20123456", "crushes": "20123457, 20000001"})

    assert b"No mutual matches found yet." in response.data


def test_matches_api_reports_room_and_unread(client, codes):
    _login_and_verify(client, codes, PRIYA, "111111")
    client.post("/submit-choices", data={"reg": "20123457", "crushes": "20123456"})
    _login_and_verify(client, codes, RAHUL, "482913")
    client.post("/submit-choices", data={"reg": "20123456", "crushes": "20123457"})
    message_service.save_message("20123456-20123457", "20123457", "hi rahul")

    response = client.get("/api/matches/20123456")

    assert response.status_code == 200
    body = response.get_json()
    assert body["matches"] == [
        {
            "reg": "20123457",
            "name": "priya",
            "branch": "CSE",
            "gender": "male",
            "room": "20123456-20123457",
            "unread": 1,
        }
    ]


def test_chat_page_is_served(client):
    response = client.get("/chat?user1=20123456&user2=20123457")

    assert response.status_code == 200
    assert b"joinRoom" in response.data


def test_admin_stats(client, codes):
    _login_and_verify(client, codes, RAHUL, "482913")
    codes.codes.append("222222")
    client.post("/login", data={"email": PRIYA, "gender": "female", "branch": "CSE"})
    message_service.save_message("20123456-20123457", "20123456", "hi")

    body = client.get("/api/admin/stats").get_json()

    assert body == {"total_students": 1, "pending_codes": 1, "total_messages": 1}
