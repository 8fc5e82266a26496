"""Shared pytest fixtures for the matchmaking app."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Tuple

import mongomock
import pytest

# Ensure the application package is importable during tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from campus_match import database  # noqa: E402
from campus_match.errors import DeliveryFailed  # noqa: E402
from campus_match.main import create_app  # noqa: E402


class RecordingMailer:
    """Mailer stand-in that remembers what it was asked to send."""

    def __init__(self) -> None:
        self.sent: List[Tuple[str, str, str]] = []
        self.fail = False

    def send_code(self, to_email: str, name: str, code: str) -> None:
        if self.fail:
            raise DeliveryFailed()
        self.sent.append((to_email, name, code))


class CodeSequence:
    """Hands out queued codes, then a fixed fallback."""

    def __init__(self, *codes: str) -> None:
        self.codes = list(codes)

    def __call__(self) -> str:
        return self.codes.pop(0) if self.codes else "000000"


@pytest.fixture(autouse=True)
def mongo_db(monkeypatch: pytest.MonkeyPatch):
    """Provide an isolated in-memory MongoDB database for each test."""
    test_db_name = "test_campus_match"
    monkeypatch.setenv("MONGODB_DATABASE", test_db_name)

    client = mongomock.MongoClient()
    db = client[test_db_name]

    monkeypatch.setattr(database, "get_mongo_client", lambda: client)
    monkeypatch.setattr(database, "get_database", lambda: db)

    yield db

    client.drop_database(test_db_name)


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def codes() -> CodeSequence:
    return CodeSequence()


@pytest.fixture
def app(mailer, codes):
    app = create_app(
        {"TESTING": True, "SECRET_KEY": "test", "CREATE_INDEXES": True},
        mailer=mailer,
        code_factory=codes,
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def state(app):
    return app.extensions["campus_match"]


@pytest.fixture
def socketio(app):
    return app.extensions["socketio"]


@pytest.fixture
def connect(app, socketio):
    """Factory for Socket.IO test clients; all are disconnected on teardown."""
    clients = []

    def _connect():
        sio_client = socketio.test_client(app)
        clients.append(sio_client)
        return sio_client

    yield _connect

    for sio_client in clients:
        if sio_client.is_connected():
            sio_client.disconnect()
