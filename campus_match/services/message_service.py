"""Service for persisting chat room messages in MongoDB."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from campus_match import database
from campus_match.errors import PersistenceFailure

COLLECTION_NAME = "chat_messages"


def _get_messages_collection() -> Collection:
    return database.get_database()[COLLECTION_NAME]


def _now() -> datetime:
    # MongoDB keeps millisecond precision; truncate so broadcasts match stored values.
    current = datetime.utcnow()
    return current.replace(microsecond=current.microsecond // 1000 * 1000)


def serialize_message(document: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a stored message into a JSON-friendly dictionary."""
    result = dict(document)
    if "_id" in result:
        result["_id"] = str(result["_id"])
    if isinstance(result.get("timestamp"), datetime):
        result["timestamp"] = result["timestamp"].isoformat()
    result["readBy"] = list(result.get("readBy") or [])
    return result


def save_message(room: str, sender: str, text: str) -> Dict[str, Any]:
    """
    Append a chat message to a room.

    Args:
        room: Canonical room key of the two participants
        sender: Registration id of the author
        text: Message body

    Returns:
        The stored message, serialized

    Raises:
        PersistenceFailure: if MongoDB did not acknowledge the write
    """
    document = {
        "room": room,
        "sender": sender,
        "text": text,
        "timestamp": _now(),
        "readBy": [],
    }

    try:
        result = _get_messages_collection().insert_one(document)
    except PyMongoError as exc:
        raise PersistenceFailure() from exc

    document["_id"] = result.inserted_id
    return serialize_message(document)


def get_room_history(room: str) -> List[Dict[str, Any]]:
    """
    Retrieve every message in a room.

    Args:
        room: Canonical room key

    Returns:
        List of message dictionaries sorted by timestamp (oldest first)
    """
    try:
        messages = list(
            _get_messages_collection()
            .find({"room": room})
            .sort([("timestamp", 1), ("_id", 1)])
        )
    except PyMongoError as exc:
        raise PersistenceFailure("Could not load chat history.") from exc

    return [serialize_message(msg) for msg in messages]


def mark_room_as_read(room: str, user: str) -> int:
    """
    Add ``user`` to the read receipts of every message in the room.

    Set-union per document, so calling it again changes nothing.

    Returns:
        Number of messages that gained a read receipt
    """
    try:
        result = _get_messages_collection().update_many(
            {"room": room, "readBy": {"$ne": user}},
            {"$addToSet": {"readBy": user}},
        )
    except PyMongoError as exc:
        raise PersistenceFailure("Could not update read receipts.") from exc

    return result.modified_count


def count_unread(room: str, user: str) -> int:
    """Count messages in the room sent by someone else and not yet read by ``user``."""
    try:
        return _get_messages_collection().count_documents(
            {"room": room, "sender": {"$ne": user}, "readBy": {"$ne": user}}
        )
    except PyMongoError as exc:
        raise PersistenceFailure("Could not count unread messages.") from exc


def count_messages() -> int:
    return _get_messages_collection().count_documents({})


def drop_all() -> None:
    """Delete every stored chat message."""
    _get_messages_collection().drop()


def create_indexes():
    """Create database indexes for room history queries."""
    _get_messages_collection().create_index([
        ("room", 1),
        ("timestamp", 1),
    ])
