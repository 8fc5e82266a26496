#!/usr/bin/env python3
"""Delete all stored chat messages to start fresh."""

from dotenv import load_dotenv

load_dotenv()

from campus_match.services import message_service


def reset_messages() -> None:
    """Drop the chat message collection."""
    print("Clearing chat messages...")
    message_service.drop_all()
    print("Database reset complete. All chat history has been cleared.")


if __name__ == "__main__":
    print("Resetting chat history.")
    print("   This will DELETE ALL stored messages.")

    confirm = input("\nAre you sure? Type 'yes' to continue: ")
    if confirm.lower() == 'yes':
        reset_messages()
    else:
        print("Reset cancelled.")
