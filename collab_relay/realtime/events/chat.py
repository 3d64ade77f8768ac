from __future__ import annotations

from typing import Any

USER_JOINED = "user_joined"
SYSTEM_MESSAGE = "system_message"
CHAT_MESSAGE = "chat_message"

LEAVE_NOTICE = "A user has left the chat."


def build_join_notice(username: Any) -> str:
    return f"{username} has joined the chat."


def build_leave_notice() -> str:
    # Disconnects are not attributed to a user in the chat relay.
    return LEAVE_NOTICE


def describe_chat_message(message: Any) -> tuple[str, str]:
    """Return ``(sender, text)`` for logging without trusting the payload shape."""

    if isinstance(message, dict):
        return str(message.get("sender", "")), str(message.get("text", ""))
    return "", str(message)
