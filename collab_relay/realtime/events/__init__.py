"""Wire-level event names and payload builders.

The event names are shared with existing front-ends and must not change.
These modules build payloads only; they do not emit anything.
"""

from .chat import CHAT_MESSAGE
from .chat import SYSTEM_MESSAGE
from .chat import USER_JOINED
from .chat import build_join_notice
from .chat import build_leave_notice
from .chat import describe_chat_message
from .documents import DOCUMENT_UPDATE_FROM_SERVER
from .documents import DOCUMENT_UPDATE_TO_SERVER
from .documents import INITIAL_DOCUMENT_CONTENT
from .documents import preview_content
from .roster import ACTIVE_USERS
from .roster import build_active_users_payload

__all__ = [
    "ACTIVE_USERS",
    "CHAT_MESSAGE",
    "DOCUMENT_UPDATE_FROM_SERVER",
    "DOCUMENT_UPDATE_TO_SERVER",
    "INITIAL_DOCUMENT_CONTENT",
    "SYSTEM_MESSAGE",
    "USER_JOINED",
    "build_active_users_payload",
    "build_join_notice",
    "build_leave_notice",
    "describe_chat_message",
    "preview_content",
]
