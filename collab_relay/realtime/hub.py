"""Connection-scoped broadcast hub.

The hub owns the roster of live connections and, for the document relay,
the single shared document. It knows nothing about Socket.IO: everything it
sends goes through a :class:`Transport`, one recipient at a time, so a
failing peer never blocks delivery to the others.

Every operation holds the hub lock for the whole mutate/snapshot/fan-out
sequence. Broadcasts therefore reflect a consistent snapshot and leave the
hub in the order the operations were applied.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol

from collab_relay.realtime.events import ACTIVE_USERS
from collab_relay.realtime.events import CHAT_MESSAGE
from collab_relay.realtime.events import DOCUMENT_UPDATE_FROM_SERVER
from collab_relay.realtime.events import INITIAL_DOCUMENT_CONTENT
from collab_relay.realtime.events import SYSTEM_MESSAGE
from collab_relay.realtime.events import build_active_users_payload
from collab_relay.realtime.events import build_join_notice
from collab_relay.realtime.events import build_leave_notice
from collab_relay.realtime.events import describe_chat_message
from collab_relay.realtime.events import preview_content

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_GUEST_PREFIX = "Guest-"
DEFAULT_GUEST_ID_LENGTH = 4


class RelayMode(str, enum.Enum):
    CHAT = "chat"
    DOCUMENT = "document"


class Transport(Protocol):
    async def send(self, sid: str, event: str, data: Any) -> None: ...


@dataclass(frozen=True)
class Connection:
    sid: str
    username: str

    def as_payload(self) -> dict[str, str]:
        return {"username": self.username, "id": self.sid}


def guest_name(
    sid: str,
    *,
    prefix: str = DEFAULT_GUEST_PREFIX,
    length: int = DEFAULT_GUEST_ID_LENGTH,
) -> str:
    return f"{prefix}{sid[:length]}"


class BroadcastHub:
    """Relay application events between the connections of one namespace.

    - chat mode: messages go to everyone (sender included), join notices to
      everyone else, a generic leave notice on disconnect. No roster is
      published.
    - document mode: new connections get the current document privately,
      updates overwrite the document (last write wins) and go to everyone
      but the sender, and ``active_users`` is republished on every
      connect/disconnect.
    """

    def __init__(
        self,
        transport: Transport,
        mode: RelayMode | str = RelayMode.DOCUMENT,
        *,
        guest_prefix: str = DEFAULT_GUEST_PREFIX,
        guest_id_length: int = DEFAULT_GUEST_ID_LENGTH,
    ) -> None:
        self._transport = transport
        self._mode = RelayMode(mode)
        self._guest_prefix = guest_prefix
        self._guest_id_length = guest_id_length
        self._roster: dict[str, Connection] = {}
        self._document = ""
        self._lock = asyncio.Lock()

    @property
    def mode(self) -> RelayMode:
        return self._mode

    @property
    def roster(self) -> list[Connection]:
        """Snapshot of the live connections."""
        return list(self._roster.values())

    @property
    def connection_count(self) -> int:
        return len(self._roster)

    @property
    def document(self) -> str:
        return self._document

    def get_connection(self, sid: str) -> Connection | None:
        return self._roster.get(sid)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def connect(self, sid: str, username: Any = None) -> Connection:
        """Register a new connection and publish the resulting state."""

        if isinstance(username, str) and username:
            display_name = username
        else:
            display_name = guest_name(
                sid,
                prefix=self._guest_prefix,
                length=self._guest_id_length,
            )
        conn = Connection(sid=sid, username=display_name)

        async with self._lock:
            self._roster[sid] = conn
            logger.info("A user connected: %s (%s)", display_name, sid)
            if self._mode is RelayMode.DOCUMENT:
                await self._deliver(sid, INITIAL_DOCUMENT_CONTENT, self._document)
                await self._publish_roster()
        return conn

    async def receive_chat_message(self, sid: str, message: Any) -> int:
        """Echo a chat message to every connection, the sender included."""

        sender, text = describe_chat_message(message)
        async with self._lock:
            logger.info("Message from %s: %s", sender, text)
            return await self._broadcast(CHAT_MESSAGE, message)

    async def announce_join(self, sid: str, username: Any) -> int:
        async with self._lock:
            logger.info("%s joined the chat.", username)
            return await self._broadcast(
                SYSTEM_MESSAGE,
                build_join_notice(username),
                skip_sid=sid,
            )

    async def update_document(self, sid: str, content: Any) -> int:
        """Replace the shared document and relay it to everyone else.

        Non-string payloads are dropped so the document stays well-typed.
        """

        if not isinstance(content, str):
            logger.warning(
                "Dropping document update from %s: expected str, got %s",
                sid,
                type(content).__name__,
            )
            return 0

        async with self._lock:
            self._document = content
            conn = self._roster.get(sid)
            logger.info(
                "Document updated by %s: %s",
                conn.username if conn else sid,
                preview_content(content),
            )
            return await self._broadcast(
                DOCUMENT_UPDATE_FROM_SERVER,
                self._document,
                skip_sid=sid,
            )

    async def disconnect(self, sid: str) -> Connection | None:
        """Forget a connection. Unknown sids are ignored."""

        async with self._lock:
            conn = self._roster.pop(sid, None)
            if conn is None:
                logger.debug("Disconnect for unknown connection %s ignored", sid)
                return None
            logger.info("User disconnected: %s (%s)", conn.username, sid)
            if self._mode is RelayMode.DOCUMENT:
                await self._publish_roster()
            else:
                await self._broadcast(SYSTEM_MESSAGE, build_leave_notice())
        return conn

    # ------------------------------------------------------------------
    # Fan-out (callers hold the lock)
    # ------------------------------------------------------------------

    async def _publish_roster(self) -> int:
        payload = build_active_users_payload(self._roster.values())
        return await self._broadcast(ACTIVE_USERS, payload)

    async def _broadcast(
        self,
        event: str,
        data: Any,
        *,
        skip_sid: str | None = None,
    ) -> int:
        recipients = [sid for sid in self._roster if sid != skip_sid]
        return await self._fan_out(recipients, event, data)

    async def _fan_out(self, recipients: Iterable[str], event: str, data: Any) -> int:
        results = await asyncio.gather(
            *(self._deliver(sid, event, data) for sid in recipients),
        )
        return sum(1 for ok in results if ok)

    async def _deliver(self, sid: str, event: str, data: Any) -> bool:
        try:
            await self._transport.send(sid, event, data)
        except Exception:  # noqa: BLE001 - one failed peer must not abort the fan-out
            logger.warning("Failed to deliver %s to %s", event, sid, exc_info=True)
            return False
        return True
