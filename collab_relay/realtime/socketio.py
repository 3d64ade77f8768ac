"""Global Socket.IO server for the chat and document front-ends.

One server, three namespaces:
- ``/``: the relay selected by ``settings.RELAY_MODE`` (existing clients
  connect to the default namespace and expect one relay per server)
- ``/chat``: always the chat relay
- ``/document``: always the collaborative document relay

Client convention:
- URL base: ws://<host>:3001
- Socket.IO path: /socket.io/
- Display name: ``query.username`` (optional, ``auth.username`` also accepted)

Each namespace owns its own hub, so rosters and documents are not shared
between namespaces.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qs

import socketio
from django.conf import settings

from collab_relay.realtime.hub import BroadcastHub
from collab_relay.realtime.hub import RelayMode

logger = logging.getLogger(__name__)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.RELAY_CORS_ALLOWED_ORIGINS,
    logger=False,
    engineio_logger=False,
)


def _extract_query_param(environ: dict[str, Any], name: str) -> str | None:
    """Read one query-string parameter from a Socket.IO environ.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    value = parse_qs(str(query_string)).get(name, [None])[0]
    if isinstance(value, str) and value:
        return value
    return None


def extract_username(environ: dict[str, Any], auth: Any | None) -> str | None:
    username = _extract_query_param(environ, "username")
    if username:
        return username

    # Allow `auth: { username }` as fallback.
    if isinstance(auth, dict):
        auth_username = auth.get("username")
        if isinstance(auth_username, str) and auth_username:
            return auth_username

    return None


class NamespaceTransport:
    """Point-to-point delivery through a Socket.IO namespace."""

    def __init__(self, namespace: socketio.AsyncNamespace) -> None:
        self.namespace = namespace

    async def send(self, sid: str, event: str, data: Any) -> None:
        await self.namespace.emit(event, data, to=sid)


class RelayNamespace(socketio.AsyncNamespace):
    """Connection bookkeeping shared by both relays."""

    mode: RelayMode

    def __init__(self, namespace: str) -> None:
        super().__init__(namespace)
        self.hub = BroadcastHub(
            NamespaceTransport(self),
            self.mode,
            guest_prefix=settings.RELAY_GUEST_PREFIX,
            guest_id_length=settings.RELAY_GUEST_ID_LENGTH,
        )

    async def on_connect(self, sid: str, environ: dict[str, Any], auth: Any = None):
        await self.hub.connect(sid, extract_username(environ, auth))

    async def on_disconnect(self, sid: str, reason: Any = None):
        await self.hub.disconnect(sid)


class ChatNamespace(RelayNamespace):
    mode = RelayMode.CHAT

    async def on_user_joined(self, sid: str, username: Any):
        await self.hub.announce_join(sid, username)

    async def on_chat_message(self, sid: str, message: Any):
        await self.hub.receive_chat_message(sid, message)


class DocumentNamespace(RelayNamespace):
    mode = RelayMode.DOCUMENT

    async def on_document_update_to_server(self, sid: str, content: Any):
        await self.hub.update_document(sid, content)


NAMESPACE_CLASSES: dict[RelayMode, type[RelayNamespace]] = {
    RelayMode.CHAT: ChatNamespace,
    RelayMode.DOCUMENT: DocumentNamespace,
}


def build_namespaces(default_mode: RelayMode | str) -> dict[str, RelayNamespace]:
    """Create the namespace handlers keyed by namespace path."""

    default_cls = NAMESPACE_CLASSES[RelayMode(default_mode)]
    return {
        "/": default_cls("/"),
        "/chat": ChatNamespace("/chat"),
        "/document": DocumentNamespace("/document"),
    }


namespaces = build_namespaces(settings.RELAY_MODE)
for _handler in namespaces.values():
    sio.register_namespace(_handler)


def get_hub(namespace: str = "/") -> BroadcastHub:
    return namespaces[namespace].hub


def describe_hubs() -> dict[str, dict[str, Any]]:
    return {
        path: {
            "mode": handler.hub.mode.value,
            "connections": handler.hub.connection_count,
        }
        for path, handler in namespaces.items()
    }


def missing_namespaces() -> list[str]:
    """Namespaces with a hub that the server would not route to."""
    registered = sio.namespace_handlers
    return sorted(
        path
        for path, handler in namespaces.items()
        if registered.get(path) is not handler
    )
