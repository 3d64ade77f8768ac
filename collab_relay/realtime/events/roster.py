from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

    from collab_relay.realtime.hub import Connection

ACTIVE_USERS = "active_users"


def build_active_users_payload(
    connections: Iterable[Connection],
) -> list[dict[str, Any]]:
    return [conn.as_payload() for conn in connections]
