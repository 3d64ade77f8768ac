from __future__ import annotations

from typing import Any

from django.db import connection
from django.http import JsonResponse

from collab_relay.realtime.socketio import describe_hubs
from collab_relay.realtime.socketio import missing_namespaces


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


def check_realtime() -> dict[str, Any]:
    try:
        namespaces = describe_hubs()
        unrouted = missing_namespaces()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    if unrouted:
        return {
            "ok": False,
            "error": "Namespaces not registered: " + ", ".join(unrouted),
            "namespaces": namespaces,
        }
    return {"ok": True, "namespaces": namespaces}


def health(request):
    db = check_db()
    realtime = check_realtime()
    components = {"db": db, "realtime": realtime}

    all_ok = all(v.get("ok", False) for v in components.values())
    some_ok = any(v.get("ok", False) for v in components.values())

    status = "ok" if all_ok else ("degraded" if some_ok else "down")
    http_status = 200 if all_ok else 503

    return JsonResponse(
        {"status": status, "components": components},
        status=http_status,
    )
