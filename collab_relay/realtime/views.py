from django.http import HttpResponse

from collab_relay.realtime.hub import RelayMode
from collab_relay.realtime.socketio import get_hub

STATUS_LINES = {
    RelayMode.CHAT: "Socket.IO server is running!",
    RelayMode.DOCUMENT: "Socket.IO collaborative editor server is running!",
}


def relay_status(request):
    """Plain-text liveness line for the relay on the default namespace."""
    return HttpResponse(STATUS_LINES[get_hub().mode], content_type="text/plain")
