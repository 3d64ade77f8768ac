import pytest

from collab_relay.realtime.hub import BroadcastHub
from collab_relay.realtime.hub import RelayMode
from collab_relay.realtime.tests.factories import RecordingTransport


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def document_hub(transport: RecordingTransport) -> BroadcastHub:
    return BroadcastHub(transport, RelayMode.DOCUMENT)


@pytest.fixture
def chat_hub(transport: RecordingTransport) -> BroadcastHub:
    return BroadcastHub(transport, RelayMode.CHAT)
