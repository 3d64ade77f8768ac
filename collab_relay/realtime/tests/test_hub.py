import asyncio

import pytest
from asgiref.sync import async_to_sync

from collab_relay.realtime.hub import BroadcastHub
from collab_relay.realtime.hub import Connection
from collab_relay.realtime.hub import RelayMode
from collab_relay.realtime.hub import guest_name


def connect(hub, sid, username=None):
    return async_to_sync(hub.connect)(sid, username)


def disconnect(hub, sid):
    return async_to_sync(hub.disconnect)(sid)


class TestConnect:
    def test_client_declared_username_is_kept(self, document_hub):
        conn = connect(document_hub, "abcdef123", "alice")
        assert conn == Connection(sid="abcdef123", username="alice")
        assert document_hub.get_connection("abcdef123") == conn

    def test_missing_username_gets_guest_name_from_sid(self, document_hub):
        conn = connect(document_hub, "abcdef123")
        assert conn.username == "Guest-abcd"

    def test_empty_or_non_string_username_gets_guest_name(self, document_hub):
        assert connect(document_hub, "s1xxxx", "").username == "Guest-s1xx"
        assert connect(document_hub, "s2yyyy", 42).username == "Guest-s2yy"

    def test_display_names_are_not_unique(self, document_hub):
        connect(document_hub, "s1", "bob")
        connect(document_hub, "s2", "bob")
        assert [c.username for c in document_hub.roster] == ["bob", "bob"]

    def test_guest_name_settings(self, transport):
        hub = BroadcastHub(
            transport,
            RelayMode.DOCUMENT,
            guest_prefix="anon:",
            guest_id_length=2,
        )
        assert connect(hub, "zz9876").username == "anon:zz"
        assert guest_name("12345678") == "Guest-1234"

    def test_new_connection_gets_document_privately_then_roster(
        self, document_hub, transport
    ):
        connect(document_hub, "s1", "alice")
        async_to_sync(document_hub.update_document)("s1", "draft")
        transport.clear()

        connect(document_hub, "s2", "bob")

        assert transport.recipients("initial_document_content") == ["s2"]
        assert transport.received("s2")[0] == "draft"
        expected_roster = [
            {"username": "alice", "id": "s1"},
            {"username": "bob", "id": "s2"},
        ]
        assert transport.received("s1", "active_users") == [expected_roster]
        assert transport.received("s2", "active_users") == [expected_roster]

    def test_first_connection_gets_empty_document(self, document_hub, transport):
        connect(document_hub, "s1")
        assert transport.received("s1", "initial_document_content") == [""]

    @pytest.mark.parametrize("count", [1, 2, 5])
    def test_roster_after_n_connects_has_n_unique_entries(
        self, document_hub, transport, count
    ):
        for i in range(count):
            connect(document_hub, f"sid-{i}")

        last_roster = transport.received(f"sid-{count - 1}", "active_users")[-1]
        assert len(last_roster) == count
        assert len({entry["id"] for entry in last_roster}) == count

    def test_reconnect_with_same_sid_replaces_entry(self, document_hub):
        connect(document_hub, "s1", "alice")
        connect(document_hub, "s1", "alice-again")
        assert document_hub.connection_count == 1
        assert document_hub.get_connection("s1").username == "alice-again"

    def test_chat_connect_emits_nothing(self, chat_hub, transport):
        connect(chat_hub, "s1", "alice")
        assert transport.sent == []
        assert chat_hub.connection_count == 1


class TestDisconnect:
    def test_roster_no_longer_contains_disconnected_sid(
        self, document_hub, transport
    ):
        connect(document_hub, "s1", "alice")
        connect(document_hub, "s2", "bob")
        transport.clear()

        removed = disconnect(document_hub, "s1")

        assert removed == Connection(sid="s1", username="alice")
        assert document_hub.get_connection("s1") is None
        assert document_hub.connection_count == 1
        assert transport.sent == [
            ("s2", "active_users", [{"username": "bob", "id": "s2"}]),
        ]

    def test_unknown_sid_is_ignored(self, document_hub, transport):
        connect(document_hub, "s1")
        transport.clear()

        assert disconnect(document_hub, "never-connected") is None
        assert disconnect(document_hub, "never-connected") is None

        assert document_hub.connection_count == 1
        assert transport.sent == []

    def test_double_disconnect_has_no_extra_effect(self, document_hub, transport):
        connect(document_hub, "s1")
        connect(document_hub, "s2")
        disconnect(document_hub, "s1")
        transport.clear()

        disconnect(document_hub, "s1")

        assert document_hub.connection_count == 1
        assert transport.sent == []

    def test_chat_disconnect_sends_anonymous_leave_notice(self, chat_hub, transport):
        connect(chat_hub, "s1", "alice")
        connect(chat_hub, "s2", "bob")
        connect(chat_hub, "s3", "carol")

        disconnect(chat_hub, "s1")

        assert sorted(transport.recipients("system_message")) == ["s2", "s3"]
        assert transport.received("s2") == ["A user has left the chat."]
        assert transport.recipients("active_users") == []


class TestChat:
    def test_message_reaches_every_client_including_sender_once(
        self, chat_hub, transport
    ):
        for sid in ("a", "b", "c"):
            connect(chat_hub, sid)
        message = {"sender": "A", "text": "hi"}

        delivered = async_to_sync(chat_hub.receive_chat_message)("a", message)

        assert delivered == 3
        for sid in ("a", "b", "c"):
            assert transport.received(sid, "chat_message") == [
                {"sender": "A", "text": "hi"}
            ]

    def test_malformed_messages_are_relayed_verbatim(self, chat_hub, transport):
        connect(chat_hub, "a")
        for payload in ("just text", {"text": "no sender"}, None, [1, 2]):
            async_to_sync(chat_hub.receive_chat_message)("a", payload)

        assert transport.received("a", "chat_message") == [
            "just text",
            {"text": "no sender"},
            None,
            [1, 2],
        ]

    def test_join_notice_skips_the_sender(self, chat_hub, transport):
        for sid in ("a", "b", "c"):
            connect(chat_hub, sid)

        delivered = async_to_sync(chat_hub.announce_join)("a", "alice")

        assert delivered == 2
        assert transport.received("a") == []
        assert transport.received("b") == ["alice has joined the chat."]
        assert transport.received("c") == ["alice has joined the chat."]


class TestDocument:
    def test_update_goes_to_everyone_but_sender(self, document_hub, transport):
        for sid in ("x", "y", "z"):
            connect(document_hub, sid)
        transport.clear()

        delivered = async_to_sync(document_hub.update_document)("x", "foo")

        assert delivered == 2
        assert transport.received("x") == []
        assert transport.received("y", "document_update_from_server") == ["foo"]
        assert transport.received("z", "document_update_from_server") == ["foo"]
        assert document_hub.document == "foo"

    def test_last_write_wins_for_late_joiner(self, document_hub, transport):
        connect(document_hub, "x")
        connect(document_hub, "y")
        async_to_sync(document_hub.update_document)("x", "hello")
        async_to_sync(document_hub.update_document)("y", "hello world")

        connect(document_hub, "z")

        assert transport.received("z", "initial_document_content") == ["hello world"]

    def test_non_string_update_is_dropped(self, document_hub, transport):
        connect(document_hub, "x")
        connect(document_hub, "y")
        async_to_sync(document_hub.update_document)("x", "kept")
        transport.clear()

        delivered = async_to_sync(document_hub.update_document)("y", {"oops": 1})

        assert delivered == 0
        assert document_hub.document == "kept"
        assert transport.sent == []

    def test_empty_string_is_a_valid_document(self, document_hub):
        connect(document_hub, "x")
        async_to_sync(document_hub.update_document)("x", "something")
        async_to_sync(document_hub.update_document)("x", "")
        assert document_hub.document == ""

    def test_concurrent_updates_resolve_to_the_last_applied(self, transport):
        async def scenario():
            hub = BroadcastHub(transport, RelayMode.DOCUMENT)
            await hub.connect("x")
            await hub.connect("y")
            await hub.connect("observer")
            await asyncio.gather(
                hub.update_document("x", "from x"),
                hub.update_document("y", "from y"),
            )
            return hub

        hub = async_to_sync(scenario)()

        # The observer sees both updates, in the order the hub applied them.
        seen = transport.received("observer", "document_update_from_server")
        assert len(seen) == 2
        assert seen[-1] == hub.document


class TestFaultIsolation:
    def test_failed_recipient_does_not_block_others(self, chat_hub, transport):
        for sid in ("a", "b", "c"):
            connect(chat_hub, sid)
        transport.failing.add("b")

        delivered = async_to_sync(chat_hub.receive_chat_message)(
            "a", {"sender": "A", "text": "hi"}
        )

        assert delivered == 2
        assert transport.received("a", "chat_message")
        assert transport.received("c", "chat_message")

    def test_failed_delivery_does_not_roll_back_document(
        self, document_hub, transport
    ):
        connect(document_hub, "x")
        connect(document_hub, "y")
        transport.failing.add("y")

        delivered = async_to_sync(document_hub.update_document)("x", "persisted")

        assert delivered == 0
        assert document_hub.document == "persisted"

    def test_failed_initial_push_still_registers_connection(
        self, document_hub, transport
    ):
        connect(document_hub, "x")
        transport.failing.add("y")

        connect(document_hub, "y", "flaky")

        assert document_hub.get_connection("y") is not None
        assert transport.received("x", "active_users")[-1] == [
            {"username": "Guest-x", "id": "x"},
            {"username": "flaky", "id": "y"},
        ]

    def test_failures_are_logged(self, chat_hub, transport, caplog):
        connect(chat_hub, "a")
        transport.failing.add("a")

        with caplog.at_level("WARNING", logger="collab_relay.realtime.hub"):
            async_to_sync(chat_hub.announce_join)("other", "alice")

        assert "Failed to deliver system_message to a" in caplog.text
