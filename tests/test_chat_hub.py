import asyncio
import uuid

import pytest

from conftest import RecordingConnection, make_token
from pairchat.application.services import ChatHub, Session, SessionState
from pairchat.domain.exceptions import PersistenceError
from pairchat.domain.value_objects import RoomId
from pairchat.infrastructure.memory import InMemoryMessageStore

pytestmark = pytest.mark.anyio


class FailingMessageStore(InMemoryMessageStore):
    async def append(self, room_id, sender, body, recipient=None):
        raise PersistenceError("database unreachable")


class StallingMessageStore(InMemoryMessageStore):
    async def history(self, room_id):
        await asyncio.sleep(10)
        return []


class SlowCommitMessageStore(InMemoryMessageStore):
    """Commits the append, then is slow to acknowledge it."""

    async def append(self, room_id, sender, body, recipient=None):
        message = await super().append(room_id, sender, body, recipient)
        await asyncio.sleep(0.2)
        return message


async def joined_pair(hub, connect):
    """u1 and u2 both joined to their shared room."""
    s1, c1 = await connect("u1")
    s2, c2 = await connect("u2")
    room = await hub.join(s1, "u2")
    await hub.join(s2, "u1")
    c1.events.clear()
    c2.events.clear()
    return room.id.value, (s1, c1), (s2, c2)


class TestConnect:
    async def test_valid_token_opens_session(self, hub):
        connection = RecordingConnection()
        session = await hub.connect(connection, make_token("u1"))

        assert session.state is SessionState.AUTHENTICATED
        assert session.identity.value == "u1"
        assert hub.session_count == 1
        assert not connection.closed

    @pytest.mark.parametrize(
        "credential", [None, "garbage", make_token("u1", expires_in=-10)]
    )
    async def test_rejected_connection_is_closed_silently(self, hub, credential):
        connection = RecordingConnection()
        assert await hub.connect(connection, credential) is None
        assert connection.close_code == 1008
        assert connection.events == []
        assert hub.session_count == 0

    async def test_operations_before_authentication_close_the_connection(self, hub):
        connection = RecordingConnection()
        session = Session(connection=connection)

        await hub.dispatch(session, "joinRoom", "u2")

        assert connection.close_code == 1008
        assert connection.events == []
        assert session.state is SessionState.DISCONNECTED


class TestJoin:
    async def test_join_acknowledges_and_pushes_history(self, hub, connect):
        s1, c1 = await connect("u1")
        room = await hub.join(s1, "u2")

        assert c1.names() == ["joinedRoom", "chatHistory"]
        joined = c1.payloads("joinedRoom")[0]
        assert joined["roomId"] == room.id.value
        assert {p["userId"] for p in joined["participants"]} == {"u1", "u2"}
        assert c1.payloads("chatHistory")[0] == {"history": []}

    async def test_concurrent_joins_resolve_to_one_room(self, hub, connect):
        s1, c1 = await connect("u1")
        s2, c2 = await connect("u2")

        r1, r2 = await asyncio.gather(hub.join(s1, "u2"), hub.join(s2, "u1"))

        assert r1.id == r2.id
        assert c1.payloads("joinedRoom")[0] == c2.payloads("joinedRoom")[0]
        assert hub.subscribers_of(r1.id.value) == {s1.id, s2.id}

    async def test_join_rebroadcasts_history_to_existing_subscribers(self, hub, connect):
        s1, c1 = await connect("u1")
        s2, c2 = await connect("u2")
        room = await hub.join(s1, "u2")
        await hub.send(s1, room.id.value, "before you came")
        c1.events.clear()

        await hub.join(s2, "u1")

        for connection in (c1, c2):
            history = connection.payloads("chatHistory")[-1]["history"]
            assert [m["message"] for m in history] == ["before you came"]
            assert history[0]["senderId"] == "u1"
            assert history[0]["receiverId"] == "u2"

    async def test_join_with_self_is_refused_with_error(self, hub, connect):
        s1, c1 = await connect("u1")

        assert await hub.join(s1, "u1") is None
        assert c1.names() == ["chatError"]
        assert c1.payloads("chatError")[0]["event"] == "joinRoom"
        assert not c1.closed


class TestSend:
    async def test_message_reaches_each_subscriber_exactly_once(self, hub, connect):
        room, (s1, c1), (s2, c2) = await joined_pair(hub, connect)

        await hub.send(s1, room, "hello")

        expected = {"room": room, "message": "hello", "sender": "u1"}
        assert c1.payloads("chatToClient") == [expected]
        assert c2.payloads("chatToClient") == [expected]

    async def test_messages_arrive_in_send_order(self, hub, connect, message_store):
        room, (s1, _), (s2, c2) = await joined_pair(hub, connect)

        for i in range(5):
            await hub.send(s1 if i % 2 == 0 else s2, room, f"m{i}")

        assert [p["message"] for p in c2.payloads("chatToClient")] == [
            f"m{i}" for i in range(5)
        ]
        history = await message_store.history(RoomId(room))
        assert [m.seq for m in history] == [1, 2, 3, 4, 5]

    async def test_outsider_send_closes_connection_without_broadcast(self, hub, connect):
        room, (_, c1), (_, c2) = await joined_pair(hub, connect)
        s3, c3 = await connect("u3")

        assert await hub.send(s3, room, "let me in") is None

        assert c3.close_code == 1008
        assert c3.events == []
        assert c1.events == [] and c2.events == []
        assert s3.state is SessionState.DISCONNECTED

    async def test_malformed_room_id_is_treated_as_unauthorized(self, hub, connect):
        s1, c1 = await connect("u1")
        await hub.send(s1, "not-a-room", "hi")
        assert c1.close_code == 1008

    async def test_empty_message_is_refused_with_error(self, hub, connect):
        room, (s1, c1), (_, c2) = await joined_pair(hub, connect)

        await hub.send(s1, room, "   ")

        assert c1.names() == ["chatError"]
        assert c2.events == []

    async def test_disconnected_session_gets_no_further_events(self, hub, connect):
        room, (s1, c1), (s2, c2) = await joined_pair(hub, connect)

        await hub.disconnect(s2)
        await hub.send(s1, room, "anyone?")

        assert c1.payloads("chatToClient")[0]["message"] == "anyone?"
        assert c2.events == []

    async def test_dead_subscriber_does_not_block_the_others(self, hub, connect):
        room, (s1, c1), (s2, c2) = await joined_pair(hub, connect)
        c2.broken = True

        message = await hub.send(s1, room, "still here")

        assert message is not None
        assert c1.payloads("chatToClient")[0]["message"] == "still here"
        assert s2.state is SessionState.DISCONNECTED
        assert hub.subscribers_of(room) == {s1.id}


class TestPersistenceFailures:
    async def test_failed_append_sends_error_and_no_broadcast(
        self, authenticator, room_directory
    ):
        hub = ChatHub(authenticator, room_directory, FailingMessageStore())
        c1 = RecordingConnection("u1")
        session1 = await hub.connect(c1, make_token("u1"))
        c2 = RecordingConnection("u2")
        session2 = await hub.connect(c2, make_token("u2"))
        room = await hub.join(session1, "u2")
        await hub.join(session2, "u1")
        c1.events.clear()
        c2.events.clear()

        assert await hub.send(session1, room.id.value, "lost?") is None

        assert c1.names() == ["chatError"]
        assert c1.payloads("chatError")[0] == {
            "event": "chatToServer",
            "detail": "Storage unavailable, try again",
        }
        assert c2.events == []
        assert session1.is_authenticated

    async def test_stalled_history_read_times_out_into_error(
        self, authenticator, room_directory
    ):
        hub = ChatHub(
            authenticator, room_directory, StallingMessageStore(), store_timeout=0.05
        )
        connection = RecordingConnection("u1")
        session = await hub.connect(connection, make_token("u1"))

        await hub.join(session, "u2")

        assert connection.names() == ["joinedRoom", "chatError"]
        assert connection.payloads("chatError")[0]["event"] == "joinRoom"
        assert session.is_authenticated

    async def test_slow_append_is_delivered_not_reported_as_failed(
        self, authenticator, room_directory
    ):
        store = SlowCommitMessageStore()
        hub = ChatHub(authenticator, room_directory, store, store_timeout=0.05)
        c1, c2 = RecordingConnection("u1"), RecordingConnection("u2")
        s1 = await hub.connect(c1, make_token("u1"))
        s2 = await hub.connect(c2, make_token("u2"))
        room = await hub.join(s1, "u2")
        await hub.join(s2, "u1")
        c1.events.clear()
        c2.events.clear()

        message = await hub.send(s1, room.id.value, "hi")

        assert message is not None
        expected = {"room": room.id.value, "message": "hi", "sender": "u1"}
        assert c1.events == [("chatToClient", expected)]
        assert c2.events == [("chatToClient", expected)]
        assert [m.body for m in await store.history(room.id)] == ["hi"]


class TestHistory:
    async def test_participant_receives_history_alone(self, hub, connect):
        room, (s1, c1), (s2, c2) = await joined_pair(hub, connect)
        await hub.send(s1, room, "one")
        await hub.send(s2, room, "two")
        c1.events.clear()
        c2.events.clear()

        assert await hub.request_history(s2, room) is True

        payload = c2.payloads("chatHistory")[0]
        assert payload["room"] == room
        assert [m["message"] for m in payload["history"]] == ["one", "two"]
        assert [m["seq"] for m in payload["history"]] == [1, 2]
        assert c1.events == []

    async def test_outsider_history_request_closes_connection(self, hub, connect):
        room, _, _ = await joined_pair(hub, connect)
        s3, c3 = await connect("u3")

        assert await hub.request_history(s3, room) is False

        assert c3.close_code == 1008
        assert c3.events == []

    async def test_unknown_room_looks_the_same_as_foreign_room(self, hub, connect):
        s1, c1 = await connect("u1")
        await hub.request_history(s1, str(uuid.uuid4()))
        assert c1.close_code == 1008
        assert c1.events == []

    async def test_refused_requests_allocate_no_room_locks(self, hub, connect):
        room, _, _ = await joined_pair(hub, connect)
        locks_before = dict(hub._room_locks)

        for _ in range(20):
            session, connection = await connect("u3")
            await hub.request_history(session, str(uuid.uuid4()))
            assert connection.close_code == 1008
        for target in (str(uuid.uuid4()), room):
            session, connection = await connect("u3")
            await hub.send(session, target, "hello?")
            assert connection.close_code == 1008

        assert hub._room_locks == locks_before

    async def test_join_snapshot_and_live_message_never_overlap(self, hub, connect):
        s1, _ = await connect("u1")
        s2, c2 = await connect("u2")
        room = await hub.join(s1, "u2")

        await asyncio.gather(hub.send(s1, room.id.value, "race"), hub.join(s2, "u1"))

        in_history = sum(
            m["message"] == "race"
            for m in c2.payloads("chatHistory")[0]["history"]
        )
        live = sum(p["message"] == "race" for p in c2.payloads("chatToClient"))
        assert in_history + live == 1


class TestDispatchAndLifecycle:
    async def test_dispatch_routes_events(self, hub, connect):
        s1, c1 = await connect("u1")
        await hub.dispatch(s1, "joinRoom", "u2")
        room = c1.payloads("joinedRoom")[0]["roomId"]

        await hub.dispatch(s1, "chatToServer", {"room": room, "message": "via dispatch"})
        await hub.dispatch(s1, "getChatHistory", {"room": room})

        assert c1.payloads("chatToClient")[0]["message"] == "via dispatch"
        assert c1.payloads("chatHistory")[-1]["room"] == room

    @pytest.mark.parametrize(
        "event,data",
        [
            ("shout", {}),
            ("chatToServer", {"room": "r"}),
            ("chatToServer", "hello"),
            ("getChatHistory", None),
        ],
    )
    async def test_bad_events_get_error_reply(self, hub, connect, event, data):
        s1, c1 = await connect("u1")
        await hub.dispatch(s1, event, data)
        assert c1.names() == ["chatError"]
        assert c1.payloads("chatError")[0]["event"] == event
        assert not c1.closed

    async def test_disconnect_is_idempotent(self, hub, connect):
        room, (s1, c1), (s2, _) = await joined_pair(hub, connect)

        await hub.disconnect(s1)
        await hub.disconnect(s1)

        assert hub.session_count == 1
        assert hub.subscribers_of(room) == {s2.id}
        assert s1.rooms == set()
        assert c1.close_code == 1000

    async def test_close_disconnects_everyone_going_away(self, hub, connect):
        _, (_, c1), (_, c2) = await joined_pair(hub, connect)

        await hub.close()

        assert hub.session_count == 0
        assert c1.close_code == 1001
        assert c2.close_code == 1001
