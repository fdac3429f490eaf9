"""
ChatHub - live sessions, room subscriptions and the chat protocol.

Operations exposed to the transport:
- connect()          authenticate a new connection (close on failure, no event)
- join()             resolve/create the pair's room, subscribe, ack, push history
- send()             durably append, then fan out chatToClient to subscribers
- request_history()  history to the requester only; close if not a participant
- disconnect()       drop all subscriptions; idempotent
- dispatch()         route one inbound {event, data} frame to the above

Concurrency:
    Everything runs on one event loop. Join, send and history requests for a
    room run under that room's asyncio.Lock, so per room:
    - broadcasts leave in the order the appends were confirmed
    - a join's history snapshot and live chatToClient events never overlap
      (a message is either in the snapshot or delivered live, not both)
    Room locks are created only once the caller is known to participate in
    the room. Appends are never abandoned on timeout; their real outcome
    decides between broadcast and chatError.
    Subscription sets are mutated only in code with no await in between,
    which is what lets disconnect() take effect before its first await.
"""

import asyncio
import logging
import time
from collections import defaultdict
from typing import Any, Awaitable, Optional, TypeVar

from pydantic import ValidationError

from pairchat.application.commands.chat import (
    JoinRoomCommand,
    JoinRoomHandler,
    SendMessageCommand,
    SendMessageHandler,
)
from pairchat.application.dto.chat import (
    ChatErrorDTO,
    ChatEvent,
    ChatHistoryDTO,
    ChatMessageDTO,
    ChatToClientDTO,
    ChatToServerPayload,
    GetChatHistoryPayload,
    RoomDTO,
    RoomHistoryDTO,
)
from pairchat.application.queries.chat import (
    GetChatHistoryHandler,
    GetChatHistoryQuery,
)
from pairchat.application.services.session import Session, SessionState
from pairchat.domain.entities.chat_message import ChatMessage
from pairchat.domain.entities.room import Room
from pairchat.domain.exceptions import (
    AccessDeniedError,
    DomainValidationError,
    PersistenceError,
)
from pairchat.domain.ports.connection import (
    CLOSE_GOING_AWAY,
    CLOSE_NORMAL,
    CLOSE_POLICY_VIOLATION,
    Connection,
    ConnectionClosed,
)
from pairchat.domain.ports.repositories import MessageStore, RoomDirectory
from pairchat.domain.ports.session_authenticator import SessionAuthenticator
from pairchat.domain.value_objects.auth_result import Authenticated
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.observability.metrics import (
    MetricsErrorType,
    increment_error,
    increment_messages,
    increment_room_joins,
    observe_store_latency,
    session_closed,
    session_opened,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChatHub:
    def __init__(
        self,
        authenticator: SessionAuthenticator,
        room_directory: RoomDirectory,
        message_store: MessageStore,
        store_timeout: float = 10.0,
        send_timeout: float = 5.0,
        max_message_length: int = 4000,
    ):
        self._authenticator = authenticator
        self._room_directory = room_directory
        self._message_store = message_store
        self._join_handler = JoinRoomHandler(room_directory)
        self._send_handler = SendMessageHandler(
            room_directory, message_store, max_length=max_message_length
        )
        self._history_handler = GetChatHistoryHandler(room_directory, message_store)
        self._store_timeout = store_timeout
        self._send_timeout = send_timeout

        self._sessions: dict[str, Session] = {}
        self._subscribers: dict[str, set[str]] = defaultdict(set)
        self._room_locks: dict[str, asyncio.Lock] = {}

    # ==================== INTROSPECTION ====================

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def subscribers_of(self, room_id: str) -> set[str]:
        """Session ids currently subscribed to a room (copy)."""
        return set(self._subscribers.get(room_id, ()))

    # ==================== CONNECTION LIFECYCLE ====================

    async def connect(
        self, connection: Connection, credential: Optional[str]
    ) -> Optional[Session]:
        """
        Authenticate a new connection.

        Returns:
            The registered Session, or None if the connection was rejected
            (already closed, nothing sent to it)
        """
        session = Session(connection=connection)
        result = self._authenticator.authenticate(credential)
        if not isinstance(result, Authenticated):
            session.state = SessionState.DISCONNECTED
            increment_error(MetricsErrorType.AUTH_FAILED)
            logger.info(f"[ChatHub] Rejected connection from {connection.remote}")
            await connection.close(CLOSE_POLICY_VIOLATION)
            return None

        session.authenticate(result.identity)
        self._sessions[session.id] = session
        session_opened()
        logger.info(
            f"[ChatHub] Session {session.id} authenticated from {connection.remote}"
        )
        return session

    async def disconnect(
        self, session: Session, close: bool = True, code: int = CLOSE_NORMAL
    ) -> None:
        """
        Remove the session from every room and drop it from the registry.

        The removal happens before the first await, so no broadcast issued
        after this call starts can reach the session. In-flight store
        operations it issued are not cancelled.
        """
        if session.state is not SessionState.DISCONNECTED:
            was_authenticated = session.state is SessionState.AUTHENTICATED
            session.state = SessionState.DISCONNECTED
            for room_key in session.rooms:
                subscribers = self._subscribers.get(room_key)
                if subscribers is not None:
                    subscribers.discard(session.id)
                    if not subscribers:
                        del self._subscribers[room_key]
            session.rooms.clear()
            self._sessions.pop(session.id, None)
            if was_authenticated:
                session_closed()
            logger.info(f"[ChatHub] Session {session.id} disconnected")

        if close:
            await session.connection.close(code)

    async def close(self) -> None:
        """Disconnect every session (server shutdown)."""
        sessions = list(self._sessions.values())
        await asyncio.gather(
            *(self.disconnect(session, code=CLOSE_GOING_AWAY) for session in sessions)
        )

    # ==================== DISPATCH ====================

    async def dispatch(self, session: Session, event: str, data: Any) -> None:
        """Route one inbound event from a session."""
        if not await self._require_authenticated(session):
            return

        if event == ChatEvent.JOIN_ROOM:
            await self.join(session, data)
        elif event == ChatEvent.CHAT_TO_SERVER:
            try:
                payload = ChatToServerPayload.model_validate(data)
            except ValidationError:
                await self._send_error(session, event, "Expected {room, message}")
                return
            await self.send(session, payload.room, payload.message)
        elif event == ChatEvent.GET_CHAT_HISTORY:
            try:
                payload = GetChatHistoryPayload.model_validate(data)
            except ValidationError:
                await self._send_error(session, event, "Expected {room}")
                return
            await self.request_history(session, payload.room)
        else:
            logger.warning(f"[ChatHub] Session {session.id} sent unknown event {event!r}")
            await self._send_error(session, event, "Unknown event")

    # ==================== PROTOCOL OPERATIONS ====================

    async def join(self, session: Session, peer: Any) -> Optional[Room]:
        if not await self._require_authenticated(session):
            return None

        try:
            room = await self._store_call(
                "find_or_create_room",
                self._join_handler.execute(
                    JoinRoomCommand(identity=session.identity, peer=peer)
                ),
            )
        except (DomainValidationError, PersistenceError) as e:
            await self._handle_failure(session, ChatEvent.JOIN_ROOM, e)
            return None

        room_key = room.id.value
        async with self._lock_for(room_key):
            if not session.is_authenticated:
                return None

            self._subscribers[room_key].add(session.id)
            session.rooms.add(room_key)
            increment_room_joins()
            logger.info(f"[ChatHub] Session {session.id} joined room {room_key}")

            await self._deliver(
                session, ChatEvent.JOINED_ROOM, RoomDTO.from_entity(room).model_dump()
            )

            try:
                messages = await self._store_call(
                    "history", self._message_store.history(room.id)
                )
            except PersistenceError as e:
                failure: Optional[Exception] = e
            else:
                failure = None
                # Every subscriber gets the full history again, not only the joiner
                payload = ChatHistoryDTO(
                    history=[ChatMessageDTO.from_entity(m) for m in messages]
                ).model_dump(mode="json")
                await self._broadcast(room_key, ChatEvent.CHAT_HISTORY, payload)

        if failure:
            await self._handle_failure(session, ChatEvent.JOIN_ROOM, failure)
        return room

    async def send(self, session: Session, room: str, body: str) -> Optional[ChatMessage]:
        if not await self._require_authenticated(session):
            return None

        room_id = await self._authorize_room(session, ChatEvent.CHAT_TO_SERVER, room)
        if room_id is None:
            return None

        failure: Optional[Exception] = None
        message: Optional[ChatMessage] = None
        async with self._lock_for(room_id.value):
            try:
                message = await self._store_call(
                    "append",
                    self._send_handler.execute(
                        SendMessageCommand(
                            identity=session.identity, room_id=room_id, body=body
                        )
                    ),
                    wait_out=True,
                )
            except (AccessDeniedError, DomainValidationError, PersistenceError) as e:
                failure = e
            else:
                increment_messages()
                payload = ChatToClientDTO(
                    room=room_id.value,
                    message=message.body,
                    sender=message.sender.value,
                ).model_dump()
                await self._broadcast(room_id.value, ChatEvent.CHAT_TO_CLIENT, payload)

        if failure:
            await self._handle_failure(session, ChatEvent.CHAT_TO_SERVER, failure)
            return None
        return message

    async def request_history(self, session: Session, room: str) -> bool:
        """Send the room's history to the requester. Returns False if refused."""
        if not await self._require_authenticated(session):
            return False

        room_id = await self._authorize_room(session, ChatEvent.GET_CHAT_HISTORY, room)
        if room_id is None:
            return False

        failure: Optional[Exception] = None
        async with self._lock_for(room_id.value):
            try:
                result = await self._store_call(
                    "history",
                    self._history_handler.execute(
                        GetChatHistoryQuery(identity=session.identity, room_id=room_id)
                    ),
                )
            except (AccessDeniedError, PersistenceError) as e:
                failure = e
            else:
                payload = RoomHistoryDTO(
                    room=room_id.value,
                    history=[ChatMessageDTO.from_entity(m) for m in result.messages],
                ).model_dump(mode="json")
                await self._deliver(session, ChatEvent.CHAT_HISTORY, payload)

        if failure:
            await self._handle_failure(session, ChatEvent.GET_CHAT_HISTORY, failure)
            return False
        return True

    # ==================== HELPERS ====================

    def _lock_for(self, room_key: str) -> asyncio.Lock:
        return self._room_locks.setdefault(room_key, asyncio.Lock())

    async def _require_authenticated(self, session: Session) -> bool:
        if session.is_authenticated:
            return True
        logger.warning(
            f"[ChatHub] Operation from session {session.id} in state {session.state.value}"
        )
        await self.disconnect(session, code=CLOSE_POLICY_VIOLATION)
        return False

    async def _authorize_room(
        self, session: Session, event: str, room: str
    ) -> Optional[RoomId]:
        """
        Resolve a client room id to a room the session participates in.

        Runs before any room lock is taken, so a refused request never
        allocates one. Returns None after handling the refusal.
        """
        failure: Exception
        try:
            room_id = RoomId(room)
        except ValueError:
            failure = AccessDeniedError("Unknown room")
        else:
            try:
                found = await self._store_call(
                    "find_room_for_participant",
                    self._room_directory.find_room_for_participant(
                        session.identity, room_id
                    ),
                )
            except PersistenceError as e:
                failure = e
            else:
                if found is not None:
                    return room_id
                failure = AccessDeniedError("Not a participant of this room")

        await self._handle_failure(session, event, failure)
        return None

    async def _store_call(
        self, operation: str, awaitable: Awaitable[T], wait_out: bool = False
    ) -> T:
        """
        Await a store operation with the configured timeout.

        A read past the timeout is abandoned and raises PersistenceError.
        With wait_out the operation is shielded: a write that outlives the
        timeout is logged and awaited to its real outcome, never reported
        as failed while it may still commit.
        """
        started = time.perf_counter()
        try:
            if not wait_out:
                return await asyncio.wait_for(awaitable, timeout=self._store_timeout)

            task = asyncio.ensure_future(awaitable)
            try:
                return await asyncio.wait_for(
                    asyncio.shield(task), timeout=self._store_timeout
                )
            except asyncio.TimeoutError:
                logger.warning(
                    f"[ChatHub] {operation} still running after "
                    f"{self._store_timeout}s, awaiting its outcome"
                )
                return await task
        except asyncio.TimeoutError as e:
            raise PersistenceError(f"{operation} timed out") from e
        finally:
            observe_store_latency(operation, time.perf_counter() - started)

    async def _handle_failure(
        self, session: Session, event: str, error: Exception
    ) -> None:
        if isinstance(error, AccessDeniedError):
            # Terminal: no data and no explanation go back to the client
            increment_error(MetricsErrorType.UNAUTHORIZED)
            logger.warning(
                f"[ChatHub] Session {session.id} refused on {event}: {error}"
            )
            await self.disconnect(session, code=CLOSE_POLICY_VIOLATION)
        elif isinstance(error, PersistenceError):
            increment_error(MetricsErrorType.PERSISTENCE_FAILED)
            logger.error(f"[ChatHub] {event} failed for session {session.id}: {error}")
            await self._send_error(session, event, "Storage unavailable, try again")
        elif isinstance(error, DomainValidationError):
            await self._send_error(session, event, error.message)
        else:
            raise error

    async def _send_error(self, session: Session, event: str, detail: str) -> None:
        await self._deliver(
            session,
            ChatEvent.CHAT_ERROR,
            ChatErrorDTO(event=event, detail=detail).model_dump(),
        )

    async def _deliver(self, session: Session, event: str, payload: Any) -> bool:
        """Send one event to one session; a dead or stalled peer is disconnected."""
        if not session.is_authenticated:
            return False
        try:
            await asyncio.wait_for(
                session.connection.send(event, payload), timeout=self._send_timeout
            )
            return True
        except (ConnectionClosed, asyncio.TimeoutError) as e:
            increment_error(MetricsErrorType.DELIVERY_FAILED)
            logger.info(
                f"[ChatHub] Delivery of {event} to session {session.id} failed: "
                f"{type(e).__name__}"
            )
            await self.disconnect(session)
            return False

    async def _broadcast(self, room_key: str, event: str, payload: Any) -> None:
        targets = [
            self._sessions[session_id]
            for session_id in list(self._subscribers.get(room_key, ()))
            if session_id in self._sessions
        ]
        await asyncio.gather(
            *(self._deliver(session, event, payload) for session in targets)
        )
