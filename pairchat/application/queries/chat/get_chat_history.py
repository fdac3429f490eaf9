"""
GetChatHistory Query - Full ordered history of a room for one participant.

A room the caller does not participate in is indistinguishable from a room
that does not exist: both raise AccessDeniedError.
"""

from dataclasses import dataclass

from pairchat.application.common.interfaces import Query, QueryHandler
from pairchat.domain.entities.chat_message import ChatMessage
from pairchat.domain.entities.room import Room
from pairchat.domain.exceptions import AccessDeniedError
from pairchat.domain.ports.repositories import MessageStore, RoomDirectory
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.user_id import UserId


@dataclass
class GetChatHistoryResult:
    """Result containing the room and its messages, oldest first."""

    room: Room
    messages: list[ChatMessage]


@dataclass(frozen=True)
class GetChatHistoryQuery(Query[GetChatHistoryResult]):
    identity: UserId
    room_id: RoomId


class GetChatHistoryHandler(QueryHandler[GetChatHistoryResult]):
    def __init__(
        self,
        room_directory: RoomDirectory,
        message_store: MessageStore,
    ):
        self._room_directory = room_directory
        self._message_store = message_store

    async def execute(self, query: GetChatHistoryQuery) -> GetChatHistoryResult:
        """
        Raises:
            AccessDeniedError: If the room is unknown or the caller is not in it
        """
        room = await self._room_directory.find_room_for_participant(
            query.identity, query.room_id
        )
        if not room:
            raise AccessDeniedError("Not a participant of this room")

        messages = await self._message_store.history(room.id)
        return GetChatHistoryResult(room=room, messages=messages)
