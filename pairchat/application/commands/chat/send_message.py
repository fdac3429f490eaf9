"""
SendMessage Command - Validate and durably append one chat message.

Handler:
1. Validate body (non-empty, bounded length)
2. Verify the sender is a participant of the room
3. Append to the MessageStore, recording the other participant as recipient
4. Return the stored message (with its seq)

Broadcasting is not done here; the ChatHub fans out only after execute()
returns.
"""

from dataclasses import dataclass

from pairchat.application.common.interfaces import Command, CommandHandler
from pairchat.domain.entities.chat_message import ChatMessage
from pairchat.domain.exceptions import AccessDeniedError, DomainValidationError
from pairchat.domain.ports.repositories import MessageStore, RoomDirectory
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class SendMessageCommand(Command[ChatMessage]):
    identity: UserId
    room_id: RoomId
    body: str


class SendMessageHandler(CommandHandler[ChatMessage]):
    def __init__(
        self,
        room_directory: RoomDirectory,
        message_store: MessageStore,
        max_length: int = 4000,
    ):
        self._room_directory = room_directory
        self._message_store = message_store
        self._max_length = max_length

    async def execute(self, command: SendMessageCommand) -> ChatMessage:
        if not command.body.strip():
            raise DomainValidationError("Message cannot be empty")
        if len(command.body) > self._max_length:
            raise DomainValidationError(
                f"Message exceeds {self._max_length} characters"
            )

        room = await self._room_directory.find_room_for_participant(
            command.identity, command.room_id
        )
        if not room:
            raise AccessDeniedError("Not a participant of this room")

        return await self._message_store.append(
            room.id,
            command.identity,
            command.body,
            recipient=room.participants.other(command.identity),
        )
