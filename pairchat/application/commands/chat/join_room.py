"""
JoinRoom Command - Resolve (or create) the room shared with a peer.

The peer arrives as a raw client string; it is validated here and the pair
is normalized by the RoomDirectory, so argument order never matters.
"""

from dataclasses import dataclass
from typing import Any

from pairchat.application.common.interfaces import Command, CommandHandler
from pairchat.domain.entities.room import Room
from pairchat.domain.exceptions import DomainValidationError
from pairchat.domain.ports.repositories import RoomDirectory
from pairchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class JoinRoomCommand(Command[Room]):
    identity: UserId
    peer: Any


class JoinRoomHandler(CommandHandler[Room]):
    _room_directory: RoomDirectory

    def __init__(self, room_directory: RoomDirectory):
        self._room_directory = room_directory

    async def execute(self, command: JoinRoomCommand) -> Room:
        if not isinstance(command.peer, str):
            raise DomainValidationError("Peer identity must be a string")
        try:
            peer = UserId(command.peer.strip())
        except ValueError as e:
            raise DomainValidationError("Peer identity cannot be empty") from e
        if peer == command.identity:
            raise DomainValidationError("Cannot open a room with yourself")

        return await self._room_directory.find_or_create_room(command.identity, peer)
