"""Chat rooms, their members, and the per-version rows they are built from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping

# Field numbers of the room member blob.
_ROOM_USERS = 1
_USER_NAME = 1
_USER_DISPLAY_NAME = 2

_WIRE_VARINT = 0
_WIRE_FIXED64 = 1
_WIRE_BYTES = 2
_WIRE_FIXED32 = 5


class _WireError(ValueError):
    """The member blob is not well-formed."""


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    for shift in range(0, 70, 7):
        if pos >= len(data):
            raise _WireError("truncated varint")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, pos
    raise _WireError("varint too long")


def _fields(data: bytes) -> Iterator[tuple[int, int, object]]:
    """Yield ``(field number, wire type, value)`` for each field in ``data``."""
    pos = 0
    while pos < len(data):
        tag, pos = _read_varint(data, pos)
        number, wire = tag >> 3, tag & 0x7
        if number == 0:
            raise _WireError("invalid field number")
        if wire == _WIRE_VARINT:
            value, pos = _read_varint(data, pos)
        elif wire == _WIRE_FIXED64:
            if pos + 8 > len(data):
                raise _WireError("truncated fixed64")
            value, pos = data[pos:pos + 8], pos + 8
        elif wire == _WIRE_BYTES:
            length, pos = _read_varint(data, pos)
            if pos + length > len(data):
                raise _WireError("truncated length-delimited field")
            value, pos = data[pos:pos + length], pos + length
        elif wire == _WIRE_FIXED32:
            if pos + 4 > len(data):
                raise _WireError("truncated fixed32")
            value, pos = data[pos:pos + 4], pos + 4
        else:
            raise _WireError(f"unsupported wire type {wire}")
        yield number, wire, value


def _text(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise _WireError("string field is not valid UTF-8") from exc


@dataclass
class ChatRoomUser:
    """A member of a chat room."""

    user_name: str = ""
    display_name: str = ""


def _parse_user(data: bytes) -> ChatRoomUser:
    user = ChatRoomUser()
    for number, wire, value in _fields(data):
        if wire != _WIRE_BYTES:
            continue
        if number == _USER_NAME:
            user.user_name = _text(value)
        elif number == _USER_DISPLAY_NAME:
            user.display_name = _text(value)
    return user


def _parse_room_data(data: bytes) -> list[ChatRoomUser]:
    """Decode the member blob; a malformed blob yields no members."""
    try:
        return [
            _parse_user(value)
            for number, wire, value in _fields(data)
            if number == _ROOM_USERS and wire == _WIRE_BYTES
        ]
    except _WireError:
        return []


def display_name_map(users: Iterable[ChatRoomUser]) -> dict[str, str]:
    """Map user names to their in-room display names, skipping empty ones."""
    return {user.user_name: user.display_name for user in users if user.display_name}


@dataclass
class ChatRoom:
    """A chat room as presented to the rest of the application."""

    name: str = ""
    owner: str = ""
    users: list[ChatRoomUser] = field(default_factory=list)
    remark: str = ""
    nick_name: str = ""
    user2displayname: dict[str, str] = field(default_factory=dict, repr=False)

    def display_name(self) -> str:
        """Return the remark if set, otherwise the nickname, otherwise ''."""
        return self.remark or self.nick_name or ""


def _from_blob(name: str, owner: str, blob: bytes) -> ChatRoom:
    users = _parse_room_data(blob) if blob else []
    return ChatRoom(
        name=name,
        owner=owner,
        users=users,
        user2displayname=display_name_map(users),
    )


@dataclass
class ChatRoomV3:
    """A row of the ``ChatRoom`` table (v3 schema); ``reserved2`` is the creator."""

    chat_room_name: str = ""
    reserved2: str = ""
    room_data: bytes = b""

    def wrap(self) -> ChatRoom:
        return _from_blob(self.chat_room_name, self.reserved2, self.room_data)


@dataclass
class ChatRoomDarwinV3:
    """A row of the ``GroupContact`` table (macOS v3 schema)."""

    m_ns_usr_name: str = ""
    nickname: str = ""
    m_ns_remark: str = ""
    m_ns_chat_room_mem_list: str = ""
    m_ns_chat_room_admin_list: str = ""

    def wrap(self, user2displayname: Mapping[str, str]) -> ChatRoom:
        names = self.m_ns_chat_room_mem_list.split(";")
        return ChatRoom(
            name=self.m_ns_usr_name,
            owner=self.m_ns_chat_room_admin_list,
            remark=self.m_ns_remark,
            nick_name=self.nickname,
            users=[ChatRoomUser(user_name=name) for name in names],
            user2displayname={
                name: user2displayname[name] for name in names if name in user2displayname
            },
        )


@dataclass
class ChatRoomV4:
    """A row of the ``chat_room`` table (v4 schema)."""

    id: int = 0
    user_name: str = ""
    owner: str = ""
    ext_buffer: bytes = b""

    def wrap(self) -> ChatRoom:
        return _from_blob(self.user_name, self.owner, self.ext_buffer)