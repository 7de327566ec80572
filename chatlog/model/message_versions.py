"""Message rows of the v3 and v4 databases."""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from datetime import datetime

import lz4.block
import zstandard

from chatlog.model.chatroom import _WIRE_BYTES, _WIRE_VARINT, _WireError, _fields, _text
from chatlog.model.mediamessage import MalformedXML
from chatlog.model.message import WECHAT_V3, WECHAT_V4, Message

ZSTD_MAGIC = b"\x28\xb5\x2f\xfd"
CHAT_ROOM_SUFFIX = "@chatroom"

# Output buffer sizes tried for an LZ4 block, as multiples of its length.
_LZ4_GROWTH = (4, 16, 64, 256, 1024)

# Keys of the v3 extra data.
_EXTRA_SENDER = 1
_EXTRA_VIDEO_PATH = 4


def _from_unix(seconds: int) -> datetime:
    try:
        return datetime.fromtimestamp(seconds)
    except (OverflowError, OSError, ValueError):
        return datetime.fromtimestamp(0)


def decompress_zstd(data: bytes) -> bytes:
    """Decompress a zstd frame; raise ValueError if it is not one."""
    try:
        return zstandard.ZstdDecompressor().decompressobj().decompress(bytes(data))
    except zstandard.ZstdError as exc:
        raise ValueError(f"invalid zstd data: {exc}") from exc


def decompress_lz4(data: bytes) -> bytes:
    """Decompress a raw LZ4 block; raise ValueError if it is not one."""
    raw = bytes(data)
    if not raw:
        raise ValueError("empty lz4 block")
    for factor in _LZ4_GROWTH:
        try:
            return lz4.block.decompress(raw, uncompressed_size=len(raw) * factor)
        except lz4.block.LZ4BlockError:
            continue
    raise ValueError("invalid lz4 block")


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _parse_bytes_extra(data: bytes) -> dict[int, str] | None:
    """Map item types to values; None if the blob is malformed or has no items."""
    items: dict[int, str] = {}
    found = False
    try:
        for number, wire, value in _fields(data):
            if wire != _WIRE_BYTES:
                continue
            if number == 1:
                for _ in _fields(value):
                    pass
            elif number == 3:
                found = True
                kind, text = 0, ""
                for inner, inner_wire, inner_value in _fields(value):
                    if inner == 1 and inner_wire == _WIRE_VARINT:
                        kind = _int32(inner_value)
                    elif inner == 2 and inner_wire == _WIRE_BYTES:
                        text = _text(inner_value)
                items[kind] = text
    except _WireError:
        return None
    return items if found else None


@dataclass
class PackedInfo:
    """Extra data of a v4 message; the hashes are None when absent."""

    type: int = 0
    version: int = 0
    image_md5: str | None = None
    video_md5: str | None = None


def _hash_md5(data: bytes, number: int, previous: str | None) -> str:
    md5 = previous or ""
    for field_number, wire, value in _fields(data):
        if field_number == number and wire == _WIRE_BYTES:
            md5 = _text(value)
    return md5


def _parse_packed_info(data: bytes) -> PackedInfo | None:
    info = PackedInfo()
    try:
        for number, wire, value in _fields(data):
            if number == 1 and wire == _WIRE_VARINT:
                info.type = value & 0xFFFFFFFF
            elif number == 2 and wire == _WIRE_VARINT:
                info.version = value & 0xFFFFFFFF
            elif number == 3 and wire == _WIRE_BYTES:
                info.image_md5 = _hash_md5(value, 4, info.image_md5)
            elif number == 4 and wire == _WIRE_BYTES:
                info.video_md5 = _hash_md5(value, 8, info.video_md5)
    except _WireError:
        return None
    return info


def _parse_body(message: Message, body: str) -> None:
    try:
        message.parse_media_info(body)
    except MalformedXML:
        pass


@dataclass
class MessageV3:
    """A row of the ``MSG`` table (v3 schema); ``is_sender`` 1 means sent."""

    msg_svr_id: int = 0
    sequence: int = 0
    create_time: int = 0
    str_talker: str = ""
    is_sender: int = 0
    type: int = 0
    sub_type: int = 0
    str_content: str = ""
    compress_content: bytes = b""
    bytes_extra: bytes = b""

    def wrap(self) -> Message:
        talker = self.str_talker
        message = Message(
            seq=self.sequence,
            time=_from_unix(self.create_time),
            talker=talker,
            is_chat_room=talker.endswith(CHAT_ROOM_SUFFIX),
            is_self=self.is_sender == 1,
            type=self.type,
            sub_type=self.sub_type,
            content=self.str_content,
            version=WECHAT_V3,
        )
        if not message.is_chat_room and not message.is_self:
            message.sender = talker

        if message.type == 49:
            try:
                message.content = decompress_lz4(self.compress_content).decode(
                    "utf-8", errors="replace"
                )
            except ValueError:
                pass

        _parse_body(message, message.content)

        if message.type == 34:
            message.contents["voice"] = str(self.msg_svr_id)

        if self.bytes_extra:
            extra = _parse_bytes_extra(self.bytes_extra)
            if extra is not None:
                if message.is_chat_room:
                    message.sender = extra.get(_EXTRA_SENDER, "")
                # The XML hash does not match the hardlink records; use the extra data.
                if message.type == 43:
                    path = extra.get(_EXTRA_VIDEO_PATH, "")
                    parts = path.replace(os.sep, "/").split("/")
                    if len(parts) > 1:
                        path = "/".join(parts[1:])
                    message.contents["videofile"] = path
        return message


@dataclass
class MessageV4:
    """A row of a ``Msg_<md5>`` table (v4 schema); status 2 means sent."""

    sort_seq: int = 0
    server_id: int = 0
    local_type: int = 0
    user_name: str = ""
    create_time: int = 0
    message_content: bytes = b""
    packed_info_data: bytes = b""
    status: int = 0

    def wrap(self, talker: str) -> Message:
        message = Message(
            seq=self.sort_seq,
            time=_from_unix(self.create_time),
            talker=talker,
            is_chat_room=talker.endswith(CHAT_ROOM_SUFFIX),
            sender=self.user_name,
            type=self.local_type,
            version=WECHAT_V4,
        )
        message.is_self = self.status == 2 or (
            not message.is_chat_room and talker != self.user_name
        )

        raw = bytes(self.message_content)
        if raw.startswith(ZSTD_MAGIC):
            try:
                content = decompress_zstd(raw).decode("utf-8", errors="replace")
            except ValueError:
                content = ""
        else:
            content = raw.decode("utf-8", errors="replace")

        if message.is_chat_room:
            sender, sep, rest = content.partition(":\n")
            if sep:
                message.sender = sender
                content = rest

        _parse_body(message, content)

        if message.type == 34:
            message.contents["voice"] = str(self.server_id)

        if self.packed_info_data:
            packed = _parse_packed_info(self.packed_info_data)
            if packed is not None:
                self._attach_files(message, talker, packed)
        return message

    @staticmethod
    def _attach_files(message: Message, talker: str, packed: PackedInfo) -> None:
        month = message.time.strftime("%Y-%m")
        if message.type == 3 and packed.image_md5 is not None:
            talker_md5 = hashlib.md5(talker.encode("utf-8")).hexdigest()
            folder = os.path.join("msg", "attach", talker_md5, month, "Img")
            message.contents["imgfile"] = os.path.join(folder, f"{packed.image_md5}.dat")
            message.contents["thumb"] = os.path.join(folder, f"{packed.image_md5}_t.dat")
        if message.type == 43 and packed.video_md5 is not None:
            folder = os.path.join("msg", "video", month)
            message.contents["videofile"] = os.path.join(folder, f"{packed.video_md5}.mp4")
            message.contents["thumb"] = os.path.join(folder, f"{packed.video_md5}_thumb.jpg")