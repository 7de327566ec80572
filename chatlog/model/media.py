"""Media file records and the per-version rows they are built from."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _join(*parts: str) -> str:
    """Join non-empty path parts and clean the result; '' if all are empty."""
    kept = [part for part in parts if part]
    if not kept:
        return ""
    return os.path.normpath(os.path.join(*kept))


@dataclass
class Media:
    """A media file: ``type`` is one of image, video, voice, file; ``key`` is its MD5."""

    type: str = ""
    key: str = ""
    path: str = ""
    name: str = ""
    size: int = 0
    data: bytes = b""
    modify_time: int = 0


@dataclass
class MediaV3:
    """A hardlink record from a v3 data directory."""

    type: str = ""
    key: str = ""
    dir1: str = ""
    dir2: str = ""
    name: str = ""
    modify_time: int = 0

    def wrap(self) -> Media:
        if self.type == "image":
            path = _join("FileStorage", "MsgAttach", self.dir1, "Image", self.dir2, self.name)
        elif self.type == "video":
            path = _join("FileStorage", "Video", self.dir2, self.name)
        elif self.type == "file":
            path = _join("FileStorage", "File", self.dir2, self.name)
        else:
            path = ""
        return Media(
            type=self.type,
            key=self.key,
            modify_time=self.modify_time,
            path=path,
            name=self.name,
        )


@dataclass
class MediaDarwinV3:
    """A joined ``HlinkMediaRecord``/``HlinkMediaDetail`` row (macOS v3)."""

    media_md5: str = ""
    media_size: int = 0
    inode_number: int = 0
    modify_time: int = 0
    relative_path: str = ""
    file_name: str = ""

    def wrap(self) -> Media:
        path = _join("Message/MessageTemp", self.relative_path, self.file_name)
        return Media(
            type="",
            key=self.media_md5,
            size=self.media_size,
            modify_time=self.modify_time,
            path=path,
            name=os.path.basename(path),
        )


@dataclass
class MediaV4:
    """A hardlink record from a v4 data directory."""

    type: str = ""
    key: str = ""
    dir1: str = ""
    dir2: str = ""
    name: str = ""
    size: int = 0
    modify_time: int = 0

    def wrap(self) -> Media:
        if self.type == "image":
            path = _join("msg", "attach", self.dir1, self.dir2, "Img", self.name)
        elif self.type == "video":
            path = _join("msg", "video", self.dir1, self.name)
        elif self.type == "file":
            path = _join("msg", "file", self.dir1, self.name)
        else:
            path = ""
        return Media(
            type=self.type,
            key=self.key,
            path=path,
            name=self.name,
            size=self.size,
            modify_time=self.modify_time,
        )