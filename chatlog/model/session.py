"""Chat sessions and the per-version rows they are built from."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


def _from_unix(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds)


@dataclass
class Session:
    """A conversation entry in the session list."""

    user_name: str = ""
    n_order: int = 0
    nick_name: str = ""
    content: str = ""
    n_time: datetime = field(default_factory=lambda: _from_unix(0))

    def plain_text(self, limit: int) -> str:
        """Render the session as two lines; content is cut to ``limit`` bytes."""
        header = f"{self.nick_name}({self.user_name}) {self.n_time.strftime('%Y-%m-%d %H:%M:%S')}\n"
        body = ""
        if limit > 0:
            raw = self.content.encode("utf-8")
            if len(raw) > limit:
                body = raw[:limit].decode("utf-8", errors="ignore") + " <...>"
            else:
                body = self.content
        return header + body + "\n"


@dataclass
class SessionV3:
    """A row of the ``Session`` table (v3 schema)."""

    str_usr_name: str = ""
    n_order: int = 0
    str_nick_name: str = ""
    str_content: str = ""
    n_time: int = 0

    def wrap(self) -> Session:
        return Session(
            user_name=self.str_usr_name,
            n_order=self.n_order,
            nick_name=self.str_nick_name,
            content=self.str_content,
            n_time=_from_unix(self.n_time),
        )


@dataclass
class SessionDarwinV3:
    """A row of the ``SessionAbstract`` table (macOS v3 schema)."""

    m_ns_user_name: str = ""
    m_u_last_time: int = 0

    def wrap(self) -> Session:
        return Session(
            user_name=self.m_ns_user_name,
            n_order=self.m_u_last_time,
            n_time=_from_unix(self.m_u_last_time),
        )


@dataclass
class SessionV4:
    """A row of the ``SessionTable`` table (v4 schema)."""

    username: str = ""
    summary: str = ""
    last_timestamp: int = 0
    last_msg_sender: str = ""
    last_sender_display_name: str = ""

    def wrap(self) -> Session:
        return Session(
            user_name=self.username,
            n_order=self.last_timestamp,
            nick_name=self.last_sender_display_name,
            content=self.summary,
            n_time=_from_unix(self.last_timestamp),
        )