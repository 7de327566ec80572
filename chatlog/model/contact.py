"""Contact records and the per-version rows they are built from."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Contact:
    """A contact as presented to the rest of the application."""

    user_name: str = ""
    alias: str = ""
    remark: str = ""
    nick_name: str = ""
    is_friend: bool = False

    def display_name(self) -> str:
        """Return the remark if set, otherwise the nickname, otherwise ''."""
        return self.remark or self.nick_name or ""


@dataclass
class ContactV3:
    """A row of the ``Contact`` table (v3 schema)."""

    user_name: str = ""
    alias: str = ""
    remark: str = ""
    nick_name: str = ""
    # 1: a friend or a chat room the owner joined; 0: chat room member only.
    reserved1: int = 0

    def wrap(self) -> Contact:
        return Contact(
            user_name=self.user_name,
            alias=self.alias,
            remark=self.remark,
            nick_name=self.nick_name,
            is_friend=self.reserved1 == 1,
        )


@dataclass
class ContactDarwinV3:
    """A row of the ``WCContact`` table (macOS v3 schema)."""

    m_ns_usr_name: str = ""
    nickname: str = ""
    m_ns_remark: str = ""
    m_ui_sex: int = 0
    m_ns_alias_name: str = ""

    def wrap(self) -> Contact:
        return Contact(
            user_name=self.m_ns_usr_name,
            alias=self.m_ns_alias_name,
            remark=self.m_ns_remark,
            nick_name=self.nickname,
            is_friend=True,
        )


@dataclass
class ContactV4:
    """A row of the ``contact`` table (v4 schema)."""

    user_name: str = ""
    alias: str = ""
    remark: str = ""
    nick_name: str = ""
    # 2: chat room; 3: chat room member (not a friend); 5, 6: enterprise.
    local_type: int = 0

    def wrap(self) -> Contact:
        return Contact(
            user_name=self.user_name,
            alias=self.alias,
            remark=self.remark,
            nick_name=self.nick_name,
            is_friend=self.local_type != 3,
        )