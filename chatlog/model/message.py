"""Chat messages: the common record, its text rendering, and the macOS v3 row."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable

from chatlog.model.mediamessage import (
    App,
    MalformedXML,
    MediaMsg,
    RecordInfo,
    SysMsg,
    parse_media_msg,
    parse_record_info,
    parse_sys_msg,
)

# When set, the parsed XML documents are kept on the message for inspection.
DEBUG = False

WECHAT_V3 = "wechatv3"
WECHAT_V4 = "wechatv4"
WECHAT_DARWIN_V3 = "wechatdarwinv3"

SYSTEM_SENDER = "系统消息"
DEFAULT_TIME_FORMAT = "01-02 15:04:05"

_PAY_DIRECTIONS = {
    1: "发送 ",  # real-time transfer
    7: "发送 ",  # delayed transfer
    3: "接收 ",  # real-time transfer received
    5: "接收 ",  # delayed transfer received
    4: "退还 ",  # transfer returned
}

_FIXED_49 = {
    8: "[GIF表情]",
    63: "[视频号]",
    87: "[群公告]",
    2001: "[红包]",
    2003: "[红包封面]",
}

_FIXED = {
    42: "[名片]",
    47: "[动画表情]",
    50: "[语音通话]",
}


def _from_unix(seconds: int) -> datetime:
    try:
        return datetime.fromtimestamp(seconds)
    except (OverflowError, OSError, ValueError):
        return datetime.fromtimestamp(0)


def split_type(value: int) -> tuple[int, int]:
    """Split a packed message type into (low 32 bits, high 32 bits)."""
    return value & 0xFFFFFFFF, value >> 32


# -- time layouts ----------------------------------------------------------

_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _offset(moment: datetime) -> timedelta:
    offset = moment.utcoffset() if moment.tzinfo else moment.astimezone().utcoffset()
    return offset or timedelta(0)


def _zone(moment: datetime, sep: str, with_minutes: bool = True, zulu: bool = False) -> str:
    total = int(_offset(moment).total_seconds()) // 60
    if zulu and total == 0:
        return "Z"
    sign = "-" if total < 0 else "+"
    hours, minutes = divmod(abs(total), 60)
    if not with_minutes:
        return f"{sign}{hours:02d}"
    return f"{sign}{hours:02d}{sep}{minutes:02d}"


def _hour12(moment: datetime) -> int:
    return moment.hour % 12 or 12


_TOKENS: tuple[tuple[str, Callable[[datetime], str]], ...] = (
    ("January", lambda t: _MONTH_NAMES[t.month - 1]),
    ("Jan", lambda t: _MONTH_NAMES[t.month - 1][:3]),
    ("Monday", lambda t: _DAY_NAMES[t.weekday()]),
    ("Mon", lambda t: _DAY_NAMES[t.weekday()][:3]),
    ("MST", lambda t: (t if t.tzinfo else t.astimezone()).tzname() or ""),
    ("2006", lambda t: f"{t.year:04d}"),
    ("002", lambda t: f"{t.timetuple().tm_yday:03d}"),
    ("01", lambda t: f"{t.month:02d}"),
    ("02", lambda t: f"{t.day:02d}"),
    ("03", lambda t: f"{_hour12(t):02d}"),
    ("04", lambda t: f"{t.minute:02d}"),
    ("05", lambda t: f"{t.second:02d}"),
    ("06", lambda t: f"{t.year % 100:02d}"),
    ("15", lambda t: f"{t.hour:02d}"),
    ("_2", lambda t: f"{t.day:>2}"),
    ("1", lambda t: str(t.month)),
    ("2", lambda t: str(t.day)),
    ("3", lambda t: str(_hour12(t))),
    ("4", lambda t: str(t.minute)),
    ("5", lambda t: str(t.second)),
    ("PM", lambda t: "PM" if t.hour >= 12 else "AM"),
    ("pm", lambda t: "pm" if t.hour >= 12 else "am"),
    ("Z07:00", lambda t: _zone(t, ":", zulu=True)),
    ("Z0700", lambda t: _zone(t, "", zulu=True)),
    ("-07:00", lambda t: _zone(t, ":")),
    ("-0700", lambda t: _zone(t, "")),
    ("-07", lambda t: _zone(t, "", with_minutes=False)),
    (".000000000", lambda t: f".{t.microsecond * 1000:09d}"),
    (".000000", lambda t: f".{t.microsecond:06d}"),
    (".000", lambda t: f".{t.microsecond // 1000:03d}"),
)


def format_time(moment: datetime, layout: str) -> str:
    """Format ``moment`` with a reference-time layout such as ``01-02 15:04:05``."""
    out: list[str] = []
    pos = 0
    while pos < len(layout):
        for token, render in _TOKENS:
            if layout.startswith(token, pos):
                out.append(render(moment))
                pos += len(token)
                break
        else:
            out.append(layout[pos])
            pos += 1
    return "".join(out)


def _show(value: Any) -> str:
    """Render a content value the way the text output always has."""
    return "%!s(<nil>)" if value is None else str(value)


# -- messages --------------------------------------------------------------


@dataclass
class Message:
    """A chat message as presented to the rest of the application.

    ``seq`` is a 10-digit timestamp followed by a 3-digit sequence number;
    ``contents`` holds the extra fields of media messages.
    """

    version: str = ""
    seq: int = 0
    time: datetime = field(default_factory=lambda: _from_unix(0))
    talker: str = ""
    talker_name: str = ""
    is_chat_room: bool = False
    sender: str = ""
    sender_name: str = ""
    is_self: bool = False
    type: int = 0
    sub_type: int = 0
    content: str = ""
    contents: dict[str, Any] = field(default_factory=dict)
    media_msg: MediaMsg | None = None
    sys_msg: SysMsg | None = None

    def parse_media_info(self, data: str) -> None:
        """Fill content fields from the message body.

        Raises MalformedXML when a media message body is not valid XML.
        """
        self.type, self.sub_type = split_type(self.type)

        if self.type == 1:
            self.content = data
            return

        if self.type == 10000:
            try:
                sys_msg = parse_sys_msg(data)
            except MalformedXML:
                self.content = data
                return
            if DEBUG:
                self.sys_msg = sys_msg
            self.sender = SYSTEM_SENDER
            self.sender_name = ""
            self.content = sys_msg.text()
            return

        msg = parse_media_msg(data)
        if DEBUG:
            self.media_msg = msg

        if self.type == 3:
            self.contents["md5"] = msg.image.md5
        elif self.type == 43:
            if msg.video.md5:
                self.contents["md5"] = msg.video.md5
            if msg.video.raw_md5:
                self.contents["rawmd5"] = msg.video.raw_md5
        elif self.type == 49:
            self.sub_type = msg.app.type
            self._parse_app(msg.app)

    def _parse_app(self, app: App) -> None:
        sub = self.sub_type
        contents = self.contents
        if sub == 1:
            contents["title"] = app.title
            contents["desc"] = app.des
        elif sub == 4:
            contents["title"] = app.title
            contents["desc"] = app.des
            contents["url"] = app.url
        elif sub == 5:
            contents["title"] = app.title
            contents["url"] = app.url
        elif sub == 6:
            contents["title"] = app.title
            contents["md5"] = app.md5
        elif sub == 19:
            contents["title"] = app.title
            contents["desc"] = app.des
            if app.record_item is not None:
                contents["recordInfo"] = parse_record_info(app.record_item.cdata)
        elif sub in (33, 36):
            contents["title"] = app.source_display_name
            contents["url"] = app.url
        elif sub == 51:
            feed = app.finder_feed
            if feed is not None:
                contents["title"] = feed.desc
                if feed.media_list:
                    contents["url"] = feed.media_list[0].url
        elif sub == 57:
            self.content = app.title
            refer = app.refer_msg
            if refer is None:
                return
            quoted = Message(
                type=refer.type,
                time=_from_unix(refer.create_time),
                sender=refer.chat_usr or refer.from_usr,
                sender_name=refer.display_name,
            )
            try:
                quoted.parse_media_info(refer.content)
            except MalformedXML:
                return
            contents["refer"] = quoted
        elif sub == 62:
            pat = app.pat_msg
            if pat is not None and pat.records:
                self.sender = pat.records[0].from_user
                self.content = pat.records[0].template
        elif sub == 2000:
            pay = app.wcpay_info
            if pay is None:
                return
            direction = _PAY_DIRECTIONS.get(pay.pay_sub_type, "")
            memo = f"({pay.pay_memo})" if pay.pay_memo else ""
            self.content = f"[转账|{direction}{pay.fee_desc}]{memo}"

    def set_content(self, key: str, value: Any) -> None:
        self.contents[key] = value

    def plain_text(self, show_chat_room: bool = False, time_format: str = "", host: str = "") -> str:
        """Render a header line (sender, room, time) followed by the content."""
        time_format = time_format or DEFAULT_TIME_FORMAT
        self.set_content("host", host)

        sender = "我" if self.is_self else self.sender
        parts = [f"{self.sender_name}({sender})" if self.sender_name else sender, " "]
        if self.is_chat_room and show_chat_room:
            room = f"{self.talker_name}({self.talker})" if self.talker_name else self.talker
            parts.append(f"[{room}] ")
        parts.append(format_time(self.time, time_format))
        parts.append("\n")
        parts.append(self.plain_text_content())
        parts.append("\n")
        return "".join(parts)

    def _keys(self, *names: str) -> str:
        return ",".join(
            value for value in (self.contents.get(name) for name in names) if isinstance(value, str)
        )

    def _host(self) -> str:
        host = self.contents.get("host")
        return host if isinstance(host, str) else ""

    def plain_text_content(self) -> str:
        """Render the message body as Markdown-flavoured text."""
        contents = self.contents
        if self.type in (1, 10000):
            return self.content
        if self.type in _FIXED:
            return _FIXED[self.type]
        if self.type == 3:
            keys = self._keys("md5", "imgfile", "thumb")
            return f"![图片](http://{_show(contents.get('host'))}/image/{keys})"
        if self.type == 34:
            if "voice" in contents:
                return f"[语音](http://{_show(contents.get('host'))}/voice/{_show(contents['voice'])})"
            return "[语音]"
        if self.type == 43:
            keys = self._keys("md5", "rawmd5", "videofile", "thumb")
            return f"![视频](http://{_show(contents.get('host'))}/video/{keys})"
        if self.type == 49:
            return self._app_text()
        content = self.content
        raw = content.encode("utf-8")
        if len(raw) > 120:
            content = raw[:120].decode("utf-8", errors="ignore") + "<...>"
        return f"Type: {self.type} Content: {content}"

    def _app_text(self) -> str:
        c = self.contents
        sub = self.sub_type
        title, desc, url = _show(c.get("title")), _show(c.get("desc")), _show(c.get("url"))
        if sub == 1:
            return f"[链接文本|{title}]({desc})"
        if sub == 4:
            return f"[分享|{title}|{desc}]({url})"
        if sub == 5:
            return f"[链接|{title}]({url})"
        if sub == 6:
            return f"[文件|{title}](http://{_show(c.get('host'))}/file/{_show(c.get('md5'))})"
        if sub == 19:
            record = c.get("recordInfo")
            if not isinstance(record, RecordInfo):
                return "[合并转发]"
            return record.to_text("", self._host())
        if sub in (33, 36):
            if c.get("title") == "":
                return "[小程序]"
            return f"[小程序|{title}]({url})"
        if sub == 51:
            if c.get("title") == "":
                return "[视频号]"
            return f"[视频号|{title}]({url})"
        if sub == 57:
            refer = c.get("refer")
            if not isinstance(refer, Message):
                return "> [引用]\n" + self.content if self.content else "[引用]"
            quoted = refer.plain_text(False, "", self._host())
            lines = "".join(f"> {line}\n" for line in quoted.split("\n") if line)
            return lines + self.content
        if sub in (62, 2000):
            return self.content
        return _FIXED_49.get(sub, "[分享]")


@dataclass
class MessageDarwinV3:
    """A row of a ``Chat_<md5>`` table (macOS v3 schema); ``mes_des`` 0 means sent."""

    msg_create_time: int = 0
    msg_content: str = ""
    message_type: int = 0
    mes_des: int = 0

    def wrap(self, talker: str) -> Message:
        message = Message(
            time=_from_unix(self.msg_create_time),
            type=self.message_type,
            talker=talker,
            is_chat_room=talker.endswith("@chatroom"),
            is_self=self.mes_des == 0,
            version=WECHAT_DARWIN_V3,
        )
        content = self.msg_content
        if message.is_chat_room:
            sender, sep, rest = content.partition(":\n")
            if sep:
                message.sender = sender
                content = rest
        elif not message.is_self:
            message.sender = talker

        try:
            message.parse_media_info(content)
        except MalformedXML:
            pass
        return message