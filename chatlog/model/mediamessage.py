"""Structures carried in the XML bodies of media and system messages."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, fields
from typing import Any

_INT = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1
_PLACEHOLDER = re.compile(r"\$([^$]+)\$")
_DEFAULT_SEPARATOR = "、"


class MalformedXML(ValueError):
    """The message body is not the XML document that was expected."""


# -- element helpers -------------------------------------------------------


def _local(tag: Any) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _findall(elem: ET.Element | None, name: str) -> list[ET.Element]:
    if elem is None:
        return []
    return [child for child in elem if _local(child.tag) == name]


def _find(elem: ET.Element | None, name: str) -> ET.Element | None:
    matches = _findall(elem, name)
    return matches[-1] if matches else None


def _chardata(elem: ET.Element) -> str:
    """Character data directly inside ``elem``, without nested elements' text."""
    return (elem.text or "") + "".join(child.tail or "" for child in elem)


def _text(elem: ET.Element | None, name: str) -> str:
    child = _find(elem, name)
    return "" if child is None else _chardata(child)


def _int(elem: ET.Element | None, name: str) -> int:
    raw = _text(elem, name).strip()
    if not raw:
        return 0
    if not _INT.fullmatch(raw):
        raise MalformedXML(f"element <{name}> is not an integer: {raw!r}")
    value = int(raw)
    if not _INT_MIN <= value <= _INT_MAX:
        raise MalformedXML(f"element <{name}> is out of range: {raw!r}")
    return value


def _attr(elem: ET.Element | None, name: str) -> str:
    if elem is None:
        return ""
    for key, value in elem.attrib.items():
        if _local(key) == name:
            return value
    return ""


def _el(name: str) -> Any:
    return field(default="", metadata={"xml": name, "kind": "text"})


def _num(name: str) -> Any:
    return field(default=0, metadata={"xml": name, "kind": "int"})


def _at(name: str) -> Any:
    return field(default="", metadata={"xml": name, "kind": "attr"})


def _scalars(cls: type, elem: ET.Element | None) -> dict[str, Any]:
    """Read every text, integer and attribute field of ``cls`` from ``elem``."""
    values: dict[str, Any] = {}
    if elem is None:
        return values
    for f in fields(cls):
        kind = f.metadata.get("kind")
        if kind is None:
            continue
        name = f.metadata["xml"]
        if kind == "attr":
            values[f.name] = _attr(elem, name)
        elif kind == "text":
            values[f.name] = _text(elem, name)
        else:
            values[f.name] = _int(elem, name)
    return values


def _parse_root(data: str | bytes) -> ET.Element:
    """Parse the first element of ``data``; anything after it is ignored."""
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedXML("document is not valid UTF-8") from exc
    parser = ET.XMLPullParser(events=("start", "end"))
    depth = 0
    try:
        parser.feed(data.lstrip())
        for event, elem in parser.read_events():
            if event == "start":
                depth += 1
                continue
            depth -= 1
            if depth == 0:
                return elem
        parser.close()
    except ET.ParseError as exc:
        raise MalformedXML(str(exc)) from exc
    raise MalformedXML("document has no root element")


def _expect_root(data: str | bytes, name: str) -> ET.Element:
    root = _parse_root(data)
    if _local(root.tag) != name:
        raise MalformedXML(f"expected element <{name}> but have <{_local(root.tag)}>")
    return root


# -- media messages --------------------------------------------------------


@dataclass
class Image:
    md5: str = _at("md5")


@dataclass
class Video:
    md5: str = _at("md5")
    raw_md5: str = _at("rawmd5")


@dataclass
class ReferMsg:
    """A quoted message."""

    type: int = _num("type")
    svr_id: str = _el("svrid")
    from_usr: str = _el("fromusr")
    chat_usr: str = _el("chatusr")
    display_name: str = _el("displayname")
    msg_source: str = _el("msgsource")
    content: str = _el("content")
    str_id: str = _el("strid")
    create_time: int = _num("createtime")


@dataclass
class AppAttach:
    """An application attachment."""

    total_len: str = _el("totallen")
    attach_id: str = _el("attachid")
    cdn_attach_url: str = _el("cdnattachurl")
    emoticon_md5: str = _el("emoticonmd5")
    aes_key: str = _el("aeskey")
    file_ext: str = _el("fileext")
    is_large_file_msg: str = _el("islargefilemsg")


@dataclass
class DataItem:
    """One entry of a forwarded chat record."""

    data_type: str = _at("datatype")
    data_id: str = _at("dataid")
    html_id: str = _at("htmlid")
    data_fmt: str = _el("datafmt")
    source_name: str = _el("sourcename")
    source_time: str = _el("sourcetime")
    source_head_url: str = _el("sourceheadurl")
    data_desc: str = _el("datadesc")
    thumb_source_path: str = _el("thumbsourcepath")
    thumb_size: str = _el("thumbsize")
    cdn_data_url: str = _el("cdndataurl")
    cdn_data_key: str = _el("cdndatakey")
    cdn_thumb_url: str = _el("cdnthumburl")
    cdn_thumb_key: str = _el("cdnthumbkey")
    data_source_path: str = _el("datasourcepath")
    full_md5: str = _el("fullmd5")
    thumb_full_md5: str = _el("thumbfullmd5")
    thumb_head256_md5: str = _el("thumbhead256md5")
    data_size: str = _el("datasize")
    cdn_encry_ver: str = _el("cdnencryver")
    src_chatname: str = _el("srcChatname")
    src_msg_local_id: str = _el("srcMsgLocalid")
    src_msg_create_time: str = _el("srcMsgCreateTime")
    message_uuid: str = _el("messageuuid")
    from_new_msg_id: str = _el("fromnewmsgid")
    data_title: str = _el("datatitle")
    # A nested forwarded record.
    record_xml: RecordInfo | None = None


@dataclass
class RecordInfo:
    """A forwarded bundle of chat messages."""

    from_scene: str = _el("fromscene")
    fav_username: str = _el("favusername")
    fav_create_time: str = _el("favcreatetime")
    is_chat_room: str = _el("isChatRoom")
    title: str = _el("title")
    desc: str = _el("desc")
    info: str = _el("info")
    data_count: str = ""
    data_items: list[DataItem] = field(default_factory=list)

    def to_text(self, title: str = "", host: str = "") -> str:
        """Render the record as indented text; images link to ``host``."""
        parts = [f"[合并转发|{title or self.title}]\n"]
        for item in self.data_items:
            parts.append(f"  {item.source_name} {item.source_time}\n")
            if item.data_type == "17" and item.record_xml is not None:
                content = item.record_xml.to_text(item.data_title, host)
                if content:
                    parts.extend(f"  {line}\n" for line in content.split("\n"))
                continue
            if item.data_fmt in ("pic", "jpg"):
                parts.append(f"  ![图片](http://{host}/image/{item.full_md5})\n")
            else:
                parts.extend(f"  {line}\n" for line in item.data_desc.split("\n"))
            parts.append("\n")
        return "".join(parts)


@dataclass
class RecordItem:
    """The raw record document of a forwarded bundle."""

    cdata: str = ""
    record_info: RecordInfo | None = None


@dataclass
class PatRecord:
    """One "pat" action."""

    from_user: str = _el("fromUser")
    patted_user: str = _el("pattedUser")
    template: str = _el("templete")
    create_time: int = _num("createTime")
    svr_id: str = _el("svrId")
    read_status: int = _num("readStatus")


@dataclass
class PatMsg:
    chat_user: str = _el("chatUser")
    record_num: int = _num("recordNum")
    records: list[PatRecord] = field(default_factory=list)


@dataclass
class WCPayInfo:
    """A money transfer."""

    pay_sub_type: int = _num("paysubtype")
    fee_desc: str = _el("feedesc")
    transaction_id: str = _el("transcationid")
    transfer_id: str = _el("transferid")
    invalid_time: str = _el("invalidtime")
    begin_transfer_time: str = _el("begintransfertime")
    effective_date: str = _el("effectivedate")
    pay_memo: str = _el("pay_memo")
    receiver_username: str = _el("receiver_username")
    payer_username: str = _el("payer_username")


@dataclass
class FinderMedia:
    thumb_url: str = _el("thumbUrl")
    full_cover_url: str = _el("fullCoverUrl")
    video_play_duration: str = _el("videoPlayDuration")
    url: str = _el("url")
    cover_url: str = _el("coverUrl")
    height: str = _el("height")
    media_type: str = _el("mediaType")
    full_clip_inset: str = _el("fullClipInset")
    width: str = _el("width")


@dataclass
class FinderFeed:
    """A shared channel video post."""

    object_id: str = _el("objectId")
    feed_type: str = _el("feedType")
    nickname: str = _el("nickname")
    avatar: str = _el("avatar")
    desc: str = _el("desc")
    media_count: str = _el("mediaCount")
    object_nonce_id: str = _el("objectNonceId")
    live_id: str = _el("liveId")
    username: str = _el("username")
    auth_icon_url: str = _el("authIconUrl")
    auth_icon_type: int = _num("authIconType")
    contact_jump_info_str: str = _el("contactJumpInfoStr")
    source_comment_scene: int = _num("sourceCommentScene")
    media_list: list[FinderMedia] = field(default_factory=list)
    mega_video_object_id: str = ""
    mega_video_object_nonce_id: str = ""
    biz_username: str = _el("bizUsername")
    biz_nickname: str = _el("bizNickname")
    biz_avatar: str = _el("bizAvatar")
    biz_username_v2: str = _el("bizUsernameV2")
    biz_auth_icon_url: str = _el("bizAuthIconUrl")
    biz_auth_icon_type: int = _num("bizAuthIconType")
    ec_source: str = _el("ecSource")
    last_gmsg_id: str = _el("lastGMsgID")
    share_byp_data: str = _el("shareBypData")
    is_debug: int = _num("isDebug")
    content_type: int = _num("content_type")
    finder_forward_source: str = _el("finderForwardSource")


@dataclass
class App:
    """The ``appmsg`` part of a message; which fields apply depends on ``type``."""

    type: int = _num("type")
    title: str = _el("title")
    des: str = _el("des")
    url: str = _el("url")
    app_attach: AppAttach | None = None
    md5: str = _el("md5")
    record_item: RecordItem | None = None
    source_display_name: str = _el("sourcedisplayname")
    finder_feed: FinderFeed | None = None
    refer_msg: ReferMsg | None = None
    pat_msg: PatMsg | None = None
    wcpay_info: WCPayInfo | None = None


@dataclass
class MediaMsg:
    """The ``<msg>`` document of an image, video or application message."""

    image: Image = field(default_factory=Image)
    video: Video = field(default_factory=Video)
    app: App = field(default_factory=App)


def _data_item(elem: ET.Element) -> DataItem:
    item = DataItem(**_scalars(DataItem, elem))
    record_xml = _find(elem, "recordxml")
    if record_xml is not None:
        item.record_xml = _record_info(_find(record_xml, "recordinfo"))
    return item


def _record_info(elem: ET.Element | None) -> RecordInfo:
    data_list = _find(elem, "datalist")
    return RecordInfo(
        **_scalars(RecordInfo, elem),
        data_count=_attr(data_list, "count"),
        data_items=[_data_item(e) for e in _findall(data_list, "dataitem")],
    )


def _finder_feed(elem: ET.Element) -> FinderFeed:
    mega = _find(elem, "megaVideo")
    return FinderFeed(
        **_scalars(FinderFeed, elem),
        media_list=[
            FinderMedia(**_scalars(FinderMedia, e))
            for e in _findall(_find(elem, "mediaList"), "media")
        ],
        mega_video_object_id=_text(mega, "objectId"),
        mega_video_object_nonce_id=_text(mega, "objectNonceId"),
    )


def _pat_msg(elem: ET.Element) -> PatMsg:
    return PatMsg(
        **_scalars(PatMsg, elem),
        records=[
            PatRecord(**_scalars(PatRecord, e))
            for e in _findall(_find(elem, "records"), "record")
        ],
    )


def _optional(elem: ET.Element | None, build: Any) -> Any:
    return None if elem is None else build(elem)


def _app(elem: ET.Element | None) -> App:
    app = App(**_scalars(App, elem))
    app.app_attach = _optional(
        _find(elem, "appattach"), lambda e: AppAttach(**_scalars(AppAttach, e))
    )
    app.record_item = _optional(_find(elem, "recorditem"), lambda e: RecordItem(cdata=_chardata(e)))
    app.finder_feed = _optional(_find(elem, "finderFeed"), _finder_feed)
    app.refer_msg = _optional(_find(elem, "refermsg"), lambda e: ReferMsg(**_scalars(ReferMsg, e)))
    app.pat_msg = _optional(_find(elem, "patMsg"), _pat_msg)
    app.wcpay_info = _optional(
        _find(elem, "wcpayinfo"), lambda e: WCPayInfo(**_scalars(WCPayInfo, e))
    )
    return app


def parse_media_msg(data: str | bytes) -> MediaMsg:
    """Parse a ``<msg>`` document; raise MalformedXML if it is not one."""
    root = _expect_root(data, "msg")
    return MediaMsg(
        image=Image(**_scalars(Image, _find(root, "img"))),
        video=Video(**_scalars(Video, _find(root, "videomsg"))),
        app=_app(_find(root, "appmsg")),
    )


def parse_record_info(data: str | bytes) -> RecordInfo:
    """Parse a ``<recordinfo>`` document; raise MalformedXML if it is not one."""
    return _record_info(_expect_root(data, "recordinfo"))


# -- system messages -------------------------------------------------------


@dataclass
class Member:
    username: str = _el("username")
    nickname: str = _el("nickname")


@dataclass
class Link:
    """A placeholder definition in a system message template."""

    name: str = _at("name")
    type: str = _at("type")
    members: list[Member] = field(default_factory=list)
    separator: str = _el("separator")
    title: str = _el("title")

    def _replacement(self) -> str:
        if self.type == "link_profile":
            texts = [
                f"{m.nickname}({m.username})" if m.username else m.nickname
                for m in self.members
                if m.nickname
            ]
            return (self.separator or _DEFAULT_SEPARATOR).join(texts)
        return self.title


@dataclass
class ContentTemplate:
    type: str = _at("type")
    plain: str = _el("plain")
    template: str = _el("template")
    links: list[Link] = field(default_factory=list)


@dataclass
class SysMsgTemplate:
    content_template: ContentTemplate = field(default_factory=ContentTemplate)


@dataclass
class DelChatRoomMember:
    """A member removal or QR-code invitation notice."""

    plain: str = _el("plain")
    text: str = _el("text")
    link_scene: str = ""
    link_text: str = ""
    link_usernames: list[str] = field(default_factory=list)
    link_qrcode: str = ""


@dataclass
class SysMsg:
    """The ``<sysmsg>`` document of a system notice."""

    type: str = _at("type")
    del_chat_room_member: DelChatRoomMember | None = None
    sys_msg_template: SysMsgTemplate | None = None

    def text(self) -> str:
        """Return the notice as readable text."""
        if self.type == "delchatroommember":
            return self.del_chat_room_member_text()
        return self.sys_msg_template_text()

    def del_chat_room_member_text(self) -> str:
        if self.del_chat_room_member is None:
            return ""
        return self.del_chat_room_member.plain

    def sys_msg_template_text(self) -> str:
        """Fill the template's ``$name$`` placeholders; unknown ones are kept."""
        if self.sys_msg_template is None:
            return ""
        content = self.sys_msg_template.content_template
        replacements = {f"${link.name}$": link._replacement() for link in content.links}
        return _PLACEHOLDER.sub(
            lambda match: replacements.get(match.group(0), match.group(0)),
            content.template,
        )


def _link(elem: ET.Element) -> Link:
    return Link(
        **_scalars(Link, elem),
        members=[
            Member(**_scalars(Member, e))
            for e in _findall(_find(elem, "memberlist"), "member")
        ],
    )


def _sys_msg_template(elem: ET.Element) -> SysMsgTemplate:
    content = _find(elem, "content_template")
    return SysMsgTemplate(
        content_template=ContentTemplate(
            **_scalars(ContentTemplate, content),
            links=[_link(e) for e in _findall(_find(content, "link_list"), "link")],
        )
    )


def _del_chat_room_member(elem: ET.Element) -> DelChatRoomMember:
    link = _find(elem, "link")
    return DelChatRoomMember(
        **_scalars(DelChatRoomMember, elem),
        link_scene=_text(link, "scene"),
        link_text=_text(link, "text"),
        link_usernames=[_chardata(e) for e in _findall(_find(link, "memberlist"), "username")],
        link_qrcode=_text(link, "qrcode"),
    )


def parse_sys_msg(data: str | bytes) -> SysMsg:
    """Parse a system message document; raise MalformedXML if it is not XML."""
    root = _parse_root(data)
    return SysMsg(
        type=_attr(root, "type"),
        del_chat_room_member=_optional(_find(root, "delchatroommember"), _del_chat_room_member),
        sys_msg_template=_optional(_find(root, "sysmsgtemplate"), _sys_msg_template),
    )