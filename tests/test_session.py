from datetime import datetime

from chatlog.model.session import Session, SessionDarwinV3, SessionV3, SessionV4

STAMP = 1700000000


def test_v3_wrap_copies_fields():
    session = SessionV3(
        str_usr_name="wxid_a", n_order=7, str_nick_name="Alice", str_content="hi", n_time=STAMP
    ).wrap()
    assert session.user_name == "wxid_a"
    assert session.n_order == 7
    assert session.nick_name == "Alice"
    assert session.content == "hi"
    assert session.n_time.timestamp() == STAMP


def test_darwin_wrap_uses_last_time_as_order():
    session = SessionDarwinV3(m_ns_user_name="wxid_b", m_u_last_time=STAMP).wrap()
    assert session.n_order == STAMP
    assert session.n_time.timestamp() == STAMP
    assert session.nick_name == ""
    assert session.content == ""


def test_v4_wrap_uses_display_name_and_summary():
    session = SessionV4(
        username="room@chatroom",
        summary="latest",
        last_timestamp=STAMP,
        last_msg_sender="wxid_x",
        last_sender_display_name="Xavier",
    ).wrap()
    assert session.user_name == "room@chatroom"
    assert session.nick_name == "Xavier"
    assert session.content == "latest"
    assert session.n_order == STAMP


def test_plain_text_header_line():
    moment = datetime(2024, 3, 5, 6, 7, 8)
    session = Session(user_name="wxid_a", nick_name="Alice", content="hello", n_time=moment)
    lines = session.plain_text(100).split("\n")
    assert lines[0] == "Alice(wxid_a) 2024-03-05 06:07:08"
    assert lines[1] == "hello"
    assert lines[2] == ""


def test_plain_text_truncates_long_content():
    session = Session(user_name="u", nick_name="n", content="abcdef")
    body = session.plain_text(3).split("\n")[1]
    assert body == "abc <...>"


def test_plain_text_keeps_content_at_limit():
    session = Session(user_name="u", nick_name="n", content="abc")
    assert session.plain_text(3).split("\n")[1] == "abc"


def test_plain_text_without_limit_omits_content():
    session = Session(user_name="u", nick_name="n", content="secret-ish text")
    text = session.plain_text(0)
    assert text.endswith("\n\n")
    assert "secret-ish" not in text


def test_plain_text_truncation_counts_bytes():
    session = Session(user_name="u", nick_name="n", content="你好世界")
    body = session.plain_text(6).split("\n")[1]
    assert body == "你好 <...>"