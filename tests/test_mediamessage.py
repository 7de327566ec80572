import pytest

from chatlog.model.mediamessage import (
    MalformedXML,
    RecordInfo,
    SysMsg,
    parse_media_msg,
    parse_record_info,
    parse_sys_msg,
)


def test_image_md5_attribute():
    msg = parse_media_msg('<msg><img md5="abc123" length="10"/></msg>')
    assert msg.image.md5 == "abc123"
    assert msg.video.md5 == ""


def test_video_md5_and_raw_md5():
    msg = parse_media_msg('<msg><videomsg md5="v1" rawmd5="r1"/></msg>')
    assert (msg.video.md5, msg.video.raw_md5) == ("v1", "r1")


def test_app_fields_and_optional_parts():
    msg = parse_media_msg(
        "<msg><appmsg><type>6</type><title>report.pdf</title><md5>f00d</md5>"
        "<appattach><totallen>42</totallen><fileext>pdf</fileext></appattach>"
        "</appmsg></msg>"
    )
    assert msg.app.type == 6
    assert msg.app.title == "report.pdf"
    assert msg.app.md5 == "f00d"
    assert msg.app.app_attach.file_ext == "pdf"
    assert msg.app.app_attach.total_len == "42"
    assert msg.app.refer_msg is None
    assert msg.app.pat_msg is None


def test_bytes_input_and_leading_whitespace():
    msg = parse_media_msg('\n  <?xml version="1.0"?><msg><img md5="m"/></msg>'.encode())
    assert msg.image.md5 == "m"


def test_content_after_root_is_ignored():
    msg = parse_media_msg('<msg><img md5="x"/></msg><junk>')
    assert msg.image.md5 == "x"


def test_wrong_root_is_rejected():
    with pytest.raises(MalformedXML):
        parse_media_msg("<other/>")


@pytest.mark.parametrize("data", ["", "not xml", "<msg><img></msg>", b"\xff\xfe"])
def test_malformed_input_is_rejected(data):
    with pytest.raises(MalformedXML):
        parse_media_msg(data)


def test_invalid_integer_is_rejected():
    with pytest.raises(MalformedXML):
        parse_media_msg("<msg><appmsg><type>abc</type></appmsg></msg>")


def test_empty_and_padded_integers():
    assert parse_media_msg("<msg><appmsg><type></type></appmsg></msg>").app.type == 0
    assert parse_media_msg("<msg><appmsg><type> 57 </type></appmsg></msg>").app.type == 57


def test_text_excludes_nested_elements():
    msg = parse_media_msg("<msg><appmsg><title>a<b>ignored</b>c</title></appmsg></msg>")
    assert msg.app.title == "ac"


def test_refer_msg():
    msg = parse_media_msg(
        "<msg><appmsg><type>57</type><title>reply</title><refermsg>"
        "<type>1</type><fromusr>u1</fromusr><displayname>Ann</displayname>"
        "<content>hi</content><createtime>1700000000</createtime>"
        "</refermsg></appmsg></msg>"
    )
    refer = msg.app.refer_msg
    assert refer.type == 1
    assert refer.from_usr == "u1"
    assert refer.display_name == "Ann"
    assert refer.content == "hi"
    assert refer.create_time == 1700000000


def test_pat_msg_records():
    msg = parse_media_msg(
        "<msg><appmsg><type>62</type><patMsg><chatUser>u2</chatUser>"
        "<records><record><fromUser>u1</fromUser><templete>patted</templete></record>"
        "<record><fromUser>u3</fromUser></record></records></patMsg></appmsg></msg>"
    )
    pat = msg.app.pat_msg
    assert pat.chat_user == "u2"
    assert [r.from_user for r in pat.records] == ["u1", "u3"]
    assert pat.records[0].template == "patted"


def test_wcpay_info():
    msg = parse_media_msg(
        "<msg><appmsg><type>2000</type><wcpayinfo><paysubtype>3</paysubtype>"
        "<feedesc>￥1.00</feedesc><pay_memo>lunch</pay_memo></wcpayinfo></appmsg></msg>"
    )
    pay = msg.app.wcpay_info
    assert pay.pay_sub_type == 3
    assert pay.fee_desc == "￥1.00"
    assert pay.pay_memo == "lunch"


def test_finder_feed_media_list():
    msg = parse_media_msg(
        "<msg><appmsg><type>51</type><finderFeed><desc>clip</desc>"
        "<mediaList><media><url>u-a</url></media><media><url>u-b</url></media></mediaList>"
        "<megaVideo><objectId>o1</objectId></megaVideo>"
        "</finderFeed></appmsg></msg>"
    )
    feed = msg.app.finder_feed
    assert feed.desc == "clip"
    assert [m.url for m in feed.media_list] == ["u-a", "u-b"]
    assert feed.mega_video_object_id == "o1"


def test_record_item_cdata_round_trip():
    inner = (
        "<recordinfo><title>Chat</title><datalist count=\"1\">"
        "<dataitem datatype=\"1\"><sourcename>Ann</sourcename>"
        "<datadesc>hello</datadesc></dataitem></datalist></recordinfo>"
    )
    msg = parse_media_msg(
        f"<msg><appmsg><type>19</type><recorditem><![CDATA[{inner}]]></recorditem></appmsg></msg>"
    )
    assert msg.app.record_item.cdata == inner
    info = parse_record_info(msg.app.record_item.cdata)
    assert info.title == "Chat"
    assert info.data_count == "1"
    assert [i.source_name for i in info.data_items] == ["Ann"]
    assert info.data_items[0].data_type == "1"


def test_parse_record_info_wrong_root():
    with pytest.raises(MalformedXML):
        parse_record_info("<msg/>")


def test_record_info_to_text_worked_example():
    info = parse_record_info(
        "<recordinfo><title>T</title><datalist><dataitem>"
        "<sourcename>Alice</sourcename><sourcetime>2024-01-01 10:00</sourcetime>"
        "<datadesc>hello\nworld</datadesc></dataitem></datalist></recordinfo>"
    )
    assert info.to_text("", "") == "[合并转发|T]\n  Alice 2024-01-01 10:00\n  hello\n  world\n\n"


def test_record_info_to_text_title_and_images():
    info = parse_record_info(
        "<recordinfo><title>T</title><datalist><dataitem>"
        "<datafmt>jpg</datafmt><fullmd5>abc</fullmd5></dataitem></datalist></recordinfo>"
    )
    text = info.to_text("Override", "localhost:5030")
    assert text.startswith("[合并转发|Override]\n")
    assert "![图片](http://localhost:5030/image/abc)" in text


def test_record_info_to_text_nested():
    info = parse_record_info(
        "<recordinfo><title>Outer</title><datalist><dataitem datatype=\"17\">"
        "<sourcename>Ann</sourcename><datatitle>Inner</datatitle><recordxml>"
        "<recordinfo><datalist><dataitem><sourcename>Bob</sourcename>"
        "<datadesc>deep</datadesc></dataitem></datalist></recordinfo>"
        "</recordxml></dataitem></datalist></recordinfo>"
    )
    assert info.data_items[0].record_xml.data_items[0].source_name == "Bob"
    lines = info.to_text("", "h").split("\n")
    assert "  [合并转发|Inner]" in lines
    assert "    deep" in lines


def test_empty_record_info_renders_header_only():
    assert RecordInfo(title="X").to_text("", "") == "[合并转发|X]\n"


def test_sys_msg_del_chat_room_member():
    sys_msg = parse_sys_msg(
        '<sysmsg type="delchatroommember"><delchatroommember>'
        "<plain>Ann joined via QR code</plain><link><scene>invite</scene>"
        "<memberlist><username>u1</username><username>u2</username></memberlist>"
        "</link></delchatroommember></sysmsg>"
    )
    assert sys_msg.text() == "Ann joined via QR code"
    assert sys_msg.del_chat_room_member.link_usernames == ["u1", "u2"]
    assert sys_msg.del_chat_room_member.link_scene == "invite"


def test_sys_msg_template_substitution():
    sys_msg = parse_sys_msg(
        '<sysmsg type="sysmsgtemplate"><sysmsgtemplate>'
        '<content_template type="tmpl_type_profile">'
        "<template><![CDATA[$user$ 邀请 $names$ 加入了群聊]]></template><link_list>"
        '<link name="user" type="link_profile"><memberlist><member>'
        "<username>ann_id</username><nickname>Ann</nickname></member></memberlist></link>"
        '<link name="names" type="link_profile"><memberlist>'
        "<member><username>bob_id</username><nickname>Bob</nickname></member>"
        "<member><nickname>Cat</nickname></member>"
        "<member><username>ghost</username></member>"
        "</memberlist></link></link_list></content_template></sysmsgtemplate></sysmsg>"
    )
    assert sys_msg.text() == "Ann(ann_id) 邀请 Bob(bob_id)、Cat 加入了群聊"


def test_sys_msg_template_separator_title_and_unknown():
    sys_msg = parse_sys_msg(
        "<sysmsg><sysmsgtemplate><content_template>"
        "<template>$a$ $b$ $missing$</template><link_list>"
        '<link name="a" type="link_profile"><separator>/</separator><memberlist>'
        "<member><nickname>X</nickname></member><member><nickname>Y</nickname></member>"
        "</memberlist></link>"
        '<link name="b" type="link_revoke"><title>undo</title></link>'
        "</link_list></content_template></sysmsgtemplate></sysmsg>"
    )
    assert sys_msg.sys_msg_template_text() == "X/Y undo $missing$"


def test_sys_msg_without_parts_is_empty():
    assert SysMsg(type="delchatroommember").text() == ""
    assert SysMsg().text() == ""
    assert parse_sys_msg('<sysmsg type="other"/>').text() == ""


def test_parse_sys_msg_rejects_garbage():
    with pytest.raises(MalformedXML):
        parse_sys_msg("plain text message")