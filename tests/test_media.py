import os

import pytest

from chatlog.model.media import MediaDarwinV3, MediaV3, MediaV4


def parts(path):
    return path.split(os.sep)


def test_v3_image_path():
    media = MediaV3(type="image", key="k1", dir1="wxid_a", dir2="2024-01", name="x.dat", modify_time=5).wrap()
    assert parts(media.path) == ["FileStorage", "MsgAttach", "wxid_a", "Image", "2024-01", "x.dat"]
    assert media.key == "k1"
    assert media.name == "x.dat"
    assert media.modify_time == 5


def test_v3_video_and_file_paths():
    video = MediaV3(type="video", dir1="ignored", dir2="2024-01", name="v.mp4").wrap()
    assert parts(video.path) == ["FileStorage", "Video", "2024-01", "v.mp4"]
    doc = MediaV3(type="file", dir1="ignored", dir2="2024-02", name="a.pdf").wrap()
    assert parts(doc.path) == ["FileStorage", "File", "2024-02", "a.pdf"]


@pytest.mark.parametrize("cls", [MediaV3, MediaV4])
def test_unknown_type_has_no_path(cls):
    media = cls(type="voice", dir1="d1", dir2="d2", name="n").wrap()
    assert media.path == ""
    assert media.type == "voice"


def test_v4_paths():
    image = MediaV4(type="image", dir1="md5talker", dir2="2024-01", name="i.dat", size=9).wrap()
    assert parts(image.path) == ["msg", "attach", "md5talker", "2024-01", "Img", "i.dat"]
    assert image.size == 9
    video = MediaV4(type="video", dir1="2024-01", name="v.mp4").wrap()
    assert parts(video.path) == ["msg", "video", "2024-01", "v.mp4"]
    doc = MediaV4(type="file", dir1="2024-01", name="a.pdf").wrap()
    assert parts(doc.path) == ["msg", "file", "2024-01", "a.pdf"]


def test_darwin_path_and_name():
    media = MediaDarwinV3(
        media_md5="abc", media_size=42, modify_time=3, relative_path="room/Img", file_name="pic.jpg"
    ).wrap()
    assert parts(media.path) == ["Message", "MessageTemp", "room", "Img", "pic.jpg"]
    assert media.name == "pic.jpg"
    assert media.key == "abc"
    assert media.size == 42
    assert media.type == ""


def test_darwin_name_is_last_component_of_relative_path():
    media = MediaDarwinV3(relative_path="room/sub", file_name="").wrap()
    assert media.name == "sub"
    assert parts(media.path)[-1] == "sub"