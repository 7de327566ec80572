from chatlog.ui.footer import Footer
from chatlog.ui.help import strip_color_tags


def test_default_copyright_carries_version():
    footer = Footer("v1.2")
    assert strip_color_tags(footer.copyright) == " @ Sarv's Chatlog v1.2"
    assert footer.copyright.endswith("[-:-:-]")


def test_help_text_lists_keys():
    plain = strip_color_tags(Footer().help)
    assert plain == "↑/↓: 导航  ←/→: 切换标签  Enter: 选择  ESC: 返回  Ctrl+C: 退出"


def test_set_copyright():
    footer = Footer()
    footer.set_copyright("custom")
    assert footer.copyright == "custom"


def test_set_help():
    footer = Footer()
    footer.set_help("press q")
    assert footer.help == "press q"
    assert footer.title == "footer"