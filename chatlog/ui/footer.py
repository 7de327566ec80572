"""The footer line: product name and version on the left, key help on the right."""

from __future__ import annotations

from chatlog.ui.style import get_color_hex, palette_for

TITLE = "footer"


def _copyright(version: str) -> str:
    color = get_color_hex(palette_for().page_header_fg_color)
    return f"[{color}::b] @ Sarv's Chatlog {version}[-:-:-]"


def _help() -> str:
    palette = palette_for()
    key_color = get_color_hex(palette.menu_bg_color)
    text_color = get_color_hex(palette.page_header_fg_color)
    return "  ".join(
        f"[{key_color}::b]{key}[{text_color}::b]: {action}"
        for key, action in (
            ("↑/↓", "导航"),
            ("←/→", "切换标签"),
            ("Enter", "选择"),
            ("ESC", "返回"),
            ("Ctrl+C", "退出"),
        )
    )


class Footer:
    """Two marked-up text cells: left-aligned copyright, right-aligned help."""

    def __init__(self, version: str = "") -> None:
        self.title = TITLE
        self.copyright = _copyright(version)
        self.help = _help()

    def set_copyright(self, text: str) -> None:
        self.copyright = text

    def set_help(self, text: str) -> None:
        self.help = text