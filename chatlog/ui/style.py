"""Terminal colour scheme and colour helpers."""

from __future__ import annotations

import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class Color:
    """A terminal colour: a named palette entry or a bare RGB value."""

    value: int
    name: str = ""

    @classmethod
    def from_rgb(cls, red: int, green: int, blue: int) -> Color:
        return cls((red << 16) | (green << 8) | blue)


COLOR_NAMES: dict[str, Color] = {
    name: Color(value, name)
    for name, value in (
        ("black", 0x000000),
        ("maroon", 0x800000),
        ("green", 0x008000),
        ("olive", 0x808000),
        ("navy", 0x000080),
        ("purple", 0x800080),
        ("teal", 0x008080),
        ("silver", 0xC0C0C0),
        ("gray", 0x808080),
        ("red", 0xFF0000),
        ("lime", 0x00FF00),
        ("yellow", 0xFFFF00),
        ("blue", 0x0000FF),
        ("fuchsia", 0xFF00FF),
        ("aqua", 0x00FFFF),
        ("white", 0xFFFFFF),
        ("darkorange", 0xFF8C00),
        ("darkred", 0x8B0000),
        ("dimgray", 0x696969),
        ("floralwhite", 0xFFFAF0),
        ("lightslategray", 0x778899),
        ("mediumseagreen", 0x3CB371),
        ("orange", 0xFFA500),
        ("springgreen", 0x00FF7F),
        ("whitesmoke", 0xF5F5F5),
    )
}

_C = COLOR_NAMES
_DEFAULT_BACKGROUND = _C["black"]
_DEFAULT_TEXT = _C["white"]


@dataclass(frozen=True)
class Palette:
    """Every colour and glyph the interface uses on one platform."""

    heavy_green_check_mark: str
    heavy_red_cross_mark: str
    progress_bar_cell: str
    info_bar_item_fg_color: Color
    fg_color: Color
    bg_color: Color
    border_color: Color
    help_header_fg_color: Color
    menu_bg_color: Color
    page_header_bg_color: Color
    page_header_fg_color: Color
    running_status_fg_color: Color
    paused_status_fg_color: Color
    dialog_bg_color: Color
    dialog_border_color: Color
    dialog_fg_color: Color
    dialog_sub_box_border_color: Color
    error_dialog_bg_color: Color
    error_dialog_button_bg_color: Color
    terminal_fg_color: Color
    terminal_bg_color: Color
    terminal_border_color: Color
    table_header_bg_color: Color
    table_header_fg_color: Color
    prg_bg_color: Color
    prg_bar_color: Color
    prg_bar_empty_color: Color
    prg_bar_ok_color: Color
    prg_bar_warn_color: Color
    prg_bar_crit_color: Color
    # (background, foreground)
    drop_down_unselected: tuple[Color, Color]
    drop_down_selected: tuple[Color, Color]
    input_field_bg_color: Color
    button_bg_color: Color


_UNIX = Palette(
    heavy_green_check_mark="\u2705",
    heavy_red_cross_mark="\u274C",
    progress_bar_cell="▉",
    info_bar_item_fg_color=_C["silver"],
    fg_color=_C["floralwhite"],
    bg_color=_DEFAULT_BACKGROUND,
    border_color=Color.from_rgb(135, 175, 146),
    help_header_fg_color=Color.from_rgb(135, 175, 146),
    menu_bg_color=_C["mediumseagreen"],
    page_header_bg_color=_C["mediumseagreen"],
    page_header_fg_color=_C["floralwhite"],
    running_status_fg_color=Color.from_rgb(95, 215, 0),
    paused_status_fg_color=Color.from_rgb(255, 175, 0),
    dialog_bg_color=Color.from_rgb(38, 38, 38),
    dialog_border_color=_C["mediumseagreen"],
    dialog_fg_color=_C["floralwhite"],
    dialog_sub_box_border_color=_C["dimgray"],
    error_dialog_bg_color=Color.from_rgb(215, 0, 0),
    error_dialog_button_bg_color=_C["darkred"],
    terminal_fg_color=_C["floralwhite"],
    terminal_bg_color=Color.from_rgb(5, 5, 5),
    terminal_border_color=_C["dimgray"],
    table_header_bg_color=_C["mediumseagreen"],
    table_header_fg_color=_C["floralwhite"],
    prg_bg_color=_C["dimgray"],
    prg_bar_color=_C["darkorange"],
    prg_bar_empty_color=_C["white"],
    prg_bar_ok_color=_C["green"],
    prg_bar_warn_color=_C["orange"],
    prg_bar_crit_color=_C["red"],
    drop_down_unselected=(_C["whitesmoke"], _C["black"]),
    drop_down_selected=(_C["lightslategray"], _C["white"]),
    input_field_bg_color=_C["gray"],
    button_bg_color=_C["mediumseagreen"],
)

_WINDOWS = Palette(
    heavy_green_check_mark="[green::]\u25CF[-::]",
    heavy_red_cross_mark="[red::]\u25CF[-::]",
    progress_bar_cell="\u2593",
    info_bar_item_fg_color=_C["gray"],
    fg_color=_DEFAULT_TEXT,
    bg_color=_DEFAULT_BACKGROUND,
    border_color=_C["springgreen"],
    help_header_fg_color=_C["springgreen"],
    menu_bg_color=_C["springgreen"],
    page_header_bg_color=_C["springgreen"],
    page_header_fg_color=_DEFAULT_TEXT,
    running_status_fg_color=_C["lime"],
    paused_status_fg_color=_C["yellow"],
    dialog_bg_color=_DEFAULT_BACKGROUND,
    dialog_border_color=_C["springgreen"],
    dialog_fg_color=_DEFAULT_TEXT,
    dialog_sub_box_border_color=_C["gray"],
    error_dialog_bg_color=_C["red"],
    error_dialog_button_bg_color=_C["springgreen"],
    terminal_fg_color=_DEFAULT_TEXT,
    terminal_bg_color=_DEFAULT_BACKGROUND,
    terminal_border_color=_DEFAULT_BACKGROUND,
    table_header_bg_color=_C["springgreen"],
    table_header_fg_color=_DEFAULT_TEXT,
    prg_bg_color=_DEFAULT_TEXT,
    prg_bar_color=_C["fuchsia"],
    prg_bar_empty_color=_C["white"],
    prg_bar_ok_color=_C["lime"],
    prg_bar_warn_color=_C["yellow"],
    prg_bar_crit_color=_C["red"],
    drop_down_unselected=(_C["gray"], _C["white"]),
    drop_down_selected=(_C["purple"], _DEFAULT_TEXT),
    input_field_bg_color=_C["gray"],
    button_bg_color=_C["springgreen"],
)


def _is_windows(windows: bool | None) -> bool:
    return sys.platform == "win32" if windows is None else windows


def palette_for(windows: bool | None = None) -> Palette:
    """Return the palette for Windows consoles or for other terminals."""
    return _WINDOWS if _is_windows(windows) else _UNIX


def get_color_name(color: Color) -> str:
    """Return the palette name of ``color``, or '' for a bare RGB colour."""
    return next((name for name, named in COLOR_NAMES.items() if named == color), "")


def get_color_hex(color: Color, windows: bool | None = None) -> str:
    """Return the colour as used in text markup.

    Other terminals get ``#`` and the unpadded hex value; Windows consoles
    get the colour name, or '' if it has none.
    """
    if _is_windows(windows):
        return get_color_name(color)
    return f"#{color.value:x}"