import pytest

from chatlog.ui.style import COLOR_NAMES, Color, get_color_hex, get_color_name, palette_for


def test_named_color_name():
    assert get_color_name(palette_for(False).menu_bg_color) == "mediumseagreen"


def test_rgb_color_has_no_name():
    assert get_color_name(Color.from_rgb(135, 175, 146)) == ""


def test_rgb_color_differs_from_named_with_same_value():
    named = COLOR_NAMES["red"]
    assert get_color_name(Color(named.value)) == ""


def test_hex_for_named_color():
    assert get_color_hex(COLOR_NAMES["mediumseagreen"], windows=False) == "#3cb371"


def test_hex_for_rgb_color():
    assert get_color_hex(palette_for(False).border_color, windows=False) == "#87af92"


@pytest.mark.parametrize("name", sorted(COLOR_NAMES))
def test_hex_round_trips_value(name):
    color = COLOR_NAMES[name]
    text = get_color_hex(color, windows=False)
    assert text.startswith("#")
    assert int(text[1:], 16) == color.value


@pytest.mark.parametrize("name", sorted(COLOR_NAMES))
def test_windows_hex_is_name(name):
    assert get_color_hex(COLOR_NAMES[name], windows=True) == name


def test_windows_hex_of_rgb_is_empty():
    assert get_color_hex(Color.from_rgb(5, 5, 5), windows=True) == ""


def test_unix_palette_values():
    palette = palette_for(False)
    assert palette.heavy_green_check_mark == "\u2705"
    assert palette.dialog_bg_color == Color.from_rgb(38, 38, 38)
    assert palette.border_color == palette.help_header_fg_color


def test_windows_palette_values():
    palette = palette_for(True)
    assert palette.heavy_red_cross_mark == "[red::]\u25CF[-::]"
    assert palette.progress_bar_cell == "\u2593"
    assert palette.dialog_bg_color == COLOR_NAMES["black"]
    assert palette.menu_bg_color == COLOR_NAMES["springgreen"]


def test_every_windows_color_is_named():
    palette = palette_for(True)
    for field_name, value in vars(palette).items():
        if isinstance(value, Color):
            assert get_color_name(value), field_name