import pytest

from chatlog.ui.menu import Item, Menu, Rect, SubMenu


def _recorder():
    chosen = []
    return chosen, chosen.append


def test_menu_add_item_orders_by_index():
    menu = Menu("主菜单")
    menu.add_item(Item(index=3, name="c"))
    menu.add_item(Item(index=1, name="a"))
    menu.add_item(Item(index=2, name="b"))
    assert [item.name for item in menu.items] == ["a", "b", "c"]
    assert menu.heading == "[::b]主菜单"


def test_menu_set_items_keeps_order():
    menu = Menu("m")
    menu.set_items([Item(index=2, name="b"), Item(index=1, name="a")])
    assert [item.name for item in menu.items] == ["b", "a"]


def test_menu_visible_rows_skip_hidden():
    menu = Menu("m")
    menu.set_items([Item(name="a"), Item(name="b", hidden=True), Item(name="c")])
    assert [item.name for item in menu.visible_rows()] == ["a", "c"]


def test_menu_select_calls_visible_item():
    chosen, record = _recorder()
    menu = Menu("m")
    menu.set_items(
        [Item(name="a", hidden=True, selected=record), Item(name="b", selected=record)]
    )
    result = menu.select(1)
    assert result.name == "b"
    assert [item.name for item in chosen] == ["b"]


def test_menu_select_header_and_out_of_range_do_nothing():
    chosen, record = _recorder()
    menu = Menu("m")
    menu.set_items([Item(name="a", selected=record)])
    assert menu.select(0) is None
    assert menu.select(5) is None
    assert chosen == []


def test_submenu_size():
    sub = SubMenu("设置")
    sub.add_item(Item(name="ab", description="cde"))
    assert sub.width == 13
    assert sub.height == 6


def test_submenu_hidden_items_count_in_height_only():
    shown = SubMenu("s")
    shown.set_items([Item(name="ab", description="cde")])
    with_hidden = SubMenu("s")
    with_hidden.set_items(
        [Item(name="ab", description="cde"), Item(name="a much longer name", hidden=True)]
    )
    assert with_hidden.width == shown.width
    assert with_hidden.height == shown.height + 1


def test_submenu_width_counts_bytes():
    ascii_menu = SubMenu("s")
    ascii_menu.set_items([Item(name="ab")])
    wide_menu = SubMenu("s")
    wide_menu.set_items([Item(name="解密")])
    assert wide_menu.width - ascii_menu.width == len("解密".encode("utf-8")) - len("ab")


def test_submenu_add_item_orders_by_index():
    sub = SubMenu("s")
    sub.add_item(Item(index=2, name="b"))
    sub.add_item(Item(index=1, name="a"))
    assert [item.name for item in sub.items] == ["a", "b"]


def test_submenu_select_uses_item_list():
    chosen, record = _recorder()
    sub = SubMenu("s")
    sub.set_items([Item(name="a", selected=record), Item(name="b", selected=record)])
    assert sub.select(2).name == "b"
    assert sub.select(0) is None
    assert [item.name for item in chosen] == ["b"]


def test_submenu_select_out_of_range():
    sub = SubMenu("s")
    sub.set_items([Item(name="a")])
    with pytest.raises(IndexError):
        sub.select(2)


def test_submenu_cancel():
    calls = []
    sub = SubMenu("s")
    assert sub.cancel() is False
    assert sub.set_cancel_func(lambda: calls.append("cancelled")) is sub
    assert sub.cancel() is True
    assert calls == ["cancelled"]


def test_submenu_place_centres():
    sub = SubMenu("s")
    sub.set_items([Item(name="ab", description="cde")])
    rect = sub.place(0, 0, 100, 50)
    assert rect == Rect((100 - sub.width) // 2, (50 - sub.height) // 2, sub.width, sub.height)


def test_submenu_place_clamps_to_small_area():
    sub = SubMenu("s")
    sub.set_items([Item(name="ab", description="cde")])
    rect = sub.place(5, 7, 10, 4)
    assert rect == Rect(5, 7 + 1, 10 - 1, 4 - 1)


def test_submenu_help_text_lists_keys():
    text = SubMenu("s").help_text
    assert "Enter" in text
    assert "ESC" in text
    assert "导航" in text