"""Menus: the main command list and the centred pop-up sub-menu."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, NamedTuple

from chatlog.ui.style import get_color_hex, palette_for

DIALOG_PADDING = 3
DIALOG_HELP_HEIGHT = 1
DIALOG_MIN_WIDTH = 40
TABLE_HEIGHT_OFFSET = 3
_CMD_WIDTH_OFFSET = 6

HEADER = ("命令", "说明")


class Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int


@dataclass
class Item:
    """A menu entry; ``selected`` is called with the item when chosen."""

    index: int = 0
    key: str = ""
    name: str = ""
    description: str = ""
    hidden: bool = False
    selected: Callable[[Item], None] | None = field(default=None, compare=False, repr=False)


def _help_text() -> str:
    palette = palette_for()
    key_color = get_color_hex(palette.menu_bg_color)
    text_color = get_color_hex(palette.page_header_fg_color)
    return "  ".join(
        f"[{key_color}::b]{key}[{text_color}::b]: {action}"
        for key, action in (("↑/↓", "导航"), ("Enter", "选择"), ("ESC", "返回"))
    )


def _width(text: str) -> int:
    return len(text.encode("utf-8"))


class Menu:
    """The main command list; row 0 is the header, items follow."""

    def __init__(self, title: str) -> None:
        self.title = title
        self.heading = f"[::b]{title}"
        self.items: list[Item] = []

    def add_item(self, item: Item) -> None:
        """Add an item and keep the list ordered by index."""
        self.items.append(item)
        self.items.sort(key=lambda entry: entry.index)

    def set_items(self, items: Iterable[Item]) -> None:
        self.items = list(items)

    def visible_rows(self) -> list[Item]:
        """The items shown below the header, in order."""
        return [item for item in self.items if not item.hidden]

    def select(self, row: int) -> Item | None:
        """Choose the item on table row ``row``; the header and empty rows do nothing."""
        rows = self.visible_rows()
        if row < 1 or row > len(rows):
            return None
        item = rows[row - 1]
        if item.selected is not None:
            item.selected(item)
        return item


class SubMenu:
    """A centred dialog listing commands, closed with Escape."""

    def __init__(self, title: str) -> None:
        self.title = title
        self.heading = f"[::b]{title}"
        self.items: list[Item] = []
        self.width = 0
        self.height = 0
        self.cancel_handler: Callable[[], None] | None = None
        self.help_text = _help_text()

    def add_item(self, item: Item) -> None:
        self.items.append(item)
        self.items.sort(key=lambda entry: entry.index)
        self.refresh()

    def set_items(self, items: Iterable[Item]) -> None:
        self.items = list(items)
        self.refresh()

    def set_cancel_func(self, handler: Callable[[], None]) -> SubMenu:
        self.cancel_handler = handler
        return self

    def refresh(self) -> None:
        """Recompute the dialog size from the items."""
        visible = [item for item in self.items if not item.hidden]
        name_width = max((_width(item.name) for item in visible), default=0)
        desc_width = max((_width(item.description) for item in visible), default=0)
        self.width = name_width + desc_width + 2 + _CMD_WIDTH_OFFSET
        self.height = len(self.items) + TABLE_HEIGHT_OFFSET + DIALOG_HELP_HEIGHT + 1

    def select(self, row: int) -> Item | None:
        """Choose ``items[row - 1]``; row 0 is the header and does nothing."""
        if row == 0:
            return None
        if row < 0 or row > len(self.items):
            raise IndexError(f"no menu item on row {row}")
        item = self.items[row - 1]
        if item.selected is not None:
            item.selected(item)
        return item

    def cancel(self) -> bool:
        """Run the cancel handler; return whether there was one."""
        if self.cancel_handler is None:
            return False
        self.cancel_handler()
        return True

    def place(self, x: int, y: int, width: int, height: int) -> Rect:
        """Return the dialog rectangle centred in the given area."""
        left = (width - self.width) // 2
        top = y + (height - self.height) // 2
        box_width = self.width
        if self.width > width:
            left = 0
            box_width = width - 1
        box_height = self.height
        if self.height >= height:
            top = y + 1
            box_height = height - 1
        return Rect(x + left, top, box_width, box_height)