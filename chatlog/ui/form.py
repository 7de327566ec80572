"""A centred modal form with input fields, checkboxes, buttons and help text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Union

from chatlog.ui.menu import Rect
from chatlog.ui.style import get_color_hex, palette_for

DIALOG_PADDING = 3
DIALOG_HELP_HEIGHT = 1
DIALOG_MIN_WIDTH = 40
FORM_HEIGHT_OFFSET = 3
# Extra width beyond the longest label and value.
_FORM_WIDTH_OFFSET = 10


def _width(text: str) -> int:
    return len(text.encode("utf-8"))


@dataclass
class _InputField:
    label: str
    value: str
    field_width: int
    accept: Callable[[str, str], bool] | None = field(default=None, repr=False)
    changed: Callable[[str], None] | None = field(default=None, repr=False)
    text: str = ""

    def __post_init__(self) -> None:
        self.text = self.value

    def type_text(self, typed: str) -> str:
        """Append characters the accept check allows; report each change."""
        for char in typed:
            candidate = self.text + char
            if self.accept is not None and not self.accept(candidate, char):
                continue
            self.text = candidate
            if self.changed is not None:
                self.changed(self.text)
        return self.text


@dataclass
class _Checkbox:
    label: str
    checked: bool
    changed: Callable[[bool], None] | None = field(default=None, repr=False)

    def toggle(self) -> bool:
        self.checked = not self.checked
        if self.changed is not None:
            self.changed(self.checked)
        return self.checked


@dataclass
class _Button:
    label: str
    selected: Callable[[], None] | None = field(default=None, repr=False)

    def press(self) -> None:
        if self.selected is not None:
            self.selected()


_FormItem = Union[_InputField, _Checkbox]


def _help_text() -> str:
    palette = palette_for()
    key_color = get_color_hex(palette.menu_bg_color)
    text_color = get_color_hex(palette.page_header_fg_color)
    return "  ".join(
        f"[{key_color}::b]{key}[{text_color}::b]: {action}"
        for key, action in (("Tab", "导航"), ("Enter", "选择"), ("ESC", "返回"))
    )


class Form:
    """A titled dialog whose size follows its fields; Escape cancels it."""

    def __init__(self, title: str) -> None:
        self.title = title
        self.heading = f"[::b]{title}"
        self.help_text = _help_text()
        self.items: list[_FormItem] = []
        self.inputs: list[_InputField] = []
        self.buttons: list[_Button] = []
        self.cancel_handler: Callable[[], None] | None = None
        self.width = 0
        self.height = 0
        self.recalculate_size()

    def add_input_field(
        self,
        label: str,
        value: str,
        field_width: int,
        accept: Callable[[str, str], bool] | None = None,
        changed: Callable[[str], None] | None = None,
    ) -> Form:
        entry = _InputField(label, value, field_width, accept, changed)
        self.inputs.append(entry)
        self.items.append(entry)
        self.recalculate_size()
        return self

    def add_button(self, label: str, selected: Callable[[], None] | None = None) -> Form:
        self.buttons.append(_Button(label, selected))
        self.recalculate_size()
        return self

    def add_checkbox(
        self, label: str, checked: bool, changed: Callable[[bool], None] | None = None
    ) -> Form:
        self.items.append(_Checkbox(label, checked, changed))
        self.recalculate_size()
        return self

    def set_cancel_func(self, handler: Callable[[], None]) -> Form:
        self.cancel_handler = handler
        return self

    def recalculate_size(self) -> None:
        """Size the dialog: two rows per item plus buttons, border and help."""
        self.height = len(self.items) * 2 + 2 + FORM_HEIGHT_OFFSET + DIALOG_HELP_HEIGHT
        label_width = max((_width(f.label) for f in self.inputs), default=0)
        value_width = max(
            (max(f.field_width, _width(f.value)) for f in self.inputs), default=0
        )
        self.width = max(label_width + value_width + _FORM_WIDTH_OFFSET, DIALOG_MIN_WIDTH)

    def place(self, x: int, y: int, width: int, height: int) -> Rect:
        """Return the dialog rectangle centred in the given area, clipped to it."""
        self.recalculate_size()
        left = (width - self.width) // 2
        top = (height - self.height) // 2
        if self.width > width:
            left = 0
            self.width = width - 1
        if self.height > height:
            top = 0
            self.height = height - 1
        return Rect(x + left, y + top, self.width, self.height)

    def cancel(self) -> bool:
        """Run the cancel handler; return whether there was one."""
        if self.cancel_handler is None:
            return False
        self.cancel_handler()
        return True