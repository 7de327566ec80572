"""The information bar: a two-column table of status labels and values."""

from __future__ import annotations

from chatlog.ui.style import get_color_hex, get_color_name, palette_for

TITLE = "infobar"
INFO_BAR_VIEW_HEIGHT = 7

ACCOUNT_ROW = 0
STATUS_ROW = 1
PLATFORM_ROW = 2
SESSION_ROW = 3
DATA_USAGE_ROW = 4
WORK_USAGE_ROW = 5
HTTP_SERVER_ROW = 6

LABEL_COL1 = 0
VALUE_COL1 = 1
LABEL_COL2 = 2
VALUE_COL2 = 3
TOTAL_COLS = 4

LABELS = (
    ("Account:", "PID:"),
    ("Status:", "ExePath:"),
    ("Platform:", "Version:"),
    ("Session:", "Data Key:"),
    ("Data Usage:", "Data Dir:"),
    ("Work Usage:", "Work Dir:"),
    ("HTTP Server:", "Auto Decrypt:"),
)


class InfoBar:
    """Holds the text of every cell; labels carry colour markup."""

    def __init__(self) -> None:
        self.title = TITLE
        color = palette_for().info_bar_item_fg_color
        header = get_color_name(color) or get_color_hex(color, False)
        self._cells: list[list[str]] = [
            [f" [{header}::]{left}", "", f" [{header}::]{right}", ""]
            for left, right in LABELS
        ]

    def _set(self, row: int, col: int, text: str) -> None:
        self._cells[row][col] = text

    def update_account(self, account: str) -> None:
        self._set(ACCOUNT_ROW, VALUE_COL1, account)

    def update_basic_info(self, pid: int, version: str, exe_path: str) -> None:
        self._set(ACCOUNT_ROW, VALUE_COL2, f"{pid:d}")
        self._set(STATUS_ROW, VALUE_COL2, exe_path)
        self._set(PLATFORM_ROW, VALUE_COL2, version)

    def update_status(self, status: str) -> None:
        self._set(STATUS_ROW, VALUE_COL1, status)

    def update_platform(self, text: str) -> None:
        self._set(PLATFORM_ROW, VALUE_COL1, text)

    def update_session(self, text: str) -> None:
        self._set(SESSION_ROW, VALUE_COL1, text)

    def update_data_key(self, key: str) -> None:
        self._set(SESSION_ROW, VALUE_COL2, key)

    def update_data_usage_dir(self, data_usage: str, data_dir: str) -> None:
        self._set(DATA_USAGE_ROW, VALUE_COL1, data_usage)
        self._set(DATA_USAGE_ROW, VALUE_COL2, data_dir)

    def update_work_usage_dir(self, work_usage: str, work_dir: str) -> None:
        self._set(WORK_USAGE_ROW, VALUE_COL1, work_usage)
        self._set(WORK_USAGE_ROW, VALUE_COL2, work_dir)

    def update_http_server(self, server: str) -> None:
        self._set(HTTP_SERVER_ROW, VALUE_COL1, server)

    def update_auto_decrypt(self, text: str) -> None:
        self._set(HTTP_SERVER_ROW, VALUE_COL2, text)

    def rows(self) -> list[tuple[str, str, str, str]]:
        """Return each row as (label, value, label, value)."""
        return [(row[0], row[1], row[2], row[3]) for row in self._cells]