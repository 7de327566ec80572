"""The help page shown beside the main menu."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from chatlog.ui.style import Color, palette_for

TITLE = "help"
SHOW_TITLE = "帮助"

_HOST = "http://localhost:5030"


def _key(name: str) -> str:
    return f"[yellow]{name}[white]"


def _heading(name: str) -> str:
    return f"[green]{name}:[white]"


def _bullets(*lines: str) -> list[str]:
    return [f"• {line}" for line in lines]


def _step(number: int, name: str, *details: str) -> list[str]:
    return [_key(f"{number}. {name}"), *(f"   {line}" for line in details), ""]


def _build_content() -> str:
    endpoints = {
        "聊天记录": "chatlog?time=2023-01-01&talker=wxid_xxx",
        "联系人列表": "contact",
        "群聊列表": "chatroom",
        "会话列表": "session",
    }
    lines: list[str] = [
        _key("Chatlog 使用指南"),
        "",
        _heading("基本操作"),
        *_bullets(
            f"{_key('←→')} 键：切换主菜单与帮助页面",
            f"{_key('↑↓')} 键：在菜单项之间移动",
            f"{_key('Enter')}：选择当前菜单项",
            f"{_key('Esc')}：返回上一级菜单",
            f"{_key('Ctrl+C')}：退出程序",
        ),
        "",
        _heading("使用步骤"),
        "",
        *_step(1, "安装微信客户端"),
        *_step(
            2,
            "把手机上的聊天记录迁移到电脑",
            f"在手机微信中依次进入 {_key('我 - 设置 - 通用 - 聊天记录迁移与备份 - 迁移 - 迁移到电脑')}。",
            "这样手机里的聊天记录会被传到电脑上，手机上的记录保持不变。",
        ),
        *_step(
            3,
            "解密数据",
            '再次打开 chatlog，选择"解密数据"，程序用取得的密钥解密数据库文件。',
            "解密结果保存在工作目录中，工作目录可在设置里修改。",
        ),
        *_step(
            4,
            "启动 HTTP 服务",
            '选择"启动 HTTP 服务"，同时启动 HTTP 与 MCP 服务。',
            f"之后可在浏览器中打开 {_HOST} 浏览聊天记录。",
        ),
        *_step(
            5,
            "设置选项",
            '在"设置"中可以修改:',
            "• HTTP 服务端口：服务监听的端口",
            "• 工作目录：解密数据存放的位置",
        ),
        _heading("HTTP API 使用"),
        *_bullets(
            *(
                f"{label}: {_key(f'GET {_HOST}/api/v1/{path}')}"
                for label, path in endpoints.items()
            )
        ),
        "",
        _heading("MCP 集成"),
        "Chatlog 支持 Model Context Protocol，能够接入支持 MCP 的 AI 助手，",
        "让助手直接查询聊天记录、联系人与群聊信息。",
        "",
        _heading("常见问题"),
        *_bullets(
            "获取密钥失败时，请确认微信正在运行",
            "解密失败时，请确认密钥是否获取正确",
            "HTTP 服务无法启动时，请确认端口未被占用",
            "数据目录与工作目录会被记住，下次启动自动载入",
        ),
        "",
        _heading("数据安全"),
        *_bullets(
            "全部处理都在本机完成，不会向外部服务器上传数据",
            "解密后的数据请妥善保存，谨防隐私泄露",
        ),
    ]
    return "\n".join(lines) + "\n"


CONTENT = _build_content()

_COLOR = r"(?:[a-zA-Z]+|#[0-9a-zA-Z]{6}|-)"
_TAG = re.compile(
    rf"\[(?!\])(?:{_COLOR})?(?::(?:{_COLOR})?(?::(?:[lbidrus]+|-)?)?)?\]"
)


def strip_color_tags(text: str) -> str:
    """Remove ``[fg:bg:attrs]`` colour markup from ``text``."""
    return _TAG.sub("", text)


@dataclass
class Help:
    """The help page: a titled, bordered block of marked-up text."""

    title: str = TITLE
    show_title: str = SHOW_TITLE
    content: str = CONTENT
    border_color: Color = field(default_factory=lambda: palette_for().border_color)

    def plain(self) -> str:
        """Return the content without colour markup."""
        return strip_color_tags(self.content)