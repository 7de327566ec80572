# chatlog

Data models for the records stored in chat history databases, and the
state behind a small terminal interface for browsing them.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Models: `chatlog.model`

Each storage layout has its own row dataclass. Every row type has a
`wrap()` method that returns one shared model.

- `chatlog.model.contact`: `ContactV3`, `ContactDarwinV3` and `ContactV4`
  wrap into `Contact`. `Contact.display_name()` returns the remark, or the
  nickname if there is no remark, or `''`.
- `chatlog.model.session`: `SessionV3`, `SessionDarwinV3` and `SessionV4`
  wrap into `Session`. `Session.plain_text(limit)` renders two lines: the
  name, user name and time, then the content. The content is cut to `limit`
  UTF-8 bytes and followed by ` <...>` when it was cut. With `limit <= 0`
  the content is left out.
- `chatlog.model.media`: `MediaV3`, `MediaDarwinV3` and `MediaV4` wrap into
  `Media`. Its `path` is relative to the data directory.
- `chatlog.model.chatroom`: `ChatRoomV3` and `ChatRoomV4` decode their
  member list from a protobuf blob. A malformed blob gives no members.
  `ChatRoomDarwinV3.wrap(user2displayname)` splits a `;`-separated member
  list instead. `display_name_map(users)` maps user names to their non-empty
  display names.
- `chatlog.model.mediamessage`: `parse_media_msg`, `parse_record_info` and
  `parse_sys_msg` turn the XML bodies of rich and system messages into
  dataclasses. Input that is not the expected document raises
  `MalformedXML`, which is a `ValueError`. `RecordInfo.to_text(title, host)`
  renders a forwarded bundle, including nested bundles.
  `SysMsg.text()` fills a template's `$name$` placeholders.
- `chatlog.model.message`:
  - `Message.parse_media_info(data)` splits the packed type into type and
    sub-type with `split_type`, then fills `content` and `contents`.
  - `Message.plain_text(show_chat_room, time_format, host)` renders a header
    line and a Markdown-flavoured body. Media links point at `host`.
  - `format_time(moment, layout)` formats a time with a reference-time
    layout such as `01-02 15:04:05`, which is the default.
  - `MessageDarwinV3.wrap(talker)` builds a message from a macOS row.
  - Setting the module flag `DEBUG` keeps the parsed XML on the message.
- `chatlog.model.message_versions`: `MessageV3.wrap()` and
  `MessageV4.wrap(talker)` build messages from v3 and v4 rows. They
  decompress LZ4 and zstd content and read the sender and file hashes from
  the extra protobuf data. `decompress_lz4` and `decompress_zstd` raise
  `ValueError` on bad input.

```python
from chatlog.model.contact import ContactV3
from chatlog.model.message import Message

contact = ContactV3(user_name="wxid_example", nick_name="Alice", reserved1=1).wrap()
print(contact.display_name(), contact.is_friend)  # Alice True

message = Message(type=1, sender="wxid_example")
message.parse_media_info("hello")
print(message.plain_text(False, "", "localhost:5030"))
```

## Interface state: `chatlog.ui`

These modules hold view state and layout arithmetic. They draw nothing.

- `style`: the `Palette` dataclass. `palette_for(windows)` picks the Windows
  palette or the palette for other terminals, and uses the current platform
  when `windows` is `None`. `get_color_name(color)` and
  `get_color_hex(color, windows)` turn a colour into text-markup form.
- `help`: `Help` holds the help page text. `Help.plain()` and
  `strip_color_tags(text)` remove the `[fg:bg:attrs]` markup.
- `menu`:
  - `Menu` keeps `Item`s ordered by `index`. `visible_rows()` returns the
    items that are not hidden, and `select(row)` calls the chosen item's
    callback.
  - `SubMenu` also computes its dialog size. `place(x, y, width, height)`
    returns a centred `Rect`, and `cancel()` runs the handler set with
    `set_cancel_func`.
- `form`: `Form` has input fields, checkboxes and buttons. It has its own
  size calculation, `place` and `cancel`.
- `infobar`: `InfoBar` has a seven-row table of labels and values, with
  `update_*` setters and `rows()`.
- `footer`: `Footer(version)` holds the copyright and key-help text.

## What this package does not do

It does not open, decrypt or query database files. It only models rows
that have already been read. It has no terminal application that draws
these views and no command to start one. It also has no HTTP or MCP
server: the help text describes such services, but this package does not
provide them.