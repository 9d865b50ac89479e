# ==============================================================================
# MESSAGE PARSER MODULE
# ==============================================================================
# Codec for "Text" resources: the in-game message tables.
#
# File Structure:
#   - Header: the standard 64-byte resource header ("OTXT", version 0,
#     unique id 0xDEADBEEFDEADBEEF). The game checks these bytes exactly.
#   - u32 message count
#   - Records: u16 id, u8 textbox type, u8 textbox y position,
#              u32 length, length bytes of message data
#
# Message Data:
#   Bytes >= 0x20 are text. Bytes < 0x20 are control codes, some followed by
#   argument bytes (TEXTID takes 2, BACKGROUND takes 3, COLOR takes 1, ...).
#
# Editable Text Form:
#   Hello[NEWLINE][COLOR(0x41)]world[END]
#   Control codes as [NAME] or [NAME(0xHH, ...)], codes with no table name as
#   [CTRL_HH], and \xHH for bytes >= 0x7F and for literal '[' and '\'.
#   message_to_text() and text_to_message() are exact inverses.
#
# Usage:
#   messages = parse_messages(resource.data)
#   text = message_to_text(messages[0].data)
#   messages[0] = messages[0].with_data(text_to_message(text + "[END]"))
#   resource = resource.with_data(messages_to_bytes(messages))
# ==============================================================================

import re
import struct
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Sequence, Tuple

from ..core.errors import MessageFormatError
from .resource_header import DEFAULT_UNIQUE_ID, HEADER_SIZE, TYPE_TEXT, build_header


# ==============================================================================
# CONTROL CODES
# ==============================================================================

CONTROL_CODES = MappingProxyType({
    "NEWLINE": 0x01,
    "END": 0x02,
    "BOX_BREAK": 0x04,
    "COLOR": 0x05,
    "SHIFT": 0x06,
    "TEXTID": 0x07,
    "QUICKTEXT_ENABLE": 0x08,
    "QUICKTEXT_DISABLE": 0x09,
    "PERSISTENT": 0x0A,
    "EVENT": 0x0B,
    "BOX_BREAK_DELAYED": 0x0C,
    "AWAIT_BUTTON_PRESS": 0x0D,
    "FADE": 0x0E,
    "NAME": 0x0F,
    "OCARINA": 0x10,
    "FADE2": 0x11,
    "SFX": 0x12,
    "ITEM_ICON": 0x13,
    "TEXT_SPEED": 0x14,
    "BACKGROUND": 0x15,
    "MARATHON_TIME": 0x16,
    "RACE_TIME": 0x17,
    "POINTS": 0x18,
    "TOKENS": 0x19,
    "UNSKIPPABLE": 0x1A,
    "TWO_CHOICE": 0x1B,
    "THREE_CHOICE": 0x1C,
    "FISH_INFO": 0x1D,
    "HIGHSCORE": 0x1E,
    "TIME": 0x1F,
})

CONTROL_CODE_NAMES = MappingProxyType({code: name for name, code in CONTROL_CODES.items()})

# Argument bytes following each control code (codes not listed take none)
_CONTROL_CODE_ARITY = MappingProxyType({
    0x07: 2,
    0x11: 2,
    0x12: 2,
    0x15: 3,
    0x05: 1,
    0x06: 1,
    0x0C: 1,
    0x0E: 1,
    0x13: 1,
    0x14: 1,
    0x1E: 1,
})

# First byte value that is text rather than a control code
TEXT_START = 0x20
# First byte value that is escaped in editable text
ESCAPE_START = 0x7F
# Text bytes that would be misread as markup
_ESCAPED_TEXT_BYTES = (ord("["), ord("\\"))

MESSAGE_TABLE_MIN_SIZE = HEADER_SIZE + 4
DEFAULT_PREVIEW_LENGTH = 80

_UNNAMED_CODE_RE = re.compile(r"^CTRL_([0-9A-Fa-f]{2})$")
_HEX_ESCAPE_RE = re.compile(r"\\[xX]([0-9A-Fa-f]{2})")


def control_code_arity(code: int) -> int:
    """Number of argument bytes after control code ``code``."""
    return _CONTROL_CODE_ARITY.get(code, 0)


def control_code_name(code: int) -> str:
    """Table name of a control code, or ``CTRL_HH`` for unnamed codes."""
    return CONTROL_CODE_NAMES.get(code, f"CTRL_{code:02X}")


def lookup_control_code(name: str) -> int:
    """
    Resolve a control code name (including ``CTRL_HH``) to its byte.

    Returns:
        The code, or -1 if the name is unknown
    """
    name = name.strip()
    if name in CONTROL_CODES:
        return CONTROL_CODES[name]
    match = _UNNAMED_CODE_RE.match(name)
    if match:
        code = int(match.group(1), 16)
        if code < TEXT_START:
            return code
    return -1


# ==============================================================================
# DATA CLASSES
# ==============================================================================

@dataclass
class MessageToken:
    """
    One run of message data.

    Attributes:
        kind: "control" or "text"
        value: Control code name, or the run's editable text
        data: Raw bytes of the run (code plus arguments, or text bytes)
    """
    kind: str
    value: str
    data: bytes

    @property
    def is_control(self) -> bool:
        return self.kind == "control"

    @property
    def args(self) -> bytes:
        return self.data[1:] if self.is_control else b""


@dataclass
class MessageEntry:
    """
    A single message from a message table.

    Attributes:
        id: Message id
        textbox_type: Textbox style
        textbox_y_pos: Textbox vertical position
        data: Raw message bytes
        preview: Short readable summary (generated when empty)
    """
    id: int
    textbox_type: int
    textbox_y_pos: int
    data: bytes = b""
    preview: str = field(default="", compare=False)

    def __post_init__(self):
        self.data = bytes(self.data)
        if not self.preview:
            self.preview = generate_preview(self.data)

    @property
    def text(self) -> str:
        return message_to_text(self.data)

    def with_data(self, data: bytes) -> "MessageEntry":
        """Return a copy holding ``data`` with a regenerated preview."""
        return MessageEntry(self.id, self.textbox_type, self.textbox_y_pos, bytes(data))


# ==============================================================================
# TABLE PARSING / WRITING
# ==============================================================================

def parse_messages(data: bytes) -> List[MessageEntry]:
    """
    Parse a message table resource.

    Parsing stops quietly at the first record that runs past the buffer.
    Records with no data are left out.

    Args:
        data: Full resource bytes (header included)

    Returns:
        Messages in table order
    """
    messages: List[MessageEntry] = []
    if len(data) < MESSAGE_TABLE_MIN_SIZE:
        return messages

    count = struct.unpack_from("<I", data, HEADER_SIZE)[0]
    offset = MESSAGE_TABLE_MIN_SIZE

    for _ in range(count):
        if offset + 8 > len(data):
            break

        message_id, textbox_type, textbox_y_pos, length = struct.unpack_from("<HBBI", data, offset)
        offset += 8

        if offset + length > len(data):
            break

        message_data = data[offset:offset + length]
        offset += length

        if message_data:
            messages.append(MessageEntry(message_id, textbox_type, textbox_y_pos, message_data))

    return messages


def messages_to_bytes(messages: Sequence[MessageEntry]) -> bytes:
    """Encode messages as a full "Text" resource (header included)."""
    out = bytearray(build_header(TYPE_TEXT, 0, DEFAULT_UNIQUE_ID))
    out += struct.pack("<I", len(messages))
    for message in messages:
        out += struct.pack(
            "<HBBI",
            message.id & 0xFFFF,
            message.textbox_type & 0xFF,
            message.textbox_y_pos & 0xFF,
            len(message.data),
        )
        out += message.data
    return bytes(out)


# ==============================================================================
# MESSAGE DATA <-> TEXT
# ==============================================================================

def _escape_byte(value: int) -> str:
    return f"\\x{value:02X}"


def _text_byte(value: int) -> str:
    if value >= ESCAPE_START or value in _ESCAPED_TEXT_BYTES:
        return _escape_byte(value)
    return chr(value)


def tokenize_message(data: bytes) -> List[MessageToken]:
    """
    Split message data into control code and text runs.

    A control code at the very end keeps only the argument bytes present.
    """
    tokens: List[MessageToken] = []
    i = 0

    while i < len(data):
        byte = data[i]

        if byte < TEXT_START:
            end = min(len(data), i + 1 + control_code_arity(byte))
            tokens.append(MessageToken("control", control_code_name(byte), bytes(data[i:end])))
            i = end
            continue

        start = i
        while i < len(data) and data[i] >= TEXT_START:
            i += 1
        run = bytes(data[start:i])
        tokens.append(MessageToken("text", "".join(_text_byte(b) for b in run), run))

    return tokens


def format_control_code(code: int, args: Sequence[int] = ()) -> str:
    """Format a control code, e.g. ``[TEXTID(0x12, 0x34)]``."""
    name = control_code_name(code)
    if args:
        return f"[{name}({', '.join(f'0x{arg & 0xFF:02X}' for arg in args)})]"
    return f"[{name}]"


def message_to_text(data: bytes) -> str:
    """Render message data in editable text form."""
    parts = []
    for token in tokenize_message(data):
        if token.is_control:
            parts.append(format_control_code(token.data[0], token.args))
        else:
            parts.append(token.value)
    return "".join(parts)


def _parse_args(args_text: str) -> List[int]:
    args = []
    for arg in args_text.split(","):
        arg = arg.strip()
        if not arg:
            continue
        try:
            value = int(arg[2:], 16) if arg.lower().startswith("0x") else int(arg, 10)
        except ValueError:
            continue
        args.append(value & 0xFF)
    return args


def text_to_message(text: str) -> bytes:
    """
    Convert editable text back to message data.

    Unknown control code names are dropped. A '[' with no closing ']' is
    kept as a literal character.

    Raises:
        MessageFormatError: If the text holds a character above U+00FF
    """
    out = bytearray()
    i = 0

    while i < len(text):
        char = text[i]

        if char == "[":
            end = text.find("]", i)
            if end != -1:
                body = text[i + 1:end]
                paren = body.find("(")
                name = body[:paren] if paren != -1 else body
                code = lookup_control_code(name)
                if code != -1:
                    out.append(code)
                    if paren != -1:
                        out += bytes(_parse_args(body[paren + 1:].rstrip(")")))
                i = end + 1
                continue

        elif char == "\\":
            match = _HEX_ESCAPE_RE.match(text, i)
            if match:
                out.append(int(match.group(1), 16))
                i = match.end()
                continue

        value = ord(char)
        if value > 0xFF:
            raise MessageFormatError(
                f"Character {char!r} at position {i} cannot be stored in a message; "
                f"use a \\xHH escape"
            )
        out.append(value)
        i += 1

    return bytes(out)


def insert_control_code(text: str, cursor: int, code: int,
                        args: Sequence[int] = ()) -> Tuple[str, int]:
    """
    Insert a formatted control code into editable text.

    Args:
        text: Editable text
        cursor: Insert position (clamped to the text)
        code: Control code byte
        args: Argument bytes

    Returns:
        (new_text, new_cursor) with the cursor just after the inserted code
    """
    cursor = max(0, min(cursor, len(text)))
    snippet = format_control_code(code, args)
    return text[:cursor] + snippet + text[cursor:], cursor + len(snippet)


def generate_preview(data: bytes, limit: int = DEFAULT_PREVIEW_LENGTH) -> str:
    """
    Short readable summary of message data.

    Control codes and their arguments are skipped. Stops once ``limit``
    characters are produced and appends "..." if data remains.
    """
    preview = ""
    i = 0

    while i < len(data) and len(preview) < limit:
        byte = data[i]
        if byte < TEXT_START:
            i += control_code_arity(byte)
        elif byte < ESCAPE_START:
            preview += chr(byte)
        else:
            preview += _escape_byte(byte)
        i += 1

    if i < len(data):
        preview += "..."
    return preview


# ==============================================================================
# TEXT DOCUMENT
# ==============================================================================
# Whole-table editing format, one message per line:
#   0071<TAB>00<TAB>00<TAB>You got the [COLOR(0x41)]Kokiri Sword[COLOR(0x40)]![END]

DOCUMENT_HEADER = "# id\ttype\typos\ttext"


def messages_to_document(messages: Sequence[MessageEntry]) -> str:
    lines = [DOCUMENT_HEADER]
    for message in messages:
        lines.append(
            f"{message.id:04X}\t{message.textbox_type:02X}\t{message.textbox_y_pos:02X}\t"
            f"{message_to_text(message.data)}"
        )
    return "\n".join(lines) + "\n"


def document_to_messages(document: str) -> List[MessageEntry]:
    """
    Parse a message text document.

    Blank lines and lines starting with '#' are ignored.

    Raises:
        MessageFormatError: With the line number of the first malformed line
    """
    messages: List[MessageEntry] = []

    for line_number, line in enumerate(document.splitlines(), 1):
        if not line.strip() or line.startswith("#"):
            continue

        fields = line.split("\t", 3)
        if len(fields) != 4:
            raise MessageFormatError(
                f"Line {line_number}: expected id, type, ypos and text separated by tabs"
            )

        try:
            message_id = int(fields[0], 16)
            textbox_type = int(fields[1], 16)
            textbox_y_pos = int(fields[2], 16)
        except ValueError as e:
            raise MessageFormatError(f"Line {line_number}: invalid hex field ({e})") from e

        if not 0 <= message_id <= 0xFFFF:
            raise MessageFormatError(f"Line {line_number}: message id {fields[0]} out of range")
        if not 0 <= textbox_type <= 0xFF or not 0 <= textbox_y_pos <= 0xFF:
            raise MessageFormatError(f"Line {line_number}: textbox field out of range")

        try:
            data = text_to_message(fields[3])
        except MessageFormatError as e:
            raise MessageFormatError(f"Line {line_number}: {e}") from e

        messages.append(MessageEntry(message_id, textbox_type, textbox_y_pos, data))

    return messages
