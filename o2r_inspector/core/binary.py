# ==============================================================================
# BINARY PRIMITIVES
# ==============================================================================
# Fixed-width integer reads/writes and FourCC conversion shared by every
# format parser in the package.
#
# All resource formats are little-endian on disk. The only big-endian values
# are the 16-bit texels of RGBA16 textures (handled in texture_parser) and
# the legacy Link animation data revision, which BinaryReader supports through
# its big_endian flag.
#
# Usage:
#   reader = BinaryReader(payload)
#   anim_type = reader.uint32()
#   frame_count = reader.uint16()
#   values = [reader.int16() for _ in range(count)]
# ==============================================================================

import struct
from typing import Optional

from .errors import TruncatedDataError


# ==============================================================================
# BINARY READER
# ==============================================================================

class BinaryReader:
    """
    Cursor over a bytes buffer with typed reads.

    Reads never go past ``end``; an overrun raises TruncatedDataError instead
    of silently returning short data. Codecs rely on this to turn truncated
    buffers into structural errors.

    Args:
        data: Buffer to read from (never modified)
        offset: Starting position
        end: Exclusive read boundary (defaults to len(data))
        big_endian: Read 16-bit values big-endian
    """

    __slots__ = ("_data", "_pos", "_end", "_prefix")

    def __init__(self, data: bytes, offset: int = 0, end: Optional[int] = None,
                 big_endian: bool = False):
        self._data = data
        self._pos = offset
        self._end = len(data) if end is None else min(end, len(data))
        self._prefix = ">" if big_endian else "<"

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return self._end - self._pos

    def _read(self, size: int) -> bytes:
        if size < 0 or self._pos + size > self._end:
            raise TruncatedDataError(self._pos, size, self._end)
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def uint8(self) -> int:
        return self._read(1)[0]

    def uint16(self) -> int:
        return struct.unpack(self._prefix + "H", self._read(2))[0]

    def int16(self) -> int:
        return struct.unpack(self._prefix + "h", self._read(2))[0]

    def uint32(self) -> int:
        return struct.unpack("<I", self._read(4))[0]

    def uint64(self) -> int:
        return struct.unpack("<Q", self._read(8))[0]

    def bytes(self, size: int) -> bytes:
        return bytes(self._read(size))

    def skip(self, size: int):
        self._read(size)


# ==============================================================================
# PACKING HELPERS
# ==============================================================================

def pack_u16(value: int) -> bytes:
    return struct.pack("<H", value & 0xFFFF)


def pack_i16(value: int) -> bytes:
    """Pack a signed 16-bit value; out-of-range values wrap like the game does."""
    return struct.pack("<h", wrap_i16(value))


def pack_u32(value: int) -> bytes:
    return struct.pack("<I", value & 0xFFFFFFFF)


def pack_u64(value: int) -> bytes:
    return struct.pack("<Q", value & 0xFFFFFFFFFFFFFFFF)


def wrap_i16(value: int) -> int:
    """Reinterpret the low 16 bits of ``value`` as a signed integer."""
    value &= 0xFFFF
    return value - 0x10000 if value > 0x7FFF else value


# ==============================================================================
# FOURCC
# ==============================================================================

def fourcc_to_string(value: int) -> str:
    """
    Convert a 32-bit tag to its 4-character string.

    The most significant byte is the first character, so the tag read as a
    little-endian u32 from bytes ``MNAO`` becomes ``"OANM"``.
    """
    return "".join(chr((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def string_to_fourcc(text: str) -> int:
    """Inverse of fourcc_to_string."""
    if len(text) != 4:
        raise ValueError("FourCC string must be exactly 4 characters")
    value = 0
    for ch in text:
        value = (value << 8) | (ord(ch) & 0xFF)
    return value


# ==============================================================================
# HEX DUMP
# ==============================================================================

def format_hex_dump(data: bytes, bytes_per_line: int = 16) -> str:
    """
    Format bytes as a hex listing for display.

    Each line is ``offset  hex bytes (two groups of 8)  |ascii|``; bytes
    outside the printable ASCII range show as ``.`` in the ascii column.

    Args:
        data: Bytes to format
        bytes_per_line: Bytes shown per line

    Returns:
        Multi-line string (empty for empty input)
    """
    lines = []
    half = bytes_per_line // 2

    for start in range(0, len(data), bytes_per_line):
        chunk = data[start:start + bytes_per_line]
        cells = [f"{b:02x}" for b in chunk] + ["  "] * (bytes_per_line - len(chunk))
        ascii_col = "".join(chr(b) if 32 <= b <= 126 else "." for b in chunk)
        ascii_col += " " * (bytes_per_line - len(chunk))

        hex_col = " ".join(cells[:half]) + "  " + " ".join(cells[half:])
        lines.append(f"{start:08x}  {hex_col}  |{ascii_col}|")

    return "\n".join(lines)
