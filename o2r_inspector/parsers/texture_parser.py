# ==============================================================================
# TEXTURE PARSER MODULE
# ==============================================================================
# Decoder for "Texture" resources (view-only, there is no encoder).
#
# Texture payload layout (after the 64-byte resource header):
#   u32 textureType, u32 width, u32 height, u32 dataSize   (little-endian)
#   dataSize bytes of pixel data
#
# Every format decodes to RGBA8888. Palette formats need a second texture
# (RGBA32 or RGBA16) holding the colors; indices past the end of the palette
# render as opaque magenta so missing entries are visible.
#
# Decoding never raises for bad input. A TextureDecodeResult carries either
# the pixels or a DecodeFailure saying what went wrong.
#
# Usage:
#   texture = parse_texture(resource.data_without_header)
#   result = decode_texture(texture, palette=parse_texture(tlut.data_without_header))
#   if result.ok:
#       result.to_image().save("texture.png")
# ==============================================================================

import struct
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

import numpy as np
from PIL import Image

from .resource_header import TYPE_TEXTURE, ResourceEntry


# ==============================================================================
# CONSTANTS
# ==============================================================================

TEXTURE_HEADER_SIZE = 16

# Color used for palette indices with no palette entry
MISSING_PALETTE_COLOR = (255, 0, 255, 255)

MAX_PALETTE_COLORS = 256


class TextureType(IntEnum):
    """Pixel formats, numbered as stored in the texture sub-header."""
    ERROR = 0
    RGBA32BPP = 1
    RGBA16BPP = 2
    PALETTE4BPP = 3
    PALETTE8BPP = 4
    GRAYSCALE4BPP = 5
    GRAYSCALE8BPP = 6
    GRAYSCALE_ALPHA4BPP = 7
    GRAYSCALE_ALPHA8BPP = 8
    GRAYSCALE_ALPHA16BPP = 9


class DecodeFailure(Enum):
    """Reasons a texture could not be decoded."""
    TOO_SHORT = "too_short"
    PALETTE_REQUIRED = "palette_required"
    UNSUPPORTED_PALETTE = "unsupported_palette"
    INSUFFICIENT_DATA = "insufficient_data"
    UNSUPPORTED_FORMAT = "unsupported_format"


PALETTE_FORMATS = (TextureType.PALETTE4BPP, TextureType.PALETTE8BPP)
PALETTE_SOURCE_FORMATS = (TextureType.RGBA32BPP, TextureType.RGBA16BPP)

# Bits per pixel of each decodable format
_BITS_PER_PIXEL = {
    TextureType.RGBA32BPP: 32,
    TextureType.RGBA16BPP: 16,
    TextureType.PALETTE4BPP: 4,
    TextureType.PALETTE8BPP: 8,
    TextureType.GRAYSCALE4BPP: 4,
    TextureType.GRAYSCALE8BPP: 8,
    TextureType.GRAYSCALE_ALPHA4BPP: 4,
    TextureType.GRAYSCALE_ALPHA8BPP: 8,
    TextureType.GRAYSCALE_ALPHA16BPP: 16,
}


# ==============================================================================
# DATA CLASSES
# ==============================================================================

@dataclass
class TextureData:
    """
    Parsed texture sub-header plus pixel bytes.

    Attributes:
        texture_type: Raw format number (see TextureType)
        width: Width in pixels
        height: Height in pixels
        data_size: Pixel byte count declared by the header
        pixel_data: Pixel bytes actually present (may be shorter than data_size)
    """
    texture_type: int
    width: int
    height: int
    data_size: int
    pixel_data: bytes

    @property
    def format_name(self) -> str:
        try:
            return TextureType(self.texture_type).name
        except ValueError:
            return f"UNKNOWN({self.texture_type})"

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def required_bytes(self) -> Optional[int]:
        """Pixel bytes needed for the declared size, None for unknown formats."""
        try:
            bits = _BITS_PER_PIXEL[TextureType(self.texture_type)]
        except (ValueError, KeyError):
            return None
        return (self.pixel_count * bits + 7) // 8


@dataclass
class TextureDecodeResult:
    """
    Outcome of decode_texture().

    Attributes:
        width, height: Image size
        rgba: width * height * 4 bytes when ok, otherwise empty
        error: Why decoding failed, None on success
        message: Human-readable detail for error
    """
    width: int = 0
    height: int = 0
    rgba: bytes = b""
    error: Optional[DecodeFailure] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_image(self) -> Image.Image:
        """
        Convert the decoded pixels to a Pillow RGBA image.

        Raises:
            ValueError: If decoding failed
        """
        if not self.ok:
            raise ValueError(f"Texture was not decoded: {self.message}")
        return Image.frombytes("RGBA", (self.width, self.height), self.rgba)


def _failure(error: DecodeFailure, message: str, width: int = 0,
             height: int = 0) -> TextureDecodeResult:
    return TextureDecodeResult(width, height, b"", error, message)


# ==============================================================================
# PARSING
# ==============================================================================

def parse_texture(payload: bytes) -> Optional[TextureData]:
    """
    Parse the texture sub-header.

    Args:
        payload: Bytes after the resource header

    Returns:
        TextureData, or None if shorter than the 16-byte sub-header
    """
    if payload is None or len(payload) < TEXTURE_HEADER_SIZE:
        return None

    texture_type, width, height, data_size = struct.unpack_from("<IIII", payload, 0)
    end = TEXTURE_HEADER_SIZE + data_size
    pixel_data = bytes(payload[TEXTURE_HEADER_SIZE:end])

    return TextureData(texture_type, width, height, data_size, pixel_data)


# ==============================================================================
# PIXEL CONVERSION
# ==============================================================================

def _scale5(values: np.ndarray) -> np.ndarray:
    """Scale 5-bit channels to 8 bits, rounding to nearest."""
    return (values * 255 + 15) // 31


def _rgba16_to_rgba32(data: bytes, count: int) -> np.ndarray:
    """Decode big-endian RGB5A1 words to an (count, 4) uint8 array."""
    words = np.frombuffer(data, dtype=">u2", count=count).astype(np.uint32)
    rgba = np.empty((count, 4), dtype=np.uint8)
    rgba[:, 0] = _scale5((words >> 11) & 0x1F)
    rgba[:, 1] = _scale5((words >> 6) & 0x1F)
    rgba[:, 2] = _scale5((words >> 1) & 0x1F)
    rgba[:, 3] = (words & 0x1) * 255
    return rgba


def _unpack_nibbles(data: bytes, count: int) -> np.ndarray:
    """Split bytes into 4-bit values, high nibble first."""
    packed = np.frombuffer(data, dtype=np.uint8, count=(count + 1) // 2)
    nibbles = np.empty(packed.size * 2, dtype=np.uint8)
    nibbles[0::2] = packed >> 4
    nibbles[1::2] = packed & 0x0F
    return nibbles[:count]


def _gray_alpha(gray: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    rgba = np.empty((gray.size, 4), dtype=np.uint8)
    rgba[:, 0] = gray
    rgba[:, 1] = gray
    rgba[:, 2] = gray
    rgba[:, 3] = alpha
    return rgba


def _palette_colors(palette: TextureData) -> np.ndarray:
    """Decode up to 256 palette colors to an (n, 4) uint8 array."""
    if len(palette.pixel_data) < 2:
        return np.zeros((0, 4), dtype=np.uint8)

    if palette.texture_type == TextureType.RGBA32BPP:
        count = min(MAX_PALETTE_COLORS, len(palette.pixel_data) // 4)
        if count == 0:
            return np.zeros((0, 4), dtype=np.uint8)
        return np.frombuffer(palette.pixel_data, dtype=np.uint8, count=count * 4).reshape(count, 4)

    count = min(MAX_PALETTE_COLORS, len(palette.pixel_data) // 2)
    return _rgba16_to_rgba32(palette.pixel_data, count)


def _lookup_palette(indices: np.ndarray, colors: np.ndarray) -> np.ndarray:
    """Map indices through a color table; missing entries become magenta."""
    table = np.empty((MAX_PALETTE_COLORS, 4), dtype=np.uint8)
    table[:] = MISSING_PALETTE_COLOR
    table[:len(colors)] = colors
    return table[indices]


# ==============================================================================
# DECODING
# ==============================================================================

def decode_texture(texture: Optional[TextureData],
                   palette: Optional[TextureData] = None) -> TextureDecodeResult:
    """
    Decode a texture to RGBA8888.

    Args:
        texture: Parsed texture (None means the payload was too short)
        palette: Parsed palette texture for PALETTE4BPP/PALETTE8BPP

    Returns:
        TextureDecodeResult; check ``ok`` before using ``rgba``
    """
    if texture is None:
        return _failure(DecodeFailure.TOO_SHORT,
                        f"Texture data is shorter than the {TEXTURE_HEADER_SIZE}-byte header")

    width, height = texture.width, texture.height
    count = texture.pixel_count

    try:
        texture_type = TextureType(texture.texture_type)
    except ValueError:
        texture_type = TextureType.ERROR
    if texture_type == TextureType.ERROR:
        return _failure(DecodeFailure.UNSUPPORTED_FORMAT,
                        f"Unsupported texture format: {texture.texture_type}", width, height)

    if texture_type in PALETTE_FORMATS:
        if palette is None:
            return _failure(DecodeFailure.PALETTE_REQUIRED,
                            f"{texture_type.name} texture needs a palette", width, height)
        if palette.texture_type not in PALETTE_SOURCE_FORMATS:
            return _failure(DecodeFailure.UNSUPPORTED_PALETTE,
                            f"Unsupported palette format: {palette.format_name}", width, height)

    required = texture.required_bytes()
    if len(texture.pixel_data) < required:
        return _failure(
            DecodeFailure.INSUFFICIENT_DATA,
            f"Insufficient data for {texture_type.name}: need {required} bytes, "
            f"have {len(texture.pixel_data)}",
            width, height,
        )

    data = texture.pixel_data

    if count == 0:
        return TextureDecodeResult(width, height, b"")

    if texture_type == TextureType.RGBA32BPP:
        rgba = np.frombuffer(data, dtype=np.uint8, count=count * 4).reshape(count, 4)
    elif texture_type == TextureType.RGBA16BPP:
        rgba = _rgba16_to_rgba32(data, count)
    elif texture_type == TextureType.GRAYSCALE8BPP:
        gray = np.frombuffer(data, dtype=np.uint8, count=count)
        rgba = _gray_alpha(gray, np.full(count, 255, dtype=np.uint8))
    elif texture_type == TextureType.GRAYSCALE4BPP:
        gray = _unpack_nibbles(data, count) * 17
        rgba = _gray_alpha(gray, np.full(count, 255, dtype=np.uint8))
    elif texture_type == TextureType.GRAYSCALE_ALPHA8BPP:
        raw = np.frombuffer(data, dtype=np.uint8, count=count)
        rgba = _gray_alpha((raw >> 4) * 17, (raw & 0x0F) * 17)
    elif texture_type == TextureType.GRAYSCALE_ALPHA4BPP:
        nibbles = _unpack_nibbles(data, count)
        rgba = _gray_alpha(((nibbles >> 2) & 0x3) * 85, (nibbles & 0x3) * 85)
    elif texture_type == TextureType.GRAYSCALE_ALPHA16BPP:
        raw = np.frombuffer(data, dtype=np.uint8, count=count * 2)
        rgba = _gray_alpha(raw[0::2], raw[1::2])
    elif texture_type == TextureType.PALETTE4BPP:
        rgba = _lookup_palette(_unpack_nibbles(data, count), _palette_colors(palette))
    else:
        indices = np.frombuffer(data, dtype=np.uint8, count=count)
        rgba = _lookup_palette(indices, _palette_colors(palette))

    return TextureDecodeResult(width, height, rgba.astype(np.uint8).tobytes())


def decode_texture_resource(resource: ResourceEntry,
                            palette_resource: Optional[ResourceEntry] = None
                            ) -> TextureDecodeResult:
    """
    Decode a "Texture" resource, optionally with a palette resource.

    Returns:
        TextureDecodeResult (UNSUPPORTED_FORMAT if the resource is not a texture)
    """
    if resource.resource_type != TYPE_TEXTURE:
        return _failure(DecodeFailure.UNSUPPORTED_FORMAT,
                        f"{resource.path} is a {resource.resource_type}, not a {TYPE_TEXTURE}")

    palette = None
    if palette_resource is not None:
        palette = parse_texture(palette_resource.data_without_header)

    return decode_texture(parse_texture(resource.data_without_header), palette)
