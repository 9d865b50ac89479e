# ==============================================================================
# RESOURCE HEADER MODULE
# ==============================================================================
# Parser/builder for the 64-byte header at the start of every resource stored
# in an O2R archive, plus the static resource-type registry.
#
# Header layout (all integers little-endian, whatever the endianness byte says
# about the payload):
#   [0]       endianness      u8   (0 = little-endian payload)
#   [1]       is_custom       u8   (bool)
#   [2..4)    padding
#   [4..8)    resource type   u32  FourCC, e.g. bytes "MNAO" -> tag "OANM"
#   [8..12)   version         u32
#   [12..20)  unique id       u64
#   [20..64)  zero padding
#
# Usage:
#   header = parse_header(raw)            # None -> skip this entry
#   raw = build_header("Animation") + payload
#   entry = ResourceEntry("objects/x/gAnim", parse_header(raw), raw)
# ==============================================================================

import dataclasses
import struct
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from ..core.binary import fourcc_to_string, string_to_fourcc
from ..core.errors import UnknownResourceTypeError


# ==============================================================================
# CONSTANTS
# ==============================================================================

HEADER_SIZE = 64

# Unique id used for every resource synthesized by the editor
DEFAULT_UNIQUE_ID = 0xDEADBEEFDEADBEEF

# Archive-internal prefix found on cross-resource references
ARCHIVE_PATH_PREFIX = "__OTR__"

RESOURCE_TYPES = MappingProxyType({
    "OARR": "Array",
    "OANM": "Animation",
    "OPAM": "Player Animation",
    "OROM": "Room",
    "OCOL": "Collision Header",
    "OSKL": "Skeleton",
    "OSLB": "Skeleton Limb",
    "OPTH": "Path",
    "OCUT": "Cutscene",
    "OTXT": "Text",
    "OAUD": "Audio",
    "OSMP": "Audio Sample",
    "OSFT": "Audio SoundFont",
    "OSEQ": "Audio Sequence",
    "OBGI": "Background",
    "ORCM": "Scene Command",
    "ODLT": "Display List",
    "LGTS": "Light",
    "OMTX": "Matrix",
    "OTEX": "Texture",
    "OVTX": "Vertex",
})

RESOURCE_TAGS = MappingProxyType({name: tag for tag, name in RESOURCE_TYPES.items()})

# Names the codecs dispatch on
TYPE_ANIMATION = "Animation"
TYPE_PLAYER_ANIMATION = "Player Animation"
TYPE_TEXT = "Text"
TYPE_TEXTURE = "Texture"


def strip_archive_prefix(path: str) -> str:
    """Remove a leading ``__OTR__`` from an archive-internal path."""
    if path.startswith(ARCHIVE_PATH_PREFIX):
        return path[len(ARCHIVE_PATH_PREFIX):]
    return path


def resolve_type_tag(name_or_tag: str) -> str:
    """
    Resolve a registry name ("Animation") or FourCC ("OANM") to its FourCC.

    Raises:
        UnknownResourceTypeError: If neither form is in the registry
    """
    if name_or_tag in RESOURCE_TAGS:
        return RESOURCE_TAGS[name_or_tag]
    if name_or_tag in RESOURCE_TYPES:
        return name_or_tag
    raise UnknownResourceTypeError(f"Unknown resource type: {name_or_tag!r}")


# ==============================================================================
# DATA CLASSES
# ==============================================================================

@dataclass
class ResourceHeader:
    """
    Decoded resource header.

    Attributes:
        endianness:       Payload byte order flag (0 = little-endian)
        is_custom:        Custom (non-vanilla) resource flag
        resource_type:    Registry name, e.g. "Animation"
        resource_version: Format revision of the payload
        unique_id:        64-bit resource identity
        type_tag:         Raw FourCC string, e.g. "OANM"
    """
    endianness: int = 0
    is_custom: bool = False
    resource_type: Optional[str] = None
    resource_version: int = 0
    unique_id: int = DEFAULT_UNIQUE_ID
    type_tag: str = ""

    def to_bytes(self) -> bytes:
        return build_header(
            self.type_tag or self.resource_type,
            self.resource_version,
            self.unique_id,
            self.is_custom,
            self.endianness,
        )


@dataclass
class ResourceEntry:
    """
    One resource in an archive or workspace.

    ``data`` holds the full bytes including the header; the payload view is
    derived from it so the two can never disagree.

    Attributes:
        path:   Archive path, unique within a collection
        header: Parsed header of ``data``
        data:   Full resource bytes
    """
    path: str
    header: ResourceHeader
    data: bytes

    @property
    def data_without_header(self) -> bytes:
        return self.data[HEADER_SIZE:]

    @property
    def resource_type(self) -> Optional[str]:
        return self.header.resource_type

    @property
    def name(self) -> str:
        """Last path component without an .o2r/.otr suffix."""
        base = self.path.rsplit("/", 1)[-1]
        for suffix in (".o2r", ".otr"):
            if base.endswith(suffix):
                return base[:-len(suffix)]
        return base

    @property
    def folder(self) -> str:
        return self.path.rsplit("/", 1)[0] if "/" in self.path else ""

    def with_data(self, data: bytes) -> "ResourceEntry":
        """
        Return a copy holding ``data``, with the header re-parsed from it.

        Raises:
            UnknownResourceTypeError: If the new bytes carry no valid header
        """
        header = parse_header(data)
        if header is None:
            raise UnknownResourceTypeError(
                f"New data for {self.path} does not start with a recognized resource header"
            )
        return ResourceEntry(self.path, header, bytes(data))

    def with_payload(self, payload: bytes) -> "ResourceEntry":
        """Return a copy with the payload replaced and the header kept."""
        return ResourceEntry(self.path, self.header, self.data[:HEADER_SIZE] + bytes(payload))

    def with_path(self, path: str) -> "ResourceEntry":
        return dataclasses.replace(self, path=path)

    def describe(self) -> str:
        """Short description, e.g. ``Texture (4.06 KB)``."""
        return f"{self.header.resource_type} ({len(self.data) / 1024:.2f} KB)"


# ==============================================================================
# PARSE / BUILD
# ==============================================================================

def parse_header(data: bytes) -> Optional[ResourceHeader]:
    """
    Parse the 64-byte resource header.

    Args:
        data: Resource bytes (at least the header)

    Returns:
        ResourceHeader, or None if the buffer is shorter than 64 bytes or the
        type tag is not in the registry. Callers treat None as "skip".
    """
    if data is None or len(data) < HEADER_SIZE:
        return None

    type_value, version, unique_id = struct.unpack_from("<IIQ", data, 4)
    tag = fourcc_to_string(type_value)
    name = RESOURCE_TYPES.get(tag)
    if name is None:
        return None

    return ResourceHeader(
        endianness=data[0],
        is_custom=data[1] != 0,
        resource_type=name,
        resource_version=version,
        unique_id=unique_id,
        type_tag=tag,
    )


def build_header(resource_type: str, resource_version: int = 0,
                 unique_id: int = DEFAULT_UNIQUE_ID, is_custom: bool = False,
                 endianness: int = 0) -> bytes:
    """
    Build a 64-byte resource header.

    Args:
        resource_type: Registry name ("Texture") or FourCC ("OTEX")
        resource_version: Payload format revision
        unique_id: 64-bit identity (sentinel 0xDEADBEEFDEADBEEF by default)
        is_custom: Custom resource flag
        endianness: Payload byte order flag

    Returns:
        Exactly 64 bytes

    Raises:
        UnknownResourceTypeError: If resource_type is not in the registry
    """
    tag = resolve_type_tag(resource_type)

    header = bytearray(HEADER_SIZE)
    header[0] = endianness & 0xFF
    header[1] = 1 if is_custom else 0
    struct.pack_into(
        "<IIQ", header, 4,
        string_to_fourcc(tag),
        resource_version & 0xFFFFFFFF,
        unique_id & 0xFFFFFFFFFFFFFFFF,
    )
    return bytes(header)


def create_resource(path: str, type_name: str, payload: bytes,
                    version: int = 0, unique_id: int = DEFAULT_UNIQUE_ID,
                    is_custom: bool = False, endianness: int = 0) -> ResourceEntry:
    """
    Build a new resource from a payload with a freshly synthesized header.

    Args:
        path: Archive path of the new resource
        type_name: Registry name ("Animation") or FourCC ("OANM")
        payload: Bytes following the header
        version: Resource version
        unique_id: 64-bit identity
        is_custom: Custom resource flag
        endianness: Payload byte order flag

    Raises:
        UnknownResourceTypeError: If type_name is not in the registry
    """
    data = build_header(type_name, version, unique_id, is_custom, endianness) + bytes(payload)
    return ResourceEntry(path, parse_header(data), data)
