# ==============================================================================
# ANIMATION PARSER MODULE
# ==============================================================================
# Codec for the two animation representations found in O2R archives, in both
# their binary resource form and their C source form.
#
# Key Concepts:
#   - Link animation: the player rig. Stored as TWO resources, an "Animation"
#     header that references a "Player Animation" data resource by path.
#   - Actor animation: every other animated entity. One "Animation" resource
#     holding rotation values, joint index triples and staticIndexMax.
#
# Binary Layouts (payload after the 64-byte resource header, little-endian):
#   Link header: u32 version(=1), u16 frameCount, u16 pathLength, u16 pad,
#                pathLength bytes of UTF-8 path ("__OTR__folder/name_Data")
#   Link data:   u32 valueCount, valueCount x s16
#   Actor:       u32 animType(=0), u16 frameCount, u32 n, n x u16,
#                u32 m, m x (u16, u16, u16), u16 staticIndexMax
#
# The leading u32 of an "Animation" payload decides the variant: 1 means a
# Link header, anything else is read as an Actor animation.
#
# C Source Form:
#   s16 gFooFrameData[4] = { 0x0000, -0x0010, ... };
#   JointIndex gFooJointIndices[2] = { { 0x0000, 0x0001, 0x0002, }, ... };
#   AnimationHeader gFoo = { { 10 }, gFooFrameData, gFooJointIndices, 3 };
#
#   s16 gPlayerAnim_Data[] = { 0x0001, ... };
#   LinkAnimationHeader gPlayerAnim = { { 10 }, gPlayerAnim_Data };
#
# Usage:
#   anim = parse_animation_from_resource(resource, archive_resources)
#   source = animation_to_c(anim)
#   anim = parse_animation_from_c(source)
#   header_entry, data_entry = split_link_animation(anim, "misc/link_animation")
# ==============================================================================

import re
import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from ..core.binary import BinaryReader, pack_i16, pack_u16, pack_u32, wrap_i16
from ..core.errors import (
    AnimationFormatError, AnimationSourceError, MissingCompanionError,
    PartialAnimationSourceError, TruncatedDataError,
)
from .resource_header import (
    ARCHIVE_PATH_PREFIX, DEFAULT_UNIQUE_ID, TYPE_ANIMATION,
    TYPE_PLAYER_ANIMATION, ResourceEntry, create_resource, strip_archive_prefix,
)


# ==============================================================================
# CONSTANTS
# ==============================================================================

# Leading u32 of an Animation payload
LINK_ANIMATION_DISCRIMINATOR = 1
ACTOR_ANIMATION_DISCRIMINATOR = 0

# Suffix of the data resource / data array belonging to a Link animation
LINK_DATA_SUFFIX = "_Data"

# Suffixes of the Actor C arrays
ACTOR_FRAME_DATA_SUFFIX = "FrameData"
ACTOR_JOINT_INDICES_SUFFIX = "JointIndices"

DEFAULT_VALUES_PER_LINE = 8

# Frame counts and staticIndexMax are stored as u16
MAX_U16_FIELD = 0xFFFF

ACTOR_SOURCE_INCLUDES = '#include "ultra64.h"\n#include "global.h"\n\n'

# C source patterns
_S16_ARRAY_RE = re.compile(r"s16\s+(\w+)\s*\[\s*\d*\s*\]\s*=\s*\{([^}]*)\}")
_VALUE_RE = re.compile(r"-?0[xX][0-9A-Fa-f]+|-?\d+")
_LINK_HEADER_RE = re.compile(
    r"LinkAnimationHeader\s+(\w+)\s*=\s*\{\s*\{\s*(\d+)\s*\}\s*,\s*(\w+)"
)
_JOINT_ARRAY_RE = re.compile(r"JointIndex\s+(\w+)\s*\[\s*\d*\s*\]\s*=\s*\{([\s\S]*?)\}\s*;")
_JOINT_ENTRY_RE = re.compile(
    r"\{\s*(0[xX][0-9A-Fa-f]+|\d+)\s*,\s*(0[xX][0-9A-Fa-f]+|\d+)\s*,"
    r"\s*(0[xX][0-9A-Fa-f]+|\d+)\s*,?\s*\}"
)
_ACTOR_HEADER_RE = re.compile(
    r"\bAnimationHeader\s+(\w+)\s*=\s*\{\s*\{\s*(\d+)\s*\}\s*,\s*(\w+)\s*,"
    r"\s*(\w+)\s*,\s*(\d+)\s*\}"
)
_HAS_LINK_HEADER_RE = re.compile(r"\bLinkAnimationHeader\b")
_HAS_ACTOR_HEADER_RE = re.compile(r"\bAnimationHeader\b")
_HAS_JOINT_ARRAY_RE = re.compile(r"\bJointIndex\b")


# ==============================================================================
# DATA CLASSES
# ==============================================================================

class AnimationType(Enum):
    """Which of the two animation representations an entry uses."""
    LINK = "link"
    ACTOR = "actor"


@dataclass
class JointIndex:
    """
    Per-joint indices into an Actor animation's frame data.

    An index below staticIndexMax selects one static value; otherwise the
    joint reads frameCount consecutive values starting at the index.
    """
    x: int = 0
    y: int = 0
    z: int = 0

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)


@dataclass
class LinkAnimation:
    """
    Player animation: frame count plus a flat array of signed values.

    Attributes:
        name: Animation symbol (e.g. "gPlayerAnim_link_normal_wait")
        frame_count: Number of frames
        data: Signed 16-bit values for all frames
    """
    name: str
    frame_count: int
    data: List[int] = field(default_factory=list)

    @property
    def type(self) -> AnimationType:
        return AnimationType.LINK


@dataclass
class ActorAnimation:
    """
    Actor animation: rotation values addressed through joint indices.

    Attributes:
        name: Animation symbol
        frame_count: Number of frames
        frame_data: Signed 16-bit rotation values
        joint_indices: One JointIndex per limb
        static_index_max: Indices below this are static values
    """
    name: str
    frame_count: int
    frame_data: List[int] = field(default_factory=list)
    joint_indices: List[JointIndex] = field(default_factory=list)
    static_index_max: int = 0

    @property
    def type(self) -> AnimationType:
        return AnimationType.ACTOR


AnimationEntry = Union[LinkAnimation, ActorAnimation]


@dataclass
class LinkHeaderInfo:
    """Decoded Link animation header payload."""
    version: int
    frame_count: int
    data_path: str


def _unsupported(anim) -> TypeError:
    return TypeError(f"Unsupported animation type: {type(anim).__name__}")


# ==============================================================================
# BINARY -> MODEL
# ==============================================================================

def parse_link_animation_header(payload: bytes) -> LinkHeaderInfo:
    """
    Parse the payload of a Link animation header resource.

    Raises:
        AnimationFormatError: If the payload is truncated or the path is not UTF-8
    """
    reader = BinaryReader(payload)
    try:
        version = reader.uint32()
        frame_count = reader.uint16()
        path_length = reader.uint16()
        reader.skip(2)
        raw_path = reader.bytes(path_length)
    except TruncatedDataError as e:
        raise AnimationFormatError(f"Link animation header is truncated: {e}") from e

    try:
        data_path = raw_path.decode("utf-8")
    except UnicodeDecodeError as e:
        raise AnimationFormatError(f"Link animation data path is not valid UTF-8: {e}") from e

    return LinkHeaderInfo(version, frame_count, data_path)


def parse_link_animation_data(payload: bytes, big_endian: bool = False) -> List[int]:
    """
    Parse the payload of a Link animation data ("Player Animation") resource.

    Args:
        payload: Bytes after the resource header
        big_endian: Values use the legacy big-endian revision

    Returns:
        Signed 16-bit values

    Raises:
        AnimationFormatError: If the declared count exceeds the payload
    """
    reader = BinaryReader(payload)
    try:
        count = reader.uint32()
        raw = reader.bytes(count * 2)
    except TruncatedDataError as e:
        raise AnimationFormatError(f"Link animation data is truncated: {e}") from e

    order = ">" if big_endian else "<"
    return list(struct.unpack(f"{order}{count}h", raw))


def find_link_data_resource(data_path: str,
                            candidates: Iterable[ResourceEntry]) -> ResourceEntry:
    """
    Find the data resource a Link header points at.

    The ``__OTR__`` prefix is ignored on both sides; the rest must match
    exactly.

    Raises:
        MissingCompanionError: If no candidate has the referenced path
    """
    wanted = strip_archive_prefix(data_path)
    for candidate in candidates:
        if strip_archive_prefix(candidate.path) == wanted:
            return candidate
    raise MissingCompanionError(
        f"Could not find data file for Link animation. Expected path: {data_path}",
        data_path,
    )


def _parse_actor_payload(name: str, payload: bytes) -> ActorAnimation:
    reader = BinaryReader(payload)
    try:
        reader.skip(4)
        frame_count = reader.uint16()

        value_count = reader.uint32()
        frame_data = list(struct.unpack(f"<{value_count}h", reader.bytes(value_count * 2)))

        joint_count = reader.uint32()
        raw_joints = struct.unpack(f"<{joint_count * 3}H", reader.bytes(joint_count * 6))
        joint_indices = [JointIndex(*raw_joints[i:i + 3]) for i in range(0, len(raw_joints), 3)]

        static_index_max = reader.uint16()
    except TruncatedDataError as e:
        raise AnimationFormatError(f"Actor animation {name} is truncated: {e}") from e

    if not frame_data:
        raise AnimationFormatError(f"Actor animation {name} has no frame data")
    if not joint_indices:
        raise AnimationFormatError(f"Actor animation {name} has no joint indices")

    return ActorAnimation(name, frame_count, frame_data, joint_indices, static_index_max)


def parse_animation_from_resource(resource: ResourceEntry,
                                  related: Optional[Iterable[ResourceEntry]] = None
                                  ) -> AnimationEntry:
    """
    Decode an "Animation" resource into a Link or Actor animation.

    Args:
        resource: The animation resource (for Link, the header resource)
        related: Candidate resources to search for a Link data resource

    Returns:
        LinkAnimation or ActorAnimation named after the resource path

    Raises:
        AnimationFormatError: If the payload is truncated or is Link data
        MissingCompanionError: If a Link header's data resource is absent
    """
    if resource.resource_type == TYPE_PLAYER_ANIMATION:
        raise AnimationFormatError(
            f"{resource.path} holds Link animation data; open the Animation "
            f"header resource that references it instead"
        )

    payload = resource.data_without_header
    if len(payload) < 4:
        raise AnimationFormatError(
            f"Animation payload of {resource.path} is too short ({len(payload)} bytes)"
        )

    discriminator = struct.unpack_from("<I", payload, 0)[0]
    if discriminator != LINK_ANIMATION_DISCRIMINATOR:
        return _parse_actor_payload(resource.name, payload)

    info = parse_link_animation_header(payload)
    data_resource = find_link_data_resource(info.data_path, related or [])
    values = parse_link_animation_data(
        data_resource.data_without_header,
        big_endian=data_resource.header.endianness != 0,
    )
    return LinkAnimation(resource.name, info.frame_count, values)


def is_link_animation_header(resource: ResourceEntry) -> bool:
    """Check whether a resource is the header half of a Link animation."""
    payload = resource.data_without_header
    return (
        resource.resource_type == TYPE_ANIMATION
        and len(payload) >= 4
        and struct.unpack_from("<I", payload, 0)[0] == LINK_ANIMATION_DISCRIMINATOR
    )


# ==============================================================================
# MODEL -> BINARY
# ==============================================================================

def actor_animation_to_binary(anim: ActorAnimation) -> bytes:
    """Encode an Actor animation payload (without resource header)."""
    out = bytearray()
    out += pack_u32(ACTOR_ANIMATION_DISCRIMINATOR)
    out += pack_u16(anim.frame_count)
    out += pack_u32(len(anim.frame_data))
    for value in anim.frame_data:
        out += pack_u16(value)
    out += pack_u32(len(anim.joint_indices))
    for joint in anim.joint_indices:
        out += pack_u16(joint.x) + pack_u16(joint.y) + pack_u16(joint.z)
    out += pack_u16(anim.static_index_max)
    return bytes(out)


def _archive_reference(path: str) -> str:
    if path.startswith(ARCHIVE_PATH_PREFIX):
        return path
    return ARCHIVE_PATH_PREFIX + path


def _link_header_payload(version: int, frame_count: int, data_path: str) -> bytes:
    path_bytes = _archive_reference(data_path).encode("utf-8")
    out = bytearray()
    out += pack_u32(version)
    out += pack_u16(frame_count)
    out += pack_u16(len(path_bytes))
    out += b"\x00\x00"
    out += path_bytes
    return bytes(out)


def link_animation_header_to_binary(anim: LinkAnimation, data_path: str) -> bytes:
    """
    Encode a Link animation header payload.

    Args:
        anim: Animation to encode
        data_path: Archive path of the data resource; ``__OTR__`` is added
                   when missing
    """
    return _link_header_payload(LINK_ANIMATION_DISCRIMINATOR, anim.frame_count, data_path)


def link_animation_data_to_binary(anim: LinkAnimation) -> bytes:
    """Encode a Link animation data payload (always little-endian)."""
    out = bytearray(pack_u32(len(anim.data)))
    for value in anim.data:
        out += pack_i16(value)
    return bytes(out)


def _link_resources(anim: LinkAnimation, header_path: str, version: int,
                    unique_id: int) -> Tuple[ResourceEntry, ResourceEntry]:
    data_path = header_path + LINK_DATA_SUFFIX
    header_entry = create_resource(
        header_path, TYPE_ANIMATION,
        link_animation_header_to_binary(anim, data_path),
        version, unique_id,
    )
    data_entry = create_resource(
        data_path, TYPE_PLAYER_ANIMATION,
        link_animation_data_to_binary(anim),
        version, DEFAULT_UNIQUE_ID,
    )
    return header_entry, data_entry


def split_link_animation(anim: LinkAnimation, folder: str, version: int = 0,
                         unique_id: int = DEFAULT_UNIQUE_ID
                         ) -> Tuple[ResourceEntry, ResourceEntry]:
    """
    Build the header and data resources of a Link animation.

    The header lands at ``<folder>/<name>`` and references the data resource
    at ``<folder>/<name>_Data``.

    Returns:
        (header_entry, data_entry)
    """
    folder = folder.strip("/")
    header_path = f"{folder}/{anim.name}" if folder else anim.name
    return _link_resources(anim, header_path, version, unique_id)


def animation_to_resources(anim: AnimationEntry, path: str, version: int = 0,
                           unique_id: int = DEFAULT_UNIQUE_ID) -> List[ResourceEntry]:
    """
    Build the resources storing an animation at ``path``.

    Returns:
        [header, data] for a Link animation, [animation] for an Actor one
    """
    if isinstance(anim, LinkAnimation):
        return list(_link_resources(anim, path, version, unique_id))
    if isinstance(anim, ActorAnimation):
        return [create_resource(path, TYPE_ANIMATION, actor_animation_to_binary(anim),
                                version, unique_id)]
    raise _unsupported(anim)


def update_link_header_path(resource: ResourceEntry, new_data_path: str) -> ResourceEntry:
    """
    Return a copy of a Link header resource pointing at a new data path.

    Version and frame count are kept; the resource header is unchanged.

    Raises:
        AnimationFormatError: If the resource is not a readable Link header
    """
    payload = resource.data_without_header
    info = parse_link_animation_header(payload)
    if info.version != LINK_ANIMATION_DISCRIMINATOR:
        raise AnimationFormatError(f"{resource.path} is not a Link animation header")
    return resource.with_payload(_link_header_payload(info.version, info.frame_count, new_data_path))


# ==============================================================================
# MODEL -> C SOURCE
# ==============================================================================

def format_s16(value: int) -> str:
    """Format a value as a C literal: ``0x00FF`` or ``-0x00FF``."""
    if value < 0:
        return f"-0x{-value:04X}"
    return f"0x{value:04X}"


def _format_values(values: List[int], values_per_line: int) -> str:
    lines = []
    for start in range(0, len(values), values_per_line):
        chunk = values[start:start + values_per_line]
        lines.append("    " + ", ".join(format_s16(v) for v in chunk))
    return ",\n".join(lines)


def link_animation_to_c(anim: LinkAnimation,
                        values_per_line: int = DEFAULT_VALUES_PER_LINE) -> str:
    data_name = anim.name + LINK_DATA_SUFFIX
    source = f"s16 {data_name}[] = {{\n"
    source += _format_values(anim.data, values_per_line)
    source += "\n};\n\n"
    source += f"LinkAnimationHeader {anim.name} = {{\n"
    source += f"    {{ {anim.frame_count} }}, {data_name}\n"
    source += "};\n"
    return source


def actor_animation_to_c(anim: ActorAnimation,
                         values_per_line: int = DEFAULT_VALUES_PER_LINE) -> str:
    frame_data_name = anim.name + ACTOR_FRAME_DATA_SUFFIX
    joint_indices_name = anim.name + ACTOR_JOINT_INDICES_SUFFIX

    source = ACTOR_SOURCE_INCLUDES
    source += f"s16 {frame_data_name}[{len(anim.frame_data)}] = {{\n"
    source += _format_values(anim.frame_data, values_per_line)
    source += "\n};\n\n"

    source += f"JointIndex {joint_indices_name}[{len(anim.joint_indices)}] = {{\n"
    for joint in anim.joint_indices:
        source += f"    {{ 0x{joint.x:04X}, 0x{joint.y:04X}, 0x{joint.z:04X}, }},\n"
    source += "};\n\n"

    source += (
        f"AnimationHeader {anim.name} = {{ {{ {anim.frame_count} }}, {frame_data_name}, "
        f"{joint_indices_name}, {anim.static_index_max} }};\n"
    )
    return source


def animation_to_c(anim: AnimationEntry,
                   values_per_line: int = DEFAULT_VALUES_PER_LINE) -> str:
    """
    Render an animation as C source.

    Args:
        anim: LinkAnimation or ActorAnimation
        values_per_line: Number of s16 literals per line

    Raises:
        TypeError: For any other object
    """
    if isinstance(anim, LinkAnimation):
        return link_animation_to_c(anim, values_per_line)
    if isinstance(anim, ActorAnimation):
        return actor_animation_to_c(anim, values_per_line)
    raise _unsupported(anim)


# ==============================================================================
# C SOURCE -> MODEL
# ==============================================================================

def _parse_int(token: str) -> int:
    """Parse a C integer literal (hex with 0x, otherwise decimal)."""
    body = token.lower()
    negative = body.startswith("-")
    body = body.lstrip("-")
    value = int(body, 16) if body.startswith("0x") else int(body, 10)
    return -value if negative else value


def parse_s16_array_from_c(source: str) -> Optional[Tuple[str, List[int]]]:
    """
    Find the first ``s16 name[] = { ... }`` array.

    Values above 0x7FFF wrap to negative, as the game's s16 would.

    Returns:
        (array_name, values), or None if absent or empty
    """
    match = _S16_ARRAY_RE.search(source)
    if not match:
        return None
    values = [wrap_i16(_parse_int(token)) for token in _VALUE_RE.findall(match.group(2))]
    if not values:
        return None
    return match.group(1), values


def _parse_u16_field(token: str, label: str) -> int:
    value = int(token)
    if value > MAX_U16_FIELD:
        raise AnimationSourceError(
            f"{label} {value} does not fit in 16 bits (max {MAX_U16_FIELD})"
        )
    return value


def parse_link_animation_header_from_c(source: str) -> Optional[Tuple[str, int, str]]:
    """
    Returns:
        (animation_name, frame_count, data_array_name), or None

    Raises:
        AnimationSourceError: If the frame count does not fit in 16 bits
    """
    match = _LINK_HEADER_RE.search(source)
    if not match:
        return None
    return match.group(1), _parse_u16_field(match.group(2), "Frame count"), match.group(3)


def parse_actor_joint_indices_from_c(source: str) -> Optional[Tuple[str, List[JointIndex]]]:
    """
    Find the first ``JointIndex name[] = { {x, y, z,}, ... };`` array.

    Returns:
        (array_name, joints), or None if absent or empty
    """
    match = _JOINT_ARRAY_RE.search(source)
    if not match:
        return None

    joints = [
        JointIndex(*(_parse_int(value) & 0xFFFF for value in entry))
        for entry in _JOINT_ENTRY_RE.findall(match.group(2))
    ]
    if not joints:
        return None
    return match.group(1), joints


def parse_actor_animation_header_from_c(source: str) -> Optional[Tuple[str, int, str, str, int]]:
    """
    Returns:
        (animation_name, frame_count, frame_data_name, joint_indices_name,
        static_index_max), or None

    Raises:
        AnimationSourceError: If the frame count or staticIndexMax does not
            fit in 16 bits
    """
    match = _ACTOR_HEADER_RE.search(source)
    if not match:
        return None
    return (match.group(1), _parse_u16_field(match.group(2), "Frame count"), match.group(3),
            match.group(4), _parse_u16_field(match.group(5), "staticIndexMax"))


def parse_animation_from_c(source: str) -> AnimationEntry:
    """
    Parse a complete animation from C source, detecting its type.

    ``LinkAnimationHeader`` selects a Link animation; ``AnimationHeader``
    without it selects an Actor animation.

    Raises:
        PartialAnimationSourceError: If only part of an animation is present
        AnimationSourceError: If the source matches neither form
    """
    data = parse_s16_array_from_c(source)

    if _HAS_LINK_HEADER_RE.search(source):
        header = parse_link_animation_header_from_c(source)
        if data and header:
            return LinkAnimation(header[0], header[1], data[1])
        if data:
            raise PartialAnimationSourceError(
                "File contains only Link animation data array - header file needed"
            )
        if header:
            raise PartialAnimationSourceError(
                "File contains only Link animation header - data file needed"
            )

    elif _HAS_ACTOR_HEADER_RE.search(source):
        joints = parse_actor_joint_indices_from_c(source)
        header = parse_actor_animation_header_from_c(source)
        if data and joints and header:
            return ActorAnimation(header[0], header[1], data[1], joints[1], header[4])
        if not data:
            raise PartialAnimationSourceError("File contains no frame data array - s16 array needed")
        if not joints:
            raise PartialAnimationSourceError("File contains no joint indices - JointIndex array needed")
        raise PartialAnimationSourceError("File contains no AnimationHeader declaration")

    elif data:
        if _HAS_JOINT_ARRAY_RE.search(source):
            raise PartialAnimationSourceError("File contains no AnimationHeader declaration")
        raise PartialAnimationSourceError(
            "File contains only Link animation data array - header file needed"
        )

    raise AnimationSourceError("Invalid C source format - could not detect animation type")


def combine_link_animation_sources(data_source: str, header_source: str) -> LinkAnimation:
    """
    Build a Link animation from separate data and header C files.

    Raises:
        AnimationSourceError: If either file lacks its declaration
    """
    data = parse_s16_array_from_c(data_source)
    if data is None:
        raise AnimationSourceError("Invalid data file - could not find s16 array declaration")

    header = parse_link_animation_header_from_c(header_source)
    if header is None:
        raise AnimationSourceError(
            "Invalid header file - could not find LinkAnimationHeader declaration"
        )

    return LinkAnimation(header[0], header[1], data[1])


def combine_actor_animation_sources(frame_data_source: str, joint_indices_source: str,
                                    header_source: str) -> ActorAnimation:
    """
    Build an Actor animation from separate frame data, joint index and
    header C files.

    Raises:
        AnimationSourceError: If any file lacks its declaration
    """
    data = parse_s16_array_from_c(frame_data_source)
    if data is None:
        raise AnimationSourceError(
            "Invalid frame data file - could not find s16 array declaration"
        )

    joints = parse_actor_joint_indices_from_c(joint_indices_source)
    if joints is None:
        raise AnimationSourceError(
            "Invalid joint indices file - could not find JointIndex array declaration"
        )

    header = parse_actor_animation_header_from_c(header_source)
    if header is None:
        raise AnimationSourceError(
            "Invalid header file - could not find AnimationHeader declaration"
        )

    return ActorAnimation(header[0], header[1], data[1], joints[1], header[4])


def combine_animation_sources(data_source: str, header_source: str) -> AnimationEntry:
    """
    Combine a data file and a header file, detecting the type from the header.

    An Actor animation needs its joint indices too; they are taken from the
    data file when it declares them.

    Raises:
        AnimationSourceError: If the pair cannot form a complete animation
    """
    if _HAS_LINK_HEADER_RE.search(header_source):
        return combine_link_animation_sources(data_source, header_source)

    if _HAS_ACTOR_HEADER_RE.search(header_source):
        if _HAS_JOINT_ARRAY_RE.search(data_source):
            return combine_actor_animation_sources(data_source, data_source, header_source)
        if _HAS_JOINT_ARRAY_RE.search(header_source):
            return combine_actor_animation_sources(data_source, header_source, header_source)

    raise AnimationSourceError(
        "Actor animations require frame data, joint indices, and header files"
    )


# ==============================================================================
# HELPERS
# ==============================================================================

def animation_preview(anim: AnimationEntry) -> str:
    """One-line summary, e.g. ``gFoo (Actor, 10 frames, 64 values, 21 joints)``."""
    if isinstance(anim, LinkAnimation):
        return f"{anim.name} (Link, {anim.frame_count} frames, {len(anim.data)} values)"
    if isinstance(anim, ActorAnimation):
        return (
            f"{anim.name} (Actor, {anim.frame_count} frames, {len(anim.frame_data)} values, "
            f"{len(anim.joint_indices)} joints)"
        )
    raise _unsupported(anim)


def check_animation_consistency(anim: AnimationEntry) -> List[str]:
    """
    Report count mismatches between an animation's header and its arrays.

    Nothing is rejected; mismatched animations still encode and decode.

    Returns:
        Human-readable warnings (empty when consistent)
    """
    if not isinstance(anim, (LinkAnimation, ActorAnimation)):
        raise _unsupported(anim)

    warnings: List[str] = []

    if anim.frame_count > MAX_U16_FIELD:
        warnings.append(f"Frame count {anim.frame_count} does not fit in 16 bits")

    if isinstance(anim, LinkAnimation):
        if anim.frame_count == 0:
            if anim.data:
                warnings.append("Frame count is 0 but the animation has data")
        elif len(anim.data) % anim.frame_count != 0:
            warnings.append(
                f"Data has {len(anim.data)} values, not a multiple of "
                f"{anim.frame_count} frames"
            )
        return warnings

    value_count = len(anim.frame_data)
    if anim.static_index_max > value_count:
        warnings.append(
            f"staticIndexMax {anim.static_index_max} exceeds {value_count} frame values"
        )

    for joint_number, joint in enumerate(anim.joint_indices):
        for axis, index in zip("xyz", joint.as_tuple()):
            if index < anim.static_index_max:
                last = index
            else:
                last = index + max(anim.frame_count, 1) - 1
            if last >= value_count:
                warnings.append(
                    f"Joint {joint_number} {axis} index 0x{index:04X} reads past "
                    f"{value_count} frame values"
                )

    return warnings
