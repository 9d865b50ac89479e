"""Resource header parsing/building and the type registry."""

import struct

import pytest

from o2r_inspector.core.errors import UnknownResourceTypeError
from o2r_inspector.parsers.resource_header import (
    DEFAULT_UNIQUE_ID, HEADER_SIZE, RESOURCE_TAGS, RESOURCE_TYPES, ResourceHeader,
    build_header, create_resource, parse_header, resolve_type_tag, strip_archive_prefix,
)


def test_registry_has_21_types():
    assert len(RESOURCE_TYPES) == 21
    assert RESOURCE_TYPES["OANM"] == "Animation"
    assert RESOURCE_TYPES["OPAM"] == "Player Animation"
    assert RESOURCE_TYPES["LGTS"] == "Light"
    assert RESOURCE_TAGS["Texture"] == "OTEX"


def test_build_header_layout():
    header = build_header("Animation", 2, 0x1122334455667788, is_custom=True)
    assert len(header) == HEADER_SIZE
    assert header[0] == 0
    assert header[1] == 1
    assert header[4:8] == b"MNAO"
    assert struct.unpack_from("<I", header, 8)[0] == 2
    assert struct.unpack_from("<Q", header, 12)[0] == 0x1122334455667788
    assert header[20:] == bytes(44)


def test_build_header_accepts_fourcc():
    assert build_header("OTEX") == build_header("Texture")


def test_build_header_unknown_type():
    with pytest.raises(UnknownResourceTypeError):
        build_header("Sprite")


@pytest.mark.parametrize("tag,name", sorted(RESOURCE_TYPES.items()))
def test_parse_header_every_type(tag, name):
    header = parse_header(build_header(name, 3, 42, endianness=1) + b"payload")
    assert header.resource_type == name
    assert header.type_tag == tag
    assert header.resource_version == 3
    assert header.unique_id == 42
    assert header.endianness == 1
    assert header.is_custom is False


def test_parse_header_rejects_short_and_unknown():
    assert parse_header(b"") is None
    assert parse_header(bytes(63)) is None
    unknown = bytearray(build_header("Texture"))
    unknown[4:8] = b"ZZZZ"
    assert parse_header(bytes(unknown)) is None


def test_header_to_bytes_round_trip():
    raw = build_header("Room", 7, DEFAULT_UNIQUE_ID, is_custom=True)
    assert parse_header(raw).to_bytes() == raw
    assert ResourceHeader(resource_type="Vertex").to_bytes() == build_header("Vertex")


def test_resolve_type_tag():
    assert resolve_type_tag("Skeleton") == "OSKL"
    assert resolve_type_tag("OSKL") == "OSKL"
    with pytest.raises(UnknownResourceTypeError):
        resolve_type_tag("nope")


def test_strip_archive_prefix():
    assert strip_archive_prefix("__OTR__objects/gFoo_Data") == "objects/gFoo_Data"
    assert strip_archive_prefix("objects/gFoo_Data") == "objects/gFoo_Data"


def test_resource_entry_views():
    entry = create_resource("textures/icon/gIcon.o2r", "Texture", b"\x01\x02")
    assert entry.data_without_header == b"\x01\x02"
    assert entry.resource_type == "Texture"
    assert entry.name == "gIcon"
    assert entry.folder == "textures/icon"
    assert entry.header.unique_id == DEFAULT_UNIQUE_ID
    assert entry.describe().startswith("Texture (")


def test_resource_entry_copies():
    entry = create_resource("a/b", "Array", b"\x00")
    moved = entry.with_path("c/d")
    assert moved.path == "c/d" and entry.path == "a/b"
    assert moved.data == entry.data

    replaced = entry.with_payload(b"\xFF\xFF")
    assert replaced.data_without_header == b"\xFF\xFF"
    assert replaced.header == entry.header

    retyped = entry.with_data(build_header("Path") + b"")
    assert retyped.resource_type == "Path"
    with pytest.raises(UnknownResourceTypeError):
        entry.with_data(b"short")
