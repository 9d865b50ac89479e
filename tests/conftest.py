"""Shared fixtures and byte builders for the test-suite."""

import struct

import pytest

from o2r_inspector.core.config import reset_config
from o2r_inspector.parsers.resource_header import ResourceEntry, build_header, parse_header


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config.json out of the real user data directory."""
    home = tmp_path / "home"
    monkeypatch.setenv("O2R_INSPECTOR_HOME", str(home))
    reset_config()
    yield home
    reset_config()


def make_resource(path, type_name, payload=b"", **header_kwargs):
    data = build_header(type_name, **header_kwargs) + payload
    return ResourceEntry(path, parse_header(data), data)


def link_header_payload(frame_count, data_path, version=1):
    path_bytes = data_path.encode("utf-8")
    return struct.pack("<IHH", version, frame_count, len(path_bytes)) + b"\x00\x00" + path_bytes


def link_data_payload(values, big_endian=False):
    order = ">" if big_endian else "<"
    return struct.pack("<I", len(values)) + struct.pack(f"{order}{len(values)}h", *values)


def actor_payload(frame_count, values, joints, static_index_max):
    out = struct.pack("<IH", 0, frame_count)
    out += struct.pack("<I", len(values)) + struct.pack(f"<{len(values)}H", *values)
    out += struct.pack("<I", len(joints))
    for joint in joints:
        out += struct.pack("<3H", *joint)
    out += struct.pack("<H", static_index_max)
    return out


def texture_payload(texture_type, width, height, pixels):
    return struct.pack("<IIII", texture_type, width, height, len(pixels)) + pixels


def message_table(records):
    """Full Text resource bytes from (id, type, ypos, data) tuples."""
    out = build_header("Text") + struct.pack("<I", len(records))
    for message_id, textbox_type, ypos, data in records:
        out += struct.pack("<HBBI", message_id, textbox_type, ypos, len(data)) + data
    return out
