"""Resource list editing and the folder tree."""

import pytest

from conftest import make_resource
from o2r_inspector.core.errors import (
    MissingCompanionError, ResourceConflictError, ResourceNotFoundError,
    UnknownResourceTypeError,
)
from o2r_inspector.core.resource_ops import (
    add_resource, build_tree, find_resource, move_resource, remove_resource,
    replace_resource_data, resources_of_type,
)
from o2r_inspector.parsers.animation_parser import (
    LinkAnimation, parse_animation_from_resource, parse_link_animation_header,
    split_link_animation,
)
from o2r_inspector.parsers.resource_header import build_header


@pytest.fixture
def resources():
    header, data = split_link_animation(LinkAnimation("gPlayerAnim", 2, [1, 2, 3, 4]), "anims")
    return [
        make_resource("textures/gIcon", "Texture", b"\x00" * 16),
        header,
        data,
        make_resource("text/nes_message_data_static", "Text", b"\x00" * 4),
    ]


def test_find_and_filter(resources):
    assert find_resource(resources, "textures/gIcon").resource_type == "Texture"
    assert find_resource(resources, "nope") is None
    assert [r.path for r in resources_of_type(resources, "Animation")] == ["anims/gPlayerAnim"]


def test_add_resource(resources):
    entry = make_resource("new/gArr", "Array")
    updated = add_resource(resources, entry)
    assert updated[-1] is entry
    assert len(resources) == 4

    with pytest.raises(ResourceConflictError):
        add_resource(updated, make_resource("new/gArr", "Array", b"\x01"))

    replaced = add_resource(updated, make_resource("new/gArr", "Array", b"\x01"), overwrite=True)
    assert len(replaced) == 5
    assert find_resource(replaced, "new/gArr").data_without_header == b"\x01"


def test_remove_resource(resources):
    updated = remove_resource(resources, "textures/gIcon")
    assert find_resource(updated, "textures/gIcon") is None
    assert len(resources) == 4
    with pytest.raises(ResourceNotFoundError):
        remove_resource(updated, "textures/gIcon")


def test_replace_resource_data(resources):
    updated = replace_resource_data(resources, "textures/gIcon", build_header("Texture", 3) + b"\xAA")
    resource = find_resource(updated, "textures/gIcon")
    assert resource.header.resource_version == 3
    assert resource.data_without_header == b"\xAA"
    with pytest.raises(UnknownResourceTypeError):
        replace_resource_data(resources, "textures/gIcon", b"bad")
    with pytest.raises(ResourceNotFoundError):
        replace_resource_data(resources, "nope", build_header("Texture"))


def test_move_plain_resource(resources):
    updated = move_resource(resources, "textures/gIcon", "textures/ui/gIcon")
    assert find_resource(updated, "textures/ui/gIcon") is not None
    assert find_resource(updated, "textures/gIcon") is None
    assert find_resource(resources, "textures/gIcon") is not None


def test_move_link_animation_takes_data_along(resources):
    updated = move_resource(resources, "anims/gPlayerAnim", "misc/link_animation/gWait")

    header = find_resource(updated, "misc/link_animation/gWait")
    data = find_resource(updated, "misc/link_animation/gWait_Data")
    assert header is not None and data is not None
    assert find_resource(updated, "anims/gPlayerAnim_Data") is None

    info = parse_link_animation_header(header.data_without_header)
    assert info.data_path == "__OTR__misc/link_animation/gWait_Data"
    assert parse_animation_from_resource(header, updated).data == [1, 2, 3, 4]


def test_move_conflict(resources):
    with pytest.raises(ResourceConflictError):
        move_resource(resources, "textures/gIcon", "text/nes_message_data_static")


def test_move_link_data_conflict(resources):
    blocked = resources + [make_resource("other/gNew_Data", "Array")]
    with pytest.raises(ResourceConflictError):
        move_resource(blocked, "anims/gPlayerAnim", "other/gNew")


def test_move_link_missing_companion_leaves_input_unchanged(resources):
    without_data = [r for r in resources if r.path != "anims/gPlayerAnim_Data"]
    snapshot = list(without_data)
    with pytest.raises(MissingCompanionError):
        move_resource(without_data, "anims/gPlayerAnim", "other/gNew")
    assert without_data == snapshot


def test_move_missing_source(resources):
    with pytest.raises(ResourceNotFoundError):
        move_resource(resources, "nope", "other")


def test_build_tree_ordering():
    resources = [
        make_resource("zeta", "Array"),
        make_resource("objects/b_file", "Array"),
        make_resource("Alpha", "Array"),
        make_resource("objects/sub/c", "Array"),
        make_resource("objects/A_file", "Array"),
        make_resource("beta/x", "Array"),
    ]
    root = build_tree(resources)

    assert [c.name for c in root.children] == ["beta", "objects", "Alpha", "zeta"]
    objects = root.child("objects")
    assert objects.is_directory
    assert [c.name for c in objects.children] == ["sub", "A_file", "b_file"]
    leaf = objects.child("sub").child("c")
    assert leaf.path == "objects/sub/c"
    assert leaf.resource.path == "objects/sub/c"
    assert not leaf.is_directory


def test_tree_walk_depths():
    root = build_tree([make_resource("a/b/c", "Array"), make_resource("d", "Array")])
    assert [(depth, node.name) for depth, node in root.walk()] == [
        (0, "a"), (1, "b"), (2, "c"), (0, "d"),
    ]
