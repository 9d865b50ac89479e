"""Animation binary codec, C source codec and consistency checks."""

import pytest

from conftest import actor_payload, link_data_payload, link_header_payload, make_resource
from o2r_inspector.core.errors import (
    AnimationFormatError, AnimationSourceError, MissingCompanionError,
    PartialAnimationSourceError,
)
from o2r_inspector.parsers.animation_parser import (
    ActorAnimation, AnimationType, JointIndex, LinkAnimation, actor_animation_to_binary,
    animation_preview, animation_to_c, animation_to_resources, check_animation_consistency,
    combine_animation_sources, format_s16, is_link_animation_header,
    parse_animation_from_c, parse_animation_from_resource, parse_link_animation_header,
    parse_s16_array_from_c, split_link_animation, update_link_header_path,
)


def _actor():
    return ActorAnimation(
        name="gFooAnim",
        frame_count=2,
        frame_data=[0, -16, 0x7FFF, -0x8000, 5, 6],
        joint_indices=[JointIndex(0, 1, 2), JointIndex(3, 4, 4)],
        static_index_max=3,
    )


# ==============================================================================
# BINARY
# ==============================================================================

def test_parse_actor_resource():
    payload = actor_payload(10, [0x0000, 0xFFF0, 0x0123], [(0, 1, 2)], 3)
    resource = make_resource("objects/gFoo", "Animation", payload)

    anim = parse_animation_from_resource(resource)

    assert isinstance(anim, ActorAnimation)
    assert anim.type is AnimationType.ACTOR
    assert anim.name == "gFoo"
    assert anim.frame_count == 10
    assert anim.frame_data == [0, -16, 0x123]
    assert anim.joint_indices == [JointIndex(0, 1, 2)]
    assert anim.static_index_max == 3


def test_actor_binary_round_trip():
    anim = _actor()
    resource = make_resource("x/gFooAnim", "Animation", actor_animation_to_binary(anim))
    assert parse_animation_from_resource(resource) == anim


def test_truncated_actor_raises():
    payload = actor_payload(1, [1, 2, 3], [(0, 0, 0)], 0)[:-4]
    resource = make_resource("x/gBad", "Animation", payload)
    with pytest.raises(AnimationFormatError):
        parse_animation_from_resource(resource)


def test_actor_payload_without_arrays_raises():
    for payload in (actor_payload(1, [], [(0, 0, 0)], 0), actor_payload(1, [1], [], 0)):
        resource = make_resource("x/gEmpty", "Animation", payload)
        with pytest.raises(AnimationFormatError):
            parse_animation_from_resource(resource)


def test_short_animation_payload_raises():
    with pytest.raises(AnimationFormatError):
        parse_animation_from_resource(make_resource("x/gBad", "Animation", b"\x01\x00"))


def test_parse_link_resource_with_companion():
    header = make_resource(
        "objects/x/gPlayerAnim_1", "Animation",
        link_header_payload(2, "__OTR__objects/x/gPlayerAnim_1_Data"),
    )
    data = make_resource("objects/x/gPlayerAnim_1_Data", "Player Animation",
                         link_data_payload([1, -2, 3, -4]))

    anim = parse_animation_from_resource(header, [header, data])

    assert anim == LinkAnimation("gPlayerAnim_1", 2, [1, -2, 3, -4])
    assert anim.type is AnimationType.LINK
    assert is_link_animation_header(header)
    assert not is_link_animation_header(data)


def test_link_data_follows_header_endianness():
    header = make_resource("a/gAnim", "Animation", link_header_payload(1, "__OTR__a/gAnim_Data"))
    data = make_resource("a/gAnim_Data", "Player Animation",
                         link_data_payload([0x0102, -3], big_endian=True), endianness=1)
    assert parse_animation_from_resource(header, [data]).data == [0x0102, -3]


def test_missing_link_companion():
    header = make_resource(
        "objects/x/gPlayerAnimData_1", "Animation",
        link_header_payload(4, "__OTR__objects/x/gPlayerAnimData_1_Data"),
    )
    with pytest.raises(MissingCompanionError) as exc_info:
        parse_animation_from_resource(header, [header])
    assert exc_info.value.data_path == "__OTR__objects/x/gPlayerAnimData_1_Data"
    assert "Expected path: __OTR__objects/x/gPlayerAnimData_1_Data" in str(exc_info.value)


def test_player_animation_resource_rejected():
    data = make_resource("a/gAnim_Data", "Player Animation", link_data_payload([1]))
    with pytest.raises(AnimationFormatError):
        parse_animation_from_resource(data)


def test_split_link_animation():
    anim = LinkAnimation("gPlayerAnim_wait", 3, [1, 2, 3, -1, -2, -3])
    header, data = split_link_animation(anim, "misc/link_animation/", version=0, unique_id=7)

    assert header.path == "misc/link_animation/gPlayerAnim_wait"
    assert data.path == "misc/link_animation/gPlayerAnim_wait_Data"
    assert header.resource_type == "Animation"
    assert header.header.unique_id == 7
    assert data.resource_type == "Player Animation"

    info = parse_link_animation_header(header.data_without_header)
    assert info.version == 1
    assert info.frame_count == 3
    assert info.data_path == "__OTR__misc/link_animation/gPlayerAnim_wait_Data"

    assert parse_animation_from_resource(header, [data]) == anim


def test_animation_to_resources():
    link = animation_to_resources(LinkAnimation("gL", 1, [9]), "p/gL")
    assert [r.path for r in link] == ["p/gL", "p/gL_Data"]
    actor = animation_to_resources(_actor(), "p/gFooAnim")
    assert [r.path for r in actor] == ["p/gFooAnim"]
    with pytest.raises(TypeError):
        animation_to_resources("not an animation", "p/x")


def test_update_link_header_path():
    header, data = split_link_animation(LinkAnimation("gA", 5, [0] * 5), "old")
    updated = update_link_header_path(header, "new/gA_Data")

    info = parse_link_animation_header(updated.data_without_header)
    assert info.data_path == "__OTR__new/gA_Data"
    assert info.frame_count == 5
    assert updated.header == header.header
    assert updated.path == header.path

    with pytest.raises(AnimationFormatError):
        update_link_header_path(make_resource("x/a", "Animation",
                                              actor_animation_to_binary(_actor())), "y")


# ==============================================================================
# C SOURCE
# ==============================================================================

def test_format_s16():
    assert format_s16(0) == "0x0000"
    assert format_s16(255) == "0x00FF"
    assert format_s16(-16) == "-0x0010"
    assert format_s16(-0x8000) == "-0x8000"


def test_link_animation_to_c_layout():
    anim = LinkAnimation("gPlayerAnim", 2, list(range(9)))
    source = animation_to_c(anim)
    assert source == (
        "s16 gPlayerAnim_Data[] = {\n"
        "    0x0000, 0x0001, 0x0002, 0x0003, 0x0004, 0x0005, 0x0006, 0x0007,\n"
        "    0x0008\n"
        "};\n\n"
        "LinkAnimationHeader gPlayerAnim = {\n"
        "    { 2 }, gPlayerAnim_Data\n"
        "};\n"
    )


def test_actor_animation_to_c_layout():
    source = animation_to_c(_actor())
    assert source.startswith('#include "ultra64.h"\n#include "global.h"\n\n')
    assert "s16 gFooAnimFrameData[6] = {\n" in source
    assert "    0x0000, -0x0010, 0x7FFF, -0x8000, 0x0005, 0x0006\n" in source
    assert "JointIndex gFooAnimJointIndices[2] = {\n" in source
    assert "    { 0x0003, 0x0004, 0x0004, },\n" in source
    assert source.endswith(
        "AnimationHeader gFooAnim = { { 2 }, gFooAnimFrameData, gFooAnimJointIndices, 3 };\n"
    )


def test_animation_to_c_values_per_line():
    source = animation_to_c(LinkAnimation("gA", 1, [1, 2, 3]), values_per_line=2)
    assert "    0x0001, 0x0002,\n    0x0003\n" in source


def test_c_round_trip():
    link = LinkAnimation("gPlayerAnim", 3, [0, -1, 0x7FFF, -0x8000, 12, 13])
    assert parse_animation_from_c(animation_to_c(link)) == link
    assert parse_animation_from_c(animation_to_c(_actor())) == _actor()


def test_parse_s16_values_wrap_and_decimal():
    name, values = parse_s16_array_from_c("s16 gX[] = { 0xFFFF, 0x8000, 12, -3, -0x0010 };")
    assert name == "gX"
    assert values == [-1, -0x8000, 12, -3, -16]
    assert parse_s16_array_from_c("int nothing;") is None
    assert parse_s16_array_from_c("s16 gX[] = { };") is None


def test_parse_link_only_data_is_partial():
    with pytest.raises(PartialAnimationSourceError) as exc_info:
        parse_animation_from_c("s16 gPlayerAnim_Data[] = { 0x0001 };")
    assert "header file needed" in str(exc_info.value)


def test_parse_actor_without_header_is_partial():
    source = (
        "s16 gFooFrameData[1] = { 0x0001 };\n"
        "JointIndex gFooJointIndices[1] = { { 0x0000, 0x0000, 0x0000, }, };\n"
    )
    with pytest.raises(PartialAnimationSourceError) as exc_info:
        parse_animation_from_c(source)
    assert "no AnimationHeader" in str(exc_info.value)


def test_parse_actor_with_empty_frame_data_is_partial():
    source = (
        "s16 gFooFrameData[] = { };\n"
        "JointIndex gFooJointIndices[1] = { { 0x0000, 0x0000, 0x0000, }, };\n"
        "AnimationHeader gFoo = { { 1 }, gFooFrameData, gFooJointIndices, 0 };\n"
    )
    with pytest.raises(PartialAnimationSourceError) as exc_info:
        parse_animation_from_c(source)
    assert "no frame data array" in str(exc_info.value)


def test_parse_link_with_empty_data_is_partial():
    source = (
        "s16 gPlayerAnim_Data[] = {\n};\n"
        "LinkAnimationHeader gPlayerAnim = {\n    { 1 }, gPlayerAnim_Data\n};\n"
    )
    with pytest.raises(PartialAnimationSourceError) as exc_info:
        parse_animation_from_c(source)
    assert "data file needed" in str(exc_info.value)


def test_parse_frame_count_must_fit_u16():
    link = (
        "s16 gPlayerAnim_Data[] = { 0x0001 };\n"
        "LinkAnimationHeader gPlayerAnim = { { 65536 }, gPlayerAnim_Data };\n"
    )
    with pytest.raises(AnimationSourceError) as exc_info:
        parse_animation_from_c(link)
    assert "Frame count 65536 does not fit in 16 bits" in str(exc_info.value)

    actor = animation_to_c(_actor()).replace("{ { 2 }", "{ { 70000 }")
    with pytest.raises(AnimationSourceError):
        parse_animation_from_c(actor)

    actor = animation_to_c(_actor()).replace("JointIndices, 3 }", "JointIndices, 65536 }")
    with pytest.raises(AnimationSourceError) as exc_info:
        parse_animation_from_c(actor)
    assert "staticIndexMax" in str(exc_info.value)

    at_limit = link.replace("65536", "65535")
    assert parse_animation_from_c(at_limit).frame_count == 0xFFFF


def test_parse_garbage_raises():
    with pytest.raises(AnimationSourceError) as exc_info:
        parse_animation_from_c("void main(void) {}")
    assert not isinstance(exc_info.value, PartialAnimationSourceError)


def test_combine_link_sources():
    data = "s16 gPlayerAnim_Data[] = {\n    0x0001, -0x0002\n};\n"
    header = "LinkAnimationHeader gPlayerAnim = {\n    { 1 }, gPlayerAnim_Data\n};\n"
    assert combine_animation_sources(data, header) == LinkAnimation("gPlayerAnim", 1, [1, -2])


def test_combine_actor_sources():
    full = animation_to_c(_actor())
    data, header = full.split("AnimationHeader gFooAnim")
    assert combine_animation_sources(data, "AnimationHeader gFooAnim" + header) == _actor()


def test_combine_actor_sources_without_joints():
    header = "AnimationHeader gFoo = { { 1 }, gFooFrameData, gFooJointIndices, 0 };"
    with pytest.raises(AnimationSourceError):
        combine_animation_sources("s16 gFooFrameData[1] = { 0x0000 };", header)


# ==============================================================================
# HELPERS
# ==============================================================================

def test_animation_preview():
    assert animation_preview(LinkAnimation("gL", 2, [0] * 4)) == "gL (Link, 2 frames, 4 values)"
    assert animation_preview(_actor()) == "gFooAnim (Actor, 2 frames, 6 values, 2 joints)"


def test_consistency_clean_animations():
    assert check_animation_consistency(LinkAnimation("gL", 2, [0] * 4)) == []
    assert check_animation_consistency(_actor()) == []


def test_consistency_link_warnings():
    assert check_animation_consistency(LinkAnimation("gL", 3, [0] * 4)) == [
        "Data has 4 values, not a multiple of 3 frames",
    ]
    assert check_animation_consistency(LinkAnimation("gL", 0, [1])) == [
        "Frame count is 0 but the animation has data",
    ]


def test_consistency_reports_oversized_frame_count():
    warnings = check_animation_consistency(LinkAnimation("gL", 0x10000, [0] * 4))
    assert "Frame count 65536 does not fit in 16 bits" in warnings


def test_consistency_actor_warnings():
    anim = ActorAnimation("gA", 4, [0] * 4, [JointIndex(0, 1, 2)], static_index_max=9)
    warnings = check_animation_consistency(anim)
    assert warnings == ["staticIndexMax 9 exceeds 4 frame values"]

    anim = ActorAnimation("gA", 4, [0] * 4, [JointIndex(0, 1, 2)], static_index_max=1)
    warnings = check_animation_consistency(anim)
    assert warnings == [
        "Joint 0 y index 0x0001 reads past 4 frame values",
        "Joint 0 z index 0x0002 reads past 4 frame values",
    ]
