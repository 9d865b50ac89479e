"""End-to-end runs of the command line interface."""

import io
import zipfile

import pytest

from conftest import actor_payload, message_table, texture_payload
from o2r_inspector.cli import main
from o2r_inspector.core.config import get_config, reset_config
from o2r_inspector.extractors.o2r_extractor import decode_archive, encode_archive
from o2r_inspector.parsers.animation_parser import LinkAnimation, split_link_animation
from o2r_inspector.parsers.resource_header import create_resource
from o2r_inspector.parsers.texture_parser import TextureType


@pytest.fixture
def archive(tmp_path):
    header, data = split_link_animation(LinkAnimation("gPlayerAnim", 2, [1, -2, 3, -4]), "anims")
    resources = [
        header,
        data,
        create_resource("objects/gFoo", "Animation", actor_payload(1, [5, 6], [(0, 1, 0)], 2)),
        create_resource("text/nes_message_data_static", "Text",
                        message_table([(0x0071, 0, 0, b"Hello\x01World\x02")])[64:]),
        create_resource("textures/gIcon", "Texture",
                        texture_payload(TextureType.RGBA32BPP, 1, 1, b"\x01\x02\x03\x04")),
        create_resource("textures/gIndexed", "Texture",
                        texture_payload(TextureType.PALETTE8BPP, 1, 1, b"\x00")),
    ]
    path = tmp_path / "mod.o2r"
    path.write_bytes(encode_archive(resources))
    return path


def _paths(path):
    return sorted(r.path for r in decode_archive(path.read_bytes()))


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage:" in capsys.readouterr().out


def test_list(archive, capsys):
    assert main(["list", str(archive)]) == 0
    out = capsys.readouterr().out
    assert "anims/gPlayerAnim_Data" in out
    assert "6 resources" in out


def test_list_by_type(archive, capsys):
    assert main(["list", str(archive), "--type", "Texture", "-v"]) == 0
    out = capsys.readouterr().out
    assert "[OTEX]" in out
    assert "objects/gFoo" not in out
    assert "2 resources" in out


def test_tree(archive, capsys):
    assert main(["tree", str(archive)]) == 0
    lines = [line for line in capsys.readouterr().out.splitlines() if not line.startswith("[")]
    assert lines[0] == "anims/"
    assert any(line.startswith("  gPlayerAnim_Data") for line in lines)


def test_info(archive, capsys):
    assert main(["info", str(archive), "anims/gPlayerAnim", "--bytes", "0"]) == 0
    out = capsys.readouterr().out
    assert "Animation (OANM)" in out
    assert "gPlayerAnim (Link, 2 frames, 4 values)" in out


def test_info_lists_message_previews(archive, capsys):
    get_config().preview_length = 8
    assert main(["info", str(archive), "text/nes_message_data_static", "--bytes", "0"]) == 0
    out = capsys.readouterr().out
    assert "Messages:    1" in out
    assert "  0071  HelloWor...\n" in out


def test_info_missing_resource(archive, capsys):
    assert main(["info", str(archive), "nope"]) == 1
    assert "[ERROR] No resource at nope" in capsys.readouterr().out


def test_missing_archive(tmp_path, capsys):
    assert main(["list", str(tmp_path / "missing.o2r")]) == 1
    assert "[ERROR]" in capsys.readouterr().out


def test_open_remembers_last_archive(archive):
    main(["list", str(archive)])
    reset_config()
    assert get_config().last_archive_path == str(archive)


def test_extract(archive, tmp_path):
    out_dir = tmp_path / "out"
    assert main(["extract", str(archive), str(out_dir)]) == 0
    assert (out_dir / "textures" / "gIcon").is_file()


def test_anim_export_and_import(archive, tmp_path):
    source = tmp_path / "anim.c"
    assert main(["anim", "export", str(archive), "anims/gPlayerAnim", "-o", str(source)]) == 0
    assert "LinkAnimationHeader gPlayerAnim" in source.read_text()

    target = tmp_path / "new.o2r"
    assert main(["anim", "import", str(target), str(source),
                 "--path", "misc/gPlayerAnim"]) == 0
    assert _paths(target) == ["misc/gPlayerAnim", "misc/gPlayerAnim_Data"]


def test_anim_import_conflict(archive, tmp_path, capsys):
    source = tmp_path / "anim.c"
    main(["anim", "export", str(archive), "objects/gFoo", "-o", str(source)])
    capsys.readouterr()

    assert main(["anim", "import", str(archive), str(source), "--path", "objects/gFoo"]) == 1
    assert "already exists" in capsys.readouterr().out
    assert main(["anim", "import", str(archive), str(source), "--path", "objects/gFoo",
                 "--overwrite"]) == 0


def test_anim_export_to_stdout(archive, capsys):
    assert main(["anim", "export", str(archive), "objects/gFoo"]) == 0
    assert "AnimationHeader gFoo = { { 1 }, gFooFrameData" in capsys.readouterr().out


def test_anim_export_with_invalid_config_file(archive, isolated_home, capsys):
    isolated_home.mkdir(parents=True, exist_ok=True)
    (isolated_home / "config.json").write_text('{"c_values_per_line": 0}')
    reset_config()

    assert main(["anim", "export", str(archive), "objects/gFoo"]) == 0
    assert "    0x0005,\n    0x0006\n" in capsys.readouterr().out


def test_msg_round_trip(archive, tmp_path):
    document = tmp_path / "messages.txt"
    assert main(["msg", "export", str(archive), "text/nes_message_data_static",
                 "-o", str(document)]) == 0
    text = document.read_text()
    assert "0071\t00\t00\tHello[NEWLINE]World[END]" in text

    document.write_text(text.replace("World", "There"))
    assert main(["msg", "import", str(archive), "text/nes_message_data_static",
                 str(document)]) == 0

    capture = tmp_path / "again.txt"
    main(["msg", "export", str(archive), "text/nes_message_data_static", "-o", str(capture)])
    assert "Hello[NEWLINE]There[END]" in capture.read_text()


def test_tex_export(archive, tmp_path):
    from PIL import Image

    png = tmp_path / "icon.png"
    assert main(["tex", "export", str(archive), "textures/gIcon", str(png)]) == 0
    with Image.open(png) as image:
        assert image.getpixel((0, 0)) == (1, 2, 3, 4)


def test_tex_export_with_palette(archive, tmp_path):
    png = tmp_path / "indexed.png"
    assert main(["tex", "export", str(archive), "textures/gIndexed", str(png)]) == 1
    assert not png.exists()
    assert main(["tex", "export", str(archive), "textures/gIndexed", str(png),
                 "--palette", "textures/gIcon"]) == 0


def test_move(archive, tmp_path):
    output = tmp_path / "moved.o2r"
    assert main(["move", str(archive), "anims/gPlayerAnim", "misc/gWait", "-o", str(output)]) == 0
    paths = _paths(output)
    assert "misc/gWait" in paths
    assert "misc/gWait_Data" in paths
    assert "anims/gPlayerAnim_Data" not in paths


def test_create_and_remove(archive, tmp_path):
    payload = tmp_path / "payload.bin"
    payload.write_bytes(b"\x01\x02")
    assert main(["create", str(archive), "misc/gArr", "OARR", "--payload", str(payload),
                 "--version", "2", "--custom"]) == 0
    created = {r.path: r for r in decode_archive(archive.read_bytes())}["misc/gArr"]
    assert created.resource_type == "Array"
    assert created.header.resource_version == 2
    assert created.header.is_custom

    assert main(["remove", str(archive), "misc/gArr"]) == 0
    assert "misc/gArr" not in _paths(archive)


def test_create_unknown_type(archive, capsys):
    assert main(["create", str(archive), "misc/x", "Sprite"]) == 1
    assert "Unknown resource type" in capsys.readouterr().out


def test_config_set_and_show(capsys):
    assert main(["config", "set", "c_values_per_line", "4"]) == 0
    reset_config()
    assert get_config().c_values_per_line == 4

    assert main(["config", "set", "hex_bytes_per_line", "12"]) == 1
    assert main(["config", "show"]) == 0
    assert "c_values_per_line = 4" in capsys.readouterr().out


def test_zip_written_by_cli_is_deflated(archive):
    main(["remove", str(archive), "objects/gFoo"])
    with zipfile.ZipFile(io.BytesIO(archive.read_bytes())) as zf:
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in zf.infolist())
