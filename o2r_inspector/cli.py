# ==============================================================================
# O2R INSPECTOR - COMMAND LINE INTERFACE
# ==============================================================================
# Command-line front end for inspecting and editing O2R/OTR archives.
#
# Commands:
#   - list / tree / info: Browse archive contents and resource headers
#   - extract: Write every archive entry to a folder
#   - anim export|import: Animations <-> C source
#   - msg export|import: Message tables <-> tab-separated text documents
#   - tex export: Textures -> PNG
#   - move / create / remove: Edit the resource list
#   - config show|set: Inspect and change settings
#
# Commands that modify an archive write to --output (default: the input file).
#
# Usage:
#   o2r-inspector list mod.o2r --type Animation
#   o2r-inspector anim export mod.o2r objects/gameplay_keep/gPlayerAnim_wait -o wait.c
#   o2r-inspector anim import mod.o2r wait.c --path misc/link_animation/gPlayerAnim_wait
#   o2r-inspector tex export mod.o2r textures/icon_item/gFoo gFoo.png
# ==============================================================================

import argparse
import json
import os
import sys
from typing import List, Optional

from . import __version__
from .core.binary import format_hex_dump
from .core.config import DEFAULT_CONFIG, get_config
from .core.errors import ArchiveError, O2RError, ResourceNotFoundError
from .core.resource_ops import (
    add_resource, build_tree, find_resource, move_resource, remove_resource,
    replace_resource_data, resources_of_type,
)
from .extractors.o2r_extractor import O2RExtractor, create_resource
from .parsers.animation_parser import (
    animation_preview, animation_to_c, animation_to_resources,
    check_animation_consistency, combine_animation_sources, parse_animation_from_c,
    parse_animation_from_resource,
)
from .parsers.message_parser import (
    document_to_messages, generate_preview, messages_to_bytes, messages_to_document,
    parse_messages,
)
from .parsers.resource_header import (
    RESOURCE_TYPES, TYPE_ANIMATION, TYPE_TEXT, TYPE_TEXTURE,
)
from .parsers.texture_parser import decode_texture_resource, parse_texture


# ==============================================================================
# COLOR HELPERS FOR TERMINAL OUTPUT
# ==============================================================================
class Colors:
    """ANSI color codes for terminal output."""
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    END = '\033[0m'

    @classmethod
    def disable(cls):
        """Disable colors (for non-supporting terminals and redirected output)."""
        cls.HEADER = ''
        cls.BLUE = ''
        cls.CYAN = ''
        cls.GREEN = ''
        cls.YELLOW = ''
        cls.RED = ''
        cls.BOLD = ''
        cls.END = ''


def print_header(text: str):
    """Print a header."""
    print(f"\n{Colors.BOLD}{Colors.CYAN}{'=' * 60}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}  {text}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{'=' * 60}{Colors.END}\n")


def print_success(text: str):
    print(f"{Colors.GREEN}[OK] {text}{Colors.END}")


def print_error(text: str):
    print(f"{Colors.RED}[ERROR] {text}{Colors.END}")


def print_info(text: str):
    print(f"{Colors.BLUE}[INFO] {text}{Colors.END}")


def print_warning(text: str):
    print(f"{Colors.YELLOW}[WARN] {text}{Colors.END}")


_debug_override = False


def print_debug(text: str):
    """Print a debug message when debug_mode is on (or --debug was given)."""
    if _debug_override or get_config().debug_mode:
        print(f"[DEBUG] {text}")


def progress_callback(current: int, total: int, filename: str):
    """Progress callback for long operations."""
    percent = (current / total) * 100 if total > 0 else 0
    bar_length = 30
    filled = int(bar_length * current / total) if total > 0 else 0
    bar = '#' * filled + '-' * (bar_length - filled)

    max_name_len = 40
    if len(filename) > max_name_len:
        filename = '...' + filename[-(max_name_len - 3):]

    print(f"\r[{bar}] {percent:5.1f}% | {current}/{total} | {filename}", end='', flush=True)

    if current >= total:
        print()


# ==============================================================================
# ARCHIVE HELPERS
# ==============================================================================
def open_archive(path: str, allow_missing: bool = False) -> O2RExtractor:
    """
    Open an archive for a command.

    Args:
        path: Archive file
        allow_missing: Start an empty workspace if the file does not exist

    Raises:
        ArchiveError: If the archive cannot be read
    """
    extractor = O2RExtractor()
    if allow_missing and not os.path.exists(path):
        print_info(f"Creating new archive: {path}")
        extractor.archive_path = path
        return extractor

    if not extractor.open(path):
        raise ArchiveError(f"Could not open archive: {path}")

    config = get_config()
    full_path = os.path.abspath(path)
    if config.last_archive_path != full_path:
        config.last_archive_path = full_path
        config.save()
    print_debug(f"Archive: {full_path}")
    return extractor


def save_archive(extractor: O2RExtractor, resources, output: Optional[str]):
    """Store edited resources and write the archive."""
    extractor.resources = resources
    written = extractor.save(output or extractor.archive_path)
    print_success(f"Wrote {len(resources)} resources to {written}")


def require_resource(resources, path: str):
    resource = find_resource(resources, path)
    if resource is None:
        raise ResourceNotFoundError(f"No resource at {path}")
    return resource


def write_text(text: str, output: Optional[str]):
    """Write text to a file, or to stdout when no file is given."""
    if not output:
        sys.stdout.write(text)
        return
    with open(output, 'w', encoding='utf-8', newline='\n') as f:
        f.write(text)
    print_success(f"Wrote {output}")


def read_text(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


# ==============================================================================
# BROWSE COMMANDS
# ==============================================================================
def cmd_list(args) -> int:
    """List the resources in an archive."""
    extractor = open_archive(args.archive)
    resources = extractor.resources
    if args.type:
        resources = resources_of_type(resources, args.type)

    for resource in resources:
        if args.verbose:
            header = resource.header
            print(f"{resource.path}  [{header.type_tag}] {resource.describe()} "
                  f"v{header.resource_version} id=0x{header.unique_id:016X}")
        else:
            print(f"{resource.path}  {resource.describe()}")

    print_info(f"{len(resources)} resources")
    return 0


def cmd_tree(args) -> int:
    """Show the archive's resources as a folder tree."""
    extractor = open_archive(args.archive)
    tree = build_tree(extractor.resources)

    for depth, node in tree.walk():
        indent = "  " * depth
        if node.is_directory:
            print(f"{indent}{Colors.BOLD}{node.name}/{Colors.END}")
        else:
            print(f"{indent}{node.name}  ({node.resource.describe()})")
    return 0


def cmd_info(args) -> int:
    """Show a resource's header, a content summary and a hex dump."""
    extractor = open_archive(args.archive)
    resources = extractor.resources
    resource = require_resource(resources, args.path)
    header = resource.header
    config = get_config()

    print_header(resource.path)
    print(f"Type:        {header.resource_type} ({header.type_tag})")
    print(f"Version:     {header.resource_version}")
    print(f"Unique ID:   0x{header.unique_id:016X}")
    print(f"Endianness:  {'big' if header.endianness else 'little'}")
    print(f"Custom:      {'yes' if header.is_custom else 'no'}")
    print(f"Size:        {len(resource.data)} bytes ({len(resource.data_without_header)} payload)")

    if header.resource_type == TYPE_ANIMATION:
        anim = parse_animation_from_resource(resource, resources)
        print(f"Animation:   {animation_preview(anim)}")
        for warning in check_animation_consistency(anim):
            print_warning(warning)
    elif header.resource_type == TYPE_TEXT:
        messages = parse_messages(resource.data)
        print(f"Messages:    {len(messages)}")
        for message in messages:
            print(f"  {message.id:04X}  {generate_preview(message.data, config.preview_length)}")
    elif header.resource_type == TYPE_TEXTURE:
        texture = parse_texture(resource.data_without_header)
        if texture is not None:
            print(f"Texture:     {texture.format_name} {texture.width}x{texture.height}")

    if args.bytes != 0:
        payload = resource.data_without_header
        if args.bytes > 0:
            payload = payload[:args.bytes]
        print()
        print(format_hex_dump(payload, config.hex_bytes_per_line))
    return 0


def cmd_extract(args) -> int:
    """Extract every archive entry to a folder."""
    print_header("Extracting Archive")
    extractor = open_archive(args.archive)
    print_info(f"Output: {args.output}")

    count = extractor.extract_all(args.output, progress_callback=progress_callback)
    print_success(f"Extracted {count} files")
    return 0


# ==============================================================================
# ANIMATION COMMANDS
# ==============================================================================
def cmd_anim_export(args) -> int:
    """Export an animation resource as C source."""
    extractor = open_archive(args.archive)
    resources = extractor.resources
    resource = require_resource(resources, args.path)

    anim = parse_animation_from_resource(resource, resources)
    print_debug(animation_preview(anim))
    for warning in check_animation_consistency(anim):
        print_warning(warning)

    write_text(animation_to_c(anim, get_config().c_values_per_line), args.output)
    return 0


def cmd_anim_import(args) -> int:
    """Import an animation from C source into an archive."""
    if args.header:
        anim = combine_animation_sources(read_text(args.source), read_text(args.header))
    else:
        anim = parse_animation_from_c(read_text(args.source))

    print_info(f"Parsed {animation_preview(anim)}")
    for warning in check_animation_consistency(anim):
        print_warning(warning)

    extractor = open_archive(args.archive, allow_missing=True)
    config = get_config()
    path = args.path or anim.name

    resources = extractor.resources
    for entry in animation_to_resources(anim, path, config.default_resource_version,
                                        config.default_unique_id):
        resources = add_resource(resources, entry, overwrite=args.overwrite)
        print_debug(f"Added {entry.path} ({entry.describe()})")

    save_archive(extractor, resources, args.output)
    return 0


# ==============================================================================
# MESSAGE COMMANDS
# ==============================================================================
def cmd_msg_export(args) -> int:
    """Export a message table as a text document."""
    extractor = open_archive(args.archive)
    resource = require_resource(extractor.resources, args.path)

    messages = parse_messages(resource.data)
    write_text(messages_to_document(messages), args.output)
    return 0


def cmd_msg_import(args) -> int:
    """Replace a message table with the contents of a text document."""
    messages = document_to_messages(read_text(args.document))

    extractor = open_archive(args.archive)
    resources = replace_resource_data(extractor.resources, args.path, messages_to_bytes(messages))
    print_info(f"Imported {len(messages)} messages into {args.path}")

    save_archive(extractor, resources, args.output)
    return 0


# ==============================================================================
# TEXTURE COMMANDS
# ==============================================================================
def cmd_tex_export(args) -> int:
    """Decode a texture to PNG."""
    extractor = open_archive(args.archive)
    resources = extractor.resources
    resource = require_resource(resources, args.path)
    palette = require_resource(resources, args.palette) if args.palette else None

    result = decode_texture_resource(resource, palette)
    if not result.ok:
        print_error(f"Cannot decode {args.path}: {result.message}")
        return 1

    result.to_image().save(args.output, format="PNG")
    print_success(f"Wrote {args.output} ({result.width}x{result.height})")
    return 0


# ==============================================================================
# EDIT COMMANDS
# ==============================================================================
def cmd_move(args) -> int:
    """Move a resource (Link animations take their data resource along)."""
    extractor = open_archive(args.archive)
    resources = move_resource(extractor.resources, args.old_path, args.new_path)
    print_info(f"Moved {args.old_path} -> {args.new_path}")
    save_archive(extractor, resources, args.output)
    return 0


def cmd_create(args) -> int:
    """Create a resource from a raw payload file."""
    payload = b""
    if args.payload:
        with open(args.payload, 'rb') as f:
            payload = f.read()

    config = get_config()
    entry = create_resource(
        args.path, args.type, payload,
        config.default_resource_version if args.version is None else args.version,
        config.default_unique_id,
        is_custom=args.custom,
    )

    extractor = open_archive(args.archive, allow_missing=True)
    resources = add_resource(extractor.resources, entry, overwrite=args.overwrite)
    print_info(f"Created {entry.path} ({entry.describe()})")
    save_archive(extractor, resources, args.output)
    return 0


def cmd_remove(args) -> int:
    extractor = open_archive(args.archive)
    resources = remove_resource(extractor.resources, args.path)
    print_info(f"Removed {args.path}")
    save_archive(extractor, resources, args.output)
    return 0


# ==============================================================================
# CONFIG COMMANDS
# ==============================================================================
def cmd_config_show(args) -> int:
    config = get_config()
    print_info(f"Config file: {config.config_path}")
    for key in sorted(DEFAULT_CONFIG):
        print(f"  {key} = {json.dumps(config.get(key))}")
    return 0


def cmd_config_set(args) -> int:
    """Change a setting; values are read as JSON, falling back to plain text."""
    config = get_config()
    try:
        value = json.loads(args.value)
    except ValueError:
        value = args.value

    try:
        config.set(args.key, value)
    except KeyError:
        print_error(f"Unknown setting: {args.key}")
        return 1
    except (TypeError, ValueError) as e:
        print_error(f"Invalid value for {args.key}: {e}")
        return 1

    if not config.save():
        return 1
    print_success(f"{args.key} = {json.dumps(config.get(args.key))}")
    return 0


# ==============================================================================
# ARGUMENT PARSER
# ==============================================================================
def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="o2r-inspector",
        description="O2R Inspector - browse and edit O2R/OTR resource archives",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s list mod.o2r --type Animation        List animation resources
  %(prog)s info mod.o2r text/nes_message_data    Show a resource header
  %(prog)s anim export mod.o2r <path> -o a.c     Export an animation as C
  %(prog)s msg export mod.o2r <path> -o msg.txt  Export a message table
  %(prog)s tex export mod.o2r <path> out.png     Export a texture as PNG
        """
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--debug', action='store_true', help='Print debug output')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # -------------------------------------------------------------------------
    # BROWSE commands
    # -------------------------------------------------------------------------
    list_parser = subparsers.add_parser('list', help='List archive resources')
    list_parser.add_argument('archive', help='Archive file')
    list_parser.add_argument('--type', choices=sorted(RESOURCE_TYPES.values()),
                             metavar='TYPE', help='Only show resources of this type')
    list_parser.add_argument('--verbose', '-v', action='store_true', help='Show header details')
    list_parser.set_defaults(func=cmd_list)

    tree_parser = subparsers.add_parser('tree', help='Show resources as a folder tree')
    tree_parser.add_argument('archive', help='Archive file')
    tree_parser.set_defaults(func=cmd_tree)

    info_parser = subparsers.add_parser('info', help='Show resource header and hex dump')
    info_parser.add_argument('archive', help='Archive file')
    info_parser.add_argument('path', help='Resource path')
    info_parser.add_argument('--bytes', type=int, default=256,
                             help='Payload bytes to dump (-1 for all, 0 for none)')
    info_parser.set_defaults(func=cmd_info)

    extract_parser = subparsers.add_parser('extract', help='Extract all archive entries')
    extract_parser.add_argument('archive', help='Archive file')
    extract_parser.add_argument('output', help='Output directory')
    extract_parser.set_defaults(func=cmd_extract)

    # -------------------------------------------------------------------------
    # ANIM commands
    # -------------------------------------------------------------------------
    anim_parser = subparsers.add_parser('anim', help='Animation import/export')
    anim_sub = anim_parser.add_subparsers(dest='subcommand')

    anim_export = anim_sub.add_parser('export', help='Export an animation as C source')
    anim_export.add_argument('archive', help='Archive file')
    anim_export.add_argument('path', help='Animation resource path')
    anim_export.add_argument('--output', '-o', help='Output .c file (default: stdout)')
    anim_export.set_defaults(func=cmd_anim_export)

    anim_import = anim_sub.add_parser('import', help='Import an animation from C source')
    anim_import.add_argument('archive', help='Archive file (created if missing)')
    anim_import.add_argument('source', help='C source file (or the data half with --header)')
    anim_import.add_argument('--header', help='Separate C header file')
    anim_import.add_argument('--path', help='Resource path (default: animation name)')
    anim_import.add_argument('--overwrite', action='store_true', help='Replace existing resources')
    anim_import.add_argument('--output', '-o', help='Output archive (default: input archive)')
    anim_import.set_defaults(func=cmd_anim_import)

    # -------------------------------------------------------------------------
    # MSG commands
    # -------------------------------------------------------------------------
    msg_parser = subparsers.add_parser('msg', help='Message table import/export')
    msg_sub = msg_parser.add_subparsers(dest='subcommand')

    msg_export = msg_sub.add_parser('export', help='Export a message table as text')
    msg_export.add_argument('archive', help='Archive file')
    msg_export.add_argument('path', help='Text resource path')
    msg_export.add_argument('--output', '-o', help='Output text file (default: stdout)')
    msg_export.set_defaults(func=cmd_msg_export)

    msg_import = msg_sub.add_parser('import', help='Replace a message table from text')
    msg_import.add_argument('archive', help='Archive file')
    msg_import.add_argument('path', help='Text resource path')
    msg_import.add_argument('document', help='Message text document')
    msg_import.add_argument('--output', '-o', help='Output archive (default: input archive)')
    msg_import.set_defaults(func=cmd_msg_import)

    # -------------------------------------------------------------------------
    # TEX commands
    # -------------------------------------------------------------------------
    tex_parser = subparsers.add_parser('tex', help='Texture export')
    tex_sub = tex_parser.add_subparsers(dest='subcommand')

    tex_export = tex_sub.add_parser('export', help='Decode a texture to PNG')
    tex_export.add_argument('archive', help='Archive file')
    tex_export.add_argument('path', help='Texture resource path')
    tex_export.add_argument('output', help='Output PNG file')
    tex_export.add_argument('--palette', help='Palette texture resource path')
    tex_export.set_defaults(func=cmd_tex_export)

    # -------------------------------------------------------------------------
    # EDIT commands
    # -------------------------------------------------------------------------
    move_parser = subparsers.add_parser('move', help='Move a resource to a new path')
    move_parser.add_argument('archive', help='Archive file')
    move_parser.add_argument('old_path', help='Current resource path')
    move_parser.add_argument('new_path', help='New resource path')
    move_parser.add_argument('--output', '-o', help='Output archive (default: input archive)')
    move_parser.set_defaults(func=cmd_move)

    create_parser = subparsers.add_parser('create', help='Create a resource from a payload')
    create_parser.add_argument('archive', help='Archive file (created if missing)')
    create_parser.add_argument('path', help='New resource path')
    create_parser.add_argument('type', help='Resource type name or FourCC (e.g. Texture, OTEX)')
    create_parser.add_argument('--payload', help='File holding the payload bytes')
    create_parser.add_argument('--version', type=int, help='Resource version')
    create_parser.add_argument('--custom', action='store_true', help='Mark as custom resource')
    create_parser.add_argument('--overwrite', action='store_true', help='Replace an existing resource')
    create_parser.add_argument('--output', '-o', help='Output archive (default: input archive)')
    create_parser.set_defaults(func=cmd_create)

    remove_parser = subparsers.add_parser('remove', help='Remove a resource')
    remove_parser.add_argument('archive', help='Archive file')
    remove_parser.add_argument('path', help='Resource path')
    remove_parser.add_argument('--output', '-o', help='Output archive (default: input archive)')
    remove_parser.set_defaults(func=cmd_remove)

    # -------------------------------------------------------------------------
    # CONFIG commands
    # -------------------------------------------------------------------------
    config_parser = subparsers.add_parser('config', help='Show or change settings')
    config_sub = config_parser.add_subparsers(dest='subcommand')

    config_show = config_sub.add_parser('show', help='Show all settings')
    config_show.set_defaults(func=cmd_config_show)

    config_set = config_sub.add_parser('set', help='Change a setting')
    config_set.add_argument('key', choices=sorted(DEFAULT_CONFIG), metavar='KEY', help='Setting name')
    config_set.add_argument('value', help='New value (JSON or plain text)')
    config_set.set_defaults(func=cmd_config_set)

    return parser


# ==============================================================================
# MAIN ENTRY POINT
# ==============================================================================
def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line interface.

    Args:
        argv: Arguments (defaults to sys.argv[1:])

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    global _debug_override
    _debug_override = args.debug

    config = get_config()
    if args.no_color or not config.color_output or not sys.stdout.isatty():
        Colors.disable()

    if not args.command:
        parser.print_help()
        return 0

    if not hasattr(args, 'func'):
        # Group command without a subcommand
        parser.parse_args([args.command, '--help'])
        return 0

    try:
        return args.func(args)
    except O2RError as e:
        print_error(str(e))
        return 1
    except OSError as e:
        print_error(f"{e.filename or 'File'}: {e.strerror}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
