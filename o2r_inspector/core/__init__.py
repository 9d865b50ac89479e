# ==============================================================================
# CORE MODULE INIT
# ==============================================================================
# Core building blocks shared by every codec:
#   - errors: Exception hierarchy (O2RError and subclasses)
#   - binary: BinaryReader, packing helpers, FourCC conversion, hex dumps
#   - config: Application configuration management
#   - paths: Per-user data directory resolution
#
# Resource list editing lives in core.resource_ops; it builds on the parsers
# package and is imported from there directly:
#   from o2r_inspector.core.resource_ops import move_resource, build_tree
# ==============================================================================

from .errors import (
    O2RError, ResourceFormatError, TruncatedDataError, AnimationFormatError,
    MessageFormatError, UnknownResourceTypeError, ArchiveError,
    AnimationSourceError, PartialAnimationSourceError, MissingCompanionError,
    ResourceConflictError, ResourceNotFoundError,
)
from .binary import BinaryReader, fourcc_to_string, string_to_fourcc, format_hex_dump
from .config import Config, get_config
from .paths import Paths

__all__ = [
    # Errors
    'O2RError',
    'ResourceFormatError',
    'TruncatedDataError',
    'AnimationFormatError',
    'MessageFormatError',
    'UnknownResourceTypeError',
    'ArchiveError',
    'AnimationSourceError',
    'PartialAnimationSourceError',
    'MissingCompanionError',
    'ResourceConflictError',
    'ResourceNotFoundError',

    # Binary
    'BinaryReader',
    'fourcc_to_string',
    'string_to_fourcc',
    'format_hex_dump',

    # Configuration
    'Config',
    'get_config',

    # Paths
    'Paths',
]
