# ==============================================================================
# O2R INSPECTOR - SOURCE PACKAGE
# ==============================================================================
# Inspector/editor toolkit for O2R/OTR resource archives.
#
# Subpackages:
#   - core: Binary primitives, errors, configuration, resource operations
#   - extractors: Archive access (ZIP container + resource decoding)
#   - parsers: Resource header, animation, message and texture codecs
#
# Entry points:
#   - main.py: CLI launcher
#   - o2r_inspector/cli.py: Command-line interface
# ==============================================================================

__version__ = "1.0.0"
__description__ = "Inspector and editor for O2R/OTR resource archives"

# Convenience imports
from .extractors import O2RExtractor, decode_archive, encode_archive, create_resource
from .parsers import ResourceEntry, ResourceHeader, build_header, parse_header

__all__ = [
    '__version__',
    '__description__',

    # Archive
    'O2RExtractor',
    'decode_archive',
    'encode_archive',
    'create_resource',

    # Resources
    'ResourceEntry',
    'ResourceHeader',
    'build_header',
    'parse_header',
]
