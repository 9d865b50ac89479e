# ==============================================================================
# EXTRACTORS MODULE INIT
# ==============================================================================
# Archive access for O2R Inspector.
#
#   - BaseExtractor: Abstract base class defining the extractor interface
#   - O2RExtractor: O2R/OTR archives (ZIP containers of resources)
#   - decode_archive / encode_archive: in-memory archive codec
#
# Usage:
#   from o2r_inspector.extractors import O2RExtractor
#   with O2RExtractor("mod.o2r") as ext:
#       ext.extract_all("output/")
# ==============================================================================

from .base_extractor import BaseExtractor, FileEntry
from .o2r_extractor import (
    O2RExtractor, read_zip_entries, write_zip_entries, decode_entries,
    decode_archive, encode_archive, create_resource,
)

__all__ = [
    # Base classes
    'BaseExtractor',
    'FileEntry',

    # O2R archives
    'O2RExtractor',
    'read_zip_entries',
    'write_zip_entries',
    'decode_entries',
    'decode_archive',
    'encode_archive',
    'create_resource',
]
