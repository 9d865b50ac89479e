# ==============================================================================
# O2R EXTRACTOR MODULE
# ==============================================================================
# Archive codec and extractor for O2R/OTR resource archives.
#
# An O2R archive is a plain ZIP file. Every entry whose bytes start with a
# valid 64-byte resource header is a resource; anything else (readme files,
# foreign data, truncated entries) is skipped during decoding so the rest of
# the archive still loads.
#
# Usage:
#   resources = decode_archive(open("mod.o2r", "rb").read())
#   archive_bytes = encode_archive(resources)
#
#   with O2RExtractor("mod.o2r") as ext:
#       anim = ext.get_resource("objects/gameplay_keep/gPlayerAnim_link_normal_wait")
#       ext.save("mod_edited.o2r")
# ==============================================================================

import io
import os
import zipfile
import zlib
from typing import Dict, List, Mapping, Optional

from .base_extractor import BaseExtractor, FileEntry
from ..core.config import get_config
from ..core.errors import ArchiveError
from ..parsers.resource_header import (
    HEADER_SIZE, ResourceEntry, create_resource, parse_header,
)

__all__ = [
    "read_zip_entries",
    "write_zip_entries",
    "decode_entries",
    "decode_archive",
    "encode_archive",
    "create_resource",
    "O2RExtractor",
]


# ==============================================================================
# ZIP CONTAINER
# ==============================================================================

def read_zip_entries(archive_bytes: bytes) -> Dict[str, bytes]:
    """
    Read every file in a ZIP container into memory.

    Directory entries are skipped. A member that cannot be read (bad CRC,
    corrupt compressed stream, unsupported compression or encryption) is
    skipped with a warning so the rest of the archive still loads.

    Raises:
        ArchiveError: If the bytes are not a readable ZIP file
    """
    entries: Dict[str, bytes] = {}
    try:
        with zipfile.ZipFile(io.BytesIO(archive_bytes), 'r') as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                try:
                    entries[info.filename] = zf.read(info)
                except (zipfile.BadZipFile, zlib.error, EOFError,
                        NotImplementedError, RuntimeError) as e:
                    print(f"[WARN] Skipping {info.filename}: {e}")
    except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError) as e:
        raise ArchiveError(f"Not a valid O2R archive: {e}") from e
    return entries


def write_zip_entries(entries: Mapping[str, bytes]) -> bytes:
    """Write a path -> bytes mapping to a DEFLATE-compressed ZIP container."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
        for path, data in entries.items():
            zf.writestr(path, data)
    return buffer.getvalue()


# ==============================================================================
# ARCHIVE CODEC
# ==============================================================================

def decode_entries(entries: Mapping[str, bytes]) -> List[ResourceEntry]:
    """
    Turn raw archive entries into resources.

    Entries shorter than a header or with an unknown type tag are skipped
    with a warning; they never abort decoding.

    Args:
        entries: Mapping of archive path to raw bytes

    Returns:
        Resources in archive order
    """
    resources: List[ResourceEntry] = []

    for path, data in entries.items():
        if len(data) < HEADER_SIZE:
            print(f"[WARN] Skipping {path}: {len(data)} bytes is too small for a resource header")
            continue

        header = parse_header(data)
        if header is None:
            print(f"[WARN] Skipping {path}: unrecognized resource type")
            continue

        resources.append(ResourceEntry(path, header, bytes(data)))

    return resources


def decode_archive(archive_bytes: bytes) -> List[ResourceEntry]:
    """
    Decode an O2R archive into its resources.

    Raises:
        ArchiveError: If the ZIP container itself is unreadable
    """
    return decode_entries(read_zip_entries(archive_bytes))


def encode_archive(entries: List[ResourceEntry], filename: Optional[str] = None) -> bytes:
    """
    Encode resources back into an O2R archive.

    Each resource's full data (header and payload) is written under its path.
    A later entry with the same path replaces an earlier one.

    Args:
        entries: Resources to write
        filename: Name the archive will be saved under, for the log line
            (defaults to the configured default_export_name)

    Returns:
        ZIP archive bytes
    """
    mapping: Dict[str, bytes] = {}
    for entry in entries:
        mapping[entry.path] = entry.data

    archive = write_zip_entries(mapping)
    filename = filename or get_config().default_export_name
    print(f"[INFO] Encoded {len(mapping)} resources for {filename} ({len(archive)} bytes)")
    return archive


# ==============================================================================
# O2R EXTRACTOR CLASS
# ==============================================================================
class O2RExtractor(BaseExtractor):
    """
    Extractor for O2R/OTR archives on disk.

    Keeps the raw archive entries for listing/extraction and the decoded
    resources for editing. Editing operations elsewhere return new resource
    lists; assign them back to ``resources`` and call save().

    Attributes:
        archive_path (str): Path of the open archive
    """

    def __init__(self, archive_path: Optional[str] = None):
        self._entries: Dict[str, bytes] = {}
        self._resources: List[ResourceEntry] = []
        super().__init__(archive_path)

    # ==========================================================================
    # ABSTRACT PROPERTY IMPLEMENTATIONS
    # ==========================================================================

    @property
    def format_name(self) -> str:
        return "O2R Resource Archive"

    @property
    def supported_extensions(self) -> List[str]:
        return ['.o2r', '.otr', '.zip']

    # ==========================================================================
    # ABSTRACT METHOD IMPLEMENTATIONS
    # ==========================================================================

    def detect(self, path: str) -> bool:
        """Check the extension and the ZIP signature."""
        ext = os.path.splitext(path)[1].lower()
        if ext not in self.supported_extensions or not os.path.isfile(path):
            return False
        return zipfile.is_zipfile(path)

    def open(self, archive_path: str) -> bool:
        """
        Open an archive and decode its resources.

        Returns:
            True if the archive was read
        """
        if self._is_open:
            self.close()

        self.archive_path = archive_path

        try:
            with open(archive_path, 'rb') as f:
                archive_bytes = f.read()
            self._entries = read_zip_entries(archive_bytes)
        except (OSError, ArchiveError) as e:
            print(f"[ERROR] Failed to open archive {archive_path}: {e}")
            self.close()
            return False

        self._file_list = [FileEntry(path, len(data)) for path, data in self._entries.items()]
        self._resources = decode_entries(self._entries)
        self._is_open = True

        print(f"[INFO] Opened archive: {archive_path}")
        print(f"[INFO] Files: {len(self._file_list)}, Resources: {len(self._resources)}")
        return True

    def close(self):
        self._entries = {}
        self._resources = []
        self._file_list = []
        self._is_open = False

    def get_file_data(self, file_path: str) -> Optional[bytes]:
        return self._entries.get(file_path)

    # ==========================================================================
    # RESOURCE ACCESS
    # ==========================================================================

    @property
    def resources(self) -> List[ResourceEntry]:
        return list(self._resources)

    @resources.setter
    def resources(self, resources: List[ResourceEntry]):
        self._resources = list(resources)

    def get_resource(self, path: str) -> Optional[ResourceEntry]:
        for resource in self._resources:
            if resource.path == path:
                return resource
        return None

    def save(self, output_path: Optional[str] = None) -> str:
        """
        Write the current resources to an archive file.

        Foreign (non-resource) files from the original archive are not kept.

        Args:
            output_path: Destination file (defaults to the opened archive).
                An existing directory receives the configured
                default_export_name.

        Returns:
            The path written
        """
        output_path = output_path or self.archive_path
        if not output_path:
            raise ArchiveError("No output path given and no archive is open")
        if os.path.isdir(output_path):
            output_path = os.path.join(output_path, get_config().default_export_name)

        archive_bytes = encode_archive(self._resources, os.path.basename(output_path))

        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(output_path, 'wb') as f:
            f.write(archive_bytes)

        print(f"[INFO] Saved archive: {output_path}")
        return output_path
