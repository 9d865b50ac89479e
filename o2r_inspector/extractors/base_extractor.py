# ==============================================================================
# BASE EXTRACTOR MODULE
# ==============================================================================
# Abstract base class for archive extractors.
#
# An extractor opens an archive on disk, lists the files in it and hands out
# their raw bytes. Format-specific decoding of those bytes happens in the
# parsers package.
#
# Example:
#   with O2RExtractor("mods/custom.o2r") as ext:
#       for entry in ext.list_files():
#           print(entry.path, entry.size)
#       ext.extract_all("output/")
# ==============================================================================

import fnmatch
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional


# ==============================================================================
# FILE ENTRY DATA CLASS
# ==============================================================================
@dataclass
class FileEntry:
    """
    Represents a file entry within an archive.

    Attributes:
        path (str):            Relative path within the archive
        size (int):            Uncompressed file size
        compressed_size (int): Stored size (defaults to size)
    """
    path: str
    size: int
    compressed_size: int = 0

    def __post_init__(self):
        if self.compressed_size == 0:
            self.compressed_size = self.size


def is_within_directory(directory: str, target: str) -> bool:
    """
    Check that ``target`` resolves to a location strictly inside ``directory``.

    Symlinks and ``..`` components are resolved first. Paths on another drive
    count as outside.
    """
    directory = os.path.realpath(directory)
    target = os.path.realpath(target)
    if target == directory:
        return False
    try:
        return os.path.commonpath([directory, target]) == directory
    except ValueError:
        return False


# ==============================================================================
# BASE EXTRACTOR ABSTRACT CLASS
# ==============================================================================
class BaseExtractor(ABC):
    """
    Abstract base class for archive extractors.

    The typical workflow is:
        1. Create extractor instance
        2. Open an archive with open()
        3. List files with list_files()
        4. Read with get_file_data() or extract with extract_file()
        5. Close with close()

    Or use as a context manager.
    """

    def __init__(self, archive_path: Optional[str] = None):
        """
        Initialize the extractor.

        Args:
            archive_path: Optional path to archive to open immediately
        """
        self.archive_path = archive_path
        self._is_open = False
        self._file_list: List[FileEntry] = []

        if archive_path:
            self.open(archive_path)

    # ==========================================================================
    # ABSTRACT PROPERTIES
    # ==========================================================================

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Human-readable name of the archive format."""

    @property
    @abstractmethod
    def supported_extensions(self) -> List[str]:
        """File extensions including the dot (e.g. ['.o2r'])."""

    # ==========================================================================
    # ABSTRACT METHODS
    # ==========================================================================

    @abstractmethod
    def detect(self, path: str) -> bool:
        """Check if this extractor can handle the given file."""

    @abstractmethod
    def open(self, archive_path: str) -> bool:
        """
        Open an archive for reading and populate self._file_list.

        Returns:
            True if successfully opened
        """

    @abstractmethod
    def close(self):
        """Close the archive and release resources."""

    @abstractmethod
    def get_file_data(self, file_path: str) -> Optional[bytes]:
        """
        Get the raw data of a file without writing to disk.

        Returns:
            File contents, or None if the file is not in the archive
        """

    # ==========================================================================
    # COMMON METHODS
    # ==========================================================================

    @property
    def is_open(self) -> bool:
        return self._is_open

    def list_files(self) -> List[FileEntry]:
        """Get a list of all files in the archive."""
        return list(self._file_list)

    def extract_file(self, file_path: str, output_path: str) -> bool:
        """
        Extract a single file from the archive.

        Returns:
            True if the file existed and was written
        """
        data = self.get_file_data(file_path)
        if data is None:
            return False

        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(output_path, 'wb') as f:
            f.write(data)
        return True

    def extract_all(self, output_dir: str,
                    progress_callback: Optional[Callable[[int, int, str], None]] = None) -> int:
        """
        Extract all files from the archive.

        Entries whose names would resolve outside ``output_dir`` (``..``
        components, absolute names) are skipped with a warning.

        Args:
            output_dir: Directory to extract files to
            progress_callback: Optional callback(current, total, filename)

        Returns:
            Number of files successfully extracted
        """
        if not self._is_open:
            raise RuntimeError("Archive is not open")

        files = self.list_files()

        total = len(files)
        extracted = 0

        for idx, entry in enumerate(files):
            if progress_callback:
                progress_callback(idx + 1, total, entry.path)

            output_path = os.path.join(output_dir, *entry.path.split("/"))
            if not is_within_directory(output_dir, output_path):
                print(f"[WARN] Skipping {entry.path}: path escapes the output folder")
                continue

            if self.extract_file(entry.path, output_path):
                extracted += 1

        return extracted

    def find_files(self, pattern: str) -> List[FileEntry]:
        """
        Find files matching a case-insensitive glob pattern.

        Args:
            pattern: Glob pattern (e.g. "textures/*", "*gPlayerAnim*")
        """
        pattern_lower = pattern.lower()
        return [entry for entry in self._file_list
                if fnmatch.fnmatch(entry.path.lower(), pattern_lower)]

    def get_file_count(self) -> int:
        return len(self._file_list)

    # ==========================================================================
    # CONTEXT MANAGER SUPPORT
    # ==========================================================================

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
