# ==============================================================================
# O2R INSPECTOR - ERROR TYPES
# ==============================================================================
# Every codec in this package raises one of these when an operation cannot
# complete. Per-entry problems during archive decoding are NOT errors: those
# entries are skipped and logged, the rest of the archive still decodes.
#
# Hierarchy:
#   O2RError
#     ResourceFormatError          structural problems in binary data
#       TruncatedDataError         read past the end of a buffer
#       AnimationFormatError       animation payload cannot be decoded
#       MessageFormatError         message table / text document is malformed
#     UnknownResourceTypeError     name or FourCC not in the type registry
#     ArchiveError                 the ZIP container itself is unreadable
#     AnimationSourceError         C source does not match the grammar
#       PartialAnimationSourceError  only one half of a split animation given
#     MissingCompanionError        Link header without its data resource
#     ResourceConflictError        target path already taken
#     ResourceNotFoundError        no resource at the requested path
# ==============================================================================


class O2RError(Exception):
    """Base class for all O2R Inspector errors."""


class ResourceFormatError(O2RError):
    """Binary data does not match the layout the codec expects."""


class TruncatedDataError(ResourceFormatError):
    """A read would run past the end of the buffer."""

    def __init__(self, offset: int, size: int, end: int):
        self.offset = offset
        self.size = size
        self.end = end
        super().__init__(
            f"Read of {size} bytes at offset {offset} would exceed boundary at {end}"
        )


class AnimationFormatError(ResourceFormatError):
    """Animation payload is structurally invalid."""


class MessageFormatError(ResourceFormatError):
    """Message table or message text document is malformed."""


class UnknownResourceTypeError(O2RError):
    """Resource type name or tag is not in the registry."""


class ArchiveError(O2RError):
    """The archive container could not be read or written."""


class AnimationSourceError(O2RError):
    """C source text could not be parsed as an animation."""


class PartialAnimationSourceError(AnimationSourceError):
    """C source holds only part of an animation (header or data missing)."""


class MissingCompanionError(O2RError):
    """A Link animation header references a data resource that is absent."""

    def __init__(self, message: str, data_path: str = ""):
        self.data_path = data_path
        super().__init__(message)


class ResourceConflictError(O2RError):
    """A resource already exists at the target path."""


class ResourceNotFoundError(O2RError):
    """No resource exists at the requested path."""
