"""Media asset access - listing, ranged streaming and guarded deletes."""

from .models import ByteRange, MediaFile, format_duration
from .ranges import parse_range_header
from .store import MediaStore, get_duration, get_mime_type, iter_file_range

__all__ = [
    "ByteRange",
    "MediaFile",
    "format_duration",
    "parse_range_header",
    "MediaStore",
    "get_duration",
    "get_mime_type",
    "iter_file_range",
]
