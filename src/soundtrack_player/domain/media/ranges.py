"""HTTP Range header parsing for audio seeking."""

import re
from typing import Optional

from loguru import logger

from soundtrack_player.domain.exceptions import RangeNotSatisfiableError

from .models import ByteRange

_RANGE = re.compile(r"^\s*bytes\s*=\s*(\d*)\s*-\s*(\d*)\s*$")


def parse_range_header(header: Optional[str], file_size: int) -> Optional[ByteRange]:
    """Resolve a single-range ``Range`` header against a file size.

    Supports ``bytes=a-b``, ``bytes=a-`` and suffix ranges ``bytes=-n``. An
    end beyond the file is clamped to the last byte. Multi-range requests and
    headers that do not parse are ignored, so the whole file is served.

    Returns:
        The ByteRange to serve, or None when the whole file should be sent

    Raises:
        RangeNotSatisfiableError: If a well-formed range lies outside the file
    """
    if not header:
        return None
    if "," in header:
        return None

    match = _RANGE.match(header)
    if not match:
        logger.debug(f"Ignoring malformed Range header: {header!r}")
        return None

    start_s, end_s = match.groups()
    if not start_s and not end_s:
        logger.debug(f"Ignoring malformed Range header: {header!r}")
        return None

    if not start_s:
        # Suffix range: the last n bytes
        suffix = int(end_s)
        if suffix == 0 or file_size == 0:
            raise RangeNotSatisfiableError(file_size)
        start = max(0, file_size - suffix)
        end = file_size - 1
    else:
        start = int(start_s)
        if end_s and int(end_s) < start:
            logger.debug(f"Ignoring Range header with end before start: {header!r}")
            return None
        end = int(end_s) if end_s else file_size - 1
        end = min(end, file_size - 1)

    if start >= file_size:
        raise RangeNotSatisfiableError(file_size)

    return ByteRange(start=start, end=end, file_size=file_size)
