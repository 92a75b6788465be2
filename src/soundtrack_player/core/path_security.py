"""
Path security validation utilities for Soundtrack Player.

Provides pure functions to validate that requested media files stay inside the
media directory, preventing directory traversal attacks and symlink escapes.
"""

from pathlib import Path
from typing import Optional


def is_path_within_directory(file_path: Path, directory: Path) -> bool:
    """Pure function - validates path is within the given directory.

    Uses Path.resolve() to handle symlinks and relative paths, then checks if the
    resolved path is a child of the resolved directory.

    Args:
        file_path: The file path to validate
        directory: Allowed root directory

    Returns:
        True if path is within the directory, False otherwise
    """
    try:
        resolved_path = file_path.resolve()
        resolved_root = directory.resolve()
        resolved_path.relative_to(resolved_root)
        return True
    except ValueError:
        # relative_to raises ValueError if path is not a subpath
        return False
    except (OSError, RuntimeError):
        # Path.resolve() can raise OSError for invalid paths or RuntimeError for recursion
        return False


def resolve_media_file(filename: str, media_dir: Path) -> Optional[Path]:
    """Pure function - returns the validated path of a media file or None.

    Only bare filenames are accepted: anything containing a path separator or
    resolving outside ``media_dir`` is rejected, as are missing files.

    Args:
        filename: File name as received from a client
        media_dir: Media directory root

    Returns:
        The validated Path if it exists inside the media directory, None otherwise
    """
    if not filename or filename in (".", ".."):
        return None
    if "/" in filename or "\\" in filename or "\x00" in filename:
        return None

    file_path = media_dir / filename
    if not file_path.is_file():
        return None

    if not is_path_within_directory(file_path, media_dir):
        return None

    return file_path
