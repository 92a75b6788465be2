"""
Media directory access: listing, durations, ranged reads and guarded deletes.

Handles reading audio durations using Mutagen. Files are only ever resolved
inside the media directory.
"""

import json
import mimetypes
from pathlib import Path
from typing import Any, Iterator, Optional

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError

from soundtrack_player.core.config import MediaConfig
from soundtrack_player.core.json_store import read_json
from soundtrack_player.core.path_security import resolve_media_file

from ..exceptions import FileInUseError, MediaNotFoundError
from ..tracklist.store import TrackListStore
from .models import ByteRange, MediaFile
from .ranges import parse_range_header

AUDIO_MIME_TYPES: dict[str, str] = {
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".opus": "audio/opus",
    ".flac": "audio/flac",
}

CHUNK_SIZE = 64 * 1024


def get_mime_type(file_path: Path) -> str:
    """Pure function - deterministic MIME type detection."""
    mime = AUDIO_MIME_TYPES.get(file_path.suffix.lower())
    if mime:
        return mime
    guessed, _ = mimetypes.guess_type(str(file_path))
    return guessed or "application/octet-stream"


def get_duration(file_path: Path) -> Optional[float]:
    """Audio length in seconds, or None if Mutagen cannot read the file."""
    try:
        audio = MutagenFile(file_path)
    except (MutagenError, OSError) as e:
        logger.debug(f"Could not read duration of {file_path.name}: {e}")
        return None
    if audio is None or audio.info is None:
        return None
    return float(audio.info.length)


def iter_file_range(file_path: Path, start: int, end: int, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield bytes ``start..end`` (inclusive) of a file in chunks."""
    with open(file_path, "rb") as f:
        f.seek(start)
        remaining = end - start + 1
        while remaining > 0:
            data = f.read(min(chunk_size, remaining))
            if not data:
                break
            remaining -= len(data)
            yield data


class MediaStore:
    """Audio and image files in the media directory."""

    def __init__(
        self,
        media_dir: Path,
        audio_formats: Optional[list[str]] = None,
        image_formats: Optional[list[str]] = None,
        metadata_path: Optional[Path] = None,
    ):
        self.media_dir = media_dir
        self.audio_formats = [f.lower() for f in (audio_formats or [".mp3"])]
        self.image_formats = [
            f.lower() for f in (image_formats or [".jpg", ".jpeg", ".png", ".gif"])
        ]
        self.metadata_path = metadata_path or media_dir / "metadata.json"

    @classmethod
    def from_config(cls, config: MediaConfig) -> "MediaStore":
        return cls(
            media_dir=config.media_path,
            audio_formats=config.audio_formats,
            image_formats=config.image_formats,
            metadata_path=config.metadata_path,
        )

    def _files_with(self, formats: list[str]) -> list[Path]:
        if not self.media_dir.is_dir():
            return []
        return sorted(
            (p for p in self.media_dir.iterdir() if p.is_file() and p.suffix.lower() in formats),
            key=lambda p: p.name,
        )

    def _metadata(self) -> dict[str, Any]:
        """Optional per-file display names and descriptions."""
        if not self.metadata_path.exists():
            return {}
        try:
            data = read_json(self.metadata_path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable {self.metadata_path.name}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def exists(self, filename: str) -> bool:
        return resolve_media_file(filename, self.media_dir) is not None

    def resolve(self, filename: str) -> Path:
        """Validated path of a media file.

        Raises:
            MediaNotFoundError: If the file is missing or outside the media directory
        """
        path = resolve_media_file(filename, self.media_dir)
        if path is None:
            raise MediaNotFoundError(filename)
        return path

    def list_audio(self) -> list[MediaFile]:
        metadata = self._metadata()
        files = []
        for path in self._files_with(self.audio_formats):
            info = metadata.get(path.name) or {}
            files.append(
                MediaFile(
                    filename=path.name,
                    name=info.get("name") or path.stem,
                    description=info.get("description") or "",
                    duration=get_duration(path),
                )
            )
        return files

    def album_cover(self) -> Optional[str]:
        """Filename of the first image in the media directory, if any."""
        images = self._files_with(self.image_formats)
        return images[0].name if images else None

    def resolve_image(self, filename: str) -> Path:
        path = self.resolve(filename)
        if path.suffix.lower() not in self.image_formats:
            raise MediaNotFoundError(filename)
        return path

    def open_range(self, filename: str, range_header: Optional[str]) -> tuple[Path, Optional[ByteRange]]:
        """Resolve a file and the byte span a Range header asks for.

        Returns:
            (path, None) for a full-file response, (path, ByteRange) for a 206

        Raises:
            MediaNotFoundError: If the file does not exist
            RangeNotSatisfiableError: If the range cannot be served
        """
        path = self.resolve(filename)
        byte_range = parse_range_header(range_header, path.stat().st_size)
        return path, byte_range

    def delete(self, filename: str, track_list: TrackListStore) -> None:
        """Delete a media file that no track references.

        Raises:
            MediaNotFoundError: If the file does not exist
            FileInUseError: If any track or subtrack references the file
        """
        path = self.resolve(filename)
        # No assignment may land between the reference check and the unlink
        with track_list.lock:
            referenced_by = track_list.references(filename)
            if referenced_by:
                logger.warning(f"Refusing to delete {filename}: referenced by {referenced_by}")
                raise FileInUseError(filename, referenced_by)
            path.unlink()
        logger.info(f"Deleted media file {filename}")
