"""Media asset models."""

from typing import NamedTuple, Optional


class MediaFile(NamedTuple):
    """An audio file in the media directory, as listed by GET /tracks."""

    filename: str
    name: str
    description: str = ""
    duration: Optional[float] = None  # in seconds, None when unreadable

    @property
    def id(self) -> str:
        return self.filename

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "filename": self.filename,
            "name": self.name,
            "description": self.description,
            "duration": format_duration(self.duration),
        }


class ByteRange(NamedTuple):
    """An inclusive byte span of a file."""

    start: int
    end: int
    file_size: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.file_size}"


def format_duration(seconds: Optional[float]) -> Optional[str]:
    """Format seconds as m:ss (e.g. 185.4 -> '3:05')."""
    if seconds is None:
        return None
    minutes = int(seconds // 60)
    remaining = int(seconds % 60)
    return f"{minutes}:{remaining:02d}"
