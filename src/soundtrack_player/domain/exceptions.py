"""Domain exceptions for track-list, media and stem-mix operations."""


class TrackListError(Exception):
    """Base exception for track-list and media operations."""

    pass


class TrackNotFoundError(TrackListError):
    """Raised when no track or subtrack matches the given id."""

    def __init__(self, track_id: str, message: str = None):
        self.track_id = track_id
        super().__init__(message or f"Track not found: {track_id}")


class InvalidSectionError(TrackListError):
    """Raised when a section key is not present in the document."""

    def __init__(self, section: str, message: str = None):
        self.section = section
        super().__init__(message or f"Invalid section: {section}")


class DuplicateTrackError(TrackListError):
    """Raised when a track id already exists elsewhere in the document."""

    def __init__(self, track_id: str, message: str = None):
        self.track_id = track_id
        super().__init__(message or f"Track id already exists: {track_id}")


class TrackValidationError(TrackListError):
    """Raised when input is structurally valid JSON but semantically wrong."""

    pass


class TrackListIOError(TrackListError):
    """Raised when a document cannot be read, parsed or written."""

    pass


class MediaNotFoundError(TrackListError):
    """Raised when a media file does not exist in the media directory."""

    def __init__(self, filename: str, message: str = None):
        self.filename = filename
        super().__init__(message or f"Media file not found: {filename}")


class FileInUseError(TrackListError):
    """Raised when deleting a media file that a track still references."""

    def __init__(self, filename: str, track_ids: list[str]):
        self.filename = filename
        self.track_ids = track_ids
        super().__init__(
            f"File {filename} is referenced by {len(track_ids)} track(s): "
            + ", ".join(track_ids)
        )


class RangeNotSatisfiableError(TrackListError):
    """Raised when a Range header cannot be served for a file."""

    def __init__(self, file_size: int, message: str = None):
        self.file_size = file_size
        super().__init__(message or "Requested range not satisfiable")


class MigrationKeyError(TrackListError):
    """Raised when the shared migration key is missing or wrong."""

    pass
