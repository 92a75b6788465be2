"""Track-list document: models, tree combinators, backups and the store."""

from ..exceptions import (
    DuplicateTrackError,
    FileInUseError,
    InvalidSectionError,
    MediaNotFoundError,
    MigrationKeyError,
    RangeNotSatisfiableError,
    TrackListError,
    TrackListIOError,
    TrackNotFoundError,
    TrackValidationError,
)
from .ids import derive_id, migrate_ids, slugify
from .models import (
    FIXED_SECTIONS,
    SECTION_SETTINGS_KEY,
    TRACK_TYPES,
    SectionSettings,
    Track,
    TrackListDocument,
)
from .store import MutationResult, TrackListStore

__all__ = [
    "DuplicateTrackError",
    "FileInUseError",
    "InvalidSectionError",
    "MediaNotFoundError",
    "MigrationKeyError",
    "RangeNotSatisfiableError",
    "TrackListError",
    "TrackListIOError",
    "TrackNotFoundError",
    "TrackValidationError",
    "derive_id",
    "migrate_ids",
    "slugify",
    "FIXED_SECTIONS",
    "SECTION_SETTINGS_KEY",
    "TRACK_TYPES",
    "SectionSettings",
    "Track",
    "TrackListDocument",
    "MutationResult",
    "TrackListStore",
]
