"""
File-backed track-list store.

Every mutation loads the whole document, changes an in-memory copy, snapshots
the previous version into backups/ and atomically replaces trackList.json.
Mutations within one process are serialized per document path; separate
processes still race (last writer wins).
"""

import json
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger

from soundtrack_player.core.config import MediaConfig
from soundtrack_player.core.json_store import read_json, write_json_atomic

from ..exceptions import (
    DuplicateTrackError,
    InvalidSectionError,
    TrackListIOError,
    TrackNotFoundError,
    TrackValidationError,
)
from . import backups, tree
from .ids import derive_id, migrate_ids
from .models import (
    SECTION_SETTINGS_KEY,
    TRACK_TYPES,
    SectionSettings,
    Track,
    TrackListDocument,
)

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _locks_guard:
        if key not in _locks:
            _locks[key] = threading.RLock()
        return _locks[key]


@dataclass
class MutationResult:
    """Outcome of a store mutation."""

    document: TrackListDocument
    value: Any = None
    changed: bool = True
    backup_path: Optional[Path] = None


def _validate_type(track_type: Optional[str]) -> None:
    if track_type and track_type not in TRACK_TYPES:
        raise TrackValidationError(
            f"Invalid track type: {track_type}. Must be one of {', '.join(TRACK_TYPES)}"
        )


def _validate_tree(tracks: list[Track]) -> None:
    for location in tree.walk(tracks):
        if not location.track.title.strip():
            raise TrackValidationError("Track title cannot be empty")
        if not location.track.id:
            raise TrackValidationError(f"Track {location.track.title!r} has no id")
        _validate_type(location.track.type)


def _ensure_unique_ids(document: TrackListDocument) -> None:
    seen: set[str] = set()
    for track_id in tree.collect_ids(document):
        if track_id in seen:
            raise DuplicateTrackError(track_id)
        seen.add(track_id)


def _require_section(document: TrackListDocument, section: str) -> list[Track]:
    if section not in document.sections:
        raise InvalidSectionError(section)
    return document.sections[section]


class TrackListStore:
    """Load, mutate and persist the TrackListDocument."""

    def __init__(
        self,
        path: Path,
        backup_dir: Optional[Path] = None,
        template_path: Optional[Path] = None,
        backups_to_keep: int = backups.DEFAULT_KEEP,
    ):
        self.path = path
        self.backup_dir = backup_dir or path.parent / "backups"
        self.template_path = template_path
        self.backups_to_keep = backups_to_keep
        self._lock = _lock_for(path)

    @classmethod
    def from_config(cls, config: MediaConfig) -> "TrackListStore":
        return cls(
            path=config.track_list_path,
            backup_dir=config.backups_path,
            template_path=Path(config.template_path).expanduser()
            if config.template_path
            else None,
            backups_to_keep=config.backups_to_keep,
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _initial_document(self) -> TrackListDocument:
        if self.template_path and self.template_path.exists():
            try:
                document = TrackListDocument.from_dict(read_json(self.template_path))
            except (json.JSONDecodeError, TrackValidationError) as e:
                raise TrackListIOError(
                    f"Track list template {self.template_path} is invalid: {e}"
                ) from e
            logger.info(f"Initializing track list from template {self.template_path}")
            return document
        logger.info("Initializing empty track list")
        return TrackListDocument.empty()

    def load(self) -> TrackListDocument:
        """Read the document, creating it on first use.

        Raises:
            TrackListIOError: If the file exists but cannot be read or parsed
        """
        with self._lock:
            if not self.path.exists():
                document = self._initial_document()
                self._write(document)
                return document

            try:
                data = read_json(self.path)
            except json.JSONDecodeError as e:
                raise TrackListIOError(f"Track list is not valid JSON: {e}") from e
            except OSError as e:
                raise TrackListIOError(f"Failed to read track list: {e}") from e

            try:
                return TrackListDocument.from_dict(data)
            except TrackValidationError as e:
                raise TrackListIOError(f"Track list has an invalid shape: {e}") from e

    def _write(self, document: TrackListDocument) -> None:
        try:
            write_json_atomic(self.path, document.to_dict())
        except OSError as e:
            # The atomic rename never happened, so the previous file is intact
            logger.error(f"Failed to write track list, previous version kept: {e}")
            raise TrackListIOError(f"Failed to write track list: {e}") from e

    def backup(self, data: dict[str, Any], label: Optional[str] = None) -> Optional[Path]:
        """Snapshot ``data`` into the backups directory.

        Failures are logged and swallowed: the write that follows is atomic,
        so a missing snapshot never corrupts the document.
        """
        try:
            return backups.create_backup(
                data, self.backup_dir, keep=self.backups_to_keep, label=label
            )
        except OSError as e:
            logger.warning(f"Backup failed, continuing without snapshot: {e}")
            return None

    def _mutate(
        self,
        operation: Callable[[TrackListDocument], Any],
        label: Optional[str] = None,
    ) -> MutationResult:
        with self._lock:
            document = self.load()
            before = document.to_dict()
            value = operation(document)
            if document.to_dict() == before:
                return MutationResult(document=document, value=value, changed=False)

            backup_path = self.backup(before, label=label)
            self._write(document)
            return MutationResult(
                document=document, value=value, changed=True, backup_path=backup_path
            )

    @property
    def lock(self) -> threading.RLock:
        """The per-document writer lock; hold it to keep the document stable across calls."""
        return self._lock

    def list_backups(self) -> list[Path]:
        return backups.list_backups(self.backup_dir)

    def restore_latest_backup(self) -> MutationResult:
        """Replace the document with the newest backup.

        The current document is itself backed up first (label ``pre-restore``).

        Raises:
            TrackListIOError: If there is no backup or it cannot be parsed
        """
        with self._lock:
            latest = backups.latest_backup(self.backup_dir)
            if latest is None:
                raise TrackListIOError("No backup available to restore")
            try:
                restored = TrackListDocument.from_dict(read_json(latest))
            except (OSError, json.JSONDecodeError, TrackValidationError) as e:
                raise TrackListIOError(f"Backup {latest.name} is unreadable: {e}") from e

            if self.path.exists():
                try:
                    self.backup(read_json(self.path), label="pre-restore")
                except (OSError, json.JSONDecodeError):
                    logger.warning("Current track list unreadable, restoring without snapshot")

            self._write(restored)
            logger.info(f"Restored track list from {latest.name}")
            return MutationResult(document=restored, value=latest, backup_path=latest)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def references(self, filename: str) -> list[str]:
        """Ids of every track or subtrack whose filename is ``filename``."""
        return [
            location.track.id
            for _, location in tree.walk_document(self.load())
            if location.track.filename == filename
        ]

    def list_sections(self) -> list[dict[str, Any]]:
        document = self.load()
        return [
            {
                "id": name,
                "name": document.settings.get(name, SectionSettings()).name or name,
                "hidden": document.settings.get(name, SectionSettings()).hidden,
                "trackCount": len(tracks),
            }
            for name, tracks in document.sections.items()
        ]

    # ------------------------------------------------------------------
    # Track mutations
    # ------------------------------------------------------------------

    def save_document(self, data: dict[str, Any]) -> MutationResult:
        """Replace the whole document after validating it."""
        replacement = TrackListDocument.from_dict(data)
        for tracks in replacement.sections.values():
            _validate_tree(tracks)
        _ensure_unique_ids(replacement)

        def _replace(document: TrackListDocument) -> None:
            document.sections = replacement.sections
            document.settings = replacement.settings

        result = self._mutate(_replace)
        logger.info("Track list saved")
        return result

    def assign_file(self, track_id: str, filename: Optional[str]) -> MutationResult:
        """Set or clear the file of any track or subtrack."""

        def _assign(document: TrackListDocument) -> Track:
            found = tree.find_in_document(document, tree.by_id(track_id))
            if found is None:
                raise TrackNotFoundError(track_id)
            track = found[1].track
            track.filename = filename or None
            return track

        result = self._mutate(_assign)
        logger.info(f"Assigned {filename or 'no file'} to track {track_id}")
        return result

    def add_track(
        self,
        section: str,
        new_track: dict[str, Any],
        parent_id: Optional[str] = None,
    ) -> MutationResult:
        """Append a track to a section, or to a parent's subtracks."""
        track = Track.from_dict(new_track)
        track.title = track.title.strip()
        if not track.title:
            raise TrackValidationError("Track title cannot be empty")
        if not track.id:
            track.id = derive_id(track.title, parent_id)
        _validate_tree([track])

        def _add(document: TrackListDocument) -> Track:
            target = tree.child_list(_require_section(document, section), parent_id)
            existing = set(tree.collect_ids(document))
            for location in tree.walk([track]):
                if location.track.id in existing:
                    raise DuplicateTrackError(location.track.id)
                existing.add(location.track.id)
            target.append(track)
            return track

        result = self._mutate(_add)
        logger.info(
            f"Added track {track.id} to {section}"
            + (f" under {parent_id}" if parent_id else "")
        )
        return result

    def update_track(
        self, section: str, track_id: str, updates: dict[str, Any]
    ) -> MutationResult:
        """Merge ``updates`` into a track; id, status and subtracks are not updatable."""

        def _update(document: TrackListDocument) -> Track:
            location = tree.find(_require_section(document, section), tree.by_id(track_id))
            if location is None:
                raise TrackNotFoundError(track_id)
            track = location.track

            for key, value in updates.items():
                if key in ("id", "status", "subtracks"):
                    continue
                if key == "title":
                    title = str(value or "").strip()
                    if not title:
                        raise TrackValidationError("Track title cannot be empty")
                    track.title = title
                elif key == "filename":
                    track.filename = value or None
                elif key == "type":
                    _validate_type(value)
                    track.type = value or None
                else:
                    track.extra[key] = value
            return track

        result = self._mutate(_update)
        logger.info(f"Updated track {track_id} in {section}")
        return result

    def delete_track(self, section: str, track_id: str) -> MutationResult:
        """Remove a track (and its subtracks) from a section.

        Raises:
            InvalidSectionError: If the section does not exist
            TrackNotFoundError: If no track in the section has this id
        """

        def _delete(document: TrackListDocument) -> Track:
            removed = tree.remove_where(
                _require_section(document, section), tree.by_id(track_id)
            )
            if not removed:
                raise TrackNotFoundError(track_id)
            return removed[0]

        result = self._mutate(_delete)
        logger.info(f"Deleted track {track_id} from {section}")
        return result

    def move_track(
        self,
        track_id: str,
        section: str,
        direction: str,
        parent_id: Optional[str] = None,
    ) -> MutationResult:
        """Swap a track with its neighbour.

        ``result.value`` is False (and nothing is written) when the track is
        already first (``up``) or last (``down``).
        """
        if direction not in ("up", "down"):
            raise TrackValidationError(f"Invalid direction: {direction}. Must be 'up' or 'down'")

        def _move(document: TrackListDocument) -> bool:
            siblings = tree.child_list(_require_section(document, section), parent_id)
            index = next((i for i, t in enumerate(siblings) if t.id == track_id), None)
            if index is None:
                raise TrackNotFoundError(track_id)
            target = index - 1 if direction == "up" else index + 1
            if target < 0 or target >= len(siblings):
                return False
            siblings[index], siblings[target] = siblings[target], siblings[index]
            return True

        result = self._mutate(_move)
        if result.value:
            logger.info(f"Moved track {track_id} {direction} in {section}")
        else:
            logger.debug(f"Track {track_id} already at {direction} boundary of {section}")
        return result

    def reorder_track(
        self,
        track_id: str,
        source_section: str,
        destination_section: str,
        source_index: int,
        destination_index: int,
        source_parent_id: Optional[str] = None,
        destination_parent_id: Optional[str] = None,
    ) -> MutationResult:
        """Move a track to any position in any section or subtrack list.

        The track is taken from ``source_index`` when the id there matches,
        otherwise it is looked up by id in the source list. The destination
        index is clamped to the destination list bounds.
        """

        def _reorder(document: TrackListDocument) -> Track:
            source_list = tree.child_list(
                _require_section(document, source_section), source_parent_id
            )
            destination_tracks = _require_section(document, destination_section)

            if 0 <= source_index < len(source_list) and source_list[source_index].id == track_id:
                index = source_index
            else:
                index = next(
                    (i for i, t in enumerate(source_list) if t.id == track_id), None
                )
                if index is None:
                    raise TrackNotFoundError(track_id)

            moving = source_list[index]
            if destination_parent_id and tree.contains_id(moving, destination_parent_id):
                raise TrackValidationError("Cannot move a track into its own subtracks")

            source_list.pop(index)
            destination_list = tree.child_list(destination_tracks, destination_parent_id)
            position = max(0, min(destination_index, len(destination_list)))
            destination_list.insert(position, moving)
            return moving

        result = self._mutate(_reorder)
        logger.info(
            f"Reordered track {track_id}: {source_section}[{source_index}] -> "
            f"{destination_section}[{destination_index}]"
        )
        return result

    def migrate_ids(self) -> MutationResult:
        """Regenerate every id from titles. ``result.value`` lists (old, new) pairs."""

        def _migrate(document: TrackListDocument) -> list[tuple[str, str]]:
            migrated, changes = migrate_ids(document)
            # Same title in two places derives the same id; refuse before anything is written
            _ensure_unique_ids(migrated)
            document.sections = migrated.sections
            return changes

        result = self._mutate(_migrate, label="pre-migration")
        logger.info(f"Track id migration complete: {len(result.value)} id(s) changed")
        return result

    # ------------------------------------------------------------------
    # Section mutations
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_section_id(section_id: str) -> str:
        section_id = (section_id or "").strip()
        if not section_id:
            raise TrackValidationError("Section name cannot be empty")
        if section_id.startswith("_") or section_id == SECTION_SETTINGS_KEY:
            raise TrackValidationError(f"Section id is reserved: {section_id}")
        return section_id

    def add_section(self, section_id: str, name: Optional[str] = None) -> MutationResult:
        section_id = self._validate_section_id(section_id)

        def _add(document: TrackListDocument) -> None:
            if section_id in document.sections:
                raise TrackValidationError(f"Section already exists: {section_id}")
            document.sections[section_id] = []
            if name and name != section_id:
                document.settings[section_id] = SectionSettings(name=name)

        result = self._mutate(_add)
        logger.info(f"Added section {section_id}")
        return result

    def delete_section(self, section_id: str) -> MutationResult:
        """Delete an empty section; tracks must be moved out first."""

        def _delete(document: TrackListDocument) -> None:
            if _require_section(document, section_id):
                raise TrackValidationError(
                    f"Section {section_id} still has tracks; move them first"
                )
            del document.sections[section_id]
            document.settings.pop(section_id, None)

        result = self._mutate(_delete)
        logger.info(f"Deleted section {section_id}")
        return result

    def rename_section(
        self, section_id: str, new_id: str, name: Optional[str] = None
    ) -> MutationResult:
        """Change a section key in place, keeping its position and settings."""
        new_id = self._validate_section_id(new_id)

        def _rename(document: TrackListDocument) -> None:
            _require_section(document, section_id)
            if new_id != section_id and new_id in document.sections:
                raise TrackValidationError(f"Section already exists: {new_id}")
            document.sections = {
                (new_id if key == section_id else key): tracks
                for key, tracks in document.sections.items()
            }
            settings = document.settings.pop(section_id, SectionSettings())
            if name:
                settings.name = name
            document.settings[new_id] = settings

        result = self._mutate(_rename)
        logger.info(f"Renamed section {section_id} -> {new_id}")
        return result

    def set_section_hidden(self, section_id: str, hidden: bool) -> MutationResult:
        def _toggle(document: TrackListDocument) -> None:
            _require_section(document, section_id)
            document.settings.setdefault(section_id, SectionSettings()).hidden = hidden

        result = self._mutate(_toggle)
        logger.info(f"Section {section_id} {'hidden' if hidden else 'shown'}")
        return result

    def reorder_sections(self, new_order: list[str]) -> MutationResult:
        """Reorder sections; ``new_order`` must list every section exactly once."""

        def _reorder(document: TrackListDocument) -> None:
            if sorted(new_order) != sorted(document.sections):
                raise TrackValidationError(
                    "New order must contain every existing section exactly once"
                )
            document.sections = {key: document.sections[key] for key in new_order}

        result = self._mutate(_reorder)
        logger.info(f"Sections reordered: {', '.join(new_order)}")
        return result
