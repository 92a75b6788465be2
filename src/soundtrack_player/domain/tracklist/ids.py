"""Track id derivation and the id migration pass."""

import re
from dataclasses import replace
from typing import Optional

from loguru import logger

from . import tree
from .models import Track, TrackListDocument

_WHITESPACE = re.compile(r"\s+")


def slugify(title: str) -> str:
    """Lowercase the title and collapse whitespace runs into hyphens."""
    return _WHITESPACE.sub("-", title.strip().lower())


def derive_id(title: str, parent_id: Optional[str] = None) -> str:
    base = slugify(title)
    return f"{parent_id}-{base}" if parent_id else base


def migrate_ids(document: TrackListDocument) -> tuple[TrackListDocument, list[tuple[str, str]]]:
    """Recompute every id from its title and (migrated) parent id.

    Pure: the input document is left untouched. Returns the migrated document
    and the list of (old_id, new_id) pairs that changed.
    """
    changes: list[tuple[str, str]] = []

    def _rename(track: Track, parent: Optional[Track]) -> Track:
        new_id = derive_id(track.title, parent.id if parent else None)
        if new_id != track.id:
            changes.append((track.id, new_id))
            logger.debug(f"Updated ID: {track.id} -> {new_id}")
        return replace(track, id=new_id, subtracks=[], extra=dict(track.extra))

    sections = {
        name: tree.map_tracks(tracks, _rename)
        for name, tracks in document.sections.items()
    }
    return TrackListDocument(sections=sections, settings=dict(document.settings)), changes
