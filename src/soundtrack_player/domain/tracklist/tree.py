"""
Tree-walk combinators over track lists.

Every store operation is expressed through these: a depth-first walk, a
predicate search, a recursive filter and a parent-aware map. None of them
know about sections or persistence.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from ..exceptions import TrackNotFoundError
from .models import Track, TrackListDocument

Predicate = Callable[[Track], bool]


@dataclass
class TrackLocation:
    """Where a track sits: the list holding it and its index in that list."""

    track: Track
    siblings: list[Track]
    index: int
    parent: Optional[Track] = None


def walk(tracks: list[Track], parent: Optional[Track] = None) -> Iterator[TrackLocation]:
    """Yield every track depth-first, parents before their subtracks."""
    for index, track in enumerate(tracks):
        yield TrackLocation(track=track, siblings=tracks, index=index, parent=parent)
        yield from walk(track.subtracks, parent=track)


def find(tracks: list[Track], predicate: Predicate) -> Optional[TrackLocation]:
    """First location whose track matches ``predicate``, or None."""
    return next((loc for loc in walk(tracks) if predicate(loc.track)), None)


def by_id(track_id: str) -> Predicate:
    return lambda track: track.id == track_id


def find_in_document(
    document: TrackListDocument, predicate: Predicate
) -> Optional[tuple[str, TrackLocation]]:
    """Search all sections in document order; returns (section, location)."""
    for section, tracks in document.sections.items():
        location = find(tracks, predicate)
        if location is not None:
            return section, location
    return None


def walk_document(document: TrackListDocument) -> Iterator[tuple[str, TrackLocation]]:
    for section, tracks in document.sections.items():
        for location in walk(tracks):
            yield section, location


def remove_where(tracks: list[Track], predicate: Predicate) -> list[Track]:
    """Remove matching tracks at any depth, in place.

    Subtracks of a removed track go with it. Returns the removed tracks.
    """
    removed = [t for t in tracks if predicate(t)]
    tracks[:] = [t for t in tracks if not predicate(t)]
    for track in tracks:
        removed.extend(remove_where(track.subtracks, predicate))
    return removed


def map_tracks(
    tracks: list[Track],
    transform: Callable[[Track, Optional[Track]], Track],
    parent: Optional[Track] = None,
) -> list[Track]:
    """Rebuild a tree top-down.

    ``transform`` receives each track and its already-transformed parent, so
    values derived from the parent (like id prefixes) see the new parent.
    """
    result = []
    for track in tracks:
        new_track = transform(track, parent)
        new_track.subtracks = map_tracks(track.subtracks, transform, parent=new_track)
        result.append(new_track)
    return result


def child_list(tracks: list[Track], parent_id: Optional[str]) -> list[Track]:
    """The list a parent id designates: top level for None, else its subtracks.

    Raises:
        TrackNotFoundError: If parent_id is given but not present
    """
    if not parent_id:
        return tracks
    location = find(tracks, by_id(parent_id))
    if location is None:
        raise TrackNotFoundError(parent_id, f"Parent track not found: {parent_id}")
    return location.track.subtracks


def contains_id(track: Track, track_id: str) -> bool:
    """Whether ``track`` or any of its descendants has ``track_id``."""
    return track.id == track_id or find(track.subtracks, by_id(track_id)) is not None


def collect_ids(document: TrackListDocument) -> list[str]:
    return [loc.track.id for _, loc in walk_document(document)]
