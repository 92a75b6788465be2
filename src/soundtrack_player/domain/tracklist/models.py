"""
Track-list domain models.

The track list is a single JSON document: an ordered mapping of section name to
a list of tracks, where each track may carry nested subtracks (stems and
alternate versions).
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from ..exceptions import TrackValidationError

FIXED_SECTIONS = ("score", "gnomeMusic", "outsideScope", "bonusUnassigned")

# Reserved top-level key holding per-section display settings
SECTION_SETTINGS_KEY = "_sections"

TRACK_TYPES = ("substem", "alternative", "audioqueue")

STATUS_READY = "ready"
STATUS_PLANNED = "planned"

# Keys owned by Track itself; everything else round-trips through `extra`
_TRACK_KEYS = {"id", "title", "filename", "status", "type", "subtracks"}


@dataclass
class Track:
    """A playable or planned musical item.

    ``status`` is not stored: it is always derived from ``filename`` so the
    ready/planned invariant cannot drift.
    """

    id: str
    title: str
    filename: Optional[str] = None
    type: Optional[str] = None  # 'substem' | 'alternative' | 'audioqueue'
    subtracks: list["Track"] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> str:
        return STATUS_READY if self.filename else STATUS_PLANNED

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Track":
        if not isinstance(data, dict):
            raise TrackValidationError(f"Track must be an object, got {type(data).__name__}")
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            filename=data.get("filename") or None,
            type=data.get("type") or None,
            subtracks=[cls.from_dict(sub) for sub in data.get("subtracks") or []],
            extra={k: v for k, v in data.items() if k not in _TRACK_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "filename": self.filename,
            "status": self.status,
        }
        if self.type:
            data["type"] = self.type
        data.update(self.extra)
        if self.subtracks:
            data["subtracks"] = [sub.to_dict() for sub in self.subtracks]
        return data


@dataclass
class SectionSettings:
    """Display settings for one section."""

    name: Optional[str] = None
    hidden: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"hidden": self.hidden}
        if self.name:
            data["name"] = self.name
        return data


@dataclass
class TrackListDocument:
    """Ordered mapping of section name to tracks, plus section settings."""

    sections: dict[str, list[Track]] = field(default_factory=dict)
    settings: dict[str, SectionSettings] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "TrackListDocument":
        return cls(sections={name: [] for name in FIXED_SECTIONS})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrackListDocument":
        if not isinstance(data, dict):
            raise TrackValidationError("Track list must be a JSON object")

        sections: dict[str, list[Track]] = {}
        for name, tracks in data.items():
            if name == SECTION_SETTINGS_KEY:
                continue
            if not isinstance(tracks, list):
                raise TrackValidationError(f"Section {name!r} must be a list")
            # Tolerate null entries left behind by older editors
            sections[name] = [Track.from_dict(t) for t in tracks if t is not None]

        settings = {
            name: SectionSettings(name=raw.get("name"), hidden=bool(raw.get("hidden")))
            for name, raw in (data.get(SECTION_SETTINGS_KEY) or {}).items()
            if isinstance(raw, dict)
        }
        return cls(sections=sections, settings=settings)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            name: [track.to_dict() for track in tracks]
            for name, tracks in self.sections.items()
        }
        settings = {
            name: s.to_dict()
            for name, s in self.settings.items()
            if name in self.sections and (s.hidden or s.name)
        }
        if settings:
            data[SECTION_SETTINGS_KEY] = settings
        return data
