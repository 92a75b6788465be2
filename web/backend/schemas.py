from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON bodies use camelCase keys (trackId, parentTrackId, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------


class MediaFileInfo(CamelModel):
    id: str
    filename: str
    name: str
    description: str = ""
    duration: Optional[str] = None  # m:ss, None when unreadable


class AlbumInfo(CamelModel):
    cover_image: Optional[str] = None


class DeleteMediaResponse(CamelModel):
    success: bool
    message: str


# ---------------------------------------------------------------------------
# Track list
# ---------------------------------------------------------------------------


class NewTrack(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    title: str
    id: Optional[str] = None
    filename: Optional[str] = None
    type: Optional[Literal["substem", "alternative", "audioqueue"]] = None


class SaveTrackListRequest(CamelModel):
    track_list: dict[str, Any]


class AssignTrackRequest(CamelModel):
    track_id: str
    filename: Optional[str] = None


class AddTrackRequest(CamelModel):
    section: str
    parent_track_id: Optional[str] = None
    new_track: NewTrack


class UpdateTrackRequest(CamelModel):
    section: str
    track_id: str
    updates: dict[str, Any]


class MoveTrackRequest(CamelModel):
    track_id: str
    section: str
    direction: Literal["up", "down"]
    parent_track_id: Optional[str] = None


class ReorderTrackRequest(CamelModel):
    track_id: str
    source_section: str
    destination_section: str
    source_index: int = Field(ge=0)
    destination_index: int = Field(ge=0)
    source_parent_id: Optional[str] = None
    destination_parent_id: Optional[str] = None


class TrackListResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    track_list: dict[str, Any]


class IdChange(BaseModel):
    old_id: str = Field(serialization_alias="from")
    new_id: str = Field(serialization_alias="to")


class MigrationResponse(CamelModel):
    success: bool = True
    backup_path: Optional[str] = None
    changes: list[IdChange]
    track_list: dict[str, Any]


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


class SectionInfo(CamelModel):
    id: str
    name: str
    hidden: bool
    track_count: int


class AddSectionRequest(CamelModel):
    section_id: str
    name: Optional[str] = None


class RenameSectionRequest(CamelModel):
    new_id: str
    name: Optional[str] = None


class SectionVisibilityRequest(CamelModel):
    hidden: bool


class ReorderSectionsRequest(CamelModel):
    new_order: list[str]


# ---------------------------------------------------------------------------
# Stem mixes
# ---------------------------------------------------------------------------


class StemMixInfo(CamelModel):
    name: str
    stem_volumes: dict[str, float]
    created_at: str


class SaveStemMixRequest(CamelModel):
    name: str
    stem_volumes: dict[str, float]
