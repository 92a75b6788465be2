from fastapi import APIRouter, Depends

from soundtrack_player.domain.tracklist import TrackListStore

from ..deps import get_track_list_store
from ..schemas import (
    AddSectionRequest,
    RenameSectionRequest,
    ReorderSectionsRequest,
    SectionInfo,
    SectionVisibilityRequest,
    TrackListResponse,
)

router = APIRouter()


@router.get("/sections", response_model=list[SectionInfo])
async def list_sections(store: TrackListStore = Depends(get_track_list_store)):
    """Sections in display order with their settings and track counts."""
    return [SectionInfo(**section) for section in store.list_sections()]


@router.post("/sections/add", response_model=TrackListResponse)
async def add_section(
    request: AddSectionRequest,
    store: TrackListStore = Depends(get_track_list_store),
):
    result = store.add_section(request.section_id, name=request.name)
    return TrackListResponse(track_list=result.document.to_dict())


@router.delete("/sections/{section_id}", response_model=TrackListResponse)
async def delete_section(
    section_id: str,
    store: TrackListStore = Depends(get_track_list_store),
):
    """Delete a section; it must be empty."""
    result = store.delete_section(section_id)
    return TrackListResponse(track_list=result.document.to_dict())


@router.put("/sections/{section_id}/rename", response_model=TrackListResponse)
async def rename_section(
    section_id: str,
    request: RenameSectionRequest,
    store: TrackListStore = Depends(get_track_list_store),
):
    result = store.rename_section(section_id, request.new_id, name=request.name)
    return TrackListResponse(track_list=result.document.to_dict())


@router.put("/sections/{section_id}/visibility", response_model=TrackListResponse)
async def set_section_visibility(
    section_id: str,
    request: SectionVisibilityRequest,
    store: TrackListStore = Depends(get_track_list_store),
):
    result = store.set_section_hidden(section_id, request.hidden)
    return TrackListResponse(track_list=result.document.to_dict())


@router.put("/sections/{section_id}/reorder", response_model=TrackListResponse)
async def reorder_sections(
    section_id: str,
    request: ReorderSectionsRequest,
    store: TrackListStore = Depends(get_track_list_store),
):
    """Apply a full section order (the path id is the section that was moved)."""
    result = store.reorder_sections(request.new_order)
    return TrackListResponse(track_list=result.document.to_dict())
