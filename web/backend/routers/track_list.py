from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from soundtrack_player.domain.tracklist import TrackListStore

from ..deps import get_track_list_store
from ..schemas import (
    AddTrackRequest,
    AssignTrackRequest,
    MoveTrackRequest,
    ReorderTrackRequest,
    SaveTrackListRequest,
    TrackListResponse,
    UpdateTrackRequest,
)

router = APIRouter()


@router.get("/track-list")
async def get_track_list(store: TrackListStore = Depends(get_track_list_store)):
    """The whole track-list document."""
    return store.load().to_dict()


@router.post("/track-list/save", response_model=TrackListResponse)
async def save_track_list(
    request: SaveTrackListRequest,
    store: TrackListStore = Depends(get_track_list_store),
):
    """Replace the whole document."""
    result = store.save_document(request.track_list)
    return TrackListResponse(track_list=result.document.to_dict())


@router.post("/track-list/update", response_model=TrackListResponse)
async def update_track(
    request: UpdateTrackRequest,
    store: TrackListStore = Depends(get_track_list_store),
):
    """Merge fields into a track within a section."""
    result = store.update_track(request.section, request.track_id, request.updates)
    return TrackListResponse(track_list=result.document.to_dict())


@router.post("/track-list/add", response_model=TrackListResponse)
async def add_track(
    request: AddTrackRequest,
    store: TrackListStore = Depends(get_track_list_store),
):
    """Add a track to a section, or a subtrack under ``parentTrackId``."""
    result = store.add_track(
        request.section,
        request.new_track.model_dump(exclude_none=True),
        parent_id=request.parent_track_id,
    )
    return TrackListResponse(
        message=f"Added {result.value.id}",
        track_list=result.document.to_dict(),
    )


@router.post("/track-list/move", response_model=TrackListResponse)
async def move_track(
    request: MoveTrackRequest,
    store: TrackListStore = Depends(get_track_list_store),
):
    """Swap a track with its neighbour; 400 when already at the edge."""
    result = store.move_track(
        request.track_id,
        request.section,
        request.direction,
        parent_id=request.parent_track_id,
    )
    if not result.value:
        edge = "top" if request.direction == "up" else "bottom"
        raise HTTPException(status_code=400, detail=f"Track is already at the {edge}")
    return TrackListResponse(track_list=result.document.to_dict())


@router.post("/track-list/reorder", response_model=TrackListResponse)
async def reorder_track(
    request: ReorderTrackRequest,
    store: TrackListStore = Depends(get_track_list_store),
):
    """Drag-and-drop move across positions, sections and nesting levels."""
    result = store.reorder_track(
        request.track_id,
        source_section=request.source_section,
        destination_section=request.destination_section,
        source_index=request.source_index,
        destination_index=request.destination_index,
        source_parent_id=request.source_parent_id,
        destination_parent_id=request.destination_parent_id,
    )
    return TrackListResponse(track_list=result.document.to_dict())


@router.delete("/track-list/{section}/{track_id}", response_model=TrackListResponse)
async def delete_track(
    section: str,
    track_id: str,
    store: TrackListStore = Depends(get_track_list_store),
):
    """Delete a track and its subtracks."""
    result = store.delete_track(section, track_id)
    return TrackListResponse(
        message=f"Deleted {track_id}",
        track_list=result.document.to_dict(),
    )


@router.post("/assign-track", response_model=TrackListResponse)
async def assign_track(
    request: AssignTrackRequest,
    store: TrackListStore = Depends(get_track_list_store),
):
    """Set or clear (``filename: null``) the file of a track or subtrack."""
    result = store.assign_file(request.track_id, request.filename)
    if not result.changed:
        logger.debug(f"Assignment for {request.track_id} unchanged")
    return TrackListResponse(track_list=result.document.to_dict())
