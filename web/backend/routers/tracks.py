from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Header
from fastapi.responses import FileResponse, StreamingResponse
from loguru import logger

from soundtrack_player.domain.media import (
    ByteRange,
    MediaStore,
    get_mime_type,
    iter_file_range,
)
from soundtrack_player.domain.tracklist import TrackListStore

from ..deps import get_media_store, get_track_list_store
from ..schemas import AlbumInfo, DeleteMediaResponse, MediaFileInfo

router = APIRouter()


def build_audio_response(
    file_path: Path,
    byte_range: Optional[ByteRange],
    attachment: bool = False,
) -> StreamingResponse:
    """Pure function - full (200) or partial (206) streaming response for a file."""
    headers = {"Accept-Ranges": "bytes"}
    if attachment:
        headers["Content-Disposition"] = (
            f"attachment; filename*=UTF-8''{quote(file_path.name)}"
        )

    if byte_range is None:
        file_size = file_path.stat().st_size
        headers["Content-Length"] = str(file_size)
        return StreamingResponse(
            iter_file_range(file_path, 0, file_size - 1),
            status_code=200,
            media_type=get_mime_type(file_path),
            headers=headers,
        )

    headers["Content-Range"] = byte_range.content_range
    headers["Content-Length"] = str(byte_range.length)
    return StreamingResponse(
        iter_file_range(file_path, byte_range.start, byte_range.end),
        status_code=206,
        media_type=get_mime_type(file_path),
        headers=headers,
    )


@router.get("/tracks", response_model=list[MediaFileInfo])
async def list_tracks(media: MediaStore = Depends(get_media_store)):
    """List audio files in the media directory with their durations."""
    files = media.list_audio()
    logger.debug(f"Listing {len(files)} media files")
    return [MediaFileInfo(**f.to_dict()) for f in files]


@router.get("/tracks/{filename}")
async def stream_track(
    filename: str,
    range_header: Optional[str] = Header(default=None, alias="range"),
    media: MediaStore = Depends(get_media_store),
):
    """Stream an audio file, honouring Range requests for seeking."""
    file_path, byte_range = media.open_range(filename, range_header)
    logger.info(
        f"Streaming {file_path.name}"
        + (f" ({byte_range.content_range})" if byte_range else "")
    )
    return build_audio_response(file_path, byte_range)


@router.get("/tracks/{filename}/download")
async def download_track(
    filename: str,
    range_header: Optional[str] = Header(default=None, alias="range"),
    media: MediaStore = Depends(get_media_store),
):
    """Same bytes as streaming, served as an attachment."""
    file_path, byte_range = media.open_range(filename, range_header)
    logger.info(f"Download of {file_path.name}")
    return build_audio_response(file_path, byte_range, attachment=True)


@router.delete("/tracks/{filename}", response_model=DeleteMediaResponse)
async def delete_track_file(
    filename: str,
    media: MediaStore = Depends(get_media_store),
    track_list: TrackListStore = Depends(get_track_list_store),
):
    """Delete a media file unless a track or subtrack still references it."""
    media.delete(filename, track_list)
    return DeleteMediaResponse(success=True, message=f"Deleted {filename}")


@router.get("/album-info", response_model=AlbumInfo)
async def album_info(media: MediaStore = Depends(get_media_store)):
    """First image in the media directory, used as the album cover."""
    cover = media.album_cover()
    return AlbumInfo(cover_image=f"/images/{quote(cover)}" if cover else None)


@router.get("/images/{filename}")
async def get_image(filename: str, media: MediaStore = Depends(get_media_store)):
    file_path = media.resolve_image(filename)
    return FileResponse(file_path, media_type=get_mime_type(file_path))
