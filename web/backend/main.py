from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from soundtrack_player import __version__
from soundtrack_player.core.config import load_config
from soundtrack_player.domain.exceptions import (
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

app = FastAPI(title="Soundtrack Player API", version=__version__)

# CORS: config.toml [server] allowed_origins, ALLOWED_ORIGINS env wins
allowed_origins = load_config().server.allowed_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# First match wins, so subclasses must precede their bases
ERROR_STATUS: list[tuple[type[TrackListError], int]] = [
    (TrackNotFoundError, 404),
    (InvalidSectionError, 404),
    (MediaNotFoundError, 404),
    (FileInUseError, 400),
    (TrackValidationError, 400),
    (DuplicateTrackError, 409),
    (MigrationKeyError, 401),
    (RangeNotSatisfiableError, 416),
]


@app.exception_handler(TrackListError)
async def track_list_error_handler(request: Request, exc: TrackListError):
    """Map domain errors to status codes; storage errors stay opaque to clients."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            headers = None
            if isinstance(exc, RangeNotSatisfiableError):
                headers = {"Content-Range": f"bytes */{exc.file_size}"}
            logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc}")
            return JSONResponse(
                status_code=status_code, content={"detail": str(exc)}, headers=headers
            )

    if isinstance(exc, TrackListIOError):
        logger.opt(exception=exc).error(f"Storage failure on {request.method} {request.url.path}")
    else:
        logger.opt(exception=exc).error(f"Unhandled domain error on {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal storage error"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include routers
from web.backend.routers import admin, sections, stem_mixes, track_list, tracks

app.include_router(tracks.router, tags=["media"])
app.include_router(track_list.router, tags=["track-list"])
app.include_router(sections.router, tags=["sections"])
app.include_router(stem_mixes.router, tags=["stem-mixes"])
app.include_router(admin.router, tags=["admin"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
