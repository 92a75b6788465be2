import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header
from loguru import logger

from soundtrack_player.core.config import Config
from soundtrack_player.domain.exceptions import MigrationKeyError
from soundtrack_player.domain.tracklist import TrackListStore

from ..deps import get_config, get_track_list_store
from ..schemas import IdChange, MigrationResponse

router = APIRouter()


def check_migration_key(provided: Optional[str], expected: Optional[str]) -> None:
    """Raise MigrationKeyError unless ``provided`` matches the configured key.

    An unset key disables the endpoint entirely.
    """
    if not expected:
        raise MigrationKeyError("Migration endpoint is disabled")
    if not provided or not secrets.compare_digest(provided, expected):
        raise MigrationKeyError("Invalid migration key")


@router.post("/migrate-track-ids", response_model=MigrationResponse)
async def migrate_track_ids(
    x_migration_key: Optional[str] = Header(default=None),
    config: Config = Depends(get_config),
    store: TrackListStore = Depends(get_track_list_store),
):
    """Regenerate every track id from its title."""
    try:
        check_migration_key(x_migration_key, config.security.migration_key)
    except MigrationKeyError:
        logger.warning("Rejected track id migration: bad or missing x-migration-key")
        raise

    result = store.migrate_ids()
    return MigrationResponse(
        backup_path=result.backup_path.name if result.backup_path else None,
        changes=[IdChange(old_id=old, new_id=new) for old, new in result.value],
        track_list=result.document.to_dict(),
    )
