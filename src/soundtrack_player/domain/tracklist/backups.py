"""
Timestamped snapshots of the track-list document.

Backup files are named ``<prefix>-<UTC timestamp>[-<label>].json``. The
timestamp sorts lexicographically in creation order, which is what pruning
and "latest backup" rely on.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from soundtrack_player.core.json_store import write_json_atomic

DEFAULT_PREFIX = "trackList"
DEFAULT_KEEP = 10


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")


def list_backups(backup_dir: Path, prefix: str = DEFAULT_PREFIX) -> list[Path]:
    """Backups oldest first."""
    if not backup_dir.is_dir():
        return []
    return sorted(backup_dir.glob(f"{prefix}-*.json"), key=lambda p: p.name)


def latest_backup(backup_dir: Path, prefix: str = DEFAULT_PREFIX) -> Optional[Path]:
    backups = list_backups(backup_dir, prefix)
    return backups[-1] if backups else None


def prune_backups(
    backup_dir: Path, keep: int = DEFAULT_KEEP, prefix: str = DEFAULT_PREFIX
) -> list[Path]:
    """Delete all but the ``keep`` newest backups. Returns deleted paths."""
    backups = list_backups(backup_dir, prefix)
    stale = backups[:-keep] if keep > 0 else backups
    for path in stale:
        path.unlink(missing_ok=True)
        logger.debug(f"Pruned backup {path.name}")
    return stale


def create_backup(
    data: dict[str, Any],
    backup_dir: Path,
    keep: int = DEFAULT_KEEP,
    prefix: str = DEFAULT_PREFIX,
    label: Optional[str] = None,
) -> Path:
    """Write ``data`` to a new timestamped backup and prune old ones."""
    backup_dir.mkdir(parents=True, exist_ok=True)
    suffix = f"-{label}" if label else ""
    path = backup_dir / f"{prefix}-{_timestamp()}{suffix}.json"
    # Names must stay in creation order, so wait for the clock instead of adding a counter
    while path.exists():
        path = backup_dir / f"{prefix}-{_timestamp()}{suffix}.json"

    write_json_atomic(path, data)
    logger.debug(f"Backup created: {path.name}")
    prune_backups(backup_dir, keep=keep, prefix=prefix)
    return path
