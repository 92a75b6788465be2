"""
Soundtrack Player CLI - serve the API and maintain the media directory.
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from soundtrack_player.core.config import Config, ensure_directories, load_config
from soundtrack_player.core.json_store import read_json, write_json_atomic
from soundtrack_player.core.output import setup_from_config
from soundtrack_player.domain.exceptions import TrackListError
from soundtrack_player.domain.tracklist import TrackListDocument, TrackListStore

# Project root detection (where pyproject.toml and web/ live)
PROJECT_ROOT = Path(__file__).parent.parent.parent

SAMPLE_TRACK_LIST = {
    "score": [
        {
            "id": "the-dark-forest-(main)",
            "title": "The Dark Forest (Main)",
            "filename": "dark-forest-main.mp3",
            "subtracks": [
                {
                    "id": "the-dark-forest-(main)-stem-1",
                    "title": "Stem 1",
                    "filename": "dark-forest-main-stem1.mp3",
                    "type": "substem",
                },
                {
                    "id": "the-dark-forest-(main)-stem-2",
                    "title": "Stem 2",
                    "filename": "dark-forest-main-stem2.mp3",
                    "type": "substem",
                },
            ],
        }
    ],
    "gnomeMusic": [
        {
            "id": "ballad-of-the-brave-(demo-1)",
            "title": "Ballad of the Brave (Demo 1)",
            "filename": "ballad-brave-demo1.mp3",
        }
    ],
    "outsideScope": [],
    "bonusUnassigned": [
        {"id": "bonus-track-1", "title": "Bonus Track 1", "filename": None}
    ],
}


def run_serve(
    config: Config,
    config_path: Optional[Path] = None,
    host: str = None,
    port: int = None,
    reload: bool = False,
) -> int:
    import uvicorn

    ensure_directories(config)
    if config_path:
        # The app loads its own config on import; point it at the same file
        os.environ["SOUNDTRACK_CONFIG"] = str(config_path.expanduser().resolve())
    host = host or config.server.host
    port = port or config.server.port
    logger.info(f"Serving media from {config.media.media_path} on http://{host}:{port}")
    uvicorn.run(
        "web.backend.main:app",
        host=host,
        port=port,
        reload=reload,
        app_dir=str(PROJECT_ROOT),
        log_config=None,
    )
    return 0


def run_init_media(config: Config, force: bool = False) -> int:
    """Seed trackList.json with a sample document."""
    ensure_directories(config)
    store = TrackListStore.from_config(config.media)
    if store.path.exists() and not force:
        print(f"{store.path} already exists (use --force to overwrite)")
        return 1

    document = TrackListDocument.from_dict(SAMPLE_TRACK_LIST)
    if store.path.exists():
        try:
            store.backup(read_json(store.path), label="pre-init")
        except json.JSONDecodeError:
            logger.warning(f"Existing {store.path.name} is not valid JSON, overwriting without backup")
    write_json_atomic(store.path, document.to_dict())
    print(f"Created sample track list at {store.path}")
    return 0


def run_migrate_ids(config: Config) -> int:
    store = TrackListStore.from_config(config.media)
    result = store.migrate_ids()
    for old_id, new_id in result.value:
        print(f"  {old_id} -> {new_id}")
    if result.changed:
        print(f"Migrated {len(result.value)} id(s); backup: {result.backup_path}")
    else:
        print("All ids already match their titles")
    return 0


def run_backups(config: Config, restore: bool = False) -> int:
    store = TrackListStore.from_config(config.media)
    if restore:
        result = store.restore_latest_backup()
        print(f"Restored track list from {result.value.name}")
        return 0

    backups = store.list_backups()
    if not backups:
        print("No backups")
    for path in backups:
        print(path.name)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="soundtrack-player",
        description="Serve and maintain the soundtrack track list and media directory",
    )
    parser.add_argument("--config", type=Path, help="Path to config.toml")
    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address (default from config)")
    serve_parser.add_argument("--port", type=int, help="Port (default from config)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    init_parser = subparsers.add_parser("init-media", help="Seed a sample trackList.json")
    init_parser.add_argument("--force", action="store_true", help="Overwrite an existing track list")

    subparsers.add_parser("migrate-ids", help="Regenerate all track ids from titles")

    backups_parser = subparsers.add_parser("backups", help="List or restore track list backups")
    backups_parser.add_argument("--restore", action="store_true", help="Restore the newest backup")

    args = parser.parse_args()
    if not args.subcommand:
        parser.print_help()
        sys.exit(1)

    config = load_config(args.config)
    setup_from_config(config.logging)

    try:
        if args.subcommand == "serve":
            code = run_serve(
                config,
                config_path=args.config,
                host=args.host,
                port=args.port,
                reload=args.reload,
            )
        elif args.subcommand == "init-media":
            code = run_init_media(config, force=args.force)
        elif args.subcommand == "migrate-ids":
            code = run_migrate_ids(config)
        else:
            code = run_backups(config, restore=args.restore)
    except TrackListError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    main()
