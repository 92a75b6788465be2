from fastapi import Depends
from soundtrack_player.core.config import Config, load_config
from soundtrack_player.domain.media import MediaStore
from soundtrack_player.domain.stem_mixes import StemMixStore
from soundtrack_player.domain.tracklist import TrackListStore


def get_config() -> Config:
    """FastAPI dependency for configuration."""
    return load_config()


def get_track_list_store(config: Config = Depends(get_config)) -> TrackListStore:
    """FastAPI dependency for the track-list document store."""
    return TrackListStore.from_config(config.media)


def get_media_store(config: Config = Depends(get_config)) -> MediaStore:
    """FastAPI dependency for media directory access."""
    return MediaStore.from_config(config.media)


def get_stem_mix_store(config: Config = Depends(get_config)) -> StemMixStore:
    """FastAPI dependency for stem mix presets."""
    return StemMixStore.from_config(config.media)
