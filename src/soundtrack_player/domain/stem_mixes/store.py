"""Per-track stem mix presets persisted in stemMixes.json."""

import json
import threading
from pathlib import Path

from loguru import logger

from soundtrack_player.core.config import MediaConfig
from soundtrack_player.core.json_store import read_json, write_json_atomic

from ..exceptions import TrackListIOError, TrackValidationError
from .models import StemMix

_write_lock = threading.Lock()


class StemMixStore:
    """``{trackId: [StemMix, ...]}`` in a single JSON side file."""

    def __init__(self, path: Path):
        self.path = path

    @classmethod
    def from_config(cls, config: MediaConfig) -> "StemMixStore":
        return cls(config.stem_mixes_path)

    def _load_all(self) -> dict[str, list]:
        if not self.path.exists():
            return {}
        try:
            data = read_json(self.path)
        except (OSError, json.JSONDecodeError) as e:
            raise TrackListIOError(f"Failed to read stem mixes: {e}") from e
        if not isinstance(data, dict):
            raise TrackListIOError("Stem mixes file must contain a JSON object")
        return data

    def get_mixes(self, track_id: str) -> list[StemMix]:
        mixes = []
        for raw in self._load_all().get(track_id, []):
            try:
                mixes.append(StemMix.from_dict(raw))
            except (TrackValidationError, AttributeError) as e:
                logger.warning(f"Skipping invalid stem mix for {track_id}: {e}")
        return mixes

    def save_mix(self, track_id: str, name: str, stem_volumes: dict[str, float]) -> StemMix:
        """Append a mix to a track's list. Names need not be unique."""
        mix = StemMix(name=name.strip() if name else "", stem_volumes=stem_volumes)
        with _write_lock:
            data = self._load_all()
            data.setdefault(track_id, []).append(mix.to_dict())
            try:
                write_json_atomic(self.path, data)
            except OSError as e:
                raise TrackListIOError(f"Failed to write stem mixes: {e}") from e
        logger.info(f"Saved stem mix {mix.name!r} for track {track_id}")
        return mix
