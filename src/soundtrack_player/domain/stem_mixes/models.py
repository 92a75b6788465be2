"""Stem mix presets."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..exceptions import TrackValidationError


@dataclass(frozen=True)
class StemMix:
    """A named snapshot of per-stem volumes (0.0 - 1.0) for one track."""

    name: str
    stem_volumes: dict[str, float]
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(timespec="seconds")
    )

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise TrackValidationError("Mix name cannot be empty")
        for stem_id, volume in self.stem_volumes.items():
            if isinstance(volume, bool) or not isinstance(volume, (int, float)):
                raise TrackValidationError(f"Volume for {stem_id} must be a number")
            if not 0.0 <= volume <= 1.0:
                raise TrackValidationError(
                    f"Volume for {stem_id} must be between 0 and 1, got {volume}"
                )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StemMix":
        kwargs = {
            "name": data.get("name", ""),
            "stem_volumes": dict(data.get("stemVolumes") or {}),
        }
        if data.get("createdAt"):
            kwargs["created_at"] = data["createdAt"]
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "stemVolumes": dict(self.stem_volumes),
            "createdAt": self.created_at,
        }
