"""
Stem mixer model.

One transport clock drives every channel; each channel owns a gain and an
optional linear fade. A single ``tick(now)`` advances all fades, so there is
never more than one timer loop regardless of the number of stems.

All methods take an explicit ``now`` (seconds, monotonic) so playback hosts can
drive the mixer from their own frame clock.
"""

import time
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from ..exceptions import TrackNotFoundError, TrackValidationError
from ..stem_mixes.models import StemMix
from ..tracklist.models import Track


def _clamp_gain(gain: float) -> float:
    return max(0.0, min(1.0, float(gain)))


@dataclass
class Fade:
    """Linear interpolation from ``start_gain`` to ``target_gain``."""

    start_gain: float
    target_gain: float
    start_time: float
    duration: float

    def gain_at(self, now: float) -> float:
        if self.duration <= 0:
            return self.target_gain
        progress = (now - self.start_time) / self.duration
        progress = max(0.0, min(1.0, progress))
        return self.start_gain + (self.target_gain - self.start_gain) * progress

    def done_at(self, now: float) -> bool:
        return now - self.start_time >= self.duration


@dataclass
class Channel:
    """One stem: its media file and current gain."""

    id: str
    filename: str
    gain: float = 0.0
    fade: Optional[Fade] = None


@dataclass
class Transport:
    """Shared playback clock for all channels.

    ``loop_length`` wraps the position for looping stems.
    """

    loop_length: Optional[float] = None
    playing: bool = False
    _offset: float = 0.0
    _started_at: float = 0.0

    def position(self, now: float) -> float:
        position = self._offset + (now - self._started_at if self.playing else 0.0)
        if self.loop_length:
            position %= self.loop_length
        return position

    def play(self, now: float) -> None:
        if not self.playing:
            self._started_at = now
            self.playing = True

    def pause(self, now: float) -> None:
        if self.playing:
            self._offset = self.position(now)
            self.playing = False

    def seek(self, position: float, now: float) -> None:
        if position < 0:
            raise TrackValidationError("Cannot seek to a negative position")
        self._offset = position
        self._started_at = now


@dataclass
class Mixer:
    """A set of stems sharing one transport."""

    channels: dict[str, Channel] = field(default_factory=dict)
    transport: Transport = field(default_factory=Transport)

    @classmethod
    def for_track(cls, track: Track, loop_length: Optional[float] = None) -> "Mixer":
        """Channels for a track and its subtracks that have files.

        The main track starts at full volume and every stem silent.
        """
        mixer = cls(transport=Transport(loop_length=loop_length))
        for stem in [track] + track.subtracks:
            if not stem.filename:
                continue
            gain = 1.0 if stem.id == track.id else 0.0
            mixer.channels[stem.id] = Channel(id=stem.id, filename=stem.filename, gain=gain)
        return mixer

    def _channel(self, channel_id: str) -> Channel:
        try:
            return self.channels[channel_id]
        except KeyError:
            raise TrackNotFoundError(channel_id, f"No mixer channel for {channel_id}") from None

    @staticmethod
    def _now(now: Optional[float]) -> float:
        return time.monotonic() if now is None else now

    def set_gain(self, channel_id: str, gain: float) -> None:
        """Jump to a gain immediately, cancelling any fade."""
        channel = self._channel(channel_id)
        channel.gain = _clamp_gain(gain)
        channel.fade = None

    def fade_to(
        self,
        channel_id: str,
        target: float,
        duration: float,
        now: Optional[float] = None,
    ) -> None:
        """Start a linear fade from the channel's current gain."""
        if duration < 0:
            raise TrackValidationError("Fade duration cannot be negative")
        now = self._now(now)
        channel = self._channel(channel_id)
        self.tick(now)
        channel.fade = Fade(
            start_gain=channel.gain,
            target_gain=_clamp_gain(target),
            start_time=now,
            duration=duration,
        )
        if duration == 0:
            self.tick(now)

    def solo(self, channel_id: str, duration: float = 0.0, now: Optional[float] = None) -> None:
        """Fade one channel to full and every other channel to silence."""
        now = self._now(now)
        self._channel(channel_id)
        for other in self.channels:
            self.fade_to(other, 1.0 if other == channel_id else 0.0, duration, now)

    def apply_mix(self, mix: StemMix, duration: float = 0.0, now: Optional[float] = None) -> None:
        """Fade channels to a saved mix; stems missing from the mix go silent."""
        now = self._now(now)
        unknown = set(mix.stem_volumes) - set(self.channels)
        if unknown:
            logger.debug(f"Mix {mix.name!r} has volumes for unknown stems: {sorted(unknown)}")
        for channel_id in self.channels:
            self.fade_to(channel_id, mix.stem_volumes.get(channel_id, 0.0), duration, now)

    def tick(self, now: Optional[float] = None) -> dict[str, float]:
        """Advance every active fade to ``now``; returns current gains."""
        now = self._now(now)
        for channel in self.channels.values():
            if channel.fade is None:
                continue
            channel.gain = channel.fade.gain_at(now)
            if channel.fade.done_at(now):
                channel.gain = channel.fade.target_gain
                channel.fade = None
        return self.gains()

    def gains(self) -> dict[str, float]:
        return {channel_id: channel.gain for channel_id, channel in self.channels.items()}

    @property
    def is_fading(self) -> bool:
        return any(channel.fade is not None for channel in self.channels.values())

    def snapshot(self, name: str) -> StemMix:
        """Current gains as a StemMix ready to be saved."""
        return StemMix(name=name, stem_volumes=self.gains())
