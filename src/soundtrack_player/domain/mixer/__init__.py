"""Stem mixer model - one transport, N channels, linear fades."""

from .engine import Channel, Fade, Mixer, Transport

__all__ = ["Channel", "Fade", "Mixer", "Transport"]
