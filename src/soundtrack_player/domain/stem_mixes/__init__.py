"""Stem mix presets."""

from .models import StemMix
from .store import StemMixStore

__all__ = ["StemMix", "StemMixStore"]
