"""Audio package."""

from .sounds import SoundManager, generate_bell

__all__ = ["SoundManager", "generate_bell"]
