"""Adaptive practice scheduler for vocabulary review."""

from lexipace.consts import VERSION as __version__

__all__ = ["__version__"]
