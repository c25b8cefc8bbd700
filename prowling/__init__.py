"""Prowling - interactive Prowlarr search client."""

from .__version__ import __version__

__all__ = ["__version__"]
