"""craftmapper command-line interface."""

from craftmapper import __version__

__all__ = ["__version__"]
