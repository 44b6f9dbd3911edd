"""Command-line client for the mesh daemon admin socket."""

from .connection import AdminClient

__version__ = "0.1.0"

__all__ = ["AdminClient", "__version__"]
