"""sabforge package entry."""

from importlib.metadata import version

__all__ = ["__version__"]

try:
    __version__ = version("sabforge")
except Exception:  # fallback for source checkouts without installed metadata
    __version__ = "0.1.0"
