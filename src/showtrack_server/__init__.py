"""Show Tracker Server - personal TV show watch tracking."""

__version__ = "0.1.0"
