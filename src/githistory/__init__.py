"""Git history provider for source-control history panels."""

__version__ = "0.1.0"
