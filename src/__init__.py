"""Property token resolver."""

__version__ = "1.0.0"
