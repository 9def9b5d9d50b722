"""User management HTTP service."""

__version__ = "1.0.0"
