"""AI mock coding-interview API."""

__version__ = "0.1.0"
