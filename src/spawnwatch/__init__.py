"""Respawn window tracking for game channels."""

__version__ = "0.1.0"
