"""Warden: ownership-enforcing mutation and media access layer."""

__version__ = "0.1.0"
