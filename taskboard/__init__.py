"""Taskboard: Flask API for user accounts and scheduled task records."""

__version__ = "0.1.0"
