"""Naming review and safe automated renames for code changes."""

__version__ = "0.1.0"
