"""Disk identity matching, file indexing, search scoring, copying and verification for multi-disk storage."""

__version__ = "0.1.0"