"""Adapters - I/O implementations of ports."""

from .file_vault import FileDocumentStore

__all__ = [
    "FileDocumentStore",
]
