"""Ports - interfaces/protocols for external dependencies."""

from .document_store import DocumentRef, DocumentStore

__all__ = [
    "DocumentRef",
    "DocumentStore",
]
