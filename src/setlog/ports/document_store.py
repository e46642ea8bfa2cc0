"""Document store interface."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class DocumentRef:
    """A document known to the store."""

    path: str
    name: str


class DocumentStore(Protocol):
    """Interface for reading, listing and overwriting plaintext documents."""

    def read(self, path: str) -> str:
        """Read a document's full text.

        Raises DocumentNotFound if missing, DocumentUnreadable if it cannot be read.
        """
        ...

    def list_documents(self) -> list[DocumentRef]:
        """List all available documents."""
        ...

    def write(self, path: str, text: str) -> None:
        """Overwrite a document's full text. Raises WriteFailed on failure."""
        ...
