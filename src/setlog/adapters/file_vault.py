"""File-based document store adapter."""

import logging
from pathlib import Path

from setlog.core.errors import DocumentNotFound, DocumentUnreadable, WriteFailed
from setlog.ports.document_store import DocumentRef

logger = logging.getLogger(__name__)


class FileDocumentStore:
    """
    Markdown vault on disk.

    Implements DocumentStore protocol. Document paths are POSIX paths relative
    to the vault root; a document's name is its file name without ``.md``.
    """

    def __init__(self, vault_dir: Path | str):
        self.vault_dir = Path(vault_dir).expanduser()

    def _resolve(self, path: str) -> Path:
        """Absolute path for a vault-relative document path."""
        resolved = (self.vault_dir / path).resolve()
        root = self.vault_dir.resolve()
        if resolved != root and root not in resolved.parents:
            raise DocumentNotFound(path)
        return resolved

    def read(self, path: str) -> str:
        """Read a document.

        Raises DocumentNotFound if it does not exist, DocumentUnreadable if it
        cannot be opened or is not valid UTF-8.
        """
        target = self._resolve(path)
        try:
            with target.open(encoding="utf-8", newline="") as f:
                return f.read()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise DocumentNotFound(path) from e
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Read of {target} failed: {e}")
            raise DocumentUnreadable(path, str(e)) from e

    def list_documents(self) -> list[DocumentRef]:
        """All markdown documents in the vault, sorted by path."""
        if not self.vault_dir.is_dir():
            return []
        docs = []
        for file in sorted(self.vault_dir.rglob("*.md")):
            if not file.is_file():
                continue
            rel = file.relative_to(self.vault_dir)
            if any(part.startswith(".") for part in rel.parts):
                continue
            docs.append(DocumentRef(path=rel.as_posix(), name=file.stem))
        return docs

    def write(self, path: str, text: str) -> None:
        """Overwrite a document's full text. Raises WriteFailed on any OS error."""
        try:
            target = self._resolve(path)
        except DocumentNotFound as e:
            raise WriteFailed(path, "outside the vault") from e
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8", newline="")
        except OSError as e:
            logger.error(f"Write to {target} failed: {e}")
            raise WriteFailed(path, str(e)) from e
        logger.debug(f"Wrote {len(text)} chars to {path}")
