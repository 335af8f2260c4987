"""Document storage for block lists.

Each document is a JSON file named after its id, holding the title, the
ordered block list and timestamps. Files live in an OS-appropriate data
directory unless a directory is given explicitly.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import platformdirs

from .model import Block, BlockLike, as_block

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a document cannot be written or read."""


class DocumentNotFoundError(StorageError):
    """Raised when no document exists for an id."""


@dataclass
class StoredDocument:
    id: str
    title: str
    blocks: list[Block] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": [b.to_dict() for b in self.blocks],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoredDocument":
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "Untitled",
            blocks=[Block.from_dict(b) for b in data.get("content") or []],
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class DocumentStore:
    """Stores and retrieves block lists under document ids."""

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        """Initialize the store.

        Args:
            directory: Where document files go. Defaults to the user's data
                directory for pageflow.
        """
        if directory is None:
            directory = Path(platformdirs.user_data_dir("pageflow")) / "documents"
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, doc_id: str) -> Path:
        # Ids are file names; anything that could escape the directory is unknown
        if not doc_id or os.sep in doc_id or (os.altsep and os.altsep in doc_id) or doc_id.startswith("."):
            raise DocumentNotFoundError(f"Document not found: {doc_id!r}")
        return self._directory / f"{doc_id}.json"

    def create(self, title: str, blocks: Iterable[BlockLike]) -> str:
        """Store a new document.

        Returns:
            The new document's id.

        Raises:
            StorageError: If the document cannot be written.
        """
        now = _now()
        doc = StoredDocument(
            id=str(uuid.uuid4()),
            title=title or "Untitled",
            blocks=[as_block(b) for b in blocks],
            created_at=now,
            updated_at=now,
        )
        self._write(doc)
        logger.info(f"Created document {doc.id} with {len(doc.blocks)} blocks")
        return doc.id

    def update(self, doc_id: str, title: str, blocks: Iterable[BlockLike]) -> StoredDocument:
        """Replace the title and blocks of an existing document."""
        doc = self.fetch(doc_id)
        doc.title = title or doc.title
        doc.blocks = [as_block(b) for b in blocks]
        doc.updated_at = _now()
        self._write(doc)
        return doc

    def fetch(self, doc_id: str) -> StoredDocument:
        """Load a document.

        Raises:
            DocumentNotFoundError: If there is no document with this id.
            StorageError: If the file exists but cannot be read.
        """
        path = self._path_for(doc_id)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            raise DocumentNotFoundError(f"Document not found: {doc_id!r}") from None
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load document from {path}: {e}")
            raise StorageError(f"Could not load document {doc_id!r}: {e}") from e
        if not isinstance(data, dict) or "id" not in data:
            logger.warning(f"Document file {path} has invalid format, ignoring")
            raise StorageError(f"Document {doc_id!r} has invalid format")
        try:
            return StoredDocument.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise StorageError(f"Document {doc_id!r} has invalid blocks: {e}") from e

    def exists(self, doc_id: str) -> bool:
        try:
            return self._path_for(doc_id).exists()
        except DocumentNotFoundError:
            return False

    def list_ids(self) -> list[str]:
        if not self._directory.exists():
            return []
        return sorted(p.stem for p in self._directory.glob("*.json"))

    def _write(self, doc: StoredDocument) -> None:
        """Write a document atomically (temp file + rename)."""
        path = self._path_for(doc.id)
        temp_filename = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8',
                                             dir=self._directory, suffix='.json.tmp',
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                json.dump(doc.to_dict(), temp_file, indent=2, ensure_ascii=False)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_filename, path)
        except OSError as e:
            logger.warning(f"Could not save document to {path}: {e}")
            if temp_filename and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError:
                    pass
            raise StorageError(f"Could not save document {doc.id!r}: {e}") from e
