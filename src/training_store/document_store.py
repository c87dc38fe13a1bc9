"""A small JSON document database on the local filesystem.

Layout: ``<root>/<collection>/<quoted id>.json``.  Every stored document
carries its id under ``"_id"``.  A process-wide lock serialises reads and
writes; concurrent writers to one document get last-write-wins, and no
operation spans more than one document.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import quote, unquote

from training_store.exceptions import DocumentNotFound, DuplicateDocument, StoreError

logger = logging.getLogger(__name__)

ID_FIELD = "_id"
_SUFFIX = ".json"

FILE_LOCK = threading.RLock()

Predicate = Callable[[dict[str, Any]], bool]


class JsonDocumentStore:
    """Collections of JSON documents keyed by string id."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Single-document operations
    # ------------------------------------------------------------------

    def insert(self, collection: str, doc: dict[str, Any], doc_id: str | None = None) -> str:
        """Store a new document and return its id (a uuid4 hex if not given)."""
        doc_id = doc_id or doc.get(ID_FIELD) or uuid.uuid4().hex
        with FILE_LOCK:
            path = self._path(collection, doc_id)
            if path.exists():
                raise DuplicateDocument(collection, doc_id)
            self._write(path, {**doc, ID_FIELD: doc_id})
        logger.debug("Inserted %s/%s", collection, doc_id)
        return doc_id

    def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        with FILE_LOCK:
            return self._read(self._path(collection, doc_id))

    def replace(
        self,
        collection: str,
        doc_id: str,
        doc: dict[str, Any],
        upsert: bool = False,
    ) -> None:
        """Overwrite a whole document; create it only when *upsert*."""
        with FILE_LOCK:
            path = self._path(collection, doc_id)
            if not upsert and not path.exists():
                raise DocumentNotFound(collection, doc_id)
            self._write(path, {**doc, ID_FIELD: doc_id})

    def update(self, collection: str, doc_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """Shallow-merge *changes* into a document and return the result."""
        with FILE_LOCK:
            path = self._path(collection, doc_id)
            current = self._read(path)
            if current is None:
                raise DocumentNotFound(collection, doc_id)
            merged = {**current, **changes, ID_FIELD: doc_id}
            self._write(path, merged)
            return merged

    def delete(self, collection: str, doc_id: str) -> bool:
        """Remove a document; False if it did not exist."""
        with FILE_LOCK:
            path = self._path(collection, doc_id)
            if not path.exists():
                return False
            path.unlink()
        logger.debug("Deleted %s/%s", collection, doc_id)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find(self, collection: str, predicate: Predicate | None = None) -> list[dict[str, Any]]:
        """All documents matching *predicate*, ordered by id."""
        with FILE_LOCK:
            directory = self._root / collection
            if not directory.is_dir():
                return []
            docs: list[dict[str, Any]] = []
            for path in sorted(directory.glob(f"*{_SUFFIX}")):
                doc = self._read(path)
                if doc is not None and (predicate is None or predicate(doc)):
                    docs.append(doc)
            return docs

    def find_one(self, collection: str, predicate: Predicate) -> Optional[dict[str, Any]]:
        for doc in self.find(collection, predicate):
            return doc
        return None

    def ids(self, collection: str) -> list[str]:
        with FILE_LOCK:
            directory = self._root / collection
            if not directory.is_dir():
                return []
            return sorted(
                unquote(p.name[: -len(_SUFFIX)]) for p in directory.glob(f"*{_SUFFIX}")
            )

    def drop(self, collection: str) -> None:
        """Delete a whole collection."""
        with FILE_LOCK:
            directory = self._root / collection
            if directory.is_dir():
                shutil.rmtree(directory)
                logger.info("Dropped collection %s", collection)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _path(self, collection: str, doc_id: str) -> Path:
        if not collection or "/" in collection or collection.startswith("."):
            raise StoreError(f"Invalid collection name {collection!r}")
        if not doc_id:
            raise StoreError("Document id must not be empty")
        return self._root / collection / f"{quote(str(doc_id), safe='')}{_SUFFIX}"

    def _read(self, path: Path) -> Optional[dict[str, Any]]:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Corrupt document at %s, ignoring", path)
            return None

    def _write(self, path: Path, doc: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(doc, f, indent=2, ensure_ascii=False, default=str)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
