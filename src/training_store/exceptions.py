"""Exceptions raised by the document store."""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for all training_store errors."""


class DocumentNotFound(StoreError):
    """No document with the requested id exists in the collection."""

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


class DuplicateDocument(StoreError):
    """Insert of an id that already exists."""

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"{collection}/{doc_id} already exists")
        self.collection = collection
        self.doc_id = doc_id
