"""
Repository package for data access layers.

`build_document_store(settings)` picks the backend from `STORE_BACKEND`
(`memory` or `firestore`); `ReviewRepository` wraps whichever store is in use.
"""

from moviereview.repositories.reviews import ReviewRepository
from moviereview.repositories.store import (
    SERVER_TIMESTAMP,
    DocumentStore,
    MemoryDocumentStore,
    build_document_store,
)

__all__ = [
    "SERVER_TIMESTAMP",
    "DocumentStore",
    "MemoryDocumentStore",
    "ReviewRepository",
    "build_document_store",
]
