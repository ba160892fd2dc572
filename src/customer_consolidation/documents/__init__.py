"""Consolidation documents: host adapters and section writer."""

from customer_consolidation.documents.base import Document, DocumentStore
from customer_consolidation.documents.google_docs import GoogleDocsStore, GoogleDocument
from customer_consolidation.documents.memory import InMemoryDocument, InMemoryDocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "GoogleDocsStore",
    "GoogleDocument",
    "InMemoryDocument",
    "InMemoryDocumentStore",
]
