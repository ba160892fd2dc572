"""In-process document host, used for tests and dry runs."""

import itertools
from typing import Optional

from pydantic import BaseModel, Field

from customer_consolidation.documents.base import Document, DocumentStore
from customer_consolidation.errors import DocumentResolutionError


class StyleSpan(BaseModel):
    """Styled character range [start, end) within a paragraph."""

    start: int
    end: int
    url: Optional[str] = None


class Paragraph(BaseModel):
    text: str = ""
    bold: list[StyleSpan] = Field(default_factory=list)
    links: list[StyleSpan] = Field(default_factory=list)


class InMemoryDocument(Document):
    """Document held as a list of Paragraph models."""

    def __init__(self, doc_id: str, name: str = "", paragraphs: Optional[list[str]] = None):
        self._id = doc_id
        self.name = name
        self.content: list[Paragraph] = [Paragraph(text=t) for t in paragraphs or []]

    @property
    def id(self) -> str:
        return self._id

    def paragraphs(self) -> list[str]:
        return [p.text for p in self.content]

    def insert_paragraph(self, index: int, text: str) -> None:
        self.content.insert(index, Paragraph(text=text))

    def clear(self) -> None:
        self.content = []

    def set_bold(self, index: int, start: int, end: int) -> None:
        self.content[index].bold.append(StyleSpan(start=start, end=end))

    def set_link(self, index: int, start: int, end: int, url: str) -> None:
        self.content[index].links.append(StyleSpan(start=start, end=end, url=url))


class InMemoryDocumentStore(DocumentStore):
    """Keeps documents in a dict keyed by generated handle."""

    def __init__(self, documents: Optional[list[InMemoryDocument]] = None):
        self.documents: dict[str, InMemoryDocument] = {d.id: d for d in documents or []}
        self._ids = itertools.count(1)

    def open(self, handle: str) -> InMemoryDocument:
        try:
            return self.documents[handle]
        except KeyError:
            raise DocumentResolutionError(f"Document not found: {handle}") from None

    def create(self, name: str) -> InMemoryDocument:
        doc_id = f"doc-{next(self._ids)}"
        while doc_id in self.documents:
            doc_id = f"doc-{next(self._ids)}"
        doc = InMemoryDocument(doc_id, name=name)
        self.documents[doc_id] = doc
        return doc
