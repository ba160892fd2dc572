"""Google Docs document host (Docs API v1).

Docs API indexes are UTF-16 code units and every body ends with a trailing
newline that cannot be deleted, so a cleared document still holds one empty
paragraph.
"""

import logging
from typing import Any, NamedTuple

from customer_consolidation.documents.base import Document, DocumentStore
from customer_consolidation.errors import DocumentResolutionError

logger = logging.getLogger(__name__)


def utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


class _Span(NamedTuple):
    text: str
    start: int
    end: int


def parse_paragraphs(document: dict) -> list[_Span]:
    """Paragraph texts (without trailing newline) and their body index range."""
    spans: list[_Span] = []
    for element in (document.get("body") or {}).get("content") or []:
        paragraph = element.get("paragraph")
        if paragraph is None:
            continue
        text = "".join(
            (part.get("textRun") or {}).get("content", "")
            for part in paragraph.get("elements") or []
        )
        if text.endswith("\n"):
            text = text[:-1]
        spans.append(_Span(text, element.get("startIndex", 1), element.get("endIndex", 1)))
    return spans


class GoogleDocument(Document):
    """One Google Doc. Paragraph positions are re-read after every write."""

    def __init__(self, service: Any, document_id: str, title: str = ""):
        self._service = service
        self._id = document_id
        self.title = title
        self._spans: list[_Span] | None = None

    @property
    def id(self) -> str:
        return self._id

    def _load(self) -> list[_Span]:
        if self._spans is None:
            doc = self._service.documents().get(documentId=self._id).execute()
            self.title = doc.get("title", self.title)
            self._spans = parse_paragraphs(doc)
        return self._spans

    def _batch_update(self, requests: list[dict]) -> None:
        if not requests:
            return
        self._service.documents().batchUpdate(
            documentId=self._id, body={"requests": requests}
        ).execute()
        self._spans = None

    def _body_end(self) -> int:
        spans = self._load()
        return spans[-1].end if spans else 2

    def paragraphs(self) -> list[str]:
        return [s.text for s in self._load()]

    def insert_paragraph(self, index: int, text: str) -> None:
        self.insert_paragraphs(index, [text])

    def insert_paragraphs(self, index: int, lines: list[str]) -> None:
        if not lines:
            return
        spans = self._load()
        block = "\n".join(lines)
        if index < len(spans):
            location = spans[index].start
            text = block + "\n"
        else:
            location = self._body_end() - 1
            text = "\n" + block
        self._batch_update([{"insertText": {"location": {"index": location}, "text": text}}])

    def clear(self) -> None:
        end = self._body_end() - 1
        if end > 1:
            self._batch_update(
                [{"deleteContentRange": {"range": {"startIndex": 1, "endIndex": end}}}]
            )

    def _range(self, index: int, start: int, end: int) -> dict:
        span = self._load()[index]
        return {
            "startIndex": span.start + utf16_len(span.text[:start]),
            "endIndex": span.start + utf16_len(span.text[:end]),
        }

    def set_bold(self, index: int, start: int, end: int) -> None:
        self._batch_update([
            {
                "updateTextStyle": {
                    "range": self._range(index, start, end),
                    "textStyle": {"bold": True},
                    "fields": "bold",
                }
            }
        ])

    def set_link(self, index: int, start: int, end: int, url: str) -> None:
        self._batch_update([
            {
                "updateTextStyle": {
                    "range": self._range(index, start, end),
                    "textStyle": {"link": {"url": url}},
                    "fields": "link",
                }
            }
        ])


class GoogleDocsStore(DocumentStore):
    """Opens and creates Google Docs through a Docs v1 service resource."""

    def __init__(self, service: Any):
        self._service = service

    def open(self, handle: str) -> GoogleDocument:
        try:
            doc = self._service.documents().get(documentId=handle).execute()
        except Exception as e:
            raise DocumentResolutionError(f"Could not open document {handle}: {e}") from e
        document = GoogleDocument(self._service, handle, doc.get("title", ""))
        document._spans = parse_paragraphs(doc)
        return document

    def create(self, name: str) -> GoogleDocument:
        try:
            doc = self._service.documents().create(body={"title": name}).execute()
        except Exception as e:
            raise DocumentResolutionError(f"Could not create document {name!r}: {e}") from e
        logger.info("Created document %s (%s)", name, doc["documentId"])
        return GoogleDocument(self._service, doc["documentId"], doc.get("title", name))
