"""Unit tests for the Google Docs document host with a mocked service."""

from unittest.mock import MagicMock

import pytest

from customer_consolidation.documents.google_docs import (
    GoogleDocsStore,
    GoogleDocument,
    parse_paragraphs,
    utf16_len,
)
from customer_consolidation.errors import DocumentResolutionError


def _doc_resource(*texts: str) -> dict:
    """Docs v1 resource with one paragraph per text, indexes starting at 1."""
    content = [{"sectionBreak": {}, "endIndex": 1}]
    index = 1
    for text in texts:
        run = text + "\n"
        end = index + utf16_len(run)
        content.append({
            "startIndex": index,
            "endIndex": end,
            "paragraph": {"elements": [{"textRun": {"content": run}}]},
        })
        index = end
    return {"documentId": "doc-1", "title": "Acme", "body": {"content": content}}


def _service(resource: dict) -> MagicMock:
    service = MagicMock()
    service.documents.return_value.get.return_value.execute.return_value = resource
    return service


def _requests(service: MagicMock) -> list[dict]:
    """Every request sent through batchUpdate, in order."""
    sent = []
    for call in service.documents.return_value.batchUpdate.call_args_list:
        sent.extend(call.kwargs["body"]["requests"])
    return sent


class TestParseParagraphs:
    """Tests for reading the body structure."""

    def test_texts_and_ranges(self) -> None:
        spans = parse_paragraphs(_doc_resource("Title", "", "📞 CALL TRANSCRIPTS"))
        assert [s.text for s in spans] == ["Title", "", "📞 CALL TRANSCRIPTS"]
        assert (spans[0].start, spans[0].end) == (1, 7)
        assert (spans[1].start, spans[1].end) == (7, 8)
        # emoji is two UTF-16 code units
        assert spans[2].end - spans[2].start == len("📞 CALL TRANSCRIPTS") + 2

    def test_skips_non_paragraph_elements(self) -> None:
        resource = _doc_resource("a")
        resource["body"]["content"].append({"table": {}, "startIndex": 3, "endIndex": 10})
        assert [s.text for s in parse_paragraphs(resource)] == ["a"]

    def test_utf16_len(self) -> None:
        assert utf16_len("abc") == 3
        assert utf16_len("📞") == 2


class TestGoogleDocument:
    """Tests for paragraph edits translated into batchUpdate requests."""

    def test_insert_before_existing_paragraph(self) -> None:
        service = _service(_doc_resource("Title", "", "📞 CALL TRANSCRIPTS", ""))
        doc = GoogleDocument(service, "doc-1")
        doc.insert_paragraphs(2, ["one", "two"])
        assert _requests(service) == [
            {"insertText": {"location": {"index": 8}, "text": "one\ntwo\n"}}
        ]

    def test_insert_past_end_appends(self) -> None:
        service = _service(_doc_resource("Title"))
        doc = GoogleDocument(service, "doc-1")
        doc.insert_paragraph(5, "tail")
        assert _requests(service) == [
            {"insertText": {"location": {"index": 6}, "text": "\ntail"}}
        ]

    def test_empty_insert_sends_nothing(self) -> None:
        service = _service(_doc_resource("Title"))
        GoogleDocument(service, "doc-1").insert_paragraphs(0, [])
        service.documents.return_value.batchUpdate.assert_not_called()

    def test_clear_keeps_trailing_newline(self) -> None:
        service = _service(_doc_resource("Title", "body"))
        GoogleDocument(service, "doc-1").clear()
        assert _requests(service) == [
            {"deleteContentRange": {"range": {"startIndex": 1, "endIndex": 11}}}
        ]

    def test_clear_on_empty_document_is_noop(self) -> None:
        service = _service(_doc_resource(""))
        GoogleDocument(service, "doc-1").clear()
        service.documents.return_value.batchUpdate.assert_not_called()

    def test_bold_offsets_count_utf16_units(self) -> None:
        service = _service(_doc_resource("Title", "📞 CALL TRANSCRIPTS"))
        doc = GoogleDocument(service, "doc-1")
        header = "📞 CALL TRANSCRIPTS"
        doc.set_bold(1, 0, len(header))
        request = _requests(service)[0]["updateTextStyle"]
        assert request["range"] == {"startIndex": 7, "endIndex": 7 + utf16_len(header)}
        assert request["textStyle"] == {"bold": True}
        assert request["fields"] == "bold"

    def test_set_link(self) -> None:
        service = _service(_doc_resource("Salesforce Opportunity: https://sf/1"))
        doc = GoogleDocument(service, "doc-1")
        doc.set_link(0, 24, 36, "https://sf/1")
        request = _requests(service)[0]["updateTextStyle"]
        assert request["range"] == {"startIndex": 25, "endIndex": 37}
        assert request["textStyle"] == {"link": {"url": "https://sf/1"}}

    def test_rereads_after_write(self) -> None:
        service = _service(_doc_resource("Title"))
        doc = GoogleDocument(service, "doc-1")
        doc.paragraphs()
        doc.insert_paragraph(0, "new")
        doc.paragraphs()
        assert service.documents.return_value.get.return_value.execute.call_count == 2


class TestGoogleDocsStore:
    """Tests for opening and creating documents."""

    def test_open(self) -> None:
        service = _service(_doc_resource("Title", "body"))
        doc = GoogleDocsStore(service).open("doc-1")
        assert doc.id == "doc-1"
        assert doc.title == "Acme"
        assert doc.paragraphs() == ["Title", "body"]

    def test_open_failure(self) -> None:
        service = MagicMock()
        service.documents.return_value.get.return_value.execute.side_effect = RuntimeError("404")
        with pytest.raises(DocumentResolutionError, match="doc-x"):
            GoogleDocsStore(service).open("doc-x")

    def test_create(self) -> None:
        service = MagicMock()
        service.documents.return_value.create.return_value.execute.return_value = {
            "documentId": "new-doc",
            "title": "Acme Corp - Customer Consolidation",
        }
        doc = GoogleDocsStore(service).create("Acme Corp - Customer Consolidation")
        assert doc.id == "new-doc"
        service.documents.return_value.create.assert_called_once_with(
            body={"title": "Acme Corp - Customer Consolidation"}
        )

    def test_create_failure(self) -> None:
        service = MagicMock()
        service.documents.return_value.create.return_value.execute.side_effect = RuntimeError("quota")
        with pytest.raises(DocumentResolutionError):
            GoogleDocsStore(service).create("Acme")
