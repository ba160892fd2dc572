"""Unit tests for the Gmail thread search client."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from conftest import b64
from customer_consolidation.errors import MailSearchError
from customer_consolidation.formatting import format_message_date
from customer_consolidation.sources.base import MailFilter
from customer_consolidation.sources.gmail import (
    GmailClient,
    build_search_query,
    extract_plain_body,
    parse_message,
    parse_thread,
)


def _service(thread_ids: list[str], thread_resource: dict) -> MagicMock:
    service = MagicMock()
    threads = service.users.return_value.threads.return_value
    threads.list.return_value.execute.return_value = {"threads": [{"id": t} for t in thread_ids]}
    threads.get.return_value.execute.return_value = thread_resource
    return service


class TestBuildSearchQuery:
    """Tests for search expression construction."""

    def test_label_and_after(self) -> None:
        query = build_search_query(MailFilter(label="acme", after=datetime(2025, 1, 10, 8, 0)))
        assert query == "label:acme after:2025/01/10"

    def test_all_terms_in_order(self) -> None:
        query = build_search_query(
            MailFilter(
                label="acme",
                from_domain="acme.com",
                from_address="john@acme.com",
                after=datetime(2025, 1, 1),
                before=datetime(2025, 2, 1),
            )
        )
        assert query == (
            "label:acme from:*@acme.com from:john@acme.com after:2025/01/01 before:2025/02/01"
        )

    def test_empty_filter(self) -> None:
        assert build_search_query(MailFilter()) == ""
        assert build_search_query(None) == ""


class TestParsing:
    """Tests for message and thread normalization."""

    def test_multipart_prefers_plain_text(self, gmail_thread_resource: dict) -> None:
        payload = gmail_thread_resource["messages"][0]["payload"]
        assert extract_plain_body(payload) == "Can you send pricing?"

    def test_nested_multipart(self) -> None:
        payload = {
            "mimeType": "multipart/mixed",
            "parts": [
                {
                    "mimeType": "multipart/alternative",
                    "parts": [{"mimeType": "text/plain", "body": {"data": b64("deep body")}}],
                },
                {"mimeType": "application/pdf", "body": {"attachmentId": "a-1"}},
            ],
        }
        assert extract_plain_body(payload) == "deep body"

    def test_falls_back_to_snippet(self) -> None:
        message = {
            "internalDate": "0",
            "snippet": "preview text",
            "payload": {"mimeType": "text/html", "headers": [], "body": {"data": b64("<p>x</p>")}},
        }
        assert parse_message(message).body == "preview text"

    def test_message_headers(self, gmail_thread_resource: dict) -> None:
        message = parse_message(gmail_thread_resource["messages"][0])
        assert message.sender == "john@acme.com"
        assert message.recipient == "sara@ourco.com"
        assert message.subject == "Pricing"
        expected = datetime(2025, 1, 10, 9, 7, tzinfo=timezone.utc).astimezone()
        assert message.date == expected
        assert message.date_formatted == format_message_date(expected)

    def test_internal_date_fallback(self, gmail_thread_resource: dict) -> None:
        message = parse_message(gmail_thread_resource["messages"][1])
        assert message.date == datetime.fromtimestamp(1736605800, tz=timezone.utc).astimezone()

    def test_thread_keeps_order_and_first_subject(self, gmail_thread_resource: dict) -> None:
        thread = parse_thread(gmail_thread_resource)
        assert thread.subject == "Pricing"
        assert thread.message_count == 2
        assert [m.body for m in thread.messages] == ["Can you send pricing?", "Attached."]


class TestGmailClient:
    """Tests for the API-backed search."""

    def test_search_threads(self, gmail_thread_resource: dict) -> None:
        service = _service(["t-1"], gmail_thread_resource)
        client = GmailClient(service, max_threads=25)
        threads = client.search_threads(MailFilter(label="acme", after=datetime(2025, 1, 10)))

        assert len(threads) == 1
        api = service.users.return_value.threads.return_value
        api.list.assert_called_once_with(userId="me", q="label:acme after:2025/01/10", maxResults=25)
        api.get.assert_called_once_with(userId="me", id="t-1", format="full")

    def test_no_results(self) -> None:
        service = MagicMock()
        service.users.return_value.threads.return_value.list.return_value.execute.return_value = {}
        assert GmailClient(service).search_threads(MailFilter(label="acme")) == []

    def test_result_cap(self, gmail_thread_resource: dict) -> None:
        service = _service([f"t-{i}" for i in range(5)], gmail_thread_resource)
        threads = GmailClient(service, max_threads=2).search_threads()
        assert len(threads) == 2

    def test_api_failure_wrapped(self) -> None:
        service = MagicMock()
        service.users.return_value.threads.return_value.list.return_value.execute.side_effect = RuntimeError(
            "quota exceeded"
        )
        with pytest.raises(MailSearchError, match="Gmail search failed: quota exceeded") as exc_info:
            GmailClient(service).search_threads(MailFilter(label="acme"))
        assert exc_info.value.source == "mail"
