"""Pytest fixtures for customer-consolidation tests."""

import base64
from datetime import datetime
from typing import Optional

import pytest

from customer_consolidation.documents.memory import InMemoryDocumentStore
from customer_consolidation.errors import SourceError
from customer_consolidation.models.email import EmailMessage, EmailThread
from customer_consolidation.models.transcript import Transcript
from customer_consolidation.sources.base import (
    MailFilter,
    MailSource,
    TranscriptFilter,
    TranscriptSource,
)
from customer_consolidation.store.memory import InMemoryConfigStore

FIXED_NOW = datetime(2025, 1, 15, 8, 30, 0)


def b64(text: str) -> str:
    """base64url-encode like the Gmail API does for message bodies."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


class FakeTranscriptSource(TranscriptSource):
    """Returns canned transcripts, or raises, and records every filter."""

    source_id = "fake"

    def __init__(self, transcripts: Optional[list[Transcript]] = None, error: Optional[Exception] = None):
        self.transcripts = transcripts or []
        self.error = error
        self.calls: list[TranscriptFilter] = []
        self.credential_error: Optional[Exception] = None

    def check_credentials(self) -> None:
        if self.credential_error:
            raise self.credential_error

    def fetch_transcripts(self, filter: Optional[TranscriptFilter] = None) -> list[Transcript]:
        self.calls.append(filter)
        if self.error:
            raise self.error
        return list(self.transcripts)


class FakeMailSource(MailSource):
    """Returns canned threads, or raises, and records every filter."""

    source_id = "fake"

    def __init__(self, threads: Optional[list[EmailThread]] = None, error: Optional[SourceError] = None):
        self.threads = threads or []
        self.error = error
        self.calls: list[MailFilter] = []

    def search_threads(self, filter: Optional[MailFilter] = None) -> list[EmailThread]:
        self.calls.append(filter)
        if self.error:
            raise self.error
        return list(self.threads)


@pytest.fixture
def fireflies_record() -> dict:
    """One raw transcript item from the Fireflies GraphQL response."""
    return {
        "id": "trans-1",
        "title": "Acme Discovery Call",
        "dateString": "2025-01-12T15:00:00.000Z",
        "date": 1736694000000,
        "duration": 2700,
        "participants": ["john@acme.com", "sara@ourco.com"],
        "sentences": [
            {"speaker_name": "John", "text": "We need help with integration.", "start_time": 1.5},
            {"speaker_name": "Sara", "text": "Happy to help.", "start_time": 4.0},
        ],
        "audio_url": None,
        "transcript_url": "https://app.fireflies.ai/view/trans-1",
    }


@pytest.fixture
def transcript(fireflies_record: dict) -> Transcript:
    return Transcript.from_api(fireflies_record)


@pytest.fixture
def email_thread() -> EmailThread:
    """Two-message thread."""
    return EmailThread.from_messages(
        [
            EmailMessage(
                sender="john@acme.com",
                recipient="sara@ourco.com",
                date=datetime(2025, 1, 10, 9, 7),
                date_formatted="Jan 10, 2025 09:07",
                subject="Pricing",
                body="Can you send pricing?",
            ),
            EmailMessage(
                sender="sara@ourco.com",
                recipient="john@acme.com",
                date=datetime(2025, 1, 11, 14, 30),
                date_formatted="Jan 11, 2025 14:30",
                subject="Re: Pricing",
                body="Attached.",
            ),
        ]
    )


@pytest.fixture
def gmail_thread_resource() -> dict:
    """Gmail API thread resource (format=full) with a multipart and a simple message."""
    return {
        "id": "t-1",
        "messages": [
            {
                "id": "m-1",
                "internalDate": "1736500020000",
                "payload": {
                    "mimeType": "multipart/alternative",
                    "headers": [
                        {"name": "From", "value": "john@acme.com"},
                        {"name": "To", "value": "sara@ourco.com"},
                        {"name": "Subject", "value": "Pricing"},
                        {"name": "Date", "value": "Fri, 10 Jan 2025 09:07:00 +0000"},
                    ],
                    "parts": [
                        {"mimeType": "text/plain", "body": {"data": b64("Can you send pricing?")}},
                        {"mimeType": "text/html", "body": {"data": b64("<p>Can you send pricing?</p>")}},
                    ],
                },
            },
            {
                "id": "m-2",
                "internalDate": "1736605800000",
                "payload": {
                    "mimeType": "text/plain",
                    "headers": [
                        {"name": "From", "value": "sara@ourco.com"},
                        {"name": "To", "value": "john@acme.com"},
                        {"name": "Subject", "value": "Re: Pricing"},
                    ],
                    "body": {"data": b64("Attached.")},
                },
            },
        ],
    }


@pytest.fixture
def tracker_rows() -> list[list[str]]:
    """Two tracker rows, as read below the header."""
    return [
        ["Acme Corp", "https://salesforce.com/123", "acme-channel", "acme", "doc-acme", "2025-01-10 08:00:00", "Success", ""],
        ["TechCo", "https://salesforce.com/456", "techco-channel", "techco", "", "", "", ""],
    ]


@pytest.fixture
def config_store(tracker_rows: list[list[str]]) -> InMemoryConfigStore:
    return InMemoryConfigStore(tracker_rows)


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()
