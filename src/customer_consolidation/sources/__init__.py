"""Upstream content sources: meeting transcripts and mail threads."""

from customer_consolidation.sources.base import (
    MailFilter,
    MailSource,
    TranscriptFilter,
    TranscriptSource,
)
from customer_consolidation.sources.fireflies import FirefliesClient
from customer_consolidation.sources.gmail import GmailClient

__all__ = [
    "FirefliesClient",
    "GmailClient",
    "MailFilter",
    "MailSource",
    "TranscriptFilter",
    "TranscriptSource",
]
