"""Data models for tracker rows, transcripts, email threads, and runs."""

from customer_consolidation.models.email import EmailMessage, EmailThread
from customer_consolidation.models.opportunity import OpportunityConfig, SyncStatus
from customer_consolidation.models.run import RowError, RunSummary, SourceWarning
from customer_consolidation.models.settings import SyncSettings
from customer_consolidation.models.transcript import Channel, Transcript, Utterance

__all__ = [
    "Channel",
    "EmailMessage",
    "EmailThread",
    "OpportunityConfig",
    "RowError",
    "RunSummary",
    "SourceWarning",
    "SyncSettings",
    "SyncStatus",
    "Transcript",
    "Utterance",
]
