"""Abstract interfaces for upstream content sources."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from customer_consolidation.models.email import EmailThread
from customer_consolidation.models.transcript import Transcript


class TranscriptFilter(BaseModel):
    """
    Transcript query options.
    limit and channel_id are sent to the provider; since and
    participant_domain are applied client-side to the parsed results.
    """

    limit: int = Field(default=50, ge=1)
    channel_id: Optional[str] = None
    since: Optional[datetime] = None
    participant_domain: Optional[str] = None


class MailFilter(BaseModel):
    """Mail search options, combined with AND semantics."""

    label: Optional[str] = None
    from_domain: Optional[str] = None
    from_address: Optional[str] = None
    after: Optional[datetime] = None
    before: Optional[datetime] = None


class TranscriptSource(ABC):
    """Standard interface for a meeting-transcript provider."""

    source_id: str = ""

    @abstractmethod
    def fetch_transcripts(self, filter: Optional[TranscriptFilter] = None) -> list[Transcript]:
        """
        Fetch parsed transcripts matching the filter.
        Raises TranscriptSourceError (or a subclass) on failure.
        """
        pass

    def check_credentials(self) -> None:
        """
        Raise CredentialMissingError when the source cannot authenticate.
        Called once per run, before any row is processed. Default: no-op.
        """
        return None


class MailSource(ABC):
    """Standard interface for a mailbox search facility."""

    source_id: str = ""

    @abstractmethod
    def search_threads(self, filter: Optional[MailFilter] = None) -> list[EmailThread]:
        """
        Search threads matching the filter. Raises MailSearchError on failure.
        """
        pass
