"""Exception hierarchy for consolidation runs.

Run-fatal: CredentialMissingError, ConfigStoreNotFoundError.
Row-fatal: DocumentResolutionError and anything not raised by a source.
Source-scoped: SourceError subclasses, isolated per source within a row.
"""


class ConsolidationError(Exception):
    """Base class for all consolidation errors."""


class SourceError(ConsolidationError):
    """An upstream content source (transcripts, mail) failed."""

    source: str = "source"


class TranscriptSourceError(SourceError):
    """Transcript provider request failed or returned provider-level errors."""

    source = "transcripts"


class CredentialMissingError(TranscriptSourceError):
    """No transcript provider credential is configured."""


class MalformedResponseError(TranscriptSourceError):
    """Transcript provider response lacks the expected result container."""


class MailSearchError(SourceError):
    """Mail search failed."""

    source = "mail"


class DocumentResolutionError(ConsolidationError):
    """A consolidation document could not be opened or created."""


class ConfigStoreNotFoundError(ConsolidationError):
    """The opportunity tracker (configuration store) does not exist."""
