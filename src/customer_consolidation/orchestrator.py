"""Run orchestration: tracker rows → fetch transcripts and mail → append to docs → update tracker."""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from customer_consolidation.documents.base import Document, DocumentStore
from customer_consolidation.documents.writer import (
    append_thread,
    append_transcript,
    get_or_create,
    has_structure,
    init_structure,
)
from customer_consolidation.errors import SourceError
from customer_consolidation.formatting import document_title, parse_sync_timestamp
from customer_consolidation.models.opportunity import OpportunityConfig, SyncStatus
from customer_consolidation.models.run import RowError, RunSummary, SourceWarning
from customer_consolidation.models.settings import SyncSettings
from customer_consolidation.sources.base import (
    MailFilter,
    MailSource,
    TranscriptFilter,
    TranscriptSource,
)
from customer_consolidation.store.base import ConfigStore
from customer_consolidation.store.run_store import RunStore

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Processes every tracker row once, strictly in order.
    Row failures are recorded on the row and never stop later rows; a
    failure in one source is logged as a warning and does not stop the
    other source or fail the row.
    """

    def __init__(
        self,
        config_store: ConfigStore,
        transcripts: TranscriptSource,
        mail: MailSource,
        documents: DocumentStore,
        *,
        settings: Optional[SyncSettings] = None,
        run_store: Optional[RunStore] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.config_store = config_store
        self.transcripts = transcripts
        self.mail = mail
        self.documents = documents
        self.settings = settings or SyncSettings()
        self.run_store = run_store
        self._now = now

    def run(self) -> RunSummary:
        """
        Process all rows and return the run summary.
        CredentialMissingError and ConfigStoreNotFoundError abort the run
        before any row is touched.
        """
        summary = RunSummary(started_at=self._now())

        self.transcripts.check_credentials()
        configs = self.config_store.read_all()

        if not configs:
            logger.info("No opportunities to process")
            summary.finished_at = self._now()
            return summary

        logger.info("Processing %d opportunities...", len(configs))
        for config in configs:
            summary.processed += 1
            try:
                self.process_opportunity(config, summary)
            except Exception as e:
                summary.failed += 1
                summary.errors.append(RowError(opportunity=config.name, error=str(e)))
                logger.error("✗ Error processing %s: %s", config.name, e)
                self._record_row_error(config, str(e))
            else:
                summary.successful += 1
                logger.info("✓ Successfully processed: %s", config.name)

        summary.finished_at = self._now()
        logger.info(
            "Processing complete: %d successful, %d failed",
            summary.successful,
            summary.failed,
        )
        self._save_summary(summary)
        return summary

    def process_opportunity(self, config: OpportunityConfig, summary: Optional[RunSummary] = None) -> None:
        """Sync one row. Raises on any row-fatal error; the cursor is then left unchanged."""
        row = config.row_number
        logger.info("Processing opportunity: %s", config.name)
        self.config_store.update_status(row, SyncStatus.PROCESSING)

        doc, created = get_or_create(self.documents, config.doc_handle, document_title(config.name))
        if created:
            self.config_store.update_doc_handle(row, doc.id)

        if not has_structure(doc):
            logger.info("Creating document structure for %s", config.name)
            init_structure(doc, config)

        since = self.since_for(config)
        self._sync_transcripts(config, doc, since, summary)
        self._sync_mail(config, doc, since, summary)

        now = self._now()
        self.config_store.update_cursor(row, now)
        self.config_store.update_status(row, SyncStatus.SUCCESS)
        self.config_store.clear_error(row)

    def since_for(self, config: OpportunityConfig) -> datetime:
        """Row cursor, or now minus the lookback window when blank or unparseable."""
        since = parse_sync_timestamp(config.last_sync)
        if since is None:
            if config.last_sync:
                logger.warning(
                    "Unparseable Last Sync Date %r for %s; using %d-day lookback",
                    config.last_sync,
                    config.name,
                    self.settings.lookback_days,
                )
            since = self._now() - timedelta(days=self.settings.lookback_days)
        return since

    def _sync_transcripts(
        self,
        config: OpportunityConfig,
        doc: Document,
        since: datetime,
        summary: Optional[RunSummary],
    ) -> None:
        try:
            logger.info("Fetching transcripts for %s since %s", config.channel_id or "(all)", since)
            transcripts = self.transcripts.fetch_transcripts(
                TranscriptFilter(
                    limit=self.settings.transcript_limit,
                    channel_id=config.channel_id or None,
                    since=since,
                )
            )
            logger.info("Found %d new transcripts", len(transcripts))
            for transcript in transcripts:
                logger.debug("Appending transcript: %s", transcript.title)
                append_transcript(doc, transcript)
        except SourceError as e:
            self._source_warning(config, e, summary)

    def _sync_mail(
        self,
        config: OpportunityConfig,
        doc: Document,
        since: datetime,
        summary: Optional[RunSummary],
    ) -> None:
        try:
            logger.info("Fetching emails with label %s since %s", config.mail_label or "(any)", since)
            threads = self.mail.search_threads(
                MailFilter(label=config.mail_label or None, after=since)
            )
            logger.info("Found %d new email threads", len(threads))
            for thread in threads:
                logger.debug("Appending email thread: %s", thread.subject)
                append_thread(doc, thread)
        except SourceError as e:
            self._source_warning(config, e, summary)

    def _source_warning(self, config: OpportunityConfig, error: SourceError, summary: Optional[RunSummary]) -> None:
        logger.warning(
            "%s source failed for %s: %s",
            error.source,
            config.name,
            error,
            extra={"opportunity": config.name, "source": error.source},
        )
        if summary is not None:
            summary.warnings.append(
                SourceWarning(opportunity=config.name, source=error.source, error=str(error))
            )

    def _record_row_error(self, config: OpportunityConfig, message: str) -> None:
        try:
            self.config_store.log_error(config.row_number, message, self._now())
            self.config_store.update_status(config.row_number, SyncStatus.ERROR)
        except Exception as e:
            logger.error("Could not record error for %s (row %d): %s", config.name, config.row_number, e)

    def _save_summary(self, summary: RunSummary) -> None:
        if self.run_store is None:
            return
        try:
            self.run_store.save(summary)
        except Exception as e:
            logger.warning("Could not save run summary: %s", e)
