"""Run summary returned by the orchestrator and persisted to run history."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RowError(BaseModel):
    """Row-fatal failure recorded for one opportunity."""

    opportunity: str
    error: str


class SourceWarning(BaseModel):
    """Non-fatal source failure; the row still completed."""

    opportunity: str
    source: str  # "transcripts" | "mail"
    error: str


class RunSummary(BaseModel):
    """Counts and messages for one consolidation run."""

    processed: int = 0
    successful: int = 0
    failed: int = 0
    errors: list[RowError] = Field(default_factory=list)
    warnings: list[SourceWarning] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    def to_text(self) -> str:
        """Human-readable summary, as shown after a run."""
        lines = [
            f"Processed: {self.processed}",
            f"Successful: {self.successful}",
            f"Failed: {self.failed}",
        ]
        for err in self.errors:
            lines.append(f"  ✗ {err.opportunity}: {err.error}")
        for warn in self.warnings:
            lines.append(f"  ⚠ {warn.opportunity} ({warn.source}): {warn.error}")
        return "\n".join(lines)
