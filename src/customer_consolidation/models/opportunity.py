"""Opportunity tracker row model."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class SyncStatus(str, Enum):
    """Per-row sync state as written to the tracker's Status column."""

    IDLE = "Idle"
    PROCESSING = "Processing"
    SUCCESS = "Success"
    ERROR = "Error"


# Header row written when the tracker is bootstrapped. Order is positional.
TRACKER_COLUMNS = [
    "Opportunity Name",
    "Salesforce URL",
    "Customer Domain",
    "Gmail Labels",
    "Doc ID",
    "Last Sync Date",
    "Status",
    "Error Log",
]

COL_NAME = 1
COL_URL = 2
COL_CHANNEL = 3
COL_MAIL_LABEL = 4
COL_DOC_ID = 5
COL_LAST_SYNC = 6
COL_STATUS = 7
COL_ERROR_LOG = 8

FIRST_DATA_ROW = 2


class OpportunityConfig(BaseModel):
    """One tracked customer opportunity, read from one tracker row."""

    name: str = ""
    crm_url: str = ""
    channel_id: str = Field(default="", description="Fireflies channel / customer domain")
    mail_label: str = ""
    doc_handle: str = Field(default="", description="Empty until a document is created")
    last_sync: str = Field(default="", description="Cursor; empty means full lookback window")
    status: SyncStatus = SyncStatus.IDLE
    error_log: str = ""
    row_number: int = Field(..., ge=FIRST_DATA_ROW, description="1-based physical row")

    @field_validator(
        "name", "crm_url", "channel_id", "mail_label", "doc_handle", "last_sync", "error_log",
        mode="before",
    )
    @classmethod
    def _cell_to_str(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> SyncStatus:
        if isinstance(value, SyncStatus):
            return value
        text = str(value or "").strip().lower()
        for status in SyncStatus:
            if status.value.lower() == text:
                return status
        return SyncStatus.IDLE

    @property
    def has_document(self) -> bool:
        return bool(self.doc_handle)

    @classmethod
    def from_row(cls, row: list[Any], row_number: int) -> "OpportunityConfig":
        """Map a positional tracker row (any length) to a config."""
        cells = list(row[: len(TRACKER_COLUMNS)])
        cells += [""] * (len(TRACKER_COLUMNS) - len(cells))
        return cls(
            name=cells[COL_NAME - 1],
            crm_url=cells[COL_URL - 1],
            channel_id=cells[COL_CHANNEL - 1],
            mail_label=cells[COL_MAIL_LABEL - 1],
            doc_handle=cells[COL_DOC_ID - 1],
            last_sync=cells[COL_LAST_SYNC - 1],
            status=cells[COL_STATUS - 1],
            error_log=cells[COL_ERROR_LOG - 1],
            row_number=row_number,
        )
