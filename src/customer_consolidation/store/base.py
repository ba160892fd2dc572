"""Configuration store interface over a tabular host (sheet, CSV, memory)."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from customer_consolidation.formatting import format_error_log, format_sync_timestamp
from customer_consolidation.models.opportunity import (
    COL_DOC_ID,
    COL_ERROR_LOG,
    COL_LAST_SYNC,
    COL_STATUS,
    FIRST_DATA_ROW,
    OpportunityConfig,
    SyncStatus,
)


class ConfigStore(ABC):
    """
    Opportunity tracker: one row per opportunity below a header row.
    Subclasses provide raw row reads and single-cell writes; row and column
    numbers are 1-based physical positions.
    """

    @abstractmethod
    def read_rows(self) -> list[list[Any]]:
        """Data rows below the header. Raises ConfigStoreNotFoundError if the store is missing."""
        pass

    @abstractmethod
    def write_cell(self, row: int, col: int, value: str) -> None:
        pass

    @abstractmethod
    def ensure_exists(self) -> bool:
        """Create the store with its header row if absent. Returns True if created."""
        pass

    def read_all(self) -> list[OpportunityConfig]:
        """All configured opportunities, in row order."""
        rows = self.read_rows()
        return [
            OpportunityConfig.from_row(row, row_number=index + FIRST_DATA_ROW)
            for index, row in enumerate(rows)
        ]

    def update_cursor(self, row: int, when: datetime) -> None:
        self.write_cell(row, COL_LAST_SYNC, format_sync_timestamp(when))

    def update_status(self, row: int, status: SyncStatus) -> None:
        self.write_cell(row, COL_STATUS, SyncStatus(status).value)

    def update_doc_handle(self, row: int, handle: str) -> None:
        self.write_cell(row, COL_DOC_ID, handle)

    def log_error(self, row: int, message: str, when: Optional[datetime] = None) -> None:
        self.write_cell(row, COL_ERROR_LOG, format_error_log(message, when or datetime.now()))

    def clear_error(self, row: int) -> None:
        self.write_cell(row, COL_ERROR_LOG, "")
