"""In-process tracker, used for tests."""

from typing import Any, Optional

from customer_consolidation.errors import ConfigStoreNotFoundError
from customer_consolidation.models.opportunity import FIRST_DATA_ROW, TRACKER_COLUMNS
from customer_consolidation.store.base import ConfigStore


class InMemoryConfigStore(ConfigStore):
    """Tracker held as a list of rows (header excluded). Records every cell write."""

    def __init__(self, rows: Optional[list[list[Any]]] = None, exists: bool = True):
        self.rows: list[list[Any]] = [list(r) for r in rows or []]
        self.exists = exists
        self.writes: list[tuple[int, int, str]] = []

    def read_rows(self) -> list[list[Any]]:
        if not self.exists:
            raise ConfigStoreNotFoundError("Opportunity Tracker sheet not found")
        return [list(r) for r in self.rows]

    def write_cell(self, row: int, col: int, value: str) -> None:
        self.writes.append((row, col, value))
        index = row - FIRST_DATA_ROW
        while len(self.rows) <= index:
            self.rows.append([])
        cells = self.rows[index]
        cells.extend([""] * (len(TRACKER_COLUMNS) - len(cells)))
        cells[col - 1] = value

    def ensure_exists(self) -> bool:
        if self.exists:
            return False
        self.exists = True
        return True

    def cell(self, row: int, col: int) -> Any:
        return self.rows[row - FIRST_DATA_ROW][col - 1]

    def writes_to(self, row: int, col: int) -> list[str]:
        return [value for r, c, value in self.writes if r == row and c == col]
