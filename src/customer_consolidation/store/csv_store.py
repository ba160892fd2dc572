"""CSV-file opportunity tracker for deployments without a Google Sheet."""

import csv
from pathlib import Path
from typing import Any

from customer_consolidation.errors import ConfigStoreNotFoundError
from customer_consolidation.models.opportunity import FIRST_DATA_ROW, TRACKER_COLUMNS
from customer_consolidation.store.base import ConfigStore


class CsvConfigStore(ConfigStore):
    """
    Tracker kept in a CSV file with the standard header row.
    Each cell write rewrites the file; a single writer is assumed.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    def _read_table(self) -> list[list[str]]:
        if not self._path.exists():
            raise ConfigStoreNotFoundError(f"Opportunity tracker not found: {self._path}")
        with self._path.open(newline="", encoding="utf-8") as f:
            return [row for row in csv.reader(f)]

    def _write_table(self, table: list[list[str]]) -> None:
        with self._path.open("w", newline="", encoding="utf-8") as f:
            csv.writer(f).writerows(table)

    def read_rows(self) -> list[list[Any]]:
        table = self._read_table()
        rows = table[FIRST_DATA_ROW - 1:]
        while rows and not any(cell.strip() for cell in rows[-1]):
            rows.pop()
        return rows

    def write_cell(self, row: int, col: int, value: str) -> None:
        table = self._read_table()
        while len(table) < row:
            table.append([])
        cells = table[row - 1]
        cells.extend([""] * (len(TRACKER_COLUMNS) - len(cells)))
        cells[col - 1] = value
        self._write_table(table)

    def ensure_exists(self) -> bool:
        if self._path.exists():
            return False
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._write_table([list(TRACKER_COLUMNS)])
        return True
