"""Opportunity tracker stores and run history."""

from customer_consolidation.store.base import ConfigStore
from customer_consolidation.store.csv_store import CsvConfigStore
from customer_consolidation.store.memory import InMemoryConfigStore
from customer_consolidation.store.run_store import RunStore
from customer_consolidation.store.sheets_store import GoogleSheetsConfigStore

__all__ = [
    "ConfigStore",
    "CsvConfigStore",
    "GoogleSheetsConfigStore",
    "InMemoryConfigStore",
    "RunStore",
]
