"""Google Sheets opportunity tracker (Sheets API v4)."""

import logging
from typing import Any, Optional

from googleapiclient.errors import HttpError

from customer_consolidation.errors import ConfigStoreNotFoundError
from customer_consolidation.models.opportunity import FIRST_DATA_ROW, TRACKER_COLUMNS
from customer_consolidation.store.base import ConfigStore

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "Opportunity Tracker"
HEADER_BACKGROUND = {"red": 243 / 255, "green": 243 / 255, "blue": 243 / 255}  # #f3f3f3


def column_letter(col: int) -> str:
    """1-based column number to A1 letters (1 -> A, 27 -> AA)."""
    letters = ""
    while col > 0:
        col, rem = divmod(col - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


class GoogleSheetsConfigStore(ConfigStore):
    """Tracker stored in one named sheet of a spreadsheet."""

    def __init__(self, service: Any, spreadsheet_id: str, sheet_name: str = DEFAULT_SHEET_NAME):
        self._service = service
        self._spreadsheet_id = spreadsheet_id
        self._sheet_name = sheet_name

    def _a1(self, cells: str) -> str:
        return f"'{self._sheet_name}'!{cells}"

    def _sheet_id(self) -> Optional[int]:
        """Numeric id of the tracker sheet, or None when it does not exist."""
        try:
            meta = (
                self._service.spreadsheets()
                .get(spreadsheetId=self._spreadsheet_id, fields="sheets.properties")
                .execute()
            )
        except HttpError as e:
            if e.resp.status == 404:
                raise ConfigStoreNotFoundError(f"Spreadsheet not found: {self._spreadsheet_id}") from e
            raise
        for sheet in meta.get("sheets") or []:
            props = sheet.get("properties") or {}
            if props.get("title") == self._sheet_name:
                return props.get("sheetId")
        return None

    def read_rows(self) -> list[list[Any]]:
        if self._sheet_id() is None:
            raise ConfigStoreNotFoundError(f"{self._sheet_name} sheet not found")
        last_col = column_letter(len(TRACKER_COLUMNS))
        resp = (
            self._service.spreadsheets()
            .values()
            .get(spreadsheetId=self._spreadsheet_id, range=self._a1(f"A{FIRST_DATA_ROW}:{last_col}"))
            .execute()
        )
        return resp.get("values") or []

    def write_cell(self, row: int, col: int, value: str) -> None:
        self._service.spreadsheets().values().update(
            spreadsheetId=self._spreadsheet_id,
            range=self._a1(f"{column_letter(col)}{row}"),
            valueInputOption="RAW",
            body={"values": [[value]]},
        ).execute()

    def ensure_exists(self) -> bool:
        if self._sheet_id() is not None:
            return False

        reply = self._service.spreadsheets().batchUpdate(
            spreadsheetId=self._spreadsheet_id,
            body={"requests": [{"addSheet": {"properties": {"title": self._sheet_name}}}]},
        ).execute()
        sheet_id = reply["replies"][0]["addSheet"]["properties"]["sheetId"]

        last_col = column_letter(len(TRACKER_COLUMNS))
        self._service.spreadsheets().values().update(
            spreadsheetId=self._spreadsheet_id,
            range=self._a1(f"A1:{last_col}1"),
            valueInputOption="RAW",
            body={"values": [list(TRACKER_COLUMNS)]},
        ).execute()

        self._service.spreadsheets().batchUpdate(
            spreadsheetId=self._spreadsheet_id,
            body={
                "requests": [
                    {
                        "repeatCell": {
                            "range": {
                                "sheetId": sheet_id,
                                "startRowIndex": 0,
                                "endRowIndex": 1,
                                "startColumnIndex": 0,
                                "endColumnIndex": len(TRACKER_COLUMNS),
                            },
                            "cell": {
                                "userEnteredFormat": {
                                    "textFormat": {"bold": True},
                                    "backgroundColor": HEADER_BACKGROUND,
                                }
                            },
                            "fields": "userEnteredFormat(textFormat,backgroundColor)",
                        }
                    }
                ]
            },
        ).execute()
        logger.info("Created %s sheet in spreadsheet %s", self._sheet_name, self._spreadsheet_id)
        return True
