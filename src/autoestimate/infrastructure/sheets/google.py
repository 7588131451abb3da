"""
Google Sheets Backend - Sheets API v4 through google-api-python-client.

Maps the backend protocol onto spreadsheets.get (table listing),
spreadsheets.values.get/update (cell ranges) and spreadsheets.batchUpdate
(structural operations). Requests are never retried: a retried structural
batch could apply twice.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from autoestimate.domain.address import parse_address
from autoestimate.domain.geometry import Rectangle
from autoestimate.infrastructure.sheets.backend import (
    DeleteRows,
    InputMode,
    InsertRange,
    InsertRows,
    SheetTables,
    StructuralOperation,
    TableEntry,
    UpdateCellLink,
    UpdateTableRange,
    normalize_rows,
)

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Only what the table registry needs
TABLE_FIELDS = "sheets(properties(sheetId,title),tables(name,tableId,range))"

_SPREADSHEET_URL = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")


def spreadsheet_id_from_url(url: str) -> str:
    """
    Extract the spreadsheet id from a Google Sheets URL.

    Raises:
        ValueError: If the URL has no /spreadsheets/d/<id> part
    """
    match = _SPREADSHEET_URL.search(url)
    if not match:
        raise ValueError(f"Invalid spreadsheet URL: {url}")
    return match.group(1)


def _dimension_range(sheet_id: int, start: int, end: int) -> dict[str, Any]:
    return {"sheetId": sheet_id, "dimension": "ROWS", "startIndex": start, "endIndex": end}


def build_request(op: StructuralOperation) -> dict[str, Any]:
    """Translate one structural operation into a batchUpdate request."""
    match op:
        case InsertRows():
            return {
                "insertDimension": {
                    "range": _dimension_range(op.sheet_id, op.start_index, op.end_index),
                    "inheritFromBefore": False,
                }
            }
        case DeleteRows():
            return {
                "deleteDimension": {
                    "range": _dimension_range(op.sheet_id, op.start_index, op.end_index),
                }
            }
        case InsertRange():
            return {
                "insertRange": {
                    "range": op.rectangle.to_grid_range(op.sheet_id),
                    "shiftDimension": "ROWS",
                }
            }
        case UpdateTableRange():
            return {
                "updateTable": {
                    "table": {
                        "tableId": op.table_id,
                        "range": op.rectangle.to_grid_range(op.sheet_id),
                    },
                    "fields": "range",
                }
            }
        case UpdateCellLink():
            cell = Rectangle(op.row, op.row + 1, op.col, op.col + 1)
            return {
                "updateCells": {
                    "range": cell.to_grid_range(op.sheet_id),
                    "rows": [
                        {
                            "values": [
                                {
                                    "userEnteredValue": {"stringValue": op.text},
                                    "textFormatRuns": [
                                        {"startIndex": 0, "format": {"link": {"uri": op.url}}}
                                    ],
                                }
                            ]
                        }
                    ],
                    "fields": "userEnteredValue,textFormatRuns",
                }
            }
        case _:
            raise TypeError(f"Unsupported structural operation: {op!r}")


class GoogleSheetsBackend:
    """SpreadsheetBackend over one Google spreadsheet."""

    def __init__(self, service: Any, spreadsheet_id: str) -> None:
        """
        Args:
            service: A built "sheets" v4 discovery resource
            spreadsheet_id: Target spreadsheet id
        """
        self.service = service
        self.spreadsheet_id = spreadsheet_id

    @classmethod
    def from_service_account(
        cls, credentials_file: Path | str, spreadsheet_id: str
    ) -> GoogleSheetsBackend:
        """
        Build a backend authenticated with a service-account key file.

        Raises:
            FileNotFoundError: If the key file does not exist
        """
        from google.oauth2.service_account import Credentials
        from googleapiclient.discovery import build

        path = Path(credentials_file)
        if not path.exists():
            raise FileNotFoundError(f"Service account file not found: {path}")

        credentials = Credentials.from_service_account_file(str(path), scopes=SCOPES)
        service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        logger.debug("Built Sheets API client for %s", spreadsheet_id)
        return cls(service, spreadsheet_id)

    @property
    def spreadsheet_label(self) -> str:
        return self.spreadsheet_id

    @property
    def _spreadsheets(self) -> Any:
        return self.service.spreadsheets()

    def list_sheets(self) -> list[SheetTables]:
        resp = (
            self._spreadsheets.get(spreadsheetId=self.spreadsheet_id, fields=TABLE_FIELDS)
            .execute()
        )
        sheets = []
        for sh in resp.get("sheets", []):
            props = sh.get("properties", {})
            entries = []
            for t in sh.get("tables", []):
                table_id = str(t.get("tableId"))
                entries.append(
                    TableEntry(
                        name=str(t.get("name")),
                        id=table_id,
                        rectangle=Rectangle.from_grid_range(t.get("range"), table_id),
                    )
                )
            sheets.append(
                SheetTables(
                    # sheetId 0 is omitted on the wire
                    sheet_id=int(props.get("sheetId", 0)),
                    title=str(props.get("title", "")),
                    tables=entries,
                )
            )
        return sheets

    def read_values(self, address: str) -> list[list[str]]:
        width = parse_address(address)[1].col_count
        resp = (
            self._spreadsheets.values()
            .get(spreadsheetId=self.spreadsheet_id, range=address)
            .execute()
        )
        return normalize_rows(resp.get("values", []), width)

    def write_values(
        self,
        address: str,
        rows: Sequence[Sequence[str]],
        input_mode: InputMode = InputMode.USER_ENTERED,
    ) -> None:
        body = {"values": [list(row) for row in rows]}
        (
            self._spreadsheets.values()
            .update(
                spreadsheetId=self.spreadsheet_id,
                range=address,
                valueInputOption=input_mode.value,
                body=body,
            )
            .execute()
        )
        logger.debug("Wrote %d rows to %s", len(rows), address)

    def batch_update(self, operations: Sequence[StructuralOperation]) -> None:
        if not operations:
            return
        body = {"requests": [build_request(op) for op in operations]}
        (
            self._spreadsheets.batchUpdate(spreadsheetId=self.spreadsheet_id, body=body)
            .execute()
        )
        logger.debug("Applied %d structural request(s) to %s", len(operations), self.spreadsheet_id)
