"""
Spreadsheet storage backends.

The application persists everything in a single spreadsheet: one
``companies`` sheet plus one sheet per company holding that company's
event tables.  This module hides where the spreadsheet lives behind a
small interface working on whole rows:

* :class:`GoogleSpreadsheet` talks to Google Sheets through ``gspread``
  using a service account.
* :class:`MemorySpreadsheet` keeps the sheets in process memory.  It is
  used when no ``GOOGLE_SHEET_ID`` is configured and by the test suite.

All row indices are 0‑based.  Values are returned as lists of strings
with trailing empty cells removed, so a blank row is ``[]``.

The active backend is obtained with :func:`get_spreadsheet` and can be
replaced with :func:`use_spreadsheet`.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Sequence

from .config import settings


logger = logging.getLogger(__name__)

Row = List[str]


class SheetNotFoundError(LookupError):
    """Raised when a sheet with the requested title does not exist."""


def _clean_row(values: Sequence[object]) -> Row:
    """Return ``values`` as strings with trailing empty cells dropped."""
    row = ["" if v is None else str(v) for v in values]
    while row and row[-1] == "":
        row.pop()
    return row


class Spreadsheet:
    """Interface shared by the storage backends."""

    def titles(self) -> List[str]:
        raise NotImplementedError

    def has_sheet(self, title: str) -> bool:
        # Sheet titles are unique regardless of case.
        wanted = title.casefold()
        return any(t.casefold() == wanted for t in self.titles())

    def get_values(self, title: str) -> List[Row]:
        """Return every row of sheet ``title``."""
        raise NotImplementedError

    def add_sheet(self, title: str) -> None:
        raise NotImplementedError

    def rename_sheet(self, title: str, new_title: str) -> None:
        raise NotImplementedError

    def insert_rows(self, title: str, index: int, rows: Sequence[Sequence[object]]) -> None:
        """Insert ``rows`` so that the first one ends up at ``index``."""
        raise NotImplementedError

    def update_row(self, title: str, index: int, values: Sequence[object]) -> None:
        """Replace the whole row at ``index`` with ``values``."""
        raise NotImplementedError

    def delete_rows(self, title: str, start: int, end: int) -> None:
        """Delete rows ``start`` up to, but not including, ``end``."""
        raise NotImplementedError

    def append_rows(self, title: str, rows: Sequence[Sequence[object]]) -> None:
        """Add ``rows`` after the last non‑empty row of the sheet."""
        self.insert_rows(title, len(self.get_values(title)), rows)


class MemorySpreadsheet(Spreadsheet):
    """Spreadsheet kept in a dictionary of row lists."""

    def __init__(self, sheets: Optional[Dict[str, List[Sequence[object]]]] = None) -> None:
        self._sheets: Dict[str, List[Row]] = {}
        for title, rows in (sheets or {}).items():
            self._sheets[title] = [_clean_row(r) for r in rows]

    def _sheet(self, title: str) -> List[Row]:
        try:
            return self._sheets[title]
        except KeyError:
            raise SheetNotFoundError(title) from None

    def titles(self) -> List[str]:
        return list(self._sheets)

    def get_values(self, title: str) -> List[Row]:
        rows = [list(r) for r in self._sheet(title)]
        # Like the Sheets API, trailing blank rows are not reported.
        while rows and not rows[-1]:
            rows.pop()
        return rows

    def add_sheet(self, title: str) -> None:
        if self.has_sheet(title):
            raise ValueError(f"Sheet '{title}' already exists")
        self._sheets[title] = []

    def rename_sheet(self, title: str, new_title: str) -> None:
        rows = self._sheet(title)
        if new_title.casefold() != title.casefold() and self.has_sheet(new_title):
            raise ValueError(f"Sheet '{new_title}' already exists")
        del self._sheets[title]
        self._sheets[new_title] = rows

    def insert_rows(self, title: str, index: int, rows: Sequence[Sequence[object]]) -> None:
        sheet = self._sheet(title)
        while len(sheet) < index:
            sheet.append([])
        sheet[index:index] = [_clean_row(r) for r in rows]

    def update_row(self, title: str, index: int, values: Sequence[object]) -> None:
        sheet = self._sheet(title)
        while len(sheet) <= index:
            sheet.append([])
        sheet[index] = _clean_row(values)

    def delete_rows(self, title: str, start: int, end: int) -> None:
        sheet = self._sheet(title)
        del sheet[start:end]


class GoogleSpreadsheet(Spreadsheet):
    """Spreadsheet stored in Google Sheets.

    Values are written with ``value_input_option=RAW`` so that phone
    numbers and national IDs keep their leading zeros and are never
    interpreted as formulas.
    """

    NEW_SHEET_ROWS = 1000
    NEW_SHEET_COLS = 26

    def __init__(self, spreadsheet_id: str, credentials_file: str) -> None:
        import gspread

        self._exceptions = gspread.exceptions
        client = gspread.service_account(filename=credentials_file)
        self._book = client.open_by_key(spreadsheet_id)
        logger.info("Opened spreadsheet '%s' (%s)", self._book.title, spreadsheet_id)

    def _worksheet(self, title: str):
        try:
            return self._book.worksheet(title)
        except self._exceptions.WorksheetNotFound:
            raise SheetNotFoundError(title) from None

    def titles(self) -> List[str]:
        return [ws.title for ws in self._book.worksheets()]

    def get_values(self, title: str) -> List[Row]:
        rows = [_clean_row(r) for r in self._worksheet(title).get_all_values()]
        while rows and not rows[-1]:
            rows.pop()
        return rows

    def add_sheet(self, title: str) -> None:
        if self.has_sheet(title):
            raise ValueError(f"Sheet '{title}' already exists")
        self._book.add_worksheet(title=title, rows=self.NEW_SHEET_ROWS, cols=self.NEW_SHEET_COLS)
        logger.info("Created sheet '%s'", title)

    def rename_sheet(self, title: str, new_title: str) -> None:
        if new_title.casefold() != title.casefold() and self.has_sheet(new_title):
            raise ValueError(f"Sheet '{new_title}' already exists")
        self._worksheet(title).update_title(new_title)

    def insert_rows(self, title: str, index: int, rows: Sequence[Sequence[object]]) -> None:
        ws = self._worksheet(title)
        values = [["" if v is None else str(v) for v in r] for r in rows]
        # The API cannot insert past the grid; grow it first.
        needed = index + len(values)
        if needed > ws.row_count:
            ws.add_rows(needed - ws.row_count)
        ws.insert_rows(values, row=index + 1, value_input_option="RAW")

    def update_row(self, title: str, index: int, values: Sequence[object]) -> None:
        ws = self._worksheet(title)
        row = ["" if v is None else str(v) for v in values]
        # Blank out any cells left over from a longer previous row.
        width = max(len(row), ws.col_count)
        row.extend([""] * (width - len(row)))
        ws.update(range_name=f"A{index + 1}", values=[row], value_input_option="RAW")

    def delete_rows(self, title: str, start: int, end: int) -> None:
        if end <= start:
            return
        self._worksheet(title).delete_rows(start + 1, end)


_spreadsheet: Optional[Spreadsheet] = None
_spreadsheet_lock = threading.Lock()

# Held around read‑check‑write sequences (uniqueness checks, row moves).
# Request handlers share one event loop and these sections never await, so
# they already run without interleaving there; the lock excludes callers
# on other threads.
write_lock = threading.RLock()


def get_spreadsheet() -> Spreadsheet:
    """Return the process‑wide spreadsheet backend, creating it on first use."""
    global _spreadsheet
    with _spreadsheet_lock:
        if _spreadsheet is None:
            if settings.google_sheet_id:
                _spreadsheet = GoogleSpreadsheet(settings.google_sheet_id, settings.google_credentials_file)
            else:
                logger.warning("GOOGLE_SHEET_ID is not set; using an in-memory spreadsheet")
                _spreadsheet = MemorySpreadsheet()
        return _spreadsheet


def use_spreadsheet(spreadsheet: Optional[Spreadsheet]) -> None:
    """Replace the active backend.  ``None`` resets to lazy creation."""
    global _spreadsheet
    with _spreadsheet_lock:
        _spreadsheet = spreadsheet
