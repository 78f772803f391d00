"""
Row and table helpers on top of the spreadsheet backend.

Plain sheets (``companies``) are treated as a header row followed by
data rows.  Company sheets hold several *tables*, one per event, laid
out one after another::

    Event name                 <- title row, a single cell
    Name | Phone | ... | Enabled  <- header row
    ...                        <- first row: event settings
    ...                        <- data rows
                               <- blank separator row
    Next event
    ...

Table data is addressed the way it is returned by
:func:`get_table_data`: index 0 is the header row, index 1 the first
row after it.  A table ends at the first blank row or at the end of
the sheet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .sheets import Row, SheetNotFoundError, get_spreadsheet, write_lock


logger = logging.getLogger(__name__)


class TableNotFoundError(LookupError):
    """Raised when a sheet does not contain a table with the given name."""


@dataclass
class Table:
    """Location and content of one table inside a sheet."""

    name: str
    start: int
    end: int
    header: Row = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    def data(self) -> List[Row]:
        return [list(self.header)] + [list(r) for r in self.rows]

    def column(self, name: str) -> int:
        """Return the index of header ``name`` or ``-1``."""
        try:
            return self.header.index(name)
        except ValueError:
            return -1


# ---------------------------------------------------------------------------
# Plain sheets
# ---------------------------------------------------------------------------

def get_sheet_data(title: str) -> List[Row]:
    """Return all rows of sheet ``title``; raises ``SheetNotFoundError``."""
    return get_spreadsheet().get_values(title)


def sheet_exists(title: str) -> bool:
    return get_spreadsheet().has_sheet(title)


def create_sheet(title: str, headers: Optional[Sequence[str]] = None) -> None:
    """Create sheet ``title``, optionally writing a header row."""
    spreadsheet = get_spreadsheet()
    with write_lock:
        spreadsheet.add_sheet(title)
        if headers:
            spreadsheet.append_rows(title, [list(headers)])


def ensure_sheet(title: str, headers: Optional[Sequence[str]] = None) -> bool:
    """Create sheet ``title`` unless it exists.  Returns ``True`` if created."""
    with write_lock:
        if sheet_exists(title):
            return False
        logger.info("Sheet '%s' does not exist, creating it", title)
        create_sheet(title, headers)
        return True


def rename_sheet(title: str, new_title: str) -> None:
    with write_lock:
        get_spreadsheet().rename_sheet(title, new_title)


def append_to_sheet(title: str, rows: Sequence[Sequence[object]]) -> None:
    with write_lock:
        get_spreadsheet().append_rows(title, rows)


def update_row(title: str, index: int, values: Sequence[object]) -> None:
    """Overwrite row ``index`` (0‑based, header included) of sheet ``title``."""
    with write_lock:
        get_spreadsheet().update_row(title, index, values)


def delete_row(title: str, index: int) -> None:
    """Delete row ``index`` (0‑based, header included) of sheet ``title``."""
    with write_lock:
        get_spreadsheet().delete_rows(title, index, index + 1)


# ---------------------------------------------------------------------------
# Tables inside a sheet
# ---------------------------------------------------------------------------

def parse_tables(values: List[Row]) -> List[Table]:
    """Split the rows of a sheet into tables."""
    tables: List[Table] = []
    i = 0
    total = len(values)
    while i < total:
        if not values[i]:
            i += 1
            continue
        start = i
        end = start + 1
        while end < total and values[end]:
            end += 1
        title_row = values[start]
        if len(title_row) == 1:
            block = values[start + 1:end]
            tables.append(
                Table(
                    name=title_row[0],
                    start=start,
                    end=end,
                    header=list(block[0]) if block else [],
                    rows=[list(r) for r in block[1:]],
                )
            )
        else:
            logger.debug("Skipping rows %d-%d: no table title", start, end)
        i = end
    return tables


def list_tables(sheet: str) -> List[Table]:
    return parse_tables(get_sheet_data(sheet))


def find_table(sheet: str, name: str) -> Table:
    """Return table ``name`` of ``sheet`` or raise ``TableNotFoundError``."""
    for table in list_tables(sheet):
        if table.name == name:
            return table
    raise TableNotFoundError(f"Table '{name}' not found in sheet '{sheet}'")


def get_table_data(sheet: str, name: str) -> List[Row]:
    """Return ``[header, *rows]`` of table ``name``."""
    return find_table(sheet, name).data()


def create_table(
    sheet: str,
    name: str,
    headers: Sequence[str],
    first_row: Optional[Sequence[object]] = None,
) -> None:
    """Append a new table to the end of ``sheet``.

    Raises ``ValueError`` if a table with the same name already exists.
    """
    spreadsheet = get_spreadsheet()
    with write_lock:
        values = spreadsheet.get_values(sheet)
        if any(t.name == name for t in parse_tables(values)):
            raise ValueError(f"Table '{name}' already exists in sheet '{sheet}'")
        rows: List[Sequence[object]] = [[""]] if values else []
        rows.append([name])
        rows.append(list(headers))
        if first_row is not None:
            rows.append(list(first_row))
        spreadsheet.insert_rows(sheet, len(values), rows)


def add_to_table(sheet: str, name: str, row: Sequence[object]) -> None:
    """Insert ``row`` after the last row of table ``name``."""
    with write_lock:
        table = find_table(sheet, name)
        get_spreadsheet().insert_rows(sheet, table.end, [list(row)])


def update_table_data(sheet: str, name: str, row_index: int, values: Sequence[object]) -> None:
    """Overwrite row ``row_index`` of table ``name`` (0 is the header)."""
    with write_lock:
        table = find_table(sheet, name)
        absolute = table.start + 1 + row_index
        if absolute < table.end:
            get_spreadsheet().update_row(sheet, absolute, values)
        else:
            get_spreadsheet().insert_rows(sheet, table.end, [list(values)])


def delete_table(sheet: str, name: str) -> None:
    """Remove table ``name`` together with one adjacent separator row."""
    spreadsheet = get_spreadsheet()
    with write_lock:
        values = spreadsheet.get_values(sheet)
        for table in parse_tables(values):
            if table.name == name:
                break
        else:
            raise TableNotFoundError(f"Table '{name}' not found in sheet '{sheet}'")
        start, end = table.start, table.end
        if end < len(values) and not values[end]:
            end += 1
        elif start > 0 and not values[start - 1]:
            start -= 1
        spreadsheet.delete_rows(sheet, start, end)


__all__ = [
    "SheetNotFoundError",
    "Table",
    "TableNotFoundError",
    "add_to_table",
    "append_to_sheet",
    "create_sheet",
    "create_table",
    "delete_row",
    "delete_table",
    "ensure_sheet",
    "find_table",
    "get_sheet_data",
    "get_table_data",
    "list_tables",
    "parse_tables",
    "rename_sheet",
    "sheet_exists",
    "update_row",
    "update_table_data",
]
