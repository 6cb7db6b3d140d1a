# -*- coding: utf-8 -*-
import io
import logging
from datetime import datetime, timedelta
from typing import Any, Iterable, List, NamedTuple, Optional, Sequence, Tuple

import pandas as pd

from deadline_tracker.cells import Cell, CellKind, EMPTY, to_row
from deadline_tracker.errors import (
    DecodeFailure,
    EmptySheet,
    HeaderNotFound,
    MissingColumn,
    UnsupportedFileType,
)
from deadline_tracker.models import Assignment

log = logging.getLogger(__name__)

ACCEPTED_EXTENSIONS: Tuple[str, ...] = (".xlsx", ".xls")

# Spreadsheet serial day 25569 is 1970-01-01 (day 0 is 1899-12-30).
EXCEL_UNIX_OFFSET_DAYS = 25569
SECONDS_PER_DAY = 86400
UNIX_EPOCH = datetime(1970, 1, 1)

Grid = List[List[Cell]]


class ColumnMap(NamedTuple):
    class_idx: int
    assignment_idx: int
    date_idx: int


# ------------------------------
# Reading
def is_supported_spreadsheet(filename: str, accepted: Iterable[str] = ACCEPTED_EXTENSIONS) -> bool:
    name = (filename or "").lower()
    return any(name.endswith(ext.lower()) for ext in accepted)


def read_first_sheet(data: bytes, filename: str = "upload") -> Grid:
    """Decode workbook bytes into the first sheet's rows of cells."""
    try:
        df = pd.read_excel(io.BytesIO(data), sheet_name=0, header=None)
    except Exception as exc:
        raise DecodeFailure(filename, str(exc)) from exc
    return [to_row(values) for values in df.itertuples(index=False, name=None)]


def _is_row(row: Any) -> bool:
    return isinstance(row, (list, tuple))


def normalize_grid(rows: Iterable[Any]) -> list:
    """Turn raw decoder rows into cell rows; non-rows are passed through untouched."""
    return [to_row(r) if _is_row(r) else r for r in rows]


def drop_empty_rows(grid: Sequence[Any]) -> Grid:
    return [
        list(row) for row in grid
        if _is_row(row) and any(not cell.is_empty for cell in row)
    ]


# ------------------------------
# Header / columns
def _mentions(cell: Cell, word: str) -> bool:
    return word in cell.text.lower()


def locate_header(grid: Sequence[Sequence[Cell]]) -> int:
    for i, row in enumerate(grid):
        if _is_row(row) and any(_mentions(cell, "class") for cell in row):
            return i
    raise HeaderNotFound()


def _first_index(row: Sequence[Cell], *words: str) -> Optional[int]:
    for i, cell in enumerate(row):
        if any(_mentions(cell, w) for w in words):
            return i
    return None


def map_columns(header: Sequence[Cell]) -> ColumnMap:
    found = {
        "class": _first_index(header, "class"),
        "assignment": _first_index(header, "assignment"),
        "date": _first_index(header, "date", "due"),
    }
    missing = [name for name, idx in found.items() if idx is None]
    if missing:
        raise MissingColumn(missing)
    return ColumnMap(found["class"], found["assignment"], found["date"])


# ------------------------------
# Dates
def format_long_date(d: datetime) -> str:
    # "March 15, 2024" -- day is not zero padded
    return f"{d:%B} {d.day}, {d.year}"


def serial_to_datetime(serial: float) -> datetime:
    seconds = (float(serial) - EXCEL_UNIX_OFFSET_DAYS) * SECONDS_PER_DAY
    return UNIX_EPOCH + timedelta(seconds=seconds)


def format_date(cell: Cell) -> str:
    if cell.kind is CellKind.DATE:
        return format_long_date(cell.value)
    if cell.kind is CellKind.NUMBER:
        try:
            return format_long_date(serial_to_datetime(cell.value))
        except (OverflowError, ValueError):
            log.debug("date serial %r out of range, keeping it as text", cell.value)
            return cell.text
    return cell.text


# ------------------------------
# Records
def _cell_at(row: Sequence[Cell], idx: int) -> Cell:
    return row[idx] if idx < len(row) else EMPTY


def build_assignments(grid: Sequence[Any], header_index: int, columns: ColumnMap) -> List[Assignment]:
    out: List[Assignment] = []
    for offset, row in enumerate(grid[header_index + 1:], start=header_index + 1):
        if not _is_row(row):
            log.debug("row %d skipped: not a row", offset)
            continue
        cls = _cell_at(row, columns.class_idx)
        name = _cell_at(row, columns.assignment_idx)
        due = _cell_at(row, columns.date_idx)
        if cls.is_empty or name.is_empty or due.is_empty:
            log.debug("row %d skipped: missing class, assignment or date", offset)
            continue
        out.append(Assignment(class_name=cls.text, assignment=name.text, date=format_date(due)))
    return out


def parse_assignments(rows: Iterable[Any]) -> Tuple[Assignment, ...]:
    """Run the grid through row filter, header/column detection and the builder."""
    grid = drop_empty_rows(normalize_grid(rows))
    if not grid:
        raise EmptySheet()
    header_index = locate_header(grid)
    columns = map_columns(grid[header_index])
    records = build_assignments(grid, header_index, columns)
    log.info(
        "parsed %d assignment(s) from %d row(s), header at row %d",
        len(records), len(grid), header_index,
    )
    return tuple(records)


def load_upload(
    filename: str,
    data: bytes,
    accepted: Iterable[str] = ACCEPTED_EXTENSIONS,
) -> Tuple[Assignment, ...]:
    accepted = tuple(accepted)
    if not is_supported_spreadsheet(filename, accepted):
        raise UnsupportedFileType(filename, accepted)
    return parse_assignments(read_first_sheet(data, filename))
