# -*- coding: utf-8 -*-
"""Tagged cell values for decoded spreadsheet grids.

Spreadsheet decoders hand back whatever they found in a cell: strings,
ints, floats, timestamps, NaN for blanks. Everything downstream works on
``Cell`` instead so each kind has to be handled explicitly.
"""
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from numbers import Number
from typing import Any, Iterable, List

import pandas as pd


class CellKind(Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    EMPTY = "empty"


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    value: Any = None

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    @property
    def text(self) -> str:
        if self.kind is CellKind.EMPTY:
            return ""
        if self.kind is CellKind.NUMBER:
            try:
                num = float(self.value)
            except OverflowError:
                return str(self.value)
            if num.is_integer():
                return str(int(num))
            return str(self.value)
        if self.kind is CellKind.DATE:
            if isinstance(self.value, datetime):
                return self.value.date().isoformat()
            return self.value.isoformat()
        return self.value


EMPTY = Cell(CellKind.EMPTY)


def to_cell(value: Any) -> Cell:
    if isinstance(value, Cell):
        return value
    if value is None:
        return EMPTY
    if isinstance(value, str):
        return Cell(CellKind.TEXT, value) if value != "" else EMPTY
    # bool is a Number too, keep it as text
    if isinstance(value, bool):
        return Cell(CellKind.TEXT, str(value))
    if isinstance(value, (datetime, date)):
        if pd.isna(value):
            return EMPTY
        return Cell(CellKind.DATE, value)
    if isinstance(value, Number):
        if pd.isna(value):
            return EMPTY
        return Cell(CellKind.NUMBER, value)
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return EMPTY
    return Cell(CellKind.TEXT, str(value))


def to_row(values: Iterable[Any]) -> List[Cell]:
    """Coerce a row of raw values, dropping trailing blanks."""
    row = [to_cell(v) for v in values]
    while row and row[-1].is_empty:
        row.pop()
    return row
