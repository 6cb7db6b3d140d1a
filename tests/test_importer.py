import io
from datetime import date, datetime

import pandas as pd
import pytest

from deadline_tracker.cells import to_row
from deadline_tracker.errors import (
    DecodeFailure,
    EmptySheet,
    HeaderNotFound,
    MissingColumn,
    UnsupportedFileType,
)
from deadline_tracker.importer import (
    is_supported_spreadsheet,
    load_upload,
    locate_header,
    map_columns,
    parse_assignments,
)
from deadline_tracker.models import Assignment


def _xlsx(rows) -> bytes:
    buf = io.BytesIO()
    pd.DataFrame(rows).to_excel(buf, header=False, index=False)
    return buf.getvalue()


def test_supported_extensions() -> None:
    assert is_supported_spreadsheet("Planner.XLSX")
    assert is_supported_spreadsheet("old.xls")
    assert not is_supported_spreadsheet("planner.csv")
    assert not is_supported_spreadsheet("xlsx")
    assert not is_supported_spreadsheet("")


def test_physics_lab_report_row() -> None:
    grid = [
        ["Class", "Assignment", "Due Date"],
        ["Physics", "Lab Report", "February 28, 2024"],
    ]
    assert parse_assignments(grid) == (
        Assignment("Physics", "Lab Report", "February 28, 2024", "Medium"),
    )
    assert parse_assignments(grid)[0].to_dict() == {
        "class": "Physics",
        "assignment": "Lab Report",
        "date": "February 28, 2024",
        "priority": "Medium",
    }


def test_no_class_cell_anywhere() -> None:
    grid = [["Subject", "Task", "Due"], ["Physics", "Lab", "Friday"]]
    with pytest.raises(HeaderNotFound):
        parse_assignments(grid)


def test_header_without_date_column() -> None:
    grid = [["Class", "Assignment", "Notes"], ["Physics", "Lab", "bring goggles"]]
    with pytest.raises(MissingColumn) as err:
        parse_assignments(grid)
    assert err.value.columns == ("date",)
    assert "date" in str(err.value)


def test_missing_columns_are_all_named() -> None:
    with pytest.raises(MissingColumn) as err:
        map_columns(to_row(["Class"]))
    assert err.value.columns == ("assignment", "date")


def test_first_date_or_due_cell_wins() -> None:
    cols = map_columns(to_row(["Class", "Due", "Assignment", "Date"]))
    assert (cols.class_idx, cols.assignment_idx, cols.date_idx) == (0, 2, 1)


def test_header_can_sit_below_a_title() -> None:
    grid = [to_row(["Term 1 planner"]), to_row(["Class name", "Assignment", "Date"])]
    assert locate_header(grid) == 1


def test_serial_45000_is_march_15_2023() -> None:
    grid = [["Class", "Assignment", "Due"], ["Physics", "Lab", 45000]]
    assert parse_assignments(grid)[0].date == "March 15, 2023"


def test_serial_time_of_day_is_ignored() -> None:
    grid = [["Class", "Assignment", "Due"], ["Physics", "Lab", 45000.75]]
    assert parse_assignments(grid)[0].date == "March 15, 2023"


def test_serial_zero_is_day_zero() -> None:
    grid = [["Class", "Assignment", "Due"], ["Physics", "Lab", 0]]
    assert parse_assignments(grid)[0].date == "December 30, 1899"


def test_out_of_range_serial_stays_text() -> None:
    grid = [["Class", "Assignment", "Due"], ["Physics", "Lab", 10 ** 12]]
    assert parse_assignments(grid)[0].date == "1000000000000"


def test_date_values_are_spelled_out() -> None:
    grid = [
        ["Class", "Assignment", "Due"],
        ["History", "Essay", datetime(2024, 3, 15)],
        ["Biology", "IA", date(2024, 3, 5)],
    ]
    assert [a.date for a in parse_assignments(grid)] == ["March 15, 2024", "March 5, 2024"]


def test_incomplete_rows_are_skipped_in_order() -> None:
    grid = [
        ["Class", "Assignment", "Due"],
        ["Physics", "Lab"],
        ["", "Orphan", "Monday"],
        "not a row",
        ["Chemistry", "Titration", "Tuesday"],
        [None, None, None],
        ["Economics", "Commentary", "Wednesday"],
    ]
    out = parse_assignments(grid)
    assert [a.class_name for a in out] == ["Chemistry", "Economics"]


def test_empty_grids() -> None:
    with pytest.raises(EmptySheet):
        parse_assignments([])
    with pytest.raises(EmptySheet):
        parse_assignments([[None, ""], []])


def test_unsupported_file_type_is_checked_first() -> None:
    with pytest.raises(UnsupportedFileType):
        load_upload("notes.csv", b"Class,Assignment,Date\n")


def test_garbage_bytes_fail_to_decode() -> None:
    with pytest.raises(DecodeFailure) as err:
        load_upload("broken.xlsx", b"this is not a workbook")
    assert err.value.__cause__ is not None


def test_real_workbook() -> None:
    data = _xlsx([
        ["My IB planner", None, None],
        ["Class", "Assignment", "Due Date"],
        ["Physics HL", "Lab Report", datetime(2024, 2, 28)],
        ["History", "Essay", 45000],
        [None, None, None],
    ])
    out = load_upload("planner.xlsx", data)
    assert out == (
        Assignment("Physics HL", "Lab Report", "February 28, 2024"),
        Assignment("History", "Essay", "March 15, 2023"),
    )


def test_blank_workbook_is_empty_sheet() -> None:
    with pytest.raises(EmptySheet):
        load_upload("blank.xlsx", _xlsx([[None, None]]))


def test_serial_beyond_float_range_stays_text() -> None:
    grid = [["Class", "Assignment", "Due"], ["Physics", "Lab", 10 ** 400]]
    assert parse_assignments(grid)[0].date == str(10 ** 400)


def test_legacy_xls_bytes_go_through_xlrd() -> None:
    # OLE2 signature followed by a broken compound-document header
    data = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 504
    with pytest.raises(DecodeFailure) as err:
        load_upload("old.xls", data)
    assert type(err.value.__cause__).__module__.startswith("xlrd")
