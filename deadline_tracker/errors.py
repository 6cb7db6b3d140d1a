# -*- coding: utf-8 -*-
from typing import Iterable, Tuple


class ImportFailure(ValueError):
    """Base class for everything that can go wrong while importing a sheet.

    The message is meant to be shown to the student as-is.
    """


class UnsupportedFileType(ImportFailure):
    def __init__(self, filename: str, accepted: Iterable[str]):
        self.filename = filename
        self.accepted = tuple(accepted)
        super().__init__(
            f"Please select a valid Excel file ({' or '.join(self.accepted)}); got {filename!r}"
        )


class DecodeFailure(ImportFailure):
    def __init__(self, filename: str, reason: str = ""):
        self.filename = filename
        msg = f"Failed to process Excel file {filename!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class EmptySheet(ImportFailure):
    def __init__(self):
        super().__init__("The Excel file appears to be empty or contains no valid data")


class HeaderNotFound(ImportFailure):
    def __init__(self):
        super().__init__("Could not find a header row (no cell mentions 'Class')")


class MissingColumn(ImportFailure):
    def __init__(self, columns: Iterable[str]):
        self.columns: Tuple[str, ...] = tuple(columns)
        super().__init__(f"Header row is missing required column(s): {', '.join(self.columns)}")


class UnknownSubject(KeyError):
    """Raised when toggling a label that is not in the subject catalog."""
