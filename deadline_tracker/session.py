# -*- coding: utf-8 -*-
import logging
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from deadline_tracker.errors import ImportFailure
from deadline_tracker.importer import ACCEPTED_EXTENSIONS, load_upload
from deadline_tracker.models import PLACEHOLDER_ASSIGNMENTS, PRIORITY_LEVELS, Assignment
from deadline_tracker.subjects import MAX_SELECTED, SubjectSelection, filter_assignments

log = logging.getLogger(__name__)

Loader = Callable[[str, bytes], Sequence[Assignment]]


class DeadlineSession:
    """Everything one browser session knows: uploaded rows, subjects, priorities.

    ``assignments`` is None while the placeholder rows are on display.
    """

    def __init__(
        self,
        max_selected: int = MAX_SELECTED,
        accepted_extensions: Iterable[str] = ACCEPTED_EXTENSIONS,
        placeholder: Sequence[Assignment] = PLACEHOLDER_ASSIGNMENTS,
    ):
        self.selection = SubjectSelection(capacity=max_selected)
        self.accepted_extensions = tuple(accepted_extensions)
        self.placeholder = tuple(placeholder)
        self.assignments: Optional[Tuple[Assignment, ...]] = None
        self.priorities: Dict[int, str] = {}
        self.filename: str = ""
        self.status: str = "idle"  # idle | success | error
        self.message: str = ""
        self.last_upload_key: Optional[Hashable] = None

    # ------------------------------
    @property
    def using_placeholder(self) -> bool:
        return self.assignments is None

    def current(self) -> Tuple[Assignment, ...]:
        return self.placeholder if self.assignments is None else self.assignments

    def upload(self, filename: str, data: bytes, loader: Optional[Loader] = None) -> bool:
        """Import a sheet; on any failure fall back to the placeholder rows."""
        if loader is None:
            def loader(name, raw):
                return load_upload(name, raw, self.accepted_extensions)
        self.filename = filename
        try:
            records = tuple(loader(filename, data))
        except ImportFailure as exc:
            log.warning("upload of %s failed: %s", filename, exc)
            self.assignments = None
            self.priorities = {}
            self.status = "error"
            self.message = str(exc)
            return False
        self.assignments = records
        self.priorities = {}
        self.status = "success"
        self.message = f"Successfully uploaded: {filename} ({len(records)} assignment(s))"
        log.info("upload of %s produced %d assignment(s)", filename, len(records))
        return True

    def reset(self) -> None:
        self.assignments = None
        self.priorities = {}
        self.filename = ""
        self.status = "idle"
        self.message = ""
        self.last_upload_key = None

    # ------------------------------
    def toggle_subject(self, subject: str) -> bool:
        return self.selection.toggle(subject)

    def set_priority(self, position: int, priority: str) -> None:
        rows = self.current()
        if not 0 <= position < len(rows):
            raise IndexError(f"no assignment at row {position}")
        if priority not in PRIORITY_LEVELS:
            raise ValueError(f"Unknown priority {priority!r}, expected one of {PRIORITY_LEVELS}")
        self.priorities[position] = priority

    def visible(self) -> List[Tuple[int, Assignment]]:
        """Filtered rows paired with their position in the current list."""
        rows = self.current()
        keep = set(map(id, filter_assignments(rows, self.selection.selected)))
        out = []
        for pos, rec in enumerate(rows):
            if id(rec) not in keep:
                continue
            if pos in self.priorities:
                rec = rec.with_priority(self.priorities[pos])
            out.append((pos, rec))
        return out
