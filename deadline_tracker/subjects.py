# -*- coding: utf-8 -*-
import logging
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from rapidfuzz import fuzz, process

from deadline_tracker.errors import UnknownSubject
from deadline_tracker.models import Assignment

log = logging.getLogger(__name__)

MAX_SELECTED = 6

# ==============================
# --------- CATALOG ------------
# ==============================
# label -> lowercase fragments that also identify the subject in free-text
# class names from an uploaded sheet
_ALIASES: Dict[str, Tuple[str, ...]] = {
    "Math AA": ("mathematics analysis", "math aa", "analysis and approaches"),
    "Math AI": ("mathematics applications", "math ai", "applications and interpretation",
                "analysis and interpretations"),
    "Physics": ("phys",),
    "Chemistry": ("chem",),
    "Biology": ("bio",),
    "History": ("hist",),
    "Economics": ("econ",),
    "Business Management": ("business",),
    "Computer Science": ("computer science", "comp sci", "compsci"),
    "English Lang & Lit": ("english", "language & literature", "language and literature", "lang lit"),
    "Spanish Lang & Lit": ("spanish", "lengua", "literatura", "español"),
    "Visual Arts": ("visual art",),
    "Theory of Knowledge": ("tok", "theory of knowledge"),
}

SUBJECT_CATALOG: Tuple[str, ...] = tuple(_ALIASES)
SUBJECT_ALIASES: Mapping[str, FrozenSet[str]] = MappingProxyType(
    {label: frozenset(frags) for label, frags in _ALIASES.items()}
)

# ------------------------------
# Filter
def matches_subject(class_name: str, subject: str,
                    aliases: Mapping[str, FrozenSet[str]] = SUBJECT_ALIASES) -> bool:
    cls = class_name.lower()
    label = subject.lower()
    if label in cls or cls in label:
        return True
    return any(frag in cls for frag in aliases.get(subject, ()))

def filter_assignments(
    assignments: Iterable[Assignment],
    selected: Iterable[str],
    aliases: Mapping[str, FrozenSet[str]] = SUBJECT_ALIASES,
) -> List[Assignment]:
    """Keep assignments whose class matches any selected subject.

    No selection means no filtering: the whole list comes back.
    """
    selected = list(selected)
    if not selected:
        return list(assignments)
    return [
        a for a in assignments
        if any(matches_subject(a.class_name, s, aliases) for s in selected)
    ]

# ------------------------------
# Selection
class SubjectSelection:
    """The subjects a student has toggled on, capped at ``capacity``."""

    def __init__(self, capacity: int = MAX_SELECTED, catalog: Sequence[str] = SUBJECT_CATALOG):
        self.capacity = capacity
        self.catalog = tuple(catalog)
        self._selected: List[str] = []

    @property
    def selected(self) -> FrozenSet[str]:
        return frozenset(self._selected)

    def __contains__(self, subject: str) -> bool:
        return subject in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    def is_full(self) -> bool:
        return len(self._selected) >= self.capacity

    def toggle(self, subject: str) -> bool:
        """Flip ``subject``. Returns False when the selection did not change."""
        if subject not in self.catalog:
            raise UnknownSubject(subject)
        if subject in self._selected:
            self._selected.remove(subject)
            return True
        if self.is_full():
            log.debug("selection full (%d), ignoring %s", self.capacity, subject)
            return False
        self._selected.append(subject)
        return True


# ------------------------------
# Suggestions
def _choices(catalog: Sequence[str], aliases: Mapping[str, FrozenSet[str]]) -> Dict[str, str]:
    # choice text -> subject label
    out: Dict[str, str] = {}
    for label in catalog:
        out[label.lower()] = label
        for frag in sorted(aliases.get(label, ())):
            out.setdefault(frag.strip(), label)
    return out

def suggest_subjects(
    assignments: Iterable[Assignment],
    cutoff: int = 85,
    catalog: Sequence[str] = SUBJECT_CATALOG,
    aliases: Mapping[str, FrozenSet[str]] = SUBJECT_ALIASES,
) -> List[str]:
    """Catalog subjects that show up in the uploaded class names."""
    choices = _choices(catalog, aliases)
    seen_classes = set()
    suggested: List[str] = []
    for a in assignments:
        cls = a.class_name.strip().lower()
        if not cls or cls in seen_classes:
            continue
        seen_classes.add(cls)
        hit: Optional[tuple] = process.extractOne(
            cls, list(choices), scorer=fuzz.partial_ratio, score_cutoff=cutoff
        )
        if hit is None:
            continue
        label = choices[hit[0]]
        if label not in suggested:
            suggested.append(label)
    return suggested
