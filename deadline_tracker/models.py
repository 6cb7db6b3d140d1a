# -*- coding: utf-8 -*-
from dataclasses import dataclass, replace
from typing import Dict, Tuple

PRIORITY_LEVELS: Tuple[str, ...] = ("Low", "Medium", "High")
DEFAULT_PRIORITY = "Medium"


@dataclass(frozen=True)
class Assignment:
    class_name: str
    assignment: str
    date: str
    priority: str = DEFAULT_PRIORITY

    def with_priority(self, priority: str) -> "Assignment":
        if priority not in PRIORITY_LEVELS:
            raise ValueError(f"Unknown priority {priority!r}, expected one of {PRIORITY_LEVELS}")
        return replace(self, priority=priority)

    def to_dict(self) -> Dict[str, str]:
        return {
            "class": self.class_name,
            "assignment": self.assignment,
            "date": self.date,
            "priority": self.priority,
        }


# Shown until a sheet has been uploaded successfully.
PLACEHOLDER_ASSIGNMENTS: Tuple[Assignment, ...] = (
    Assignment("Mathematics Analysis and Approaches SL", "IA Exploration", "November 14, 2025"),
    Assignment("Physics HL", "Internal Assessment Draft", "December 5, 2025"),
    Assignment("English Lang & Lit", "Individual Oral", "January 23, 2026"),
    Assignment("Computer Science", "Solution Planning", "February 13, 2026"),
    Assignment("Business Management", "Business Research Project", "March 6, 2026"),
)
