import uuid
from dataclasses import dataclass, field, replace
from typing import Any, List

from cgpa_calculator.config import DEFAULT_CREDITS, DEFAULT_GRADE


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class SubjectRecord:
    grade: str = DEFAULT_GRADE
    credits: Any = DEFAULT_CREDITS
    id: str = field(default_factory=_new_id)


EDITABLE_FIELDS = ("grade", "credits")


def new_subject(grade: str = DEFAULT_GRADE, credits: Any = DEFAULT_CREDITS) -> SubjectRecord:
    return SubjectRecord(grade=grade, credits=credits)


def add_default(subjects: List[SubjectRecord]) -> List[SubjectRecord]:
    return [*subjects, new_subject()]


def update_field(subjects: List[SubjectRecord], subject_id: str, field_name: str, value) -> List[SubjectRecord]:
    """Replace the grade or credits of one subject; unknown ids leave the list as is."""
    if field_name not in EDITABLE_FIELDS:
        raise ValueError(f"Cannot update field {field_name!r}; expected one of {EDITABLE_FIELDS}")
    return [
        replace(s, **{field_name: value}) if s.id == subject_id else s
        for s in subjects
    ]


def remove_by_id(subjects: List[SubjectRecord], subject_id: str) -> List[SubjectRecord]:
    return [s for s in subjects if s.id != subject_id]


def clear(subjects: List[SubjectRecord]) -> List[SubjectRecord]:
    return []
