from __future__ import annotations

import io

import pandas as pd
import pytest

from cgpa_calculator.grading import compute_average
from cgpa_calculator.io_csv import (
    load_subjects_csv,
    parse_subjects,
    read_csv_upload,
    subjects_to_csv,
    subjects_to_frame,
    validate_subjects_csv,
)
from cgpa_calculator.subjects import new_subject


def _upload(text: str) -> io.BytesIO:
    return io.BytesIO(text.encode("utf-8"))


def test_read_normalises_column_names():
    df = read_csv_upload(_upload(" Grade , Credit\nO,4\n"))
    assert list(df.columns) == ["grade", "credits"]


def test_validate_reports_missing_columns():
    df = read_csv_upload(_upload("Grade\nO\n"))
    with pytest.raises(ValueError, match="credits"):
        validate_subjects_csv(df)


def test_import_keeps_bad_rows_but_they_do_not_count():
    text = "Grade,Credits\no,4\nB,3\nX,5\nA,abc\n,\n"
    subjects = parse_subjects(validate_subjects_csv(read_csv_upload(_upload(text))))

    assert [s.grade for s in subjects] == ["O", "B", "X", "A"]
    assert len({s.id for s in subjects}) == 4

    result = compute_average(subjects)
    assert result.formatted == "8.29"
    assert len(result.skipped_ids) == 2


def test_import_missing_credit_is_kept_as_none():
    subjects = parse_subjects(validate_subjects_csv(read_csv_upload(_upload("Grade,Credits\nO,\n"))))
    assert len(subjects) == 1
    assert subjects[0].credits is None
    assert compute_average(subjects).formatted == "0.00"


def test_export_frame_and_csv():
    subjects = [new_subject(grade="O", credits=4), new_subject(grade="B", credits=3)]

    frame = subjects_to_frame(subjects)
    assert list(frame.columns) == ["Grade", "Credits"]
    assert frame["Grade"].tolist() == ["O", "B"]

    data = subjects_to_csv(subjects)
    assert data.decode("utf-8").splitlines() == ["Grade,Credits", "O,4", "B,3"]


def test_export_empty_table_has_header():
    assert subjects_to_csv([]).decode("utf-8").strip() == "Grade,Credits"
    assert subjects_to_frame([]).empty


def test_exported_csv_imports_back_to_same_average():
    subjects = [new_subject(grade="A+", credits=4), new_subject(grade="C", credits=2)]
    reloaded = parse_subjects(validate_subjects_csv(read_csv_upload(io.BytesIO(subjects_to_csv(subjects)))))
    assert compute_average(reloaded) == compute_average(subjects)


def test_parse_subjects_accepts_plain_frames():
    df = pd.DataFrame([{"Grade": " a+ ", "Credits": 4}])
    subjects = parse_subjects(df)
    assert subjects[0].grade == "A+"
    assert compute_average(subjects).formatted == "9.00"


def test_load_replaces_table_with_valid_csv():
    current = [new_subject()]
    subjects, error = load_subjects_csv(_upload("Grade,Credits\nO,4\nB,3\n"), current)
    assert error is None
    assert [(s.grade, s.credits) for s in subjects] == [("O", "4"), ("B", "3")]
    assert compute_average(subjects).formatted == "8.29"


@pytest.mark.parametrize(
    "text, message",
    [
        ("Grade\nO\n", "Missing columns"),
        ("", "No columns"),
    ],
)
def test_load_keeps_current_table_on_bad_csv(text, message):
    current = [new_subject(grade="O", credits=4)]
    subjects, error = load_subjects_csv(_upload(text), current)
    assert subjects is current
    assert message in error


def test_load_without_file_keeps_current_table():
    current = [new_subject()]
    subjects, error = load_subjects_csv(None, current)
    assert subjects is current
    assert error == "Choose a CSV file first."
