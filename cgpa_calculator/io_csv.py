import io
import logging
from typing import List, Optional, Tuple

import pandas as pd

from cgpa_calculator.subjects import SubjectRecord, new_subject

logger = logging.getLogger(__name__)

# ------------------------
# CSV helpers (UI-side)
# ------------------------

def _normalise_cols(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    # allow singular "credit"
    if "credit" in df.columns and "credits" not in df.columns:
        df = df.rename(columns={"credit": "credits"})
    return df

def read_csv_upload(uploaded_file) -> pd.DataFrame:
    # Keep cells as text so "4.5" or "abc" reach the credits parser untouched
    df = pd.read_csv(uploaded_file, dtype=str, skipinitialspace=True)
    return _normalise_cols(df)

def validate_subjects_csv(df: pd.DataFrame) -> pd.DataFrame:
    required = {"grade", "credits"}
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns: {sorted(missing)}. Expected: Grade, Credits.")
    out = df[["grade", "credits"]].copy()
    out = out.rename(columns={"grade": "Grade", "credits": "Credits"})
    return out

def parse_subjects(df: pd.DataFrame) -> List[SubjectRecord]:
    """
    Unknown grades and odd credits are kept; the CGPA simply won't count them.
    Only rows with both cells empty are dropped.
    """
    rows = []
    for _, row in df.iterrows():
        grade = row.get("Grade")
        credit = row.get("Credits")
        if pd.isna(grade) and pd.isna(credit):
            continue
        grade = "" if pd.isna(grade) else str(grade).strip().upper()
        credit = None if pd.isna(credit) else credit
        rows.append(new_subject(grade=grade, credits=credit))
    return rows


def load_subjects_csv(uploaded_file, current: List[SubjectRecord]) -> Tuple[List[SubjectRecord], Optional[str]]:
    """
    Replace the subject table with an uploaded CSV.

    Returns (subjects, error). On any upload problem the current table comes
    back unchanged together with a message for the page.
    """
    if uploaded_file is None:
        return current, "Choose a CSV file first."
    try:
        imported = parse_subjects(validate_subjects_csv(read_csv_upload(uploaded_file)))
    except ValueError as e:
        logger.warning("Rejected subjects CSV %s: %s", getattr(uploaded_file, "name", "?"), e)
        return current, str(e)
    logger.info("Imported %d subjects from CSV", len(imported))
    return imported, None

def subjects_to_frame(subjects: List[SubjectRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Grade": s.grade, "Credits": s.credits} for s in subjects],
        columns=["Grade", "Credits"],
    )

def subjects_to_csv(subjects: List[SubjectRecord]) -> bytes:
    buf = io.StringIO()
    subjects_to_frame(subjects).to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")
