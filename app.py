import pandas as pd
import streamlit as st

from cgpa_calculator.config import (
    DISCLAIMER,
    MAX_CREDITS_HINT,
    MIN_CREDITS,
    PAGE_ICON,
    PAGE_TITLE,
    setup_logging,
)
from cgpa_calculator.grading import GRADE_POINTS, compute_average, compute_percentage, parse_credits
from cgpa_calculator.io_csv import load_subjects_csv, subjects_to_csv
from cgpa_calculator.subjects import add_default, clear, new_subject, remove_by_id, update_field

setup_logging()

# ------------------------
# Streamlit UI
# ------------------------

st.set_page_config(
    page_title=PAGE_TITLE,
    page_icon=PAGE_ICON,
    layout="centered",
)

GRADE_OPTIONS = list(GRADE_POINTS.keys())
GRADE_HELP = ", ".join(f"{g}: {p}" for g, p in GRADE_POINTS.items() if p > 0)

if "subjects" not in st.session_state:
    st.session_state["subjects"] = [new_subject()]


# ------------------------
# Callbacks (run before the script reruns)
# ------------------------

def _on_edit(subject_id: str, field_name: str):
    value = st.session_state[f"{field_name}_{subject_id}"]
    st.session_state["subjects"] = update_field(
        st.session_state["subjects"], subject_id, field_name, value
    )

def _on_delete(subject_id: str):
    st.session_state["subjects"] = remove_by_id(st.session_state["subjects"], subject_id)

def _on_add():
    st.session_state["subjects"] = add_default(st.session_state["subjects"])

def _on_clear():
    st.session_state["subjects"] = clear(st.session_state["subjects"])

def _on_import():
    st.session_state["subjects"], st.session_state["csv_error"] = load_subjects_csv(
        st.session_state.get("subjects_csv"), st.session_state["subjects"]
    )


st.title("🎓 Anna University CGPA Calculator")
st.write(
    "Enter your subject grades and credits to instantly calculate your CGPA. "
    "This calculator uses the standard Anna University (e.g., R2017, R2021) grading system."
)

with st.expander("Grading table"):
    st.dataframe(
        pd.DataFrame({"Grade": GRADE_OPTIONS, "Grade points": list(GRADE_POINTS.values())}),
        hide_index=True,
    )

# ------------------------
# Subject rows
# ------------------------

subjects = st.session_state["subjects"]

for idx, subject in enumerate(subjects):
    col_grade, col_credits, col_delete = st.columns([3, 3, 1], vertical_alignment="bottom")
    with col_grade:
        st.selectbox(
            f"Subject {idx + 1} grade",
            GRADE_OPTIONS,
            index=GRADE_OPTIONS.index(subject.grade) if subject.grade in GRADE_POINTS else None,
            placeholder="Pick a grade",
            help=GRADE_HELP,
            key=f"grade_{subject.id}",
            on_change=_on_edit,
            args=(subject.id, "grade"),
        )
    with col_credits:
        credits = parse_credits(subject.credits)
        st.number_input(
            "Credits",
            min_value=MIN_CREDITS,
            value=credits if credits is not None and credits >= MIN_CREDITS else None,
            step=1,
            help=f"Most subjects carry {MIN_CREDITS}-{MAX_CREDITS_HINT} credits.",
            key=f"credits_{subject.id}",
            on_change=_on_edit,
            args=(subject.id, "credits"),
        )
    with col_delete:
        st.button(
            "Delete",
            key=f"delete_{subject.id}",
            on_click=_on_delete,
            args=(subject.id,),
            help=f"Delete subject with grade {subject.grade} and credits {subject.credits}",
        )

if not subjects:
    st.info("No subjects yet. Click **Add Subject** to start.")

col_add, col_clear, _ = st.columns([1, 1, 3])
with col_add:
    st.button("Add Subject", key="add_subject", on_click=_on_add, type="primary")
with col_clear:
    st.button("Clear All", key="clear_all", on_click=_on_clear)

with st.expander("Import / export subjects (CSV)"):
    st.file_uploader(
        "Upload a CSV with Grade and Credits columns",
        type=["csv"],
        key="subjects_csv",
    )
    st.button("Replace subjects with CSV", key="import_csv", on_click=_on_import)
    if st.session_state.get("csv_error"):
        st.error(f"CSV error: {st.session_state['csv_error']}")
    st.download_button(
        "Download subjects CSV",
        data=subjects_to_csv(subjects),
        file_name="subjects.csv",
        mime="text/csv",
        key="export_csv",
    )

# ------------------------
# Result
# ------------------------

result = compute_average(subjects)

st.markdown("---")
st.subheader("Your Calculated CGPA:")

c1, c2 = st.columns(2)
with c1:
    st.metric("CGPA", result.formatted)
with c2:
    st.metric("Equivalent Percentage", f"{compute_percentage(result)}%")

if result.skipped_ids:
    st.caption(
        f"{len(result.skipped_ids)} subject(s) not counted: "
        "pick a grade from the table and enter whole-number credits."
    )

st.caption(DISCLAIMER)
