# -*- coding: utf-8 -*-
import logging
from typing import Sequence, Tuple

import pandas as pd
import plotly.express as px
import streamlit as st

from deadline_tracker.importer import load_upload
from deadline_tracker.models import PRIORITY_LEVELS, Assignment
from deadline_tracker.session import DeadlineSession
from deadline_tracker.settings import Settings, load_settings
from deadline_tracker.subjects import SUBJECT_CATALOG, suggest_subjects

SESSION_KEY = "deadline_session"


@st.cache_data(show_spinner=False)
def get_settings() -> Settings:
    return load_settings()


@st.cache_data(show_spinner=False)
def load_upload_cached(filename: str, data: bytes, accepted: Tuple[str, ...]) -> Tuple[Assignment, ...]:
    """
    Decode + normalize an uploaded sheet.
    Cached so reruns with the same bytes skip the work; failures are not cached.
    """
    return load_upload(filename, data, accepted)


def get_session(settings: Settings) -> DeadlineSession:
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = DeadlineSession(
            max_selected=settings.subjects.max_selected,
            accepted_extensions=settings.upload.accepted_extensions,
        )
    return st.session_state[SESSION_KEY]


# ------------------------------
# Chart: due dates by class
def build_deadline_figure(rows: Sequence[Assignment]):
    if not rows:
        return None
    df = pd.DataFrame([a.to_dict() for a in rows])
    df["due"] = pd.to_datetime(df["date"], format="%B %d, %Y", errors="coerce")
    df = df.dropna(subset=["due"])
    if df.empty:
        return None

    fig = px.scatter(
        df.sort_values("due"),
        x="due",
        y="class",
        color="priority",
        hover_data=["assignment", "date"],
        category_orders={"priority": list(PRIORITY_LEVELS)},
    )
    fig.update_traces(marker={"size": 12})
    fig.update_xaxes(tickformat="%b %d")
    fig.update_layout(height=400, margin={"l": 0, "r": 0, "t": 30, "b": 0})
    return fig


# ------------------------------
# Page sections
def _toggle(subject: str) -> None:
    session: DeadlineSession = st.session_state[SESSION_KEY]
    st.session_state["selection_full"] = not session.toggle_subject(subject)


def _select_all(subjects: Sequence[str]) -> None:
    session: DeadlineSession = st.session_state[SESSION_KEY]
    for s in subjects:
        if s not in session.selection:
            session.toggle_subject(s)


def render_subject_picker(session: DeadlineSession) -> None:
    st.subheader("Select Your Subjects")
    per_row = 4
    for start in range(0, len(SUBJECT_CATALOG), per_row):
        cols = st.columns(per_row)
        for col, subject in zip(cols, SUBJECT_CATALOG[start:start + per_row]):
            col.button(
                subject,
                key=f"subject_{subject}",
                type="primary" if subject in session.selection else "secondary",
                on_click=_toggle,
                args=(subject,),
                width="stretch",
            )
    st.caption(f"{len(session.selection)}/{session.selection.capacity} selected")
    if st.session_state.pop("selection_full", False):
        st.info(f"You can pick at most {session.selection.capacity} subjects.")


def render_upload(session: DeadlineSession, settings: Settings) -> None:
    accepted = tuple(settings.upload.accepted_extensions)
    nonce = st.session_state.setdefault("uploader_nonce", 0)
    uploaded = st.file_uploader(
        "Upload Schedule",
        type=[ext.lstrip(".") for ext in accepted],
        key=f"uploader_{nonce}",
    )
    if uploaded is not None:
        upload_key = (uploaded.name, uploaded.size, getattr(uploaded, "file_id", None))
        if upload_key != session.last_upload_key:
            session.last_upload_key = upload_key
            with st.spinner("Processing..."):
                session.upload(
                    uploaded.name,
                    uploaded.getvalue(),
                    loader=lambda name, data: load_upload_cached(name, data, accepted),
                )

    if session.status == "success":
        st.success(session.message)
    elif session.status == "error":
        st.error(session.message)
        st.caption("Please try uploading a valid Excel file")

    if session.status != "idle" and st.button("Upload another file"):
        session.reset()
        st.session_state["uploader_nonce"] = nonce + 1
        st.rerun()

    if not session.using_placeholder:
        suggested = [s for s in suggest_subjects(session.current(), settings.subjects.suggest_cutoff)
                     if s not in session.selection]
        if suggested:
            st.caption("Subjects found in your sheet: " + ", ".join(suggested))
            st.button("Select these", on_click=_select_all, args=(suggested,))


def render_deadline_table(session: DeadlineSession) -> None:
    st.subheader("Assignment Deadlines")
    visible = session.visible()
    if session.using_placeholder:
        st.caption("Showing example deadlines until a schedule is uploaded.")
    if not visible:
        st.info("No assignments match the selected subjects.")
        return

    df = pd.DataFrame(
        [
            {"Class": a.class_name, "Assignment": a.assignment, "Due": a.date, "Priority": a.priority}
            for _, a in visible
        ],
        index=[pos for pos, _ in visible],
    )
    edited = st.data_editor(
        df,
        hide_index=True,
        width="stretch",
        disabled=["Class", "Assignment", "Due"],
        column_config={
            "Priority": st.column_config.SelectboxColumn(
                "Priority", options=list(PRIORITY_LEVELS), required=True
            ),
        },
        key=f"deadlines_{session.last_upload_key}_{sorted(session.selection.selected)}",
    )
    for pos, priority in edited["Priority"].items():
        if priority != df.at[pos, "Priority"]:
            session.set_priority(int(pos), priority)

    fig = build_deadline_figure([a for _, a in session.visible()])
    if fig is not None:
        st.subheader("📅 Upcoming Deadlines")
        st.plotly_chart(fig, width="stretch")


# ======================================================
# ---------------- Streamlit APP -----------------------
# ======================================================
def main():
    settings = get_settings()
    logging.basicConfig(level=settings.logging.level)

    st.set_page_config(page_title=settings.app.title)
    st.title(settings.app.title)
    st.markdown(f"**{settings.app.welcome}**")
    st.caption(settings.app.tagline)

    session = get_session(settings)
    render_subject_picker(session)
    render_upload(session, settings)
    render_deadline_table(session)


if __name__ == "__main__":
    main()
