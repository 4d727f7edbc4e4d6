from __future__ import annotations

import pandas as pd
import streamlit as st

from components.feedback import flash, report_failure
from components.narrative import render_tab_intro
from config import AppConfig
from data.participation import approve_request, filter_requests, gender_counts, reject_request
from data.records import GENDER_LABELS, GENDERS
from data.service import get_pending_requests, get_request_events, writer
from logs import get_logger

logger = get_logger("views.participation")


def _render_row(cfg: AppConfig, use_mock: bool, row: pd.Series) -> None:
    c1, c2, c3, c4 = st.columns([3, 3, 1, 1])
    c1.markdown(f"**{row['participant_name']}**  \n{row['register_number'] or '-'}")
    c2.markdown(f"{row['event_name']}  \n<span class='subtle'>{row['created_at'] or ''}</span>", unsafe_allow_html=True)
    if c3.button("Approve", key=f"approve_{row['id']}"):
        try:
            added = approve_request(writer(cfg, use_mock), row["id"])
        except Exception as e:
            report_failure(logger, "request_approve_failed", e, "Couldn't approve the request.", request_id=row["id"])
            return
        note = "" if added else " (already on the roster)"
        flash(f"Approved {row['participant_name']} for {row['event_name']}{note}.")
        st.rerun()
    if c4.button("Reject", key=f"reject_{row['id']}"):
        try:
            reject_request(writer(cfg, use_mock), row["id"])
        except Exception as e:
            report_failure(logger, "request_reject_failed", e, "Couldn't reject the request.", request_id=row["id"])
            return
        flash(f"Rejected {row['participant_name']} for {row['event_name']}.")
        st.rerun()


def render(cfg: AppConfig, use_mock: bool) -> None:
    st.title("Participation requests")
    render_tab_intro(
        audience="Meet administrators",
        purpose="Who wants to join which event?",
        context="Approving adds the participant to the event roster. Group events are managed as teams and don't appear here.",
    )
    flash()

    res = get_pending_requests(cfg, use_mock)
    events = get_request_events(cfg, use_mock)
    if res.warning:
        st.warning(res.warning)

    options = ["all"] + [e.id for e in events.data]
    names = {"all": "All events", **{e.id: f"{e.name} ({GENDER_LABELS.get(e.gender, e.gender)})" for e in events.data}}
    event_id = st.selectbox("Event", options, format_func=lambda i: names.get(i, i))

    df = res.data
    counts = gender_counts(df, event_id)
    tabs = st.tabs([f"{GENDER_LABELS[g]} ({counts[g]})" for g in GENDERS])
    for tab, gender in zip(tabs, GENDERS):
        with tab:
            scoped = filter_requests(df, gender, event_id)
            if scoped.empty:
                st.info("No pending requests.")
                continue
            for _, row in scoped.iterrows():
                _render_row(cfg, use_mock, row)
