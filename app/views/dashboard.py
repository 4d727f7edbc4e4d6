from __future__ import annotations

import streamlit as st

from components.feedback import report_failure
from components.metrics import Kpi, medal_bar_chart, points_bar_chart, render_kpi_row
from components.narrative import render_callout, render_tab_intro
from config import AppConfig
from data.records import GENDER_LABELS, GENDERS
from data.service import (
    get_events,
    get_participants,
    get_pending_requests,
    get_site_settings,
    get_standings,
    writer,
)
from data.settings import update_site_setting
from data.standings import top_participants
from logs import get_logger

logger = get_logger("views.dashboard")

SITE_TOGGLES = [
    ("enable_downloads", "Certificate downloads", "Participants can download their certificates from the public site."),
    ("enable_requests", "Participation requests", "Participants can request to join events."),
]


def _save_site_toggle(cfg: AppConfig, use_mock: bool, key: str) -> None:
    """on_change for a site toggle; a failed write flips the toggle back."""
    state_key = f"site_{key}"
    value = bool(st.session_state[state_key])
    try:
        update_site_setting(writer(cfg, use_mock), key, value)
    except Exception as e:
        st.session_state[state_key] = not value
        report_failure(logger, "site_setting_update_failed", e, "Couldn't update the setting.", key=key)


def _render_site_toggles(cfg: AppConfig, use_mock: bool) -> None:
    st.subheader("Site configuration")
    res = get_site_settings(cfg, use_mock)
    if res.warning:
        st.warning(res.warning)
    site = res.data

    cols = st.columns(len(SITE_TOGGLES))
    for col, (key, label, help_text) in zip(cols, SITE_TOGGLES):
        st.session_state.setdefault(f"site_{key}", bool(getattr(site, key)))
        with col:
            value = st.toggle(label, help=help_text, key=f"site_{key}",
                              on_change=_save_site_toggle, args=(cfg, use_mock, key))
            st.caption("Enabled" if value else "Disabled")


def render(cfg: AppConfig, use_mock: bool) -> None:
    st.title("Dashboard")
    render_tab_intro(
        audience="Meet administrators",
        purpose="How is the meet going, and who is leading?",
        context="Points and medals are computed from ranked round results: 1st/2nd/3rd earn the event's configured points.",
    )

    _render_site_toggles(cfg, use_mock)
    st.divider()

    # --- load data (graceful fallback inside service) ---
    participants = get_participants(cfg, use_mock)
    events = get_events(cfg, use_mock, None)
    pending = get_pending_requests(cfg, use_mock)
    standings = get_standings(cfg, use_mock)
    for res in (participants, events, pending, standings):
        if res.warning:
            st.warning(res.warning)
            break

    st.caption(f"Data source: **{standings.source}**")

    completed = sum(1 for e in events.data if e.status == "completed")
    render_kpi_row(
        [
            Kpi("Participants", f"{len(participants.data):,}"),
            Kpi("Departments", f"{len(standings.data.departments):,}"),
            Kpi("Events", f"{len(events.data):,}", note=f"{completed} completed"),
            Kpi("Pending requests", f"{len(pending.data):,}"),
        ]
    )

    st.subheader("Department standings")
    depts = standings.data.departments
    if depts.empty:
        st.info("No departments yet. Add them under Resources.")
    else:
        c1, c2 = st.columns(2)
        with c1:
            points_bar_chart(depts, label="code", title="Points by department")
        with c2:
            medal_bar_chart(depts, label="code", title="Medal tally")
        st.dataframe(
            depts[["name", "code", "points", "gold", "silver", "bronze"]],
            hide_index=True,
            use_container_width=True,
        )
        render_callout(
            "Tie-breaks",
            "Departments with equal points keep their alphabetical order; medals are shown for reference only.",
        )

    st.subheader("Top individual performers")
    tabs = st.tabs([GENDER_LABELS[g] for g in GENDERS])
    names = dict(zip(depts["id"], depts["code"])) if not depts.empty else {}
    for tab, gender in zip(tabs, GENDERS):
        with tab:
            top = top_participants(standings.data.participants, gender)
            if top.empty:
                st.info("No podium finishes yet.")
                continue
            top = top.assign(department=top["department_id"].map(names).fillna("Unknown"))
            st.dataframe(
                top[["chest_number", "name", "department", "points", "gold", "silver", "bronze"]],
                hide_index=True,
                use_container_width=True,
            )
