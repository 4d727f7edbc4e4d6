from __future__ import annotations

import streamlit as st

from components.feedback import confirm, flash, report_failure
from components.narrative import render_tab_intro
from config import AppConfig
from data.programs import activate_program, create_program, delete_program, set_program_status, update_program
from data.records import PROGRAM_CATEGORIES, PROGRAM_STATUSES, Program
from data.service import get_programs, writer
from logs import get_logger

logger = get_logger("views.programs")

STATUS_ICONS = {"active": "🟢", "inactive": "⚪", "ended": "🏁"}


def _index(options, value) -> int:
    return options.index(value) if value in options else 0


def _render_create(cfg: AppConfig, use_mock: bool) -> None:
    with st.expander("➕ New program", expanded=False):
        with st.form("create_program", clear_on_submit=True):
            name = st.text_input("Program name", placeholder="Annual Sports Meet 2026")
            category = st.selectbox("Category", PROGRAM_CATEGORIES)
            submitted = st.form_submit_button("Create program")
        if not submitted:
            return
        try:
            program = create_program(writer(cfg, use_mock), name, category)
        except Exception as e:
            report_failure(logger, "program_create_failed", e, "Couldn't create the program.")
            return
        flash(f"Created {program.name}. It starts inactive.")
        st.rerun()


def _render_program(cfg: AppConfig, use_mock: bool, program: Program) -> None:
    icon = STATUS_ICONS.get(program.status, "")
    with st.expander(f"{icon} {program.name} · {program.category} · {program.status}"):
        with st.form(f"edit_{program.id}"):
            name = st.text_input("Name", value=program.name)
            category = st.selectbox(
                "Category",
                PROGRAM_CATEGORIES,
                index=_index(PROGRAM_CATEGORIES, program.category),
            )
            status = st.selectbox("Status", PROGRAM_STATUSES, index=_index(PROGRAM_STATUSES, program.status))
            saved = st.form_submit_button("Save")
        if saved:
            store = writer(cfg, use_mock)
            try:
                update_program(store, program.id, name, category)
                if status != program.status:
                    set_program_status(store, program.id, status)
            except Exception as e:
                report_failure(logger, "program_update_failed", e, "Couldn't save the program.", program_id=program.id)
                return
            flash(f"Saved {name.strip()}.")
            st.rerun()

        c1, c2 = st.columns(2)
        with c1:
            if program.status != "active" and st.button("Make active", key=f"activate_{program.id}"):
                try:
                    activate_program(writer(cfg, use_mock), program.id)
                except Exception as e:
                    report_failure(logger, "program_activate_failed", e, "Couldn't activate the program.",
                                   program_id=program.id)
                    return
                flash(f"{program.name} is now the active program.")
                st.rerun()
        with c2:
            prompt = f"Delete {program.name} with all of its events, teams and requests? This can't be undone."
            if confirm(f"delete_program_{program.id}", prompt):
                try:
                    removed = delete_program(writer(cfg, use_mock), program.id)
                except Exception as e:
                    report_failure(logger, "program_delete_failed", e, "Couldn't delete the program.",
                                   program_id=program.id)
                    return
                flash(f"Deleted {program.name} and {removed} event(s).")
                st.rerun()


def render(cfg: AppConfig, use_mock: bool) -> None:
    st.title("Programs")
    render_tab_intro(
        audience="Meet administrators",
        purpose="Which meet is running, and which ones are archived?",
        context="Only one program can be active at a time. Activating a program deactivates the current one.",
    )
    flash()

    res = get_programs(cfg, use_mock)
    if res.warning:
        st.warning(res.warning)

    _render_create(cfg, use_mock)

    if not res.data:
        st.info("No programs yet. Create one to start adding events.")
        return
    for program in res.data:
        _render_program(cfg, use_mock, program)
