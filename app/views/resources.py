from __future__ import annotations

from dataclasses import replace

import pandas as pd
import streamlit as st

from components.feedback import confirm, flash, report_failure
from components.narrative import render_tab_intro
from config import AppConfig
from data.participants import (
    delete_participant,
    register_participant,
    sort_participants,
    update_participant,
)
from data.records import GENDERS, STAFF_TYPES, Participant, RegistrationData
from data.resources import add_batch, add_department, batches_for_department, remove_batch, remove_department
from data.service import get_batches, get_departments, get_participants, get_staff, writer
from data.staff import create_staff, delete_staff, update_staff
from logs import get_logger

logger = get_logger("views.resources")

SORT_KEYS = {
    "Chest number": "chest_number",
    "Name": "name",
    "Register number": "register_number",
    "Department": "department",
    "Semester": "semester",
}


# --- departments & batches ---


def _render_departments(cfg: AppConfig, use_mock: bool, depts: pd.DataFrame, batches: pd.DataFrame) -> None:
    with st.form("add_department", clear_on_submit=True):
        c1, c2 = st.columns([3, 1])
        name = c1.text_input("Department name", placeholder="Computer Science and Engineering")
        code = c2.text_input("Code", placeholder="CSE")
        submitted = st.form_submit_button("Add department")
    if submitted:
        try:
            dept = add_department(writer(cfg, use_mock), name, code)
        except Exception as e:
            report_failure(logger, "department_add_failed", e, "Couldn't add the department.")
        else:
            flash(f"Added {dept.name} ({dept.code}).")
            st.rerun()

    if depts.empty:
        st.info("No departments yet.")
        return

    for _, dept in depts.iterrows():
        scoped = batches_for_department(batches, dept["id"])
        with st.expander(f"{dept['name']} ({dept['code']}) · {len(scoped)} batch(es)"):
            for _, batch in scoped.iterrows():
                b1, b2 = st.columns([4, 1])
                b1.write(batch["name"])
                if b2.button("Remove", key=f"remove_batch_{batch['id']}"):
                    try:
                        remove_batch(writer(cfg, use_mock), batch["id"])
                    except Exception as e:
                        report_failure(logger, "batch_remove_failed", e, "Couldn't remove the batch.",
                                       batch_id=batch["id"])
                    else:
                        st.rerun()

            with st.form(f"add_batch_{dept['id']}", clear_on_submit=True):
                batch_name = st.text_input("New batch", placeholder="2025-2029")
                if st.form_submit_button("Add batch"):
                    try:
                        add_batch(writer(cfg, use_mock), dept["id"], batch_name)
                    except Exception as e:
                        report_failure(logger, "batch_add_failed", e, "Couldn't add the batch.",
                                       department_id=dept["id"])
                    else:
                        st.rerun()

            prompt = f"Remove {dept['name']}? Its participants will show as Unknown department."
            if confirm(f"remove_dept_{dept['id']}", prompt, label="Remove department"):
                try:
                    remove_department(writer(cfg, use_mock), dept["id"])
                except Exception as e:
                    report_failure(logger, "department_remove_failed", e, "Couldn't remove the department.",
                                   department_id=dept["id"])
                else:
                    flash(f"Removed {dept['name']}.")
                    st.rerun()


# --- staff ---


def _render_staff(cfg: AppConfig, use_mock: bool, staff: pd.DataFrame) -> None:
    with st.expander("➕ Add staff member", expanded=False):
        with st.form("create_staff", clear_on_submit=True):
            c1, c2 = st.columns(2)
            name = c1.text_input("Name")
            email = c2.text_input("Email")
            password = c1.text_input("Password", type="password")
            phone = c2.text_input("Phone")
            staff_type = st.selectbox("Staff type", STAFF_TYPES)
            submitted = st.form_submit_button("Create account")
        if submitted:
            try:
                profile = create_staff(writer(cfg, use_mock), name, email, password, phone, staff_type)
            except Exception as e:
                report_failure(logger, "staff_create_failed", e, "Couldn't create the staff account.")
            else:
                flash(f"Created an account for {profile.name}.")
                st.rerun()

    if staff.empty:
        st.info("No staff accounts yet.")
        return

    st.dataframe(staff.drop(columns=["uid"]), hide_index=True, use_container_width=True)

    names = dict(zip(staff["uid"], staff["name"]))
    uid = st.selectbox("Edit staff member", list(names), format_func=names.get, key="staff_pick")
    member = staff[staff["uid"] == uid].iloc[0]
    with st.form(f"edit_staff_{uid}"):
        c1, c2 = st.columns(2)
        name = c1.text_input("Name", value=member["name"] or "")
        email = c2.text_input("Email", value=member["email"] or "")
        phone = c1.text_input("Phone", value=member["phone"] or "")
        current_type = member["staff_type"] if member["staff_type"] in STAFF_TYPES else STAFF_TYPES[0]
        staff_type = c2.selectbox("Staff type", STAFF_TYPES, index=STAFF_TYPES.index(current_type))
        password = st.text_input("New password", type="password", help="Leave blank to keep the current password.")
        saved = st.form_submit_button("Save")
    if saved:
        try:
            update_staff(writer(cfg, use_mock), uid, name, email, phone, staff_type, password or None)
        except Exception as e:
            report_failure(logger, "staff_update_failed", e, "Couldn't update the staff member.", uid=uid)
        else:
            flash(f"Updated {name.strip()}.")
            st.rerun()

    if confirm(f"delete_staff_{uid}", f"Delete {member['name']} and their sign-in account?"):
        try:
            delete_staff(writer(cfg, use_mock), uid)
        except Exception as e:
            report_failure(logger, "staff_delete_failed", e, "Couldn't delete the staff member.", uid=uid)
        else:
            flash(f"Deleted {member['name']}.")
            st.rerun()


# --- participants ---


def _department_picker(key: str, depts: pd.DataFrame, current: str | None = None) -> str | None:
    ids = list(depts["id"])
    if not ids:
        return None
    labels = dict(zip(depts["id"], depts["name"]))
    return st.selectbox("Department", ids, index=ids.index(current) if current in ids else 0,
                        format_func=labels.get, key=key)


def _batch_picker(key: str, batches: pd.DataFrame, department_id: str | None, current: str | None = None):
    scoped = batches_for_department(batches, department_id) if department_id else batches.iloc[0:0]
    options = [None] + list(scoped["id"])
    labels = {None: "(none)", **dict(zip(scoped["id"], scoped["name"]))}
    return st.selectbox("Batch", options, index=options.index(current) if current in options else 0,
                        format_func=labels.get, key=key)


def _render_register(cfg: AppConfig, use_mock: bool, depts: pd.DataFrame, batches: pd.DataFrame) -> None:
    with st.expander("➕ Register participant", expanded=False):
        if depts.empty:
            st.info("Add a department first.")
            return
        # Department sits outside the form so the batch list follows it.
        department_id = _department_picker("register_dept", depts)
        batch_id = _batch_picker("register_batch", batches, department_id)
        with st.form("register_participant", clear_on_submit=True):
            c1, c2 = st.columns(2)
            name = c1.text_input("Name")
            reg = c2.text_input("Register number")
            semester = c1.number_input("Semester", min_value=1, max_value=8, value=1)
            gender = c2.selectbox("Gender", GENDERS)
            submitted = st.form_submit_button("Register")
        if not submitted:
            return
        data = RegistrationData(name=name, register_number=reg, department_id=department_id or "",
                                gender=gender, semester=int(semester), batch_id=batch_id)
        try:
            participant = register_participant(writer(cfg, use_mock), data)
        except Exception as e:
            report_failure(logger, "participant_register_failed", e, "Couldn't register the participant.")
            return
        flash(f"Registered {participant.name} with chest number {participant.chest_number}.")
        st.rerun()


def _render_participant_editor(
    cfg: AppConfig, use_mock: bool, people: pd.DataFrame, depts: pd.DataFrame, batches: pd.DataFrame
) -> None:
    labels = {r["id"]: f"{r['chest_number']} · {r['name']} ({r['register_number']})" for _, r in people.iterrows()}
    pid = st.selectbox("Edit participant", list(labels), format_func=labels.get, key="participant_pick")
    row = people[people["id"] == pid].iloc[0]
    current = Participant(
        id=row["id"],
        register_number=row["register_number"],
        name=row["name"],
        department_id=row["department_id"],
        batch_id=row["batch_id"],
        semester=int(row["semester"]),
        gender=row["gender"],
        chest_number=row["chest_number"],
    )

    department_id = _department_picker(f"edit_dept_{pid}", depts, current.department_id)
    batch_id = _batch_picker(f"edit_batch_{pid}", batches, department_id, current.batch_id)
    with st.form(f"edit_participant_{pid}"):
        c1, c2 = st.columns(2)
        name = c1.text_input("Name", value=current.name)
        reg = c2.text_input("Register number", value=current.register_number)
        semester = c1.number_input("Semester", min_value=1, max_value=8, value=min(max(current.semester, 1), 8))
        gender = c2.selectbox("Gender", GENDERS, index=GENDERS.index(current.gender) if current.gender in GENDERS else 0)
        saved = st.form_submit_button("Save")
    if saved:
        updated = replace(current, name=name, register_number=reg, department_id=department_id or "",
                          batch_id=batch_id, semester=int(semester), gender=gender)
        try:
            update_participant(writer(cfg, use_mock), updated)
        except Exception as e:
            report_failure(logger, "participant_update_failed", e, "Couldn't update the participant.", participant_id=pid)
        else:
            flash(f"Updated {updated.name.strip()}.")
            st.rerun()

    if confirm(f"delete_participant_{pid}", f"Delete {current.name}?"):
        try:
            delete_participant(writer(cfg, use_mock), pid)
        except Exception as e:
            report_failure(logger, "participant_delete_failed", e, "Couldn't delete the participant.", participant_id=pid)
        else:
            flash(f"Deleted {current.name}.")
            st.rerun()


def _render_participants(
    cfg: AppConfig, use_mock: bool, people: pd.DataFrame, depts: pd.DataFrame, batches: pd.DataFrame
) -> None:
    _render_register(cfg, use_mock, depts, batches)
    if people.empty:
        st.info("No participants registered yet.")
        return

    c1, c2, c3 = st.columns([2, 1, 2])
    sort_label = c1.selectbox("Sort by", list(SORT_KEYS))
    ascending = c2.radio("Order", ["Asc", "Desc"], horizontal=True) == "Asc"
    query = c3.text_input("Search", placeholder="Name or register number")

    shown = sort_participants(people, SORT_KEYS[sort_label], ascending)
    if query.strip():
        q = query.strip().lower()
        shown = shown[
            shown["name"].str.lower().str.contains(q, regex=False)
            | shown["register_number"].str.lower().str.contains(q, regex=False)
        ]
    st.caption(f"{len(shown)} of {len(people)} participants")
    st.dataframe(
        shown[["chest_number", "name", "register_number", "department", "semester_group", "gender", "total_points"]],
        hide_index=True,
        use_container_width=True,
    )
    _render_participant_editor(cfg, use_mock, people, depts, batches)


def render(cfg: AppConfig, use_mock: bool) -> None:
    st.title("Resources")
    render_tab_intro(
        audience="Meet administrators",
        purpose="Departments, batches, staff accounts and the participant register.",
    )
    flash()

    depts = get_departments(cfg, use_mock)
    batches = get_batches(cfg, use_mock)
    staff = get_staff(cfg, use_mock)
    people = get_participants(cfg, use_mock)
    for res in (depts, batches, staff, people):
        if res.warning:
            st.warning(res.warning)
            break

    t_depts, t_staff, t_people = st.tabs(["🏫 Departments & batches", "🧑‍💼 Staff", "🏃 Participants"])
    with t_depts:
        _render_departments(cfg, use_mock, depts.data, batches.data)
    with t_staff:
        _render_staff(cfg, use_mock, staff.data)
    with t_people:
        _render_participants(cfg, use_mock, people.data, depts.data, batches.data)
