from __future__ import annotations

import streamlit as st

from components.feedback import confirm, flash, report_failure
from components.narrative import render_tab_intro
from config import AppConfig
from data.events import (
    EventForm,
    add_individual,
    advance_round,
    close_event,
    create_event,
    current_round_name,
    default_points,
    delete_event,
    edit_form_defaults,
    events_by_gender,
    make_final,
    new_event_form,
    next_round_name,
    register_team,
    remove_entry,
    rename_round,
    update_event,
)
from data.programs import default_program_id
from data.records import DEFAULT_TEAM_SIZE, EVENT_GENDERS, EVENT_TYPES, GENDER_LABELS, Event
from data.service import get_departments, get_event_roster, get_events, get_programs, writer
from logs import get_logger

logger = get_logger("views.events")


def _event_fields(key: str, form: EventForm) -> EventForm:
    """Inputs shared by the create and edit forms. `form.type` is chosen outside the form."""
    name = st.text_input("Event name", value=form.name, key=f"{key}_name")
    gender = st.selectbox(
        "Category",
        EVENT_GENDERS,
        index=EVENT_GENDERS.index(form.gender) if form.gender in EVENT_GENDERS else 0,
        format_func=lambda g: GENDER_LABELS[g],
        key=f"{key}_gender",
    )
    team_size = form.team_size
    if form.type == "group":
        team_size = st.number_input("Team size", min_value=2, max_value=30, value=int(form.team_size),
                                    key=f"{key}_team_size")
    c1, c2, c3 = st.columns(3)
    p1 = c1.number_input("1st place points", min_value=0, value=int(form.points_1st), key=f"{key}_p1")
    p2 = c2.number_input("2nd place points", min_value=0, value=int(form.points_2nd), key=f"{key}_p2")
    p3 = c3.number_input("3rd place points", min_value=0, value=int(form.points_3rd), key=f"{key}_p3")
    return EventForm(name, form.type, gender, int(team_size), int(p1), int(p2), int(p3))


def _type_picker(key: str, current: str) -> str:
    return st.radio(
        "Event type",
        EVENT_TYPES,
        index=EVENT_TYPES.index(current) if current in EVENT_TYPES else 0,
        horizontal=True,
        key=key,
    )


def _render_create(cfg: AppConfig, use_mock: bool, program_id: str) -> None:
    with st.expander("➕ New event", expanded=False):
        event_type = _type_picker("create_event_type", "individual")
        p1, p2, p3 = default_points(event_type)
        st.caption(f"Default points for {event_type} events: {p1} / {p2} / {p3}")
        # Keys carry the type so switching type resets points to that type's defaults.
        with st.form("create_event", clear_on_submit=True):
            form = _event_fields(f"create_{event_type}", new_event_form().with_type(event_type))
            submitted = st.form_submit_button("Create event")
        if not submitted:
            return
        try:
            create_event(writer(cfg, use_mock), program_id, form)
        except Exception as e:
            report_failure(logger, "event_create_failed", e, "Couldn't create the event.", program_id=program_id)
            return
        flash(f"Created {form.name.strip()}.")
        st.rerun()


def _render_event(cfg: AppConfig, use_mock: bool, event: Event, departments) -> None:
    label = f"{event.name} · {event.type} · {event.status} · {len(event.participants)} entered"
    with st.expander(label):
        st.caption(f"Current round: {current_round_name(event)}")
        details, entrants, rounds = st.tabs(["Details", "Entrants", "Rounds"])
        with entrants:
            _render_entrants(cfg, use_mock, event, departments)
        with rounds:
            _render_rounds(cfg, use_mock, event)
        with details:
            _render_details(cfg, use_mock, event)


def _render_details(cfg: AppConfig, use_mock: bool, event: Event) -> None:
    original = edit_form_defaults(event)
    event_type = _type_picker(f"edit_type_{event.id}", event.type)
    base = original if event_type == event.type else original.with_type(event_type)
    with st.form(f"edit_event_{event.id}"):
        form = _event_fields(f"edit_{event.id}_{event_type}", base)
        saved = st.form_submit_button("Save changes")
    if saved:
        try:
            update_event(writer(cfg, use_mock), event.id, form)
        except Exception as e:
            report_failure(logger, "event_update_failed", e, "Couldn't update the event.", event_id=event.id)
            return
        flash(f"Updated {form.name.strip()}.")
        st.rerun()

    if confirm(f"delete_event_{event.id}", f"Delete {event.name} with its teams and requests?"):
        try:
            delete_event(writer(cfg, use_mock), event.id)
        except Exception as e:
            report_failure(logger, "event_delete_failed", e, "Couldn't delete the event.", event_id=event.id)
            return
        flash(f"Deleted {event.name}.")
        st.rerun()


def _render_entrants(cfg: AppConfig, use_mock: bool, event: Event, departments) -> None:
    res = get_event_roster(cfg, use_mock, event)
    if res.warning:
        st.warning(res.warning)
    roster = res.data
    if roster.empty:
        st.info("Nobody entered yet.")
    for _, row in roster.iterrows():
        c1, c2 = st.columns([5, 1])
        if event.type == "group":
            c1.markdown(f"**{row['name']}** · {row['members'] or 'no members'}")
        else:
            c1.markdown(f"**{row['chest_number']}** {row['name']} · {row['department']} · {row['semester_group']}")
        if event.status == "completed":
            continue
        with c2:
            removed = confirm(f"remove_{event.id}_{row['id']}", f"Remove {row['name']} from {event.name}?", label="Remove")
        if removed:
            try:
                remove_entry(writer(cfg, use_mock), event.id, row["id"])
            except Exception as e:
                report_failure(logger, "entrant_remove_failed", e, "Couldn't remove the entry.",
                               event_id=event.id, entry_id=row["id"])
                return
            flash(f"Removed {row['name']}.")
            st.rerun()

    if event.status == "completed":
        return
    if event.type == "group":
        _render_team_form(cfg, use_mock, event, departments)
        return
    with st.form(f"add_entrant_{event.id}", clear_on_submit=True):
        term = st.text_input("Chest or register number", key=f"add_term_{event.id}")
        added = st.form_submit_button("Add participant")
    if added:
        try:
            participant = add_individual(writer(cfg, use_mock), event.id, term)
        except Exception as e:
            report_failure(logger, "entrant_add_failed", e, "Couldn't add the participant.", event_id=event.id)
            return
        flash(f"Added {participant.name}.")
        st.rerun()


def _render_team_form(cfg: AppConfig, use_mock: bool, event: Event, departments) -> None:
    if departments.empty:
        st.info("Add departments before registering teams.")
        return
    names = dict(zip(departments["id"], departments["name"]))
    size = event.team_size or DEFAULT_TEAM_SIZE
    with st.form(f"register_team_{event.id}", clear_on_submit=True):
        department_id = st.selectbox("Department", list(names), format_func=names.get, key=f"team_dept_{event.id}")
        cols = st.columns(min(size, 4))
        terms = [
            cols[i % len(cols)].text_input(f"Member {i + 1}", placeholder="Chest no.", key=f"team_{event.id}_{i}")
            for i in range(size)
        ]
        submitted = st.form_submit_button("Register team")
    if submitted:
        try:
            team = register_team(writer(cfg, use_mock), event.id, department_id, terms)
        except Exception as e:
            report_failure(logger, "team_register_failed", e, "Couldn't register the team.", event_id=event.id)
            return
        flash(f"Registered {team.name}.")
        st.rerun()


def _render_rounds(cfg: AppConfig, use_mock: bool, event: Event) -> None:
    for i, rnd in enumerate(event.rounds):
        marker = "▶" if i == event.current_round_index else " "
        st.markdown(f"{marker} **{rnd.name or 'Unnamed'}** · {rnd.status} · {len(rnd.participants)} results")
    if event.status == "completed":
        st.caption("This event is closed.")
        return

    pending = None
    with st.form(f"rename_round_{event.id}", clear_on_submit=True):
        new_name = st.text_input("Rename current round", placeholder=current_round_name(event),
                                 key=f"round_name_{event.id}")
        if st.form_submit_button("Rename"):
            pending = ("rename", new_name)

    final_next = st.checkbox("Next round is the Final", key=f"final_next_{event.id}")
    c1, c2, c3 = st.columns(3)
    if c1.button(f"Start {next_round_name(event, final_next)}", key=f"advance_{event.id}"):
        pending = ("advance", final_next)
    if current_round_name(event) != "Final" and c2.button("Make current round Final", key=f"make_final_{event.id}"):
        pending = ("final", None)
    if c3.button("Close event", key=f"close_{event.id}"):
        pending = ("close", None)
    if pending is None:
        return

    action, value = pending
    store = writer(cfg, use_mock)
    try:
        if action == "rename":
            rename_round(store, event.id, value)
            message = f"Renamed the current round to {value.strip()}."
        elif action == "advance":
            message = f"Started {advance_round(store, event.id, final=value)}."
        elif action == "final":
            make_final(store, event.id)
            message = "The current round is now the Final."
        else:
            close_event(store, event.id)
            message = f"Closed {event.name}."
    except Exception as e:
        report_failure(logger, f"round_{action}_failed", e, "Couldn't update the rounds.", event_id=event.id)
        return
    flash(message)
    st.rerun()


def render(cfg: AppConfig, use_mock: bool) -> None:
    st.title("Events")
    render_tab_intro(
        audience="Meet administrators",
        purpose="Which events run in this program, and how are they scored?",
        context="Each new event starts upcoming with a single pending Round 1.",
    )
    flash()

    programs = get_programs(cfg, use_mock)
    if programs.warning:
        st.warning(programs.warning)
    if not programs.data:
        st.info("Create a program first.")
        return

    ids = [p.id for p in programs.data]
    names = {p.id: f"{p.name} ({p.status})" for p in programs.data}
    default_id = default_program_id(programs.data)
    program_id = st.selectbox(
        "Program",
        ids,
        index=ids.index(default_id) if default_id in ids else 0,
        format_func=names.get,
    )

    _render_create(cfg, use_mock, program_id)

    res = get_events(cfg, use_mock, program_id)
    if res.warning:
        st.warning(res.warning)
    departments = get_departments(cfg, use_mock).data

    tabs = st.tabs([f"{GENDER_LABELS[g]} ({len(events_by_gender(res.data, g))})" for g in EVENT_GENDERS])
    for tab, gender in zip(tabs, EVENT_GENDERS):
        with tab:
            scoped = events_by_gender(res.data, gender)
            if not scoped:
                st.info("No events in this category.")
                continue
            for event in scoped:
                _render_event(cfg, use_mock, event, departments)
