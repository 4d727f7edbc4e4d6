"""Programs (single active program, cascading delete) and event management."""

import pytest

from data import events as E
from data import programs as PG
from data import records as R
from data.connection import RecordNotFound, StoreError


class TestPrograms:
    def test_newest_first(self, store):
        assert [p.id for p in PG.list_programs(store)] == ["prog-2026", "prog-2025"]

    def test_default_program_prefers_active(self, store):
        programs = PG.list_programs(store)
        assert PG.default_program_id(programs) == "prog-2026"
        store.update(R.PROGRAMS, {"status": "ended"}, eq={"id": "prog-2026"})
        programs = PG.list_programs(store)
        assert PG.default_program_id(programs) == "prog-2026"  # newest
        assert PG.default_program_id([]) is None

    def test_create_starts_inactive(self, store):
        program = PG.create_program(store, "  Inter-College Meet  ", "mixed")
        assert program.name == "Inter-College Meet"
        assert program.status == "inactive"
        assert PG.list_programs(store)[0].id == program.id

    def test_blank_name_rejected(self, store):
        with pytest.raises(R.ValidationError):
            PG.create_program(store, "   ")

    def test_only_one_active(self, store):
        program = PG.create_program(store, "Next Meet")
        PG.activate_program(store, program.id)
        active = [p.id for p in PG.list_programs(store) if p.status == "active"]
        assert active == [program.id]

    def test_activate_unknown(self, store):
        with pytest.raises(RecordNotFound):
            PG.activate_program(store, "nope")

    def test_set_status(self, store):
        PG.set_program_status(store, "prog-2026", "ended")
        assert {p.status for p in PG.list_programs(store)} == {"ended"}
        PG.set_program_status(store, "prog-2025", "active")
        statuses = {p.id: p.status for p in PG.list_programs(store)}
        assert statuses == {"prog-2025": "active", "prog-2026": "ended"}
        with pytest.raises(R.ValidationError):
            PG.set_program_status(store, "prog-2025", "paused")

    def test_update_program(self, store):
        PG.update_program(store, "prog-2025", "Meet 2025 (archived)", "semester")
        program = next(p for p in PG.list_programs(store) if p.id == "prog-2025")
        assert (program.name, program.category) == ("Meet 2025 (archived)", "semester")

    def test_delete_cascades(self, store):
        event_ids = [e["id"] for e in store.select(R.EVENTS, eq={"program_id": "prog-2026"})]
        removed = PG.delete_program(store, "prog-2026")
        assert removed == len(event_ids) == 12
        assert not store.select(R.EVENTS, eq={"program_id": "prog-2026"})
        assert not store.select(R.TEAMS)
        assert not store.select(R.REQUESTS, in_=("event_id", event_ids))
        assert [p.id for p in PG.list_programs(store)] == ["prog-2025"]


class TestEventForm:
    def test_default_points(self):
        assert E.default_points("individual") == (5, 3, 1)
        assert E.default_points("group") == (10, 6, 4)

    def test_switching_type_resets_points(self):
        form = E.EventForm(name="Relay", points_1st=7).with_type("group")
        assert (form.points_1st, form.points_2nd, form.points_3rd) == (10, 6, 4)
        assert form.name == "Relay"

    def test_team_size_only_for_group(self):
        assert "team_size" not in E.EventForm(name="Sprint").payload()
        assert E.EventForm(name="Relay", type="group", team_size=4).payload()["team_size"] == 4

    def test_validation(self):
        with pytest.raises(R.ValidationError):
            E.EventForm(name="").validate()
        with pytest.raises(R.ValidationError):
            E.EventForm(name="Relay", type="group", team_size=1).validate()
        with pytest.raises(R.ValidationError):
            E.EventForm(name="Relay", gender="kids").validate()

    def test_edit_defaults_fill_missing_points(self):
        event = R.Event(id="e", name="Tug", type="group", gender="mixed", team_size=None,
                        points_1st=None, points_2nd=8, points_3rd=None)
        form = E.edit_form_defaults(event)
        assert (form.points_1st, form.points_2nd, form.points_3rd) == (10, 8, 4)
        assert form.team_size == R.DEFAULT_TEAM_SIZE


class TestEvents:
    def test_create_event(self, store):
        event_id = E.create_event(store, "prog-2026", E.EventForm(name=" Javelin ", gender="female"))
        event = E.get_event(store, event_id)
        assert event.name == "Javelin"
        assert event.status == "upcoming"
        assert event.participants == []
        assert event.team_size is None
        assert [r.name for r in event.rounds] == ["Round 1"]
        assert E.current_round_name(event) == "Round 1"

    def test_create_needs_program(self, store):
        with pytest.raises(R.ValidationError):
            E.create_event(store, "", E.EventForm(name="Javelin"))

    def test_list_and_group_by_gender(self, store):
        events = E.list_events(store, "prog-2026")
        assert len(events) == 12
        assert len(E.events_by_gender(events, "male")) == 5
        assert len(E.events_by_gender(events, "mixed")) == 2
        assert E.list_events(store, "prog-2025") == []

    def test_update_event(self, store):
        form = E.edit_form_defaults(E.get_event(store, "ev-male-0")).with_type("group")
        form.name = "Sprint Relay"
        E.update_event(store, "ev-male-0", form)
        event = E.get_event(store, "ev-male-0")
        assert (event.name, event.type, event.team_size, event.points_1st) == ("Sprint Relay", "group", 4, 10)
        # progress is untouched
        assert event.status == "completed"

    def test_delete_event_removes_teams_and_requests(self, store):
        E.delete_event(store, "ev-group-0")
        assert E.get_event(store, "ev-group-0") is None
        assert not store.select(R.TEAMS, eq={"event_id": "ev-group-0"})
        assert not store.select(R.REQUESTS, eq={"event_id": "ev-group-0"})
        assert store.select(R.TEAMS, eq={"event_id": "ev-group-1"})

    def test_round_name_without_rounds(self):
        assert E.current_round_name(R.Event(id="e", name="x")) == "N/A"


def _outsider(store, event_id, gender="male"):
    event = E.get_event(store, event_id)
    rows = store.select(R.PARTICIPANTS, eq={"gender": gender})
    return next(R.Participant.from_row(r) for r in rows if r["id"] not in event.participants)


class TestRoster:
    def test_find_by_chest_or_register_number(self, store):
        by_chest = E.find_participant(store, " 101 ")
        assert E.find_participant(store, by_chest.register_number.lower()).id == by_chest.id
        with pytest.raises(RecordNotFound):
            E.find_participant(store, "999")
        with pytest.raises(R.ValidationError):
            E.find_participant(store, " ")

    def test_add_individual(self, store):
        newcomer = _outsider(store, "ev-male-4")
        E.add_individual(store, "ev-male-4", newcomer.chest_number)
        event = E.get_event(store, "ev-male-4")
        assert event.participants[-1] == newcomer.id
        assert len(event.participants) == 7
        with pytest.raises(R.ValidationError):
            E.add_individual(store, "ev-male-4", newcomer.chest_number)

    def test_add_individual_checks_category(self, store):
        with pytest.raises(R.ValidationError):
            E.add_individual(store, "ev-male-4", "102")
        with pytest.raises(R.ValidationError):
            E.add_individual(store, "ev-group-1", "101")

    def test_closed_events_are_frozen(self, store):
        with pytest.raises(StoreError):
            E.add_individual(store, "ev-male-0", _outsider(store, "ev-male-0").chest_number)

    def test_roster_sorted_by_chest_number(self, store):
        roster = E.event_roster(store, E.get_event(store, "ev-male-4"))
        assert list(roster.columns) == E.ROSTER_COLUMNS
        assert len(roster) == 6
        chests = [int(c) for c in roster["chest_number"]]
        assert chests == sorted(chests)

    def test_team_roster(self, store):
        roster = E.event_roster(store, E.get_event(store, "ev-group-1"))
        assert len(roster) == 4
        assert roster["members"].str.count(",").eq(3).all()
        assert E.event_roster(store, R.Event(id="e", name="x")).empty

    def test_register_team(self, store):
        team = E.register_team(store, "ev-group-1", "dept-cse", ["101", "105", "109", "113"])
        assert team.name == "Computer Science"
        assert len(team.member_ids) == 4
        assert store.select(R.TEAMS, eq={"id": team.id})[0]["member_ids"] == team.member_ids
        assert E.get_event(store, "ev-group-1").participants[-1] == team.id

    @pytest.mark.parametrize("terms", [
        ["101", "105", "109"],
        ["101", "105", "109", "101"],
        ["101", "105", "109", "102"],
    ])
    def test_register_team_rejects_bad_members(self, store, terms):
        with pytest.raises(R.ValidationError):
            E.register_team(store, "ev-group-1", "dept-cse", terms)
        assert len(E.get_event(store, "ev-group-1").participants) == 4

    def test_register_team_only_for_group_events(self, store):
        with pytest.raises(R.ValidationError):
            E.register_team(store, "ev-male-4", "dept-cse", ["101", "105", "109", "113"])

    def test_remove_entry(self, store):
        entrant = E.get_event(store, "ev-male-4").participants[0]
        E.remove_entry(store, "ev-male-4", entrant)
        assert entrant not in E.get_event(store, "ev-male-4").participants

    def test_remove_team_deletes_team_row(self, store):
        E.remove_entry(store, "ev-group-1", "team-1-cse")
        assert "team-1-cse" not in E.get_event(store, "ev-group-1").participants
        assert not store.select(R.TEAMS, eq={"id": "team-1-cse"})
        assert store.select(R.TEAMS, eq={"id": "team-0-cse"})


class TestRounds:
    def test_advance_completes_current_round(self, store):
        assert E.advance_round(store, "ev-male-4") == "Round 2"
        event = E.get_event(store, "ev-male-4")
        assert [r.status for r in event.rounds] == ["completed", "pending"]
        assert event.current_round_index == 1
        assert E.current_round_name(event) == "Round 2"
        assert E.advance_round(store, "ev-male-4", final=True) == "Final"
        assert [r.sequence for r in E.get_event(store, "ev-male-4").rounds] == [1, 2, 3]

    def test_rename_and_make_final(self, store):
        E.rename_round(store, "ev-male-4", " Heats ")
        assert E.current_round_name(E.get_event(store, "ev-male-4")) == "Heats"
        E.make_final(store, "ev-male-4")
        assert E.current_round_name(E.get_event(store, "ev-male-4")) == "Final"
        with pytest.raises(R.ValidationError):
            E.rename_round(store, "ev-male-4", "  ")

    def test_close_event(self, store):
        E.close_event(store, "ev-male-3")
        event = E.get_event(store, "ev-male-3")
        assert event.status == "completed"
        assert event.rounds[event.current_round_index].status == "completed"
        with pytest.raises(StoreError):
            E.advance_round(store, "ev-male-3")

    def test_unknown_event(self, store):
        with pytest.raises(RecordNotFound):
            E.close_event(store, "nope")
