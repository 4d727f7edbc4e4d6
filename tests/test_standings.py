"""Points/medal standings and the public verification record."""

import pytest

from data import records as R
from data import standings as SD
from data.connection import RecordNotFound


def _ranked(store, event_id, rank):
    event = R.Event.from_row(store.select(R.EVENTS, eq={"id": event_id})[0])
    return next(r.participant_id for r in event.rounds[-1].participants if r.rank == rank)


def _register_number(store, participant_id):
    return store.select(R.PARTICIPANTS, eq={"id": participant_id})[0]["register_number"]


class TestStandings:
    def test_totals_from_completed_individual_events(self, store):
        standings = SD.load_standings(store)
        # 6 completed individual events x (5 + 3 + 1); team results don't count
        assert standings.departments["points"].sum() == 54
        assert standings.participants["points"].sum() == 54
        assert standings.departments["gold"].sum() == 6
        assert standings.departments["bronze"].sum() == 6

    def test_departments_sorted_by_points(self, store):
        points = list(SD.load_standings(store).departments["points"])
        assert points == sorted(points, reverse=True)

    def test_custom_points(self):
        depts = [R.Department(id="d1", name="CSE", code="CSE")]
        people = [R.Participant(id="p1", register_number="R1", name="A", department_id="d1", batch_id=None,
                                semester=1, gender="male", chest_number="101")]
        event = R.Event(
            id="e1", name="Sprint", points_1st=8,
            rounds=[R.Round(id="r1", name="Final", participants=[
                R.RoundResult(participant_id="p1", rank=1),
                R.RoundResult(participant_id="stranger", rank=2),
            ])],
        )
        standings = SD.compute_standings(depts, people, [event])
        assert standings.departments.loc[0, "points"] == 8
        assert standings.departments.loc[0, "gold"] == 1
        assert standings.participants.loc[0, "points"] == 8

    def test_top_participants(self, store):
        stats = SD.load_standings(store).participants
        top = SD.top_participants(stats, "female", limit=3)
        assert len(top) == 3
        assert set(top["gender"]) == {"female"}
        assert list(top["points"]) == sorted(top["points"], reverse=True)
        assert (top["points"] > 0).all()


class TestVerification:
    def test_winner_record(self, store):
        winner = _ranked(store, "ev-male-0", 1)
        record = SD.participant_record(store, _register_number(store, winner).lower())
        assert record.participant.id == winner
        assert record.department is not None
        entry = next(e for e in record.entries if e.event.id == "ev-male-0")
        assert (entry.rank, entry.outcome) == (1, "1st")
        ranks = [e.rank or 4 for e in record.entries]
        assert ranks == sorted(ranks)

    def test_unfinished_events_are_participation(self, store):
        event = R.Event.from_row(store.select(R.EVENTS, eq={"id": "ev-female-4"})[0])
        record = SD.participant_record(store, _register_number(store, event.participants[0]))
        entry = next(e for e in record.entries if e.event.id == "ev-female-4")
        assert entry.rank is None
        assert entry.outcome == "participation"

    def test_team_membership_counts(self, store):
        team = store.select(R.TEAMS, eq={"id": "team-0-cse"})[0]
        record = SD.participant_record(store, _register_number(store, team["member_ids"][0]))
        entry = next(e for e in record.entries if e.event.id == "ev-group-0")
        event = R.Event.from_row(store.select(R.EVENTS, eq={"id": "ev-group-0"})[0])
        team_rank = next(r.rank for r in event.rounds[-1].participants if r.participant_id == "team-0-cse")
        assert entry.rank == team_rank

    def test_final_round_takes_precedence(self):
        event = R.Event(id="e", name="x", status="completed", rounds=[
            R.Round(id="r1", name="Heat", participants=[R.RoundResult(participant_id="p", rank=1)]),
            R.Round(id="r2", name="Grand Final", participants=[R.RoundResult(participant_id="p", rank=3)]),
        ])
        assert SD._podium_rank(event, "p") == 3
        event.status = "ongoing"
        assert SD._podium_rank(event, "p") is None

    def test_unknown_register_number(self, store):
        with pytest.raises(RecordNotFound):
            SD.participant_record(store, "NOPE123")
        with pytest.raises(RecordNotFound):
            SD.participant_record(store, "  ")
