"""Participant register: listing, sorting, chest numbers, registration."""

import pandas as pd
import pytest

from data import participants as P
from data import records as R
from data.connection import DuplicateRecordError, StoreError


def _registration(**overrides) -> R.RegistrationData:
    data = dict(name=" Asha K ", register_number=" wyd24cs001 ", department_id="dept-cse",
                gender="female", semester=3, batch_id=None)
    data.update(overrides)
    return R.RegistrationData(**data)


class TestListing:
    def test_lists_every_participant_with_department_names(self, store):
        df = P.list_participants(store)
        assert len(df) == 48
        assert list(df.columns) == P.PARTICIPANT_COLUMNS
        assert set(df["department"]) == {"Computer Science", "Electronics & Comm", "Mechanical Eng", "Civil Eng"}

    def test_unknown_department(self, store):
        store.delete(R.DEPARTMENTS, eq={"id": "dept-cse"})
        df = P.list_participants(store)
        assert (df.loc[df["department_id"] == "dept-cse", "department"] == "Unknown").all()

    def test_empty_store_has_columns(self, empty_store):
        df = P.list_participants(empty_store)
        assert df.empty
        assert list(df.columns) == P.PARTICIPANT_COLUMNS

    def test_chest_numbers_sort_numerically(self):
        df = pd.DataFrame({"chest_number": ["99", "1000", "101", "x"], "name": ["a", "b", "c", "d"]})
        out = P.sort_participants(df, "chest_number")
        assert list(out["chest_number"]) == ["99", "101", "1000", "x"]
        assert "_chest" not in out.columns

    def test_sort_by_name_descending(self):
        df = pd.DataFrame({"name": ["b", "c", "a"]})
        assert list(P.sort_participants(df, "name", ascending=False)["name"]) == ["c", "b", "a"]


class TestChestNumbers:
    def test_first_number_is_101(self, empty_store):
        assert P.next_chest_number(empty_store) == "101"

    def test_next_after_highest(self, store):
        assert P.next_chest_number(store) == "149"

    def test_non_numeric_ignored(self, empty_store):
        empty_store.insert(R.PARTICIPANTS, [{"id": "p1", "chest_number": "A7"}, {"id": "p2", "chest_number": "120"}])
        assert P.next_chest_number(empty_store) == "121"


class TestRegistration:
    def test_register_normalises_and_allocates(self, store):
        participant = P.register_participant(store, _registration())
        assert participant.register_number == "WYD24CS001"
        assert participant.name == "Asha K"
        assert participant.chest_number == "149"
        assert participant.total_points == 0
        assert store.select(R.PARTICIPANTS, eq={"register_number": "WYD24CS001"})

    def test_missing_fields(self, store):
        with pytest.raises(R.ValidationError):
            P.register_participant(store, _registration(name=""))
        with pytest.raises(R.ValidationError):
            P.register_participant(store, _registration(department_id=""))

    def test_duplicate_register_number_fails_immediately(self, store):
        P.register_participant(store, _registration())
        with pytest.raises(DuplicateRecordError) as exc:
            P.register_participant(store, _registration(name="Someone Else"))
        assert exc.value.message == "Participant with Register Number WYD24CS001 already exists."

    def test_gives_up_after_repeated_collisions(self, store, monkeypatch):
        monkeypatch.setattr(P, "next_chest_number", lambda s: "101")
        with pytest.raises(StoreError) as exc:
            P.register_participant(store, _registration())
        assert "high traffic" in exc.value.message


class TestEditing:
    def test_update_participant(self, store):
        row = store.select(R.PARTICIPANTS)[0]
        participant = R.Participant.from_row(row)
        participant.name = "Renamed"
        participant.register_number = "wyd99me001"
        participant.semester = 6
        P.update_participant(store, participant)
        saved = store.select(R.PARTICIPANTS, eq={"id": participant.id})[0]
        assert saved["name"] == "Renamed"
        assert saved["register_number"] == "WYD99ME001"
        assert saved["semester"] == 6
        assert saved["chest_number"] == row["chest_number"]

    def test_delete_participant(self, store):
        pid = store.select(R.PARTICIPANTS)[0]["id"]
        P.delete_participant(store, pid)
        assert not store.select(R.PARTICIPANTS, eq={"id": pid})
