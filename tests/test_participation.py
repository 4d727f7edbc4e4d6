"""Participation requests: listing, filtering, approve/reject."""

import pytest

from data import participation as PR
from data import records as R
from data.connection import RecordNotFound, StoreError


def _first_request(store, event_id="ev-male-0"):
    return store.select(R.REQUESTS, eq={"event_id": event_id, "status": "pending"})[0]


class TestListing:
    def test_pending_individual_requests_only(self, store):
        df = PR.list_pending_requests(store)
        assert len(df) == 20
        assert set(df["event_type"]) == {"individual"}
        assert list(df.columns) == PR.REQUEST_COLUMNS
        assert df["participant_name"].notna().all()

    def test_empty(self, empty_store):
        df = PR.list_pending_requests(empty_store)
        assert df.empty
        assert PR.gender_counts(df) == {"male": 0, "female": 0}
        assert PR.filter_requests(df, "male").empty

    def test_request_events_exclude_groups(self, store):
        events = PR.request_events(store)
        assert len(events) == 10
        assert all(e.type == "individual" for e in events)
        assert [e.name for e in events] == sorted(e.name for e in events)

    def test_filter_and_counts(self, store):
        df = PR.list_pending_requests(store)
        assert PR.gender_counts(df) == {"male": 10, "female": 10}
        assert PR.gender_counts(df, "ev-male-1") == {"male": 2, "female": 0}
        scoped = PR.filter_requests(df, "male", "ev-male-1")
        assert len(scoped) == 2
        assert set(scoped["event_id"]) == {"ev-male-1"}
        assert PR.filter_requests(df, "female", "ev-male-1").empty


class TestDecisions:
    def test_approve_adds_to_roster(self, store):
        req = _first_request(store)
        assert PR.approve_request(store, req["id"]) is True
        event = store.select(R.EVENTS, eq={"id": "ev-male-0"})[0]
        assert req["participant_id"] in event["participants"]
        assert len(event["participants"]) == 7
        assert store.select(R.REQUESTS, eq={"id": req["id"]})[0]["status"] == "approved"

    def test_approve_when_already_entered(self, store):
        req = _first_request(store)
        event = store.select(R.EVENTS, eq={"id": "ev-male-0"})[0]
        store.update(R.EVENTS, {"participants": event["participants"] + [req["participant_id"]]}, eq={"id": "ev-male-0"})
        assert PR.approve_request(store, req["id"]) is False
        event = store.select(R.EVENTS, eq={"id": "ev-male-0"})[0]
        assert event["participants"].count(req["participant_id"]) == 1

    def test_decided_requests_cannot_change(self, store):
        req = _first_request(store)
        PR.reject_request(store, req["id"])
        assert store.select(R.REQUESTS, eq={"id": req["id"]})[0]["status"] == "rejected"
        with pytest.raises(StoreError):
            PR.approve_request(store, req["id"])

    def test_reject_leaves_roster(self, store):
        req = _first_request(store)
        PR.reject_request(store, req["id"])
        event = store.select(R.EVENTS, eq={"id": "ev-male-0"})[0]
        assert req["participant_id"] not in event["participants"]

    def test_approve_for_deleted_participant(self, store):
        req = _first_request(store)
        store.delete(R.PARTICIPANTS, eq={"id": req["participant_id"]})
        with pytest.raises(RecordNotFound):
            PR.approve_request(store, req["id"])
        event = store.select(R.EVENTS, eq={"id": "ev-male-0"})[0]
        assert req["participant_id"] not in event["participants"]
        assert store.select(R.REQUESTS, eq={"id": req["id"]})[0]["status"] == "pending"

    def test_approve_for_deleted_event(self, store):
        req = _first_request(store)
        store.delete(R.EVENTS, eq={"id": "ev-male-0"})
        with pytest.raises(RecordNotFound):
            PR.approve_request(store, req["id"])
        assert store.select(R.REQUESTS, eq={"id": req["id"]})[0]["status"] == "pending"
