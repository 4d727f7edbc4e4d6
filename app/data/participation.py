from __future__ import annotations

import pandas as pd

from data import records as R
from data.connection import RecordNotFound, StoreError
from logs import get_logger

logger = get_logger("participation")

REQUEST_COLUMNS = [
    "id", "participant_id", "event_id", "status", "created_at",
    "register_number", "participant_name", "gender", "department_id",
    "event_name", "event_type", "event_gender",
]


def list_pending_requests(store) -> pd.DataFrame:
    """Pending requests joined with participant and event details; group events are left out."""
    reqs = [R.ParticipationRequest.from_row(r) for r in store.select(R.REQUESTS, eq={"status": "pending"})]
    if not reqs:
        return pd.DataFrame(columns=REQUEST_COLUMNS)

    participant_ids = sorted({r.participant_id for r in reqs})
    event_ids = sorted({r.event_id for r in reqs})
    participants = {p["id"]: R.Participant.from_row(p) for p in store.select(R.PARTICIPANTS, in_=("id", participant_ids))}
    events = {e["id"]: R.Event.from_row(e) for e in store.select(R.EVENTS, in_=("id", event_ids))}

    rows = []
    for r in reqs:
        p = participants.get(r.participant_id)
        e = events.get(r.event_id)
        if e is not None and e.type == "group":
            continue
        rows.append({
            "id": r.id,
            "participant_id": r.participant_id,
            "event_id": r.event_id,
            "status": r.status,
            "created_at": r.created_at,
            "register_number": p.register_number if p else None,
            "participant_name": p.name if p else "Unknown",
            "gender": p.gender if p else None,
            "department_id": p.department_id if p else None,
            "event_name": e.name if e else "Unknown",
            "event_type": e.type if e else None,
            "event_gender": e.gender if e else None,
        })
    df = pd.DataFrame(rows, columns=REQUEST_COLUMNS)
    return df.sort_values("created_at", kind="stable", na_position="last").reset_index(drop=True)


def request_events(store) -> list[R.Event]:
    """Individual events, by name, for the request filter."""
    events = [R.Event.from_row(e) for e in store.select(R.EVENTS, order="name")]
    return [e for e in events if e.type != "group"]


def _event_match(df: pd.DataFrame, event_id: str) -> pd.Series:
    if event_id == "all":
        return pd.Series(True, index=df.index)
    return df["event_id"] == event_id


def filter_requests(df: pd.DataFrame, gender: str, event_id: str = "all") -> pd.DataFrame:
    if df.empty:
        return df
    return df[_event_match(df, event_id) & (df["gender"] == gender)]


def gender_counts(df: pd.DataFrame, event_id: str = "all") -> dict[str, int]:
    if df.empty:
        return {g: 0 for g in R.GENDERS}
    scoped = df[_event_match(df, event_id)]
    return {g: int((scoped["gender"] == g).sum()) for g in R.GENDERS}


def _pending(store, request_id: str) -> R.ParticipationRequest:
    rows = store.select(R.REQUESTS, eq={"id": request_id})
    if not rows:
        raise RecordNotFound(f"Request {request_id} not found")
    req = R.ParticipationRequest.from_row(rows[0])
    if req.status != "pending":
        raise StoreError(f"Request is already {req.status}")
    return req


def approve_request(store, request_id: str) -> bool:
    """
    Add the participant to the event roster, then mark the request approved.

    The roster is re-read right before the write; there is no locking, so two
    concurrent approvals for one event can still lose an entry. Returns True
    when the roster changed.
    """
    req = _pending(store, request_id)
    if not store.select(R.PARTICIPANTS, eq={"id": req.participant_id}, columns="id"):
        raise RecordNotFound(f"Participant {req.participant_id} no longer exists")
    rows = store.select(R.EVENTS, eq={"id": req.event_id}, columns="participants")
    if not rows:
        raise RecordNotFound(f"Event {req.event_id} not found")

    roster = list(rows[0].get("participants") or [])
    added = req.participant_id not in roster
    if added:
        store.update(R.EVENTS, {"participants": roster + [req.participant_id]}, eq={"id": req.event_id})
    store.update(R.REQUESTS, {"status": "approved"}, eq={"id": request_id})
    logger.info("request_approved", request_id=request_id, event_id=req.event_id, roster_changed=added)
    return added


def reject_request(store, request_id: str) -> None:
    _pending(store, request_id)
    store.update(R.REQUESTS, {"status": "rejected"}, eq={"id": request_id})
    logger.info("request_rejected", request_id=request_id)
