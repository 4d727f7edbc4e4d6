from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from data import records as R
from data.connection import RecordNotFound, StoreError
from data.participants import sort_participants
from logs import get_logger

logger = get_logger("events")


@dataclass
class EventForm:
    """Values behind the create/edit event dialogs."""
    name: str
    type: str = "individual"
    gender: str = "male"
    team_size: int = R.DEFAULT_TEAM_SIZE
    points_1st: int = 5
    points_2nd: int = 3
    points_3rd: int = 1

    def with_type(self, event_type: str) -> "EventForm":
        """Switching type resets the points to that type's defaults."""
        p1, p2, p3 = default_points(event_type)
        return EventForm(self.name, event_type, self.gender, self.team_size, p1, p2, p3)

    def payload(self) -> dict:
        self.validate()
        data = {
            "name": self.name.strip(),
            "type": self.type,
            "gender": self.gender,
            "points_1st": int(self.points_1st),
            "points_2nd": int(self.points_2nd),
            "points_3rd": int(self.points_3rd),
        }
        if self.type == "group":
            data["team_size"] = int(self.team_size)
        return data

    def validate(self) -> None:
        R.require(name=self.name)
        if self.type not in R.EVENT_TYPES:
            raise R.ValidationError(f"Unknown event type: {self.type}")
        if self.gender not in R.EVENT_GENDERS:
            raise R.ValidationError(f"Unknown event category: {self.gender}")
        if self.type == "group" and int(self.team_size) < 2:
            raise R.ValidationError("Team size must be at least 2.")
        if min(int(self.points_1st), int(self.points_2nd), int(self.points_3rd)) < 0:
            raise R.ValidationError("Points can't be negative.")


def default_points(event_type: str) -> tuple[int, int, int]:
    return R.DEFAULT_POINTS.get(event_type, R.DEFAULT_POINTS["individual"])


def new_event_form() -> EventForm:
    return EventForm(name="")


def edit_form_defaults(event: R.Event) -> EventForm:
    """Prefill the edit dialog; unset points fall back to the type defaults."""
    p1, p2, p3 = default_points(event.type)
    return EventForm(
        name=event.name,
        type=event.type,
        gender=event.gender,
        team_size=event.team_size or R.DEFAULT_TEAM_SIZE,
        points_1st=p1 if event.points_1st is None else event.points_1st,
        points_2nd=p2 if event.points_2nd is None else event.points_2nd,
        points_3rd=p3 if event.points_3rd is None else event.points_3rd,
    )


def list_events(store, program_id: Optional[str] = None) -> list[R.Event]:
    eq = {"program_id": program_id} if program_id else None
    return [R.Event.from_row(r) for r in store.select(R.EVENTS, eq=eq, order="name")]


def get_event(store, event_id: str) -> Optional[R.Event]:
    rows = store.select(R.EVENTS, eq={"id": event_id})
    return R.Event.from_row(rows[0]) if rows else None


def events_by_gender(events: list[R.Event], gender: str) -> list[R.Event]:
    return [e for e in events if e.gender == gender]


def current_round_name(event: R.Event) -> str:
    if 0 <= event.current_round_index < len(event.rounds):
        return event.rounds[event.current_round_index].name or "N/A"
    return "N/A"


def create_event(store, program_id: str, form: EventForm) -> str:
    R.require(program_id=program_id)
    row = {
        "id": str(uuid.uuid4()),
        "program_id": program_id,
        **form.payload(),
        "status": "upcoming",
        "current_round_index": 0,
        "participants": [],
        "rounds": [
            {"id": "r1", "name": "Round 1", "sequence": 1, "status": "pending", "participants": []},
        ],
    }
    store.insert(R.EVENTS, [row])
    logger.info("event_created", event_id=row["id"], program_id=program_id, name=row["name"])
    return row["id"]


def update_event(store, event_id: str, form: EventForm) -> None:
    store.update(R.EVENTS, form.payload(), eq={"id": event_id})
    logger.info("event_updated", event_id=event_id)


def delete_event(store, event_id: str) -> None:
    store.delete(R.TEAMS, eq={"event_id": event_id})
    store.delete(R.REQUESTS, eq={"event_id": event_id})
    store.delete(R.EVENTS, eq={"id": event_id})
    logger.info("event_deleted", event_id=event_id)


# --- event details: roster and rounds ---

ROSTER_COLUMNS = ["id", "chest_number", "register_number", "name", "department", "semester_group", "members"]


def _event_row(store, event_id: str) -> dict:
    rows = store.select(R.EVENTS, eq={"id": event_id})
    if not rows:
        raise RecordNotFound(f"Event {event_id} not found")
    return rows[0]


def _open_event(store, event_id: str) -> dict:
    row = _event_row(store, event_id)
    if row.get("status") == "completed":
        raise StoreError(f"{row.get('name') or 'Event'} is already closed")
    return row


def find_participant(store, term: str) -> R.Participant:
    """Exact match on chest number or register number."""
    term = (term or "").strip().upper()
    if not term:
        raise R.ValidationError("Enter a chest number or register number.")
    rows = store.select(R.PARTICIPANTS, eq={"chest_number": term}) or \
        store.select(R.PARTICIPANTS, eq={"register_number": term})
    if not rows:
        raise RecordNotFound(f"No participant with chest or register number {term}")
    return R.Participant.from_row(rows[0])


def _check_gender(event: R.Event, participant: R.Participant) -> None:
    if event.gender != "mixed" and participant.gender != event.gender:
        raise R.ValidationError(f"{participant.name} can't enter a {R.GENDER_LABELS[event.gender]} event.")


def event_roster(store, event: R.Event) -> pd.DataFrame:
    """Entrants by chest number; for group events, one row per team with its members."""
    if not event.participants:
        return pd.DataFrame(columns=ROSTER_COLUMNS)
    depts = {d["id"]: d.get("name") for d in store.select(R.DEPARTMENTS)}

    if event.type == "group":
        teams = [R.Team.from_row(t) for t in store.select(R.TEAMS, in_=("id", event.participants))]
        member_ids = sorted({m for t in teams for m in t.member_ids})
        people = {
            p["id"]: R.Participant.from_row(p)
            for p in (store.select(R.PARTICIPANTS, in_=("id", member_ids)) if member_ids else [])
        }
        rows = []
        for team in teams:
            members = sorted((people[m] for m in team.member_ids if m in people),
                             key=lambda p: int(p.chest_number) if p.chest_number.isdigit() else 0)
            rows.append({
                "id": team.id,
                "chest_number": None,
                "register_number": None,
                "name": team.name,
                "department": depts.get(team.department_id) or "Unknown",
                "semester_group": None,
                "members": ", ".join(f"{p.chest_number} {p.name}" for p in members),
            })
        return pd.DataFrame(rows, columns=ROSTER_COLUMNS)

    people = [R.Participant.from_row(p) for p in store.select(R.PARTICIPANTS, in_=("id", event.participants))]
    df = pd.DataFrame([{
        "id": p.id,
        "chest_number": p.chest_number,
        "register_number": p.register_number,
        "name": p.name,
        "department": depts.get(p.department_id) or "Unknown",
        "semester_group": R.semester_group(p.semester),
        "members": None,
    } for p in people], columns=ROSTER_COLUMNS)
    return sort_participants(df, "chest_number").reset_index(drop=True)


def add_individual(store, event_id: str, term: str) -> R.Participant:
    """Enter a participant found by chest or register number."""
    row = _open_event(store, event_id)
    event = R.Event.from_row(row)
    if event.type == "group":
        raise R.ValidationError("Group events take teams, not individuals.")
    participant = find_participant(store, term)
    _check_gender(event, participant)
    if participant.id in event.participants:
        raise R.ValidationError(f"{participant.name} is already entered.")
    store.update(R.EVENTS, {"participants": event.participants + [participant.id]}, eq={"id": event_id})
    logger.info("entrant_added", event_id=event_id, participant_id=participant.id)
    return participant


def register_team(store, event_id: str, department_id: str, member_terms: list[str]) -> R.Team:
    """
    Register a department team: every member is found, distinct, of the
    event's category and from that department. The team is named after the
    department.
    """
    row = _open_event(store, event_id)
    event = R.Event.from_row(row)
    if event.type != "group":
        raise R.ValidationError("Only group events take teams.")
    R.require(department_id=department_id)
    dept_rows = store.select(R.DEPARTMENTS, eq={"id": department_id})
    if not dept_rows:
        raise RecordNotFound(f"Department {department_id} not found")
    department = R.Department.from_row(dept_rows[0])

    terms = [(t or "").strip().upper() for t in member_terms]
    size = event.team_size or R.DEFAULT_TEAM_SIZE
    if len(terms) != size or not all(terms):
        raise R.ValidationError(f"A team needs exactly {size} members.")
    if len(set(terms)) != len(terms):
        raise R.ValidationError("Duplicate members detected.")

    members = []
    for term in terms:
        participant = find_participant(store, term)
        _check_gender(event, participant)
        if participant.department_id != department_id:
            raise R.ValidationError(f"{participant.name} is not in {department.name}.")
        members.append(participant)
    if len({m.id for m in members}) != len(members):
        raise R.ValidationError("Duplicate members detected.")

    team = R.Team(
        id=str(uuid.uuid4()),
        name=department.name,
        event_id=event_id,
        department_id=department_id,
        member_ids=[m.id for m in members],
    )
    store.insert(R.TEAMS, [{
        "id": team.id,
        "name": team.name,
        "event_id": team.event_id,
        "department_id": team.department_id,
        "member_ids": team.member_ids,
    }])
    store.update(R.EVENTS, {"participants": event.participants + [team.id]}, eq={"id": event_id})
    logger.info("team_registered", event_id=event_id, team_id=team.id, department_id=department_id)
    return team


def remove_entry(store, event_id: str, entry_id: str) -> None:
    """Take a participant or team off the roster; a removed team's row goes too."""
    event = R.Event.from_row(_event_row(store, event_id))
    store.update(R.EVENTS, {"participants": [p for p in event.participants if p != entry_id]}, eq={"id": event_id})
    if event.type == "group":
        store.delete(R.TEAMS, eq={"id": entry_id, "event_id": event_id})
    logger.info("entrant_removed", event_id=event_id, entry_id=entry_id)


def _save_rounds(store, event_id: str, rounds: list[dict], **values) -> None:
    store.update(R.EVENTS, {"rounds": rounds, **values}, eq={"id": event_id})


def next_round_name(event: R.Event, final: bool = False) -> str:
    return "Final" if final else f"Round {event.current_round_index + 2}"


def advance_round(store, event_id: str, final: bool = False) -> str:
    """Complete the current round and start the next one. Returns its name."""
    row = _open_event(store, event_id)
    event = R.Event.from_row(row)
    rounds = list(row.get("rounds") or [])
    if 0 <= event.current_round_index < len(rounds):
        rounds[event.current_round_index]["status"] = "completed"
    name = next_round_name(event, final)
    sequence = len(rounds) + 1
    rounds.append({"id": f"r{sequence}", "name": name, "sequence": sequence, "status": "pending", "participants": []})
    _save_rounds(store, event_id, rounds, current_round_index=len(rounds) - 1)
    logger.info("round_advanced", event_id=event_id, round=name)
    return name


def rename_round(store, event_id: str, name: str) -> None:
    R.require(name=name)
    row = _open_event(store, event_id)
    index = R.Event.from_row(row).current_round_index
    rounds = list(row.get("rounds") or [])
    if not 0 <= index < len(rounds):
        raise RecordNotFound("Event has no current round")
    rounds[index]["name"] = name.strip()
    _save_rounds(store, event_id, rounds)
    logger.info("round_renamed", event_id=event_id, round=name.strip())


def make_final(store, event_id: str) -> None:
    rename_round(store, event_id, "Final")


def close_event(store, event_id: str) -> None:
    """Complete the current round and mark the event completed."""
    row = _open_event(store, event_id)
    index = R.Event.from_row(row).current_round_index
    rounds = list(row.get("rounds") or [])
    if 0 <= index < len(rounds):
        rounds[index]["status"] = "completed"
    _save_rounds(store, event_id, rounds, status="completed")
    logger.info("event_closed", event_id=event_id)
