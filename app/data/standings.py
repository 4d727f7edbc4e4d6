from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from data import records as R
from data.connection import RecordNotFound

MEDALS = {1: "gold", 2: "silver", 3: "bronze"}
STAT_COLUMNS = ["id", "name", "points", "gold", "silver", "bronze"]


@dataclass
class Standings:
    departments: pd.DataFrame
    participants: pd.DataFrame


def compute_standings(
    departments: list[R.Department],
    participants: list[R.Participant],
    events: list[R.Event],
) -> Standings:
    """
    Points and medals from ranked round results.

    Rank 1/2/3 earns the event's configured points (default 5/3/1) for the
    participant and their department. Results for ids that aren't participants
    (team entries) are ignored.
    """
    dept_stats = {
        d.id: {"id": d.id, "name": d.name, "code": d.code, "points": 0, "gold": 0, "silver": 0, "bronze": 0}
        for d in departments
    }
    part_stats = {
        p.id: {"id": p.id, "name": p.name, "department_id": p.department_id, "chest_number": p.chest_number,
               "gender": p.gender, "points": 0, "gold": 0, "silver": 0, "bronze": 0}
        for p in participants
    }

    for event in events:
        for rnd in event.rounds:
            for result in rnd.participants:
                medal = MEDALS.get(result.rank or 0)
                stat = part_stats.get(result.participant_id)
                if medal is None or stat is None:
                    continue
                points = event.points_for_rank(result.rank)
                stat["points"] += points
                stat[medal] += 1
                dept = dept_stats.get(stat["department_id"])
                if dept is not None:
                    dept["points"] += points
                    dept[medal] += 1

    dept_df = pd.DataFrame(list(dept_stats.values()), columns=STAT_COLUMNS[:2] + ["code"] + STAT_COLUMNS[2:])
    part_df = pd.DataFrame(
        list(part_stats.values()),
        columns=STAT_COLUMNS[:2] + ["department_id", "chest_number", "gender"] + STAT_COLUMNS[2:],
    )
    dept_df = dept_df.sort_values("points", ascending=False, kind="stable").reset_index(drop=True)
    return Standings(departments=dept_df, participants=part_df)


def top_participants(stats: pd.DataFrame, gender: str, limit: int = 10) -> pd.DataFrame:
    scoped = stats[(stats["gender"] == gender) & (stats["points"] > 0)]
    return scoped.sort_values("points", ascending=False, kind="stable").head(limit).reset_index(drop=True)


def load_standings(store) -> Standings:
    return compute_standings(
        [R.Department.from_row(r) for r in store.select(R.DEPARTMENTS, order="name")],
        [R.Participant.from_row(r) for r in store.select(R.PARTICIPANTS)],
        [R.Event.from_row(r) for r in store.select(R.EVENTS)],
    )


@dataclass
class EventEntry:
    event: R.Event
    rank: Optional[int] = None

    @property
    def outcome(self) -> str:
        return {1: "1st", 2: "2nd", 3: "3rd"}.get(self.rank or 0, "participation")


@dataclass
class ParticipantRecord:
    participant: R.Participant
    department: Optional[R.Department]
    entries: list[EventEntry] = field(default_factory=list)


def _podium_rank(event: R.Event, target_id: str) -> Optional[int]:
    if event.status != "completed" or not event.rounds:
        return None
    final = next((r for r in event.rounds if "final" in r.name.lower()), event.rounds[-1])
    for rnd in [final] + [r for r in event.rounds if r is not final]:
        hit = next((res for res in rnd.participants if res.participant_id == target_id), None)
        if hit and hit.rank and 1 <= hit.rank <= 3:
            return hit.rank
    return None


def participant_record(store, register_number: str) -> ParticipantRecord:
    """Everything the public verification page shows for one register number."""
    reg = (register_number or "").strip().upper()
    rows = store.select(R.PARTICIPANTS, eq={"register_number": reg})
    if not reg or not rows:
        raise RecordNotFound("Participant not found")
    participant = R.Participant.from_row(rows[0])

    dept_rows = store.select(R.DEPARTMENTS, eq={"id": participant.department_id}) if participant.department_id else []
    department = R.Department.from_row(dept_rows[0]) if dept_rows else None

    team_ids = {
        t["id"] for t in store.select(R.TEAMS)
        if participant.id in (t.get("member_ids") or [])
    }

    entries = []
    for event in (R.Event.from_row(e) for e in store.select(R.EVENTS)):
        if event.type == "group":
            target = next((tid for tid in event.participants if tid in team_ids), None)
        else:
            target = participant.id if participant.id in event.participants else None
        if target is None:
            continue
        entries.append(EventEntry(event=event, rank=_podium_rank(event, target)))

    entries.sort(key=lambda e: e.rank or 4)
    return ParticipantRecord(participant=participant, department=department, entries=entries)
