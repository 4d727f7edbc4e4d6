from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from data import records as R
from data.connection import RecordNotFound
from logs import get_logger

logger = get_logger("programs")


def list_programs(store) -> list[R.Program]:
    """Newest first."""
    return [R.Program.from_row(r) for r in store.select(R.PROGRAMS, order="created_at", desc=True)]


def default_program_id(programs: list[R.Program]) -> Optional[str]:
    """The active program, else the newest one."""
    if not programs:
        return None
    active = next((p for p in programs if p.status == "active"), None)
    return (active or programs[0]).id


def _validate(name: str, category: str) -> None:
    if not (name or "").strip():
        raise R.ValidationError("Program name is required.")
    if category not in R.PROGRAM_CATEGORIES:
        raise R.ValidationError(f"Unknown program category: {category}")


def create_program(store, name: str, category: str = "department") -> R.Program:
    _validate(name, category)
    program = R.Program(
        id=str(uuid.uuid4()),
        name=name.strip(),
        category=category,
        status="inactive",
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    store.insert(R.PROGRAMS, [program.to_row()])
    logger.info("program_created", program_id=program.id, name=program.name)
    return program


def update_program(store, program_id: str, name: str, category: str) -> None:
    _validate(name, category)
    store.update(R.PROGRAMS, {"name": name.strip(), "category": category}, eq={"id": program_id})


def activate_program(store, program_id: str) -> None:
    """Deactivate whatever is active, then activate `program_id`."""
    if not store.select(R.PROGRAMS, eq={"id": program_id}, columns="id"):
        raise RecordNotFound(f"Program {program_id} not found")
    store.update(R.PROGRAMS, {"status": "inactive"}, eq={"status": "active"})
    store.update(R.PROGRAMS, {"status": "active"}, eq={"id": program_id})
    logger.info("program_activated", program_id=program_id)


def set_program_status(store, program_id: str, status: str) -> None:
    if status not in R.PROGRAM_STATUSES:
        raise R.ValidationError(f"Unknown program status: {status}")
    if status == "active":
        activate_program(store, program_id)
        return
    store.update(R.PROGRAMS, {"status": status}, eq={"id": program_id})


def delete_program(store, program_id: str) -> int:
    """
    Delete a program and everything hanging off it.

    Sequential deletes (teams, requests, events, program); a failure part-way
    leaves the earlier deletes in place. Returns the number of events removed.
    """
    event_ids = [e["id"] for e in store.select(R.EVENTS, eq={"program_id": program_id}, columns="id")]
    if event_ids:
        store.delete(R.TEAMS, in_=("event_id", event_ids))
        store.delete(R.REQUESTS, in_=("event_id", event_ids))
        store.delete(R.EVENTS, eq={"program_id": program_id})
    store.delete(R.PROGRAMS, eq={"id": program_id})
    logger.info("program_deleted", program_id=program_id, events=len(event_ids))
    return len(event_ids)
