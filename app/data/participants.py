from __future__ import annotations

import uuid

import pandas as pd

from data import records as R
from data.connection import DuplicateRecordError, StoreError
from logs import get_logger

logger = get_logger("participants")

FIRST_CHEST_NUMBER = 100
MAX_ATTEMPTS = 3

PARTICIPANT_COLUMNS = [
    "id", "chest_number", "register_number", "name", "department_id", "department",
    "batch_id", "semester", "semester_group", "gender", "total_points", "individual_wins",
]


def list_participants(store) -> pd.DataFrame:
    rows = store.select(R.PARTICIPANTS)
    depts = {d["id"]: d.get("name") for d in store.select(R.DEPARTMENTS)}
    df = pd.DataFrame([R.Participant.from_row(r).to_row() for r in rows])
    if df.empty:
        return pd.DataFrame(columns=PARTICIPANT_COLUMNS)
    df["department"] = df["department_id"].map(lambda d: depts.get(d) if d else None).fillna("Unknown")
    df["semester_group"] = df["semester"].map(R.semester_group)
    return df[PARTICIPANT_COLUMNS]


def sort_participants(df: pd.DataFrame, key: str, ascending: bool = True) -> pd.DataFrame:
    if key not in df.columns:
        return df
    if key == "chest_number":
        return (
            df.assign(_chest=pd.to_numeric(df[key], errors="coerce"))
            .sort_values("_chest", ascending=ascending, na_position="last", kind="stable")
            .drop(columns="_chest")
        )
    return df.sort_values(key, ascending=ascending, kind="stable")


def next_chest_number(store) -> str:
    highest = FIRST_CHEST_NUMBER
    for row in store.select(R.PARTICIPANTS, columns="chest_number"):
        try:
            highest = max(highest, int(row.get("chest_number")))
        except (TypeError, ValueError):
            continue
    return str(highest + 1)


def register_participant(store, data: R.RegistrationData) -> R.Participant:
    """
    Register a participant with the next free chest number.

    Chest numbers are allocated client-side (highest + 1) and re-checked before
    insert; a collision retries up to MAX_ATTEMPTS times. A duplicate register
    number fails straight away.
    """
    if not (data.name or "").strip() or not (data.register_number or "").strip() or not data.department_id:
        raise R.ValidationError("Missing required fields: Name, Register Number, or Department.")

    reg_num = data.register_number.strip().upper()
    last_error: Exception | None = None

    for attempt in range(1, MAX_ATTEMPTS + 1):
        chest = next_chest_number(store)
        if store.select(R.PARTICIPANTS, eq={"chest_number": chest}, columns="id"):
            logger.info("chest_number_collision", chest_number=chest, attempt=attempt)
            continue

        participant = R.Participant(
            id=str(uuid.uuid4()),
            register_number=reg_num,
            name=data.name.strip(),
            department_id=data.department_id,
            batch_id=data.batch_id or None,
            semester=int(data.semester),
            gender=data.gender,
            chest_number=chest,
        )
        try:
            store.insert(R.PARTICIPANTS, [participant.to_row()])
        except DuplicateRecordError as e:
            if "register_number" in (e.message or ""):
                raise DuplicateRecordError(
                    f"Participant with Register Number {reg_num} already exists.", code=e.code
                ) from e
            last_error = e
            logger.info("participant_insert_retry", attempt=attempt, error=e.message)
            continue
        logger.info("participant_registered", register_number=reg_num, chest_number=chest)
        return participant

    logger.error("participant_registration_exhausted", register_number=reg_num, error=str(last_error))
    raise StoreError("Failed to register participant due to high traffic. Please try again.")


def update_participant(store, participant: R.Participant) -> None:
    R.require(name=participant.name, register_number=participant.register_number,
              department_id=participant.department_id)
    store.update(
        R.PARTICIPANTS,
        {
            "name": participant.name.strip(),
            "register_number": participant.register_number.strip().upper(),
            "department_id": participant.department_id,
            "batch_id": participant.batch_id or None,
            "semester": int(participant.semester),
            "gender": participant.gender,
        },
        eq={"id": participant.id},
    )


def delete_participant(store, participant_id: str) -> None:
    store.delete(R.PARTICIPANTS, eq={"id": participant_id})
