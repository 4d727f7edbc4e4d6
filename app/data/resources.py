from __future__ import annotations

import uuid

import pandas as pd

from data import records as R
from logs import get_logger

logger = get_logger("resources")


def list_departments(store) -> pd.DataFrame:
    rows = [R.Department.from_row(r).to_row() for r in store.select(R.DEPARTMENTS, order="name")]
    df = pd.DataFrame(rows, columns=["id", "name", "code", "total_points", "medal_count"])
    return df


def list_batches(store) -> pd.DataFrame:
    rows = [R.Batch.from_row(r).to_row() for r in store.select(R.BATCHES, order="name")]
    return pd.DataFrame(rows, columns=["id", "name", "department_id"])


def batches_for_department(batches: pd.DataFrame, department_id: str) -> pd.DataFrame:
    if batches.empty:
        return batches
    return batches[batches["department_id"] == department_id]


def add_department(store, name: str, code: str) -> R.Department:
    R.require(name=name, code=code)
    dept = R.Department(id=str(uuid.uuid4()), name=name.strip(), code=code.strip().upper())
    store.insert(R.DEPARTMENTS, [dept.to_row()])
    logger.info("department_added", code=dept.code)
    return dept


def remove_department(store, department_id: str) -> None:
    # Batches and participants keep their department_id; the UI shows "Unknown".
    store.delete(R.DEPARTMENTS, eq={"id": department_id})
    logger.info("department_removed", department_id=department_id)


def add_batch(store, department_id: str, name: str) -> R.Batch:
    R.require(department_id=department_id, name=name)
    batch = R.Batch(id=str(uuid.uuid4()), name=name.strip(), department_id=department_id)
    store.insert(R.BATCHES, [batch.to_row()])
    return batch


def remove_batch(store, batch_id: str) -> None:
    store.delete(R.BATCHES, eq={"id": batch_id})
