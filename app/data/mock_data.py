from __future__ import annotations

import copy
import random
import uuid
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Iterable, Optional

from faker import Faker

from data import records as R
from data.connection import DuplicateRecordError, StoreAuthError, StoreError


fake = Faker("en_IN")

# Columns with a unique constraint in the live schema
UNIQUE_COLUMNS = {
    R.PARTICIPANTS: ("register_number", "chest_number"),
    R.STAFF: ("email",),
}

PRIMARY_KEYS = {
    R.STAFF: "uid",
    R.SETTINGS: "id",
    R.SITE_SETTINGS: "key",
}

DEPARTMENTS = [
    ("dept-cse", "Computer Science", "CSE"),
    ("dept-ece", "Electronics & Comm", "ECE"),
    ("dept-mech", "Mechanical Eng", "MECH"),
    ("dept-civil", "Civil Eng", "CIVIL"),
]
BATCH_NAMES = ["2022-2026", "2023-2027", "2024-2028", "2025-2029"]
INDIVIDUAL_EVENTS = ["100m Sprint", "400m Race", "Long Jump", "Shot Put", "High Jump"]
GROUP_EVENTS = ["4x100m Relay", "Tug of War"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _matches(row: dict, eq: Optional[dict], in_: Optional[tuple[str, Iterable[Any]]]) -> bool:
    for col, value in (eq or {}).items():
        if row.get(col) != value:
            return False
    if in_ is not None:
        col, values = in_
        if row.get(col) not in set(values):
            return False
    return True


class MemoryStore:
    """
    In-process stand-in for the Supabase project.

    Rows are deep-copied on the way in and out so callers can't mutate stored
    state by accident.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict]] = {}
        self.files: dict[str, bytes] = {}
        self.accounts: dict[str, tuple[str, str]] = {}  # email -> (uid, password)

    @property
    def name(self) -> str:
        return "mock"

    def _rows(self, table: str) -> list[dict]:
        return self.tables.setdefault(table, [])

    def _check_unique(self, table: str, row: dict, ignore: Optional[dict] = None) -> None:
        for col in UNIQUE_COLUMNS.get(table, ()):
            value = row.get(col)
            if value in (None, ""):
                continue
            for other in self._rows(table):
                if other is not ignore and other.get(col) == value:
                    raise DuplicateRecordError(
                        f'duplicate key value violates unique constraint "{table}_{col}_key"',
                        code="23505",
                    )

    # --- tables ---

    def select(
        self,
        table: str,
        eq: Optional[dict] = None,
        in_: Optional[tuple[str, Iterable[Any]]] = None,
        order: Optional[str] = None,
        desc: bool = False,
        columns: str = "*",
    ) -> list[dict]:
        rows = [copy.deepcopy(r) for r in self._rows(table) if _matches(r, eq, in_)]
        if order:
            rows.sort(key=lambda r: (r.get(order) is None, r.get(order) or ""), reverse=desc)
        if columns != "*":
            wanted = [c.strip() for c in columns.split(",")]
            rows = [{c: r.get(c) for c in wanted} for r in rows]
        return rows

    def insert(self, table: str, rows: list[dict]) -> list[dict]:
        out = []
        for row in rows:
            row = copy.deepcopy(row)
            pk = PRIMARY_KEYS.get(table, "id")
            row.setdefault(pk, str(uuid.uuid4()))
            if any(r.get(pk) == row[pk] for r in self._rows(table)):
                raise DuplicateRecordError(f'duplicate key value violates unique constraint "{table}_pkey"', code="23505")
            self._check_unique(table, row)
            if table in (R.PROGRAMS, R.REQUESTS):
                row.setdefault("created_at", _now())
            self._rows(table).append(row)
            out.append(copy.deepcopy(row))
        return out

    def update(self, table: str, values: dict, eq: Optional[dict] = None, in_=None) -> list[dict]:
        if not eq and in_ is None:
            raise StoreError(f"Refusing unfiltered update on {table}")
        out = []
        for row in self._rows(table):
            if _matches(row, eq, in_):
                self._check_unique(table, {**row, **values}, ignore=row)
                row.update(copy.deepcopy(values))
                out.append(copy.deepcopy(row))
        return out

    def upsert(self, table: str, rows: list[dict], on_conflict: Optional[str] = None) -> list[dict]:
        key = on_conflict or PRIMARY_KEYS.get(table, "id")
        out = []
        for row in rows:
            existing = next((r for r in self._rows(table) if r.get(key) == row.get(key)), None)
            if existing is None:
                out.extend(self.insert(table, [row]))
            else:
                existing.update(copy.deepcopy(row))
                out.append(copy.deepcopy(existing))
        return out

    def delete(self, table: str, eq: Optional[dict] = None, in_=None) -> None:
        if not eq and in_ is None:
            raise StoreError(f"Refusing unfiltered delete on {table}")
        self.tables[table] = [r for r in self._rows(table) if not _matches(r, eq, in_)]

    # --- storage ---

    def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        key = f"{bucket}/{path}"
        if key in self.files:
            raise StoreError(f"The resource already exists: {key}", code="409")
        self.files[key] = bytes(content)
        return f"memory://{key}"

    # --- auth ---

    def sign_in(self, email: str, password: str) -> str:
        account = self.accounts.get(email.strip().lower())
        if account is None or account[1] != password:
            raise StoreAuthError("Sign-in failed: invalid credentials")
        return account[0]

    def sign_out(self) -> None:
        return None

    def create_auth_user(self, email: str, password: str) -> str:
        email = email.strip().lower()
        if email in self.accounts:
            raise DuplicateRecordError("Email is already in use.")
        uid = str(uuid.uuid4())
        self.accounts[email] = (uid, password)
        return uid

    def set_auth_password(self, uid: str, password: str) -> None:
        for email, (account_uid, _) in self.accounts.items():
            if account_uid == uid:
                self.accounts[email] = (uid, password)
                return
        raise StoreError(f"No auth account for {uid}")

    def delete_auth_user(self, uid: str) -> None:
        self.accounts = {e: a for e, a in self.accounts.items() if a[0] != uid}


def _add_account(store: MemoryStore, email: str, password: str, name: str, role: str, staff_type: Optional[str] = None) -> str:
    uid = store.create_auth_user(email, password)
    store.insert(R.STAFF, [{
        "uid": uid,
        "email": email,
        "name": name,
        "role": role,
        "staff_type": staff_type,
        "phone": fake.msisdn()[:10],
        "assigned_event_id": None,
    }])
    return uid


def _ranked_round(entrants: list[str], rnd: random.Random, completed: bool) -> dict:
    order = entrants[:]
    rnd.shuffle(order)
    results = []
    for i, pid in enumerate(order, start=1):
        results.append({
            "participant_id": pid,
            "score": round(rnd.uniform(10.5, 60.0), 2),
            "qualified": i <= 3,
            "rank": i if completed and i <= 3 else None,
            "set": 1,
        })
    return {
        "id": "r1",
        "name": "Final",
        "sequence": 1,
        "status": "completed" if completed else "ongoing",
        "participants": results,
    }


def seed_demo_store(store: MemoryStore, n_participants: int = 48) -> MemoryStore:
    """Populate a store with a small, deterministic meet."""
    Faker.seed(7)
    rnd = random.Random(7)

    _add_account(store, "admin@sports.com", "admin123", "System Admin", "admin")
    _add_account(store, "staff@sports.com", "staff123", "Staff Member", "staff", "ontrack")
    _add_account(store, "desk@sports.com", "desk123", fake.name(), "staff", "offtrack")

    for dept_id, name, code in DEPARTMENTS:
        store.insert(R.DEPARTMENTS, [R.Department(id=dept_id, name=name, code=code).to_row()])
        for batch_name in BATCH_NAMES[:2]:
            store.insert(R.BATCHES, [{"id": f"{dept_id}-{batch_name[:4]}", "name": batch_name, "department_id": dept_id}])

    participants = []
    for i in range(n_participants):
        dept_id, _, code = DEPARTMENTS[i % len(DEPARTMENTS)]
        gender = R.GENDERS[i % 2]
        first = fake.first_name_male() if gender == "male" else fake.first_name_female()
        semester = rnd.randint(1, 8)
        year = 25 - (semester - 1) // 2
        row = {
            "id": str(uuid.UUID(int=rnd.getrandbits(128))),
            "register_number": f"WYD{year:02d}{code[:2]}{i + 1:03d}",
            "name": f"{first} {fake.last_name()}",
            "department_id": dept_id,
            "batch_id": f"{dept_id}-{BATCH_NAMES[0][:4]}",
            "semester": semester,
            "gender": gender,
            "chest_number": str(101 + i),
            "total_points": 0,
            "individual_wins": 0,
        }
        participants.append(row)
    store.insert(R.PARTICIPANTS, participants)

    created = datetime.now(timezone.utc) - timedelta(days=30)
    store.insert(R.PROGRAMS, [
        {"id": "prog-2025", "name": "Sports Meet 2025", "category": "department", "status": "ended",
         "created_at": created.isoformat()},
        {"id": "prog-2026", "name": "Sports Meet 2026", "category": "department", "status": "active",
         "created_at": (created + timedelta(days=20)).isoformat()},
    ])

    for gender in R.GENDERS:
        pool = [p["id"] for p in participants if p["gender"] == gender]
        for j, event_name in enumerate(INDIVIDUAL_EVENTS):
            entrants = rnd.sample(pool, 6)
            completed = j < 3
            store.insert(R.EVENTS, [{
                "id": f"ev-{gender}-{j}",
                "program_id": "prog-2026",
                "name": event_name,
                "type": "individual",
                "gender": gender,
                "status": "completed" if completed else "ongoing" if j == 3 else "upcoming",
                "rounds": [_ranked_round(entrants, rnd, completed)],
                "current_round_index": 0,
                "participants": entrants,
                "team_size": None,
                "points_1st": 5,
                "points_2nd": 3,
                "points_3rd": 1,
                "assigned_staff_id": None,
                "winner_ids": [],
            }])
            # a few open requests per event
            outsiders = [pid for pid in pool if pid not in entrants]
            for pid in rnd.sample(outsiders, 2):
                store.insert(R.REQUESTS, [{"participant_id": pid, "event_id": f"ev-{gender}-{j}", "status": "pending"}])

    for k, event_name in enumerate(GROUP_EVENTS):
        event_id = f"ev-group-{k}"
        team_ids = []
        for dept_id, _, code in DEPARTMENTS:
            members = [p["id"] for p in participants if p["department_id"] == dept_id][:4]
            team_id = f"team-{k}-{code.lower()}"
            store.insert(R.TEAMS, [{"id": team_id, "name": f"{code} {event_name}", "event_id": event_id,
                                    "department_id": dept_id, "member_ids": members}])
            team_ids.append(team_id)
        store.insert(R.EVENTS, [{
            "id": event_id,
            "program_id": "prog-2026",
            "name": event_name,
            "type": "group",
            "gender": "mixed",
            "status": "completed" if k == 0 else "upcoming",
            "rounds": [_ranked_round(team_ids, rnd, k == 0)],
            "current_round_index": 0,
            "participants": team_ids,
            "team_size": 4,
            "points_1st": 10,
            "points_2nd": 6,
            "points_3rd": 4,
            "assigned_staff_id": None,
            "winner_ids": [],
        }])
        store.insert(R.REQUESTS, [{"participant_id": participants[-1]["id"], "event_id": event_id, "status": "pending"}])

    store.upsert(R.SETTINGS, [R.SystemSettings().to_row()])
    for key in R.SiteSettings.keys():
        store.upsert(R.SITE_SETTINGS, [{"key": key, "value": True, "updated_at": _now()}])
    return store


@lru_cache(maxsize=1)
def get_demo_store() -> MemoryStore:
    return seed_demo_store(MemoryStore())
